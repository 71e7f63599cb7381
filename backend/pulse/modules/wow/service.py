# pulse/modules/wow/service.py
"""
Sessions Way of Work.

Cycle de vie :
  active  → réponses anonymes via le code public (une par appareil)
  closed  → overall_score et participation_rate figés, résultat enregistré
Seules les sessions clôturées et scorées (≥ 3 réponses) alimentent
les métriques WoW de l'équipe.
"""
import secrets
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Dict, List, Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.core.config import settings
from pulse.engine.metrics.scoring import round_half_up
from pulse.engine.wow.statements import (
    ANGLES,
    LEVELS,
    get_angle_info,
    get_statements,
    is_angle_unlocked,
    is_level_unlocked,
)
from pulse.engine.wow.stats import SessionSummary, compute_team_stats
from pulse.engine.wow.synthesis import compare_syntheses, session_score, synthesize
from pulse.modules.billing.service import resolve_account_config
from pulse.modules.team.repository import TeamRepository
from pulse.modules.team.service import get_owned_team
from pulse.modules.wow.repository import WowRepository
from pulse.modules.wow.schemas import RespondIn, SessionCloseIn, SessionCreateIn
from pulse.shared.enums import SessionStatus, ToolKey, WowAngle, WowLevel
from pulse.shared.models import AdminUser, WowSession

logger = structlog.get_logger(__name__)

wow_repo = WowRepository()
team_repo = TeamRepository()

# Sans 0/O ni 1/I : codes lus à voix haute en réunion
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 6


def generate_session_code() -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def share_url(code: str) -> str:
    return f"{settings.APP_URL}/w/{code}"


def session_level(session: WowSession) -> WowLevel:
    """Sessions antérieures aux niveaux : shu."""
    return WowLevel(session.level or WowLevel.SHU.value)


def participation_rate(response_count: int, expected_team_size: Optional[int]) -> Optional[float]:
    """min(réponses / taille déclarée, 1), arrondi à 0.01. None sans taille déclarée."""
    if not expected_team_size or expected_team_size <= 0:
        return None
    return round_half_up(min(response_count / expected_team_size, 1.0), 2)


class WowService:

    # ── Admin ─────────────────────────────────────────────────

    def list_angles(self, admin: AdminUser) -> List[Dict]:
        max_angles = resolve_account_config(admin).max_angles
        return [
            {
                "id":          a.id,
                "label":       a.label,
                "description": a.description,
                "locked":      not is_angle_unlocked(a.id, max_angles),
            }
            for a in ANGLES
        ]

    def list_levels(self, admin: AdminUser) -> List[Dict]:
        wow_levels = resolve_account_config(admin).wow_levels
        return [
            {
                "id":          lv.id,
                "kanji":       lv.kanji,
                "label":       lv.label,
                "subtitle":    lv.subtitle,
                "description": lv.description,
                "locked":      not is_level_unlocked(lv.id, wow_levels),
            }
            for lv in LEVELS
        ]

    async def create_session(
        self, db: AsyncSession, team_id: int, admin: AdminUser, payload: SessionCreateIn
    ) -> Optional[Dict]:
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return None
        if ToolKey.WOW.value not in (team.tools_enabled or []):
            raise ValueError("TOOL_DISABLED")
        config = resolve_account_config(admin)
        if not is_angle_unlocked(payload.angle, config.max_angles):
            raise PermissionError("ANGLE_REQUIRES_UPGRADE")
        if not is_level_unlocked(payload.level, config.wow_levels):
            raise PermissionError("LEVEL_REQUIRES_UPGRADE")

        code = generate_session_code()
        while await wow_repo.code_exists(db, code):
            code = generate_session_code()

        session = await wow_repo.create_session(db, {
            "team_id":      team.id,
            "session_code": code,
            "angle":        payload.angle.value,
            "level":        payload.level.value,
            "title":        payload.title,
            "status":       SessionStatus.ACTIVE,
            "created_by":   admin.id,
        })
        logger.info(
            "wow_session_created",
            team_id=team.id, session_id=session.id, angle=session.angle, level=session.level,
        )
        return self._session_out(session, 0)

    async def list_sessions(
        self, db: AsyncSession, team_id: int, admin: AdminUser
    ) -> Optional[List[Dict]]:
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return None
        sessions = await wow_repo.list_sessions(db, team.id)
        counts = await wow_repo.response_counts(db, team.id)
        return [self._session_out(s, counts.get(s.id, 0)) for s in sessions]

    async def get_session(self, db: AsyncSession, session_id: int, admin: AdminUser) -> Optional[Dict]:
        session = await self._owned_session(db, session_id, admin)
        if not session:
            return None
        return self._session_out(session, await wow_repo.count_responses(db, session.id))

    async def close_session(
        self, db: AsyncSession, session_id: int, admin: AdminUser, payload: SessionCloseIn
    ) -> Optional[Dict]:
        """
        Pipeline :
        1. Refus si déjà clôturée
        2. Score global (None sous 3 réponses) + taux de participation
        3. Focus / expérience : saisie de l'admin, sinon suggestion de la synthèse
        4. Invalidation du cache métriques de l'équipe
        """
        session = await self._owned_session(db, session_id, admin)
        if not session:
            return None
        if session.status == SessionStatus.CLOSED:
            raise ValueError("SESSION_CLOSED")

        team = await team_repo.get_team(db, session.team_id)
        answers = await wow_repo.get_answers(db, session.id)
        synthesis = synthesize(WowAngle(session.angle), answers, session_level(session))

        closed = await wow_repo.close_session(db, session, {
            "overall_score":      session_score(answers),
            "participation_rate": participation_rate(len(answers), team.expected_team_size),
            "focus_area":         payload.focus_area or (synthesis.focus_area if synthesis else None),
            "experiment":         payload.experiment or (synthesis.suggested_experiment if synthesis else None),
            "experiment_owner":   payload.experiment_owner,
            "followup_date":      payload.followup_date,
            "closed_at":          datetime.now(timezone.utc),
        })
        await team_repo.invalidate_metrics(db, session.team_id)

        logger.info(
            "wow_session_closed",
            session_id=session.id, team_id=session.team_id,
            responses=len(answers), score=closed.overall_score,
        )
        return self._session_out(closed, len(answers))

    async def delete_session(self, db: AsyncSession, session_id: int, admin: AdminUser) -> bool:
        session = await self._owned_session(db, session_id, admin)
        if not session:
            return False
        team_id = session.team_id
        await wow_repo.delete_session(db, session)
        await team_repo.invalidate_metrics(db, team_id)
        logger.info("wow_session_deleted", session_id=session_id, by=admin.id)
        return True

    async def get_synthesis(self, db: AsyncSession, session_id: int, admin: AdminUser) -> Optional[Dict]:
        session = await self._owned_session(db, session_id, admin)
        if not session:
            return None
        result = synthesize(
            WowAngle(session.angle), await wow_repo.get_answers(db, session.id), session_level(session)
        )
        if result is None:
            raise ValueError("NOT_ENOUGH_RESPONSES")
        return asdict(result)

    async def compare_sessions(
        self, db: AsyncSession, first_id: int, second_id: int, admin: AdminUser
    ) -> Optional[Dict]:
        """Les deux sessions sont réordonnées : la plus ancienne sert de référence."""
        first = await self._owned_session(db, first_id, admin)
        second = await self._owned_session(db, second_id, admin)
        if not first or not second:
            return None
        if first.angle != second.angle:
            raise ValueError("ANGLE_MISMATCH")
        if session_level(first) != session_level(second):
            raise ValueError("LEVEL_MISMATCH")
        if first.created_at and second.created_at and first.created_at > second.created_at:
            first, second = second, first

        angle, level = WowAngle(first.angle), session_level(first)
        s1 = synthesize(angle, await wow_repo.get_answers(db, first.id), level)
        s2 = synthesize(angle, await wow_repo.get_answers(db, second.id), level)
        if s1 is None or s2 is None:
            raise ValueError("NOT_ENOUGH_RESPONSES")

        comparison = asdict(compare_syntheses(s1, s2))
        comparison["first_session_id"] = first.id
        comparison["second_session_id"] = second.id
        return comparison

    async def get_team_stats(self, db: AsyncSession, team_id: int, admin: AdminUser) -> Optional[Dict]:
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return None
        sessions = await wow_repo.list_sessions(db, team.id)
        counts = await wow_repo.response_counts(db, team.id)
        stats = compute_team_stats([
            SessionSummary(
                angle=s.angle,
                status=s.status,
                score=s.overall_score,
                response_count=counts.get(s.id, 0),
            )
            for s in sessions
        ])
        return {
            "team_id":                team.id,
            "total_sessions":         stats.total_sessions,
            "active_sessions":        stats.active_sessions,
            "closed_sessions":        stats.closed_sessions,
            "total_responses":        stats.total_responses,
            "average_score":          stats.metrics.average_score,
            "previous_average_score": stats.metrics.previous_average_score,
            "trend":                  stats.metrics.trend,
            "sessions_by_angle":      {k: asdict(v) for k, v in stats.sessions_by_angle.items()},
            "recent_scores":          stats.recent_scores,
        }

    # ── Public (participants anonymes) ────────────────────────

    async def get_public_session(self, db: AsyncSession, code: str) -> Optional[Dict]:
        session = await wow_repo.get_by_code(db, code)
        if not session:
            return None
        team = await self._open_team(db, session)
        angle, level = WowAngle(session.angle), session_level(session)
        return {
            "session_code": session.session_code,
            "team_name":    team.name,
            "angle":        angle,
            "angle_label":  get_angle_info(angle).label,
            "level":        level,
            "title":        session.title,
            "status":       session.status,
            "statements":   [{"id": s.id, "text": s.text} for s in get_statements(angle, level)],
        }

    async def respond(self, db: AsyncSession, code: str, payload: RespondIn) -> Optional[Dict]:
        session = await wow_repo.get_by_code(db, code)
        if not session:
            return None
        if session.status == SessionStatus.CLOSED:
            raise ValueError("SESSION_CLOSED")
        await self._open_team(db, session)

        valid_ids = {s.id for s in get_statements(WowAngle(session.angle), session_level(session))}
        if not set(payload.answers) <= valid_ids:
            raise ValueError("INVALID_ANSWERS")
        if await wow_repo.has_responded(db, session.id, payload.device_id):
            raise ValueError("ALREADY_RESPONDED")

        try:
            await wow_repo.create_response(db, {
                "session_id": session.id,
                "device_id":  payload.device_id,
                "answers":    dict(payload.answers),
            })
        except IntegrityError:
            await db.rollback()
            raise ValueError("ALREADY_RESPONDED")

        return {"status": "recorded", "response_count": await wow_repo.count_responses(db, session.id)}

    async def get_outcome(self, db: AsyncSession, code: str) -> Optional[Dict]:
        session = await wow_repo.get_by_code(db, code)
        if not session:
            return None
        if session.status != SessionStatus.CLOSED:
            raise ValueError("SESSION_NOT_CLOSED")
        return {
            "session_code":     session.session_code,
            "angle":            WowAngle(session.angle),
            "focus_area":       session.focus_area,
            "experiment":       session.experiment,
            "experiment_owner": session.experiment_owner,
            "followup_date":    session.followup_date,
            "overall_score":    session.overall_score,
            "response_count":   await wow_repo.count_responses(db, session.id),
        }

    # ── Privé ─────────────────────────────────────────────────

    async def _open_team(self, db: AsyncSession, session: WowSession):
        """Équipe d'une session publique : orpheline → INVALID_LINK, WoW désactivé → TOOL_DISABLED."""
        team = await team_repo.get_team(db, session.team_id)
        if not team or team.owner_id is None:
            raise ValueError("INVALID_LINK")
        if ToolKey.WOW.value not in (team.tools_enabled or []):
            raise ValueError("TOOL_DISABLED")
        return team

    async def _owned_session(
        self, db: AsyncSession, session_id: int, admin: AdminUser
    ) -> Optional[WowSession]:
        session = await wow_repo.get_session(db, session_id)
        if not session:
            return None
        if not await get_owned_team(db, session.team_id, admin):
            return None
        return session

    def _session_out(self, session: WowSession, response_count: int) -> Dict:
        return {
            "id":                 session.id,
            "team_id":            session.team_id,
            "session_code":       session.session_code,
            "angle":              session.angle,
            "level":              session_level(session),
            "title":              session.title,
            "status":             session.status,
            "focus_area":         session.focus_area,
            "experiment":         session.experiment,
            "experiment_owner":   session.experiment_owner,
            "followup_date":      session.followup_date,
            "overall_score":      session.overall_score,
            "participation_rate": session.participation_rate,
            "response_count":     response_count,
            "share_url":          share_url(session.session_code),
            "created_at":         session.created_at,
            "closed_at":          session.closed_at,
        }
