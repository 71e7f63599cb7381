# pulse/modules/vibe/service.py
"""
Check-in Vibe public : aucun compte, lien d'invitation + device_id.

Pipeline check_in :
1. Validation du lien (slug + hash du token actif)
2. Participant get-or-create par device_id
3. Un check-in par participant et par jour
4. Invalidation du cache métriques de l'équipe
5. Retour : streak + stats du jour de l'équipe
"""
import structlog
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.core.security import hash_token
from pulse.engine.metrics.scoring import aggregate_scores
from pulse.engine.metrics.team_metrics import compute_streak
from pulse.modules.team.repository import TeamRepository
from pulse.modules.vibe.repository import VibeRepository
from pulse.modules.vibe.schemas import CheckInIn
from pulse.shared.enums import ToolKey
from pulse.shared.models import Team

logger = structlog.get_logger(__name__)

vibe_repo = VibeRepository()
team_repo = TeamRepository()

# Profondeur de lecture pour le calcul du streak
STREAK_LOOKBACK_DAYS = 365


def _today():
    return datetime.now(timezone.utc).date()


class VibeService:

    async def check_in(self, db: AsyncSession, payload: CheckInIn) -> Dict:
        team = await self._resolve_team(db, payload.team_slug, payload.token)
        if ToolKey.VIBE.value not in (team.tools_enabled or []):
            raise ValueError("TOOL_DISABLED")

        today = _today()
        participant = await vibe_repo.get_or_create_participant(
            db, team.id, payload.device_id, payload.nickname
        )
        if await vibe_repo.has_checked_in(db, participant.id, today):
            raise ValueError("ALREADY_CHECKED_IN")

        try:
            await vibe_repo.create_entry(db, {
                "team_id":        team.id,
                "participant_id": participant.id,
                "mood":           payload.mood,
                "comment":        payload.comment,
                "entry_date":     today,
            })
        except IntegrityError:
            # Double soumission concurrente : la contrainte unique a tranché
            await db.rollback()
            raise ValueError("ALREADY_CHECKED_IN")

        await team_repo.invalidate_metrics(db, team.id)
        logger.info("vibe_checkin_recorded", team_id=team.id, participant_id=participant.id)

        moods = await vibe_repo.get_team_moods_on(db, team.id, today)
        distribution = [0, 0, 0, 0, 0]
        for m in moods:
            distribution[m - 1] += 1

        return {
            "status":    "recorded",
            "team_name": team.name,
            "streak":    await self._streak(db, participant.id, today),
            "today": {
                "average":      aggregate_scores(moods),
                "count":        len(moods),
                "distribution": distribution,
            },
        }

    async def get_status(
        self, db: AsyncSession, team_slug: str, token: str, device_id: Optional[str]
    ) -> Dict:
        team = await self._resolve_team(db, team_slug, token)
        today = _today()

        participant = (
            await vibe_repo.get_participant(db, team.id, device_id) if device_id else None
        )
        if not participant:
            return {"team_name": team.name, "checked_in_today": False, "streak": 0}

        return {
            "team_name":        team.name,
            "checked_in_today": await vibe_repo.has_checked_in(db, participant.id, today),
            "streak":           await self._streak(db, participant.id, today),
        }

    # ── Privé ─────────────────────────────────────────────────

    async def _resolve_team(self, db: AsyncSession, slug: str, token: str) -> Team:
        team = await team_repo.get_by_slug(db, slug)
        if not team or team.owner_id is None:
            raise ValueError("INVALID_LINK")
        if not await team_repo.get_active_invite_link(db, team.id, hash_token(token)):
            raise ValueError("INVALID_LINK")
        return team

    async def _streak(self, db: AsyncSession, participant_id: int, today) -> int:
        since = today - timedelta(days=STREAK_LOOKBACK_DAYS)
        dates = await vibe_repo.get_participant_dates(db, participant_id, since)
        return compute_streak(dates, today)
