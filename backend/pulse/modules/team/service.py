# pulse/modules/team/service.py
"""
Gestion des équipes et de leurs métriques.

Métriques (TeamMetrics), un seul calcul et deux sources :
- cache : colonnes dénormalisées sur Team, servies si elles datent du jour
          et ont moins de METRICS_CACHE_TTL_MINUTES
- live  : recalcul depuis mood_entries + wow_sessions, puis réécriture du cache
Les deux passent par engine/metrics/team_metrics.build_team_metrics.
"""
import re
import unicodedata
from dataclasses import asdict
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.core.config import settings
from pulse.core.security import generate_token, hash_token
from pulse.engine.metrics.team_metrics import (
    TeamMetrics,
    ToolMetrics,
    build_team_metrics,
    split_session_windows,
    split_vibe_windows,
    tool_metrics_from_averages,
    tool_metrics_from_scores,
)
from pulse.engine.metrics.vibe_signals import HISTORY_DAYS, DailyVibe, VibeSignals, build_vibe_signals
from pulse.modules.billing.service import resolve_account_config
from pulse.modules.team.repository import TeamRepository
from pulse.modules.team.schemas import TeamCreateIn, TeamUpdateIn
from pulse.shared.enums import AdminRole, ToolKey
from pulse.shared.models import AdminUser, Team

logger = structlog.get_logger(__name__)

team_repo = TeamRepository()

DEFAULT_TOOLS = [ToolKey.VIBE.value, ToolKey.WOW.value]


# ── Helpers partagés (wow, feedback, coach) ───────────────

async def get_owned_team(db: AsyncSession, team_id: int, admin: AdminUser) -> Optional[Team]:
    """None si l'équipe n'existe pas ; PermissionError si elle n'appartient pas à l'admin."""
    team = await team_repo.get_team(db, team_id)
    if not team:
        return None
    if admin.role != AdminRole.SUPER_ADMIN and team.owner_id != admin.id:
        raise PermissionError("Accès refusé.")
    return team


def invite_url(slug: str, token: str) -> str:
    return f"{settings.APP_URL}/t/{slug}?k={token}"


def serialize_metrics(metrics: TeamMetrics) -> Dict:
    data = asdict(metrics)
    for tool in data["tools"].values():
        if tool["trend"] is not None:
            tool["trend"] = tool["trend"].value
    return data


def _slugify(name: str) -> str:
    ascii_name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_name.lower()).strip("-")
    return slug or "team"


class TeamService:

    # ── Liste / détail ────────────────────────────────────────

    async def list_teams(
        self, db: AsyncSession, admin: AdminUser, needs_attention_only: bool = False
    ) -> List[Dict]:
        owner_id = None if admin.role == AdminRole.SUPER_ADMIN else admin.id
        teams = await team_repo.list_teams(db, owner_id=owner_id)

        out = []
        for team in teams:
            metrics = await self.get_team_metrics(db, team)
            if needs_attention_only and not metrics.needs_attention:
                continue
            out.append(self._team_with_metrics(team, metrics))
        return out

    async def get_team(self, db: AsyncSession, team_id: int, admin: AdminUser) -> Optional[Dict]:
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return None
        metrics = await self.get_team_metrics(db, team)
        return self._team_with_metrics(team, metrics)

    # ── Création / édition ────────────────────────────────────

    async def create_team(self, db: AsyncSession, admin: AdminUser, payload: TeamCreateIn) -> Dict:
        """
        Pipeline :
        1. Gate tier (max_teams du compte)
        2. Slug unique dérivé du nom
        3. Création avec les deux outils activés + premier lien d'invitation
        """
        max_teams = resolve_account_config(admin).features.max_teams
        if await team_repo.count_for_owner(db, admin.id) >= max_teams:
            raise ValueError("TEAM_LIMIT_REACHED")

        slug = await self._unique_slug(db, payload.name)
        team = await team_repo.create_team(db, {
            "name":               payload.name.strip(),
            "slug":               slug,
            "description":        payload.description,
            "owner_id":           admin.id,
            "expected_team_size": payload.expected_team_size,
            "tools_enabled":      list(DEFAULT_TOOLS),
        })

        token = generate_token()
        await team_repo.replace_invite_link(db, team.id, hash_token(token))

        logger.info("team_created", team_id=team.id, owner_id=admin.id, slug=slug)
        return {"team": team, "invite": {"token": token, "url": invite_url(team.slug, token)}}

    async def update_team(
        self, db: AsyncSession, team_id: int, admin: AdminUser, payload: TeamUpdateIn
    ) -> Optional[Team]:
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return None

        data = payload.model_dump(exclude_unset=True)
        if "name" in data and data["name"] is None:
            del data["name"]
        if data.get("tools_enabled") is not None:
            data["tools_enabled"] = [ToolKey(t).value for t in data["tools_enabled"]]
        elif "tools_enabled" in data:
            del data["tools_enabled"]

        return await team_repo.update_team(db, team, data)

    async def delete_team(self, db: AsyncSession, team_id: int, admin: AdminUser) -> bool:
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return False
        await team_repo.delete_team(db, team)
        logger.info("team_deleted", team_id=team_id, by=admin.id)
        return True

    async def reset_team(self, db: AsyncSession, team_id: int, admin: AdminUser) -> bool:
        """Efface check-ins et participants. Les sessions WoW sont conservées."""
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return False
        await team_repo.reset_team_data(db, team.id)
        logger.info("team_reset", team_id=team_id, by=admin.id)
        return True

    async def regenerate_invite_link(
        self, db: AsyncSession, team_id: int, admin: AdminUser
    ) -> Optional[Dict]:
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return None
        token = generate_token()
        await team_repo.replace_invite_link(db, team.id, hash_token(token))
        return {"token": token, "url": invite_url(team.slug, token)}

    # ── Métriques ─────────────────────────────────────────────

    async def get_metrics(self, db: AsyncSession, team_id: int, admin: AdminUser) -> Optional[Dict]:
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return None
        return serialize_metrics(await self.get_team_metrics(db, team))

    async def get_team_metrics(
        self, db: AsyncSession, team: Team, now: Optional[datetime] = None
    ) -> TeamMetrics:
        now = now or datetime.now(timezone.utc)
        if self._cache_is_fresh(team, now):
            return self._metrics_from_cache(team)
        return await self._recompute_metrics(db, team, now)

    async def get_vibe_signals(
        self, db: AsyncSession, team: Team, team_size: int, now: Optional[datetime] = None
    ) -> VibeSignals:
        """Signaux quotidiens (momentum, maturité des données) sur les HISTORY_DAYS derniers jours."""
        today = (now or datetime.now(timezone.utc)).date()
        rows = await team_repo.get_daily_vibe(db, team.id, today - timedelta(days=HISTORY_DAYS - 1))
        history = [DailyVibe(d, avg, count) for d, avg, count in rows]
        return build_vibe_signals(history, team_size, today, settings.VIBE_WINDOW_DAYS)

    async def get_vibe_history(
        self, db: AsyncSession, team_id: int, admin: AdminUser
    ) -> Optional[Dict]:
        """Moyennes quotidiennes sur la profondeur autorisée par le tier (7 ou 30 jours)."""
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return None
        days = resolve_account_config(admin).trend_days
        since = datetime.now(timezone.utc).date() - timedelta(days=days - 1)
        rows = await team_repo.get_daily_vibe(db, team.id, since)
        return {
            "team_id": team.id,
            "days":    days,
            "history": [
                {"date": d, "average": round(avg, 2), "count": count}
                for d, avg, count in rows
            ],
        }

    # ── Privé ─────────────────────────────────────────────────

    def _team_with_metrics(self, team: Team, metrics: TeamMetrics) -> Dict:
        return {
            "id":                 team.id,
            "name":               team.name,
            "slug":               team.slug,
            "description":        team.description,
            "owner_id":           team.owner_id,
            "expected_team_size": team.expected_team_size,
            "tools_enabled":      list(team.tools_enabled or []),
            "created_at":         team.created_at,
            "metrics":            serialize_metrics(metrics),
            "needs_attention":    metrics.needs_attention,
        }

    def _enabled(self, team: Team) -> List[str]:
        return list(team.tools_enabled or DEFAULT_TOOLS)

    def _cache_is_fresh(self, team: Team, now: datetime) -> bool:
        updated = team.metrics_updated_at
        if updated is None:
            return False
        if updated.tzinfo is None:
            updated = updated.replace(tzinfo=timezone.utc)
        return (
            updated.date() == now.date()
            and now - updated < timedelta(minutes=settings.METRICS_CACHE_TTL_MINUTES)
        )

    def _metrics_from_cache(self, team: Team) -> TeamMetrics:
        cached = {
            ToolKey.VIBE.value: tool_metrics_from_averages(
                team.vibe_average, team.vibe_previous_average, team.vibe_entry_count
            ),
            ToolKey.WOW.value: tool_metrics_from_averages(
                team.wow_average, team.wow_previous_average, team.wow_session_count
            ),
        }
        tools = {k: v for k, v in cached.items() if k in self._enabled(team)}
        return build_team_metrics(
            tools, team.expected_team_size, team.participant_count or 0, team.today_entries or 0
        )

    async def _recompute_metrics(self, db: AsyncSession, team: Team, now: datetime) -> TeamMetrics:
        today = now.date()
        window = settings.VIBE_WINDOW_DAYS
        since = today - timedelta(days=2 * window - 1)

        entries = await team_repo.get_mood_entries_since(db, team.id, since)
        current, previous = split_vibe_windows(entries, today, window)
        vibe = tool_metrics_from_scores(current, previous)

        session_scores = await team_repo.get_session_scores(db, team.id)
        recent, older = split_session_windows(session_scores)
        wow = tool_metrics_from_scores(recent, older)

        participant_count = await team_repo.count_participants(db, team.id)
        today_entries = sum(1 for entry_date, _ in entries if entry_date == today)

        await team_repo.save_metrics_cache(db, team, {
            "vibe_average":          vibe.average_score,
            "vibe_previous_average": vibe.previous_average_score,
            "vibe_entry_count":      vibe.entry_count,
            "wow_average":           wow.average_score,
            "wow_previous_average":  wow.previous_average_score,
            "wow_session_count":     wow.entry_count,
            "participant_count":     participant_count,
            "today_entries":         today_entries,
            "metrics_updated_at":    now,
        })
        logger.debug("team_metrics_recomputed", team_id=team.id)

        tools: Dict[str, ToolMetrics] = {
            k: v for k, v in {ToolKey.VIBE.value: vibe, ToolKey.WOW.value: wow}.items()
            if k in self._enabled(team)
        }
        return build_team_metrics(tools, team.expected_team_size, participant_count, today_entries)

    async def _unique_slug(self, db: AsyncSession, name: str) -> str:
        base = _slugify(name)
        slug, n = base, 2
        while await team_repo.slug_exists(db, slug):
            slug = f"{base}-{n}"
            n += 1
        return slug
