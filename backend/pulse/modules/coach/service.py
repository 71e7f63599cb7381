# pulse/modules/coach/service.py
"""
Vues coach : réservées aux tiers qui incluent la fonctionnalité.

- insights   : cartes à base de règles sur les métriques et signaux quotidiens d'une équipe (coach)
- cross-team : consolidation de toutes les équipes du compte (cross_team)
"""
from dataclasses import asdict
from typing import Dict, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.engine.metrics.cross_team import build_cross_team_overview
from pulse.engine.metrics.insights import SUPPORTED_LANGUAGES, generate_insights
from pulse.modules.billing.service import require_feature
from pulse.modules.team.repository import TeamRepository
from pulse.modules.team.service import TeamService, get_owned_team
from pulse.modules.wow.repository import WowRepository
from pulse.shared.enums import AdminRole
from pulse.shared.models import AdminUser

logger = structlog.get_logger(__name__)

team_repo = TeamRepository()
wow_repo = WowRepository()
team_service = TeamService()


class CoachService:

    async def get_team_insights(
        self, db: AsyncSession, team_id: int, admin: AdminUser, lang: str = "en"
    ) -> Optional[Dict]:
        require_feature(admin, "coach")
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return None

        language = lang if lang in SUPPORTED_LANGUAGES else "en"
        metrics = await team_service.get_team_metrics(db, team)
        signals = await team_service.get_vibe_signals(db, team, metrics.effective_team_size)
        return {
            "team_id":  team.id,
            "language": language,
            "signals":  asdict(signals),
            "insights": [asdict(i) for i in generate_insights(metrics, language, signals)],
        }

    async def get_cross_team_overview(self, db: AsyncSession, admin: AdminUser, lang: str = "en") -> Dict:
        require_feature(admin, "cross_team")
        owner_id = None if admin.role == AdminRole.SUPER_ADMIN else admin.id
        teams = await team_repo.list_teams(db, owner_id=owner_id)

        team_metrics = [(t.name, await team_service.get_team_metrics(db, t)) for t in teams]
        angle_scores = await wow_repo.get_closed_angle_scores(db, [t.id for t in teams])

        overview = build_cross_team_overview(
            team_metrics, angle_scores, lang if lang in SUPPORTED_LANGUAGES else "en"
        )
        if overview is None:
            raise ValueError("NOT_ENOUGH_TEAMS")
        logger.debug("cross_team_overview_built", admin_id=admin.id, team_count=overview.team_count)
        return asdict(overview)
