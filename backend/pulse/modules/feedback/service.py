# pulse/modules/feedback/service.py
"""
Feedback anonyme entre pairs.

Un seul lien actif par équipe (les précédents sont désactivés à la
régénération). Le token brut n'est renvoyé qu'une fois, seul son hash
SHA-256 est stocké.
"""
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.core.config import settings
from pulse.core.security import generate_token, hash_token
from pulse.modules.feedback.repository import FeedbackRepository
from pulse.modules.feedback.schemas import FeedbackSubmitIn
from pulse.modules.team.repository import TeamRepository
from pulse.modules.team.service import get_owned_team
from pulse.shared.models import AdminUser, Team

logger = structlog.get_logger(__name__)

feedback_repo = FeedbackRepository()
team_repo = TeamRepository()


def feedback_url(slug: str, token: str) -> str:
    return f"{settings.APP_URL}/feedback/t/{slug}?k={token}"


def link_is_expired(expires_at: Optional[datetime], now: datetime) -> bool:
    if expires_at is None:
        return False
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at < now


class FeedbackService:

    # ── Admin ─────────────────────────────────────────────────

    async def create_link(self, db: AsyncSession, team_id: int, admin: AdminUser) -> Optional[Dict]:
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return None

        expires_at = None
        if settings.FEEDBACK_LINK_EXPIRE_DAYS:
            expires_at = datetime.now(timezone.utc) + timedelta(days=settings.FEEDBACK_LINK_EXPIRE_DAYS)

        token = generate_token()
        await feedback_repo.replace_link(db, team.id, hash_token(token), expires_at)
        logger.info("feedback_link_created", team_id=team.id, by=admin.id)
        return {"token": token, "url": feedback_url(team.slug, token), "expires_at": expires_at}

    async def deactivate_link(self, db: AsyncSession, team_id: int, admin: AdminUser) -> bool:
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return False
        await feedback_repo.deactivate_links(db, team.id)
        return True

    async def get_grouped(self, db: AsyncSession, team_id: int, admin: AdminUser) -> Optional[Dict]:
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return None
        items = await feedback_repo.list_feedback(db, team.id)

        groups: Dict[str, list] = OrderedDict()
        for item in items:
            groups.setdefault(item.prompt_key, []).append(item)
        return {"team_id": team.id, "total": len(items), "groups": groups}

    async def clear(self, db: AsyncSession, team_id: int, admin: AdminUser) -> bool:
        team = await get_owned_team(db, team_id, admin)
        if not team:
            return False
        await feedback_repo.clear_feedback(db, team.id)
        logger.info("feedback_cleared", team_id=team.id, by=admin.id)
        return True

    # ── Public ────────────────────────────────────────────────

    async def check_link(self, db: AsyncSession, team_slug: str, token: str) -> Dict:
        team = await self._resolve_team(db, team_slug, token)
        return {"team_name": team.name}

    async def submit(self, db: AsyncSession, payload: FeedbackSubmitIn) -> Dict:
        """Réponses vides ignorées ; au moins une réponse non vide exigée."""
        team = await self._resolve_team(db, payload.team_slug, payload.token)

        rows = [
            {"team_id": team.id, "prompt_key": s.prompt_key, "response": s.response.strip()}
            for s in payload.submissions
            if s.response.strip()
        ]
        if not rows:
            raise ValueError("EMPTY_FEEDBACK")

        await feedback_repo.add_feedback(db, rows)
        logger.info("feedback_submitted", team_id=team.id, count=len(rows))
        return {"status": "recorded", "count": len(rows)}

    # ── Privé ─────────────────────────────────────────────────

    async def _resolve_team(self, db: AsyncSession, slug: str, token: str) -> Team:
        team = await team_repo.get_by_slug(db, slug)
        if not team or team.owner_id is None:
            raise ValueError("INVALID_LINK")
        link = await feedback_repo.get_active_link(db, team.id, hash_token(token))
        if not link:
            raise ValueError("INVALID_LINK")
        if link_is_expired(link.expires_at, datetime.now(timezone.utc)):
            raise ValueError("LINK_EXPIRED")
        return team
