# pulse/modules/feedback/repository.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from typing import List, Optional, Dict
from datetime import datetime

from pulse.shared.models import FeedbackLink, TeamFeedback


class FeedbackRepository:

    # ── Liens ────────────────────────────────────────────────

    async def replace_link(
        self, db: AsyncSession, team_id: int, token_hash: str, expires_at: Optional[datetime]
    ) -> FeedbackLink:
        await self.deactivate_links(db, team_id, commit=False)
        link = FeedbackLink(team_id=team_id, token_hash=token_hash, is_active=True, expires_at=expires_at)
        db.add(link)
        await db.commit()
        await db.refresh(link)
        return link

    async def deactivate_links(self, db: AsyncSession, team_id: int, commit: bool = True) -> None:
        await db.execute(
            update(FeedbackLink).where(FeedbackLink.team_id == team_id).values(is_active=False)
        )
        if commit:
            await db.commit()

    async def get_active_link(
        self, db: AsyncSession, team_id: int, token_hash: str
    ) -> Optional[FeedbackLink]:
        r = await db.execute(
            select(FeedbackLink).where(
                FeedbackLink.team_id == team_id,
                FeedbackLink.token_hash == token_hash,
                FeedbackLink.is_active == True,
            )
        )
        return r.scalar_one_or_none()

    # ── Réponses ─────────────────────────────────────────────

    async def add_feedback(self, db: AsyncSession, rows: List[Dict]) -> None:
        db.add_all([TeamFeedback(**row) for row in rows])
        await db.commit()

    async def list_feedback(self, db: AsyncSession, team_id: int) -> List[TeamFeedback]:
        """Plus récent d'abord."""
        r = await db.execute(
            select(TeamFeedback)
            .where(TeamFeedback.team_id == team_id)
            .order_by(TeamFeedback.created_at.desc())
        )
        return r.scalars().all()

    async def clear_feedback(self, db: AsyncSession, team_id: int) -> None:
        await db.execute(delete(TeamFeedback).where(TeamFeedback.team_id == team_id))
        await db.commit()
