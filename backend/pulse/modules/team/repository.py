# pulse/modules/team/repository.py
"""
Accès DB pour les équipes, participants, liens d'invitation
et lectures brutes nécessaires au recalcul des métriques.
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func
from typing import List, Optional, Dict, Tuple
from datetime import date

from pulse.shared.models import Team, Participant, InviteLink, MoodEntry, WowSession
from pulse.shared.enums import SessionStatus


class TeamRepository:

    # ── Team ─────────────────────────────────────────────────

    async def get_team(self, db: AsyncSession, team_id: int) -> Optional[Team]:
        r = await db.execute(select(Team).where(Team.id == team_id))
        return r.scalar_one_or_none()

    async def get_by_slug(self, db: AsyncSession, slug: str) -> Optional[Team]:
        r = await db.execute(select(Team).where(Team.slug == slug))
        return r.scalar_one_or_none()

    async def slug_exists(self, db: AsyncSession, slug: str) -> bool:
        r = await db.execute(select(Team.id).where(Team.slug == slug))
        return r.scalar_one_or_none() is not None

    async def list_teams(self, db: AsyncSession, owner_id: Optional[int] = None) -> List[Team]:
        """owner_id=None → toutes les équipes possédées (super admin). Orphelines exclues."""
        query = select(Team).where(Team.owner_id.is_not(None))
        if owner_id is not None:
            query = query.where(Team.owner_id == owner_id)
        r = await db.execute(query.order_by(Team.created_at.desc()))
        return r.scalars().all()

    async def count_for_owner(self, db: AsyncSession, owner_id: int) -> int:
        r = await db.execute(select(func.count(Team.id)).where(Team.owner_id == owner_id))
        return r.scalar_one() or 0

    async def create_team(self, db: AsyncSession, data: Dict) -> Team:
        db_obj = Team(**data)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update_team(self, db: AsyncSession, team: Team, data: Dict) -> Team:
        for key, value in data.items():
            setattr(team, key, value)
        await db.commit()
        await db.refresh(team)
        return team

    async def delete_team(self, db: AsyncSession, team: Team) -> None:
        await db.delete(team)
        await db.commit()

    async def reset_team_data(self, db: AsyncSession, team_id: int) -> None:
        """Supprime check-ins et participants, invalide le cache métriques."""
        await db.execute(delete(MoodEntry).where(MoodEntry.team_id == team_id))
        await db.execute(delete(Participant).where(Participant.team_id == team_id))
        await db.execute(
            update(Team).where(Team.id == team_id).values(
                vibe_average=None, vibe_previous_average=None, vibe_entry_count=0,
                participant_count=0, today_entries=0, metrics_updated_at=None,
            )
        )
        await db.commit()

    # ── Cache métriques ──────────────────────────────────────

    async def save_metrics_cache(self, db: AsyncSession, team: Team, data: Dict) -> None:
        for key, value in data.items():
            setattr(team, key, value)
        await db.commit()

    async def invalidate_metrics(self, db: AsyncSession, team_id: int) -> None:
        await db.execute(update(Team).where(Team.id == team_id).values(metrics_updated_at=None))
        await db.commit()

    # ── Lectures brutes pour le recalcul ─────────────────────

    async def get_mood_entries_since(
        self, db: AsyncSession, team_id: int, since: date
    ) -> List[Tuple[date, int]]:
        r = await db.execute(
            select(MoodEntry.entry_date, MoodEntry.mood)
            .where(MoodEntry.team_id == team_id, MoodEntry.entry_date >= since)
        )
        return [(row[0], row[1]) for row in r.all()]

    async def count_participants(self, db: AsyncSession, team_id: int) -> int:
        r = await db.execute(select(func.count(Participant.id)).where(Participant.team_id == team_id))
        return r.scalar_one() or 0

    async def get_session_scores(self, db: AsyncSession, team_id: int) -> List[float]:
        """Scores des sessions clôturées (≥ 3 réponses), dernière clôture d'abord."""
        r = await db.execute(
            select(WowSession.overall_score)
            .where(
                WowSession.team_id == team_id,
                WowSession.status == SessionStatus.CLOSED,
                WowSession.overall_score.is_not(None),
            )
            .order_by(WowSession.closed_at.desc())
        )
        return list(r.scalars().all())

    async def get_daily_vibe(
        self, db: AsyncSession, team_id: int, since: date
    ) -> List[Tuple[date, float, int]]:
        r = await db.execute(
            select(MoodEntry.entry_date, func.avg(MoodEntry.mood), func.count(MoodEntry.id))
            .where(MoodEntry.team_id == team_id, MoodEntry.entry_date >= since)
            .group_by(MoodEntry.entry_date)
            .order_by(MoodEntry.entry_date)
        )
        return [(row[0], float(row[1]), row[2]) for row in r.all()]

    # ── Liens d'invitation ───────────────────────────────────

    async def replace_invite_link(self, db: AsyncSession, team_id: int, token_hash: str) -> InviteLink:
        """Désactive les anciens liens et en crée un nouveau."""
        await db.execute(
            update(InviteLink).where(InviteLink.team_id == team_id).values(is_active=False)
        )
        link = InviteLink(team_id=team_id, token_hash=token_hash, is_active=True)
        db.add(link)
        await db.commit()
        await db.refresh(link)
        return link

    async def get_active_invite_link(
        self, db: AsyncSession, team_id: int, token_hash: str
    ) -> Optional[InviteLink]:
        r = await db.execute(
            select(InviteLink).where(
                InviteLink.team_id == team_id,
                InviteLink.token_hash == token_hash,
                InviteLink.is_active == True,
            )
        )
        return r.scalar_one_or_none()
