# pulse/modules/vibe/repository.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional, Dict
from datetime import date

from pulse.shared.models import Participant, MoodEntry


class VibeRepository:

    async def get_participant(
        self, db: AsyncSession, team_id: int, device_id: str
    ) -> Optional[Participant]:
        r = await db.execute(
            select(Participant).where(
                Participant.team_id == team_id,
                Participant.device_id == device_id,
            )
        )
        return r.scalar_one_or_none()

    async def get_or_create_participant(
        self, db: AsyncSession, team_id: int, device_id: str, nickname: Optional[str] = None
    ) -> Participant:
        participant = await self.get_participant(db, team_id, device_id)
        if participant:
            return participant
        participant = Participant(team_id=team_id, device_id=device_id, nickname=nickname)
        db.add(participant)
        await db.flush()
        return participant

    async def has_checked_in(self, db: AsyncSession, participant_id: int, day: date) -> bool:
        r = await db.execute(
            select(MoodEntry.id).where(
                MoodEntry.participant_id == participant_id,
                MoodEntry.entry_date == day,
            )
        )
        return r.scalar_one_or_none() is not None

    async def create_entry(self, db: AsyncSession, data: Dict) -> MoodEntry:
        db_obj = MoodEntry(**data)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def get_team_moods_on(self, db: AsyncSession, team_id: int, day: date) -> List[int]:
        r = await db.execute(
            select(MoodEntry.mood).where(MoodEntry.team_id == team_id, MoodEntry.entry_date == day)
        )
        return list(r.scalars().all())

    async def get_participant_dates(
        self, db: AsyncSession, participant_id: int, since: date
    ) -> List[date]:
        r = await db.execute(
            select(MoodEntry.entry_date).where(
                MoodEntry.participant_id == participant_id,
                MoodEntry.entry_date >= since,
            )
        )
        return list(r.scalars().all())
