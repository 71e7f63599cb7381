# pulse/modules/wow/repository.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import List, Optional, Dict, Tuple, Sequence

from pulse.shared.models import WowSession, WowResponse
from pulse.shared.enums import SessionStatus

CROSS_TEAM_SESSION_LIMIT = 50


class WowRepository:

    # ── Sessions ─────────────────────────────────────────────

    async def code_exists(self, db: AsyncSession, code: str) -> bool:
        r = await db.execute(select(WowSession.id).where(WowSession.session_code == code))
        return r.scalar_one_or_none() is not None

    async def create_session(self, db: AsyncSession, data: Dict) -> WowSession:
        db_obj = WowSession(**data)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def get_session(self, db: AsyncSession, session_id: int) -> Optional[WowSession]:
        r = await db.execute(select(WowSession).where(WowSession.id == session_id))
        return r.scalar_one_or_none()

    async def get_by_code(self, db: AsyncSession, code: str) -> Optional[WowSession]:
        r = await db.execute(select(WowSession).where(WowSession.session_code == code.upper()))
        return r.scalar_one_or_none()

    async def list_sessions(self, db: AsyncSession, team_id: int) -> List[WowSession]:
        """Plus récente d'abord."""
        r = await db.execute(
            select(WowSession)
            .where(WowSession.team_id == team_id)
            .order_by(WowSession.created_at.desc())
        )
        return r.scalars().all()

    async def close_session(self, db: AsyncSession, session: WowSession, data: Dict) -> WowSession:
        for key, value in data.items():
            setattr(session, key, value)
        session.status = SessionStatus.CLOSED
        await db.commit()
        await db.refresh(session)
        return session

    async def delete_session(self, db: AsyncSession, session: WowSession) -> None:
        await db.delete(session)
        await db.commit()

    async def get_closed_angle_scores(
        self, db: AsyncSession, team_ids: Sequence[int]
    ) -> List[Tuple[str, float]]:
        """(angle, overall_score) des 50 dernières sessions clôturées et scorées : vue multi-équipes."""
        if not team_ids:
            return []
        r = await db.execute(
            select(WowSession.angle, WowSession.overall_score).where(
                WowSession.team_id.in_(team_ids),
                WowSession.status == SessionStatus.CLOSED,
                WowSession.overall_score.is_not(None),
            )
            .order_by(WowSession.closed_at.desc())
            .limit(CROSS_TEAM_SESSION_LIMIT)
        )
        return [(row[0], row[1]) for row in r.all()]

    # ── Réponses ─────────────────────────────────────────────

    async def count_responses(self, db: AsyncSession, session_id: int) -> int:
        r = await db.execute(
            select(func.count(WowResponse.id)).where(WowResponse.session_id == session_id)
        )
        return r.scalar_one() or 0

    async def response_counts(self, db: AsyncSession, team_id: int) -> Dict[int, int]:
        r = await db.execute(
            select(WowResponse.session_id, func.count(WowResponse.id))
            .join(WowSession, WowSession.id == WowResponse.session_id)
            .where(WowSession.team_id == team_id)
            .group_by(WowResponse.session_id)
        )
        return {row[0]: row[1] for row in r.all()}

    async def get_answers(self, db: AsyncSession, session_id: int) -> List[Dict[str, int]]:
        r = await db.execute(
            select(WowResponse.answers)
            .where(WowResponse.session_id == session_id)
            .order_by(WowResponse.created_at)
        )
        return [dict(a) for a in r.scalars().all()]

    async def has_responded(self, db: AsyncSession, session_id: int, device_id: str) -> bool:
        r = await db.execute(
            select(WowResponse.id).where(
                WowResponse.session_id == session_id,
                WowResponse.device_id == device_id,
            )
        )
        return r.scalar_one_or_none() is not None

    async def create_response(self, db: AsyncSession, data: Dict) -> WowResponse:
        db_obj = WowResponse(**data)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj
