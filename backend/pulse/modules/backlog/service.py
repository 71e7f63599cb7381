# pulse/modules/backlog/service.py
"""
Backlog public et release notes.

Lecture publique, écriture super admin uniquement (contrôlée par le router).
Règle de décision :
  status == decided  → decision obligatoire, decided_at = date fournie ou aujourd'hui
  status != decided  → decision et decided_at remis à NULL
"""
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Tuple

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.modules.backlog.repository import BacklogRepository
from pulse.modules.backlog.schemas import (
    BacklogItemIn,
    BacklogItemUpdateIn,
    ReleaseNoteIn,
    ReleaseNoteUpdateIn,
)
from pulse.shared.enums import BacklogDecision, BacklogStatus, ProductType
from pulse.shared.models import BacklogItem, ReleaseNote

logger = structlog.get_logger(__name__)

backlog_repo = BacklogRepository()


def apply_decision_rule(
    status: BacklogStatus,
    decision: Optional[BacklogDecision],
    decided_at: Optional[date],
    today: Optional[date] = None,
) -> Tuple[Optional[BacklogDecision], Optional[date]]:
    if status != BacklogStatus.DECIDED:
        return None, None
    if decision is None:
        raise ValueError("DECISION_REQUIRED")
    return decision, decided_at or today or datetime.now(timezone.utc).date()


class BacklogService:

    # ── Backlog ───────────────────────────────────────────────

    async def list_items(self, db: AsyncSession, product: Optional[ProductType] = None) -> List[BacklogItem]:
        return await backlog_repo.list_items(db, product)

    async def create_item(self, db: AsyncSession, payload: BacklogItemIn) -> BacklogItem:
        data = payload.model_dump()
        data["decision"], data["decided_at"] = apply_decision_rule(
            payload.status, payload.decision, payload.decided_at
        )
        item = await backlog_repo.create_item(db, data)
        logger.info("backlog_item_created", item_id=item.id, status=item.status)
        return item

    async def update_item(
        self, db: AsyncSession, item_id: int, payload: BacklogItemUpdateIn
    ) -> Optional[BacklogItem]:
        item = await backlog_repo.get_item(db, item_id)
        if not item:
            return None

        data = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
        status = data.get("status", item.status)
        decision = data.get("decision", item.decision)
        decided_at = data.get("decided_at", item.decided_at)
        data["decision"], data["decided_at"] = apply_decision_rule(
            BacklogStatus(status), decision, decided_at
        )
        return await backlog_repo.update_item(db, item, data)

    async def delete_item(self, db: AsyncSession, item_id: int) -> bool:
        item = await backlog_repo.get_item(db, item_id)
        if not item:
            return False
        await backlog_repo.delete_item(db, item)
        logger.info("backlog_item_deleted", item_id=item_id)
        return True

    # ── Release notes ─────────────────────────────────────────

    async def list_releases(self, db: AsyncSession, product: Optional[ProductType] = None) -> List[ReleaseNote]:
        return await backlog_repo.list_releases(db, product)

    async def create_release(self, db: AsyncSession, payload: ReleaseNoteIn) -> ReleaseNote:
        release = await backlog_repo.create_release(db, payload.model_dump())
        logger.info("release_note_created", release_id=release.id, version=release.version)
        return release

    async def update_release(
        self, db: AsyncSession, release_id: int, payload: ReleaseNoteUpdateIn
    ) -> Optional[ReleaseNote]:
        release = await backlog_repo.get_release(db, release_id)
        if not release:
            return None
        data: Dict = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
        return await backlog_repo.update_release(db, release, data)

    async def delete_release(self, db: AsyncSession, release_id: int) -> bool:
        release = await backlog_repo.get_release(db, release_id)
        if not release:
            return False
        await backlog_repo.delete_release(db, release)
        return True
