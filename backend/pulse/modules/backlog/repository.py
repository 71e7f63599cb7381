# pulse/modules/backlog/repository.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from typing import List, Optional, Dict

from pulse.shared.models import BacklogItem, ReleaseNote
from pulse.shared.enums import ProductType


def _product_filter(column, product: Optional[ProductType]):
    """Produit demandé + éléments partagés."""
    if product is None or product == ProductType.SHARED:
        return None
    return or_(column == product, column == ProductType.SHARED)


class BacklogRepository:

    # ── Backlog ──────────────────────────────────────────────

    async def list_items(self, db: AsyncSession, product: Optional[ProductType] = None) -> List[BacklogItem]:
        query = select(BacklogItem)
        condition = _product_filter(BacklogItem.product, product)
        if condition is not None:
            query = query.where(condition)
        r = await db.execute(query.order_by(BacklogItem.status, BacklogItem.created_at.desc()))
        return r.scalars().all()

    async def get_item(self, db: AsyncSession, item_id: int) -> Optional[BacklogItem]:
        r = await db.execute(select(BacklogItem).where(BacklogItem.id == item_id))
        return r.scalar_one_or_none()

    async def create_item(self, db: AsyncSession, data: Dict) -> BacklogItem:
        db_obj = BacklogItem(**data)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update_item(self, db: AsyncSession, item: BacklogItem, data: Dict) -> BacklogItem:
        for key, value in data.items():
            setattr(item, key, value)
        await db.commit()
        await db.refresh(item)
        return item

    async def delete_item(self, db: AsyncSession, item: BacklogItem) -> None:
        await db.delete(item)
        await db.commit()

    # ── Release notes ────────────────────────────────────────

    async def list_releases(self, db: AsyncSession, product: Optional[ProductType] = None) -> List[ReleaseNote]:
        query = select(ReleaseNote)
        condition = _product_filter(ReleaseNote.product, product)
        if condition is not None:
            query = query.where(condition)
        r = await db.execute(query.order_by(ReleaseNote.released_at.desc()))
        return r.scalars().all()

    async def get_release(self, db: AsyncSession, release_id: int) -> Optional[ReleaseNote]:
        r = await db.execute(select(ReleaseNote).where(ReleaseNote.id == release_id))
        return r.scalar_one_or_none()

    async def create_release(self, db: AsyncSession, data: Dict) -> ReleaseNote:
        db_obj = ReleaseNote(**data)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update_release(self, db: AsyncSession, release: ReleaseNote, data: Dict) -> ReleaseNote:
        for key, value in data.items():
            setattr(release, key, value)
        await db.commit()
        await db.refresh(release)
        return release

    async def delete_release(self, db: AsyncSession, release: ReleaseNote) -> None:
        await db.delete(release)
        await db.commit()
