# pulse/modules/billing/repository.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Dict, Optional

from pulse.shared.models import AdminUser


class BillingRepository:

    async def get_admin(self, db: AsyncSession, admin_id: int) -> Optional[AdminUser]:
        r = await db.execute(select(AdminUser).where(AdminUser.id == admin_id))
        return r.scalar_one_or_none()

    async def update_subscription(self, db: AsyncSession, admin: AdminUser, data: Dict) -> AdminUser:
        for key, value in data.items():
            setattr(admin, key, value)
        await db.commit()
        await db.refresh(admin)
        return admin
