# pulse/modules/auth/service.py
import structlog
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from pulse.shared.models import AdminUser
from pulse.shared.enums import AdminRole, BillingStatus, SubscriptionTier
from pulse.core.security import hash_password, verify_password, create_access_token
from pulse.modules.auth.schemas import RegisterAdminIn, LoginIn, TokenOut

logger = structlog.get_logger(__name__)


class AuthService:

    # ── Register ─────────────────────────────────────────────

    async def register_admin(self, db: AsyncSession, payload: RegisterAdminIn) -> TokenOut:
        await self._assert_email_free(db, payload.email)

        admin = AdminUser(
            email=payload.email.lower(),
            name=payload.name,
            hashed_password=hash_password(payload.password),
            role=AdminRole.ADMIN,
            subscription_tier=SubscriptionTier.FREE.value,
            billing_status=BillingStatus.NONE,
        )
        db.add(admin)
        await db.commit()
        await db.refresh(admin)

        logger.info("admin_registered", admin_id=admin.id)
        return self._build_token(admin)

    # ── Login ─────────────────────────────────────────────────

    async def login(self, db: AsyncSession, payload: LoginIn) -> TokenOut:
        result = await db.execute(select(AdminUser).where(AdminUser.email == payload.email.lower()))
        admin = result.scalar_one_or_none()

        if not admin or not verify_password(payload.password, admin.hashed_password):
            logger.info("login_failed")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Email ou mot de passe incorrect",
            )
        if not admin.is_active:
            raise HTTPException(status_code=403, detail="Compte désactivé")

        return self._build_token(admin)

    # ── Mot de passe ──────────────────────────────────────────

    async def change_password(
        self, db: AsyncSession, admin: AdminUser, current_pw: str, new_pw: str
    ) -> None:
        if not verify_password(current_pw, admin.hashed_password):
            raise HTTPException(status_code=400, detail="Mot de passe actuel incorrect")
        admin.hashed_password = hash_password(new_pw)
        await db.commit()

    # ── Privé ─────────────────────────────────────────────────

    async def _assert_email_free(self, db: AsyncSession, email: str) -> None:
        result = await db.execute(select(AdminUser).where(AdminUser.email == email.lower()))
        if result.scalar_one_or_none():
            raise HTTPException(status_code=409, detail="Email déjà utilisé")

    def _build_token(self, admin: AdminUser) -> TokenOut:
        role = admin.role.value if isinstance(admin.role, AdminRole) else admin.role
        return TokenOut(
            access_token=create_access_token({"sub": str(admin.id), "role": role}),
            role=admin.role,
            admin_id=admin.id,
        )
