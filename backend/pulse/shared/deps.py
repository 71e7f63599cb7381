# pulse/shared/deps.py
"""
Dépendances FastAPI réutilisables dans tous les routers.
Injectées via Depends(), jamais appelées directement.

Les participants (check-in, feedback, réponses WoW) sont anonymes :
leurs endpoints n'utilisent que DbDep.
"""
from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.core.database import get_db
from pulse.core.security import decode_token
from pulse.shared.models import AdminUser
from pulse.shared.enums import AdminRole

bearer = HTTPBearer()


async def _get_admin_from_token(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AdminUser:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Token invalide ou expiré",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(credentials.credentials)
        admin_id = payload.get("sub")
        if admin_id is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    result = await db.execute(select(AdminUser).where(AdminUser.id == int(admin_id)))
    admin = result.scalar_one_or_none()

    if not admin or not admin.is_active:
        raise credentials_exception
    return admin


# ── Deps publiques ─────────────────────────────────────────

async def get_current_admin(
    admin: Annotated[AdminUser, Depends(_get_admin_from_token)],
) -> AdminUser:
    """Administrateur authentifié (admin ou super_admin)."""
    return admin


async def get_current_super_admin(
    admin: Annotated[AdminUser, Depends(_get_admin_from_token)],
) -> AdminUser:
    """Exige le rôle SUPER_ADMIN."""
    if admin.role != AdminRole.SUPER_ADMIN:
        raise HTTPException(status_code=403, detail="Accès super administrateur requis")
    return admin


# ── Type aliases pour les routers ─────────────────────────
DbDep         = Annotated[AsyncSession, Depends(get_db)]
AdminDep      = Annotated[AdminUser, Depends(get_current_admin)]
SuperAdminDep = Annotated[AdminUser, Depends(get_current_super_admin)]
