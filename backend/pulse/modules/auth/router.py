# pulse/modules/auth/router.py
from fastapi import APIRouter
from pulse.modules.auth.schemas import RegisterAdminIn, LoginIn, TokenOut, AdminOut, ChangePasswordIn
from pulse.modules.auth.service import AuthService
from pulse.shared.deps import DbDep, AdminDep

router = APIRouter(prefix="/auth", tags=["Auth"])
service = AuthService()


@router.post("/register", response_model=TokenOut, status_code=201)
async def register(payload: RegisterAdminIn, db: DbDep):
    """Inscription d'un administrateur d'équipes."""
    return await service.register_admin(db, payload)


@router.post("/login", response_model=TokenOut)
async def login(payload: LoginIn, db: DbDep):
    return await service.login(db, payload)


@router.post("/change-password", status_code=204)
async def change_password(payload: ChangePasswordIn, current_admin: AdminDep, db: DbDep):
    await service.change_password(db, current_admin, payload.current_password, payload.new_password)


@router.get("/me", response_model=AdminOut)
async def me(current_admin: AdminDep):
    return current_admin
