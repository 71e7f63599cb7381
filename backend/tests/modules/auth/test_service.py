# tests/modules/auth/test_service.py
"""
Tests unitaires pour modules.auth.service.AuthService

Pattern : mock db.execute() et scalar_one_or_none() pour contrôler
les résultats SQL sans base de données réelle.

Couverture :
    register_admin() :
        - Email libre → crée AdminUser (tier free), retourne TokenOut
        - Email déjà pris → HTTPException 409

    login() :
        - Credentials corrects → retourne TokenOut
        - Mauvais mot de passe → HTTPException 401
        - Email inconnu → HTTPException 401
        - Compte inactif → HTTPException 403

    change_password() :
        - Bon mot de passe actuel → met à jour hashed_password
        - Mauvais mot de passe → HTTPException 400
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from fastapi import HTTPException

from pulse.modules.auth.service import AuthService
from pulse.modules.auth.schemas import RegisterAdminIn, LoginIn
from pulse.shared.enums import AdminRole
from tests.conftest import make_admin, make_async_db

pytestmark = pytest.mark.service

service = AuthService()


# ── Helpers ───────────────────────────────────────────────────────────────────

def _result(value) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _register_payload(**kwargs) -> RegisterAdminIn:
    defaults = dict(email="New@Test.com", password="password123", name="Sam Coach")
    defaults.update(kwargs)
    return RegisterAdminIn(**defaults)


def _login_payload(email="coach@test.com", password="secret") -> LoginIn:
    return LoginIn(email=email, password=password)


# ── register_admin() ──────────────────────────────────────────────────────────

class TestRegisterAdmin:
    async def test_succes_retourne_token_out(self):
        """Email libre → AdminUser en tier free, TokenOut avec rôle admin."""
        db = make_async_db()
        db.execute = AsyncMock(return_value=_result(None))

        with patch("pulse.modules.auth.service.hash_password", return_value="hashed"):
            with patch("pulse.modules.auth.service.create_access_token", return_value="access_123"):
                result = await service.register_admin(db, _register_payload())

        assert result.access_token == "access_123"
        assert result.role == AdminRole.ADMIN
        assert result.admin_id == 1
        created = db.added[0]
        assert created.email == "new@test.com"
        assert created.subscription_tier == "free"
        db.commit.assert_called_once()

    async def test_email_duplique_leve_409(self):
        db = make_async_db()
        db.execute = AsyncMock(return_value=_result(make_admin(email="new@test.com")))

        with pytest.raises(HTTPException) as exc_info:
            await service.register_admin(db, _register_payload())

        assert exc_info.value.status_code == 409
        db.commit.assert_not_called()


# ── login() ───────────────────────────────────────────────────────────────────

class TestLogin:
    async def test_succes_retourne_token_out(self):
        db = make_async_db()
        db.execute = AsyncMock(return_value=_result(make_admin()))

        with patch("pulse.modules.auth.service.verify_password", return_value=True):
            with patch("pulse.modules.auth.service.create_access_token", return_value="acc") as mock_jwt:
                result = await service.login(db, _login_payload())

        assert result.access_token == "acc"
        assert mock_jwt.call_args.args[0] == {"sub": "1", "role": "admin"}

    async def test_email_inconnu_leve_401(self):
        db = make_async_db()
        db.execute = AsyncMock(return_value=_result(None))

        with pytest.raises(HTTPException) as exc_info:
            await service.login(db, _login_payload(email="ghost@test.com"))

        assert exc_info.value.status_code == 401

    async def test_mauvais_mot_de_passe_leve_401(self):
        db = make_async_db()
        db.execute = AsyncMock(return_value=_result(make_admin()))

        with patch("pulse.modules.auth.service.verify_password", return_value=False):
            with pytest.raises(HTTPException) as exc_info:
                await service.login(db, _login_payload(password="wrong"))

        assert exc_info.value.status_code == 401

    async def test_compte_inactif_leve_403(self):
        db = make_async_db()
        db.execute = AsyncMock(return_value=_result(make_admin(is_active=False)))

        with patch("pulse.modules.auth.service.verify_password", return_value=True):
            with pytest.raises(HTTPException) as exc_info:
                await service.login(db, _login_payload())

        assert exc_info.value.status_code == 403


# ── change_password() ─────────────────────────────────────────────────────────

class TestChangePassword:
    async def test_succes(self):
        db = make_async_db()
        admin = make_admin()

        with patch("pulse.modules.auth.service.verify_password", return_value=True):
            with patch("pulse.modules.auth.service.hash_password", return_value="new_hash"):
                await service.change_password(db, admin, "old_password", "new_password")

        assert admin.hashed_password == "new_hash"
        db.commit.assert_called_once()

    async def test_mauvais_mot_de_passe_actuel_400(self):
        db = make_async_db()
        admin = make_admin()

        with patch("pulse.modules.auth.service.verify_password", return_value=False):
            with pytest.raises(HTTPException) as exc_info:
                await service.change_password(db, admin, "wrong", "new_password")

        assert exc_info.value.status_code == 400
        assert admin.hashed_password == "hashed_password"
