# tests/conftest.py
"""
Fixtures et factories partagées sur l'ensemble de la suite de tests.

Trois couches :
    1. Engine  : fonctions pures, aucun mock nécessaire
    2. Service : mocks AsyncSession + repos via pytest-mock
    3. Router  : httpx.AsyncClient + dependency_overrides FastAPI
"""
import pytest
from types import SimpleNamespace
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.main import app
from pulse.core.database import get_db
from pulse.shared.deps import get_current_admin, get_current_super_admin
from pulse.shared.enums import (
    AdminRole,
    BacklogCategory,
    BacklogStatus,
    BillingStatus,
    ProductType,
    SessionStatus,
)


# ── Factories de modèles ORM (SimpleNamespace, sans ORM) ──────────────

def make_admin(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "email": "coach@test.com",
        "name": "Test Coach",
        "hashed_password": "hashed_password",
        "role": AdminRole.ADMIN,
        "is_active": True,
        "subscription_tier": "free",
        "billing_status": BillingStatus.NONE,
        "billing_period_end": None,
        "created_at": datetime(2025, 1, 1),
        "updated_at": datetime(2025, 1, 1),
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_paid_admin(tier: str = "agile_coach", **kwargs) -> SimpleNamespace:
    """Admin avec abonnement payant actif."""
    return make_admin(subscription_tier=tier, billing_status=BillingStatus.ACTIVE, **kwargs)


def make_team(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "name": "Alpha Squad",
        "slug": "alpha-squad",
        "description": None,
        "owner_id": 1,
        "expected_team_size": 5,
        "tools_enabled": ["vibe", "wow"],
        # Cache métriques
        "vibe_average": None,
        "vibe_previous_average": None,
        "vibe_entry_count": 0,
        "wow_average": None,
        "wow_previous_average": None,
        "wow_session_count": 0,
        "participant_count": 0,
        "today_entries": 0,
        "metrics_updated_at": None,
        "created_at": datetime(2025, 1, 1),
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_participant(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "team_id": 1,
        "device_id": "device-0001",
        "nickname": None,
        "created_at": datetime(2025, 1, 1),
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_mood_entry(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "team_id": 1,
        "participant_id": 1,
        "mood": 4,
        "comment": None,
        "entry_date": date(2025, 3, 10),
        "created_at": datetime(2025, 3, 10, 9, 0),
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_wow_session(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "team_id": 1,
        "session_code": "ABC234",
        "angle": "scrum",
        "level": "shu",
        "title": None,
        "status": SessionStatus.ACTIVE,
        "focus_area": None,
        "experiment": None,
        "experiment_owner": None,
        "followup_date": None,
        "overall_score": None,
        "participation_rate": None,
        "created_by": 1,
        "created_at": datetime(2025, 3, 1, tzinfo=timezone.utc),
        "closed_at": None,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_feedback_link(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "team_id": 1,
        "token_hash": "hash",
        "is_active": True,
        "expires_at": None,
        "created_at": datetime(2025, 1, 1),
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_team_feedback(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "team_id": 1,
        "prompt_key": "helps_collaboration",
        "response": "Pairing on tricky stories.",
        "created_at": datetime(2025, 3, 10, 9, 0),
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_backlog_item(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "product": ProductType.VIBE,
        "category": BacklogCategory.FEATURES,
        "status": BacklogStatus.REVIEW,
        "decision": None,
        "title_nl": "Slack-integratie",
        "title_en": "Slack integration",
        "our_take_nl": None,
        "our_take_en": None,
        "rationale_nl": None,
        "rationale_en": None,
        "decided_at": None,
        "created_at": datetime(2025, 1, 1),
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def make_release_note(**kwargs) -> SimpleNamespace:
    defaults = {
        "id": 1,
        "product": ProductType.SHARED,
        "version": "1.2.0",
        "title_nl": "Nieuwe inzichten",
        "title_en": "New insights",
        "description_nl": None,
        "description_en": None,
        "changes": [{"nl": "Trendpijlen", "en": "Trend arrows"}],
        "released_at": date(2025, 2, 1),
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


# ── DB mock factory ───────────────────────────────────────────────────────────

def make_async_db() -> AsyncMock:
    """
    AsyncMock simulant une AsyncSession SQLAlchemy.
    refresh() attribue un id aux objets qui n'en ont pas encore.
    """
    db = AsyncMock(spec=AsyncSession)
    added_objects: list = []

    db.add = MagicMock(side_effect=added_objects.append)
    db.add_all = MagicMock(side_effect=added_objects.extend)

    async def refresh_side_effect(obj):
        if not getattr(obj, "id", None):
            obj.id = 1

    db.refresh = AsyncMock(side_effect=refresh_side_effect)
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.added = added_objects

    return db


# ── Fixtures HTTP (httpx.AsyncClient + dependency_overrides) ─────────────────

@pytest.fixture
async def client():
    """Client sans auth : endpoints publics (check-in, réponses WoW, feedback)."""
    mock_db = AsyncMock(spec=AsyncSession)
    app.dependency_overrides[get_db] = lambda: mock_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def admin_client():
    """Client authentifié comme administrateur (tier free)."""
    mock_db = AsyncMock(spec=AsyncSession)
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_admin] = lambda: make_admin()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def super_admin_client():
    """Client authentifié comme super administrateur."""
    mock_db = AsyncMock(spec=AsyncSession)
    super_admin = make_admin(id=99, role=AdminRole.SUPER_ADMIN)
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_admin] = lambda: super_admin
    app.dependency_overrides[get_current_super_admin] = lambda: super_admin
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
