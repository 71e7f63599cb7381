# tests/modules/billing/test_service.py
"""
Tests unitaires pour modules.billing.service

Couverture :
    resolve_account_tier : super admin → tier le plus haut, facturation inactive → free,
                           résiliation dans / hors période payée
    require_feature      : coach refusé en free, cross_team réservé au transition_coach
    BillingService :
        list_tiers          : ordre croissant
        get_account_billing : tier souscrit vs effectif, tier suggéré
        set_account_tier    : upgrade / downgrade, compte introuvable → None
"""
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

from pulse.modules.billing.service import BillingService, require_feature, resolve_account_tier
from pulse.shared.enums import AdminRole, BillingStatus, SubscriptionTier, TierChange
from tests.conftest import make_admin, make_async_db, make_paid_admin

pytestmark = pytest.mark.service

service = BillingService()

NOW = datetime(2025, 3, 14, tzinfo=timezone.utc)


# ── resolve_account_tier ──────────────────────────────────────────────────────

class TestResolveAccountTier:
    def test_super_admin(self):
        admin = make_admin(role=AdminRole.SUPER_ADMIN)
        assert resolve_account_tier(admin, NOW) == SubscriptionTier.TRANSITION_COACH

    def test_abonnement_actif(self):
        assert resolve_account_tier(make_paid_admin("scrum_master"), NOW) == SubscriptionTier.SCRUM_MASTER

    def test_paiement_en_attente(self):
        admin = make_admin(subscription_tier="agile_coach", billing_status=BillingStatus.PENDING)
        assert resolve_account_tier(admin, NOW) == SubscriptionTier.FREE

    def test_resilie_dans_la_periode(self):
        admin = make_admin(
            subscription_tier="agile_coach",
            billing_status=BillingStatus.CANCELLED,
            billing_period_end=NOW + timedelta(days=5),
        )
        assert resolve_account_tier(admin, NOW) == SubscriptionTier.AGILE_COACH

    def test_resilie_periode_terminee(self):
        admin = make_admin(
            subscription_tier="agile_coach",
            billing_status=BillingStatus.CANCELLED,
            billing_period_end=NOW - timedelta(days=1),
        )
        assert resolve_account_tier(admin, NOW) == SubscriptionTier.FREE

    def test_tier_inconnu_en_base(self):
        admin = make_admin(subscription_tier="enterprise", billing_status=BillingStatus.ACTIVE)
        assert resolve_account_tier(admin, NOW) == SubscriptionTier.FREE


# ── require_feature ───────────────────────────────────────────────────────────

class TestRequireFeature:
    def test_coach_refuse_en_free(self):
        with pytest.raises(PermissionError, match="FEATURE_REQUIRES_UPGRADE"):
            require_feature(make_admin(), "coach")

    def test_coach_autorise_en_scrum_master(self):
        require_feature(make_paid_admin("scrum_master"), "coach")

    def test_cross_team_refuse_en_agile_coach(self):
        with pytest.raises(PermissionError):
            require_feature(make_paid_admin("agile_coach"), "cross_team")

    def test_cross_team_autorise_en_transition_coach(self):
        require_feature(make_paid_admin("transition_coach"), "cross_team")


# ── BillingService ────────────────────────────────────────────────────────────

class TestBillingService:
    def test_catalogue_ordonne(self):
        tiers = service.list_tiers()
        assert [t["tier"] for t in tiers] == [
            SubscriptionTier.FREE,
            SubscriptionTier.SCRUM_MASTER,
            SubscriptionTier.AGILE_COACH,
            SubscriptionTier.TRANSITION_COACH,
        ]
        assert tiers[0]["price"] == "0.00"
        assert tiers[0]["features"]["max_teams"] == 1

    async def test_etat_abonnement_pending(self, mocker):
        mocker.patch("pulse.modules.billing.service.team_repo.count_for_owner", AsyncMock(return_value=4))
        admin = make_admin(subscription_tier="scrum_master", billing_status=BillingStatus.PENDING)

        result = await service.get_account_billing(make_async_db(), admin)

        assert result["tier"] == SubscriptionTier.SCRUM_MASTER
        assert result["effective_tier"] == SubscriptionTier.FREE
        assert result["is_paid"] is False
        assert result["trend_days"] == 7
        assert result["next_tier"] == SubscriptionTier.AGILE_COACH
        assert result["suggested_tier"] == SubscriptionTier.AGILE_COACH

    async def test_etat_abonnement_tier_max(self, mocker):
        mocker.patch("pulse.modules.billing.service.team_repo.count_for_owner", AsyncMock(return_value=1))
        result = await service.get_account_billing(make_async_db(), make_paid_admin("transition_coach"))
        assert result["is_paid"] is True
        assert result["features"]["cross_team"] is True
        assert result["next_tier"] is None
        assert result["suggested_tier"] == SubscriptionTier.FREE

    async def test_upgrade(self, mocker):
        mocker.patch("pulse.modules.billing.service.billing_repo.get_admin", AsyncMock(return_value=make_admin(id=5)))
        mock_update = mocker.patch("pulse.modules.billing.service.billing_repo.update_subscription", AsyncMock())

        result = await service.set_account_tier(
            make_async_db(), 5, SubscriptionTier.AGILE_COACH, BillingStatus.ACTIVE
        )

        assert result["change"] == TierChange.UPGRADE
        assert result["previous_tier"] == SubscriptionTier.FREE
        assert mock_update.call_args.args[2] == {
            "subscription_tier": "agile_coach",
            "billing_status": BillingStatus.ACTIVE,
            "billing_period_end": None,
        }

    async def test_downgrade(self, mocker):
        mocker.patch(
            "pulse.modules.billing.service.billing_repo.get_admin",
            AsyncMock(return_value=make_paid_admin("transition_coach", id=5)),
        )
        mocker.patch("pulse.modules.billing.service.billing_repo.update_subscription", AsyncMock())
        result = await service.set_account_tier(
            make_async_db(), 5, SubscriptionTier.SCRUM_MASTER, BillingStatus.ACTIVE
        )
        assert result["change"] == TierChange.DOWNGRADE

    async def test_compte_introuvable(self, mocker):
        mocker.patch("pulse.modules.billing.service.billing_repo.get_admin", AsyncMock(return_value=None))
        result = await service.set_account_tier(
            make_async_db(), 404, SubscriptionTier.SCRUM_MASTER, BillingStatus.ACTIVE
        )
        assert result is None
