# pulse/modules/billing/service.py
"""
Abonnement du compte : lecture, catalogue, changement de tier (super admin)
et gates de fonctionnalités utilisés par les autres modules.

Le fournisseur de paiement est hors périmètre : billing_status et
billing_period_end sont posés par un super admin.
"""
import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, List, Optional
from datetime import datetime, timezone

from pulse.engine.billing.tiers import (
    TIER_ORDER,
    TIERS,
    TierConfig,
    compare_tiers,
    effective_tier,
    is_paid_tier,
    next_tier,
    parse_tier,
    resolve_tier_config,
    tier_for_team_count,
)
from pulse.modules.billing.repository import BillingRepository
from pulse.modules.team.repository import TeamRepository
from pulse.shared.enums import AdminRole, BillingStatus, SubscriptionTier
from pulse.shared.models import AdminUser

logger = structlog.get_logger(__name__)

billing_repo = BillingRepository()
team_repo = TeamRepository()


# ── Résolution du tier d'un compte (utilisé par team, wow, coach) ──

def resolve_account_tier(admin: AdminUser, now: Optional[datetime] = None) -> SubscriptionTier:
    """Super admin → tier le plus haut. Sinon tier souscrit, si la facturation le couvre."""
    if admin.role == AdminRole.SUPER_ADMIN:
        return TIER_ORDER[-1]
    return effective_tier(
        admin.subscription_tier,
        admin.billing_status,
        admin.billing_period_end,
        now or datetime.now(timezone.utc),
    )


def resolve_account_config(admin: AdminUser) -> TierConfig:
    return resolve_tier_config(resolve_account_tier(admin))


def require_feature(admin: AdminUser, feature: str) -> None:
    """Lève PermissionError si le tier effectif n'inclut pas `feature` (coach, cross_team)."""
    features = resolve_account_config(admin).features
    if not getattr(features, feature, False):
        raise PermissionError("FEATURE_REQUIRES_UPGRADE")


def _tier_out(tier: SubscriptionTier) -> Dict:
    config = TIERS[tier]
    return {
        "tier":       tier,
        "price":      config.price,
        "trend_days": config.trend_days,
        "max_angles": config.max_angles,
        "wow_levels": list(config.wow_levels),
        "features":   _features_out(config),
    }


def _features_out(config: TierConfig) -> Dict:
    return {
        "max_teams":  config.features.max_teams,
        "coach":      config.features.coach,
        "cross_team": config.features.cross_team,
    }


class BillingService:

    def list_tiers(self) -> List[Dict]:
        return [_tier_out(t) for t in TIER_ORDER]

    async def get_account_billing(self, db: AsyncSession, admin: AdminUser) -> Dict:
        subscribed = parse_tier(admin.subscription_tier)
        applied = resolve_account_tier(admin)
        config = TIERS[applied]
        team_count = await team_repo.count_for_owner(db, admin.id)

        return {
            "tier":               subscribed,
            "effective_tier":     applied,
            "billing_status":     admin.billing_status or BillingStatus.NONE,
            "billing_period_end": admin.billing_period_end,
            "is_paid":            is_paid_tier(applied),
            "features":           _features_out(config),
            "trend_days":         config.trend_days,
            "team_count":         team_count,
            "next_tier":          next_tier(subscribed),
            "suggested_tier":     tier_for_team_count(team_count),
        }

    async def set_account_tier(
        self,
        db: AsyncSession,
        admin_id: int,
        tier: SubscriptionTier,
        billing_status: BillingStatus,
        billing_period_end: Optional[datetime] = None,
    ) -> Optional[Dict]:
        admin = await billing_repo.get_admin(db, admin_id)
        if not admin:
            return None

        previous = parse_tier(admin.subscription_tier)
        change = compare_tiers(previous, tier)

        await billing_repo.update_subscription(db, admin, {
            "subscription_tier":  tier.value,
            "billing_status":     billing_status,
            "billing_period_end": billing_period_end,
        })
        logger.info(
            "subscription_tier_changed",
            admin_id=admin_id, previous=previous.value, tier=tier.value, change=change.value,
        )

        return {
            "admin_id":       admin_id,
            "previous_tier":  previous,
            "tier":           tier,
            "change":         change,
            "billing_status": billing_status,
        }
