# engine/billing/tiers.py
"""
Abonnements par compte : table statique, immuable, ZÉRO accès DB.

Un abonnement couvre toutes les équipes du compte. L'ordre de TIER_ORDER
sert aux comparaisons upgrade / downgrade. Un tier inconnu est résolu
comme "free" (jamais d'exception sur une valeur stockée en base).
"""
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from pulse.shared.enums import BillingStatus, SubscriptionTier, TierChange, WowLevel


@dataclass(frozen=True)
class TierFeatures:
    max_teams: int
    coach: bool
    cross_team: bool


@dataclass(frozen=True)
class TierConfig:
    features: TierFeatures
    price: str          # Montant mensuel en EUR, format "14.99"
    trend_days: int     # Profondeur de l'historique Vibe consultable
    max_angles: int     # Angles WoW accessibles, dans l'ordre du catalogue
    wow_levels: Tuple[WowLevel, ...]   # Niveaux Shu-Ha-Ri ouverts


ALL_LEVELS = (WowLevel.SHU, WowLevel.HA, WowLevel.RI)

TIER_ORDER = (
    SubscriptionTier.FREE,
    SubscriptionTier.SCRUM_MASTER,
    SubscriptionTier.AGILE_COACH,
    SubscriptionTier.TRANSITION_COACH,
)

TIERS: Mapping[SubscriptionTier, TierConfig] = MappingProxyType({
    SubscriptionTier.FREE: TierConfig(
        features=TierFeatures(max_teams=1, coach=False, cross_team=False),
        price="0.00", trend_days=7, max_angles=5, wow_levels=(WowLevel.SHU,),
    ),
    SubscriptionTier.SCRUM_MASTER: TierConfig(
        features=TierFeatures(max_teams=3, coach=True, cross_team=False),
        price="14.99", trend_days=30, max_angles=15, wow_levels=ALL_LEVELS,
    ),
    SubscriptionTier.AGILE_COACH: TierConfig(
        features=TierFeatures(max_teams=10, coach=True, cross_team=False),
        price="29.99", trend_days=30, max_angles=15, wow_levels=ALL_LEVELS,
    ),
    SubscriptionTier.TRANSITION_COACH: TierConfig(
        features=TierFeatures(max_teams=25, coach=True, cross_team=True),
        price="59.99", trend_days=30, max_angles=15, wow_levels=ALL_LEVELS,
    ),
})

TierLike = Union[SubscriptionTier, str, None]


def parse_tier(tier: TierLike) -> SubscriptionTier:
    """Valeur brute (enum, texte, None) → SubscriptionTier ; inconnu → FREE."""
    if isinstance(tier, SubscriptionTier):
        return tier
    try:
        return SubscriptionTier(tier)
    except ValueError:
        return SubscriptionTier.FREE


def resolve_tier_config(tier: TierLike) -> TierConfig:
    return TIERS[parse_tier(tier)]


def resolve_tier_features(tier: TierLike) -> TierFeatures:
    return TIERS[parse_tier(tier)].features


def tier_index(tier: TierLike) -> int:
    return TIER_ORDER.index(parse_tier(tier))


def compare_tiers(current: TierLike, target: TierLike) -> TierChange:
    diff = tier_index(target) - tier_index(current)
    if diff > 0:
        return TierChange.UPGRADE
    if diff < 0:
        return TierChange.DOWNGRADE
    return TierChange.UNCHANGED


def is_paid_tier(tier: TierLike) -> bool:
    return parse_tier(tier) != SubscriptionTier.FREE


def next_tier(tier: TierLike) -> Optional[SubscriptionTier]:
    idx = tier_index(tier)
    if idx >= len(TIER_ORDER) - 1:
        return None
    return TIER_ORDER[idx + 1]


def tier_for_team_count(count: int) -> SubscriptionTier:
    """Plus petit tier couvrant `count` équipes (plafonné au tier le plus haut)."""
    for tier in TIER_ORDER:
        if count <= TIERS[tier].features.max_teams:
            return tier
    return TIER_ORDER[-1]


def effective_tier(
    tier: TierLike,
    billing_status: Optional[str],
    period_end: Optional[datetime],
    now: datetime,
) -> SubscriptionTier:
    """
    Tier réellement appliqué aux gates.
    Un tier payant ne vaut que si la facturation est active, ou résiliée
    mais encore dans la période payée.
    """
    resolved = parse_tier(tier)
    if resolved == SubscriptionTier.FREE:
        return resolved
    status = getattr(billing_status, "value", billing_status)
    if status == BillingStatus.ACTIVE.value:
        return resolved
    if status == BillingStatus.CANCELLED.value and period_end is not None and period_end > now:
        return resolved
    return SubscriptionTier.FREE
