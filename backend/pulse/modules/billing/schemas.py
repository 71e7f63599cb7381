# pulse/modules/billing/schemas.py
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from pulse.shared.enums import SubscriptionTier, BillingStatus, TierChange, WowLevel


class TierFeaturesOut(BaseModel):
    max_teams:  int
    coach:      bool
    cross_team: bool


class TierOut(BaseModel):
    tier:       SubscriptionTier
    price:      str
    trend_days: int
    max_angles: int
    wow_levels: List[WowLevel]
    features:   TierFeaturesOut


class AccountBillingOut(BaseModel):
    tier:               SubscriptionTier   # Tier souscrit
    effective_tier:     SubscriptionTier   # Tier appliqué aux gates
    billing_status:     BillingStatus
    billing_period_end: Optional[datetime] = None
    is_paid:            bool
    features:           TierFeaturesOut
    trend_days:         int
    team_count:         int
    next_tier:          Optional[SubscriptionTier] = None
    suggested_tier:     SubscriptionTier   # Plus petit tier couvrant team_count


class SetTierIn(BaseModel):
    tier:               SubscriptionTier
    billing_status:     BillingStatus = BillingStatus.ACTIVE
    billing_period_end: Optional[datetime] = None


class SetTierOut(BaseModel):
    admin_id:       int
    previous_tier:  SubscriptionTier
    tier:           SubscriptionTier
    change:         TierChange
    billing_status: BillingStatus


class TierCatalogOut(BaseModel):
    tiers: List[TierOut]
