# pulse/shared/models/Admin.py
"""
Compte administrateur : propriétaire d'équipes.

Un abonnement par compte couvre toutes ses équipes (voir engine/billing/tiers.py).
subscription_tier est stocké en texte libre : une valeur inconnue
(tier retiré, saisie manuelle) est résolue en "free" par l'engine.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pulse.core.database import Base
from pulse.shared.enums import AdminRole, BillingStatus, SubscriptionTier


class AdminUser(Base):
    __tablename__ = "admin_users"

    id              = Column(Integer, primary_key=True, index=True)
    email           = Column(String, unique=True, nullable=False, index=True)
    name            = Column(String, nullable=False)
    hashed_password = Column(String, nullable=False)
    role            = Column(
        SAEnum(AdminRole, name="adminrole", values_callable=lambda e: [m.value for m in e]),
        default=AdminRole.ADMIN, nullable=False,
    )
    is_active       = Column(Boolean, default=True)

    # ── Abonnement ───────────────────────────────────────────
    subscription_tier  = Column(String, default=SubscriptionTier.FREE.value, nullable=False)
    billing_status     = Column(
        SAEnum(BillingStatus, name="billingstatus", values_callable=lambda e: [m.value for m in e]),
        default=BillingStatus.NONE, nullable=False,
    )
    billing_period_end = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # ── Relations ────────────────────────────────────────────
    teams = relationship("Team", back_populates="owner")

    @property
    def is_super_admin(self) -> bool:
        return self.role == AdminRole.SUPER_ADMIN

    def __repr__(self):
        return f"<AdminUser id={self.id} email={self.email} tier={self.subscription_tier}>"
