# pulse/modules/auth/schemas.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from typing import Optional
from datetime import datetime
from pulse.shared.enums import AdminRole, BillingStatus


# ── Register ──────────────────────────────────────────────

class RegisterAdminIn(BaseModel):
    """Inscription d'un propriétaire d'équipes (tier free par défaut)."""
    email:    EmailStr
    password: str = Field(..., min_length=8)
    name:     str = Field(..., min_length=2)


# ── Login ─────────────────────────────────────────────────

class LoginIn(BaseModel):
    email:    EmailStr
    password: str


# ── Tokens ───────────────────────────────────────────────

class TokenOut(BaseModel):
    access_token: str
    token_type:   str = "bearer"
    role:         AdminRole
    admin_id:     int


# ── Profil ────────────────────────────────────────────────

class AdminOut(BaseModel):
    id:                 int
    email:              str
    name:               str
    role:               AdminRole
    subscription_tier:  str
    billing_status:     BillingStatus
    billing_period_end: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


# ── Mot de passe ──────────────────────────────────────────

class ChangePasswordIn(BaseModel):
    current_password: str
    new_password:     str = Field(..., min_length=8)

    @model_validator(mode="after")
    def passwords_differ(self):
        if self.current_password == self.new_password:
            raise ValueError("Le nouveau mot de passe doit être différent.")
        return self
