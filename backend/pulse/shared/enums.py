# pulse/shared/enums.py
"""
Toutes les énumérations du projet Pulse.

Source unique de vérité pour les statuts, rôles et types.
Importé par les modèles, schemas, services et engine.
"""

from enum import Enum


class AdminRole(str, Enum):
    ADMIN       = "admin"         # Propriétaire d'équipes (scrum master, coach)
    SUPER_ADMIN = "super_admin"   # Opérateur Pulse, voit tout


class ToolKey(str, Enum):
    VIBE = "vibe"   # Check-in quotidien (humeur 1-5)
    WOW  = "wow"    # Sessions Way of Work (énoncés 1-5)


class SubscriptionTier(str, Enum):
    FREE             = "free"
    SCRUM_MASTER     = "scrum_master"
    AGILE_COACH      = "agile_coach"
    TRANSITION_COACH = "transition_coach"


class BillingStatus(str, Enum):
    NONE      = "none"
    PENDING   = "pending"
    ACTIVE    = "active"
    CANCELLED = "cancelled"   # Reste valable jusqu'à billing_period_end


class Trend(str, Enum):
    UP     = "up"
    DOWN   = "down"
    STABLE = "stable"


class TierChange(str, Enum):
    UPGRADE   = "upgrade"
    DOWNGRADE = "downgrade"
    UNCHANGED = "unchanged"


# ── Signaux Vibe quotidiens ───────────────────────────────

class Direction(str, Enum):
    RISING    = "rising"
    DECLINING = "declining"
    STABLE    = "stable"


class Confidence(str, Enum):
    LOW      = "low"        # < 30 % des check-ins attendus
    MODERATE = "moderate"
    HIGH     = "high"       # ≥ 60 %


class DayState(str, Enum):
    NO_SIGNAL       = "no_signal"
    SIGNAL_EMERGING = "signal_emerging"
    DAY_COMPLETE    = "day_complete"


class WeekState(str, Enum):
    WEEK_BUILDING = "week_building"
    WEEK_EMERGING = "week_emerging"
    WEEK_COMPLETE = "week_complete"


class MaturityLevel(str, Enum):
    NEW         = "new"           # Moins d'une semaine de données
    BUILDING    = "building"
    ESTABLISHED = "established"


# ── Way of Work ───────────────────────────────────────────

class WowAngle(str, Enum):
    SCRUM                = "scrum"
    FLOW                 = "flow"
    OWNERSHIP            = "ownership"
    COLLABORATION        = "collaboration"
    TECHNICAL_EXCELLENCE = "technical_excellence"
    REFINEMENT           = "refinement"
    PLANNING             = "planning"
    RETRO                = "retro"
    DEMO                 = "demo"
    OBEYA                = "obeya"
    DEPENDENCIES         = "dependencies"
    PSYCHOLOGICAL_SAFETY = "psychological_safety"
    DEVOPS               = "devops"
    STAKEHOLDER          = "stakeholder"
    LEADERSHIP           = "leadership"


class WowLevel(str, Enum):
    """Progression Shu-Ha-Ri : les énoncés d'un angle s'approfondissent à chaque niveau."""
    SHU = "shu"   # Les bases
    HA  = "ha"    # Adaptation volontaire
    RI  = "ri"    # Maîtrise, approche propre


class SessionStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class ComparisonStatus(str, Enum):
    IMPROVED  = "improved"
    DECLINED  = "declined"
    UNCHANGED = "unchanged"


# ── Backlog public & release notes ────────────────────────

class ProductType(str, Enum):
    VIBE   = "vibe"
    WOW    = "wow"
    SHARED = "shared"


class BacklogCategory(str, Enum):
    UX          = "ux"
    STATEMENTS  = "statements"
    ANALYTICS   = "analytics"
    INTEGRATION = "integration"
    FEATURES    = "features"


class BacklogStatus(str, Enum):
    REVIEW    = "review"
    EXPLORING = "exploring"
    DECIDED   = "decided"


class BacklogDecision(str, Enum):
    BUILDING  = "building"
    NOT_DOING = "not_doing"


# ── Insights ──────────────────────────────────────────────

class InsightSeverity(str, Enum):
    INFO      = "info"
    ATTENTION = "attention"
