# pulse/modules/team/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict
from datetime import datetime, date
from pulse.shared.enums import ToolKey, Trend


# ── Création / édition ─────────────────────────────────────

class TeamCreateIn(BaseModel):
    name:               str = Field(..., min_length=2, max_length=100)
    description:        Optional[str] = Field(None, max_length=500)
    expected_team_size: Optional[int] = Field(None, ge=1, le=100)


class TeamUpdateIn(BaseModel):
    """Seuls les champs envoyés sont modifiés (expected_team_size=null efface la taille)."""
    name:               Optional[str] = Field(None, min_length=2, max_length=100)
    description:        Optional[str] = Field(None, max_length=500)
    expected_team_size: Optional[int] = Field(None, ge=1, le=100)
    tools_enabled:      Optional[List[ToolKey]] = Field(None, min_length=1)


# ── Métriques ─────────────────────────────────────────────

class ToolMetricsOut(BaseModel):
    average_score:          Optional[float] = None
    previous_average_score: Optional[float] = None
    trend:                  Optional[Trend] = None
    entry_count:            int = 0


class TeamMetricsOut(BaseModel):
    tools:                 Dict[str, ToolMetricsOut]
    participant_count:     int
    today_entries:         int
    effective_team_size:   int
    participation_percent: int = Field(..., ge=0, le=100)
    needs_attention:       bool


# ── Équipe ────────────────────────────────────────────────

class TeamOut(BaseModel):
    id:                 int
    name:               str
    slug:               str
    description:        Optional[str] = None
    owner_id:           Optional[int] = None
    expected_team_size: Optional[int] = None
    tools_enabled:      List[str]
    created_at:         Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class TeamWithMetricsOut(TeamOut):
    metrics:         TeamMetricsOut
    needs_attention: bool


class InviteLinkOut(BaseModel):
    """Le token brut n'est rendu qu'ici, seul son hash est stocké."""
    token: str
    url:   str


class TeamCreatedOut(BaseModel):
    team:   TeamOut
    invite: InviteLinkOut


class VibeDayOut(BaseModel):
    date:    date
    average: float
    count:   int


class VibeHistoryOut(BaseModel):
    team_id: int
    days:    int
    history: List[VibeDayOut]
