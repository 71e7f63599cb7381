# pulse/modules/wow/schemas.py
from pydantic import BaseModel, Field
from typing import Annotated, Optional, List, Dict
from datetime import date, datetime

from pulse.shared.enums import WowAngle, WowLevel, SessionStatus, ComparisonStatus, Trend


# ── Admin ─────────────────────────────────────────────────

class SessionCreateIn(BaseModel):
    angle: WowAngle
    level: WowLevel = WowLevel.SHU
    title: Optional[str] = Field(None, max_length=120)


class SessionCloseIn(BaseModel):
    """Résultat de clôture. Focus et expérience par défaut : ceux de la synthèse."""
    focus_area:       Optional[str] = Field(None, max_length=200)
    experiment:       Optional[str] = Field(None, max_length=500)
    experiment_owner: Optional[str] = Field(None, max_length=100)
    followup_date:    Optional[date] = None


class SessionOut(BaseModel):
    id:                 int
    team_id:            int
    session_code:       str
    angle:              WowAngle
    level:              WowLevel = WowLevel.SHU
    title:              Optional[str] = None
    status:             SessionStatus
    focus_area:         Optional[str] = None
    experiment:         Optional[str] = None
    experiment_owner:   Optional[str] = None
    followup_date:      Optional[date] = None
    overall_score:      Optional[float] = None
    participation_rate: Optional[float] = None
    response_count:     int = 0
    share_url:          str
    created_at:         Optional[datetime] = None
    closed_at:          Optional[datetime] = None


class AngleOut(BaseModel):
    id:          WowAngle
    label:       str
    description: str
    locked:      bool


class LevelOut(BaseModel):
    id:          WowLevel
    kanji:       str
    label:       str
    subtitle:    str
    description: str
    locked:      bool


class StatementScoreOut(BaseModel):
    statement_id:   str
    text:           str
    score:          float
    response_count: int
    distribution:   List[int]
    variance:       float


class SynthesisOut(BaseModel):
    angle:                WowAngle
    level:                WowLevel = WowLevel.SHU
    response_count:       int
    overall_score:        float
    disagreement_count:   int
    focus_area:           str
    suggested_experiment: str
    strengths:            List[StatementScoreOut]
    tensions:             List[StatementScoreOut]
    all_scores:           List[StatementScoreOut]


class StatementComparisonOut(BaseModel):
    statement_id: str
    text:         str
    score1:       float
    score2:       float
    change:       float
    status:       ComparisonStatus


class ComparisonOut(BaseModel):
    first_session_id:  int
    second_session_id: int
    statements:        List[StatementComparisonOut]
    improved_count:    int
    declined_count:    int
    unchanged_count:   int
    overall_change:    float


class AngleStatsOut(BaseModel):
    count:     int
    avg_score: Optional[float] = None


class WowStatsOut(BaseModel):
    team_id:                int
    total_sessions:         int
    active_sessions:        int
    closed_sessions:        int
    total_responses:        int
    average_score:          Optional[float] = None
    previous_average_score: Optional[float] = None
    trend:                  Optional[Trend] = None
    sessions_by_angle:      Dict[str, AngleStatsOut]
    recent_scores:          List[float]


# ── Public ────────────────────────────────────────────────

class PublicStatementOut(BaseModel):
    id:   str
    text: str


class PublicSessionOut(BaseModel):
    session_code: str
    team_name:    str
    angle:        WowAngle
    angle_label:  str
    level:        WowLevel = WowLevel.SHU
    title:        Optional[str] = None
    status:       SessionStatus
    statements:   List[PublicStatementOut]


class RespondIn(BaseModel):
    device_id: str = Field(..., min_length=8, max_length=128)
    answers:   Dict[str, Annotated[int, Field(ge=1, le=5)]] = Field(..., min_length=1)


class RespondOut(BaseModel):
    status:         str = "recorded"
    response_count: int


class OutcomeOut(BaseModel):
    session_code:     str
    angle:            WowAngle
    focus_area:       Optional[str] = None
    experiment:       Optional[str] = None
    experiment_owner: Optional[str] = None
    followup_date:    Optional[date] = None
    overall_score:    Optional[float] = None
    response_count:   int
