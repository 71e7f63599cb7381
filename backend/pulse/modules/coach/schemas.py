# pulse/modules/coach/schemas.py
from pydantic import BaseModel
from typing import Optional, List, Tuple

from pulse.shared.enums import Confidence, DayState, Direction, InsightSeverity, MaturityLevel, WeekState


class InsightOut(BaseModel):
    id:          str
    type:        str
    severity:    InsightSeverity
    message:     str
    detail:      Optional[str] = None
    suggestions: List[str] = []


class MomentumOut(BaseModel):
    direction:     Direction
    days_trending: int


class MaturityOut(BaseModel):
    level:            MaturityLevel
    days_of_data:     int
    consistency_rate: int


class VibeSignalsOut(BaseModel):
    momentum:            MomentumOut
    live_confidence:     Confidence
    week_confidence:     Confidence
    week_entry_count:    int
    day_state:           DayState
    week_state:          WeekState
    maturity:            MaturityOut
    participation_trend: Direction
    has_enough_data:     bool


class TeamInsightsOut(BaseModel):
    team_id:  int
    language: str
    signals:  Optional[VibeSignalsOut] = None
    insights: List[InsightOut]


class AngleScoreOut(BaseModel):
    angle:         str
    score:         float
    session_count: int


class CrossTeamOut(BaseModel):
    team_count:          int
    avg_vibe_score:      Optional[float] = None
    avg_wow_score:       Optional[float] = None
    weakest_angles:      List[AngleScoreOut]
    strongest_angles:    List[AngleScoreOut]
    participation_range: Optional[Tuple[int, int]] = None
    declining_teams:     List[str]
    attention_teams:     List[str]
    insights:            List[str] = []
