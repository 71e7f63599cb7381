# pulse/modules/vibe/schemas.py
from pydantic import BaseModel, Field
from typing import Optional, List


class CheckInIn(BaseModel):
    """Check-in anonyme : slug + token du lien d'invitation."""
    team_slug: str = Field(..., min_length=1)
    token:     str = Field(..., min_length=1)
    device_id: str = Field(..., min_length=8, max_length=128)
    mood:      int = Field(..., ge=1, le=5)
    comment:   Optional[str] = Field(None, max_length=500)
    nickname:  Optional[str] = Field(None, max_length=50)


class TodayStatsOut(BaseModel):
    average:      Optional[float] = None
    count:        int
    distribution: List[int]   # [nb de 1, ..., nb de 5]


class CheckInOut(BaseModel):
    status:    str = "recorded"
    team_name: str
    streak:    int
    today:     TodayStatsOut


class CheckInStatusOut(BaseModel):
    team_name:        str
    checked_in_today: bool
    streak:           int
