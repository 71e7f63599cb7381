# pulse/modules/backlog/schemas.py
from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import date, datetime

from pulse.shared.enums import ProductType, BacklogCategory, BacklogStatus, BacklogDecision


# ── Backlog ───────────────────────────────────────────────

class BacklogItemIn(BaseModel):
    product:      ProductType
    category:     BacklogCategory
    status:       BacklogStatus = BacklogStatus.REVIEW
    decision:     Optional[BacklogDecision] = None
    title_nl:     str = Field(..., min_length=2, max_length=200)
    title_en:     str = Field(..., min_length=2, max_length=200)
    our_take_nl:  Optional[str] = None
    our_take_en:  Optional[str] = None
    rationale_nl: Optional[str] = None
    rationale_en: Optional[str] = None
    decided_at:   Optional[date] = None


class BacklogItemUpdateIn(BaseModel):
    product:      Optional[ProductType] = None
    category:     Optional[BacklogCategory] = None
    status:       Optional[BacklogStatus] = None
    decision:     Optional[BacklogDecision] = None
    title_nl:     Optional[str] = Field(None, min_length=2, max_length=200)
    title_en:     Optional[str] = Field(None, min_length=2, max_length=200)
    our_take_nl:  Optional[str] = None
    our_take_en:  Optional[str] = None
    rationale_nl: Optional[str] = None
    rationale_en: Optional[str] = None
    decided_at:   Optional[date] = None


class BacklogItemOut(BaseModel):
    id:           int
    product:      ProductType
    category:     BacklogCategory
    status:       BacklogStatus
    decision:     Optional[BacklogDecision] = None
    title_nl:     str
    title_en:     str
    our_take_nl:  Optional[str] = None
    our_take_en:  Optional[str] = None
    rationale_nl: Optional[str] = None
    rationale_en: Optional[str] = None
    decided_at:   Optional[date] = None
    created_at:   Optional[datetime] = None

    model_config = {"from_attributes": True}


# ── Release notes ─────────────────────────────────────────

class ReleaseNoteIn(BaseModel):
    product:        ProductType
    version:        str = Field(..., min_length=1, max_length=20)
    title_nl:       str = Field(..., min_length=2, max_length=200)
    title_en:       str = Field(..., min_length=2, max_length=200)
    description_nl: Optional[str] = None
    description_en: Optional[str] = None
    changes:        List[Dict[str, str]] = []
    released_at:    date


class ReleaseNoteUpdateIn(BaseModel):
    product:        Optional[ProductType] = None
    version:        Optional[str] = Field(None, min_length=1, max_length=20)
    title_nl:       Optional[str] = Field(None, min_length=2, max_length=200)
    title_en:       Optional[str] = Field(None, min_length=2, max_length=200)
    description_nl: Optional[str] = None
    description_en: Optional[str] = None
    changes:        Optional[List[Dict[str, str]]] = None
    released_at:    Optional[date] = None


class ReleaseNoteOut(BaseModel):
    id:             int
    product:        ProductType
    version:        str
    title_nl:       str
    title_en:       str
    description_nl: Optional[str] = None
    description_en: Optional[str] = None
    changes:        List[Dict[str, str]] = []
    released_at:    date

    model_config = {"from_attributes": True}
