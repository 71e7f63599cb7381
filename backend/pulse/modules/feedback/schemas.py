# pulse/modules/feedback/schemas.py
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Literal
from datetime import datetime

# Questions du formulaire anonyme
PromptKey = Literal["helps_collaboration", "gets_in_way", "awareness"]


class FeedbackLinkOut(BaseModel):
    token:      str
    url:        str
    expires_at: Optional[datetime] = None


class FeedbackSubmissionIn(BaseModel):
    prompt_key: PromptKey
    response:   str = Field(..., max_length=500)


class FeedbackSubmitIn(BaseModel):
    team_slug:   str = Field(..., min_length=1)
    token:       str = Field(..., min_length=1)
    submissions: List[FeedbackSubmissionIn] = Field(..., min_length=1)


class FeedbackSubmitOut(BaseModel):
    status: str = "recorded"
    count:  int


class FeedbackItemOut(BaseModel):
    id:         int
    prompt_key: str
    response:   str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class FeedbackGroupedOut(BaseModel):
    team_id: int
    total:   int
    groups:  Dict[str, List[FeedbackItemOut]]


class FeedbackLinkCheckOut(BaseModel):
    team_name: str
