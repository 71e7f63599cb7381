# pulse/shared/models/Feedback.py
"""
Feedback anonyme entre pairs : lien tokenisé à durée limitée.
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from pulse.core.database import Base


class FeedbackLink(Base):
    __tablename__ = "feedback_links"

    id         = Column(Integer, primary_key=True, index=True)
    team_id    = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String, nullable=False, unique=True)
    is_active  = Column(Boolean, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class TeamFeedback(Base):
    __tablename__ = "team_feedback"

    id         = Column(Integer, primary_key=True, index=True)
    team_id    = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    prompt_key = Column(String, nullable=False)
    response   = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<TeamFeedback id={self.id} team={self.team_id} prompt={self.prompt_key}>"
