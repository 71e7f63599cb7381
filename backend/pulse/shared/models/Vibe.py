# pulse/shared/models/Vibe.py
"""
Vibe : check-in quotidien (humeur 1-5).

Une seule entrée par participant et par jour (contrainte unique).
Alimente les moyennes 7 jours de engine/metrics/team_metrics.py.
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pulse.core.database import Base


class MoodEntry(Base):
    __tablename__ = "mood_entries"
    __table_args__ = (UniqueConstraint("participant_id", "entry_date", name="uq_mood_participant_day"),)

    id             = Column(Integer, primary_key=True, index=True)
    team_id        = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    participant_id = Column(Integer, ForeignKey("participants.id", ondelete="CASCADE"), nullable=False, index=True)

    mood       = Column(Integer, nullable=False)      # 1 à 5
    comment    = Column(String, nullable=True)
    entry_date = Column(Date, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # ── Relations ────────────────────────────────────────────
    team        = relationship("Team", back_populates="mood_entries")
    participant = relationship("Participant", back_populates="mood_entries")

    def __repr__(self):
        return f"<MoodEntry id={self.id} team={self.team_id} mood={self.mood}>"
