# pulse/shared/models/Wow.py
"""
Way of Work : sessions d'énoncés notés 1-5 par l'équipe.

Une session = un angle (scrum, flow, ...) à un niveau Shu-Ha-Ri + un code public
à 6 caractères. Le niveau fixe les énoncés présentés aux participants.
À la clôture : overall_score et participation_rate sont figés sur la session,
ainsi que le résultat (focus, expérience, responsable, date de suivi).
"""
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, JSON, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pulse.core.database import Base
from pulse.shared.enums import SessionStatus, WowLevel


class WowSession(Base):
    __tablename__ = "wow_sessions"

    id           = Column(Integer, primary_key=True, index=True)
    team_id      = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    session_code = Column(String(6), unique=True, nullable=False, index=True)
    angle        = Column(String, nullable=False)
    level        = Column(String, nullable=False, default=WowLevel.SHU.value, server_default=WowLevel.SHU.value)
    title        = Column(String, nullable=True)
    status       = Column(
        SAEnum(SessionStatus, name="sessionstatus", values_callable=lambda e: [m.value for m in e]),
        default=SessionStatus.ACTIVE, nullable=False,
    )

    # ── Résultat de clôture ──────────────────────────────────
    focus_area         = Column(String, nullable=True)
    experiment         = Column(String, nullable=True)
    experiment_owner   = Column(String, nullable=True)
    followup_date      = Column(Date, nullable=True)
    overall_score      = Column(Float, nullable=True)   # NULL si < 3 réponses
    participation_rate = Column(Float, nullable=True)   # 0-1, NULL sans taille déclarée

    created_by = Column(Integer, ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    closed_at  = Column(DateTime(timezone=True), nullable=True)

    # ── Relations ────────────────────────────────────────────
    team      = relationship("Team", back_populates="wow_sessions")
    responses = relationship("WowResponse", back_populates="session", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<WowSession id={self.id} code={self.session_code} angle={self.angle}>"


class WowResponse(Base):
    """answers : {statement_id: score 1-5}"""
    __tablename__ = "wow_responses"
    __table_args__ = (UniqueConstraint("session_id", "device_id", name="uq_wow_response_device"),)

    id         = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("wow_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    device_id  = Column(String, nullable=False)
    answers    = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    session = relationship("WowSession", back_populates="responses")
