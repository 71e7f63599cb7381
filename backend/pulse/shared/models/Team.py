# pulse/shared/models/Team.py
"""
Équipe, participants anonymes et liens d'invitation.

Colonnes métriques sur Team (cache dénormalisé) :
  - vibe_average / vibe_previous_average : moyennes des deux fenêtres de 7 jours
  - wow_average  / wow_previous_average  : moyennes des fenêtres de sessions
  - participant_count, today_entries     : compteurs de participation
  - metrics_updated_at                   : TTL guard, remis à NULL à chaque
                                           nouvelle saisie ou reset
Structure et calcul : modules/team/service.py + engine/metrics/team_metrics.py
"""
from sqlalchemy import Column, Integer, String, Boolean, Float, DateTime, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pulse.core.database import Base


class Team(Base):
    __tablename__ = "teams"

    id          = Column(Integer, primary_key=True, index=True)
    name        = Column(String, nullable=False)
    slug        = Column(String, unique=True, nullable=False, index=True)
    description = Column(String, nullable=True)

    # NULL = équipe orpheline (compte supprimé), jamais listée
    owner_id    = Column(Integer, ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Taille déclarée par l'admin (1-100), prioritaire sur le nombre détecté
    expected_team_size = Column(Integer, nullable=True)
    tools_enabled      = Column(JSON, nullable=False, default=lambda: ["vibe", "wow"])

    # ── Cache métriques ──────────────────────────────────────
    vibe_average          = Column(Float, nullable=True)
    vibe_previous_average = Column(Float, nullable=True)
    vibe_entry_count      = Column(Integer, default=0)
    wow_average           = Column(Float, nullable=True)
    wow_previous_average  = Column(Float, nullable=True)
    wow_session_count     = Column(Integer, default=0)
    participant_count     = Column(Integer, default=0)
    today_entries         = Column(Integer, default=0)
    metrics_updated_at    = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # ── Relations ────────────────────────────────────────────
    owner        = relationship("AdminUser", back_populates="teams")
    participants = relationship("Participant", back_populates="team", cascade="all, delete-orphan")
    invite_links = relationship("InviteLink", back_populates="team", cascade="all, delete-orphan")
    mood_entries = relationship("MoodEntry", back_populates="team", cascade="all, delete-orphan")
    wow_sessions = relationship("WowSession", back_populates="team", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Team id={self.id} slug={self.slug}>"


class Participant(Base):
    """Membre anonyme : identifié par le device_id du navigateur."""
    __tablename__ = "participants"
    __table_args__ = (UniqueConstraint("team_id", "device_id", name="uq_participant_team_device"),)

    id        = Column(Integer, primary_key=True, index=True)
    team_id   = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    device_id = Column(String, nullable=False)
    nickname  = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    team         = relationship("Team", back_populates="participants")
    mood_entries = relationship("MoodEntry", back_populates="participant", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Participant id={self.id} team={self.team_id}>"


class InviteLink(Base):
    """Lien de check-in, seul le SHA-256 du token est stocké."""
    __tablename__ = "invite_links"

    id         = Column(Integer, primary_key=True, index=True)
    team_id    = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String, nullable=False, unique=True)
    is_active  = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    team = relationship("Team", back_populates="invite_links")
