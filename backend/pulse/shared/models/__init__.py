# pulse/shared/models/__init__.py
"""
Point d'entrée unique pour tous les modèles SQLAlchemy.

TOUJOURS importer les modèles depuis ce fichier :
  from pulse.shared.models import Team, MoodEntry, ...

→ Garantit que tous les modèles sont enregistrés dans Base.metadata
  avant la création des tables (Alembic, create_all).
"""

from pulse.shared.models.Admin    import AdminUser
from pulse.shared.models.Team     import Team, Participant, InviteLink
from pulse.shared.models.Vibe     import MoodEntry
from pulse.shared.models.Wow      import WowSession, WowResponse
from pulse.shared.models.Feedback import FeedbackLink, TeamFeedback
from pulse.shared.models.Backlog  import BacklogItem, ReleaseNote

__all__ = [
    # Admin
    "AdminUser",
    # Team
    "Team", "Participant", "InviteLink",
    # Vibe
    "MoodEntry",
    # Way of Work
    "WowSession", "WowResponse",
    # Feedback
    "FeedbackLink", "TeamFeedback",
    # Backlog
    "BacklogItem", "ReleaseNote",
]
