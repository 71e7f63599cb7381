import sys
from os.path import abspath, dirname
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

# Racine backend/ dans le path pour les imports de 'pulse'
sys.path.insert(0, abspath(dirname(dirname(__file__))))

from pulse.core.config import settings
from pulse.core.database import Base
# Import des modèles pour que Base.metadata soit peuplé
from pulse.shared.models import (
    AdminUser,
    Team, Participant, InviteLink,
    MoodEntry,
    WowSession, WowResponse,
    FeedbackLink, TeamFeedback,
    BacklogItem, ReleaseNote,
)

config = context.config

# Alembic tourne en synchrone : postgresql:// et non postgresql+asyncpg://
sync_url = settings.DATABASE_URL.replace("+asyncpg", "")
config.set_main_option("sqlalchemy.url", sync_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Mode offline : génère le SQL sans connexion."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
