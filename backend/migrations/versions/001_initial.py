"""initial schema : pulse v1

Revision ID: 001_initial
Create Date: 18/10/2026
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = '001_initial'
down_revision = None

# Valeurs des Enums
ADMIN_ROLE = ('admin', 'super_admin')
BILLING_STATUS = ('none', 'pending', 'active', 'cancelled')
SESSION_STATUS = ('active', 'closed')
PRODUCT_TYPE = ('vibe', 'wow', 'shared')
BACKLOG_CATEGORY = ('ux', 'statements', 'analytics', 'integration', 'features')
BACKLOG_STATUS = ('review', 'exploring', 'decided')
BACKLOG_DECISION = ('building', 'not_doing')


def _enum(values, name):
    return postgresql.ENUM(*values, name=name, create_type=False)


def upgrade() -> None:
    # ── 1. Types ENUM (idempotent) ──
    enums = {
        "adminrole": ADMIN_ROLE,
        "billingstatus": BILLING_STATUS,
        "sessionstatus": SESSION_STATUS,
        "producttype": PRODUCT_TYPE,
        "backlogcategory": BACKLOG_CATEGORY,
        "backlogstatus": BACKLOG_STATUS,
        "backlogdecision": BACKLOG_DECISION,
    }

    for name, values in enums.items():
        vals_str = ", ".join([f"'{v}'" for v in values])
        op.execute(f"""
            DO $$
            BEGIN
                IF NOT EXISTS (SELECT 1 FROM pg_type WHERE typname = '{name}') THEN
                    CREATE TYPE {name} AS ENUM ({vals_str});
                END IF;
            END $$;
        """)

    # ── 2. Comptes ──
    op.create_table("admin_users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("email", sa.String, nullable=False),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("hashed_password", sa.String, nullable=False),
        sa.Column("role", _enum(ADMIN_ROLE, "adminrole"), nullable=False, server_default="admin"),
        sa.Column("is_active", sa.Boolean, default=True),
        sa.Column("subscription_tier", sa.String, nullable=False, server_default="free"),
        sa.Column("billing_status", _enum(BILLING_STATUS, "billingstatus"), nullable=False, server_default="none"),
        sa.Column("billing_period_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), onupdate=sa.func.now()),
    )
    op.create_index("ix_admin_users_email", "admin_users", ["email"], unique=True)

    # ── 3. Équipes ──
    op.create_table("teams",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("slug", sa.String, nullable=False),
        sa.Column("description", sa.String, nullable=True),
        sa.Column("owner_id", sa.Integer, sa.ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("expected_team_size", sa.Integer, nullable=True),
        sa.Column("tools_enabled", sa.JSON, nullable=False),
        sa.Column("vibe_average", sa.Float, nullable=True),
        sa.Column("vibe_previous_average", sa.Float, nullable=True),
        sa.Column("vibe_entry_count", sa.Integer, server_default="0"),
        sa.Column("wow_average", sa.Float, nullable=True),
        sa.Column("wow_previous_average", sa.Float, nullable=True),
        sa.Column("wow_session_count", sa.Integer, server_default="0"),
        sa.Column("participant_count", sa.Integer, server_default="0"),
        sa.Column("today_entries", sa.Integer, server_default="0"),
        sa.Column("metrics_updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), onupdate=sa.func.now()),
    )
    op.create_index("ix_teams_slug", "teams", ["slug"], unique=True)
    op.create_index("ix_teams_owner_id", "teams", ["owner_id"])

    op.create_table("participants",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("team_id", sa.Integer, sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("device_id", sa.String, nullable=False),
        sa.Column("nickname", sa.String, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("team_id", "device_id", name="uq_participant_team_device"),
    )
    op.create_index("ix_participants_team_id", "participants", ["team_id"])

    op.create_table("invite_links",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("team_id", sa.Integer, sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token_hash", sa.String, nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean, default=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_invite_links_team_id", "invite_links", ["team_id"])

    # ── 4. Vibe ──
    op.create_table("mood_entries",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("team_id", sa.Integer, sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("participant_id", sa.Integer, sa.ForeignKey("participants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("mood", sa.Integer, nullable=False),
        sa.Column("comment", sa.String, nullable=True),
        sa.Column("entry_date", sa.Date, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("participant_id", "entry_date", name="uq_mood_participant_day"),
        sa.CheckConstraint("mood BETWEEN 1 AND 5", name="ck_mood_range"),
    )
    op.create_index("ix_mood_entries_team_id", "mood_entries", ["team_id"])
    op.create_index("ix_mood_entries_participant_id", "mood_entries", ["participant_id"])
    op.create_index("ix_mood_entries_entry_date", "mood_entries", ["entry_date"])

    # ── 5. Way of Work ──
    op.create_table("wow_sessions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("team_id", sa.Integer, sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("session_code", sa.String(6), nullable=False),
        sa.Column("angle", sa.String, nullable=False),
        sa.Column("level", sa.String, nullable=False, server_default="shu"),
        sa.Column("title", sa.String, nullable=True),
        sa.Column("status", _enum(SESSION_STATUS, "sessionstatus"), nullable=False, server_default="active"),
        sa.Column("focus_area", sa.String, nullable=True),
        sa.Column("experiment", sa.String, nullable=True),
        sa.Column("experiment_owner", sa.String, nullable=True),
        sa.Column("followup_date", sa.Date, nullable=True),
        sa.Column("overall_score", sa.Float, nullable=True),
        sa.Column("participation_rate", sa.Float, nullable=True),
        sa.Column("created_by", sa.Integer, sa.ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_wow_sessions_session_code", "wow_sessions", ["session_code"], unique=True)
    op.create_index("ix_wow_sessions_team_id", "wow_sessions", ["team_id"])

    op.create_table("wow_responses",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("session_id", sa.Integer, sa.ForeignKey("wow_sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("device_id", sa.String, nullable=False),
        sa.Column("answers", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("session_id", "device_id", name="uq_wow_response_device"),
    )
    op.create_index("ix_wow_responses_session_id", "wow_responses", ["session_id"])

    # ── 6. Feedback ──
    op.create_table("feedback_links",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("team_id", sa.Integer, sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token_hash", sa.String, nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean, default=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_feedback_links_team_id", "feedback_links", ["team_id"])

    op.create_table("team_feedback",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("team_id", sa.Integer, sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("prompt_key", sa.String, nullable=False),
        sa.Column("response", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_team_feedback_team_id", "team_feedback", ["team_id"])

    # ── 7. Backlog public ──
    op.create_table("backlog_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("product", _enum(PRODUCT_TYPE, "producttype"), nullable=False),
        sa.Column("category", _enum(BACKLOG_CATEGORY, "backlogcategory"), nullable=False),
        sa.Column("status", _enum(BACKLOG_STATUS, "backlogstatus"), nullable=False, server_default="review"),
        sa.Column("decision", _enum(BACKLOG_DECISION, "backlogdecision"), nullable=True),
        sa.Column("title_nl", sa.String, nullable=False),
        sa.Column("title_en", sa.String, nullable=False),
        sa.Column("our_take_nl", sa.Text, nullable=True),
        sa.Column("our_take_en", sa.Text, nullable=True),
        sa.Column("rationale_nl", sa.Text, nullable=True),
        sa.Column("rationale_en", sa.Text, nullable=True),
        sa.Column("decided_at", sa.Date, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), onupdate=sa.func.now()),
    )
    op.create_index("ix_backlog_items_product", "backlog_items", ["product"])

    op.create_table("release_notes",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("product", _enum(PRODUCT_TYPE, "producttype"), nullable=False),
        sa.Column("version", sa.String, nullable=False),
        sa.Column("title_nl", sa.String, nullable=False),
        sa.Column("title_en", sa.String, nullable=False),
        sa.Column("description_nl", sa.Text, nullable=True),
        sa.Column("description_en", sa.Text, nullable=True),
        sa.Column("changes", sa.JSON, nullable=False),
        sa.Column("released_at", sa.Date, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_release_notes_product", "release_notes", ["product"])


def downgrade() -> None:
    tables = [
        "release_notes", "backlog_items",
        "team_feedback", "feedback_links",
        "wow_responses", "wow_sessions",
        "mood_entries", "invite_links", "participants",
        "teams", "admin_users",
    ]
    for table in tables:
        op.drop_table(table)

    enums = [
        "adminrole", "billingstatus", "sessionstatus", "producttype",
        "backlogcategory", "backlogstatus", "backlogdecision",
    ]
    for e in enums:
        op.execute(f"DROP TYPE IF EXISTS {e}")
