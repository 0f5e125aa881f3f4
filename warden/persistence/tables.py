"""SQLAlchemy table definitions for Warden.

Core tables only; rows are mapped to the immutable domain models by hand
(see ``mappers``).
"""

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE (owned by user management, read by the auth core)
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("email", String(255), nullable=False),
    Column("username", String(255), nullable=True),
    Column("first_name", String(255), nullable=True),
    Column("last_name", String(255), nullable=True),
    Column("avatar_url", Text, nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    UniqueConstraint("email", name="uq_users_email"),
    UniqueConstraint("username", name="uq_users_username"),
)

# ============================================================================
# AUTHENTICATIONS TABLE (one row per user and provider)
# ============================================================================
authentications_table = Table(
    "authentications",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("provider", String(32), nullable=False),
    Column("refresh_token", Text, nullable=True),
    Column("metadata", JSONB, nullable=False, server_default=text("'{}'::jsonb")),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    Column(
        "last_accessed_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("NOW()"),
    ),
    UniqueConstraint("user_id", "provider", name="uq_authentications_user_provider"),
)

PENDING_USERNAME_PATH = ("local", "temporary_info", "username")
EMAIL_VERIFIED_PATH = ("local", "is_email_verified")

Index("idx_authentications_user_id", authentications_table.c.user_id)

# A username reserved by an unverified sign-up cannot be reserved twice
Index(
    "uq_authentications_pending_username",
    authentications_table.c["metadata"][PENDING_USERNAME_PATH].astext,
    unique=True,
    postgresql_where=text(
        "provider = 'local' AND (metadata #>> '{local,is_email_verified}') = 'false'"
    ),
)

# ============================================================================
# EVENTS TABLE (append-only audit log and outbox)
# ============================================================================
events_table = Table(
    "events",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("name", String(128), nullable=False),
    Column("user_id", UUID, nullable=False),
    Column("model_id", UUID, nullable=False),
    Column("metadata", JSONB, nullable=False, server_default=text("'{}'::jsonb")),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    Column("dispatched_at", TIMESTAMP(timezone=True), nullable=True),
)

Index("idx_events_user_id", events_table.c.user_id)
Index("idx_events_name_user_id", events_table.c.name, events_table.c.user_id)
Index(
    "idx_events_undispatched",
    events_table.c.created_at,
    postgresql_where=events_table.c.dispatched_at.is_(None),
)

# Constraints whose violation means "username already taken"
USERNAME_CONSTRAINTS = ("uq_users_username", "uq_authentications_pending_username")
