"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from warden.domain.model import Authentication, AuthMetadata, BaseEvent, User, parse_event
from warden.domain.value import AuthenticationId, AuthProvider, UserId


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=UserId(_uuid(row["id"])),
        email=row["email"],
        username=row.get("username"),
        first_name=row.get("first_name"),
        last_name=row.get("last_name"),
        avatar_url=row.get("avatar_url"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row.get("deleted_at"),
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return user.model_dump()


def row_to_authentication(row: Dict[str, Any]) -> Authentication:
    """Convert database row to Authentication domain model.

    Args:
        row: Database row as dict

    Returns:
        Authentication domain model
    """
    return Authentication(
        id=AuthenticationId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        provider=AuthProvider(row["provider"]),
        refresh_token=row.get("refresh_token"),
        metadata=AuthMetadata.model_validate(row.get("metadata") or {}),
        created_at=row["created_at"],
        last_accessed_at=row["last_accessed_at"],
    )


def authentication_to_dict(authentication: Authentication) -> Dict[str, Any]:
    """Convert Authentication domain model to database dict.

    Only the metadata keys that are set are stored, so the jsonb document
    holds a single provider key.
    """
    return {
        "id": authentication.id,
        "user_id": authentication.user_id,
        "provider": authentication.provider.value,
        "refresh_token": authentication.refresh_token,
        "metadata": authentication.metadata.model_dump(mode="json", exclude_none=True),
        "created_at": authentication.created_at,
        "last_accessed_at": authentication.last_accessed_at,
    }


def row_to_event(row: Dict[str, Any]) -> BaseEvent:
    """Convert database row to the matching event variant."""
    return parse_event(
        {
            "id": _uuid(row["id"]),
            "name": row["name"],
            "user_id": _uuid(row["user_id"]),
            "model_id": _uuid(row["model_id"]),
            "metadata": row.get("metadata") or {},
            "created_at": row["created_at"],
        }
    )


def event_to_dict(event: BaseEvent) -> Dict[str, Any]:
    """Convert an event to database dict (without the dispatch stamp)."""
    return {
        "id": event.id,
        "name": event.event_name.value,
        "user_id": event.user_id,
        "model_id": event.model_id,
        "metadata": getattr(event, "metadata").model_dump(mode="json"),
        "created_at": event.created_at,
    }
