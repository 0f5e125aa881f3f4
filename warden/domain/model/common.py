"""Base model for users, authentication records and events."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Immutable domain entity.

    State changes produce a new instance via ``model_copy(update=...)``;
    repositories persist the copy inside a transaction.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
