"""Base class for value objects (token payloads, profiles, results)."""

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Frozen, compared by value."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
