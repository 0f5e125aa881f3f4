"""Strongly typed identifiers for Warden domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
AuthenticationId = NewType("AuthenticationId", UUID)
EventId = NewType("EventId", UUID)
