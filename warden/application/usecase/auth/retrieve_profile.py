"""Retrieve profile use case."""

from datetime import datetime

from pydantic import BaseModel

from warden.domain.service import UserService
from warden.domain.value import UserId


class RetrieveProfileResponse(BaseModel):
    """Public profile of the signed-in user."""

    id: str
    email: str
    username: str | None
    first_name: str | None
    last_name: str | None
    avatar_url: str | None
    created_at: datetime


class RetrieveProfileUseCase:
    """Use case for reading the profile of the token's user."""

    def __init__(self, user_service: UserService) -> None:
        self.user_service = user_service

    async def execute(self, user_id: UserId) -> RetrieveProfileResponse:
        """Raises NotFoundError if the user no longer exists."""
        user = await self.user_service.get_by_id(user_id)
        return RetrieveProfileResponse(
            id=str(user.id),
            email=user.email,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            avatar_url=user.avatar_url,
            created_at=user.created_at,
        )
