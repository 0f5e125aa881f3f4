"""Local sign-up use case."""

from uuid import uuid4

import logfire
from pydantic import BaseModel, Field, field_validator

from warden.domain.error import AlreadySignedUpError, UsernameTakenError
from warden.domain.model import (
    AuthMetadata,
    Authentication,
    LocalMetadata,
    TemporaryInfo,
    User,
)
from warden.domain.repository import TransactionManager
from warden.domain.service import EventService, PasswordHasher, UserService
from warden.domain.value import AuthenticationId, AuthProvider, EventName, UserId


class LocalSignUpRequest(BaseModel):
    """Local sign-up request."""

    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8, max_length=128)
    username: str | None = Field(default=None, min_length=1, max_length=255)
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    avatar_url: str | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class LocalSignUpResponse(BaseModel):
    """Local sign-up response. Credentials are sent by email, never returned."""

    user_id: str
    authentication_id: str


class LocalSignUpUseCase:
    """Use case for creating a pending local authentication record."""

    def __init__(
        self,
        transaction_manager: TransactionManager,
        user_service: UserService,
        password_hasher: PasswordHasher,
        event_service: EventService,
    ) -> None:
        """Initialize local sign-up use case.

        Args:
            transaction_manager: Transaction manager
            user_service: User domain service
            password_hasher: Credential hasher
            event_service: Event recorder
        """
        self.transaction_manager = transaction_manager
        self.user_service = user_service
        self.password_hasher = password_hasher
        self.event_service = event_service

    async def execute(self, request: LocalSignUpRequest) -> LocalSignUpResponse:
        """Create (or reuse) the user and a pending local record.

        Steps:
        1. Hash the password outside the transaction
        2. In one transaction: reject an existing local record, reject a
           taken username, create the user if needed, create the record and
           record ``AUTH_LOCAL_CREATED``
        3. Dispatch the event so the verification email goes out

        Raises:
            AlreadySignedUpError: If the email already has a local record
            UsernameTakenError: If another user holds the username
        """
        with logfire.span("local_sign_up", username=request.username):
            password_hash = await self.password_hasher.hash_async(request.password)

            async with self.transaction_manager.transaction() as tx:
                principal = await self.user_service.find_principal(tx, email=request.email)
                user = principal.user if principal else None

                if principal is not None:
                    existing = principal.find(AuthProvider.LOCAL)
                    if existing is not None:
                        logfire.info(
                            "Local sign-up rejected: already signed up",
                            user_id=str(principal.user.id),
                            is_email_verified=existing.local.is_email_verified,
                        )
                        raise AlreadySignedUpError(existing.local.is_email_verified)

                if request.username and await self.user_service.is_username_taken(
                    tx, request.username, exclude_user_id=user.id if user else None
                ):
                    raise UsernameTakenError(request.username)

                if user is None:
                    user = await tx.users.save(User(id=UserId(uuid4()), email=request.email))

                authentication = await tx.authentications.save(
                    Authentication(
                        id=AuthenticationId(uuid4()),
                        user_id=user.id,
                        provider=AuthProvider.LOCAL,
                        metadata=AuthMetadata(
                            local=LocalMetadata(
                                password=password_hash,
                                temporary_info=TemporaryInfo(
                                    username=request.username,
                                    first_name=request.first_name,
                                    last_name=request.last_name,
                                    avatar_url=request.avatar_url,
                                ),
                            )
                        ),
                    )
                )

                event = self.event_service.build_instance(
                    EventName.AUTH_LOCAL_CREATED,
                    user.id,
                    authentication.id,
                    {
                        "email": user.email,
                        "username": request.username,
                        "first_name": request.first_name,
                        "last_name": request.last_name,
                        "avatar_url": request.avatar_url,
                    },
                )
                await self.event_service.create_event(event, tx)

            logfire.info(
                "Local sign-up created",
                user_id=str(user.id),
                authentication_id=str(authentication.id),
                is_new_user=principal is None,
            )

            await self.event_service.dispatch(event)

            return LocalSignUpResponse(
                user_id=str(user.id), authentication_id=str(authentication.id)
            )
