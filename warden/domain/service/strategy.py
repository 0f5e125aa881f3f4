"""Credential strategies.

A strategy checks credentials and yields a ``Principal`` or the error that
explains why it could not.
"""

from typing import Optional

import logfire

from warden.domain.error import DomainError, UnauthorizedError
from warden.domain.model.authentication import Principal
from warden.domain.repository.transaction import TransactionManager
from warden.domain.value import AuthProvider
from warden.domain.value.common import ValueObject

from .base import Service
from .password_service import PasswordHasher
from .user_service import UserService


class LocalCredentials(ValueObject):
    """Login (email or username) and plaintext password."""

    login: str
    password: str


class StrategyResult(ValueObject):
    """Outcome of a strategy: exactly one of ``principal`` or ``error``."""

    principal: Optional[Principal] = None
    error: Optional[DomainError] = None

    def unwrap(self) -> Principal:
        """Return the principal or raise the error."""
        if self.error is not None:
            raise self.error
        if self.principal is None:
            raise UnauthorizedError()
        return self.principal


class LocalStrategy(Service):
    """Password check for local records.

    Unknown logins, unverified emails and wrong passwords all fail with the
    same message so the response does not reveal which one it was.
    """

    def __init__(
        self,
        transaction_manager: TransactionManager,
        user_service: UserService,
        password_hasher: PasswordHasher,
    ) -> None:
        self.transaction_manager = transaction_manager
        self.user_service = user_service
        self.password_hasher = password_hasher

    async def authenticate(self, credentials: LocalCredentials) -> StrategyResult:
        with logfire.span("local_strategy.authenticate"):
            async with self.transaction_manager.transaction() as tx:
                if "@" in credentials.login:
                    principal = await self.user_service.find_principal(tx, email=credentials.login)
                else:
                    principal = await self.user_service.find_principal(
                        tx, username=credentials.login
                    )

            authentication = principal.find(AuthProvider.LOCAL) if principal else None
            if authentication is None or not authentication.is_verified_local:
                logfire.info("Local sign-in rejected", reason="no verified local record")
                return StrategyResult(error=UnauthorizedError())

            if not await self.password_hasher.verify_async(
                credentials.password, authentication.local.password
            ):
                logfire.info("Local sign-in rejected", reason="password mismatch")
                return StrategyResult(error=UnauthorizedError())

            return StrategyResult(principal=principal)
