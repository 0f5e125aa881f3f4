"""Domain layer errors.

Every error carries a ``kind`` naming the failure category the caller maps
to a response: ``invalid_input``, ``conflict``, ``unauthorized``,
``not_found`` or ``internal``.
"""


class DomainError(Exception):
    """Base domain error."""

    kind = "internal"


class ValidationError(DomainError):
    """Malformed input (DTO field, store key)."""

    kind = "invalid_input"


class ConflictError(DomainError):
    """State conflict such as a duplicate provider binding."""

    kind = "conflict"


class UsernameTakenError(ConflictError):
    """Raised when a username already belongs to a different user."""

    def __init__(self, username: str | None = None):
        self.username = username
        super().__init__("Username is already taken")


class AlreadySignedUpError(ConflictError):
    """Raised when a local sign-up is attempted for an existing local record."""

    def __init__(self, is_email_verified: bool):
        self.is_email_verified = is_email_verified
        if is_email_verified:
            message = "User is already signed up. Please, sign in."
        else:
            message = (
                "User is already signed up, but the email verification is pending. "
                "Please, check your inbox."
            )
        super().__init__(message)


class AlreadyVerifiedError(ConflictError):
    """Raised when an email address is verified twice."""

    def __init__(self) -> None:
        super().__init__("Email is already verified. Please, sign in.")


class UnauthorizedError(DomainError):
    """Bad credentials, unverified email, or an unusable token."""

    kind = "unauthorized"

    def __init__(self, message: str = "Authentication failed."):
        super().__init__(message)


class InvalidTokenError(UnauthorizedError):
    """Token signature, claims or expiry are not acceptable."""

    def __init__(self, message: str = "Invalid token."):
        super().__init__(message)


class InvalidOrExpiredTokenError(InvalidTokenError):
    """Password reset token is invalid, expired, or already used."""

    def __init__(self) -> None:
        super().__init__("Password reset token is invalid or expired.")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    kind = "not_found"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InternalError(DomainError):
    """Hashing, signing or transaction primitive failure."""

    kind = "internal"
