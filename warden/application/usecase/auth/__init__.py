"""Authentication use cases."""

from .federated_sign_in import FederatedSignInUseCase
from .local_password_forgot import LocalPasswordForgotUseCase
from .local_password_reset import LocalPasswordResetUseCase
from .local_sign_in import LocalSignInUseCase
from .local_sign_up import LocalSignUpUseCase
from .local_verification_email import LocalVerificationEmailUseCase
from .refresh_access_token import RefreshAccessTokenUseCase
from .retrieve_profile import RetrieveProfileUseCase
from .sign_out import SignOutUseCase

__all__ = [
    "FederatedSignInUseCase",
    "LocalPasswordForgotUseCase",
    "LocalPasswordResetUseCase",
    "LocalSignInUseCase",
    "LocalSignUpUseCase",
    "LocalVerificationEmailUseCase",
    "RefreshAccessTokenUseCase",
    "RetrieveProfileUseCase",
    "SignOutUseCase",
]
