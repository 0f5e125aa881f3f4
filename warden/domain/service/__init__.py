"""Domain services."""

from .authentication_service import AuthenticationService
from .base import Service
from .email import EmailMessage, EmailTransport, TemplateRenderer
from .event_service import EventBus, EventService, OutboundEventForwarder
from .messaging import MessageChannel, ReceivedMessage
from .password_service import PasswordHasher
from .revocation_store import RevocationStore
from .strategy import LocalCredentials, LocalStrategy, StrategyResult
from .token_service import TokenService
from .user_service import UserService

__all__ = [
    "AuthenticationService",
    "EmailMessage",
    "EmailTransport",
    "EventBus",
    "EventService",
    "LocalCredentials",
    "LocalStrategy",
    "MessageChannel",
    "OutboundEventForwarder",
    "PasswordHasher",
    "ReceivedMessage",
    "RevocationStore",
    "Service",
    "StrategyResult",
    "TemplateRenderer",
    "TokenService",
    "UserService",
]
