"""JWT token utilities."""

from typing import Any

import jwt


class JWTError(Exception):
    """JWT-related error."""

    pass


def encode_token(claims: dict[str, Any], secret: str, algorithm: str) -> str:
    """Sign claims into a compact JWT.

    Args:
        claims: Token claims (``exp`` and ``iat`` as epoch seconds)
        secret: HMAC signing secret
        algorithm: Signing algorithm

    Returns:
        Encoded JWT token
    """
    return jwt.encode(claims, secret, algorithm=algorithm)


def decode_token(
    token: str, secret: str, algorithm: str, verify_exp: bool = True
) -> dict[str, Any]:
    """Verify a JWT signature and return its claims.

    Args:
        token: JWT token to verify
        secret: HMAC signing secret
        algorithm: Expected signing algorithm
        verify_exp: Reject expired tokens when True

    Returns:
        Token claims

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"verify_exp": verify_exp, "require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")


def decode_unverified(token: str) -> dict[str, Any]:
    """Read claims without checking signature or expiry.

    Raises:
        JWTError: If the token is not a well-formed JWT
    """
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        raise JWTError("Malformed token")
