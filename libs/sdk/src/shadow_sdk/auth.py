"""Authentication models for username/password users."""

from __future__ import annotations

import datetime as dt

from msgspec import Struct

__all__ = (
    "AuthTokenResponse",
    "AuthUserResponse",
    "LoginRequest",
    "LogoutResponse",
    "SignupRequest",
)


class SignupRequest(Struct):
    """Payload for creating a new account.

    Attributes:
        username: Unique display name (3-30 characters).
        password: Plaintext password (hashed server-side).
    """

    username: str
    password: str


class LoginRequest(Struct):
    """Payload for logging in.

    Attributes:
        username: Account username.
        password: Plaintext password to verify.
    """

    username: str
    password: str


class AuthUserResponse(Struct, rename="camel"):
    """Public view of an authenticated user.

    Attributes:
        id: User ID.
        username: Account username.
        coins: Current coin balance.
        total_xp: Total XP earned.
    """

    id: int
    username: str
    coins: int
    total_xp: int


class AuthTokenResponse(Struct, rename="camel"):
    """Bearer token issued on signup or login.

    Attributes:
        token: Plaintext bearer token. Only its hash is stored.
        expires_at: When the token stops being accepted.
        user: The authenticated user.
    """

    token: str
    expires_at: dt.datetime
    user: AuthUserResponse


class LogoutResponse(Struct):
    """Result of revoking a bearer token.

    Attributes:
        revoked: Whether a token was revoked.
    """

    revoked: bool
