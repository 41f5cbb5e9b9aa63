"""Authentication service for business logic."""

from __future__ import annotations

import hashlib
import logging
import os
import secrets
from datetime import datetime, timedelta, timezone

import bcrypt
from asyncpg import Pool
from litestar.datastructures import State
from shadow_sdk.auth import AuthTokenResponse, AuthUserResponse, LoginRequest, SignupRequest

from repository.auth_repository import AuthRepository
from repository.exceptions import UniqueConstraintViolationError

from .base import BaseService
from .exceptions.auth import (
    InvalidCredentialsError,
    PasswordValidationError,
    UsernameTakenError,
    UsernameValidationError,
)
from .exceptions.users import UserNotFoundError

log = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
PASSWORD_MIN_LENGTH = 6
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30


class AuthService(BaseService):
    """Service for signup, login and bearer token handling."""

    def __init__(self, pool: Pool, state: State, auth_repo: AuthRepository) -> None:
        """Initialize auth service.

        Args:
            pool: AsyncPG connection pool.
            state: Application state.
            auth_repo: Authentication repository.
        """
        super().__init__(pool, state)
        self._auth_repo = auth_repo

    # ===== Validation Methods =====

    @staticmethod
    def validate_username(username: str) -> str:
        """Trim and validate a username.

        Args:
            username: Raw username.

        Returns:
            The trimmed username.

        Raises:
            UsernameValidationError: If the trimmed username is too short or too long.
        """
        username = username.strip()
        if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
            raise UsernameValidationError(
                f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters."
            )
        return username

    @staticmethod
    def validate_password(password: str) -> None:
        """Validate password length.

        Raises:
            PasswordValidationError: If the password is too short.
        """
        if len(password) < PASSWORD_MIN_LENGTH:
            raise PasswordValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters.")

    # ===== Hashing =====

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using bcrypt."""
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        """Verify a password against its bcrypt hash."""
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))

    @staticmethod
    def generate_token() -> tuple[str, str]:
        """Generate a secure token and its hash.

        Returns:
            Tuple of (plaintext_token, token_hash).
        """
        token = secrets.token_urlsafe(32)
        return token, AuthService.hash_token(token)

    @staticmethod
    def hash_token(token: str) -> str:
        """Return the SHA-256 hex digest used to store and look up a token."""
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    # ===== Accounts and tokens =====

    async def _issue_token(self, user: dict) -> AuthTokenResponse:
        token, token_hash = self.generate_token()
        lifetime = timedelta(days=int(os.getenv("AUTH_TOKEN_LIFETIME_DAYS", "7")))
        expires_at = datetime.now(timezone.utc) + lifetime
        await self._auth_repo.insert_token(user["id"], token_hash, expires_at)
        return AuthTokenResponse(
            token=token,
            expires_at=expires_at,
            user=AuthUserResponse(
                id=user["id"],
                username=user["username"],
                coins=user["coins"],
                total_xp=user["total_xp"],
            ),
        )

    async def signup(self, data: SignupRequest) -> AuthTokenResponse:
        """Create an account and log it in.

        New accounts start with 100 coins and 0 XP.

        Args:
            data: Signup payload.

        Returns:
            A bearer token and the new user.

        Raises:
            UsernameValidationError: If the username length is invalid.
            PasswordValidationError: If the password is too short.
            UsernameTakenError: If the username is already registered.
        """
        username = self.validate_username(data.username)
        self.validate_password(data.password)
        password_hash = self.hash_password(data.password)

        try:
            user = await self._auth_repo.create_user(username, password_hash)
        except UniqueConstraintViolationError as e:
            log.info("Rejected signup: username %r taken (%s)", username, e.constraint_name)
            raise UsernameTakenError(username) from e

        log.info("New user %s signed up as %r", user["id"], username)
        return await self._issue_token(user)

    async def login(self, data: LoginRequest) -> AuthTokenResponse:
        """Verify credentials and issue a bearer token.

        Raises:
            InvalidCredentialsError: If the username is unknown or the password is wrong.
        """
        username = data.username.strip()
        user = await self._auth_repo.fetch_user_by_username(username)
        if user is None or not self.verify_password(data.password, user["password_hash"]):
            log.info("Failed login for %r", username)
            raise InvalidCredentialsError(username)
        return await self._issue_token(user)

    async def logout(self, token: str) -> bool:
        """Revoke a bearer token. Returns whether a token was revoked."""
        return await self._auth_repo.delete_token(self.hash_token(token))

    async def get_current_user(self, user_id: int) -> AuthUserResponse:
        """Return the authenticated user's public view.

        Raises:
            UserNotFoundError: If the account was removed after the token was issued.
        """
        user = await self._auth_repo.fetch_user_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return AuthUserResponse(id=user["id"], username=user["username"], coins=user["coins"], total_xp=user["total_xp"])
