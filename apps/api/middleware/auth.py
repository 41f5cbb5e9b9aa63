import datetime as dt
from typing import TYPE_CHECKING

import msgspec
from litestar.connection import ASGIConnection
from litestar.exceptions import NotAuthorizedException
from litestar.middleware.authentication import AbstractAuthenticationMiddleware, AuthenticationResult

from repository.auth_repository import AuthRepository
from services.auth_service import AuthService

if TYPE_CHECKING:
    from asyncpg import Pool

# Paths reachable without a bearer token. Must match the middleware exclude list in app.py.
AUTH_EXCLUDED_PATHS = ("^/healthcheck", "^/docs", "^/schema", "^/api/auth/signup", "^/api/auth/login")


class AuthUser(msgspec.Struct):
    id: int
    username: str


class AuthToken(msgspec.Struct):
    token: str
    expires_at: dt.datetime


class CustomAuthenticationMiddleware(AbstractAuthenticationMiddleware):
    async def authenticate_request(self, connection: ASGIConnection) -> AuthenticationResult:
        """Resolve ``Authorization: Bearer <token>`` to a user."""
        pool: Pool = connection.app.state["db_pool"]
        header = connection.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")

        if scheme.lower() != "bearer" or not token.strip():
            raise NotAuthorizedException("No token, authorization denied")

        token = token.strip()
        row = await AuthRepository(pool).fetch_user_by_token(AuthService.hash_token(token))

        if not row:
            raise NotAuthorizedException("Token is not valid")

        user = AuthUser(id=row["id"], username=row["username"])
        return AuthenticationResult(user=user, auth=AuthToken(token=token, expires_at=row["expires_at"]))
