"""Authentication routes."""

from __future__ import annotations

from typing import Annotated

import litestar
from litestar import Request
from litestar.datastructures import State
from litestar.di import Provide
from litestar.params import Body
from litestar.status_codes import (
    HTTP_200_OK,
    HTTP_201_CREATED,
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
)
from shadow_sdk.auth import AuthTokenResponse, AuthUserResponse, LoginRequest, LogoutResponse, SignupRequest

from middleware.auth import AuthToken, AuthUser
from routes.dependencies import provide_auth_repository, provide_auth_service
from services.auth_service import AuthService
from services.exceptions.auth import InvalidCredentialsError
from services.exceptions.common import NotFoundError, ValidationError
from utilities.errors import CustomHTTPException


class AuthController(litestar.Controller):
    """Signup, login and token management."""

    tags = ["Auth"]
    path = "/auth"
    dependencies = {
        "auth_repo": Provide(provide_auth_repository),
        "auth_service": Provide(provide_auth_service),
    }

    @litestar.post(
        path="/signup",
        summary="Sign Up",
        description="Create an account and receive a bearer token.",
        status_code=HTTP_201_CREATED,
    )
    async def signup(
        self,
        auth_service: AuthService,
        data: Annotated[SignupRequest, Body(title="Signup data")],
    ) -> AuthTokenResponse:
        """Create an account.

        Args:
            auth_service: Auth service.
            data: Username and password.

        Returns:
            Bearer token and the new user.

        Raises:
            CustomHTTPException: If the username or password is invalid or the username is taken.
        """
        try:
            return await auth_service.signup(data)
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e

    @litestar.post(
        path="/login",
        summary="Log In",
        description="Exchange username and password for a bearer token.",
        status_code=HTTP_200_OK,
    )
    async def login(
        self,
        auth_service: AuthService,
        data: Annotated[LoginRequest, Body(title="Login data")],
    ) -> AuthTokenResponse:
        """Log in.

        Raises:
            CustomHTTPException: If the credentials are invalid.
        """
        try:
            return await auth_service.login(data)
        except InvalidCredentialsError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_401_UNAUTHORIZED) from e

    @litestar.get(path="/me", summary="Current User", description="Get the authenticated user.")
    async def me(
        self,
        auth_service: AuthService,
        request: Request[AuthUser, AuthToken, State],
    ) -> AuthUserResponse:
        """Get the authenticated user."""
        try:
            return await auth_service.get_current_user(request.user.id)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e

    @litestar.post(
        path="/logout",
        summary="Log Out",
        description="Revoke the presented bearer token.",
        status_code=HTTP_200_OK,
    )
    async def logout(
        self,
        auth_service: AuthService,
        request: Request[AuthUser, AuthToken, State],
    ) -> LogoutResponse:
        """Revoke the bearer token used for this request."""
        return LogoutResponse(revoked=await auth_service.logout(request.auth.token))
