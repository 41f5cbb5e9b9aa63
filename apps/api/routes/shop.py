"""Shop item routes."""

from __future__ import annotations

from typing import Annotated

import litestar
from litestar import Request
from litestar.datastructures import State
from litestar.di import Provide
from litestar.params import Body, Parameter
from litestar.status_codes import HTTP_400_BAD_REQUEST, HTTP_403_FORBIDDEN, HTTP_404_NOT_FOUND
from shadow_sdk.shop import ShopItemCreateRequest, ShopItemResponse, ShopItemUpdateRequest

from middleware.auth import AuthToken, AuthUser
from routes.dependencies import provide_shop_repository, provide_shop_service
from services.exceptions.common import ForbiddenError, NotFoundError, ValidationError
from services.shop_service import ShopService
from utilities.errors import CustomHTTPException


class ShopController(litestar.Controller):
    """Create, edit and remove shop items."""

    tags = ["Shop"]
    path = "/shop"
    dependencies = {
        "shop_repo": Provide(provide_shop_repository),
        "shop_service": Provide(provide_shop_service),
    }

    @litestar.get(path="/", summary="List Shop Items", description="List active shop items.")
    async def list_items(
        self,
        shop_service: ShopService,
        request: Request[AuthUser, AuthToken, State],
        show_all: Annotated[bool, Parameter(query="showAll")] = False,
    ) -> list[ShopItemResponse]:
        """List active shop items.

        Args:
            shop_service: Shop service.
            request: Authenticated request.
            show_all: List every user's active items instead of only the caller's.

        Returns:
            Active items, cheapest first.
        """
        return await shop_service.list_items(request.user.id, show_all=show_all)

    @litestar.post(path="/", summary="Create Shop Item", description="Add an item to the shop.")
    async def create_item(
        self,
        shop_service: ShopService,
        request: Request[AuthUser, AuthToken, State],
        data: Annotated[ShopItemCreateRequest, Body(title="Shop item")],
    ) -> ShopItemResponse:
        """Add an item to the shop."""
        try:
            return await shop_service.create_item(request.user.id, data)
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e

    @litestar.put(path="/{item_id:int}", summary="Update Shop Item", description="Update a shop item.")
    async def update_item(
        self,
        shop_service: ShopService,
        request: Request[AuthUser, AuthToken, State],
        item_id: int,
        data: Annotated[ShopItemUpdateRequest, Body(title="Shop item changes")],
    ) -> ShopItemResponse:
        """Update one of the caller's shop items."""
        try:
            return await shop_service.update_item(item_id, request.user.id, data)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except ForbiddenError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_403_FORBIDDEN) from e
        except ValidationError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_400_BAD_REQUEST) from e

    @litestar.delete(path="/{item_id:int}", summary="Delete Shop Item", description="Remove an item from the shop.")
    async def delete_item(
        self,
        shop_service: ShopService,
        request: Request[AuthUser, AuthToken, State],
        item_id: int,
    ) -> None:
        """Remove one of the caller's items from the shop."""
        try:
            await shop_service.delete_item(item_id, request.user.id)
        except NotFoundError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_404_NOT_FOUND) from e
        except ForbiddenError as e:
            raise CustomHTTPException(detail=e.message, status_code=HTTP_403_FORBIDDEN) from e
