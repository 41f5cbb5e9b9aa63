"""Daily reward data models."""

from __future__ import annotations

import datetime as dt
from typing import Annotated

from msgspec import Meta, Struct

__all__ = (
    "DailyRewardCreateRequest",
    "DailyRewardResponse",
)


class DailyRewardCreateRequest(Struct):
    """Payload for creating a daily reward.

    Attributes:
        name: Reward name.
        description: What the reward is.
    """

    name: Annotated[str, Meta(min_length=3, max_length=100)]
    description: Annotated[str, Meta(min_length=5, max_length=500)]


class DailyRewardResponse(Struct, rename="camel"):
    """Daily reward owned by a user."""

    id: int
    name: str
    description: str
    created_by: int
    created_at: dt.datetime
