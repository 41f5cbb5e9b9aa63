# src/shadow_sdk/__init__.py
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from . import (
    auth,
    daily,
    quests,
    rewards,
    shop,
    skills,
    users,
    utilities,
)

__all__ = [
    "auth",
    "daily",
    "quests",
    "rewards",
    "shop",
    "skills",
    "users",
    "utilities",
]

try:
    __version__ = _pkg_version("shadow-system")
except PackageNotFoundError:
    __version__ = "0.0.0"
