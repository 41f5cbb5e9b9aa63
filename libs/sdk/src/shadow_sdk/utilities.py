from __future__ import annotations

SKILL_XP_PER_LEVEL = 100
XP_PER_RANK = 250

# Largest value accepted for a user total or a single credit.
MAX_BALANCE = 1_000_000_000
MAX_DAILY_REWARD = 1_000_000


def skill_level(xp: int) -> int:
    """Get the level of a skill for the given amount of XP."""
    return max(xp, 0) // SKILL_XP_PER_LEVEL


def user_rank(total_xp: int) -> int:
    """Get the hunter level of a user for the given total XP."""
    return max(total_xp, 0) // XP_PER_RANK
