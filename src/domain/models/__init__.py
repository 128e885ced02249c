from domain.models.user import (
    LOW_LEVEL_MAX_RATING,
    LOW_LEVEL_THRESHOLD,
    MAX_LEVEL,
    MAX_RATING,
    MIN_LEVEL,
    MIN_RATING,
    User,
)

__all__ = [
    "LOW_LEVEL_MAX_RATING",
    "LOW_LEVEL_THRESHOLD",
    "MAX_LEVEL",
    "MAX_RATING",
    "MIN_LEVEL",
    "MIN_RATING",
    "User",
]
