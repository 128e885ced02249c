from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

MIN_LEVEL: int = 1
MAX_LEVEL: int = 100
MIN_RATING: Decimal = Decimal("0")
MAX_RATING: Decimal = Decimal("10")
# Users below this level are capped at LOW_LEVEL_MAX_RATING.
LOW_LEVEL_THRESHOLD: int = 10
LOW_LEVEL_MAX_RATING: Decimal = Decimal("5")


@dataclass
class User:
    id: int = 0
    name: str = ""
    email: str = ""
    hashed_password: str = ""
    dob: Optional[date] = None
    is_active: bool = True
    level: int = MIN_LEVEL
    rating: Optional[Decimal] = None
    metadata: Optional[dict[str, str]] = None
    email_verified_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def touch(self) -> None:
        """Refresh ``updated_at`` after a mutation."""
        self.updated_at = datetime.now(timezone.utc)
