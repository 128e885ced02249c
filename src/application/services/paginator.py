"""Boundary adapter between an ordered data source and ``PaginatedResult``.

``paginate`` only needs two capabilities from its source: a total
``count()`` and an ``OFFSET``/``LIMIT`` style ``fetch_slice()``.  Any
storage technology that offers both can be paginated.

The two calls are not atomic with respect to each other.  Under
concurrent writes the total and the fetched slice may come from
different snapshots (a row inserted between the count and the fetch
shifts page boundaries).  No cross-call locking is attempted.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Generic, Optional, Protocol, TypeVar

from application.schemas.pagination import (
    DEFAULT_PAGE,
    PageRequest,
    PageWindowCalculator,
    PaginatedResult,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class PageSource(Protocol[T_co]):
    """Port: an ordered, countable data source."""

    def count(self) -> int: ...

    def fetch_slice(self, offset: int, limit: int) -> Sequence[T_co]: ...


class SequencePageSource(Generic[T]):
    """Page source over an in-memory sequence, preserving its order."""

    def __init__(self, items: Sequence[T]) -> None:
        self._items = list(items)

    def count(self) -> int:
        return len(self._items)

    def fetch_slice(self, offset: int, limit: int) -> Sequence[T]:
        return self._items[offset : offset + limit]


def paginate(
    source: PageSource[T],
    per_page: int,
    requested_page: Optional[int] = None,
    *,
    calculator: Optional[PageWindowCalculator] = None,
) -> PaginatedResult[T]:
    """Fetch one page from *source* and wrap it in a ``PaginatedResult``.

    The page request is validated before the source is touched, so an
    invalid ``per_page`` or ``page`` never costs a query.  Errors raised
    by the source propagate unchanged.
    """
    page = DEFAULT_PAGE if requested_page is None else requested_page
    PageRequest(per_page=per_page, page=page)

    calculator = calculator or PageWindowCalculator()
    total = source.count()
    window = calculator.compute(total, per_page, page)
    items = source.fetch_slice(window.offset, window.limit)

    logger.debug(
        "Fetched page %d (offset=%d, limit=%d): %d of %d items",
        page,
        window.offset,
        window.limit,
        len(items),
        total,
    )
    return PaginatedResult.build(
        items,
        total=total,
        per_page=per_page,
        current_page=page,
    )
