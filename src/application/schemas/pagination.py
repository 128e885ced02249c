"""Pagination value objects for paginated list queries.

Provides the ``PageWindowCalculator`` that turns a page request into an
``OFFSET``/``LIMIT`` window, and the immutable ``PaginatedResult``
container with its two serialization shapes:

* ``full``    -- ``{"data": [...], "meta": {total, count, per_page,
  current_page, total_pages, has_more_pages}}``
* ``minimal`` -- ``{"data": [...], "pagination": {"total": n}}``

Both shapes are computed from the same metadata; the shape only decides
which keys reach the output.
"""

from __future__ import annotations

import enum
import json
import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from domain.exceptions import InvalidArgumentError

T = TypeVar("T")
U = TypeVar("U")

DEFAULT_PAGE: int = 1
DEFAULT_PER_PAGE: int = 15
MAX_PER_PAGE: int = 100


class PaginationShape(str, enum.Enum):
    FULL = "full"
    MINIMAL = "minimal"


def _require_positive(value: int, argument: str) -> None:
    if value <= 0:
        raise InvalidArgumentError(
            f"{argument} must be a positive integer, got {value}",
            argument=argument,
        )


@dataclass(frozen=True)
class PageRequest:
    """Immutable pagination request parameters.

    ``page`` is 1-based.  Both values must be positive; no clamping is
    performed here, range policies belong to the calling service.
    """

    per_page: int = DEFAULT_PER_PAGE
    page: int = DEFAULT_PAGE

    def __post_init__(self) -> None:
        _require_positive(self.per_page, "per_page")
        _require_positive(self.page, "page")

    @property
    def offset(self) -> int:
        """Zero-based offset suitable for SQL ``OFFSET`` clauses."""
        return (self.page - 1) * self.per_page


@dataclass(frozen=True)
class PageWindow:
    """The slice of an ordered source to fetch for one page."""

    offset: int
    limit: int
    has_more: bool


class PageWindowCalculator:
    """Computes page windows from a total count and a page request.

    Pure computation: no I/O and no ambient request state.  A page past
    the end is not rejected; its window simply starts at or beyond
    ``total_count`` and the fetch comes back empty.
    """

    def compute(
        self,
        total_count: int,
        per_page: int,
        requested_page: Optional[int] = None,
    ) -> PageWindow:
        page = DEFAULT_PAGE if requested_page is None else requested_page
        request = PageRequest(per_page=per_page, page=page)
        if total_count < 0:
            raise InvalidArgumentError(
                f"total_count must not be negative, got {total_count}",
                argument="total_count",
            )
        return PageWindow(
            offset=request.offset,
            limit=request.per_page,
            has_more=(request.page * request.per_page) < total_count,
        )


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    """One page of items plus the metadata needed to describe it.

    Built once per request from a freshly fetched slice and a total
    count.  ``items`` is stored as given (the caller guarantees
    ``len(items) <= per_page``); nothing is re-validated against
    ``total``.
    """

    items: tuple[T, ...]
    total: int
    per_page: int
    current_page: int

    @classmethod
    def build(
        cls,
        items: Sequence[T],
        total: int,
        per_page: int,
        current_page: int,
    ) -> PaginatedResult[T]:
        return cls(
            items=tuple(items),
            total=total,
            per_page=per_page,
            current_page=current_page,
        )

    # -- derived metadata -------------------------------------------------

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_pages(self) -> int:
        """Number of pages needed to show ``total`` items (0 when empty)."""
        _require_positive(self.per_page, "per_page")
        return math.ceil(self.total / self.per_page)

    @property
    def has_more_pages(self) -> bool:
        # Page arithmetic, not ``offset + count``; see DESIGN.md.
        return (self.current_page * self.per_page) < self.total

    @property
    def next_page(self) -> Optional[int]:
        return self.current_page + 1 if self.has_more_pages else None

    @property
    def previous_page(self) -> Optional[int]:
        return self.current_page - 1 if self.current_page > 1 else None

    def map(self, func: Callable[[T], U]) -> PaginatedResult[U]:
        """Transform items, preserving pagination metadata."""
        return PaginatedResult(
            items=tuple(func(item) for item in self.items),
            total=self.total,
            per_page=self.per_page,
            current_page=self.current_page,
        )

    # -- serialization ----------------------------------------------------

    def meta(self) -> dict[str, Any]:
        """Every metadata field, regardless of the output shape."""
        return {
            "total": self.total,
            "count": self.count,
            "per_page": self.per_page,
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "has_more_pages": self.has_more_pages,
        }

    def serialize(
        self,
        item_serializer: Optional[Callable[[T], Any]] = None,
        shape: PaginationShape = PaginationShape.FULL,
    ) -> dict[str, Any]:
        """Render the page as a ``data`` + metadata record.

        Parameters
        ----------
        item_serializer:
            Applied to each item to build ``data``.  Items are emitted
            unchanged when omitted.
        shape:
            ``FULL`` emits the complete ``meta`` block, ``MINIMAL`` only
            ``pagination.total``.
        """
        meta = self.meta()
        serialize_item = item_serializer or (lambda item: item)
        data = [serialize_item(item) for item in self.items]

        if PaginationShape(shape) is PaginationShape.MINIMAL:
            return {"data": data, "pagination": {"total": meta["total"]}}
        return {"data": data, "meta": meta}

    def to_json(
        self,
        item_serializer: Optional[Callable[[T], Any]] = None,
        shape: PaginationShape = PaginationShape.FULL,
    ) -> str:
        return json.dumps(self.serialize(item_serializer, shape), default=str)

    @classmethod
    def from_serialized(
        cls,
        record: Mapping[str, Any],
        item_parser: Optional[Callable[[Any], T]] = None,
        *,
        per_page: Optional[int] = None,
        current_page: Optional[int] = None,
    ) -> PaginatedResult[T]:
        """Rebuild a result from a record produced by :meth:`serialize`.

        A ``minimal`` record does not carry ``per_page`` or
        ``current_page``; the caller must supply them.
        """
        parse_item = item_parser or (lambda raw: raw)
        items = [parse_item(raw) for raw in record.get("data", [])]

        if "meta" in record:
            meta = record["meta"]
            return cls.build(
                items,
                total=int(meta["total"]),
                per_page=int(meta["per_page"]),
                current_page=int(meta["current_page"]),
            )

        if "pagination" not in record:
            raise InvalidArgumentError(
                "record has neither 'meta' nor 'pagination'", argument="record"
            )
        if per_page is None or current_page is None:
            raise InvalidArgumentError(
                "a minimal record needs explicit per_page and current_page",
                argument="record",
            )
        return cls.build(
            items,
            total=int(record["pagination"]["total"]),
            per_page=per_page,
            current_page=current_page,
        )
