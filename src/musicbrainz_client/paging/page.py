"""
Result pages.

One page of a paginated resource: the items, where they sit in the full
collection, and the server's declared collection size. Pages are immutable;
consistency checks return a new page carrying the anomalies found.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Generic, Iterator, Mapping, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AnomalyKind(Enum):
    """Non-fatal inconsistencies between requested and server-reported state."""

    OFFSET_MISMATCH = "offset-mismatch"
    TOTAL_EXCEEDED = "total-exceeded"


@dataclass(frozen=True)
class PageAnomaly:
    """
    A server inconsistency observed on one fetch.

    Attributes:
        kind: What was inconsistent
        requested_offset: Offset the cursor asked for
        reported_offset: Offset the server reported
        item_count: Number of items on the page
        total: Collection size the server reported
    """

    kind: AnomalyKind
    requested_offset: int
    reported_offset: int
    item_count: int
    total: int

    def __str__(self) -> str:
        if self.kind is AnomalyKind.OFFSET_MISMATCH:
            return f"unexpected offset in results: {self.requested_offset} != {self.reported_offset}"
        return (f"page extends past reported total: "
                f"{self.reported_offset} + {self.item_count} > {self.total}")


@dataclass(frozen=True)
class ResultPage(Generic[T]):
    """
    One page of a paginated collection.

    Attributes:
        items: Items on this page, in server order
        offset: Index of the first item in the full collection (server-reported)
        total: Server-declared size of the full collection (advisory)
        limit: Page size requested, or ``None`` for the server default
        requested_offset: Offset that was asked for, when known
        unhandled: Unrecognised top-level fields of the response
        created: Server timestamp (search results only)
        anomalies: Inconsistencies observed when this page was fetched
    """

    items: Tuple[T, ...]
    offset: int
    total: int
    limit: Optional[int] = None
    requested_offset: Optional[int] = None
    unhandled: Mapping[str, Any] = field(default_factory=dict)
    created: Optional[str] = None
    anomalies: Tuple[PageAnomaly, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    @property
    def end(self) -> int:
        """Offset just past the last item of this page."""
        return self.offset + len(self.items)

    @property
    def anomaly(self) -> Optional[PageAnomaly]:
        return self.anomalies[0] if self.anomalies else None

    @property
    def has_anomaly(self) -> bool:
        return bool(self.anomalies)

    @property
    def is_empty(self) -> bool:
        return not self.items


def inspect_page(page: ResultPage[T], requested_offset: Optional[int], limit: Optional[int]) -> ResultPage[T]:
    """
    Compare a fetched page with what was requested.

    An offset mismatch or a page reaching past the reported total is logged
    and attached to the returned page; neither is an error.

    Args:
        page: Freshly decoded page
        requested_offset: Offset that was asked for, or ``None`` if the
            resource does not take an offset
        limit: Page size that was asked for

    Returns:
        The page with request details and any anomalies filled in
    """
    found = []
    if requested_offset is not None and page.offset != requested_offset:
        found.append(PageAnomaly(AnomalyKind.OFFSET_MISMATCH, requested_offset, page.offset,
                                 len(page.items), page.total))
    if page.total >= 0 and page.end > page.total:
        found.append(PageAnomaly(AnomalyKind.TOTAL_EXCEEDED,
                                 page.offset if requested_offset is None else requested_offset,
                                 page.offset, len(page.items), page.total))
    for anomaly in found:
        logger.warning("Result page anomaly: %s", anomaly)
    return replace(page, requested_offset=requested_offset, limit=limit,
                   anomalies=page.anomalies + tuple(found))


__all__ = ["AnomalyKind", "PageAnomaly", "ResultPage", "inspect_page"]
