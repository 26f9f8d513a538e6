"""
Pagination cursors.

A cursor walks a paginated resource one page at a time. It remembers only the
most recent page; the next offset is derived from what the server actually
returned, so a server that answers at a different offset than requested is
followed rather than fought.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Any, AsyncIterator, Callable, Generic, Iterator, List, Optional, TypeVar

from ..runtime.errors import ConfigurationError, InvalidStateError
from ..transport.base import LogicalRequest
from ..transport.executor import AsyncExecutor, Executor
from .page import PageAnomaly, ResultPage, inspect_page

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Page size the web service uses when no limit is given.
DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100

PageDecoder = Callable[[bytes], ResultPage[Any]]


class CursorState(Enum):
    UNSTARTED = "unstarted"
    POSITIONED = "positioned"


class _CursorBase(Generic[T]):
    """Navigation state shared by the sync and async cursors."""

    def __init__(
        self,
        request: LogicalRequest,
        page_decoder: PageDecoder,
        limit: Optional[int] = None,
        offset: int = 0,
        single_shot: bool = False,
    ):
        if limit is not None and not 1 <= limit <= MAX_PAGE_SIZE:
            raise ConfigurationError(f"The limit must be between 1 and {MAX_PAGE_SIZE}.", "limit", limit)
        if offset < 0:
            raise ConfigurationError("The offset must not be negative.", "offset", offset)
        self._request = request
        self._decoder = page_decoder
        self.limit = limit
        self.initial_offset = offset
        self.single_shot = single_shot
        self.anomalies: List[PageAnomaly] = []
        self._page: Optional[ResultPage[T]] = None

    @property
    def state(self) -> CursorState:
        return CursorState.UNSTARTED if self._page is None else CursorState.POSITIONED

    @property
    def current(self) -> Optional[ResultPage[T]]:
        """The most recently fetched page, if any."""
        return self._page

    @property
    def offset(self) -> Optional[int]:
        return None if self._page is None else self._page.offset

    @property
    def total(self) -> Optional[int]:
        return None if self._page is None else self._page.total

    @property
    def has_more(self) -> bool:
        """Whether ``next()`` is expected to return further items."""
        page = self._page
        if page is None:
            return True
        if self.single_shot or page.is_empty:
            return False
        return page.end < page.total

    def _next_offset(self) -> int:
        if self._page is None:
            return self.initial_offset
        return self._page.end

    def _previous_offset(self) -> int:
        if self.single_shot:
            raise InvalidStateError("This result cannot be navigated backwards.")
        page = self._page
        if page is None:
            raise InvalidStateError("No results have been fetched yet.")
        step = self.limit
        if step is None:
            step = len(page.items) or DEFAULT_PAGE_SIZE
        return max(0, page.offset - step)

    def _request_for(self, offset: int) -> LogicalRequest:
        if self.single_shot:
            return self._request
        extra = []
        if offset > 0:
            extra.append(("offset", str(offset)))
        if self.limit is not None:
            extra.append(("limit", str(self.limit)))
        return self._request.with_params(*extra)

    def _accept(self, page: ResultPage[T], requested_offset: int) -> ResultPage[T]:
        page = inspect_page(page, None if self.single_shot else requested_offset, self.limit)
        self.anomalies.extend(page.anomalies)
        self._page = page
        logger.debug("Positioned at offset %d (%d items of %d)", page.offset, len(page.items), page.total)
        return page

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(path={self._request.path!r}, state={self.state.value}, "
                f"offset={self.offset}, limit={self.limit})")


class PagedQuery(_CursorBase[T]):
    """
    Synchronous cursor over a browse, search or single-shot result.

    Example:
        ```python
        cursor = query.browse_releases(artist=mbid, limit=50)
        for release in cursor.items():
            print(release.title)
        ```
    """

    def __init__(self, executor: Executor, request: LogicalRequest, page_decoder: PageDecoder,
                 limit: Optional[int] = None, offset: int = 0, single_shot: bool = False):
        super().__init__(request, page_decoder, limit, offset, single_shot)
        self._executor = executor

    def next(self) -> ResultPage[T]:
        """
        Fetch the page after the current one (or the first page).

        Returns:
            The fetched page

        Raises:
            TransportError, RemoteError, DecodeError: As raised by the executor
        """
        return self._fetch(self._next_offset())

    def previous(self) -> ResultPage[T]:
        """
        Fetch the page before the current one, clamped at offset 0.

        Raises:
            InvalidStateError: If nothing was fetched yet or the result is single-shot
        """
        return self._fetch(self._previous_offset())

    def pages(self) -> Iterator[ResultPage[T]]:
        """Yield pages from the current position until the result is exhausted."""
        while True:
            page = self.next()
            yield page
            if not self.has_more:
                return

    def items(self) -> Iterator[T]:
        for page in self.pages():
            yield from page.items

    def __iter__(self) -> Iterator[T]:
        return self.items()

    def _fetch(self, offset: int) -> ResultPage[T]:
        page = self._executor.execute_for_page(self._request_for(offset), self._decoder)
        return self._accept(page, offset)


class AsyncPagedQuery(_CursorBase[T]):
    """Asynchronous counterpart of :class:`PagedQuery`."""

    def __init__(self, executor: AsyncExecutor, request: LogicalRequest, page_decoder: PageDecoder,
                 limit: Optional[int] = None, offset: int = 0, single_shot: bool = False):
        super().__init__(request, page_decoder, limit, offset, single_shot)
        self._executor = executor

    async def next(self) -> ResultPage[T]:
        return await self._fetch(self._next_offset())

    async def previous(self) -> ResultPage[T]:
        return await self._fetch(self._previous_offset())

    async def pages(self) -> AsyncIterator[ResultPage[T]]:
        while True:
            page = await self.next()
            yield page
            if not self.has_more:
                return

    async def items(self) -> AsyncIterator[T]:
        async for page in self.pages():
            for item in page.items:
                yield item

    def __aiter__(self) -> AsyncIterator[T]:
        return self.items()

    async def _fetch(self, offset: int) -> ResultPage[T]:
        page = await self._executor.execute_for_page(self._request_for(offset), self._decoder)
        return self._accept(page, offset)


__all__ = ["CursorState", "PagedQuery", "AsyncPagedQuery", "DEFAULT_PAGE_SIZE", "MAX_PAGE_SIZE"]
