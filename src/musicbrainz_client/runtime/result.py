"""
Explicit success-or-error values.

Wraps a call so that the four error kinds of the client come back as data
instead of being raised. Only ``MusicBrainzError`` is captured; programming
errors still propagate.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from .errors import ErrorCode, MusicBrainzError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of one client call: a value or a ``MusicBrainzError``."""

    value: Optional[T] = None
    error: Optional[MusicBrainzError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorCode:
        """Error kind, or ``ErrorCode.OK`` for a success."""
        return ErrorCode.OK if self.error is None else self.error.code

    def unwrap(self) -> T:
        """Return the value, raising the captured error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def value_or(self, default: T) -> T:
        return default if self.error is not None else self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: MusicBrainzError) -> Result[T]:
        return cls(error=error)

    @classmethod
    def capture(cls, func: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T]:
        """
        Run ``func`` and wrap its outcome.

        Example:
            ```python
            result = Result.capture(query.lookup_artist, mbid)
            if result.kind is ErrorCode.REMOTE_ERROR and result.error.status == 404:
                ...
            ```
        """
        try:
            return cls(value=func(*args, **kwargs))
        except MusicBrainzError as e:
            return cls(error=e)

    @classmethod
    async def capture_async(cls, awaitable: Awaitable[T]) -> Result[T]:
        """Await ``awaitable`` and wrap its outcome."""
        try:
            return cls(value=await awaitable)
        except MusicBrainzError as e:
            return cls(error=e)


__all__ = ["Result"]
