"""Search hits: a relevance score plus the found item."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class SearchResult(Generic[T]):
    """One search hit; ``score`` runs from 0 to 100."""

    score: int
    item: T

    def __str__(self) -> str:
        return f"[{self.score}] {self.item}"


__all__ = ["SearchResult"]
