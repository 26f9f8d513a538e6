"""
Result pages and pagination cursors.
"""

from .page import AnomalyKind, PageAnomaly, ResultPage, inspect_page
from .cursor import CursorState, PagedQuery, AsyncPagedQuery, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

__all__ = [
    "AnomalyKind",
    "PageAnomaly",
    "ResultPage",
    "inspect_page",
    "CursorState",
    "PagedQuery",
    "AsyncPagedQuery",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
]
