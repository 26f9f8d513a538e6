from .fakes import FakeAsyncResponse, FakeAsyncSession, FakeResponse, FakeSession
from .factories import (
    ARTIST_ID,
    COLLECTION_ID,
    RELEASE_ID,
    artist_items,
    browse_body,
    json_body,
    paging_handler,
)

__all__ = [
    "FakeResponse",
    "FakeSession",
    "FakeAsyncResponse",
    "FakeAsyncSession",
    "ARTIST_ID",
    "RELEASE_ID",
    "COLLECTION_ID",
    "json_body",
    "browse_body",
    "artist_items",
    "paging_handler",
]
