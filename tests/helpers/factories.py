"""
Identifiers and JSON body builders for canned web service replies.
"""

import json
from typing import Any, Dict, List

from .fakes import FakeResponse

ARTIST_ID = "5b11f4ce-a62d-471e-81fc-a69a8278c7da"
RELEASE_ID = "1b022e01-4da6-387b-8658-8678046e4cef"
COLLECTION_ID = "f4784850-3844-11e0-9e42-0800200c9a66"


def json_body(data: Any) -> bytes:
    return json.dumps(data).encode("utf-8")


def browse_body(entity: str, plural: str, items: List[Dict[str, Any]], offset: int, total: int,
                **extra: Any) -> bytes:
    data = {f"{entity}-count": total, f"{entity}-offset": offset, plural: items}
    data.update(extra)
    return json_body(data)


def artist_items(start: int, count: int) -> List[Dict[str, Any]]:
    return [
        {"id": f"00000000-0000-0000-0000-{n:012d}", "name": f"Artist {n}"}
        for n in range(start, start + count)
    ]


def paging_handler(total: int, entity: str = "artist", plural: str = "artists", drift: int = 0):
    """Serve a collection of ``total`` artists honouring offset/limit; ``drift`` shifts the reported offset."""

    def handler(call):
        params = dict(call["params"])
        offset = int(params.get("offset", 0)) + drift
        limit = int(params.get("limit", 25))
        items = artist_items(offset, max(0, min(limit, total - offset)))
        return FakeResponse(200, browse_body(entity, plural, items, offset, total))

    return handler
