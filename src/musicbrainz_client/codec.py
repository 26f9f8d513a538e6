"""
Response decoders.

Each decoder turns a success body (bytes) into a typed value or raises; the
executor maps whatever they raise to ``DecodeError``. Item-level failures are
reported with the item's position so a bad record can be found.
"""

from __future__ import annotations
import json
from typing import Any, Callable, Dict, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .models.entities import CdStub, Disc, DiscIdLookupResult, Release
from .models.search import SearchResult
from .paging.page import ResultPage
from .runtime.errors import DecodeError

M = TypeVar("M", bound=BaseModel)

SEARCH_KEYS = ("created", "count", "offset")


def load_object(body: bytes) -> Dict[str, Any]:
    """Parse a JSON body that must be an object."""
    data = json.loads(body)
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _require_int(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"Expected integer property '{key}' not found or invalid", {"value": value})
    return value


def _item_list(data: Dict[str, Any], key: str) -> List[Any]:
    items = data.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise DecodeError(f"Property '{key}' is not a list")
    return items


def _validate_item(model: Type[M], item: Any, key: str, index: int) -> M:
    try:
        return model.model_validate(item)
    except ValidationError as e:
        raise DecodeError(
            f"Failed to deserialize item {index} of '{key}'",
            {"errors": e.errors(include_url=False)},
            cause=e,
        ) from e


def entity_decoder(model: Type[M]) -> Callable[[bytes], M]:
    """Decoder for a single object of type ``model``."""

    def decode(body: bytes) -> M:
        return model.model_validate(load_object(body))

    return decode


def browse_page_decoder(model: Type[M], entity: str, plural: str) -> Callable[[bytes], ResultPage[M]]:
    """
    Decoder for a browse-shaped page.

    Args:
        model: Item model
        entity: Entity name used in the count/offset keys (``release-group``)
        plural: Key holding the items (``release-groups``)
    """
    count_key = f"{entity}-count"
    offset_key = f"{entity}-offset"

    def decode(body: bytes) -> ResultPage[M]:
        data = load_object(body)
        total = _require_int(data, count_key)
        offset = _require_int(data, offset_key)
        items = tuple(_validate_item(model, item, plural, i) for i, item in enumerate(_item_list(data, plural)))
        unhandled = {k: v for k, v in data.items() if k not in (count_key, offset_key, plural)}
        return ResultPage(items=items, offset=offset, total=total, unhandled=unhandled)

    return decode


def search_page_decoder(model: Type[M], plural: str) -> Callable[[bytes], ResultPage[SearchResult[M]]]:
    """Decoder for a search-shaped page; each item carries its own ``score``."""

    def decode(body: bytes) -> ResultPage[SearchResult[M]]:
        data = load_object(body)
        total = _require_int(data, "count")
        offset = _require_int(data, "offset")
        results = []
        for i, raw in enumerate(_item_list(data, plural)):
            if not isinstance(raw, dict):
                raise DecodeError(f"Item {i} of '{plural}' is not an object")
            fields = dict(raw)
            score = fields.pop("score", None)
            if isinstance(score, str) and score.isdigit():
                score = int(score)
            if isinstance(score, bool) or not isinstance(score, int):
                raise DecodeError(f"Item {i} of '{plural}' has no valid score", {"score": score})
            results.append(SearchResult(score=score, item=_validate_item(model, fields, plural, i)))
        unhandled = {k: v for k, v in data.items() if k not in SEARCH_KEYS and k != plural}
        created = data.get("created")
        return ResultPage(items=tuple(results), offset=offset, total=total, unhandled=unhandled,
                          created=str(created) if created is not None else None)

    return decode


def decode_discid_result(body: bytes) -> DiscIdLookupResult:
    """A disc ID lookup answers with a disc, a CD stub, or a release list."""
    data = load_object(body)
    if "sectors" in data or "offsets" in data:
        return DiscIdLookupResult(disc=Disc.model_validate(data))
    if "releases" in data and "id" not in data:
        releases = [_validate_item(Release, item, "releases", i) for i, item in enumerate(_item_list(data, "releases"))]
        return DiscIdLookupResult(releases=releases)
    return DiscIdLookupResult(stub=CdStub.model_validate(data))


__all__ = [
    "load_object",
    "entity_decoder",
    "browse_page_decoder",
    "search_page_decoder",
    "decode_discid_result",
]
