"""
Authenticated submissions: ratings, tags and collection edits.

Submissions build a :class:`LogicalRequest`; sending it is the query's job,
so the same builder serves both the sync and the async stack.
"""

from __future__ import annotations
import xml.etree.ElementTree as ElementTree
from enum import Enum
from typing import Dict, Iterable, List, Tuple, Union
from uuid import UUID

from .endpoints import build_path, plural_of
from .runtime.errors import ConfigurationError
from .transport.base import XML_CONTENT_TYPE, LogicalRequest

MMD_NAMESPACE = "http://musicbrainz.org/ns/mmd-2.0#"

RATEABLE = ("artist", "event", "label", "place", "recording", "release-group", "work")
TAGGABLE = ("area", "artist", "event", "instrument", "label", "place", "recording", "release",
            "release-group", "series", "work")
COLLECTABLE = ("area", "artist", "event", "instrument", "label", "place", "recording", "release",
               "release-group", "series", "work")

# The service rejects collection edits naming more items than this.
MAX_COLLECTION_ITEMS = 400

Mbid = Union[str, UUID]


def _check_client(client: str) -> str:
    if client is None or not str(client).strip():
        raise ConfigurationError("The client ID must not be blank.", "client", client)
    return str(client)


def _check_entity(entity: str, allowed: Tuple[str, ...], action: str) -> str:
    if entity not in allowed:
        raise ConfigurationError(f"Cannot {action} entities of type '{entity}'.", "entity", entity)
    return entity


def _mmd(tag: str) -> str:
    return f"{{{MMD_NAMESPACE}}}{tag}"


class TagVote(Enum):
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"
    WITHDRAW = "withdraw"


class Submission:
    """
    Base class for XML submissions.

    Items are grouped per entity type, in the order types were first added.
    """

    entity = ""
    method = "POST"

    def __init__(self, client: str):
        self.client = _check_client(client)
        self._items: Dict[str, Dict[str, object]] = {}

    def __len__(self) -> int:
        return sum(len(items) for items in self._items.values())

    def _item_element(self, parent: ElementTree.Element, entity: str, mbid: str, value: object) -> None:
        raise NotImplementedError

    def request_body(self) -> bytes:
        ElementTree.register_namespace("", MMD_NAMESPACE)
        root = ElementTree.Element(_mmd("metadata"))
        for entity, items in self._items.items():
            entity_list = ElementTree.SubElement(root, _mmd(f"{entity}-list"))
            for mbid, value in items.items():
                self._item_element(entity_list, entity, mbid, value)
        return ElementTree.tostring(root, encoding="utf-8", xml_declaration=True)

    def to_request(self) -> LogicalRequest:
        """The logical request carrying this submission."""
        if not self._items:
            raise ConfigurationError("Nothing to submit.", "items", None)
        return LogicalRequest(
            self.method,
            build_path(self.entity),
            params=(("client", self.client),),
            body=self.request_body(),
            content_type=XML_CONTENT_TYPE,
            accept=XML_CONTENT_TYPE,
            authenticated=True,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(client={self.client!r}, items={len(self)})"


class RatingSubmission(Submission):
    """
    User ratings (0-100; 0 removes the rating).

    Example:
        ```python
        submission = RatingSubmission("myapp-1.0").add("artist", mbid, 80)
        query.submit(submission)
        ```
    """

    entity = "rating"

    def add(self, entity: str, mbid: Mbid, rating: int) -> RatingSubmission:
        _check_entity(entity, RATEABLE, "rate")
        if isinstance(rating, bool) or not isinstance(rating, int) or not 0 <= rating <= 100:
            raise ConfigurationError("A rating must be an integer between 0 and 100.", "rating", rating)
        self._items.setdefault(entity, {})[str(mbid)] = rating
        return self

    def _item_element(self, parent, entity, mbid, value):
        item = ElementTree.SubElement(parent, _mmd(entity), {"id": mbid})
        ElementTree.SubElement(item, _mmd("user-rating")).text = str(value)


class TagSubmission(Submission):
    """User tags, each with an up/down vote or a withdrawal."""

    entity = "tag"

    def add(self, entity: str, mbid: Mbid, tags: Union[str, Iterable[str]],
            vote: TagVote = TagVote.UPVOTE) -> TagSubmission:
        _check_entity(entity, TAGGABLE, "tag")
        names = [tags] if isinstance(tags, str) else list(tags)
        if not names or any(not name or not name.strip() for name in names):
            raise ConfigurationError("Tag names must not be blank.", "tags", names)
        votes: Dict[str, TagVote] = self._items.setdefault(entity, {}).setdefault(str(mbid), {})
        for name in names:
            votes[name.strip()] = vote
        return self

    def _item_element(self, parent, entity, mbid, value):
        item = ElementTree.SubElement(parent, _mmd(entity), {"id": mbid})
        tag_list = ElementTree.SubElement(item, _mmd("user-tag-list"))
        for name, vote in value.items():
            tag = ElementTree.SubElement(tag_list, _mmd("user-tag"), {"vote": vote.value})
            ElementTree.SubElement(tag, _mmd("name")).text = name


def collection_request(method: str, client: str, collection: Mbid, entity: str,
                       items: Iterable[Mbid]) -> LogicalRequest:
    """
    Build a request adding (``PUT``) or removing (``DELETE``) collection items.

    Args:
        method: ``PUT`` or ``DELETE``
        client: Client ID to report
        collection: MBID of the collection
        entity: Entity type of the items
        items: MBIDs of the items

    Raises:
        ConfigurationError: For a blank client, an unsupported entity type, or
            an empty or oversized item list
    """
    client = _check_client(client)
    _check_entity(entity, COLLECTABLE, "collect")
    ids: List[str] = [str(item) for item in items]
    if not ids:
        raise ConfigurationError("At least one item is required.", "items", ids)
    if len(ids) > MAX_COLLECTION_ITEMS:
        raise ConfigurationError(
            f"At most {MAX_COLLECTION_ITEMS} items can be changed at once.", "items", len(ids))
    path = f"{build_path('collection', collection)}/{plural_of(entity)}/{';'.join(ids)}"
    return LogicalRequest(method, path, params=(("client", client),), accept=XML_CONTENT_TYPE, authenticated=True)


__all__ = [
    "MMD_NAMESPACE",
    "TagVote",
    "Submission",
    "RatingSubmission",
    "TagSubmission",
    "collection_request",
    "MAX_COLLECTION_ITEMS",
]
