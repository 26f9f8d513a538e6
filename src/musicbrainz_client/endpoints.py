"""
Endpoint descriptor for the MusicBrainz web service.

Turns a resource name, an optional identifier and an option set into a path
under ``/ws/2`` plus an ordered list of query parameters.
"""

from __future__ import annotations
from enum import Flag
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import quote
from uuid import UUID

from .runtime.errors import ConfigurationError

WS_PREFIX = "/ws/2"

Param = Tuple[str, str]


class Include(Flag):
    """Additional information to request with a lookup or browse (``inc=``)."""

    NONE = 0
    ALIASES = 1 << 0
    ANNOTATION = 1 << 1
    ARTIST_CREDITS = 1 << 2
    ARTISTS = 1 << 3
    COLLECTIONS = 1 << 4
    DISCIDS = 1 << 5
    GENRES = 1 << 6
    ISRCS = 1 << 7
    LABELS = 1 << 8
    MEDIA = 1 << 9
    RATINGS = 1 << 10
    RECORDINGS = 1 << 11
    RELEASE_GROUPS = 1 << 12
    RELEASES = 1 << 13
    TAGS = 1 << 14
    USER_COLLECTIONS = 1 << 15
    USER_GENRES = 1 << 16
    USER_RATINGS = 1 << 17
    USER_TAGS = 1 << 18
    WORKS = 1 << 19
    AREA_RELS = 1 << 20
    ARTIST_RELS = 1 << 21
    EVENT_RELS = 1 << 22
    GENRE_RELS = 1 << 23
    INSTRUMENT_RELS = 1 << 24
    LABEL_RELS = 1 << 25
    PLACE_RELS = 1 << 26
    RECORDING_RELS = 1 << 27
    RELEASE_RELS = 1 << 28
    RELEASE_GROUP_RELS = 1 << 29
    SERIES_RELS = 1 << 30
    URL_RELS = 1 << 31
    WORK_RELS = 1 << 32
    RECORDING_LEVEL_RELS = 1 << 33
    WORK_LEVEL_RELS = 1 << 34


class ReleaseType(Flag):
    """Release group types usable as a ``type=`` filter."""

    NONE = 0
    ALBUM = 1 << 0
    BROADCAST = 1 << 1
    EP = 1 << 2
    OTHER = 1 << 3
    SINGLE = 1 << 4
    AUDIOBOOK = 1 << 5
    AUDIO_DRAMA = 1 << 6
    COMPILATION = 1 << 7
    DEMO = 1 << 8
    DJ_MIX = 1 << 9
    FIELD_RECORDING = 1 << 10
    INTERVIEW = 1 << 11
    LIVE = 1 << 12
    MIXTAPE = 1 << 13
    REMIX = 1 << 14
    SOUNDTRACK = 1 << 15
    SPOKENWORD = 1 << 16


class ReleaseStatus(Flag):
    """Release statuses usable as a ``status=`` filter."""

    NONE = 0
    OFFICIAL = 1 << 0
    PROMOTION = 1 << 1
    BOOTLEG = 1 << 2
    PSEUDO_RELEASE = 1 << 3
    WITHDRAWN = 1 << 4
    CANCELLED = 1 << 5


# Wire names that do not follow the lower-case/hyphen rule.
_SPECIAL_NAMES: Dict[Flag, str] = {
    ReleaseType.AUDIO_DRAMA: "audio drama",
    ReleaseType.FIELD_RECORDING: "field recording",
    ReleaseType.MIXTAPE: "mixtape/street",
}


def flag_names(value: Optional[Flag]) -> List[str]:
    """Wire names of the members set in ``value``, in declaration order."""
    if value is None:
        return []
    names = []
    for member in type(value).__members__.values():
        if member.value and member in value:
            names.append(_SPECIAL_NAMES.get(member, member.name.lower().replace("_", "-")))
    return names


# Related-entity filters each browse resource accepts.
BROWSE_FILTERS: Mapping[str, Tuple[str, ...]] = {
    "area": ("collection",),
    "artist": ("area", "collection", "recording", "release", "release-group", "work"),
    "collection": ("area", "artist", "editor", "event", "label", "place", "recording", "release",
                   "release-group", "work"),
    "event": ("area", "artist", "collection", "place"),
    "instrument": ("collection",),
    "label": ("area", "collection", "release"),
    "place": ("area", "collection"),
    "recording": ("artist", "collection", "release", "work"),
    "release": ("area", "artist", "collection", "label", "recording", "release-group", "track",
                "track_artist"),
    "release-group": ("artist", "collection", "release"),
    "series": ("collection",),
    "work": ("artist", "collection"),
}

SEARCH_RESOURCES: Tuple[str, ...] = (
    "annotation", "area", "artist", "cdstub", "event", "instrument", "label", "place",
    "recording", "release", "release-group", "series", "tag", "url", "work",
)


def plural_of(resource: str) -> str:
    """JSON key holding a list of ``resource`` items (``release-groups``, ``series``)."""
    return resource if resource == "series" else resource + "s"


def build_path(resource: str, identifier: Union[str, UUID, None] = None) -> str:
    """
    Build the service path for a resource.

    Args:
        resource: Resource name (``artist``, ``release-group``, ...)
        identifier: MBID or other key; ``None`` for collection-level paths

    Returns:
        ``/ws/2/<resource>`` or ``/ws/2/<resource>/<identifier>``
    """
    if not resource or not resource.strip():
        raise ConfigurationError("The resource name must not be blank.", "resource", resource)
    path = f"{WS_PREFIX}/{resource}"
    if identifier is not None:
        text = str(identifier)
        if not text.strip():
            raise ConfigurationError("The identifier must not be blank.", "identifier", identifier)
        path += "/" + quote(text, safe="")
    return path


def build_params(
    inc: Optional[Include] = None,
    type: Optional[ReleaseType] = None,
    status: Optional[ReleaseStatus] = None,
    extra: Iterable[Param] = (),
) -> List[Param]:
    """
    Build the ordered query parameters for a request.

    ``fmt=json`` always comes first. Include names are joined with a space,
    which the transport encodes as ``+``; type and status filters are joined
    with ``|``.

    Args:
        inc: Additional information to request
        type: Release type filter
        status: Release status filter
        extra: Further parameters, appended in order

    Returns:
        List of ``(key, value)`` pairs
    """
    params: List[Param] = [("fmt", "json")]
    incs = flag_names(inc)
    if incs:
        params.append(("inc", " ".join(incs)))
    types = flag_names(type)
    if types:
        params.append(("type", "|".join(types)))
    statuses = flag_names(status)
    if statuses:
        params.append(("status", "|".join(statuses)))
    params.extend(extra)
    return params


def toc_params(toc: Optional[Sequence[int]], all_media_formats: bool = False, no_stubs: bool = False) -> List[Param]:
    """Parameters for a disc ID lookup with an optional fuzzy TOC."""
    params: List[Param] = []
    if toc:
        params.append(("toc", " ".join(str(n) for n in toc)))
    if all_media_formats:
        params.append(("media-format", "all"))
    if no_stubs:
        params.append(("cdstubs", "no"))
    return params


def browse_filter(resource: str, filters: Mapping[str, Union[str, UUID, None]]) -> Param:
    """
    Validate and return the single related-entity filter of a browse.

    Args:
        resource: Resource being browsed
        filters: Candidate filters keyed by related entity; ``None`` values are ignored

    Raises:
        ConfigurationError: If not exactly one supported filter is given
    """
    allowed = BROWSE_FILTERS[resource]
    given = {k.replace("_", "-") if k != "track_artist" else k: v for k, v in filters.items() if v is not None}
    unsupported = sorted(set(given) - set(allowed))
    if unsupported:
        raise ConfigurationError(
            f"Cannot browse {plural_of(resource)} by {', '.join(unsupported)}.", "filter", unsupported)
    if len(given) != 1:
        raise ConfigurationError(
            f"Browsing {plural_of(resource)} requires exactly one of: {', '.join(allowed)}.",
            "filter", sorted(given))
    key, value = next(iter(given.items()))
    return key, str(value)


__all__ = [
    "WS_PREFIX",
    "Include",
    "ReleaseType",
    "ReleaseStatus",
    "BROWSE_FILTERS",
    "SEARCH_RESOURCES",
    "flag_names",
    "plural_of",
    "build_path",
    "build_params",
    "toc_params",
    "browse_filter",
]
