"""
Query facade: lookups, browses, searches and submissions.

:class:`Query` runs on ``requests`` and blocks; :class:`AsyncQuery` runs on
``aiohttp`` and every method returns an awaitable. Both share the request
construction in :class:`_QueryMethods`; the subclasses only decide how a
request is sent.
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Type, Union
from uuid import UUID

import aiohttp
import requests

from .codec import browse_page_decoder, decode_discid_result, entity_decoder, search_page_decoder
from .endpoints import (
    Include,
    ReleaseStatus,
    ReleaseType,
    browse_filter,
    build_params,
    build_path,
    plural_of,
    toc_params,
)
from .models.base import MusicBrainzModel
from .models.entities import (
    Annotation,
    Area,
    Artist,
    CdStub,
    Collection,
    Event,
    Genre,
    Instrument,
    Isrc,
    Label,
    Place,
    Recording,
    Release,
    ReleaseGroup,
    Series,
    Tag,
    Url,
    Work,
)
from .paging.cursor import AsyncPagedQuery, PagedQuery
from .runtime.config import ServiceConfig, default_config
from .runtime.errors import ConfigurationError
from .submissions import RatingSubmission, Submission, TagSubmission, TagVote, collection_request
from .transport.async_gate import AsyncRequestGate
from .transport.base import LogicalRequest
from .transport.executor import AsyncExecutor, Executor
from .transport.gate import RequestGate

logger = logging.getLogger(__name__)

Mbid = Union[str, UUID]

ENTITY_MODELS: Mapping[str, Type[MusicBrainzModel]] = {
    "annotation": Annotation,
    "area": Area,
    "artist": Artist,
    "cdstub": CdStub,
    "collection": Collection,
    "event": Event,
    "genre": Genre,
    "instrument": Instrument,
    "isrc": Isrc,
    "label": Label,
    "place": Place,
    "recording": Recording,
    "release": Release,
    "release-group": ReleaseGroup,
    "series": Series,
    "tag": Tag,
    "url": Url,
    "work": Work,
}


def _mbid(value: Mbid, name: str = "mbid") -> str:
    if isinstance(value, UUID):
        return str(value)
    try:
        return str(UUID(str(value)))
    except ValueError:
        raise ConfigurationError(f"'{value}' is not a valid MBID.", name, value) from None


def _key(value: Optional[str], name: str) -> str:
    if value is None or not str(value).strip():
        raise ConfigurationError(f"The {name} must not be blank.", name, value)
    return str(value).strip()


class _QueryMethods:
    """Request construction shared by the sync and async facades."""

    # Implemented by subclasses; each returns a value (sync) or an awaitable (async).
    def _execute(self, request: LogicalRequest, decoder: Callable[[bytes], Any]) -> Any:
        raise NotImplementedError

    def _paged(self, request: LogicalRequest, page_decoder, limit: Optional[int], offset: int,
               single_shot: bool = False) -> Any:
        raise NotImplementedError

    def _first_page_items(self, request: LogicalRequest, page_decoder) -> Any:
        raise NotImplementedError

    def _submit(self, request: LogicalRequest) -> Any:
        raise NotImplementedError

    # Lookups

    def lookup(self, resource: str, identifier: Union[Mbid, None], inc: Optional[Include] = None,
               model: Optional[Type[MusicBrainzModel]] = None, params: Iterable[Tuple[str, str]] = (),
               timeout: Optional[float] = None) -> Any:
        """
        Look up any resource by identifier.

        Args:
            resource: Resource name (``artist``, ``release-group``, ...)
            identifier: MBID or other key; ``None`` for key-less lookups
            inc: Additional information to include
            model: Model to decode into (defaults to the resource's model)
            params: Extra query parameters
            timeout: Deadline for this call, overriding the configured timeout

        Returns:
            Decoded entity

        Raises:
            TransportError, RemoteError, DecodeError
        """
        if model is None:
            if resource not in ENTITY_MODELS:
                raise ConfigurationError(f"No model known for resource '{resource}'.", "resource", resource)
            model = ENTITY_MODELS[resource]
        request = LogicalRequest("GET", build_path(resource, identifier),
                                 tuple(build_params(inc, extra=params)), timeout=timeout)
        return self._execute(request, entity_decoder(model))

    def _lookup(self, resource: str, identifier: str, inc: Optional[Include] = None,
                type: Optional[ReleaseType] = None, status: Optional[ReleaseStatus] = None,
                extra: Iterable[Tuple[str, str]] = (), decoder=None) -> Any:
        request = LogicalRequest("GET", build_path(resource, identifier),
                                 tuple(build_params(inc, type, status, extra)))
        return self._execute(request, decoder or entity_decoder(ENTITY_MODELS[resource]))

    def lookup_area(self, mbid: Mbid, inc: Optional[Include] = None):
        return self._lookup("area", _mbid(mbid), inc)

    def lookup_artist(self, mbid: Mbid, inc: Optional[Include] = None, type: Optional[ReleaseType] = None,
                      status: Optional[ReleaseStatus] = None):
        """
        Look up an artist.

        ``type`` applies only when ``inc`` includes release groups or releases;
        ``status`` only when it includes releases.
        """
        return self._lookup("artist", _mbid(mbid), inc, type, status)

    def lookup_collection(self, mbid: Mbid, inc: Optional[Include] = None):
        return self._lookup("collection", _mbid(mbid), inc)

    def lookup_discid(self, discid: str, toc: Optional[Sequence[int]] = None, inc: Optional[Include] = None,
                      all_media_formats: bool = False, no_stubs: bool = False):
        """
        Look up a disc ID, with an optional fuzzy match on a table of contents.

        Args:
            discid: Disc ID; ``-`` together with ``toc`` requests only a fuzzy lookup
            toc: First track, track count, lead-out offset, then each track's offset
            inc: Additional information to include
            all_media_formats: Consider all media formats for a fuzzy match, not just CDs
            no_stubs: Do not return CD stubs

        Returns:
            A :class:`DiscIdLookupResult` holding a disc, a stub or a release list
        """
        return self._lookup("discid", _key(discid, "discid"), inc,
                            extra=toc_params(toc, all_media_formats, no_stubs), decoder=decode_discid_result)

    def lookup_event(self, mbid: Mbid, inc: Optional[Include] = None):
        return self._lookup("event", _mbid(mbid), inc)

    def lookup_genre(self, mbid: Mbid):
        return self._lookup("genre", _mbid(mbid))

    def lookup_instrument(self, mbid: Mbid, inc: Optional[Include] = None):
        return self._lookup("instrument", _mbid(mbid), inc)

    def lookup_isrc(self, isrc: str, inc: Optional[Include] = None):
        return self._lookup("isrc", _key(isrc, "isrc"), inc)

    def lookup_iswc(self, iswc: str, inc: Optional[Include] = None):
        """
        Look up the works with a given ISWC.

        The service answers with a browse-shaped body but no paging, so this
        fetches the one page there is and returns its works.
        """
        request = LogicalRequest("GET", build_path("iswc", _key(iswc, "iswc")), tuple(build_params(inc)))
        return self._first_page_items(request, browse_page_decoder(Work, "work", "works"))

    def lookup_label(self, mbid: Mbid, inc: Optional[Include] = None, type: Optional[ReleaseType] = None,
                     status: Optional[ReleaseStatus] = None):
        return self._lookup("label", _mbid(mbid), inc, type, status)

    def lookup_place(self, mbid: Mbid, inc: Optional[Include] = None):
        return self._lookup("place", _mbid(mbid), inc)

    def lookup_recording(self, mbid: Mbid, inc: Optional[Include] = None, type: Optional[ReleaseType] = None,
                         status: Optional[ReleaseStatus] = None):
        return self._lookup("recording", _mbid(mbid), inc, type, status)

    def lookup_release(self, mbid: Mbid, inc: Optional[Include] = None):
        return self._lookup("release", _mbid(mbid), inc)

    def lookup_release_group(self, mbid: Mbid, inc: Optional[Include] = None,
                             status: Optional[ReleaseStatus] = None):
        return self._lookup("release-group", _mbid(mbid), inc, status=status)

    def lookup_series(self, mbid: Mbid, inc: Optional[Include] = None):
        return self._lookup("series", _mbid(mbid), inc)

    def lookup_url(self, mbid: Optional[Mbid] = None, inc: Optional[Include] = None,
                   resource: Optional[str] = None):
        """Look up a URL entity, either by its MBID or by the URL itself."""
        if (mbid is None) == (resource is None):
            raise ConfigurationError("Specify exactly one of an MBID or a resource.", "resource", resource)
        if resource is not None:
            return self._lookup("url", None, inc, extra=[("resource", _key(resource, "resource"))])
        return self._lookup("url", _mbid(mbid), inc)

    def lookup_work(self, mbid: Mbid, inc: Optional[Include] = None):
        return self._lookup("work", _mbid(mbid), inc)

    # Browses

    def _browse(self, resource: str, filters: Mapping[str, Any], inc: Optional[Include], limit: Optional[int],
                offset: int, type: Optional[ReleaseType] = None, status: Optional[ReleaseStatus] = None):
        related = browse_filter(resource, filters)
        request = LogicalRequest("GET", build_path(resource), tuple(build_params(inc, type, status, [related])))
        decoder = browse_page_decoder(ENTITY_MODELS[resource], resource, plural_of(resource))
        return self._paged(request, decoder, limit, offset)

    def browse_areas(self, collection: Optional[Mbid] = None, inc: Optional[Include] = None,
                     limit: Optional[int] = None, offset: int = 0):
        """Browse the areas in a collection."""
        return self._browse("area", {"collection": collection}, inc, limit, offset)

    def browse_artists(self, area: Optional[Mbid] = None, collection: Optional[Mbid] = None,
                       recording: Optional[Mbid] = None, release: Optional[Mbid] = None,
                       release_group: Optional[Mbid] = None, work: Optional[Mbid] = None,
                       inc: Optional[Include] = None, limit: Optional[int] = None, offset: int = 0):
        return self._browse("artist", {"area": area, "collection": collection, "recording": recording,
                                       "release": release, "release_group": release_group, "work": work},
                            inc, limit, offset)

    def browse_collections(self, area: Optional[Mbid] = None, artist: Optional[Mbid] = None,
                           editor: Optional[str] = None, event: Optional[Mbid] = None,
                           label: Optional[Mbid] = None, place: Optional[Mbid] = None,
                           recording: Optional[Mbid] = None, release: Optional[Mbid] = None,
                           release_group: Optional[Mbid] = None, work: Optional[Mbid] = None,
                           inc: Optional[Include] = None, limit: Optional[int] = None, offset: int = 0):
        """Browse collections containing an entity, or owned by an editor."""
        return self._browse("collection", {"area": area, "artist": artist, "editor": editor, "event": event,
                                           "label": label, "place": place, "recording": recording,
                                           "release": release, "release_group": release_group, "work": work},
                            inc, limit, offset)

    def browse_events(self, area: Optional[Mbid] = None, artist: Optional[Mbid] = None,
                      collection: Optional[Mbid] = None, place: Optional[Mbid] = None,
                      inc: Optional[Include] = None, limit: Optional[int] = None, offset: int = 0):
        return self._browse("event", {"area": area, "artist": artist, "collection": collection, "place": place},
                            inc, limit, offset)

    def browse_instruments(self, collection: Optional[Mbid] = None, inc: Optional[Include] = None,
                           limit: Optional[int] = None, offset: int = 0):
        return self._browse("instrument", {"collection": collection}, inc, limit, offset)

    def browse_labels(self, area: Optional[Mbid] = None, collection: Optional[Mbid] = None,
                      release: Optional[Mbid] = None, inc: Optional[Include] = None,
                      limit: Optional[int] = None, offset: int = 0):
        return self._browse("label", {"area": area, "collection": collection, "release": release},
                            inc, limit, offset)

    def browse_places(self, area: Optional[Mbid] = None, collection: Optional[Mbid] = None,
                      inc: Optional[Include] = None, limit: Optional[int] = None, offset: int = 0):
        return self._browse("place", {"area": area, "collection": collection}, inc, limit, offset)

    def browse_recordings(self, artist: Optional[Mbid] = None, collection: Optional[Mbid] = None,
                          release: Optional[Mbid] = None, work: Optional[Mbid] = None,
                          inc: Optional[Include] = None, limit: Optional[int] = None, offset: int = 0):
        return self._browse("recording", {"artist": artist, "collection": collection, "release": release,
                                          "work": work}, inc, limit, offset)

    def browse_releases(self, area: Optional[Mbid] = None, artist: Optional[Mbid] = None,
                        collection: Optional[Mbid] = None, label: Optional[Mbid] = None,
                        recording: Optional[Mbid] = None, release_group: Optional[Mbid] = None,
                        track: Optional[Mbid] = None, track_artist: Optional[Mbid] = None,
                        inc: Optional[Include] = None, type: Optional[ReleaseType] = None,
                        status: Optional[ReleaseStatus] = None, limit: Optional[int] = None, offset: int = 0):
        """
        Browse releases related to one entity.

        Args:
            area, artist, collection, label, recording, release_group, track,
                track_artist: The related entity (exactly one)
            inc: Additional information to include
            type: Only releases whose release group has one of these types
            status: Only releases with one of these statuses
            limit: Page size (1-100; the service default when omitted)
            offset: Offset of the first page

        Returns:
            A cursor; call ``next()`` to fetch the first page
        """
        return self._browse("release", {"area": area, "artist": artist, "collection": collection, "label": label,
                                        "recording": recording, "release_group": release_group, "track": track,
                                        "track_artist": track_artist},
                            inc, limit, offset, type, status)

    def browse_release_groups(self, artist: Optional[Mbid] = None, collection: Optional[Mbid] = None,
                              release: Optional[Mbid] = None, inc: Optional[Include] = None,
                              type: Optional[ReleaseType] = None, limit: Optional[int] = None, offset: int = 0):
        return self._browse("release-group", {"artist": artist, "collection": collection, "release": release},
                            inc, limit, offset, type)

    def browse_series(self, collection: Optional[Mbid] = None, inc: Optional[Include] = None,
                      limit: Optional[int] = None, offset: int = 0):
        return self._browse("series", {"collection": collection}, inc, limit, offset)

    def browse_works(self, artist: Optional[Mbid] = None, collection: Optional[Mbid] = None,
                     inc: Optional[Include] = None, limit: Optional[int] = None, offset: int = 0):
        return self._browse("work", {"artist": artist, "collection": collection}, inc, limit, offset)

    # Searches

    def _find(self, resource: str, query: str, limit: Optional[int], offset: int, simple: bool):
        query = _key(query, "query")
        extra: List[Tuple[str, str]] = [("query", query)]
        if simple:
            extra.append(("dismax", "true"))
        request = LogicalRequest("GET", build_path(resource), tuple(build_params(extra=extra)))
        return self._paged(request, search_page_decoder(ENTITY_MODELS[resource], plural_of(resource)), limit, offset)

    def find_annotations(self, query: str, limit: Optional[int] = None, offset: int = 0, simple: bool = False):
        return self._find("annotation", query, limit, offset, simple)

    def find_areas(self, query: str, limit: Optional[int] = None, offset: int = 0, simple: bool = False):
        return self._find("area", query, limit, offset, simple)

    def find_artists(self, query: str, limit: Optional[int] = None, offset: int = 0, simple: bool = False):
        """
        Search for artists.

        Args:
            query: Lucene query, or plain text when ``simple`` is set
            limit: Page size (1-100)
            offset: Offset of the first page
            simple: Use the service's simple (dismax) query parser

        Returns:
            A cursor over :class:`SearchResult` items
        """
        return self._find("artist", query, limit, offset, simple)

    def find_cd_stubs(self, query: str, limit: Optional[int] = None, offset: int = 0, simple: bool = False):
        return self._find("cdstub", query, limit, offset, simple)

    def find_events(self, query: str, limit: Optional[int] = None, offset: int = 0, simple: bool = False):
        return self._find("event", query, limit, offset, simple)

    def find_instruments(self, query: str, limit: Optional[int] = None, offset: int = 0, simple: bool = False):
        return self._find("instrument", query, limit, offset, simple)

    def find_labels(self, query: str, limit: Optional[int] = None, offset: int = 0, simple: bool = False):
        return self._find("label", query, limit, offset, simple)

    def find_places(self, query: str, limit: Optional[int] = None, offset: int = 0, simple: bool = False):
        return self._find("place", query, limit, offset, simple)

    def find_recordings(self, query: str, limit: Optional[int] = None, offset: int = 0, simple: bool = False):
        return self._find("recording", query, limit, offset, simple)

    def find_releases(self, query: str, limit: Optional[int] = None, offset: int = 0, simple: bool = False):
        return self._find("release", query, limit, offset, simple)

    def find_release_groups(self, query: str, limit: Optional[int] = None, offset: int = 0,
                            simple: bool = False):
        return self._find("release-group", query, limit, offset, simple)

    def find_series(self, query: str, limit: Optional[int] = None, offset: int = 0, simple: bool = False):
        return self._find("series", query, limit, offset, simple)

    def find_tags(self, query: str, limit: Optional[int] = None, offset: int = 0, simple: bool = False):
        return self._find("tag", query, limit, offset, simple)

    def find_urls(self, query: str, limit: Optional[int] = None, offset: int = 0, simple: bool = False):
        return self._find("url", query, limit, offset, simple)

    def find_works(self, query: str, limit: Optional[int] = None, offset: int = 0, simple: bool = False):
        return self._find("work", query, limit, offset, simple)

    # Submissions

    def submit(self, submission: Submission):
        """Send a prepared submission; returns the service's message (usually ``OK``)."""
        return self._submit(submission.to_request())

    def submit_ratings(self, client: str, ratings: Iterable[Tuple[str, Mbid, int]]):
        """
        Submit user ratings.

        Args:
            client: Client ID identifying the application
            ratings: ``(entity type, mbid, rating)`` triples; ratings run 0-100

        Returns:
            The service's message
        """
        submission = RatingSubmission(client)
        for entity, mbid, rating in ratings:
            submission.add(entity, _mbid(mbid), rating)
        return self.submit(submission)

    def submit_tags(self, client: str, tags: Iterable[Tuple[str, Mbid, Union[str, Iterable[str]]]],
                    vote: TagVote = TagVote.UPVOTE):
        """Submit user tags; every tag in ``tags`` gets the same ``vote``."""
        submission = TagSubmission(client)
        for entity, mbid, names in tags:
            submission.add(entity, _mbid(mbid), names, vote)
        return self.submit(submission)

    def add_to_collection(self, client: str, collection: Mbid, entity: str, items: Iterable[Mbid]):
        ids = [_mbid(item, "items") for item in items]
        return self._submit(collection_request("PUT", client, _mbid(collection, "collection"), entity, ids))

    def remove_from_collection(self, client: str, collection: Mbid, entity: str, items: Iterable[Mbid]):
        ids = [_mbid(item, "items") for item in items]
        return self._submit(collection_request("DELETE", client, _mbid(collection, "collection"), entity, ids))


class Query(_QueryMethods):
    """
    Synchronous MusicBrainz client.

    Example:
        ```python
        with Query(ServiceConfig(user_agent="MyApp/1.0 (me@example.org)")) as q:
            artist = q.lookup_artist("5b11f4ce-a62d-471e-81fc-a69a8278c7da", Include.ALIASES)
            for release in q.browse_releases(artist=artist.id, limit=100).items():
                print(release.title)
        ```
    """

    def __init__(self, config: Optional[ServiceConfig] = None, session: Optional[requests.Session] = None,
                 take_ownership: bool = False):
        """
        Initialize the client.

        Args:
            config: Service configuration (a copy of the default when omitted)
            session: Optional caller-owned ``requests.Session``
            take_ownership: Let this client close ``session`` as if it had created it
        """
        self.config = config if config is not None else default_config().model_copy()
        self.gate = RequestGate(self.config, session, take_ownership)
        self.executor = Executor(self.gate)

    @property
    def bearer_token(self) -> Optional[str]:
        return self.gate.bearer_token

    @bearer_token.setter
    def bearer_token(self, value: Optional[str]) -> None:
        self.gate.bearer_token = value

    def _execute(self, request, decoder):
        return self.executor.execute(request, decoder)

    def _paged(self, request, page_decoder, limit, offset, single_shot=False):
        return PagedQuery(self.executor, request, page_decoder, limit, offset, single_shot)

    def _first_page_items(self, request, page_decoder):
        return self._paged(request, page_decoder, None, 0, single_shot=True).next().items

    def _submit(self, request):
        return self.executor.execute_text(request)

    def configure_creation(self, factory: Optional[Callable[[], requests.Session]]) -> None:
        self.gate.configure_creation(factory)

    def configure_setup(self, configurator: Optional[Callable[[requests.Session], None]]) -> None:
        self.gate.configure_setup(configurator)

    def close(self) -> None:
        """Close the underlying session; the next request opens a new one."""
        self.gate.close()

    def shutdown(self) -> None:
        self.gate.shutdown()

    def __enter__(self) -> Query:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        return f"Query(base_url={self.config.base_url!r})"


class AsyncQuery(_QueryMethods):
    """
    Asynchronous MusicBrainz client on ``aiohttp``.

    Lookups and submissions return awaitables; browse and search methods
    return an :class:`AsyncPagedQuery` directly.
    """

    def __init__(self, config: Optional[ServiceConfig] = None, session: Optional[aiohttp.ClientSession] = None,
                 take_ownership: bool = False):
        self.config = config if config is not None else default_config().model_copy()
        self.gate = AsyncRequestGate(self.config, session, take_ownership)
        self.executor = AsyncExecutor(self.gate)

    @property
    def bearer_token(self) -> Optional[str]:
        return self.gate.bearer_token

    @bearer_token.setter
    def bearer_token(self, value: Optional[str]) -> None:
        self.gate.bearer_token = value

    def _execute(self, request, decoder):
        return self.executor.execute(request, decoder)

    def _paged(self, request, page_decoder, limit, offset, single_shot=False):
        return AsyncPagedQuery(self.executor, request, page_decoder, limit, offset, single_shot)

    async def _first_page_items(self, request, page_decoder):
        page = await self._paged(request, page_decoder, None, 0, single_shot=True).next()
        return page.items

    def _submit(self, request):
        return self.executor.execute_text(request)

    def configure_creation(self, factory: Optional[Callable[[], aiohttp.ClientSession]]) -> None:
        self.gate.configure_creation(factory)

    def configure_setup(self, configurator: Optional[Callable[[aiohttp.ClientSession], None]]) -> None:
        self.gate.configure_setup(configurator)

    async def close(self) -> None:
        await self.gate.close()

    async def shutdown(self) -> None:
        await self.gate.shutdown()

    async def __aenter__(self) -> AsyncQuery:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.shutdown()

    def __repr__(self) -> str:
        return f"AsyncQuery(base_url={self.config.base_url!r})"


__all__ = ["Query", "AsyncQuery", "ENTITY_MODELS"]
