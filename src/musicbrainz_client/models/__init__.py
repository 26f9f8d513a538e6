"""
Typed models for MusicBrainz web service responses.
"""

from .base import MusicBrainzModel, Entity
from .entities import (
    LifeSpan,
    Alias,
    Tag,
    UserTag,
    Rating,
    UserRating,
    Relationship,
    Coordinates,
    Genre,
    Area,
    ArtistCredit,
    Artist,
    Collection,
    Event,
    Instrument,
    LabelInfo,
    Label,
    Place,
    Recording,
    Track,
    Disc,
    CdStub,
    Medium,
    Release,
    ReleaseGroup,
    Series,
    Url,
    Work,
    Isrc,
    Annotation,
    DiscIdLookupResult,
)
from .search import SearchResult
from .token import AuthorizationToken

__all__ = [
    "MusicBrainzModel",
    "Entity",
    "LifeSpan",
    "Alias",
    "Tag",
    "UserTag",
    "Rating",
    "UserRating",
    "Relationship",
    "Coordinates",
    "Genre",
    "Area",
    "ArtistCredit",
    "Artist",
    "Collection",
    "Event",
    "Instrument",
    "LabelInfo",
    "Label",
    "Place",
    "Recording",
    "Track",
    "Disc",
    "CdStub",
    "Medium",
    "Release",
    "ReleaseGroup",
    "Series",
    "Url",
    "Work",
    "Isrc",
    "Annotation",
    "DiscIdLookupResult",
    "SearchResult",
    "AuthorizationToken",
]
