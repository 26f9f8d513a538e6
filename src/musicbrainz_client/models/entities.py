"""
MusicBrainz entity models.

Only the commonly used fields are declared; everything else the service sends
ends up in ``unhandled_properties``. Optional fields that are absent stay
``None``; no defaults are guessed.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
from uuid import UUID

from .base import Entity, MusicBrainzModel


class LifeSpan(MusicBrainzModel):
    begin: Optional[str] = None
    end: Optional[str] = None
    ended: Optional[bool] = None


class Alias(MusicBrainzModel):
    name: Optional[str] = None
    sort_name: Optional[str] = None
    locale: Optional[str] = None
    primary: Optional[bool] = None
    type: Optional[str] = None
    type_id: Optional[UUID] = None
    begin: Optional[str] = None
    end: Optional[str] = None
    ended: Optional[bool] = None


class Tag(MusicBrainzModel):
    name: Optional[str] = None
    count: Optional[int] = None

    def __str__(self) -> str:
        return self.name or ""


class UserTag(MusicBrainzModel):
    name: Optional[str] = None

    def __str__(self) -> str:
        return self.name or ""


class Rating(MusicBrainzModel):
    value: Optional[float] = None
    votes_count: Optional[int] = None


class UserRating(MusicBrainzModel):
    value: Optional[int] = None


class Relationship(MusicBrainzModel):
    """A relationship to another entity; the target stays a raw mapping."""

    type: Optional[str] = None
    type_id: Optional[UUID] = None
    direction: Optional[str] = None
    target_type: Optional[str] = None
    begin: Optional[str] = None
    end: Optional[str] = None
    ended: Optional[bool] = None
    attributes: Optional[List[str]] = None


class Coordinates(MusicBrainzModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class _CoreEntity(Entity):
    """Fields shared by the core entity types."""

    name: Optional[str] = None
    disambiguation: Optional[str] = None
    type: Optional[str] = None
    type_id: Optional[UUID] = None
    annotation: Optional[str] = None
    aliases: Optional[List[Alias]] = None
    tags: Optional[List[Tag]] = None
    genres: Optional[List[Genre]] = None
    user_tags: Optional[List[UserTag]] = None
    user_genres: Optional[List[Genre]] = None
    rating: Optional[Rating] = None
    user_rating: Optional[UserRating] = None
    relations: Optional[List[Relationship]] = None

    def __str__(self) -> str:
        text = self.name or ""
        if self.disambiguation:
            text += f" ({self.disambiguation})"
        return text


class Genre(Entity):
    name: Optional[str] = None
    disambiguation: Optional[str] = None
    count: Optional[int] = None

    def __str__(self) -> str:
        return self.name or ""


class Area(_CoreEntity):
    sort_name: Optional[str] = None
    iso_3166_1_codes: Optional[List[str]] = None
    iso_3166_2_codes: Optional[List[str]] = None
    life_span: Optional[LifeSpan] = None


class ArtistCredit(MusicBrainzModel):
    name: Optional[str] = None
    joinphrase: Optional[str] = None
    artist: Optional[Artist] = None


class Artist(_CoreEntity):
    sort_name: Optional[str] = None
    country: Optional[str] = None
    gender: Optional[str] = None
    gender_id: Optional[UUID] = None
    area: Optional[Area] = None
    begin_area: Optional[Area] = None
    end_area: Optional[Area] = None
    life_span: Optional[LifeSpan] = None
    ipis: Optional[List[str]] = None
    isnis: Optional[List[str]] = None
    recordings: Optional[List[Recording]] = None
    releases: Optional[List[Release]] = None
    release_groups: Optional[List[ReleaseGroup]] = None
    works: Optional[List[Work]] = None

    def __str__(self) -> str:
        text = super().__str__()
        if self.type is not None:
            text += f" ({self.type})"
        return text


class Collection(_CoreEntity):
    editor: Optional[str] = None
    entity_type: Optional[str] = None


class Event(_CoreEntity):
    cancelled: Optional[bool] = None
    life_span: Optional[LifeSpan] = None
    setlist: Optional[str] = None
    time: Optional[str] = None


class Instrument(_CoreEntity):
    description: Optional[str] = None


class LabelInfo(MusicBrainzModel):
    catalog_number: Optional[str] = None
    label: Optional[Label] = None


class Label(_CoreEntity):
    sort_name: Optional[str] = None
    country: Optional[str] = None
    label_code: Optional[int] = None
    area: Optional[Area] = None
    life_span: Optional[LifeSpan] = None
    ipis: Optional[List[str]] = None
    isnis: Optional[List[str]] = None
    releases: Optional[List[Release]] = None


class Place(_CoreEntity):
    address: Optional[str] = None
    area: Optional[Area] = None
    coordinates: Optional[Coordinates] = None
    life_span: Optional[LifeSpan] = None


class Recording(_CoreEntity):
    title: Optional[str] = None
    length: Optional[int] = None
    video: Optional[bool] = None
    first_release_date: Optional[str] = None
    isrcs: Optional[List[str]] = None
    artist_credit: Optional[List[ArtistCredit]] = None
    releases: Optional[List[Release]] = None

    def __str__(self) -> str:
        return self.title or ""


class Track(Entity):
    title: Optional[str] = None
    number: Optional[str] = None
    position: Optional[int] = None
    length: Optional[int] = None
    artist_credit: Optional[List[ArtistCredit]] = None
    recording: Optional[Recording] = None

    def __str__(self) -> str:
        return self.title or ""


class Disc(MusicBrainzModel):
    """A disc ID; its identifier is not an MBID."""

    id: str
    sectors: Optional[int] = None
    offset_count: Optional[int] = None
    offsets: Optional[List[int]] = None
    releases: Optional[List[Release]] = None


class CdStub(MusicBrainzModel):
    id: str
    title: Optional[str] = None
    artist: Optional[str] = None
    barcode: Optional[str] = None
    disambiguation: Optional[str] = None
    track_count: Optional[int] = None
    tracks: Optional[List[Dict[str, Any]]] = None


class Medium(MusicBrainzModel):
    title: Optional[str] = None
    position: Optional[int] = None
    format: Optional[str] = None
    format_id: Optional[UUID] = None
    track_count: Optional[int] = None
    track_offset: Optional[int] = None
    discs: Optional[List[Disc]] = None
    tracks: Optional[List[Track]] = None


class Release(_CoreEntity):
    title: Optional[str] = None
    status: Optional[str] = None
    status_id: Optional[UUID] = None
    date: Optional[str] = None
    country: Optional[str] = None
    barcode: Optional[str] = None
    asin: Optional[str] = None
    quality: Optional[str] = None
    packaging: Optional[str] = None
    artist_credit: Optional[List[ArtistCredit]] = None
    label_info: Optional[List[LabelInfo]] = None
    media: Optional[List[Medium]] = None
    release_group: Optional[ReleaseGroup] = None

    def __str__(self) -> str:
        return self.title or ""


class ReleaseGroup(_CoreEntity):
    title: Optional[str] = None
    primary_type: Optional[str] = None
    primary_type_id: Optional[UUID] = None
    secondary_types: Optional[List[str]] = None
    first_release_date: Optional[str] = None
    artist_credit: Optional[List[ArtistCredit]] = None
    releases: Optional[List[Release]] = None

    def __str__(self) -> str:
        return self.title or ""


class Series(_CoreEntity):
    pass


class Url(Entity):
    resource: Optional[str] = None
    relations: Optional[List[Relationship]] = None

    def __str__(self) -> str:
        return self.resource or ""


class Work(_CoreEntity):
    title: Optional[str] = None
    language: Optional[str] = None
    languages: Optional[List[str]] = None
    iswcs: Optional[List[str]] = None
    attributes: Optional[List[Dict[str, Any]]] = None

    def __str__(self) -> str:
        return self.title or ""


class Isrc(MusicBrainzModel):
    """Recordings associated with one ISRC."""

    isrc: str
    recordings: Optional[List[Recording]] = None


class Annotation(MusicBrainzModel):
    """An annotation search hit; these carry the annotated entity's MBID."""

    type: Optional[str] = None
    entity: Optional[UUID] = None
    name: Optional[str] = None
    text: Optional[str] = None


class DiscIdLookupResult(MusicBrainzModel):
    """Outcome of a disc ID lookup: a disc, a CD stub, or fuzzy-matched releases."""

    disc: Optional[Disc] = None
    stub: Optional[CdStub] = None
    releases: Optional[List[Release]] = None


for _model in (
    _CoreEntity, Area, ArtistCredit, Artist, Collection, Event, Instrument, LabelInfo, Label, Place,
    Recording, Track, Disc, Medium, Release, ReleaseGroup, Series, Url, Work, Isrc, DiscIdLookupResult,
):
    _model.model_rebuild()


__all__ = [
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
]
