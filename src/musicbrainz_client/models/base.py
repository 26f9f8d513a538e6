"""
Base model for MusicBrainz JSON objects.

Field names are snake_case in Python and hyphenated on the wire
(``sort_name`` <-> ``sort-name``). Fields the model does not declare are
kept rather than rejected, and exposed via ``unhandled_properties``.
"""

from __future__ import annotations
from typing import Any, Dict
from uuid import UUID

from pydantic import BaseModel


def to_wire_name(name: str) -> str:
    return name.replace("_", "-")


class MusicBrainzModel(BaseModel):
    """Forward-compatible base: unknown fields are collected, never fatal."""

    model_config = {
        "alias_generator": to_wire_name,
        "populate_by_name": True,
        "extra": "allow",
        "frozen": True,
    }

    @property
    def unhandled_properties(self) -> Dict[str, Any]:
        """Fields present in the JSON that this model does not recognise."""
        return dict(self.model_extra or {})


class Entity(MusicBrainzModel):
    """A MusicBrainz entity; the MBID is required."""

    id: UUID


__all__ = ["MusicBrainzModel", "Entity", "to_wire_name"]
