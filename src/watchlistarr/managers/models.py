"""Pydantic models for Radarr/Sonarr v3 API responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LookupResult(BaseModel):
    """Canonical metadata for a title as known by a manager's metadata index.

    Fields the engine does not interpret are kept in ``extra_fields`` and sent
    back unchanged with the add request.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: str
    sort_title: str | None = Field(default=None, alias="sortTitle")
    original_title: str | None = Field(default=None, alias="originalTitle")
    year: int | None = None
    tmdb_id: int | None = Field(default=None, alias="tmdbId")
    tvdb_id: int | None = Field(default=None, alias="tvdbId")
    imdb_id: str | None = Field(default=None, alias="imdbId")

    @property
    def extra_fields(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class LibraryItemResponse(BaseModel):
    """Projection of a library entry onto the ids used for dedup."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    tmdb_id: int | None = Field(default=None, alias="tmdbId")
    tvdb_id: int | None = Field(default=None, alias="tvdbId")


class QualityProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str


class RootFolder(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    path: str


class Tag(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    label: str


@dataclass(slots=True)
class TierSnapshot:
    """Live snapshot of a manager's quality tiers, storage roots and tags.

    The first element of each ranked list is the manager's default.
    """

    quality_profiles: list[QualityProfile] = field(default_factory=list)
    root_folders: list[RootFolder] = field(default_factory=list)
    tags: dict[str, int] = field(default_factory=dict)
