from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class ItemKind(str, Enum):
    MOVIE = "movie"
    SHOW = "show"


PRIMARY_USER = "self"


@dataclass(frozen=True, slots=True)
class WatchlistEntry:
    """One title the user (or a collaborator) wants tracked.

    ``id`` is the source's opaque rating key; ``id`` plus ``kind`` is unique
    within a single poll.
    """

    id: str
    title: str
    kind: ItemKind
    year: Optional[int] = None
    guid: Optional[str] = None
    observed_at: dt.datetime = field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))
    user_id: str = PRIMARY_USER

    @property
    def label(self) -> str:
        if self.year is None:
            return self.title
        return f"{self.title} ({self.year})"


@dataclass(frozen=True, slots=True)
class LibraryRecord:
    """Cross-reference ids of an entry already present in a manager's library."""

    tmdb_id: Optional[int] = None
    tvdb_id: Optional[int] = None


@dataclass(frozen=True, slots=True)
class PlacementParams:
    quality_profile_id: int
    root_folder_path: str
    tag_ids: Tuple[int, ...] = ()
    season_monitoring: Optional[str] = None


class AddOutcome(str, Enum):
    ADDED = "added"
    ALREADY_EXISTS = "already-exists"

