"""Library manager adapters (Radarr for movies, Sonarr for shows)."""

from __future__ import annotations

from .base import ManagerAdapter, build_search_term
from .models import LookupResult, QualityProfile, RootFolder, Tag, TierSnapshot
from .movies import MovieManager
from .shows import ShowManager

__all__ = [
    "LookupResult",
    "ManagerAdapter",
    "MovieManager",
    "QualityProfile",
    "RootFolder",
    "ShowManager",
    "Tag",
    "TierSnapshot",
    "build_search_term",
]
