from __future__ import annotations

from typing import Any, Dict

from ..models import ItemKind, PlacementParams
from .base import ManagerAdapter
from .models import LookupResult


class MovieManager(ManagerAdapter):
    """Radarr adapter; movies are deduplicated on their TMDB id."""

    kind = ItemKind.MOVIE
    name = "Radarr"
    collection = "movie"
    default_root_folder = "/mnt/shared/movies"
    id_namespaces = ("tmdb_id",)

    def build_add_request(self, result: LookupResult, placement: PlacementParams) -> Dict[str, Any]:
        body = self._base_add_request(result, placement)
        body["originalTitle"] = result.original_title or result.title
        body["addOptions"] = {"searchForMovie": True}
        return body
