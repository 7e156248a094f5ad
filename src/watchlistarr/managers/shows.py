from __future__ import annotations

import dataclasses
from typing import Any, Dict

from ..config import ShowManagerSettings
from ..models import ItemKind, PlacementParams
from .base import ManagerAdapter
from .models import LookupResult, TierSnapshot


class ShowManager(ManagerAdapter):
    """Sonarr adapter.

    Series may be indexed under a TVDB or a TMDB id depending on which
    metadata backend populated the library, so either id matching an
    existing series counts as already present.
    """

    kind = ItemKind.SHOW
    name = "Sonarr"
    collection = "series"
    default_root_folder = "/tv"
    id_namespaces = ("tvdb_id", "tmdb_id")

    settings: ShowManagerSettings

    def resolve_placement(self, snapshot: TierSnapshot) -> PlacementParams:
        placement = super().resolve_placement(snapshot)
        return dataclasses.replace(placement, season_monitoring=self.settings.season_monitoring)

    def build_add_request(self, result: LookupResult, placement: PlacementParams) -> Dict[str, Any]:
        body = self._base_add_request(result, placement)
        body["tvdbId"] = result.tvdb_id
        body["addOptions"] = {
            "monitor": placement.season_monitoring or "all",
            "searchForMissingEpisodes": True,
        }
        return body
