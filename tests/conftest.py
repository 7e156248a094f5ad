from __future__ import annotations

import pytest

from helpers import API_KEY
from watchlistarr.config import ManagerSettings, ShowManagerSettings


@pytest.fixture
def movie_settings() -> ManagerSettings:
    return ManagerSettings(
        base_url="http://radarr:7878",
        api_key=API_KEY,
        quality_profile="HD-1080p",
        tags=["watchlist", "unknown-tag"],
    )


@pytest.fixture
def show_settings() -> ShowManagerSettings:
    return ShowManagerSettings(
        base_url="http://sonarr:8989",
        api_key=API_KEY,
        season_monitoring="future",
    )
