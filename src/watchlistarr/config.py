from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .utils import clean_str_list, load_yaml_file, parse_bool, validate_url

DEFAULT_REFRESH_SECONDS = 10
DEFAULT_REMOVAL_DAYS = 7
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_ITEM_DELAY_MS = 100
FULL_SYNC_INTERVAL_SECONDS = 19 * 60
TOKEN_CHECK_INTERVAL_SECONDS = 24 * 60 * 60

# Monitor types accepted by Sonarr's addOptions.monitor
SEASON_MONITORING_OPTIONS = frozenset(
    {
        "all",
        "future",
        "missing",
        "existing",
        "firstSeason",
        "lastSeason",
        "latestSeason",
        "pilot",
        "recent",
        "monitorSpecials",
        "unmonitorSpecials",
        "none",
    }
)


@dataclass
class ManagerSettings:
    base_url: str
    api_key: str
    quality_profile: str | None = None
    root_folder: str | None = None
    bypass_ignored: bool = False
    tags: list[str] = field(default_factory=list)


@dataclass
class ShowManagerSettings(ManagerSettings):
    season_monitoring: str = "all"


@dataclass
class WatchlistSourceSettings:
    token: str
    skip_friend_sync: bool = False


@dataclass
class RemovalSettings:
    movie: bool = False
    ended_show: bool = False
    continuing_show: bool = False
    delete_files: bool = False
    interval_days: int = DEFAULT_REMOVAL_DAYS

    @property
    def enabled(self) -> bool:
        return self.movie or self.ended_show or self.continuing_show


@dataclass
class HttpSettings:
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    item_delay_ms: int = DEFAULT_ITEM_DELAY_MS

    @property
    def item_delay(self) -> float:
        return self.item_delay_ms / 1000.0


@dataclass
class AppConfig:
    refresh_interval_seconds: int = DEFAULT_REFRESH_SECONDS
    movies: ManagerSettings | None = None
    shows: ShowManagerSettings | None = None
    plex: WatchlistSourceSettings | None = None
    removal: RemovalSettings = field(default_factory=RemovalSettings)
    http: HttpSettings = field(default_factory=HttpSettings)

    @property
    def removal_interval_seconds(self) -> int:
        return self.removal.interval_days * 24 * 60 * 60


def _ensure_mapping(value: Any, *, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"'{field_name}' must be provided as a mapping when specified")
    return value


def _require_str(data: dict[str, Any], key: str, *, field_name: str) -> str:
    value = data.get(key)
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValueError(f"'{field_name}.{key}' is required")
    return text


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _bool_field(data: dict[str, Any], key: str, *, field_name: str, default: bool = False) -> bool:
    if key not in data or data[key] is None:
        return default
    parsed = parse_bool(data[key])
    if parsed is None:
        raise ValueError(f"'{field_name}.{key}' must be a boolean")
    return parsed


def _positive_int(value: Any, *, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{field_name}' must be an integer") from exc
    if number <= 0:
        raise ValueError(f"'{field_name}' must be greater than 0")
    return number


def _build_tags(value: Any, *, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{field_name}' must be provided as a list of strings")
    return clean_str_list(value)


def _build_manager_common(data: dict[str, Any], section: str) -> dict[str, Any]:
    base_url = _require_str(data, "baseUrl", field_name=section).rstrip("/")
    if not validate_url(base_url):
        raise ValueError(f"'{section}.baseUrl' must be a valid http/https URL, got: {base_url}")
    return {
        "base_url": base_url,
        "api_key": _require_str(data, "apikey", field_name=section),
        "quality_profile": _optional_str(data.get("qualityProfile")),
        "root_folder": _optional_str(data.get("rootFolder")),
        "bypass_ignored": _bool_field(data, "bypassIgnored", field_name=section),
        "tags": _build_tags(data.get("tags"), field_name=f"{section}.tags"),
    }


def _build_movie_settings(data: Any) -> ManagerSettings | None:
    if data is None:
        return None
    raw = _ensure_mapping(data, field_name="radarr")
    return ManagerSettings(**_build_manager_common(raw, "radarr"))


def _build_show_settings(data: Any) -> ShowManagerSettings | None:
    if data is None:
        return None
    raw = _ensure_mapping(data, field_name="sonarr")
    common = _build_manager_common(raw, "sonarr")
    monitoring = _optional_str(raw.get("seasonMonitoring")) or "all"
    if monitoring not in SEASON_MONITORING_OPTIONS:
        allowed = ", ".join(sorted(SEASON_MONITORING_OPTIONS))
        raise ValueError(f"'sonarr.seasonMonitoring' must be one of: {allowed}; got '{monitoring}'")
    return ShowManagerSettings(season_monitoring=monitoring, **common)


def _build_plex_settings(data: Any) -> WatchlistSourceSettings | None:
    if data is None:
        return None
    raw = _ensure_mapping(data, field_name="plex")
    return WatchlistSourceSettings(
        token=_require_str(raw, "token", field_name="plex"),
        skip_friend_sync=_bool_field(raw, "skipfriendsync", field_name="plex"),
    )


def _build_removal_settings(data: Any) -> RemovalSettings:
    raw = _ensure_mapping(data, field_name="delete")
    if not raw:
        return RemovalSettings()
    interval_raw = _ensure_mapping(raw.get("interval"), field_name="delete.interval")
    interval_days = DEFAULT_REMOVAL_DAYS
    if interval_raw.get("days") is not None:
        interval_days = _positive_int(interval_raw["days"], field_name="delete.interval.days")
    return RemovalSettings(
        movie=_bool_field(raw, "movie", field_name="delete"),
        ended_show=_bool_field(raw, "endedShow", field_name="delete"),
        continuing_show=_bool_field(raw, "continuingShow", field_name="delete"),
        delete_files=_bool_field(raw, "deleteFiles", field_name="delete"),
        interval_days=interval_days,
    )


def _build_http_settings(data: Any) -> HttpSettings:
    raw = _ensure_mapping(data, field_name="http")
    try:
        timeout = float(raw.get("timeoutSeconds", DEFAULT_TIMEOUT_SECONDS))
    except (TypeError, ValueError) as exc:
        raise ValueError("'http.timeoutSeconds' must be a number") from exc
    if timeout <= 0:
        raise ValueError("'http.timeoutSeconds' must be greater than 0")

    try:
        item_delay_ms = int(raw.get("itemDelayMilliseconds", DEFAULT_ITEM_DELAY_MS))
    except (TypeError, ValueError) as exc:
        raise ValueError("'http.itemDelayMilliseconds' must be an integer") from exc
    if item_delay_ms < 0:
        raise ValueError("'http.itemDelayMilliseconds' must be greater than or equal to 0")

    return HttpSettings(timeout=timeout, item_delay_ms=item_delay_ms)


def build_config(data: dict[str, Any]) -> AppConfig:
    interval_raw = _ensure_mapping(data.get("interval"), field_name="interval")
    refresh_seconds = DEFAULT_REFRESH_SECONDS
    if interval_raw.get("seconds") is not None:
        refresh_seconds = _positive_int(interval_raw["seconds"], field_name="interval.seconds")

    return AppConfig(
        refresh_interval_seconds=refresh_seconds,
        movies=_build_movie_settings(data.get("radarr")),
        shows=_build_show_settings(data.get("sonarr")),
        plex=_build_plex_settings(data.get("plex")),
        removal=_build_removal_settings(data.get("delete")),
        http=_build_http_settings(data.get("http")),
    )


def load_config(path: Path) -> AppConfig:
    return build_config(load_yaml_file(path))
