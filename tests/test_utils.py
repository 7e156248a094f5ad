from __future__ import annotations

import pytest

from watchlistarr.utils import (
    clean_str_list,
    expand_env,
    load_yaml_file,
    parse_bool,
    unresolved_env_refs,
    validate_url,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, True),
        ("yes", True),
        (" ON ", True),
        (1, True),
        ("false", False),
        ("0", False),
        (None, None),
        ("sometimes", None),
    ],
)
def test_parse_bool(value, expected) -> None:
    assert parse_bool(value) is expected


def test_expand_env_walks_nested_values(monkeypatch) -> None:
    monkeypatch.setenv("RADARR_API_KEY", "k3y")
    data = {"radarr": {"apikey": "${RADARR_API_KEY}", "tags": ["$RADARR_API_KEY", 4]}, "interval": 10}

    assert expand_env(data) == {"radarr": {"apikey": "k3y", "tags": ["k3y", 4]}, "interval": 10}


def test_expand_env_leaves_unknown_variables() -> None:
    assert expand_env("${WATCHLISTARR_SURELY_UNSET_VAR}") == "${WATCHLISTARR_SURELY_UNSET_VAR}"


def test_clean_str_list_preserves_order() -> None:
    assert clean_str_list(["b", " a", "b ", "", 3]) == ["b", "a", "3"]


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("http://radarr:7878", True),
        ("https://sonarr.example.com/base", True),
        ("ftp://radarr", False),
        ("radarr:7878", False),
        ("", False),
        (None, False),
    ],
)
def test_validate_url(url, expected) -> None:
    assert validate_url(url) is expected


def test_unresolved_env_refs_reported(monkeypatch) -> None:
    monkeypatch.setenv("PLEX_TOKEN", "abc")
    monkeypatch.delenv("WATCHLISTARR_SURELY_UNSET_VAR", raising=False)
    data = {"plex": {"token": "${PLEX_TOKEN}"}, "radarr": ["${WATCHLISTARR_SURELY_UNSET_VAR}"]}

    assert unresolved_env_refs(data) == ["WATCHLISTARR_SURELY_UNSET_VAR"]


def test_load_yaml_file_warns_about_unset_variables(tmp_path, monkeypatch, caplog) -> None:
    monkeypatch.delenv("WATCHLISTARR_SURELY_UNSET_VAR", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text("radarr:\n  apikey: ${WATCHLISTARR_SURELY_UNSET_VAR}\n", encoding="utf-8")

    data = load_yaml_file(path)

    assert data == {"radarr": {"apikey": "${WATCHLISTARR_SURELY_UNSET_VAR}"}}
    assert "WATCHLISTARR_SURELY_UNSET_VAR" in caplog.text
