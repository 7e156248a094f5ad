"""Version detection with support for container builds."""

from __future__ import annotations

import os
from importlib.metadata import PackageNotFoundError, version

_FALLBACK_VERSION = "unknown"
_DISTRIBUTION = "watchlistarr"


def _installed_version() -> str | None:
    try:
        return version(_DISTRIBUTION)
    except PackageNotFoundError:
        return None


def get_version() -> str:
    """Get the current version string.

    Priority:
    1. BUILD_VERSION environment variable (set during CI/CD)
    2. GIT_BRANCH / GIT_SHA environment variables (Docker build args)
    3. Installed distribution metadata
    4. Fallback to "unknown"

    Returns:
        Version string like "0.2.0", "develop (abc1234)", or "unknown".
    """
    build_version = os.environ.get("BUILD_VERSION")
    if build_version and build_version.strip():
        return build_version.strip()

    env_branch = os.environ.get("GIT_BRANCH")
    env_sha = os.environ.get("GIT_SHA")
    if env_branch and env_sha:
        return f"{env_branch} ({env_sha})"
    if env_sha:
        return f"dev ({env_sha})"

    return _installed_version() or _FALLBACK_VERSION


__version__ = get_version()
