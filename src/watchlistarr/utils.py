from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import yaml

LOGGER = logging.getLogger(__name__)

_BOOLEAN_WORDS = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}
_UNRESOLVED_VAR = re.compile(r"\$\{?([A-Za-z_][A-Za-z0-9_]*)\}?")


def expand_env(node: Any) -> Any:
    """Substitute ``$VAR`` / ``${VAR}`` references in every string of a YAML tree.

    References to unset variables are left as written.
    """
    if isinstance(node, dict):
        return {key: expand_env(child) for key, child in node.items()}
    if isinstance(node, list):
        return [expand_env(child) for child in node]
    if isinstance(node, str):
        return os.path.expandvars(node)
    return node


def unresolved_env_refs(node: Any) -> List[str]:
    """Names of environment references still present after :func:`expand_env`."""
    found: List[str] = []
    if isinstance(node, dict):
        children = list(node.values())
    elif isinstance(node, list):
        children = node
    elif isinstance(node, str):
        return [name for name in _UNRESOLVED_VAR.findall(node) if name not in os.environ]
    else:
        return found
    for child in children:
        for name in unresolved_env_refs(child):
            if name not in found:
                found.append(name)
    return found


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Read a YAML mapping from ``path`` with environment references expanded."""
    text = path.read_text(encoding="utf-8")
    document = yaml.safe_load(text)
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping at the top level")

    expanded = expand_env(document)
    missing = unresolved_env_refs(expanded)
    if missing:
        LOGGER.warning("Config %s references unset environment variable(s): %s", path, ", ".join(missing))
    return expanded


def parse_bool(value: Any) -> Optional[bool]:
    """Interpret a YAML or environment boolean; None when unrecognised."""
    if value is None or isinstance(value, bool):
        return value
    return _BOOLEAN_WORDS.get(str(value).strip().lower())


def clean_str_list(values: List[Any]) -> List[str]:
    """Strip, drop blanks and de-duplicate while keeping first-seen order."""
    seen: Dict[str, None] = {}
    for value in values:
        text = str(value).strip()
        if text:
            seen.setdefault(text, None)
    return list(seen)


def validate_url(url: Optional[str]) -> bool:
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)
