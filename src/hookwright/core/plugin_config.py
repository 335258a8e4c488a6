"""Plugin registry files.

plugins.yaml lists the plugins of a build; hooks are registered in file
order, so the file order is the hook order::

    - name: timestamps
      module: myproject.plugins.timestamps
      options:
        field: created_at
    - name: audit
      module: myproject.plugins.audit
      config: audit.yaml          # relative to plugins.yaml
      depends_on: [timestamps]
    - name: legacy
      module: myproject.plugins.legacy
      enabled: false

Malformed entries are reported and left out; they never stop the others
from loading. A ``config`` file that cannot be read is an error.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "module")


def _read_yaml(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_plugin_options(path: str | Path) -> dict[str, Any]:
    """Read an options file referenced by a ``config:`` entry.

    An empty file yields ``{}``.

    Raises:
        FileNotFoundError: The file does not exist.
        TypeError: The document is not a mapping.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Options file for plugin does not exist: {path}")

    options = _read_yaml(path)
    if options is None:
        return {}
    if not isinstance(options, dict):
        raise TypeError(f"{path}: options document must be a YAML mapping, not {type(options).__name__}")
    return options


def _skip_reason(entry: Any) -> str | None:
    """Why ``entry`` cannot be loaded, or None when it is well formed."""
    if not isinstance(entry, dict):
        return f"expected a mapping, got {type(entry).__name__}"
    absent = [f for f in REQUIRED_FIELDS if not entry.get(f)]
    if absent:
        return f"no {' or '.join(absent)} given"
    if not isinstance(entry.get("options") or {}, dict):
        return "options must be a mapping"
    if not isinstance(entry.get("depends_on") or [], list):
        return "depends_on must be a list"
    return None


def load_plugin_registry(path: str | Path) -> list[dict[str, Any]]:
    """Enabled, well-formed entries of a plugins.yaml, in file order.

    Each returned entry has ``options`` (dict) and ``depends_on`` (list)
    filled in. Options from a ``config`` file are overridden by inline
    ``options``. A missing or empty registry means no plugins.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("No plugin registry at %s", path)
        return []

    document = _read_yaml(path)
    if document is None:
        return []
    if not isinstance(document, list):
        logger.warning("Ignoring %s: expected a list of plugins, got %s", path, type(document).__name__)
        return []

    entries: list[dict[str, Any]] = []
    for position, entry in enumerate(document, start=1):
        reason = _skip_reason(entry)
        if reason is not None:
            logger.warning("Skipping plugin #%d in %s: %s", position, path.name, reason)
            continue
        if not entry.get("enabled", True):
            logger.info("Plugin %s is disabled in %s", entry["name"], path.name)
            continue

        options = dict(entry.get("options") or {})
        if entry.get("config"):
            options = {**load_plugin_options(path.parent / entry["config"]), **options}

        entries.append({**entry, "options": options, "depends_on": list(entry.get("depends_on") or [])})

    return entries
