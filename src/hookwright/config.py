"""Environment configuration.

Values are read from the process environment after loading ``.env``.
- HOOKWRIGHT_DEBUG          enable DEBUG logging, including dispatch traces
- HOOKWRIGHT_LOG_DIR        also write logs to a dated file in this directory
- HOOKWRIGHT_PLUGINS        path of the plugin registry (plugins.yaml)
- HOOKWRIGHT_POLL_INTERVAL  file watcher poll interval in seconds
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from hookwright.exceptions import ConfigurationError

DEFAULT_PLUGINS_FILE = "plugins.yaml"
DEFAULT_POLL_INTERVAL = 0.5


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse a boolean flag (1/true/yes/on)."""
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_positive_float(name: str, value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        parsed = float(value)
    except ValueError:
        raise ConfigurationError(name, value, "a number") from None
    if parsed <= 0:
        raise ConfigurationError(name, value, "a positive number")
    return parsed


@dataclass(frozen=True)
class Config:
    debug: bool = False
    log_dir: Path | None = None
    plugins_file: Path = Path(DEFAULT_PLUGINS_FILE)
    poll_interval: float = DEFAULT_POLL_INTERVAL

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, dotenv: bool = True) -> "Config":
        """Build a Config from ``environ`` (default: ``os.environ``).

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed.
        """
        if dotenv and environ is None:
            load_dotenv()
        env = os.environ if environ is None else environ

        log_dir = env.get("HOOKWRIGHT_LOG_DIR")
        return cls(
            debug=_parse_bool(env.get("HOOKWRIGHT_DEBUG")),
            log_dir=Path(log_dir) if log_dir else None,
            plugins_file=Path(env.get("HOOKWRIGHT_PLUGINS") or DEFAULT_PLUGINS_FILE),
            poll_interval=_parse_positive_float(
                "HOOKWRIGHT_POLL_INTERVAL",
                env.get("HOOKWRIGHT_POLL_INTERVAL"),
                DEFAULT_POLL_INTERVAL,
            ),
        )
