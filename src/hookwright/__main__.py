"""Build an artifact from a plugin registry.

Usage:
    python -m hookwright
    python -m hookwright --plugins plugins.yaml --debug
    python -m hookwright --watch schema/ --pattern "*.yaml"
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml

from hookwright.builder import ArtifactBuilder
from hookwright.config import Config
from hookwright.core.plugin_manager import PluginManager
from hookwright.exceptions import HookwrightError
from hookwright.file_watcher import FileWatcher
from hookwright.logging_config import setup_logging

logger = logging.getLogger("hookwright")


def render(artifact: Any) -> str:
    """YAML when the artifact is plain data, ``repr`` otherwise."""
    try:
        return yaml.safe_dump(artifact, sort_keys=False, allow_unicode=True)
    except yaml.YAMLError:
        return repr(artifact)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hookwright",
        description="Build an artifact from the plugins listed in a registry file",
    )
    parser.add_argument("--plugins", type=Path, default=None, help="plugin registry (default: HOOKWRIGHT_PLUGINS or plugins.yaml)")
    parser.add_argument("--watch", type=Path, action="append", default=[], metavar="PATH", help="rebuild when files under PATH change (repeatable)")
    parser.add_argument("--pattern", action="append", default=[], metavar="GLOB", help="file pattern inside watched directories (repeatable)")
    parser.add_argument("--debug", action="store_true", help="log dispatch traces")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = Config.from_env()
    if args.debug:
        config = replace(config, debug=True)
    if args.plugins is not None:
        config = replace(config, plugins_file=args.plugins)
    setup_logging(config)

    builder = ArtifactBuilder(options={"plugins_file": str(config.plugins_file)})
    try:
        PluginManager(builder).load_registry(config.plugins_file)

        if not args.watch:
            print(render(builder.build()), end="")
            return 0

        watcher = FileWatcher(args.watch, args.pattern or None, poll_interval=config.poll_interval)
        builder.add_watcher(watcher.listen, watcher.unlisten)
        builder.watch(lambda artifact: print(render(artifact), end="", flush=True))
    except HookwrightError as e:
        logger.error("%s", e)
        return 1

    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        builder.unwatch()
    return 0


if __name__ == "__main__":
    sys.exit(main())
