"""Logging setup.

Level guide
===========

logger.exception()
    Unexpected failures where the stack trace matters, e.g. a rebuild
    failing on the file watcher thread.

logger.error()
    Expected failures where the trace adds nothing.

logger.warning()
    Recoverable problems: malformed plugins.yaml entries, missing paths.

logger.info()
    Lifecycle: plugins loaded, artifact built, watch started/stopped.

logger.debug()
    Details. The ``hookwright.trace`` logger emits one line per phase and
    per hook, indented by nesting depth.
"""

import logging
from datetime import datetime

from hookwright.config import Config


def setup_logging(config: Config) -> logging.Logger:
    """Configure root logging from ``config`` and return the package logger."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if config.log_dir is not None:
        config.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = config.log_dir / f"hookwright_{datetime.now().strftime('%Y%m%d')}.log"
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )

    # dispatch traces are only useful when debugging plugins
    if not config.debug:
        logging.getLogger("hookwright.trace").setLevel(logging.INFO)

    return logging.getLogger("hookwright")
