"""Polling file watcher usable as a builder change source.

Scans file mtimes on a daemon thread. ``listen(trigger)`` only records a
baseline, it never reports a change synchronously.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Iterable

from hookwright.watch import Trigger, WatcherRegistration

logger = logging.getLogger(__name__)


class FileWatcher:
    """Watches files and directories for added, modified or deleted files."""

    def __init__(
        self,
        paths: Iterable[str | Path],
        patterns: Iterable[str] | None = None,
        poll_interval: float = 0.5,
    ):
        """
        Args:
            paths: Files or directories to watch.
            patterns: Glob patterns matched inside directories (default ``*``).
            poll_interval: Seconds between scans on the background thread.
        """
        self.paths = [Path(p) for p in paths]
        self.patterns = list(patterns or ["*"])
        self.poll_interval = poll_interval

        self._triggers: list[Trigger] = []
        self._mtimes: dict[Path, float] = {}
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def registration(self) -> WatcherRegistration:
        return WatcherRegistration(self.listen, self.unlisten)

    def listen(self, trigger: Trigger) -> None:
        with self._lock:
            first = not self._triggers
            self._triggers.append(trigger)
            if first:
                self._mtimes = self._scan()
        if first:
            self._start()

    def unlisten(self, trigger: Trigger) -> None:
        with self._lock:
            if trigger in self._triggers:
                self._triggers.remove(trigger)
            last = not self._triggers
        if last:
            self._stop()

    def poll(self) -> list[Path]:
        """Scan once and fire every trigger if anything changed.

        Returns:
            Paths that were added, modified or deleted since the last scan.
        """
        with self._lock:
            current = self._scan()
            changed = [
                path
                for path, mtime in current.items()
                if path not in self._mtimes or mtime > self._mtimes[path]
            ]
            changed.extend(path for path in self._mtimes if path not in current)
            self._mtimes = current
            triggers = list(self._triggers)

        if changed:
            logger.info("File change detected: %s", ", ".join(p.name for p in changed[:5]))
            for trigger in triggers:
                trigger(changed)
        return changed

    def _scan(self) -> dict[Path, float]:
        mtimes: dict[Path, float] = {}
        for watch_path in self.paths:
            if watch_path.is_file():
                try:
                    mtimes[watch_path] = watch_path.stat().st_mtime
                except OSError:
                    pass
            elif watch_path.is_dir():
                for pattern in self.patterns:
                    for file_path in watch_path.rglob(pattern):
                        if not file_path.is_file():
                            continue
                        try:
                            mtimes[file_path] = file_path.stat().st_mtime
                        except OSError:
                            pass
        return mtimes

    def _start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="hookwright-file-watcher", daemon=True)
        self._thread.start()
        logger.debug("File watcher started: %s", [str(p) for p in self.paths])

    def _stop(self) -> None:
        self._stop_event.set()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(self.poll_interval * 4, 2))
        logger.debug("File watcher stopped")

    def _run(self) -> None:
        while not self._stop_event.wait(self.poll_interval):
            try:
                self.poll()
            except Exception:
                logger.exception("Rebuild after file change failed")
