"""Watch mode: rebuild the artifact whenever a change source says so.

Watchers are ``(listen, unlisten)`` pairs. ``watch()`` hands every watcher
the same trigger callback; calling it discards the cached artifact, rebuilds
it and publishes the result on the builder's :class:`ArtifactChannel`.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from hookwright.exceptions import (
    AlreadyWatchingError,
    NotWatchingError,
    SynchronousChangeDuringSubscribeError,
    WatcherRegistrationError,
)

if TYPE_CHECKING:
    from hookwright.builder import ArtifactBuilder

logger = logging.getLogger(__name__)

T = TypeVar("T")

Trigger = Callable[..., None]
Listener = Callable[[Any], None]


class ArtifactChannel(Generic[T]):
    """Publish/subscribe channel for freshly built artifacts.

    Subscribers are called in subscription order. Publishing on a closed
    channel does nothing; subscriptions survive close/open.
    """

    def __init__(self) -> None:
        self._subscribers: list[Callable[[T], None]] = []
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def subscribers(self) -> tuple[Callable[[T], None], ...]:
        return tuple(self._subscribers)

    def open(self) -> None:
        self._open = True

    def close(self) -> None:
        self._open = False

    def subscribe(self, listener: Callable[[T], None]) -> None:
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {type(listener).__name__}")
        self._subscribers.append(listener)

    def unsubscribe(self, listener: Callable[[T], None]) -> bool:
        """Remove one subscription of ``listener``. Returns False if it had none."""
        try:
            self._subscribers.remove(listener)
        except ValueError:
            return False
        return True

    def publish(self, artifact: T) -> int:
        """Deliver ``artifact`` to every subscriber; returns how many were called."""
        if not self._open:
            return 0
        subscribers = tuple(self._subscribers)
        for listener in subscribers:
            listener(artifact)
        return len(subscribers)


@dataclass(frozen=True)
class WatcherRegistration:
    """An external change source. Both halves are always registered together."""

    listen: Callable[[Trigger], Any]
    unlisten: Callable[[Trigger], Any]

    def __post_init__(self) -> None:
        if not callable(self.listen) or not callable(self.unlisten):
            raise WatcherRegistrationError("You must provide both a listener and an unlistener")


class WatchState(Enum):
    IDLE = "idle"
    WATCHING = "watching"


class WatchController:
    """Owns the watch session of one builder: at most one at a time."""

    def __init__(self, builder: ArtifactBuilder, channel: ArtifactChannel) -> None:
        self._builder = builder
        self._channel = channel
        self._watchers: list[WatcherRegistration] = []
        self._state = WatchState.IDLE
        self._trigger: Trigger | None = None
        self._explicit_listener: Listener | None = None
        self._lock = threading.RLock()

    @property
    def state(self) -> WatchState:
        return self._state

    @property
    def watching(self) -> bool:
        return self._state is WatchState.WATCHING

    @property
    def trigger(self) -> Trigger | None:
        """Trigger callback of the active session, ``None`` when idle."""
        return self._trigger

    @property
    def watchers(self) -> tuple[WatcherRegistration, ...]:
        return tuple(self._watchers)

    def add_watcher(self, listen: Callable[[Trigger], Any], unlisten: Callable[[Trigger], Any]) -> WatcherRegistration:
        registration = WatcherRegistration(listen, unlisten)
        self._watchers.append(registration)
        return registration

    def start(self, on_artifact: Listener | None = None) -> None:
        """Subscribe to every watcher and publish the current artifact once.

        Raises:
            AlreadyWatchingError: If a session is already active.
            SynchronousChangeDuringSubscribeError: If a watcher triggers a
                change from inside its ``listen`` call.
        """
        with self._lock:
            if self._state is WatchState.WATCHING:
                raise AlreadyWatchingError("Already watching this builder")

            self._state = WatchState.WATCHING
            self._explicit_listener = on_artifact
            self._channel.open()
            if on_artifact is not None:
                self._channel.subscribe(on_artifact)

            subscribing = True
            fired_early = False
            listened: list[WatcherRegistration] = []

            def trigger_change(*_args: Any, **_kwargs: Any) -> None:
                nonlocal fired_early
                with self._lock:
                    if subscribing:
                        fired_early = True
                        raise SynchronousChangeDuringSubscribeError(
                            "Watcher triggered a change synchronously while subscribing"
                        )
                    if self._trigger is not trigger_change:
                        logger.debug("Ignoring change from a finished watch session")
                        return
                    self._rebuild()

            self._trigger = trigger_change
            try:
                for watcher in self._watchers:
                    # a watcher that raises from listen may already hold the trigger
                    listened.append(watcher)
                    watcher.listen(trigger_change)
                    if fired_early:
                        raise SynchronousChangeDuringSubscribeError(
                            "Watcher triggered a change synchronously while subscribing"
                        )
                subscribing = False
                logger.info("Watching %d change source(s)", len(self._watchers))
                self._channel.publish(self._builder.build())
            except BaseException:
                subscribing = False
                self._unlisten_all(listened, self._detach())
                raise

    def stop(self) -> None:
        """End the session: unlisten every watcher and drop the trigger.

        Raises:
            NotWatchingError: If no session is active.
        """
        with self._lock:
            if self._state is not WatchState.WATCHING:
                raise NotWatchingError("Not watching this builder")
            watchers = list(self._watchers)
            trigger = self._detach()

        # outside the lock: a watcher thread may be waiting on it
        self._unlisten_all(watchers, trigger)
        logger.info("Stopped watching")

    def _unlisten_all(self, watchers: list[WatcherRegistration], trigger: Trigger | None) -> None:
        for watcher in watchers:
            try:
                watcher.unlisten(trigger)
            except Exception:
                logger.exception("Watcher unlisten failed: %r", watcher.unlisten)

    def _detach(self) -> Trigger | None:
        """Return to idle and hand back the trigger the watchers were given."""
        trigger = self._trigger
        self._trigger = None
        self._state = WatchState.IDLE
        listener = self._explicit_listener
        self._explicit_listener = None
        if listener is not None:
            self._channel.unsubscribe(listener)
        self._channel.close()
        return trigger

    def _rebuild(self) -> None:
        self._builder.invalidate_artifact()
        artifact = self._builder.build()
        notified = self._channel.publish(artifact)
        logger.info("Artifact rebuilt, %d subscriber(s) notified", notified)
