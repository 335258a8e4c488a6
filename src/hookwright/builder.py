"""Artifact builder.

Owns the hook registry of one artifact. Building happens in three steps:

1. ``build`` phase: plugins extend a draft context.
2. The draft is frozen and the ``init`` phase runs for side-effecting setup.
3. The top-level constructor turns the frozen context into the artifact,
   usually by dispatching further phases (``artifact`` by default).

The context is created once and reused across rebuilds; the artifact is
cached until :meth:`ArtifactBuilder.invalidate_artifact` (or a watch trigger).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping

from hookwright.core.context import Build, freeze, make_seed
from hookwright.core.dispatcher import HookDispatcher
from hookwright.core.hooks import ARTIFACT, BUILD, CORE_PHASES, INIT, Hook, HookFn, HookRegistrar, HookRegistry
from hookwright.watch import ArtifactChannel, Listener, Trigger, WatchController, WatcherRegistration

logger = logging.getLogger(__name__)

Constructor = Callable[[Build], Any]


def construct_artifact(build: Build) -> Any:
    """Default top-level constructor: thread an empty dict through ``artifact``."""
    return build.apply_hooks(ARTIFACT, {}, {"scope": "root"})


class ArtifactBuilder:
    """Hook registration, context creation, artifact cache and watch mode."""

    def __init__(
        self,
        construct: Constructor | None = None,
        options: Mapping[str, Any] | None = None,
        phases: Iterable[str] = (),
    ) -> None:
        self.registry = HookRegistry(CORE_PHASES)
        for phase in phases:
            self.registry.declare_phase(phase)
        self.dispatcher = HookDispatcher(self.registry)
        self.options = dict(options or {})
        self.channel: ArtifactChannel = ArtifactChannel()
        self._watch = WatchController(self, self.channel)
        self._construct = construct or construct_artifact
        self._context: Build | None = None
        self._artifact: Any = None
        self._has_artifact = False

    # -- registration -------------------------------------------------------

    def register_phase(self, phase: str) -> None:
        self.registry.declare_phase(phase)

    def hook(self, phase: str, fn: HookFn, contributor: str | None = None) -> Hook:
        """Register ``fn`` on ``phase``. Raises UnknownPhaseError for undeclared phases."""
        return self.registry.register(phase, fn, contributor=contributor)

    def registrar(self, contributor: str | None) -> HookRegistrar:
        """Registration handle whose hooks are attributed to ``contributor``."""
        return HookRegistrar(self.registry, contributor)

    def apply_hooks(
        self,
        phase: str,
        value: Any,
        build: Any,
        info: Mapping[str, Any] | None = None,
        label: str = "",
    ) -> Any:
        return self.dispatcher.dispatch(phase, value, build, info, label)

    # -- building -----------------------------------------------------------

    def create_context(self) -> Build:
        """Run ``build`` and ``init`` and return the frozen context.

        The draft is both the value threaded through ``build`` and the
        context argument of its hooks.
        """
        draft = make_seed(self.dispatcher, self.options)
        result = self.dispatcher.dispatch(BUILD, draft, draft)
        build = freeze(result)
        self.dispatcher.dispatch(INIT, {}, build)
        logger.debug("Build context created with %d member(s)", len(build))
        return build

    @property
    def context(self) -> Build:
        """The frozen context, created on first access."""
        if self._context is None:
            self._context = self.create_context()
        return self._context

    def build(self) -> Any:
        """Return the cached artifact, constructing it first if needed."""
        if not self._has_artifact:
            artifact = self._construct(self.context)
            self._artifact = artifact
            self._has_artifact = True
            logger.info("Artifact built")
        return self._artifact

    get_artifact = build

    def invalidate_artifact(self) -> None:
        """Drop the cached artifact; the context is kept."""
        self._artifact = None
        self._has_artifact = False

    def invalidate_context(self) -> None:
        """Drop the context and the artifact; next build re-runs ``build``/``init``."""
        self._context = None
        self.invalidate_artifact()

    # -- watching -----------------------------------------------------------

    def add_watcher(self, listen: Callable[[Trigger], Any], unlisten: Callable[[Trigger], Any]) -> WatcherRegistration:
        return self._watch.add_watcher(listen, unlisten)

    def watch(self, on_artifact: Listener | None = None) -> None:
        self._watch.start(on_artifact)

    def unwatch(self) -> None:
        self._watch.stop()

    @property
    def watching(self) -> bool:
        return self._watch.watching

    @property
    def trigger_change(self) -> Trigger | None:
        return self._watch.trigger

    def subscribe(self, listener: Listener) -> None:
        self.channel.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> bool:
        return self.channel.unsubscribe(listener)
