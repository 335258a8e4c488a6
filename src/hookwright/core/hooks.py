"""Phase names, hook records and the hook registry.

A phase is a named point in construction where zero or more hooks run in
registration order. Every hook has the signature::

    def hook(value, build, info):
        ...
        return value  # or a replacement; never a falsy value

Hooks cannot be removed once registered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from hookwright.exceptions import UnknownPhaseError

logger = logging.getLogger(__name__)

BUILD = "build"
INIT = "init"
ARTIFACT = "artifact"

CORE_PHASES: tuple[str, ...] = (BUILD, INIT, ARTIFACT)

HookFn = Callable[[Any, Any, Any], Any]


def hook_name(fn: Callable[..., Any]) -> str:
    """Best-effort human name of a hook function."""
    name = getattr(fn, "display_name", None) or getattr(fn, "__name__", None)
    if not name or name == "<lambda>":
        return "anonymous"
    return name


@dataclass(frozen=True)
class Hook:
    """A registered hook. ``display_name`` is for diagnostics only."""

    phase: str
    fn: HookFn
    display_name: str
    contributor: str | None = None

    def __call__(self, value: Any, build: Any, info: Any) -> Any:
        return self.fn(value, build, info)


class HookRegistry:
    """Ordered hook lists keyed by declared phase name."""

    def __init__(self, phases: Iterable[str] = CORE_PHASES) -> None:
        self._hooks: dict[str, list[Hook]] = {}
        for phase in phases:
            self.declare_phase(phase)

    @property
    def phases(self) -> tuple[str, ...]:
        """Declared phase names in declaration order."""
        return tuple(self._hooks)

    def declare_phase(self, phase: str) -> None:
        """Make ``phase`` valid for registration and dispatch.

        Declaring an already declared phase keeps its hooks.
        """
        if not phase or not isinstance(phase, str):
            raise ValueError(f"Phase name must be a non-empty string, got {phase!r}")
        if phase not in self._hooks:
            self._hooks[phase] = []
            logger.debug("Phase declared: %s", phase)

    def is_declared(self, phase: str) -> bool:
        return phase in self._hooks

    def register(self, phase: str, fn: HookFn, contributor: str | None = None) -> Hook:
        """Append ``fn`` to the hooks of ``phase``.

        When ``contributor`` is given and ``fn`` has no explicit
        ``display_name``, the hook is shown as ``contributor/phase/name``.

        Raises:
            UnknownPhaseError: If ``phase`` was not declared.
            TypeError: If ``fn`` is not callable.
        """
        if phase not in self._hooks:
            raise UnknownPhaseError(phase)
        if not callable(fn):
            raise TypeError(f"Hook for '{phase}' must be callable, got {type(fn).__name__}")

        explicit = getattr(fn, "display_name", None)
        if contributor and not explicit:
            display = f"{contributor}/{phase}/{hook_name(fn)}"
        else:
            display = hook_name(fn)

        hook = Hook(phase=phase, fn=fn, display_name=display, contributor=contributor)
        self._hooks[phase].append(hook)
        return hook

    def hooks(self, phase: str) -> tuple[Hook, ...]:
        """Snapshot of the hooks of ``phase`` in registration order.

        Raises:
            UnknownPhaseError: If ``phase`` was not declared.
        """
        try:
            return tuple(self._hooks[phase])
        except KeyError:
            raise UnknownPhaseError(phase) from None

    def count(self, phase: str | None = None) -> int:
        if phase is None:
            return sum(len(v) for v in self._hooks.values())
        return len(self.hooks(phase))

    def summary(self) -> dict[str, int]:
        """Number of hooks per phase, for phases that have any."""
        return {k: len(v) for k, v in self._hooks.items() if v}


class HookRegistrar:
    """Registration handle scoped to one contributor.

    Plugins receive one of these instead of the registry, so their identity
    is carried explicitly into every hook they register.
    """

    def __init__(self, registry: HookRegistry, contributor: str | None) -> None:
        self._registry = registry
        self.contributor = contributor

    def hook(self, phase: str, fn: HookFn) -> Hook:
        return self._registry.register(phase, fn, contributor=self.contributor)

    def register_phase(self, phase: str) -> None:
        self._registry.declare_phase(phase)

    def on(self, phase: str) -> Callable[[HookFn], HookFn]:
        """Decorator form of :meth:`hook`."""

        def decorator(fn: HookFn) -> HookFn:
            self.hook(phase, fn)
            return fn

        return decorator
