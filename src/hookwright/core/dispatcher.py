"""Ordered, fail-fast, re-entrant hook dispatch.

``dispatch`` threads a value through every hook of a phase. Hooks may
dispatch again (same or other phase) from inside their body; the nesting
depth only drives the indentation of the trace log.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from hookwright.core.hooks import HookRegistry
from hookwright.exceptions import HookReturnedEmptyError

logger = logging.getLogger(__name__)
trace_logger = logging.getLogger("hookwright.trace")

INDENT = "  "


def is_empty(value: Any) -> bool:
    """True for results a hook must never return.

    ``None``, ``False``, zero and empty strings count as empty. Containers
    do not: an empty mapping is a legitimate value to thread through.
    """
    if value is None or value is False:
        return True
    if isinstance(value, (int, float, str, bytes)):
        return not value
    return False


def invocation_info(phase: str, info: Mapping[str, Any] | None = None) -> Mapping[str, Any]:
    """Read-only per-invocation data handed to every hook as its third argument."""
    data = dict(info or {})
    data.setdefault("phase", phase)
    return MappingProxyType(data)


class HookDispatcher:
    """Runs the hooks of a :class:`HookRegistry`."""

    def __init__(self, registry: HookRegistry) -> None:
        self.registry = registry
        self._local = threading.local()

    @property
    def depth(self) -> int:
        """Current nesting depth; -1 when no dispatch is running."""
        return len(self._stack) - 1

    @property
    def _stack(self) -> list[str]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = self._local.stack = []
        return stack

    @contextmanager
    def _nested(self, label: str) -> Iterator[int]:
        stack = self._stack
        stack.append(label)
        try:
            yield len(stack) - 1
        finally:
            stack.pop()

    def dispatch(
        self,
        phase: str,
        value: Any,
        build: Any,
        info: Mapping[str, Any] | None = None,
        label: str = "",
    ) -> Any:
        """Thread ``value`` through the hooks of ``phase`` and return the result.

        Args:
            phase: A declared phase name.
            value: Initial value handed to the first hook.
            build: The build context passed to every hook.
            info: Invocation-specific data, exposed read-only to hooks.
            label: Extra text appended to the phase in trace lines.

        Raises:
            UnknownPhaseError: If ``phase`` was not declared.
            HookReturnedEmptyError: If a hook returns an empty value. Later
                hooks of the phase do not run.
        """
        tag = f"{phase}{label}"
        with self._nested(tag) as depth:
            trace_logger.debug("%s[%s]: Running...", INDENT * depth, tag)

            hooks = self.registry.hooks(phase)
            hook_info = info if isinstance(info, MappingProxyType) else invocation_info(phase, info)

            for hook in hooks:
                with self._nested(f"{tag}/{hook.display_name}") as hook_depth:
                    trace_logger.debug(
                        "%s[%s]:   Executing '%s'", INDENT * hook_depth, tag, hook.display_name
                    )
                    value = hook(value, build, hook_info)
                    if is_empty(value):
                        raise HookReturnedEmptyError(
                            hook.display_name, phase, hook_depth, list(self._stack)
                        )
                    trace_logger.debug(
                        "%s[%s]:   '%s' complete", INDENT * hook_depth, tag, hook.display_name
                    )

            trace_logger.debug("%s[%s]: Complete", INDENT * depth, tag)
            return value
