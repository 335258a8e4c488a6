"""Error hierarchy.

Every error here is a programmer or integration error. Nothing is retried
and nothing is swallowed: the first failure propagates to whoever called
``build()``, ``dispatch()`` or ``watch()``.
"""

from __future__ import annotations

from typing import Any, Mapping


class HookwrightError(Exception):
    """Base exception. ``context`` holds diagnostic fields (phase, hook, depth)."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context: dict[str, Any] = dict(context) if context is not None else {}


class UnknownPhaseError(HookwrightError, KeyError):
    """Registration or dispatch against a phase that was never declared."""

    def __init__(self, phase: str) -> None:
        self.phase = phase
        HookwrightError.__init__(
            self, f"'{phase}' is not a declared phase", context={"phase": phase}
        )

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class HookReturnedEmptyError(HookwrightError):
    """A hook returned a falsy replacement for the value threaded through a phase."""

    def __init__(self, hook_name: str, phase: str, depth: int, trace: list[str]) -> None:
        self.hook_name = hook_name
        self.phase = phase
        self.depth = depth
        self.trace = list(trace)
        where = " > ".join(self.trace)
        super().__init__(
            f"Hook '{hook_name}' for '{phase}' returned falsy value "
            f"(depth {depth}, in {where})",
            context={"hook": hook_name, "phase": phase, "depth": depth, "trace": self.trace},
        )


class FrozenContextError(HookwrightError, AttributeError, TypeError):
    """Write attempted on a build context after it was frozen."""

    def __init__(self, key: str) -> None:
        self.key = key
        HookwrightError.__init__(
            self,
            f"Cannot set '{key}': the build context is frozen",
            context={"key": key},
        )


class ContextConflictError(HookwrightError):
    """``extend()`` would overwrite a key that is already present."""

    def __init__(self, key: str, hint: str | None = None) -> None:
        self.key = key
        message = f"Overwriting key '{key}' is not allowed"
        if hint:
            message = f"{message}: {hint}"
        super().__init__(message, context={"key": key})


class AlreadyWatchingError(HookwrightError):
    """``watch()`` called while a watch session is active."""


class NotWatchingError(HookwrightError):
    """``unwatch()`` called while no watch session is active."""


class SynchronousChangeDuringSubscribeError(HookwrightError):
    """A watcher invoked the trigger callback from inside its ``listen`` call."""


class WatcherRegistrationError(HookwrightError, ValueError):
    """``add_watcher`` was not given both a listener and an unlistener."""


class ConfigurationError(HookwrightError):
    """Invalid environment configuration."""

    def __init__(self, variable: str, value: str, expected: str) -> None:
        self.variable = variable
        self.value = value
        super().__init__(
            f"{variable}={value!r} is invalid: expected {expected}",
            context={"variable": variable, "value": value},
        )
