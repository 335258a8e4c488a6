"""The shared build context.

During the ``build`` phase plugins extend a mutable :class:`BuildDraft`.
:func:`freeze` then turns the draft into a read-only :class:`Build` that is
handed to ``init`` and to every construction phase after it.
"""

from __future__ import annotations

import types
from collections.abc import Mapping, MutableMapping
from typing import Any, Callable, Iterator

from hookwright.exceptions import ContextConflictError, FrozenContextError


class build_method:
    """Mark a context member that takes the frozen build as first argument.

    Marked members are bound to the :class:`Build` at freeze time, so they
    keep their receiver when pulled out of the context and called later::

        def get_type(build, name):
            return build.types[name]

        draft.extend({"get_type": build_method(get_type)})
        ...
        get_type = build.get_type
        get_type("User")
    """

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[..., Any]) -> None:
        if not callable(fn):
            raise TypeError(f"build_method expects a callable, got {type(fn).__name__}")
        self.fn = fn

    def __repr__(self) -> str:
        return f"build_method({getattr(self.fn, '__name__', self.fn)!r})"


def extend(base: Mapping[str, Any], extra: Mapping[str, Any], hint: str | None = None) -> dict[str, Any]:
    """Return a new dict of ``base`` plus ``extra``, refusing to overwrite keys.

    Raises:
        ContextConflictError: If a key of ``extra`` already exists in ``base``.
    """
    result = dict(base)
    for key, value in extra.items():
        if key in result:
            raise ContextConflictError(key, hint)
        result[key] = value
    return result


class BuildDraft(MutableMapping):
    """Mutable build context, alive only for the duration of the ``build`` phase.

    Members are reachable both as attributes and as items. Members named
    like a mapping method (``extend``, ``keys``, ``get``...) are only
    reachable as items while the context is a draft.

    ``build_method`` members are bound to the draft on access, so build
    hooks can call utilities contributed by earlier hooks; the stored
    marker is rebound to the frozen :class:`Build` by :func:`freeze`.
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        object.__setattr__(self, "_data", dict(initial or {}))

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name == "_data":
            raise AttributeError(name)
        try:
            return self._bind(self._data[name])
        except KeyError:
            raise AttributeError(f"Build context has no member '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        self._data[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self._data[name]
        except KeyError:
            raise AttributeError(name) from None

    def __getitem__(self, key: str) -> Any:
        return self._bind(self._data[key])

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def _bind(self, value: Any) -> Any:
        if isinstance(value, build_method):
            return types.MethodType(value.fn, self)
        return value

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"BuildDraft({sorted(self._data)})"

    def extend(self, extra: Mapping[str, Any], hint: str | None = None) -> "BuildDraft":
        """Add every member of ``extra`` in place and return the draft.

        Raises:
            ContextConflictError: If a member already exists.
        """
        object.__setattr__(self, "_data", extend(self._data, extra, hint))
        return self


class Build(Mapping):
    """Frozen build context. Any write raises :class:`FrozenContextError`."""

    __slots__ = ("_data",)

    def __init__(self, members: Mapping[str, Any]) -> None:
        if isinstance(members, BuildDraft):
            members = members._data
        data: dict[str, Any] = {}
        for key, value in members.items():
            if isinstance(value, build_method):
                value = types.MethodType(value.fn, self)
            elif isinstance(value, types.MethodType) and isinstance(value.__self__, BuildDraft):
                # copied out of a draft, e.g. ``{**draft, ...}``
                value = types.MethodType(value.__func__, self)
            data[key] = value
        object.__setattr__(self, "_data", types.MappingProxyType(data))

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name == "_data":
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"Build context has no member '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise FrozenContextError(name)

    def __delattr__(self, name: str) -> None:
        raise FrozenContextError(name)

    def __setitem__(self, key: str, value: Any) -> None:
        raise FrozenContextError(key)

    def __delitem__(self, key: str) -> None:
        raise FrozenContextError(key)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Build({sorted(self._data)})"


def freeze(members: Mapping[str, Any]) -> Build:
    """Produce the read-only context from the result of the ``build`` phase."""
    if isinstance(members, Build):
        return members
    if not isinstance(members, Mapping):
        raise TypeError(
            f"The build phase must produce a mapping of members, got {type(members).__name__}"
        )
    return Build(members)


def _apply_hooks(build: Build, phase: str, value: Any, info: Mapping[str, Any] | None = None, label: str = "") -> Any:
    return build.dispatcher.dispatch(phase, value, build, info, label)


def make_seed(dispatcher: Any, options: Mapping[str, Any] | None = None) -> BuildDraft:
    """Initial draft handed to the ``build`` phase.

    Members:
        phases: Declared phase names at the time the build started.
        options: Caller supplied build options (read-only).
        dispatcher: The :class:`HookDispatcher` of the builder.
        extend: :func:`extend`.
        apply_hooks: ``apply_hooks(phase, value, info=None, label="")``
            dispatches with the frozen build as context.
    """
    return BuildDraft(
        {
            "phases": dispatcher.registry.phases,
            "options": types.MappingProxyType(dict(options or {})),
            "dispatcher": dispatcher,
            "extend": extend,
            "apply_hooks": build_method(_apply_hooks),
        }
    )
