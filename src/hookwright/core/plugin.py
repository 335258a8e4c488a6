"""Plugin base class and metadata.

A plugin is a named unit that contributes hooks to a builder. Each plugin
declares its identity via PluginMeta and registers its hooks through the
registrar it is handed, which carries that identity into every hook's
display name.

Ordering and dependencies are NOT part of plugin metadata; they belong to
the plugin registry (plugins.yaml) and are passed as explicit parameters
to PluginManager.load().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hookwright.core.hooks import HookRegistrar


@dataclass(frozen=True)
class PluginMeta:
    """Immutable plugin identity."""

    name: str
    version: str = "0.0.0"
    description: str = ""


class Plugin(ABC):
    """Base class for all plugins.

    Subclasses must set ``meta`` and implement ``register()``.
    """

    meta: PluginMeta

    @abstractmethod
    def register(self, registrar: HookRegistrar, options: dict[str, Any]) -> None:
        """Register hooks. ``options`` comes from plugins.yaml."""
