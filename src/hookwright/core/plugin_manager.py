"""Plugin loading.

Imports plugin modules, instantiates their Plugin subclass and lets it
register hooks on a builder through a contributor-scoped registrar.
Dependencies are explicit load() parameters; load order is hook order.
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from hookwright.core.hooks import HookRegistrar, hook_name
from hookwright.core.plugin import Plugin
from hookwright.core.plugin_config import load_plugin_registry

if TYPE_CHECKING:
    from hookwright.builder import ArtifactBuilder

logger = logging.getLogger(__name__)

PluginFn = Callable[[HookRegistrar, dict[str, Any]], None]


class PluginManager:
    """Loads plugins into an :class:`ArtifactBuilder`."""

    def __init__(self, builder: ArtifactBuilder) -> None:
        self._builder = builder
        self._plugins: dict[str, Plugin | PluginFn] = {}
        self._modules: dict[str, str] = {}

    @property
    def plugins(self) -> dict[str, Plugin | PluginFn]:
        """Snapshot of loaded plugins, in load order."""
        return dict(self._plugins)

    def use(
        self,
        plugin: Plugin | PluginFn,
        options: dict[str, Any] | None = None,
        name: str | None = None,
    ) -> str:
        """Register an already imported plugin instance or plugin function.

        Returns:
            The contributor name the plugin's hooks were registered under.

        Raises:
            ValueError: If a plugin with the same name is already loaded.
        """
        options = options if options is not None else {}
        if isinstance(plugin, Plugin):
            name = name or plugin.meta.name
        else:
            name = name or hook_name(plugin)

        if name in self._plugins:
            raise ValueError(f"Plugin already loaded: '{name}'")

        registrar = self._builder.registrar(name)
        if isinstance(plugin, Plugin):
            plugin.register(registrar, options)
        else:
            plugin(registrar, options)

        self._plugins[name] = plugin
        logger.info("Plugin loaded: %s", name)
        return name

    def load(
        self,
        module: str,
        options: dict[str, Any] | None = None,
        depends_on: list[str] | None = None,
        name: str | None = None,
    ) -> Plugin:
        """Load a plugin from a dotted module path.

        Args:
            module: Dotted import path (e.g. ``mypackage.plugins.timestamps``).
            options: Options passed to ``plugin.register()``.
            depends_on: Plugin names that must already be loaded.
            name: Overrides ``plugin.meta.name`` as contributor name.

        Raises:
            ValueError: If required dependencies are not loaded.
            TypeError: If the module contains no (or several) Plugin subclasses.
        """
        depends_on = depends_on if depends_on is not None else []

        missing = [dep for dep in depends_on if dep not in self._plugins]
        if missing:
            raise ValueError(f"Missing dependencies for module '{module}': {missing}")

        mod = importlib.import_module(module)

        plugin_cls = self._find_plugin_class(mod)
        if plugin_cls is None:
            raise TypeError(f"No Plugin subclass found in module '{module}'")

        plugin = plugin_cls()
        loaded_name = self.use(plugin, options, name=name)
        self._modules[loaded_name] = module
        logger.debug("Plugin %s v%s from %s", loaded_name, plugin.meta.version, module)
        return plugin

    def load_registry(self, path: str | Path) -> list[str]:
        """Load every enabled entry of a plugins.yaml, in file order.

        Returns:
            Names of the loaded plugins.
        """
        loaded: list[str] = []
        for entry in load_plugin_registry(path):
            self.load(
                entry["module"],
                options=entry.get("options") or {},
                depends_on=entry.get("depends_on") or [],
                name=entry["name"],
            )
            loaded.append(entry["name"])
        logger.info("Plugin registry loaded: %d plugin(s) from %s", len(loaded), path)
        return loaded

    def module_of(self, name: str) -> str | None:
        return self._modules.get(name)

    @staticmethod
    def _find_plugin_class(mod: Any) -> type[Plugin] | None:
        """Find the single Plugin subclass defined in a module.

        Raises TypeError if several are found.
        """
        candidates = [
            getattr(mod, name)
            for name in dir(mod)
            if (
                isinstance(getattr(mod, name), type)
                and issubclass(getattr(mod, name), Plugin)
                and getattr(mod, name) is not Plugin
                and not getattr(getattr(mod, name), "__abstractmethods__", None)
            )
        ]
        if len(candidates) > 1:
            names = sorted(c.__name__ for c in candidates)
            raise TypeError(
                f"Module contains multiple Plugin subclasses: {names}. "
                f"Each module must define exactly one."
            )
        return candidates[0] if candidates else None
