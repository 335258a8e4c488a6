"""Hook registry, dispatch, build context and plugin loading."""

from hookwright.core.context import Build, BuildDraft, build_method, extend, freeze
from hookwright.core.dispatcher import HookDispatcher
from hookwright.core.hooks import ARTIFACT, BUILD, CORE_PHASES, INIT, Hook, HookRegistrar, HookRegistry
from hookwright.core.plugin import Plugin, PluginMeta

__all__ = [
    "ARTIFACT",
    "BUILD",
    "Build",
    "BuildDraft",
    "CORE_PHASES",
    "Hook",
    "HookDispatcher",
    "HookRegistrar",
    "HookRegistry",
    "INIT",
    "Plugin",
    "PluginMeta",
    "build_method",
    "extend",
    "freeze",
]
