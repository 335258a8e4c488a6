"""Plugin-driven artifact construction with ordered hook phases and watch mode."""

from hookwright.builder import ArtifactBuilder, construct_artifact
from hookwright.core import (
    ARTIFACT,
    BUILD,
    INIT,
    Build,
    BuildDraft,
    HookRegistrar,
    Plugin,
    PluginMeta,
    build_method,
    extend,
)
from hookwright.core.plugin_manager import PluginManager
from hookwright.exceptions import (
    AlreadyWatchingError,
    ContextConflictError,
    FrozenContextError,
    HookReturnedEmptyError,
    HookwrightError,
    NotWatchingError,
    SynchronousChangeDuringSubscribeError,
    UnknownPhaseError,
    WatcherRegistrationError,
)
from hookwright.file_watcher import FileWatcher
from hookwright.watch import ArtifactChannel, WatcherRegistration, WatchState

__version__ = "0.1.0"

__all__ = [
    "ARTIFACT",
    "AlreadyWatchingError",
    "ArtifactBuilder",
    "ArtifactChannel",
    "BUILD",
    "Build",
    "BuildDraft",
    "ContextConflictError",
    "FileWatcher",
    "FrozenContextError",
    "HookRegistrar",
    "HookReturnedEmptyError",
    "HookwrightError",
    "INIT",
    "NotWatchingError",
    "Plugin",
    "PluginManager",
    "PluginMeta",
    "SynchronousChangeDuringSubscribeError",
    "UnknownPhaseError",
    "WatchState",
    "WatcherRegistration",
    "build_method",
    "construct_artifact",
    "extend",
]
