# src/logshark/plugins/manager.py
"""Plugin manager for discovery, registration, and lookup.

Uses pluggy for hook-based plugin registration. Plugins declare the document
collections they read up front, so the host can skip any plugin whose
collections are absent from the store before invoking it.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import pluggy

from logshark.plugins.base import BasePlugin
from logshark.plugins.hookspecs import PROJECT_NAME, LogsharkPluginSpec


@dataclass(frozen=True)
class PluginSpec:
    """Registration record for a plugin.

    Frozen for immutability - plugin specs shouldn't change after creation.
    """

    name: str
    version: str
    collection_dependencies: frozenset[str]
    workbook_names: tuple[str, ...]

    @classmethod
    def from_plugin(cls, plugin_cls: type[BasePlugin]) -> "PluginSpec":
        return cls(
            name=plugin_cls.name,
            version=plugin_cls.plugin_version,
            collection_dependencies=frozenset(plugin_cls.collection_dependencies),
            workbook_names=tuple(plugin_cls.workbook_names),
        )

    def is_runnable(self, available_collections: Iterable[str]) -> bool:
        """True if every collection this plugin depends on is available."""
        return self.collection_dependencies <= set(available_collections)


class PluginManager:
    """Manages plugin discovery, registration, and lookup.

    Usage:
        manager = PluginManager()
        manager.register_builtin_plugins()

        runnable = manager.runnable_plugins(store.collection_names())
        filestore = manager.get_plugin_by_name("Filestore")
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(LogsharkPluginSpec)

        # Cache - map name to plugin class for duplicate detection
        self._plugins: dict[str, type[BasePlugin]] = {}

    def register_builtin_plugins(self) -> None:
        """Register the plugins shipped with logshark.

        Call this once at startup to make built-in plugins discoverable.
        """
        from logshark.plugins import builtin

        self.register(builtin)

    def register(self, plugin: Any) -> None:
        """Register an object (module or instance) implementing hook methods."""
        self._pm.register(plugin)
        self._refresh_caches()

    def _refresh_caches(self) -> None:
        """Refresh plugin cache from hooks.

        Raises:
            ValueError: If two registered plugin classes share a name
        """
        new_plugins: dict[str, type[BasePlugin]] = {}

        for plugins in self._pm.hook.logshark_get_plugins():
            for cls in plugins:
                name = cls.name
                if name in new_plugins and new_plugins[name] is not cls:
                    raise ValueError(f"Duplicate plugin name: '{name}'. Already registered by {new_plugins[name].__name__}")
                new_plugins[name] = cls

        self._plugins = new_plugins

    # === Getters ===

    def get_plugins(self) -> list[type[BasePlugin]]:
        """Get all registered plugins, sorted by name."""
        return [self._plugins[name] for name in sorted(self._plugins)]

    def get_plugin_by_name(self, name: str) -> type[BasePlugin] | None:
        """Get plugin by name (case-insensitive)."""
        for registered, cls in self._plugins.items():
            if registered.lower() == name.lower():
                return cls
        return None

    def get_specs(self) -> list[PluginSpec]:
        return [PluginSpec.from_plugin(cls) for cls in self.get_plugins()]

    def runnable_plugins(
        self,
        available_collections: Iterable[str],
        candidates: Iterable[type[BasePlugin]] | None = None,
    ) -> list[type[BasePlugin]]:
        """Filter plugins down to those whose collection dependencies are present.

        Args:
            available_collections: Collections present in the document store
            candidates: Plugins to consider (default: all registered)
        """
        available = set(available_collections)
        pool = list(candidates) if candidates is not None else self.get_plugins()
        return [cls for cls in pool if PluginSpec.from_plugin(cls).is_runnable(available)]
