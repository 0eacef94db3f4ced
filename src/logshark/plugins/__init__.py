"""Plugin system: base class, registry, stores and built-in plugins.

Usage:
    from logshark.plugins import PluginManager, PluginContext

    manager = PluginManager()
    manager.register_builtin_plugins()
"""

from logshark.plugins.base import BasePlugin
from logshark.plugins.context import PluginContext
from logshark.plugins.hookspecs import hookimpl, hookspec
from logshark.plugins.manager import PluginManager, PluginSpec

__all__ = [
    "BasePlugin",
    "PluginContext",
    "PluginManager",
    "PluginSpec",
    "hookimpl",
    "hookspec",
]
