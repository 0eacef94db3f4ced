# src/logshark/plugins/hookspecs.py
"""pluggy hook specifications for logshark plugins.

Plugins implement these hooks to register themselves with the host.

Usage (implementing a plugin):
    from logshark.plugins.hookspecs import hookimpl

    class MyPluginRegistration:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def logshark_get_plugins(self):
            return [MyPlugin]

Note: @hookspec defines the hook interface (done here).
      @hookimpl marks plugin implementations of those hooks.
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from logshark.plugins.base import BasePlugin

# Project name for pluggy
PROJECT_NAME = "logshark"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class LogsharkPluginSpec:
    """Hook specifications for analysis plugins."""

    @hookspec
    def logshark_get_plugins(self) -> list[type["BasePlugin"]]:  # type: ignore[empty-body]
        """Return plugin classes.

        Returns:
            List of plugin classes (not instances)
        """
