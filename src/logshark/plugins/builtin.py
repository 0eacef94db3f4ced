# src/logshark/plugins/builtin.py
"""Hook implementations registering the plugins shipped with logshark."""

from logshark.plugins.base import BasePlugin
from logshark.plugins.filestore import FilestorePlugin
from logshark.plugins.hookspecs import hookimpl


@hookimpl
def logshark_get_plugins() -> list[type[BasePlugin]]:
    return [FilestorePlugin]
