# tests/plugins/test_manager.py
"""Tests for plugin discovery, lookup and dependency filtering."""

from __future__ import annotations

import pytest

from logshark.contracts.stores import DocumentQuery
from logshark.plugins.base import BasePlugin
from logshark.plugins.filestore import FilestorePlugin
from logshark.plugins.hookspecs import hookimpl
from logshark.plugins.manager import PluginManager, PluginSpec


class ApachePlugin(BasePlugin):
    name = "Apache"
    collection_name = "httpd"
    collection_dependencies = frozenset({"httpd"})
    workbook_names = ("Apache.twb",)

    def build_query(self) -> DocumentQuery:
        return DocumentQuery(filter={})

    def map_document(self, document, run_id):  # type: ignore[no-untyped-def]
        raise NotImplementedError


class ImpostorPlugin(ApachePlugin):
    name = "Filestore"


class ExtraPlugins:
    @hookimpl
    def logshark_get_plugins(self) -> list[type[BasePlugin]]:
        return [ApachePlugin]


class ImpostorPlugins:
    @hookimpl
    def logshark_get_plugins(self) -> list[type[BasePlugin]]:
        return [ImpostorPlugin]


class TestPluginManager:
    def test_builtin_plugins_registered(self, plugin_manager: PluginManager) -> None:
        assert plugin_manager.get_plugins() == [FilestorePlugin]

    def test_lookup_is_case_insensitive(self, plugin_manager: PluginManager) -> None:
        assert plugin_manager.get_plugin_by_name("filestore") is FilestorePlugin
        assert plugin_manager.get_plugin_by_name("Vizql") is None

    def test_additional_hook_implementations(self, plugin_manager: PluginManager) -> None:
        plugin_manager.register(ExtraPlugins())

        assert [cls.name for cls in plugin_manager.get_plugins()] == ["Apache", "Filestore"]

    def test_duplicate_names_rejected(self, plugin_manager: PluginManager) -> None:
        with pytest.raises(ValueError, match="Duplicate plugin name: 'Filestore'"):
            plugin_manager.register(ImpostorPlugins())

    def test_specs(self, plugin_manager: PluginManager) -> None:
        (spec,) = plugin_manager.get_specs()

        assert spec == PluginSpec(
            name="Filestore",
            version="1.0.0",
            collection_dependencies=frozenset({"filestore"}),
            workbook_names=("Filestore.twb",),
        )


class TestRunnablePlugins:
    """Plugins whose collections are missing are skipped."""

    def test_runnable_when_collection_present(self, plugin_manager: PluginManager) -> None:
        assert plugin_manager.runnable_plugins({"filestore", "httpd"}) == [FilestorePlugin]

    def test_skipped_when_collection_missing(self, plugin_manager: PluginManager) -> None:
        assert plugin_manager.runnable_plugins({"httpd"}) == []

    def test_candidates_limit_selection(self, plugin_manager: PluginManager) -> None:
        plugin_manager.register(ExtraPlugins())

        assert plugin_manager.runnable_plugins({"filestore", "httpd"}, [ApachePlugin]) == [ApachePlugin]

    def test_spec_is_runnable(self) -> None:
        spec = PluginSpec.from_plugin(FilestorePlugin)

        assert spec.is_runnable(["filestore", "vizqlserver"])
        assert not spec.is_runnable([])
