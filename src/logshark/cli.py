# src/logshark/cli.py
"""logshark Command Line Interface.

Entry point for the logshark CLI tool.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer
from pydantic import ValidationError

from logshark import __version__
from logshark.contracts.errors import DestinationWriteFailure, PluginConfigError
from logshark.contracts.results import RunRequest, RunResponse, parse_custom_args
from logshark.core.config import LogsharkSettings, load_settings

if TYPE_CHECKING:
    from logshark.contracts.stores import DestinationStore, DocumentStore
    from logshark.plugins.base import BasePlugin
    from logshark.plugins.manager import PluginManager

__all__ = [
    "app",
    "load_settings",
]

# Module-level singleton for plugin manager
_plugin_manager_cache: PluginManager | None = None


def _get_plugin_manager() -> PluginManager:
    """Get initialized plugin manager (singleton)."""
    global _plugin_manager_cache

    from logshark.plugins.manager import PluginManager

    if _plugin_manager_cache is None:
        manager = PluginManager()
        manager.register_builtin_plugins()
        _plugin_manager_cache = manager
    return _plugin_manager_cache


app = typer.Typer(
    name="logshark",
    help="logshark: turn parsed log documents into workbook tables.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"logshark version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """logshark: turn parsed log documents into workbook tables."""
    from logshark.core.logging import configure_logging

    log_level = "DEBUG" if verbose else "INFO"
    configure_logging(json_output=json_logs, level=log_level)


@app.command("plugins")
def plugins_list() -> None:
    """List available plugins with their collection dependencies and workbooks."""
    specs = _get_plugin_manager().get_specs()
    if not specs:
        typer.echo("(no plugins registered)")
        return

    for spec in specs:
        typer.echo(f"{spec.name} {spec.version}")
        typer.echo(f"  collections: {', '.join(sorted(spec.collection_dependencies)) or '-'}")
        typer.echo(f"  workbooks:   {', '.join(spec.workbook_names) or '-'}")


def _open_document_store(settings: LogsharkSettings) -> DocumentStore:
    from logshark.plugins.documents import MongoDocumentStore

    return MongoDocumentStore.from_url(
        settings.document_store.url,
        settings.document_store.database,
        batch_size=settings.document_store.batch_size,
    )


def _open_destination(settings: LogsharkSettings) -> DestinationStore:
    from logshark.plugins.persistence import SqlDestinationStore

    return SqlDestinationStore(settings.destination.url)


def _select_plugins(manager: PluginManager, names: list[str]) -> list[type[BasePlugin]]:
    """Resolve requested plugin names; all registered plugins when none are given."""
    if not names:
        return manager.get_plugins()

    selected: list[type[BasePlugin]] = []
    for name in names:
        cls = manager.get_plugin_by_name(name)
        if cls is None:
            available = ", ".join(spec.name for spec in manager.get_specs())
            raise PluginConfigError(f"Unknown plugin '{name}'. Available: {available}")
        if cls not in selected:
            selected.append(cls)
    return selected


def _print_response(response: RunResponse) -> None:
    if response.errors:
        typer.secho(
            f"{response.plugin_name}: completed with {len(response.errors)} document error(s)",
            fg=typer.colors.YELLOW,
        )
    elif response.generated_no_data:
        typer.echo(f"{response.plugin_name}: completed, no data generated")
    else:
        typer.secho(f"{response.plugin_name}: completed", fg=typer.colors.GREEN)


@app.command()
def run(
    settings: str = typer.Option(
        ...,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    plugin_names: list[str] = typer.Option(
        [],
        "--plugin",
        "-p",
        help="Plugin to run (repeatable). Default: every registered plugin.",
    ),
    run_id: str | None = typer.Option(
        None,
        "--run-id",
        help="Logset hash stamped on every record (UUID). Default: a fresh UUID.",
    ),
    custom_args: list[str] = typer.Option(
        [],
        "--arg",
        "-a",
        help="Plugin argument in the form PluginName.ArgName:Value (repeatable).",
    ),
) -> None:
    """Run plugins against a document store and write their tables.

    Plugins whose collections are missing from the document store are skipped.
    """
    from logshark.core.logging import get_logger
    from logshark.plugins.context import PluginContext

    settings_path = Path(settings).expanduser()

    try:
        config = load_settings(settings_path)
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None

    manager = _get_plugin_manager()
    try:
        request = RunRequest.create(run_id=run_id, custom_args=parse_custom_args(custom_args))
        candidates = _select_plugins(manager, plugin_names)
    except PluginConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    logger = get_logger("logshark.cli")
    document_store = _open_document_store(config)
    destination: DestinationStore | None = None
    try:
        destination = _open_destination(config)
        available = document_store.collection_names()
        runnable = manager.runnable_plugins(available, candidates)
        for skipped in candidates:
            if skipped not in runnable:
                missing = sorted(set(skipped.collection_dependencies) - set(available))
                logger.warning("plugin_skipped", plugin=skipped.name, missing_collections=missing)
                typer.echo(f"{skipped.name}: skipped, missing collections {', '.join(missing)}")

        ctx = PluginContext(
            document_store=document_store,
            destination=destination,
            persister=config.persister,
            pool=config.pool,
            progress_interval_seconds=config.progress.interval_seconds,
            logger=logger,
        )
        typer.echo(f"Run id: {request.run_id}")
        for plugin_cls in runnable:
            try:
                response = plugin_cls().execute(request, ctx)
            except DestinationWriteFailure as e:
                typer.secho(f"{plugin_cls.name}: destination write failed: {e}", fg=typer.colors.RED, err=True)
                raise typer.Exit(1) from None
            _print_response(response)
    finally:
        for resource in (document_store, destination):
            close = getattr(resource, "close", None)
            if close is not None:
                close()
