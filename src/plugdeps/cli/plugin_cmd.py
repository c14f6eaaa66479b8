"""CLI commands for plugin dependency management."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from plugdeps.config.loader import load_config
from plugdeps.config.schema import PlugdepsConfig
from plugdeps.forced import ForcedDependencyTable, fetch_forced_table, load_forced_table
from plugdeps.plugins.loader import DirectoryRegistry
from plugdeps.resolver import ACTIVATE, DEACTIVATE, PluginRef, Resolver

logger = logging.getLogger(__name__)

console = Console()


def _load_forced(config: PlugdepsConfig) -> ForcedDependencyTable:
    if config.forced.url:
        return fetch_forced_table(
            config.forced.url,
            cache_path=config.forced.cache_path,
            timeout=config.forced.timeout,
        )
    return load_forced_table(config.forced.path)


def build_resolver(
    config_path: str | None = None, verbose: bool = False
) -> tuple[DirectoryRegistry, Resolver]:
    """Create the on-disk registry and a resolver from configuration.

    Also sets the ``plugdeps`` log level: DEBUG when verbose, otherwise the
    configured ``logging.level``.
    """
    config = load_config(config_path)
    logging.getLogger("plugdeps").setLevel(logging.DEBUG if verbose else config.logging.level)

    registry = DirectoryRegistry(
        plugin_dir=config.plugins.directory,
        state_file=config.plugins.state_file,
        blocked=config.plugins.blocked,
    )
    return registry, Resolver(registry, forced=_load_forced(config))


def format_plugin_names(refs: list[PluginRef]) -> list[str]:
    """Render plugin references; inactive ones get an activation hint."""
    names = []
    for ref in refs:
        if ref.active:
            names.append(f"[bold]{escape(ref.name)}[/bold]")
        else:
            names.append(
                f"[italic]{escape(ref.name)}[/italic] "
                f"[dim](activate: plugdeps plugin activate {escape(ref.id)})[/dim]"
            )
    return names


def list_plugins(config_path: str | None = None, verbose: bool = False) -> None:
    """List installed plugins with their features and available actions."""
    registry, resolver = build_resolver(config_path, verbose=verbose)
    plugins = registry.list_plugins()

    if not plugins:
        console.print("[dim]No plugins found.[/dim]")
        console.print(f"Drop plugin files in {registry.plugin_dir}.")
        return

    table = Table(title="Installed Plugins")
    table.add_column("Name", style="cyan")
    table.add_column("Id")
    table.add_column("Provides")
    table.add_column("Requires")
    table.add_column("Status")
    table.add_column("Actions", style="green")

    for plugin_id, record in plugins.items():
        status = "[green]active[/green]" if record.active else "[dim]inactive[/dim]"
        candidates = [DEACTIVATE] if record.active else [ACTIVATE]
        actions = resolver.filter_actions(plugin_id, record, candidates)
        table.add_row(
            escape(record.name),
            escape(plugin_id),
            escape(", ".join(record.provides)) if record.provides else "-",
            escape(", ".join(record.requires)) if record.requires else "-",
            status,
            ", ".join(actions) if actions else "[red]locked[/red]",
        )

    console.print(table)


def info_plugin(plugin_id: str, config_path: str | None = None, verbose: bool = False) -> None:
    """Show a plugin's dependency listing."""
    registry, resolver = build_resolver(config_path, verbose=verbose)
    record = registry.list_plugins().get(plugin_id)
    if record is None:
        console.print(f"[red]Plugin '{escape(plugin_id)}' not found.[/red]")
        raise typer.Exit(code=1)

    report = resolver.describe(plugin_id, record)

    console.print(f"\n[bold cyan]{escape(record.name)}[/bold cyan] {escape(record.version)}")
    if record.description:
        console.print(f"  {escape(record.description)}")
    if record.author:
        console.print(f"  Author: {escape(record.author)}")
    console.print(f"  Id: {escape(plugin_id)}")
    console.print(f"  Active: {record.active}")

    if report.needs_nothing:
        console.print("  [italic]Needs no other plugins[/italic]")
    else:
        names = format_plugin_names(report.depends_on)
        names += [
            f"[underline]NOT INSTALLED[/underline] (search: {escape(feature)})"
            for feature in report.missing
        ]
        console.print(f"  Depends on: {', '.join(names)}")

    if report.required_by:
        console.print(f"  Required by: {', '.join(format_plugin_names(report.required_by))}")
    else:
        console.print("  [italic]Not required by any installed plugins[/italic]")

    console.print(f"  Can activate: {report.can_activate}")
    console.print(f"  Can deactivate: {report.can_deactivate}")


def activate_plugin(
    plugin_id: str, force: bool = False, config_path: str | None = None, verbose: bool = False
) -> None:
    """Activate a plugin if its requirements are met."""
    registry, resolver = build_resolver(config_path, verbose=verbose)
    record = registry.list_plugins().get(plugin_id)
    if record is None:
        console.print(f"[red]Plugin '{escape(plugin_id)}' not found.[/red]")
        raise typer.Exit(code=1)

    if not force and not resolver.can_activate(plugin_id, record):
        missing = sorted(resolver.get_unfulfilled_features(plugin_id, record))
        console.print(
            f"[red]Plugin '{escape(plugin_id)}' cannot be activated: "
            "required features are not provided by active plugins.[/red]"
        )
        if missing:
            console.print(f"  Not installed: {escape(', '.join(missing))}")
        raise typer.Exit(code=1)

    registry.activate(plugin_id)
    console.print(f"[green]Plugin '{escape(plugin_id)}' activated.[/green]")


def deactivate_plugin(
    plugin_id: str, force: bool = False, config_path: str | None = None, verbose: bool = False
) -> None:
    """Deactivate a plugin if no active plugin depends on it."""
    registry, resolver = build_resolver(config_path, verbose=verbose)
    record = registry.list_plugins().get(plugin_id)
    if record is None:
        console.print(f"[red]Plugin '{escape(plugin_id)}' not found.[/red]")
        raise typer.Exit(code=1)

    if not force and not resolver.can_deactivate(plugin_id, record):
        report = resolver.describe(plugin_id, record)
        users = [ref.name for ref in report.required_by if ref.active]
        console.print(
            f"[red]Plugin '{escape(plugin_id)}' cannot be deactivated: "
            f"required by {escape(', '.join(users))}.[/red]"
        )
        raise typer.Exit(code=1)

    registry.deactivate(plugin_id)
    console.print(f"[yellow]Plugin '{escape(plugin_id)}' deactivated.[/yellow]")
