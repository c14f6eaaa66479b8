"""Main CLI application using Typer."""

import logging
import sys

import typer
from rich.console import Console

from plugdeps import __version__

# Create Typer app
app = typer.Typer(
    name="plugdeps",
    help="plugdeps - Feature-based plugin dependency resolution",
    no_args_is_help=True,
)

console = Console()

CONFIG_HELP = "Path to config file (default: $PLUGDEPS_CONFIG or ~/.plugdeps/plugdeps.yaml)"


@app.callback()
def _configure(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Configure logging before running a command."""
    logging.basicConfig(level=logging.WARNING)
    # Subcommands apply the level once they have loaded their config
    ctx.obj = {"verbose": verbose}


def _verbose(ctx: typer.Context) -> bool:
    return bool(ctx.obj and ctx.obj.get("verbose"))


@app.command()
def version():
    """Show plugdeps version."""
    console.print(f"plugdeps version {__version__}")


# Plugin commands
plugin_app = typer.Typer(help="Inspect and manage plugin dependencies")
app.add_typer(plugin_app, name="plugin")


@plugin_app.command("list")
def plugin_list(
    ctx: typer.Context,
    config_path: str = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
):
    """List all installed plugins."""
    from plugdeps.cli.plugin_cmd import list_plugins

    list_plugins(config_path=config_path, verbose=_verbose(ctx))


@plugin_app.command("info")
def plugin_info(
    ctx: typer.Context,
    plugin_id: str = typer.Argument(..., help="Plugin id (e.g. jetpack/jetpack.php)"),
    config_path: str = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
):
    """Show what a plugin depends on and what requires it."""
    from plugdeps.cli.plugin_cmd import info_plugin

    info_plugin(plugin_id, config_path=config_path, verbose=_verbose(ctx))


@plugin_app.command("activate")
def plugin_activate(
    ctx: typer.Context,
    plugin_id: str = typer.Argument(..., help="Plugin id"),
    force: bool = typer.Option(False, "--force", "-f", help="Activate even if requirements are unmet"),
    config_path: str = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
):
    """Activate a plugin."""
    from plugdeps.cli.plugin_cmd import activate_plugin

    activate_plugin(plugin_id, force=force, config_path=config_path, verbose=_verbose(ctx))


@plugin_app.command("deactivate")
def plugin_deactivate(
    ctx: typer.Context,
    plugin_id: str = typer.Argument(..., help="Plugin id"),
    force: bool = typer.Option(
        False, "--force", "-f", help="Deactivate even if active plugins depend on it"
    ),
    config_path: str = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
):
    """Deactivate a plugin."""
    from plugdeps.cli.plugin_cmd import deactivate_plugin

    deactivate_plugin(
        plugin_id, force=force, config_path=config_path, verbose=_verbose(ctx)
    )


def main():
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
