"""
Config tool: CLI subapp only. Implementation in split_reviewer.config.
"""

import typer

from split_reviewer import config as config_module

config_app = typer.Typer(help="Show or change split-reviewer settings (.split_reviewer.json).")


@config_app.command("show")
def _show() -> None:
    """Show the config file in use and every resolved setting."""
    data = config_module.load_config()
    cf = data.get("_config_file", "")
    if data.get("_no_file"):
        typer.echo(f"Config file: {cf} (not found; using defaults)")
    elif data.get("_load_error"):
        typer.echo(f"Config file: {cf} (unreadable; using defaults)")
    else:
        typer.echo(f"Config file: {cf}")
    for key in config_module.DEFAULTS:
        typer.echo(f"{key}: {data.get(key)}")


@config_app.command("set")
def _set(
    key: str = typer.Argument(..., help="Setting name (e.g. service_url, overlap_tolerance)"),
    value: str = typer.Argument(..., help="New value; lists are comma-separated"),
) -> None:
    """Set one setting and save the config file."""
    result = config_module.set_value(key, value)
    if not result["ok"]:
        typer.echo(result["error"], err=True)
        raise typer.Exit(1)
    typer.echo(f"{key} set to: {result['value']}")
    typer.echo(f"Saved: {result['path']}")


@config_app.command("path")
def _path() -> None:
    """Print the config file path in use."""
    typer.echo(config_module.get_config_path())
