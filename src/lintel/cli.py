from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import click
import typer
from rich.console import Console

from lintel import __version__
from lintel.audit import CheckResult, check_paths
from lintel.config import ConfigError
from lintel.engine.types import LintelError
from lintel.logging_utils import configure_logging
from lintel.reporters.json_reporter import render_json
from lintel.reporters.terminal import render_terminal
from lintel.rules.plugins import PluginLoadError
from lintel.rules.registry import RuleRegistryError
from lintel.scanner import prepare_target

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Lintel: pluggable Python linter with in-file suppression directives.",
)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

_SETUP_ERRORS = (ConfigError, PluginLoadError, RuleRegistryError)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def _main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose logs (printed to stderr)."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only print the summary line, not individual problems."),
    ] = False,
) -> None:
    """Lintel CLI."""

    if verbose and quiet:
        raise typer.BadParameter("Choose at most one: --verbose or --quiet.")
    configure_logging(verbose=verbose, quiet=quiet)
    ctx.obj = {"verbose": verbose, "quiet": quiet}


def _cli_settings() -> dict[str, bool]:
    ctx = click.get_current_context(silent=True)
    if ctx is None or not isinstance(ctx.obj, dict):
        return {"verbose": False, "quiet": False}
    return {"verbose": bool(ctx.obj.get("verbose", False)), "quiet": bool(ctx.obj.get("quiet", False))}


def _emit_output(fmt: str, *, result: CheckResult, show_details: bool) -> None:
    normalized = fmt.strip().lower()
    if normalized == "terminal":
        render_terminal(result, console=console, show_details=show_details)
        return
    if normalized == "json":
        typer.echo(render_json(result))
        return
    raise typer.BadParameter("Unsupported format. Use: terminal, json.")


@app.command()
def check(
    paths: Annotated[
        list[Path] | None,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=True,
            resolve_path=True,
            help="Files or directories to lint (default: current directory).",
        ),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json.", show_default=True),
    ] = "terminal",
    workers: Annotated[
        int | None,
        typer.Option("--workers", min=1, help="Files linted in parallel (default: $LINTEL_WORKERS or 2x CPUs)."),
    ] = None,
) -> None:
    """
    Lint Python files and report diagnostics that are not suppressed.

    Exits with 1 when any diagnostic has severity `error`, 2 when the run fails.
    """

    if output_format.strip().lower() not in {"terminal", "json"}:
        raise typer.BadParameter("Unsupported format. Use: terminal, json.")

    settings = _cli_settings()
    try:
        result = check_paths(paths or [Path(".")], workers=workers)
    except _SETUP_ERRORS as exc:
        err_console.print(f"Configuration error: {exc}")
        raise typer.Exit(code=2) from exc
    except LintelError as exc:
        cause = f" ({exc.__cause__})" if exc.__cause__ is not None else ""
        err_console.print(f"Lint failed: {exc}{cause}")
        raise typer.Exit(code=2) from exc
    except OSError as exc:
        err_console.print(f"Cannot read source: {exc}")
        raise typer.Exit(code=2) from exc

    logger.debug("%d diagnostic(s) left after suppression", len(result.findings))
    _emit_output(output_format, result=result, show_details=not settings["quiet"])

    if result.error_count:
        raise typer.Exit(code=1)


@app.command()
def rules(
    path: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
            help="Project directory (default: current directory).",
        ),
    ] = Path("."),
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json.", show_default=True),
    ] = "terminal",
    enabled_only: Annotated[
        bool,
        typer.Option("--enabled-only", help="Only show rules enabled by the current config."),
    ] = False,
) -> None:
    """
    List all available rules (built-in + plugin rules) and their metadata.
    """

    from rich.table import Table

    from lintel.audit import resolve_rules
    from lintel.rules.registry import rule_meta_by_name

    try:
        target = prepare_target([path])
        enabled_names = {r.name for r in resolve_rules(target)}
    except _SETUP_ERRORS as exc:
        err_console.print(f"Configuration error: {exc}")
        raise typer.Exit(code=2) from exc

    rows = []
    for name, meta in rule_meta_by_name().items():
        enabled = name in enabled_names
        if enabled_only and not enabled:
            continue
        rows.append(
            {
                "name": meta.name,
                "enabled": enabled,
                "title": meta.title,
                "description": meta.description,
                "category": meta.category,
                "default_severity": meta.default_severity,
            }
        )

    normalized = output_format.strip().lower()
    if normalized == "json":
        typer.echo(json.dumps(rows, indent=2, sort_keys=True))
        return
    if normalized != "terminal":
        raise typer.BadParameter("Unsupported format. Use: terminal, json.")

    table = Table(title="Lintel Rules")
    table.add_column("Name", style="bold")
    table.add_column("Enabled", justify="center")
    table.add_column("Severity")
    table.add_column("Category")
    table.add_column("Title")
    for row in rows:
        table.add_row(
            str(row["name"]),
            "yes" if row["enabled"] else "no",
            str(row["default_severity"]),
            str(row["category"]),
            str(row["title"]),
        )
    console.print(table)
