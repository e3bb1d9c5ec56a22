"""CLI entry point for confloader."""

from __future__ import annotations

import os
import sys
from typing import Any

import typer
from rich.console import Console

from confloader.core.config import ConfLoaderSettings
from confloader.core.contracts import OutputFormat
from confloader.core.exceptions import ConfLoaderError
from confloader.core.logging import setup_logging

if sys.platform == "win32":
    os.environ.setdefault("PYTHONUTF8", "1")

app = typer.Typer(name="confloader", help="confloader - populate, validate and print settings")
console = Console()
err_console = Console(stderr=True)


def _build_source(
    target: str, yaml_path: str | None, prefix: str, *, skip_validation: bool = False
) -> Any:
    from confloader.cli.checker import resolve_settings
    from confloader.core.sources import EnvSource, YamlSource

    settings = resolve_settings(target)
    if yaml_path:
        return YamlSource(settings, yaml_path, skip_validation=skip_validation)
    return EnvSource(settings, prefix=prefix, skip_validation=skip_validation)


def _setup(*, verbose: bool, json_logs: bool) -> None:
    settings = ConfLoaderSettings()
    level = "DEBUG" if verbose else settings.log_level
    setup_logging(json_output=json_logs or settings.log_json, level=level)


@app.command()
def show(
    target: str = typer.Argument(help="Settings dataclass as 'package.module:ClassName'"),
    yaml_path: str | None = typer.Option(None, "--yaml", "-y", help="Read from a YAML file"),
    prefix: str = typer.Option("", "--prefix", help="Prefix for environment variable names"),
    output: str | None = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format: table (default) or json",
    ),
    no_validate: bool = typer.Option(False, "--no-validate", help="Skip validation"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    json_logs: bool = typer.Option(False, "--json-logs"),
) -> None:
    """Load a settings record and print it with secrets masked."""
    if output is not None and output not in {f.value for f in OutputFormat}:
        err_console.print(f"[red]Invalid output format '{output}'. Choose from: table, json[/]")
        raise typer.Exit(code=1)

    _setup(verbose=verbose, json_logs=json_logs)

    from confloader.core.pipeline import load

    try:
        source = _build_source(target, yaml_path, prefix, skip_validation=no_validate)
        load(source, output_format=output, sink=sys.stdout)
    except ConfLoaderError as exc:
        err_console.print(str(exc), style="red", markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(code=1) from None


@app.command()
def check(
    target: str = typer.Argument(help="Settings dataclass as 'package.module:ClassName'"),
    yaml_path: str | None = typer.Option(None, "--yaml", "-y", help="Read from a YAML file"),
    prefix: str = typer.Option("", "--prefix", help="Prefix for environment variable names"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Register and validate a settings record without printing it."""
    from confloader.cli.checker import check_settings, render_violations

    _setup(verbose=verbose, json_logs=False)

    try:
        source = _build_source(target, yaml_path, prefix)
        violations = check_settings(source)
    except ConfLoaderError as exc:
        err_console.print(str(exc), style="red", markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(code=1) from None

    if violations:
        console.print(f"[red]'{target}' has {len(violations)} issue(s):[/]")
        render_violations(violations, console)
        raise typer.Exit(code=1)

    console.print(f"[green]'{target}' passed all checks.[/]")


if __name__ == "__main__":
    app()
