"""Settings checks for the CLI: resolve a target record and collect its violations."""

from __future__ import annotations

import dataclasses
import importlib
from typing import TYPE_CHECKING, Any

from rich.table import Table

from confloader.core.exceptions import ConfLoaderError, ValidationError

if TYPE_CHECKING:
    from rich.console import Console

    from confloader.core.contracts import Violation
    from confloader.core.sources import BaseSource


def resolve_settings(target: str) -> Any:
    """Import ``package.module:ClassName`` and return a default instance of it."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        msg = f"Invalid target '{target}'. Expected 'package.module:ClassName'"
        raise ConfLoaderError(msg)

    try:
        mod = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfLoaderError(f"Cannot import '{module_name}': {exc}") from exc

    cls = getattr(mod, attr, None)
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        msg = f"'{target}' is not a dataclass settings record"
        raise ConfLoaderError(msg)

    try:
        return cls()
    except TypeError as exc:
        msg = f"'{target}' needs defaults for every field: {exc}"
        raise ConfLoaderError(msg) from exc


def check_settings(source: BaseSource[Any]) -> list[Violation]:
    """Register and validate *source*; return its violations (empty when valid)."""
    source.register()
    try:
        source.validate()
    except ValidationError as exc:
        return exc.violations
    return []


def render_violations(violations: list[Violation], console: Console) -> None:
    table = Table(title="Validation failures")
    table.add_column("Field", style="cyan")
    table.add_column("Rule", style="yellow")
    table.add_column("Value")

    for violation in violations:
        table.add_row(violation.field, violation.tag, repr(violation.value))

    console.print(table)
