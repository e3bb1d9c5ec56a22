"""Tabular renderer: two-column ``Config | Value`` box table."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from confloader.core.exceptions import RenderError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from confloader.core.contracts import FieldRecord


def build_table(records: Iterable[FieldRecord]) -> Table:
    """One row per field record, in walker order."""
    table = Table(box=box.ASCII2, show_header=True, header_style="bold", pad_edge=True)
    table.add_column("Config", no_wrap=True)
    table.add_column("Value", overflow="fold")

    for record in records:
        table.add_row(Text(record.name), Text(record.value))

    return table


def render_table(records: Iterable[FieldRecord], sink: IO[str]) -> None:
    """Render *records* as a table onto *sink*."""
    table = build_table(records)
    console = Console(file=sink, highlight=False, soft_wrap=False)
    try:
        console.print(table)
        sink.flush()
    except OSError as exc:
        raise RenderError(f"failed to render table: {exc}") from exc
