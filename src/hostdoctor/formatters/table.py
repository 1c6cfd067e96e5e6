"""Table formatter built on rich."""

from __future__ import annotations

import io

from rich import box
from rich.console import Console
from rich.table import Table


class TableFormatter:
    """Render rows as an ASCII table, one column per field."""

    format_name: str = "table"

    def render(self, rows: list[dict], fields: list[str]) -> str:
        table = Table(box=box.ASCII, show_header=True, header_style=None)
        for f in fields:
            table.add_column(f, no_wrap=True)
        for row in rows:
            table.add_row(*(str(row.get(f, "")) for f in fields))
        buf = io.StringIO()
        console = Console(file=buf, width=10_000, color_system=None, highlight=False)
        console.print(table)
        return buf.getvalue().rstrip("\n")
