#!/usr/bin/env python3

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.table import Table

from pypatcher.report import Envelope

STATUS_STYLES = {2: "green", 3: "yellow", 4: "red", 5: "red"}


class Console:
    """Simple console wrapper focused on output."""

    def __init__(self, stderr: bool = False):
        self._rich = RichConsole(stderr=stderr)

    def print(self, *args, **kwargs):
        """Print using Rich console."""
        return self._rich.print(*args, **kwargs)

    def print_error(self, envelope: Envelope):
        self.print(f"[red]ERROR {envelope.status}:[/red] {escape(envelope.message)}")

    def print_report(self, envelope: Envelope):
        """Render a run's results as a table in the order they were produced."""
        fields = envelope.metadata["table.fields"]
        if not envelope.payload:
            self.print(f"{escape(envelope.message)} (no patches processed)")
            return

        table = Table(*fields)
        for row in envelope.payload:
            style = STATUS_STYLES.get(row["status"] // 100)
            table.add_row(*(escape(str(row.get(f, ""))) for f in fields), style=style)
        self.print(table)
