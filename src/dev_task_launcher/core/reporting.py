"""Console output for tasks and sinks."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import Candidate
from .sinks import Sink


class TextReporter:
    """Human-readable output using rich library."""

    def __init__(self, console: Console | None = None):
        """Initialize text reporter with optional console."""
        self.console = console or Console()

    def candidates(self, candidates: list[Candidate]) -> None:
        """Print numbered selector entries, grouped as discovered."""
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Task")
        table.add_column("Source", style="dim")

        for index, candidate in enumerate(candidates, start=1):
            table.add_row(str(index), escape(candidate.label), candidate.task.provider)

        self.console.print(table)

    def sinks(self, sinks: list[Sink]) -> None:
        """Print the sink listing, or an informational note when empty."""
        if not sinks:
            self.info("No task buffers")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Buffer")
        table.add_column("Status")
        table.add_column("Command", style="dim")

        for index, sink in enumerate(sinks, start=1):
            status = "[green]running[/green]" if sink.running else "[blue]finished[/blue]"
            table.add_row(str(index), escape(sink.name), status, escape(sink.command))

        self.console.print(table)

    def sink_output(self, sink: Sink) -> None:
        """Print everything a sink captured so far."""
        self.console.rule(escape(sink.name))
        for line in sink.output:
            self.console.print(line, markup=False, highlight=False)

    def started(self, sink: Sink) -> None:
        self.console.print(f"▶ {escape(sink.name)}: {escape(sink.command)}", style="bold green")

    def info(self, message: str) -> None:
        self.console.print(escape(message), style="blue")

    def error(self, message: str) -> None:
        self.console.print(f"✖ {escape(message)}", style="red bold")
