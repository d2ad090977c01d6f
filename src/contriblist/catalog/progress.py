"""Console progress monitor for catalog refreshes."""

from __future__ import annotations

from typing import Optional

from rich.console import Console


class ConsoleProgressMonitor:
    """ProgressMonitor that reports to a rich Console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self.total: Optional[int] = None
        self.received = 0
        self.failed = False
        self._cancelled = False

    def start(self, total: Optional[int]) -> None:
        self.total = total
        self.received = 0

    def update(self, amount: int) -> None:
        self.received += amount

    def set_message(self, text: str) -> None:
        self.console.print(f"[dim]{text}...[/dim]")

    def error(self, exc: BaseException) -> None:
        self.failed = True
        self.console.print(f"[red]Error reading contributions list:[/red] {exc}")
        self.console.print("You can still install contributions manually.")

    def finished(self) -> None:
        if self.failed:
            return
        if self.total:
            self.console.print(f"[green]Done[/green] ({self.received}/{self.total} bytes)")
        else:
            self.console.print(f"[green]Done[/green] ({self.received} bytes)")

    def cancel(self) -> None:
        self._cancelled = True

    def is_cancelled(self) -> bool:
        return self._cancelled
