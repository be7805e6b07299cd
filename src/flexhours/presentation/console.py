"""
Console presenter.

Renders the weekly total panel the way the page overlay lays it out: the
total, the week/today breakdown, and the expected end of work with the start
time when a projection exists.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from flexhours.domain.timetext import format_worded_duration

if TYPE_CHECKING:
    from flexhours.runtime.pipeline import AcquisitionResult


class ConsolePresenter:
    """Presenter printing to a rich Console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.result: AcquisitionResult | None = None
        self.error: tuple[str, bool] | None = None

    def on_result(self, result: AcquisitionResult) -> None:
        table = Table(title="이번 주 총 근무시간", show_header=False)
        table.add_column("Label", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("총합", result.total_label)
        table.add_row("누적", format_worded_duration(result.week_minutes))
        table.add_row("오늘", format_worded_duration(result.today_minutes))
        expected_end = result.projection_label
        if result.start_time is not None and expected_end is not None:
            table.add_row("예상 퇴근시간", expected_end)
            table.add_row("출근", str(result.start_time))
        self.console.print(table)
        self.result = result

    def on_error(self, message: str, retryable: bool) -> None:
        suffix = " (다시 시도할 수 있습니다)" if retryable else ""
        self.console.print(f"[bold red]⚠ {message}[/bold red]{suffix}")
        self.error = (message, retryable)

    def has_result(self) -> bool:
        return self.result is not None
