"""Rich Console rendering of selection reports."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from rich.console import RenderableType

    from promptfit.context.report import SelectionReport


def report_renderables(report: SelectionReport) -> Iterator[RenderableType]:
    """Yield the Rich objects that make up a report.

    A table of before/after counts, followed by a one-line status.
    """
    title = "Selection Report"
    if report.request_id:
        title += f" ({report.request_id})"

    table = Table(title=title, show_header=True)
    table.add_column("", style="bold")
    table.add_column("Original", justify="right")
    table.add_column("Final", justify="right")
    table.add_column("Removed", justify="right")

    table.add_row(
        "Messages",
        f"{report.original_message_count:,}",
        f"{report.final_message_count:,}",
        f"{report.messages_removed:,}",
    )
    table.add_row(
        "Tokens",
        f"{report.original_tokens:,}",
        f"{report.final_tokens:,}",
        f"{report.tokens_removed:,}",
    )
    yield table

    summary = (
        f"Window {report.window_size:,} tokens, {report.utilization:.1%} used; "
        f"{report.intermediates_dropped} of {report.intermediate_count} "
        "intermediate messages dropped"
    )
    if report.budget_exceeded:
        yield Text(summary + " (budget exceeded)", style="bold red")
    elif report.truncated:
        yield Text(summary, style="yellow")
    else:
        yield Text(summary, style="green")


def render_report(report: SelectionReport, *, console: Console | None = None) -> str:
    """Print a report and return the printed text.

    Args:
        report: Report to render.
        console: Recording console (``record=True``) to print to. When
            omitted, a new recording console is created.

    Returns:
        The rendered string captured from the console.
    """
    if console is None:
        console = Console(record=True)
    for renderable in report_renderables(report):
        console.print(renderable)
    return console.export_text()
