"""Diagnostic record of a message selection."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from rich.console import Console, ConsoleOptions, RenderResult


@dataclass(frozen=True)
class SelectionReport:
    """What a selection kept, dropped and how full the window is.

    Attributes:
        request_id: Caller-supplied identifier for log correlation.
        window_size: Token budget the selection ran against.
        original_message_count: Messages in the input conversation.
        final_message_count: Messages in the output (skip marker included).
        original_tokens: Token cost of the input conversation.
        final_tokens: Token cost of the output.
        intermediate_count: Messages eligible for elision.
        intermediates_dropped: Eligible messages that were left out.
        truncated: Whether any message was left out.
        marker_inserted: Whether a new skip marker was added.
        budget_exceeded: Whether the output is still over the window.
        oracle_calls: Number of measurements the selection needed.
    """

    window_size: int
    original_message_count: int
    final_message_count: int
    original_tokens: int
    final_tokens: int
    intermediate_count: int = 0
    intermediates_dropped: int = 0
    truncated: bool = False
    marker_inserted: bool = False
    budget_exceeded: bool = False
    oracle_calls: int = 0
    request_id: str | None = None

    @property
    def messages_removed(self) -> int:
        return self.original_message_count - self.final_message_count

    @property
    def tokens_removed(self) -> int:
        return self.original_tokens - self.final_tokens

    @property
    def utilization(self) -> float:
        """Fraction of the window used by the output (0.0 for an empty window)."""
        if self.window_size <= 0:
            return 0.0
        return self.final_tokens / self.window_size

    def to_dict(self) -> dict[str, Any]:
        """Flat dict for structured logging."""
        data = asdict(self)
        data["messages_removed"] = self.messages_removed
        data["tokens_removed"] = self.tokens_removed
        data["utilization"] = round(self.utilization, 4)
        return data

    def __str__(self) -> str:
        lines = [
            "Selection Report",
            f"  Window:     {self.window_size}",
            f"  Messages:   {self.original_message_count} -> {self.final_message_count}",
            f"  Tokens:     {self.original_tokens} -> {self.final_tokens}",
            f"  Dropped:    {self.intermediates_dropped} of {self.intermediate_count}",
            f"  Utilization: {self.utilization:.1%}",
        ]
        if self.budget_exceeded:
            lines.append("  Budget exceeded")
        return "\n".join(lines)

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        """Render as a Rich table when passed to ``Console.print()``."""
        from promptfit.display.rich_renderer import report_renderables

        yield from report_renderables(self)
