"""Terminal display of selection reports."""

from promptfit.display.rich_renderer import render_report, report_renderables

__all__ = ["render_report", "report_renderables"]
