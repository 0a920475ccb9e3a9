"""Logging and selection reporting.

Exports:
- setup_logging: Configure the ``promptfit`` logger
- StructuredFormatter: JSON-lines log formatter
- log_report: Log a SelectionReport with structured fields
- Reporter: Callback type receiving every SelectionReport
"""

from promptfit.observability.logging import Reporter, StructuredFormatter, log_report, setup_logging

__all__ = ["Reporter", "StructuredFormatter", "log_report", "setup_logging"]
