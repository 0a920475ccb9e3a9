"""Logging setup and selection report logging."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from promptfit.config.logging_config import LoggingConfig

if TYPE_CHECKING:
    from promptfit.context.report import SelectionReport

Reporter = Callable[["SelectionReport"], None]

ROOT_LOGGER = "promptfit"

# Attributes every LogRecord has; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
    | {"message", "asctime", "taskName"}
)


class StructuredFormatter(logging.Formatter):
    """Format records as single-line JSON objects.

    Fields passed through ``extra`` (such as ``request_id``) become
    top-level keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Configure the ``promptfit`` logger.

    Replaces handlers previously installed by this function, so it is
    safe to call more than once.

    Args:
        config: Logging configuration. Defaults to ``LoggingConfig()``.

    Returns:
        The configured ``promptfit`` logger.
    """
    config = config or LoggingConfig()
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(config.level)

    for handler in list(logger.handlers):
        if getattr(handler, "_promptfit", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._promptfit = True  # type: ignore[attr-defined]
    if config.structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(config.format))
    logger.addHandler(handler)
    return logger


def log_report(report: SelectionReport, logger: logging.Logger | None = None) -> None:
    """Log a selection report with its fields as structured extras.

    Reports whose output is still over budget are logged as warnings.
    """
    logger = logger or logging.getLogger(f"{ROOT_LOGGER}.selection")
    level = logging.WARNING if report.budget_exceeded else logging.INFO
    logger.log(
        level,
        "Selection kept %d of %d messages (%d of %d tokens, %.1f%% of window)",
        report.final_message_count,
        report.original_message_count,
        report.final_tokens,
        report.original_tokens,
        report.utilization * 100,
        extra=report.to_dict(),
    )
