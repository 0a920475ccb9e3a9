"""Logging configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """Configuration for promptfit logging.

    Attributes:
        level: Level of the ``promptfit`` logger.
        structured: Emit JSON lines instead of plain text.
        log_reports: Log a summary of every selection report.
        format: Format string for plain-text output.
    """

    level: LogLevel = Field(default="INFO", description="Level of the promptfit logger")
    structured: bool = Field(default=False, description="Emit JSON lines")
    log_reports: bool = Field(default=True, description="Log every selection report")
    format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Format string for plain-text output",
    )
