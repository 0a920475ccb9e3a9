"""Configuration system for promptfit.

Main exports:
- PromptFitSettings: Root configuration class
- ContextConfig: Window sizing and selection settings
- LoggingConfig: Logging configuration
"""

from promptfit.config.logging_config import LoggingConfig
from promptfit.config.settings import PromptFitSettings
from promptfit.context.config import ContextConfig

__all__ = ["ContextConfig", "LoggingConfig", "PromptFitSettings"]
