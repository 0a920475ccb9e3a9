"""Root settings for promptfit.

Sources, highest priority first: constructor arguments, environment
variables (``PROMPTFIT_`` prefix, ``__`` between nested keys), a ``.env``
file, ``promptfit.toml``, ``promptfit.yaml``.

Example:
    $ export PROMPTFIT_CONTEXT__WINDOW_FLOOR=2048
    $ export PROMPTFIT_LOGGING__STRUCTURED=true

    >>> settings = PromptFitSettings()
    >>> settings.context.window_floor
    2048
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
    YamlConfigSettingsSource,
)

from promptfit.config.logging_config import LoggingConfig
from promptfit.context.config import ContextConfig
from promptfit.errors import ConfigurationError


class PromptFitSettings(BaseSettings):
    """Root configuration.

    Attributes:
        context: Window sizing and selection settings.
        logging: Logging settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROMPTFIT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        toml_file="promptfit.toml",
        yaml_file="promptfit.yaml",
        extra="ignore",
    )

    context: ContextConfig = Field(default_factory=ContextConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @classmethod
    def from_file(cls, path: str | Path) -> PromptFitSettings:
        """Load settings from a TOML or YAML file.

        Values in the file take precedence over the environment.

        Args:
            path: Path to a ``.toml``, ``.yaml`` or ``.yml`` file.

        Raises:
            ConfigurationError: If the file is missing or not a supported type.
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError(f"Config file not found: {path}", config_key="path")

        data: Any
        if path.suffix == ".toml":
            with path.open("rb") as f:
                data = tomllib.load(f)
        elif path.suffix in (".yaml", ".yml"):
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        else:
            raise ConfigurationError(
                f"Unsupported config file type: {path.suffix}",
                config_key="path",
                expected=".toml, .yaml or .yml",
                actual=path.suffix,
            )

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {path}")
        return cls(**data)
