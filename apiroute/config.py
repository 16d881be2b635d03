"""
Route pipeline configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.schema import CastOptions, ValidationOptions


class RouteSettings(BaseSettings):
    """
    Configuration shared by every route built without explicit settings.
    """

    LOG_LEVEL: str = Field(default="INFO", description="Log level")
    LOG_CONFIG_PATH: str = Field(
        default="logging.yml", description="YAML logging (dictConfig) file path"
    )

    # Schema engine defaults
    VALIDATION_OPTIONS: ValidationOptions = Field(
        default_factory=ValidationOptions, description="Options for the validation pass"
    )
    CAST_OPTIONS: CastOptions = Field(
        default_factory=CastOptions, description="Options for the coercion pass"
    )

    model_config = SettingsConfigDict(
        env_prefix="APIROUTE_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Load config as a singleton.
# Routes use it unless they are constructed with their own settings.
try:
    config = RouteSettings()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
