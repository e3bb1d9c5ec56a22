"""Library settings via pydantic-settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from confloader.core.contracts import OutputFormat


class ConfLoaderSettings(BaseSettings):
    """confloader's own knobs, read from ``CONFLOADER_*`` env vars."""

    model_config = {"env_prefix": "CONFLOADER_"}

    log_level: str = "INFO"
    log_json: bool = False
    output_format: OutputFormat = OutputFormat.TABLE
