"""Configuration management for HugFusion.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the HUGFUSION_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (HUGFUSION_* prefix)
2. .env file in the project root
3. Default values defined in HugFusionConfig

Example .env file:
    HUGFUSION_API_KEY=your-gemini-api-key
    HUGFUSION_MODEL_ID=gemini-2.5-flash-image
    HUGFUSION_SERVER_PORT=7860
    HUGFUSION_LOG_LEVEL=INFO

The Gemini credential is also picked up from ``GEMINI_API_KEY`` or ``API_KEY``
so an existing key in the environment works without renaming it.

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
The generation client reads ``config.api_key`` each time it sends a request,
so a missing key surfaces as a failed generation rather than a startup crash.

Usage Example
-------------
    from hugfusion.core.config import config

    print(config.model_id)
    print(config.max_file_size)
"""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .images import MAX_FILE_SIZE


class HugFusionConfig(BaseSettings):
    """Main configuration for HugFusion.

    Attributes
    ----------
    Generation Service:
        api_key : str | None
            Gemini API key. Read at request time; absence fails the generation.
        model_id : str
            Gemini model used for image generation

    Upload Policy:
        max_file_size : int
            Largest accepted upload in bytes (10 MiB by default)

    Server Settings:
        server_host : str
            Server bind address (0.0.0.0 for local network)
        server_port : int
            Server port (1024-65535)
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
            Root logging level applied by the entry point

    Examples
    --------
        >>> custom_config = HugFusionConfig(api_key="test-key", server_port=8000)
        >>> custom_config.model_id
        'gemini-2.5-flash-image'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HUGFUSION_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Generation service
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("api_key", "HUGFUSION_API_KEY", "GEMINI_API_KEY", "API_KEY"),
        description="Gemini API key (never logged)",
        repr=False,
    )
    model_id: str = Field(
        default="gemini-2.5-flash-image",
        description="Gemini model used to generate the hug image",
    )

    # Upload policy
    max_file_size: int = Field(
        default=MAX_FILE_SIZE,
        description="Maximum accepted upload size in bytes",
        gt=0,
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level for the application",
    )

    def has_api_key(self) -> bool:
        """Return True when a non-blank API key is configured."""
        return bool(self.api_key and self.api_key.strip())


# Global configuration instance
# Loads values from environment variables (HUGFUSION_* prefix) and .env file.
config = HugFusionConfig()
