"""
Configuration management for stackcalc.

Settings are loaded from environment variables (prefixed ``STACKCALC_``)
and an optional ``.env`` file, with sensible defaults for everything.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings."""
    
    model_config = SettingsConfigDict(
        env_prefix="STACKCALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
    
    # Application settings
    app_name: str = "stackcalc"
    debug: bool = False  # Forces DEBUG logging in the CLI
    log_level: str = "WARNING"
    log_format: Literal["console", "json"] = "console"
    
    # Keypad behaviour
    display_precision: int = Field(12, ge=1, le=17)  # Significant digits shown
    integer_input: bool = False  # Accept whole-number entries only
    trace_stack: bool = False  # Log the stack after every press
    
    # Server settings
    host: str = "127.0.0.1"
    port: int = 8000
    max_sessions: int = Field(1000, ge=1)  # In-memory sessions held by the API


# Global settings instance
settings = Settings()
