"""
Configuration management for the Pandorabots client

Settings are read from PANDORABOTS_* environment variables or a .env file.
The library client never reads them on its own; callers (the CLI) turn them
into builder options with api.options.settings_options().
"""
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_URL = "https://aiaas.pandorabots.com"


class ClientSettings(BaseSettings):
    """Client configuration with environment variable support."""

    # Credentials are validated when the client is built, not here
    app_id: str = ""
    user_key: str = ""

    url: str = DEFAULT_URL

    # Logging
    log_level: str = "WARNING"
    log_json_path: str = ""  # Empty string disables the JSON log file
    debug: bool = False      # Mirror every request/response to stderr

    model_config = SettingsConfigDict(
        env_prefix="PANDORABOTS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )


# Lazily initialized so importing this module never reads the environment
_config = None

def get_config() -> ClientSettings:
    """Get the global settings instance."""
    global _config
    if _config is None:
        _config = ClientSettings()
    return _config
