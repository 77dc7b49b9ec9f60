"""
site-runtime - Application Configuration

Patterns Applied:
- Pydantic Settings with SettingsConfigDict
- Environment variable prefix SITE_ for site-runtime

Note: this is the runtime's own configuration. The per-environment site
configuration (configs.json) is resolved by site_runtime.configs.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables with SITE_ prefix.
    Example: SITE_LOG_LEVEL=DEBUG, SITE_CODE_BASE_PATH=/static
    """

    # Application metadata
    service_name: str = "site-runtime"
    version: str = "0.1.0"

    # Logging configuration
    log_level: str = "INFO"
    log_json: bool = True

    # Tracing configuration
    tracing_enabled: bool = False
    tracing_console_export: bool = True

    # Asset locations
    code_base_path: str = ""
    config_origin: str | None = None  # Fetch configs.json from here instead of the page origin

    # Network
    http_timeout: float = 30.0

    # Page bootstrap
    delayed_phase_delay_ms: int = 3000
    fonts_min_viewport_width: int = 900
    rtl_languages: list[str] = ["ar"]
    delayed_module: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="SITE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings instance.

    Returns:
        Settings instance with values from environment
    """
    return Settings()
