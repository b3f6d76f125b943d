"""Application configuration using Pydantic settings."""

from pydantic import Field, SecretStr, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Required configuration is missing or invalid."""


class Settings(BaseSettings):
    """Sniper settings.

    ``database_url`` has no default and must come from the environment.
    """

    # Registry
    database_url: str
    database_key: SecretStr | None = None  # Injected as the URL password when set
    database_echo: bool = False

    # Target site
    site_domain: str = "amazon.in"
    search_base: str = "https://www.amazon.in/s"

    # Navigation timeouts (milliseconds)
    navigation_timeout_ms: int = Field(default=30000, ge=0)
    result_wait_timeout_ms: int = Field(default=5000, ge=0)
    drilldown_timeout_ms: int = Field(default=10000, ge=0)

    # Extraction
    price_wait_timeout_ms: int = Field(default=10000, ge=0)

    # ==========================================================================
    # Pacing
    # ==========================================================================
    reading_delay_min_ms: int = Field(default=2000, ge=0)
    reading_delay_max_ms: int = Field(default=4000, ge=0)
    target_spacing_seconds: float = Field(default=5.0, ge=0)

    # Browser
    headless: bool = True
    browser_args: list[str] = [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-blink-features=AutomationControlled",
        "--disable-dev-shm-usage",
        "--disable-infobars",
    ]

    # Logging
    log_level: str = "INFO"
    log_dir: str | None = None

    # Metrics (Pushgateway disabled when empty)
    pushgateway_url: str = ""
    metrics_job: str = "price_sniper"

    model_config = SettingsConfigDict(
        env_prefix="SNIPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_reading_window(self) -> "Settings":
        if self.reading_delay_min_ms > self.reading_delay_max_ms:
            raise ValueError(
                "reading_delay_min_ms must not exceed reading_delay_max_ms"
            )
        return self


def load_settings(**overrides) -> Settings:
    """
    Build settings from the environment, failing fast on bad configuration.

    Args:
        **overrides: Explicit values that win over the environment

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: If a required value is missing or a value is invalid
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from e
