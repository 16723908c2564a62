"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "domain-portfolio"
    log_level: str = "INFO"

    # Expiry monitoring thresholds (days before expiry)
    critical_days: int = 7
    urgent_days: int = 14
    warning_days: int = 30
    alert_frequency: str = "daily"  # daily | weekly | monthly

    # Forecasting
    forecast_years: int = 5
    renewal_cost_update_threshold_pct: float = 10.0
    default_currency: str = "USD"


settings = Settings()
