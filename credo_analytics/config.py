"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "credo-analytics"
    log_level: str = "INFO"

    # Fraud network analysis
    fraud_max_depth: int = 3
    temp_loan_id_prefix: str = "temp-"


settings = Settings()
