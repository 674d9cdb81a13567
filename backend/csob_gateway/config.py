"""
CSOB Gateway Configuration Module

Loads merchant configuration from environment variables and .env file.
"""
from pydantic_settings import BaseSettings
from typing import Literal, Optional


# Format of the dttm field: fully numeric, second resolution
DATE_FORMAT = "%Y%m%d%H%M%S"


class Settings(BaseSettings):
    """
    Merchant settings loaded from environment variables.

    Values here are defaults only: return URL and return method given on a
    payment request always win over the configured ones.
    """

    # Merchant identity
    merchant_id: str = ""
    shop_name: str = ""

    # Where the gateway sends the customer after payment
    return_url: str = ""
    return_method: str = "POST"

    # Signing keys (PEM files)
    private_key_file: str = ""
    private_key_password: Optional[str] = None

    # Timezone the gateway expects dttm in
    gateway_timezone: str = "Europe/Prague"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the global settings."""
    return settings
