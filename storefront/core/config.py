"""Storefront Configuration"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Storefront settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file="config/.env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Luxe & Lush"

    # Trusted payment backend (never the provider directly)
    backend_url: str = "http://localhost:3001"
    request_timeout_seconds: float = 15.0

    # Public origin of the storefront, used to build return URLs
    public_origin: str = "http://localhost:3000"
    payment_success_path: str = "/payment/success"
    payment_failed_path: str = "/payment/failed"

    # Payments
    currency: str = "INR"
    checkout_mode: str = "production"
    order_source: str = "website"
    order_platform: str = "web"

    @property
    def payment_return_url(self) -> str:
        return f"{self.public_origin.rstrip('/')}{self.payment_success_path}"

    @property
    def payment_failed_url(self) -> str:
        return f"{self.public_origin.rstrip('/')}{self.payment_failed_path}"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
