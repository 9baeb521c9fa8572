"""Payment API Configuration"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_file="config/.env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Luxe & Lush Payment API"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: list[str] = ["*"]

    # Public origin of the storefront (return URLs) and of this API (notify URL)
    storefront_origin: str = "http://localhost:3000"
    payment_success_path: str = "/payment/success"
    api_base_url: Optional[str] = None

    # Cashfree Payment Gateway
    cashfree_app_id: Optional[str] = None
    cashfree_secret_key: Optional[str] = None
    cashfree_environment: str = "production"
    cashfree_api_version: str = "2023-08-01"
    request_timeout_seconds: float = 15.0

    # Webhooks
    cashfree_webhook_secret: Optional[str] = None
    require_webhook_signature: bool = True
    webhook_max_age_seconds: int = 300

    # Orders
    default_currency: str = "INR"
    default_order_note: str = "Luxe & Lush Jewelry Purchase"

    @property
    def cashfree_configured(self) -> bool:
        """Check if Cashfree credentials are configured"""
        return bool(self.cashfree_app_id and self.cashfree_secret_key)

    def get_webhook_secret(self) -> Optional[str]:
        """Webhook signing secret; Cashfree signs with the client secret unless overridden"""
        return self.cashfree_webhook_secret or self.cashfree_secret_key


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
