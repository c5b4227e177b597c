from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings

MIN_AUTH_SECRET_BYTES = 32


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    environment: Literal["development", "production"] = "production"
    auth_secret: str  # HMAC key for session tokens, generate with: openssl rand -base64 32
    cors_origins: list[str] = []
    forwarded_allow_ips: str = "127.0.0.1"  # Proxies trusted to set X-Forwarded-For
    backend_url: str = "http://localhost:8080"  # Commerce backend base URL
    backend_api_key: str = ""  # Sent as Basic credentials when set
    backend_timeout: float = 10.0  # Seconds

    model_config = {
        "env_file": [".env"],
        "env_prefix": "STOREFRONT_",
        "extra": "ignore",
    }

    @field_validator("auth_secret")
    @classmethod
    def validate_auth_secret(cls, value: str) -> str:
        if len(value.encode("utf-8")) < MIN_AUTH_SECRET_BYTES:
            raise ValueError(f"auth_secret must be at least {MIN_AUTH_SECRET_BYTES} bytes long")
        return value

    @property
    def secure_cookies(self) -> bool:
        """Cookies carry the Secure flag outside of development."""
        return self.environment == "production"
