from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    env: str = "local"
    log_level: str = "INFO"

    # Marketplace REST API
    api_base_url: str = "http://localhost:8000/api"
    api_key: Optional[str] = None
    http_timeout: Optional[float] = None

    # Razorpay Checkout (public key only, the secret stays on the backend)
    razorpay_key_id: str = ""
    store_name: str = "MHE Bazar"
    currency: str = "INR"

    storage_dir: str = ".storefront/local_storage"

    access_token_cookie: str = "access_token"
    refresh_token_cookie: str = "refresh_token"

    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @property
    def api_root(self):
        return self.api_base_url.rstrip("/")

    class Config:
        env_prefix = "STOREFRONT_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"

settings = Settings()
