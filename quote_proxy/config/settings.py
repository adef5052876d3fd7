"""
Configuration management for the quote proxy.
Loads settings from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root
PROJECT_ROOT = Path(__file__).parent.parent.parent
load_dotenv(PROJECT_ROOT / ".env")


@dataclass
class AppProxyConfig:
    shared_secret: str = ""

    def __post_init__(self):
        self.shared_secret = os.getenv("APP_PROXY_SHARED_SECRET", self.shared_secret)


@dataclass
class ShopifyConfig:
    shop_domain: str = ""
    access_token: str = ""
    api_version: str = "2024-10"
    timeout_seconds: float = 30.0

    def __post_init__(self):
        self.shop_domain = os.getenv("SHOP_DOMAIN", self.shop_domain)
        self.access_token = os.getenv("ADMIN_ACCESS_TOKEN", self.access_token)
        self.api_version = os.getenv("ADMIN_API_VERSION", self.api_version)
        timeout_str = os.getenv("SHOPIFY_TIMEOUT_SECONDS", "")
        if timeout_str:
            self.timeout_seconds = float(timeout_str)


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3000

    def __post_init__(self):
        self.host = os.getenv("HOST", self.host)
        port_str = os.getenv("PORT", "")
        if port_str:
            self.port = int(port_str)


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_file: str = ""

    def __post_init__(self):
        self.level = os.getenv("LOG_LEVEL", self.level)
        self.log_file = os.getenv("LOG_FILE", self.log_file)


@dataclass
class Settings:
    app_proxy: AppProxyConfig = field(default_factory=AppProxyConfig)
    shopify: ShopifyConfig = field(default_factory=ShopifyConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> list[str]:
        """Validate required configuration. Returns list of missing items.

        Nothing here is fatal: the proxy starts anyway and rejects or fails
        individual requests until the missing values are provided.
        """
        missing = []
        if not self.app_proxy.shared_secret:
            missing.append("APP_PROXY_SHARED_SECRET")
        if not self.shopify.shop_domain:
            missing.append("SHOP_DOMAIN")
        if not self.shopify.access_token:
            missing.append("ADMIN_ACCESS_TOKEN")
        return missing


# Global settings singleton (entry point only; everything else receives it)
settings = Settings()
