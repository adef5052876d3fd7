"""Tests for environment-driven configuration and logging setup."""

import pytest

from quote_proxy.config.settings import Settings
from quote_proxy.utils.logger import _redact_processor, setup_logging


class TestSettings:

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("APP_PROXY_SHARED_SECRET", "s3cret")
        monkeypatch.setenv("SHOP_DOMAIN", "shop.myshopify.com")
        monkeypatch.setenv("ADMIN_API_VERSION", "2025-01")
        monkeypatch.setenv("ADMIN_ACCESS_TOKEN", "shpat_x")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("SHOPIFY_TIMEOUT_SECONDS", "12.5")

        s = Settings()

        assert s.app_proxy.shared_secret == "s3cret"
        assert s.shopify.shop_domain == "shop.myshopify.com"
        assert s.shopify.api_version == "2025-01"
        assert s.shopify.access_token == "shpat_x"
        assert s.shopify.timeout_seconds == 12.5
        assert s.server.port == 8080
        assert s.validate() == []

    def test_defaults_and_missing(self, monkeypatch):
        for name in ("APP_PROXY_SHARED_SECRET", "SHOP_DOMAIN", "ADMIN_ACCESS_TOKEN", "PORT"):
            monkeypatch.delenv(name, raising=False)

        s = Settings()

        assert s.server.port == 3000
        assert s.validate() == ["APP_PROXY_SHARED_SECRET", "SHOP_DOMAIN", "ADMIN_ACCESS_TOKEN"]


class TestLogging:

    def test_invalid_level_rejected(self):
        with pytest.raises(ValueError):
            setup_logging(level="LOUD")

    def test_sensitive_values_redacted(self):
        event = {
            "event": "calling shpat_abc123",
            "shared_secret": "hush",
            "signature": "abc",
            "path": "/devis",
        }

        redacted = _redact_processor(None, "info", event)

        assert redacted["event"] == "calling [REDACTED]"
        assert redacted["shared_secret"] == "[REDACTED]"
        assert redacted["signature"] == "[REDACTED]"
        assert redacted["path"] == "/devis"
