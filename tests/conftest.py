"""Pytest configuration and shared fixtures for quote proxy tests."""

import pytest
from fastapi.testclient import TestClient

from quote_proxy.config.settings import Settings
from quote_proxy.proxy.app import create_app
from quote_proxy.services.app_proxy import sign_path, sign_params

SHARED_SECRET = "test_shared_secret"


class StubGraphQLClient:
    """Records every upstream call and replays a canned response or error."""

    def __init__(self, data=None, error=None):
        self.data = data if data is not None else {}
        self.error = error
        self.calls = []

    async def execute_query(self, query, variables=None):
        self.calls.append((query, variables))
        if self.error is not None:
            raise self.error
        return self.data


@pytest.fixture
def settings():
    """Settings with explicit test values, independent of the environment."""
    s = Settings()
    s.app_proxy.shared_secret = SHARED_SECRET
    s.shopify.shop_domain = "test-shop.myshopify.com"
    s.shopify.access_token = "shpat_test_token"
    s.shopify.api_version = "2024-10"
    return s


@pytest.fixture
def stub_factory():
    return StubGraphQLClient


@pytest.fixture
def stub_client():
    return StubGraphQLClient()


@pytest.fixture
def api_client(settings, stub_client):
    app = create_app(settings, graphql_client=stub_client)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def signed_headers():
    """Return headers carrying a valid proxy signature for a request target."""

    def _build(target: str, secret: str = SHARED_SECRET) -> dict:
        return {"X-Shopify-Proxy-Signature": sign_path(secret, target)}

    return _build


@pytest.fixture
def legacy_params():
    """Return query params with a valid legacy ``signature`` appended."""

    def _build(params: dict, secret: str = SHARED_SECRET) -> dict:
        signed = dict(params)
        signed["signature"] = sign_params(secret, params.items())
        return signed

    return _build


@pytest.fixture
def draft_order_node():
    """A DraftOrder node as returned by the Admin API with line items selected."""
    return {
        "id": "gid://shopify/DraftOrder/987",
        "legacyResourceId": "987",
        "name": "#D12",
        "createdAt": "2024-05-02T10:15:00Z",
        "status": "OPEN",
        "invoiceUrl": "https://test-shop.myshopify.com/123/invoices/abc",
        "totalPriceSet": {
            "presentmentMoney": {"amount": "10.00", "currencyCode": "USD"}
        },
        "customer": {"id": "gid://shopify/Customer/42"},
        "lineItems": {
            "edges": [
                {"node": {"title": "Oak table", "quantity": 1, "variantTitle": "Large"}},
                {"node": {"title": "Chair", "quantity": 4, "variantTitle": None}},
            ]
        },
    }


@pytest.fixture
def page_info():
    return {
        "hasNextPage": True,
        "hasPreviousPage": False,
        "startCursor": "eyJzdGFydCI6MX0=",
        "endCursor": "eyJsYXN0IjoxMH0=",
    }
