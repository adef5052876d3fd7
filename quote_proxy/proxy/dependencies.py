"""FastAPI dependencies for the App Proxy routes."""

from fastapi import Request

from quote_proxy.config.settings import Settings
from quote_proxy.errors import InvalidSignature
from quote_proxy.services import app_proxy
from quote_proxy.services.shopify_graphql import GraphQLTransport
from quote_proxy.utils.logger import get_logger

logger = get_logger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_graphql_client(request: Request) -> GraphQLTransport:
    return request.app.state.graphql_client


async def verify_app_proxy(request: Request) -> None:
    """Reject the request with 401 unless it carries a valid App Proxy signature."""
    settings = get_settings(request)
    ok = app_proxy.verify(
        headers=request.headers,
        raw_path=app_proxy.request_target(request.scope),
        query_params=request.query_params,
        shared_secret=settings.app_proxy.shared_secret,
    )
    if not ok:
        logger.warning("Rejected request: invalid app proxy signature", path=request.url.path)
        raise InvalidSignature()
