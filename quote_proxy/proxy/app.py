"""FastAPI application factory for the quote proxy."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from quote_proxy.config.settings import Settings
from quote_proxy.errors import QuoteProxyError
from quote_proxy.schemas import ErrorResponse
from quote_proxy.proxy.routes import monitoring, quotes
from quote_proxy.services.shopify_graphql import GraphQLTransport, ShopifyGraphQLClient
from quote_proxy.utils.logger import get_logger, new_correlation_id

logger = get_logger(__name__)


def create_app(settings: Settings, graphql_client: Optional[GraphQLTransport] = None) -> FastAPI:
    """Build and return the App Proxy application.

    Args:
        settings: Configuration shared by the verifier and the upstream client.
        graphql_client: Upstream client to use instead of a
            :class:`ShopifyGraphQLClient` built from ``settings``.
    """
    owns_client = graphql_client is None
    if owns_client:
        graphql_client = ShopifyGraphQLClient(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owns_client:
            await graphql_client.close()
            logger.info("Admin API client closed")

    app = FastAPI(
        title="Quote Proxy",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.graphql_client = graphql_client

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        cid = new_correlation_id()
        response = await call_next(request)
        response.headers["X-Request-ID"] = cid
        return response

    @app.exception_handler(QuoteProxyError)
    async def quote_proxy_error_handler(request: Request, exc: QuoteProxyError):
        logger.info(
            "Request failed",
            path=request.url.path,
            status_code=exc.status_code,
            error=exc.error,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=exc.error).model_dump(),
        )

    app.include_router(monitoring.router)
    app.include_router(quotes.router)

    return app
