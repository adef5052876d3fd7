"""
Shopify GraphQL Admin API client for draft order (quote) lookups.

One POST per operation, no retries and no caching. HTTP and GraphQL-level
failures are raised as typed upstream errors so the route layer can decide
what the storefront caller gets to see.
"""

from typing import Any, Dict, Optional, Protocol

import httpx

from quote_proxy.config.settings import Settings
from quote_proxy.errors import ConfigurationError, UpstreamGraphQLError, UpstreamHttpError
from quote_proxy.schemas import DraftOrderRecord, PageInfo
from quote_proxy.services.draft_orders import map_draft_order_node, map_page_info
from quote_proxy.utils.logger import get_logger

logger = get_logger(__name__)

# Quotes returned per page by the list endpoint
DRAFT_ORDERS_PAGE_SIZE = 10
LINE_ITEMS_LIMIT = 50

_LINE_ITEMS_SELECTION = """
                lineItems(first: %d) {
                    edges {
                        node { title quantity variantTitle }
                    }
                }""" % LINE_ITEMS_LIMIT


def _draft_order_fields(include_items: bool) -> str:
    # Line items are only selected on request to keep the query cost down
    return """
                id
                legacyResourceId
                name
                createdAt
                status
                invoiceUrl
                totalPriceSet { presentmentMoney { amount currencyCode } }
                customer { id }%s
    """ % (_LINE_ITEMS_SELECTION if include_items else "")


class GraphQLTransport(Protocol):
    """Anything able to run one GraphQL query against the Admin API."""

    async def execute_query(
        self, query: str, variables: Optional[Dict] = None
    ) -> Dict[str, Any]:
        ...


class ShopifyGraphQLClient:
    """Direct Shopify GraphQL Admin API client for quote queries."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        # Normalize shop domain: strip protocol, trailing slashes
        domain = settings.shopify.shop_domain.strip()
        domain = domain.replace("https://", "").replace("http://", "").rstrip("/")

        self.shop_domain = domain
        self.access_token = settings.shopify.access_token
        self.api_version = settings.shopify.api_version
        self.endpoint = (
            f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"
        )
        self.headers = {
            "X-Shopify-Access-Token": self.access_token,
            "Content-Type": "application/json",
        }
        self._client = httpx.AsyncClient(
            timeout=settings.shopify.timeout_seconds,
            transport=transport,
        )
        logger.info(
            "ShopifyGraphQLClient initialized",
            shop_domain=self.shop_domain,
            api_version=self.api_version,
        )

    async def close(self):
        """Close the underlying HTTPX client."""
        await self._client.aclose()

    async def execute_query(
        self, query: str, variables: Optional[Dict] = None
    ) -> Dict[str, Any]:
        """Execute a GraphQL query against the Shopify Admin API.

        Raises:
            ConfigurationError: If the shop domain or access token is missing.
            UpstreamHttpError: On transport failure or a non-2xx response.
            UpstreamGraphQLError: If the response carries a non-empty ``errors`` array.
        """
        if not self.shop_domain or not self.access_token:
            raise ConfigurationError("SHOP_DOMAIN and ADMIN_ACCESS_TOKEN must be set")

        payload = {"query": query, "variables": variables or {}}

        logger.debug("Executing GraphQL query", variables=variables)

        try:
            response = await self._client.post(
                self.endpoint,
                headers=self.headers,
                json=payload,
            )
        except httpx.HTTPError as e:
            logger.error("Admin API request failed", error=str(e))
            raise UpstreamHttpError(None, str(e)) from e

        if response.is_error:
            logger.error(
                "Admin API HTTP error",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise UpstreamHttpError(response.status_code, response.text)

        data = response.json()

        if data.get("errors"):
            logger.error("GraphQL errors", errors=data["errors"])
            raise UpstreamGraphQLError(data["errors"])

        return data.get("data") or {}


# ── Draft order queries ─────────────────────────────────────────────

LIST_DRAFT_ORDERS_QUERY = """
query ListDraftOrders($first: Int!, $after: String, $q: String!) {
    draftOrders(first: $first, after: $after, query: $q) {
        pageInfo { hasNextPage hasPreviousPage startCursor endCursor }
        edges {
            cursor
            node {%s}
        }
    }
}
"""

GET_DRAFT_ORDER_QUERY = """
query GetDraftOrder($id: ID!) {
    draftOrder(id: $id) {%s}
}
"""


def build_list_draft_orders_query(
    customer_legacy_id: str, after: Optional[str] = None, include_items: bool = False
) -> tuple[str, Dict[str, Any]]:
    """Return the ``(query, variables)`` pair listing a customer's draft orders."""
    query = LIST_DRAFT_ORDERS_QUERY % _draft_order_fields(include_items)
    variables = {
        "first": DRAFT_ORDERS_PAGE_SIZE,
        "after": after,
        "q": f"customer_id:{customer_legacy_id}",
    }
    return query, variables


def build_get_draft_order_query(
    draft_order_gid: str, include_items: bool = False
) -> tuple[str, Dict[str, Any]]:
    """Return the ``(query, variables)`` pair fetching one draft order by GID."""
    query = GET_DRAFT_ORDER_QUERY % _draft_order_fields(include_items)
    return query, {"id": draft_order_gid}


async def list_draft_orders(
    transport: GraphQLTransport,
    customer_legacy_id: str,
    after: Optional[str] = None,
    include_items: bool = False,
) -> tuple[list[DraftOrderRecord], PageInfo]:
    """
    List up to one page of draft orders belonging to a customer.

    Args:
        transport: Client used for the upstream call.
        customer_legacy_id: Numeric customer id (``customer_id:<id>`` filter).
        after: Pagination cursor from a previous page.
        include_items: Also select and map line items.

    Returns:
        The mapped records and the upstream page info.
    """
    query, variables = build_list_draft_orders_query(customer_legacy_id, after, include_items)
    data = await transport.execute_query(query, variables)

    draft_orders = data.get("draftOrders") or {}
    edges = draft_orders.get("edges") or []
    records = [map_draft_order_node(edge.get("node") or {}, include_items) for edge in edges]

    logger.info(
        "Draft orders fetched",
        customer_id=customer_legacy_id,
        count=len(records),
        include_items=include_items,
    )
    return records, map_page_info(draft_orders.get("pageInfo"))


async def get_draft_order(
    transport: GraphQLTransport,
    draft_order_gid: str,
    include_items: bool = False,
) -> Optional[DraftOrderRecord]:
    """Fetch one draft order by GID. Returns None when Shopify has no such node."""
    query, variables = build_get_draft_order_query(draft_order_gid, include_items)
    data = await transport.execute_query(query, variables)

    node = data.get("draftOrder")
    if not node:
        return None
    return map_draft_order_node(node, include_items)
