"""Quote routes: list a customer's draft orders and fetch one by id."""

from typing import Optional

from fastapi import APIRouter, Depends, Response

from quote_proxy.errors import (
    MalformedParameter,
    MissingParameter,
    NotFound,
    QuoteProxyError,
    ServerError,
    UpstreamHttpError,
)
from quote_proxy.proxy.dependencies import get_graphql_client, verify_app_proxy
from quote_proxy.schemas import QuoteListResponse, QuoteResponse
from quote_proxy.services.draft_orders import gid_to_legacy_id, to_draft_order_gid
from quote_proxy.services.shopify_graphql import (
    GraphQLTransport,
    get_draft_order,
    list_draft_orders,
)
from quote_proxy.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/devis", tags=["quotes"], dependencies=[Depends(verify_app_proxy)])


def _wants_items(include: Optional[str]) -> bool:
    return (include or "").lower() == "items"


def _disable_caching(response: Response) -> None:
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
    response.headers["Pragma"] = "no-cache"


@router.get("", response_model=QuoteListResponse, response_model_exclude_unset=True)
async def list_quotes(
    response: Response,
    customer_id: Optional[str] = None,
    after: Optional[str] = None,
    include: Optional[str] = None,
    client: GraphQLTransport = Depends(get_graphql_client),
):
    """List up to ten quotes for a customer, optionally with line items."""
    if not customer_id:
        raise MissingParameter("customer_id")

    customer_legacy_id = gid_to_legacy_id(customer_id)
    if not customer_legacy_id:
        raise MalformedParameter("customer_id")

    include_items = _wants_items(include)
    try:
        quotes, page_info = await list_draft_orders(
            client,
            customer_legacy_id,
            after=after or None,
            include_items=include_items,
        )
    except QuoteProxyError:
        raise
    except Exception:
        logger.exception("Listing quotes failed", customer_id=customer_legacy_id)
        raise ServerError()

    _disable_caching(response)
    return QuoteListResponse(quotes=quotes, page_info=page_info)


@router.get("/{quote_id:path}", response_model=QuoteResponse, response_model_exclude_unset=True)
async def get_quote(
    quote_id: str,
    response: Response,
    include: Optional[str] = None,
    client: GraphQLTransport = Depends(get_graphql_client),
):
    """Fetch a single quote by GID or numeric id.

    GIDs contain slashes, so the id is matched as a path (``/devis/gid%3A%2F%2F...``).
    """
    draft_order_gid = to_draft_order_gid(quote_id)
    if not draft_order_gid:
        raise NotFound()

    try:
        quote = await get_draft_order(client, draft_order_gid, include_items=_wants_items(include))
    except UpstreamHttpError as e:
        if e.status_code == 404:
            raise NotFound()
        logger.exception("Fetching quote failed", quote_id=draft_order_gid)
        raise ServerError()
    except QuoteProxyError:
        raise
    except Exception:
        logger.exception("Fetching quote failed", quote_id=draft_order_gid)
        raise ServerError()

    if quote is None:
        raise NotFound()

    _disable_caching(response)
    return QuoteResponse(quote=quote)
