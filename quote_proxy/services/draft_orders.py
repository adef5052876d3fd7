"""
Draft order helpers: Shopify GID handling and GraphQL node → record mapping.

Mapping never raises on missing upstream fields; anything absent comes back
as ``None`` on the record.
"""

import re
from typing import Any, Optional

from quote_proxy.schemas import DraftOrderRecord, LineItem, PageInfo

_DIGITS_RE = re.compile(r"^\d+$")

GID_PREFIX = "gid://"
DRAFT_ORDER_GID_TEMPLATE = "gid://shopify/DraftOrder/{}"


def gid_to_legacy_id(value: Any) -> Optional[str]:
    """Convert ``gid://shopify/DraftOrder/123`` (or a bare ``123``) to ``"123"``.

    Returns None when the value carries no numeric id.
    """
    if not value:
        return None
    text = str(value)
    if text.startswith(GID_PREFIX):
        last = text.rsplit("/", 1)[-1]
        if _DIGITS_RE.match(last):
            return last
    if _DIGITS_RE.match(text):
        return text
    return None


def to_draft_order_gid(value: Any) -> Optional[str]:
    """Normalize a draft order identifier to its GID form."""
    legacy_id = gid_to_legacy_id(value)
    if legacy_id is None:
        return None
    text = str(value)
    if text.startswith(GID_PREFIX):
        return text
    return DRAFT_ORDER_GID_TEMPLATE.format(legacy_id)


def _format_total(node: dict) -> Optional[str]:
    money = (node.get("totalPriceSet") or {}).get("presentmentMoney")
    if not money:
        return None
    return f"{money.get('amount')} {money.get('currencyCode')}"


def _map_line_items(line_items: dict) -> list[LineItem]:
    items = []
    for edge in line_items.get("edges") or []:
        li = edge.get("node") or {}
        items.append(
            LineItem(
                title=li.get("title"),
                quantity=li.get("quantity"),
                variant_title=li.get("variantTitle") or "",
            )
        )
    return items


def map_draft_order_node(node: dict, include_items: bool = False) -> DraftOrderRecord:
    """Map one ``DraftOrder`` GraphQL node to a :class:`DraftOrderRecord`.

    Args:
        node: The ``node`` object from the Admin API response.
        include_items: Whether line items were requested. When False the
            ``lineItems`` field is left unset (and so omitted from responses).
    """
    fields = {
        "id": node.get("id"),
        "legacy_resource_id": node.get("legacyResourceId"),
        "name": node.get("name"),
        "created_at": node.get("createdAt"),
        "status": node.get("status"),
        "invoice_url": node.get("invoiceUrl"),
        "total": _format_total(node),
    }
    if include_items and node.get("lineItems"):
        fields["line_items"] = _map_line_items(node["lineItems"])
    return DraftOrderRecord(**fields)


def map_page_info(raw: Optional[dict]) -> PageInfo:
    """Pass Shopify ``pageInfo`` through unchanged.

    Only the keys upstream sent are set, so a missing ``pageInfo`` is
    serialized as ``{}``.
    """
    return PageInfo.model_validate(raw or {})
