"""Pydantic schemas for the quote proxy API responses."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    # Shopify serializes legacyResourceId as a string, but older API versions sent a number
    model_config = ConfigDict(populate_by_name=True, frozen=True, coerce_numbers_to_str=True)


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------

class LineItem(_CamelModel):
    title: Optional[str] = None
    quantity: Optional[int] = None
    variant_title: str = Field(default="", alias="variantTitle")


class DraftOrderRecord(_CamelModel):
    """Simplified draft order as returned to the storefront.

    ``line_items`` is only set when items were requested; responses are
    serialized with ``exclude_unset`` so the field is absent otherwise.
    """

    id: Optional[str] = None
    legacy_resource_id: Optional[str] = Field(default=None, alias="legacyResourceId")
    name: Optional[str] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    status: Optional[str] = None
    invoice_url: Optional[str] = Field(default=None, alias="invoiceUrl")
    total: Optional[str] = None
    line_items: Optional[list[LineItem]] = Field(default=None, alias="lineItems")


class PageInfo(_CamelModel):
    has_next_page: Optional[bool] = Field(default=None, alias="hasNextPage")
    has_previous_page: Optional[bool] = Field(default=None, alias="hasPreviousPage")
    start_cursor: Optional[str] = Field(default=None, alias="startCursor")
    end_cursor: Optional[str] = Field(default=None, alias="endCursor")


class QuoteListResponse(_CamelModel):
    quotes: list[DraftOrderRecord]
    page_info: PageInfo = Field(alias="pageInfo")


class QuoteResponse(_CamelModel):
    quote: DraftOrderRecord


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------

class ErrorResponse(BaseModel):
    error: str


class HealthCheck(BaseModel):
    status: str
