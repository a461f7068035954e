"""
Handles GET requests to the /listings endpoint.
"""
from __future__ import annotations

from logging import getLogger

from pydantic.v1 import BaseModel, Field
from sanic import Request, json
from sanic_ext import openapi

from marketplace.config import ApiConfig, ListingsConfig
from marketplace.errors import ValidationError
from marketplace.models.listing import Listing
from marketplace.rest.utils import get_listing_store, parse_sort_order
from marketplace.services.listing_query import sort_listings
from marketplace.stores.listing_store import PageCursor

logger = getLogger(__name__)


class ListingsPageResponse(BaseModel):
    """Data model for a page of listings returned in the API response."""

    listings: list[Listing] = Field(default_factory=list, description="The listings, newest first unless sorted")
    next_cursor: str | None = Field(None, description="Pass as ?cursor= to fetch the next page")
    has_more: bool = Field(..., description="Whether another page may exist")

    def to_dict(self):
        """Convert the ListingsPageResponse model to a dictionary."""
        return {
            "listings": [listing.to_dict() for listing in self.listings],
            "next_cursor": self.next_cursor,
            "has_more": self.has_more,
        }


def _parse_page_size(request: Request) -> int:
    raw = request.args.get("page_size", str(ListingsConfig.page_size))
    try:
        page_size = int(raw)
    except ValueError:
        raise ValidationError(f"Invalid page_size: {raw}") from None
    if not 1 <= page_size <= ApiConfig.max_page_size:
        raise ValidationError(f"page_size must be between 1 and {ApiConfig.max_page_size}")
    return page_size


@openapi.definition(response=ListingsPageResponse.schema_json())
async def on_list_listings(request: Request) -> json:
    """
    Handles GET requests to the /listings endpoint.

    Query arguments: ``cursor`` (from a previous page), ``page_size`` and ``sort``.

    :param request: The Sanic request object.
    """
    try:
        page_size = _parse_page_size(request)
        sort_order = parse_sort_order(request)
        token = request.args.get("cursor")
        cursor = PageCursor.decode(token) if token else None
    except ValidationError as e:
        return json({"error": str(e)}, status=400)

    try:
        page = await get_listing_store(request).list_ordered_page(page_size, cursor)
        response = ListingsPageResponse(
            listings=sort_listings(page.items, sort_order),
            next_cursor=page.next_cursor.encode() if page.next_cursor else None,
            # a short page is taken as the last one
            has_more=len(page.items) == page_size,
        )
        return json(response.to_dict(), status=200)
    except Exception as e:
        logger.error("Error while fetching listings page: %s", e)
        return json({"error": "Failed to load listings. Please try again."}, status=500)
