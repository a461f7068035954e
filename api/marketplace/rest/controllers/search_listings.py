"""
Handles GET requests to the /listings/search endpoint.
"""
from __future__ import annotations

from logging import getLogger

from pydantic.v1 import BaseModel, Field
from sanic import Request, json
from sanic_ext import openapi

from marketplace.config import ListingsConfig
from marketplace.errors import ValidationError
from marketplace.models.listing import Listing
from marketplace.rest.utils import get_listing_store, parse_sort_order
from marketplace.services.listing_query import filter_listings, sort_listings

logger = getLogger(__name__)


class SearchListingsResponse(BaseModel):
    """Data model for search results returned in the API response."""

    query: str = Field(..., description="The search term")
    listings: list[Listing] = Field(default_factory=list, description="The matching listings")

    def to_dict(self):
        """Convert the SearchListingsResponse model to a dictionary."""
        return {
            "query": self.query,
            "listings": [listing.to_dict() for listing in self.listings],
            "has_more": False,
        }


@openapi.definition(response=SearchListingsResponse.schema_json())
async def on_search_listings(request: Request) -> json:
    """
    Handles GET requests to the /listings/search endpoint.

    Matches ``q`` against titles and descriptions, ignoring case. Results are not paginated.

    :param request: The Sanic request object.
    """
    term = request.args.get("q", "")
    if not term.strip():
        return json({"error": "q is required"}, status=400)

    try:
        sort_order = parse_sort_order(request)
    except ValidationError as e:
        return json({"error": str(e)}, status=400)

    try:
        listings = await get_listing_store(request).list_all()
        if len(listings) > ListingsConfig.search_scan_warn_threshold:
            logger.warning("Search scanned %s listings; consider an indexed search backend", len(listings))

        matches = sort_listings(filter_listings(listings, term), sort_order)
        return json(SearchListingsResponse(query=term, listings=matches).to_dict(), status=200)
    except Exception as e:
        logger.error("Error while searching listings for %r: %s", term, e)
        return json({"error": "Search failed. Please try again."}, status=500)
