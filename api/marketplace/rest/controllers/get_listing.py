"""
Handles GET requests to the /listings/{listing_id} endpoint.
"""
from __future__ import annotations

from logging import getLogger

from sanic import Request, json
from sanic_ext import openapi

from marketplace.models.listing import Listing
from marketplace.rest.utils import get_listing_store

logger = getLogger(__name__)


@openapi.definition(response=Listing.schema_json())
async def on_get_listing(request: Request, listing_id: str) -> json:
    """
    Handles GET requests to the /listings/{listing_id} endpoint.

    :param request: The Sanic request object.
    :param listing_id: The ID of the listing.
    """
    try:
        logger.info("Received GET request for listing %s", listing_id)
        listing = await get_listing_store(request).get_by_id(listing_id)

        if listing is None:
            return json({"error": "Listing not found"}, status=404)

        return json(listing.to_dict(), status=200)
    except Exception as e:
        logger.error("Error fetching listing %s: %s", listing_id, e)
        return json({"error": "Failed to load listing. Please try again."}, status=500)
