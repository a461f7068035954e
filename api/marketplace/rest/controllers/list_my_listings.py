"""
Handles GET requests to the /me/listings endpoint.
"""
from __future__ import annotations

from logging import getLogger

from sanic import Request, json

from marketplace.rest.utils import get_listing_store
from marketplace.services.auth import authenticate_request
from marketplace.services.listings import ListingService

logger = getLogger(__name__)


async def on_list_my_listings(request: Request) -> json:
    """Handle GET requests for the listings created by the signed-in user."""
    user = await authenticate_request(request)
    if user is None:
        return json({"error": "You must be logged in to view your listings"}, status=401)

    try:
        listings = await ListingService(get_listing_store(request)).get_owned_listings(user)
        return json({"listings": [listing.to_dict() for listing in listings]}, status=200)
    except Exception as e:
        logger.error(f"Error while fetching listings of {user.uid}: {e}")
        return json({"error": "Failed to load listings. Please try again."}, status=500)
