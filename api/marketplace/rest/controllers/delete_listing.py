"""
Handles DELETE requests to the /listings/{listing_id} endpoint.
"""
from __future__ import annotations

from logging import getLogger

from sanic import HTTPResponse, Request, json

from marketplace.errors import ListingNotFoundError, UnauthorizedEdit
from marketplace.rest.utils import get_listing_store
from marketplace.services.auth import authenticate_request
from marketplace.services.listings import ListingService

logger = getLogger(__name__)


async def on_delete_listing(request: Request, listing_id: str) -> HTTPResponse:
    """
    Handles DELETE requests to the /listings/{listing_id} endpoint.

    :param request: The Sanic request object.
    :param listing_id: The ID of the listing to delete.
    """
    user = await authenticate_request(request)
    if user is None:
        return json({"error": "You must be logged in to delete listings"}, status=401)

    try:
        service = ListingService(get_listing_store(request))
        listing = await service.load_owned_listing(user, listing_id)
        await service.delete_listing(user, listing)

        return HTTPResponse(status=204)
    except UnauthorizedEdit:
        return json({"error": "You can only delete your own listings"}, status=403)
    except ListingNotFoundError:
        return json({"error": "Listing not found"}, status=404)
    except Exception as e:
        logger.error("Error occurred while deleting listing %s: %s", listing_id, e)
        return json({"error": "Failed to delete listing. Please try again."}, status=500)
