"""
Handles PATCH requests to the /listings/{listing_id} endpoint.
"""
from __future__ import annotations

from logging import getLogger

from pydantic.v1 import BaseModel, Field
from sanic import Request, json
from sanic_ext import openapi

from marketplace.errors import ListingNotFoundError, UnauthorizedEdit, ValidationError
from marketplace.models.listing import Listing
from marketplace.rest.utils import get_listing_store
from marketplace.services.auth import authenticate_request
from marketplace.services.listings import ListingService

logger = getLogger(__name__)


class PatchListingBody(BaseModel):
    """Model for the body of a PATCH request. Omitted fields are left unchanged."""

    title: str | None = Field(None, description="The new title")
    description: str | None = Field(None, description="The new description")
    price: float | None = Field(None, description="The new price")


@openapi.definition(
    response=Listing.schema_json(),
    body=PatchListingBody.schema(),
)
async def on_update_listing(request: Request, listing_id: str) -> json:
    """
    Handles PATCH requests to the /listings/{listing_id} endpoint.

    :param request: The Sanic request object.
    :param listing_id: The ID of the listing to edit.
    """
    user = await authenticate_request(request)
    if user is None:
        return json({"error": "You must be logged in to edit listings"}, status=401)

    try:
        body = request.json
        if not isinstance(body, dict):
            return json({"error": "A JSON object body is required"}, status=400)

        service = ListingService(get_listing_store(request))
        listing = await service.load_owned_listing(user, listing_id)
        updated = await service.update_listing(user, listing, body)

        return json(updated.to_dict(), status=200)
    except ValidationError as e:
        return json({"error": str(e)}, status=400)
    except UnauthorizedEdit:
        return json({"error": "You can only edit your own listings"}, status=403)
    except ListingNotFoundError:
        return json({"error": "Listing not found"}, status=404)
    except Exception as e:
        logger.error("Error occurred while updating listing %s: %s", listing_id, e)
        return json({"error": "Failed to update listing. Please try again."}, status=500)
