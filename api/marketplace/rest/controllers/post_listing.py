"""
Handles POST requests to the /listings endpoint.
"""
from __future__ import annotations

from logging import getLogger

from pydantic.v1 import BaseModel, Field
from sanic import Request, json
from sanic_ext import openapi

from marketplace.errors import ValidationError
from marketplace.rest.utils import get_listing_store
from marketplace.services.auth import authenticate_request
from marketplace.services.listings import ListingService

logger = getLogger(__name__)


class PostListingResponse(BaseModel):
    """Model for the response when a listing is created."""

    id: str = Field(..., description="The ID of the new listing")


class PostListingBody(BaseModel):
    """Model for the body of a POST request."""

    title: str = Field(..., description="The title, at most 100 characters")
    description: str = Field(..., description="The description, at most 500 characters")
    price: float = Field(..., description="The asking price, greater than zero")


@openapi.definition(
    response=PostListingResponse.schema(),
    body=PostListingBody.schema(),
)
async def on_post_listing(request: Request) -> json:
    """
    Handles POST requests to the /listings endpoint.

    :param request: The Sanic request object.
    """
    user = await authenticate_request(request)
    if user is None:
        return json({"error": "You must be logged in to create listings"}, status=401)

    try:
        body = request.json
        if not isinstance(body, dict):
            return json({"error": "A JSON object body is required"}, status=400)

        listing_id = await ListingService(get_listing_store(request)).create_listing(user, body)

        return json(PostListingResponse(id=listing_id).dict(), status=201)
    except ValidationError as e:
        return json({"error": str(e)}, status=400)
    except Exception as e:
        logger.error("An error occurred while creating a listing for %s: %s", user.uid, e)
        return json({"error": "Failed to create listing. Please try again."}, status=500)
