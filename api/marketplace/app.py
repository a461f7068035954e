"""
Initialize the Sanic app and route requests to the listing controllers.
"""
import logging
import os
from logging import getLogger

from sanic import Request, Sanic, json
from sanic_limiter import Limiter, get_remote_address
from sanic_limiter.errors import RateLimitExceeded

from marketplace.clients.firestore import create_firestore_client
from marketplace.config import ApiConfig, FirestoreCollections
from marketplace.rest.controllers import register_routes
from marketplace.rest.controllers.post_listing import on_post_listing
from marketplace.services.auth import init_firebase_app
from marketplace.stores.listing_store import AsyncFirestoreListingStore

# set the logging level based on an env var
logging.basicConfig(level=os.environ.get("LOGLEVEL", "INFO"))

logger = getLogger(__name__)

api = Sanic(name="marketplace")

limiter = Limiter(
    api,
    key_func=get_remote_address,
)
requests_limit_value = (
    f"{ApiConfig.requests_per_day} per day, "
    f"{ApiConfig.requests_per_hour} per hour, "
    f"{ApiConfig.requests_per_minute} per minute"
)


@api.before_server_start
async def setup_listing_store(app: Sanic, _):
    """Create the Firestore client and the listing store shared by all requests."""
    init_firebase_app()
    app.ctx.firestore_client = create_firestore_client()
    app.ctx.listing_store = AsyncFirestoreListingStore(
        client=app.ctx.firestore_client,
        collection=FirestoreCollections.listings,
    )
    logger.info("Listing store ready on collection %s", FirestoreCollections.listings)


@api.exception(RateLimitExceeded)
async def catch_rate_limit(request, exception):
    logger.warning("Rate limit exceeded for IP %s at endpoint %s", request.ip, request.path)
    return json(
        {"error": "Rate limit exceeded"},
        status=429,
    )


server_port = int(os.environ.get("PORT", 8080))

register_routes(api)


# We want to rate limit listing creation, but not the other endpoints.
# Hence, we use a separate explicit route registration here.
@api.post("/listings", name="post_listing")
@limiter.limit(requests_limit_value, key_func=get_remote_address)
async def post_listing(req: Request):
    """Handle POST requests to the /listings endpoint."""
    return await on_post_listing(req)


if __name__ == "__main__":
    api.run(host="0.0.0.0", port=server_port, auto_reload=True)
