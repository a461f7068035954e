"""Contains a function to register all controllers with the app."""
from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import Callable

from sanic import Sanic, response

from marketplace.rest.controllers.delete_listing import on_delete_listing
from marketplace.rest.controllers.get_listing import on_get_listing
from marketplace.rest.controllers.health_status import on_get_health_status
from marketplace.rest.controllers.list_listings import on_list_listings
from marketplace.rest.controllers.list_my_listings import on_list_my_listings
from marketplace.rest.controllers.search_listings import on_search_listings
from marketplace.rest.controllers.update_listing import on_update_listing

logger = getLogger(__name__)


@dataclass
class RouteConfig:
    handler: Callable[..., response.BaseHTTPResponse]
    uri: str
    methods: list[str]
    name: str


def register_routes(api: Sanic):
    """Registers all controllers with the app. POST /listings is registered by the app with its rate limit."""

    routes: list[RouteConfig] = [
        RouteConfig(on_list_listings, "/listings", ["GET"], "list_listings"),
        RouteConfig(on_search_listings, "/listings/search", ["GET"], "search_listings"),
        RouteConfig(on_get_listing, "/listings/<listing_id:str>", ["GET"], "get_listing"),
        RouteConfig(on_update_listing, "/listings/<listing_id:str>", ["PATCH"], "update_listing"),
        RouteConfig(on_delete_listing, "/listings/<listing_id:str>", ["DELETE"], "delete_listing"),
        RouteConfig(on_list_my_listings, "/me/listings", ["GET"], "list_my_listings"),
        RouteConfig(on_get_health_status, "/health_status", ["GET"], "health_status"),
    ]

    for route_config in routes:
        api.add_route(
            handler=route_config.handler,
            uri=route_config.uri,
            methods=route_config.methods,
            name=route_config.name,
        )
        logger.info("Registered %s %s controller", route_config.methods[0], route_config.uri)
