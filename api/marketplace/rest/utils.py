"""Helpers shared by the REST controllers."""
from __future__ import annotations

from sanic import Request

from marketplace.errors import ValidationError
from marketplace.services.listing_query import SortOrder
from marketplace.stores.listing_store import AsyncFirestoreListingStore


def get_listing_store(request: Request) -> AsyncFirestoreListingStore:
    """Return the listing store the app was started with."""
    return request.app.ctx.listing_store


def parse_sort_order(request: Request) -> SortOrder:
    """
    Read the ``sort`` query argument.

    :raises ValidationError: If the value is not one of ``none``, ``price_desc`` or ``price_asc``.
    """
    value = request.args.get("sort", SortOrder.NONE.value)
    try:
        return SortOrder(value)
    except ValueError:
        raise ValidationError(f"Invalid sort order: {value}") from None
