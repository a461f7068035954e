import asyncio
from datetime import datetime, timedelta, timezone
from itertools import count
from unittest.mock import AsyncMock, patch

import pytest
from sanic import Sanic
from sanic_testing import TestManager

from marketplace.errors import StoreError
from marketplace.models.listing import Listing
from marketplace.models.user import User
from marketplace.stores.listing_store import ListingPage, PageCursor

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeListingStore:
    """In-memory stand-in for AsyncFirestoreListingStore with the same ordering and cursor semantics."""

    def __init__(self, listings=()):
        self.listings = {listing.id: listing for listing in listings}
        self.calls = []
        self.error: StoreError | None = None
        self._ids = count(1)

    def _ordered(self):
        return sorted(self.listings.values(), key=lambda listing: (listing.created_at, listing.id), reverse=True)

    async def _check(self, name, *args):
        self.calls.append((name, *args))
        # yield like a real network call would
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error

    async def insert(self, draft, owner_id):
        await self._check("insert", draft, owner_id)
        listing_id = f"new-{next(self._ids)}"
        newest = max((listing.created_at for listing in self.listings.values()), default=EPOCH)
        self.listings[listing_id] = Listing(
            id=listing_id,
            title=draft.title,
            description=draft.description,
            price=draft.price,
            owner_id=owner_id,
            created_at=newest + timedelta(minutes=1),
        )
        return listing_id

    async def get_by_id(self, listing_id):
        await self._check("get_by_id", listing_id)
        return self.listings.get(listing_id)

    async def list_ordered_page(self, page_size, cursor=None):
        await self._check("list_ordered_page", page_size, cursor)
        ordered = self._ordered()
        if cursor is not None:
            position = (cursor.created_at, cursor.listing_id)
            ordered = [listing for listing in ordered if (listing.created_at, listing.id) < position]
        items = ordered[:page_size]
        return ListingPage(items=items, next_cursor=PageCursor.from_listing(items[-1]) if items else None)

    async def list_all(self):
        await self._check("list_all")
        return self._ordered()

    async def list_by_owner(self, owner_id):
        await self._check("list_by_owner", owner_id)
        return [listing for listing in self._ordered() if listing.owner_id == owner_id]

    async def update(self, listing_id, patch):
        await self._check("update", listing_id, patch)
        self.listings[listing_id] = self.listings[listing_id].copy(update=patch.to_firestore())

    async def delete(self, listing_id):
        await self._check("delete", listing_id)
        self.listings.pop(listing_id, None)

    def mutating_calls(self):
        return [call for call in self.calls if call[0] in ("insert", "update", "delete")]


def make_listing(listing_id, minutes, *, title=None, description="A thing for sale", price=10.0, owner_id="owner-1"):
    """Build a listing created ``minutes`` after a fixed epoch."""
    return Listing(
        id=listing_id,
        title=title or f"Listing {listing_id}",
        description=description,
        price=price,
        owner_id=owner_id,
        created_at=EPOCH + timedelta(minutes=minutes),
    )


@pytest.fixture
def owner() -> User:
    return User(uid="owner-1", email="owner@example.com")


@pytest.fixture
def stranger() -> User:
    return User(uid="stranger-2", email="stranger@example.com")


@pytest.fixture
def abc_listings():
    """Records A, B and C created at t3, t2 and t1."""
    return [
        make_listing("A", 3, title="Antique Chair", price=40.0),
        make_listing("B", 2, title="Big Box", price=5.0),
        make_listing("C", 1, title="Camping Stove", price=25.0),
    ]


@pytest.fixture
def fake_store(abc_listings) -> FakeListingStore:
    return FakeListingStore(abc_listings)


@pytest.fixture
def app(fake_store) -> Sanic:
    """Fixture to create a new Sanic application for testing."""
    Sanic.test_mode = True
    sanitized_name = __name__.replace(".", "_")
    app_instance = Sanic(sanitized_name)
    TestManager(app_instance)

    from marketplace.rest.controllers import register_routes
    from marketplace.rest.controllers.post_listing import on_post_listing

    app_instance.add_route(handler=on_post_listing, uri="/listings", methods=["POST"], name="post_listing")
    register_routes(app_instance)
    app_instance.ctx.listing_store = fake_store

    return app_instance


@pytest.fixture
def signed_in(owner):
    """Patch request authentication in every controller to return ``owner``; returns the mock for retargeting."""
    mock_authenticate = AsyncMock(return_value=owner)
    targets = [
        "marketplace.rest.controllers.post_listing.authenticate_request",
        "marketplace.rest.controllers.update_listing.authenticate_request",
        "marketplace.rest.controllers.delete_listing.authenticate_request",
        "marketplace.rest.controllers.list_my_listings.authenticate_request",
    ]
    patchers = [patch(target, new=mock_authenticate) for target in targets]
    for patcher in patchers:
        patcher.start()
    yield mock_authenticate
    for patcher in patchers:
        patcher.stop()


@pytest.fixture
def listing_factory():
    return make_listing


@pytest.fixture
def store_factory():
    return FakeListingStore
