import pytest
from marketplace.errors import AuthError, ListingNotFoundError, UnauthorizedEdit, ValidationError
from marketplace.services.listings import ListingService, ensure_owner


@pytest.mark.asyncio
async def test_create_listing(fake_store, owner):
    service = ListingService(fake_store)

    listing_id = await service.create_listing(owner, {"title": " Kayak ", "description": "Two seats", "price": "300"})

    created = fake_store.listings[listing_id]
    assert created.owner_id == owner.uid
    assert created.title == "Kayak"
    assert created.price == 300.0


@pytest.mark.asyncio
async def test_create_listing_requires_user(fake_store):
    with pytest.raises(AuthError):
        await ListingService(fake_store).create_listing(None, {"title": "t", "description": "d", "price": 1})

    assert fake_store.mutating_calls() == []


@pytest.mark.asyncio
async def test_create_listing_invalid_input_makes_no_store_call(fake_store, owner):
    with pytest.raises(ValidationError):
        await ListingService(fake_store).create_listing(owner, {"title": "t", "description": "d", "price": 0})

    assert fake_store.calls == []


@pytest.mark.asyncio
async def test_update_listing(fake_store, owner):
    service = ListingService(fake_store)
    listing = fake_store.listings["A"]

    updated = await service.update_listing(owner, listing, {"price": 45})

    assert updated.price == 45.0
    assert updated.created_at == listing.created_at
    assert fake_store.listings["A"].price == 45.0
    assert fake_store.listings["A"].owner_id == owner.uid


@pytest.mark.asyncio
async def test_update_by_non_owner_is_rejected_before_store_call(fake_store, stranger):
    with pytest.raises(UnauthorizedEdit):
        await ListingService(fake_store).update_listing(stranger, fake_store.listings["A"], {"price": 1})

    assert fake_store.calls == []


@pytest.mark.asyncio
async def test_delete_by_non_owner_is_rejected_before_store_call(fake_store, stranger):
    with pytest.raises(UnauthorizedEdit):
        await ListingService(fake_store).delete_listing(stranger, fake_store.listings["A"])

    assert fake_store.calls == []
    assert "A" in fake_store.listings


@pytest.mark.asyncio
async def test_delete_listing(fake_store, owner):
    await ListingService(fake_store).delete_listing(owner, fake_store.listings["B"])

    assert "B" not in fake_store.listings


@pytest.mark.asyncio
async def test_load_owned_listing_not_found(fake_store, owner):
    with pytest.raises(ListingNotFoundError):
        await ListingService(fake_store).load_owned_listing(owner, "missing")


@pytest.mark.asyncio
async def test_load_owned_listing_of_someone_else(fake_store, stranger):
    with pytest.raises(UnauthorizedEdit):
        await ListingService(fake_store).load_owned_listing(stranger, "A")


@pytest.mark.asyncio
async def test_get_owned_listings(store_factory, listing_factory, owner):
    store = store_factory(
        [
            listing_factory("mine-old", 1),
            listing_factory("theirs", 2, owner_id="someone"),
            listing_factory("mine-new", 3),
        ]
    )

    listings = await ListingService(store).get_owned_listings(owner)

    assert [listing.id for listing in listings] == ["mine-new", "mine-old"]


def test_ensure_owner_requires_user(abc_listings):
    with pytest.raises(AuthError):
        ensure_owner(None, abc_listings[0])
