import pytest


@pytest.mark.asyncio
async def test_delete_listing(app, fake_store, signed_in):
    _, response = await app.asgi_client.delete("/listings/B")

    assert response.status == 204
    assert "B" not in fake_store.listings


@pytest.mark.asyncio
async def test_delete_listing_of_someone_else(app, fake_store, signed_in, stranger):
    signed_in.return_value = stranger

    _, response = await app.asgi_client.delete("/listings/B")

    assert response.status == 403
    assert "B" in fake_store.listings
    assert fake_store.mutating_calls() == []


@pytest.mark.asyncio
async def test_delete_missing_listing(app, signed_in):
    _, response = await app.asgi_client.delete("/listings/missing")

    assert response.status == 404
    assert response.json == {"error": "Listing not found"}


@pytest.mark.asyncio
async def test_delete_requires_login(app, fake_store, signed_in):
    signed_in.return_value = None

    _, response = await app.asgi_client.delete("/listings/B")

    assert response.status == 401
    assert "B" in fake_store.listings
