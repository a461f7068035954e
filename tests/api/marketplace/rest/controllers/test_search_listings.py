from unittest.mock import AsyncMock

import pytest
from marketplace.errors import StoreError


@pytest.mark.asyncio
async def test_search_matches_title_ignoring_case(app):
    _, response = await app.asgi_client.get("/listings/search", params={"q": "BIG"})

    assert response.status == 200
    assert [listing["id"] for listing in response.json["listings"]] == ["B"]
    assert response.json["has_more"] is False
    assert response.json["query"] == "BIG"


@pytest.mark.asyncio
async def test_search_sorted_by_price(app):
    _, response = await app.asgi_client.get("/listings/search", params={"q": "a", "sort": "price_desc"})

    assert [listing["id"] for listing in response.json["listings"]] == ["A", "C", "B"]


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{}, {"q": "  "}, {"q": "box", "sort": "cheapest"}])
async def test_search_bad_request(app, params):
    _, response = await app.asgi_client.get("/listings/search", params=params)

    assert response.status == 400


@pytest.mark.asyncio
async def test_search_store_failure(app, fake_store):
    fake_store.list_all = AsyncMock(side_effect=StoreError("down"))

    _, response = await app.asgi_client.get("/listings/search", params={"q": "box"})

    assert response.status == 500
    assert response.json == {"error": "Search failed. Please try again."}
