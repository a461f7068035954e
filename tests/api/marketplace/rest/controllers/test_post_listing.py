import pytest


@pytest.mark.asyncio
async def test_create_listing(app, fake_store, signed_in):
    _, response = await app.asgi_client.post(
        "/listings", json={"title": "Kayak", "description": "Two seats", "price": 300}
    )

    assert response.status == 201
    created = fake_store.listings[response.json["id"]]
    assert created.owner_id == "owner-1"
    assert created.title == "Kayak"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload,expected_error",
    [
        ({"title": "", "description": "d", "price": 1}, "Title is required"),
        ({"title": "t", "description": "d", "price": -5}, "Please enter a valid price"),
        ([1, 2, 3], "A JSON object body is required"),
    ],
)
async def test_create_listing_invalid(app, fake_store, signed_in, payload, expected_error):
    _, response = await app.asgi_client.post("/listings", json=payload)

    assert response.status == 400
    assert response.json["error"] == expected_error
    assert fake_store.mutating_calls() == []


@pytest.mark.asyncio
async def test_create_listing_requires_login(app, fake_store, signed_in):
    signed_in.return_value = None

    _, response = await app.asgi_client.post("/listings", json={"title": "t", "description": "d", "price": 1})

    assert response.status == 401
    assert fake_store.mutating_calls() == []
