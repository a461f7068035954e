from unittest.mock import patch

import pytest


@pytest.mark.asyncio
@pytest.mark.parametrize("maintenance,expected_status", [(False, "healthy"), (True, "maintenance")])
async def test_on_get_health_status(app, maintenance, expected_status):
    with patch("marketplace.settings.SHOW_SERVICE_MAINTENANCE_BANNER", maintenance):
        _, response = await app.asgi_client.get("/health_status")

    assert response.status == 200
    assert response.json == {"status": expected_status}
