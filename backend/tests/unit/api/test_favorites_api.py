"""
Tests for the Favorites API
"""
import pytest
from httpx import AsyncClient


class TestToggleFavorite:
    """Test POST /api/v1/favorites"""

    @pytest.mark.asyncio
    async def test_add_and_list(self, client: AsyncClient, auth_headers, templates):
        response = await client.post("/api/v1/favorites", json={"templateId": 3, "action": "add"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Added to favorites"}

        listing = await client.get("/api/v1/favorites/templates", headers=auth_headers)
        assert [t["id"] for t in listing.json()["templates"]] == [3]

    @pytest.mark.asyncio
    async def test_add_twice_is_idempotent(self, client: AsyncClient, auth_headers, templates):
        for _ in range(2):
            response = await client.post(
                "/api/v1/favorites", json={"template_id": 5, "action": "add"}, headers=auth_headers
            )
            assert response.status_code == 200

        listing = await client.get("/api/v1/favorites/templates", headers=auth_headers)
        assert [t["id"] for t in listing.json()["templates"]] == [5]

    @pytest.mark.asyncio
    async def test_remove(self, client: AsyncClient, auth_headers, templates):
        await client.post("/api/v1/favorites", json={"templateId": 3, "action": "add"}, headers=auth_headers)

        response = await client.post("/api/v1/favorites", json={"templateId": 3, "action": "remove"}, headers=auth_headers)

        assert response.json() == {"message": "Removed from favorites"}
        listing = await client.get("/api/v1/favorites/templates", headers=auth_headers)
        assert listing.json()["templates"] == []

    @pytest.mark.asyncio
    async def test_add_missing_template(self, client: AsyncClient, auth_headers, templates):
        response = await client.post("/api/v1/favorites", json={"templateId": 999, "action": "add"}, headers=auth_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_action(self, client: AsyncClient, auth_headers, templates):
        response = await client.post("/api/v1/favorites", json={"templateId": 3, "action": "star"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_favorites_are_per_user(self, client: AsyncClient, auth_headers, other_auth_headers, templates):
        await client.post("/api/v1/favorites", json={"templateId": 3, "action": "add"}, headers=other_auth_headers)

        listing = await client.get("/api/v1/favorites/templates", headers=auth_headers)

        assert listing.json()["templates"] == []
