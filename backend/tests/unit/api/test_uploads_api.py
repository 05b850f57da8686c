"""
Tests for the Image Upload API
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.core.config import settings
from app.models.layout import Component


class TestUploadImage:
    """Test POST /api/v1/uploads"""

    @pytest.mark.asyncio
    async def test_upload_returns_public_url(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/api/v1/uploads",
            files={"image": ("logo.PNG", b"png bytes", "image/png")},
            headers=auth_headers,
        )

        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith("http://testserver/uploads/")
        assert url.endswith(".png")
        stored = settings.upload_path / url.rsplit("/", 1)[1]
        assert stored.read_bytes() == b"png bytes"

    @pytest.mark.asyncio
    async def test_upload_links_component(self, client: AsyncClient, auth_headers, test_layout, db_session):
        component = test_layout.boxes[0].components[0]

        response = await client.post(
            "/api/v1/uploads",
            files={"image": ("photo.jpg", b"jpeg", "image/jpeg")},
            data={"component_id": str(component.id)},
            headers=auth_headers,
        )

        assert response.status_code == 200
        result = await db_session.execute(
            select(Component).where(Component.id == str(component.id)).execution_options(populate_existing=True)
        )
        updated = result.scalar_one()
        assert updated.props["src"] == response.json()["url"]
        assert updated.props["content"] == "Go"
        assert updated.image_id is not None

    @pytest.mark.asyncio
    async def test_upload_other_users_component(self, client: AsyncClient, auth_headers, other_layout):
        component = other_layout.boxes[0].components[0]

        response = await client.post(
            "/api/v1/uploads",
            files={"image": ("photo.jpg", b"jpeg", "image/jpeg")},
            data={"component_id": str(component.id)},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Component not found"

    @pytest.mark.asyncio
    async def test_no_file(self, client: AsyncClient, auth_headers):
        response = await client.post("/api/v1/uploads", data={"component_id": "x"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "No file uploaded"

    @pytest.mark.asyncio
    async def test_wrong_extension(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/api/v1/uploads",
            files={"image": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_FILE_TYPE"

    @pytest.mark.asyncio
    async def test_too_large(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/api/v1/uploads",
            files={"image": ("big.png", b"0" * (settings.MAX_UPLOAD_SIZE + 1), "image/png")},
            headers=auth_headers,
        )

        assert response.status_code == 413
        assert response.json()["error"]["code"] == "FILE_TOO_LARGE"

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient):
        response = await client.post("/api/v1/uploads", files={"image": ("a.png", b"x", "image/png")})

        assert response.status_code == 401
