"""
Tests for the Layouts API: creation from templates, editor saves,
ownership rules and React export.
"""
import json
import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.core.config import settings
from app.models.layout import Layout


def project_data(**overrides) -> dict:
    data = {
        "name": "Landing",
        "description": "updated",
        "boxes": [
            {
                "id": "box-a",
                "positionX": 12,
                "positionY": 34,
                "width": "60%",
                "columns": 2,
                "components": [
                    {"type": "text", "props": {"content": "Welcome"}},
                    {"type": "image", "props": {"alt": "hero"}, "fileIndex": 0, "columnIndex": 1},
                ],
            },
        ],
    }
    data.update(overrides)
    return {"projectData": json.dumps(data)}


class TestCreateLayout:
    """Test POST /api/v1/layouts"""

    @pytest.mark.asyncio
    async def test_create_from_template(self, client: AsyncClient, auth_headers, templates, db_session):
        response = await client.post("/api/v1/layouts", json={"templateId": 2}, headers=auth_headers)

        assert response.status_code == 201
        project_id = response.json()["project_id"]

        detail = await client.get(f"/api/v1/layouts/{project_id}", headers=auth_headers)
        data = detail.json()
        assert data["name"] == "电商首页模板 - New Project"
        assert data["template_id"] == 2
        assert len(data["boxes"]) == len(templates[1].content["boxes"])
        assert data["boxes"][0]["components"]

    @pytest.mark.asyncio
    async def test_create_from_missing_template(self, client: AsyncClient, auth_headers, templates):
        response = await client.post("/api/v1/layouts", json={"templateId": 999}, headers=auth_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_create_requires_auth(self, client: AsyncClient, templates):
        response = await client.post("/api/v1/layouts", json={"templateId": 2})

        assert response.status_code == 401


class TestReadLayouts:
    """Test GET /api/v1/layouts and GET /api/v1/layouts/{id}"""

    @pytest.mark.asyncio
    async def test_list_only_own(self, client: AsyncClient, auth_headers, test_layout, other_layout):
        response = await client.get("/api/v1/layouts", headers=auth_headers)

        assert response.status_code == 200
        assert [item["id"] for item in response.json()] == [str(test_layout.id)]

    @pytest.mark.asyncio
    async def test_get_layout_tree(self, client: AsyncClient, auth_headers, test_layout):
        response = await client.get(f"/api/v1/layouts/{test_layout.id}", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "My Résumé #1"
        assert [box["columns"] for box in data["boxes"]] == [2, 1]
        assert [c["type"] for c in data["boxes"][0]["components"]] == ["button", "radio"]
        assert data["boxes"][0]["components"][1]["column_index"] == 1

    @pytest.mark.asyncio
    async def test_other_users_layout_is_not_found(self, client: AsyncClient, auth_headers, other_layout):
        response = await client.get(f"/api/v1/layouts/{other_layout.id}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Layout not found or no permission"

    @pytest.mark.asyncio
    async def test_unknown_layout(self, client: AsyncClient, auth_headers):
        response = await client.get("/api/v1/layouts/does-not-exist", headers=auth_headers)

        assert response.status_code == 404


class TestUpdateLayout:
    """Test PUT /api/v1/layouts/{id} (multipart)"""

    @pytest.mark.asyncio
    async def test_replaces_boxes_and_stores_images(self, client: AsyncClient, auth_headers, test_layout):
        files = {
            "image-box-a-0": ("hero.png", b"\x89PNG fake", "image/png"),
            "preview": ("shot.jpg", b"jpeg bytes", "image/jpeg"),
        }

        response = await client.put(
            f"/api/v1/layouts/{test_layout.id}",
            data=project_data(),
            files=files,
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Landing"
        assert data["description"] == "updated"
        assert data["preview"].startswith("http://testserver/uploads/")
        assert len(data["boxes"]) == 1

        box = data["boxes"][0]
        assert (box["position_x"], box["position_y"], box["width"], box["columns"]) == (12, 34, "60%", 2)
        text, image = box["components"]
        assert text["props"] == {"content": "Welcome"}
        assert image["column_index"] == 1
        assert image["image_id"]
        assert image["props"]["src"].startswith("http://testserver/uploads/")
        assert image["props"]["src"].endswith(".png")

    @pytest.mark.asyncio
    async def test_image_without_part_keeps_props(self, client: AsyncClient, auth_headers, test_layout):
        response = await client.put(
            f"/api/v1/layouts/{test_layout.id}",
            data=project_data(),
            headers=auth_headers,
        )

        image = response.json()["boxes"][0]["components"][1]
        assert image["image_id"] is None
        assert "src" not in image["props"]

    @pytest.mark.asyncio
    async def test_missing_project_data(self, client: AsyncClient, auth_headers, test_layout):
        response = await client.put(
            f"/api/v1/layouts/{test_layout.id}",
            data={"other": "x"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Missing or invalid projectData"

    @pytest.mark.asyncio
    async def test_malformed_project_data(self, client: AsyncClient, auth_headers, test_layout):
        response = await client.put(
            f"/api/v1/layouts/{test_layout.id}",
            data={"projectData": "{not json"},
            headers=auth_headers,
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, client: AsyncClient, auth_headers, test_layout):
        response = await client.put(
            f"/api/v1/layouts/{test_layout.id}",
            data=project_data(name="   "),
            headers=auth_headers,
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_disallowed_image_type(self, client: AsyncClient, auth_headers, test_layout):
        response = await client.put(
            f"/api/v1/layouts/{test_layout.id}",
            data=project_data(),
            files={"image-box-a-0": ("run.exe", b"MZ", "application/octet-stream")},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_FILE_TYPE"

    @pytest.mark.asyncio
    async def test_oversized_preview_removes_stored_box_images(self, client: AsyncClient, auth_headers, test_layout):
        before = set(settings.upload_path.iterdir())

        response = await client.put(
            f"/api/v1/layouts/{test_layout.id}",
            data=project_data(),
            files={
                "image-box-a-0": ("hero.png", b"\x89PNG fake", "image/png"),
                "preview": ("shot.jpg", b"0" * (settings.MAX_UPLOAD_SIZE + 1), "image/jpeg"),
            },
            headers=auth_headers,
        )

        assert response.status_code == 413
        assert set(settings.upload_path.iterdir()) == before

    @pytest.mark.asyncio
    async def test_cannot_update_other_users_layout(self, client: AsyncClient, auth_headers, other_layout):
        response = await client.put(
            f"/api/v1/layouts/{other_layout.id}",
            data=project_data(),
            headers=auth_headers,
        )

        assert response.status_code == 404


class TestDeleteLayout:
    """Test DELETE /api/v1/layouts/{id}"""

    @pytest.mark.asyncio
    async def test_delete_own(self, client: AsyncClient, auth_headers, test_layout, db_session):
        layout_id = str(test_layout.id)

        response = await client.delete(f"/api/v1/layouts/{layout_id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Layout deleted successfully"}
        result = await db_session.execute(select(Layout).where(Layout.id == layout_id))
        assert result.scalar_one_or_none() is None

    @pytest.mark.asyncio
    async def test_delete_other_users_layout_forbidden(self, client: AsyncClient, auth_headers, other_layout):
        response = await client.delete(f"/api/v1/layouts/{other_layout.id}", headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "No permission to delete this layout"

    @pytest.mark.asyncio
    async def test_delete_missing(self, client: AsyncClient, auth_headers):
        response = await client.delete("/api/v1/layouts/does-not-exist", headers=auth_headers)

        assert response.status_code == 404


class TestExportLayout:
    """Test GET /api/v1/layouts/{id}/export"""

    @pytest.mark.asyncio
    async def test_export_react_page(self, client: AsyncClient, auth_headers, test_layout):
        response = await client.get(f"/api/v1/layouts/{test_layout.id}/export", headers=auth_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/javascript")
        assert response.headers["content-disposition"] == 'attachment; filename="My_R_sum___1.jsx"'

        code = response.text
        assert "const MyRsum1 = () => {" in code
        assert "export default MyRsum1;" in code
        assert "import { Button } from 'antd';" in code
        assert "import { Radio } from 'antd';" in code
        assert "import { Typography } from 'antd';" in code
        assert "const onChange = (value) => console.log(value);" in code
        assert code.index('{"Go"}') < code.index('{"Hello"}')

    @pytest.mark.asyncio
    async def test_export_other_users_layout(self, client: AsyncClient, auth_headers, other_layout):
        response = await client.get(f"/api/v1/layouts/{other_layout.id}/export", headers=auth_headers)

        assert response.status_code == 404
