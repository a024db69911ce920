"""
Tests for the media library.
"""

import uuid

import pytest
from fastapi import status
from httpx import AsyncClient

from app.models.user import User
from tests.conftest import API, Factory, assert_success, assert_error, make_image_bytes


async def _upload(client: AsyncClient, headers, filename="hero.png", content=None, mime="image/png", **form):
    content = content if content is not None else make_image_bytes(320, 180, fmt="PNG")
    return await client.post(
        f"{API}/admin/media",
        headers=headers,
        files={"file": (filename, content, mime)},
        data=form,
    )


class TestMediaUpload:
    """Uploading to the library."""

    @pytest.mark.asyncio
    async def test_upload_image_measures_it(
        self, async_client: AsyncClient, moderator_user: User, moderator_headers, upload_dir
    ):
        response = await _upload(async_client, moderator_headers, alt_text="Skyline")

        body = assert_success(response, status.HTTP_201_CREATED)
        data = body["data"]
        assert data["name"] == "hero"
        assert data["type"] == "image"
        assert (data["width"], data["height"]) == (320, 180)
        assert data["alt_text"] == "Skyline"
        assert data["uploaded_by"] == str(moderator_user.id)
        assert data["url"].startswith("/uploads/media/")
        assert len(list((upload_dir / "media").rglob("*.png"))) == 1

    @pytest.mark.asyncio
    async def test_upload_document(self, async_client: AsyncClient, admin_headers):
        response = await _upload(
            async_client, admin_headers, filename="price-list.txt", content=b"Unit A: 1,000,000",
            mime="text/plain", name="Price list"
        )

        data = assert_success(response, status.HTTP_201_CREATED)["data"]
        assert data["name"] == "Price list"
        assert data["type"] == "document"
        assert data["width"] is None

    @pytest.mark.asyncio
    async def test_rejects_disallowed_type(self, async_client: AsyncClient, admin_headers):
        response = await _upload(
            async_client, admin_headers, filename="tool.exe", content=b"MZ", mime="application/x-msdownload"
        )

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert "file" in body["errors"]

    @pytest.mark.asyncio
    async def test_agent_cannot_upload(self, async_client: AsyncClient, agent_headers):
        response = await _upload(async_client, agent_headers)

        assert_error(response, status.HTTP_403_FORBIDDEN)


class TestMediaManagement:
    """Listing, editing and deleting."""

    @pytest.mark.asyncio
    async def test_list_filters_type_and_search(self, async_client: AsyncClient, admin_headers):
        await _upload(async_client, admin_headers, name="Office front")
        await _upload(async_client, admin_headers, filename="notes.txt", content=b"notes", mime="text/plain")

        images = await async_client.get(f"{API}/admin/media", headers=admin_headers, params={"type": "image"})
        assert [m["name"] for m in assert_success(images)["data"]] == ["Office front"]

        searched = await async_client.get(f"{API}/admin/media", headers=admin_headers, params={"search": "notes"})
        assert [m["name"] for m in assert_success(searched)["data"]] == ["notes"]

    @pytest.mark.asyncio
    async def test_update_metadata(self, async_client: AsyncClient, admin_headers):
        media = assert_success(await _upload(async_client, admin_headers), status.HTTP_201_CREATED)["data"]

        response = await async_client.put(f"{API}/admin/media/{media['id']}", headers=admin_headers, json={
            "alt_text": "Updated alt",
            "is_active": False,
        })

        data = assert_success(response)["data"]
        assert data["alt_text"] == "Updated alt"
        assert data["is_active"] is False
        assert data["name"] == "hero"

    @pytest.mark.asyncio
    async def test_delete_clears_featured_image(
        self, async_client: AsyncClient, factory: Factory, admin_user: User, admin_headers, upload_dir
    ):
        media = assert_success(await _upload(async_client, admin_headers), status.HTTP_201_CREATED)["data"]
        post = await factory.post(admin_user, featured_image_id=uuid.UUID(media["id"]))

        response = await async_client.delete(f"{API}/admin/media/{media['id']}", headers=admin_headers)
        assert_success(response)

        detail = await async_client.get(f"{API}/admin/posts/{post.id}", headers=admin_headers)
        assert assert_success(detail)["data"]["featured_image_id"] is None
        assert list((upload_dir / "media").rglob("*.png")) == []

    @pytest.mark.asyncio
    async def test_moderator_cannot_delete(self, async_client: AsyncClient, admin_headers, moderator_headers):
        media = assert_success(await _upload(async_client, admin_headers), status.HTTP_201_CREATED)["data"]

        response = await async_client.delete(f"{API}/admin/media/{media['id']}", headers=moderator_headers)

        assert_error(response, status.HTTP_403_FORBIDDEN)
