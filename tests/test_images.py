"""
Tests for listing image upload and gallery management.
"""

import pytest
from fastapi import status
from httpx import AsyncClient

from app.models.user import User
from tests.conftest import API, Factory, assert_success, assert_error, make_image_bytes


def _files(*names, fmt="JPEG", mime="image/jpeg"):
    return [("images", (name, make_image_bytes(fmt=fmt), mime)) for name in names]


class TestImageUpload:
    """Uploading listing photos."""

    @pytest.mark.asyncio
    async def test_first_upload_becomes_primary(
        self, async_client: AsyncClient, factory: Factory, admin_headers, upload_dir
    ):
        listing = await factory.listing()

        response = await async_client.post(
            f"{API}/admin/properties/{listing.id}/images",
            headers=admin_headers,
            files=_files("front.jpg", "kitchen.jpg"),
        )

        body = assert_success(response, status.HTTP_201_CREATED)
        assert body["message"] == "2 images uploaded successfully"
        uploaded = body["data"]["uploaded"]
        assert body["data"]["total_images"] == 2
        assert [image["is_primary"] for image in uploaded] == [True, False]
        assert [image["sort_order"] for image in uploaded] == [0, 1]
        assert uploaded[0]["width"] == 200
        assert uploaded[0]["url"].startswith(f"/uploads/properties/{listing.id}/")

        stored = list((upload_dir / "properties" / str(listing.id)).iterdir())
        assert len(stored) == 2

    @pytest.mark.asyncio
    async def test_later_upload_keeps_primary(self, async_client: AsyncClient, factory: Factory, admin_headers):
        listing = await factory.listing()
        url = f"{API}/admin/properties/{listing.id}/images"
        await async_client.post(url, headers=admin_headers, files=_files("one.jpg"))

        response = await async_client.post(url, headers=admin_headers, files=_files("two.png", fmt="PNG", mime="image/png"))

        data = assert_success(response, status.HTTP_201_CREATED)["data"]
        assert data["uploaded"][0]["is_primary"] is False
        assert data["uploaded"][0]["sort_order"] == 1
        assert data["total_images"] == 2

    @pytest.mark.asyncio
    async def test_rejects_mismatched_content(self, async_client: AsyncClient, factory: Factory, admin_headers, upload_dir):
        listing = await factory.listing()

        response = await async_client.post(
            f"{API}/admin/properties/{listing.id}/images",
            headers=admin_headers,
            files=_files("good.jpg") + [("images", ("fake.jpg", b"not really an image", "image/jpeg"))],
        )

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert "file" in body["errors"]
        assert not (upload_dir / "properties" / str(listing.id)).exists()

    @pytest.mark.asyncio
    async def test_rejects_unsupported_type(self, async_client: AsyncClient, factory: Factory, admin_headers):
        listing = await factory.listing()

        response = await async_client.post(
            f"{API}/admin/properties/{listing.id}/images",
            headers=admin_headers,
            files=[("images", ("notes.txt", b"hello", "text/plain"))],
        )

        assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)

    @pytest.mark.asyncio
    async def test_agent_cannot_upload_to_other_listing(
        self, async_client: AsyncClient, factory: Factory, agent_headers
    ):
        listing = await factory.listing(agent=await factory.agent())

        response = await async_client.post(
            f"{API}/admin/properties/{listing.id}/images",
            headers=agent_headers,
            files=_files("one.jpg"),
        )

        assert_error(response, status.HTTP_403_FORBIDDEN)

    @pytest.mark.asyncio
    async def test_agent_uploads_to_own_listing(
        self, async_client: AsyncClient, factory: Factory, agent_user: User, agent_headers
    ):
        listing = await factory.listing(agent=agent_user.agent_profile)

        response = await async_client.post(
            f"{API}/admin/properties/{listing.id}/images",
            headers=agent_headers,
            files=_files("one.jpg"),
        )

        assert_success(response, status.HTTP_201_CREATED)


class TestGalleryManagement:
    """Primary selection, metadata and deletion."""

    async def _upload(self, client: AsyncClient, listing, headers, count=3):
        response = await client.post(
            f"{API}/admin/properties/{listing.id}/images",
            headers=headers,
            files=_files(*[f"photo{index}.jpg" for index in range(count)]),
        )
        return response.json()["data"]["uploaded"]

    @pytest.mark.asyncio
    async def test_set_primary_clears_others(self, async_client: AsyncClient, factory: Factory, admin_headers):
        listing = await factory.listing()
        images = await self._upload(async_client, listing, admin_headers)
        base = f"{API}/admin/properties/{listing.id}/images"

        response = await async_client.post(f"{base}/{images[2]['id']}/primary", headers=admin_headers)
        assert assert_success(response)["data"]["is_primary"] is True

        listed = assert_success(await async_client.get(base, headers=admin_headers))["data"]
        assert [image["id"] for image in listed if image["is_primary"]] == [images[2]["id"]]

    @pytest.mark.asyncio
    async def test_update_metadata(self, async_client: AsyncClient, factory: Factory, admin_headers):
        listing = await factory.listing()
        images = await self._upload(async_client, listing, admin_headers, count=1)

        response = await async_client.put(
            f"{API}/admin/properties/{listing.id}/images/{images[0]['id']}",
            headers=admin_headers,
            json={"title": "Floor plan", "alt_text": "Ground floor", "type": "floor_plan"},
        )

        data = assert_success(response)["data"]
        assert data["type"] == "floor_plan"
        assert data["alt_text"] == "Ground floor"

    @pytest.mark.asyncio
    async def test_deleting_primary_promotes_next(
        self, async_client: AsyncClient, factory: Factory, admin_headers, upload_dir
    ):
        listing = await factory.listing()
        images = await self._upload(async_client, listing, admin_headers)
        base = f"{API}/admin/properties/{listing.id}/images"

        response = await async_client.delete(f"{base}/{images[0]['id']}", headers=admin_headers)
        assert_success(response)

        listed = assert_success(await async_client.get(base, headers=admin_headers))["data"]
        assert [image["id"] for image in listed] == [images[1]["id"], images[2]["id"]]
        assert listed[0]["is_primary"] is True
        assert len(list((upload_dir / "properties" / str(listing.id)).iterdir())) == 2

    @pytest.mark.asyncio
    async def test_image_of_other_listing_not_found(self, async_client: AsyncClient, factory: Factory, admin_headers):
        first = await factory.listing()
        second = await factory.listing()
        images = await self._upload(async_client, first, admin_headers, count=1)

        response = await async_client.delete(
            f"{API}/admin/properties/{second.id}/images/{images[0]['id']}", headers=admin_headers
        )

        assert_error(response, status.HTTP_404_NOT_FOUND)

    @pytest.mark.asyncio
    async def test_deleting_listing_removes_files(
        self, async_client: AsyncClient, factory: Factory, admin_headers, upload_dir
    ):
        listing = await factory.listing()
        await self._upload(async_client, listing, admin_headers, count=2)

        response = await async_client.delete(f"{API}/admin/properties/{listing.id}", headers=admin_headers)

        assert_success(response)
        assert not (upload_dir / "properties" / str(listing.id)).exists()
