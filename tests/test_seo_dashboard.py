"""
Tests for SEO settings, the admin dashboard and the home page.
"""

from datetime import datetime, timezone

import pytest
from fastapi import status
from httpx import AsyncClient

from app.models.blog import CommentStatus, PostStatus
from app.models.property import ListingType
from app.models.seo import SeoSetting
from app.models.user import User
from tests.conftest import API, Factory, assert_success, assert_error


class TestSeoSettings:
    """Admin management of SEO settings."""

    @pytest.mark.asyncio
    async def test_upsert_creates_then_updates(self, async_client: AsyncClient, admin_headers):
        payload = {"key": "site_title", "value": "Realty", "group": "general"}

        created = await async_client.put(f"{API}/admin/seo", headers=admin_headers, json=payload)
        first = assert_success(created)
        assert first["message"] == "SEO setting saved successfully"
        assert first["data"]["value"] == "Realty"

        payload["value"] = "Realty Homes"
        updated = await async_client.put(f"{API}/admin/seo", headers=admin_headers, json=payload)
        second = assert_success(updated)["data"]
        assert second["id"] == first["data"]["id"]
        assert second["typed_value"] == "Realty Homes"

    @pytest.mark.asyncio
    async def test_values_are_typed(self, async_client: AsyncClient, admin_headers):
        flag = await async_client.put(f"{API}/admin/seo", headers=admin_headers, json={
            "key": "robots_index", "value": True, "type": "boolean"
        })
        assert assert_success(flag)["data"]["value"] == "1"

        schema = await async_client.put(f"{API}/admin/seo", headers=admin_headers, json={
            "key": "schema_org", "value": {"@type": "RealEstateAgent"}, "type": "json", "group": "schema"
        })
        data = assert_success(schema)["data"]
        assert data["typed_value"] == {"@type": "RealEstateAgent"}

    @pytest.mark.asyncio
    async def test_invalid_json_rejected(self, async_client: AsyncClient, admin_headers):
        response = await async_client.put(f"{API}/admin/seo", headers=admin_headers, json={
            "key": "schema_org", "value": "{not json", "type": "json"
        })

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert body["errors"]["value"] == ["The value must be valid JSON."]

    @pytest.mark.asyncio
    async def test_invalid_number_rejected(self, async_client: AsyncClient, admin_headers):
        response = await async_client.put(f"{API}/admin/seo", headers=admin_headers, json={
            "key": "posts_per_page", "value": "many", "type": "number"
        })

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert body["errors"]["value"] == ["The value must be a number."]

    @pytest.mark.asyncio
    async def test_list_grouped(self, async_client: AsyncClient, admin_headers, db_session):
        db_session.add_all([
            SeoSetting(key="site_title", value="Realty", group="general"),
            SeoSetting(key="og_image", value="/og.png", group="social"),
        ])
        await db_session.commit()

        response = await async_client.get(f"{API}/admin/seo", headers=admin_headers)

        data = assert_success(response)["data"]
        assert set(data) == {"general", "social"}
        assert [s["key"] for s in data["social"]] == ["og_image"]

    @pytest.mark.asyncio
    async def test_delete(self, async_client: AsyncClient, admin_headers):
        await async_client.put(f"{API}/admin/seo", headers=admin_headers, json={"key": "site_title", "value": "Realty"})

        deleted = await async_client.delete(f"{API}/admin/seo/site_title", headers=admin_headers)
        assert_success(deleted)

        missing = await async_client.delete(f"{API}/admin/seo/site_title", headers=admin_headers)
        assert_error(missing, status.HTTP_404_NOT_FOUND)

    @pytest.mark.asyncio
    async def test_moderator_cannot_manage(self, async_client: AsyncClient, moderator_headers):
        response = await async_client.get(f"{API}/admin/seo", headers=moderator_headers)

        assert_error(response, status.HTTP_403_FORBIDDEN)


class TestPublicSeo:
    """Public reads return active settings as typed values."""

    @pytest.mark.asyncio
    async def test_public_group(self, async_client: AsyncClient, db_session):
        db_session.add_all([
            SeoSetting(key="site_title", value="Realty", group="general"),
            SeoSetting(key="posts_per_page", value="12", type="number", group="general"),
            SeoSetting(key="robots_index", value="0", type="boolean", group="general"),
            SeoSetting(key="legacy_tagline", value="Old", group="general", is_active=False),
        ])
        await db_session.commit()

        response = await async_client.get(f"{API}/seo/general")

        body = assert_success(response)
        assert body["message"] == "SEO settings retrieved successfully"
        assert body["data"] == {"site_title": "Realty", "posts_per_page": 12, "robots_index": False}

    @pytest.mark.asyncio
    async def test_unknown_group_is_empty(self, async_client: AsyncClient):
        response = await async_client.get(f"{API}/seo/nothing-here")

        assert assert_success(response)["data"] == {}


class TestDashboard:
    """Admin dashboard statistics."""

    @pytest.mark.asyncio
    async def test_overview_counts(
        self, async_client: AsyncClient, factory: Factory, admin_user: User, admin_headers
    ):
        category = await factory.category()
        post = await factory.post(admin_user, category=category)
        await factory.post(admin_user, title="Work in progress", status=PostStatus.DRAFT.value)
        pending = await factory.comment(post, status=CommentStatus.PENDING.value)
        await factory.comment(post)
        await factory.listing(is_featured=True)

        response = await async_client.get(f"{API}/admin/dashboard", headers=admin_headers)

        data = assert_success(response)["data"]
        counts = data["counts"]
        assert counts["posts"] == {"total": 2, "published": 1, "draft": 1}
        assert counts["comments"] == {"pending": 1, "approved": 1}
        assert counts["categories"] == 1
        assert counts["properties"] == {"total": 1, "available": 1, "featured": 1}
        assert counts["open_inquiries"] == 0
        assert [c["id"] for c in data["recent_comments"]] == [str(pending.id)]
        assert data["content_distribution"]["posts_by_category"] == {category.name: 1, "Uncategorized": 1}

    @pytest.mark.asyncio
    async def test_monthly_series(self, async_client: AsyncClient, factory: Factory, admin_user: User, admin_headers):
        await factory.post(admin_user)

        response = await async_client.get(f"{API}/admin/dashboard", headers=admin_headers)

        data = assert_success(response)["data"]
        series = data["monthly_posts"]
        assert len(series) == 12
        assert series[-1]["month"] == datetime.now(timezone.utc).strftime("%Y-%m")
        assert sum(point["count"] for point in series) == 1
        assert data["this_month"]["posts"] == 1

    @pytest.mark.asyncio
    async def test_agent_can_view(self, async_client: AsyncClient, agent_headers):
        response = await async_client.get(f"{API}/admin/dashboard", headers=agent_headers)

        assert_success(response)

    @pytest.mark.asyncio
    async def test_regular_user_forbidden(self, async_client: AsyncClient, user_headers):
        response = await async_client.get(f"{API}/admin/dashboard", headers=user_headers)

        assert_error(response, status.HTTP_403_FORBIDDEN)


class TestHome:
    """Public landing page content."""

    @pytest.mark.asyncio
    async def test_home_content(self, async_client: AsyncClient, factory: Factory, admin_user: User):
        await factory.listing(title="Penthouse", is_featured=True)
        await factory.listing(title="Studio to let", listing_type=ListingType.RENT.value)
        await factory.post(admin_user, title="Buying guide")
        await factory.post(admin_user, title="Unfinished", status=PostStatus.DRAFT.value)

        response = await async_client.get(f"{API}/home")

        body = assert_success(response)
        assert body["message"] == "Home content retrieved successfully"
        data = body["data"]
        assert [p["title"] for p in data["featured_properties"]] == ["Penthouse"]
        assert [p["title"] for p in data["recent_rentals"]] == ["Studio to let"]
        assert [p["title"] for p in data["latest_posts"]] == ["Buying guide"]
