"""
Tests for the reference catalog: property types, locations, amenities,
blog categories and tags, plus reference data seeding.
"""

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import select, func

from app.models.catalog import PropertyType, Location
from app.models.seo import SeoSetting
from app.seeders import seed_reference_data
from app.seeders.reference import PROPERTY_TYPES, LOCATIONS
from tests.conftest import API, Factory, assert_success, assert_error


class TestPropertyTypeAdmin:
    """Admin CRUD shared by every catalog resource, exercised on property types."""

    @pytest.mark.asyncio
    async def test_create_derives_slug(self, async_client: AsyncClient, admin_headers):
        response = await async_client.post(f"{API}/admin/property-types", headers=admin_headers, json={
            "name": "  Luxury Villa ",
            "icon": "castle",
        })

        body = assert_success(response, status.HTTP_201_CREATED)
        assert body["message"] == "Property type created successfully"
        assert body["data"]["name"] == "Luxury Villa"
        assert body["data"]["slug"] == "luxury-villa"
        assert body["data"]["category"] == "residential"

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected(self, async_client: AsyncClient, admin_headers, factory: Factory):
        await factory.property_type("Duplex")

        response = await async_client.post(f"{API}/admin/property-types", headers=admin_headers, json={"name": "Duplex"})

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert body["errors"]["name"] == ["The name has already been taken."]

    @pytest.mark.asyncio
    async def test_rename_regenerates_slug(self, async_client: AsyncClient, admin_headers, factory: Factory):
        entry = await factory.property_type("Flat")

        response = await async_client.put(
            f"{API}/admin/property-types/{entry.id}",
            headers=admin_headers,
            json={"name": "Garden Flat"}
        )

        data = assert_success(response)["data"]
        assert data["slug"] == "garden-flat"

    @pytest.mark.asyncio
    async def test_list_ordered_and_searchable(self, async_client: AsyncClient, admin_headers, factory: Factory):
        await factory.property_type("Studio", sort_order=2)
        await factory.property_type("Loft", sort_order=1)
        await factory.property_type("Bungalow", sort_order=1, is_active=False)

        response = await async_client.get(f"{API}/admin/property-types", headers=admin_headers)
        names = [entry["name"] for entry in assert_success(response)["data"]]
        assert names == ["Bungalow", "Loft", "Studio"]

        filtered = await async_client.get(
            f"{API}/admin/property-types", headers=admin_headers, params={"is_active": "false"}
        )
        assert [entry["name"] for entry in assert_success(filtered)["data"]] == ["Bungalow"]

    @pytest.mark.asyncio
    async def test_delete_type_in_use_conflicts(self, async_client: AsyncClient, admin_headers, factory: Factory):
        property_type = await factory.property_type("Townhouse")
        await factory.listing(property_type=property_type)

        response = await async_client.delete(f"{API}/admin/property-types/{property_type.id}", headers=admin_headers)

        assert_error(response, status.HTTP_409_CONFLICT)

    @pytest.mark.asyncio
    async def test_delete_unused_type(self, async_client: AsyncClient, admin_headers, factory: Factory):
        property_type = await factory.property_type("Cottage")

        response = await async_client.delete(f"{API}/admin/property-types/{property_type.id}", headers=admin_headers)
        assert_success(response)

        missing = await async_client.get(f"{API}/admin/property-types/{property_type.id}", headers=admin_headers)
        assert_error(missing, status.HTTP_404_NOT_FOUND)

    @pytest.mark.asyncio
    async def test_agent_can_view_but_not_create(self, async_client: AsyncClient, agent_headers):
        listed = await async_client.get(f"{API}/admin/property-types", headers=agent_headers)
        assert_success(listed)

        created = await async_client.post(f"{API}/admin/property-types", headers=agent_headers, json={"name": "Barn"})
        assert_error(created, status.HTTP_403_FORBIDDEN)


class TestPublicCatalog:
    """Public lists return active entries only."""

    @pytest.mark.asyncio
    async def test_public_locations_hide_inactive(self, async_client: AsyncClient, factory: Factory):
        await factory.location("Gulshan")
        await factory.location("Old Town", is_active=False)

        response = await async_client.get(f"{API}/locations")

        names = [entry["name"] for entry in assert_success(response)["data"]]
        assert names == ["Gulshan"]

    @pytest.mark.asyncio
    async def test_public_amenities(self, async_client: AsyncClient, factory: Factory):
        await factory.amenity("Elevator", category="building")

        response = await async_client.get(f"{API}/amenities")

        data = assert_success(response)["data"]
        assert data[0]["slug"] == "elevator"

    @pytest.mark.asyncio
    async def test_public_blog_categories_and_tags(self, async_client: AsyncClient, factory: Factory):
        await factory.category("Buying Guides")
        await factory.tag("mortgage", color="#10B981")

        categories = await async_client.get(f"{API}/blog/categories")
        tags = await async_client.get(f"{API}/blog/tags")

        assert [c["slug"] for c in assert_success(categories)["data"]] == ["buying-guides"]
        assert assert_success(tags)["data"][0]["color"] == "#10B981"


class TestTaxonomyAdmin:
    """Blog categories and tags accept an explicit slug."""

    @pytest.mark.asyncio
    async def test_explicit_slug_clash_reported_on_slug(self, async_client: AsyncClient, admin_headers, factory: Factory):
        await factory.category("News")

        response = await async_client.post(f"{API}/admin/categories", headers=admin_headers, json={
            "name": "Company News",
            "slug": "news",
        })

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert "slug" in body["errors"]

    @pytest.mark.asyncio
    async def test_moderator_creates_tag(self, async_client: AsyncClient, moderator_headers):
        response = await async_client.post(f"{API}/admin/tags", headers=moderator_headers, json={
            "name": "Staging Tips",
            "color": "#F59E0B",
        })

        data = assert_success(response, status.HTTP_201_CREATED)["data"]
        assert data["slug"] == "staging-tips"

    @pytest.mark.asyncio
    async def test_moderator_cannot_delete_tag(self, async_client: AsyncClient, moderator_headers, factory: Factory):
        tag = await factory.tag("renting")

        response = await async_client.delete(f"{API}/admin/tags/{tag.id}", headers=moderator_headers)

        assert_error(response, status.HTTP_403_FORBIDDEN)


class TestReferenceSeeding:
    """Reference data is inserted once."""

    @pytest.mark.asyncio
    async def test_seed_reference_data_is_idempotent(self, db_session):
        first = await seed_reference_data(db_session)
        second = await seed_reference_data(db_session)

        assert first["property_types"] == len(PROPERTY_TYPES)
        assert first["locations"] == len(LOCATIONS)
        assert all(count == 0 for count in second.values())

        total = (await db_session.execute(select(func.count(PropertyType.id)))).scalar()
        assert total == len(PROPERTY_TYPES)

    @pytest.mark.asyncio
    async def test_seed_keeps_existing_rows(self, db_session, factory: Factory):
        await factory.location("Miami", state="Custom")

        await seed_reference_data(db_session)

        result = await db_session.execute(select(Location).where(Location.slug == "miami"))
        assert result.scalars().one().state == "Custom"
        site_name = await db_session.execute(select(SeoSetting).where(SeoSetting.key == "site_name"))
        assert site_name.scalars().one().value == "Realty CMS"
