"""
Tests for public property search and detail, favorites and listing administration.
"""

import pytest
from decimal import Decimal
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import select, func

from app.models.property import Property, PropertyView, ListingType, PropertyStatus
from app.models.user import User
from tests.conftest import API, Factory, assert_success, assert_error, auth_headers


class TestPropertySearch:
    """Public search lists available listings only."""

    @pytest.mark.asyncio
    async def test_only_available_listings(self, async_client: AsyncClient, factory: Factory):
        await factory.listing(title="Lake View Apartment")
        await factory.listing(title="Sold Duplex", status=PropertyStatus.SOLD.value)
        await factory.listing(title="Draft Villa", status=PropertyStatus.DRAFT.value)

        response = await async_client.get(f"{API}/properties")

        body = assert_success(response)
        assert [p["title"] for p in body["data"]] == ["Lake View Apartment"]
        assert body["meta"]["total"] == 1
        assert body["data"][0]["is_favorited"] is False

    @pytest.mark.asyncio
    async def test_filters_combine(self, async_client: AsyncClient, factory: Factory):
        location = await factory.location("Gulshan")
        await factory.listing(title="Big Rental", location=location, listing_type=ListingType.RENT.value,
                              price=Decimal("80000"), bedrooms=4)
        await factory.listing(title="Small Rental", location=location, listing_type=ListingType.RENT.value,
                              price=Decimal("30000"), bedrooms=1)
        await factory.listing(title="Big Sale", location=location, price=Decimal("90000"), bedrooms=4)

        response = await async_client.get(f"{API}/properties", params={
            "location_id": str(location.id),
            "listing_type": "rent",
            "bedrooms": 3,
            "max_price": 100000,
        })

        assert [p["title"] for p in assert_success(response)["data"]] == ["Big Rental"]

    @pytest.mark.asyncio
    async def test_keyword_matches_address(self, async_client: AsyncClient, factory: Factory):
        await factory.listing(title="Corner Flat", address="House 5, Dhanmondi 27")
        await factory.listing(title="Other Flat", address="Mirpur 10")

        response = await async_client.get(f"{API}/properties", params={"keyword": "dhanmondi"})

        assert [p["title"] for p in assert_success(response)["data"]] == ["Corner Flat"]

    @pytest.mark.asyncio
    async def test_sort_by_price(self, async_client: AsyncClient, factory: Factory):
        await factory.listing(title="Mid", price=Decimal("200"))
        await factory.listing(title="Cheap", price=Decimal("100"))
        await factory.listing(title="Dear", price=Decimal("300"))

        response = await async_client.get(f"{API}/properties", params={"sort": "price_desc"})

        assert [p["title"] for p in assert_success(response)["data"]] == ["Dear", "Mid", "Cheap"]

    @pytest.mark.asyncio
    async def test_invalid_price_range(self, async_client: AsyncClient):
        response = await async_client.get(f"{API}/properties", params={"min_price": 500, "max_price": 100})

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert body["errors"]

    @pytest.mark.asyncio
    async def test_pagination_meta(self, async_client: AsyncClient, factory: Factory):
        for index in range(3):
            await factory.listing(title=f"Listing {index}")

        response = await async_client.get(f"{API}/properties", params={"page": 2, "per_page": 2})

        body = assert_success(response)
        assert len(body["data"]) == 1
        assert body["meta"] == {
            "current_page": 2, "per_page": 2, "total": 3, "last_page": 2, "from": 3, "to": 3
        }

    @pytest.mark.asyncio
    async def test_featured(self, async_client: AsyncClient, factory: Factory):
        await factory.listing(title="Featured One", is_featured=True)
        await factory.listing(title="Featured Two", is_featured=True)
        await factory.listing(title="Plain")

        response = await async_client.get(f"{API}/properties/featured", params={"limit": 1})

        body = assert_success(response)
        assert body["message"] == "Featured properties retrieved successfully"
        assert body["total_count"] == 2
        assert [p["title"] for p in body["data"]] == ["Featured Two"]


class TestPropertyDetail:
    """Public detail records views."""

    @pytest.mark.asyncio
    async def test_show_by_slug_records_view(self, async_client: AsyncClient, factory: Factory, db_session):
        listing = await factory.listing(title="Riverside Home")

        response = await async_client.get(f"{API}/properties/{listing.slug}")

        data = assert_success(response)["data"]
        assert data["id"] == str(listing.id)
        assert data["views_count"] == 1
        views = await db_session.execute(select(func.count(PropertyView.id)))
        assert views.scalar() == 1

    @pytest.mark.asyncio
    async def test_show_by_id(self, async_client: AsyncClient, factory: Factory):
        listing = await factory.listing()

        response = await async_client.get(f"{API}/properties/{listing.id}")

        assert assert_success(response)["data"]["slug"] == listing.slug

    @pytest.mark.asyncio
    async def test_unavailable_listing_is_hidden(self, async_client: AsyncClient, factory: Factory):
        listing = await factory.listing(status=PropertyStatus.PENDING.value)

        response = await async_client.get(f"{API}/properties/{listing.slug}")

        assert_error(response, status.HTTP_404_NOT_FOUND)

    @pytest.mark.asyncio
    async def test_unknown_listing(self, async_client: AsyncClient):
        response = await async_client.get(f"{API}/properties/no-such-listing")

        assert_error(response, status.HTTP_404_NOT_FOUND)


class TestFavorites:
    """Saving listings."""

    @pytest.mark.asyncio
    async def test_toggle_favorite(self, async_client: AsyncClient, factory: Factory, user_headers):
        listing = await factory.listing()

        added = await async_client.post(f"{API}/properties/{listing.id}/favorite", headers=user_headers)
        body = assert_success(added)
        assert body["message"] == "Property added to favorites"
        assert body["data"] == {"is_favorited": True, "favorites_count": 1}

        search = await async_client.get(f"{API}/properties", headers=user_headers)
        assert assert_success(search)["data"][0]["is_favorited"] is True

        favorites = await async_client.get(f"{API}/favorites", headers=user_headers)
        assert [f["listing"]["id"] for f in assert_success(favorites)["data"]] == [str(listing.id)]

        removed = await async_client.post(f"{API}/properties/{listing.id}/favorite", headers=user_headers)
        assert assert_success(removed)["data"] == {"is_favorited": False, "favorites_count": 0}

    @pytest.mark.asyncio
    async def test_favorite_requires_login(self, async_client: AsyncClient, factory: Factory):
        listing = await factory.listing()

        response = await async_client.post(f"{API}/properties/{listing.id}/favorite")

        assert_error(response, status.HTTP_401_UNAUTHORIZED)

    @pytest.mark.asyncio
    async def test_favorite_unknown_listing(self, async_client: AsyncClient, user_headers):
        response = await async_client.post(
            f"{API}/properties/00000000-0000-0000-0000-000000000000/favorite", headers=user_headers
        )

        assert_error(response, status.HTTP_404_NOT_FOUND)


class TestPropertyAdministration:
    """Listing management with agent ownership."""

    @pytest.mark.asyncio
    async def test_agent_creates_listing_on_own_profile(
        self, async_client: AsyncClient, factory: Factory, agent_user: User, agent_headers
    ):
        property_type = await factory.property_type("Apartment")
        location = await factory.location("Banani")
        amenity = await factory.amenity("Gym")

        response = await async_client.post(f"{API}/admin/properties", headers=agent_headers, json={
            "title": "Modern 3 Bed Apartment",
            "listing_type": "sale",
            "price": 12500000,
            "bedrooms": 3,
            "bathrooms": 3,
            "address": "Road 11, Banani",
            "property_type_id": str(property_type.id),
            "location_id": str(location.id),
            "amenity_ids": [str(amenity.id)],
        })

        data = assert_success(response, status.HTTP_201_CREATED)["data"]
        assert data["slug"] == "modern-3-bed-apartment"
        assert data["agent_id"] == str(agent_user.agent_profile.id)
        assert data["property_type"]["name"] == "Apartment"
        assert [a["name"] for a in data["amenities"]] == ["Gym"]
        assert data["price"] == 12500000.0

    @pytest.mark.asyncio
    async def test_create_with_unknown_references(self, async_client: AsyncClient, admin_headers):
        response = await async_client.post(f"{API}/admin/properties", headers=admin_headers, json={
            "title": "Nowhere",
            "listing_type": "rent",
            "price": 100,
            "address": "Unknown",
            "property_type_id": "00000000-0000-0000-0000-000000000001",
            "location_id": "00000000-0000-0000-0000-000000000002",
        })

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert set(body["errors"]) == {"property_type_id", "location_id"}

    @pytest.mark.asyncio
    async def test_duplicate_titles_get_unique_slugs(self, async_client: AsyncClient, factory: Factory, admin_headers):
        property_type = await factory.property_type()
        location = await factory.location()
        payload = {
            "title": "Twin House",
            "listing_type": "sale",
            "price": 1000,
            "address": "Somewhere",
            "property_type_id": str(property_type.id),
            "location_id": str(location.id),
        }

        first = await async_client.post(f"{API}/admin/properties", headers=admin_headers, json=payload)
        second = await async_client.post(f"{API}/admin/properties", headers=admin_headers, json=payload)

        assert assert_success(first, status.HTTP_201_CREATED)["data"]["slug"] == "twin-house"
        assert assert_success(second, status.HTTP_201_CREATED)["data"]["slug"] == "twin-house-1"

    @pytest.mark.asyncio
    async def test_agent_lists_only_own_listings(
        self, async_client: AsyncClient, factory: Factory, agent_user: User, agent_headers
    ):
        await factory.listing(title="Mine", agent=agent_user.agent_profile)
        await factory.listing(title="Someone Else's", agent=await factory.agent())

        response = await async_client.get(f"{API}/admin/properties", headers=agent_headers)

        assert [p["title"] for p in assert_success(response)["data"]] == ["Mine"]

    @pytest.mark.asyncio
    async def test_agent_cannot_edit_other_listing(self, async_client: AsyncClient, factory: Factory, agent_headers):
        other = await factory.listing(agent=await factory.agent())

        response = await async_client.put(
            f"{API}/admin/properties/{other.id}", headers=agent_headers, json={"price": 1}
        )

        assert_error(response, status.HTTP_403_FORBIDDEN)

    @pytest.mark.asyncio
    async def test_update_title_regenerates_slug(self, async_client: AsyncClient, factory: Factory, admin_headers):
        listing = await factory.listing(title="Old Title")

        response = await async_client.put(
            f"{API}/admin/properties/{listing.id}",
            headers=admin_headers,
            json={"title": "Fresh Title", "status": "sold"}
        )

        data = assert_success(response)["data"]
        assert data["slug"] == "fresh-title"
        assert data["status"] == "sold"

    @pytest.mark.asyncio
    async def test_list_filtered_by_status(self, async_client: AsyncClient, factory: Factory, admin_headers):
        await factory.listing(title="Open")
        await factory.listing(title="Closed", status=PropertyStatus.RENTED.value)

        response = await async_client.get(f"{API}/admin/properties", headers=admin_headers, params={"status": "rented"})

        assert [p["title"] for p in assert_success(response)["data"]] == ["Closed"]

    @pytest.mark.asyncio
    async def test_delete_listing(self, async_client: AsyncClient, factory: Factory, admin_headers, db_session):
        listing = await factory.listing()

        response = await async_client.delete(f"{API}/admin/properties/{listing.id}", headers=admin_headers)

        assert_success(response)
        remaining = await db_session.execute(select(func.count(Property.id)))
        assert remaining.scalar() == 0

    @pytest.mark.asyncio
    async def test_bulk_delete_skips_unknown_ids(self, async_client: AsyncClient, factory: Factory, admin_headers):
        first = await factory.listing()
        second = await factory.listing()

        response = await async_client.post(f"{API}/admin/properties/bulk-delete", headers=admin_headers, json={
            "ids": [str(first.id), str(second.id), "00000000-0000-0000-0000-000000000009"],
        })

        body = assert_success(response)
        assert body["data"] == {"deleted_count": 2}
        assert body["message"] == "2 properties deleted successfully"

    @pytest.mark.asyncio
    async def test_agent_cannot_delete(self, async_client: AsyncClient, factory: Factory, agent_user: User, agent_headers):
        listing = await factory.listing(agent=agent_user.agent_profile)

        response = await async_client.delete(f"{API}/admin/properties/{listing.id}", headers=agent_headers)

        assert_error(response, status.HTTP_403_FORBIDDEN)

    @pytest.mark.asyncio
    async def test_view_stats(self, async_client: AsyncClient, factory: Factory, admin_headers, regular_user: User):
        listing = await factory.listing()
        await async_client.get(f"{API}/properties/{listing.slug}")
        await async_client.get(f"{API}/properties/{listing.slug}", headers=auth_headers(regular_user))

        response = await async_client.get(f"{API}/admin/properties/{listing.id}/stats", headers=admin_headers)

        data = assert_success(response)["data"]
        assert data["total_views"] == 2
        assert len(data["days"]) == 30
        assert data["days"][-1]["views"] == 2
        assert data["days"][0]["views"] == 0
