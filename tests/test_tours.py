"""
Tests for tour requests on listings.
"""

import pytest
from datetime import date, timedelta
from fastapi import status
from httpx import AsyncClient

from app.models.property import PropertyTour
from app.models.user import User
from tests.conftest import API, Factory, assert_success, assert_error


def _tour_payload(listing, **values):
    payload = {
        "property_id": str(listing.id),
        "name": "Visitor",
        "email": "visitor@example.com",
        "tour_date": (date.today() + timedelta(days=3)).isoformat(),
        "tour_time": "14:30",
    }
    payload.update(values)
    return payload


async def _tour(db_session, listing, **values) -> PropertyTour:
    fields = {
        "name": "Visitor",
        "email": "visitor@example.com",
        "tour_date": date.today() + timedelta(days=2),
        "tour_time": "10:00",
    }
    fields.update(values)
    tour = PropertyTour(property_id=listing.id, **fields)
    db_session.add(tour)
    await db_session.commit()
    await db_session.refresh(tour)
    return tour


class TestTourRequests:
    """Public tour scheduling."""

    @pytest.mark.asyncio
    async def test_request_tour(self, async_client: AsyncClient, factory: Factory):
        listing = await factory.listing()

        response = await async_client.post(f"{API}/tours", json=_tour_payload(listing))

        body = assert_success(response, status.HTTP_201_CREATED)
        assert body["message"] == "Tour request submitted successfully"
        assert body["data"]["status"] == "requested"
        assert body["data"]["user_id"] is None

    @pytest.mark.asyncio
    async def test_links_existing_account_by_email(
        self, async_client: AsyncClient, factory: Factory, regular_user: User
    ):
        listing = await factory.listing()

        response = await async_client.post(
            f"{API}/tours", json=_tour_payload(listing, email=regular_user.email.upper())
        )

        assert assert_success(response, status.HTTP_201_CREATED)["data"]["user_id"] == str(regular_user.id)

    @pytest.mark.asyncio
    async def test_date_must_be_in_future(self, async_client: AsyncClient, factory: Factory):
        listing = await factory.listing()

        response = await async_client.post(
            f"{API}/tours", json=_tour_payload(listing, tour_date=date.today().isoformat())
        )

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert "tour_date" in body["errors"]

    @pytest.mark.asyncio
    async def test_time_format(self, async_client: AsyncClient, factory: Factory):
        listing = await factory.listing()

        response = await async_client.post(f"{API}/tours", json=_tour_payload(listing, tour_time="2pm"))

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert "tour_time" in body["errors"]

    @pytest.mark.asyncio
    async def test_unavailable_listing(self, async_client: AsyncClient, factory: Factory):
        listing = await factory.listing(status="draft")

        response = await async_client.post(f"{API}/tours", json=_tour_payload(listing))

        assert_error(response, status.HTTP_404_NOT_FOUND)


class TestTourAdministration:
    """Tour lists and status changes."""

    @pytest.mark.asyncio
    async def test_agent_sees_own_listing_tours(
        self, async_client: AsyncClient, factory: Factory, agent_user: User, agent_headers, db_session
    ):
        mine = await _tour(db_session, await factory.listing(agent=agent_user.agent_profile))
        await _tour(db_session, await factory.listing(agent=await factory.agent()))

        response = await async_client.get(f"{API}/admin/tours", headers=agent_headers)

        assert [t["id"] for t in assert_success(response)["data"]] == [str(mine.id)]

    @pytest.mark.asyncio
    async def test_tours_ordered_by_date(self, async_client: AsyncClient, factory: Factory, admin_headers, db_session):
        listing = await factory.listing()
        later = await _tour(db_session, listing, tour_date=date.today() + timedelta(days=5))
        sooner = await _tour(db_session, listing, tour_date=date.today() + timedelta(days=1))

        response = await async_client.get(
            f"{API}/admin/tours", headers=admin_headers, params={"property_id": str(listing.id)}
        )

        assert [t["id"] for t in assert_success(response)["data"]] == [str(sooner.id), str(later.id)]

    @pytest.mark.asyncio
    async def test_confirm_tour(self, async_client: AsyncClient, factory: Factory, admin_headers, db_session):
        tour = await _tour(db_session, await factory.listing())

        response = await async_client.put(
            f"{API}/admin/tours/{tour.id}/status", headers=admin_headers, json={"status": "confirmed"}
        )

        assert assert_success(response)["data"]["status"] == "confirmed"

    @pytest.mark.asyncio
    async def test_agent_cannot_update_other_listing_tour(
        self, async_client: AsyncClient, factory: Factory, agent_headers, db_session
    ):
        tour = await _tour(db_session, await factory.listing(agent=await factory.agent()))

        response = await async_client.put(
            f"{API}/admin/tours/{tour.id}/status", headers=agent_headers, json={"status": "cancelled"}
        )

        assert_error(response, status.HTTP_403_FORBIDDEN)

    @pytest.mark.asyncio
    async def test_unknown_status_rejected(self, async_client: AsyncClient, factory: Factory, admin_headers, db_session):
        tour = await _tour(db_session, await factory.listing())

        response = await async_client.put(
            f"{API}/admin/tours/{tour.id}/status", headers=admin_headers, json={"status": "maybe"}
        )

        assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
