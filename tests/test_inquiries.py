"""
Tests for listing inquiries and the site contact form.
"""

import pytest
from fastapi import status
from httpx import AsyncClient

from app.models.inquiry import Inquiry, ContactInquiry
from app.models.user import User
from tests.conftest import API, Factory, assert_success, assert_error


async def _inquiry(db_session, listing, **values) -> Inquiry:
    fields = {
        "name": "Guest Buyer",
        "email": "buyer@example.com",
        "message": "Is this still available?",
    }
    fields.update(values)
    inquiry = Inquiry(property_id=listing.id, **fields)
    db_session.add(inquiry)
    await db_session.commit()
    await db_session.refresh(inquiry)
    return inquiry


class TestCreateInquiry:
    """Public inquiry submission."""

    @pytest.mark.asyncio
    async def test_guest_inquiry(self, async_client: AsyncClient, factory: Factory, db_session):
        listing = await factory.listing(title="Lake House")

        response = await async_client.post(f"{API}/inquiries", json={
            "property_id": str(listing.id),
            "name": "Guest Buyer",
            "email": "Guest@Example.com",
            "phone": "+880 1711-000000",
            "message": "Can I visit this weekend?",
            "inquiry_type": "viewing",
        })

        body = assert_success(response, status.HTTP_201_CREATED)
        assert body["message"] == "Your inquiry has been sent successfully"
        data = body["data"]
        assert data["status"] == "pending"
        assert data["email"] == "guest@example.com"
        assert data["property_title"] == "Lake House"
        assert data["user_id"] is None

        await db_session.refresh(listing)
        assert listing.inquiries_count == 1

    @pytest.mark.asyncio
    async def test_guest_must_give_name_and_email(self, async_client: AsyncClient, factory: Factory):
        listing = await factory.listing()

        response = await async_client.post(f"{API}/inquiries", json={
            "property_id": str(listing.id),
            "message": "Please call me back.",
        })

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert set(body["errors"]) == {"name", "email"}

    @pytest.mark.asyncio
    async def test_signed_in_user_defaults(
        self, async_client: AsyncClient, factory: Factory, regular_user: User, user_headers
    ):
        listing = await factory.listing()

        response = await async_client.post(f"{API}/inquiries", headers=user_headers, json={
            "property_id": str(listing.id),
            "message": "What are the service charges?",
        })

        data = assert_success(response, status.HTTP_201_CREATED)["data"]
        assert data["name"] == regular_user.name
        assert data["email"] == regular_user.email
        assert data["user_id"] == str(regular_user.id)

    @pytest.mark.asyncio
    async def test_unavailable_listing(self, async_client: AsyncClient, factory: Factory):
        listing = await factory.listing(status="sold")

        response = await async_client.post(f"{API}/inquiries", json={
            "property_id": str(listing.id),
            "name": "Late Buyer",
            "email": "late@example.com",
            "message": "Any similar units left?",
        })

        assert_error(response, status.HTTP_404_NOT_FOUND)

    @pytest.mark.asyncio
    async def test_message_too_short(self, async_client: AsyncClient, factory: Factory):
        listing = await factory.listing()

        response = await async_client.post(f"{API}/inquiries", json={
            "property_id": str(listing.id),
            "name": "Brief",
            "email": "brief@example.com",
            "message": "Hi",
        })

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert "message" in body["errors"]


class TestInquiryAdministration:
    """Inquiry handling, scoped for agents."""

    @pytest.mark.asyncio
    async def test_agent_sees_only_own_listing_inquiries(
        self, async_client: AsyncClient, factory: Factory, agent_user: User, agent_headers, db_session
    ):
        mine = await factory.listing(agent=agent_user.agent_profile)
        other = await factory.listing(agent=await factory.agent())
        own_inquiry = await _inquiry(db_session, mine)
        other_inquiry = await _inquiry(db_session, other)

        response = await async_client.get(f"{API}/admin/inquiries", headers=agent_headers)
        assert [i["id"] for i in assert_success(response)["data"]] == [str(own_inquiry.id)]

        denied = await async_client.get(f"{API}/admin/inquiries/{other_inquiry.id}", headers=agent_headers)
        assert_error(denied, status.HTTP_403_FORBIDDEN)

    @pytest.mark.asyncio
    async def test_admin_filters_by_status(self, async_client: AsyncClient, factory: Factory, admin_headers, db_session):
        listing = await factory.listing()
        await _inquiry(db_session, listing)
        closed = await _inquiry(db_session, listing, status="closed")

        response = await async_client.get(f"{API}/admin/inquiries", headers=admin_headers, params={"status": "closed"})

        assert [i["id"] for i in assert_success(response)["data"]] == [str(closed.id)]

    @pytest.mark.asyncio
    async def test_responding_stamps_responder(
        self, async_client: AsyncClient, factory: Factory, admin_user: User, admin_headers, db_session
    ):
        inquiry = await _inquiry(db_session, await factory.listing())

        response = await async_client.put(f"{API}/admin/inquiries/{inquiry.id}", headers=admin_headers, json={
            "status": "responded",
            "agent_notes": "Called back, viewing booked.",
        })

        data = assert_success(response)["data"]
        assert data["status"] == "responded"
        assert data["responded_by"] == str(admin_user.id)
        assert data["responded_at"] is not None

    @pytest.mark.asyncio
    async def test_delete_decrements_counter(self, async_client: AsyncClient, factory: Factory, admin_headers, db_session):
        listing = await factory.listing(inquiries_count=1)
        inquiry = await _inquiry(db_session, listing)

        response = await async_client.delete(f"{API}/admin/inquiries/{inquiry.id}", headers=admin_headers)

        assert_success(response)
        await db_session.refresh(listing)
        assert listing.inquiries_count == 0

    @pytest.mark.asyncio
    async def test_moderator_cannot_delete(self, async_client: AsyncClient, factory: Factory, moderator_headers, db_session):
        inquiry = await _inquiry(db_session, await factory.listing())

        response = await async_client.delete(f"{API}/admin/inquiries/{inquiry.id}", headers=moderator_headers)

        assert_error(response, status.HTTP_403_FORBIDDEN)


class TestContactForm:
    """Site contact form."""

    @pytest.mark.asyncio
    async def test_submit_contact(self, async_client: AsyncClient):
        response = await async_client.post(f"{API}/contact", json={
            "first_name": "Rafi",
            "last_name": "Ahmed",
            "email": "rafi@example.com",
            "inquiry_type": "selling",
            "message": "I would like to list my apartment.",
        })

        body = assert_success(response, status.HTTP_201_CREATED)
        assert body["data"]["full_name"] == "Rafi Ahmed"
        assert body["data"]["status"] == "new"

    @pytest.mark.asyncio
    async def test_invalid_email(self, async_client: AsyncClient):
        response = await async_client.post(f"{API}/contact", json={
            "first_name": "Rafi",
            "last_name": "Ahmed",
            "email": "not-an-email",
            "message": "I would like to list my apartment.",
        })

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert "email" in body["errors"]

    @pytest.mark.asyncio
    async def test_assign_and_search(
        self, async_client: AsyncClient, admin_headers, moderator_user: User, db_session
    ):
        inquiry = ContactInquiry(
            first_name="Lina", last_name="Chowdhury", email="lina@example.com",
            message="Looking for a valuation."
        )
        db_session.add(inquiry)
        await db_session.commit()

        updated = await async_client.put(
            f"{API}/admin/contact-inquiries/{inquiry.id}",
            headers=admin_headers,
            json={"status": "in_progress", "assigned_to": str(moderator_user.id)}
        )
        data = assert_success(updated)["data"]
        assert data["status"] == "in_progress"
        assert data["assigned_to"] == str(moderator_user.id)

        listed = await async_client.get(
            f"{API}/admin/contact-inquiries", headers=admin_headers, params={"search": "chowdhury"}
        )
        assert [i["id"] for i in assert_success(listed)["data"]] == [str(inquiry.id)]

    @pytest.mark.asyncio
    async def test_assign_unknown_user(self, async_client: AsyncClient, admin_headers, db_session):
        inquiry = ContactInquiry(
            first_name="Lina", last_name="Chowdhury", email="lina@example.com",
            message="Looking for a valuation."
        )
        db_session.add(inquiry)
        await db_session.commit()

        response = await async_client.put(
            f"{API}/admin/contact-inquiries/{inquiry.id}",
            headers=admin_headers,
            json={"assigned_to": "00000000-0000-0000-0000-000000000000"}
        )

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert body["errors"]["assigned_to"] == ["The selected user is invalid."]
