"""
Tests for messaging agents, the inbox and replies.
"""

import pytest
from fastapi import status
from httpx import AsyncClient

from app.models.user import User
from tests.conftest import API, Factory, assert_success, assert_error, auth_headers


async def _send(client: AsyncClient, target_type: str, target_id, headers=None, **values):
    payload = {
        "messageable_type": target_type,
        "messageable_id": str(target_id),
        "subject": "Viewing",
        "message": "Could we arrange a viewing?",
    }
    payload.update(values)
    return await client.post(f"{API}/messages", headers=headers or {}, json=payload)


class TestSendMessage:
    """Contacting agents."""

    @pytest.mark.asyncio
    async def test_message_about_listing_reaches_agent(
        self, async_client: AsyncClient, factory: Factory, agent_user: User, regular_user: User, user_headers
    ):
        listing = await factory.listing(agent=agent_user.agent_profile)

        response = await _send(async_client, "property", listing.id, headers=user_headers)

        data = assert_success(response, status.HTTP_201_CREATED)["data"]
        assert data["to_user"]["id"] == str(agent_user.id)
        assert data["from_user"]["id"] == str(regular_user.id)
        assert data["sender_name"] == regular_user.name
        assert data["is_read"] is False

    @pytest.mark.asyncio
    async def test_guest_message_to_agent(self, async_client: AsyncClient, agent_user: User):
        response = await _send(
            async_client, "agent", agent_user.agent_profile.id, name="Guest", email="guest@example.com"
        )

        data = assert_success(response, status.HTTP_201_CREATED)["data"]
        assert data["from_user"] is None
        assert data["sender_email"] == "guest@example.com"

    @pytest.mark.asyncio
    async def test_guest_needs_contact_details(self, async_client: AsyncClient, agent_user: User):
        response = await _send(async_client, "agent", agent_user.agent_profile.id)

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert set(body["errors"]) == {"name", "email"}

    @pytest.mark.asyncio
    async def test_unknown_target(self, async_client: AsyncClient, user_headers):
        response = await _send(async_client, "property", "00000000-0000-0000-0000-000000000000", headers=user_headers)

        assert_error(response, status.HTTP_404_NOT_FOUND)


class TestInbox:
    """Inbox, reading and replies."""

    @pytest.mark.asyncio
    async def test_inbox_groups_by_sender(
        self, async_client: AsyncClient, factory: Factory, agent_user: User, user_headers
    ):
        profile_id = agent_user.agent_profile.id
        await _send(async_client, "agent", profile_id, headers=user_headers, message="First question")
        await _send(async_client, "agent", profile_id, headers=user_headers, message="Second question")
        await _send(async_client, "agent", profile_id, name="Guest", email="Guest@Example.com")
        await _send(async_client, "agent", profile_id, name="Guest", email="guest@example.com")

        agent_headers = auth_headers(agent_user)
        inbox = assert_success(await async_client.get(f"{API}/messages/inbox", headers=agent_headers))["data"]

        assert len(inbox) == 2
        assert sorted(c["total_count"] for c in inbox) == [2, 2]
        assert all(c["unread_count"] == 2 for c in inbox)

        count = await async_client.get(f"{API}/messages/unread-count", headers=agent_headers)
        assert assert_success(count)["data"] == {"unread_count": 4}

    @pytest.mark.asyncio
    async def test_opening_marks_read_for_recipient(
        self, async_client: AsyncClient, agent_user: User, user_headers
    ):
        sent = assert_success(
            await _send(async_client, "agent", agent_user.agent_profile.id, headers=user_headers),
            status.HTTP_201_CREATED
        )["data"]

        as_sender = await async_client.get(f"{API}/messages/{sent['id']}", headers=user_headers)
        assert assert_success(as_sender)["data"]["is_read"] is False

        as_recipient = await async_client.get(f"{API}/messages/{sent['id']}", headers=auth_headers(agent_user))
        assert assert_success(as_recipient)["data"]["is_read"] is True

    @pytest.mark.asyncio
    async def test_outsider_cannot_read(
        self, async_client: AsyncClient, agent_user: User, user_headers, moderator_headers
    ):
        sent = assert_success(
            await _send(async_client, "agent", agent_user.agent_profile.id, headers=user_headers),
            status.HTTP_201_CREATED
        )["data"]

        response = await async_client.get(f"{API}/messages/{sent['id']}", headers=moderator_headers)

        assert_error(response, status.HTTP_403_FORBIDDEN)

    @pytest.mark.asyncio
    async def test_reply_goes_back_to_sender(
        self, async_client: AsyncClient, agent_user: User, regular_user: User, user_headers
    ):
        sent = assert_success(
            await _send(async_client, "agent", agent_user.agent_profile.id, headers=user_headers),
            status.HTTP_201_CREATED
        )["data"]

        response = await async_client.post(
            f"{API}/messages/{sent['id']}/reply",
            headers=auth_headers(agent_user),
            json={"message": "Saturday at 11 works."}
        )

        data = assert_success(response, status.HTTP_201_CREATED)["data"]
        assert data["subject"] == "Re: Viewing"
        assert data["to_user"]["id"] == str(regular_user.id)
        assert data["parent_id"] == sent["id"]

        sent_box = await async_client.get(f"{API}/messages/sent", headers=auth_headers(agent_user))
        assert [m["id"] for m in assert_success(sent_box)["data"]] == [data["id"]]

    @pytest.mark.asyncio
    async def test_read_all_and_unread(self, async_client: AsyncClient, agent_user: User, user_headers):
        profile_id = agent_user.agent_profile.id
        first = assert_success(
            await _send(async_client, "agent", profile_id, headers=user_headers), status.HTTP_201_CREATED
        )["data"]
        await _send(async_client, "agent", profile_id, headers=user_headers)
        agent_headers = auth_headers(agent_user)

        read_all = await async_client.post(f"{API}/messages/read-all", headers=agent_headers)
        assert assert_success(read_all)["data"] == {"updated": 2}

        unread = await async_client.post(f"{API}/messages/{first['id']}/unread", headers=agent_headers)
        assert assert_success(unread)["data"]["is_read"] is False

        count = await async_client.get(f"{API}/messages/unread-count", headers=agent_headers)
        assert assert_success(count)["data"]["unread_count"] == 1

    @pytest.mark.asyncio
    async def test_sender_cannot_change_read_state(
        self, async_client: AsyncClient, agent_user: User, user_headers
    ):
        sent = assert_success(
            await _send(async_client, "agent", agent_user.agent_profile.id, headers=user_headers),
            status.HTTP_201_CREATED
        )["data"]
        agent_headers = auth_headers(agent_user)

        marked = await async_client.post(f"{API}/messages/{sent['id']}/read", headers=user_headers)
        body = assert_error(marked, status.HTTP_403_FORBIDDEN)
        assert body["message"] == "Only the recipient can change the read state of a message"

        count = await async_client.get(f"{API}/messages/unread-count", headers=agent_headers)
        assert assert_success(count)["data"]["unread_count"] == 1

        await async_client.post(f"{API}/messages/{sent['id']}/read", headers=agent_headers)
        unmarked = await async_client.post(f"{API}/messages/{sent['id']}/unread", headers=user_headers)
        assert_error(unmarked, status.HTTP_403_FORBIDDEN)

        count = await async_client.get(f"{API}/messages/unread-count", headers=agent_headers)
        assert assert_success(count)["data"]["unread_count"] == 0

    @pytest.mark.asyncio
    async def test_delete_message(self, async_client: AsyncClient, agent_user: User, user_headers):
        sent = assert_success(
            await _send(async_client, "agent", agent_user.agent_profile.id, headers=user_headers),
            status.HTTP_201_CREATED
        )["data"]

        response = await async_client.delete(f"{API}/messages/{sent['id']}", headers=user_headers)
        assert_success(response)

        missing = await async_client.get(f"{API}/messages/{sent['id']}", headers=user_headers)
        assert_error(missing, status.HTTP_404_NOT_FOUND)

    @pytest.mark.asyncio
    async def test_inbox_requires_login(self, async_client: AsyncClient):
        response = await async_client.get(f"{API}/messages/inbox")

        assert_error(response, status.HTTP_401_UNAUTHORIZED)
