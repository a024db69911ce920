"""
Tests for teams, membership and invitations.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import update

from app.models.team import Team, TeamInvitation
from app.models.user import User
from tests.conftest import API, Factory, assert_success, assert_error, auth_headers


async def _create_team(client: AsyncClient, headers, name="Dhaka Sales"):
    response = await client.post(f"{API}/teams", headers=headers, json={"name": name, "timezone": "Asia/Dhaka"})
    return assert_success(response, status.HTTP_201_CREATED)["data"]


class TestTeams:
    """Team lifecycle."""

    @pytest.mark.asyncio
    async def test_create_switches_current_team(
        self, async_client: AsyncClient, regular_user: User, user_headers, db_session
    ):
        team = await _create_team(async_client, user_headers)

        assert team["personal_team"] is False
        assert team["owner"]["id"] == str(regular_user.id)
        await db_session.refresh(regular_user)
        assert str(regular_user.current_team_id) == team["id"]

    @pytest.mark.asyncio
    async def test_list_personal_team_first(self, async_client: AsyncClient, user_headers):
        await _create_team(async_client, user_headers, name="Alpha Team")

        response = await async_client.get(f"{API}/teams", headers=user_headers)

        data = assert_success(response)["data"]
        assert [t["personal_team"] for t in data] == [True, False]

    @pytest.mark.asyncio
    async def test_non_member_cannot_view(self, async_client: AsyncClient, factory: Factory, user_headers):
        outsider = await factory.user(email="outsider@example.com")
        team = await _create_team(async_client, user_headers)

        response = await async_client.get(f"{API}/teams/{team['id']}", headers=auth_headers(outsider))

        assert_error(response, status.HTTP_403_FORBIDDEN)

    @pytest.mark.asyncio
    async def test_personal_team_cannot_be_deleted(self, async_client: AsyncClient, regular_user: User, user_headers):
        response = await async_client.delete(f"{API}/teams/{regular_user.current_team_id}", headers=user_headers)

        assert_error(response, status.HTTP_403_FORBIDDEN)

    @pytest.mark.asyncio
    async def test_delete_resets_current_team(
        self, async_client: AsyncClient, factory: Factory, user_headers, db_session
    ):
        team = await _create_team(async_client, user_headers)
        member = await factory.user(email="member@example.com")
        await async_client.post(
            f"{API}/teams/{team['id']}/members", headers=user_headers, json={"email": member.email}
        )
        await async_client.post(f"{API}/teams/{team['id']}/switch", headers=auth_headers(member))

        response = await async_client.delete(f"{API}/teams/{team['id']}", headers=user_headers)

        assert_success(response)
        await db_session.refresh(member)
        assert member.current_team_id is None
        assert await db_session.get(Team, uuid.UUID(team["id"])) is None

    @pytest.mark.asyncio
    async def test_update_requires_team_admin(self, async_client: AsyncClient, factory: Factory, user_headers):
        team = await _create_team(async_client, user_headers)
        member = await factory.user(email="member@example.com")
        await async_client.post(
            f"{API}/teams/{team['id']}/members", headers=user_headers, json={"email": member.email}
        )

        denied = await async_client.put(
            f"{API}/teams/{team['id']}", headers=auth_headers(member), json={"name": "Hijacked"}
        )
        assert_error(denied, status.HTTP_403_FORBIDDEN)

        renamed = await async_client.put(f"{API}/teams/{team['id']}", headers=user_headers, json={"name": "Renamed"})
        assert assert_success(renamed)["data"]["name"] == "Renamed"


class TestMembers:
    """Adding, promoting and removing members."""

    @pytest.mark.asyncio
    async def test_add_member(self, async_client: AsyncClient, factory: Factory, user_headers):
        team = await _create_team(async_client, user_headers)
        member = await factory.user(email="member@example.com", name="New Member")

        response = await async_client.post(
            f"{API}/teams/{team['id']}/members", headers=user_headers, json={"email": "Member@Example.com"}
        )

        data = assert_success(response, status.HTTP_201_CREATED)["data"]
        assert [(m["user"]["id"], m["role"]) for m in data["memberships"]] == [(str(member.id), "member")]

    @pytest.mark.asyncio
    async def test_add_unknown_or_existing_member(self, async_client: AsyncClient, regular_user: User, user_headers):
        team = await _create_team(async_client, user_headers)

        unknown = await async_client.post(
            f"{API}/teams/{team['id']}/members", headers=user_headers, json={"email": "nobody@example.com"}
        )
        body = assert_error(unknown, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert body["errors"]["email"] == ["We were unable to find a registered user with this email address."]

        owner = await async_client.post(
            f"{API}/teams/{team['id']}/members", headers=user_headers, json={"email": regular_user.email}
        )
        body = assert_error(owner, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert body["errors"]["email"] == ["This user already belongs to the team."]

    @pytest.mark.asyncio
    async def test_promoted_member_can_manage(self, async_client: AsyncClient, factory: Factory, user_headers):
        team = await _create_team(async_client, user_headers)
        member = await factory.user(email="member@example.com")
        await factory.user(email="third@example.com")
        await async_client.post(f"{API}/teams/{team['id']}/members", headers=user_headers, json={"email": member.email})

        promoted = await async_client.put(
            f"{API}/teams/{team['id']}/members/{member.id}", headers=user_headers, json={"role": "admin"}
        )
        assert assert_success(promoted)["data"]["memberships"][0]["role"] == "admin"

        added = await async_client.post(
            f"{API}/teams/{team['id']}/members", headers=auth_headers(member), json={"email": "third@example.com"}
        )
        assert_success(added, status.HTTP_201_CREATED)

    @pytest.mark.asyncio
    async def test_editor_role_not_assignable_on_update(
        self, async_client: AsyncClient, factory: Factory, user_headers
    ):
        team = await _create_team(async_client, user_headers)
        member = await factory.user(email="member@example.com")
        await async_client.post(f"{API}/teams/{team['id']}/members", headers=user_headers, json={"email": member.email})

        response = await async_client.put(
            f"{API}/teams/{team['id']}/members/{member.id}", headers=user_headers, json={"role": "editor"}
        )

        assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)

    @pytest.mark.asyncio
    async def test_owner_cannot_be_removed_or_leave(
        self, async_client: AsyncClient, regular_user: User, user_headers
    ):
        team = await _create_team(async_client, user_headers)

        removed = await async_client.delete(
            f"{API}/teams/{team['id']}/members/{regular_user.id}", headers=user_headers
        )
        assert_error(removed, status.HTTP_403_FORBIDDEN)

        left = await async_client.post(f"{API}/teams/{team['id']}/leave", headers=user_headers)
        assert_error(left, status.HTTP_403_FORBIDDEN)

    @pytest.mark.asyncio
    async def test_member_leaves(self, async_client: AsyncClient, factory: Factory, user_headers):
        team = await _create_team(async_client, user_headers)
        member = await factory.user(email="member@example.com")
        await async_client.post(f"{API}/teams/{team['id']}/members", headers=user_headers, json={"email": member.email})

        response = await async_client.post(f"{API}/teams/{team['id']}/leave", headers=auth_headers(member))
        assert assert_success(response)["message"] == "You have left the team"

        members = await async_client.get(f"{API}/teams/{team['id']}/members", headers=user_headers)
        assert assert_success(members)["data"] == []


class TestInvitations:
    """Inviting by email."""

    @pytest.mark.asyncio
    async def test_invite_and_accept(self, async_client: AsyncClient, factory: Factory, user_headers):
        team = await _create_team(async_client, user_headers)
        invitee = await factory.user(email="invitee@example.com")

        invited = await async_client.post(
            f"{API}/teams/{team['id']}/invitations", headers=user_headers,
            json={"email": "Invitee@Example.com", "role": "admin"}
        )
        invitation = assert_success(invited, status.HTTP_201_CREATED)["data"]
        assert invitation["email"] == "invitee@example.com"

        accepted = await async_client.post(
            f"{API}/teams/invitations/{invitation['id']}/accept", headers=auth_headers(invitee)
        )
        data = assert_success(accepted)["data"]
        assert [(m["user"]["id"], m["role"]) for m in data["memberships"]] == [(str(invitee.id), "admin")]
        assert data["invitations"] == []

    @pytest.mark.asyncio
    async def test_repeat_invitation_within_window(self, async_client: AsyncClient, user_headers):
        team = await _create_team(async_client, user_headers)
        url = f"{API}/teams/{team['id']}/invitations"
        await async_client.post(url, headers=user_headers, json={"email": "friend@example.com"})

        response = await async_client.post(url, headers=user_headers, json={"email": "friend@example.com"})

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert body["errors"]["email"] == ["This user has already been invited to the team."]

    @pytest.mark.asyncio
    async def test_invitation_older_than_window_allows_new_one(
        self, async_client: AsyncClient, session_factory, user_headers
    ):
        team = await _create_team(async_client, user_headers)
        url = f"{API}/teams/{team['id']}/invitations"
        first = assert_success(
            await async_client.post(url, headers=user_headers, json={"email": "friend@example.com"}),
            status.HTTP_201_CREATED
        )["data"]

        async with session_factory() as session:
            await session.execute(
                update(TeamInvitation)
                .where(TeamInvitation.id == uuid.UUID(first["id"]))
                .values(created_at=datetime.now(timezone.utc) - timedelta(days=8))
            )
            await session.commit()

        response = await async_client.post(url, headers=user_headers, json={"email": "friend@example.com"})

        second = assert_success(response, status.HTTP_201_CREATED)["data"]
        assert second["id"] != first["id"]
        assert second["email"] == "friend@example.com"

    @pytest.mark.asyncio
    async def test_accept_for_other_email_forbidden(self, async_client: AsyncClient, factory: Factory, user_headers):
        team = await _create_team(async_client, user_headers)
        stranger = await factory.user(email="stranger@example.com")
        invited = await async_client.post(
            f"{API}/teams/{team['id']}/invitations", headers=user_headers, json={"email": "friend@example.com"}
        )
        invitation = assert_success(invited, status.HTTP_201_CREATED)["data"]

        response = await async_client.post(
            f"{API}/teams/invitations/{invitation['id']}/accept", headers=auth_headers(stranger)
        )

        assert_error(response, status.HTTP_403_FORBIDDEN)

    @pytest.mark.asyncio
    async def test_cancel_invitation(self, async_client: AsyncClient, user_headers):
        team = await _create_team(async_client, user_headers)
        invited = await async_client.post(
            f"{API}/teams/{team['id']}/invitations", headers=user_headers, json={"email": "friend@example.com"}
        )
        invitation = assert_success(invited, status.HTTP_201_CREATED)["data"]

        response = await async_client.delete(
            f"{API}/teams/{team['id']}/invitations/{invitation['id']}", headers=user_headers
        )
        assert_success(response)

        listed = await async_client.get(f"{API}/teams/{team['id']}/invitations", headers=user_headers)
        assert assert_success(listed)["data"] == []
