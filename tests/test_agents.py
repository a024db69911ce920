"""
Tests for the public agent directory and agent administration.
"""

import pytest
from fastapi import status
from httpx import AsyncClient

from app.models.property import PropertyStatus
from app.models.user import User
from tests.conftest import API, Factory, assert_success, assert_error


class TestAgentDirectory:
    """Public agent endpoints."""

    @pytest.mark.asyncio
    async def test_list_active_agents_by_name(self, async_client: AsyncClient, factory: Factory):
        await factory.agent(name="Zara Khan")
        await factory.agent(name="Amin Ali")
        await factory.agent(name="Retired Agent", is_active=False)

        response = await async_client.get(f"{API}/agents")

        body = assert_success(response)
        assert [agent["name"] for agent in body["data"]] == ["Amin Ali", "Zara Khan"]
        assert body["meta"]["total"] == 2

    @pytest.mark.asyncio
    async def test_agent_detail_counts_available_listings(self, async_client: AsyncClient, factory: Factory):
        agent = await factory.agent(name="Busy Agent")
        await factory.listing(agent=agent)
        await factory.listing(agent=agent, status=PropertyStatus.SOLD.value)

        response = await async_client.get(f"{API}/agents/{agent.id}")

        data = assert_success(response)["data"]
        assert data["name"] == "Busy Agent"
        assert data["available_properties_count"] == 1

    @pytest.mark.asyncio
    async def test_inactive_agent_hidden(self, async_client: AsyncClient, factory: Factory):
        agent = await factory.agent(is_active=False)

        response = await async_client.get(f"{API}/agents/{agent.id}")

        assert_error(response, status.HTTP_404_NOT_FOUND)


class TestAgentAdministration:
    """Admin CRUD over agent profiles."""

    @pytest.mark.asyncio
    async def test_create_agent(self, async_client: AsyncClient, admin_headers):
        response = await async_client.post(f"{API}/admin/agents", headers=admin_headers, json={
            "name": "Nadia Rahman",
            "email": "nadia@example.com",
            "license_number": "LIC-1001",
            "commission_rate": 3.5,
            "social_media": {"linkedin": "https://linkedin.com/in/nadia"},
        })

        data = assert_success(response, status.HTTP_201_CREATED)["data"]
        assert data["commission_rate"] == 3.5
        assert data["social_media"]["linkedin"].endswith("/nadia")

    @pytest.mark.asyncio
    async def test_duplicate_email_and_license(self, async_client: AsyncClient, admin_headers, factory: Factory):
        await factory.agent(email="taken@example.com", license_number="LIC-1")

        response = await async_client.post(f"{API}/admin/agents", headers=admin_headers, json={
            "name": "Copycat",
            "email": "taken@example.com",
            "license_number": "LIC-1",
        })

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert set(body["errors"]) == {"email", "license_number"}

    @pytest.mark.asyncio
    async def test_link_user_already_linked(
        self, async_client: AsyncClient, admin_headers, agent_user: User
    ):
        response = await async_client.post(f"{API}/admin/agents", headers=admin_headers, json={
            "name": "Second Profile",
            "email": "second.profile@example.com",
            "user_id": str(agent_user.id),
        })

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert body["errors"]["user_id"] == ["The user is already linked to another agent."]

    @pytest.mark.asyncio
    async def test_delete_agent_keeps_listings(self, async_client: AsyncClient, admin_headers, factory: Factory):
        agent = await factory.agent()
        listing = await factory.listing(agent=agent)

        response = await async_client.delete(f"{API}/admin/agents/{agent.id}", headers=admin_headers)
        assert_success(response)

        detail = await async_client.get(f"{API}/admin/properties/{listing.id}", headers=admin_headers)
        assert assert_success(detail)["data"]["agent_id"] is None

    @pytest.mark.asyncio
    async def test_agent_role_cannot_create_agents(self, async_client: AsyncClient, agent_headers):
        response = await async_client.post(f"{API}/admin/agents", headers=agent_headers, json={
            "name": "Self Promoted",
            "email": "self@example.com",
        })

        assert_error(response, status.HTTP_403_FORBIDDEN)
