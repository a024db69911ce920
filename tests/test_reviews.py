"""
Tests for ratings on properties and posts.
"""

import pytest
from fastapi import status
from httpx import AsyncClient

from app.models.review import Review
from app.models.user import User
from tests.conftest import API, Factory, assert_success, assert_error, auth_headers


async def _review(client: AsyncClient, headers, target_type: str, target_id, rating: int, comment=None):
    return await client.post(f"{API}/reviews", headers=headers, json={
        "reviewable_type": target_type,
        "reviewable_id": str(target_id),
        "rating": rating,
        "comment": comment,
    })


class TestWriteReviews:
    """Reviews keep the target's rating current."""

    @pytest.mark.asyncio
    async def test_reviews_update_listing_average(
        self, async_client: AsyncClient, factory: Factory, regular_user: User, user_headers, db_session
    ):
        listing = await factory.listing()
        other = await factory.user(email="second.reader@example.com")

        first = await _review(async_client, user_headers, "property", listing.id, 5, "Lovely place")
        second = await _review(async_client, auth_headers(other), "property", listing.id, 2)

        data = assert_success(first, status.HTTP_201_CREATED)["data"]
        assert data["reviewer_name"] == regular_user.name
        assert data["is_approved"] is True
        assert_success(second, status.HTTP_201_CREATED)

        await db_session.refresh(listing)
        assert listing.reviews_count == 2
        assert float(listing.average_rating) == 3.5

    @pytest.mark.asyncio
    async def test_one_review_per_target(self, async_client: AsyncClient, factory: Factory, admin_user: User, user_headers):
        post = await factory.post(admin_user)
        await _review(async_client, user_headers, "post", post.id, 4)

        response = await _review(async_client, user_headers, "post", post.id, 5)

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert body["errors"]["reviewable_id"] == ["You have already reviewed this item."]

    @pytest.mark.asyncio
    async def test_rating_range(self, async_client: AsyncClient, factory: Factory, user_headers):
        listing = await factory.listing()

        response = await _review(async_client, user_headers, "property", listing.id, 6)

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert "rating" in body["errors"]

    @pytest.mark.asyncio
    async def test_unknown_target(self, async_client: AsyncClient, user_headers):
        response = await _review(async_client, user_headers, "post", "00000000-0000-0000-0000-000000000000", 3)

        assert_error(response, status.HTTP_404_NOT_FOUND)

    @pytest.mark.asyncio
    async def test_requires_login(self, async_client: AsyncClient, factory: Factory):
        listing = await factory.listing()

        response = await _review(async_client, {}, "property", listing.id, 4)

        assert_error(response, status.HTTP_401_UNAUTHORIZED)


class TestManageReviews:
    """Editing, deleting and approval."""

    @pytest.mark.asyncio
    async def test_only_author_edits(
        self, async_client: AsyncClient, factory: Factory, user_headers, agent_headers, db_session
    ):
        listing = await factory.listing()
        review = assert_success(
            await _review(async_client, user_headers, "property", listing.id, 2), status.HTTP_201_CREATED
        )["data"]

        denied = await async_client.put(f"{API}/reviews/{review['id']}", headers=agent_headers, json={"rating": 5})
        assert_error(denied, status.HTTP_403_FORBIDDEN)

        updated = await async_client.put(f"{API}/reviews/{review['id']}", headers=user_headers, json={"rating": 4})
        assert assert_success(updated)["data"]["rating"] == 4
        await db_session.refresh(listing)
        assert float(listing.average_rating) == 4.0

    @pytest.mark.asyncio
    async def test_admin_deletes_any_review(
        self, async_client: AsyncClient, factory: Factory, user_headers, admin_headers, db_session
    ):
        listing = await factory.listing()
        review = assert_success(
            await _review(async_client, user_headers, "property", listing.id, 5), status.HTTP_201_CREATED
        )["data"]

        response = await async_client.delete(f"{API}/reviews/{review['id']}", headers=admin_headers)

        assert_success(response)
        await db_session.refresh(listing)
        assert listing.reviews_count == 0
        assert float(listing.average_rating) == 0

    @pytest.mark.asyncio
    async def test_unapprove_hides_review(
        self, async_client: AsyncClient, factory: Factory, user_headers, admin_headers
    ):
        listing = await factory.listing()
        review = assert_success(
            await _review(async_client, user_headers, "property", listing.id, 1), status.HTTP_201_CREATED
        )["data"]

        response = await async_client.post(f"{API}/reviews/{review['id']}/unapprove", headers=admin_headers)
        assert assert_success(response)["data"]["is_approved"] is False

        listed = await async_client.get(f"{API}/reviews/property/{listing.id}")
        body = assert_success(listed)
        assert body["data"] == []
        assert body["stats"] == {"reviews_count": 0, "average_rating": 0.0}

    @pytest.mark.asyncio
    async def test_user_cannot_approve(self, async_client: AsyncClient, factory: Factory, user_headers, db_session):
        listing = await factory.listing()
        review = assert_success(
            await _review(async_client, user_headers, "property", listing.id, 3), status.HTTP_201_CREATED
        )["data"]

        response = await async_client.post(f"{API}/reviews/{review['id']}/approve", headers=user_headers)

        assert_error(response, status.HTTP_403_FORBIDDEN)

    @pytest.mark.asyncio
    async def test_list_with_stats(self, async_client: AsyncClient, factory: Factory, admin_user: User, db_session):
        post = await factory.post(admin_user)
        reviewer = await factory.user(email="critic@example.com", name="Critic")
        db_session.add(Review(
            user_id=reviewer.id, reviewable_type="post", reviewable_id=post.id, rating=4, comment="Solid advice"
        ))
        await db_session.commit()

        response = await async_client.get(f"{API}/reviews/post/{post.id}")

        body = assert_success(response)
        assert [r["reviewer_name"] for r in body["data"]] == ["Critic"]
        assert body["stats"] == {"reviews_count": 1, "average_rating": 4.0}
        assert body["meta"]["total"] == 1
