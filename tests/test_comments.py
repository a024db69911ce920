"""
Tests for public commenting and comment moderation.
"""

import pytest
from fastapi import status
from httpx import AsyncClient

from app.models.blog import CommentStatus, PostStatus
from app.models.user import User
from tests.conftest import API, Factory, assert_success, assert_error


class TestPublicComments:
    """Comment threads and submission."""

    @pytest.mark.asyncio
    async def test_thread_shows_approved_only(self, async_client: AsyncClient, factory: Factory, admin_user: User):
        post = await factory.post(admin_user)
        top = await factory.comment(post, content="Top level")
        await factory.comment(post, content="Still waiting", status=CommentStatus.PENDING.value)
        await factory.comment(post, content="First reply", parent=top)
        await factory.comment(post, content="Hidden reply", parent=top, status=CommentStatus.SPAM.value)

        response = await async_client.get(f"{API}/blog/posts/{post.slug}/comments")

        body = assert_success(response)
        assert body["meta"]["total"] == 1
        thread = body["data"][0]
        assert thread["content"] == "Top level"
        assert [reply["content"] for reply in thread["replies"]] == ["First reply"]

    @pytest.mark.asyncio
    async def test_guest_comment_waits_for_moderation(self, async_client: AsyncClient, factory: Factory, admin_user: User):
        post = await factory.post(admin_user)

        response = await async_client.post(f"{API}/blog/comments", json={
            "post_id": str(post.id),
            "content": "Very helpful, thanks!",
            "author_name": "Guest",
            "author_email": "guest@example.com",
        })

        body = assert_success(response, status.HTTP_201_CREATED)
        assert body["message"] == "Your comment has been submitted and is awaiting moderation"
        assert body["data"]["status"] == "pending"
        assert body["data"]["display_name"] == "Guest"

    @pytest.mark.asyncio
    async def test_guest_needs_name_and_email(self, async_client: AsyncClient, factory: Factory, admin_user: User):
        post = await factory.post(admin_user)

        response = await async_client.post(f"{API}/blog/comments", json={
            "post_id": str(post.id),
            "content": "Anonymous thoughts",
        })

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert set(body["errors"]) == {"author_name", "author_email"}

    @pytest.mark.asyncio
    async def test_signed_in_user_comment(
        self, async_client: AsyncClient, factory: Factory, admin_user: User, regular_user: User, user_headers
    ):
        post = await factory.post(admin_user)

        response = await async_client.post(f"{API}/blog/comments", headers=user_headers, json={
            "post_id": str(post.id),
            "content": "Signed in comment",
        })

        data = assert_success(response, status.HTTP_201_CREATED)["data"]
        assert data["user_id"] == str(regular_user.id)
        assert data["display_name"] == regular_user.name

    @pytest.mark.asyncio
    async def test_closed_comments_forbidden(self, async_client: AsyncClient, factory: Factory, admin_user: User, user_headers):
        post = await factory.post(admin_user, allow_comments=False)

        response = await async_client.post(f"{API}/blog/comments", headers=user_headers, json={
            "post_id": str(post.id),
            "content": "Let me in",
        })

        assert_error(response, status.HTTP_403_FORBIDDEN)

    @pytest.mark.asyncio
    async def test_draft_post_forbidden(self, async_client: AsyncClient, factory: Factory, admin_user: User, user_headers):
        post = await factory.post(admin_user, status=PostStatus.DRAFT.value)

        response = await async_client.post(f"{API}/blog/comments", headers=user_headers, json={
            "post_id": str(post.id),
            "content": "Too early",
        })

        assert_error(response, status.HTTP_403_FORBIDDEN)

    @pytest.mark.asyncio
    async def test_reply_parent_on_other_post(self, async_client: AsyncClient, factory: Factory, admin_user: User, user_headers):
        post = await factory.post(admin_user)
        other_post = await factory.post(admin_user, title="Other")
        foreign = await factory.comment(other_post)

        response = await async_client.post(f"{API}/blog/comments", headers=user_headers, json={
            "post_id": str(post.id),
            "parent_id": str(foreign.id),
            "content": "Misplaced reply",
        })

        body = assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
        assert "parent_id" in body["errors"]


class TestModeration:
    """Approval keeps the counters in step."""

    @pytest.mark.asyncio
    async def test_approve_increments_counters(
        self, async_client: AsyncClient, factory: Factory, admin_user: User, moderator_user: User,
        moderator_headers, db_session
    ):
        post = await factory.post(admin_user)
        parent = await factory.comment(post)
        reply = await factory.comment(post, parent=parent, status=CommentStatus.PENDING.value)

        response = await async_client.post(f"{API}/admin/comments/{reply.id}/approve", headers=moderator_headers)

        data = assert_success(response)["data"]
        assert data["status"] == "approved"
        assert data["approved_by"] == str(moderator_user.id)
        await db_session.refresh(post)
        await db_session.refresh(parent)
        assert post.comments_count == 1
        assert parent.replies_count == 1

    @pytest.mark.asyncio
    async def test_reject_after_approve_decrements(
        self, async_client: AsyncClient, factory: Factory, admin_user: User, moderator_headers, db_session
    ):
        post = await factory.post(admin_user)
        comment = await factory.comment(post, status=CommentStatus.PENDING.value)

        await async_client.post(f"{API}/admin/comments/{comment.id}/approve", headers=moderator_headers)
        response = await async_client.post(f"{API}/admin/comments/{comment.id}/reject", headers=moderator_headers)

        data = assert_success(response)["data"]
        assert data["status"] == "rejected"
        assert data["approved_at"] is None
        await db_session.refresh(post)
        assert post.comments_count == 0

    @pytest.mark.asyncio
    async def test_list_filters_status(self, async_client: AsyncClient, factory: Factory, admin_user: User, moderator_headers):
        post = await factory.post(admin_user)
        await factory.comment(post)
        spam = await factory.comment(post, content="Buy now", status=CommentStatus.SPAM.value)

        response = await async_client.get(f"{API}/admin/comments", headers=moderator_headers, params={"status": "spam"})

        assert [c["id"] for c in assert_success(response)["data"]] == [str(spam.id)]

    @pytest.mark.asyncio
    async def test_edit_content(self, async_client: AsyncClient, factory: Factory, admin_user: User, moderator_headers):
        post = await factory.post(admin_user)
        comment = await factory.comment(post)

        response = await async_client.put(f"{API}/admin/comments/{comment.id}", headers=moderator_headers, json={
            "content": "  Edited text  ",
            "is_featured": True,
        })

        data = assert_success(response)["data"]
        assert data["content"] == "Edited text"
        assert data["is_featured"] is True

    @pytest.mark.asyncio
    async def test_delete_removes_replies(
        self, async_client: AsyncClient, factory: Factory, admin_user: User, moderator_headers, db_session
    ):
        post = await factory.post(admin_user, comments_count=2)
        parent = await factory.comment(post, replies_count=1)
        reply = await factory.comment(post, parent=parent)

        response = await async_client.delete(f"{API}/admin/comments/{parent.id}", headers=moderator_headers)
        assert_success(response)

        missing = await async_client.get(f"{API}/admin/comments/{reply.id}", headers=moderator_headers)
        assert_error(missing, status.HTTP_404_NOT_FOUND)
        await db_session.refresh(post)
        assert post.comments_count == 0

    @pytest.mark.asyncio
    async def test_bulk_approve_skips_unknown(
        self, async_client: AsyncClient, factory: Factory, admin_user: User, moderator_headers
    ):
        post = await factory.post(admin_user)
        first = await factory.comment(post, status=CommentStatus.PENDING.value)
        second = await factory.comment(post, status=CommentStatus.PENDING.value)

        response = await async_client.post(f"{API}/admin/comments/bulk", headers=moderator_headers, json={
            "ids": [str(first.id), str(second.id), "00000000-0000-0000-0000-000000000000"],
            "action": "approve",
        })

        body = assert_success(response)
        assert body["data"] == {"action": "approve", "affected": 2}

    @pytest.mark.asyncio
    async def test_agent_cannot_moderate(
        self, async_client: AsyncClient, factory: Factory, admin_user: User, agent_headers
    ):
        post = await factory.post(admin_user)
        comment = await factory.comment(post)

        response = await async_client.post(f"{API}/admin/comments/bulk", headers=agent_headers, json={
            "ids": [str(comment.id)],
            "action": "delete",
        })

        assert_error(response, status.HTTP_403_FORBIDDEN)

    @pytest.mark.asyncio
    async def test_bulk_rejects_unknown_action(self, async_client: AsyncClient, moderator_headers):
        response = await async_client.post(f"{API}/admin/comments/bulk", headers=moderator_headers, json={
            "ids": ["00000000-0000-0000-0000-000000000000"],
            "action": "archive",
        })

        assert_error(response, status.HTTP_422_UNPROCESSABLE_ENTITY)
