"""
Comment service: public commenting on posts and the moderation queue.

Counters follow approval: a comment entering the approved state adds one to
the post's comments_count (and its parent's replies_count), leaving it
subtracts one.
"""

from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import utcnow
from app.repositories.blog import CommentRepository, PostRepository
from app.models.blog import Comment, CommentStatus
from app.models.user import User
from app.schemas.comment import CommentCreate, CommentUpdate, CommentResponse, CommentThread
from app.utils.exceptions import NotFoundError, ValidationError, ForbiddenError
import uuid
import logging

logger = logging.getLogger(__name__)

BULK_ACTION_STATUS = {
    "approve": CommentStatus.APPROVED,
    "reject": CommentStatus.REJECTED,
    "spam": CommentStatus.SPAM,
}


class CommentService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.comment_repo = CommentRepository(db_session)
        self.post_repo = PostRepository(db_session)

    async def get_comment(self, comment_id: uuid.UUID) -> Comment:
        comment = await self.comment_repo.get_by_id(comment_id)
        if not comment:
            raise NotFoundError("Comment", str(comment_id))
        return comment

    # Public

    async def create_comment(
        self,
        data: CommentCreate,
        current_user: Optional[User] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> Comment:
        """
        Leave a comment (or a reply) on a post. New comments wait for moderation.

        Raises:
            NotFoundError: If the post does not exist
            ForbiddenError: If the post is not published or has comments closed
            ValidationError: If a guest omits name or email, or the parent is on another post
        """
        post = await self.post_repo.get_by_id(data.post_id)
        if not post:
            raise NotFoundError("Post", str(data.post_id))
        if not post.is_published or not post.allow_comments:
            raise ForbiddenError("Comments are not allowed on this post.")

        errors = {}
        if current_user is None:
            if not data.author_name:
                errors["author_name"] = ["The author name field is required."]
            if not data.author_email:
                errors["author_email"] = ["The author email field is required."]

        if data.parent_id is not None:
            parent = await self.comment_repo.get_by_id(data.parent_id)
            if parent is None or parent.post_id != post.id:
                errors["parent_id"] = ["The selected parent comment is invalid."]

        if errors:
            raise ValidationError(field_errors=errors)

        comment = Comment(
            post_id=post.id,
            parent_id=data.parent_id,
            content=data.content,
            author_name=data.author_name or (current_user.name if current_user else None),
            author_email=data.author_email or (current_user.email if current_user else None),
            author_website=data.author_website,
            user_id=current_user.id if current_user else None,
            status=CommentStatus.PENDING.value,
            ip_address=ip_address,
            user_agent=(user_agent or "")[:500] or None,
        )
        created = await self.comment_repo.save(comment)
        logger.info(f"Comment {created.id} submitted on post {post.id}")
        return created

    async def list_threads(self, slug: str, page: int, per_page: int) -> Tuple[List[CommentThread], int]:
        """Approved top-level comments of a published post, each with its approved replies."""
        post = await self.post_repo.get_published_by_slug(slug)
        if not post:
            raise NotFoundError("Post", slug)

        comments, total = await self.comment_repo.approved_top_level(post.id, page, per_page)
        replies = await self.comment_repo.approved_replies([c.id for c in comments])

        threads = [
            CommentThread(
                **CommentResponse.model_validate(comment).model_dump(),
                replies=[CommentResponse.model_validate(r) for r in replies.get(comment.id, [])],
            )
            for comment in comments
        ]
        return threads, total

    # Moderation

    async def list_comments(
        self,
        status: Optional[str] = None,
        post_id: Optional[uuid.UUID] = None,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 15
    ) -> Tuple[List[Comment], int]:
        return await self.comment_repo.list_for_admin(status, post_id, search, page, per_page)

    async def _adjust_counters(self, comment: Comment, delta: int) -> None:
        post = await self.post_repo.get_by_id(comment.post_id)
        if post is not None:
            post.comments_count = max(0, post.comments_count + delta)
        if comment.parent_id is not None:
            parent = await self.comment_repo.get_by_id(comment.parent_id)
            if parent is not None:
                parent.replies_count = max(0, parent.replies_count + delta)

    async def _apply_status(self, comment: Comment, status: CommentStatus, moderator: User) -> None:
        """Set the status and keep counters in step. Caller commits."""
        was_approved = comment.is_approved
        comment.status = status.value

        if status == CommentStatus.APPROVED:
            comment.approved_at = utcnow()
            comment.approved_by = moderator.id
        else:
            comment.approved_at = None
            comment.approved_by = None

        if was_approved != comment.is_approved:
            await self._adjust_counters(comment, 1 if comment.is_approved else -1)

    async def set_status(self, comment_id: uuid.UUID, status: CommentStatus, moderator: User) -> Comment:
        comment = await self.get_comment(comment_id)
        await self._apply_status(comment, status, moderator)
        saved = await self.comment_repo.save(comment)
        logger.info(f"Comment {comment_id} marked {status.value} by {moderator.email}")
        return saved

    async def update_comment(self, comment_id: uuid.UUID, data: CommentUpdate, moderator: User) -> Comment:
        comment = await self.get_comment(comment_id)
        values = data.model_dump(exclude_unset=True)

        if values.get("content"):
            comment.content = values["content"].strip()
        if values.get("is_featured") is not None:
            comment.is_featured = values["is_featured"]
        if values.get("status") is not None:
            await self._apply_status(comment, values["status"], moderator)

        return await self.comment_repo.save(comment)

    async def _collect_thread(self, comment: Comment) -> List[Comment]:
        collected = [comment]
        for reply in await self.comment_repo.replies_of(comment.id):
            collected.extend(await self._collect_thread(reply))
        return collected

    async def _delete(self, comment: Comment) -> None:
        thread = await self._collect_thread(comment)
        approved = [c for c in thread if c.is_approved]

        if approved:
            post = await self.post_repo.get_by_id(comment.post_id)
            if post is not None:
                post.comments_count = max(0, post.comments_count - len(approved))
        if comment.is_approved and comment.parent_id is not None:
            parent = await self.comment_repo.get_by_id(comment.parent_id)
            if parent is not None:
                parent.replies_count = max(0, parent.replies_count - 1)

        await self.db.delete(comment)

    async def delete_comment(self, comment_id: uuid.UUID, moderator: User) -> None:
        """Delete a comment and its replies."""
        comment = await self.get_comment(comment_id)
        await self._delete(comment)
        await self.db.commit()
        logger.info(f"Comment {comment_id} deleted by {moderator.email}")

    async def bulk_action(self, ids: List[uuid.UUID], action: str, moderator: User) -> int:
        """
        Apply approve, reject, spam or delete to several comments.

        Returns:
            Number of comments affected; unknown ids are skipped
        """
        affected = 0
        for comment_id in dict.fromkeys(ids):
            comment = await self.comment_repo.get_by_id(comment_id)
            if comment is None:
                continue
            if action == "delete":
                await self._delete(comment)
                await self.db.flush()
            else:
                await self._apply_status(comment, BULK_ACTION_STATUS[action], moderator)
            affected += 1

        await self.db.commit()
        logger.info(f"Bulk {action} on {affected} comments by {moderator.email}")
        return affected
