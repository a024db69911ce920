"""
Blog post service: admin authoring, publishing workflow and the public blog.
"""

from typing import Optional, List, Dict, Any, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import utcnow
from app.repositories.base import BaseRepository
from app.repositories.blog import PostRepository
from app.repositories.review import ReviewRepository
from app.models.blog import Post, PostStatus, Category, Tag
from app.models.media import Media
from app.models.review import ReviewableType
from app.models.user import User
from app.schemas.blog import PostCreate, PostUpdate, check_schedule
from app.utils.validators import ValidationUtils
from app.utils.exceptions import APIException, NotFoundError, ValidationError, BadRequestError
import uuid
import logging

logger = logging.getLogger(__name__)


class PostService:
    """Blog posts for the admin area and the public blog."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.post_repo = PostRepository(db_session)
        self.review_repo = ReviewRepository(db_session)
        self.category_repo = BaseRepository(Category, db_session)
        self.tag_repo = BaseRepository(Tag, db_session)
        self.media_repo = BaseRepository(Media, db_session)

    async def get_post(self, post_id: uuid.UUID) -> Post:
        post = await self.post_repo.get_by_id(post_id)
        if not post:
            raise NotFoundError("Post", str(post_id))
        return post

    async def list_posts(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        category_id: Optional[uuid.UUID] = None,
        author_id: Optional[uuid.UUID] = None,
        featured: Optional[bool] = None,
        page: int = 1,
        per_page: int = 15
    ) -> Tuple[List[Post], int]:
        return await self.post_repo.list_for_admin(
            search=search,
            status=status,
            category_id=category_id,
            author_id=author_id,
            featured=featured,
            page=page,
            per_page=per_page,
        )

    async def _validate_references(self, values: Dict[str, Any], tag_ids: Optional[List[uuid.UUID]]) -> None:
        errors: Dict[str, List[str]] = {}

        if values.get("category_id") is not None and not await self.category_repo.exists(values["category_id"]):
            errors["category_id"] = ["The selected category is invalid."]
        if values.get("featured_image_id") is not None and not await self.media_repo.exists(values["featured_image_id"]):
            errors["featured_image_id"] = ["The selected featured image is invalid."]
        if tag_ids:
            found = await self.tag_repo.get_many_by_ids(list(set(tag_ids)))
            if len(found) != len(set(tag_ids)):
                errors["tag_ids"] = ["One or more selected tags are invalid."]

        if errors:
            raise ValidationError(field_errors=errors)

    def _column_values(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return {key: getattr(value, "value", value) for key, value in values.items()}

    async def create_post(self, post_data: PostCreate, current_user: User) -> Post:
        """
        Create a post authored by the current user.

        The excerpt falls back to the start of the content. Publishing on
        creation stamps published_at.

        Raises:
            ValidationError: If the category, featured image or a tag does not exist
        """
        values = post_data.model_dump()
        tag_ids = values.pop("tag_ids", [])
        await self._validate_references(values, tag_ids)

        try:
            post = Post(**self._column_values(values))
            post.user_id = current_user.id
            post.excerpt = values.get("excerpt") or ValidationUtils.make_excerpt(values["content"])
            post.slug = await self.post_repo.unique_slug(values["title"])
            if post.status == PostStatus.PUBLISHED.value:
                post.published_at = utcnow()
            post.tags = await self.tag_repo.get_many_by_ids(tag_ids)

            created = await self.post_repo.save(post)
            logger.info(f"Post created by {current_user.email}: {created.title} (ID: {created.id})")
            return created

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create post for user {current_user.id}: {e}")
            raise BadRequestError(f"Failed to create post: {str(e)}")

    async def update_post(self, post_id: uuid.UUID, post_data: PostUpdate, current_user: User) -> Post:
        """A new title regenerates the slug; tag_ids replaces the tags."""
        post = await self.get_post(post_id)

        values = post_data.model_dump(exclude_unset=True)
        tag_ids = values.pop("tag_ids", None)
        for required in ("title", "content", "status"):
            if required in values and values[required] is None:
                values.pop(required)

        await self._validate_references(values, tag_ids)

        if "title" in values and values["title"] != post.title:
            values["slug"] = await self.post_repo.unique_slug(values["title"], exclude_id=post.id)

        if "excerpt" in values and not values["excerpt"]:
            values["excerpt"] = ValidationUtils.make_excerpt(values.get("content") or post.content)

        status = values.get("status")
        if status is not None:
            status = status.value
            if status == PostStatus.PUBLISHED.value and post.published_at is None:
                values["published_at"] = utcnow()
            elif status == PostStatus.DRAFT.value:
                values["published_at"] = None

        if (status or post.status) == PostStatus.SCHEDULED.value:
            scheduled_at = values["scheduled_at"] if "scheduled_at" in values else post.scheduled_at
            try:
                check_schedule(PostStatus.SCHEDULED, scheduled_at)
            except ValueError as e:
                raise ValidationError.for_field("scheduled_at", str(e))
        else:
            values["scheduled_at"] = None

        if tag_ids is not None:
            post.tags = await self.tag_repo.get_many_by_ids(tag_ids)

        updated = await self.post_repo.update(post, self._column_values(values))
        logger.info(f"Post {post_id} updated by {current_user.email}")
        return updated

    async def delete_post(self, post_id: uuid.UUID, current_user: User) -> None:
        """Delete a post with its comments and reviews."""
        post = await self.get_post(post_id)
        await self.review_repo.delete_for_target(ReviewableType.POST.value, post.id)
        await self.post_repo.delete(post)
        logger.info(f"Post {post_id} deleted by {current_user.email}")

    async def publish(self, post_id: uuid.UUID) -> Post:
        post = await self.get_post(post_id)
        updated = await self.post_repo.update(post, {
            "status": PostStatus.PUBLISHED.value,
            "published_at": utcnow(),
            "scheduled_at": None,
        })
        logger.info(f"Post {post_id} published")
        return updated

    async def unpublish(self, post_id: uuid.UUID) -> Post:
        post = await self.get_post(post_id)
        updated = await self.post_repo.update(post, {
            "status": PostStatus.DRAFT.value,
            "published_at": None,
        })
        logger.info(f"Post {post_id} unpublished")
        return updated

    async def duplicate(self, post_id: uuid.UUID, current_user: User) -> Post:
        """Copy a post as a draft owned by the current user, keeping its tags."""
        source = await self.get_post(post_id)
        title = f"{source.title} (Copy)"

        copy = Post(
            title=title,
            slug=await self.post_repo.unique_slug(title),
            excerpt=source.excerpt,
            content=source.content,
            meta_title=source.meta_title,
            meta_description=source.meta_description,
            meta_keywords=source.meta_keywords,
            status=PostStatus.DRAFT.value,
            is_featured=False,
            allow_comments=source.allow_comments,
            is_sticky=False,
            sort_order=source.sort_order,
            user_id=current_user.id,
            category_id=source.category_id,
            featured_image_id=source.featured_image_id,
        )
        copy.tags = list(source.tags)

        created = await self.post_repo.save(copy)
        logger.info(f"Post {post_id} duplicated as {created.id}")
        return created

    async def toggle_featured(self, post_id: uuid.UUID) -> Post:
        post = await self.get_post(post_id)
        return await self.post_repo.update(post, {"is_featured": not post.is_featured})

    # Public blog

    async def list_published(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        featured: Optional[bool] = None,
        page: int = 1,
        per_page: int = 15
    ) -> Tuple[List[Post], int]:
        return await self.post_repo.list_published(
            search=search,
            category_slug=category,
            tag_slug=tag,
            featured=featured,
            page=page,
            per_page=per_page,
        )

    async def get_published(self, slug: str) -> Post:
        post = await self.post_repo.get_published_by_slug(slug)
        if not post:
            raise NotFoundError("Post", slug)
        return post

    async def show_published(self, slug: str) -> Post:
        """Public post page; each view increments views_count."""
        post = await self.get_published(slug)
        return await self.post_repo.update(post, {"views_count": post.views_count + 1})

    async def latest(self, limit: int = 3) -> List[Post]:
        return await self.post_repo.latest_published(limit)
