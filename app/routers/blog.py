"""
Blog endpoints: the public blog and the admin post editor.
"""

from fastapi import APIRouter, Depends, Path, Query, status
from typing import Optional
from uuid import UUID

from app.config import settings
from app.models.blog import PostStatus
from app.models.user import User
from app.services.blog import PostService
from app.schemas.blog import PostCreate, PostUpdate, PostSummary, PostResponse
from app.schemas.common import APIResponse, PaginatedResponse, success_response, paginated_response
from app.schemas.error import get_crud_error_responses, get_auth_error_responses, get_error_responses
from app.utils.dependencies import get_service, require_admin


router = APIRouter(tags=["Blog"])

get_post_service = get_service(PostService)


@router.get(
    "/blog/posts",
    response_model=PaginatedResponse[PostSummary],
    summary="Published posts",
    description="Sticky posts first, then newest. Filter by category or tag slug."
)
async def list_published_posts(
    search: Optional[str] = Query(None, max_length=255),
    category: Optional[str] = Query(None, description="Category slug"),
    tag: Optional[str] = Query(None, description="Tag slug"),
    featured: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    post_service: PostService = Depends(get_post_service)
):
    posts, total = await post_service.list_published(search, category, tag, featured, page, per_page)
    return paginated_response(posts, total, page, per_page, message="Posts retrieved successfully")


@router.get(
    "/blog/posts/{slug}",
    response_model=APIResponse[PostResponse],
    summary="Read a post",
    description="Each request counts as a view",
    responses=get_error_responses(404)
)
async def show_published_post(
    slug: str = Path(..., description="Post slug"),
    post_service: PostService = Depends(get_post_service)
):
    post = await post_service.show_published(slug)
    return success_response(post, message="Post retrieved successfully")


# Admin

@router.get(
    "/admin/posts",
    response_model=PaginatedResponse[PostSummary],
    summary="List posts",
    description="Search across title, content, excerpt and meta fields",
    responses=get_auth_error_responses()
)
async def list_posts(
    search: Optional[str] = Query(None, max_length=255),
    status_filter: Optional[PostStatus] = Query(None, alias="status"),
    category_id: Optional[UUID] = Query(None),
    author_id: Optional[UUID] = Query(None),
    featured: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(require_admin("view posts")),
    post_service: PostService = Depends(get_post_service)
):
    posts, total = await post_service.list_posts(
        search=search,
        status=status_filter.value if status_filter else None,
        category_id=category_id,
        author_id=author_id,
        featured=featured,
        page=page,
        per_page=per_page,
    )
    return paginated_response(posts, total, page, per_page, message="Posts retrieved successfully")


@router.post(
    "/admin/posts",
    response_model=APIResponse[PostResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
    description="The excerpt is derived from the content when omitted",
    responses=get_crud_error_responses()
)
async def create_post(
    post_data: PostCreate,
    current_user: User = Depends(require_admin("create posts")),
    post_service: PostService = Depends(get_post_service)
):
    post = await post_service.create_post(post_data, current_user)
    return success_response(post, message="Post created successfully", code=status.HTTP_201_CREATED)


@router.get(
    "/admin/posts/{post_id}",
    response_model=APIResponse[PostResponse],
    summary="Get post",
    responses=get_crud_error_responses()
)
async def get_post(
    post_id: UUID = Path(..., description="Post ID"),
    current_user: User = Depends(require_admin("view posts")),
    post_service: PostService = Depends(get_post_service)
):
    post = await post_service.get_post(post_id)
    return success_response(post, message="Post retrieved successfully")


@router.put(
    "/admin/posts/{post_id}",
    response_model=APIResponse[PostResponse],
    summary="Update post",
    description="A new title regenerates the slug; tag_ids replaces the tags",
    responses=get_crud_error_responses()
)
async def update_post(
    post_data: PostUpdate,
    post_id: UUID = Path(..., description="Post ID"),
    current_user: User = Depends(require_admin("edit posts")),
    post_service: PostService = Depends(get_post_service)
):
    post = await post_service.update_post(post_id, post_data, current_user)
    return success_response(post, message="Post updated successfully")


@router.delete(
    "/admin/posts/{post_id}",
    response_model=APIResponse[None],
    summary="Delete post",
    description="Comments and reviews of the post are deleted with it",
    responses=get_crud_error_responses()
)
async def delete_post(
    post_id: UUID = Path(..., description="Post ID"),
    current_user: User = Depends(require_admin("delete posts")),
    post_service: PostService = Depends(get_post_service)
):
    await post_service.delete_post(post_id, current_user)
    return success_response(message="Post deleted successfully")


@router.post(
    "/admin/posts/{post_id}/publish",
    response_model=APIResponse[PostResponse],
    summary="Publish post",
    responses=get_crud_error_responses()
)
async def publish_post(
    post_id: UUID = Path(..., description="Post ID"),
    current_user: User = Depends(require_admin("publish posts")),
    post_service: PostService = Depends(get_post_service)
):
    post = await post_service.publish(post_id)
    return success_response(post, message="Post published successfully")


@router.post(
    "/admin/posts/{post_id}/unpublish",
    response_model=APIResponse[PostResponse],
    summary="Unpublish post",
    description="Returns the post to draft",
    responses=get_crud_error_responses()
)
async def unpublish_post(
    post_id: UUID = Path(..., description="Post ID"),
    current_user: User = Depends(require_admin("publish posts")),
    post_service: PostService = Depends(get_post_service)
):
    post = await post_service.unpublish(post_id)
    return success_response(post, message="Post unpublished successfully")


@router.post(
    "/admin/posts/{post_id}/duplicate",
    response_model=APIResponse[PostResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Duplicate post",
    description="Creates a draft copy titled \"<title> (Copy)\"",
    responses=get_crud_error_responses()
)
async def duplicate_post(
    post_id: UUID = Path(..., description="Post ID"),
    current_user: User = Depends(require_admin("create posts")),
    post_service: PostService = Depends(get_post_service)
):
    post = await post_service.duplicate(post_id, current_user)
    return success_response(post, message="Post duplicated successfully", code=status.HTTP_201_CREATED)


@router.post(
    "/admin/posts/{post_id}/toggle-featured",
    response_model=APIResponse[PostResponse],
    summary="Toggle featured flag",
    responses=get_crud_error_responses()
)
async def toggle_featured_post(
    post_id: UUID = Path(..., description="Post ID"),
    current_user: User = Depends(require_admin("edit posts")),
    post_service: PostService = Depends(get_post_service)
):
    post = await post_service.toggle_featured(post_id)
    state = "featured" if post.is_featured else "unfeatured"
    return success_response(post, message=f"Post {state} successfully")
