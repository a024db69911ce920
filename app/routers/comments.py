"""
Comment endpoints: public threads and submissions, and the moderation queue.
"""

from fastapi import APIRouter, Depends, Path, Query, Request, status
from typing import Optional
from uuid import UUID

from app.config import settings
from app.models.blog import CommentStatus
from app.models.user import User
from app.services.comment import CommentService
from app.schemas.comment import (
    CommentCreate,
    CommentUpdate,
    CommentBulkAction,
    CommentResponse,
    CommentAdminResponse,
    CommentThread,
    BulkActionResult,
)
from app.schemas.common import APIResponse, PaginatedResponse, success_response, paginated_response
from app.schemas.error import get_crud_error_responses, get_auth_error_responses, get_error_responses
from app.utils.dependencies import get_client_ip, get_optional_current_user, get_service, require_admin
from app.utils.exceptions import InsufficientPermissionsError


router = APIRouter(tags=["Comments"])

get_comment_service = get_service(CommentService)


@router.get(
    "/blog/posts/{slug}/comments",
    response_model=PaginatedResponse[CommentThread],
    summary="Comments on a post",
    description="Approved top-level comments, each with its approved replies",
    responses=get_error_responses(404)
)
async def list_post_comments(
    slug: str = Path(..., description="Post slug"),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    comment_service: CommentService = Depends(get_comment_service)
):
    threads, total = await comment_service.list_threads(slug, page, per_page)
    return paginated_response(threads, total, page, per_page, message="Comments retrieved successfully")


@router.post(
    "/blog/comments",
    response_model=APIResponse[CommentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Leave a comment",
    description="Guests must give a name and email. Comments are published after moderation.",
    responses=get_error_responses(403, 404, 422)
)
async def create_comment(
    request: Request,
    comment_data: CommentCreate,
    current_user: Optional[User] = Depends(get_optional_current_user),
    comment_service: CommentService = Depends(get_comment_service)
):
    comment = await comment_service.create_comment(
        comment_data,
        current_user,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return success_response(
        comment,
        message="Your comment has been submitted and is awaiting moderation",
        code=status.HTTP_201_CREATED,
    )


# Moderation

@router.get(
    "/admin/comments",
    response_model=PaginatedResponse[CommentAdminResponse],
    summary="List comments",
    responses=get_auth_error_responses()
)
async def list_comments(
    status_filter: Optional[CommentStatus] = Query(None, alias="status"),
    post_id: Optional[UUID] = Query(None),
    search: Optional[str] = Query(None, max_length=255),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(require_admin("view comments")),
    comment_service: CommentService = Depends(get_comment_service)
):
    comments, total = await comment_service.list_comments(
        status_filter.value if status_filter else None, post_id, search, page, per_page
    )
    return paginated_response(comments, total, page, per_page, message="Comments retrieved successfully")


@router.post(
    "/admin/comments/bulk",
    response_model=APIResponse[BulkActionResult],
    summary="Bulk moderation",
    description="Approve, reject, mark as spam or delete several comments. Unknown IDs are skipped.",
    responses=get_crud_error_responses()
)
async def bulk_comment_action(
    action_data: CommentBulkAction,
    current_user: User = Depends(require_admin("edit comments")),
    comment_service: CommentService = Depends(get_comment_service)
):
    if action_data.action == "delete" and not current_user.has_permission("delete comments"):
        raise InsufficientPermissionsError()
    affected = await comment_service.bulk_action(action_data.ids, action_data.action, current_user)
    return success_response(
        {"action": action_data.action, "affected": affected},
        message=f"{affected} comments updated successfully",
    )


@router.get(
    "/admin/comments/{comment_id}",
    response_model=APIResponse[CommentAdminResponse],
    summary="Get comment",
    responses=get_crud_error_responses()
)
async def get_comment(
    comment_id: UUID = Path(..., description="Comment ID"),
    current_user: User = Depends(require_admin("view comments")),
    comment_service: CommentService = Depends(get_comment_service)
):
    comment = await comment_service.get_comment(comment_id)
    return success_response(comment, message="Comment retrieved successfully")


@router.put(
    "/admin/comments/{comment_id}",
    response_model=APIResponse[CommentAdminResponse],
    summary="Edit comment",
    responses=get_crud_error_responses()
)
async def update_comment(
    comment_data: CommentUpdate,
    comment_id: UUID = Path(..., description="Comment ID"),
    current_user: User = Depends(require_admin("edit comments")),
    comment_service: CommentService = Depends(get_comment_service)
):
    comment = await comment_service.update_comment(comment_id, comment_data, current_user)
    return success_response(comment, message="Comment updated successfully")


def _status_route(path: str, comment_status: CommentStatus, summary: str, message: str) -> None:
    @router.post(
        f"/admin/comments/{{comment_id}}/{path}",
        response_model=APIResponse[CommentAdminResponse],
        summary=summary,
        responses=get_crud_error_responses()
    )
    async def set_comment_status(
        comment_id: UUID = Path(..., description="Comment ID"),
        current_user: User = Depends(require_admin("edit comments")),
        comment_service: CommentService = Depends(get_comment_service)
    ):
        comment = await comment_service.set_status(comment_id, comment_status, current_user)
        return success_response(comment, message=message)


_status_route("approve", CommentStatus.APPROVED, "Approve comment", "Comment approved successfully")
_status_route("reject", CommentStatus.REJECTED, "Reject comment", "Comment rejected successfully")
_status_route("spam", CommentStatus.SPAM, "Mark comment as spam", "Comment marked as spam")


@router.delete(
    "/admin/comments/{comment_id}",
    response_model=APIResponse[None],
    summary="Delete comment",
    description="Replies are deleted with the comment",
    responses=get_crud_error_responses()
)
async def delete_comment(
    comment_id: UUID = Path(..., description="Comment ID"),
    current_user: User = Depends(require_admin("delete comments")),
    comment_service: CommentService = Depends(get_comment_service)
):
    await comment_service.delete_comment(comment_id, current_user)
    return success_response(message="Comment deleted successfully")
