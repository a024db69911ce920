"""
Review endpoints for properties and blog posts.
"""

from fastapi import APIRouter, Depends, Path, Query, status
from uuid import UUID

from app.config import settings
from app.models.review import ReviewableType
from app.models.user import User
from app.services.review import ReviewService
from app.schemas.review import ReviewCreate, ReviewUpdate, ReviewResponse, ReviewListResponse
from app.schemas.common import APIResponse, success_response, paginated_response
from app.schemas.error import get_crud_error_responses, get_error_responses
from app.utils.dependencies import get_current_active_user, get_service, require_permission


router = APIRouter(prefix="/reviews", tags=["Reviews"])

get_review_service = get_service(ReviewService)


@router.get(
    "/{reviewable_type}/{reviewable_id}",
    response_model=ReviewListResponse,
    summary="Reviews of a property or post",
    description="Approved reviews only, newest first",
    responses=get_error_responses(404)
)
async def list_reviews(
    reviewable_type: ReviewableType = Path(..., description="property or post"),
    reviewable_id: UUID = Path(...),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    review_service: ReviewService = Depends(get_review_service)
):
    reviews, total = await review_service.list_reviews(reviewable_type, reviewable_id, page, per_page)
    stats = await review_service.stats(reviewable_type, reviewable_id)
    return paginated_response(
        reviews, total, page, per_page,
        message="Reviews retrieved successfully",
        stats=stats,
    )


@router.post(
    "",
    response_model=APIResponse[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Write a review",
    description="One review per user for each property or post",
    responses=get_crud_error_responses()
)
async def create_review(
    review_data: ReviewCreate,
    current_user: User = Depends(require_permission("create reviews")),
    review_service: ReviewService = Depends(get_review_service)
):
    review = await review_service.create_review(review_data, current_user)
    return success_response(review, message="Review submitted successfully", code=status.HTTP_201_CREATED)


@router.put(
    "/{review_id}",
    response_model=APIResponse[ReviewResponse],
    summary="Edit my review",
    responses=get_crud_error_responses()
)
async def update_review(
    review_data: ReviewUpdate,
    review_id: UUID = Path(..., description="Review ID"),
    current_user: User = Depends(get_current_active_user),
    review_service: ReviewService = Depends(get_review_service)
):
    review = await review_service.update_review(review_id, review_data, current_user)
    return success_response(review, message="Review updated successfully")


@router.delete(
    "/{review_id}",
    response_model=APIResponse[None],
    summary="Delete review",
    description="Authors may delete their own reviews; moderators need the delete reviews permission",
    responses=get_crud_error_responses()
)
async def delete_review(
    review_id: UUID = Path(..., description="Review ID"),
    current_user: User = Depends(get_current_active_user),
    review_service: ReviewService = Depends(get_review_service)
):
    await review_service.delete_review(review_id, current_user)
    return success_response(message="Review deleted successfully")


@router.post(
    "/{review_id}/approve",
    response_model=APIResponse[ReviewResponse],
    summary="Approve review",
    responses=get_crud_error_responses()
)
async def approve_review(
    review_id: UUID = Path(..., description="Review ID"),
    current_user: User = Depends(require_permission("edit reviews")),
    review_service: ReviewService = Depends(get_review_service)
):
    review = await review_service.set_approval(review_id, True)
    return success_response(review, message="Review approved successfully")


@router.post(
    "/{review_id}/unapprove",
    response_model=APIResponse[ReviewResponse],
    summary="Withdraw approval",
    responses=get_crud_error_responses()
)
async def unapprove_review(
    review_id: UUID = Path(..., description="Review ID"),
    current_user: User = Depends(require_permission("edit reviews")),
    review_service: ReviewService = Depends(get_review_service)
):
    review = await review_service.set_approval(review_id, False)
    return success_response(review, message="Review unapproved successfully")
