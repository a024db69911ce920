"""
Property tour endpoints: public tour requests and their admin scheduling.
"""

from fastapi import APIRouter, Depends, Path, Query, status
from typing import Optional
from uuid import UUID

from app.config import settings
from app.models.property import TourStatus
from app.models.user import User
from app.services.tour import TourService
from app.schemas.property import TourRequestCreate, TourStatusUpdate, TourResponse
from app.schemas.common import APIResponse, PaginatedResponse, success_response, paginated_response
from app.schemas.error import get_crud_error_responses, get_auth_error_responses, get_error_responses
from app.utils.dependencies import get_service, require_admin


router = APIRouter(tags=["Tours"])

get_tour_service = get_service(TourService)


@router.post(
    "/tours",
    response_model=APIResponse[TourResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Request a tour",
    description="The date must be after today. Requests are linked to an existing account with the same email.",
    responses=get_error_responses(404, 422)
)
async def request_tour(
    tour_data: TourRequestCreate,
    tour_service: TourService = Depends(get_tour_service)
):
    tour = await tour_service.request_tour(tour_data)
    return success_response(
        tour,
        message="Tour request submitted successfully",
        code=status.HTTP_201_CREATED,
    )


@router.get(
    "/admin/tours",
    response_model=PaginatedResponse[TourResponse],
    summary="List tour requests",
    description="Agents only see tours of their own listings",
    responses=get_auth_error_responses()
)
async def list_tours(
    property_id: Optional[UUID] = Query(None),
    status_filter: Optional[TourStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.admin_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(require_admin("view properties")),
    tour_service: TourService = Depends(get_tour_service)
):
    tours, total = await tour_service.list_tours(
        current_user,
        property_id,
        status_filter.value if status_filter else None,
        page,
        per_page,
    )
    return paginated_response(tours, total, page, per_page, message="Tours retrieved successfully")


@router.put(
    "/admin/tours/{tour_id}/status",
    response_model=APIResponse[TourResponse],
    summary="Update tour status",
    responses=get_crud_error_responses()
)
async def update_tour_status(
    status_data: TourStatusUpdate,
    tour_id: UUID = Path(..., description="Tour ID"),
    current_user: User = Depends(require_admin("edit properties")),
    tour_service: TourService = Depends(get_tour_service)
):
    tour = await tour_service.update_status(tour_id, status_data.status, current_user)
    return success_response(tour, message="Tour status updated successfully")
