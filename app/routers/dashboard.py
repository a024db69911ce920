"""
Admin dashboard and public home page data.
"""

from fastapi import APIRouter, Depends
from typing import Optional

from app.models.user import User
from app.services.dashboard import DashboardService, HomeService
from app.schemas.dashboard import DashboardResponse, HomeResponse
from app.schemas.common import APIResponse, success_response
from app.schemas.error import get_auth_error_responses
from app.utils.dependencies import get_optional_current_user, get_service, require_admin


router = APIRouter(tags=["Dashboard"])

get_dashboard_service = get_service(DashboardService)
get_home_service = get_service(HomeService)


@router.get(
    "/admin/dashboard",
    response_model=APIResponse[DashboardResponse],
    summary="Dashboard overview",
    description="Content counts, this month's activity, a 12-month post series and pending comments",
    responses=get_auth_error_responses()
)
async def dashboard(
    current_user: User = Depends(require_admin("view dashboard")),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    overview = await dashboard_service.overview()
    return success_response(overview, message="Dashboard data retrieved successfully")


@router.get(
    "/home",
    response_model=APIResponse[HomeResponse],
    summary="Home page",
    description="Featured properties, recent rentals and the latest posts"
)
async def home(
    current_user: Optional[User] = Depends(get_optional_current_user),
    home_service: HomeService = Depends(get_home_service)
):
    content = await home_service.home(current_user)
    return success_response(content, message="Home content retrieved successfully")
