"""
SEO settings: admin management and public reads by group.
"""

from fastapi import APIRouter, Depends, Path
from typing import Any, Dict, List

from app.models.user import User
from app.services.seo import SeoService
from app.schemas.seo import SeoSettingUpsert, SeoSettingResponse
from app.schemas.common import APIResponse, success_response
from app.schemas.error import get_crud_error_responses, get_auth_error_responses
from app.utils.dependencies import get_service, require_admin


router = APIRouter(tags=["SEO"])

get_seo_service = get_service(SeoService)


@router.get(
    "/seo/{group}",
    response_model=APIResponse[Dict[str, Any]],
    summary="Public settings of a group",
    description="Active settings as key to typed value"
)
async def public_settings(
    group: str = Path(..., max_length=64, examples=["general"]),
    seo_service: SeoService = Depends(get_seo_service)
):
    values = await seo_service.public_group(group)
    return success_response(values, message="SEO settings retrieved successfully")


@router.get(
    "/admin/seo",
    response_model=APIResponse[Dict[str, List[SeoSettingResponse]]],
    summary="All settings by group",
    responses=get_auth_error_responses()
)
async def list_settings(
    current_user: User = Depends(require_admin("manage seo")),
    seo_service: SeoService = Depends(get_seo_service)
):
    grouped = await seo_service.list_grouped()
    return success_response(grouped, message="SEO settings retrieved successfully")


@router.put(
    "/admin/seo",
    response_model=APIResponse[SeoSettingResponse],
    summary="Create or update a setting",
    description="Settings are identified by key",
    responses=get_crud_error_responses()
)
async def upsert_setting(
    setting_data: SeoSettingUpsert,
    current_user: User = Depends(require_admin("manage seo")),
    seo_service: SeoService = Depends(get_seo_service)
):
    setting = await seo_service.upsert(setting_data)
    return success_response(setting, message="SEO setting saved successfully")


@router.delete(
    "/admin/seo/{key}",
    response_model=APIResponse[None],
    summary="Delete a setting",
    responses=get_crud_error_responses()
)
async def delete_setting(
    key: str = Path(..., max_length=255),
    current_user: User = Depends(require_admin("manage seo")),
    seo_service: SeoService = Depends(get_seo_service)
):
    await seo_service.delete(key)
    return success_response(message="SEO setting deleted successfully")
