"""
Media library endpoints.
"""

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from typing import Optional
from uuid import UUID

from app.config import settings
from app.models.media import MediaType
from app.models.user import User
from app.services.media import MediaService
from app.schemas.media import MediaUpdate, MediaResponse
from app.schemas.common import APIResponse, PaginatedResponse, success_response, paginated_response
from app.schemas.error import get_crud_error_responses, get_auth_error_responses, get_error_responses
from app.utils.dependencies import get_service, require_admin


router = APIRouter(prefix="/admin/media", tags=["Media"])

get_media_service = get_service(MediaService)


@router.get(
    "",
    response_model=PaginatedResponse[MediaResponse],
    summary="List media",
    responses=get_auth_error_responses()
)
async def list_media(
    media_type: Optional[MediaType] = Query(None, alias="type"),
    search: Optional[str] = Query(None, max_length=255),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(require_admin("view media")),
    media_service: MediaService = Depends(get_media_service)
):
    items, total = await media_service.list_media(
        media_type.value if media_type else None, search, page, per_page
    )
    return paginated_response(items, total, page, per_page, message="Media retrieved successfully")


@router.post(
    "",
    response_model=APIResponse[MediaResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Upload media",
    description="Images are measured on upload; the media type is derived from the MIME type",
    responses={**get_crud_error_responses(), **get_error_responses(400)}
)
async def upload_media(
    file: UploadFile = File(..., description="File to upload"),
    name: Optional[str] = Form(None, max_length=255),
    alt_text: Optional[str] = Form(None, max_length=255),
    description: Optional[str] = Form(None, max_length=2000),
    current_user: User = Depends(require_admin("upload media")),
    media_service: MediaService = Depends(get_media_service)
):
    media = await media_service.upload(file, current_user, name, alt_text, description)
    return success_response(media, message="File uploaded successfully", code=status.HTTP_201_CREATED)


@router.get(
    "/{media_id}",
    response_model=APIResponse[MediaResponse],
    summary="Get media",
    responses=get_crud_error_responses()
)
async def get_media(
    media_id: UUID = Path(..., description="Media ID"),
    current_user: User = Depends(require_admin("view media")),
    media_service: MediaService = Depends(get_media_service)
):
    media = await media_service.get_media(media_id)
    return success_response(media, message="Media retrieved successfully")


@router.put(
    "/{media_id}",
    response_model=APIResponse[MediaResponse],
    summary="Update media details",
    responses=get_crud_error_responses()
)
async def update_media(
    media_data: MediaUpdate,
    media_id: UUID = Path(..., description="Media ID"),
    current_user: User = Depends(require_admin("edit media")),
    media_service: MediaService = Depends(get_media_service)
):
    media = await media_service.update_media(media_id, media_data)
    return success_response(media, message="Media updated successfully")


@router.delete(
    "/{media_id}",
    response_model=APIResponse[None],
    summary="Delete media",
    description="Removes the stored file; posts using it lose their featured image",
    responses=get_crud_error_responses()
)
async def delete_media(
    media_id: UUID = Path(..., description="Media ID"),
    current_user: User = Depends(require_admin("delete media")),
    media_service: MediaService = Depends(get_media_service)
):
    await media_service.delete_media(media_id)
    return success_response(message="Media deleted successfully")
