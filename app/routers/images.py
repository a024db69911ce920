"""
Property image API endpoints.
Handles image upload, listing, metadata updates, primary selection and deletion.
"""

from fastapi import APIRouter, Depends, File, Path, UploadFile, status
from typing import List
from uuid import UUID

from app.models.user import User
from app.services.image import ImageService
from app.services.property import PropertyService
from app.schemas.image import PropertyImageResponse, PropertyImageUpdate, ImageUploadResponse
from app.schemas.common import APIResponse, success_response
from app.schemas.error import get_crud_error_responses, get_error_responses
from app.utils.dependencies import get_property_service, get_service, require_admin


router = APIRouter(prefix="/admin/properties/{property_id}/images", tags=["Property Images"])

get_image_service = get_service(ImageService)


@router.post(
    "",
    response_model=APIResponse[ImageUploadResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Upload images",
    description=(
        "Upload JPEG, PNG or WebP files. Every file is validated before any is stored. "
        "The first image of a listing becomes its primary image."
    ),
    responses={**get_crud_error_responses(), **get_error_responses(400)}
)
async def upload_images(
    property_id: UUID = Path(..., description="Property ID"),
    images: List[UploadFile] = File(..., description="Image files to upload"),
    current_user: User = Depends(require_admin("manage property images")),
    property_service: PropertyService = Depends(get_property_service),
    image_service: ImageService = Depends(get_image_service)
):
    """
    Upload one or more images for a listing.

    Raises:
        NotFoundError: If the listing does not exist
        InsufficientPermissionsError: If an agent does not own the listing
        FileUploadError: If a file is missing, too large or not a valid image
    """
    property_obj = await property_service.get_managed_property(property_id, current_user)
    uploaded = await image_service.upload_images(property_obj, images)
    total_images = len(await image_service.list_images(property_obj.id))
    return success_response(
        {"uploaded": uploaded, "total_images": total_images},
        message=f"{len(uploaded)} images uploaded successfully",
        code=status.HTTP_201_CREATED,
    )


@router.get(
    "",
    response_model=APIResponse[List[PropertyImageResponse]],
    summary="List images",
    description="Gallery order, primary image first",
    responses=get_crud_error_responses()
)
async def list_images(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(require_admin("manage property images")),
    property_service: PropertyService = Depends(get_property_service),
    image_service: ImageService = Depends(get_image_service)
):
    property_obj = await property_service.get_managed_property(property_id, current_user)
    images = await image_service.list_images(property_obj.id)
    return success_response(images, message="Images retrieved successfully")


@router.put(
    "/{image_id}",
    response_model=APIResponse[PropertyImageResponse],
    summary="Update image metadata",
    responses=get_crud_error_responses()
)
async def update_image(
    image_data: PropertyImageUpdate,
    property_id: UUID = Path(..., description="Property ID"),
    image_id: UUID = Path(..., description="Image ID"),
    current_user: User = Depends(require_admin("manage property images")),
    property_service: PropertyService = Depends(get_property_service),
    image_service: ImageService = Depends(get_image_service)
):
    await property_service.get_managed_property(property_id, current_user)
    image = await image_service.update_image(property_id, image_id, image_data)
    return success_response(image, message="Image updated successfully")


@router.post(
    "/{image_id}/primary",
    response_model=APIResponse[PropertyImageResponse],
    summary="Set primary image",
    description="Clears the primary flag on the listing's other images",
    responses=get_crud_error_responses()
)
async def set_primary_image(
    property_id: UUID = Path(..., description="Property ID"),
    image_id: UUID = Path(..., description="Image ID"),
    current_user: User = Depends(require_admin("manage property images")),
    property_service: PropertyService = Depends(get_property_service),
    image_service: ImageService = Depends(get_image_service)
):
    await property_service.get_managed_property(property_id, current_user)
    image = await image_service.set_primary(property_id, image_id)
    return success_response(image, message="Primary image updated successfully")


@router.delete(
    "/{image_id}",
    response_model=APIResponse[None],
    summary="Delete image",
    description="Removes the file. When the primary image is deleted the next one is promoted.",
    responses=get_crud_error_responses()
)
async def delete_image(
    property_id: UUID = Path(..., description="Property ID"),
    image_id: UUID = Path(..., description="Image ID"),
    current_user: User = Depends(require_admin("manage property images")),
    property_service: PropertyService = Depends(get_property_service),
    image_service: ImageService = Depends(get_image_service)
):
    await property_service.get_managed_property(property_id, current_user)
    await image_service.delete_image(property_id, image_id)
    return success_response(message="Image deleted successfully")
