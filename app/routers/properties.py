"""
Property API endpoints: public search and detail pages, favorites, and the
admin listing management area.
"""

from decimal import Decimal
from fastapi import APIRouter, Depends, Path, Query, Request, status
from typing import Dict, Optional
from uuid import UUID

from app.config import settings
from app.models.property import ListingType, PropertyStatus
from app.models.user import User
from app.services.property import PropertyService
from app.services.favorite import FavoriteService
from app.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertySummary,
    PropertySearchFilters,
    PropertyViewStats,
    BulkDeleteRequest,
    FavoriteToggleRequest,
    FavoriteToggleResponse,
    FavoriteResponse,
)
from app.schemas.dashboard import FeaturedPropertiesResponse
from app.schemas.common import APIResponse, PaginatedResponse, success_response, paginated_response
from app.schemas.error import get_crud_error_responses, get_auth_error_responses, get_error_responses
from app.utils.dependencies import (
    get_client_ip,
    get_optional_current_user,
    get_property_service,
    get_service,
    require_admin,
    require_permission,
)


router = APIRouter(tags=["Properties"])

get_favorite_service = get_service(FavoriteService)


@router.get(
    "/properties",
    response_model=PaginatedResponse[PropertySummary],
    summary="Search available properties",
    description="Only available listings are returned. Signed-in users get is_favorited on each item.",
    responses=get_error_responses(422)
)
async def search_properties(
    keyword: Optional[str] = Query(None, max_length=255, description="Matches title, description and address"),
    property_type_id: Optional[UUID] = Query(None),
    location_id: Optional[UUID] = Query(None),
    listing_type: Optional[ListingType] = Query(None, description="sale or rent"),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    bedrooms: Optional[int] = Query(None, ge=0, description="Minimum bedrooms"),
    bathrooms: Optional[int] = Query(None, ge=0, description="Minimum bathrooms"),
    featured: Optional[bool] = Query(None),
    sort: str = Query("latest", pattern="^(latest|price_asc|price_desc)$"),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
):
    filters = PropertySearchFilters(
        keyword=keyword,
        property_type_id=property_type_id,
        location_id=location_id,
        listing_type=listing_type,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        featured=featured,
        sort=sort,
    )
    properties, total = await property_service.search(filters, page, per_page, current_user)
    return paginated_response(properties, total, page, per_page, message="Properties retrieved successfully")


@router.get(
    "/properties/featured",
    response_model=FeaturedPropertiesResponse,
    summary="Featured properties",
    description="Newest available featured listings with the total number of featured listings"
)
async def featured_properties(
    limit: int = Query(6, ge=1, le=24),
    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
):
    properties, total = await property_service.featured(limit, current_user)
    return success_response(
        properties,
        message="Featured properties retrieved successfully",
        total_count=total,
    )


@router.get(
    "/properties/{identifier}",
    response_model=APIResponse[PropertyResponse],
    summary="Property details",
    description="Look up by ID or slug. Records a view and increments the view counter.",
    responses=get_error_responses(404)
)
async def show_property(
    request: Request,
    identifier: str = Path(..., description="Property ID or slug"),
    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
):
    property_obj = await property_service.show_public(identifier, current_user, get_client_ip(request))
    return success_response(property_obj, message="Property retrieved successfully")


# Favorites

@router.post(
    "/properties/{property_id}/favorite",
    response_model=APIResponse[FavoriteToggleResponse],
    summary="Toggle favorite",
    description="Adds the listing to the user's favorites, or removes it when already saved",
    tags=["Favorites"],
    responses=get_crud_error_responses()
)
async def toggle_favorite(
    toggle_data: Optional[FavoriteToggleRequest] = None,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(require_permission("create favorites")),
    favorite_service: FavoriteService = Depends(get_favorite_service)
):
    notes = toggle_data.notes if toggle_data else None
    is_favorited, favorites_count = await favorite_service.toggle(property_id, current_user, notes)
    message = "Property added to favorites" if is_favorited else "Property removed from favorites"
    return success_response(
        {"is_favorited": is_favorited, "favorites_count": favorites_count},
        message=message,
    )


@router.get(
    "/favorites",
    response_model=PaginatedResponse[FavoriteResponse],
    summary="My favorites",
    tags=["Favorites"],
    responses=get_auth_error_responses()
)
async def list_favorites(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(require_permission("view favorites")),
    favorite_service: FavoriteService = Depends(get_favorite_service)
):
    favorites, total = await favorite_service.list_for_user(current_user, page, per_page)
    return paginated_response(favorites, total, page, per_page, message="Favorites retrieved successfully")


# Admin

@router.get(
    "/admin/properties",
    response_model=PaginatedResponse[PropertySummary],
    summary="List properties",
    description="Latest first. Agents only see their own listings.",
    responses=get_auth_error_responses()
)
async def list_properties(
    search: Optional[str] = Query(None, max_length=255, description="Matches title and address"),
    status_filter: Optional[PropertyStatus] = Query(None, alias="status"),
    listing_type: Optional[ListingType] = Query(None),
    property_type_id: Optional[UUID] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.admin_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(require_admin("view properties")),
    property_service: PropertyService = Depends(get_property_service)
):
    properties, total = await property_service.list_for_admin(
        current_user,
        search=search,
        status=status_filter.value if status_filter else None,
        listing_type=listing_type.value if listing_type else None,
        property_type_id=property_type_id,
        page=page,
        per_page=per_page,
    )
    return paginated_response(properties, total, page, per_page, message="Properties retrieved successfully")


@router.post(
    "/admin/properties",
    response_model=APIResponse[PropertyResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create property",
    description="Agents without an explicit agent_id are assigned their own agent profile",
    responses=get_crud_error_responses()
)
async def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(require_admin("create properties")),
    property_service: PropertyService = Depends(get_property_service)
):
    property_obj = await property_service.create_property(property_data, current_user)
    return success_response(property_obj, message="Property created successfully", code=status.HTTP_201_CREATED)


@router.post(
    "/admin/properties/bulk-delete",
    response_model=APIResponse[Dict[str, int]],
    summary="Delete several properties",
    description="Unknown IDs are skipped. Nothing is deleted if any listing cannot be managed by the user.",
    responses=get_crud_error_responses()
)
async def bulk_delete_properties(
    delete_data: BulkDeleteRequest,
    current_user: User = Depends(require_admin("delete properties")),
    property_service: PropertyService = Depends(get_property_service)
):
    deleted = await property_service.bulk_delete(delete_data.ids, current_user)
    return success_response({"deleted_count": deleted}, message=f"{deleted} properties deleted successfully")


@router.get(
    "/admin/properties/{property_id}",
    response_model=APIResponse[PropertyResponse],
    summary="Get property",
    responses=get_crud_error_responses()
)
async def get_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(require_admin("view properties")),
    property_service: PropertyService = Depends(get_property_service)
):
    property_obj = await property_service.get_managed_property(property_id, current_user)
    return success_response(property_obj, message="Property retrieved successfully")


@router.put(
    "/admin/properties/{property_id}",
    response_model=APIResponse[PropertyResponse],
    summary="Update property",
    description="A new title regenerates the slug; amenity_ids replaces the amenities",
    responses=get_crud_error_responses()
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(require_admin("edit properties")),
    property_service: PropertyService = Depends(get_property_service)
):
    property_obj = await property_service.update_property(property_id, property_data, current_user)
    return success_response(property_obj, message="Property updated successfully")


@router.delete(
    "/admin/properties/{property_id}",
    response_model=APIResponse[None],
    summary="Delete property",
    description="Removes the listing with its images and their files",
    responses=get_crud_error_responses()
)
async def delete_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(require_admin("delete properties")),
    property_service: PropertyService = Depends(get_property_service)
):
    await property_service.delete_property(property_id, current_user)
    return success_response(message="Property deleted successfully")


@router.get(
    "/admin/properties/{property_id}/stats",
    response_model=APIResponse[PropertyViewStats],
    summary="View statistics",
    description="Daily views over the last 30 days, oldest first",
    responses=get_crud_error_responses()
)
async def property_stats(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(require_admin("view properties")),
    property_service: PropertyService = Depends(get_property_service)
):
    stats = await property_service.view_stats(property_id, current_user)
    return success_response(stats, message="Property statistics retrieved successfully")
