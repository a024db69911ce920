"""
Reference data endpoints: property types, locations, amenities, blog categories and tags.

Every resource gets the same admin CRUD and a public list of active entries,
so the routes are generated per resource.
"""

from fastapi import APIRouter, Depends, Path, Query, status
from pydantic import BaseModel
from typing import List, Optional, Type
from uuid import UUID

from app.config import settings
from app.models.user import User
from app.services.catalog import (
    CatalogService,
    PropertyTypeService,
    LocationService,
    AmenityService,
    CategoryService,
    TagService,
)
from app.schemas.catalog import (
    PropertyTypeCreate,
    PropertyTypeUpdate,
    PropertyTypeResponse,
    LocationCreate,
    LocationUpdate,
    LocationResponse,
    AmenityCreate,
    AmenityUpdate,
    AmenityResponse,
)
from app.schemas.blog import CategoryCreate, CategoryUpdate, CategoryResponse, TagCreate, TagUpdate, TagResponse
from app.schemas.common import APIResponse, PaginatedResponse, success_response, paginated_response
from app.schemas.error import get_crud_error_responses, get_auth_error_responses, get_error_responses
from app.utils.dependencies import get_service, require_admin


admin_router = APIRouter(prefix="/admin")
public_router = APIRouter()


def register_catalog_routes(
    service_class: Type[CatalogService],
    resource: str,
    admin_path: str,
    public_path: str,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
    tag: str,
) -> None:
    """
    Add admin CRUD and the public list for one reference resource.

    Args:
        service_class: CatalogService subclass for the resource
        resource: Permission noun, e.g. "property types"
        admin_path: Path under /admin
        public_path: Public list path
    """
    get_catalog_service = get_service(service_class)
    label = service_class.label

    @admin_router.get(
        admin_path,
        response_model=PaginatedResponse[response_schema],
        summary=f"List {resource}",
        description="Ordered by sort order, then name",
        tags=[tag],
        responses=get_auth_error_responses()
    )
    async def list_entries(
        search: Optional[str] = Query(None, max_length=255),
        is_active: Optional[bool] = Query(None),
        page: int = Query(1, ge=1),
        per_page: int = Query(settings.admin_page_size, ge=1, le=settings.max_page_size),
        current_user: User = Depends(require_admin(f"view {resource}")),
        service: CatalogService = Depends(get_catalog_service)
    ):
        entries, total = await service.list_entries(search, is_active, page, per_page)
        return paginated_response(entries, total, page, per_page, message=f"{label} list retrieved successfully")

    @admin_router.post(
        admin_path,
        response_model=APIResponse[response_schema],
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {label.lower()}",
        tags=[tag],
        responses=get_crud_error_responses()
    )
    async def create_entry(
        data: create_schema,
        current_user: User = Depends(require_admin(f"create {resource}")),
        service: CatalogService = Depends(get_catalog_service)
    ):
        entry = await service.create_entry(data)
        return success_response(entry, message=f"{label} created successfully", code=status.HTTP_201_CREATED)

    @admin_router.get(
        f"{admin_path}/{{entry_id}}",
        response_model=APIResponse[response_schema],
        summary=f"Get {label.lower()}",
        tags=[tag],
        responses=get_crud_error_responses()
    )
    async def get_entry(
        entry_id: UUID = Path(...),
        current_user: User = Depends(require_admin(f"view {resource}")),
        service: CatalogService = Depends(get_catalog_service)
    ):
        entry = await service.get_entry(entry_id)
        return success_response(entry, message=f"{label} retrieved successfully")

    @admin_router.put(
        f"{admin_path}/{{entry_id}}",
        response_model=APIResponse[response_schema],
        summary=f"Update {label.lower()}",
        description="Renaming regenerates the slug",
        tags=[tag],
        responses=get_crud_error_responses()
    )
    async def update_entry(
        data: update_schema,
        entry_id: UUID = Path(...),
        current_user: User = Depends(require_admin(f"edit {resource}")),
        service: CatalogService = Depends(get_catalog_service)
    ):
        entry = await service.update_entry(entry_id, data)
        return success_response(entry, message=f"{label} updated successfully")

    @admin_router.delete(
        f"{admin_path}/{{entry_id}}",
        response_model=APIResponse[None],
        summary=f"Delete {label.lower()}",
        tags=[tag],
        responses={**get_crud_error_responses(), **get_error_responses(409)}
    )
    async def delete_entry(
        entry_id: UUID = Path(...),
        current_user: User = Depends(require_admin(f"delete {resource}")),
        service: CatalogService = Depends(get_catalog_service)
    ):
        await service.delete_entry(entry_id)
        return success_response(message=f"{label} deleted successfully")

    @public_router.get(
        public_path,
        response_model=APIResponse[List[response_schema]],
        summary=f"Active {resource}",
        tags=[tag]
    )
    async def list_active(service: CatalogService = Depends(get_catalog_service)):
        entries = await service.list_active()
        return success_response(entries, message=f"{label} list retrieved successfully")


register_catalog_routes(
    PropertyTypeService, "property types", "/property-types", "/property-types",
    PropertyTypeCreate, PropertyTypeUpdate, PropertyTypeResponse, "Property Types",
)
register_catalog_routes(
    LocationService, "locations", "/locations", "/locations",
    LocationCreate, LocationUpdate, LocationResponse, "Locations",
)
register_catalog_routes(
    AmenityService, "amenities", "/amenities", "/amenities",
    AmenityCreate, AmenityUpdate, AmenityResponse, "Amenities",
)
register_catalog_routes(
    CategoryService, "categories", "/categories", "/blog/categories",
    CategoryCreate, CategoryUpdate, CategoryResponse, "Blog",
)
register_catalog_routes(
    TagService, "tags", "/tags", "/blog/tags",
    TagCreate, TagUpdate, TagResponse, "Blog",
)
