"""
Admin endpoints for user accounts, roles and permissions.
"""

from fastapi import APIRouter, Depends, Path, Query, status
from typing import List, Optional
from uuid import UUID

from app.config import settings
from app.models.user import User
from app.services.user import UserService, RoleService
from app.schemas.common import APIResponse, PaginatedResponse, success_response, paginated_response
from app.schemas.user import UserCreate, UserUpdate, UserResponse, AssignRolesRequest
from app.schemas.role import RoleCreate, RoleUpdate, RoleResponse, PermissionResponse
from app.schemas.error import get_crud_error_responses, get_auth_error_responses
from app.utils.dependencies import get_service, require_admin


router = APIRouter(prefix="/admin", tags=["Users and Roles"])

get_user_service = get_service(UserService)
get_role_service = get_service(RoleService)


@router.get(
    "/users",
    response_model=PaginatedResponse[UserResponse],
    summary="List users",
    description="Search by name or email and filter by role",
    responses=get_auth_error_responses()
)
async def list_users(
    search: Optional[str] = Query(None, max_length=255),
    role: Optional[str] = Query(None, description="Role name"),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(require_admin("view users")),
    user_service: UserService = Depends(get_user_service)
):
    users, total = await user_service.list_users(search, role, page, per_page)
    return paginated_response(users, total, page, per_page, message="Users retrieved successfully")


@router.post(
    "/users",
    response_model=APIResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    responses=get_crud_error_responses()
)
async def create_user(
    user_data: UserCreate,
    current_user: User = Depends(require_admin("create users")),
    user_service: UserService = Depends(get_user_service)
):
    user = await user_service.create_user(user_data)
    return success_response(user, message="User created successfully", code=status.HTTP_201_CREATED)


@router.get(
    "/users/{user_id}",
    response_model=APIResponse[UserResponse],
    summary="Get user",
    responses=get_crud_error_responses()
)
async def get_user(
    user_id: UUID = Path(..., description="User ID"),
    current_user: User = Depends(require_admin("view users")),
    user_service: UserService = Depends(get_user_service)
):
    user = await user_service.get_user(user_id)
    return success_response(user, message="User retrieved successfully")


@router.put(
    "/users/{user_id}",
    response_model=APIResponse[UserResponse],
    summary="Update user",
    responses=get_crud_error_responses()
)
async def update_user(
    user_data: UserUpdate,
    user_id: UUID = Path(..., description="User ID"),
    current_user: User = Depends(require_admin("edit users")),
    user_service: UserService = Depends(get_user_service)
):
    user = await user_service.update_user(user_id, user_data)
    return success_response(user, message="User updated successfully")


@router.delete(
    "/users/{user_id}",
    response_model=APIResponse[None],
    summary="Delete user",
    description="Admins cannot delete their own account",
    responses=get_crud_error_responses()
)
async def delete_user(
    user_id: UUID = Path(..., description="User ID"),
    current_user: User = Depends(require_admin("delete users")),
    user_service: UserService = Depends(get_user_service)
):
    await user_service.delete_user(user_id, current_user)
    return success_response(message="User deleted successfully")


@router.put(
    "/users/{user_id}/roles",
    response_model=APIResponse[UserResponse],
    summary="Assign roles",
    description="Replace the user's roles with the named roles",
    responses=get_crud_error_responses()
)
async def assign_roles(
    roles_data: AssignRolesRequest,
    user_id: UUID = Path(..., description="User ID"),
    current_user: User = Depends(require_admin("assign roles")),
    user_service: UserService = Depends(get_user_service)
):
    user = await user_service.assign_roles(user_id, roles_data.roles)
    return success_response(user, message="Roles assigned successfully")


# Roles and permissions

@router.get(
    "/roles",
    response_model=APIResponse[List[RoleResponse]],
    summary="List roles with their permissions",
    responses=get_auth_error_responses()
)
async def list_roles(
    current_user: User = Depends(require_admin("assign roles")),
    role_service: RoleService = Depends(get_role_service)
):
    roles = await role_service.list_roles()
    return success_response(roles, message="Roles retrieved successfully")


@router.get(
    "/permissions",
    response_model=APIResponse[List[PermissionResponse]],
    summary="List permissions",
    responses=get_auth_error_responses()
)
async def list_permissions(
    current_user: User = Depends(require_admin("assign roles")),
    role_service: RoleService = Depends(get_role_service)
):
    permissions = await role_service.list_permissions()
    return success_response(permissions, message="Permissions retrieved successfully")


@router.post(
    "/roles",
    response_model=APIResponse[RoleResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create role",
    responses=get_crud_error_responses()
)
async def create_role(
    role_data: RoleCreate,
    current_user: User = Depends(require_admin("assign roles")),
    role_service: RoleService = Depends(get_role_service)
):
    role = await role_service.create_role(role_data)
    return success_response(role, message="Role created successfully", code=status.HTTP_201_CREATED)


@router.get(
    "/roles/{role_id}",
    response_model=APIResponse[RoleResponse],
    summary="Get role",
    responses=get_crud_error_responses()
)
async def get_role(
    role_id: UUID = Path(..., description="Role ID"),
    current_user: User = Depends(require_admin("assign roles")),
    role_service: RoleService = Depends(get_role_service)
):
    role = await role_service.get_role(role_id)
    return success_response(role, message="Role retrieved successfully")


@router.put(
    "/roles/{role_id}",
    response_model=APIResponse[RoleResponse],
    summary="Update role",
    description="Rename a custom role and/or replace its permissions",
    responses=get_crud_error_responses()
)
async def update_role(
    role_data: RoleUpdate,
    role_id: UUID = Path(..., description="Role ID"),
    current_user: User = Depends(require_admin("assign roles")),
    role_service: RoleService = Depends(get_role_service)
):
    role = await role_service.update_role(role_id, role_data)
    return success_response(role, message="Role updated successfully")


@router.delete(
    "/roles/{role_id}",
    response_model=APIResponse[None],
    summary="Delete role",
    description="Built-in roles cannot be deleted",
    responses=get_crud_error_responses()
)
async def delete_role(
    role_id: UUID = Path(..., description="Role ID"),
    current_user: User = Depends(require_admin("assign roles")),
    role_service: RoleService = Depends(get_role_service)
):
    await role_service.delete_role(role_id)
    return success_response(message="Role deleted successfully")
