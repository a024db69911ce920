"""
Agent endpoints: admin profile management and the public agent directory.
"""

from fastapi import APIRouter, Depends, Path, Query, status
from typing import Optional
from uuid import UUID

from app.config import settings
from app.models.user import User
from app.services.agent import AgentService
from app.schemas.agent import AgentCreate, AgentUpdate, AgentResponse, AgentDetailResponse
from app.schemas.common import APIResponse, PaginatedResponse, success_response, paginated_response
from app.schemas.error import get_crud_error_responses, get_auth_error_responses, get_error_responses
from app.utils.dependencies import get_service, require_admin


router = APIRouter(tags=["Agents"])

get_agent_service = get_service(AgentService)


@router.get(
    "/agents",
    response_model=PaginatedResponse[AgentResponse],
    summary="Public agent directory",
    description="Active agents ordered by name"
)
async def list_public_agents(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    agent_service: AgentService = Depends(get_agent_service)
):
    agents, total = await agent_service.list_active(page, per_page)
    return paginated_response(agents, total, page, per_page, message="Agents retrieved successfully")


@router.get(
    "/agents/{agent_id}",
    response_model=APIResponse[AgentDetailResponse],
    summary="Public agent profile",
    description="Includes the number of the agent's listings that are currently available",
    responses=get_error_responses(404)
)
async def show_public_agent(
    agent_id: UUID = Path(..., description="Agent ID"),
    agent_service: AgentService = Depends(get_agent_service)
):
    agent = await agent_service.get_agent(agent_id, active_only=True)
    available = await agent_service.available_properties_count(agent)
    detail = AgentDetailResponse.model_validate(agent).model_copy(
        update={"available_properties_count": available}
    )
    return success_response(detail, message="Agent retrieved successfully")


# Admin

@router.get(
    "/admin/agents",
    response_model=PaginatedResponse[AgentResponse],
    summary="List agents",
    description="Search by name, email or license number",
    responses=get_auth_error_responses()
)
async def list_agents(
    search: Optional[str] = Query(None, max_length=255),
    is_active: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.admin_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(require_admin("view agents")),
    agent_service: AgentService = Depends(get_agent_service)
):
    agents, total = await agent_service.list_agents(search, is_active, page, per_page)
    return paginated_response(agents, total, page, per_page, message="Agents retrieved successfully")


@router.post(
    "/admin/agents",
    response_model=APIResponse[AgentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create agent",
    responses=get_crud_error_responses()
)
async def create_agent(
    agent_data: AgentCreate,
    current_user: User = Depends(require_admin("create agents")),
    agent_service: AgentService = Depends(get_agent_service)
):
    agent = await agent_service.create_agent(agent_data)
    return success_response(agent, message="Agent created successfully", code=status.HTTP_201_CREATED)


@router.get(
    "/admin/agents/{agent_id}",
    response_model=APIResponse[AgentDetailResponse],
    summary="Get agent",
    responses=get_crud_error_responses()
)
async def get_agent(
    agent_id: UUID = Path(..., description="Agent ID"),
    current_user: User = Depends(require_admin("view agents")),
    agent_service: AgentService = Depends(get_agent_service)
):
    agent = await agent_service.get_agent(agent_id)
    available = await agent_service.available_properties_count(agent)
    detail = AgentDetailResponse.model_validate(agent).model_copy(
        update={"available_properties_count": available}
    )
    return success_response(detail, message="Agent retrieved successfully")


@router.put(
    "/admin/agents/{agent_id}",
    response_model=APIResponse[AgentResponse],
    summary="Update agent",
    responses=get_crud_error_responses()
)
async def update_agent(
    agent_data: AgentUpdate,
    agent_id: UUID = Path(..., description="Agent ID"),
    current_user: User = Depends(require_admin("edit agents")),
    agent_service: AgentService = Depends(get_agent_service)
):
    agent = await agent_service.update_agent(agent_id, agent_data)
    return success_response(agent, message="Agent updated successfully")


@router.delete(
    "/admin/agents/{agent_id}",
    response_model=APIResponse[None],
    summary="Delete agent",
    description="The agent's listings remain, unassigned",
    responses=get_crud_error_responses()
)
async def delete_agent(
    agent_id: UUID = Path(..., description="Agent ID"),
    current_user: User = Depends(require_admin("delete agents")),
    agent_service: AgentService = Depends(get_agent_service)
):
    await agent_service.delete_agent(agent_id)
    return success_response(message="Agent deleted successfully")
