"""
Team endpoints: teams, members and invitations.
Ownership and team-admin rules are enforced by TeamService.
"""

from fastapi import APIRouter, Depends, Path, status
from typing import List
from uuid import UUID

from app.models.user import User
from app.services.team import TeamService
from app.schemas.team import (
    TeamCreate,
    TeamUpdate,
    TeamMemberAdd,
    TeamMemberRoleUpdate,
    TeamInvitationCreate,
    TeamResponse,
    TeamDetailResponse,
    TeamMemberResponse,
    TeamInvitationResponse,
)
from app.schemas.common import APIResponse, success_response
from app.schemas.error import get_crud_error_responses, get_auth_error_responses
from app.utils.dependencies import get_current_active_user, get_service, require_permission


router = APIRouter(prefix="/teams", tags=["Teams"])

get_team_service = get_service(TeamService)


@router.get(
    "",
    response_model=APIResponse[List[TeamResponse]],
    summary="My teams",
    responses=get_auth_error_responses()
)
async def list_teams(
    current_user: User = Depends(require_permission("view teams")),
    team_service: TeamService = Depends(get_team_service)
):
    teams = await team_service.list_teams(current_user)
    return success_response(teams, message="Teams retrieved successfully")


@router.post(
    "",
    response_model=APIResponse[TeamDetailResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create team",
    description="The creator owns the team and switches to it",
    responses=get_crud_error_responses()
)
async def create_team(
    team_data: TeamCreate,
    current_user: User = Depends(require_permission("create teams")),
    team_service: TeamService = Depends(get_team_service)
):
    team = await team_service.create_team(team_data, current_user)
    return success_response(team, message="Team created successfully", code=status.HTTP_201_CREATED)


@router.post(
    "/invitations/{invitation_id}/accept",
    response_model=APIResponse[TeamDetailResponse],
    summary="Accept invitation",
    description="The invitation must be addressed to the signed-in user's email",
    responses=get_crud_error_responses()
)
async def accept_invitation(
    invitation_id: UUID = Path(..., description="Invitation ID"),
    current_user: User = Depends(get_current_active_user),
    team_service: TeamService = Depends(get_team_service)
):
    team = await team_service.accept_invitation(invitation_id, current_user)
    return success_response(team, message="Invitation accepted successfully")


@router.get(
    "/{team_id}",
    response_model=APIResponse[TeamDetailResponse],
    summary="Get team",
    description="Visible to team members only",
    responses=get_crud_error_responses()
)
async def get_team(
    team_id: UUID = Path(..., description="Team ID"),
    current_user: User = Depends(require_permission("view teams")),
    team_service: TeamService = Depends(get_team_service)
):
    team = await team_service.get_team(team_id, current_user)
    return success_response(team, message="Team retrieved successfully")


@router.put(
    "/{team_id}",
    response_model=APIResponse[TeamDetailResponse],
    summary="Update team",
    description="Owner or team admins only",
    responses=get_crud_error_responses()
)
async def update_team(
    team_data: TeamUpdate,
    team_id: UUID = Path(..., description="Team ID"),
    current_user: User = Depends(require_permission("edit teams")),
    team_service: TeamService = Depends(get_team_service)
):
    team = await team_service.update_team(team_id, team_data, current_user)
    return success_response(team, message="Team updated successfully")


@router.delete(
    "/{team_id}",
    response_model=APIResponse[None],
    summary="Delete team",
    description="Owner only. Personal teams cannot be deleted.",
    responses=get_crud_error_responses()
)
async def delete_team(
    team_id: UUID = Path(..., description="Team ID"),
    current_user: User = Depends(get_current_active_user),
    team_service: TeamService = Depends(get_team_service)
):
    await team_service.delete_team(team_id, current_user)
    return success_response(message="Team deleted successfully")


@router.post(
    "/{team_id}/switch",
    response_model=APIResponse[TeamResponse],
    summary="Switch current team",
    responses=get_crud_error_responses()
)
async def switch_team(
    team_id: UUID = Path(..., description="Team ID"),
    current_user: User = Depends(get_current_active_user),
    team_service: TeamService = Depends(get_team_service)
):
    team = await team_service.switch_team(team_id, current_user)
    return success_response(team, message="Switched team successfully")


@router.post(
    "/{team_id}/leave",
    response_model=APIResponse[None],
    summary="Leave team",
    description="The owner cannot leave",
    responses=get_crud_error_responses()
)
async def leave_team(
    team_id: UUID = Path(..., description="Team ID"),
    current_user: User = Depends(get_current_active_user),
    team_service: TeamService = Depends(get_team_service)
):
    await team_service.leave(team_id, current_user)
    return success_response(message="You have left the team")


# Members

@router.get(
    "/{team_id}/members",
    response_model=APIResponse[List[TeamMemberResponse]],
    summary="Team members",
    responses=get_crud_error_responses()
)
async def list_members(
    team_id: UUID = Path(..., description="Team ID"),
    current_user: User = Depends(require_permission("view teams")),
    team_service: TeamService = Depends(get_team_service)
):
    members = await team_service.list_members(team_id, current_user)
    return success_response(members, message="Team members retrieved successfully")


@router.post(
    "/{team_id}/members",
    response_model=APIResponse[TeamDetailResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add member",
    description="The user must already be registered",
    responses=get_crud_error_responses()
)
async def add_member(
    member_data: TeamMemberAdd,
    team_id: UUID = Path(..., description="Team ID"),
    current_user: User = Depends(require_permission("edit teams")),
    team_service: TeamService = Depends(get_team_service)
):
    team = await team_service.add_member(team_id, member_data, current_user)
    return success_response(team, message="Team member added successfully", code=status.HTTP_201_CREATED)


@router.put(
    "/{team_id}/members/{user_id}",
    response_model=APIResponse[TeamDetailResponse],
    summary="Change member role",
    responses=get_crud_error_responses()
)
async def update_member_role(
    role_data: TeamMemberRoleUpdate,
    team_id: UUID = Path(..., description="Team ID"),
    user_id: UUID = Path(..., description="Member's user ID"),
    current_user: User = Depends(require_permission("edit teams")),
    team_service: TeamService = Depends(get_team_service)
):
    team = await team_service.update_member_role(team_id, user_id, role_data.role, current_user)
    return success_response(team, message="Team member role updated successfully")


@router.delete(
    "/{team_id}/members/{user_id}",
    response_model=APIResponse[None],
    summary="Remove member",
    description="The owner cannot be removed",
    responses=get_crud_error_responses()
)
async def remove_member(
    team_id: UUID = Path(..., description="Team ID"),
    user_id: UUID = Path(..., description="Member's user ID"),
    current_user: User = Depends(require_permission("edit teams")),
    team_service: TeamService = Depends(get_team_service)
):
    await team_service.remove_member(team_id, user_id, current_user)
    return success_response(message="Team member removed successfully")


# Invitations

@router.get(
    "/{team_id}/invitations",
    response_model=APIResponse[List[TeamInvitationResponse]],
    summary="Pending invitations",
    responses=get_crud_error_responses()
)
async def list_invitations(
    team_id: UUID = Path(..., description="Team ID"),
    current_user: User = Depends(require_permission("view teams")),
    team_service: TeamService = Depends(get_team_service)
):
    invitations = await team_service.list_invitations(team_id, current_user)
    return success_response(invitations, message="Invitations retrieved successfully")


@router.post(
    "/{team_id}/invitations",
    response_model=APIResponse[TeamInvitationResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Invite by email",
    responses=get_crud_error_responses()
)
async def invite_member(
    invitation_data: TeamInvitationCreate,
    team_id: UUID = Path(..., description="Team ID"),
    current_user: User = Depends(require_permission("edit teams")),
    team_service: TeamService = Depends(get_team_service)
):
    invitation = await team_service.invite(team_id, invitation_data, current_user)
    return success_response(invitation, message="Invitation sent successfully", code=status.HTTP_201_CREATED)


@router.delete(
    "/{team_id}/invitations/{invitation_id}",
    response_model=APIResponse[None],
    summary="Cancel invitation",
    responses=get_crud_error_responses()
)
async def cancel_invitation(
    team_id: UUID = Path(..., description="Team ID"),
    invitation_id: UUID = Path(..., description="Invitation ID"),
    current_user: User = Depends(require_permission("edit teams")),
    team_service: TeamService = Depends(get_team_service)
):
    await team_service.cancel_invitation(team_id, invitation_id, current_user)
    return success_response(message="Invitation cancelled successfully")
