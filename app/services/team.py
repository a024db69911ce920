"""
Team service: teams, members and invitations.

Owners and team admins manage a team; any member may view it.
"""

from datetime import timedelta
from typing import List
from sqlalchemy import update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import utcnow
from app.repositories.team import TeamRepository
from app.repositories.user import UserRepository
from app.models.team import Team, TeamMembership, TeamInvitation, TeamRole
from app.models.user import User
from app.schemas.team import (
    TeamCreate,
    TeamUpdate,
    TeamMemberAdd,
    TeamInvitationCreate,
)
from app.utils.exceptions import NotFoundError, ValidationError, ForbiddenError
import uuid
import logging

logger = logging.getLogger(__name__)

INVITATION_WINDOW = timedelta(days=7)


class TeamService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.team_repo = TeamRepository(db_session)
        self.user_repo = UserRepository(db_session)

    async def _find(self, team_id: uuid.UUID) -> Team:
        team = await self.team_repo.get_by_id(team_id)
        if not team:
            raise NotFoundError("Team", str(team_id))
        return team

    async def get_team(self, team_id: uuid.UUID, current_user: User) -> Team:
        """A team visible to its members only."""
        team = await self._find(team_id)
        if not team.has_user(current_user):
            raise ForbiddenError()
        return team

    async def get_managed_team(self, team_id: uuid.UUID, current_user: User) -> Team:
        team = await self._find(team_id)
        if not team.can_manage(current_user):
            raise ForbiddenError()
        return team

    async def list_teams(self, current_user: User) -> List[Team]:
        return await self.team_repo.teams_for_user(current_user.id)

    async def create_team(self, data: TeamCreate, current_user: User) -> Team:
        """The creator owns the new team and switches to it."""
        team = Team(
            user_id=current_user.id,
            name=data.name,
            personal_team=False,
            timezone=data.timezone,
            language=data.language,
        )
        self.db.add(team)
        await self.db.flush()
        current_user.current_team_id = team.id

        created = await self.team_repo.save(team)
        logger.info(f"Team {created.id} created by {current_user.email}")
        return created

    async def update_team(self, team_id: uuid.UUID, data: TeamUpdate, current_user: User) -> Team:
        team = await self.get_managed_team(team_id, current_user)
        values = data.model_dump(exclude_unset=True)
        if values.get("name") is None:
            values.pop("name", None)
        return await self.team_repo.update(team, values)

    async def delete_team(self, team_id: uuid.UUID, current_user: User) -> None:
        """
        Only the owner may delete a team, and personal teams cannot be deleted.
        Users working in the team fall back to no current team.
        """
        team = await self._find(team_id)
        if not team.is_owner(current_user):
            raise ForbiddenError()
        if team.personal_team:
            raise ForbiddenError("Personal teams cannot be deleted.")

        await self.db.execute(
            sql_update(User).where(User.current_team_id == team.id).values(current_team_id=None)
        )
        await self.team_repo.delete(team)
        logger.info(f"Team {team_id} deleted by {current_user.email}")

    async def switch_team(self, team_id: uuid.UUID, current_user: User) -> Team:
        team = await self.get_team(team_id, current_user)
        current_user.current_team_id = team.id
        await self.db.commit()
        logger.debug(f"User {current_user.id} switched to team {team.id}")
        return team

    # Members

    async def list_members(self, team_id: uuid.UUID, current_user: User) -> List[TeamMembership]:
        team = await self.get_team(team_id, current_user)
        return list(team.memberships)

    async def add_member(self, team_id: uuid.UUID, data: TeamMemberAdd, current_user: User) -> Team:
        """
        Add a registered user to the team.

        Raises:
            ValidationError: If no user has the email or the user already belongs
        """
        team = await self.get_managed_team(team_id, current_user)

        user = await self.user_repo.get_by_email(data.email)
        if user is None:
            raise ValidationError.for_field(
                "email", "We were unable to find a registered user with this email address."
            )
        if team.has_user(user):
            raise ValidationError.for_field("email", "This user already belongs to the team.")

        self.db.add(TeamMembership(team_id=team.id, user_id=user.id, role=data.role.value))
        await self.db.commit()
        logger.info(f"User {user.email} added to team {team.id} as {data.role.value}")
        return await self.team_repo.get_by_id(team.id)

    async def _membership(self, team: Team, user_id: uuid.UUID) -> TeamMembership:
        membership = await self.team_repo.get_membership(team.id, user_id)
        if membership is None:
            raise NotFoundError("Team member", str(user_id))
        return membership

    async def update_member_role(
        self,
        team_id: uuid.UUID,
        user_id: uuid.UUID,
        role: TeamRole,
        current_user: User
    ) -> Team:
        team = await self.get_managed_team(team_id, current_user)
        membership = await self._membership(team, user_id)
        membership.role = role.value
        await self.db.commit()
        return await self.team_repo.get_by_id(team.id)

    async def remove_member(self, team_id: uuid.UUID, user_id: uuid.UUID, current_user: User) -> None:
        team = await self.get_managed_team(team_id, current_user)
        if team.user_id == user_id:
            raise ForbiddenError("The team owner cannot be removed.")

        membership = await self._membership(team, user_id)
        await self.db.delete(membership)
        await self.db.execute(
            sql_update(User)
            .where(User.id == user_id, User.current_team_id == team.id)
            .values(current_team_id=None)
        )
        await self.db.commit()
        logger.info(f"User {user_id} removed from team {team.id} by {current_user.email}")

    async def leave(self, team_id: uuid.UUID, current_user: User) -> None:
        team = await self._find(team_id)
        if team.is_owner(current_user):
            raise ForbiddenError("The team owner cannot leave the team.")

        membership = await self._membership(team, current_user.id)
        await self.db.delete(membership)
        if current_user.current_team_id == team.id:
            current_user.current_team_id = None
        await self.db.commit()
        logger.info(f"User {current_user.email} left team {team.id}")

    # Invitations

    async def invite(self, team_id: uuid.UUID, data: TeamInvitationCreate, current_user: User) -> TeamInvitation:
        """
        Invite an email address to the team.

        Raises:
            ValidationError: If the address already belongs to a member or was
                invited in the last seven days
        """
        team = await self.get_managed_team(team_id, current_user)

        existing = await self.user_repo.get_by_email(data.email)
        if existing is not None and team.has_user(existing):
            raise ValidationError.for_field("email", "This user already belongs to the team.")

        if await self.team_repo.recent_invitation(team.id, data.email, utcnow() - INVITATION_WINDOW):
            raise ValidationError.for_field("email", "This user has already been invited to the team.")

        invitation = TeamInvitation(team_id=team.id, email=data.email, role=data.role.value)
        self.db.add(invitation)
        await self.db.commit()
        logger.info(f"{data.email} invited to team {team.id} by {current_user.email}")
        return invitation

    async def list_invitations(self, team_id: uuid.UUID, current_user: User) -> List[TeamInvitation]:
        team = await self.get_team(team_id, current_user)
        return list(team.invitations)

    async def cancel_invitation(self, team_id: uuid.UUID, invitation_id: uuid.UUID, current_user: User) -> None:
        team = await self.get_managed_team(team_id, current_user)
        invitation = await self.team_repo.get_invitation(team.id, invitation_id)
        if invitation is None:
            raise NotFoundError("Invitation", str(invitation_id))
        await self.db.delete(invitation)
        await self.db.commit()

    async def accept_invitation(self, invitation_id: uuid.UUID, current_user: User) -> Team:
        """Join the team the invitation is for. The invitation must be addressed to the user."""
        invitation = await self.team_repo.get_invitation_by_id(invitation_id)
        if invitation is None:
            raise NotFoundError("Invitation", str(invitation_id))
        if invitation.email.lower() != current_user.email.lower():
            raise ForbiddenError("This invitation was sent to a different email address.")

        team = await self._find(invitation.team_id)
        if not team.has_user(current_user):
            self.db.add(TeamMembership(team_id=team.id, user_id=current_user.id, role=invitation.role))
        await self.db.delete(invitation)
        await self.db.commit()

        logger.info(f"User {current_user.email} joined team {team.id}")
        return await self.team_repo.get_by_id(team.id)
