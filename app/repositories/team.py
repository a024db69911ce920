"""Team, membership and invitation queries."""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from app.repositories.base import BaseRepository
from app.models.team import Team, TeamMembership, TeamInvitation
from typing import List, Optional
from datetime import datetime
import uuid


class TeamRepository(BaseRepository[Team]):

    def __init__(self, db: AsyncSession):
        super().__init__(Team, db)

    async def teams_for_user(self, user_id: uuid.UUID) -> List[Team]:
        """Teams the user owns or belongs to."""
        member_of = select(TeamMembership.team_id).where(TeamMembership.user_id == user_id)
        result = await self.db.execute(
            select(Team)
            .where(or_(Team.user_id == user_id, Team.id.in_(member_of)))
            .order_by(Team.personal_team.desc(), Team.name)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_membership(self, team_id: uuid.UUID, user_id: uuid.UUID) -> Optional[TeamMembership]:
        result = await self.db.execute(
            select(TeamMembership).where(TeamMembership.team_id == team_id, TeamMembership.user_id == user_id)
        )
        return result.scalars().first()

    async def get_invitation(self, team_id: uuid.UUID, invitation_id: uuid.UUID) -> Optional[TeamInvitation]:
        result = await self.db.execute(
            select(TeamInvitation).where(TeamInvitation.id == invitation_id, TeamInvitation.team_id == team_id)
        )
        return result.scalars().first()

    async def get_invitation_by_id(self, invitation_id: uuid.UUID) -> Optional[TeamInvitation]:
        return await self.db.get(TeamInvitation, invitation_id)

    async def recent_invitation(self, team_id: uuid.UUID, email: str, since: datetime) -> Optional[TeamInvitation]:
        result = await self.db.execute(
            select(TeamInvitation).where(
                TeamInvitation.team_id == team_id,
                TeamInvitation.email == email,
                TeamInvitation.created_at >= since,
            )
        )
        return result.scalars().first()
