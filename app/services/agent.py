"""
Agent profile management.
"""

from typing import List, Optional, Tuple
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.base import BaseRepository
from app.repositories.property import PropertyRepository
from app.repositories.user import UserRepository
from app.models.agent import Agent
from app.schemas.agent import AgentCreate, AgentUpdate
from app.utils.exceptions import NotFoundError, ValidationError
import uuid
import logging

logger = logging.getLogger(__name__)


class AgentService:
    """CRUD over agent profiles plus the public directory."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.repo = BaseRepository(Agent, db_session)
        self.property_repo = PropertyRepository(db_session)
        self.user_repo = UserRepository(db_session)

    async def list_agents(
        self,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        per_page: int = 10
    ) -> Tuple[List[Agent], int]:
        query = select(Agent)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                Agent.name.ilike(pattern),
                Agent.email.ilike(pattern),
                Agent.license_number.ilike(pattern),
            ))
        if is_active is not None:
            query = query.where(Agent.is_active == is_active)
        return await self.repo.paginate(query.order_by(Agent.created_at.desc()), page, per_page)

    async def list_active(self, page: int, per_page: int) -> Tuple[List[Agent], int]:
        query = select(Agent).where(Agent.is_active.is_(True)).order_by(Agent.name.asc())
        return await self.repo.paginate(query, page, per_page)

    async def get_agent(self, agent_id: uuid.UUID, active_only: bool = False) -> Agent:
        agent = await self.repo.get_by_id(agent_id)
        if not agent or (active_only and not agent.is_active):
            raise NotFoundError("Agent", str(agent_id))
        return agent

    async def available_properties_count(self, agent: Agent) -> int:
        return await self.property_repo.count_available_for_agent(agent.id)

    async def _check_unique(self, values: dict, exclude_id: Optional[uuid.UUID] = None) -> None:
        errors = {}
        if values.get("email") and await self.repo.field_taken("email", values["email"], exclude_id):
            errors["email"] = ["The email has already been taken."]
        if values.get("license_number") and await self.repo.field_taken(
            "license_number", values["license_number"], exclude_id
        ):
            errors["license_number"] = ["The license number has already been taken."]
        if values.get("user_id"):
            if not await self.user_repo.exists(values["user_id"]):
                errors["user_id"] = ["The selected user is invalid."]
            elif await self.repo.field_taken("user_id", values["user_id"], exclude_id):
                errors["user_id"] = ["The user is already linked to another agent."]
        if errors:
            raise ValidationError(field_errors=errors)

    async def create_agent(self, data: AgentCreate) -> Agent:
        values = data.model_dump()
        await self._check_unique(values)
        agent = await self.repo.create(values)
        logger.info(f"Agent created: {agent.email} (ID: {agent.id})")
        return agent

    async def update_agent(self, agent_id: uuid.UUID, data: AgentUpdate) -> Agent:
        agent = await self.get_agent(agent_id)
        values = data.model_dump(exclude_unset=True)
        await self._check_unique(values, exclude_id=agent.id)
        updated = await self.repo.update(agent, values)
        logger.info(f"Agent updated: {agent_id}")
        return updated

    async def delete_agent(self, agent_id: uuid.UUID) -> None:
        """Listings keep existing with no agent assigned."""
        agent = await self.get_agent(agent_id)
        await self.repo.delete(agent)
        logger.info(f"Agent deleted: {agent_id}")
