"""Tour requests for listings."""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.property import PropertyRepository, TourRepository
from app.repositories.user import UserRepository
from app.models.property import PropertyTour, TourStatus
from app.models.user import User
from app.schemas.property import TourRequestCreate
from app.utils.exceptions import NotFoundError, InsufficientPermissionsError
import uuid
import logging

logger = logging.getLogger(__name__)


class TourService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.tour_repo = TourRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.user_repo = UserRepository(db_session)

    async def request_tour(self, data: TourRequestCreate) -> PropertyTour:
        """
        Record a visit request. An account with the same email is linked to it.

        Raises:
            NotFoundError: If the listing does not exist or is not available
        """
        property_obj = await self.property_repo.get_by_id(data.property_id)
        if not property_obj or not property_obj.is_available:
            raise NotFoundError("Property", str(data.property_id))

        existing_user = await self.user_repo.get_by_email(data.email)
        values = data.model_dump()
        values["user_id"] = existing_user.id if existing_user else None
        values["status"] = TourStatus.REQUESTED.value

        tour = await self.tour_repo.create(values)
        logger.info(f"Tour requested for property {property_obj.id} on {tour.tour_date} {tour.tour_time}")
        return tour

    def _agent_scope(self, user: User):
        if not user.is_agent:
            return False, None
        profile = user.agent_profile
        return True, profile.id if profile else None

    async def list_tours(
        self,
        user: User,
        property_id: Optional[uuid.UUID],
        status: Optional[str],
        page: int,
        per_page: int
    ) -> Tuple[List[PropertyTour], int]:
        agent_scope, agent_id = self._agent_scope(user)
        return await self.tour_repo.list_filtered(
            property_id=property_id,
            status=status,
            agent_id=agent_id,
            agent_scope=agent_scope,
            page=page,
            per_page=per_page,
        )

    async def update_status(self, tour_id: uuid.UUID, status: TourStatus, user: User) -> PropertyTour:
        tour = await self.tour_repo.get_by_id(tour_id)
        if not tour:
            raise NotFoundError("Tour", str(tour_id))
        if not tour.listing.is_managed_by(user):
            raise InsufficientPermissionsError()

        updated = await self.tour_repo.update(tour, {"status": status.value})
        logger.info(f"Tour {tour_id} marked {status.value} by {user.email}")
        return updated
