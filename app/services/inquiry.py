"""
Inquiry services: questions about listings and general contact-form submissions.
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import utcnow
from app.repositories.inquiry import InquiryRepository, ContactInquiryRepository
from app.repositories.property import PropertyRepository
from app.repositories.user import UserRepository
from app.models.inquiry import Inquiry, InquiryStatus, ContactInquiry
from app.models.user import User
from app.schemas.inquiry import (
    InquiryCreate,
    InquiryUpdate,
    ContactInquiryCreate,
    ContactInquiryUpdate,
)
from app.utils.exceptions import NotFoundError, ValidationError, InsufficientPermissionsError
import uuid
import logging

logger = logging.getLogger(__name__)


class InquiryService:
    """
    Listing inquiries. Creation is public; management is scoped to the agent's
    own listings for agent-role users.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.inquiry_repo = InquiryRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    async def create_inquiry(self, data: InquiryCreate, user: Optional[User] = None) -> Inquiry:
        """
        Store an inquiry and bump the listing's inquiries_count.

        Signed-in users may omit name and email; guests must give both.

        Raises:
            NotFoundError: If the listing does not exist
            ValidationError: If a guest leaves out name or email
        """
        property_obj = await self.property_repo.get_by_id(data.property_id)
        if not property_obj or not property_obj.is_available:
            raise NotFoundError("Property", str(data.property_id))

        values = data.model_dump()
        if user is not None:
            values["user_id"] = user.id
            values["name"] = values.get("name") or user.name
            values["email"] = values.get("email") or user.email

        errors = {}
        if not values.get("name"):
            errors["name"] = ["The name field is required."]
        if not values.get("email"):
            errors["email"] = ["The email field is required."]
        if errors:
            raise ValidationError(field_errors=errors)

        inquiry = Inquiry(**{key: getattr(value, "value", value) for key, value in values.items()})
        inquiry.status = InquiryStatus.PENDING.value
        self.db.add(inquiry)
        await self.property_repo.adjust_counter(property_obj, "inquiries_count", 1)

        created = await self.inquiry_repo.save(inquiry)
        logger.info(f"Inquiry {created.id} received for property {property_obj.id}")
        return created

    def _agent_scope(self, user: User):
        if not user.is_agent:
            return False, None
        profile = user.agent_profile
        return True, profile.id if profile else None

    async def list_inquiries(
        self,
        user: User,
        status: Optional[str] = None,
        inquiry_type: Optional[str] = None,
        property_id: Optional[uuid.UUID] = None,
        page: int = 1,
        per_page: int = 10
    ) -> Tuple[List[Inquiry], int]:
        agent_scope, agent_id = self._agent_scope(user)
        return await self.inquiry_repo.list_filtered(
            status=status,
            inquiry_type=inquiry_type,
            property_id=property_id,
            agent_id=agent_id,
            agent_scope=agent_scope,
            page=page,
            per_page=per_page,
        )

    async def get_inquiry(self, inquiry_id: uuid.UUID, user: User) -> Inquiry:
        inquiry = await self.inquiry_repo.get_by_id(inquiry_id)
        if not inquiry:
            raise NotFoundError("Inquiry", str(inquiry_id))
        if user.is_agent and not inquiry.listing.is_managed_by(user):
            raise InsufficientPermissionsError()
        return inquiry

    async def update_inquiry(self, inquiry_id: uuid.UUID, data: InquiryUpdate, user: User) -> Inquiry:
        """Moving to responded stamps who responded and when."""
        inquiry = await self.get_inquiry(inquiry_id, user)
        values = data.model_dump(exclude_unset=True)

        if values.get("status") is not None:
            status = values["status"].value
            values["status"] = status
            if status == InquiryStatus.RESPONDED.value and inquiry.status != status:
                values["responded_at"] = utcnow()
                values["responded_by"] = user.id
        else:
            values.pop("status", None)

        updated = await self.inquiry_repo.update(inquiry, values)
        logger.info(f"Inquiry {inquiry_id} updated by {user.email}")
        return updated

    async def delete_inquiry(self, inquiry_id: uuid.UUID, user: User) -> None:
        inquiry = await self.get_inquiry(inquiry_id, user)
        property_obj = inquiry.listing
        if property_obj is not None:
            await self.property_repo.adjust_counter(property_obj, "inquiries_count", -1)
        await self.inquiry_repo.delete(inquiry)
        logger.info(f"Inquiry {inquiry_id} deleted by {user.email}")


class ContactInquiryService:
    """Messages sent through the site contact form."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.repo = ContactInquiryRepository(db_session)
        self.user_repo = UserRepository(db_session)

    async def submit(self, data: ContactInquiryCreate) -> ContactInquiry:
        values = {key: getattr(value, "value", value) for key, value in data.model_dump().items()}
        inquiry = await self.repo.create(values)
        logger.info(f"Contact inquiry {inquiry.id} received from {inquiry.email}")
        return inquiry

    async def list_inquiries(
        self,
        status: Optional[str],
        search: Optional[str],
        page: int,
        per_page: int
    ) -> Tuple[List[ContactInquiry], int]:
        return await self.repo.list_filtered(status, search, page, per_page)

    async def get_inquiry(self, inquiry_id: uuid.UUID) -> ContactInquiry:
        inquiry = await self.repo.get_by_id(inquiry_id)
        if not inquiry:
            raise NotFoundError("Contact inquiry", str(inquiry_id))
        return inquiry

    async def update_inquiry(self, inquiry_id: uuid.UUID, data: ContactInquiryUpdate) -> ContactInquiry:
        inquiry = await self.get_inquiry(inquiry_id)
        values = data.model_dump(exclude_unset=True)

        if values.get("assigned_to") is not None and not await self.user_repo.exists(values["assigned_to"]):
            raise ValidationError.for_field("assigned_to", "The selected user is invalid.")
        if "status" in values:
            if values["status"] is None:
                values.pop("status")
            else:
                values["status"] = values["status"].value

        return await self.repo.update(inquiry, values)

    async def delete_inquiry(self, inquiry_id: uuid.UUID) -> None:
        inquiry = await self.get_inquiry(inquiry_id)
        await self.repo.delete(inquiry)
        logger.info(f"Contact inquiry {inquiry_id} deleted")
