"""Inquiry repositories for listing questions and contact-form submissions."""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from app.repositories.base import BaseRepository
from app.models.inquiry import Inquiry, ContactInquiry
from app.models.property import Property
from typing import List, Optional, Tuple
import uuid


class InquiryRepository(BaseRepository[Inquiry]):

    def __init__(self, db: AsyncSession):
        super().__init__(Inquiry, db)

    async def list_filtered(
        self,
        status: Optional[str] = None,
        inquiry_type: Optional[str] = None,
        property_id: Optional[uuid.UUID] = None,
        agent_id: Optional[uuid.UUID] = None,
        agent_scope: bool = False,
        page: int = 1,
        per_page: int = 15
    ) -> Tuple[List[Inquiry], int]:
        """
        Inquiries newest first. With agent_scope only inquiries on the agent's
        own listings are returned.
        """
        query = select(Inquiry)
        if status:
            query = query.where(Inquiry.status == status)
        if inquiry_type:
            query = query.where(Inquiry.inquiry_type == inquiry_type)
        if property_id:
            query = query.where(Inquiry.property_id == property_id)
        if agent_scope:
            if agent_id is None:
                return [], 0
            query = query.join(Property, Property.id == Inquiry.property_id).where(Property.agent_id == agent_id)
        return await self.paginate(query.order_by(Inquiry.created_at.desc()), page, per_page)


class ContactInquiryRepository(BaseRepository[ContactInquiry]):

    def __init__(self, db: AsyncSession):
        super().__init__(ContactInquiry, db)

    async def list_filtered(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 15
    ) -> Tuple[List[ContactInquiry], int]:
        query = select(ContactInquiry)
        if status:
            query = query.where(ContactInquiry.status == status)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                ContactInquiry.first_name.ilike(pattern),
                ContactInquiry.last_name.ilike(pattern),
                ContactInquiry.email.ilike(pattern),
            ))
        return await self.paginate(query.order_by(ContactInquiry.created_at.desc()), page, per_page)
