"""
Message repository: inbox, sent items and read state.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, update
from app.repositories.base import BaseRepository
from app.models.message import Message
from app.database import utcnow
from typing import List, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository[Message]):

    def __init__(self, db: AsyncSession):
        super().__init__(Message, db)

    async def received_by(self, user_id: uuid.UUID) -> List[Message]:
        """Every message addressed to the user, newest first."""
        result = await self.db.execute(
            select(Message).where(Message.to_user_id == user_id).order_by(Message.created_at.desc())
        )
        return list(result.scalars().all())

    async def sent_by(self, user_id: uuid.UUID, page: int, per_page: int) -> Tuple[List[Message], int]:
        query = select(Message).where(Message.from_user_id == user_id).order_by(Message.created_at.desc())
        return await self.paginate(query, page, per_page)

    async def unread_count(self, user_id: uuid.UUID) -> int:
        query = select(func.count(Message.id)).where(
            Message.to_user_id == user_id,
            Message.read_at.is_(None),
        )
        return (await self.db.execute(query)).scalar() or 0

    async def mark_all_read(self, user_id: uuid.UUID) -> int:
        result = await self.db.execute(
            update(Message)
            .where(Message.to_user_id == user_id, Message.read_at.is_(None))
            .values(read_at=utcnow())
        )
        await self.db.commit()
        logger.debug(f"Marked {result.rowcount} messages read for user {user_id}")
        return result.rowcount
