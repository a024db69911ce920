"""
Message service: contact about listings and agents, inbox and replies.
"""

from typing import Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import utcnow
from app.repositories.base import BaseRepository
from app.repositories.message import MessageRepository
from app.repositories.property import PropertyRepository
from app.models.agent import Agent
from app.models.message import Message, MessageableType
from app.models.user import User
from app.schemas.message import MessageCreate, MessageReply, MessageResponse, Conversation
from app.utils.exceptions import NotFoundError, ValidationError, ForbiddenError
import uuid
import logging

logger = logging.getLogger(__name__)


class MessageService:
    """
    Messages between users and guests.
    Only the sender and the recipient may read, reply to or delete a message.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.message_repo = MessageRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.agent_repo = BaseRepository(Agent, db_session)

    async def _resolve_recipient(self, messageable_type: MessageableType, messageable_id: uuid.UUID) -> Optional[uuid.UUID]:
        """User account behind the target: the agent's login, or the listing agent's login."""
        if messageable_type == MessageableType.AGENT:
            agent = await self.agent_repo.get_by_id(messageable_id)
            if not agent:
                raise NotFoundError("Agent", str(messageable_id))
            return agent.user_id

        property_obj = await self.property_repo.get_by_id(messageable_id)
        if not property_obj:
            raise NotFoundError("Property", str(messageable_id))
        return property_obj.agent.user_id if property_obj.agent is not None else None

    async def send(self, data: MessageCreate, current_user: Optional[User] = None) -> Message:
        """
        Send a message about a listing or an agent.

        Raises:
            NotFoundError: If the target does not exist
            ValidationError: If a guest leaves out name or email
        """
        if current_user is None:
            errors = {}
            if not data.name:
                errors["name"] = ["The name field is required."]
            if not data.email:
                errors["email"] = ["The email field is required."]
            if errors:
                raise ValidationError(field_errors=errors)

        to_user_id = await self._resolve_recipient(data.messageable_type, data.messageable_id)

        message = Message(
            messageable_type=data.messageable_type.value,
            messageable_id=data.messageable_id,
            from_user_id=current_user.id if current_user else None,
            to_user_id=to_user_id,
            name=data.name or (current_user.name if current_user else None),
            email=data.email or (current_user.email if current_user else None),
            phone=data.phone,
            subject=data.subject,
            message=data.message,
        )
        created = await self.message_repo.save(message)
        logger.info(f"Message {created.id} sent about {data.messageable_type.value} {data.messageable_id}")
        return created

    async def inbox(self, current_user: User) -> List[Conversation]:
        """
        Received messages grouped by sender, most recent conversation first.
        Guests are grouped by their email address.
        """
        messages = await self.message_repo.received_by(current_user.id)

        groups: Dict[Tuple[str, str], List[Message]] = {}
        for message in messages:
            if message.from_user_id is not None:
                key = ("user", str(message.from_user_id))
            else:
                key = ("guest", (message.email or "").lower())
            groups.setdefault(key, []).append(message)

        conversations = []
        for items in groups.values():
            latest = items[0]
            conversations.append(Conversation(
                participant_id=latest.from_user_id,
                participant_name=latest.sender_name,
                participant_email=latest.sender_email,
                latest_message=MessageResponse.model_validate(latest),
                unread_count=sum(1 for m in items if not m.is_read),
                total_count=len(items),
            ))
        return conversations

    async def sent(self, current_user: User, page: int, per_page: int) -> Tuple[List[Message], int]:
        return await self.message_repo.sent_by(current_user.id, page, per_page)

    async def get_message(self, message_id: uuid.UUID, current_user: User) -> Message:
        message = await self.message_repo.get_by_id(message_id)
        if not message:
            raise NotFoundError("Message", str(message_id))
        if not message.involves(current_user):
            raise ForbiddenError()
        return message

    async def show(self, message_id: uuid.UUID, current_user: User) -> Message:
        """Opening a message as its recipient marks it read."""
        message = await self.get_message(message_id, current_user)
        if message.to_user_id == current_user.id and not message.is_read:
            message = await self.message_repo.update(message, {"read_at": utcnow()})
        return message

    async def reply(self, message_id: uuid.UUID, data: MessageReply, current_user: User) -> Message:
        original = await self.get_message(message_id, current_user)

        if current_user.id == original.to_user_id:
            to_user_id = original.from_user_id
        else:
            to_user_id = original.to_user_id

        subject = data.subject
        if not subject and original.subject:
            subject = original.subject if original.subject.startswith("Re: ") else f"Re: {original.subject}"

        reply = Message(
            messageable_type=original.messageable_type,
            messageable_id=original.messageable_id,
            from_user_id=current_user.id,
            to_user_id=to_user_id,
            parent_id=original.id,
            name=current_user.name,
            email=current_user.email,
            subject=subject,
            message=data.message,
        )
        created = await self.message_repo.save(reply)
        logger.info(f"Message {created.id} sent by {current_user.email} in reply to {message_id}")
        return created

    async def mark_read(self, message_id: uuid.UUID, current_user: User, read: bool = True) -> Message:
        """
        Raises:
            ForbiddenError: If the current user is not the recipient
        """
        message = await self.get_message(message_id, current_user)
        if message.to_user_id != current_user.id:
            raise ForbiddenError("Only the recipient can change the read state of a message")
        return await self.message_repo.update(message, {"read_at": utcnow() if read else None})

    async def mark_all_read(self, current_user: User) -> int:
        return await self.message_repo.mark_all_read(current_user.id)

    async def unread_count(self, current_user: User) -> int:
        return await self.message_repo.unread_count(current_user.id)

    async def delete(self, message_id: uuid.UUID, current_user: User) -> None:
        message = await self.get_message(message_id, current_user)
        await self.message_repo.delete(message)
        logger.info(f"Message {message_id} deleted by {current_user.email}")
