"""
Messaging endpoints: contacting agents about listings, the inbox and replies.
"""

from fastapi import APIRouter, Depends, Path, Query, status
from typing import Dict, List, Optional
from uuid import UUID

from app.config import settings
from app.models.user import User
from app.services.message import MessageService
from app.schemas.message import MessageCreate, MessageReply, MessageResponse, Conversation, UnreadCount
from app.schemas.common import APIResponse, PaginatedResponse, success_response, paginated_response
from app.schemas.error import get_crud_error_responses, get_auth_error_responses, get_error_responses
from app.utils.dependencies import get_current_active_user, get_optional_current_user, get_service


router = APIRouter(prefix="/messages", tags=["Messages"])

get_message_service = get_service(MessageService)


@router.post(
    "",
    response_model=APIResponse[MessageResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Send a message",
    description=(
        "Message the agent of a property, or an agent directly. "
        "Guests must give a name and email."
    ),
    responses=get_error_responses(404, 422)
)
async def send_message(
    message_data: MessageCreate,
    current_user: Optional[User] = Depends(get_optional_current_user),
    message_service: MessageService = Depends(get_message_service)
):
    message = await message_service.send(message_data, current_user)
    return success_response(message, message="Message sent successfully", code=status.HTTP_201_CREATED)


@router.get(
    "/inbox",
    response_model=APIResponse[List[Conversation]],
    summary="Inbox",
    description="Received messages grouped by sender, newest conversation first",
    responses=get_auth_error_responses()
)
async def inbox(
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
):
    conversations = await message_service.inbox(current_user)
    return success_response(conversations, message="Inbox retrieved successfully")


@router.get(
    "/sent",
    response_model=PaginatedResponse[MessageResponse],
    summary="Sent messages",
    responses=get_auth_error_responses()
)
async def sent_messages(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
):
    messages, total = await message_service.sent(current_user, page, per_page)
    return paginated_response(messages, total, page, per_page, message="Sent messages retrieved successfully")


@router.get(
    "/unread-count",
    response_model=APIResponse[UnreadCount],
    summary="Unread messages",
    responses=get_auth_error_responses()
)
async def unread_count(
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
):
    count = await message_service.unread_count(current_user)
    return success_response({"unread_count": count}, message="Unread count retrieved successfully")


@router.post(
    "/read-all",
    response_model=APIResponse[Dict[str, int]],
    summary="Mark all as read",
    responses=get_auth_error_responses()
)
async def mark_all_read(
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
):
    updated = await message_service.mark_all_read(current_user)
    return success_response({"updated": updated}, message="All messages marked as read")


@router.get(
    "/{message_id}",
    response_model=APIResponse[MessageResponse],
    summary="Read a message",
    description="Only the sender and recipient may view it. Viewing as the recipient marks it read.",
    responses=get_crud_error_responses()
)
async def show_message(
    message_id: UUID = Path(..., description="Message ID"),
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
):
    message = await message_service.show(message_id, current_user)
    return success_response(message, message="Message retrieved successfully")


@router.post(
    "/{message_id}/reply",
    response_model=APIResponse[MessageResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Reply",
    responses=get_crud_error_responses()
)
async def reply_to_message(
    reply_data: MessageReply,
    message_id: UUID = Path(..., description="Message ID"),
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
):
    message = await message_service.reply(message_id, reply_data, current_user)
    return success_response(message, message="Reply sent successfully", code=status.HTTP_201_CREATED)


@router.post(
    "/{message_id}/read",
    response_model=APIResponse[MessageResponse],
    summary="Mark as read",
    responses=get_crud_error_responses()
)
async def mark_read(
    message_id: UUID = Path(..., description="Message ID"),
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
):
    message = await message_service.mark_read(message_id, current_user, read=True)
    return success_response(message, message="Message marked as read")


@router.post(
    "/{message_id}/unread",
    response_model=APIResponse[MessageResponse],
    summary="Mark as unread",
    responses=get_crud_error_responses()
)
async def mark_unread(
    message_id: UUID = Path(..., description="Message ID"),
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
):
    message = await message_service.mark_read(message_id, current_user, read=False)
    return success_response(message, message="Message marked as unread")


@router.delete(
    "/{message_id}",
    response_model=APIResponse[None],
    summary="Delete message",
    responses=get_crud_error_responses()
)
async def delete_message(
    message_id: UUID = Path(..., description="Message ID"),
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
):
    await message_service.delete(message_id, current_user)
    return success_response(message="Message deleted successfully")
