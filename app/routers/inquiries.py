"""
Inquiry endpoints: questions about listings, the site contact form and their admin handling.
"""

from fastapi import APIRouter, Depends, Path, Query, status
from typing import Optional
from uuid import UUID

from app.config import settings
from app.models.inquiry import InquiryStatus, InquiryType, ContactInquiryStatus
from app.models.user import User
from app.services.inquiry import InquiryService, ContactInquiryService
from app.schemas.inquiry import (
    InquiryCreate,
    InquiryUpdate,
    InquiryResponse,
    ContactInquiryCreate,
    ContactInquiryUpdate,
    ContactInquiryResponse,
)
from app.schemas.common import APIResponse, PaginatedResponse, success_response, paginated_response
from app.schemas.error import get_crud_error_responses, get_auth_error_responses, get_error_responses
from app.utils.dependencies import get_optional_current_user, get_service, require_admin


router = APIRouter(tags=["Inquiries"])

get_inquiry_service = get_service(InquiryService)
get_contact_service = get_service(ContactInquiryService)


@router.post(
    "/inquiries",
    response_model=APIResponse[InquiryResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Ask about a property",
    description="Open to guests. Signed-in users may omit name and email.",
    responses=get_error_responses(404, 422)
)
async def create_inquiry(
    inquiry_data: InquiryCreate,
    current_user: Optional[User] = Depends(get_optional_current_user),
    inquiry_service: InquiryService = Depends(get_inquiry_service)
):
    inquiry = await inquiry_service.create_inquiry(inquiry_data, current_user)
    return success_response(
        inquiry,
        message="Your inquiry has been sent successfully",
        code=status.HTTP_201_CREATED,
    )


@router.post(
    "/contact",
    response_model=APIResponse[ContactInquiryResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Contact form",
    responses=get_error_responses(422)
)
async def submit_contact(
    contact_data: ContactInquiryCreate,
    contact_service: ContactInquiryService = Depends(get_contact_service)
):
    inquiry = await contact_service.submit(contact_data)
    return success_response(
        inquiry,
        message="Thank you for contacting us. We will get back to you soon.",
        code=status.HTTP_201_CREATED,
    )


# Admin: property inquiries

@router.get(
    "/admin/inquiries",
    response_model=PaginatedResponse[InquiryResponse],
    summary="List inquiries",
    description="Agents only see inquiries on their own listings",
    responses=get_auth_error_responses()
)
async def list_inquiries(
    status_filter: Optional[InquiryStatus] = Query(None, alias="status"),
    inquiry_type: Optional[InquiryType] = Query(None),
    property_id: Optional[UUID] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.admin_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(require_admin("view inquiries")),
    inquiry_service: InquiryService = Depends(get_inquiry_service)
):
    inquiries, total = await inquiry_service.list_inquiries(
        current_user,
        status=status_filter.value if status_filter else None,
        inquiry_type=inquiry_type.value if inquiry_type else None,
        property_id=property_id,
        page=page,
        per_page=per_page,
    )
    return paginated_response(inquiries, total, page, per_page, message="Inquiries retrieved successfully")


@router.get(
    "/admin/inquiries/{inquiry_id}",
    response_model=APIResponse[InquiryResponse],
    summary="Get inquiry",
    responses=get_crud_error_responses()
)
async def get_inquiry(
    inquiry_id: UUID = Path(..., description="Inquiry ID"),
    current_user: User = Depends(require_admin("view inquiries")),
    inquiry_service: InquiryService = Depends(get_inquiry_service)
):
    inquiry = await inquiry_service.get_inquiry(inquiry_id, current_user)
    return success_response(inquiry, message="Inquiry retrieved successfully")


@router.put(
    "/admin/inquiries/{inquiry_id}",
    response_model=APIResponse[InquiryResponse],
    summary="Update inquiry",
    description="Moving to responded records who responded and when",
    responses=get_crud_error_responses()
)
async def update_inquiry(
    inquiry_data: InquiryUpdate,
    inquiry_id: UUID = Path(..., description="Inquiry ID"),
    current_user: User = Depends(require_admin("edit inquiries")),
    inquiry_service: InquiryService = Depends(get_inquiry_service)
):
    inquiry = await inquiry_service.update_inquiry(inquiry_id, inquiry_data, current_user)
    return success_response(inquiry, message="Inquiry updated successfully")


@router.delete(
    "/admin/inquiries/{inquiry_id}",
    response_model=APIResponse[None],
    summary="Delete inquiry",
    responses=get_crud_error_responses()
)
async def delete_inquiry(
    inquiry_id: UUID = Path(..., description="Inquiry ID"),
    current_user: User = Depends(require_admin("delete inquiries")),
    inquiry_service: InquiryService = Depends(get_inquiry_service)
):
    await inquiry_service.delete_inquiry(inquiry_id, current_user)
    return success_response(message="Inquiry deleted successfully")


# Admin: contact form

@router.get(
    "/admin/contact-inquiries",
    response_model=PaginatedResponse[ContactInquiryResponse],
    summary="List contact inquiries",
    responses=get_auth_error_responses()
)
async def list_contact_inquiries(
    status_filter: Optional[ContactInquiryStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=255),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.admin_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(require_admin("view inquiries")),
    contact_service: ContactInquiryService = Depends(get_contact_service)
):
    inquiries, total = await contact_service.list_inquiries(
        status_filter.value if status_filter else None, search, page, per_page
    )
    return paginated_response(inquiries, total, page, per_page, message="Contact inquiries retrieved successfully")


@router.get(
    "/admin/contact-inquiries/{inquiry_id}",
    response_model=APIResponse[ContactInquiryResponse],
    summary="Get contact inquiry",
    responses=get_crud_error_responses()
)
async def get_contact_inquiry(
    inquiry_id: UUID = Path(..., description="Contact inquiry ID"),
    current_user: User = Depends(require_admin("view inquiries")),
    contact_service: ContactInquiryService = Depends(get_contact_service)
):
    inquiry = await contact_service.get_inquiry(inquiry_id)
    return success_response(inquiry, message="Contact inquiry retrieved successfully")


@router.put(
    "/admin/contact-inquiries/{inquiry_id}",
    response_model=APIResponse[ContactInquiryResponse],
    summary="Update contact inquiry",
    responses=get_crud_error_responses()
)
async def update_contact_inquiry(
    inquiry_data: ContactInquiryUpdate,
    inquiry_id: UUID = Path(..., description="Contact inquiry ID"),
    current_user: User = Depends(require_admin("edit inquiries")),
    contact_service: ContactInquiryService = Depends(get_contact_service)
):
    inquiry = await contact_service.update_inquiry(inquiry_id, inquiry_data)
    return success_response(inquiry, message="Contact inquiry updated successfully")


@router.delete(
    "/admin/contact-inquiries/{inquiry_id}",
    response_model=APIResponse[None],
    summary="Delete contact inquiry",
    responses=get_crud_error_responses()
)
async def delete_contact_inquiry(
    inquiry_id: UUID = Path(..., description="Contact inquiry ID"),
    current_user: User = Depends(require_admin("delete inquiries")),
    contact_service: ContactInquiryService = Depends(get_contact_service)
):
    await contact_service.delete_inquiry(inquiry_id)
    return success_response(message="Contact inquiry deleted successfully")
