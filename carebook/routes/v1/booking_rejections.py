# carebook/routes/v1/booking_rejections.py
"""
Provider booking rejection routes - API v1

Endpoints:
    POST / - Provider asks to be released from an assigned booking
    GET /pending - Pending requests awaiting review (admin)
    GET /providers/{provider_id} - A provider's requests
    POST /{request_id}/approve - Approve: cancel booking and unassign provider (admin)
    POST /{request_id}/deny - Deny: booking untouched (admin)
"""

import asyncio
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, status

from ...api.dependencies import get_booking_rejection_service, get_current_actor
from ...core.exceptions import DomainException
from ...principal import Actor
from ...schemas.booking_rejection import (
    RejectionRequestCreate,
    RejectionRequestResponse,
    RejectionReview,
)
from ...services.booking_rejection_service import BookingRejectionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["booking-rejections-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    raise exc.to_http_exception()


@router.post("/", response_model=RejectionRequestResponse, status_code=status.HTTP_201_CREATED)
async def request_rejection(
    payload: RejectionRequestCreate = Body(...),
    actor: Actor = Depends(get_current_actor),
    rejection_service: BookingRejectionService = Depends(get_booking_rejection_service),
) -> RejectionRequestResponse:
    try:
        request = await asyncio.to_thread(
            rejection_service.request_rejection, actor, payload.booking_id, payload.reason
        )
        return RejectionRequestResponse.model_validate(request)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/pending", response_model=List[RejectionRequestResponse])
async def list_pending_requests(
    actor: Actor = Depends(get_current_actor),
    rejection_service: BookingRejectionService = Depends(get_booking_rejection_service),
) -> List[RejectionRequestResponse]:
    try:
        requests = await asyncio.to_thread(rejection_service.list_pending_requests, actor)
        return [RejectionRequestResponse.model_validate(request) for request in requests]
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/providers/{provider_id}", response_model=List[RejectionRequestResponse])
async def list_provider_requests(
    provider_id: str,
    actor: Actor = Depends(get_current_actor),
    rejection_service: BookingRejectionService = Depends(get_booking_rejection_service),
) -> List[RejectionRequestResponse]:
    try:
        requests = await asyncio.to_thread(
            rejection_service.list_requests_for_provider, actor, provider_id
        )
        return [RejectionRequestResponse.model_validate(request) for request in requests]
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{request_id}/approve", response_model=RejectionRequestResponse)
async def approve_rejection(
    request_id: str,
    payload: Optional[RejectionReview] = Body(None),
    actor: Actor = Depends(get_current_actor),
    rejection_service: BookingRejectionService = Depends(get_booking_rejection_service),
) -> RejectionRequestResponse:
    try:
        request = await asyncio.to_thread(
            rejection_service.approve_rejection,
            actor,
            request_id,
            payload.admin_notes if payload else None,
        )
        return RejectionRequestResponse.model_validate(request)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{request_id}/deny", response_model=RejectionRequestResponse)
async def deny_rejection(
    request_id: str,
    payload: Optional[RejectionReview] = Body(None),
    actor: Actor = Depends(get_current_actor),
    rejection_service: BookingRejectionService = Depends(get_booking_rejection_service),
) -> RejectionRequestResponse:
    try:
        request = await asyncio.to_thread(
            rejection_service.deny_rejection,
            actor,
            request_id,
            payload.admin_notes if payload else None,
        )
        return RejectionRequestResponse.model_validate(request)
    except DomainException as e:
        handle_domain_exception(e)
