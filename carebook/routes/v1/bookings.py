# carebook/routes/v1/bookings.py
"""
Booking routes - API v1

Versioned booking endpoints under /api/v1/bookings.
All business logic delegated to BookingService.

Endpoints:
    GET / - List bookings visible to the caller
    POST / - Create a booking
    GET /unassigned - Bookings waiting for a provider (admin)
    GET /stats - Booking statistics (admin)
    GET /{booking_id} - Booking details
    DELETE /{booking_id} - Cancel a booking
    POST /{booking_id}/accept - PENDING -> CONFIRMED
    POST /{booking_id}/reject - PENDING -> CANCELLED
    POST /{booking_id}/start - CONFIRMED -> IN_PROGRESS
    POST /{booking_id}/complete - IN_PROGRESS -> COMPLETED
    POST /{booking_id}/cancel - Cancel a booking
    POST /{booking_id}/reschedule - Move to a new date/time
    POST /{booking_id}/assign-provider - Assign a provider (admin)
    GET /{booking_id}/available-providers - Providers free for this booking (admin)
    GET /{booking_id}/refund - Refund the booking would get if cancelled now
    PATCH /{booking_id}/payment-status - Update payment status (admin)
"""

import asyncio
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from ...api.dependencies import get_booking_service, get_current_actor
from ...core.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT
from ...core.exceptions import DomainException
from ...models.booking import BookingStatus
from ...principal import Actor
from ...schemas.booking import (
    BookingComplete,
    BookingCreate,
    BookingReject,
    BookingReschedule,
    BookingResponse,
    BookingStatsResponse,
    PaymentStatusUpdate,
    ProviderAssign,
    RefundResponse,
)
from ...schemas.provider import ProviderResponse
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["bookings-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    raise exc.to_http_exception()


@router.get("/", response_model=List[BookingResponse])
async def list_bookings(
    user_id: Optional[str] = Query(None),
    provider_id: Optional[str] = Query(None),
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    try:
        bookings = await asyncio.to_thread(
            booking_service.list_bookings,
            actor,
            user_id=user_id,
            provider_id=provider_id,
            status=status_filter,
            skip=skip,
            limit=limit,
        )
        return [BookingResponse.model_validate(booking) for booking in bookings]
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate = Body(...),
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """Create a PENDING booking."""
    try:
        booking = await asyncio.to_thread(booking_service.create_booking, actor, booking_data)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/unassigned", response_model=List[BookingResponse])
async def list_unassigned_bookings(
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    try:
        bookings = await asyncio.to_thread(booking_service.list_unassigned_bookings, actor)
        return [BookingResponse.model_validate(booking) for booking in bookings]
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/stats", response_model=BookingStatsResponse)
async def get_booking_stats(
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingStatsResponse:
    try:
        stats = await asyncio.to_thread(booking_service.get_booking_stats, actor)
        return BookingStatsResponse(**stats)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking, actor, booking_id)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{booking_id}", response_model=BookingResponse)
async def delete_booking(
    booking_id: str,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """Bookings are kept for history; deleting cancels."""
    try:
        booking = await asyncio.to_thread(booking_service.delete_booking, actor, booking_id)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{booking_id}/accept", response_model=BookingResponse)
async def accept_booking(
    booking_id: str,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.accept_booking, actor, booking_id)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{booking_id}/reject", response_model=BookingResponse)
async def reject_booking(
    booking_id: str,
    payload: Optional[BookingReject] = Body(None),
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.reject_booking,
            actor,
            booking_id,
            payload.reason if payload else None,
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{booking_id}/start", response_model=BookingResponse)
async def start_service(
    booking_id: str,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.start_service, actor, booking_id)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{booking_id}/complete", response_model=BookingResponse)
async def complete_service(
    booking_id: str,
    payload: Optional[BookingComplete] = Body(None),
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.complete_service,
            actor,
            booking_id,
            payload.notes if payload else None,
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: str,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.cancel_booking, actor, booking_id)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{booking_id}/reschedule", response_model=BookingResponse)
async def reschedule_booking(
    booking_id: str,
    payload: BookingReschedule = Body(...),
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.reschedule_booking,
            actor,
            booking_id,
            payload.scheduled_date,
            payload.scheduled_time,
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{booking_id}/assign-provider", response_model=BookingResponse)
async def assign_provider(
    booking_id: str,
    payload: ProviderAssign = Body(...),
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.assign_provider, actor, booking_id, payload.provider_id
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{booking_id}/available-providers", response_model=List[ProviderResponse])
async def find_available_providers(
    booking_id: str,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[ProviderResponse]:
    try:
        providers = await asyncio.to_thread(
            booking_service.find_available_providers_for_booking, actor, booking_id
        )
        return [ProviderResponse.model_validate(provider) for provider in providers]
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{booking_id}/refund", response_model=RefundResponse)
async def get_refund_amount(
    booking_id: str,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> RefundResponse:
    try:
        result = await asyncio.to_thread(booking_service.evaluate_refund, actor, booking_id)
        return RefundResponse(
            booking_id=booking_id,
            refund_amount=result.refund_amount,
            refund_percent=result.refund_percent,
            hours_before_start=result.hours_before_start,
            policy_basis=result.policy_basis,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{booking_id}/payment-status", response_model=BookingResponse)
async def update_payment_status(
    booking_id: str,
    payload: PaymentStatusUpdate = Body(...),
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.update_payment_status, actor, booking_id, payload.payment_status
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)
