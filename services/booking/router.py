"""
services/booking/router.py
Booking lifecycle endpoints.
States: pending → confirmed | cancelled, confirmed → cancelled
User cancellation releases the slot; admin status changes do not.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.database import get_db
from services.booking import ledger, reservation
from shared.middleware.auth import require_admin, require_user
from shared.models.models import User
from shared.schemas.schemas import (
    ERROR_RESPONSES,
    ActivitySummaryResponse,
    BookingCreatedResponse,
    BookingCreateRequest,
    BookingDetailResponse,
    BookingResponse,
    BookingStatusUpdateRequest,
    MessageResponse,
)
from shared.utils.errors import NotFoundError

router = APIRouter(prefix="/bookings", tags=["Bookings"], responses=ERROR_RESPONSES)


# ── Read Endpoints ────────────────────────────────────────────

@router.get("", response_model=list[BookingDetailResponse])
async def list_all_bookings(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """All bookings with the booking user's name/email and the activity title."""
    bookings = await ledger.list_all_bookings(db)
    return [BookingDetailResponse.model_validate(b) for b in bookings]


@router.get("/my-bookings", response_model=list[ActivitySummaryResponse])
async def list_my_bookings(
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    return await ledger.list_user_bookings(db, current_user.id)


# ── Reservation ───────────────────────────────────────────────

@router.post("", response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreateRequest,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Reserve one spot on the first schedule slot of the activity that still has room.
    Price is the activity price for a single participant.
    """
    booking = await reservation.reserve(db, current_user, data.activity_id)
    return BookingCreatedResponse(
        message="Activity booked successfully",
        booking=BookingResponse.model_validate(booking),
    )


@router.patch("/{booking_id}/cancel", response_model=MessageResponse)
async def cancel_booking(
    booking_id: UUID,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Cancel your own booking. Payment is marked refunded and the spot is returned."""
    await reservation.cancel(db, current_user, booking_id)
    return MessageResponse(message="Booking cancelled successfully")


# ── Admin ─────────────────────────────────────────────────────

@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: UUID,
    data: BookingStatusUpdateRequest,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    booking = await ledger.update_booking_status(db, booking_id, data.status, data.payment_status)
    if not booking:
        raise NotFoundError("Booking not found")
    return BookingResponse.model_validate(booking)
