"""
services/booking/ledger.py
Booking ledger: admin listing with joins, per-user listing and
admin status updates. Slot capacity is never touched here.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from services.activity.catalog import summarize
from shared.models.models import Booking, BookingStatus, PaymentStatus

logger = logging.getLogger(__name__)


async def get_booking(db: AsyncSession, booking_id: UUID) -> Optional[Booking]:
    return await db.scalar(select(Booking).where(Booking.id == booking_id))


async def list_all_bookings(db: AsyncSession) -> List[Booking]:
    """Every booking, newest first, with user and activity loaded for display."""
    result = await db.execute(
        select(Booking)
        .options(selectinload(Booking.user), selectinload(Booking.activity))
        .order_by(Booking.created_at.desc())
    )
    return list(result.scalars().all())


async def list_user_bookings(db: AsyncSession, user_id: UUID) -> List[dict]:
    """
    A user's bookings flattened into activity summaries.
    The date/time shown are those of the activity's first slot,
    not the slot recorded on the booking.
    """
    result = await db.execute(
        select(Booking)
        .options(selectinload(Booking.activity))
        .where(Booking.user_id == user_id)
        .order_by(Booking.created_at.desc())
    )
    return [summarize(b.activity) for b in result.scalars().all()]


async def update_booking_status(
    db: AsyncSession,
    booking_id: UUID,
    status: BookingStatus,
    payment_status: PaymentStatus,
) -> Optional[Booking]:
    """
    Overwrite status and payment status. Setting status to cancelled here
    does not release the reserved slot; use the reservation cancel flow for that.
    """
    booking = await get_booking(db, booking_id)
    if not booking:
        return None

    previous = booking.status
    booking.status = BookingStatus(status)
    booking.payment_status = PaymentStatus(payment_status)
    await db.commit()

    logger.info(
        f"Booking {booking_id} status {previous.value} -> {booking.status.value}, "
        f"payment {booking.payment_status.value}"
    )
    return booking
