"""
services/booking/reservation.py
Reservation coordinator: keeps booking lifecycle events and slot
capacity in step.

  reserve: claim a spot on the first open slot → insert PENDING booking
  cancel:  mark booking CANCELLED/REFUNDED → return spots to the matching slot

Each operation commits the booking write and the slot write in one
transaction. Capacity changes are conditional UPDATEs, so two requests
racing for the last spot cannot both succeed, and a booking cannot be
credited back twice.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shared.models.models import (
    Activity,
    Booking,
    BookingStatus,
    PaymentStatus,
    ScheduleSlot,
    User,
)
from shared.utils.errors import AlreadyCancelledError, NoAvailabilityError, NotFoundError

logger = logging.getLogger(__name__)

# Requests carry no participant count; every booking is for one person
PARTICIPANTS_PER_BOOKING = 1

_slots = ScheduleSlot.__table__
_bookings = Booking.__table__


async def _claim_first_open_slot(
    db: AsyncSession,
    activity: Activity,
    participants: int,
) -> Optional[ScheduleSlot]:
    """
    Take ``participants`` spots from the first slot, in stored order, that has them.
    Slots are tried strictly by position, never by date.
    """
    for slot in activity.schedule:
        if slot.available_spots < participants:
            continue
        result = await db.execute(
            update(_slots)
            .where(
                _slots.c.id == slot.id,
                _slots.c.available_spots >= participants,
            )
            .values(available_spots=_slots.c.available_spots - participants)
        )
        if result.rowcount == 1:
            await db.refresh(slot)
            return slot
        # Someone else took the last spot since we loaded the activity
        logger.info(f"Slot {slot.id} filled concurrently, trying next slot")
    return None


async def reserve(db: AsyncSession, user: User, activity_id: UUID) -> Booking:
    """
    Book the first available slot of an active activity for ``user``.

    Raises NotFoundError if the activity is missing or inactive and
    NoAvailabilityError if no slot has a free spot.
    """
    activity = await db.scalar(
        select(Activity).where(
            Activity.id == activity_id,
            Activity.is_active == True,  # noqa: E712
        )
    )
    if not activity:
        raise NotFoundError("Activity not found or inactive")

    participants = PARTICIPANTS_PER_BOOKING
    slot = await _claim_first_open_slot(db, activity, participants)
    if slot is None:
        raise NoAvailabilityError("No available slots for this activity")

    booking = Booking(
        user_id=user.id,
        activity_id=activity.id,
        schedule_date=slot.date,
        schedule_start_time=slot.start_time,
        schedule_end_time=slot.end_time,
        number_of_participants=participants,
        total_price=activity.price * participants,
        status=BookingStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
    )
    db.add(booking)
    await db.commit()

    logger.info(
        f"Booking {booking.id}: user {user.id} reserved {activity.id} "
        f"on {slot.date} {slot.time_range} ({slot.available_spots} spots left)"
    )
    return booking


async def cancel(db: AsyncSession, user: User, booking_id: UUID) -> Booking:
    """
    Cancel one of ``user``'s bookings and refund it.

    Spots go back to the activity slot whose date and times match the
    booking snapshot. If that slot was edited or removed since booking,
    nothing is restored and the cancellation still succeeds.
    """
    booking = await db.scalar(
        select(Booking).where(Booking.id == booking_id, Booking.user_id == user.id)
    )
    if not booking:
        raise NotFoundError("Booking not found")
    if booking.status == BookingStatus.CANCELLED:
        raise AlreadyCancelledError("Booking is already cancelled")

    result = await db.execute(
        update(_bookings)
        .where(
            _bookings.c.id == booking.id,
            _bookings.c.status != BookingStatus.CANCELLED,
        )
        .values(
            status=BookingStatus.CANCELLED,
            payment_status=PaymentStatus.REFUNDED,
            updated_at=datetime.now(timezone.utc),
        )
    )
    if result.rowcount != 1:
        raise AlreadyCancelledError("Booking is already cancelled")

    slot = await db.scalar(
        select(ScheduleSlot)
        .where(
            ScheduleSlot.activity_id == booking.activity_id,
            ScheduleSlot.date == booking.schedule_date,
            ScheduleSlot.start_time == booking.schedule_start_time,
            ScheduleSlot.end_time == booking.schedule_end_time,
        )
        .order_by(ScheduleSlot.position)
        .limit(1)
    )
    if slot:
        await db.execute(
            update(_slots)
            .where(_slots.c.id == slot.id)
            .values(available_spots=_slots.c.available_spots + booking.number_of_participants)
        )
    else:
        logger.warning(
            f"Booking {booking.id} cancelled but its slot "
            f"{booking.schedule_date} {booking.schedule_start_time}-{booking.schedule_end_time} "
            f"no longer exists on activity {booking.activity_id}; no spots restored"
        )

    await db.commit()
    await db.refresh(booking)

    logger.info(f"Booking {booking.id} cancelled by user {user.id}")
    return booking
