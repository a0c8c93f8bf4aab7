"""
services/activity/catalog.py
Activity catalog: read, create, update and soft-delete activities
together with their ordered schedule slots.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.models.models import Activity, ScheduleSlot
from shared.schemas.schemas import ActivityCreateRequest, ActivityUpdateRequest

logger = logging.getLogger(__name__)


def _build_slots(slots: List[dict]) -> List[ScheduleSlot]:
    return [ScheduleSlot(position=i, **slot) for i, slot in enumerate(slots)]


def summarize(activity: Activity) -> dict:
    """Listing projection. Only the first stored slot is exposed."""
    first = activity.schedule[0] if activity.schedule else None
    return {
        "id": activity.id,
        "title": activity.title,
        "description": activity.description,
        "location": activity.location,
        "date": first.date if first else None,
        "time": first.time_range if first else None,
    }


async def list_active(db: AsyncSession) -> List[dict]:
    result = await db.execute(
        select(Activity)
        .where(Activity.is_active == True)  # noqa: E712
        .order_by(Activity.created_at.asc(), Activity.id)
    )
    return [summarize(a) for a in result.scalars().all()]


async def get_activity(db: AsyncSession, activity_id: UUID) -> Optional[Activity]:
    """Full record with all slots, whether active or not."""
    return await db.scalar(select(Activity).where(Activity.id == activity_id))


async def create_activity(db: AsyncSession, data: ActivityCreateRequest) -> Activity:
    fields = data.model_dump()
    slots = fields.pop("schedule")
    activity = Activity(**fields, schedule=_build_slots(slots))
    db.add(activity)
    await db.commit()
    logger.info(f"Created activity {activity.id} with {len(slots)} slot(s)")
    return activity


async def update_activity(
    db: AsyncSession,
    activity_id: UUID,
    data: ActivityUpdateRequest,
) -> Optional[Activity]:
    """
    Apply a partial update. Null or missing fields are left untouched;
    a provided schedule replaces the existing slot list.
    """
    activity = await get_activity(db, activity_id)
    if not activity:
        return None

    updates = data.model_dump(exclude_none=True)
    slots = updates.pop("schedule", None)
    for field, value in updates.items():
        setattr(activity, field, value)
    if slots is not None:
        activity.schedule = _build_slots(slots)
        # Slot changes never fire the parent row's onupdate
        activity.updated_at = datetime.now(timezone.utc)

    await db.commit()
    return activity


async def soft_delete_activity(db: AsyncSession, activity_id: UUID) -> bool:
    """Mark inactive. Existing bookings and slots are not touched."""
    activity = await get_activity(db, activity_id)
    if not activity:
        return False

    activity.is_active = False
    await db.commit()
    logger.info(f"Deactivated activity {activity_id}")
    return True
