"""
services/activity/router.py
Public activity browsing plus admin-only inventory management.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.database import get_db
from services.activity import catalog
from shared.middleware.auth import require_admin
from shared.models.models import User
from shared.schemas.schemas import (
    ERROR_RESPONSES,
    ActivityCreateRequest,
    ActivityResponse,
    ActivitySummaryResponse,
    ActivityUpdateRequest,
    MessageResponse,
)
from shared.utils.errors import NotFoundError

router = APIRouter(prefix="/activities", tags=["Activities"], responses=ERROR_RESPONSES)


# ── Public ────────────────────────────────────────────────────

@router.get("", response_model=list[ActivitySummaryResponse])
async def list_activities(db: AsyncSession = Depends(get_db)):
    """Active activities in summary form (first schedule slot only)."""
    return await catalog.list_active(db)


@router.get("/{activity_id}", response_model=ActivityResponse)
async def get_activity(activity_id: UUID, db: AsyncSession = Depends(get_db)):
    activity = await catalog.get_activity(db, activity_id)
    if not activity:
        raise NotFoundError("Activity not found")
    return ActivityResponse.model_validate(activity)


# ── Admin ─────────────────────────────────────────────────────

@router.post("", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
async def create_activity(
    data: ActivityCreateRequest,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    activity = await catalog.create_activity(db, data)
    return ActivityResponse.model_validate(activity)


@router.put("/{activity_id}", response_model=ActivityResponse)
async def update_activity(
    activity_id: UUID,
    data: ActivityUpdateRequest,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Partial update; every field is optional."""
    activity = await catalog.update_activity(db, activity_id, data)
    if not activity:
        raise NotFoundError("Activity not found")
    return ActivityResponse.model_validate(activity)


@router.delete("/{activity_id}", response_model=MessageResponse)
async def delete_activity(
    activity_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete: the activity is hidden from listings but kept for existing bookings."""
    if not await catalog.soft_delete_activity(db, activity_id):
        raise NotFoundError("Activity not found")
    return MessageResponse(message="Activity deleted successfully")
