"""
shared/schemas/schemas.py
All Pydantic v2 request/response schemas for the platform.
Fields are exposed in camelCase on the wire; snake_case is accepted on input too.
"""

import re
import uuid
from datetime import date as date_type, datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from shared.models.models import BookingStatus, PaymentStatus, UserRole

TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"
PHONE_PATTERN = r"^[0-9]{10}$"
_PASSWORD_RE = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)[A-Za-z\d@$!%*#?&]{6,}$")

# Largest values the NUMERIC(10, 2) and INTEGER columns can hold
MAX_PRICE = 99_999_999.99
MAX_INT = 2**31 - 1

_datetime_adapter = TypeAdapter(datetime)


# ── Base ──────────────────────────────────────────────────────

class BaseSchema(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# ── Auth ──────────────────────────────────────────────────────

class RegisterRequest(BaseSchema):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: str = Field(..., pattern=PHONE_PATTERN)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not _PASSWORD_RE.match(v):
            raise ValueError("Password must contain at least one letter and one number")
        return v


class LoginRequest(BaseSchema):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserResponse(BaseSchema):
    id: uuid.UUID
    name: str
    email: str
    role: UserRole


class RegisteredUserResponse(UserResponse):
    phone: Optional[str] = None


class AuthResponse(BaseSchema):
    message: str
    token: str
    user: UserResponse


class RegisterResponse(AuthResponse):
    user: RegisteredUserResponse


class MeResponse(BaseSchema):
    user: UserResponse


# ── Activity ──────────────────────────────────────────────────

class ScheduleSlotSchema(BaseSchema):
    date: date_type
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    available_spots: int = Field(..., ge=0, le=MAX_INT)

    @field_validator("date", mode="before")
    @classmethod
    def accept_iso_datetime(cls, v):
        """
        Full ISO-8601 timestamps (e.g. "2030-01-10T10:00:00.000Z") are accepted
        and reduced to their UTC calendar date.
        """
        if not isinstance(v, str) or "T" not in v:
            return v
        try:
            parsed = _datetime_adapter.validate_python(v)
        except PydanticValidationError:
            raise ValueError("Date must be a valid ISO-8601 date") from None
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.date()


class ScheduleSlotResponse(ScheduleSlotSchema):
    id: uuid.UUID


class ActivityCreateRequest(BaseSchema):
    title: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=10, max_length=1000)
    price: float = Field(..., ge=0, le=MAX_PRICE)
    duration: int = Field(..., ge=15, le=MAX_INT, description="Minutes")
    capacity: int = Field(..., ge=1, le=100)
    location: str = Field(..., min_length=3, max_length=200)
    schedule: List[ScheduleSlotSchema]


class ActivityUpdateRequest(BaseSchema):
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, min_length=10, max_length=1000)
    price: Optional[float] = Field(None, ge=0, le=MAX_PRICE)
    duration: Optional[int] = Field(None, ge=15, le=MAX_INT)
    capacity: Optional[int] = Field(None, ge=1, le=100)
    location: Optional[str] = Field(None, min_length=3, max_length=200)
    is_active: Optional[bool] = None
    schedule: Optional[List[ScheduleSlotSchema]] = None


class ActivityResponse(BaseSchema):
    id: uuid.UUID
    title: str
    description: str
    price: float
    duration: int
    capacity: int
    location: str
    is_active: bool
    schedule: List[ScheduleSlotResponse]
    created_at: datetime
    updated_at: datetime


class ActivitySummaryResponse(BaseSchema):
    """Listing shape: only the first schedule slot is shown."""
    id: uuid.UUID
    title: str
    description: str
    location: str
    date: Optional[date_type] = None
    time: Optional[str] = None


# ── Booking ───────────────────────────────────────────────────

class BookingCreateRequest(BaseSchema):
    activity_id: uuid.UUID


class BookingStatusUpdateRequest(BaseSchema):
    status: BookingStatus
    payment_status: PaymentStatus


class BookingScheduleSchema(BaseSchema):
    date: date_type
    start_time: str
    end_time: str


class BookingResponse(BaseSchema):
    id: uuid.UUID
    user_id: uuid.UUID
    activity_id: uuid.UUID
    schedule: BookingScheduleSchema
    number_of_participants: int
    total_price: float
    status: BookingStatus
    payment_status: PaymentStatus
    created_at: datetime
    updated_at: datetime


class BookingCreatedResponse(BaseSchema):
    message: str
    booking: BookingResponse


class BookingUserSummary(BaseSchema):
    id: uuid.UUID
    name: str
    email: str


class BookingActivitySummary(BaseSchema):
    id: uuid.UUID
    title: str


class BookingDetailResponse(BookingResponse):
    # Joined
    user: Optional[BookingUserSummary] = None
    activity: Optional[BookingActivitySummary] = None


# ── Generic ───────────────────────────────────────────────────

class MessageResponse(BaseSchema):
    message: str
    success: bool = True


class FieldError(BaseSchema):
    field: str
    message: str


class ErrorResponse(BaseSchema):
    detail: str
    errors: Optional[List[FieldError]] = None


# Error body shape advertised in OpenAPI by every router
ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (400, 401, 403, 404)}
