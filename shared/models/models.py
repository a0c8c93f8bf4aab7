"""
shared/models/models.py
All SQLAlchemy ORM models for the activity booking platform.
UUID primary keys throughout; portable across PostgreSQL and SQLite.
"""

import uuid
from datetime import date as date_type, datetime, timezone
from enum import Enum as PyEnum
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from config.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Enumerations ──────────────────────────────────────────────

class UserRole(str, PyEnum):
    USER = "user"
    ADMIN = "admin"


class BookingStatus(str, PyEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class PaymentStatus(str, PyEnum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


# ── Mixins ────────────────────────────────────────────────────

class TimestampMixin:
    """Adds created_at and updated_at to any model."""
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )


# ── Models ────────────────────────────────────────────────────

class User(TimestampMixin, Base):
    """Registered account with an email/password credential."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole), nullable=False, default=UserRole.USER
    )

    bookings: Mapped[List["Booking"]] = relationship(back_populates="user")

    __table_args__ = (Index("ix_users_role", "role"),)

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"


class Activity(TimestampMixin, Base):
    """A bookable activity. Never physically deleted; see is_active."""
    __tablename__ = "activities"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # minutes
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Slots keep the order they were submitted in
    schedule: Mapped[List["ScheduleSlot"]] = relationship(
        back_populates="activity",
        cascade="all, delete-orphan",
        order_by="ScheduleSlot.position",
        lazy="selectin",
    )
    bookings: Mapped[List["Booking"]] = relationship(back_populates="activity")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_activity_price"),
        CheckConstraint("duration >= 15", name="ck_activity_duration"),
        CheckConstraint("capacity BETWEEN 1 AND 100", name="ck_activity_capacity"),
        Index("ix_activities_is_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Activity {self.title} active={self.is_active}>"


class ScheduleSlot(Base):
    """Date/time window on an activity with a remaining-spots counter."""
    __tablename__ = "schedule_slots"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    activity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)  # HH:MM
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)    # HH:MM
    available_spots: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    activity: Mapped["Activity"] = relationship(back_populates="schedule")

    __table_args__ = (
        CheckConstraint("available_spots >= 0", name="ck_slot_available_spots"),
        Index("ix_schedule_slots_activity_position", "activity_id", "position"),
    )

    @property
    def time_range(self) -> str:
        return f"{self.start_time} - {self.end_time}"


class Booking(TimestampMixin, Base):
    """
    A user's reservation on an activity.
    The schedule_* columns snapshot the reserved slot at booking time.
    """
    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    activity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("activities.id"), nullable=False
    )
    schedule_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    schedule_start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    schedule_end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    number_of_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total_price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus), nullable=False, default=BookingStatus.PENDING
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING
    )

    user: Mapped["User"] = relationship(back_populates="bookings")
    activity: Mapped["Activity"] = relationship(back_populates="bookings")

    __table_args__ = (
        CheckConstraint("number_of_participants >= 1", name="ck_booking_participants"),
        Index("ix_bookings_user_id", "user_id"),
        Index("ix_bookings_activity_id", "activity_id"),
        Index("ix_bookings_status", "status"),
    )

    @property
    def schedule(self) -> dict:
        return {
            "date": self.schedule_date,
            "start_time": self.schedule_start_time,
            "end_time": self.schedule_end_time,
        }

    def __repr__(self) -> str:
        return f"<Booking {self.id} ({self.status})>"
