"""Booking schemas."""
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from typing import Optional
from datetime import datetime, date
from decimal import Decimal

from app.core.config import settings
from app.core.enums import BookingStatus
from app.services.slot_engine import parse_hour, format_hour


class BookingCreate(BaseModel):
    """Schema for a booking request."""

    facility_id: int
    sport_id: int
    user_id: str
    date: date
    start_hour: int = Field(..., ge=0, le=23, alias="time_slot")
    duration: int = Field(..., ge=settings.MIN_BOOKING_HOURS, le=settings.MAX_BOOKING_HOURS)
    resource_count: int = Field(..., ge=1, alias="number_of_resources")
    people_count: int = Field(..., ge=1, alias="number_of_people")
    payment_mode: str = Field(..., min_length=1)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("start_hour", mode="before")
    @classmethod
    def parse_time_slot(cls, value):
        if isinstance(value, str):
            return parse_hour(value)
        return value


class BookingStatusUpdate(BaseModel):
    """Schema for changing a booking's status."""

    status: BookingStatus
    owner_id: Optional[str] = None  # omitted for administrative updates


class BookingInDB(BaseModel):
    """Schema for booking from database."""

    id: int
    facility_id: int
    sport_id: int
    user_id: str
    date: date
    start_hour: int
    duration: int
    resource_count: int
    people_count: int
    payment_mode: str
    total_price: Decimal
    status: BookingStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def time_slot(self) -> str:
        return format_hour(self.start_hour)


class OwnerReport(BaseModel):
    """Booking totals across an owner's facilities."""

    owner_id: str
    total_bookings: int
    total_revenue: Decimal
