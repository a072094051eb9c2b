"""Facility schemas."""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

import pytz

from app.core.enums import OperatingDays
from app.services.slot_engine import parse_hour


def _check_timezone(value: Optional[str]) -> Optional[str]:
    if value is not None:
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone '{value}'")
    return value


class OperatingHours(BaseModel):
    """Opening hours of a sport; accepts "09:00" or "9:00 AM" style strings."""

    days: OperatingDays = OperatingDays.ALL_DAYS
    opening: int = Field(..., ge=0, le=23)
    closing: int = Field(..., ge=1, le=24)

    @field_validator("opening", mode="before")
    @classmethod
    def parse_opening(cls, value):
        if isinstance(value, str):
            return parse_hour(value)
        return value

    @field_validator("closing", mode="before")
    @classmethod
    def parse_closing(cls, value):
        if isinstance(value, str):
            return parse_hour(value, allow_midnight_end=True)
        return value

    @model_validator(mode="after")
    def check_order(self):
        if self.closing <= self.opening:
            raise ValueError("closing must be after opening")
        return self


class FacilitySportBase(BaseModel):
    """A sport offered by a facility."""

    sport_id: int
    price: Decimal = Field(..., gt=0)
    resource_count: int = Field(..., ge=1)
    max_people_per_unit: int = Field(..., ge=1)
    operating_hours: OperatingHours


class FacilitySportInDB(BaseModel):
    """Sport entry as stored on a facility."""

    id: int
    sport_id: int
    sport_name: Optional[str] = None
    price: Decimal
    resource_count: int
    max_people_per_unit: int
    opening_hour: int
    closing_hour: int
    operating_days: OperatingDays

    model_config = ConfigDict(from_attributes=True)


class ReviewCreate(BaseModel):
    """Schema for reviewing a facility."""

    user_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class ReviewInDB(BaseModel):
    """Schema for review from database."""

    id: int
    user_id: str
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FacilityBase(BaseModel):
    """Base facility schema."""

    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    description: Optional[str] = None
    contact_number: str
    amenities: List[str] = []
    photos: List[str] = []
    timezone: Optional[str] = "UTC"

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value):
        return _check_timezone(value)


class FacilityCreate(FacilityBase):
    """Schema for creating a facility."""

    owner_id: str
    sports: List[FacilitySportBase] = Field(..., min_length=1)


class FacilityUpdate(BaseModel):
    """Schema for updating a facility (owner only)."""

    owner_id: str
    name: Optional[str] = Field(default=None, min_length=1)
    address: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    contact_number: Optional[str] = None
    amenities: Optional[List[str]] = None
    photos: Optional[List[str]] = None
    timezone: Optional[str] = None
    sports: Optional[List[FacilitySportBase]] = None

    @field_validator("name", "address", "contact_number", "amenities", "photos")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value):
        return _check_timezone(value)


class FacilityInDB(FacilityBase):
    """Schema for facility from database."""

    id: int
    owner_id: str
    average_rating: float
    sports: List[FacilitySportInDB]
    reviews: List[ReviewInDB] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
