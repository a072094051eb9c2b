"""Availability schemas."""
from pydantic import BaseModel
from typing import List
from datetime import date


class BookedResources(BaseModel):
    """Units reserved during one hour."""

    time_slot: str  # "HH:00"
    booked_resources: int


class SlotStatus(BaseModel):
    """One candidate slot in the booking grid."""

    start_hour: int
    end_hour: int
    time_slot: str  # "HH:00"
    label: str  # "2:00 PM to 4:00 PM"
    available_resources: int
    available: bool


class SlotGrid(BaseModel):
    """Candidate slots for a sport at a facility on one date."""

    facility_id: int
    sport_id: int
    date: date
    duration: int
    capacity: int
    requested_resources: int
    slots: List[SlotStatus]
