"""Database models."""
from app.models.sport import Sport
from app.models.facility import Facility
from app.models.facility_sport import FacilitySport
from app.models.booking import Booking
from app.core.enums import BookingStatus
from app.models.review import Review

__all__ = ["Sport", "Facility", "FacilitySport", "Booking", "BookingStatus", "Review"]
