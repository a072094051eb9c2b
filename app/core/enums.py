"""Enumerations shared by models, schemas and services."""
import enum


class BookingStatus(str, enum.Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"


class OperatingDays(str, enum.Enum):
    WEEKDAYS = "Mon-Fri"
    WEEKENDS = "Sat-Sun"
    ALL_DAYS = "All Days"
