"""
Slot availability engine.

Pure hour-granular arithmetic shared by booking creation and the
availability endpoints. Hours are plain integers (0-23); string forms
("14:00" on the API, "2:00 PM" for display) are converted at the edges
with parse_hour / format_hour / format_hour_12.

Bookings passed in may be ORM rows or any object exposing
``start_hour``, ``duration``, ``resource_count`` and optionally ``status``.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from app.core.enums import BookingStatus, OperatingDays
from app.core.exceptions import InsufficientCapacity

_HOUR_RE = re.compile(r"^\s*(\d{1,2})(?::(\d{2}))?\s*([AaPp][Mm])?\s*$")


def parse_hour(value: str, allow_midnight_end: bool = False) -> int:
    """
    Parse a whole-hour time string into an integer hour.

    Accepts 24-hour ("14:00", "14") and 12-hour ("2:00 PM", "2 pm",
    "12:00 AM") forms. With allow_midnight_end, "24:00" and midnight
    parse as 24 so they can close an operating window.

    Raises:
        ValueError: if the string is not a whole hour
    """
    match = _HOUR_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid time '{value}'")

    hour = int(match.group(1))
    minutes = match.group(2)
    meridiem = match.group(3)

    if minutes is not None and int(minutes) != 0:
        raise ValueError(f"Time '{value}' is not on a whole hour")

    if meridiem:
        if not 1 <= hour <= 12:
            raise ValueError(f"Invalid 12-hour time '{value}'")
        hour = hour % 12
        if meridiem.lower() == "pm":
            hour += 12
    elif hour > 24 or (hour == 24 and not allow_midnight_end):
        raise ValueError(f"Hour out of range in '{value}'")

    if allow_midnight_end and hour == 0:
        return 24
    return hour


def format_hour(hour: int) -> str:
    """Format an hour as zero-padded 24-hour "HH:00"."""
    return f"{hour:02d}:00"


def format_hour_12(hour: int) -> str:
    """Format an hour as 12-hour "h:mm AM/PM"."""
    hour = hour % 24
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12}:00 {suffix}"


@dataclass(frozen=True)
class SlotWindow:
    """A contiguous block of whole hours starting at start_hour."""

    start_hour: int
    duration: int

    @property
    def end_hour(self) -> int:
        return self.start_hour + self.duration

    @property
    def hours(self) -> range:
        return range(self.start_hour, self.end_hour)

    def overlaps(self, other: "SlotWindow") -> bool:
        return self.start_hour < other.end_hour and other.start_hour < self.end_hour


@dataclass(frozen=True)
class OperatingWindow:
    """Opening hours of a sport at a facility."""

    opening_hour: int
    closing_hour: int
    days: OperatingDays = OperatingDays.ALL_DAYS

    def is_open_on(self, target_date: date) -> bool:
        weekday = target_date.weekday()
        if self.days == OperatingDays.WEEKDAYS:
            return weekday < 5
        if self.days == OperatingDays.WEEKENDS:
            return weekday >= 5
        return True

    def fits(self, window: SlotWindow) -> bool:
        return self.opening_hour <= window.start_hour and window.end_hour <= self.closing_hour


@dataclass(frozen=True)
class SlotAvailability:
    """Availability of one candidate slot in the booking grid."""

    start_hour: int
    end_hour: int
    available_units: int
    is_available: bool


def _is_active(booking) -> bool:
    return getattr(booking, "status", None) != BookingStatus.CANCELLED


def _window_of(booking) -> SlotWindow:
    return SlotWindow(booking.start_hour, booking.duration)


def _is_today(target_date: Optional[date], now: Optional[datetime]) -> bool:
    return target_date is not None and now is not None and target_date == now.date()


def build_occupied_hours(
    bookings: Iterable,
    target_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> Dict[int, int]:
    """
    Sum reserved resource units per hour.

    Cancelled bookings never count. When target_date is today (per now),
    bookings that have fully elapsed are skipped; this is the display view.
    Called without target_date/now, every active booking counts, which is
    what admission checks must use.

    Args:
        bookings: Bookings for one facility, sport and date
        target_date: Date being displayed
        now: Reference instant in the facility's local time

    Returns:
        Mapping of hour -> reserved units, only for hours with occupancy
    """
    today = _is_today(target_date, now)
    occupied: Dict[int, int] = {}

    for booking in bookings:
        if not _is_active(booking):
            continue

        window = _window_of(booking)
        if today and window.end_hour <= now.hour:
            continue

        for hour in window.hours:
            occupied[hour] = occupied.get(hour, 0) + booking.resource_count

    return occupied


def available_units(capacity: int, occupied: Dict[int, int], window: SlotWindow) -> int:
    """Units free across the whole window: capacity minus the busiest hour."""
    peak = max((occupied.get(hour, 0) for hour in window.hours), default=0)
    return max(capacity - peak, 0)


def check_admission(
    capacity: int,
    bookings: Iterable,
    proposed: SlotWindow,
    resource_count: int,
) -> int:
    """
    Decide whether a proposed booking fits the remaining capacity.

    Elapsed bookings are never filtered out here.

    Returns:
        Units available across the proposed window

    Raises:
        InsufficientCapacity: if resource_count exceeds that number
    """
    occupied = build_occupied_hours(bookings)
    available = available_units(capacity, occupied, proposed)
    if resource_count > available:
        raise InsufficientCapacity(available)
    return available


def candidate_start_hours(
    operating: OperatingWindow,
    duration: int,
    target_date: date,
    now: Optional[datetime] = None,
) -> List[int]:
    """
    Start hours whose whole window fits inside operating hours.

    For today, start hours at or before the current hour are dropped; past
    dates and days the sport is closed yield nothing.
    """
    if not operating.is_open_on(target_date):
        return []
    if now is not None and target_date < now.date():
        return []

    hours = range(operating.opening_hour, operating.closing_hour - duration + 1)
    if _is_today(target_date, now):
        return [h for h in hours if h > now.hour]
    return list(hours)


def slot_grid(
    capacity: int,
    operating: OperatingWindow,
    bookings: Iterable,
    duration: int,
    resource_count: int,
    target_date: date,
    now: Optional[datetime] = None,
) -> List[SlotAvailability]:
    """
    Availability of every candidate slot for a requested duration and size.
    """
    occupied = build_occupied_hours(bookings)
    grid = []

    for start in candidate_start_hours(operating, duration, target_date, now):
        window = SlotWindow(start, duration)
        free = available_units(capacity, occupied, window)
        grid.append(
            SlotAvailability(
                start_hour=start,
                end_hour=window.end_hour,
                available_units=free,
                is_available=free >= resource_count,
            )
        )

    return grid


def booked_resources(
    bookings: Iterable,
    target_date: date,
    now: Optional[datetime] = None,
) -> List[Tuple[int, int]]:
    """Occupied hours in ascending order with their reserved units (display view)."""
    occupied = build_occupied_hours(bookings, target_date=target_date, now=now)
    return sorted(occupied.items())


def total_price(unit_price, resource_count: int, duration: int) -> Decimal:
    return Decimal(str(unit_price)) * resource_count * duration
