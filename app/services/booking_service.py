"""Booking service: admission, availability queries and status changes."""
import logging
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

import pytz
from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.enums import BookingStatus
from app.core.exceptions import (
    BookingNotFound,
    FacilityNotFound,
    InsufficientCapacity,
    InvalidStatusTransition,
    NotFacilityOwner,
    OutsideOperatingHours,
    SlotInPast,
    SportNotFoundInFacility,
    TooManyPeople,
)
from app.models.booking import Booking
from app.models.facility import Facility
from app.models.facility_sport import FacilitySport
from app.schemas.availability import BookedResources, SlotGrid, SlotStatus
from app.schemas.booking import BookingCreate, OwnerReport
from app.services import slot_engine
from app.services.slot_engine import OperatingWindow, SlotWindow, format_hour, format_hour_12

logger = logging.getLogger(__name__)


class BookingService:
    """Service for creating and managing bookings."""

    def local_now(self, facility: Facility) -> datetime:
        """Current wall-clock time at the facility, naive."""
        tz = pytz.timezone(facility.timezone or settings.DEFAULT_TIMEZONE)
        return datetime.now(pytz.UTC).astimezone(tz).replace(tzinfo=None)

    async def get_facility(self, db: AsyncSession, facility_id: int) -> Facility:
        result = await db.execute(select(Facility).where(Facility.id == facility_id))
        facility = result.scalar_one_or_none()
        if not facility:
            raise FacilityNotFound(facility_id)
        return facility

    async def get_facility_sport(
        self,
        db: AsyncSession,
        facility_id: int,
        sport_id: int,
        lock: bool = False,
    ) -> FacilitySport:
        """
        Load the capacity entry for a sport at a facility.

        With lock=True the row is selected FOR UPDATE, serializing
        concurrent admissions for the same facility and sport until the
        surrounding transaction ends.
        """
        statement = select(FacilitySport).where(
            and_(
                FacilitySport.facility_id == facility_id,
                FacilitySport.sport_id == sport_id,
            )
        )
        if lock:
            statement = statement.with_for_update()

        result = await db.execute(statement)
        entry = result.scalar_one_or_none()
        if not entry:
            raise SportNotFoundInFacility(facility_id, sport_id)
        return entry

    async def get_active_bookings(
        self,
        db: AsyncSession,
        facility_id: int,
        sport_id: int,
        target_date: date,
        exclude_id: Optional[int] = None,
    ) -> List[Booking]:
        """Non-cancelled bookings for one facility, sport and date."""
        conditions = [
            Booking.facility_id == facility_id,
            Booking.sport_id == sport_id,
            Booking.date == target_date,
            Booking.status != BookingStatus.CANCELLED,
        ]
        if exclude_id is not None:
            conditions.append(Booking.id != exclude_id)

        result = await db.execute(
            select(Booking).where(and_(*conditions)).order_by(Booking.start_hour, Booking.id)
        )
        return list(result.scalars().all())

    async def create_booking(
        self,
        db: AsyncSession,
        data: BookingCreate,
        now: Optional[datetime] = None,
    ) -> Booking:
        """
        Admit and persist a booking.

        The capacity entry is locked before existing bookings are read, so
        the read-check-write sequence runs as one transaction.

        Args:
            db: Database session
            data: Booking request
            now: Reference instant in facility-local time (defaults to now)

        Returns:
            The confirmed booking

        Raises:
            FacilityNotFound, SportNotFoundInFacility, TooManyPeople,
            OutsideOperatingHours, SlotInPast, InsufficientCapacity
        """
        try:
            facility = await self.get_facility(db, data.facility_id)
            entry = await self.get_facility_sport(db, facility.id, data.sport_id, lock=True)

            people_limit = entry.max_people_per_unit * data.resource_count
            if data.people_count > people_limit:
                raise TooManyPeople(people_limit)

            now = now or self.local_now(facility)
            window = SlotWindow(data.start_hour, data.duration)
            operating = OperatingWindow(entry.opening_hour, entry.closing_hour, entry.operating_days)

            if not operating.is_open_on(data.date):
                raise OutsideOperatingHours(
                    f"Sport is not available on {data.date:%A} ({entry.operating_days})"
                )
            if not operating.fits(window):
                raise OutsideOperatingHours(
                    f"Selected slot must fall between {format_hour(entry.opening_hour)} "
                    f"and {format_hour(entry.closing_hour)}"
                )
            if (data.date, data.start_hour) <= (now.date(), now.hour):
                raise SlotInPast()

            existing = await self.get_active_bookings(db, facility.id, data.sport_id, data.date)
            available = slot_engine.check_admission(
                entry.resource_count, existing, window, data.resource_count
            )
        except InsufficientCapacity as e:
            logger.warning(
                f"Rejected booking at facility {data.facility_id} sport {data.sport_id} "
                f"on {data.date} {format_hour(data.start_hour)}: only {e.available} available"
            )
            await db.rollback()
            raise
        except Exception:
            await db.rollback()
            raise

        booking = Booking(
            facility_id=facility.id,
            sport_id=data.sport_id,
            user_id=data.user_id,
            date=data.date,
            start_hour=data.start_hour,
            duration=data.duration,
            resource_count=data.resource_count,
            people_count=data.people_count,
            payment_mode=data.payment_mode,
            total_price=slot_engine.total_price(entry.price, data.resource_count, data.duration),
            status=BookingStatus.CONFIRMED,
        )
        db.add(booking)
        await db.commit()
        await db.refresh(booking)

        logger.info(
            f"Booking {booking.id} confirmed: facility {facility.id} sport {data.sport_id} "
            f"{data.date} {format_hour(data.start_hour)} x{data.duration}h, "
            f"{data.resource_count}/{available} units"
        )
        return booking

    async def get_booked_resources(
        self,
        db: AsyncSession,
        facility_id: int,
        sport_id: int,
        target_date: date,
        now: Optional[datetime] = None,
    ) -> List[BookedResources]:
        """
        Reserved units per hour for display.

        Bookings that have fully elapsed are hidden when target_date is
        today at the facility.
        """
        facility = await self.get_facility(db, facility_id)
        await self.get_facility_sport(db, facility_id, sport_id)
        now = now or self.local_now(facility)
        bookings = await self.get_active_bookings(db, facility_id, sport_id, target_date)

        return [
            BookedResources(time_slot=format_hour(hour), booked_resources=units)
            for hour, units in slot_engine.booked_resources(bookings, target_date, now)
        ]

    async def get_slot_grid(
        self,
        db: AsyncSession,
        facility_id: int,
        sport_id: int,
        target_date: date,
        duration: int,
        resource_count: int,
        now: Optional[datetime] = None,
    ) -> SlotGrid:
        """Candidate start slots with the units left in each."""
        facility = await self.get_facility(db, facility_id)
        entry = await self.get_facility_sport(db, facility_id, sport_id)
        now = now or self.local_now(facility)

        operating = OperatingWindow(entry.opening_hour, entry.closing_hour, entry.operating_days)
        bookings = await self.get_active_bookings(db, facility_id, sport_id, target_date)
        grid = slot_engine.slot_grid(
            entry.resource_count,
            operating,
            bookings,
            duration,
            resource_count,
            target_date,
            now,
        )

        return SlotGrid(
            facility_id=facility_id,
            sport_id=sport_id,
            date=target_date,
            duration=duration,
            capacity=entry.resource_count,
            requested_resources=resource_count,
            slots=[
                SlotStatus(
                    start_hour=slot.start_hour,
                    end_hour=slot.end_hour,
                    time_slot=format_hour(slot.start_hour),
                    label=f"{format_hour_12(slot.start_hour)} to {format_hour_12(slot.end_hour)}",
                    available_resources=slot.available_units,
                    available=slot.is_available,
                )
                for slot in grid
            ],
        )

    async def get_booking(self, db: AsyncSession, booking_id: int) -> Booking:
        result = await db.execute(select(Booking).where(Booking.id == booking_id))
        booking = result.scalar_one_or_none()
        if not booking:
            raise BookingNotFound(booking_id)
        return booking

    async def update_status(
        self,
        db: AsyncSession,
        booking_id: int,
        status: BookingStatus,
        owner_id: Optional[str] = None,
    ) -> Booking:
        """
        Change a booking's status.

        An owner (owner_id given) may only confirm or cancel bookings at
        their own facilities; without owner_id the change is administrative
        and any status is allowed. Reviving a cancelled booking re-runs the
        capacity check against the other active bookings.
        """
        try:
            booking = await self.get_booking(db, booking_id)

            if owner_id is not None:
                facility = await self.get_facility(db, booking.facility_id)
                if facility.owner_id != owner_id:
                    raise NotFacilityOwner()
                if status not in (BookingStatus.CONFIRMED, BookingStatus.CANCELLED):
                    raise InvalidStatusTransition("Invalid status value")

            if booking.status == BookingStatus.CANCELLED and status != BookingStatus.CANCELLED:
                entry = await self.get_facility_sport(
                    db, booking.facility_id, booking.sport_id, lock=True
                )
                others = await self.get_active_bookings(
                    db, booking.facility_id, booking.sport_id, booking.date, exclude_id=booking.id
                )
                slot_engine.check_admission(
                    entry.resource_count,
                    others,
                    SlotWindow(booking.start_hour, booking.duration),
                    booking.resource_count,
                )
        except Exception:
            await db.rollback()
            raise

        previous = booking.status
        booking.status = status
        await db.commit()
        await db.refresh(booking)

        logger.info(f"Booking {booking.id} status {previous.value} -> {status.value}")
        return booking

    async def delete_booking(self, db: AsyncSession, booking_id: int) -> None:
        booking = await self.get_booking(db, booking_id)
        await db.delete(booking)
        await db.commit()
        logger.info(f"Booking {booking_id} deleted")

    async def owner_report(self, db: AsyncSession, owner_id: str) -> OwnerReport:
        """Booking count and confirmed revenue across an owner's facilities."""
        owned = select(Facility.id).where(Facility.owner_id == owner_id)

        total_result = await db.execute(
            select(func.count(Booking.id)).where(Booking.facility_id.in_(owned))
        )
        revenue_result = await db.execute(
            select(func.coalesce(func.sum(Booking.total_price), 0)).where(
                and_(
                    Booking.facility_id.in_(owned),
                    Booking.status == BookingStatus.CONFIRMED,
                )
            )
        )

        return OwnerReport(
            owner_id=owner_id,
            total_bookings=total_result.scalar_one(),
            total_revenue=Decimal(str(revenue_result.scalar_one())),
        )


# Singleton instance
booking_service = BookingService()
