"""Booking endpoints."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.enums import BookingStatus
from app.core.exceptions import BookingError
from app.models.booking import Booking
from app.models.facility import Facility
from app.schemas.booking import BookingCreate, BookingInDB, BookingStatusUpdate, OwnerReport
from app.services.booking_service import booking_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=BookingInDB, status_code=201)
async def create_booking(
    booking: BookingCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Book resource units for a block of hours.

    The request is checked against the sport's operating hours and against
    the units still free in every hour of the requested window. On success
    the booking is stored as Confirmed with
    total_price = price * number_of_resources * duration.

    Args:
        booking: Booking request
        db: Database session

    Returns:
        Created booking
    """
    try:
        return await booking_service.create_booking(db, booking)
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        logger.error(f"Error creating booking: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create booking: {str(e)}",
        )


@router.get("", response_model=List[BookingInDB])
async def list_bookings(
    user_id: Optional[str] = Query(default=None, description="Only this user's bookings"),
    facility_id: Optional[int] = Query(default=None, description="Only this facility's bookings"),
    owner_id: Optional[str] = Query(default=None, description="Only bookings at this owner's facilities"),
    status: Optional[BookingStatus] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
):
    """
    List bookings, newest first.

    Args:
        user_id: Filter by booking user
        facility_id: Filter by facility
        owner_id: Filter by facility owner
        status: Filter by status
        skip: Number of records to skip
        limit: Maximum number of records to return
        db: Database session

    Returns:
        List of bookings
    """
    statement = select(Booking)
    if user_id is not None:
        statement = statement.where(Booking.user_id == user_id)
    if facility_id is not None:
        statement = statement.where(Booking.facility_id == facility_id)
    if owner_id is not None:
        statement = statement.where(
            Booking.facility_id.in_(select(Facility.id).where(Facility.owner_id == owner_id))
        )
    if status is not None:
        statement = statement.where(Booking.status == status)

    result = await db.execute(
        statement.order_by(Booking.created_at.desc(), Booking.id.desc()).offset(skip).limit(limit)
    )
    return result.scalars().all()


@router.get("/owner/{owner_id}/report", response_model=OwnerReport)
async def get_owner_report(
    owner_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Total bookings and confirmed revenue across an owner's facilities."""
    return await booking_service.owner_report(db, owner_id)


@router.get("/{booking_id}", response_model=BookingInDB)
async def get_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Get a specific booking by ID.

    Args:
        booking_id: Booking ID
        db: Database session

    Returns:
        Booking details
    """
    try:
        return await booking_service.get_booking(db, booking_id)
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.put("/{booking_id}/status", response_model=BookingInDB)
async def update_booking_status(
    booking_id: int,
    update: BookingStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Change a booking's status.

    Pass owner_id for a facility owner's update (Confirmed or Cancelled on
    their own facilities only); omit it for an administrative update.
    Cancelling frees the booking's units immediately.
    """
    try:
        return await booking_service.update_status(
            db, booking_id, update.status, owner_id=update.owner_id
        )
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        logger.error(f"Error updating booking status: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update booking status: {str(e)}",
        )


@router.delete("/{booking_id}", status_code=204)
async def delete_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Remove a booking record (administrative).

    Args:
        booking_id: Booking ID
        db: Database session
    """
    try:
        await booking_service.delete_booking(db, booking_id)
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
