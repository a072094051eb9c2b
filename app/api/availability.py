"""Availability endpoints."""
import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import BookingError
from app.schemas.availability import BookedResources, SlotGrid
from app.services.booking_service import booking_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["availability"])


@router.get("/bookings/availability", response_model=List[BookedResources])
async def get_availability(
    facility_id: int = Query(..., description="Facility ID"),
    sport_id: int = Query(..., description="Sport ID"),
    date: date = Query(..., description="Date to check (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db),
):
    """
    Get booked resources per hour.

    Returns one entry per hour that has any occupancy. When the date is
    today at the facility, bookings that have already finished are left out.

    Args:
        facility_id: Facility ID
        sport_id: Sport ID
        date: Date to check
        db: Database session

    Returns:
        List of {time_slot, booked_resources}
    """
    try:
        return await booking_service.get_booked_resources(db, facility_id, sport_id, date)
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        logger.error(f"Error checking availability: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to check availability: {str(e)}",
        )


@router.get("/facilities/{facility_id}/sports/{sport_id}/slots", response_model=SlotGrid)
async def get_slot_grid(
    facility_id: int,
    sport_id: int,
    date: date = Query(..., description="Date to check (YYYY-MM-DD)"),
    duration: int = Query(
        default=1,
        ge=settings.MIN_BOOKING_HOURS,
        le=settings.MAX_BOOKING_HOURS,
        description="Booking length in hours",
    ),
    resources: int = Query(default=1, ge=1, description="Resource units wanted"),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the bookable slot grid for a sport.

    Lists every start hour whose window fits inside operating hours, with
    the units still free across the whole window and whether the requested
    number of units fits.
    """
    try:
        return await booking_service.get_slot_grid(
            db, facility_id, sport_id, date, duration, resources
        )
    except BookingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        logger.error(f"Error building slot grid: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to build slot grid: {str(e)}",
        )
