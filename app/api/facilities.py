"""Facility endpoints."""
import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.facility import Facility
from app.models.facility_sport import FacilitySport
from app.models.review import Review
from app.models.sport import Sport
from app.schemas.facility import (
    FacilityCreate,
    FacilityUpdate,
    FacilityInDB,
    FacilitySportBase,
    ReviewCreate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/facilities", tags=["facilities"])


async def _get_facility_or_404(db: AsyncSession, facility_id: int) -> Facility:
    result = await db.execute(
        select(Facility)
        .where(Facility.id == facility_id)
        .execution_options(populate_existing=True)
    )
    facility = result.scalar_one_or_none()

    if not facility:
        raise HTTPException(status_code=404, detail="Facility not found")

    return facility


def _check_owner(facility: Facility, owner_id: str):
    if facility.owner_id != owner_id:
        raise HTTPException(status_code=403, detail="Unauthorized to manage this facility")


async def _apply_sports(
    db: AsyncSession,
    facility: Facility,
    sports: List[FacilitySportBase],
):
    """
    Make the facility offer exactly the given sports.

    Existing entries are updated in place so their IDs survive; sports no
    longer listed are removed.
    """
    sport_ids = [s.sport_id for s in sports]
    if len(set(sport_ids)) != len(sport_ids):
        raise HTTPException(status_code=400, detail="Each sport can only be listed once")

    result = await db.execute(select(Sport).where(Sport.id.in_(sport_ids)))
    catalog = {sport.id: sport for sport in result.scalars().all()}
    missing = [sid for sid in sport_ids if sid not in catalog]
    if missing:
        raise HTTPException(status_code=400, detail=f"Unknown sport id(s): {missing}")

    existing = {entry.sport_id: entry for entry in facility.sports}
    entries = []
    for item in sports:
        entry = existing.get(item.sport_id) or FacilitySport(sport=catalog[item.sport_id])
        entry.sport_id = item.sport_id
        entry.price = item.price
        entry.resource_count = item.resource_count
        entry.max_people_per_unit = item.max_people_per_unit
        entry.opening_hour = item.operating_hours.opening
        entry.closing_hour = item.operating_hours.closing
        entry.operating_days = item.operating_hours.days.value
        entries.append(entry)

    facility.sports = entries


def _recompute_rating(facility: Facility):
    ratings = [review.rating for review in facility.reviews]
    facility.average_rating = sum(ratings) / len(ratings) if ratings else 0


@router.post("", response_model=FacilityInDB, status_code=201)
async def create_facility(
    facility: FacilityCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a facility with the sports it offers.

    Each sport entry carries its unit price, number of bookable resources,
    people per resource and operating hours.

    Args:
        facility: Facility data
        db: Database session

    Returns:
        Created facility
    """
    data = facility.model_dump(exclude={"sports"})
    db_facility = Facility(**data, average_rating=0, sports=[], reviews=[])
    await _apply_sports(db, db_facility, facility.sports)

    db.add(db_facility)
    await db.commit()

    logger.info(f"Facility {db_facility.id} '{db_facility.name}' created by owner {db_facility.owner_id}")
    return await _get_facility_or_404(db, db_facility.id)


@router.get("", response_model=List[FacilityInDB])
async def search_facilities(
    keyword: Optional[str] = Query(default=None, description="Match in facility name"),
    location: Optional[str] = Query(default=None, description="Match in address"),
    sport: Optional[str] = Query(default=None, description="Match in offered sport name"),
    min_price: Optional[Decimal] = Query(default=None, ge=0),
    max_price: Optional[Decimal] = Query(default=None, ge=0),
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
):
    """
    List facilities, optionally filtered.

    Price bounds apply to the per-hour price of any offered sport.

    Args:
        keyword: Case-insensitive match on name
        location: Case-insensitive match on address
        sport: Case-insensitive match on sport name
        min_price: Lowest acceptable price
        max_price: Highest acceptable price
        skip: Number of records to skip
        limit: Maximum number of records to return
        db: Database session

    Returns:
        List of facilities
    """
    statement = select(Facility)
    if keyword:
        statement = statement.where(Facility.name.ilike(f"%{keyword}%"))
    if location:
        statement = statement.where(Facility.address.ilike(f"%{location}%"))

    if sport or min_price is not None or max_price is not None:
        offered = select(FacilitySport.facility_id).join(Sport)
        if sport:
            offered = offered.where(Sport.name.ilike(f"%{sport}%"))
        if min_price is not None:
            offered = offered.where(FacilitySport.price >= min_price)
        if max_price is not None:
            offered = offered.where(FacilitySport.price <= max_price)
        statement = statement.where(Facility.id.in_(offered))

    result = await db.execute(statement.order_by(Facility.id).offset(skip).limit(limit))
    return result.scalars().all()


@router.get("/owner/{owner_id}", response_model=List[FacilityInDB])
async def list_owner_facilities(
    owner_id: str,
    db: AsyncSession = Depends(get_db),
):
    """List the facilities run by an owner."""
    result = await db.execute(
        select(Facility).where(Facility.owner_id == owner_id).order_by(Facility.id)
    )
    return result.scalars().all()


@router.get("/{facility_id}", response_model=FacilityInDB)
async def get_facility(
    facility_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Get a specific facility by ID, with sports and reviews.

    Args:
        facility_id: Facility ID
        db: Database session

    Returns:
        Facility details
    """
    return await _get_facility_or_404(db, facility_id)


@router.patch("/{facility_id}", response_model=FacilityInDB)
async def update_facility(
    facility_id: int,
    facility_update: FacilityUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a facility (owner only).

    When sports are given they replace the facility's offer; capacity and
    hours of an existing sport change in place.

    Args:
        facility_id: Facility ID
        facility_update: Fields to update, with the requesting owner_id
        db: Database session

    Returns:
        Updated facility
    """
    facility = await _get_facility_or_404(db, facility_id)
    _check_owner(facility, facility_update.owner_id)

    update_data = facility_update.model_dump(exclude_unset=True, exclude={"owner_id", "sports"})
    for field, value in update_data.items():
        setattr(facility, field, value)

    if facility_update.sports is not None:
        await _apply_sports(db, facility, facility_update.sports)

    await db.commit()

    logger.info(f"Facility {facility_id} updated by owner {facility_update.owner_id}")
    return await _get_facility_or_404(db, facility_id)


@router.delete("/{facility_id}", status_code=204)
async def delete_facility(
    facility_id: int,
    owner_id: Optional[str] = Query(default=None, description="Requesting owner; omit for admin removal"),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a facility and all its sports, reviews and bookings.

    Args:
        facility_id: Facility ID
        owner_id: Requesting owner, checked when given
        db: Database session
    """
    facility = await _get_facility_or_404(db, facility_id)
    if owner_id is not None:
        _check_owner(facility, owner_id)

    await db.delete(facility)
    await db.commit()

    logger.info(f"Facility {facility_id} deleted")


@router.post("/{facility_id}/reviews", response_model=FacilityInDB, status_code=201)
async def add_review(
    facility_id: int,
    review: ReviewCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Review a facility; one review per user.

    The facility's average rating is recomputed.
    """
    facility = await _get_facility_or_404(db, facility_id)

    if any(r.user_id == review.user_id for r in facility.reviews):
        raise HTTPException(status_code=400, detail="You have already reviewed this facility")

    facility.reviews.append(Review(**review.model_dump()))
    _recompute_rating(facility)
    await db.commit()

    return await _get_facility_or_404(db, facility_id)


@router.delete("/{facility_id}/reviews/{review_id}", status_code=204)
async def delete_review(
    facility_id: int,
    review_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Remove a review (admin) and recompute the average rating."""
    facility = await _get_facility_or_404(db, facility_id)

    review = next((r for r in facility.reviews if r.id == review_id), None)
    if review is None:
        raise HTTPException(status_code=404, detail="Review not found")

    facility.reviews.remove(review)
    _recompute_rating(facility)
    await db.commit()
