"""Sport catalog endpoints."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.sport import Sport
from app.schemas.sport import SportCreate, SportUpdate, SportInDB

router = APIRouter(prefix="/sports", tags=["sports"])


async def _get_sport_or_404(db: AsyncSession, sport_id: int) -> Sport:
    result = await db.execute(select(Sport).where(Sport.id == sport_id))
    sport = result.scalar_one_or_none()

    if not sport:
        raise HTTPException(status_code=404, detail="Sport not found")

    return sport


@router.post("", response_model=SportInDB, status_code=201)
async def create_sport(
    sport: SportCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Add a sport to the catalog.

    Facilities can only offer sports that exist in the catalog.

    Args:
        sport: Sport data
        db: Database session

    Returns:
        Created sport
    """
    result = await db.execute(select(Sport).where(Sport.name == sport.name))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Sport already exists")

    db_sport = Sport(**sport.model_dump())
    db.add(db_sport)
    await db.commit()
    await db.refresh(db_sport)

    return db_sport


@router.get("", response_model=List[SportInDB])
async def list_sports(db: AsyncSession = Depends(get_db)):
    """List all sports in the catalog."""
    result = await db.execute(select(Sport).order_by(Sport.name))
    return result.scalars().all()


@router.get("/{sport_id}", response_model=SportInDB)
async def get_sport(
    sport_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a sport by ID."""
    return await _get_sport_or_404(db, sport_id)


@router.patch("/{sport_id}", response_model=SportInDB)
async def update_sport(
    sport_id: int,
    sport_update: SportUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a sport's name, description or image.

    Args:
        sport_id: Sport ID
        sport_update: Fields to update
        db: Database session

    Returns:
        Updated sport
    """
    sport = await _get_sport_or_404(db, sport_id)

    if sport_update.name is not None and sport_update.name != sport.name:
        result = await db.execute(select(Sport).where(Sport.name == sport_update.name))
        if result.scalar_one_or_none():
            raise HTTPException(status_code=400, detail="Sport already exists")

    update_data = sport_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(sport, field, value)

    await db.commit()
    await db.refresh(sport)

    return sport


@router.delete("/{sport_id}", status_code=204)
async def delete_sport(
    sport_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a sport and its entries on every facility.

    Args:
        sport_id: Sport ID
        db: Database session
    """
    sport = await _get_sport_or_404(db, sport_id)

    await db.delete(sport)
    await db.commit()
