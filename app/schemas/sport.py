"""Sport catalog schemas."""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime


class SportBase(BaseModel):
    """Base sport schema."""

    name: str = Field(..., min_length=1)
    description: str
    image_url: Optional[str] = None


class SportCreate(SportBase):
    """Schema for adding a sport to the catalog."""

    pass


class SportUpdate(BaseModel):
    """Schema for updating a sport."""

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("name", "description")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class SportInDB(SportBase):
    """Schema for sport from database."""

    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
