"""Facility model."""
from sqlalchemy import Column, Integer, String, Float, Text, DateTime, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Facility(Base):
    """Represents a sports venue run by an owner."""

    __tablename__ = "facilities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    address = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    contact_number = Column(String, nullable=False)
    amenities = Column(JSON, nullable=False, default=list)
    photos = Column(JSON, nullable=False, default=list)
    owner_id = Column(String, nullable=False, index=True)
    timezone = Column(String, nullable=True, default="UTC")
    average_rating = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    sports = relationship(
        "FacilitySport",
        back_populates="facility",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    reviews = relationship(
        "Review",
        back_populates="facility",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Review.created_at.desc()",
    )
    bookings = relationship("Booking", back_populates="facility", cascade="all, delete-orphan")
