"""Booking model."""
from sqlalchemy import Column, Integer, String, ForeignKey, Date, DateTime, Numeric, Enum, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.enums import BookingStatus


class Booking(Base):
    """A reservation of resource units for a contiguous block of hours."""

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    facility_id = Column(Integer, ForeignKey("facilities.id", ondelete="CASCADE"), nullable=False, index=True)
    sport_id = Column(Integer, ForeignKey("sports.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    start_hour = Column(Integer, nullable=False)  # 0-23
    duration = Column(Integer, nullable=False)  # whole hours
    resource_count = Column(Integer, nullable=False)
    people_count = Column(Integer, nullable=False)
    payment_mode = Column(String, nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    status = Column(
        Enum(BookingStatus, values_callable=lambda e: [m.value for m in e], name="booking_status"),
        nullable=False,
        default=BookingStatus.PENDING,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    facility = relationship("Facility", back_populates="bookings")
    sport = relationship("Sport", lazy="selectin")

    __table_args__ = (
        Index("ix_bookings_facility_sport_date", "facility_id", "sport_id", "date"),
    )
