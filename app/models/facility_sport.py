"""Sport-in-facility capacity model."""
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class FacilitySport(Base):
    """A sport offered by a facility, with its bookable capacity and hours."""

    __tablename__ = "facility_sports"

    id = Column(Integer, primary_key=True, index=True)
    facility_id = Column(Integer, ForeignKey("facilities.id", ondelete="CASCADE"), nullable=False, index=True)
    sport_id = Column(Integer, ForeignKey("sports.id", ondelete="CASCADE"), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)  # per resource per hour
    resource_count = Column(Integer, nullable=False)  # lanes, tables, courts...
    max_people_per_unit = Column(Integer, nullable=False)
    opening_hour = Column(Integer, nullable=False)
    closing_hour = Column(Integer, nullable=False)  # 24 means midnight
    operating_days = Column(String, nullable=False, default="All Days")  # Mon-Fri, Sat-Sun, All Days
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    facility = relationship("Facility", back_populates="sports")
    sport = relationship("Sport", back_populates="facility_sports", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("facility_id", "sport_id", name="uq_facility_sport"),
    )

    @property
    def sport_name(self):
        return self.sport.name if self.sport is not None else None
