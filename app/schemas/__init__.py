"""API schemas."""
from app.schemas.sport import (
    SportCreate,
    SportUpdate,
    SportInDB,
)
from app.schemas.facility import (
    OperatingHours,
    FacilitySportBase,
    FacilitySportInDB,
    FacilityCreate,
    FacilityUpdate,
    FacilityInDB,
    ReviewCreate,
    ReviewInDB,
)
from app.schemas.booking import (
    BookingCreate,
    BookingStatusUpdate,
    BookingInDB,
    OwnerReport,
)
from app.schemas.availability import (
    BookedResources,
    SlotStatus,
    SlotGrid,
)

__all__ = [
    "SportCreate",
    "SportUpdate",
    "SportInDB",
    "OperatingHours",
    "FacilitySportBase",
    "FacilitySportInDB",
    "FacilityCreate",
    "FacilityUpdate",
    "FacilityInDB",
    "ReviewCreate",
    "ReviewInDB",
    "BookingCreate",
    "BookingStatusUpdate",
    "BookingInDB",
    "OwnerReport",
    "BookedResources",
    "SlotStatus",
    "SlotGrid",
]
