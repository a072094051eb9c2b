"""Domain errors raised by the booking services."""


class BookingError(Exception):
    """Base class for booking domain errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def detail(self):
        return self.message


class FacilityNotFound(BookingError):
    status_code = 404

    def __init__(self, facility_id: int):
        super().__init__("Facility not found")
        self.facility_id = facility_id


class SportNotFoundInFacility(BookingError):
    status_code = 404

    def __init__(self, facility_id: int, sport_id: int):
        super().__init__("Sport not found in facility")
        self.facility_id = facility_id
        self.sport_id = sport_id


class BookingNotFound(BookingError):
    status_code = 404

    def __init__(self, booking_id: int):
        super().__init__("Booking not found")
        self.booking_id = booking_id


class InsufficientCapacity(BookingError):
    """Proposed booking exceeds remaining capacity in at least one hour."""

    status_code = 409

    def __init__(self, available: int):
        super().__init__(
            f"Only {available} resources available for selected time slot(s)"
        )
        self.available = available

    @property
    def detail(self):
        return {"message": self.message, "available": self.available}


class OutsideOperatingHours(BookingError):
    pass


class InvalidStatusTransition(BookingError):
    pass


class NotFacilityOwner(BookingError):
    status_code = 403

    def __init__(self):
        super().__init__("You are not authorized to manage this facility")


class SlotInPast(BookingError):
    def __init__(self):
        super().__init__("Cannot book a time slot that has already started")


class TooManyPeople(BookingError):
    def __init__(self, limit: int):
        super().__init__(f"At most {limit} people allowed for the selected resources")
        self.limit = limit
