"""Domain models for places and table bookings."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Page:
    """One page of records returned by the remote API."""

    items: list[dict[str, object]]
    page_no: int
    page_size: int
    total_pages: int = 1
    total_elements: int | None = None


@dataclass(frozen=True)
class BookingRequest:
    """A table booking submitted by a restaurant operator."""

    place_id: int
    booking_date: str
    slot_time: str
    meal_type: str
    guest_count: int = 2
    booked_from: str = "DARENOW"

    def to_payload(self) -> dict[str, object]:
        """Serialize into the remote API's booking body."""
        return {
            "placeId": self.place_id,
            "bookingDate": self.booking_date,
            "slotTime": self.slot_time,
            "mealType": self.meal_type,
            "guestCount": self.guest_count,
            "bookedFrom": self.booked_from,
        }
