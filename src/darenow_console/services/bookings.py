"""Table bookings for the signed-in restaurant."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, time

from pydantic import ValidationError

from darenow_console.adapters.api_client import ApiClient
from darenow_console.adapters.api_models import (
    Slot,
    extract_items,
    extract_total_pages,
    unwrap_data,
)
from darenow_console.domain.bookings import BookingRequest, Page
from darenow_console.domain.errors import MalformedResponse, NotAuthenticated
from darenow_console.domain.sessions import Variant, place_id
from darenow_console.services.session_store import SessionStore

_logger = logging.getLogger(__name__)


@dataclass
class BookingService:
    """Service for a restaurant operator's bookings and slots."""

    api_client: ApiClient
    store: SessionStore
    page_size: int = 10

    def current_place_id(self) -> int:
        """Return the place id of the restaurant session."""
        session = self.store.read(Variant.RESTAURANT)
        if session is None:
            raise NotAuthenticated(Variant.RESTAURANT)
        value = place_id(session.profile)
        try:
            return int(str(value))
        except ValueError as exc:
            raise MalformedResponse("Restaurant ID not found") from exc

    async def list_bookings(
        self, page_no: int = 1, page_size: int | None = None
    ) -> Page:
        """Return one page of the restaurant's bookings."""
        size = page_size or self.page_size
        page = max(1, page_no)
        payload = await self.api_client.request(
            "GET",
            f"/table-booking/place/{self.current_place_id()}",
            params={"pageNo": page, "pageSize": size},
        )
        total_pages, total = extract_total_pages(payload, size)
        return Page(
            items=extract_items(payload),
            page_no=page,
            page_size=size,
            total_pages=total_pages,
            total_elements=total,
        )

    async def available_slots(self, booking_date: date, meal_type: str) -> list[str]:
        """Return the unbooked slot labels for a date and meal."""
        payload = await self.api_client.request(
            "GET",
            f"/place/{self.current_place_id()}/slots",
            params={
                "date": booking_date.strftime("%d-%m-%Y"),
                "meal": meal_type.lower(),
            },
        )
        raw_slots = unwrap_data(payload)
        if not isinstance(raw_slots, list):
            return []
        slots = []
        for raw in raw_slots:
            try:
                slot = Slot.model_validate(raw)
            except ValidationError:
                _logger.warning("Skipping unreadable slot %r", raw)
                continue
            if not slot.booked:
                slots.append(slot.slot)
        return slots

    async def create_booking(
        self,
        booking_date: date,
        slot_time: str,
        meal_type: str,
        guest_count: int = 2,
    ) -> object:
        """Book a table in one of the restaurant's slots."""
        request = BookingRequest(
            place_id=self.current_place_id(),
            booking_date=_midnight_iso(booking_date),
            slot_time=slot_time,
            meal_type=meal_type,
            guest_count=guest_count or 2,
        )
        return await self.api_client.request(
            "POST", "/table-booking", json=request.to_payload()
        )

    async def cancel_booking(self, booking_id: int | str) -> None:
        """Cancel a booking."""
        await self.api_client.request("DELETE", f"/table-booking/{booking_id}")


def _midnight_iso(value: date) -> str:
    moment = datetime.combine(value, time.min, tzinfo=UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
