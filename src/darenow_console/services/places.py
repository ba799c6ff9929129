"""Restaurant (place) lookups for the admin console."""

from dataclasses import dataclass
from urllib.parse import quote

from darenow_console.adapters.api_client import ApiClient
from darenow_console.adapters.api_models import (
    extract_items,
    extract_total_pages,
    unwrap_data,
)
from darenow_console.domain.bookings import Page

DEFAULT_SEARCH_KEYWORD = "Res"


@dataclass
class PlaceService:
    """Service for listing and managing places."""

    api_client: ApiClient
    page_size: int = 10

    async def search(
        self, keyword: str = "", page_no: int = 1, page_size: int | None = None
    ) -> Page:
        """Search places by keyword; a blank keyword lists restaurants."""
        size = page_size or self.page_size
        term = keyword.strip() or DEFAULT_SEARCH_KEYWORD
        page = max(1, page_no)
        payload = await self.api_client.request(
            "GET",
            f"/place/search/{quote(term, safe='')}/pageNo/{page}/pageSize/{size}",
        )
        total_pages, total = extract_total_pages(payload, size)
        return Page(
            items=extract_items(payload),
            page_no=page,
            page_size=size,
            total_pages=total_pages,
            total_elements=total,
        )

    async def get_place(self, place_id: int | str) -> dict[str, object] | None:
        """Return a place record by id."""
        response = await self.api_client.request("GET", f"/place/{place_id}")
        payload = unwrap_data(response)
        return payload if isinstance(payload, dict) else None

    async def delete_place(self, place_id: int | str) -> None:
        """Delete a place."""
        await self.api_client.request("DELETE", f"/place/{place_id}")

    async def list_interests(self) -> list[dict[str, object]]:
        """Return the interest tags places can be labelled with."""
        return extract_items(await self.api_client.request("GET", "/interest"))
