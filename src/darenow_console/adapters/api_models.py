"""Pydantic models and adapters for remote API envelopes."""

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class AdminLoginData(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    token: str | None = None
    admin_data: dict[str, object] | None = Field(default=None, alias="adminData")


class AdminLoginResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    data: AdminLoginData | None = None


class RegistrationData(BaseModel):
    model_config = ConfigDict(extra="allow")

    token: str | None = None
    user: dict[str, object] | None = None


class Slot(BaseModel):
    model_config = ConfigDict(extra="allow")

    slot: str
    booked: bool = False


def unwrap_data(payload: object) -> object:
    """Return ``payload["data"]`` when present, else the payload itself."""
    if isinstance(payload, dict) and payload.get("data") is not None:
        return payload["data"]
    return payload


def unwrap_restaurant_login(
    payload: object,
) -> tuple[str | None, dict[str, object] | None]:
    """Extract the token and profile from a restaurant login response.

    The API answers either ``{"data": {"placeData": ..., "token": ...}}`` or
    ``{"placeData": ..., "token": ...}``. The envelope is tried first, then
    the top level. The profile keeps the envelope's shape minus the token.
    """
    if not isinstance(payload, dict):
        return None, None
    envelope = unwrap_data(payload)
    if not isinstance(envelope, dict):
        return None, None
    token = envelope.get("token") or payload.get("token")
    if not isinstance(token, str) or not token:
        token = None
    profile = {key: value for key, value in envelope.items() if key != "token"}
    place = profile.get("placeData", profile)
    if not isinstance(place, dict) or not place:
        return token, None
    return token, profile


def extract_items(payload: object) -> list[dict[str, object]]:
    """Pull a record list out of ``data.content``, ``data`` or the payload."""
    candidate = unwrap_data(payload)
    if isinstance(candidate, dict) and isinstance(candidate.get("content"), list):
        candidate = candidate["content"]
    if not isinstance(candidate, list):
        return []
    return [item for item in candidate if isinstance(item, dict)]


def extract_total_pages(payload: object, page_size: int) -> tuple[int, int | None]:
    """Return total pages and total elements from the known pagination shapes."""
    data = payload.get("data") if isinstance(payload, dict) else None
    if isinstance(data, dict) and isinstance(data.get("totalPages"), int):
        total_elements = data.get("totalElements")
        return data["totalPages"], (
            total_elements if isinstance(total_elements, int) else None
        )
    if not isinstance(payload, dict):
        return 1, None
    total = payload.get("total")
    if isinstance(payload.get("totalPages"), int):
        return payload["totalPages"], total if isinstance(total, int) else None
    if isinstance(total, int) and page_size > 0:
        return max(1, -(-total // page_size)), total
    return 1, None


def unwrap_registration(
    payload: object,
) -> tuple[str | None, dict[str, object] | None]:
    """Extract the token and user record from a registration response."""
    for candidate in (unwrap_data(payload), payload):
        if not isinstance(candidate, dict):
            continue
        try:
            parsed = RegistrationData.model_validate(candidate)
        except ValidationError:
            continue
        if parsed.token:
            return parsed.token, parsed.user
    return None, None
