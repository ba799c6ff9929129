"""Error taxonomy for the console core."""

from darenow_console.domain.sessions import Variant


class ConsoleError(Exception):
    """Base class for console errors."""


class AuthError(ConsoleError):
    """Base class for credential exchange and session failures."""


class InvalidCredentials(AuthError):
    """The remote API rejected the submitted credentials."""


class Unreachable(AuthError):
    """The remote API could not be reached or returned an unreadable body."""


class MalformedResponse(AuthError):
    """A nominally successful response lacked the expected shape."""


class NotAuthenticated(AuthError):
    """An operation needed a session that is not present."""

    def __init__(self, variant: Variant) -> None:
        super().__init__(f"No {variant} session")
        self.variant = variant


class ApiError(ConsoleError):
    """The remote API answered with an error status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class Unauthorized(ApiError):
    """HTTP 401 on an authenticated call.

    ``session_cleared`` tells the caller whether the pipeline already tore
    down the matching session.
    """

    def __init__(
        self,
        message: str,
        variant: Variant | None = None,
        session_cleared: bool = False,
    ) -> None:
        super().__init__(401, message)
        self.variant = variant
        self.session_cleared = session_cleared


class FormValidationError(ConsoleError):
    """Client-side validation of user input failed."""


def remote_message(payload: object, default: str) -> str:
    """Pick the human readable message out of an error payload."""
    if isinstance(payload, dict):
        for key in ("message", "responseMsg", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return default
