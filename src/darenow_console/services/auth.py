"""Login, registration, logout and password operations for both variants."""

import logging
from dataclasses import dataclass
from urllib.parse import quote

from pydantic import ValidationError

from darenow_console.adapters.api_client import ApiClient
from darenow_console.adapters.api_models import (
    AdminLoginResponse,
    unwrap_registration,
    unwrap_restaurant_login,
)
from darenow_console.domain.errors import (
    ApiError,
    FormValidationError,
    InvalidCredentials,
    MalformedResponse,
    NotAuthenticated,
    Unreachable,
)
from darenow_console.domain.sessions import (
    LOGIN_PATHS,
    ChangeKind,
    Session,
    Variant,
    build_admin_profile,
)
from darenow_console.services.session_store import SessionStore
from darenow_console.services.sync import SessionSynchronizer

MIN_PASSWORD_LENGTH = 6

_logger = logging.getLogger(__name__)


@dataclass
class AuthService:
    """Session lifecycle operations for admin and restaurant operators."""

    api_client: ApiClient
    store: SessionStore
    synchronizer: SessionSynchronizer

    async def login(self, variant: Variant, credentials: dict[str, str]) -> Session:
        """Exchange credentials for a session of the given variant."""
        if variant is Variant.ADMIN:
            return await self.login_admin(
                credentials.get("username", ""), credentials.get("password", "")
            )
        return await self.login_restaurant(
            credentials.get("email", ""), credentials.get("password", "")
        )

    async def login_admin(self, username: str, password: str) -> Session:
        """Log in a platform admin."""
        if not username.strip() or not password:
            raise FormValidationError("Please enter your username and password")
        payload = await self._exchange(
            "GET",
            f"/admin/login/username/{_segment(username)}"
            f"/password/{_segment(password)}",
        )
        try:
            parsed = AdminLoginResponse.model_validate(payload)
        except ValidationError as exc:
            raise MalformedResponse("Unexpected admin login response") from exc
        data = parsed.data
        if data is None or not data.token:
            raise MalformedResponse("Admin login response carried no token")
        profile = build_admin_profile(username, data.admin_data)
        return self._open(Variant.ADMIN, data.token, profile)

    async def login_restaurant(self, email: str, password: str) -> Session:
        """Log in a restaurant operator."""
        email = email.strip()
        if not email:
            raise FormValidationError("Please enter your email address")
        if not password.strip():
            raise FormValidationError("Please enter your password")
        payload = await self._exchange(
            "GET",
            f"/place/login/email/{_segment(email)}/password/{_segment(password)}",
            status_messages={400: "Unauthorized user"},
        )
        token, profile = unwrap_restaurant_login(payload)
        if profile is None:
            raise MalformedResponse("Invalid response from server. Please try again.")
        if token is None:
            raise MalformedResponse(
                "Authentication token not received. Please try again."
            )
        return self._open(Variant.RESTAURANT, token, profile)

    def logout(self, variant: Variant) -> str:
        """Tear down a variant's session and return its login path."""
        self.store.clear(variant)
        self.synchronizer.notify(variant, ChangeKind.LOGOUT)
        _logger.info("Logged out %s session", variant)
        return LOGIN_PATHS[variant]

    async def update_password(
        self,
        variant: Variant,
        current: str,
        new: str,
        confirm: str | None = None,
    ) -> None:
        """Change the signed-in admin's password; the token stays valid."""
        if variant is not Variant.ADMIN:
            raise ValueError("Password changes are only available to admins")
        if not current or not new or (confirm is not None and not confirm):
            raise FormValidationError("Please fill in all fields")
        if confirm is not None and new != confirm:
            raise FormValidationError(
                "New password and confirm password do not match"
            )
        _check_password_length(new, label="New password")
        session = self.store.read(Variant.ADMIN)
        if session is None:
            raise NotAuthenticated(Variant.ADMIN)
        username = session.profile.get("username") or session.profile.get("name")
        await self.api_client.request(
            "PUT",
            f"/admin/changePassword/username/{_segment(str(username or ''))}"
            f"/currentpassword/{_segment(current)}"
            f"/newPassword/{_segment(new)}",
        )
        _logger.info("Password updated for admin %s", username)

    async def register(self, name: str, email: str, password: str) -> Session:
        """Create an admin account and sign it in."""
        name = name.strip()
        email = email.strip()
        if not name or not email or not password:
            raise FormValidationError("Please fill in all fields")
        _check_password_length(password)
        payload = await self._exchange(
            "POST",
            "/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        token, user = unwrap_registration(payload)
        if token is None:
            raise MalformedResponse("Registration response carried no token")
        profile = user if user is not None else {"name": name, "email": email}
        return self._open(Variant.ADMIN, token, profile)

    async def forgot_password(self, email: str) -> None:
        """Ask the API to mail a password reset link."""
        email = email.strip()
        if not email:
            raise FormValidationError("Please enter your email address")
        await self._exchange("POST", "/auth/forgot-password", json={"email": email})
        _logger.info("Requested password reset for %s", email)

    async def reset_password(
        self, reset_token: str, password: str, confirm: str | None = None
    ) -> None:
        """Set a new password with a mailed reset token; no session changes."""
        if not reset_token.strip():
            raise FormValidationError("Reset link is invalid or has expired")
        if not password or (confirm is not None and not confirm):
            raise FormValidationError("Please fill in all fields")
        if confirm is not None and password != confirm:
            raise FormValidationError("Passwords do not match")
        _check_password_length(password)
        await self._exchange(
            "POST",
            "/auth/reset-password",
            json={"token": reset_token.strip(), "password": password},
        )

    async def _exchange(
        self,
        method: str,
        path: str,
        json: object | None = None,
        status_messages: dict[int, str] | None = None,
    ) -> object:
        try:
            return await self.api_client.request_anonymous(method, path, json=json)
        except ApiError as exc:
            if exc.status_code >= 500:  # noqa: PLR2004
                raise Unreachable(exc.message) from exc
            message = (status_messages or {}).get(exc.status_code, exc.message)
            raise InvalidCredentials(message) from exc

    def _open(
        self, variant: Variant, token: str, profile: dict[str, object]
    ) -> Session:
        self.store.write(variant, token, profile)
        self.synchronizer.notify(variant, ChangeKind.LOGIN)
        _logger.info("Logged in %s session", variant)
        return Session(variant=variant, token=token, profile=profile)


def _segment(value: str) -> str:
    return quote(value, safe="")


def _check_password_length(password: str, label: str = "Password") -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise FormValidationError(
            f"{label} must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
