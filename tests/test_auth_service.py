"""Tests for session lifecycle operations."""

import asyncio

import pytest

from darenow_console.domain.errors import (
    FormValidationError,
    InvalidCredentials,
    MalformedResponse,
    NotAuthenticated,
    Unauthorized,
    Unreachable,
)
from darenow_console.domain.sessions import (
    ChangeKind,
    Session,
    SessionChange,
    Variant,
)
from tests.conftest import Console, StubApi

ADMIN_LOGIN = "GET /admin/login/username/alice/password/pw"
PLACE_LOGIN = "GET /place/login/email/owner@fig.test/password/secret"


def test_admin_login_writes_session_and_notifies(
    console: Console, stub_api: StubApi
) -> None:
    stub_api.reply(
        ADMIN_LOGIN, body={"data": {"token": "T1", "adminData": {"userName": "alice"}}}
    )
    seen: list[SessionChange] = []
    console.synchronizer.subscribe(seen.append)

    session = asyncio.run(
        console.auth.login(Variant.ADMIN, {"username": "alice", "password": "pw"})
    )

    assert session == console.store.read(Variant.ADMIN)
    assert session.token == "T1"
    assert session.profile["username"] == "alice"
    assert session.profile["isAdmin"] is True
    assert seen == [SessionChange(Variant.ADMIN, ChangeKind.LOGIN)]


def test_admin_login_sends_no_bearer_token(console: Console, stub_api: StubApi) -> None:
    console.store.write(Variant.ADMIN, "OLD", {"username": "alice"})
    stub_api.reply(ADMIN_LOGIN, body={"data": {"token": "T2", "adminData": {}}})

    asyncio.run(console.auth.login_admin("alice", "pw"))

    assert stub_api.authorization() is None
    assert console.store.token(Variant.ADMIN) == "T2"


def test_admin_login_encodes_path_segments(console: Console, stub_api: StubApi) -> None:
    stub_api.reply(
        "GET /admin/login/username/al ice/password/p/w?",
        body={"data": {"token": "T1", "adminData": None}},
    )

    session = asyncio.run(console.auth.login_admin("al ice", "p/w?"))

    assert stub_api.last.url.raw_path.endswith(b"/username/al%20ice/password/p%2Fw%3F")
    assert session.profile["username"] == "al ice"


def test_admin_login_rejected_raises_invalid_credentials(
    console: Console, stub_api: StubApi
) -> None:
    stub_api.reply(ADMIN_LOGIN, status=401, body={"message": "Bad credentials"})

    with pytest.raises(InvalidCredentials, match="Bad credentials"):
        asyncio.run(console.auth.login_admin("alice", "pw"))

    assert console.store.read(Variant.ADMIN) is None


def test_admin_login_server_error_is_unreachable(
    console: Console, stub_api: StubApi
) -> None:
    stub_api.reply(ADMIN_LOGIN, status=502)

    with pytest.raises(Unreachable):
        asyncio.run(console.auth.login_admin("alice", "pw"))


@pytest.mark.parametrize(
    "body",
    [
        {"data": {"adminData": {"userName": "alice"}}},
        {"token": "T1"},
        {"data": "nope"},
        None,
    ],
)
def test_admin_login_malformed_response_writes_nothing(
    console: Console, stub_api: StubApi, body: object
) -> None:
    stub_api.reply(ADMIN_LOGIN, body=body)

    with pytest.raises(MalformedResponse):
        asyncio.run(console.auth.login_admin("alice", "pw"))

    assert console.storage.get_item("token") is None
    assert console.storage.get_item("user") is None


@pytest.mark.parametrize(
    "body",
    [
        {"data": {"placeData": {"placeId": 4, "name": "Blue Fig"}, "token": "R1"}},
        {"placeData": {"placeId": 4, "name": "Blue Fig"}, "token": "R1"},
    ],
)
def test_restaurant_login_accepts_both_envelopes(
    console: Console, stub_api: StubApi, body: dict[str, object]
) -> None:
    stub_api.reply(PLACE_LOGIN, body=body)

    session = asyncio.run(
        console.auth.login(
            Variant.RESTAURANT, {"email": " owner@fig.test ", "password": "secret"}
        )
    )

    assert session == Session(
        variant=Variant.RESTAURANT,
        token="R1",
        profile={"placeData": {"placeId": 4, "name": "Blue Fig"}},
    )
    assert console.store.read(Variant.RESTAURANT) == session


def test_restaurant_login_without_token_is_malformed(
    console: Console, stub_api: StubApi
) -> None:
    console.store.write(Variant.ADMIN, "ADMIN", {"username": "alice"})
    stub_api.reply(PLACE_LOGIN, body={"placeData": {"placeId": 4}})

    with pytest.raises(MalformedResponse):
        asyncio.run(console.auth.login_restaurant("owner@fig.test", "secret"))

    assert console.store.read(Variant.RESTAURANT) is None


def test_restaurant_login_rejected_keeps_existing_sessions(
    console: Console, stub_api: StubApi
) -> None:
    console.store.write(Variant.RESTAURANT, "R0", {"placeId": 4})
    stub_api.reply(PLACE_LOGIN, status=400, body={"responseMsg": "Unauthorized user"})

    with pytest.raises(InvalidCredentials, match="Unauthorized user"):
        asyncio.run(console.auth.login_restaurant("owner@fig.test", "secret"))

    assert console.store.token(Variant.RESTAURANT) == "R0"


@pytest.mark.parametrize(("email", "password"), [("", "secret"), ("a@b.c", " ")])
def test_restaurant_login_validates_input(
    console: Console, stub_api: StubApi, email: str, password: str
) -> None:
    with pytest.raises(FormValidationError):
        asyncio.run(console.auth.login_restaurant(email, password))

    assert stub_api.requests == []


def test_logout_is_idempotent(console: Console) -> None:
    console.store.write(Variant.ADMIN, "A1", {"username": "alice"})
    seen: list[SessionChange] = []
    console.synchronizer.subscribe(seen.append)

    assert console.auth.logout(Variant.ADMIN) == "/login"
    assert console.auth.logout(Variant.ADMIN) == "/login"

    assert console.store.read(Variant.ADMIN) is None
    assert [change.kind for change in seen] == [ChangeKind.LOGOUT, ChangeKind.LOGOUT]


def test_logout_leaves_other_variant(console: Console) -> None:
    console.store.write(Variant.ADMIN, "A1", {"username": "alice"})
    console.store.write(Variant.RESTAURANT, "R1", {"placeId": 4})

    assert console.auth.logout(Variant.RESTAURANT) == "/restaurant/login"

    assert console.store.read(Variant.ADMIN) is not None


def test_update_password_sends_authenticated_put(
    console: Console, stub_api: StubApi
) -> None:
    console.store.write(Variant.ADMIN, "A1", {"username": "alice", "name": "alice"})
    route = (
        "PUT /admin/changePassword/username/alice"
        "/currentpassword/old-pass/newPassword/new-pass"
    )
    stub_api.reply(route, body={"message": "ok"})

    asyncio.run(
        console.auth.update_password(Variant.ADMIN, "old-pass", "new-pass", "new-pass")
    )

    assert stub_api.last.method == "PUT"
    assert stub_api.authorization() == "Bearer A1"
    assert console.store.token(Variant.ADMIN) == "A1"


@pytest.mark.parametrize(
    ("current", "new", "confirm"),
    [
        ("", "new-pass", "new-pass"),
        ("old-pass", "new-pass", "other-pass"),
        ("old-pass", "short", "short"),
        ("old-pass", "new-pass", ""),
    ],
)
def test_update_password_validates_form(
    console: Console, stub_api: StubApi, current: str, new: str, confirm: str
) -> None:
    console.store.write(Variant.ADMIN, "A1", {"username": "alice"})

    with pytest.raises(FormValidationError):
        asyncio.run(console.auth.update_password(Variant.ADMIN, current, new, confirm))

    assert stub_api.requests == []


def test_update_password_requires_admin_session(console: Console) -> None:
    with pytest.raises(NotAuthenticated):
        asyncio.run(console.auth.update_password(Variant.ADMIN, "old-pass", "new-pass"))


def test_update_password_is_admin_only(console: Console) -> None:
    with pytest.raises(ValueError):
        asyncio.run(
            console.auth.update_password(Variant.RESTAURANT, "old-pass", "new-pass")
        )


def test_update_password_expired_session_redirects(
    console: Console, stub_api: StubApi
) -> None:
    console.store.write(Variant.ADMIN, "A1", {"username": "alice"})
    console.navigator.history = ["/update-password"]
    stub_api.reply(
        "PUT /admin/changePassword/username/alice"
        "/currentpassword/old-pass/newPassword/new-pass",
        status=401,
    )

    with pytest.raises(Unauthorized):
        asyncio.run(console.auth.update_password(Variant.ADMIN, "old-pass", "new-pass"))

    assert console.store.read(Variant.ADMIN) is None
    assert console.navigator.location == "/login"


def test_restaurant_login_bad_request_reads_as_unauthorized_user(
    console: Console, stub_api: StubApi
) -> None:
    stub_api.reply(PLACE_LOGIN, status=400)

    with pytest.raises(InvalidCredentials, match="^Unauthorized user$"):
        asyncio.run(console.auth.login_restaurant("owner@fig.test", "secret"))


def test_register_opens_admin_session(console: Console, stub_api: StubApi) -> None:
    stub_api.reply(
        "POST /auth/register",
        body={"token": "R1", "user": {"name": "Alice", "email": "a@fig.test"}},
    )
    seen: list[SessionChange] = []
    console.synchronizer.subscribe(seen.append)

    session = asyncio.run(console.auth.register(" Alice ", "a@fig.test", "secret"))

    assert stub_api.body() == {
        "name": "Alice",
        "email": "a@fig.test",
        "password": "secret",
    }
    assert stub_api.authorization() is None
    assert session == console.store.read(Variant.ADMIN)
    assert session.profile == {"name": "Alice", "email": "a@fig.test"}
    assert seen == [SessionChange(Variant.ADMIN, ChangeKind.LOGIN)]


def test_register_without_token_writes_nothing(
    console: Console, stub_api: StubApi
) -> None:
    stub_api.reply("POST /auth/register", body={"user": {"name": "Alice"}})

    with pytest.raises(MalformedResponse):
        asyncio.run(console.auth.register("Alice", "a@fig.test", "secret"))

    assert console.store.read(Variant.ADMIN) is None


def test_register_rejected_raises_invalid_credentials(
    console: Console, stub_api: StubApi
) -> None:
    stub_api.reply(
        "POST /auth/register", status=409, body={"message": "Email already in use"}
    )

    with pytest.raises(InvalidCredentials, match="Email already in use"):
        asyncio.run(console.auth.register("Alice", "a@fig.test", "secret"))


@pytest.mark.parametrize(
    ("name", "email", "password"),
    [("", "a@fig.test", "secret"), ("Alice", " ", "secret"), ("Alice", "a@b", "123")],
)
def test_register_validates_form(
    console: Console, stub_api: StubApi, name: str, email: str, password: str
) -> None:
    with pytest.raises(FormValidationError):
        asyncio.run(console.auth.register(name, email, password))

    assert stub_api.requests == []


def test_forgot_password_posts_email_without_session_changes(
    console: Console, stub_api: StubApi
) -> None:
    console.store.write(Variant.ADMIN, "A1", {"username": "alice"})

    asyncio.run(console.auth.forgot_password(" a@fig.test "))

    assert stub_api.last.url.path == "/api/auth/forgot-password"
    assert stub_api.body() == {"email": "a@fig.test"}
    assert stub_api.authorization() is None
    assert console.store.token(Variant.ADMIN) == "A1"


def test_forgot_password_server_error_is_unreachable(
    console: Console, stub_api: StubApi
) -> None:
    stub_api.reply("POST /auth/forgot-password", status=503)

    with pytest.raises(Unreachable):
        asyncio.run(console.auth.forgot_password("a@fig.test"))


def test_reset_password_posts_token_and_password(
    console: Console, stub_api: StubApi
) -> None:
    asyncio.run(console.auth.reset_password("reset-1", "secret", "secret"))

    assert stub_api.body() == {"token": "reset-1", "password": "secret"}
    assert console.store.read(Variant.ADMIN) is None


def test_reset_password_rejected_token(console: Console, stub_api: StubApi) -> None:
    stub_api.reply(
        "POST /auth/reset-password", status=400, body={"message": "Token expired"}
    )

    with pytest.raises(InvalidCredentials, match="Token expired"):
        asyncio.run(console.auth.reset_password("reset-1", "secret"))


@pytest.mark.parametrize(
    ("reset_token", "password", "confirm"),
    [("", "secret", None), ("t", "secret", "secrets"), ("t", "123", "123")],
)
def test_reset_password_validates_form(
    console: Console,
    stub_api: StubApi,
    reset_token: str,
    password: str,
    confirm: str | None,
) -> None:
    with pytest.raises(FormValidationError):
        asyncio.run(console.auth.reset_password(reset_token, password, confirm))

    assert stub_api.requests == []
