"""Shared pytest fixtures."""

from datetime import UTC, datetime, timedelta
from urllib.parse import parse_qsl

import httpx
import pytest

from storefront.config import Config
from storefront.core.modules.session.models import Principal

TEST_SECRET = "test-secret-key-that-is-long-enough-0123456789"


class FakeClock:
    """Datetime clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta


class FakeMsClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.current = start

    def __call__(self) -> int:
        return self.current

    def advance(self, ms: int) -> None:
        self.current += ms


def fake_backend(request: httpx.Request) -> httpx.Response:
    """Commerce backend stand-in answering the login and register controllers."""
    controller = request.url.params.get("controller")
    form = dict(parse_qsl(request.content.decode()))

    if controller == "login":
        if form.get("email") == "alice@example.com" and form.get("password") == "Secret123":
            user = {"id": 42, "email": "alice@example.com", "firstname": "Alice", "lastname": "Smith"}
            return httpx.Response(200, json={"success": True, "code": 200, "psdata": {"user": user}})
        failure = {"success": False, "code": 306, "psdata": {"message": "Invalid email or password"}}
        return httpx.Response(200, json=failure)

    if controller == "register":
        if form.get("email") == "taken@example.com":
            return httpx.Response(200, json={"success": False, "code": 308, "psdata": "Email already registered"})
        registered = {"success": True, "code": 200, "psdata": {"registered": True, "customer_id": "77"}}
        return httpx.Response(200, json=registered)

    return httpx.Response(404, text="Unknown controller")


@pytest.fixture
def config():
    """Development config with a valid secret and no .env lookup."""
    return Config(_env_file=None, auth_secret=TEST_SECRET, environment="development")


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 3, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def ms_clock():
    return FakeMsClock()


@pytest.fixture
def principal():
    return Principal(subject_id="42", email="alice@example.com", first_name="Alice", last_name="Smith")


@pytest.fixture
def backend_transport():
    return httpx.MockTransport(fake_backend)
