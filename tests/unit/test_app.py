"""Tests for the application facade outside of HTTP."""

import asyncio

import pytest

from storefront.app import App
from storefront.core.modules.customer.models import Registration
from storefront.core.modules.rate_limit.keys import login_key
from storefront.core.modules.session.credentials import MemoryCredentialStore
from storefront.errors import AuthenticationError, RateLimitError, ValidationError


@pytest.fixture
def app(config, backend_transport):
    return App(config, backend_transport=backend_transport)


@pytest.fixture
def credentials():
    return MemoryCredentialStore()


def registration(email="new@example.com", first_name="Nowy"):
    return Registration(email=email, password="Secret123", first_name=first_name, last_name="Klient")


class TestLogin:
    def test_success_starts_session(self, app, credentials):
        principal = asyncio.run(app.login("alice@example.com", "Secret123", "1.2.3.4", credentials))

        assert principal.subject_id == "42"
        assert credentials.get() is not None
        assert app.get_current_user(credentials) == principal

    def test_wrong_password_counts_attempt(self, app, credentials):
        with pytest.raises(AuthenticationError):
            asyncio.run(app.login("alice@example.com", "wrong", "1.2.3.4", credentials))

        entry = app.core.services.rate_limit.store.get(login_key("alice@example.com", "1.2.3.4"))
        assert entry.attempt_count == 1
        assert credentials.get() is None

    def test_sixth_attempt_is_rate_limited(self, app, credentials):
        """Test that the sixth login within the window fails before reaching the backend."""
        for _ in range(5):
            with pytest.raises(AuthenticationError):
                asyncio.run(app.login("alice@example.com", "wrong", "1.2.3.4", credentials))

        with pytest.raises(RateLimitError, match="Try again in 15 minutes") as exc_info:
            asyncio.run(app.login("alice@example.com", "Secret123", "1.2.3.4", credentials))

        assert 0 < exc_info.value.retry_after <= 900
        assert credentials.get() is None

    def test_other_ip_is_not_limited(self, app, credentials):
        for _ in range(5):
            with pytest.raises(AuthenticationError):
                asyncio.run(app.login("alice@example.com", "wrong", "1.2.3.4", credentials))

        principal = asyncio.run(app.login("alice@example.com", "Secret123", "5.6.7.8", credentials))
        assert principal.subject_id == "42"

    def test_success_resets_attempts(self, app, credentials):
        for _ in range(4):
            with pytest.raises(AuthenticationError):
                asyncio.run(app.login("alice@example.com", "wrong", "1.2.3.4", credentials))

        asyncio.run(app.login("alice@example.com", "Secret123", "1.2.3.4", credentials))

        assert app.core.services.rate_limit.store.get(login_key("alice@example.com", "1.2.3.4")) is None

    def test_invalid_email_is_rejected_before_counting(self, app, credentials):
        with pytest.raises(ValidationError, match="Invalid email format"):
            asyncio.run(app.login("not-an-email", "Secret123", "1.2.3.4", credentials))

        assert app.core.services.rate_limit.store.get(login_key("not-an-email", "1.2.3.4")) is None

    def test_missing_fields(self, app, credentials):
        with pytest.raises(ValidationError, match="required"):
            asyncio.run(app.login("", "", "1.2.3.4", credentials))


class TestRegister:
    def test_success_starts_session(self, app, credentials):
        principal = asyncio.run(app.register(registration(), "Secret123", "9.9.9.9", credentials))

        assert principal.subject_id == "77"
        assert app.get_current_user(credentials) == principal

    def test_validation_runs_after_rate_limit(self, app, credentials):
        """Test that invalid submissions still use up registration attempts."""
        for _ in range(5):
            with pytest.raises(ValidationError):
                asyncio.run(app.register(registration(first_name="R2D2"), "Secret123", "9.9.9.9", credentials))

        with pytest.raises(RateLimitError, match="Too many registration attempts"):
            asyncio.run(app.register(registration(), "Secret123", "9.9.9.9", credentials))

    def test_password_confirmation(self, app, credentials):
        with pytest.raises(ValidationError, match="do not match"):
            asyncio.run(app.register(registration(), "Secret124", "9.9.9.9", credentials))

    def test_backend_rejection(self, app, credentials):
        with pytest.raises(ValidationError, match="Email already registered"):
            asyncio.run(app.register(registration(email="taken@example.com"), "Secret123", "9.9.9.9", credentials))
        assert credentials.get() is None


class TestSessionAccess:
    def test_anonymous(self, app, credentials):
        assert app.get_current_user(credentials) is None
        with pytest.raises(AuthenticationError, match="Not authenticated"):
            app.require_current_user(credentials)

    def test_logout(self, app, credentials):
        asyncio.run(app.login("alice@example.com", "Secret123", "1.2.3.4", credentials))

        app.logout(credentials)
        app.logout(credentials)

        assert app.get_current_user(credentials) is None


class TestApiLimit:
    def test_uses_route_policy(self, app):
        policy, result = app.check_api_limit("1.2.3.4", "/api/checkout")

        assert policy.max_attempts == 10
        assert result.remaining == 9
