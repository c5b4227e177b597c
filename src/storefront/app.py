from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx

from storefront.config import Config
from storefront.core.core import Core
from storefront.core.modules.customer.models import Registration
from storefront.core.modules.customer.validators import validate_email, validate_name, validate_password
from storefront.core.modules.rate_limit.keys import api_key, login_key, registration_key
from storefront.core.modules.rate_limit.models import RateLimitPolicy, RateLimitResult
from storefront.core.modules.rate_limit.policies import LOGIN_POLICY, REGISTRATION_POLICY, resolve_api_policy
from storefront.core.modules.session.credentials import CredentialStore
from storefront.core.modules.session.models import Principal
from storefront.errors import AuthenticationError, RateLimitError, ValidationError


class App:
    """Facade for all application operations, applies rate limits before delegating to Core."""

    def __init__(self, config: Config, backend_transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._core = Core(config, backend_transport)

    @property
    def core(self) -> Core:
        return self._core

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def login(self, email: str, password: str, client_ip: str | None, credentials: CredentialStore) -> Principal:
        """Authenticate against the backend and start a session, throttled per email and IP."""
        if not email or not password:
            raise ValidationError("Email and password are required")
        validate_email(email)

        key = login_key(email, client_ip)
        result = self._core.services.rate_limit.check_policy(key, LOGIN_POLICY)
        if not result.success:
            raise RateLimitError(
                result.reset_in,
                f"Too many login attempts. Try again in {result.reset_in_minutes} minutes.",
            )

        principal = await self._core.services.customer.authenticate(email, password)
        self._core.services.rate_limit.reset(key)
        self._core.services.session.create_session(principal, credentials)
        return principal

    async def register(
        self, registration: Registration, confirm_password: str, client_ip: str | None, credentials: CredentialStore
    ) -> Principal:
        """Create a backend account and start a session, throttled per IP."""
        result = self._core.services.rate_limit.check_policy(registration_key(client_ip), REGISTRATION_POLICY)
        if not result.success:
            raise RateLimitError(
                result.reset_in,
                f"Too many registration attempts. Try again in {result.reset_in_minutes} minutes.",
            )

        if not all((registration.email, registration.password, registration.first_name, registration.last_name)):
            raise ValidationError("All fields are required")
        validate_password(registration.password, confirm_password)
        validate_email(registration.email)
        validate_name(registration.first_name)
        validate_name(registration.last_name)

        principal = await self._core.services.customer.register(registration)
        self._core.services.session.create_session(principal, credentials)
        return principal

    def logout(self, credentials: CredentialStore) -> None:
        """End the session held by the client, if any."""
        self._core.services.session.delete_session(credentials)

    def get_current_user(self, credentials: CredentialStore) -> Principal | None:
        """Get the signed-in customer, or None for anonymous visitors."""
        session = self._core.services.session.get_session(credentials)
        return session.principal if session is not None else None

    def require_current_user(self, credentials: CredentialStore) -> Principal:
        """Get the signed-in customer, raising AuthenticationError for anonymous visitors."""
        principal = self.get_current_user(credentials)
        if principal is None:
            raise AuthenticationError("Not authenticated")
        return principal

    def check_api_limit(self, client_ip: str | None, path: str) -> tuple[RateLimitPolicy, RateLimitResult]:
        """Count one API request against the policy of its route prefix."""
        policy = resolve_api_policy(path)
        result = self._core.services.rate_limit.check_policy(api_key(client_ip, path), policy)
        return policy, result
