from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, cast

import httpx

from storefront.config import Config

if TYPE_CHECKING:
    from storefront.core.modules.customer.service import CustomerService
    from storefront.core.modules.rate_limit.service import RateLimitService
    from storefront.core.modules.session.service import SessionService


class Service:
    """Base class for services sharing the application config."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    session: SessionService
    rate_limit: RateLimitService
    customer: CustomerService

    def __init__(self, config: Config) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []

        # Service configuration: (attribute_name, module_path, class_name)
        service_configs = [
            ("session", "storefront.core.modules.session.service", "SessionService"),
            ("rate_limit", "storefront.core.modules.rate_limit.service", "RateLimitService"),
            ("customer", "storefront.core.modules.customer.service", "CustomerService"),
        ]

        # Dynamically import and instantiate services
        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(config)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services that have cleanup logic."""
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, the backend HTTP client, and all service instances."""

    config: Config
    http_client: httpx.AsyncClient
    services: Services

    def __init__(self, config: Config, backend_transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize core with config, the backend client, and auto-register services."""
        self.config = config
        headers = {"Accept": "application/json"}
        if config.backend_api_key:
            headers["Authorization"] = f"Basic {config.backend_api_key}"
        self.http_client = httpx.AsyncClient(
            base_url=config.backend_url,
            headers=headers,
            timeout=config.backend_timeout,
            transport=backend_transport,
        )
        self.services = Services(config)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Start all services on application startup."""
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close the backend client on shutdown."""
        await self.services.stop_all()
        await self.http_client.aclose()
