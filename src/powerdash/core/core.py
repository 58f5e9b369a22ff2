from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, cast

import httpx

from powerdash.config import Config
from powerdash.core.db import Database

if TYPE_CHECKING:
    from powerdash.core.modules.controller.service import ControllerService
    from powerdash.core.modules.session.service import SessionService
    from powerdash.core.modules.user.service import UserService


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: Database) -> None:
        self.database = database
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

    user: UserService
    session: SessionService
    controller: ControllerService

    def __init__(self, database: Database) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []
        self._database = database

        # Service configuration: (attribute_name, module_path, class_name)
        # Order matters for initialization - user must be first
        service_configs = [
            ("user", "powerdash.core.modules.user.service", "UserService"),
            ("session", "powerdash.core.modules.session.service", "SessionService"),
            ("controller", "powerdash.core.modules.controller.service", "ControllerService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database)
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
        """Stop all services in reverse start order."""
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing config, database, and all service instances."""

    config: Config
    database: Database
    services: Services

    def __init__(self, config: Config, controller_transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize core with config, the embedded database, and auto-register services.

        controller_transport replaces the network transport of the controller client (tests only).
        """
        self.config = config
        self.controller_transport = controller_transport
        self.database = Database(config.database_path)
        self.services = Services(self.database)
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
        """Stop services and release the database engine on shutdown."""
        await self.services.stop_all()
        self.database.close()
