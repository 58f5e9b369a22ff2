from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from powerdash.app import App
from powerdash.errors import ControllerError, UserError
from powerdash.web.error_handlers import (
    controller_error_handler,
    general_exception_handler,
    request_validation_error_handler,
    user_error_handler,
)
from powerdash.web.openapi import set_custom_openapi
from powerdash.web.routers import auth_router, pages_router, power_router


def create_fastapi_app(app_instance: App) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="powerdash API",
        lifespan=lifespan,
    )

    # Store app instance in app state
    app.state.app = app_instance

    # Health check endpoint (at root level, not under /api)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router, prefix="/api")
    app.include_router(power_router, prefix="/api")
    app.include_router(pages_router)

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(ControllerError, controller_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
