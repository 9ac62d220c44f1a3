"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI

from access.interface.api.routes import health, invites
from access.util.di.container import create_container, lifespan, setup_di
from access.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use (defaults to the production container)
    """
    # Instrument httpx for outbound Keycloak and tenant service calls
    instrument_httpx()

    app_instance = FastAPI(
        title="Access Invites API",
        description="Issues, lists and redeems staff and partner access invitations",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    # Setup dependency injection
    # Settings are loaded from environment automatically
    setup_di(app_instance, container or create_container())

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(invites.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
app = create_app()
