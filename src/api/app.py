"""
FastAPI application factory.

* Registers routes for the session, customer, driver and admin views.
* Disposes of the database engine on shutdown via the lifespan hook.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.api.middleware import limiter
from src.api.routes import admin, customer, driver, session
from src.config import settings
from src.infrastructure.database import engine

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Bhagao API starting")
    yield
    await engine.dispose()
    logger.info("Bhagao API stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Bhagao Ride-Hailing API",
        description=(
            "Customer booking, driver dashboard and admin console for the "
            "Bhagao ride-hailing service.  Identity comes from the hosted "
            "auth gateway; this service owns the table access."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Routers
    app.include_router(session.router, prefix="/api/v1")
    app.include_router(customer.router, prefix="/api/v1")
    app.include_router(driver.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
