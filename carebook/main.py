# carebook/main.py
import logging

from fastapi import FastAPI

from .core.config import settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION
from .routes import prometheus
from .routes.v1 import booking_rejections as booking_rejections_v1
from .routes.v1 import bookings as bookings_v1
from .routes.v1 import health as health_v1

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title=API_TITLE, description=API_DESCRIPTION, version=API_VERSION)

    app.include_router(health_v1.router)
    app.include_router(prometheus.router)
    app.include_router(bookings_v1.router, prefix="/api/v1/bookings")
    app.include_router(booking_rejections_v1.router, prefix="/api/v1/booking-rejections")

    logger.info(f"{API_TITLE} {API_VERSION} starting in {settings.environment} mode")
    return app


app = create_app()
