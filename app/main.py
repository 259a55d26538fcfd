from fastapi import FastAPI

from app.api.v1.bookings import router as booking_search_router
from app.core.config import settings
from app.core.log_format import configure_logging


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    api = FastAPI(title="Community Hall Booking Search", version="1.0.0")
    api.include_router(booking_search_router, prefix="/api/v1", tags=["booking-search"])

    @api.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return api


app = create_app()
