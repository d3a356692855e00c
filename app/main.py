# app/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import configure_logging
from app.db import init_db
from app.errors import BookingError, StoreUnavailable
from app.routers import (
    admin_routes,
    appointments_routes,
    auth_routes,
    barbers_routes,
    users_routes,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db()
    yield


def create_app(lifespan=lifespan) -> FastAPI:
    app = FastAPI(title="Barbershop Booking API", lifespan=lifespan)

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        if isinstance(exc, StoreUnavailable):
            logger.error("%s %s failed: store unavailable during %s", request.method, request.url.path, exc.operation)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, **exc.context()},
        )

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(auth_routes.router)
    app.include_router(users_routes.router)
    app.include_router(barbers_routes.router)
    app.include_router(appointments_routes.router)
    app.include_router(admin_routes.router)
    return app


app = create_app()
