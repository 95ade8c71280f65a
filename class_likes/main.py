"""Class likes — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from class_likes.config import settings
from class_likes.infrastructure.api.dependencies import get_counter_store
from class_likes.infrastructure.api.routes_health import router as health_router
from class_likes.infrastructure.api.routes_likes import router as likes_router
from class_likes.infrastructure.api.routes_schedule import router as schedule_router

logger = logging.getLogger(__name__)

NO_STORE = "no-store, max-age=0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    store = get_counter_store()
    logger.info(
        "Counter backend '%s' ready (durable=%s)", store.backend.name, store.backend.durable
    )
    yield
    await store.aclose()


def validation_error_message(exc: RequestValidationError) -> str:
    """Map pydantic errors onto the short messages the frontend expects."""
    for error in exc.errors():
        if error.get("type") == "json_invalid":
            return "Invalid JSON body"
    for error in exc.errors():
        if error.get("type") == "missing":
            return "Missing classId or action"
    for error in exc.errors():
        if error.get("loc", ())[-1:] == ("action",):
            return "Invalid action"
        if error.get("loc", ())[-1:] == ("classId",):
            return "Invalid classId"
    return "Invalid request body"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = validation_error_message(exc)
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"error": message})


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )

    app = FastAPI(
        title="Class Likes",
        description="Weekly class schedule with shared like counters",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS for the Next.js frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def disable_caching(request: Request, call_next):
        # Counts must be near-real-time for every viewer
        response = await call_next(request)
        response.headers["Cache-Control"] = NO_STORE
        return response

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Register routers
    app.include_router(health_router)
    app.include_router(likes_router)
    app.include_router(schedule_router)
    # Path used by the original frontend
    app.include_router(likes_router, prefix="/api", include_in_schema=False)

    return app


app = create_app()
