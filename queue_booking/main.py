import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from queue_booking.api.routes import admin, auth, bookings, slots
from queue_booking.core.config import _ENV_FILE, settings
from queue_booking.core.db import async_session_maker, init_db
from queue_booking.core.errors import BookingError, DependencyError
from queue_booking.services.auth_service import ensure_default_admin

if os.getenv("ENV") != "production":
    logging.basicConfig(level=logging.DEBUG)
else:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}',
    )
logger = logging.getLogger(__name__)

GENERIC_ERROR_DETAIL = "Something went wrong"


async def _bootstrap_admin() -> None:
    async with async_session_maker() as session:
        try:
            await ensure_default_admin(
                session, settings.default_admin_username, settings.default_admin_password
            )
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Loading .env from: %s (exists: %s)", _ENV_FILE, _ENV_FILE.exists())
    logger.info("Bookable time slots: %s", ", ".join(settings.booking_time_slots))
    if settings.auto_create_tables:
        await init_db()
    await _bootstrap_admin()
    if not settings.notifications_enabled:
        logger.warning(
            "LINE notifications: NOT configured. Set LINE_CHANNEL_ACCESS_TOKEN and LINE_ADMIN_USER_ID in %s",
            _ENV_FILE,
        )
    yield


app = FastAPI(
    title="Queue Booking API",
    description="Car wash queue booking: bookings, slots, admin review, LINE login",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

app.include_router(bookings.router, prefix="/api")
app.include_router(slots.router, prefix="/api")
app.include_router(admin.router, prefix="/api")
app.include_router(auth.router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.debug("Request: %s %s from %s", request.method, request.url.path, request.headers.get("origin") or "no origin")
    response = await call_next(request)
    logger.info("Response: %s for %s %s", response.status_code, request.method, request.url.path)
    return response


def _cors_headers(origin: str | None) -> dict[str, str]:
    """Add CORS headers to error responses so the browser doesn't block them."""
    headers = {
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": "GET, POST, PATCH, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": "Authorization, Content-Type",
    }
    if origin and origin in settings.cors_origins_list:
        headers["Access-Control-Allow-Origin"] = origin
    elif settings.cors_origins_list:
        headers["Access-Control-Allow-Origin"] = settings.cors_origins_list[0]
    return headers


def _error_response(request: Request, status_code: int, detail) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail},
        headers=_cors_headers(request.headers.get("origin")),
    )


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    if isinstance(exc, DependencyError):
        logger.error("Dependency failure on %s %s: %s", request.method, request.url.path, exc.message, exc_info=exc.__cause__)
    return _error_response(request, exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return _error_response(request, 400, errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(request, exc.status_code, exc.detail)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(request, 500, GENERIC_ERROR_DETAIL)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the real error; return a generic 500 with CORS so the browser sees it."""
    logger.exception("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(request, 500, GENERIC_ERROR_DETAIL)


@app.get("/")
async def root() -> dict:
    return {"message": "Queue Booking System API is running"}


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}
