import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .bookings import BookingService
from .config import Settings, settings as default_settings
from .errors import AppError, RateLimitExceededError, StorageError
from .notifications import NotificationDispatcher
from .rate_limiter import RateLimiter
from .routes import admin as admin_routes, bookings as booking_routes
from .services.email_service import build_email_channel
from .services.sms_service import build_sms_channel
from .sessions import AdminSessionGuard, MemorySessionStore, SessionStore, SqlSessionStore
from .storage import BookingStore, SqlBookingStore, build_store

# ================== LOGGING ==================
logging.basicConfig(
    level=getattr(logging, default_settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

logging.getLogger("twilio.http_client").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)


# ================== APP ==================
def create_app(
    settings: Optional[Settings] = None,
    store: Optional[BookingStore] = None,
    session_store: Optional[SessionStore] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> FastAPI:
    """Wire storage, sessions and notifications into a FastAPI app.

    Every collaborator can be injected; anything left out is built from
    ``settings``.
    """
    settings = settings or default_settings

    if store is None:
        store = build_store(settings.DATABASE_URL, timeout=settings.STORAGE_TIMEOUT_SECONDS)
    if session_store is None:
        if isinstance(store, SqlBookingStore):
            session_store = SqlSessionStore(store.SessionLocal)
        else:
            session_store = MemorySessionStore()
    if dispatcher is None:
        dispatcher = NotificationDispatcher(
            sms_channel=build_sms_channel(settings),
            email_channel=build_email_channel(settings),
            timeout=settings.NOTIFICATION_TIMEOUT_SECONDS,
            organization=settings.ORGANIZATION_NAME,
            contact_phone=settings.CONTACT_PHONE,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"🚐 {settings.ORGANIZATION_NAME} booking service starting up...")
        if isinstance(store, SqlBookingStore):
            store.init_schema()
        purged = session_store.purge_expired(clock())
        if purged:
            logger.info(f"🧹 Removed {purged} expired admin sessions")
        yield
        store.close()
        logger.info("Application shutting down...")

    app = FastAPI(title=f"{settings.ORGANIZATION_NAME} Transportation API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.store = store
    app.state.dispatcher = dispatcher
    app.state.booking_service = BookingService(
        store, dispatcher, clock=clock, max_guests=settings.MAX_GUESTS_PER_BOOKING
    )
    app.state.session_guard = AdminSessionGuard(
        session_store,
        settings.ADMIN_PASSWORD,
        ttl=timedelta(hours=settings.SESSION_TTL_HOURS),
        clock=clock,
    )
    app.state.login_limiter = RateLimiter(settings.LOGIN_RATE_LIMIT, settings.LOGIN_RATE_WINDOW_SECONDS)

    register_exception_handlers(app)
    app.include_router(booking_routes.router)
    app.include_router(admin_routes.router)

    @app.get("/api/health")
    def health():
        return {"status": "ok", "channels": dispatcher.channels}

    return app


# ================== ERRORS ==================
def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        headers = None
        if isinstance(exc, StorageError):
            logger.error(f"❌ Storage failure on {request.method} {request.url.path}: {exc.message}")
        elif isinstance(exc, RateLimitExceededError):
            headers = {"Retry-After": str(exc.retry_after)}
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())[1:]),
                "message": error.get("msg", ""),
            }
            for error in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail
        if exc.status_code == 404 and message == "Not Found":
            message = "Route not found"
        return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


app = create_app()
