from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backoffice.clients.documents import DocumentStore
from backoffice.config import Settings, get_settings
from backoffice.dependencies.services import build_document_store
from backoffice.health import HEALTH_PATHS, router as health_router
from backoffice.routes.clients import router as clients_router
from backoffice.routes.finance import router as finance_router
from backoffice.routes.invoices import router as invoices_router
from backoffice.routes.purchases import router as purchases_router
from backoffice.routes.settings import router as settings_router
from backoffice.services.exceptions import ServiceError
from backoffice.services.validation import flatten_errors


def configure_logging(level: str = "INFO") -> None:
    """Ensure application logs use the configured level (INFO by default)."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    else:
        root_logger.setLevel(level)


# Configure logging as soon as the module is loaded
configure_logging(get_settings().log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    # --- Startup Logic ---
    settings: Settings = app.state.settings

    settings_snapshot = settings.model_dump(exclude={"store_token"})
    logger.info("Application settings on startup: %s", settings_snapshot)

    owns_store = app.state.store is None
    if owns_store:
        app.state.store = build_document_store(settings)
    logger.info("Application startup complete.")

    try:
        yield  # The application is now running
    finally:
        # --- Shutdown Logic ---
        if owns_store:
            logger.info("Closing document store connection.")
            await app.state.store.close()
            app.state.store = None
        logger.info("Application shutdown complete.")


def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "ValidationError", "details": flatten_errors(exc.errors()).as_dict()},
        )

    @app.exception_handler(ServiceError)
    async def service_error(request: Request, exc: ServiceError):
        logger.error("Unhandled service error on %s %s: %s", request.method, request.url.path, exc)
        return _error_response(500, str(exc))

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("Unexpected error on %s %s", request.method, request.url.path)
        return _error_response(500, str(exc) or "Internal Server Error")


def create_app(
    settings: Settings | None = None,
    *,
    store: DocumentStore | None = None,
) -> FastAPI:
    """Build the API. A ``store`` passed here is used as-is and never closed."""

    settings = settings or get_settings()
    app = FastAPI(
        title=settings.app_name,
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.started_at = time.monotonic()

    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        if request.url.path not in HEALTH_PATHS:
            logger.info(
                "%s %s %s %.1fms",
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
        return response

    register_exception_handlers(app)

    # --- Include Routers ---

    app.include_router(health_router)
    app.include_router(settings_router, prefix="/api/settings")
    app.include_router(clients_router, prefix="/api/clients")
    app.include_router(purchases_router, prefix="/api/purchases")
    app.include_router(invoices_router, prefix="/api/invoices")
    app.include_router(finance_router, prefix="/api/finance")
    return app


app = create_app()
