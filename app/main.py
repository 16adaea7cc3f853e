"""FastAPI application entrypoint. No business logic; only wiring, middleware and error rendering."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1 import router as v1_router
from app.core.config import Settings, get_settings
from app.core.errors import ServiceError
from app.core.rate_limit import RateLimiter, RateLimitMiddleware

logger = logging.getLogger(__name__)

# Request fields whose values must never be echoed back in validation details.
SENSITIVE_FIELDS = frozenset({"password"})


def _validation_details(exc: RequestValidationError) -> list[dict]:
    details = []
    for error in exc.errors():
        error = dict(error)
        if SENSITIVE_FIELDS.intersection(str(part) for part in error.get("loc", ())):
            error.pop("input", None)
        elif isinstance(error.get("input"), dict):
            error["input"] = {
                k: v for k, v in error["input"].items() if k not in SENSITIVE_FIELDS
            }
        details.append(error)
    return jsonable_encoder(details)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": _validation_details(exc)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def create_app(
    settings: Settings | None = None,
    rate_limiter: RateLimiter | None = None,
) -> FastAPI:
    """
    Build the application. The rate limiter is created once here (unless one is
    passed in) and shared by reference with the middleware.
    """
    settings = settings or get_settings()
    app = FastAPI(
        title="Task Tracker API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if settings.RATE_LIMIT_ENABLED:
        limiter = rate_limiter or RateLimiter(
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )
        app.add_middleware(
            RateLimitMiddleware,
            limiter=limiter,
            trust_forwarded_for=settings.TRUST_FORWARDED_FOR,
        )
        app.state.rate_limiter = limiter

    # Added last so it wraps everything, 429 responses included.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
        expose_headers=["Retry-After", "X-RateLimit-Limit", "X-RateLimit-Remaining"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(v1_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Task Tracker API"}

    return app


app = create_app()
