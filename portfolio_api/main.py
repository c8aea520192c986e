# portfolio_api/main.py
"""
Portfolio CMS API

Admin authentication, content editing and contact messages on top of a
key-value store (Redis or in-memory), plus the public read endpoints the
portfolio site renders from.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional
import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_api.api import auth_routes, contact_routes, content_routes
from portfolio_api.core.config import Settings, settings, validate_required_settings
from portfolio_api.core.exceptions import (
    NotFoundError,
    PortfolioBaseException,
    PortfolioSecurityError,
    PortfolioValidationError,
)
from portfolio_api.core.logging_config import setup_logging
from portfolio_api.core.rate_limit_config import RATE_LIMIT_MESSAGE, limiter
from portfolio_api.core.security import (
    AuthService,
    CredentialVerifier,
    RequestAuthorizer,
    SessionStore,
)
from portfolio_api.core.service_base import BaseService
from portfolio_api.services.contact_service import ContactService
from portfolio_api.services.content_service import ContentService
from portfolio_api.services.kv_store import KeyValueStore
from portfolio_api.services.portfolio_service import PortfolioService
from portfolio_api.services.store_factory import create_store
from portfolio_api.services.validation_service import ContentValidator

VERSION = "1.0.0"

# Setup logging
logger = setup_logging()

DEVELOPMENT_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

GENERIC_ERROR_MESSAGE = "Internal server error"


def get_safe_error_message(error: Exception, context: str = "") -> str:
    """Return a safe error message that doesn't expose internal details"""
    # Client errors describe the caller's own input
    if isinstance(error, (PortfolioValidationError, NotFoundError)):
        logger.info(f"Rejected request in {context}: {error.message}")
        return error.message

    if isinstance(error, PortfolioSecurityError):
        logger.warning(f"Denied request in {context}: {error}")
        return "Unauthorized"

    # Log the full error internally
    logger.error(f"Error in {context}: {type(error).__name__}: {str(error)}")

    return GENERIC_ERROR_MESSAGE


def _cors_origins(config: Settings):
    origins = list(config.CORS_ORIGINS)
    if not config.is_production:
        origins += [o for o in DEVELOPMENT_ORIGINS if o not in origins]
    return origins


def create_app(config: Optional[Settings] = None, store: Optional[KeyValueStore] = None) -> FastAPI:
    """
    Build the application and wire its services.

    Args:
        config: Settings to use, defaults to the environment
        store: Key-value store to use, defaults to the one STORE_BACKEND names
    """
    config = config or settings
    store = store if store is not None else create_store(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """FastAPI lifespan event handler for startup/shutdown"""
        logger.info("=" * 60)
        logger.info(f"{config.APP_NAME} starting ({config.ENVIRONMENT})")
        logger.info("=" * 60)

        # Warn but don't fail; login answers "Invalid credentials" until configured
        if not validate_required_settings(config):
            logger.warning("Some environment variables are missing - admin features may fail")

        logger.info(f"Key-value store: {store.backend_name}")
        logger.info(f"Rate limiting: {'enabled' if limiter.enabled else 'disabled'}")

        yield

        logger.info(f"{config.APP_NAME} shutting down...")
        if isinstance(store, BaseService):
            await store.shutdown()

    app = FastAPI(
        title=config.APP_NAME,
        description="Content management backend for a personal portfolio",
        version=VERSION,
        lifespan=lifespan,
        docs_url=None if config.is_production else "/docs",
        redoc_url=None,
    )

    # =========================================================================
    # SERVICES
    # =========================================================================

    sessions = SessionStore(store)
    validator = ContentValidator()
    content_service = ContentService(store, validator)
    contact_service = ContactService(store, validator)

    app.state.settings = config
    app.state.store = store
    app.state.sessions = sessions
    app.state.auth_service = AuthService(
        CredentialVerifier(config.ADMIN_EMAIL, config.admin_password),
        sessions,
    )
    app.state.authorizer = RequestAuthorizer(sessions)
    app.state.content_service = content_service
    app.state.contact_service = contact_service
    app.state.portfolio_service = PortfolioService(content_service, contact_service)

    # =========================================================================
    # RATE LIMITING
    # =========================================================================

    limiter.enabled = config.RATE_LIMIT_ENABLED
    # Required by slowapi
    app.state.limiter = limiter

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        logger.warning(f"Rate limit exceeded: {request.method} {request.url.path}")
        response = JSONResponse(status_code=429, content={"error": RATE_LIMIT_MESSAGE})
        response.headers["Retry-After"] = "60"
        response.headers["X-RateLimit-Limit"] = str(getattr(exc, "detail", "N/A"))
        return response

    # =========================================================================
    # ERROR HANDLING
    # =========================================================================

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Invalid request body on {request.method} {request.url.path}")
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(PortfolioBaseException)
    async def portfolio_exception_handler(request: Request, exc: PortfolioBaseException):
        if isinstance(exc, PortfolioValidationError):
            status_code = 400
        elif isinstance(exc, NotFoundError):
            status_code = 404
        elif isinstance(exc, PortfolioSecurityError):
            status_code = 401
        else:
            status_code = 500

        context = f"{request.method} {request.url.path}"
        return JSONResponse(
            status_code=status_code,
            content={"error": get_safe_error_message(exc, context)},
        )

    # =========================================================================
    # MIDDLEWARE
    # =========================================================================

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all incoming requests except health checks"""
        path = request.url.path
        if path not in ("/", "/health"):
            logger.info(f"Request: {request.method} {path}")
        return await call_next(request)

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        """Add security headers to all responses"""
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        if config.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        # Remove server header if present
        if "server" in response.headers:
            del response.headers["server"]

        return response

    allowed_origins = _cors_origins(config)
    if config.is_production:
        logger.info("Production mode: localhost origins blocked in CORS")
    else:
        logger.info("Development mode: localhost origins allowed in CORS")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # =========================================================================
    # ROUTES
    # =========================================================================

    app.include_router(auth_routes.router)
    app.include_router(content_routes.admin_router)
    app.include_router(content_routes.public_router)
    app.include_router(contact_routes.router)

    @app.get("/", status_code=200)
    def read_root():
        """Liveness check"""
        return {"status": "ok", "version": VERSION, "service": "portfolio-api"}

    @app.get("/health", status_code=200)
    async def health():
        """Health check including the key-value store"""
        store_health = await store.health_check()
        return {
            "status": "healthy" if store_health.get("healthy") else "degraded",
            "timestamp": datetime.now().isoformat(),
            "store": {"backend": store.backend_name, **store_health},
        }

    return app


app = create_app()


# Main entry point
if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting server on port {port}...")

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        log_level="info"
    )
