# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Instantiate the FastAPI app for a given ``Settings``.
* Register CORS and request-logging middleware.
* Map domain errors onto the ``{"success": ..., "message": ...}`` envelope.
* Mount the account router, the shared password-reset router and the verify
  router of the configured reset variant.
* Own the external resources: the DB engine and the SMTP mailer are created
  when the app starts and the engine is disposed when it stops.
* Expose /api/health for container liveness checks.

Run with:
    cd backend && uvicorn main:app
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

import models.user  # noqa: F401  – registers the users table on Base.metadata
from auth.router import router as auth_router
from core.config import Settings, settings
from core.errors import InternalError, ServiceError
from core.logger import logger
from database import Base, create_db_engine, create_session_factory
from notify.mailer import SmtpMailer
from reset.lifecycle import build_strategy
from reset.router import otp_router, router as reset_router, token_router


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs every inbound request: method, path, client IP, status, latency.
# Request bodies (passwords, codes) are NOT echoed – only the URL and
# metadata are recorded.  For the token variant the path itself carries the
# secret, so verify-token paths are logged without it.


def _loggable_path(path: str) -> str:
    marker = "/verify-token/"
    if marker in path:
        return path.split(marker, 1)[0] + marker + "***"
    return path


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            _loggable_path(request.url.path),
            client_ip,
            response.status_code,
            elapsed_ms,
        )
        return response


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def _service_error(request: Request, exc: ServiceError):
        return _envelope(exc.status_code, exc.message)

    @app.exception_handler(SQLAlchemyError)
    async def _db_error(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, _loggable_path(request.url.path))
        err = InternalError()
        return _envelope(err.status_code, err.message)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        return _envelope(400, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, _loggable_path(request.url.path))
        err = InternalError()
        return _envelope(err.status_code, err.message)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def create_app(config: Settings = settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = create_db_engine(config.database_url)
        if config.create_tables:
            Base.metadata.create_all(bind=engine)
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
        app.state.notifier = SmtpMailer.from_settings(config)
        app.state.reset_strategy = build_strategy(config)
        logger.info("Password reset service starting up (variant=%s)", config.reset_variant)
        try:
            yield
        finally:
            logger.info("Password reset service shutting down")
            engine.dispose()

    app = FastAPI(title="Password Reset Service", version="1.0.0", lifespan=lifespan)
    app.state.settings = config

    # In development we allow the local frontend only.
    # Tighten to your production domain before deploying.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
    app.add_middleware(_RequestLogMiddleware)

    _register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(reset_router)
    app.include_router(token_router if config.reset_variant == "token" else otp_router)

    @app.get("/api/health")
    def health():
        return {"success": True, "status": "OK", "message": "Server is running"}

    return app


app = create_app()
