"""
Application builder.
Assembles middleware, routes, clients and error handling into a FastAPI app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from tango_crm import __version__
from tango_crm.core.config import Settings, get_settings
from tango_crm.core.errors import InternalError, TangoError
from tango_crm.core.logging import app_logger, init_app_logging
from tango_crm.core.security import Authorizer
from tango_crm.infra.db import Database
from tango_crm.routers import admin, auth, growth, health, revenue
from tango_crm.services.revenue_growth_service import Clock, utc_now


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p not in ("query", "body"))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


class ApplicationBuilder:
    """Builder for the FastAPI application with separated concerns."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.app = FastAPI(
            title=settings.APP_NAME,
            version=__version__,
            description="Revenue tracking and growth analytics for creators, coaches, podcasters and freelancers",
            docs_url="/docs",
            redoc_url="/redoc",
        )
        self._middlewares_added = False
        self._routes_added = False
        self._clients_added = False

    def add_cors_middleware(self) -> ApplicationBuilder:
        if self._middlewares_added:
            raise RuntimeError("Middlewares already added")

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.CORS_ORIGINS_LIST or ["http://localhost:3000"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["ETag"],
        )
        app_logger.info("CORS middleware added")
        return self

    def add_security_middleware(self) -> ApplicationBuilder:
        if self._middlewares_added:
            raise RuntimeError("Middlewares already added")

        @self.app.middleware("http")
        async def add_security_headers(request: Request, call_next):
            response = await call_next(request)
            response.headers["X-Content-Type-Options"] = "nosniff"
            response.headers["X-Frame-Options"] = "DENY"
            return response

        return self

    def add_request_logging_middleware(self) -> ApplicationBuilder:
        if self._middlewares_added:
            raise RuntimeError("Middlewares already added")

        @self.app.middleware("http")
        async def log_requests(request: Request, call_next):
            response = await call_next(request)
            app_logger.info(
                "Request handled",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
            )
            return response

        return self

    def finalize_middlewares(self) -> ApplicationBuilder:
        self._middlewares_added = True
        return self

    def add_clients(
        self,
        database: Optional[Database] = None,
        clock: Optional[Clock] = None,
        authorizer: Optional[Authorizer] = None,
    ) -> ApplicationBuilder:
        """Construct the per-process clients and attach them to `app.state`."""
        if self._clients_added:
            raise RuntimeError("Clients already added")

        db = database or Database(self.settings.DATABASE_URL)
        self.app.state.db = db
        self.app.state.clock = clock or utc_now
        self.app.state.authorizer = authorizer or Authorizer()

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            app_logger.info("Starting application", env=self.settings.ENV)
            db.create_schema()
            app_logger.info("Database schema ready", dialect=db.engine.dialect.name)
            yield
            app_logger.info("Shutting down application")
            db.dispose()

        self.app.router.lifespan_context = lifespan
        self._clients_added = True
        return self

    def add_routes(self) -> ApplicationBuilder:
        if self._routes_added:
            raise RuntimeError("Routes already added")

        self.app.include_router(health.router)
        self.app.include_router(auth.router)
        self.app.include_router(growth.router)
        self.app.include_router(revenue.router)
        self.app.include_router(admin.router)

        @self.app.get("/", include_in_schema=False)
        def root():
            return {
                "name": self.settings.APP_NAME,
                "env": self.settings.ENV,
                "docs": "/docs",
                "healthz": "/healthz",
                "readyz": "/readyz",
            }

        self._routes_added = True
        return self

    def add_exception_handlers(self) -> ApplicationBuilder:
        """Map the error taxonomy onto HTTP responses."""

        @self.app.exception_handler(TangoError)
        async def tango_error_handler(request: Request, exc: TangoError):
            if exc.status_code >= 500:
                app_logger.error("Request failed", exc=exc, path=request.url.path)
                return JSONResponse(status_code=500, content={"detail": InternalError.default_detail})
            return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

        @self.app.exception_handler(RequestValidationError)
        async def validation_error_handler(request: Request, exc: RequestValidationError):
            return JSONResponse(status_code=400, content={"detail": _validation_message(exc)})

        @self.app.exception_handler(SQLAlchemyError)
        async def database_error_handler(request: Request, exc: SQLAlchemyError):
            app_logger.error("Data store failure", exc=exc, path=request.url.path)
            return JSONResponse(status_code=500, content={"detail": InternalError.default_detail})

        @self.app.exception_handler(Exception)
        async def internal_error_handler(request: Request, exc: Exception):
            app_logger.error("Unhandled error", exc=exc, path=request.url.path)
            return JSONResponse(status_code=500, content={"detail": InternalError.default_detail})

        return self

    def build(self) -> FastAPI:
        if not self._middlewares_added:
            raise RuntimeError("Middlewares not finalized")
        if not self._routes_added:
            raise RuntimeError("Routes not added")
        if not self._clients_added:
            raise RuntimeError("Clients not added")

        app_logger.info("FastAPI application built")
        return self.app


def create_application(
    settings: Optional[Settings] = None,
    *,
    database: Optional[Database] = None,
    clock: Optional[Clock] = None,
    authorizer: Optional[Authorizer] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    init_app_logging()

    builder = (
        ApplicationBuilder(settings)
        .add_cors_middleware()
        .add_security_middleware()
        .add_request_logging_middleware()
        .finalize_middlewares()
        .add_clients(database=database, clock=clock, authorizer=authorizer)
        .add_routes()
        .add_exception_handlers()
    )

    return builder.build()
