# Studio Booking - Studio and Equipment Booking Service
# Copyright (C) 2025 Oleg Tokmakov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""Main FastAPI application entry point."""

import os
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import CONFIG_ENV_VAR, get_settings, init_settings
from app.database import init_database
from app.routes import api_router

# Path prefix -> resource name used in generic validation messages
RESOURCE_NAMES = {
    "/api/bookings": "booking",
    "/api/equipment": "equipment",
    "/api/auth": "login",
}


def validation_error_message(request: Request, exc: RequestValidationError) -> str:
    """Build the generic 400 message for a rejected request."""
    path = request.url.path
    resource = next(
        (name for prefix, name in RESOURCE_NAMES.items() if path.startswith(prefix)),
        "request",
    )

    if any((error.get("loc") or ("",))[0] == "path" for error in exc.errors()):
        return f"Invalid {resource} ID"

    if resource == "booking" and path.endswith("/status"):
        return "Invalid booking status data"

    return f"Invalid {resource} data"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    print(f"Starting Studio Booking v{__version__}")

    config_path = os.environ.get(CONFIG_ENV_VAR)
    if config_path:
        init_settings(config_path)

    init_database()

    yield

    print("Studio Booking stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Studio Booking",
        description="Studio and equipment booking with admin review",
        version=__version__,
        license_info={
            "name": "AGPL-3.0-or-later",
            "url": "https://www.gnu.org/licenses/agpl-3.0.html",
        },
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.app.debug else [settings.app.base_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Return errors as {detail, message}; the client reads ``message``."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Map validation failures to 400 with a generic message."""
        message = validation_error_message(request, exc)
        return JSONResponse(
            status_code=400,
            content={"detail": message, "message": message},
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        print(f"[ERROR] {request.method} {request.url.path}")
        print("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))

        if settings.app.debug:
            return JSONResponse(
                status_code=500,
                content={
                    "detail": str(exc),
                    "message": str(exc),
                    "type": type(exc).__name__,
                },
            )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "message": "Internal server error"},
        )

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.app.host,
        port=settings.app.port,
        reload=settings.app.debug,
    )
