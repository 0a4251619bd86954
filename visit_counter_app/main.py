from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from visit_counter_app.api import count
from visit_counter_app.bootstrap import AppContext, build_context
from visit_counter_app.config import Settings, get_settings
from visit_counter_app.exceptions import VisitCounterError
from visit_counter_app.schemas.count import ErrorResponse


async def visit_counter_error_handler(request: Request, exc: VisitCounterError) -> JSONResponse:
    """Every known failure looks the same to the caller"""
    print(f"❌ {request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse().model_dump(),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unexpected failures get the same body instead of a plain-text 500"""
    print(f"❌ {request.method} {request.url.path} crashed: {exc!r}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse().model_dump(),
    )


def create_app(settings: Optional[Settings] = None, context: Optional[AppContext] = None) -> FastAPI:
    """
    Build the FastAPI app.

    Without a context, dependencies are built from settings when the app
    starts and closed when it stops. A prebuilt context (tests) is used as is.
    """
    if context is not None:
        settings = context.settings
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if context is not None:
            app.state.context = context
            yield
            return

        app.state.context = await build_context(settings)
        print(f"✅ {settings.app_name} loaded")
        try:
            yield
        finally:
            await app.state.context.close()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Per-IP visit counter with queue and stream fan-out",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
        allow_headers=["Origin", "Content-Length", "Content-Type"],
    )
    app.add_exception_handler(VisitCounterError, visit_counter_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    ######## Include routers
    app.include_router(count.router)

    return app
