"""FastAPI application factory."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from . import __version__
from .api.router import api_router
from .config import Settings, get_settings
from .database import get_engine, init_database, session_factory, session_scope
from .exceptions import InventoryError
from .log import configure_logging, get_logger
from .seed import seed_demo_data

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    *engine* defaults to the process-wide engine built from the settings;
    tests pass their own in-memory engine.
    """

    settings = settings or get_settings()
    configure_logging(settings)
    engine = engine or get_engine()
    init_database(engine)
    if settings.seed_demo_data:
        with session_scope(engine) as session:
            seed_demo_data(session)

    app = FastAPI(title=settings.app_name, version=__version__)
    app.state.session_factory = session_factory(engine)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(InventoryError)
    async def handle_inventory_error(request: Request, exc: InventoryError) -> JSONResponse:
        logger.warning(
            "request_rejected",
            path=request.url.path,
            error=exc.code,
            message=exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/health", tags=["system"])
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(api_router, prefix="/api")
    return app
