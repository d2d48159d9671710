"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import florists, health, map_view, maps, routes, territories
from .config import settings
from .persistence.store import get_store
from .services.territories.service import ensure_default_territories

logger = logging.getLogger(__name__)


def create_app(seed_territories: bool = True) -> FastAPI:
    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if seed_territories:
            created = ensure_default_territories(get_store())
            if created:
                logger.info("Seeded territories: %s", ", ".join(t.name for t in created))
        yield

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(maps.router, prefix=settings.api_prefix)
    app.include_router(florists.router, prefix=settings.api_prefix)
    app.include_router(territories.router, prefix=settings.api_prefix)
    app.include_router(routes.router, prefix=settings.api_prefix)
    app.include_router(map_view.router, prefix=settings.api_prefix)
    return app


app = create_app()
