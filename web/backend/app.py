#!/usr/bin/env python3
"""
Kindred Matching API - FastAPI Application

Discovery, likes and matches over HTTP/JSON with automatic API documentation.

Usage:
    python main.py serve

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging

from fastapi import FastAPI

from core.config_loader import get_config
from .exceptions import register_exception_handlers
from .routers import (
    discover_router,
    likes_router,
    matches_router
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Kindred Matching API",
        description="Candidate discovery, compatibility scoring, likes and matches",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    register_exception_handlers(app)

    app.include_router(discover_router)
    app.include_router(likes_router)
    app.include_router(matches_router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "kindred-matching"}

    return app


app = create_app()


def main():
    """Run the web server."""
    import uvicorn

    config = get_config()
    logging.basicConfig(
        level=config.logging.level,
        format=config.logging.format
    )

    logger.info(f"Starting Kindred API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level=config.logging.level.lower()
    )


if __name__ == "__main__":
    main()
