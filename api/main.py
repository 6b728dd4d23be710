"""
MixerAI Content API

Builds the FastAPI app: CORS, the error envelope and every router under
``/api``. Run with ``python -m api.main`` or ``uvicorn api.main:app``.
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mixerai.logging_setup import setup_logging
from mixerai.settings import get_settings
from api.dependencies import lifespan_handler
from api.errors import register_exception_handlers
from api.routers import (
    ai,
    brands,
    claims,
    content,
    content_templates,
    health,
    master_claim_brands,
    me,
    products,
    tools,
)

cfg = get_settings()
setup_logging(cfg.log_level)
logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"

# (router, prefix, tag)
ROUTERS = (
    (me.router, "/api", "me"),
    (brands.router, "/api", "brands"),
    (master_claim_brands.router, "/api", "master-claim-brands"),
    (products.router, "/api", "products"),
    (claims.router, "/api", "claims"),
    (content_templates.router, "/api", "content-templates"),
    (content.router, "/api", "content"),
    (ai.router, "/api", "ai"),
    (tools.router, "/api", "tools"),
    (health.router, "/api/health", "health"),
)


def create_app() -> FastAPI:
    """Return a configured app; tests call this and override dependencies."""
    app = FastAPI(
        title="MixerAI Content API",
        description="Brands, products, claims, content templates and AI copywriting tools",
        version=API_VERSION,
        lifespan=lifespan_handler,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )
    register_exception_handlers(app)

    for router, prefix, tag in ROUTERS:
        app.include_router(router, prefix=prefix, tags=[tag])
    logger.debug(f"Mounted {len(ROUTERS)} routers, CORS origins {cfg.cors_origins}")

    @app.get("/")
    async def root():
        """Service name, version and where to look next"""
        return {
            "name": "MixerAI Content API",
            "version": API_VERSION,
            "environment": cfg.env,
            "docs": "/docs",
            "ready": "/api/health/ready",
        }

    logger.info(f"MixerAI Content API {API_VERSION} created (env={cfg.env}, backend={cfg.repository_backend})")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Serving on {cfg.api_host}:{cfg.api_port} "
        f"(reload={cfg.api_reload}, workers={cfg.api_workers})"
    )
    # uvicorn ignores workers when reload is on
    uvicorn.run(
        "api.main:app",
        host=cfg.api_host,
        port=cfg.api_port,
        reload=cfg.api_reload,
        workers=1 if cfg.api_reload else cfg.api_workers,
        log_level=cfg.log_level.lower(),
    )
