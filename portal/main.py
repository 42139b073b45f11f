from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal.api.v1.router import router as api_v1_router
from portal.config.logging import setup_logging
from portal.config.settings import Settings, settings
from portal.core.error_handlers import register_exception_handlers
from portal.core.middleware import register_middlewares
from portal.db.init_db import init_db


def create_app(config: Settings = settings) -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures logging, title, version and debug mode from Settings.
    - Registers CORS, core middleware, and exception handlers.
    - Includes the versioned API router under /api/v1.
    """
    logger = setup_logging(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # For production, manage the schema with migrations instead
        if config.INIT_DB_ON_STARTUP:
            init_db()
            logger.info("Database schema initialized")
        yield

    app = FastAPI(
        title=config.APP_NAME,
        debug=config.DEBUG,
        version=config.API_VERSION,
        docs_url=None if config.is_production() else "/docs",
        redoc_url=None if config.is_production() else "/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Credentials cannot be combined with a wildcard origin
    allow_all = not config.CORS_ORIGINS or config.CORS_ORIGINS == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else config.CORS_ORIGINS,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middlewares(app)
    register_exception_handlers(app)

    app.include_router(api_v1_router, prefix=config.API_V1_STR)

    @app.get("/health", tags=["System Health"])
    def health_check():
        return {"status": "healthy", "environment": config.ENVIRONMENT}

    return app


app = create_app()
