import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from onlynote.api.v1.api import api_router
from onlynote.core.config import Settings, settings as default_settings
from onlynote.db.session import build_engine, init_db

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    The database engine is created here and owned by the app: it lives on
    `app.state.engine` and is disposed on shutdown.
    """
    settings = settings or default_settings

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    engine = build_engine(settings)
    if settings.AUTO_CREATE_TABLES:
        init_db(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s %s", settings.PROJECT_NAME, settings.VERSION)
        yield
        logger.info("Shutting down %s", settings.PROJECT_NAME)
        engine.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.settings = settings

    # Set up CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, specify actual origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


# ASGI entry point for `uvicorn onlynote.main:app`; importing this module builds
# the engine from the environment settings.
app = create_app()
