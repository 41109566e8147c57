# main.py
"""Main application: wiring, lifespan and static uploads"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from config import Settings, settings as default_settings
from services.logger_config import setup_logging
from database.session import create_engine, create_session_factory, init_models
from api.endpoints import health_router, router
from api.errors import register_error_handlers
from core.interfaces import ICompletionService, ITextExtractor
from infrastructure.completion_services import GeminiCompletionService
from infrastructure.file_storage import LocalFileStorage
from infrastructure.repositories import SQLDocumentRepository
from infrastructure.text_extractors import FileTextExtractor
from services.ingestion_service import IngestionService


async def seed_demo_document(app: FastAPI) -> None:
    """Idempotent startup step; failures are logged, never fatal."""
    logger = logging.getLogger(app.state.settings.LOGGER_NAME)
    try:
        async with app.state.session_factory() as session:
            ingestion = IngestionService(
                document_repo=SQLDocumentRepository(session),
                file_storage=app.state.file_storage,
                extractor=app.state.text_extractor,
            )
            await ingestion.ensure_demo_document(app.state.settings.DEMO_DOCUMENT_PATH)
    except Exception as e:
        logger.error(f"Failed to ensure demo document: {e}")


def create_app(
    settings: Optional[Settings] = None,
    completion_service: Optional[ICompletionService] = None,
    text_extractor: Optional[ITextExtractor] = None,
) -> FastAPI:
    """Create the FastAPI application. Collaborators may be injected for testing."""
    settings = settings or default_settings
    setup_logging(settings)
    logger = logging.getLogger(settings.LOGGER_NAME)

    file_storage = LocalFileStorage(settings.UPLOADS_DIR, url_prefix=settings.UPLOADS_URL_PREFIX)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        logger.info("Starting application...")

        engine = create_engine(settings)
        await init_models(engine)
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
        logger.info("Database initialized")

        app.state.settings = settings
        app.state.file_storage = file_storage
        app.state.text_extractor = text_extractor or FileTextExtractor(settings.PLAIN_TEXT_EXTENSIONS)
        app.state.completion_service = completion_service or GeminiCompletionService(settings)
        logger.info("Services initialized")

        if settings.SEED_DEMO_DOCUMENT:
            await seed_demo_document(app)

        yield

        await engine.dispose()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title=settings.APP_TITLE,
        version=settings.APP_VERSION,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(router)
    app.include_router(health_router)
    app.mount(settings.UPLOADS_URL_PREFIX, StaticFiles(directory=settings.UPLOADS_DIR), name="uploads")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
