from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager

import schemas
from config import Settings, settings as global_app_settings
from context import build_context
from database import create_db_and_tables
from errors import register_exception_handlers
from routers import files as files_router
from logging_config import get_logger

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    context = app.state.context
    logger.info("File Manager starting up...")
    await create_db_and_tables(context.engine)
    logger.info(f"Uploads directory configured at: {context.settings.UPLOADS_DIR}")
    yield
    logger.info("File Manager shutting down...")
    await context.engine.dispose()

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or global_app_settings

    app = FastAPI(
        title="File Manager API",
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.context = build_context(settings)

    register_exception_handlers(app)
    app.include_router(files_router.router)

    if settings.SERVE_UPLOADS_STATIC:
        app.mount(
            settings.UPLOADS_URL_PATH,
            StaticFiles(directory=settings.UPLOADS_DIR),
            name="uploads"
        )
        logger.info(f"Serving {settings.UPLOADS_DIR} at {settings.UPLOADS_URL_PATH}")

    @app.get("/", response_model=schemas.MessageResponse)
    async def read_root():
        return schemas.MessageResponse(message="File Manager API is running")

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting File Manager on {global_app_settings.HOST}:{global_app_settings.PORT}")
    uvicorn.run(app, host=global_app_settings.HOST, port=global_app_settings.PORT)
