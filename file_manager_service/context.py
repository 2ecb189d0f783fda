"""Per-application collaborators and the FastAPI dependencies that hand them out."""
from dataclasses import dataclass
from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from config import Settings
from database import build_engine, build_session_factory
from storage import BlobStore

@dataclass
class AppContext:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker
    blob_store: BlobStore

def build_context(settings: Settings) -> AppContext:
    engine = build_engine(settings.DATABASE_URL)
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=build_session_factory(engine),
        blob_store=BlobStore(settings.UPLOADS_DIR, chunk_size=settings.UPLOAD_CHUNK_SIZE),
    )

def get_context(request: Request) -> AppContext:
    return request.app.state.context

async def get_db(context: AppContext = Depends(get_context)) -> AsyncGenerator[AsyncSession, None]:
    async with context.session_factory() as session:
        yield session

def get_blob_store(context: AppContext = Depends(get_context)) -> BlobStore:
    return context.blob_store
