import os
import sys
import tempfile
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# main builds its default app at import; keep that app's uploads dir out of the working tree.
os.environ.setdefault("UPLOADS_DIR", str(Path(tempfile.mkdtemp(prefix="file_manager_tests_")) / "uploads"))

from typing import AsyncGenerator

import pytest
import pytest_asyncio
import httpx
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings
from database import create_db_and_tables
from main import create_app

@pytest.fixture(scope="function")
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test_file_manager.db'}",
        UPLOADS_DIR=tmp_path / "uploads",
        UPLOAD_CHUNK_SIZE=4,
    )

@pytest_asyncio.fixture(scope="function")
async def test_app(test_settings: Settings):
    app = create_app(test_settings)
    context = app.state.context
    await create_db_and_tables(context.engine)
    yield app
    await context.engine.dispose()

@pytest_asyncio.fixture(scope="function")
async def db_session(test_app) -> AsyncGenerator[AsyncSession, None]:
    async with test_app.state.context.session_factory() as session:
        yield session

@pytest_asyncio.fixture(scope="function")
async def async_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    transport = httpx.ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://testfilemanager") as client:
        yield client

@pytest.fixture(scope="function")
def uploads_dir(test_settings: Settings) -> Path:
    return test_settings.UPLOADS_DIR
