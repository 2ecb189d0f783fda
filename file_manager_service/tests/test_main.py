import os
import pytest
import httpx
from httpx import AsyncClient
from pathlib import Path
import io

from context import AppContext
from main import create_app

@pytest.mark.asyncio
async def test_uploaded_blob_is_served_statically(async_client: AsyncClient):
    files = {"file": ("pic.png", io.BytesIO(b"\x89PNG fake"), "image/png")}
    stored_name = (await async_client.post("/upload", files=files)).json()["file"]["stored_name"]

    response = await async_client.get(f"/uploads/{stored_name}")

    assert response.status_code == 200
    assert response.content == b"\x89PNG fake"

@pytest.mark.asyncio
async def test_unregistered_file_under_uploads_is_also_served(async_client: AsyncClient, uploads_dir: Path):
    (uploads_dir / "dropped-by-hand.txt").write_bytes(b"not in the database")

    response = await async_client.get("/uploads/dropped-by-hand.txt")

    assert response.status_code == 200
    assert response.content == b"not in the database"
    assert (await async_client.get("/files")).json() == {"files": []}

@pytest.mark.asyncio
async def test_static_mount_can_be_disabled(test_settings, uploads_dir: Path):
    test_settings.SERVE_UPLOADS_STATIC = False
    app = create_app(test_settings)
    (uploads_dir / "hidden.txt").write_bytes(b"hidden")

    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testfilemanager") as client:
        response = await client.get("/uploads/hidden.txt")

    assert response.status_code == 404
    await app.state.context.engine.dispose()

def test_create_app_builds_explicit_context(test_settings):
    app = create_app(test_settings)

    context = app.state.context
    assert isinstance(context, AppContext)
    assert context.settings is test_settings
    assert context.blob_store.root == test_settings.UPLOADS_DIR
    assert test_settings.UPLOADS_DIR.is_dir()

def test_default_app_uses_configured_uploads_dir():
    from main import app

    uploads_dir = app.state.context.settings.UPLOADS_DIR
    assert uploads_dir == Path(os.environ["UPLOADS_DIR"])
    assert uploads_dir.is_dir()
