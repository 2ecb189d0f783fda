from typing import Optional

from fastapi import APIRouter, UploadFile, File, Depends
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

import crud, schemas
from context import get_db, get_blob_store
from errors import operation, ValidationError, NotFoundError, BlobMissingError, StorageError
from logging_config import get_logger
from storage import BlobStore

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"

router = APIRouter(
    tags=["files"],
)

async def _get_existing_record(db: AsyncSession, file_id: int):
    file_record = await crud.get_file_record(db, file_id=file_id)
    if not file_record:
        logger.warning(f"File not found: ID {file_id}")
        raise NotFoundError(f"no row for id {file_id}")
    return file_record

@router.post("/upload", response_model=schemas.UploadResponse, status_code=201)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    async with operation("Upload failed"):
        if file is None:
            logger.warning("Upload request without a 'file' part")
            raise ValidationError("missing multipart field 'file'", public_message="No file uploaded")

        original_name = file.filename or ""
        mime_type = file.content_type or DEFAULT_MIME_TYPE
        logger.info(f"Upload request for filename: '{original_name}', content_type: '{mime_type}'")
        try:
            blob = await blob_store.save(file, original_name)
        finally:
            await file.close()

        file_record_create = schemas.FileRecordCreate(
            original_name=original_name,
            stored_name=blob.stored_name,
            mime_type=mime_type,
            size=blob.size,
            path=blob.path
        )
        db_file_record = await crud.create_file_record(db, file_record=file_record_create)
        logger.info(f"Saved '{db_file_record.original_name}' (ID: {db_file_record.id}) as {db_file_record.path}")

    return schemas.UploadResponse(
        message="File uploaded successfully",
        file=schemas.UploadedFile.model_validate(db_file_record)
    )

@router.get("/files", response_model=schemas.FileListResponse)
async def list_files(db: AsyncSession = Depends(get_db)):
    async with operation("Could not fetch files"):
        file_records = await crud.list_file_records(db)
    logger.debug(f"Listing {len(file_records)} files")
    return schemas.FileListResponse(
        files=[schemas.FileSummary.model_validate(record) for record in file_records]
    )

@router.get("/files/{file_id}", response_model=schemas.FileDetailResponse)
async def get_file_info(file_id: int, db: AsyncSession = Depends(get_db)):
    async with operation("Could not fetch file info"):
        file_record = await _get_existing_record(db, file_id)
    return schemas.FileDetailResponse(file=schemas.FileRecordInDB.model_validate(file_record))

@router.get("/files/{file_id}/download")
async def download_file(
    file_id: int,
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    logger.info(f"Download request for file_id: {file_id}")
    async with operation("Download failed"):
        file_record = await _get_existing_record(db, file_id)
        if not await blob_store.exists(file_record.path):
            logger.error(f"File for ID {file_id} found in DB but not on disk at {file_record.path}")
            raise BlobMissingError(f"stale row {file_id}: {file_record.path} is absent")

    return FileResponse(
        path=file_record.path,
        filename=file_record.original_name,
        media_type=file_record.mime_type
    )

@router.delete("/files/{file_id}", response_model=schemas.MessageResponse)
async def delete_file(
    file_id: int,
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    logger.info(f"Delete request for file_id: {file_id}")
    async with operation("Delete failed"):
        file_record = await _get_existing_record(db, file_id)
        path = file_record.path

        # Row goes first; a failed unlink afterwards leaves an orphan blob.
        await crud.delete_file_record(db, file_id=file_id)
        logger.info(f"Deleted metadata row for file_id: {file_id}")

        try:
            if await blob_store.exists(path):
                await blob_store.delete(path)
        except StorageError as e:
            logger.error(f"Row {file_id} deleted but blob {path} could not be removed; orphan left on disk: {e}")

    return schemas.MessageResponse(message="File deleted successfully")
