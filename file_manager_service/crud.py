from functools import wraps
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import models, schemas
from errors import DatabaseError

def _sql_errors_as_database_error(func):
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as e:
            raise DatabaseError(f"{func.__name__} failed: {e}") from e
    return wrapper

@_sql_errors_as_database_error
async def create_file_record(db: AsyncSession, file_record: schemas.FileRecordCreate) -> models.FileRecord:
    db_file_record = models.FileRecord(
        original_name=file_record.original_name,
        stored_name=file_record.stored_name,
        mime_type=file_record.mime_type,
        size=file_record.size,
        path=file_record.path
    )
    db.add(db_file_record)
    await db.commit()
    await db.refresh(db_file_record)
    return db_file_record

@_sql_errors_as_database_error
async def list_file_records(db: AsyncSession) -> List[models.FileRecord]:
    result = await db.execute(
        select(models.FileRecord).order_by(models.FileRecord.uploaded_at.desc(), models.FileRecord.id.desc())
    )
    return list(result.scalars().all())

@_sql_errors_as_database_error
async def get_file_record(db: AsyncSession, file_id: int) -> Optional[models.FileRecord]:
    result = await db.execute(select(models.FileRecord).filter(models.FileRecord.id == file_id))
    return result.scalars().first()

@_sql_errors_as_database_error
async def delete_file_record(db: AsyncSession, file_id: int) -> None:
    await db.execute(delete(models.FileRecord).where(models.FileRecord.id == file_id))
    await db.commit()
