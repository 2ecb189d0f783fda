from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict

class FileRecordBase(BaseModel):
    original_name: str
    mime_type: str
    size: int

class FileRecordCreate(FileRecordBase):
    stored_name: str
    path: str

class UploadedFile(FileRecordCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)

class FileSummary(FileRecordBase):
    id: int
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True)

class FileRecordInDB(FileRecordCreate):
    id: int
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True)

class MessageResponse(BaseModel):
    message: str

class UploadResponse(MessageResponse):
    file: UploadedFile

class FileListResponse(BaseModel):
    files: List[FileSummary]

class FileDetailResponse(BaseModel):
    file: FileRecordInDB

class ErrorResponse(BaseModel):
    error: str
