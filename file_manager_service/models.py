from sqlalchemy import Column, String, Integer, BigInteger, DateTime, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class FileRecord(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    original_name = Column(String(255), nullable=False)
    stored_name = Column(String(255), nullable=False)
    mime_type = Column(String(255), nullable=False)
    size = Column(BigInteger, nullable=False)
    path = Column(String(512), nullable=False)
    uploaded_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<FileRecord(id={self.id}, name='{self.original_name}', stored='{self.stored_name}')>"
