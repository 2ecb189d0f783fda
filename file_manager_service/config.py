from pydantic import field_validator, ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL
from pathlib import Path
from typing import Optional, Any

env_path = Path(__file__).parent / ".env"

class Settings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "user"
    DB_PASSWORD: str = "password"
    DB_NAME: str = "file_manager"
    DATABASE_URL: Optional[str] = None

    UPLOADS_DIR: Path = Path("uploads")
    UPLOADS_URL_PATH: str = "/uploads"
    SERVE_UPLOADS_STATIC: bool = True
    UPLOAD_CHUNK_SIZE: int = 1024 * 1024

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=env_path,
        env_file_encoding='utf-8',
        extra='ignore',
        validate_default=True
    )

    @field_validator('DATABASE_URL', mode='before')
    @classmethod
    def assemble_database_url(cls, v: Optional[str], info: ValidationInfo) -> Any:
        if isinstance(v, str) and v:
            return v

        url = URL.create(
            "postgresql+asyncpg",
            username=info.data.get('DB_USER'),
            password=info.data.get('DB_PASSWORD'),
            host=info.data.get('DB_HOST'),
            port=info.data.get('DB_PORT'),
            database=info.data.get('DB_NAME'),
        )
        return url.render_as_string(hide_password=False)

settings = Settings()
