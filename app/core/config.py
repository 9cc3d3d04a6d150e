import os
from typing import List, Optional, Union
from pydantic import PostgresDsn, field_validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()



class Settings(BaseSettings):
    # CORE SETTINGS
    ENV: str = os.getenv("ENV", "development")
    DEBUG: bool = ENV == "development"
    API_V1_STR: str = "/api"
    PROJECT_NAME: str = "Survey Ingest API"

    # CORS SETTINGS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost",
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # DATABASE SETTINGS
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: str = os.getenv("DB_PORT", "5432")
    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "postgres")
    DB_NAME: str = os.getenv("DB_NAME", "surveys")

    # Full URL override, e.g. sqlite:///./surveys.db for local work
    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")

    DATABASE_URI: Optional[PostgresDsn] = PostgresDsn.build(
        scheme="postgresql+psycopg2",
        username=os.getenv("DB_USER", "postgres"),
        password=os.getenv("DB_PASSWORD", "postgres"),
        host=os.getenv("DB_HOST", "localhost"),
        port=int(os.getenv("DB_PORT", "5432")),
        path=f"{os.getenv('DB_NAME', 'surveys')}"
    )

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL or str(self.DATABASE_URI)

    # INGESTION SETTINGS
    MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
    HEADER_SCAN_LINES: int = int(os.getenv("HEADER_SCAN_LINES", "30"))
    DELIMITER_SAMPLE_LINES: int = int(os.getenv("DELIMITER_SAMPLE_LINES", "20"))
    DEFAULT_SENSOR_OFFSET: float = float(os.getenv("DEFAULT_SENSOR_OFFSET", "0"))

    # LOGGING SETTINGS
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
