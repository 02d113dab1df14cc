import os
from dotenv import load_dotenv

load_dotenv()


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings():
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "GenDocAI API")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "9b1f4e2d7c3a8e6f0d5c2b7a4e9f1d3c6b8a0e2f4d7c9b1a3e5f7d9c2b4a6e8f")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_DAYS: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "7"))
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./gendocai.db")

    # Document builder
    DOC_BUILDER_URL: str = os.getenv("DOC_BUILDER_URL", "http://localhost:5002").rstrip("/")
    DOC_BUILDER_TIMEOUT: float = float(os.getenv("DOC_BUILDER_TIMEOUT", "180"))
    DOWNLOAD_TIMEOUT: float = float(os.getenv("DOWNLOAD_TIMEOUT", "60"))
    DOC_BUILDER_CONNECT_TIMEOUT: float = float(os.getenv("DOC_BUILDER_CONNECT_TIMEOUT", "10"))

    # Uploads
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
    MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

    DEFAULT_FORMAT: str = os.getenv("DEFAULT_FORMAT", "docx")
    # When true a failed history write turns a successful generation into a 500
    HISTORY_WRITE_REQUIRED: bool = _get_bool("HISTORY_WRITE_REQUIRED", False)

    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def cors_origins(self):
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
