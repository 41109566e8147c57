# config.py
"""Application configuration"""
from typing import List, Optional
from pydantic_settings import BaseSettings
from utils.common import get_log_file_path, get_project_root

class Settings(BaseSettings):
    """
    Loads configuration from environment variables.
    Create a .env file in the root directory to set these values.
    """

    # Logger configuration
    LOGGER_NAME: str = "support_chat"
    LOG_FILE_PATH: str = get_log_file_path()

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./chat.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600  # Recycle connections after 1 hour

    # Uploads
    UPLOADS_DIR: str = f"{get_project_root()}/uploads"
    UPLOADS_URL_PREFIX: str = "/uploads"
    MAX_FILE_SIZE: int = 50 * 1024 * 1024

    # Admin upload key (X-Admin-Key header)
    ADMIN_KEY: Optional[str] = None

    # Completion service
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL_NAME: str = "gemini-2.0-flash"
    COMPLETION_TIMEOUT_SECONDS: float = 60.0

    # Retrieval
    RETRIEVAL_CORPUS_LIMIT: int = 50
    RETRIEVAL_TOP_K: int = 3
    DOCUMENT_EXCERPT_CHARS: int = 1000

    # Listing limits
    HISTORY_LIMIT: int = 200
    DOCUMENTS_LIST_LIMIT: int = 50

    # Text extraction
    PLAIN_TEXT_EXTENSIONS: List[str] = ["txt", "md", "json", "html", "js", "css"]

    # Demo document seeded at startup
    SEED_DEMO_DOCUMENT: bool = False
    DEMO_DOCUMENT_PATH: str = "/mnt/data/a996c08e-1a3d-4c6d-bc0e-af5dfad5a19e.png"

    # App metadata
    APP_TITLE: str = "Support Chat RAG Backend"
    APP_VERSION: str = "1.0.0"
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
