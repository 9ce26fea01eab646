from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # LLM (any OpenAI-compatible vision model)
    LLM_API_KEY: str = ""
    LLM_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    LLM_MODEL: str = "gemini-2.5-flash"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./knowledge_vault.db"

    # Knowledge store
    STORAGE_KEY: str = "enterprise_pdf_knowledge_base"
    STORAGE_LIMIT_BYTES: int = 5 * 1024 * 1024

    # Extraction
    MAX_PAGES: int = 5
    RENDER_SCALE: float = 2.0
    JPEG_QUALITY: int = 80
    MAX_FILE_SIZE_MB: int = 50

    # Search
    SEARCH_SAMPLE_CHARS: int = 500

    # Connectivity
    CONNECTIVITY_PROBE_URL: str = "https://generativelanguage.googleapis.com"
    START_OFFLINE: bool = False

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # App
    DEBUG: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
