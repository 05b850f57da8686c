"""
Settings for the PageCraft backend, read from the environment and .env

List-valued settings are stored as strings (comma separated or a JSON
array) and exposed through properties.
"""
import json
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings


def split_list_setting(raw: str) -> List[str]:
    """'a, b' or '["a", "b"]' -> ['a', 'b']"""
    raw = raw.strip()
    if raw.startswith("["):
        try:
            return [str(item).strip() for item in json.loads(raw) if str(item).strip()]
        except json.JSONDecodeError:
            raw = raw.strip("[]")
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseSettings):
    APP_NAME: str = "PageCraft"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    SECRET_KEY: str = "CHANGE_ME"
    API_VERSION: str = "v1"
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # Database: plain postgresql:// and sqlite:/// urls get their async driver
    DATABASE_URL: str = "sqlite+aiosqlite:///./pagecraft.db"
    DB_ECHO: bool = False

    # Auth
    JWT_SECRET_KEY: str = "CHANGE_ME"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 12

    # AI assistant
    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_BASE_URL: str = ""
    CLAUDE_CHAT_MODEL: str = "claude-3-5-haiku-20241022"
    CLAUDE_MAX_TOKENS: int = 1000
    CLAUDE_TEMPERATURE: float = 0.7
    CLAUDE_REQUEST_TIMEOUT: int = 120
    CLAUDE_CONNECT_TIMEOUT: int = 30
    CLAUDE_MAX_RETRIES: int = 3
    CLAUDE_RETRY_BASE_DELAY: float = 2.0
    CLAUDE_RETRY_MAX_DELAY: float = 30.0

    CORS_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Rate limiting (slowapi)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Image uploads
    UPLOAD_DIR: str = "uploads"
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024
    ALLOWED_IMAGE_EXTENSIONS_STR: str = "png,jpg,jpeg,gif,webp,svg"

    # Templates
    KEYWORD_MAPPINGS_FILE: str = ""
    SEED_TEMPLATES_ON_STARTUP: bool = True

    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return split_list_setting(self.CORS_ORIGINS_STR)

    @property
    def ALLOWED_IMAGE_EXTENSIONS(self) -> List[str]:
        """Lower-case extensions without the leading dot"""
        return [ext.lower().lstrip(".") for ext in split_list_setting(self.ALLOWED_IMAGE_EXTENSIONS_STR)]

    @property
    def upload_path(self) -> Path:
        return Path(self.UPLOAD_DIR)

    @property
    def BASE_DIR(self) -> Path:
        """The backend directory"""
        return Path(__file__).resolve().parents[2]

    @property
    def keyword_mappings_path(self) -> Path:
        if self.KEYWORD_MAPPINGS_FILE:
            return Path(self.KEYWORD_MAPPINGS_FILE)
        return self.BASE_DIR / "app" / "config" / "keyword_mappings.yml"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
