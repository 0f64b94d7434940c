from typing import Optional, List
from pydantic_settings import BaseSettings
from pydantic import Field, validator
import secrets

class Settings(BaseSettings):
    PROJECT_NAME: str = "Shop Back-office API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"

    # Безопасность
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Redis для Celery
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_URL: Optional[str] = Field(None, validate_default=True)

    @validator("REDIS_URL", pre=True)
    def assemble_redis_connection(cls, v: Optional[str], values: dict) -> str:
        if isinstance(v, str):
            return v
        return f"redis://{values.get('REDIS_HOST', 'localhost')}:{values.get('REDIS_PORT', 6379)}"

    # BotBhai CRM
    BOTBHAI_PRODUCTS_URL: str = "https://chat.botbhai.net/api/v1/external/products"
    BOTBHAI_ORDERS_URL: str = "https://chat.botbhai.net/api/v1/external/orders"
    BOTBHAI_API_KEY_SETTING: str = "botbhai_api_key"
    BOTBHAI_BATCH_SIZE: int = 5
    BOTBHAI_BATCH_DELAY: float = 15.0      # секунды между пачками
    BOTBHAI_TIMEOUT: Optional[float] = None  # None - без таймаута

    # Celery
    CELERY_BROKER_URL: Optional[str] = Field(None, validate_default=True)
    CELERY_RESULT_BACKEND: Optional[str] = Field(None, validate_default=True)
    CELERY_TIMEZONE: str = "Asia/Dhaka"
    CELERY_ENABLE_UTC: bool = True

    @validator("CELERY_BROKER_URL", pre=True)
    def assemble_celery_broker_url(cls, v: Optional[str], values: dict) -> str:
        if isinstance(v, str):
            return v
        return str(values.get("REDIS_URL")) + "/0"

    @validator("CELERY_RESULT_BACKEND", pre=True)
    def assemble_celery_result_backend(cls, v: Optional[str], values: dict) -> str:
        if isinstance(v, str):
            return v
        return str(values.get("REDIS_URL")) + "/1"

    # Логирование
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = "logs/backoffice.log"

    # Загрузка файлов
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB

    class Config:
        case_sensitive = True
        env_file = ".env"

settings = Settings()
