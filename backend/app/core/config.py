from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Integration Monitor API"
    version: str = "1.0.0"
    DEBUG: bool = False
    APP_DATABASE_DSN: str = "sqlite:////tmp/integration_monitor.db"
    REDIS_URL: str = "redis://localhost:6379"

    # HTTP
    API_PREFIX: str = "/api/v1"
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Housekeeping jobs
    LOG_RETENTION_DAYS: int = 30
    RECONCILE_BATCH_SIZE: int = 500


settings = Settings()
