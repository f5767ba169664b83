from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "local"
    APP_NAME: str = "SkyReserve API"
    # Comma-separated origins for CORS. If empty, uses localhost defaults.
    CORS_ORIGINS: str = ""
    LOG_LEVEL: str = "INFO"

    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    DATABASE_URL: str = "sqlite:///./skyreserve.db"

    @field_validator("DATABASE_URL", mode="after")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Render and others give postgres://; SQLAlchemy expects postgresql+psycopg2://."""
        if v and v.startswith("postgres://"):
            return "postgresql+psycopg2://" + v[11:]
        return v
    REDIS_URL: str = "redis://localhost:6379/0"
    # rediss:// only: required | optional | none
    REDIS_SSL_CERT_REQS: str = "required"

    # Cancellation policy
    CANCELLATION_CHARGE_RATE: float = 0.30
    REFUND_WINDOW_MIN_DAYS: int = 4
    REFUND_WINDOW_MAX_DAYS: int = 7

    # In-process reconciliation job (Celery beat runs the same job hourly)
    CANCELLATION_SCHEDULER_ENABLED: bool = True
    CANCELLATION_CHECK_INTERVAL_SECONDS: float = 3600.0

    # Identifier allocation
    PNR_MAX_ATTEMPTS: int = 10
    TICKET_NUMBER_MAX_ATTEMPTS: int = 50

    # Optional real-time flight data (AviationStack). Empty key = mock flights only.
    AVIATION_STACK_API_KEY: str = ""
    AVIATION_STACK_BASE_URL: str = "https://api.aviationstack.com/v1"
    AVIATION_STACK_TIMEOUT: float = 6.0


settings = Settings()
