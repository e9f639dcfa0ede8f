from dataclasses import dataclass
from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class SchedulingPolicy:
    """Business constants the scheduling engine is parameterised with."""

    buffer_minutes: int = 20
    max_base_price: Decimal = Decimal("10000")
    max_attempts: int = 3
    retry_backoff_seconds: float = 0.05
    hall_lock_timeout_seconds: float = 5.0
    operating_hours_open: int = 9
    operating_hours_close: int = 23


class Settings(BaseSettings):
    PROJECT_NAME: str = "Cinemax Scheduling API"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "12345"
    POSTGRES_DB: str = "cinemax_db"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: str = ""

    # Scheduling
    SHOW_BUFFER_MINUTES: int = 20       # cleaning/turnaround after every show
    MAX_BASE_PRICE: Decimal = Decimal("10000")
    SCHEDULING_MAX_ATTEMPTS: int = 3
    SCHEDULING_RETRY_BACKOFF_SECONDS: float = 0.05
    HALL_LOCK_TIMEOUT_SECONDS: float = 5.0
    OPERATING_HOURS_OPEN: int = 9
    OPERATING_HOURS_CLOSE: int = 23

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    def assemble_db_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    def scheduling_policy(self) -> SchedulingPolicy:
        return SchedulingPolicy(
            buffer_minutes=self.SHOW_BUFFER_MINUTES,
            max_base_price=self.MAX_BASE_PRICE,
            max_attempts=self.SCHEDULING_MAX_ATTEMPTS,
            retry_backoff_seconds=self.SCHEDULING_RETRY_BACKOFF_SECONDS,
            hall_lock_timeout_seconds=self.HALL_LOCK_TIMEOUT_SECONDS,
            operating_hours_open=self.OPERATING_HOURS_OPEN,
            operating_hours_close=self.OPERATING_HOURS_CLOSE,
        )

settings = Settings()
settings.DATABASE_URL = settings.assemble_db_url()
