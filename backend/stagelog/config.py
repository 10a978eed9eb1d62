from datetime import date
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./stagelog.db"
    environment: str = "development"

    default_currency: str = "GBP"
    currency_symbol: str = "£"

    # Result cache lifetimes
    cache_default_ttl_seconds: float = 300.0
    statistics_cache_ttl_seconds: float = 120.0
    filtered_cache_ttl_seconds: float = 60.0

    # Coalescing window for downstream persistence writes
    write_batch_delay_ms: int = 100

    # Pins "today" for reproducible snapshots (past/upcoming split, year-over-year)
    reference_date: date | None = None

    @property
    def write_batch_delay_seconds(self) -> float:
        return max(self.write_batch_delay_ms, 0) / 1000.0

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    class Config:
        env_file = ".env"
        env_prefix = "STAGELOG_"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
