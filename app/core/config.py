from pydantic_settings import BaseSettings
from typing import List, Optional
from functools import lru_cache


class Settings(BaseSettings):
    PROJECT_NAME: str = "NeuraPay Analytics Service"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    HOST: str = "0.0.0.0"
    PORT: int = 8080

    ASSISTANT_NAME: str = "NeuraPay"
    ANTHROPIC_API_KEY: Optional[str] = None
    ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"
    ANTHROPIC_MAX_TOKENS: int = 4096

    LIMINAL_BASE_URL: str = "https://api.liminal.cash"
    LIMINAL_TRANSACTIONS_PATH: str = "/v1/transactions"
    LIMINAL_TIMEOUT_SECONDS: float = 10.0
    LEDGER_FETCH_LIMIT: int = 100

    TRANSACTIONS_CSV_PATH: str = "transactions.csv"
    CSV_DEFAULT_LIMIT: int = 50

    ALLOWED_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    @property
    def allowed_origins_list(self) -> List[str]:
        if isinstance(self.ALLOWED_ORIGINS, list):
            return self.ALLOWED_ORIGINS
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # Analytics Configuration
    DEFAULT_ANALYSIS_DAYS: int = 30
    PERSONALITY_MIN_TRANSACTIONS: int = 10

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
