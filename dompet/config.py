"""
Dompet - Configuration
Reads runtime settings from environment variables
"""
import os
from dataclasses import dataclass, field
from typing import List

DEFAULT_DB_PATH = os.path.join("data", "finance.db")
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:3001,http://localhost:5173"


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    """Runtime settings. Build with Settings.from_env()."""

    database_path: str = DEFAULT_DB_PATH
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = field(default_factory=lambda: _split_origins(DEFAULT_CORS_ORIGINS))
    default_currency: str = "IDR"
    transfer_max_retries: int = 3
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from the process environment."""
        return cls(
            database_path=os.getenv("DATABASE_PATH", DEFAULT_DB_PATH),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)),
            default_currency=os.getenv("DEFAULT_CURRENCY", "IDR"),
            transfer_max_retries=int(os.getenv("TRANSFER_MAX_RETRIES", "3")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


settings = Settings.from_env()
