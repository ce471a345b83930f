"""
Order Lock Configuration

Protocol constants shared by every validator module, plus
type-safe environment loading for process-level settings (logging)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


# Dex fee rate is fixed at 0.3%
FEE = 3
FEE_DECIMAL = 1000

# Order cell data: balance(16) | remaining(16) | price(9) | direction(1) | version(1)
ORDER_DATA_LEN = 43
BALANCE_FIELD_LEN = 16
PRICE_BYTES_LEN = 9
ORDER_VERSION = 1

MIN_PRICE_EXPONENT = -100
MAX_PRICE_EXPONENT = 100

# Order lock args hold the owner's lock hash
USER_LOCK_HASH_LEN = 32

# capacity: 8 bytes
# data: 16 bytes
# type: 65 bytes
# lock: 65 bytes
BALANCE_CELL_CAPACITY = 154_00_000_000  # shannons, 154 ckb


class Settings(BaseSettings):
    """
    Process settings loaded from environment variables

    Automatically loads from:
    1. Environment variables (prefixed with ORDER_LOCK_)
    2. .env file (if present)
    3. Default values (specified below)

    Only the host wiring reads these. The validator itself takes no
    configuration: every verdict depends on the transaction alone.

    Usage:
        from order_lock.core.config import settings

        setup_logging(settings.LOG_LEVEL, settings.use_json_logs)
    """

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # "text" or "json"

    model_config = SettingsConfigDict(
        env_prefix="ORDER_LOCK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("LOG_FORMAT")
    @classmethod
    def check_log_format(cls, value: str) -> str:
        if value not in ("text", "json"):
            raise ValueError(f"LOG_FORMAT must be 'text' or 'json', got {value!r}")
        return value

    @property
    def use_json_logs(self) -> bool:
        """Check if JSON logging is enabled"""
        return self.LOG_FORMAT == "json"


# Global settings instance
settings = Settings()
