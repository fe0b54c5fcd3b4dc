# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(..., validation_alias="APP_ENV")
    REDIS_URL: str = Field(..., validation_alias="REDIS_URL")
    HOST: str = Field(default="127.0.0.1", validation_alias="HOST")
    PORT: int = Field(default=8000, validation_alias="PORT")

    # Shared secret expected verbatim in the Authorization header
    AUTHORIZATION: str = Field(..., validation_alias="AUTHORIZATION")

    # Store retry budget
    STORE_RETRY_MAX_ATTEMPTS: int = Field(
        default=5, ge=1, validation_alias="STORE_RETRY_MAX_ATTEMPTS"
    )
    STORE_RETRY_BASE_DELAY_SECONDS: float = Field(
        default=0.1, ge=0, validation_alias="STORE_RETRY_BASE_DELAY_SECONDS"
    )
    STORE_RETRY_MAX_DELAY_SECONDS: float = Field(
        default=5.0, ge=0, validation_alias="STORE_RETRY_MAX_DELAY_SECONDS"
    )

    # Backups
    BACKUP_INTERVAL_SECONDS: float = Field(
        default=60.0, gt=0, validation_alias="BACKUP_INTERVAL_SECONDS"
    )

    # Logging knobs
    LOGGER_NAME: str = "block-queue"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
