"""
Service configuration.

Values come from environment variables; an optional .env file next to this
module is loaded first.
"""
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

load_dotenv(Path(__file__).resolve().parent / ".env")


class Settings(BaseModel):
    database_url: str = "mongodb://localhost:27017/scheduler"
    database_name: str = "scheduler"
    collection_name: str = "users"
    port: int = 3000
    log_level: str = "INFO"
    seed_sample_data: bool = False

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.strip().upper() or "INFO"


def get_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL", "mongodb://localhost:27017/scheduler"),
        database_name=os.getenv("DATABASE_NAME", "scheduler"),
        collection_name=os.getenv("COLLECTION_NAME", "users"),
        port=os.getenv("PORT", "3000"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        seed_sample_data=os.getenv("SEED_SAMPLE_DATA", "false"),
    )
