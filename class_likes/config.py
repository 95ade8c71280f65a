"""Application configuration via Pydantic Settings.

NOTE: We explicitly map the deployment variable names (KV_REST_API_URL,
DATABASE_URL, LIKES_FILE_PATH, etc.) to avoid silent misconfiguration.
Which counter backend runs is decided from these values once per process,
see ``class_likes.adapters.counter_store.factory``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Explicit backend choice: memory | file | kv | document | sql (empty = auto)
    likes_backend: str = Field(default="", validation_alias="LIKES_BACKEND")

    # Redis-over-REST key-value store (Vercel KV / Upstash compatible)
    kv_rest_api_url: str = Field(default="", validation_alias="KV_REST_API_URL")
    kv_rest_api_token: str = Field(default="", validation_alias="KV_REST_API_TOKEN")
    # Versioned so an older JSON blob never collides with the hash ("wrong type")
    kv_hash_key: str = Field(default="class_likes_v2", validation_alias="KV_LIKES_HASH_KEY")
    kv_legacy_key: str = Field(default="class_likes", validation_alias="KV_LEGACY_JSON_KEY")

    # Versioned document store (no native increment)
    document_store_url: str = Field(default="", validation_alias="DOCUMENT_STORE_URL")
    document_store_token: str = Field(default="", validation_alias="DOCUMENT_STORE_TOKEN")
    document_name: str = Field(default="class_likes", validation_alias="DOCUMENT_STORE_NAME")
    document_max_attempts: int = Field(default=5, ge=1, validation_alias="DOCUMENT_MAX_ATTEMPTS")
    document_retry_backoff: float = Field(
        default=0.05, ge=0.0, validation_alias="DOCUMENT_RETRY_BACKOFF"
    )

    # SQL database (postgresql+asyncpg or sqlite+aiosqlite)
    database_url: str = Field(default="", validation_alias="DATABASE_URL")

    # Local JSON file
    likes_file_path: str = Field(default="data/likes.json", validation_alias="LIKES_FILE_PATH")

    # Upper bound for any single backend call (including its retries)
    backend_timeout_seconds: float = Field(
        default=5.0, gt=0.0, validation_alias="BACKEND_TIMEOUT_SECONDS"
    )

    # Static schedule feed
    schedule_csv_path: str = Field(default="data/schedule.csv", validation_alias="SCHEDULE_CSV_PATH")

    # App
    cors_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        validation_alias="CORS_ORIGINS",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
