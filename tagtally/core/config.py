from functools import lru_cache
from typing import Literal, Optional, List

from pydantic_settings import BaseSettings, SettingsConfigDict

from tagtally.utils.constants import (
    TIKTOK_SHARE_PREFIX,
    DEFAULT_FANOUT,
    DEFAULT_TOP_N,
    DEFAULT_WORKER_TIMEOUT_SECONDS,
    DEFAULT_PORT,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    API_KEY: str

    WORKER_TRANSPORT: Literal["http", "grpc"] = "http"
    WORKER_URL: Optional[str] = None
    WORKER_FUNCTION_NAME: Optional[str] = None
    WORKER_INVOCATION_TYPE: Optional[str] = "RequestResponse"
    WORKER_GRPC_ADDRESS: Optional[str] = None
    WORKER_GRPC_METHOD: str = "/tagworker.TagWorker/ExtractTags"
    WORKER_TIMEOUT_SECONDS: float = DEFAULT_WORKER_TIMEOUT_SECONDS

    FANOUT: int = DEFAULT_FANOUT
    TOP_N: int = DEFAULT_TOP_N
    DEFAULT_MODE: Literal["top", "ranked", "counts"] = "top"
    TRACK_AUTHORS: bool = True
    STRICT_PAYLOAD_SHAPE: bool = True
    URL_PREFIX: str = TIKTOK_SHARE_PREFIX
    ACCEPT_BATCH_LEVEL_RESULTS: bool = False
    MAX_CONCURRENT_DISPATCHES: Optional[int] = None

    MASTER_PORT: Optional[int] = DEFAULT_PORT
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
