import logging
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


def load_env() -> None:
    """Load environment variables from a local .env file (if present)."""
    load_dotenv()


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


@dataclass
class Settings:
    data_dir: str = "./data"
    files_dir: str = "./storage"
    files_base_url: str = "/files"

    edgeone_api_key: str = ""
    edgeone_api_url: str = "https://edgeone.ai/api"

    # Simulated external services
    reconstruction_delay_s: float = 5.0
    model_poll_interval_s: float = 5.0
    model_poll_max_attempts: int = 12
    stl_conversion_delay_s: float = 2.0

    cors_origins: List[str] = field(default_factory=lambda: DEFAULT_CORS_ORIGINS.split(","))
    log_level: str = "INFO"
    api_url: str = "http://127.0.0.1:8000"


def get_settings() -> Settings:
    """Build Settings from environment variables (after load_env)."""
    origins = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return Settings(
        data_dir=os.getenv("DATA_DIR", "./data"),
        files_dir=os.getenv("FILES_DIR", "./storage"),
        files_base_url=os.getenv("FILES_BASE_URL", "/files"),
        edgeone_api_key=os.getenv("EDGEONE_API_KEY", ""),
        edgeone_api_url=os.getenv("EDGEONE_API_URL", "https://edgeone.ai/api"),
        reconstruction_delay_s=_env_float("RECONSTRUCTION_DELAY_S", 5.0),
        model_poll_interval_s=_env_float("MODEL_POLL_INTERVAL_S", 5.0),
        model_poll_max_attempts=_env_int("MODEL_POLL_MAX_ATTEMPTS", 12),
        stl_conversion_delay_s=_env_float("STL_CONVERSION_DELAY_S", 2.0),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        api_url=os.getenv("API_URL", "http://127.0.0.1:8000"),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
