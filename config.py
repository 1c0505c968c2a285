# config.py
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# --- Environment loading ---
load_dotenv()

DEFAULT_QUOTE_URL = "https://zenquotes.io/api/random"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    tasks_file: Path = Path("tasks.json")
    quote_url: Optional[str] = DEFAULT_QUOTE_URL
    quote_timeout: float = 5.0
    host: str = "127.0.0.1"
    port: int = 3000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def get_settings() -> Settings:
    """
    Reads settings from the environment (and .env, loaded on import).
    An empty TODO_QUOTE_URL turns the quote lookup off.
    """
    quote_url = os.getenv("TODO_QUOTE_URL", DEFAULT_QUOTE_URL).strip() or None
    return Settings(
        tasks_file=Path(os.getenv("TODO_TASKS_FILE", "tasks.json")),
        quote_url=quote_url,
        quote_timeout=_env_float("TODO_QUOTE_TIMEOUT", 5.0),
        host=os.getenv("TODO_HOST", "127.0.0.1"),
        port=_env_int("TODO_PORT", 3000),
        cors_origins=_env_list("TODO_CORS_ORIGINS", "*"),
        log_level=os.getenv("TODO_LOG_LEVEL", "INFO").upper(),
    )
