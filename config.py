"""
Configuration for the resume analyzer service.

Values come from the environment (a local .env file is honoured) so the
same build can run locally and on a hosted instance.
"""

import logging
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring non-integer %s=%r; using %s", name, raw, default)
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


MAX_UPLOAD_BYTES = _env_int("RESUME_MAX_UPLOAD_BYTES", 5 * 1024 * 1024)
STRICT_SKILL_MATCH = _env_flag("RESUME_STRICT_SKILL_MATCH")
KEYWORD_LIMIT = _env_int("RESUME_KEYWORD_LIMIT", 20)
CORS_ALLOWED_ORIGINS = _env_list("CORS_ALLOWED_ORIGINS", ["http://localhost:3000"])
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "127.0.0.1")
PORT = _env_int("PORT", 8000)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
    )
