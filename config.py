import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


DEFAULT_STATUS = 404
DEFAULT_MIN_COUNT = 10
DEFAULT_MAX_COUNT = 0  # no upper bound
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    status: int
    min_count: int
    max_count: int
    exclude: Tuple[str, ...]
    workers: Optional[int]
    log_level: str


def _get_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default

    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


def _get_positive_int(name: str) -> Optional[int]:
    value = _get_int(name, None)
    if value is not None and value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


def _get_log_level(name: str, default: str) -> str:
    level = (os.getenv(name) or default).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{name} is not a logging level: {level!r}")
    return level


def _get_list(name: str) -> Tuple[str, ...]:
    value = os.getenv(name, "")
    return tuple(p.strip() for p in value.split(",") if p.strip())


def load_settings() -> Settings:
    """
    Read defaults from the environment (and a .env file, if present).

      ACCESSLOG_STATUS     status code to count, 0 for any (404)
      ACCESSLOG_MIN_COUNT  minimum occurrences to report (10)
      ACCESSLOG_MAX_COUNT  maximum occurrences, 0 for no limit (0)
      ACCESSLOG_EXCLUDE    comma-separated URI prefixes to ignore
      ACCESSLOG_WORKERS    ingestion threads (executor default)
      ACCESSLOG_LOG_LEVEL  logging level (WARNING)
    """
    return Settings(
        status=_get_int("ACCESSLOG_STATUS", DEFAULT_STATUS),
        min_count=_get_int("ACCESSLOG_MIN_COUNT", DEFAULT_MIN_COUNT),
        max_count=_get_int("ACCESSLOG_MAX_COUNT", DEFAULT_MAX_COUNT),
        exclude=_get_list("ACCESSLOG_EXCLUDE"),
        workers=_get_positive_int("ACCESSLOG_WORKERS"),
        log_level=_get_log_level("ACCESSLOG_LOG_LEVEL", DEFAULT_LOG_LEVEL),
    )
