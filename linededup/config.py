from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

from .rules import FALLBACK_ENCODING

DEFAULT_MAX_UPLOAD_BYTES = 50 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    fallback_encoding: str = FALLBACK_ENCODING
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES


def _env(name: str, default: str) -> str:
    v = (os.getenv(name) or "").strip()
    return v or default


def _env_int(name: str, default: int) -> int:
    v = _env(name, str(default))
    try:
        return int(v)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {v!r}") from None


def load_settings() -> Settings:
    return Settings(
        log_level=_env("LOG_LEVEL", "WARNING").upper(),
        fallback_encoding=_env("DEDUP_FALLBACK_ENCODING", FALLBACK_ENCODING),
        max_upload_bytes=_env_int("DEDUP_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
    )


def setup_logging(level: str = "WARNING") -> logging.Logger:
    lvl = getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger("linededup")
    logger.setLevel(lvl)

    for h in list(logger.handlers):
        logger.removeHandler(h)

    # stderr keeps stdout free for deduplicated output
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(lvl)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    logger.addHandler(handler)

    return logger
