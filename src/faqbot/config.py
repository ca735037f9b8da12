"""
Configuration from environment variables.

Sources (highest priority first):
- .env.local in project root (local dev)
- .env in project root
- process environment

Variables:
- FAQ_CORPUS_PATH: YAML FAQ file (default: packaged faq.yaml)
- FAQ_SCORE_THRESHOLD: minimum BM25 score to answer (default: 5.0)
- FAQ_REPLY_WITH_SCORE: append "(score: x.xxx)" to replies (default: true)
- LOG_LEVEL: console log level (default: INFO)
- LOG_FILE: base path of the file log, empty string disables it
- PORT: HTTP port for uvicorn (default: 8080)
"""

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .faq import DEFAULT_THRESHOLD

PROJECT_ROOT = Path(__file__).parent.parent.parent

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def load_environment(root: Path = PROJECT_ROOT) -> Optional[Path]:
    """Load .env.local or .env from root. Returns the file used, if any."""
    env_local = root / ".env.local"
    env_file = root / ".env"

    for candidate in (env_local, env_file):
        if candidate.exists():
            load_dotenv(candidate, override=True)
            return candidate
    return None


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        number = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(number):
        raise ValueError(f"{name} must be a finite number, got {value!r}")
    return number


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be true/false, got {value!r}")


@dataclass(frozen=True)
class Settings:
    faq_corpus_path: Optional[str] = None
    score_threshold: float = DEFAULT_THRESHOLD
    reply_with_score: bool = True
    log_level: str = "INFO"
    log_file: Optional[str] = "logs/faqbot.log"
    port: int = 8080

    @property
    def console_level(self) -> int:
        level = logging.getLevelName(self.log_level)
        # Unknown names come back as "Level <name>"
        return level if isinstance(level, int) else logging.INFO

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Read settings from the process environment.

        Raises:
            ValueError: If a numeric or boolean variable cannot be parsed
        """
        log_file = os.getenv("LOG_FILE", cls.log_file)
        return cls(
            faq_corpus_path=os.getenv("FAQ_CORPUS_PATH") or None,
            score_threshold=_get_float("FAQ_SCORE_THRESHOLD", DEFAULT_THRESHOLD),
            reply_with_score=_get_bool("FAQ_REPLY_WITH_SCORE", True),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file=log_file or None,
            port=_get_int("PORT", 8080),
        )
