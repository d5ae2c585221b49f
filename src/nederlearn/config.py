"""Application settings, overridable from NEDERLEARN_* environment variables."""
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "NEDERLEARN_"
DATA_DIR = Path.home() / ".nederlearn"
CONTENT_DIR = Path(__file__).parent / "content"


def _env_str(name: str, default: str) -> str:
    return os.environ.get(ENV_PREFIX + name, default)


def _env_number(name: str, default, cast):
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring {ENV_PREFIX}{name}={raw!r}: not a valid {cast.__name__}")
        return default


class Settings:
    PROJECT_NAME: str = "nederlearn"
    DB_PATH: str = _env_str("DB_PATH", str(DATA_DIR / "nederlearn.db"))
    VOCAB_PATH: str = _env_str("VOCAB_PATH", str(CONTENT_DIR / "vocabulary.json"))
    LOG_DIR: str = _env_str("LOG_DIR", str(DATA_DIR / "log"))
    LOG_FILE: str = _env_str("LOG_FILE", "nederlearn.log")
    LOG_LEVEL: str = _env_str("LOG_LEVEL", "INFO")
    LOCALE: str = _env_str("LOCALE", "en")
    KEY_PREFIX: str = _env_str("KEY_PREFIX", "@nederlearn")

    # XP economy
    XP_PER_LEVEL: int = _env_number("XP_PER_LEVEL", 100, int)
    UNLOCK_COST: int = _env_number("UNLOCK_COST", 300, int)
    XP_PER_CORRECT_QUIZ: int = _env_number("XP_PER_CORRECT_QUIZ", 10, int)
    XP_PER_CORRECT_EXAM: int = _env_number("XP_PER_CORRECT_EXAM", 20, int)

    # Question generation
    QUESTIONS_PER_SESSION: int = _env_number("QUESTIONS_PER_SESSION", 30, int)
    MIN_ITEMS_FOR_QUIZ: int = _env_number("MIN_ITEMS_FOR_QUIZ", 4, int)
    OPTIONS_PER_QUESTION: int = _env_number("OPTIONS_PER_QUESTION", 4, int)
    EXAM_QUESTION_COUNT: int = _env_number("EXAM_QUESTION_COUNT", 10, int)

    # Grading
    MINIMUM_CORRECT_TO_PASS: int = _env_number("MINIMUM_CORRECT_TO_PASS", 15, int)
    EXAM_PASS_THRESHOLD: float = _env_number("EXAM_PASS_THRESHOLD", 0.6, float)
    SPELLING_TOLERANCE: int = _env_number("SPELLING_TOLERANCE", 2, int)

    # Front-end timings
    FEEDBACK_DELAY_SECONDS: float = _env_number("FEEDBACK_DELAY_SECONDS", 1.5, float)
    XP_SIGNAL_SECONDS: float = _env_number("XP_SIGNAL_SECONDS", 1.0, float)


settings = Settings()
