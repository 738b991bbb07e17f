import os
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-4"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_TIMEOUT = 15.0

_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class QuizConfig:
    """Settings for quiz generation, built once per process"""
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    gemini_model: str = DEFAULT_GEMINI_MODEL
    temperature: float = 0.7
    request_timeout: float = DEFAULT_TIMEOUT
    validate_quiz: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "QuizConfig":
        """
        Build the config from environment variables.

        When no mapping is given the process environment is used, after
        loading a local .env file if one exists.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        timeout_raw = environ.get('QUIZ_REQUEST_TIMEOUT') or str(DEFAULT_TIMEOUT)
        try:
            timeout = float(timeout_raw)
        except ValueError:
            raise ValueError(f"QUIZ_REQUEST_TIMEOUT must be a number, got {timeout_raw!r}")

        validate = (environ.get('QUIZ_VALIDATE') or 'true').strip().lower() not in _FALSE_VALUES

        config = cls(
            openai_api_key=environ.get('OPENAI_API_KEY') or None,
            gemini_api_key=environ.get('GEMINI_API_KEY') or None,
            openai_model=environ.get('OPENAI_MODEL') or DEFAULT_OPENAI_MODEL,
            gemini_model=environ.get('GEMINI_MODEL') or DEFAULT_GEMINI_MODEL,
            request_timeout=timeout,
            validate_quiz=validate,
        )
        logger.info(
            f"Loaded config: openai={'set' if config.openai_api_key else 'missing'}, "
            f"gemini={'set' if config.gemini_api_key else 'missing'}, timeout={config.request_timeout}s"
        )
        return config

    def has_any_key(self) -> bool:
        return bool(self.openai_api_key or self.gemini_api_key)
