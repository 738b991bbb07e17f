import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from quiz_config import QuizConfig
from quiz_providers import GeminiProvider, OpenAIProvider, ProviderResult, QuizProvider

logger = logging.getLogger(__name__)

QUIZ_PROMPT = """You are an AWS instructor preparing students for AWS certification exams.
Generate exactly ONE multiple-choice question in the style of an AWS certification exam.

Respond with a single JSON object and nothing else:
- Do NOT wrap the JSON in markdown code fences.
- Do NOT add any commentary before or after the JSON.

The JSON object must have this shape:
{
  "question": "string",
  "options": ["string", "string", "string", "string"],
  "answer": "string"
}

Rules:
- Use either 4 or 5 options.
- With 4 options, "answer" is a single string equal to exactly one of the options.
- With 5 options, "answer" is an array of exactly two strings, each equal to a different option.
"""


@dataclass
class Success:
    """A provider produced a usable quiz"""
    result: ProviderResult
    failed_attempts: List[ProviderResult] = field(default_factory=list)
    status_code: int = 200

    def to_body(self) -> Dict[str, Any]:
        return _result_body(self.result, self.failed_attempts)


@dataclass
class PartialFailure:
    """The fallback provider ran but its output is not a usable quiz"""
    result: ProviderResult
    failed_attempts: List[ProviderResult] = field(default_factory=list)
    status_code: int = 200

    def to_body(self) -> Dict[str, Any]:
        return _result_body(self.result, self.failed_attempts)


@dataclass
class HardFailure:
    error: str
    details: Optional[str] = None
    status_code: int = 500

    def to_body(self) -> Dict[str, Any]:
        body = {'error': self.error}
        if self.details is not None:
            body['details'] = self.details
        return body


def _result_body(result: ProviderResult, failed_attempts: List[ProviderResult]) -> Dict[str, Any]:
    body = {
        'source': result.source,
        'quiz': result.quiz or None,
        'parseError': result.parse_error,
        'content': result.content,
        f'{result.source}Response': result.provider_response,
    }
    for attempt in failed_attempts:
        body.update(_diagnostics(attempt))
    return body


def _diagnostics(attempt: ProviderResult) -> Dict[str, Any]:
    return {
        f'{attempt.source}Error': attempt.provider_error,
        f'{attempt.source}Content': attempt.content or None,
        f'{attempt.source}Response': attempt.provider_response or None,
    }


def _describe_failure(attempt: ProviderResult) -> str:
    if attempt.provider_error is not None:
        return f"{attempt.source}: provider error {attempt.provider_error}"
    if attempt.parse_error is not None:
        return f"{attempt.source}: parse error {attempt.parse_error}"
    return f"{attempt.source}: empty quiz"


def build_providers(config: QuizConfig) -> List[Optional[QuizProvider]]:
    """
    Build the fallback chain in priority order.

    A provider whose key is missing is kept as a None slot so the chain
    still knows which position is the primary.
    """
    openai_provider = None
    if config.openai_api_key:
        openai_provider = OpenAIProvider(
            api_key=config.openai_api_key,
            model=config.openai_model,
            temperature=config.temperature,
            timeout=config.request_timeout,
            validate=config.validate_quiz,
        )
    gemini_provider = None
    if config.gemini_api_key:
        gemini_provider = GeminiProvider(
            api_key=config.gemini_api_key,
            model=config.gemini_model,
            timeout=config.request_timeout,
            validate=config.validate_quiz,
        )
    return [openai_provider, gemini_provider]


class QuizGenerationHandler:
    """Generates one quiz question, trying each provider until one is usable"""

    def __init__(self, config: QuizConfig, providers: Optional[List[Optional[QuizProvider]]] = None,
                 prompt: str = QUIZ_PROMPT):
        self.config = config
        self.providers = providers if providers is not None else build_providers(config)
        self.prompt = prompt

    def generate(self):
        if not any(self.providers):
            logger.error("No provider API key configured")
            return HardFailure("Missing API key: set OPENAI_API_KEY or GEMINI_API_KEY")

        failed: List[ProviderResult] = []
        last_result = None
        fallback_used = False

        for position, provider in enumerate(self.providers):
            if provider is None:
                continue
            if position > 0:
                fallback_used = True
                if failed:
                    logger.warning(f"Falling back to {provider.name} after {failed[-1].source} failed")

            last_result = provider.generate(self.prompt)
            if last_result.usable:
                logger.info(f"Generated quiz using {last_result.source}")
                return Success(last_result, failed)
            logger.warning(f"Unusable result from {last_result.source}: {_describe_failure(last_result)}")
            failed.append(last_result)

        if fallback_used:
            return PartialFailure(last_result, failed[:-1])

        details = "; ".join(_describe_failure(attempt) for attempt in failed)
        return HardFailure("Both providers failed or unavailable", details=details)
