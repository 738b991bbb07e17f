import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx
import openai

from quiz_parsing import parse_quiz

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


@dataclass
class ProviderResult:
    """Outcome of a single provider call, kept as data rather than raised"""
    source: str
    content: str = ''
    quiz: Optional[Dict[str, Any]] = None
    parse_error: Optional[str] = None
    provider_error: Any = None
    provider_response: Dict[str, Any] = field(default_factory=dict)

    @property
    def usable(self) -> bool:
        return self.provider_error is None and self.parse_error is None and bool(self.quiz)


class QuizProvider(ABC):
    name: str = ''

    @abstractmethod
    def generate(self, prompt: str) -> ProviderResult:
        """Ask the model for a quiz and return the parsed result"""


def _dig(data: Any, *path: Any) -> Any:
    # Walk nested dicts/lists, returning None at the first missing step
    for key in path:
        try:
            data = data[key]
        except (KeyError, IndexError, TypeError):
            return None
    return data


class OpenAIProvider(QuizProvider):
    name = 'openai'

    def __init__(self, api_key: str, model: str, temperature: float = 0.7,
                 timeout: float = 15.0, http_client: Optional[httpx.Client] = None,
                 validate: bool = True):
        self.model = model
        self.temperature = temperature
        self.validate = validate
        # Retries are left to the fallback chain
        self.client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )

    def generate(self, prompt: str) -> ProviderResult:
        logger.info(f"Requesting quiz from OpenAI with model: {self.model}")
        try:
            raw = self.client.chat.completions.with_raw_response.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": prompt
                    }
                ],
                temperature=self.temperature,
            )
        except openai.APIStatusError as e:
            logger.error(f"OpenAI API error ({e.status_code}): {e}")
            body = e.body if e.body is not None else {'message': str(e)}
            return ProviderResult(source=self.name, provider_error=body,
                                  provider_response={'error': body})
        except openai.APIError as e:
            # Connection failures and timeouts
            logger.error(f"OpenAI request failed: {e}")
            error = {'message': str(e), 'type': type(e).__name__}
            return ProviderResult(source=self.name, provider_error=error)

        try:
            response_json = raw.http_response.json()
        except ValueError as e:
            logger.error(f"OpenAI returned a non-JSON body: {e}")
            error = {'message': str(e), 'type': 'InvalidResponse'}
            return ProviderResult(source=self.name, content=raw.http_response.text, provider_error=error)

        provider_error = response_json.get('error') if isinstance(response_json, dict) else None
        content = _dig(response_json, 'choices', 0, 'message', 'content') or '{}'

        quiz, parse_error = None, None
        if provider_error is None:
            quiz, parse_error = parse_quiz(content, validate=self.validate)
        else:
            logger.error(f"OpenAI API error: {provider_error}")

        return ProviderResult(
            source=self.name,
            content=content,
            quiz=quiz,
            parse_error=parse_error,
            provider_error=provider_error,
            provider_response=response_json,
        )


class GeminiProvider(QuizProvider):
    name = 'gemini'

    def __init__(self, api_key: str, model: str, timeout: float = 15.0,
                 http_client: Optional[httpx.Client] = None, validate: bool = True):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.validate = validate
        self.http_client = http_client

    @property
    def url(self) -> str:
        return f"{GEMINI_BASE_URL}/models/{self.model}:generateContent"

    def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        params = {'key': self.api_key}
        if self.http_client is not None:
            return self.http_client.post(self.url, params=params, json=payload, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(self.url, params=params, json=payload)

    def generate(self, prompt: str) -> ProviderResult:
        logger.info(f"Requesting quiz from Gemini with model: {self.model}")
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            resp = self._post(payload)
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed: {e}")
            error = {'message': str(e), 'type': type(e).__name__}
            return ProviderResult(source=self.name, provider_error=error)

        try:
            response_json = resp.json()
        except ValueError:
            response_json = {'text': resp.text}

        provider_error = response_json.get('error') if isinstance(response_json, dict) else None
        if provider_error is None and resp.is_error:
            provider_error = {'code': resp.status_code, 'message': resp.reason_phrase}
        content = _dig(response_json, 'candidates', 0, 'content', 'parts', 0, 'text') or '{}'

        quiz, parse_error = None, None
        if provider_error is None:
            quiz, parse_error = parse_quiz(content, validate=self.validate)
        else:
            logger.error(f"Gemini API error: {provider_error}")

        return ProviderResult(
            source=self.name,
            content=content,
            quiz=quiz,
            parse_error=parse_error,
            provider_error=provider_error,
            provider_response=response_json,
        )
