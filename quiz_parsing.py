import json
import re
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r'^```[\w+-]*[ \t]*\r?\n?')
_TRAILING_FENCE = re.compile(r'\r?\n?[ \t]*```$')


class QuizQuestion(BaseModel):
    """One multiple-choice question as produced by the model"""
    model_config = ConfigDict(extra='allow')

    question: str
    options: List[str]
    answer: Union[str, List[str]]

    @model_validator(mode='after')
    def check_answer_matches_options(self) -> "QuizQuestion":
        if len(self.options) == 4:
            if not isinstance(self.answer, str):
                raise ValueError("a 4-option question must have a single answer")
            if self.answer not in self.options:
                raise ValueError(f"answer {self.answer!r} is not one of the options")
        elif len(self.options) == 5:
            if isinstance(self.answer, str) or len(self.answer) != 2:
                raise ValueError("a 5-option question must have exactly two answers")
            if self.answer[0] == self.answer[1]:
                raise ValueError("the two answers must be distinct")
            missing = [a for a in self.answer if a not in self.options]
            if missing:
                raise ValueError(f"answers {missing!r} are not among the options")
        else:
            raise ValueError(f"expected 4 or 5 options, got {len(self.options)}")
        return self


def strip_code_fence(text: str) -> str:
    """Remove a markdown code fence wrapped around the model output"""
    cleaned = text.strip()
    cleaned = _LEADING_FENCE.sub('', cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub('', cleaned, count=1)
    return cleaned.strip()


def validate_quiz(data: Dict[str, Any]) -> Optional[str]:
    """Return a description of what is wrong with the quiz, or None if it is valid"""
    try:
        QuizQuestion.model_validate(data)
    except ValidationError as e:
        messages = [err['msg'] for err in e.errors()]
        return "Invalid quiz: " + "; ".join(messages)
    return None


def parse_quiz(content: str, validate: bool = True) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Parse model output into a quiz dict.

    Returns (quiz, parse_error). Bad output never raises; the error is
    returned as text so it can be reported back to the caller. An empty
    object parses without error but callers should not treat it as a quiz.
    """
    cleaned = strip_code_fence(content or '')
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"Model output is not valid JSON: {e}")
        return None, str(e)

    if not isinstance(data, dict):
        return None, f"Expected a JSON object, got {type(data).__name__}"

    if validate and data:
        error = validate_quiz(data)
        if error:
            logger.warning(error)
            return None, error

    return data, None
