import pytest

from quiz_config import DEFAULT_GEMINI_MODEL, DEFAULT_OPENAI_MODEL, QuizConfig


def test_from_env_reads_keys_and_defaults():
    config = QuizConfig.from_env({'OPENAI_API_KEY': 'okey'})
    assert config.openai_api_key == 'okey'
    assert config.gemini_api_key is None
    assert config.openai_model == DEFAULT_OPENAI_MODEL
    assert config.gemini_model == DEFAULT_GEMINI_MODEL
    assert config.temperature == 0.7
    assert config.validate_quiz is True
    assert config.has_any_key()


def test_empty_keys_count_as_missing():
    config = QuizConfig.from_env({'OPENAI_API_KEY': '', 'GEMINI_API_KEY': ''})
    assert not config.has_any_key()


def test_overrides():
    config = QuizConfig.from_env({
        'GEMINI_API_KEY': 'gkey',
        'GEMINI_MODEL': 'gemini-1.5-pro',
        'QUIZ_REQUEST_TIMEOUT': '5',
        'QUIZ_VALIDATE': 'false',
    })
    assert config.gemini_model == 'gemini-1.5-pro'
    assert config.request_timeout == 5.0
    assert config.validate_quiz is False


def test_bad_timeout_is_rejected():
    with pytest.raises(ValueError):
        QuizConfig.from_env({'QUIZ_REQUEST_TIMEOUT': 'soon'})


def test_from_process_environment(monkeypatch):
    monkeypatch.setattr('quiz_config.load_dotenv', lambda: False)
    monkeypatch.setenv('OPENAI_API_KEY', 'from-env')
    monkeypatch.delenv('GEMINI_API_KEY', raising=False)
    config = QuizConfig.from_env()
    assert config.openai_api_key == 'from-env'
    assert config.gemini_api_key is None
