import json
import logging
from typing import Dict, Any, Optional

from quiz_config import QuizConfig
from quiz_handler import QuizGenerationHandler

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

_config: Optional[QuizConfig] = None


def get_config() -> QuizConfig:
    """Load the configuration once per Lambda container"""
    global _config
    if _config is None:
        _config = QuizConfig.from_env()
        if not _config.has_any_key():
            logger.error("Neither OPENAI_API_KEY nor GEMINI_API_KEY is set")
    return _config


def lambda_handler(event: Dict[str, Any], context, config: Optional[QuizConfig] = None) -> Dict[str, Any]:
    """
    AWS Lambda handler for GET/POST /api/quiz

    The request method and body are not used; every call generates one
    fresh AWS certification question. Responses are always JSON.
    """
    try:
        event = event or {}
        request_context = event.get('requestContext') or {}
        method = event.get('httpMethod') or (request_context.get('http') or {}).get('method')
        logger.info(f"Received quiz request: method={method}")

        handler = QuizGenerationHandler(config or get_config())
        outcome = handler.generate()

        logger.info(f"Quiz request finished with status {outcome.status_code}")
        return create_response(outcome.status_code, outcome.to_body())

    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return create_error_response(500, "Failed to generate quiz", details=str(e))


def create_response(status_code: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Create an API Gateway proxy response with a JSON body"""
    return {
        'statusCode': status_code,
        'headers': {
            'Content-Type': 'application/json',
            'Access-Control-Allow-Origin': '*'  # Allow CORS for all origins
        },
        'body': json.dumps(payload)
    }


def create_error_response(status_code: int, message: str, details: Optional[str] = None) -> Dict[str, Any]:
    """Create a standardized error response"""
    payload = {'error': message}
    if details is not None:
        payload['details'] = details
    return create_response(status_code, payload)


# Optional: Function for testing locally
def test_locally():
    """Generate one question against the real providers configured in .env"""
    test_event = {"httpMethod": "GET", "path": "/api/quiz"}
    result = lambda_handler(test_event, None)
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    test_locally()
