"""
Lambda handler for the second step of phone number sign up.

Validates the code sent by pre_register, creates and confirms the Cognito
account and returns the tokens of its first session.
"""

from http import HTTPStatus
from typing import Any, Dict

from aws_lambda_powertools import Logger, Tracer

from src.models.registration import RegistrationOrchestrator
from src.shared.exceptions import InternalServerError, ValidationError
from src.shared.utils import extract_payload, success_response

logger = Logger(service='execute-registration')
tracer = Tracer(service='execute-registration')


def build_orchestrator() -> RegistrationOrchestrator:
    """Wire the orchestrator with AWS-backed collaborators for this invocation."""
    return RegistrationOrchestrator.from_settings()


def _parse_payload(event: Dict[str, Any]) -> Dict[str, Any]:
    try:
        payload = extract_payload(event)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    if not isinstance(payload, dict):
        raise ValidationError('Request payload must be a JSON object')

    if not payload.get('phoneNumber') or not payload.get('code'):
        raise ValidationError('phoneNumber and code are required')

    return payload


@tracer.capture_lambda_handler(capture_response=False)
def execute_registration(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Finish a phone number registration.

    Expected payload:
    {
        "phoneNumber": "+5511999999999",
        "code": "123456"
    }

    Response (Success - 200):
    {
        "statusCode": 200,
        "body": {
            "message": "User verified and created successfully",
            "tokens": {
                "accessToken": "...",
                "refreshToken": "...",
                "idToken": "...",
                "expiresIn": 3600,
                "tokenType": "Bearer"
            }
        }
    }

    Response (Error - raised, errorMessage):
    {
        "errorType": "ValidationError",
        "httpStatus": 400,
        "requestId": "...",
        "message": "Invalid verification code"
    }

    Args:
        event: Direct invocation payload or API Gateway event
        context: Lambda context object

    Raises:
        ValidationError: Missing pending record or wrong code
        InternalServerError: Any other failure
    """
    request_id = getattr(context, 'aws_request_id', '')

    try:
        logger.info('Processing registration verification request')

        payload = _parse_payload(event)
        body = build_orchestrator().execute_registration(
            payload['phoneNumber'], str(payload['code'])
        )
        return success_response(body, status_code=HTTPStatus.OK)

    except ValidationError as e:
        e.request_id = request_id
        logger.warning(f'Validation error: {e.message}')
        raise

    except Exception as e:
        logger.error(f'Registration verification failed: {str(e)}', exc_info=True)
        raise InternalServerError.from_exception(
            e, request_id, function='execute_registration'
        ) from e
