"""
Lambda handler for the first step of phone number sign up.

Checks that the number is not registered yet, stores a pending registration
with a 6-digit code (valid for 5 minutes) and sends the code by SMS.
"""

from http import HTTPStatus
from typing import Any, Dict

from aws_lambda_powertools import Logger, Tracer

from src.models.registration import RegistrationOrchestrator
from src.shared.exceptions import InternalServerError, ValidationError
from src.shared.utils import extract_payload, is_valid_phone_number, success_response

logger = Logger(service='pre-register')
tracer = Tracer(service='pre-register')


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

    phone_number = payload.get('phoneNumber')
    name = payload.get('name')

    if not phone_number or not name:
        raise ValidationError('phoneNumber and name are required')

    if not is_valid_phone_number(phone_number):
        raise ValidationError('phoneNumber must be in E.164 format')

    return payload


@tracer.capture_lambda_handler(capture_response=False)
def pre_register(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Start a phone number registration.

    Expected payload:
    {
        "phoneNumber": "+5511999999999",
        "name": "Maria Silva"
    }

    Response (Success - 200):
    {
        "statusCode": 200,
        "body": {
            "message": "Verification code sent successfully",
            "confirmationDetails": {
                "destination": "+55XXXXXXX9999",
                "deliveryMedium": "SMS",
                "attributeName": "phone_number"
            }
        }
    }

    Errors are raised, so they reach the caller through the invocation's
    error channel. The error message is the JSON payload:
    {
        "errorType": "ValidationError" | "InternalServerError",
        "httpStatus": 400 | 500,
        "requestId": "...",
        "message": "...",
        "trace": {"function": "...", "error": "...", "stack": "..."}
    }

    Args:
        event: Direct invocation payload or API Gateway event
        context: Lambda context object

    Raises:
        ValidationError: Invalid input or user already registered
        InternalServerError: Any other failure
    """
    request_id = getattr(context, 'aws_request_id', '')

    try:
        logger.info('Processing pre-registration request')

        payload = _parse_payload(event)
        body = build_orchestrator().pre_register(
            payload['phoneNumber'], payload['name']
        )
        return success_response(body, status_code=HTTPStatus.OK)

    except ValidationError as e:
        e.request_id = request_id
        logger.warning(f'Validation error: {e.message}')
        raise

    except Exception as e:
        logger.error(f'Pre-registration failed: {str(e)}', exc_info=True)
        raise InternalServerError.from_exception(
            e, request_id, function='pre_register'
        ) from e
