"""
Exceptions shared by the authentication triggers and registration functions.

Registration failures leave the Lambda through its error channel: the handler
raises a RegistrationError whose string form is the JSON error payload, so the
caller receives it as ``errorMessage``.
"""

import json
import traceback
from http import HTTPStatus
from typing import Any, Dict, Optional


class RegistrationError(Exception):
    """Base class for errors reported by the registration functions."""

    error_type = 'RegistrationError'
    http_status = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        request_id: str = '',
        trace: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.request_id = request_id
        self.trace = trace

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            'errorType': self.error_type,
            'httpStatus': int(self.http_status),
            'requestId': self.request_id,
            'message': self.message,
        }
        if self.trace:
            payload['trace'] = self.trace
        return payload

    def __str__(self) -> str:
        return json.dumps(self.to_dict())


class ValidationError(RegistrationError):
    """Client-caused failure; the message is safe to show to the caller."""

    error_type = 'ValidationError'
    http_status = HTTPStatus.BAD_REQUEST


class InternalServerError(RegistrationError):
    """System-caused failure; diagnostic detail travels in ``trace``."""

    error_type = 'InternalServerError'
    http_status = HTTPStatus.INTERNAL_SERVER_ERROR

    @classmethod
    def from_exception(
        cls, error: Exception, request_id: str, function: str = 'handler'
    ) -> 'InternalServerError':
        return cls(
            'Internal server error',
            request_id=request_id,
            trace={
                'function': function,
                'error': str(error),
                'stack': ''.join(
                    traceback.format_exception(
                        type(error), error, error.__traceback__
                    )
                ),
            },
        )


class UserNotFoundError(Exception):
    """Raised by the define-challenge trigger to reject an unknown user."""

    def __init__(self, message: str = 'User does not exist'):
        super().__init__(message)


class ChallengeMetadataError(ValueError):
    """The previous challenge metadata does not carry a CODE-<digits> value."""
