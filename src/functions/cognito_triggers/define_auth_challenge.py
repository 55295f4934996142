"""
Cognito Define Auth Challenge trigger.

This Lambda defines the authentication flow for the phone OTP custom challenge.
It determines whether to:
- Fail authentication (user does not exist)
- Issue tokens (last challenge answered correctly)
- Issue a CUSTOM_CHALLENGE (first attempt or a retry)

Flow:
1. userNotFound → fail and raise, Cognito rejects the sign in
2. Last session entry answered correctly → issue tokens
3. Anything else → CUSTOM_CHALLENGE (Cognito bounds the number of retries)
"""

from typing import Any, Dict

from aws_lambda_powertools import Logger

from src.models.challenge import (
    Authenticated,
    ChallengeAttempt,
    ChallengeIssued,
    Rejected,
    decide_next_step,
)
from src.shared.exceptions import UserNotFoundError

logger = Logger(service='cognito-define-auth-challenge')


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Define auth challenge handler.

    Event structure:
    {
        "request": {
            "userAttributes": {...},
            "userNotFound": false,
            "session": [
                {
                    "challengeName": "CUSTOM_CHALLENGE",
                    "challengeResult": true/false,
                    "challengeMetadata": "CODE-123456"
                }
            ]
        },
        "response": {
            "challengeName": "CUSTOM_CHALLENGE" | null,
            "issueTokens": true/false,
            "failAuthentication": true/false
        }
    }

    Args:
        event: Cognito trigger event
        context: Lambda context

    Returns:
        Modified event with response fields set

    Raises:
        UserNotFoundError: If Cognito reports the user does not exist
    """
    request = event.get('request', {})
    response = event.setdefault('response', {})
    session = ChallengeAttempt.from_session(request.get('session'))

    logger.info(f'Define auth challenge - Session length: {len(session)}')

    decision = decide_next_step(bool(request.get('userNotFound')), session)

    response['failAuthentication'] = decision.fail_authentication
    response['issueTokens'] = decision.issue_tokens

    if isinstance(decision, Rejected):
        error = UserNotFoundError(decision.reason)
        logger.error(f'Define auth challenge failed: {str(error)}')
        raise error

    if isinstance(decision, Authenticated):
        logger.info('Challenge answered correctly - issuing tokens')
    elif isinstance(decision, ChallengeIssued):
        logger.info(
            f'Issuing {decision.challenge_name}, attempt {decision.attempt_number}'
        )
        response['challengeName'] = decision.challenge_name

    return event
