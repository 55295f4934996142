"""
Cognito Create Auth Challenge trigger.

This Lambda is called when Cognito needs to create the phone OTP challenge.
On the first attempt of a session it generates a 6-digit code and sends it by
SMS. On retries it reuses the code stored in the previous attempt's
challengeMetadata (CODE-<digits>) and does not send another message.
"""

import time
from typing import Any, Dict

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit

from src.models.challenge import ChallengeAttempt, ChallengeCodeIssuer
from src.shared.notifications import SmsSender
from src.shared.settings import Settings

logger = Logger(service='cognito-create-auth-challenge')
metrics = Metrics(namespace='Authentication', service='cognito-create-auth-challenge')
tracer = Tracer(service='cognito-create-auth-challenge')


def build_challenge_issuer() -> ChallengeCodeIssuer:
    """Wire the issuer with an SNS sender for this invocation."""
    return ChallengeCodeIssuer(
        sms_sender=SmsSender.from_settings(Settings()), metrics=metrics
    )


def record_auth_attempt(success: bool, duration: float) -> None:
    metrics.add_metric(
        name='AuthenticationDuration', unit=MetricUnit.Milliseconds, value=duration
    )
    metrics.add_metric(
        name='SuccessfulAuthentications' if success else 'FailedAuthentications',
        unit=MetricUnit.Count,
        value=1,
    )


@metrics.log_metrics
@tracer.capture_lambda_handler(capture_response=False)
def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Create auth challenge handler.

    Event structure:
    {
        "request": {
            "userAttributes": {"phone_number": "+5511999999999", ...},
            "challengeName": "CUSTOM_CHALLENGE",
            "session": [
                {"challengeMetadata": "CODE-123456", "challengeResult": false}
            ]
        },
        "response": {
            "publicChallengeParameters": {"phone": "+55XXXXXXX9999"},
            "privateChallengeParameters": {"answer": "123456"},
            "challengeMetadata": "CODE-123456"
        }
    }

    Args:
        event: Cognito trigger event
        context: Lambda context

    Returns:
        Modified event with challenge parameters

    Raises:
        ChallengeMetadataError: If a retry's previous metadata has no code
        ClientError: If the SMS cannot be sent
    """
    start = time.perf_counter()
    try:
        request = event.get('request', {})
        session = ChallengeAttempt.from_session(request.get('session'))
        phone_number = request['userAttributes']['phone_number']

        logger.info(f'Creating auth challenge - Session length: {len(session)}')

        challenge = build_challenge_issuer().issue(phone_number, session)

        response = event.setdefault('response', {})
        # Public parameters are visible to the client: masked number only
        response['publicChallengeParameters'] = {'phone': challenge.masked_phone}
        response['privateChallengeParameters'] = {'answer': challenge.code}
        response['challengeMetadata'] = challenge.challenge_metadata

        duration = (time.perf_counter() - start) * 1000
        record_auth_attempt(True, duration)
        logger.info(
            f'Challenge created for {challenge.masked_phone} in {duration:.0f}ms'
        )

        return event

    except Exception as e:
        duration = (time.perf_counter() - start) * 1000
        record_auth_attempt(False, duration)
        logger.error(f'Error creating auth challenge: {str(e)}', exc_info=True)
        raise
