"""
Cognito Verify Auth Challenge Response trigger.

This Lambda validates the user's OTP answer against the code the Create
trigger placed in privateChallengeParameters. It is called when the user
submits their code via RespondToAuthChallenge.
"""

from typing import Any, Dict

from aws_lambda_powertools import Logger

from src.models.challenge import verify_answer
from src.shared.utils import mask_phone_number

logger = Logger(service='cognito-verify-auth-challenge')


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Verify auth challenge response handler.

    Event structure:
    {
        "userName": "+5511999999999",
        "request": {
            "privateChallengeParameters": {"answer": "123456"},
            "challengeAnswer": "123456"
        },
        "response": {
            "answerCorrect": true/false
        }
    }

    Args:
        event: Cognito trigger event
        context: Lambda context

    Returns:
        Modified event with answerCorrect set

    Raises:
        KeyError: If the expected answer or the challenge answer is missing
    """
    try:
        request = event['request']
        expected_answer = request['privateChallengeParameters']['answer']
        challenge_answer = request['challengeAnswer']

        answer_correct = verify_answer(expected_answer, challenge_answer)
        event.setdefault('response', {})['answerCorrect'] = answer_correct

        logger.info(
            f"Verification {'successful' if answer_correct else 'failed'} "
            f"for user {mask_phone_number(event.get('userName', ''))}"
        )

        return event

    except Exception as e:
        logger.error(f'Error verifying challenge: {str(e)}', exc_info=True)
        raise
