"""
Custom authentication challenge flow for phone number sign in.

Cognito drives a CUSTOM_AUTH flow through three triggers:

1. Define: decides from the session history whether to reject the user,
   issue (or re-issue) a challenge, or hand out tokens.
2. Create: produces the secret code for the challenge. The first attempt
   generates a code and sends it by SMS; retries in the same session reuse
   the code carried in the previous attempt's challengeMetadata.
3. Verify: compares the user's answer with the expected code.

The decision and the verification are pure functions; the code issuer only
touches the SMS sender and the metrics sink it is given.
"""

import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from aws_lambda_powertools import Logger
from aws_lambda_powertools.metrics import MetricUnit

from src.shared.exceptions import ChallengeMetadataError
from src.shared.utils import generate_verification_code, mask_phone_number

logger = Logger(service='auth-challenge')

CUSTOM_CHALLENGE = 'CUSTOM_CHALLENGE'
CHALLENGE_METADATA_PATTERN = re.compile(r'CODE-(\d+)')
LOGIN_SMS_TEMPLATE = 'Seu código de verificação é: {code}'


@dataclass(frozen=True)
class ChallengeAttempt:
    """One entry of the Cognito session array."""

    challenge_metadata: str = ''
    challenge_result: bool = False

    @classmethod
    def from_session(
        cls, session: Optional[List[Dict[str, Any]]]
    ) -> List['ChallengeAttempt']:
        return [
            cls(
                challenge_metadata=entry.get('challengeMetadata') or '',
                # Only a literal True counts as a solved challenge
                challenge_result=entry.get('challengeResult') is True,
            )
            for entry in session or []
        ]


@dataclass(frozen=True)
class Rejected:
    reason: str = 'User does not exist'
    fail_authentication: bool = True
    issue_tokens: bool = False


@dataclass(frozen=True)
class ChallengeIssued:
    attempt_number: int = 1
    challenge_name: str = CUSTOM_CHALLENGE
    fail_authentication: bool = False
    issue_tokens: bool = False


@dataclass(frozen=True)
class Authenticated:
    fail_authentication: bool = False
    issue_tokens: bool = True


ChallengeDecision = Union[Rejected, ChallengeIssued, Authenticated]


def decide_next_step(
    user_not_found: bool, session: List[ChallengeAttempt]
) -> ChallengeDecision:
    """
    Decide the next step of the custom auth flow.

    There is no retry cutoff here; Cognito's own attempt limit for the
    authentication session bounds the number of retries.

    Args:
        user_not_found: Cognito's userNotFound flag
        session: Previous challenge attempts, oldest first

    Returns:
        Rejected, Authenticated or ChallengeIssued
    """
    if user_not_found:
        return Rejected()

    if session and session[-1].challenge_result:
        return Authenticated()

    return ChallengeIssued(attempt_number=len(session) + 1)


def verify_answer(expected_answer: str, challenge_answer: str) -> bool:
    """Exact comparison of the expected code and the user's answer."""
    return expected_answer == challenge_answer


def format_challenge_metadata(code: str) -> str:
    return f'CODE-{code}'


def parse_challenge_metadata(challenge_metadata: str) -> str:
    """
    Extract the code from a CODE-<digits> metadata string.

    Raises:
        ChallengeMetadataError: If the metadata does not carry a code
    """
    match = CHALLENGE_METADATA_PATTERN.search(challenge_metadata or '')
    if not match:
        raise ChallengeMetadataError('Invalid challenge metadata format')
    return match.group(1)


@dataclass(frozen=True)
class IssuedChallenge:
    code: str
    masked_phone: str
    reused: bool

    @property
    def challenge_metadata(self) -> str:
        return format_challenge_metadata(self.code)


class ChallengeCodeIssuer:
    """
    Produce the secret code for a challenge, sending it only once per session.

    Args:
        sms_sender: Object with a send(phone_number, message) method
        metrics: Powertools Metrics (or compatible) sink
        code_generator: Callable returning a fresh code
        message_template: SMS text with a {code} placeholder
    """

    def __init__(
        self,
        sms_sender: Any,
        metrics: Any,
        code_generator: Callable[[], str] = generate_verification_code,
        message_template: str = LOGIN_SMS_TEMPLATE,
    ):
        self.sms_sender = sms_sender
        self.metrics = metrics
        self.code_generator = code_generator
        self.message_template = message_template

    def issue(
        self, phone_number: str, session: List[ChallengeAttempt]
    ) -> IssuedChallenge:
        masked_phone = mask_phone_number(phone_number)

        if session:
            code = parse_challenge_metadata(session[-1].challenge_metadata)
            logger.info(f'Reusing previous code, attempt number {len(session)}')
            return IssuedChallenge(code=code, masked_phone=masked_phone, reused=True)

        code = self.code_generator()
        self._send_code(phone_number, code)
        return IssuedChallenge(code=code, masked_phone=masked_phone, reused=False)

    def _send_code(self, phone_number: str, code: str) -> None:
        start = time.perf_counter()
        try:
            self.sms_sender.send(phone_number, self.message_template.format(code=code))
        except Exception as e:
            duration = (time.perf_counter() - start) * 1000
            logger.error(
                f'Failed to send challenge SMS to {mask_phone_number(phone_number)} '
                f'after {duration:.0f}ms: {str(e)}'
            )
            raise

        duration = (time.perf_counter() - start) * 1000
        self.metrics.add_metric(
            name='SMSDuration', unit=MetricUnit.Milliseconds, value=duration
        )
        logger.info(
            f'Challenge SMS sent to {mask_phone_number(phone_number)} '
            f'in {duration:.0f}ms'
        )
