"""
Test cases for the custom challenge flow.

This test file validates:
- The define-challenge decision for every state
- Challenge metadata parsing
- Code issuing on first attempt and reuse on retries
- Answer verification
"""

import os
import sys
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.models.challenge import (
    Authenticated,
    ChallengeAttempt,
    ChallengeCodeIssuer,
    ChallengeIssued,
    Rejected,
    decide_next_step,
    parse_challenge_metadata,
    verify_answer,
)
from src.shared.exceptions import ChallengeMetadataError

PHONE = '+5511999999999'


@pytest.fixture
def sms_sender():
    return MagicMock()


@pytest.fixture
def metrics():
    return MagicMock()


@pytest.fixture
def issuer(sms_sender, metrics):
    return ChallengeCodeIssuer(
        sms_sender=sms_sender, metrics=metrics, code_generator=lambda: '482913'
    )


class TestChallengeAttempt:
    def test_from_session(self):
        attempts = ChallengeAttempt.from_session(
            [
                {'challengeMetadata': 'CODE-123456', 'challengeResult': False},
                {'challengeName': 'CUSTOM_CHALLENGE', 'challengeResult': True},
            ]
        )

        assert attempts == [
            ChallengeAttempt('CODE-123456', False),
            ChallengeAttempt('', True),
        ]

    def test_none_session_is_empty(self):
        assert ChallengeAttempt.from_session(None) == []

    def test_truthy_non_boolean_result_is_not_success(self):
        attempts = ChallengeAttempt.from_session([{'challengeResult': 'true'}])

        assert attempts[0].challenge_result is False


class TestDecideNextStep:
    def test_user_not_found_is_rejected(self):
        decision = decide_next_step(True, [])

        assert isinstance(decision, Rejected)
        assert decision.fail_authentication is True
        assert decision.issue_tokens is False
        assert decision.reason == 'User does not exist'

    def test_user_not_found_wins_over_successful_session(self):
        decision = decide_next_step(True, [ChallengeAttempt('CODE-1', True)])

        assert isinstance(decision, Rejected)

    def test_empty_session_issues_challenge(self):
        decision = decide_next_step(False, [])

        assert isinstance(decision, ChallengeIssued)
        assert decision.challenge_name == 'CUSTOM_CHALLENGE'
        assert decision.fail_authentication is False
        assert decision.issue_tokens is False
        assert decision.attempt_number == 1

    def test_successful_last_attempt_authenticates(self):
        decision = decide_next_step(False, [ChallengeAttempt('CODE-123456', True)])

        assert isinstance(decision, Authenticated)
        assert decision.fail_authentication is False
        assert decision.issue_tokens is True

    def test_failed_last_attempt_retries_without_cutoff(self):
        session = [ChallengeAttempt('CODE-123456', False)] * 5

        decision = decide_next_step(False, session)

        assert isinstance(decision, ChallengeIssued)
        assert decision.attempt_number == 6

    def test_only_last_attempt_counts(self):
        session = [
            ChallengeAttempt('CODE-123456', True),
            ChallengeAttempt('CODE-123456', False),
        ]

        assert isinstance(decide_next_step(False, session), ChallengeIssued)


class TestParseChallengeMetadata:
    def test_extracts_code(self):
        assert parse_challenge_metadata('CODE-654321') == '654321'

    @pytest.mark.parametrize('metadata', ['', 'CODE-', 'EMAIL_OTP_abc', None])
    def test_invalid_format(self, metadata):
        with pytest.raises(ChallengeMetadataError, match='Invalid challenge metadata format'):
            parse_challenge_metadata(metadata)


class TestChallengeCodeIssuer:
    def test_first_attempt_generates_and_sends(self, issuer, sms_sender, metrics):
        challenge = issuer.issue(PHONE, [])

        assert challenge.code == '482913'
        assert challenge.masked_phone == '+55XXXXXXX9999'
        assert challenge.challenge_metadata == 'CODE-482913'
        assert challenge.reused is False
        sms_sender.send.assert_called_once_with(
            PHONE, 'Seu código de verificação é: 482913'
        )
        metrics.add_metric.assert_called_once()
        assert metrics.add_metric.call_args.kwargs['name'] == 'SMSDuration'

    def test_retry_reuses_code_without_sending(self, issuer, sms_sender):
        first = issuer.issue(PHONE, [])
        session = [ChallengeAttempt(first.challenge_metadata, False)]

        second = issuer.issue(PHONE, session)

        assert second.code == first.code
        assert second.challenge_metadata == first.challenge_metadata
        assert second.reused is True
        assert sms_sender.send.call_count == 1

    def test_retry_uses_most_recent_attempt(self, issuer, sms_sender):
        session = [
            ChallengeAttempt('CODE-111111', False),
            ChallengeAttempt('CODE-222222', False),
        ]

        assert issuer.issue(PHONE, session).code == '222222'
        sms_sender.send.assert_not_called()

    def test_retry_with_invalid_metadata_fails(self, issuer, sms_sender):
        with pytest.raises(ChallengeMetadataError):
            issuer.issue(PHONE, [ChallengeAttempt('OTP_CHALLENGE', False)])

        sms_sender.send.assert_not_called()

    def test_send_failure_propagates(self, issuer, sms_sender, metrics):
        sms_sender.send.side_effect = ClientError(
            {'Error': {'Code': 'Throttling', 'Message': 'Rate exceeded'}}, 'Publish'
        )

        with pytest.raises(ClientError):
            issuer.issue(PHONE, [])

        metrics.add_metric.assert_not_called()

    def test_default_generator_produces_six_digits(self, sms_sender, metrics):
        challenge = ChallengeCodeIssuer(sms_sender, metrics).issue(PHONE, [])

        assert len(challenge.code) == 6
        assert challenge.code.isdigit()


class TestVerifyAnswer:
    def test_matching_answer(self):
        assert verify_answer('12345', '12345') is True

    def test_wrong_answer(self):
        assert verify_answer('12345', '54321') is False

    def test_comparison_is_exact(self):
        assert verify_answer('123456', ' 123456') is False
