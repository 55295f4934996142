"""Test cases for the local lambda runner."""

import json
import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import manage


def test_unknown_function_exits():
    with pytest.raises(SystemExit):
        manage.execute_lambda('does_not_exist')


def test_runs_handler_with_event_file(tmp_path):
    event_file = tmp_path / 'event.json'
    event_file.write_text(
        json.dumps(
            {
                'request': {
                    'privateChallengeParameters': {'answer': '123456'},
                    'challengeAnswer': '123456',
                },
                'response': {},
            }
        )
    )

    result = manage.execute_lambda(
        'cognito_verify_auth_challenge_response', str(event_file)
    )

    assert result['response']['answerCorrect'] is True


def test_handler_error_exits(tmp_path):
    event_file = tmp_path / 'event.json'
    event_file.write_text(json.dumps({'request': {'userNotFound': True}, 'response': {}}))

    with pytest.raises(SystemExit):
        manage.execute_lambda('cognito_define_auth_challenge', str(event_file))


def test_context_defaults():
    context = manage.LambdaContext()

    assert context.aws_request_id == 'local-request-id'
    assert context.function_name == 'local-function'
