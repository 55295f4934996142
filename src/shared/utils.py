import json
import re
import secrets
import string
from http import HTTPStatus
from random import SystemRandom
from typing import Any, Dict, Union

COUNTRY_CODE_PATTERN = re.compile(r'^\+\d{2}')
E164_PATTERN = re.compile(r'\+[1-9]\d{1,14}')

VERIFICATION_CODE_MIN = 100000
VERIFICATION_CODE_MAX = 999999

# Excludes the ambiguous glyphs I, O, l, o, 0 and 1
PASSWORD_UPPER = 'ABCDEFGHJKLMNPQRSTUVWXYZ'
PASSWORD_LOWER = 'abcdefghijkmnpqrstuvwxyz'
PASSWORD_DIGITS = '23456789'
PASSWORD_SPECIAL = '#@$%&*!?'
PASSWORD_LENGTH = 12

_system_random = SystemRandom()


def mask_phone_number(phone: str) -> str:
    """
    Mask a phone number for display (e.g., +55XXXXXXX9999).

    The country code (a leading '+' and exactly two digits) and the last four
    characters are kept; everything in between becomes 'X'. The masked value
    always has the same length as the input.

    Args:
        phone: Phone number in E.164 format

    Returns:
        Masked phone number
    """
    match = COUNTRY_CODE_PATTERN.match(phone)
    country_code = match.group(0) if match else ''
    national = phone[len(country_code):]

    if len(national) <= 4:
        return country_code + 'X' * len(national)

    return country_code + 'X' * (len(national) - 4) + national[-4:]


def is_valid_phone_number(phone: Any) -> bool:
    """Check that phone is an E.164 string (e.g. +5511999999999)."""
    return isinstance(phone, str) and bool(E164_PATTERN.fullmatch(phone))


def generate_verification_code() -> str:
    """
    Generate a 6-digit numeric one-time code.

    Returns:
        Code drawn uniformly from [100000, 999999]
    """
    span = VERIFICATION_CODE_MAX - VERIFICATION_CODE_MIN + 1
    return str(VERIFICATION_CODE_MIN + secrets.randbelow(span))


def generate_strong_password() -> str:
    """
    Generate a single-use 12 character password for account creation.

    One character is drawn from each class (upper, lower, digit, special) so
    the user pool password policy is always satisfied, the rest come from the
    union of all classes and the result is shuffled.

    Returns:
        Random password string
    """
    classes = [PASSWORD_UPPER, PASSWORD_LOWER, PASSWORD_DIGITS, PASSWORD_SPECIAL]
    all_chars = ''.join(classes)

    password = [secrets.choice(chars) for chars in classes]
    password.extend(
        secrets.choice(all_chars) for _ in range(PASSWORD_LENGTH - len(classes))
    )
    _system_random.shuffle(password)

    return ''.join(password)


def extract_payload(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extract the request payload from a Lambda event.

    Direct invocations carry the fields at the top level; API Gateway proxy
    events carry them as a JSON string in 'body'.

    Args:
        event: Lambda invocation event

    Returns:
        Parsed payload dictionary

    Raises:
        ValueError: If the body is not valid JSON
    """
    body = event.get('body')
    if body is None:
        return event

    if isinstance(body, str):
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise ValueError(f'Invalid JSON in request body: {str(e)}')

    return body


def success_response(
    body: Dict[str, Any],
    status_code: Union[int, HTTPStatus] = HTTPStatus.OK,
) -> Dict[str, Any]:
    """
    Build the success envelope returned by the registration functions.

    Args:
        body: Response body (kept as a dict, not serialized)
        status_code: HTTP status code (int or HTTPStatus). Defaults to HTTPStatus.OK.

    Returns:
        Dict[str, Any]: {'statusCode': int, 'body': dict}
    """
    return {
        'statusCode': int(status_code),
        'body': body,
    }
