"""
Phone number sign up in two steps.

pre_register: reject numbers already in the user pool, store a pending
registration with a 6-digit code (5 minute TTL) and send the code by SMS.

execute_registration: check the submitted code against the pending record,
create and confirm the Cognito account with a throwaway password, sign in
once to obtain tokens and consume the pending record.
"""

import time
from typing import Any, Callable, Dict, Optional

from aws_lambda_powertools import Logger

from src.shared.exceptions import ValidationError
from src.shared.identity_provider import IdentityProviderAdmin
from src.shared.notifications import SmsSender
from src.shared.pending_registrations import (
    PendingRegistration,
    PendingRegistrationStore,
)
from src.shared.settings import Settings
from src.shared.utils import (
    generate_strong_password,
    generate_verification_code,
    mask_phone_number,
)

logger = Logger(service='registration')

REGISTRATION_SMS_TEMPLATE = 'P-{code} é o seu código de verificação Prime Gourmet.'
DEFAULT_TTL_SECONDS = 300


class RegistrationOrchestrator:
    """
    Coordinates the pending registration store, the SMS sender and the
    identity provider for both sign up steps.

    Args:
        identity_provider: IdentityProviderAdmin
        pending_store: PendingRegistrationStore
        sms_sender: SmsSender
        ttl_seconds: Lifetime of a pending registration
        clock: Returns the current epoch time in seconds
    """

    def __init__(
        self,
        identity_provider: Any,
        pending_store: Any,
        sms_sender: Any,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        code_generator: Callable[[], str] = generate_verification_code,
        password_generator: Callable[[], str] = generate_strong_password,
        message_template: str = REGISTRATION_SMS_TEMPLATE,
    ):
        self.identity_provider = identity_provider
        self.pending_store = pending_store
        self.sms_sender = sms_sender
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.code_generator = code_generator
        self.password_generator = password_generator
        self.message_template = message_template

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None
    ) -> 'RegistrationOrchestrator':
        """Wire the orchestrator with AWS-backed collaborators."""
        settings = settings or Settings()
        return cls(
            identity_provider=IdentityProviderAdmin.from_settings(settings),
            pending_store=PendingRegistrationStore.from_settings(settings),
            sms_sender=SmsSender.from_settings(settings),
            ttl_seconds=settings.pending_registration_ttl_seconds,
        )

    def pre_register(self, phone_number: str, name: str) -> Dict[str, Any]:
        """
        Start a registration.

        Raises:
            ValidationError: If the phone number already belongs to a user
        """
        masked_phone = mask_phone_number(phone_number)

        if self.identity_provider.user_exists(phone_number):
            logger.warning(f'Registration attempted for existing user {masked_phone}')
            raise ValidationError('User already exists')

        code = self.code_generator()
        now = self.clock()
        self.pending_store.put(
            PendingRegistration(
                phone_number=phone_number,
                name=name,
                verification_code=code,
                created_at=int(now * 1000),
                ttl=int(now) + self.ttl_seconds,
            )
        )

        self.sms_sender.send(phone_number, self.message_template.format(code=code))
        logger.info(f'Verification code sent to {masked_phone}')

        return {
            'message': 'Verification code sent successfully',
            'confirmationDetails': {
                'destination': masked_phone,
                'deliveryMedium': 'SMS',
                'attributeName': 'phone_number',
            },
        }

    def execute_registration(self, phone_number: str, code: str) -> Dict[str, Any]:
        """
        Finish a registration and return the new user's tokens.

        A wrong code leaves the pending record in place so the user can try
        again until it expires.

        Raises:
            ValidationError: If there is no live pending record or the code differs
        """
        masked_phone = mask_phone_number(phone_number)

        pending = self.pending_store.get(phone_number)
        if pending is None:
            logger.warning(f'No pending registration for {masked_phone}')
            raise ValidationError('No pending verification found for this number.')

        if pending.verification_code != code:
            logger.warning(f'Invalid verification code submitted for {masked_phone}')
            raise ValidationError('Invalid verification code')

        password = self.password_generator()
        self.identity_provider.sign_up(phone_number, password, pending.name)
        # The code exchange already proved ownership of the number
        self.identity_provider.confirm_sign_up(phone_number)
        self.identity_provider.mark_phone_number_verified(phone_number)
        tokens = self.identity_provider.initiate_password_auth(phone_number, password)

        self.pending_store.consume(phone_number, pending.verification_code)
        logger.info(f'User {masked_phone} verified and created')

        return {
            'message': 'User verified and created successfully',
            'tokens': tokens.to_dict(),
        }
