"""
DynamoDB-backed store of pending registrations.

A pending registration bridges the "code sent" and "account created" steps of
sign up. Records are keyed by phone number (one live record per number, a new
pre-registration overwrites the previous one) and carry a ``ttl`` attribute so
DynamoDB expires them without an explicit delete.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from src.shared.aws_utils import get_boto_resource, get_error_code
from src.shared.settings import Settings
from src.shared.utils import mask_phone_number

logger = Logger(service='pending-registrations')


@dataclass(frozen=True)
class PendingRegistration:
    phone_number: str
    name: str
    verification_code: str
    created_at: int  # epoch millis
    ttl: int  # epoch seconds

    def to_item(self) -> Dict[str, Any]:
        return {
            'phoneNumber': self.phone_number,
            'name': self.name,
            'verificationCode': self.verification_code,
            'createdAt': self.created_at,
            'ttl': self.ttl,
        }

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> 'PendingRegistration':
        # DynamoDB resource returns numbers as Decimal
        return cls(
            phone_number=item['phoneNumber'],
            name=item.get('name', ''),
            verification_code=str(item['verificationCode']),
            created_at=int(item.get('createdAt', 0)),
            ttl=int(item.get('ttl', 0)),
        )

    def is_expired(self, now_seconds: float) -> bool:
        return now_seconds >= self.ttl


class PendingRegistrationStore:
    """put / get / delete access to the pending registrations table."""

    def __init__(self, table: Any, clock: Callable[[], float] = time.time):
        self.table = table
        self.clock = clock

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None
    ) -> 'PendingRegistrationStore':
        settings = settings or Settings()
        dynamodb = get_boto_resource('dynamodb', region_name=settings.region)
        return cls(dynamodb.Table(settings.pending_registrations_table_name))

    def put(self, registration: PendingRegistration) -> None:
        """Insert or overwrite the record for registration.phone_number."""
        self.table.put_item(Item=registration.to_item())
        logger.info(
            f'Pending registration stored for '
            f'{mask_phone_number(registration.phone_number)}'
        )

    def get(self, phone_number: str) -> Optional[PendingRegistration]:
        """
        Fetch the live record for phone_number.

        DynamoDB TTL deletion runs lazily, so a record past its ttl may still be
        returned by the table; such records are treated as absent.

        Returns:
            PendingRegistration or None
        """
        result = self.table.get_item(
            Key={'phoneNumber': phone_number}, ConsistentRead=True
        )
        item = result.get('Item')
        if not item:
            return None

        registration = PendingRegistration.from_item(item)
        if registration.is_expired(self.clock()):
            logger.info(
                f'Pending registration for {mask_phone_number(phone_number)} '
                f'has expired'
            )
            return None

        return registration

    def delete(self, phone_number: str) -> None:
        """Delete the record unconditionally. See consume for the guarded delete."""
        self.table.delete_item(Key={'phoneNumber': phone_number})

    def consume(self, phone_number: str, verification_code: str) -> bool:
        """
        Delete the record only if it still holds verification_code.

        Returns:
            True if the record was deleted, False if it had already been
            replaced by a newer pre-registration or removed

        Raises:
            ClientError: For any failure other than the failed condition
        """
        try:
            self.table.delete_item(
                Key={'phoneNumber': phone_number},
                ConditionExpression='verificationCode = :code',
                ExpressionAttributeValues={':code': verification_code},
            )
        except ClientError as e:
            if get_error_code(e) != 'ConditionalCheckFailedException':
                raise
            logger.warning(
                f'Pending registration for {mask_phone_number(phone_number)} '
                f'changed before it could be consumed'
            )
            return False

        return True
