"""
SMS delivery through Amazon SNS.
"""

from typing import Any, Optional

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from src.shared.aws_utils import get_boto_client, retry_config
from src.shared.settings import Settings
from src.shared.utils import mask_phone_number

logger = Logger(service='sms-sender')


class SmsSender:
    """Send transactional text messages to a single phone number."""

    def __init__(self, sns_client: Any):
        self.sns_client = sns_client

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> 'SmsSender':
        settings = settings or Settings()
        return cls(
            get_boto_client(
                'sns',
                region_name=settings.sms_region,
                config=retry_config(settings.sms_max_attempts),
            )
        )

    def send(self, phone_number: str, message: str) -> str:
        """
        Publish an SMS.

        Args:
            phone_number: Destination in E.164 format
            message: Text body

        Returns:
            SNS message ID

        Raises:
            ClientError: If SNS rejects the publish
        """
        try:
            result = self.sns_client.publish(
                PhoneNumber=phone_number,
                Message=message,
                MessageAttributes={
                    'AWS.SNS.SMS.SMSType': {
                        'DataType': 'String',
                        'StringValue': 'Transactional',
                    }
                },
            )
        except ClientError as e:
            logger.error(
                f'Failed to send SMS to {mask_phone_number(phone_number)}: {str(e)}'
            )
            raise

        message_id = result.get('MessageId', '')
        logger.info(
            f'SMS sent to {mask_phone_number(phone_number)} (messageId: {message_id})'
        )
        return message_id
