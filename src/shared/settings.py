"""
Centralized configuration module for environment-based settings.

This module provides a unified way to access environment-specific configuration
across the phone authentication functions, supporting both dev and prod environments.
"""

import os
from typing import Optional


class Settings:
    """
    Centralized settings manager for environment-specific configuration.

    Automatically detects the environment stage (dev/prod) and provides
    dynamic resource names, Cognito identifiers and SMS configuration.

    Attributes:
        stage: Current deployment stage ('dev' or 'prod')
        region: AWS region
        account_id: AWS account ID
    """

    VALID_STAGES = ['dev', 'prod']

    def __init__(self):
        """Initialize settings from environment variables."""
        self.stage = os.environ.get('STAGE', 'dev').lower()
        self.region = os.environ.get('REGION', 'us-east-1')
        self.account_id = os.environ.get('ACCOUNT_ID', '')

        # Validate stage
        if self.stage not in self.VALID_STAGES:
            raise ValueError(
                f"Invalid STAGE: '{self.stage}'. Must be one of {self.VALID_STAGES}"
            )

    # Cognito Configuration
    @property
    def user_pool_id(self) -> str:
        """
        Get the Cognito user pool ID.

        Raises:
            ValueError: If USER_POOL_ID is not set
        """
        return self._required('USER_POOL_ID')

    @property
    def user_pool_client_id(self) -> str:
        """
        Get the Cognito app client ID used for sign up and password auth.

        Raises:
            ValueError: If CLIENT_ID is not set
        """
        return self._required('CLIENT_ID')

    # DynamoDB Table Names
    @property
    def pending_registrations_table_name(self) -> str:
        """Get the pending registrations DynamoDB table name for current stage."""
        return os.environ.get(
            'PENDING_TABLE',
            self.get_resource_name('phone-auth', 'pending-registrations'),
        )

    @property
    def pending_registration_ttl_seconds(self) -> int:
        """Lifetime of a pending registration record (default 5 minutes)."""
        return int(os.environ.get('PENDING_REGISTRATION_TTL_SECONDS', '300'))

    # SNS Configuration
    @property
    def sms_region(self) -> str:
        """Get the region SNS text messages are published from."""
        return os.environ.get('SMS_REGION', 'sa-east-1')

    @property
    def sms_max_attempts(self) -> int:
        """Maximum SDK attempts for a single SNS publish call."""
        return int(os.environ.get('SMS_MAX_ATTEMPTS', '2'))

    # Helper Methods
    def _required(self, env_key: str) -> str:
        value = os.environ.get(env_key, '')

        if not value:
            raise ValueError(f'Missing required environment variable: {env_key}')

        return value

    def get_resource_name(
        self, resource_type: str, suffix: Optional[str] = None
    ) -> str:
        """
        Generate a stage-prefixed resource name.

        Args:
            resource_type: Type of resource (e.g., 'lambda', 'table', 'topic')
            suffix: Optional suffix to append

        Returns:
            Formatted resource name: {stage}-{resource_type}[-{suffix}]
        """
        base_name = f'{self.stage}-{resource_type}'
        if suffix:
            return f'{base_name}-{suffix}'
        return base_name

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.stage == 'prod'

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.stage == 'dev'

    def __repr__(self) -> str:
        """String representation of settings."""
        return (
            f"Settings(stage='{self.stage}', region='{self.region}', "
            f"pending_table='{self.pending_registrations_table_name}', "
            f"sms_region='{self.sms_region}')"
        )
