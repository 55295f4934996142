"""
Test cases for the Settings class.

This test file validates the centralized settings functionality including:
- Stage detection and validation
- Pending registrations table naming
- Required Cognito identifiers
- SMS configuration defaults
- Resource naming utilities
"""

import os
import sys
from unittest.mock import patch

import pytest

# Add the repository root to the path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))


class TestSettings:
    """Tests for Settings class initialization and configuration."""

    @patch.dict(os.environ, {'STAGE': 'dev', 'REGION': 'us-east-1'})
    def test_settings_dev_environment(self):
        """Test settings initialization in dev environment."""
        from src.shared.settings import Settings

        settings = Settings()

        assert settings.stage == 'dev'
        assert settings.region == 'us-east-1'
        assert settings.is_development() is True
        assert settings.is_production() is False

    @patch.dict(os.environ, {'STAGE': 'PROD', 'REGION': 'sa-east-1'})
    def test_settings_prod_environment_is_case_insensitive(self):
        """Test settings initialization in prod environment."""
        from src.shared.settings import Settings

        settings = Settings()

        assert settings.stage == 'prod'
        assert settings.region == 'sa-east-1'
        assert settings.is_production() is True

    @patch.dict(os.environ, {'STAGE': 'invalid'})
    def test_settings_invalid_stage_raises_error(self):
        """Test that invalid stage raises ValueError."""
        from src.shared.settings import Settings

        with pytest.raises(ValueError, match='Invalid STAGE'):
            Settings()

    @patch.dict(os.environ, {'STAGE': 'prod'}, clear=True)
    def test_pending_table_name_default(self):
        """Test pending registrations table name generation for prod."""
        from src.shared.settings import Settings

        settings = Settings()

        assert (
            settings.pending_registrations_table_name
            == 'prod-phone-auth-pending-registrations'
        )

    @patch.dict(os.environ, {'STAGE': 'dev', 'PENDING_TABLE': 'custom-pending'})
    def test_pending_table_name_from_env(self):
        """Test pending table name override from environment variable."""
        from src.shared.settings import Settings

        assert Settings().pending_registrations_table_name == 'custom-pending'

    @patch.dict(os.environ, {'STAGE': 'dev'}, clear=True)
    def test_defaults(self):
        """Test TTL and SMS defaults."""
        from src.shared.settings import Settings

        settings = Settings()

        assert settings.pending_registration_ttl_seconds == 300
        assert settings.sms_region == 'sa-east-1'
        assert settings.sms_max_attempts == 2

    @patch.dict(
        os.environ,
        {
            'STAGE': 'dev',
            'PENDING_REGISTRATION_TTL_SECONDS': '120',
            'SMS_REGION': 'us-east-1',
            'SMS_MAX_ATTEMPTS': '3',
        },
    )
    def test_overrides_from_env(self):
        """Test TTL and SMS overrides."""
        from src.shared.settings import Settings

        settings = Settings()

        assert settings.pending_registration_ttl_seconds == 120
        assert settings.sms_region == 'us-east-1'
        assert settings.sms_max_attempts == 3

    @patch.dict(
        os.environ,
        {'STAGE': 'dev', 'USER_POOL_ID': 'sa-east-1_abc', 'CLIENT_ID': 'client-123'},
    )
    def test_cognito_identifiers(self):
        """Test Cognito identifiers are read from the environment."""
        from src.shared.settings import Settings

        settings = Settings()

        assert settings.user_pool_id == 'sa-east-1_abc'
        assert settings.user_pool_client_id == 'client-123'

    @patch.dict(os.environ, {'STAGE': 'dev'}, clear=True)
    def test_missing_user_pool_id_raises_error(self):
        """Test that missing USER_POOL_ID raises ValueError."""
        from src.shared.settings import Settings

        settings = Settings()

        with pytest.raises(ValueError, match='USER_POOL_ID'):
            _ = settings.user_pool_id

        with pytest.raises(ValueError, match='CLIENT_ID'):
            _ = settings.user_pool_client_id

    @patch.dict(os.environ, {'STAGE': 'prod'})
    def test_get_resource_name(self):
        """Test resource name generation with and without suffix."""
        from src.shared.settings import Settings

        settings = Settings()

        assert settings.get_resource_name('lambda') == 'prod-lambda'
        assert settings.get_resource_name('table', 'pending') == 'prod-table-pending'

    @patch.dict(os.environ, {'STAGE': 'dev', 'REGION': 'us-west-2'}, clear=True)
    def test_settings_repr(self):
        """Test string representation of Settings."""
        from src.shared.settings import Settings

        repr_str = repr(Settings())

        assert "stage='dev'" in repr_str
        assert "region='us-west-2'" in repr_str
        assert "pending_table='dev-phone-auth-pending-registrations'" in repr_str
