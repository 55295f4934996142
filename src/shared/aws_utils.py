"""
Common utility functions for AWS services
"""
from typing import Any, Optional

import boto3
from botocore.config import Config


def get_boto_client(
    service_name: str,
    region_name: Optional[str] = None,
    config: Optional[Config] = None,
) -> Any:
    """
    Get a boto3 client for a specific AWS service

    Args:
        service_name (str): Name of the AWS service (e.g. 'sns', 'cognito-idp')
        region_name (Optional[str]): AWS region name. If None, uses the default region.
        config (Optional[Config]): botocore client configuration (retries, timeouts)

    Returns:
        Any: boto3 client for the specified service
    """
    kwargs = {}
    if region_name:
        kwargs['region_name'] = region_name
    if config:
        kwargs['config'] = config
    return boto3.client(service_name, **kwargs)


def get_boto_resource(service_name: str, region_name: Optional[str] = None) -> Any:
    """
    Get a boto3 resource for a specific AWS service

    Args:
        service_name (str): Name of the AWS service (e.g. 's3', 'dynamodb')
        region_name (Optional[str]): AWS region name. If None, uses the default region.

    Returns:
        Any: boto3 resource for the specified service
    """
    if region_name:
        return boto3.resource(service_name, region_name=region_name)
    return boto3.resource(service_name)


def retry_config(max_attempts: int) -> Config:
    """Client config capping a call at max_attempts requests, the first one included."""
    return Config(retries={'total_max_attempts': max_attempts, 'mode': 'standard'})


def get_error_code(error: Exception) -> str:
    """Return the AWS error code carried by a botocore ClientError, or ''."""
    response = getattr(error, 'response', None) or {}
    return response.get('Error', {}).get('Code', '')
