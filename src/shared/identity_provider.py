"""
Admin access to the Cognito user pool.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from src.shared.aws_utils import get_boto_client, get_error_code
from src.shared.settings import Settings

logger = Logger(service='identity-provider')


@dataclass(frozen=True)
class TokenBundle:
    access_token: str
    refresh_token: str
    id_token: str
    expires_in: int
    token_type: str

    @classmethod
    def from_authentication_result(cls, result: Dict[str, Any]) -> 'TokenBundle':
        return cls(
            access_token=result['AccessToken'],
            refresh_token=result['RefreshToken'],
            id_token=result['IdToken'],
            expires_in=int(result['ExpiresIn']),
            token_type=result['TokenType'],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'accessToken': self.access_token,
            'refreshToken': self.refresh_token,
            'idToken': self.id_token,
            'expiresIn': self.expires_in,
            'tokenType': self.token_type,
        }


class IdentityProviderAdmin:
    """Thin wrapper over the cognito-idp calls used during registration."""

    def __init__(self, cognito_client: Any, user_pool_id: str, client_id: str):
        self.cognito_client = cognito_client
        self.user_pool_id = user_pool_id
        self.client_id = client_id

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None
    ) -> 'IdentityProviderAdmin':
        settings = settings or Settings()
        return cls(
            get_boto_client('cognito-idp', region_name=settings.region),
            user_pool_id=settings.user_pool_id,
            client_id=settings.user_pool_client_id,
        )

    def user_exists(self, username: str) -> bool:
        """
        Check whether a user is registered in the pool.

        Raises:
            ClientError: For any failure other than UserNotFoundException
        """
        try:
            self.cognito_client.admin_get_user(
                UserPoolId=self.user_pool_id, Username=username
            )
        except ClientError as e:
            if get_error_code(e) == 'UserNotFoundException':
                return False
            raise
        return True

    def sign_up(self, phone_number: str, password: str, name: str) -> None:
        self.cognito_client.sign_up(
            ClientId=self.client_id,
            Username=phone_number,
            Password=password,
            UserAttributes=[
                {'Name': 'phone_number', 'Value': phone_number},
                {'Name': 'name', 'Value': name},
            ],
        )

    def confirm_sign_up(self, username: str) -> None:
        self.cognito_client.admin_confirm_sign_up(
            UserPoolId=self.user_pool_id, Username=username
        )

    def mark_phone_number_verified(self, username: str) -> None:
        self.cognito_client.admin_update_user_attributes(
            UserPoolId=self.user_pool_id,
            Username=username,
            UserAttributes=[{'Name': 'phone_number_verified', 'Value': 'true'}],
        )

    def initiate_password_auth(self, username: str, password: str) -> TokenBundle:
        """Sign in with USER_PASSWORD_AUTH and return the issued tokens."""
        result = self.cognito_client.initiate_auth(
            AuthFlow='USER_PASSWORD_AUTH',
            ClientId=self.client_id,
            AuthParameters={'USERNAME': username, 'PASSWORD': password},
        )
        return TokenBundle.from_authentication_result(result['AuthenticationResult'])
