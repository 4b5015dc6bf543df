"""Registry token providers.

Each provider returns a normalized AuthToken so the reconciliation loop
never needs to know which registry it is talking to. Validation that is
specific to one registry stays inside its provider.
"""

from abc import ABC, abstractmethod
from typing import Any

import boto3
import google.auth
from botocore.exceptions import BotoCoreError, ClientError
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from icecream import ic

from registry_creds.exceptions import ProviderError
from registry_creds.models import AuthToken

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

# Error message constants
_ERR_ECR_CLIENT = "Failed to create ECR client for region '{region}': {reason}"
_ERR_ECR_REQUEST = "ECR authorization token request failed: {reason}"
_ERR_ECR_EMPTY = "ECR returned no authorization data for registry '{account}'"
_ERR_GCR_CREDENTIALS = "Failed to obtain Google credentials: {reason}"
_ERR_GCR_INVALID = "token was invalid"
_ERR_GCR_TOKEN_TYPE = 'expected token type "Bearer" but got "{token_type}"'


class TokenProvider(ABC):
    """Source of short-lived registry credentials."""

    @abstractmethod
    def fetch(self) -> AuthToken:
        """Fetch a fresh token.

        Returns:
            The token and the registry endpoint it is valid for.

        Raises:
            ProviderError: If no valid token could be obtained.

        """


class EcrTokenProvider(TokenProvider):
    """Fetches authorization tokens from AWS Elastic Container Registry.

    Attributes:
        account_id: Registry id the token is requested for.
        region: AWS region of the registry.

    """

    def __init__(self, account_id: str, region: str, ecr_client: Any = None) -> None:
        """Initialize EcrTokenProvider.

        Args:
            account_id: AWS account id owning the registry.
            region: AWS region of the registry.
            ecr_client: boto3 ECR client to use. Created for the region if omitted.

        Raises:
            ProviderError: If the ECR client cannot be created, e.g. for an invalid region.

        """
        self.account_id: str = account_id
        self.region: str = region
        if ecr_client is None:
            try:
                ecr_client = boto3.client("ecr", region_name=region)
            except BotoCoreError as e:
                raise ProviderError(_ERR_ECR_CLIENT.format(region=region, reason=e)) from e
        self._client = ecr_client

    def fetch(self) -> AuthToken:
        try:
            response = self._client.get_authorization_token(registryIds=[self.account_id])
        except (BotoCoreError, ClientError) as e:
            raise ProviderError(_ERR_ECR_REQUEST.format(reason=e)) from e

        authorization_data = response.get("authorizationData") or []
        if not authorization_data:
            raise ProviderError(_ERR_ECR_EMPTY.format(account=self.account_id))

        entry = authorization_data[0]
        ic(entry.get("proxyEndpoint"), entry.get("expiresAt"))

        return AuthToken(access_token=entry["authorizationToken"], endpoint=entry["proxyEndpoint"])

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"EcrTokenProvider(account_id={self.account_id!r}, region={self.region!r})"


class GcrTokenProvider(TokenProvider):
    """Fetches OAuth2 access tokens for Google Container Registry.

    Uses application default credentials. The endpoint is the configured
    registry URL; it is not derived from the token.

    Attributes:
        registry_url: Registry endpoint returned with every token.

    """

    def __init__(self, registry_url: str) -> None:
        self.registry_url: str = registry_url

    def fetch(self) -> AuthToken:
        try:
            credentials, _ = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
            credentials.refresh(Request())
        except GoogleAuthError as e:
            raise ProviderError(_ERR_GCR_CREDENTIALS.format(reason=e)) from e

        if not credentials.valid:
            raise ProviderError(_ERR_GCR_INVALID)

        token_type = _token_type(credentials)
        if token_type != "Bearer":
            raise ProviderError(_ERR_GCR_TOKEN_TYPE.format(token_type=token_type))

        return AuthToken(access_token=credentials.token, endpoint=self.registry_url)

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"GcrTokenProvider(registry_url={self.registry_url!r})"


def _token_type(credentials: Any) -> str:
    """Return the authorization scheme the credentials authenticate with.

    Args:
        credentials: Refreshed google-auth credentials.

    Returns:
        The scheme of the Authorization header the credentials produce.

    """
    headers: dict[str, str] = {}
    credentials.apply(headers)
    scheme, _, _ = headers.get("authorization", "").partition(" ")
    return scheme
