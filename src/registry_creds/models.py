"""Data models for registry-creds.

This module provides the typed records passed between the token providers,
the secret materializer and the reconciliation loop.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from registry_creds.providers import TokenProvider


class CredentialFormat(str, Enum):
    """Supported registry credential file formats.

    The value is the Kubernetes secret type tag for the format.
    """

    LEGACY_DOCKERCFG = "kubernetes.io/dockercfg"
    DOCKER_CONFIG_JSON = "kubernetes.io/dockerconfigjson"

    @property
    def data_key(self) -> str:
        """The key under which the credential file is stored in the secret."""
        match self:
            case CredentialFormat.LEGACY_DOCKERCFG:
                return ".dockercfg"
            case CredentialFormat.DOCKER_CONFIG_JSON:
                return ".dockerconfigjson"


@dataclass(frozen=True, slots=True)
class AuthToken:
    """A registry bearer token and the endpoint it authenticates against.

    Attributes:
        access_token: The raw token string.
        endpoint: The registry URL the token is valid for.

    """

    access_token: str = field(repr=False)
    endpoint: str


@dataclass(frozen=True, slots=True)
class SecretGenerator:
    """How to produce one image-pull secret.

    Attributes:
        token_provider: Source of fresh tokens for this registry.
        credential_format: Credential file format written into the secret.
        secret_name: Name of the secret in every namespace.

    """

    token_provider: TokenProvider
    credential_format: CredentialFormat
    secret_name: str


@dataclass(frozen=True, slots=True)
class Settings:
    """Controller configuration, built once at startup.

    Attributes:
        use_cluster_service: Use in-cluster config instead of a kubeconfig.
        kubecfg_file: Path to the kubeconfig when not running in-cluster.
        kube_master_url: API server URL overriding the one from the kubeconfig.
        aws_secret_name: Name of the ECR image-pull secret.
        gcr_secret_name: Name of the GCR image-pull secret.
        default_namespace: Default namespace (not used by reconciliation).
        gcr_url: Registry endpoint written into the GCR secret.
        aws_account_id: ECR registry id passed to the token request.
        aws_region: AWS region of the ECR registry.
        refresh_minutes: Minutes between reconciliation runs.

    """

    use_cluster_service: bool = True
    kubecfg_file: str = ""
    kube_master_url: str = ""
    aws_secret_name: str = "awsecr-cred"
    gcr_secret_name: str = "gcr-secret"
    default_namespace: str = "default"
    gcr_url: str = "https://gcr.io"
    aws_account_id: str = ""
    aws_region: str = "us-east-1"
    refresh_minutes: int = 60

    @property
    def refresh_seconds(self) -> int:
        """The refresh interval in seconds."""
        return self.refresh_minutes * 60
