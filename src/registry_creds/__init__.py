"""registry-creds: keep registry image-pull secrets fresh in Kubernetes.

This package periodically fetches short-lived tokens from AWS ECR and
Google Container Registry, stores them as image-pull secrets in every
namespace and references them from each namespace's default service
account.

Example usage:
    from registry_creds import Cluster, Controller, Settings
    from registry_creds import EcrTokenProvider, GcrTokenProvider

    settings = Settings(aws_account_id="123456789012")
    controller = Controller(
        settings,
        Cluster(),
        gcr_provider=GcrTokenProvider(settings.gcr_url),
        ecr_provider=EcrTokenProvider(settings.aws_account_id, settings.aws_region),
    )
    controller.run_once()
"""

__version__ = "1.0.0"

from registry_creds.cli import cli
from registry_creds.cluster import Cluster
from registry_creds.controller import Controller
from registry_creds.exceptions import (
    ClusterConnectionError,
    ProviderError,
    RegistryCredsError,
    StoreError,
)
from registry_creds.models import AuthToken, CredentialFormat, SecretGenerator, Settings
from registry_creds.providers import EcrTokenProvider, GcrTokenProvider, TokenProvider
from registry_creds.reconciler import NamespaceReconciler

__all__ = [
    # Version
    "__version__",
    # Main CLI
    "cli",
    # Classes
    "Cluster",
    "Controller",
    "NamespaceReconciler",
    "TokenProvider",
    "EcrTokenProvider",
    "GcrTokenProvider",
    # Models
    "AuthToken",
    "CredentialFormat",
    "SecretGenerator",
    "Settings",
    # Exceptions
    "RegistryCredsError",
    "ClusterConnectionError",
    "ProviderError",
    "StoreError",
]
