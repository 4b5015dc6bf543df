"""Custom exceptions for registry-creds.

This module defines the exception hierarchy used throughout the controller.
Errors are raised with the originating message and propagate up to the
reconciliation loop, which aborts the current run on the first one.
"""


class RegistryCredsError(Exception):
    """Base exception for all registry-creds errors.

    All custom exceptions in this package inherit from this class,
    allowing callers to catch every failure of a reconciliation run
    with a single except clause.
    """

    pass


class ProviderError(RegistryCredsError):
    """Raised when a registry token cannot be fetched or validated.

    This can occur when:
    - The remote token service call fails
    - The token service returns no authorization data
    - The OAuth2 token is expired or not a Bearer token
    """

    pass


class StoreError(RegistryCredsError):
    """Raised when a Kubernetes API call fails.

    Covers every get, list, create and replace call made against
    namespaces, secrets and service accounts.
    """

    pass


class ClusterConnectionError(RegistryCredsError):
    """Raised when the Kubernetes client cannot be configured.

    This can occur when:
    - The in-cluster service account environment is missing
    - The kubeconfig is invalid or missing
    """

    pass
