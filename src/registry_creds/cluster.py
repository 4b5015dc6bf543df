"""Kubernetes cluster interaction utilities.

This module provides the Cluster class, a thin wrapper over CoreV1Api
covering the namespace, secret and service account calls the controller
makes. Every client failure surfaces as StoreError.
"""

import os
from typing import Any

from icecream import ic
from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError, MaxRetryError

from registry_creds import console
from registry_creds.exceptions import ClusterConnectionError, StoreError
from registry_creds.models import Settings

DEFAULT_SERVICE_ACCOUNT = "default"


def load_client_config(settings: Settings) -> None:
    """Configure the kubernetes client from the controller settings.

    Args:
        settings: Controller settings selecting in-cluster or kubeconfig mode.

    Raises:
        ClusterConnectionError: If the configuration cannot be loaded.

    """
    try:
        if settings.use_cluster_service:
            config.load_incluster_config()
            console.action("Using in-cluster Kubernetes config")
            return
        config.load_kube_config(config_file=settings.kubecfg_file or None)
        console.action("Using kubeconfig")
    except ConfigException as e:
        raise ClusterConnectionError(f"Failed to create client: {e}") from e

    # The API server override only applies to kubeconfig mode
    if settings.kube_master_url:
        configuration = client.Configuration.get_default_copy()
        configuration.host = os.path.expandvars(settings.kube_master_url)
        client.Configuration.set_default(configuration)
        console.step(f"API server overridden: {console.highlight(configuration.host)}")


def _store_error(action: str, err: Exception) -> StoreError:
    """Create a StoreError for a failed API call.

    Args:
        action: Description of the call that failed.
        err: The client exception.

    Returns:
        A StoreError with the formatted message.

    """
    if isinstance(err, ApiException):
        return StoreError(f"Failed to {action}: {err.status} {err.reason}")
    if isinstance(err, MaxRetryError):
        return StoreError(f"Failed to {action}: {err.reason}")
    return StoreError(f"Failed to {action}: {err}")


class Cluster:
    """Store of namespaces, secrets and service accounts in one cluster.

    Attributes:
        api: The CoreV1Api used for all calls.

    """

    def __init__(self, api: client.CoreV1Api | None = None) -> None:
        """Initialize Cluster.

        Args:
            api: API client to use. Defaults to a CoreV1Api built from the
                 globally loaded client configuration.

        """
        self.api: client.CoreV1Api = api if api is not None else client.CoreV1Api()

    def get_all_namespaces(self) -> list[str]:
        """Get all namespaces in the cluster.

        Returns:
            List of namespace names.

        Raises:
            StoreError: If the namespaces cannot be listed.

        """
        try:
            items = self.api.list_namespace().items
        except (ApiException, HTTPError) as e:
            raise _store_error("list namespaces", e) from e

        ns_list = [ns.metadata.name for ns in items]
        ic(ns_list)

        return ns_list

    def get_secret(self, namespace: str, name: str) -> client.V1Secret | None:
        """Read a secret.

        Args:
            namespace: Namespace of the secret.
            name: Name of the secret.

        Returns:
            The secret, or None if it does not exist.

        Raises:
            StoreError: If the read fails for any reason other than not found.

        """
        try:
            return self.api.read_namespaced_secret(name=name, namespace=namespace)
        except ApiException as e:
            if e.status == 404:
                return None
            raise _store_error(f"read secret {namespace}/{name}", e) from e
        except HTTPError as e:
            raise _store_error(f"read secret {namespace}/{name}", e) from e

    def create_secret(self, namespace: str, secret: client.V1Secret) -> None:
        """Create a secret.

        Args:
            namespace: Namespace to create the secret in.
            secret: The secret body.

        Raises:
            StoreError: If the secret cannot be created.

        """
        try:
            self.api.create_namespaced_secret(namespace=namespace, body=secret)
        except (ApiException, HTTPError) as e:
            raise _store_error(f"create secret {namespace}/{secret.metadata.name}", e) from e

    def replace_secret(self, namespace: str, secret: client.V1Secret) -> None:
        """Replace an existing secret.

        Args:
            namespace: Namespace of the secret.
            secret: The new secret body; its metadata name selects the secret.

        Raises:
            StoreError: If the secret cannot be replaced.

        """
        name = secret.metadata.name
        try:
            self.api.replace_namespaced_secret(name=name, namespace=namespace, body=secret)
        except (ApiException, HTTPError) as e:
            raise _store_error(f"replace secret {namespace}/{name}", e) from e

    def get_service_account(self, namespace: str, name: str = DEFAULT_SERVICE_ACCOUNT) -> Any:
        """Read a service account.

        Args:
            namespace: Namespace of the service account.
            name: Name of the service account.

        Returns:
            The V1ServiceAccount.

        Raises:
            StoreError: If the service account is missing or cannot be read.

        """
        try:
            return self.api.read_namespaced_service_account(name=name, namespace=namespace)
        except (ApiException, HTTPError) as e:
            raise _store_error(f"read service account {namespace}/{name}", e) from e

    def replace_service_account(self, namespace: str, service_account: Any) -> None:
        """Write a service account back.

        Args:
            namespace: Namespace of the service account.
            service_account: The modified V1ServiceAccount as previously read.

        Raises:
            StoreError: If the service account cannot be replaced.

        """
        name = service_account.metadata.name
        try:
            self.api.replace_namespaced_service_account(name=name, namespace=namespace, body=service_account)
        except (ApiException, HTTPError) as e:
            raise _store_error(f"replace service account {namespace}/{name}", e) from e

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"Cluster(host={self.api.api_client.configuration.host!r})"
