"""Per-namespace reconciliation of image-pull secrets.

This module provides the NamespaceReconciler class, which makes a single
namespace hold the current secret and have its default service account
reference it.
"""

from icecream import ic
from kubernetes import client

from registry_creds import console
from registry_creds.cluster import DEFAULT_SERVICE_ACCOUNT, Cluster
from registry_creds.secrets.references import upsert_reference


class NamespaceReconciler:
    """Converges one namespace onto a freshly materialized secret.

    Any StoreError raised by the cluster aborts the remaining steps for
    the namespace and propagates to the caller.

    Attributes:
        cluster: Store the namespace's objects are read from and written to.

    """

    def __init__(self, cluster: Cluster) -> None:
        self.cluster: Cluster = cluster

    def reconcile(self, namespace: str, secret: client.V1Secret) -> None:
        """Create or replace the secret and reference it from the default service account.

        Args:
            namespace: Namespace to reconcile.
            secret: The secret to write; its metadata name is the reference name.

        Raises:
            StoreError: If any cluster call fails.

        """
        self.sync_secret(namespace, secret)
        self.sync_service_account(namespace, secret.metadata.name)

    def sync_secret(self, namespace: str, secret: client.V1Secret) -> None:
        """Create the secret if missing, otherwise replace its data and type."""
        name = secret.metadata.name
        if self.cluster.get_secret(namespace, name) is None:
            self.cluster.create_secret(namespace, secret)
            console.step(f"Created secret {console.highlight(f'{namespace}/{name}')}")
        else:
            self.cluster.replace_secret(namespace, secret)
            console.step(f"Updated secret {console.highlight(f'{namespace}/{name}')}")

    def sync_service_account(self, namespace: str, secret_name: str) -> None:
        """Ensure the default service account references the secret exactly once."""
        service_account = self.cluster.get_service_account(namespace, DEFAULT_SERVICE_ACCOUNT)
        service_account.image_pull_secrets = upsert_reference(service_account.image_pull_secrets, secret_name)
        ic(namespace, service_account.image_pull_secrets)
        self.cluster.replace_service_account(namespace, service_account)
