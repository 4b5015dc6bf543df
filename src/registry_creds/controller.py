"""Reconciliation loop.

This module provides the Controller class which, on a fixed interval,
fetches a token from each registry, materializes the image-pull secret
and reconciles it into every namespace of the cluster.
"""

import time
from collections.abc import Callable

from icecream import ic

from registry_creds import console
from registry_creds.cluster import Cluster
from registry_creds.exceptions import RegistryCredsError
from registry_creds.models import CredentialFormat, SecretGenerator, Settings
from registry_creds.providers import TokenProvider
from registry_creds.reconciler import NamespaceReconciler
from registry_creds.secrets.creation import materialize_secret

# Namespaces that never receive image-pull secrets
EXCLUDED_NAMESPACES = frozenset({"kube-system"})


class Controller:
    """Keeps registry image-pull secrets fresh in every namespace.

    A run processes the GCR secret first and the ECR secret second. The
    first error of any kind aborts the whole run; nothing is retried.

    Attributes:
        settings: Immutable controller configuration.
        cluster: Store for namespaces, secrets and service accounts.
        gcr_provider: Token source for the GCR secret.
        ecr_provider: Token source for the ECR secret.
        reconciler: Per-namespace reconciler bound to the cluster.

    """

    def __init__(
        self,
        settings: Settings,
        cluster: Cluster,
        *,
        gcr_provider: TokenProvider,
        ecr_provider: TokenProvider,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize Controller.

        Args:
            settings: Immutable controller configuration.
            cluster: Store for namespaces, secrets and service accounts.
            gcr_provider: Token source for the GCR secret.
            ecr_provider: Token source for the ECR secret.
            sleep: Function used to wait between runs.
            clock: Monotonic clock the run schedule is measured with.

        """
        self.settings: Settings = settings
        self.cluster: Cluster = cluster
        self.gcr_provider: TokenProvider = gcr_provider
        self.ecr_provider: TokenProvider = ecr_provider
        self.reconciler: NamespaceReconciler = NamespaceReconciler(cluster)
        self._sleep = sleep
        self._clock = clock

    def secret_generators(self) -> list[SecretGenerator]:
        """Build the generators for one run, in processing order."""
        return [
            SecretGenerator(
                token_provider=self.gcr_provider,
                credential_format=CredentialFormat.LEGACY_DOCKERCFG,
                secret_name=self.settings.gcr_secret_name,
            ),
            SecretGenerator(
                token_provider=self.ecr_provider,
                credential_format=CredentialFormat.DOCKER_CONFIG_JSON,
                secret_name=self.settings.aws_secret_name,
            ),
        ]

    def run_once(self) -> None:
        """Reconcile every generator's secret into every namespace.

        Raises:
            ProviderError: If a token cannot be fetched.
            StoreError: If any cluster call fails.

        """
        console.action("Processing credentials...")

        for generator in self.secret_generators():
            token = generator.token_provider.fetch()
            secret = materialize_secret(
                token.access_token,
                token.endpoint,
                generator.credential_format,
                generator.secret_name,
            )

            namespaces = self.cluster.get_all_namespaces()
            for namespace in namespaces:
                if namespace in EXCLUDED_NAMESPACES:
                    ic(f"skipping {namespace}")
                    continue
                self.reconciler.reconcile(namespace, secret)

            console.success(f"Finished processing secret for: {console.highlight(generator.secret_name)}")

    def run_forever(self) -> None:
        """Run now, then once per refresh interval until a scheduled run fails.

        Runs start a fixed interval apart, measured from the start of the
        initial run, so the time a run takes does not shift later runs. A
        run that overruns its interval is followed immediately by the next.
        A failure of the initial run is logged and the loop keeps going.

        Raises:
            RegistryCredsError: The error of the first failing scheduled run.

        """
        interval = self.settings.refresh_seconds
        next_run = self._clock()

        try:
            self.run_once()
        except RegistryCredsError as e:
            console.error(f"Initial credential refresh failed: {e}")

        while True:
            now = self._clock()
            next_run = max(next_run + interval, now)
            self._sleep(next_run - now)
            console.action("Refreshing credentials...")
            self.run_once()
