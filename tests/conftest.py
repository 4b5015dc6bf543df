"""Shared test fixtures for registry-creds tests."""

import base64
import json
from unittest.mock import MagicMock, patch

import pytest
from kubernetes import client
from kubernetes.client.rest import ApiException

from registry_creds.cluster import Cluster
from registry_creds.exceptions import ProviderError
from registry_creds.models import AuthToken, Settings
from registry_creds.providers import TokenProvider


class FakeCoreV1Api:
    """In-memory stand-in for the CoreV1Api calls the controller makes.

    Every call is recorded in ``calls`` as ``(method, namespace, name)``.
    Methods named in ``failures`` raise a 500 ApiException.
    """

    def __init__(self) -> None:
        self.secrets: dict[str, dict[str, client.V1Secret]] = {}
        self.service_accounts: dict[str, dict[str, client.V1ServiceAccount]] = {}
        self.calls: list[tuple[str, str | None, str | None]] = []
        self.failures: set[str] = set()

    def add_namespace(self, namespace: str, image_pull_secrets: list[str] | None = None, *, with_sa: bool = True):
        self.secrets.setdefault(namespace, {})
        self.service_accounts.setdefault(namespace, {})
        if with_sa:
            self.service_accounts[namespace]["default"] = client.V1ServiceAccount(
                metadata=client.V1ObjectMeta(name="default", namespace=namespace),
                image_pull_secrets=[client.V1LocalObjectReference(name=n) for n in image_pull_secrets or []],
            )

    def add_secret(self, namespace: str, secret: client.V1Secret) -> None:
        self.secrets[namespace][secret.metadata.name] = secret

    def pull_secret_names(self, namespace: str) -> list[str]:
        return [ref.name for ref in self.service_accounts[namespace]["default"].image_pull_secrets or []]

    def touched_namespaces(self) -> set[str]:
        return {namespace for _, namespace, _ in self.calls if namespace is not None}

    def writes(self) -> list[tuple[str, str | None, str | None]]:
        return [call for call in self.calls if not call[0].startswith(("read", "list"))]

    def _record(self, method: str, namespace: str | None = None, name: str | None = None) -> None:
        self.calls.append((method, namespace, name))
        if method in self.failures:
            raise ApiException(status=500, reason="Internal Server Error")

    def list_namespace(self):
        self._record("list_namespace")
        return client.V1NamespaceList(
            items=[client.V1Namespace(metadata=client.V1ObjectMeta(name=ns)) for ns in self.secrets]
        )

    def read_namespaced_secret(self, name, namespace):
        self._record("read_namespaced_secret", namespace, name)
        try:
            return self.secrets[namespace][name]
        except KeyError:
            raise ApiException(status=404, reason="Not Found") from None

    def create_namespaced_secret(self, namespace, body):
        self._record("create_namespaced_secret", namespace, body.metadata.name)
        if body.metadata.name in self.secrets[namespace]:
            raise ApiException(status=409, reason="Conflict")
        self.secrets[namespace][body.metadata.name] = body

    def replace_namespaced_secret(self, name, namespace, body):
        self._record("replace_namespaced_secret", namespace, name)
        if name not in self.secrets[namespace]:
            raise ApiException(status=404, reason="Not Found")
        self.secrets[namespace][name] = body

    def read_namespaced_service_account(self, name, namespace):
        self._record("read_namespaced_service_account", namespace, name)
        try:
            return self.service_accounts[namespace][name]
        except KeyError:
            raise ApiException(status=404, reason="Not Found") from None

    def replace_namespaced_service_account(self, name, namespace, body):
        self._record("replace_namespaced_service_account", namespace, name)
        self.service_accounts[namespace][name] = body


class StaticTokenProvider(TokenProvider):
    """Token provider returning a fixed token and counting calls."""

    def __init__(self, access_token: str, endpoint: str) -> None:
        self.token = AuthToken(access_token=access_token, endpoint=endpoint)
        self.calls = 0

    def fetch(self) -> AuthToken:
        self.calls += 1
        return self.token


class FailingTokenProvider(TokenProvider):
    """Token provider that always fails."""

    def __init__(self) -> None:
        self.calls = 0

    def fetch(self) -> AuthToken:
        self.calls += 1
        raise ProviderError("token service unavailable")


def decode_secret(secret: client.V1Secret) -> dict:
    """Decode the single credential file stored in a secret."""
    (payload,) = secret.data.values()
    return json.loads(base64.b64decode(payload))


@pytest.fixture
def fake_api():
    """Empty in-memory CoreV1Api."""
    return FakeCoreV1Api()


@pytest.fixture
def cluster(fake_api):
    """Cluster backed by the in-memory CoreV1Api."""
    return Cluster(api=fake_api)


@pytest.fixture
def settings():
    """Default controller settings with an AWS account set."""
    return Settings(aws_account_id="123456789012")


@pytest.fixture
def gcr_provider():
    """Static GCR-style token provider."""
    return StaticTokenProvider("ya29.gcr-token", "https://gcr.io")


@pytest.fixture
def ecr_provider():
    """Static ECR-style token provider."""
    return StaticTokenProvider("QVdTOmVjci10b2tlbg==", "https://123456789012.dkr.ecr.us-east-1.amazonaws.com")


@pytest.fixture
def mock_core_v1_api():
    """Mock CoreV1Api for namespace listing."""
    with patch("kubernetes.client.CoreV1Api") as mock:
        api_instance = MagicMock()
        mock.return_value = api_instance
        ns_items = []
        for name in ["default", "kube-system", "monitoring"]:
            ns = MagicMock()
            ns.metadata.name = name
            ns_items.append(ns)
        api_instance.list_namespace.return_value.items = ns_items
        yield api_instance
