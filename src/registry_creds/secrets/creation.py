"""Image-pull secret creation.

This module turns a registry token into a Kubernetes secret in one of the
two credential file formats understood by container runtimes.
"""

import base64
import json

from kubernetes import client

from registry_creds.models import CredentialFormat

# Username the registries expect when the password is an access token
_TOKEN_USERNAME = "oauth2accesstoken"
_PLACEHOLDER_EMAIL = "none"


def render_credentials(token: str, endpoint: str, credential_format: CredentialFormat) -> bytes:
    """Render the credential file for a token.

    Args:
        token: The registry token.
        endpoint: The registry URL the token authenticates against.
        credential_format: Which credential file format to produce.

    Returns:
        The credential file as compact UTF-8 JSON.

    """
    match credential_format:
        case CredentialFormat.LEGACY_DOCKERCFG:
            document: dict = {
                endpoint: {"username": _TOKEN_USERNAME, "password": token, "email": _PLACEHOLDER_EMAIL},
            }
        case CredentialFormat.DOCKER_CONFIG_JSON:
            document = {"auths": {endpoint: {"auth": token, "email": _PLACEHOLDER_EMAIL}}}

    return json.dumps(document, separators=(",", ":")).encode()


def materialize_secret(token: str, endpoint: str, credential_format: CredentialFormat, name: str) -> client.V1Secret:
    """Build an image-pull secret for a token.

    The API client expects secret data base64 encoded; the cluster stores
    the decoded credential file.

    Args:
        token: The registry token.
        endpoint: The registry URL the token authenticates against.
        credential_format: Which credential file format to produce.
        name: Name of the secret.

    Returns:
        A V1Secret without a namespace, ready to be created in any namespace.

    """
    payload = render_credentials(token, endpoint, credential_format)

    return client.V1Secret(
        metadata=client.V1ObjectMeta(name=name),
        type=credential_format.value,
        data={credential_format.data_key: base64.b64encode(payload).decode()},
    )
