"""Secrets management subpackage.

This package contains modules for building image-pull secrets and for
maintaining the service account references to them.
"""

from registry_creds.secrets.creation import materialize_secret, render_credentials
from registry_creds.secrets.references import upsert_reference

__all__ = [
    # creation
    "materialize_secret",
    "render_credentials",
    # references
    "upsert_reference",
]
