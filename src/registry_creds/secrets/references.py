"""Service account image-pull-secret reference handling."""

from collections.abc import Iterable
from typing import Any

from kubernetes import client


def _reference_name(reference: Any) -> str | None:
    # The API returns V1LocalObjectReference, but bodies built by hand use dicts
    if isinstance(reference, dict):
        return reference.get("name")
    return reference.name


def upsert_reference(references: Iterable[Any] | None, name: str) -> list[Any]:
    """Ensure exactly one image-pull-secret reference with the given name.

    The first existing reference with that name is replaced in place and
    any later duplicates are dropped. Without a match a new reference is
    appended. Every other reference is kept verbatim and in order.

    Args:
        references: The service account's current image pull secrets.
        name: The secret name that must be referenced.

    Returns:
        A new list of references; the input is not modified.

    """
    updated: list[Any] = []
    found = False

    for reference in references or []:
        if _reference_name(reference) != name:
            updated.append(reference)
        elif not found:
            updated.append(client.V1LocalObjectReference(name=name))
            found = True

    if not found:
        updated.append(client.V1LocalObjectReference(name=name))

    return updated
