"""
Small helpers around the Kubernetes python client.

Provides:
- Conversion of plain manifests into typed ``V1*`` models
- Read calls that map 404 to None
- Idempotent delete and create-or-patch calls
- Deep merging of pod template manifests
"""

import copy
import json
import logging
from typing import Any, Callable, Dict, List, Optional

from kubernetes import client
from kubernetes.client.rest import ApiException

logger = logging.getLogger(__name__)


class _ManifestPayload:
    """Adapter letting ``ApiClient.deserialize`` read an in-memory manifest."""

    def __init__(self, manifest: Dict[str, Any]):
        self.data = json.dumps(manifest)


def to_model(manifest: Optional[Dict[str, Any]], model_type: str) -> Any:
    """
    Convert a camelCase manifest dict into a typed Kubernetes model.

    Args:
        manifest: Manifest as it would appear in YAML, or None
        model_type: Model class name, e.g. "V1Pod"

    Returns:
        The deserialized model, or None if ``manifest`` is None
    """
    if manifest is None:
        return None
    return client.ApiClient().deserialize(_ManifestPayload(manifest), model_type)


def read_or_none(read: Callable[..., Any], name: str, namespace: str) -> Any:
    """Call a ``read_namespaced_*`` function, returning None on 404."""
    try:
        return read(name=name, namespace=namespace)
    except ApiException as e:
        if e.status == 404:
            return None
        raise


def delete_ignoring_missing(
    delete: Callable[..., Any],
    name: str,
    namespace: str,
    propagation_policy: str = "Foreground",
) -> bool:
    """
    Call a ``delete_namespaced_*`` function tolerating an already deleted target.

    Returns:
        True if the object was deleted, False if it did not exist
    """
    try:
        delete(
            name=name,
            namespace=namespace,
            body=client.V1DeleteOptions(propagation_policy=propagation_policy),
        )
        return True
    except ApiException as e:
        if e.status == 404:
            logger.debug(f"{name} in namespace {namespace} already deleted")
            return False
        raise


def create_or_patch(
    create: Callable[..., Any],
    patch: Callable[..., Any],
    name: str,
    namespace: str,
    body: Any,
) -> Any:
    """Create an object, patching the existing one if it already exists."""
    try:
        return create(namespace=namespace, body=body)
    except ApiException as e:
        if e.status != 409:  # Already exists
            raise
    logger.info(f"{name} already exists in namespace {namespace}, patching")
    return patch(name=name, namespace=namespace, body=body)


def merge_manifests(base: Optional[Dict[str, Any]], override: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Deep merge two manifests, ``override`` winning on conflicts.

    Nested dicts are merged recursively. Lists whose items all carry a
    ``name`` (containers, volumes, env) are merged item by item on that
    name; any other list is replaced.
    """
    if base is None:
        return copy.deepcopy(override)
    if override is None:
        return copy.deepcopy(base)

    merged = copy.deepcopy(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_manifests(current, value)
        elif _named_items(current) and _named_items(value):
            merged[key] = _merge_named_lists(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _named_items(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(item, dict) and "name" in item for item in value
    )


def _merge_named_lists(base: List[Dict[str, Any]], override: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    merged = {item["name"]: copy.deepcopy(item) for item in base}
    for item in override:
        merged[item["name"]] = merge_manifests(merged.get(item["name"]), item)
    return list(merged.values())
