"""
Base step decorator for composing Flink pods and accompanying resources.

A step decorator contributes one slice of configuration: it receives a
pod it owns, returns the decorated pod, and lists any resources (services,
config maps, secrets) that must be applied next to the workload. Decorators
never talk to the Kubernetes API.
"""

from abc import ABC
from typing import Any, Dict, List, Optional, Set, Tuple

from kubernetes import client

from flink_standalone.exceptions import ConfigurationError
from flink_standalone.services.kubeclient.parameters import KubernetesParameters
from flink_standalone.services.kubeclient.pod import FlinkPod


class StepDecorator(ABC):
    """
    Abstract base class for pod decorators.

    Subclasses override ``decorate_pod`` and/or
    ``build_accompanying_resources``; both default to no-ops.
    """

    def __init__(self, parameters: KubernetesParameters):
        """
        Initialize decorator with its role parameters.

        Args:
            parameters: Read-only parameters shared by every step of a pipeline
        """
        self.parameters = parameters

    def decorate_pod(self, pod: FlinkPod) -> FlinkPod:
        """
        Decorate a pod owned exclusively by this call.

        Args:
            pod: Pod to decorate; implementations may mutate it in place

        Returns:
            The decorated pod
        """
        return pod

    def build_accompanying_resources(self) -> List[Any]:
        """
        Build resources to apply alongside the workload.

        Returns:
            List of Kubernetes model objects, in apply order
        """
        return []

    def apply(self, pod: FlinkPod) -> Tuple[FlinkPod, List[Any]]:
        """Decorate a copy of ``pod`` and build this step's resources."""
        decorated = self.decorate_pod(pod.copy())
        return decorated, list(self.build_accompanying_resources())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(cluster_id={self.parameters.cluster_id!r})"


def add_env(container: client.V1Container, env_vars: List[client.V1EnvVar]) -> None:
    """Add env vars to ``container``, replacing existing ones with the same name."""
    names = {env.name for env in env_vars}
    existing = [env for env in container.env or [] if env.name not in names]
    container.env = existing + list(env_vars)


def add_volumes(
    pod: FlinkPod,
    volumes: List[client.V1Volume],
    key: Optional[str] = None,
    cluster_id: Optional[str] = None
) -> None:
    """
    Append volumes to the pod.

    Raises:
        ConfigurationError: If a volume name is already used by the pod
    """
    taken = existing_volume_names(pod)
    for volume in volumes:
        if volume.name in taken:
            raise ConfigurationError(
                f"Volume {volume.name} conflicts with an existing volume of the pod",
                key=key,
                cluster_id=cluster_id,
            )
        taken.add(volume.name)
    pod.spec.volumes = list(pod.spec.volumes or []) + list(volumes)


def add_volume_mounts(
    container: client.V1Container,
    mounts: List[client.V1VolumeMount]
) -> None:
    container.volume_mounts = list(container.volume_mounts or []) + list(mounts)


def existing_volume_names(pod: FlinkPod) -> Set[str]:
    return {volume.name for volume in pod.spec.volumes or []}


def owned_metadata(
    name: str,
    parameters: KubernetesParameters,
    labels: Optional[Dict[str, str]] = None,
    annotations: Optional[Dict[str, str]] = None
) -> client.V1ObjectMeta:
    """Metadata for an accompanying resource of the cluster."""
    merged_labels = dict(parameters.common_labels)
    merged_labels.update(labels or {})
    return client.V1ObjectMeta(
        name=name,
        namespace=parameters.namespace,
        labels=merged_labels,
        annotations=dict(annotations) if annotations else None,
    )
