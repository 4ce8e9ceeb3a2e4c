"""
Initial decoration of the job manager and task manager pods.

Sets the main container's image, resources, ports and environment, and the
pod's labels, annotations, service account and placement.
"""

import math
import re
from typing import List

from kubernetes import client

from flink_standalone.exceptions import ConfigurationError
from flink_standalone.services.kubeclient.decorators.base import StepDecorator, add_env
from flink_standalone.services.kubeclient.parameters import (
    JobManagerParameters,
    KubernetesParameters,
    TaskManagerParameters,
)
from flink_standalone.services.kubeclient.pod import MAIN_CONTAINER_NAME, FlinkPod

ENV_FLINK_POD_IP_ADDRESS = "_POD_IP_ADDRESS"
POD_IP_FIELD_PATH = "status.podIP"

REST_PORT_NAME = "rest"
JOB_MANAGER_RPC_PORT_NAME = "jobmanager-rpc"
BLOB_SERVER_PORT_NAME = "blobserver"
TASK_MANAGER_RPC_PORT_NAME = "taskmanager-rpc"

_MEMORY_PATTERN = re.compile(r"^\s*(\d+)\s*([a-zA-Z]*)\s*$")
_MEMORY_UNITS = {
    "": 1,
    "b": 1,
    "bytes": 1,
    "k": 1024,
    "kb": 1024,
    "m": 1024 ** 2,
    "mb": 1024 ** 2,
    "g": 1024 ** 3,
    "gb": 1024 ** 3,
    "t": 1024 ** 4,
    "tb": 1024 ** 4,
}


def to_kubernetes_memory(flink_memory: str) -> str:
    """
    Convert a Flink memory size ("1600m", "2g", "1024mb") to a Kubernetes
    quantity in mebibytes, rounded up to a whole mebibyte.

    Raises:
        ConfigurationError: If the size cannot be parsed
    """
    match = _MEMORY_PATTERN.match(str(flink_memory))
    unit = match.group(2).lower() if match else None
    if not match or unit not in _MEMORY_UNITS:
        raise ConfigurationError(f"Invalid memory size: {flink_memory}")
    size_bytes = int(match.group(1)) * _MEMORY_UNITS[unit]
    return f"{math.ceil(size_bytes / 1024 ** 2)}Mi"


class _InitDecorator(StepDecorator):
    """Shared initialization for both Flink roles."""

    parameters: KubernetesParameters

    def _container_ports(self) -> List[client.V1ContainerPort]:
        raise NotImplementedError

    def decorate_pod(self, pod: FlinkPod) -> FlinkPod:
        params = self.parameters
        metadata = pod.metadata
        labels = dict(metadata.labels or {})
        labels.update(params.labels)
        metadata.labels = labels
        annotations = dict(metadata.annotations or {})
        annotations.update(params.annotations)
        metadata.annotations = annotations or None

        spec = pod.spec
        spec.service_account_name = params.service_account
        if params.image_pull_secrets:
            spec.image_pull_secrets = [
                client.V1LocalObjectReference(name=name)
                for name in params.image_pull_secrets
            ]
        node_selector = dict(spec.node_selector or {})
        node_selector.update(params.node_selector)
        spec.node_selector = node_selector or None

        pod.main_container = self._decorate_main_container(pod.main_container)
        return pod

    def _decorate_main_container(self, container: client.V1Container) -> client.V1Container:
        params = self.parameters
        container.name = MAIN_CONTAINER_NAME
        container.image = params.image
        container.image_pull_policy = params.image_pull_policy

        quantities = {
            "cpu": str(params.cpu),
            "memory": to_kubernetes_memory(params.memory),
        }
        container.resources = client.V1ResourceRequirements(
            requests=dict(quantities),
            limits=dict(quantities),
        )

        existing_ports = {port.name for port in container.ports or []}
        container.ports = list(container.ports or []) + [
            port for port in self._container_ports() if port.name not in existing_ports
        ]

        env_vars = [
            client.V1EnvVar(name=name, value=value)
            for name, value in sorted(params.environments.items())
        ]
        env_vars.append(
            client.V1EnvVar(
                name=ENV_FLINK_POD_IP_ADDRESS,
                value_from=client.V1EnvVarSource(
                    field_ref=client.V1ObjectFieldSelector(
                        api_version="v1", field_path=POD_IP_FIELD_PATH
                    )
                ),
            )
        )
        add_env(container, env_vars)
        return container


class InitJobManagerDecorator(_InitDecorator):
    """Initial decoration of the job manager pod."""

    parameters: JobManagerParameters

    def _container_ports(self) -> List[client.V1ContainerPort]:
        params = self.parameters
        return [
            client.V1ContainerPort(
                name=REST_PORT_NAME, container_port=params.rest_port, protocol="TCP"
            ),
            client.V1ContainerPort(
                name=JOB_MANAGER_RPC_PORT_NAME, container_port=params.rpc_port, protocol="TCP"
            ),
            client.V1ContainerPort(
                name=BLOB_SERVER_PORT_NAME,
                container_port=params.blob_server_port,
                protocol="TCP",
            ),
        ]


class InitTaskManagerDecorator(_InitDecorator):
    """Initial decoration of the task manager pod."""

    parameters: TaskManagerParameters

    def _container_ports(self) -> List[client.V1ContainerPort]:
        return [
            client.V1ContainerPort(
                name=TASK_MANAGER_RPC_PORT_NAME,
                container_port=self.parameters.task_manager_rpc_port,
                protocol="TCP",
            ),
        ]
