"""
Pod template split into the Flink main container and everything else.
"""

import copy
from typing import Optional

from kubernetes import client

MAIN_CONTAINER_NAME = "flink-main-container"


class FlinkPod:
    """
    A pod specification whose main container is held apart from the pod.

    Decorators replace the main container freely; it is only merged back
    into ``spec.containers`` when the final workload is assembled, which
    keeps exactly one main container in the result.
    """

    def __init__(
        self,
        pod_without_main_container: Optional[client.V1Pod] = None,
        main_container: Optional[client.V1Container] = None
    ):
        pod = pod_without_main_container or client.V1Pod()
        if pod.metadata is None:
            pod.metadata = client.V1ObjectMeta()
        if pod.spec is None:
            pod.spec = client.V1PodSpec(containers=[])
        self.pod_without_main_container = pod
        self.main_container = main_container or client.V1Container(name=MAIN_CONTAINER_NAME)

    @classmethod
    def from_pod(cls, pod: Optional[client.V1Pod]) -> "FlinkPod":
        """
        Split a user supplied pod template.

        The container named ``flink-main-container``, if any, becomes the main
        container; all other containers stay in the pod.
        """
        if pod is None:
            return cls()
        pod = copy.deepcopy(pod)
        if pod.spec is None:
            pod.spec = client.V1PodSpec(containers=[])
        main_container = None
        others = []
        for container in pod.spec.containers or []:
            if container.name == MAIN_CONTAINER_NAME and main_container is None:
                main_container = container
            else:
                others.append(container)
        pod.spec.containers = others
        return cls(pod, main_container)

    @property
    def metadata(self) -> client.V1ObjectMeta:
        return self.pod_without_main_container.metadata

    @property
    def spec(self) -> client.V1PodSpec:
        return self.pod_without_main_container.spec

    def copy(self) -> "FlinkPod":
        return FlinkPod(
            copy.deepcopy(self.pod_without_main_container),
            copy.deepcopy(self.main_container),
        )

    def to_pod(self) -> client.V1Pod:
        """Return a new pod with the main container merged into its containers."""
        pod = copy.deepcopy(self.pod_without_main_container)
        others = [c for c in pod.spec.containers or [] if c.name != self.main_container.name]
        pod.spec.containers = [copy.deepcopy(self.main_container)] + others
        return pod

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FlinkPod):
            return NotImplemented
        return (
            self.pod_without_main_container == other.pod_without_main_container
            and self.main_container == other.main_container
        )

    def __repr__(self) -> str:
        return (
            f"FlinkPod(main_container={self.main_container.name!r}, "
            f"pod={self.metadata.name!r})"
        )
