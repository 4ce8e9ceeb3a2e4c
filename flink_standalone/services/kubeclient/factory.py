"""
Factories composing the Kubernetes resources of a standalone Flink cluster.

The job manager is built by running a fixed, ordered chain of step
decorators over a pod template and wrapping the result in a StatefulSet.
The accompanying resources (services, config maps, secrets) are collected
in decorator order.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, Type

from kubernetes import client

from flink_standalone.exceptions import ConfigurationError
from flink_standalone.models import options
from flink_standalone.services.kubeclient.decorators import (
    CmdStandaloneJobManagerDecorator,
    CmdStandaloneTaskManagerDecorator,
    EnvSecretsDecorator,
    ExternalServiceDecorator,
    FlinkConfMountDecorator,
    HadoopConfMountDecorator,
    InitJobManagerDecorator,
    InitTaskManagerDecorator,
    InternalServiceDecorator,
    KerberosMountDecorator,
    MountSecretsDecorator,
    StepDecorator,
    UserLibMountDecorator,
)
from flink_standalone.services.kubeclient.parameters import (
    JobManagerParameters,
    KubernetesParameters,
    TaskManagerParameters,
)
from flink_standalone.services.kubeclient.pod import FlinkPod
from flink_standalone.utils import naming

logger = logging.getLogger(__name__)

APPS_API_VERSION = "apps/v1"
OWNER_REFERENCE_REQUIRED_KEYS = ("apiVersion", "kind", "name", "uid")

STANDALONE_JOB_MANAGER_DECORATORS: Tuple[Type[StepDecorator], ...] = (
    InitJobManagerDecorator,
    EnvSecretsDecorator,
    MountSecretsDecorator,
    CmdStandaloneJobManagerDecorator,
    InternalServiceDecorator,
    ExternalServiceDecorator,
    HadoopConfMountDecorator,
    KerberosMountDecorator,
    FlinkConfMountDecorator,
    UserLibMountDecorator,
)

STANDALONE_TASK_MANAGER_DECORATORS: Tuple[Type[StepDecorator], ...] = (
    InitTaskManagerDecorator,
    EnvSecretsDecorator,
    MountSecretsDecorator,
    CmdStandaloneTaskManagerDecorator,
    HadoopConfMountDecorator,
    KerberosMountDecorator,
    FlinkConfMountDecorator,
    UserLibMountDecorator,
)


@dataclass(frozen=True)
class JobManagerSpecification:
    """The job manager StatefulSet and the resources applied next to it."""
    stateful_set: client.V1StatefulSet
    accompanying_resources: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class TaskManagerSpecification:
    """The task manager StatefulSet."""
    stateful_set: client.V1StatefulSet


def compose(
    pod: FlinkPod,
    decorators: Sequence[StepDecorator]
) -> Tuple[FlinkPod, List[Any]]:
    """
    Run ``decorators`` in order over a private copy of ``pod``.

    Args:
        pod: Initial pod; never mutated
        decorators: Ordered step decorators

    Returns:
        Tuple of (composed pod, accompanying resources in decorator order)

    Raises:
        ConfigurationError: If any decorator precondition fails; nothing
            composed so far is returned
    """
    composed = pod.copy()
    resources: List[Any] = []
    for decorator in decorators:
        composed, step_resources = decorator.apply(composed)
        resources.extend(step_resources)
    return composed, resources


def create_stateful_set(
    pod: FlinkPod,
    volume_claims: Optional[List[client.V1PersistentVolumeClaim]],
    parameters: KubernetesParameters,
    name: str,
    owner_references: Optional[List[client.V1OwnerReference]] = None,
) -> client.V1StatefulSet:
    """
    Assemble a StatefulSet from a composed pod.

    The main container is merged into the pod's containers exactly once,
    the selectors are always part of the pod labels, and
    ``volumeClaimTemplates`` is left unset when no claims are given.
    """
    resolved_pod = pod.to_pod()
    pod_labels = dict(resolved_pod.metadata.labels or {})
    pod_labels.update(parameters.selectors)
    resolved_pod.metadata.labels = pod_labels

    spec = client.V1StatefulSetSpec(
        service_name=naming.get_internal_service_name(parameters.cluster_id),
        replicas=parameters.replicas,
        template=client.V1PodTemplateSpec(
            metadata=resolved_pod.metadata,
            spec=resolved_pod.spec,
        ),
        selector=client.V1LabelSelector(match_labels=parameters.selectors),
    )
    if volume_claims:
        spec.volume_claim_templates = copy.deepcopy(list(volume_claims))

    return client.V1StatefulSet(
        api_version=APPS_API_VERSION,
        kind="StatefulSet",
        metadata=client.V1ObjectMeta(
            name=name,
            namespace=parameters.namespace,
            labels=parameters.labels,
            annotations=parameters.annotations or None,
            owner_references=owner_references or None,
        ),
        spec=spec,
    )


def _owner_references(parameters: JobManagerParameters) -> List[client.V1OwnerReference]:
    refs = parameters.owner_references
    for ref in refs:
        missing = [key for key in OWNER_REFERENCE_REQUIRED_KEYS if not ref.get(key)]
        if missing:
            raise ConfigurationError(
                f"Owner reference {ref} is missing {missing}",
                key=options.JOB_MANAGER_OWNER_REFERENCE.key,
                cluster_id=parameters.cluster_id,
            )
    return [
        client.V1OwnerReference(
            api_version=ref.get("apiVersion"),
            kind=ref.get("kind"),
            name=ref.get("name"),
            uid=ref.get("uid"),
            controller=ref.get("controller", "false").lower() == "true",
            block_owner_deletion=ref.get("blockOwnerDeletion", "false").lower() == "true",
        )
        for ref in refs
    ]


def build_job_manager_specification(
    pod_template: Optional[FlinkPod],
    volume_claims: Optional[List[client.V1PersistentVolumeClaim]],
    parameters: JobManagerParameters,
) -> JobManagerSpecification:
    """
    Build every Kubernetes resource of a standalone job manager.

    Args:
        pod_template: User pod template, or None for an empty one
        volume_claims: Persistent volume claim templates, or None
        parameters: Job manager parameters

    Returns:
        JobManagerSpecification with the StatefulSet and accompanying resources

    Raises:
        ConfigurationError: If the configuration violates a decorator precondition
    """
    decorators = [decorator(parameters) for decorator in STANDALONE_JOB_MANAGER_DECORATORS]
    pod, resources = compose(pod_template or FlinkPod(), decorators)

    stateful_set = create_stateful_set(
        pod,
        volume_claims,
        parameters,
        naming.get_job_manager_stateful_set_name(parameters.cluster_id),
        owner_references=_owner_references(parameters),
    )
    logger.debug(
        f"Built job manager specification for {parameters.cluster_id} "
        f"with {len(resources)} accompanying resources"
    )
    return JobManagerSpecification(stateful_set, tuple(resources))


def build_task_manager_specification(
    pod_template: Optional[FlinkPod],
    volume_claims: Optional[List[client.V1PersistentVolumeClaim]],
    parameters: TaskManagerParameters,
) -> TaskManagerSpecification:
    """
    Build the task manager StatefulSet of a standalone cluster.

    Accompanying resources of the task manager decorators are the same
    objects the job manager side creates, so they are discarded here.
    """
    decorators = [decorator(parameters) for decorator in STANDALONE_TASK_MANAGER_DECORATORS]
    pod, _ = compose(pod_template or FlinkPod(), decorators)

    stateful_set = create_stateful_set(
        pod,
        volume_claims,
        parameters,
        naming.get_task_manager_stateful_set_name(parameters.cluster_id),
    )
    return TaskManagerSpecification(stateful_set)
