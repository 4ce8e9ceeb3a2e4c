"""
Observation of the job manager workload of a standalone cluster.

Detects failures that will not heal without user action (image pull
errors, crash loops, failed StatefulSet conditions) and reports them as
``DeploymentFailedException``.
"""

import logging
from typing import Optional

from kubernetes import client

from flink_standalone.exceptions import DeploymentFailedException
from flink_standalone.models.enums import JobManagerDeploymentStatus
from flink_standalone.schemas.flink import FlinkDeploymentStatus, ResourceMetadata
from flink_standalone.utils import kube, naming

logger = logging.getLogger(__name__)

CONTAINER_FAILURE_REASONS = frozenset({
    "CrashLoopBackOff",
    "ImagePullBackOff",
    "ErrImagePull",
    "CreateContainerConfigError",
    "InvalidImageName",
})

FAILED_CONDITION_TYPES = frozenset({"ReplicaFailure"})
FAILED_CONDITION_REASONS = frozenset({"ProgressDeadlineExceeded"})


def check_container_backoff(pod: client.V1Pod) -> None:
    """
    Raise if any container of ``pod`` waits for a non-retryable reason.

    Raises:
        DeploymentFailedException: Built from the container's waiting state
    """
    pod_status = pod.status
    if pod_status is None:
        return
    statuses = list(pod_status.init_container_statuses or []) + list(
        pod_status.container_statuses or []
    )
    for container_status in statuses:
        waiting = container_status.state.waiting if container_status.state else None
        if waiting is not None and waiting.reason in CONTAINER_FAILURE_REASONS:
            raise DeploymentFailedException.from_container_waiting(waiting)


def check_stateful_set_conditions(stateful_set: client.V1StatefulSet) -> None:
    """
    Raise if a StatefulSet condition reports a failed rollout.

    Raises:
        DeploymentFailedException: Built from the failing condition
    """
    conditions = stateful_set.status.conditions if stateful_set.status else None
    for condition in conditions or []:
        if condition.status != "True":
            continue
        if condition.type in FAILED_CONDITION_TYPES or condition.reason in FAILED_CONDITION_REASONS:
            raise DeploymentFailedException.from_condition(condition)


def observe_job_manager(
    apps_api: client.AppsV1Api,
    core_api: client.CoreV1Api,
    metadata: ResourceMetadata,
    status: FlinkDeploymentStatus
) -> JobManagerDeploymentStatus:
    """
    Update ``status`` from the live job manager StatefulSet and its pods.

    Args:
        apps_api: Apps API client
        core_api: Core API client
        metadata: Metadata of the FlinkDeployment
        status: Status updated in place

    Returns:
        The observed job manager deployment status

    Raises:
        DeploymentFailedException: If the job manager failed terminally;
            ``status.error`` is set before raising
    """
    namespace = metadata.namespace
    cluster_id = metadata.name
    name = naming.get_job_manager_stateful_set_name(cluster_id)

    stateful_set = kube.read_or_none(apps_api.read_namespaced_stateful_set, name, namespace)
    if stateful_set is None:
        logger.warning(f"Job manager StatefulSet {name} not found in namespace {namespace}")
        status.job_manager_deployment_status = JobManagerDeploymentStatus.MISSING
        return status.job_manager_deployment_status

    pods = core_api.list_namespaced_pod(
        namespace=namespace,
        label_selector=naming.to_label_selector(naming.get_job_manager_selectors(cluster_id)),
    ).items

    try:
        check_stateful_set_conditions(stateful_set)
        for pod in pods:
            check_container_backoff(pod)
    except DeploymentFailedException as e:
        logger.error(f"Job manager of {cluster_id} failed: {e}")
        status.job_manager_deployment_status = JobManagerDeploymentStatus.ERROR
        status.error = str(e)
        raise

    status.job_manager_deployment_status = _deployment_status(stateful_set, len(pods))
    return status.job_manager_deployment_status


def _deployment_status(
    stateful_set: client.V1StatefulSet,
    pod_count: int
) -> JobManagerDeploymentStatus:
    desired: Optional[int] = stateful_set.spec.replicas if stateful_set.spec else None
    ready = (stateful_set.status.ready_replicas if stateful_set.status else None) or 0
    if desired and ready >= desired:
        return JobManagerDeploymentStatus.READY
    if pod_count:
        return JobManagerDeploymentStatus.DEPLOYED_NOT_READY
    return JobManagerDeploymentStatus.DEPLOYING
