"""
Lifecycle of standalone Flink clusters on Kubernetes.

A standalone cluster is a job manager StatefulSet named ``<clusterId>`` and a
task manager StatefulSet named ``<clusterId>-taskmanager`` plus their
services and config maps. Every call re-reads live state; nothing is cached
between calls.
"""

import copy
import logging
import time
from typing import Any, Callable, Optional, Tuple

from kubernetes import client, config as k8s_config

from flink_standalone.config import get_config
from flink_standalone.models import options
from flink_standalone.models.configuration import FlinkConfiguration
from flink_standalone.models.enums import (
    JobManagerDeploymentStatus,
    JobState,
    SchedulerExecutionMode,
)
from flink_standalone.schemas.flink import (
    FlinkDeployment,
    FlinkDeploymentStatus,
    JobSpec,
    ResourceMetadata,
)
from flink_standalone.services.ha import HaMetadataStore, KubernetesHaMetadataStore
from flink_standalone.services.kubeclient.factory import (
    APPS_API_VERSION,
    build_job_manager_specification,
    build_task_manager_specification,
)
from flink_standalone.services.kubeclient.parameters import (
    JobManagerParameters,
    TaskManagerParameters,
    get_num_task_managers,
)
from flink_standalone.services.kubeclient.pod import FlinkPod
from flink_standalone.utils import kube, naming

logger = logging.getLogger(__name__)


class StandaloneFlinkService:
    """
    Deploys, scales and deletes standalone Flink clusters.

    Supports:
    - Applying the job manager, task manager and accompanying resources
    - Reactive scaling of the task manager StatefulSet
    - Deleting both StatefulSets and, optionally, the HA metadata
    """

    def __init__(
        self,
        apps_api: Optional[client.AppsV1Api] = None,
        core_api: Optional[client.CoreV1Api] = None,
        ha_store: Optional[HaMetadataStore] = None,
        config: Optional[type] = None
    ):
        """Initialize the service.

        Args:
            apps_api: Apps API client; created from the kube config when None
            core_api: Core API client; created from the kube config when None
            ha_store: HA metadata store; ConfigMap based when None
            config: Configuration class, see ``flink_standalone.config``
        """
        self.config = config or get_config()

        if apps_api is None or core_api is None:
            self._load_kube_config()

        self.apps_api = apps_api or client.AppsV1Api()
        self.core_api = core_api or client.CoreV1Api()
        self.ha_store = ha_store or KubernetesHaMetadataStore(self.core_api)

    def _load_kube_config(self) -> None:
        if self.config.IN_CLUSTER:
            k8s_config.load_incluster_config()
        elif self.config.KUBECONFIG_PATH:
            k8s_config.load_kube_config(config_file=self.config.KUBECONFIG_PATH)
        else:
            k8s_config.load_kube_config()

    def deploy_cluster(self, deployment: FlinkDeployment, conf: FlinkConfiguration) -> None:
        """Create or update every Kubernetes resource of a standalone cluster.

        Both specifications are built before the first API call, so a
        configuration error leaves the cluster untouched.

        Args:
            deployment: The FlinkDeployment; its status is updated in place
            conf: Effective Flink configuration of the deployment

        Raises:
            ConfigurationError: If the configuration is invalid
            ApiException: If the Kubernetes API rejects a request
        """
        spec = deployment.spec
        jm_parameters = JobManagerParameters(conf)
        tm_parameters = TaskManagerParameters(conf)
        namespace = jm_parameters.namespace
        cluster_id = jm_parameters.cluster_id

        jm_specification = build_job_manager_specification(
            _pod_template(spec.pod_template, spec.job_manager.pod_template),
            None,
            jm_parameters,
        )
        tm_specification = build_task_manager_specification(
            _pod_template(spec.pod_template, spec.task_manager.pod_template),
            None,
            tm_parameters,
        )

        logger.info(f"Deploying standalone cluster {cluster_id} in namespace {namespace}")
        jm_name = naming.get_job_manager_stateful_set_name(cluster_id)
        job_manager = kube.create_or_patch(
            self.apps_api.create_namespaced_stateful_set,
            self.apps_api.patch_namespaced_stateful_set,
            jm_name,
            namespace,
            jm_specification.stateful_set,
        )

        owner_reference = client.V1OwnerReference(
            api_version=APPS_API_VERSION,
            kind="StatefulSet",
            name=jm_name,
            uid=job_manager.metadata.uid,
            block_owner_deletion=True,
        )
        for resource in jm_specification.accompanying_resources:
            resource = copy.deepcopy(resource)
            resource.metadata.owner_references = [owner_reference]
            create, patch = self._resource_operations(resource)
            kube.create_or_patch(create, patch, resource.metadata.name, namespace, resource)
            logger.info(f"Applied {resource.kind} {resource.metadata.name} for {cluster_id}")

        kube.create_or_patch(
            self.apps_api.create_namespaced_stateful_set,
            self.apps_api.patch_namespaced_stateful_set,
            naming.get_task_manager_stateful_set_name(cluster_id),
            namespace,
            tm_specification.stateful_set,
        )

        deployment.status.job_manager_deployment_status = JobManagerDeploymentStatus.DEPLOYING
        deployment.status.error = None
        logger.info(f"Deployed standalone cluster {cluster_id}")

    def _resource_operations(self, resource: Any) -> Tuple[Callable[..., Any], Callable[..., Any]]:
        if isinstance(resource, client.V1Service):
            return self.core_api.create_namespaced_service, self.core_api.patch_namespaced_service
        if isinstance(resource, client.V1ConfigMap):
            return (
                self.core_api.create_namespaced_config_map,
                self.core_api.patch_namespaced_config_map,
            )
        if isinstance(resource, client.V1Secret):
            return self.core_api.create_namespaced_secret, self.core_api.patch_namespaced_secret
        raise TypeError(f"Unsupported accompanying resource: {type(resource).__name__}")

    def scale(
        self,
        metadata: ResourceMetadata,
        job: Optional[JobSpec],
        conf: FlinkConfiguration
    ) -> bool:
        """Scale the task manager StatefulSet to the job's parallelism.

        Only applies to reactive mode clusters. The task manager count is
        ``ceil(parallelism / taskmanager.numberOfTaskSlots)``.

        Args:
            metadata: Metadata of the FlinkDeployment
            job: Job descriptor holding the desired parallelism
            conf: Effective Flink configuration

        Returns:
            True if the task manager StatefulSet has the desired replica count,
            False if scaling does not apply or the StatefulSet does not exist
        """
        scheduler_mode = conf.get(options.SCHEDULER_MODE)
        if not scheduler_mode or scheduler_mode.upper() != SchedulerExecutionMode.REACTIVE.value:
            logger.debug(f"Scheduler mode of {metadata.name} is not reactive, not scaling")
            return False

        namespace = metadata.namespace
        name = naming.get_task_manager_stateful_set_name(metadata.name)
        stateful_set = kube.read_or_none(self.apps_api.read_namespaced_stateful_set, name, namespace)
        if stateful_set is None:
            logger.warning(f"Task manager StatefulSet {name} not found in namespace {namespace}")
            return False

        parallelism = job.parallelism if job is not None else conf.get(options.DEFAULT_PARALLELISM)
        desired = get_num_task_managers(parallelism, conf.get(options.NUM_TASK_SLOTS))
        current = stateful_set.spec.replicas if stateful_set.spec else None

        if current != desired:
            logger.info(f"Scaling {name} from {current} to {desired} replicas")
            self.apps_api.patch_namespaced_stateful_set_scale(
                name=name,
                namespace=namespace,
                body={"spec": {"replicas": desired}},
            )
        return True

    def delete_cluster_deployment(
        self,
        metadata: ResourceMetadata,
        status: Optional[FlinkDeploymentStatus],
        delete_ha_data: bool
    ) -> None:
        """Delete both StatefulSets of a cluster.

        Missing StatefulSets are ignored, so the call can be retried safely.

        Args:
            metadata: Metadata of the FlinkDeployment
            status: Status to mark as deleted, if any
            delete_ha_data: Also remove the cluster's HA metadata once its
                pods are gone

        Raises:
            ApiException: If the Kubernetes API rejects a request
        """
        namespace = metadata.namespace
        cluster_id = metadata.name

        for name in (
            naming.get_task_manager_stateful_set_name(cluster_id),
            naming.get_job_manager_stateful_set_name(cluster_id),
        ):
            if kube.delete_ignoring_missing(
                self.apps_api.delete_namespaced_stateful_set, name, namespace
            ):
                logger.info(f"Deleted StatefulSet {name} in namespace {namespace}")

        if delete_ha_data:
            if not self._wait_for_cluster_shutdown(namespace, cluster_id):
                logger.warning(
                    f"Pods of {cluster_id} still running after "
                    f"{self.config.CLUSTER_SHUTDOWN_TIMEOUT}s, deleting HA metadata anyway"
                )
            self.ha_store.delete_ha_data(namespace, cluster_id)

        if status is not None:
            _update_status_for_deleted_cluster(status)

    def _wait_for_cluster_shutdown(self, namespace: str, cluster_id: str) -> bool:
        """Poll until no pod of the cluster is left, bounded by the shutdown timeout."""
        label_selector = naming.to_label_selector(naming.get_common_labels(cluster_id))
        deadline = time.monotonic() + self.config.CLUSTER_SHUTDOWN_TIMEOUT
        while True:
            pods = self.core_api.list_namespaced_pod(
                namespace=namespace, label_selector=label_selector
            )
            if not pods.items:
                return True
            if time.monotonic() >= deadline:
                return False
            time.sleep(self.config.CLUSTER_SHUTDOWN_POLL_INTERVAL)


def _pod_template(common: Optional[dict], role: Optional[dict]) -> Optional[FlinkPod]:
    manifest = kube.merge_manifests(common, role)
    if manifest is None:
        return None
    return FlinkPod.from_pod(kube.to_model(manifest, "V1Pod"))


def _update_status_for_deleted_cluster(status: FlinkDeploymentStatus) -> None:
    status.job_manager_deployment_status = JobManagerDeploymentStatus.MISSING
    try:
        terminal = JobState(status.job_status.state).is_globally_terminal
    except ValueError:
        terminal = False
    if not terminal:
        status.job_status.state = JobState.FINISHED.value
