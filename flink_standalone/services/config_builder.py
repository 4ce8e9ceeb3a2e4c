"""
Builds the effective Flink configuration of a FlinkDeployment.

The operator defaults form the base layer, the user's ``flinkConfiguration``
is applied on top of it, and the structured fields of the spec (image,
resources, replicas, job) win over both.
"""

import logging
from typing import Any, Dict, Optional, Union

from flink_standalone.config import Config
from flink_standalone.models import options
from flink_standalone.models.configuration import FlinkConfiguration
from flink_standalone.models.enums import StandaloneClusterMode
from flink_standalone.schemas.flink import FlinkDeploymentSpec

logger = logging.getLogger(__name__)


class FlinkConfigBuilder:
    """Fold a ``FlinkDeploymentSpec`` onto a base configuration."""

    def __init__(
        self,
        namespace: str,
        cluster_id: str,
        spec: FlinkDeploymentSpec,
        default_conf: Optional[Union[FlinkConfiguration, Dict[str, Any]]] = None
    ):
        self.namespace = namespace
        self.cluster_id = cluster_id
        self.spec = spec
        if isinstance(default_conf, FlinkConfiguration):
            self.effective_config = default_conf.copy()
        elif default_conf is not None:
            self.effective_config = FlinkConfiguration(default_conf)
        else:
            self.effective_config = FlinkConfiguration(Config.DEFAULT_FLINK_CONFIGURATION)
            self.effective_config.set(options.CONTAINER_IMAGE, Config.DEFAULT_FLINK_IMAGE)

    def apply_flink_configuration(self) -> "FlinkConfigBuilder":
        for key, value in self.spec.flink_configuration.items():
            self.effective_config.set(key, value)
        return self

    def apply_cluster_identity(self) -> "FlinkConfigBuilder":
        self.effective_config.set(options.CLUSTER_ID, self.cluster_id)
        self.effective_config.set(options.NAMESPACE, self.namespace)
        return self

    def apply_image(self) -> "FlinkConfigBuilder":
        if self.spec.image:
            self.effective_config.set(options.CONTAINER_IMAGE, self.spec.image)
        if self.spec.image_pull_policy:
            self.effective_config.set(
                options.CONTAINER_IMAGE_PULL_POLICY, self.spec.image_pull_policy
            )
        return self

    def apply_service_account(self) -> "FlinkConfigBuilder":
        if self.spec.service_account:
            self.effective_config.set(options.SERVICE_ACCOUNT, self.spec.service_account)
        return self

    def apply_job_manager_spec(self) -> "FlinkConfigBuilder":
        job_manager = self.spec.job_manager
        if job_manager.resource.cpu is not None:
            self.effective_config.set(options.JOB_MANAGER_CPU, job_manager.resource.cpu)
        if job_manager.resource.memory:
            self.effective_config.set(options.JOB_MANAGER_MEMORY, job_manager.resource.memory)
        self.effective_config.set(options.JOB_MANAGER_REPLICAS, job_manager.replicas)
        return self

    def apply_task_manager_spec(self) -> "FlinkConfigBuilder":
        task_manager = self.spec.task_manager
        if task_manager.resource.cpu is not None:
            self.effective_config.set(options.TASK_MANAGER_CPU, task_manager.resource.cpu)
        if task_manager.resource.memory:
            self.effective_config.set(options.TASK_MANAGER_MEMORY, task_manager.resource.memory)
        if task_manager.replicas is not None:
            self.effective_config.set(options.TASK_MANAGER_REPLICAS, task_manager.replicas)
        return self

    def apply_job_or_session_cluster(self) -> "FlinkConfigBuilder":
        job = self.spec.job
        conf = self.effective_config
        if job is None:
            conf.set(options.CLUSTER_MODE, StandaloneClusterMode.SESSION.value)
            return self

        conf.set(options.CLUSTER_MODE, StandaloneClusterMode.APPLICATION.value)
        conf.set(options.DEFAULT_PARALLELISM, job.parallelism)
        if job.jar_uri:
            conf.set(options.PIPELINE_JARS, [job.jar_uri])
        if job.entry_class:
            conf.set(options.APPLICATION_MAIN_CLASS, job.entry_class)
        else:
            conf.remove(options.APPLICATION_MAIN_CLASS)
        conf.set(options.APPLICATION_ARGS, job.args)
        if job.initial_savepoint_path:
            conf.set(options.SAVEPOINT_PATH, job.initial_savepoint_path)
        if job.allow_non_restored_state is not None:
            conf.set(options.SAVEPOINT_IGNORE_UNCLAIMED_STATE, job.allow_non_restored_state)
        return self

    def build(self) -> FlinkConfiguration:
        logger.debug(
            f"Built effective configuration for {self.cluster_id} "
            f"with {len(self.effective_config)} entries"
        )
        return self.effective_config.copy()

    @classmethod
    def build_from(
        cls,
        namespace: str,
        cluster_id: str,
        spec: FlinkDeploymentSpec,
        default_conf: Optional[Union[FlinkConfiguration, Dict[str, Any]]] = None
    ) -> FlinkConfiguration:
        """
        Build the effective configuration of a deployment.

        Args:
            namespace: Namespace of the FlinkDeployment
            cluster_id: Cluster id (the FlinkDeployment name)
            spec: Desired state of the deployment
            default_conf: Base configuration; operator defaults when None

        Returns:
            A new FlinkConfiguration; ``default_conf`` is not modified
        """
        return (
            cls(namespace, cluster_id, spec, default_conf)
            .apply_flink_configuration()
            .apply_cluster_identity()
            .apply_image()
            .apply_service_account()
            .apply_job_manager_spec()
            .apply_task_manager_spec()
            .apply_job_or_session_cluster()
            .build()
        )
