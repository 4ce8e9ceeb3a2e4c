"""
Read-only parameter views used by the pod decorators and workload builders.

Each instance takes a private snapshot of the effective Flink configuration
on construction, so later changes to the caller's configuration object are
never observed by a pipeline that is already running.
"""

import math
import os
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from flink_standalone.exceptions import ConfigurationError
from flink_standalone.models import options
from flink_standalone.models.configuration import FlinkConfiguration
from flink_standalone.models.enums import ServiceExposedType, StandaloneClusterMode
from flink_standalone.utils import naming


class KubernetesParameters(ABC):
    """Settings shared by the job manager and task manager roles."""

    def __init__(self, flink_config: FlinkConfiguration):
        self._flink_config = flink_config.copy()
        if not self._flink_config.get(options.CLUSTER_ID):
            raise ConfigurationError(
                "Cluster id must be set", key=options.CLUSTER_ID.key
            )

    @property
    def flink_configuration(self) -> FlinkConfiguration:
        """A fresh copy of the configuration snapshot."""
        return self._flink_config.copy()

    @property
    def cluster_id(self) -> str:
        return self._flink_config.get(options.CLUSTER_ID)

    @property
    def namespace(self) -> str:
        return self._flink_config.get(options.NAMESPACE)

    @property
    def image(self) -> str:
        return self._flink_config.get(options.CONTAINER_IMAGE)

    @property
    def image_pull_policy(self) -> str:
        return self._flink_config.get(options.CONTAINER_IMAGE_PULL_POLICY)

    @property
    def image_pull_secrets(self) -> List[str]:
        return list(self._flink_config.get(options.CONTAINER_IMAGE_PULL_SECRETS))

    @property
    def secrets(self) -> Dict[str, str]:
        """Secret name to mount path."""
        return dict(self._flink_config.get(options.KUBERNETES_SECRETS))

    @property
    def env_secret_key_refs(self) -> List[Dict[str, str]]:
        refs = self._flink_config.get(options.KUBERNETES_ENV_SECRET_KEY_REF)
        for ref in refs:
            missing = {"env", "secret", "key"} - set(ref)
            if missing:
                raise ConfigurationError(
                    f"Secret key reference {ref} is missing {sorted(missing)}",
                    key=options.KUBERNETES_ENV_SECRET_KEY_REF.key,
                    cluster_id=self.cluster_id,
                )
        return [dict(ref) for ref in refs]

    @property
    def flink_conf_dir(self) -> str:
        return self._flink_config.get(options.FLINK_CONF_DIR)

    @property
    def flink_log_dir(self) -> Optional[str]:
        return self._flink_config.get(options.FLINK_LOG_DIR)

    @property
    def hadoop_config_map_name(self) -> Optional[str]:
        return self._flink_config.get(options.HADOOP_CONF_CONFIG_MAP)

    @property
    def local_hadoop_conf_dir(self) -> Optional[str]:
        return os.getenv("HADOOP_CONF_DIR") or None

    @property
    def kerberos_keytab(self) -> Optional[str]:
        return self._flink_config.get(options.KERBEROS_KEYTAB)

    @property
    def kerberos_principal(self) -> Optional[str]:
        return self._flink_config.get(options.KERBEROS_PRINCIPAL)

    @property
    def kerberos_krb5_conf(self) -> Optional[str]:
        return self._flink_config.get(options.KERBEROS_KRB5_CONF)

    @property
    def entry_path(self) -> str:
        return self._flink_config.get(options.KUBERNETES_ENTRY_PATH)

    @property
    def high_availability_enabled(self) -> bool:
        return str(self._flink_config.get(options.HIGH_AVAILABILITY)).upper() != "NONE"

    @property
    def cluster_mode(self) -> StandaloneClusterMode:
        raw = str(self._flink_config.get(options.CLUSTER_MODE)).upper()
        try:
            return StandaloneClusterMode(raw)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown standalone cluster mode: {raw}",
                key=options.CLUSTER_MODE.key,
                cluster_id=self.cluster_id,
            ) from e

    @property
    def is_application_cluster(self) -> bool:
        return self.cluster_mode == StandaloneClusterMode.APPLICATION

    @property
    def rpc_port(self) -> int:
        return self._flink_config.get(options.RPC_PORT)

    @property
    def blob_server_port(self) -> int:
        return self._flink_config.get(options.BLOB_SERVER_PORT)

    @property
    def rest_port(self) -> int:
        return self._flink_config.get(options.REST_PORT)

    @property
    def job_manager_rpc_address(self) -> str:
        """Address task managers use to reach the job manager."""
        return naming.get_namespaced_internal_service_name(self.cluster_id, self.namespace)

    @property
    def common_labels(self) -> Dict[str, str]:
        return naming.get_common_labels(self.cluster_id)

    @property
    @abstractmethod
    def labels(self) -> Dict[str, str]:
        """Labels for the workload and its pods, always including the selectors."""

    @property
    @abstractmethod
    def selectors(self) -> Dict[str, str]:
        """Labels selecting this role's pods."""

    @property
    @abstractmethod
    def annotations(self) -> Dict[str, str]:
        pass

    @property
    @abstractmethod
    def node_selector(self) -> Dict[str, str]:
        pass

    @property
    @abstractmethod
    def service_account(self) -> str:
        pass

    @property
    @abstractmethod
    def environments(self) -> Dict[str, str]:
        """Custom environment variables for the main container."""

    @property
    @abstractmethod
    def cpu(self) -> float:
        pass

    @property
    @abstractmethod
    def memory(self) -> str:
        pass

    @property
    @abstractmethod
    def replicas(self) -> int:
        pass


class JobManagerParameters(KubernetesParameters):
    """Parameters for the job manager StatefulSet of a standalone cluster."""

    @property
    def labels(self) -> Dict[str, str]:
        labels = dict(self._flink_config.get(options.JOB_MANAGER_LABELS))
        labels.update(self.selectors)
        return labels

    @property
    def selectors(self) -> Dict[str, str]:
        return naming.get_job_manager_selectors(self.cluster_id)

    @property
    def annotations(self) -> Dict[str, str]:
        return dict(self._flink_config.get(options.JOB_MANAGER_ANNOTATIONS))

    @property
    def node_selector(self) -> Dict[str, str]:
        return dict(self._flink_config.get(options.JOB_MANAGER_NODE_SELECTOR))

    @property
    def service_account(self) -> str:
        return self._flink_config.get(options.JOB_MANAGER_SERVICE_ACCOUNT)

    @property
    def environments(self) -> Dict[str, str]:
        return self._flink_config.with_prefix(options.CONTAINERIZED_JOB_MANAGER_ENV_PREFIX)

    @property
    def owner_references(self) -> List[Dict[str, str]]:
        return [dict(ref) for ref in self._flink_config.get(options.JOB_MANAGER_OWNER_REFERENCE)]

    @property
    def cpu(self) -> float:
        return self._flink_config.get(options.JOB_MANAGER_CPU)

    @property
    def memory(self) -> str:
        return self._flink_config.get(options.JOB_MANAGER_MEMORY)

    @property
    def replicas(self) -> int:
        replicas = self._flink_config.get(options.JOB_MANAGER_REPLICAS)
        if replicas < 1:
            raise ConfigurationError(
                "Job manager replicas must be at least 1",
                key=options.JOB_MANAGER_REPLICAS.key,
                cluster_id=self.cluster_id,
            )
        if replicas > 1 and not self.high_availability_enabled:
            raise ConfigurationError(
                "High availability must be enabled for more than one job manager",
                key=options.JOB_MANAGER_REPLICAS.key,
                cluster_id=self.cluster_id,
            )
        return replicas

    @property
    def rest_service_exposed_type(self) -> ServiceExposedType:
        raw = self._flink_config.get(options.REST_SERVICE_EXPOSED_TYPE)
        try:
            return ServiceExposedType(raw)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown rest service exposed type: {raw}",
                key=options.REST_SERVICE_EXPOSED_TYPE.key,
                cluster_id=self.cluster_id,
            ) from e

    @property
    def rest_service_annotations(self) -> Dict[str, str]:
        return dict(self._flink_config.get(options.REST_SERVICE_ANNOTATIONS))

    @property
    def main_class(self) -> Optional[str]:
        return self._flink_config.get(options.APPLICATION_MAIN_CLASS)

    @property
    def program_args(self) -> List[str]:
        return list(self._flink_config.get(options.APPLICATION_ARGS))

    @property
    def savepoint_path(self) -> Optional[str]:
        return self._flink_config.get(options.SAVEPOINT_PATH)

    @property
    def allow_non_restored_state(self) -> bool:
        return self._flink_config.get(options.SAVEPOINT_IGNORE_UNCLAIMED_STATE)


class TaskManagerParameters(KubernetesParameters):
    """Parameters for the task manager StatefulSet of a standalone cluster."""

    @property
    def labels(self) -> Dict[str, str]:
        labels = dict(self._flink_config.get(options.TASK_MANAGER_LABELS))
        labels.update(self.selectors)
        return labels

    @property
    def selectors(self) -> Dict[str, str]:
        return naming.get_task_manager_selectors(self.cluster_id)

    @property
    def annotations(self) -> Dict[str, str]:
        return dict(self._flink_config.get(options.TASK_MANAGER_ANNOTATIONS))

    @property
    def node_selector(self) -> Dict[str, str]:
        return dict(self._flink_config.get(options.TASK_MANAGER_NODE_SELECTOR))

    @property
    def service_account(self) -> str:
        return self._flink_config.get(options.TASK_MANAGER_SERVICE_ACCOUNT)

    @property
    def environments(self) -> Dict[str, str]:
        return self._flink_config.with_prefix(options.CONTAINERIZED_TASK_MANAGER_ENV_PREFIX)

    @property
    def cpu(self) -> float:
        return self._flink_config.get(options.TASK_MANAGER_CPU)

    @property
    def memory(self) -> str:
        return self._flink_config.get(options.TASK_MANAGER_MEMORY)

    @property
    def task_manager_rpc_port(self) -> int:
        return self._flink_config.get(options.TASK_MANAGER_RPC_PORT)

    @property
    def replicas(self) -> int:
        replicas = self._flink_config.get(options.TASK_MANAGER_REPLICAS)
        if replicas is not None:
            return replicas
        return get_num_task_managers(
            self._flink_config.get(options.DEFAULT_PARALLELISM),
            self._flink_config.get(options.NUM_TASK_SLOTS),
        )


def get_num_task_managers(parallelism: int, slots_per_task_manager: int) -> int:
    """
    Task managers needed to run ``parallelism`` slots, rounding up.

    Raises:
        ConfigurationError: If either value is not positive
    """
    if slots_per_task_manager < 1:
        raise ConfigurationError(
            f"Task slots per task manager must be positive, got {slots_per_task_manager}",
            key=options.NUM_TASK_SLOTS.key,
        )
    if parallelism < 1:
        raise ConfigurationError(
            f"Parallelism must be positive, got {parallelism}",
            key=options.DEFAULT_PARALLELISM.key,
        )
    return math.ceil(parallelism / slots_per_task_manager)
