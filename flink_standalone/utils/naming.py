"""
Deterministic names and labels for standalone Flink cluster resources.

Every name is a pure function of the cluster id so that lookups by name
are stable across reconciliation passes.
"""

from typing import Dict

LABEL_TYPE = "type"
LABEL_APP = "app"
LABEL_COMPONENT = "component"
LABEL_CONFIGMAP_TYPE = "configmap-type"

LABEL_TYPE_STANDALONE = "flink-standalone-kubernetes"
LABEL_TYPE_NATIVE = "flink-native-kubernetes"
LABEL_COMPONENT_JOB_MANAGER = "jobmanager"
LABEL_COMPONENT_TASK_MANAGER = "taskmanager"
LABEL_CONFIGMAP_TYPE_HIGH_AVAILABILITY = "high-availability"

TASK_MANAGER_SUFFIX = "-taskmanager"
REST_SERVICE_SUFFIX = "-rest"


def get_job_manager_stateful_set_name(cluster_id: str) -> str:
    return cluster_id


def get_task_manager_stateful_set_name(cluster_id: str) -> str:
    return f"{cluster_id}{TASK_MANAGER_SUFFIX}"


def get_internal_service_name(cluster_id: str) -> str:
    return cluster_id


def get_namespaced_internal_service_name(cluster_id: str, namespace: str) -> str:
    return f"{get_internal_service_name(cluster_id)}.{namespace}"


def get_external_service_name(cluster_id: str) -> str:
    return f"{cluster_id}{REST_SERVICE_SUFFIX}"


def get_flink_conf_config_map_name(cluster_id: str) -> str:
    return f"flink-config-{cluster_id}"


def get_hadoop_conf_config_map_name(cluster_id: str) -> str:
    return f"hadoop-config-{cluster_id}"


def get_kerberos_keytab_secret_name(cluster_id: str) -> str:
    return f"kerberos-keytab-{cluster_id}"


def get_kerberos_krb5_conf_config_map_name(cluster_id: str) -> str:
    return f"kerberos-krb5conf-{cluster_id}"


def get_common_labels(cluster_id: str) -> Dict[str, str]:
    """Labels shared by every resource of a standalone cluster."""
    return {
        LABEL_TYPE: LABEL_TYPE_STANDALONE,
        LABEL_APP: cluster_id,
    }


def get_job_manager_selectors(cluster_id: str) -> Dict[str, str]:
    labels = get_common_labels(cluster_id)
    labels[LABEL_COMPONENT] = LABEL_COMPONENT_JOB_MANAGER
    return labels


def get_task_manager_selectors(cluster_id: str) -> Dict[str, str]:
    labels = get_common_labels(cluster_id)
    labels[LABEL_COMPONENT] = LABEL_COMPONENT_TASK_MANAGER
    return labels


def get_high_availability_config_map_labels(cluster_id: str) -> Dict[str, str]:
    """Labels Flink's Kubernetes HA services put on leader and pointer ConfigMaps."""
    return {
        LABEL_TYPE: LABEL_TYPE_NATIVE,
        LABEL_APP: cluster_id,
        LABEL_CONFIGMAP_TYPE: LABEL_CONFIGMAP_TYPE_HIGH_AVAILABILITY,
    }


def to_label_selector(labels: Dict[str, str]) -> str:
    """Render labels as a Kubernetes equality-based label selector."""
    return ",".join(f"{key}={value}" for key, value in sorted(labels.items()))
