"""Utility modules for the standalone Flink Kubernetes core."""

from flink_standalone.utils.kube import (
    create_or_patch,
    delete_ignoring_missing,
    merge_manifests,
    read_or_none,
    to_model,
)
from flink_standalone.utils.naming import (
    get_external_service_name,
    get_internal_service_name,
    get_job_manager_selectors,
    get_job_manager_stateful_set_name,
    get_task_manager_selectors,
    get_task_manager_stateful_set_name,
    to_label_selector,
)

__all__ = [
    "create_or_patch",
    "delete_ignoring_missing",
    "merge_manifests",
    "read_or_none",
    "to_model",
    "get_external_service_name",
    "get_internal_service_name",
    "get_job_manager_selectors",
    "get_job_manager_stateful_set_name",
    "get_task_manager_selectors",
    "get_task_manager_stateful_set_name",
    "to_label_selector",
]
