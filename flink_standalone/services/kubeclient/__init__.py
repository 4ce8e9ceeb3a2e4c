"""
Kubernetes resource composition for standalone Flink clusters.

Turns an effective Flink configuration plus an optional pod template into
the StatefulSets, services, config maps and secrets of a cluster.
"""

from .factory import (
    STANDALONE_JOB_MANAGER_DECORATORS,
    STANDALONE_TASK_MANAGER_DECORATORS,
    JobManagerSpecification,
    TaskManagerSpecification,
    build_job_manager_specification,
    build_task_manager_specification,
    compose,
    create_stateful_set,
)
from .parameters import (
    JobManagerParameters,
    KubernetesParameters,
    TaskManagerParameters,
    get_num_task_managers,
)
from .pod import MAIN_CONTAINER_NAME, FlinkPod

__all__ = [
    'STANDALONE_JOB_MANAGER_DECORATORS',
    'STANDALONE_TASK_MANAGER_DECORATORS',
    'JobManagerSpecification',
    'TaskManagerSpecification',
    'build_job_manager_specification',
    'build_task_manager_specification',
    'compose',
    'create_stateful_set',
    'JobManagerParameters',
    'KubernetesParameters',
    'TaskManagerParameters',
    'get_num_task_managers',
    'MAIN_CONTAINER_NAME',
    'FlinkPod',
]
