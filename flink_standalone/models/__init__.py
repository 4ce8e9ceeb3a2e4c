"""Configuration model and enumerations for standalone Flink clusters."""

from .configuration import ConfigOption, FlinkConfiguration
from .enums import (
    JobDesiredState,
    JobManagerDeploymentStatus,
    JobState,
    KubernetesDeploymentMode,
    SchedulerExecutionMode,
    ServiceExposedType,
    StandaloneClusterMode,
    UpgradeMode,
)

__all__ = [
    'ConfigOption',
    'FlinkConfiguration',
    'JobDesiredState',
    'JobManagerDeploymentStatus',
    'JobState',
    'KubernetesDeploymentMode',
    'SchedulerExecutionMode',
    'ServiceExposedType',
    'StandaloneClusterMode',
    'UpgradeMode',
]
