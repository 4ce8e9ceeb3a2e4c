"""Pydantic schemas for FlinkDeployment resources."""

from .flink import (
    FlinkDeployment,
    FlinkDeploymentSpec,
    FlinkDeploymentStatus,
    JobManagerSpec,
    JobSpec,
    JobStatus,
    Resource,
    ResourceMetadata,
    TaskManagerSpec,
)

__all__ = [
    'FlinkDeployment',
    'FlinkDeploymentSpec',
    'FlinkDeploymentStatus',
    'JobManagerSpec',
    'JobSpec',
    'JobStatus',
    'Resource',
    'ResourceMetadata',
    'TaskManagerSpec',
]
