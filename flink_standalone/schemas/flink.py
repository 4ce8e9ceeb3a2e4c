"""Pydantic schemas for the declarative FlinkDeployment resource."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from flink_standalone.models.enums import (
    JobDesiredState,
    JobManagerDeploymentStatus,
    KubernetesDeploymentMode,
    UpgradeMode,
)


def _camel(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part.title() for part in tail)


class _ResourceModel(BaseModel):
    """Base model accepting both snake_case and camelCase field names."""

    model_config = ConfigDict(alias_generator=_camel, populate_by_name=True)


class ResourceMetadata(_ResourceModel):
    """Identity of a FlinkDeployment resource."""

    name: str = Field(..., min_length=1, description="Cluster id")
    namespace: str = Field("default", min_length=1, description="Namespace")
    uid: Optional[str] = Field(None, description="Resource UID")
    generation: Optional[int] = Field(None, description="Resource generation")
    labels: Dict[str, str] = Field(default_factory=dict, description="Resource labels")
    annotations: Dict[str, str] = Field(
        default_factory=dict, description="Resource annotations"
    )


class Resource(_ResourceModel):
    """CPU and memory for a Flink process."""

    cpu: Optional[float] = Field(None, gt=0, description="CPU cores")
    memory: Optional[str] = Field(None, description="Process memory, e.g. 2048m")


class JobManagerSpec(_ResourceModel):
    """Job manager role settings."""

    resource: Resource = Field(default_factory=Resource)
    replicas: int = Field(1, ge=1, description="Number of job manager replicas")
    pod_template: Optional[Dict[str, Any]] = Field(
        None, description="Role specific pod template"
    )


class TaskManagerSpec(_ResourceModel):
    """Task manager role settings."""

    resource: Resource = Field(default_factory=Resource)
    replicas: Optional[int] = Field(
        None, ge=1, description="Fixed task manager count, derived from parallelism when unset"
    )
    pod_template: Optional[Dict[str, Any]] = Field(
        None, description="Role specific pod template"
    )


class JobSpec(_ResourceModel):
    """Job descriptor for application clusters."""

    jar_uri: Optional[str] = Field(None, alias="jarURI", description="Job jar location")
    parallelism: int = Field(1, ge=1, description="Desired job parallelism")
    entry_class: Optional[str] = Field(None, description="Main class")
    args: List[str] = Field(default_factory=list, description="Program arguments")
    state: JobDesiredState = Field(JobDesiredState.RUNNING)
    upgrade_mode: UpgradeMode = Field(UpgradeMode.STATELESS)
    allow_non_restored_state: Optional[bool] = Field(None)
    initial_savepoint_path: Optional[str] = Field(None)


class FlinkDeploymentSpec(_ResourceModel):
    """Desired state of a Flink cluster."""

    image: Optional[str] = Field(None, description="Flink container image")
    image_pull_policy: Optional[str] = Field(None, description="Image pull policy")
    flink_version: Optional[str] = Field(None, description="Flink version, e.g. v1_18")
    flink_configuration: Dict[str, str] = Field(
        default_factory=dict, description="Flink configuration overrides"
    )
    service_account: Optional[str] = Field(None, description="Service account")
    mode: KubernetesDeploymentMode = Field(KubernetesDeploymentMode.STANDALONE)
    job_manager: JobManagerSpec = Field(default_factory=JobManagerSpec)
    task_manager: TaskManagerSpec = Field(default_factory=TaskManagerSpec)
    job: Optional[JobSpec] = Field(None, description="Job for application clusters")
    pod_template: Optional[Dict[str, Any]] = Field(
        None, description="Pod template shared by all roles"
    )


class JobStatus(_ResourceModel):
    """Last observed job state."""

    state: Optional[str] = None
    job_id: Optional[str] = None
    job_name: Optional[str] = None


class FlinkDeploymentStatus(_ResourceModel):
    """Observed state of a Flink cluster."""

    job_manager_deployment_status: JobManagerDeploymentStatus = Field(
        JobManagerDeploymentStatus.MISSING
    )
    job_status: JobStatus = Field(default_factory=JobStatus)
    error: Optional[str] = None


class FlinkDeployment(_ResourceModel):
    """A FlinkDeployment custom resource."""

    metadata: ResourceMetadata
    spec: FlinkDeploymentSpec = Field(default_factory=FlinkDeploymentSpec)
    status: FlinkDeploymentStatus = Field(default_factory=FlinkDeploymentStatus)
