"""Flink Standalone Enumeration Types"""

from enum import Enum


class SchedulerExecutionMode(Enum):
    """Scheduler modes accepted by the scheduler-mode option"""
    REACTIVE = "REACTIVE"


class KubernetesDeploymentMode(Enum):
    """How the cluster processes are launched on Kubernetes"""
    NATIVE = "native"
    STANDALONE = "standalone"


class StandaloneClusterMode(Enum):
    """Standalone cluster flavour"""
    SESSION = "SESSION"
    APPLICATION = "APPLICATION"


class ServiceExposedType(Enum):
    """Rest service exposure types"""
    CLUSTER_IP = "ClusterIP"
    NODE_PORT = "NodePort"
    LOAD_BALANCER = "LoadBalancer"
    HEADLESS_CLUSTER_IP = "Headless_ClusterIP"


class JobManagerDeploymentStatus(Enum):
    """Observed state of the job manager workload"""
    READY = "READY"
    DEPLOYED_NOT_READY = "DEPLOYED_NOT_READY"
    DEPLOYING = "DEPLOYING"
    MISSING = "MISSING"
    ERROR = "ERROR"


class JobState(Enum):
    """Flink job states"""
    CREATED = "CREATED"
    RUNNING = "RUNNING"
    FAILING = "FAILING"
    FAILED = "FAILED"
    CANCELLING = "CANCELLING"
    CANCELED = "CANCELED"
    FINISHED = "FINISHED"
    RESTARTING = "RESTARTING"
    SUSPENDED = "SUSPENDED"
    RECONCILING = "RECONCILING"

    @property
    def is_globally_terminal(self) -> bool:
        return self in (JobState.FAILED, JobState.CANCELED, JobState.FINISHED)


class UpgradeMode(Enum):
    """Job upgrade strategies"""
    STATELESS = "stateless"
    SAVEPOINT = "savepoint"
    LAST_STATE = "last-state"


class JobDesiredState(Enum):
    """Desired job state declared on the resource"""
    RUNNING = "running"
    SUSPENDED = "suspended"
