"""
Exceptions raised while composing and managing standalone Flink clusters.

Kubernetes client failures are not wrapped here: ``ApiException`` from the
``kubernetes`` package reaches the caller unchanged so the reconciliation
loop can apply its own retry policy.
"""

from typing import Any, Optional


class ConfigurationError(Exception):
    """
    Raised when a Flink configuration value or a decorator precondition
    is invalid.

    Attributes:
        message: Error message
        key: Configuration key involved, if any
        cluster_id: Cluster ID if applicable
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        cluster_id: Optional[str] = None
    ):
        self.message = message
        self.key = key
        self.cluster_id = cluster_id
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.key:
            parts.append(f"Key: {self.key}")
        if self.cluster_id:
            parts.append(f"Cluster: {self.cluster_id}")
        return " | ".join(parts)


class FlinkDeploymentException(Exception):
    """
    Base exception for Flink deployment failures reported back on the
    custom resource status.

    Attributes:
        message: Human readable failure message
        reason: Short machine readable reason
    """

    def __init__(self, message: Optional[str], reason: Optional[str] = None):
        self.message = message or ""
        self.reason = reason
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.reason:
            parts.append(f"Reason: {self.reason}")
        return " | ".join(parts)


class DeploymentFailedException(FlinkDeploymentException):
    """Signals a terminal deployment failure that will not heal on its own."""

    @classmethod
    def from_condition(cls, condition: Any) -> "DeploymentFailedException":
        """
        Build from a workload condition (StatefulSet or Deployment condition).

        Args:
            condition: Object exposing ``message`` and ``reason``

        Returns:
            DeploymentFailedException carrying the condition's message and reason
        """
        return cls(condition.message, condition.reason)

    @classmethod
    def from_container_waiting(cls, waiting: Any) -> "DeploymentFailedException":
        """
        Build from a container's waiting state (``V1ContainerStateWaiting``).

        Args:
            waiting: Object exposing ``message`` and ``reason``

        Returns:
            DeploymentFailedException carrying the waiting state's message and reason
        """
        return cls(waiting.message, waiting.reason)
