from kubernetes import client

from flink_standalone.exceptions import (
    ConfigurationError,
    DeploymentFailedException,
    FlinkDeploymentException,
)


class TestExceptions:
    """Tests for structured exception fields and messages."""

    def test_configuration_error_str(self):
        error = ConfigurationError("Bad value", key="rest.port", cluster_id="c1")

        assert error.key == "rest.port"
        assert str(error) == "Bad value | Key: rest.port | Cluster: c1"
        assert str(ConfigurationError("Bad value")) == "Bad value"

    def test_from_stateful_set_condition(self):
        condition = client.V1StatefulSetCondition(
            type="ReplicaFailure",
            status="True",
            reason="FailedCreate",
            message="exceeded quota",
        )

        error = DeploymentFailedException.from_condition(condition)

        assert isinstance(error, FlinkDeploymentException)
        assert error.message == "exceeded quota"
        assert error.reason == "FailedCreate"
        assert str(error) == "exceeded quota | Reason: FailedCreate"

    def test_from_container_waiting(self):
        waiting = client.V1ContainerStateWaiting(
            reason="ImagePullBackOff",
            message="Back-off pulling image flink:missing",
        )

        error = DeploymentFailedException.from_container_waiting(waiting)

        assert error.reason == "ImagePullBackOff"
        assert error.message == "Back-off pulling image flink:missing"

    def test_missing_message(self):
        waiting = client.V1ContainerStateWaiting(reason="CrashLoopBackOff")

        error = DeploymentFailedException.from_container_waiting(waiting)

        assert error.message == ""
        assert str(error) == " | Reason: CrashLoopBackOff"
