"""Entrypoint command and arguments for standalone Flink processes."""

from typing import List

from flink_standalone.services.kubeclient.decorators.base import StepDecorator
from flink_standalone.services.kubeclient.parameters import (
    JobManagerParameters,
    TaskManagerParameters,
)
from flink_standalone.services.kubeclient.pod import FlinkPod

JOB_MANAGER_ENTRYPOINT_ARG = "jobmanager"
TASK_MANAGER_ENTRYPOINT_ARG = "taskmanager"
APPLICATION_MODE_ARG = "standalone-job"

JOB_CLASS_NAME_FLAG = "--job-classname"
FROM_SAVEPOINT_FLAG = "--fromSavepoint"
ALLOW_NON_RESTORED_STATE_FLAG = "--allowNonRestoredState"


class CmdStandaloneJobManagerDecorator(StepDecorator):
    """Start the job manager as a session cluster or a standalone application."""

    parameters: JobManagerParameters

    def decorate_pod(self, pod: FlinkPod) -> FlinkPod:
        params = self.parameters
        pod.main_container.command = [params.entry_path]
        if params.is_application_cluster:
            pod.main_container.args = [APPLICATION_MODE_ARG] + self._application_args()
        else:
            pod.main_container.args = [JOB_MANAGER_ENTRYPOINT_ARG]
        return pod

    def _application_args(self) -> List[str]:
        params = self.parameters
        args: List[str] = []
        if params.main_class:
            args.extend([JOB_CLASS_NAME_FLAG, params.main_class])
        if params.savepoint_path:
            args.extend([FROM_SAVEPOINT_FLAG, params.savepoint_path])
            if params.allow_non_restored_state:
                args.append(ALLOW_NON_RESTORED_STATE_FLAG)
        args.extend(params.program_args)
        return args


class CmdStandaloneTaskManagerDecorator(StepDecorator):
    """Start a standalone task manager."""

    parameters: TaskManagerParameters

    def decorate_pod(self, pod: FlinkPod) -> FlinkPod:
        pod.main_container.command = [self.parameters.entry_path]
        pod.main_container.args = [TASK_MANAGER_ENTRYPOINT_ARG]
        return pod
