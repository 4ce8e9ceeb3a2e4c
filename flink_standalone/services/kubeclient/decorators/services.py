"""Job manager services: the internal rpc service and the rest service."""

from typing import Any, List

from kubernetes import client

from flink_standalone.models.enums import ServiceExposedType
from flink_standalone.services.kubeclient.decorators.base import StepDecorator, owned_metadata
from flink_standalone.services.kubeclient.decorators.init import (
    BLOB_SERVER_PORT_NAME,
    JOB_MANAGER_RPC_PORT_NAME,
    REST_PORT_NAME,
)
from flink_standalone.services.kubeclient.parameters import JobManagerParameters
from flink_standalone.utils import naming

HEADLESS_CLUSTER_IP = "None"


class InternalServiceDecorator(StepDecorator):
    """
    Headless service giving task managers a stable job manager address.

    Only created without high availability; with HA enabled task managers
    find the leader through the HA services instead.
    """

    parameters: JobManagerParameters

    def build_accompanying_resources(self) -> List[Any]:
        params = self.parameters
        if params.high_availability_enabled:
            return []

        service = client.V1Service(
            api_version="v1",
            kind="Service",
            metadata=owned_metadata(
                naming.get_internal_service_name(params.cluster_id), params
            ),
            spec=client.V1ServiceSpec(
                cluster_ip=HEADLESS_CLUSTER_IP,
                selector=params.selectors,
                ports=[
                    client.V1ServicePort(
                        name=JOB_MANAGER_RPC_PORT_NAME,
                        port=params.rpc_port,
                        target_port=params.rpc_port,
                        protocol="TCP",
                    ),
                    client.V1ServicePort(
                        name=BLOB_SERVER_PORT_NAME,
                        port=params.blob_server_port,
                        target_port=params.blob_server_port,
                        protocol="TCP",
                    ),
                ],
            ),
        )
        return [service]


class ExternalServiceDecorator(StepDecorator):
    """Rest service exposing the job manager web UI and REST API."""

    parameters: JobManagerParameters

    def build_accompanying_resources(self) -> List[Any]:
        params = self.parameters
        exposed_type = params.rest_service_exposed_type

        if exposed_type == ServiceExposedType.HEADLESS_CLUSTER_IP:
            service_type = ServiceExposedType.CLUSTER_IP.value
            cluster_ip = HEADLESS_CLUSTER_IP
        else:
            service_type = exposed_type.value
            cluster_ip = None

        service = client.V1Service(
            api_version="v1",
            kind="Service",
            metadata=owned_metadata(
                naming.get_external_service_name(params.cluster_id),
                params,
                annotations=params.rest_service_annotations,
            ),
            spec=client.V1ServiceSpec(
                type=service_type,
                cluster_ip=cluster_ip,
                selector=params.selectors,
                ports=[
                    client.V1ServicePort(
                        name=REST_PORT_NAME,
                        port=params.rest_port,
                        target_port=params.rest_port,
                        protocol="TCP",
                    ),
                ],
            ),
        )
        return [service]
