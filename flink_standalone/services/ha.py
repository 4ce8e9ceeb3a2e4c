"""High availability metadata of Flink clusters running Kubernetes HA services."""

import logging
from abc import ABC, abstractmethod

from kubernetes import client
from kubernetes.client.rest import ApiException

from flink_standalone.utils import naming

logger = logging.getLogger(__name__)


class HaMetadataStore(ABC):
    """Removes the leader election and checkpoint pointer data of a cluster."""

    @abstractmethod
    def delete_ha_data(self, namespace: str, cluster_id: str) -> None:
        """
        Delete all HA metadata of a cluster.

        Args:
            namespace: Namespace of the cluster
            cluster_id: Cluster identifier
        """
        pass


class KubernetesHaMetadataStore(HaMetadataStore):
    """HA metadata kept in ConfigMaps labelled by Flink's Kubernetes HA services."""

    def __init__(self, core_api: client.CoreV1Api):
        self.core_api = core_api

    def delete_ha_data(self, namespace: str, cluster_id: str) -> None:
        label_selector = naming.to_label_selector(
            naming.get_high_availability_config_map_labels(cluster_id)
        )
        try:
            self.core_api.delete_collection_namespaced_config_map(
                namespace=namespace,
                label_selector=label_selector,
            )
            logger.info(f"Deleted HA metadata of {cluster_id} in namespace {namespace}")
        except ApiException as e:
            if e.status != 404:
                raise
            logger.warning(f"No HA metadata found for {cluster_id} in namespace {namespace}")
