from unittest.mock import MagicMock

import pytest
from kubernetes.client.rest import ApiException

from flink_standalone.services.ha import KubernetesHaMetadataStore


class TestKubernetesHaMetadataStore:
    """Tests for HA ConfigMap cleanup."""

    def test_deletes_by_ha_labels(self):
        core_api = MagicMock()

        KubernetesHaMetadataStore(core_api).delete_ha_data("flink", "c1")

        core_api.delete_collection_namespaced_config_map.assert_called_once_with(
            namespace="flink",
            label_selector="app=c1,configmap-type=high-availability,type=flink-native-kubernetes",
        )

    def test_missing_data_tolerated(self):
        core_api = MagicMock()
        core_api.delete_collection_namespaced_config_map.side_effect = ApiException(status=404)

        KubernetesHaMetadataStore(core_api).delete_ha_data("flink", "c1")

    def test_other_errors_propagate(self):
        core_api = MagicMock()
        core_api.delete_collection_namespaced_config_map.side_effect = ApiException(status=403)

        with pytest.raises(ApiException):
            KubernetesHaMetadataStore(core_api).delete_ha_data("flink", "c1")
