"""Shared fixtures: in-memory Kubernetes API fakes and Flink configurations."""

import copy
import uuid
from typing import Any, Dict, List, Optional, Tuple

import pytest
from kubernetes import client
from kubernetes.client.rest import ApiException

from flink_standalone.config import TestingConfig
from flink_standalone.models.configuration import FlinkConfiguration
from flink_standalone.services.standalone import StandaloneFlinkService

CLUSTER_ID = "test-cluster"
NAMESPACE = "flink-test"


def _matches(labels: Optional[Dict[str, str]], label_selector: Optional[str]) -> bool:
    if not label_selector:
        return True
    wanted = dict(term.split("=", 1) for term in label_selector.split(","))
    labels = labels or {}
    return all(labels.get(key) == value for key, value in wanted.items())


class _ObjectStore:
    """Namespaced objects keyed by name, raising real ApiExceptions."""

    def __init__(self):
        self.objects: Dict[Tuple[str, str], Any] = {}

    def create(self, namespace: str, body: Any) -> Any:
        stored = copy.deepcopy(body)
        key = (namespace, stored.metadata.name)
        if key in self.objects:
            raise ApiException(status=409, reason="AlreadyExists")
        stored.metadata.namespace = namespace
        stored.metadata.uid = stored.metadata.uid or str(uuid.uuid4())
        self.objects[key] = stored
        return copy.deepcopy(stored)

    def patch(self, name: str, namespace: str, body: Any) -> Any:
        current = self.read(name, namespace)
        stored = copy.deepcopy(body)
        stored.metadata.namespace = namespace
        stored.metadata.uid = current.metadata.uid
        self.objects[(namespace, name)] = stored
        return copy.deepcopy(stored)

    def read(self, name: str, namespace: str) -> Any:
        try:
            return copy.deepcopy(self.objects[(namespace, name)])
        except KeyError:
            raise ApiException(status=404, reason="NotFound")

    def delete(self, name: str, namespace: str) -> None:
        if self.objects.pop((namespace, name), None) is None:
            raise ApiException(status=404, reason="NotFound")

    def names(self, namespace: str) -> List[str]:
        return sorted(name for ns, name in self.objects if ns == namespace)

    def select(self, namespace: str, label_selector: Optional[str]) -> List[Any]:
        return [
            obj for (ns, _), obj in sorted(self.objects.items())
            if ns == namespace and _matches(obj.metadata.labels, label_selector)
        ]


class FakeAppsV1Api:
    """The StatefulSet subset of ``client.AppsV1Api``."""

    def __init__(self):
        self.stateful_sets = _ObjectStore()
        self.deleted: List[Tuple[str, Optional[str]]] = []
        self.scale_calls: List[Tuple[str, int]] = []

    def create_namespaced_stateful_set(self, namespace, body, **kwargs):
        return self.stateful_sets.create(namespace, body)

    def patch_namespaced_stateful_set(self, name, namespace, body, **kwargs):
        return self.stateful_sets.patch(name, namespace, body)

    def read_namespaced_stateful_set(self, name, namespace, **kwargs):
        return self.stateful_sets.read(name, namespace)

    def delete_namespaced_stateful_set(self, name, namespace, body=None, **kwargs):
        self.stateful_sets.delete(name, namespace)
        self.deleted.append((name, body.propagation_policy if body else None))

    def patch_namespaced_stateful_set_scale(self, name, namespace, body, **kwargs):
        stateful_set = self.stateful_sets.objects.get((namespace, name))
        if stateful_set is None:
            raise ApiException(status=404, reason="NotFound")
        replicas = body["spec"]["replicas"]
        stateful_set.spec.replicas = replicas
        self.scale_calls.append((name, replicas))


class FakeCoreV1Api:
    """The Service, ConfigMap, Secret and Pod subset of ``client.CoreV1Api``."""

    def __init__(self):
        self.services = _ObjectStore()
        self.config_maps = _ObjectStore()
        self.secrets = _ObjectStore()
        self.pods = _ObjectStore()

    def create_namespaced_service(self, namespace, body, **kwargs):
        return self.services.create(namespace, body)

    def patch_namespaced_service(self, name, namespace, body, **kwargs):
        return self.services.patch(name, namespace, body)

    def create_namespaced_config_map(self, namespace, body, **kwargs):
        return self.config_maps.create(namespace, body)

    def patch_namespaced_config_map(self, name, namespace, body, **kwargs):
        return self.config_maps.patch(name, namespace, body)

    def delete_collection_namespaced_config_map(self, namespace, label_selector=None, **kwargs):
        for config_map in self.config_maps.select(namespace, label_selector):
            self.config_maps.delete(config_map.metadata.name, namespace)

    def create_namespaced_secret(self, namespace, body, **kwargs):
        return self.secrets.create(namespace, body)

    def patch_namespaced_secret(self, name, namespace, body, **kwargs):
        return self.secrets.patch(name, namespace, body)

    def list_namespaced_pod(self, namespace, label_selector=None, **kwargs):
        return client.V1PodList(items=self.pods.select(namespace, label_selector))


def make_stateful_set(name: str, replicas: Optional[int] = None) -> client.V1StatefulSet:
    """Bare StatefulSet as created out-of-band by a test."""
    return client.V1StatefulSet(
        metadata=client.V1ObjectMeta(name=name),
        spec=client.V1StatefulSetSpec(
            replicas=replicas,
            selector=client.V1LabelSelector(),
            template=client.V1PodTemplateSpec(),
        ),
    )


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep local Hadoop and Flink conf dirs of the host out of the tests."""
    monkeypatch.delenv("HADOOP_CONF_DIR", raising=False)
    monkeypatch.delenv("FLINK_CONF_DIR", raising=False)


@pytest.fixture
def flink_config():
    """Minimal effective configuration of a session cluster."""
    return FlinkConfiguration({
        "kubernetes.cluster-id": CLUSTER_ID,
        "kubernetes.namespace": NAMESPACE,
    })


@pytest.fixture
def apps_api():
    return FakeAppsV1Api()


@pytest.fixture
def core_api():
    return FakeCoreV1Api()


@pytest.fixture
def service(apps_api, core_api):
    """StandaloneFlinkService wired to the in-memory fakes."""
    return StandaloneFlinkService(apps_api, core_api, config=TestingConfig)
