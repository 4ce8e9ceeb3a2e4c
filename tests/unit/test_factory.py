import pytest
from kubernetes import client

from flink_standalone.exceptions import ConfigurationError
from flink_standalone.models import options
from flink_standalone.services.kubeclient.decorators import (
    InitJobManagerDecorator,
    MountSecretsDecorator,
)
from flink_standalone.services.kubeclient.factory import (
    STANDALONE_JOB_MANAGER_DECORATORS,
    build_job_manager_specification,
    build_task_manager_specification,
    compose,
)
from flink_standalone.services.kubeclient.parameters import (
    JobManagerParameters,
    TaskManagerParameters,
)
from flink_standalone.services.kubeclient.pod import MAIN_CONTAINER_NAME, FlinkPod
from tests.conftest import CLUSTER_ID, NAMESPACE


def _template_with_sidecar():
    return FlinkPod.from_pod(client.V1Pod(
        metadata=client.V1ObjectMeta(labels={"team": "data"}),
        spec=client.V1PodSpec(containers=[
            client.V1Container(name="log-shipper", image="fluent-bit:2"),
            client.V1Container(
                name=MAIN_CONTAINER_NAME,
                env=[client.V1EnvVar(name="USER_VAR", value="1")],
            ),
        ]),
    ))


class TestCompose:
    """Tests for the decorator composition pipeline."""

    def test_empty_decorator_list_is_identity(self, flink_config):
        pod = _template_with_sidecar()

        composed, resources = compose(pod, [])

        assert composed == pod
        assert composed is not pod
        assert resources == []

    def test_resources_in_decorator_order(self, flink_config):
        params = JobManagerParameters(flink_config)
        decorators = [decorator(params) for decorator in STANDALONE_JOB_MANAGER_DECORATORS]

        _, resources = compose(FlinkPod(), decorators)

        assert [(r.kind, r.metadata.name) for r in resources] == [
            ("Service", CLUSTER_ID),
            ("Service", f"{CLUSTER_ID}-rest"),
            ("ConfigMap", f"flink-config-{CLUSTER_ID}"),
        ]

    def test_input_pod_not_mutated(self, flink_config):
        pod = _template_with_sidecar()
        before = pod.copy()

        compose(pod, [InitJobManagerDecorator(JobManagerParameters(flink_config))])

        assert pod == before

    def test_failure_aborts_composition(self, flink_config):
        flink_config.set(options.KUBERNETES_SECRETS, {"creds": "/opt/creds"})
        pod = FlinkPod(client.V1Pod(spec=client.V1PodSpec(
            containers=[], volumes=[client.V1Volume(name="creds-volume")]
        )))
        params = JobManagerParameters(flink_config)

        with pytest.raises(ConfigurationError):
            compose(pod, [InitJobManagerDecorator(params), MountSecretsDecorator(params)])

        assert pod.main_container.image is None


class TestJobManagerSpecification:
    """Tests for the job manager StatefulSet and its accompanying resources."""

    def test_secret_named_like_flink_conf_volume(self, flink_config):
        flink_config.set(options.KUBERNETES_SECRETS, {"flink-config": "/opt/secret"})

        with pytest.raises(ConfigurationError):
            build_job_manager_specification(None, None, JobManagerParameters(flink_config))

    def test_template_volume_named_like_flink_conf_volume(self, flink_config):
        template = FlinkPod.from_pod(client.V1Pod(spec=client.V1PodSpec(
            containers=[],
            volumes=[client.V1Volume(
                name="flink-config-volume", empty_dir=client.V1EmptyDirVolumeSource()
            )],
        )))

        with pytest.raises(ConfigurationError):
            build_job_manager_specification(template, None, JobManagerParameters(flink_config))

    def test_stateful_set(self, flink_config):
        spec = build_job_manager_specification(None, None, JobManagerParameters(flink_config))

        stateful_set = spec.stateful_set
        assert stateful_set.api_version == "apps/v1"
        assert stateful_set.kind == "StatefulSet"
        assert stateful_set.metadata.name == CLUSTER_ID
        assert stateful_set.metadata.namespace == NAMESPACE
        assert stateful_set.spec.service_name == CLUSTER_ID
        assert stateful_set.spec.replicas == 1
        assert stateful_set.spec.volume_claim_templates is None

    def test_selector_matches_pod_labels(self, flink_config):
        spec = build_job_manager_specification(
            _template_with_sidecar(), None, JobManagerParameters(flink_config)
        )

        template = spec.stateful_set.spec.template
        selector = spec.stateful_set.spec.selector.match_labels
        assert selector.items() <= template.metadata.labels.items()
        assert template.metadata.labels["team"] == "data"

    def test_exactly_one_main_container(self, flink_config):
        spec = build_job_manager_specification(
            _template_with_sidecar(), None, JobManagerParameters(flink_config)
        )

        containers = spec.stateful_set.spec.template.spec.containers
        assert [c.name for c in containers] == [MAIN_CONTAINER_NAME, "log-shipper"]
        main = containers[0]
        assert main.image == "flink:1.18"
        assert main.args == ["jobmanager"]
        assert "USER_VAR" in {env.name for env in main.env}

    @pytest.mark.parametrize("claims", [None, []])
    def test_volume_claims_omitted_when_empty(self, flink_config, claims):
        spec = build_job_manager_specification(None, claims, JobManagerParameters(flink_config))

        assert spec.stateful_set.spec.volume_claim_templates is None

    def test_volume_claims(self, flink_config):
        claim = client.V1PersistentVolumeClaim(metadata=client.V1ObjectMeta(name="data"))

        spec = build_job_manager_specification(None, [claim], JobManagerParameters(flink_config))

        assert spec.stateful_set.spec.volume_claim_templates == [claim]
        assert spec.stateful_set.spec.volume_claim_templates[0] is not claim

    def test_deterministic(self, flink_config):
        params = JobManagerParameters(flink_config)

        first = build_job_manager_specification(_template_with_sidecar(), None, params)
        second = build_job_manager_specification(_template_with_sidecar(), None, params)

        assert first == second

    def test_accompanying_resources(self, flink_config):
        spec = build_job_manager_specification(None, None, JobManagerParameters(flink_config))

        assert isinstance(spec.accompanying_resources, tuple)
        assert [r.metadata.name for r in spec.accompanying_resources] == [
            CLUSTER_ID,
            f"{CLUSTER_ID}-rest",
            f"flink-config-{CLUSTER_ID}",
        ]

    def test_owner_references(self, flink_config):
        flink_config.set(
            options.JOB_MANAGER_OWNER_REFERENCE,
            "apiVersion:flink.apache.org/v1beta1,kind:FlinkDeployment,"
            "name:test-cluster,uid:1234,controller:true",
        )

        spec = build_job_manager_specification(None, None, JobManagerParameters(flink_config))

        [reference] = spec.stateful_set.metadata.owner_references
        assert reference.kind == "FlinkDeployment"
        assert reference.uid == "1234"
        assert reference.controller is True
        assert reference.block_owner_deletion is False

    def test_owner_reference_requires_uid(self, flink_config):
        flink_config.set(
            options.JOB_MANAGER_OWNER_REFERENCE,
            "apiVersion:flink.apache.org/v1beta1,kind:FlinkDeployment,name:test-cluster",
        )

        with pytest.raises(ConfigurationError):
            build_job_manager_specification(None, None, JobManagerParameters(flink_config))

    def test_invalid_replicas_produce_nothing(self, flink_config):
        flink_config.set(options.JOB_MANAGER_REPLICAS, 2)

        with pytest.raises(ConfigurationError):
            build_job_manager_specification(None, None, JobManagerParameters(flink_config))


class TestTaskManagerSpecification:
    """Tests for the task manager StatefulSet."""

    def test_stateful_set(self, flink_config):
        flink_config.set(options.DEFAULT_PARALLELISM, 4)
        flink_config.set(options.NUM_TASK_SLOTS, 2)

        spec = build_task_manager_specification(None, None, TaskManagerParameters(flink_config))

        stateful_set = spec.stateful_set
        assert stateful_set.metadata.name == f"{CLUSTER_ID}-taskmanager"
        assert stateful_set.spec.service_name == CLUSTER_ID
        assert stateful_set.spec.replicas == 2
        assert stateful_set.spec.selector.match_labels["component"] == "taskmanager"
        main = stateful_set.spec.template.spec.containers[0]
        assert main.args == ["taskmanager"]
        assert main.volume_mounts[0].mount_path == "/opt/flink/conf"
