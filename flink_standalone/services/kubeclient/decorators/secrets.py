"""Decorators exposing user secrets to the main container."""

from kubernetes import client

from flink_standalone.exceptions import ConfigurationError
from flink_standalone.models import options
from flink_standalone.services.kubeclient.decorators.base import (
    StepDecorator,
    add_env,
    add_volume_mounts,
    add_volumes,
    existing_volume_names,
)
from flink_standalone.services.kubeclient.decorators.mounts import RESERVED_VOLUME_NAMES
from flink_standalone.services.kubeclient.pod import FlinkPod

SECRET_VOLUME_SUFFIX = "-volume"


class EnvSecretsDecorator(StepDecorator):
    """Set environment variables from secret keys (``kubernetes.env.secretKeyRef``)."""

    def decorate_pod(self, pod: FlinkPod) -> FlinkPod:
        env_vars = [
            client.V1EnvVar(
                name=ref["env"],
                value_from=client.V1EnvVarSource(
                    secret_key_ref=client.V1SecretKeySelector(
                        name=ref["secret"], key=ref["key"]
                    )
                ),
            )
            for ref in self.parameters.env_secret_key_refs
        ]
        if env_vars:
            add_env(pod.main_container, env_vars)
        return pod


class MountSecretsDecorator(StepDecorator):
    """
    Mount user secrets into the main container (``kubernetes.secrets``).

    Each secret ``name:path`` becomes a volume ``<name>-volume`` mounted at
    ``path``. A volume name already present in the pod, or reserved for
    the configuration mounts of later steps, is a configuration error.
    """

    def decorate_pod(self, pod: FlinkPod) -> FlinkPod:
        secrets = self.parameters.secrets
        if not secrets:
            return pod

        taken = existing_volume_names(pod)
        volumes = []
        mounts = []
        for secret_name, mount_path in sorted(secrets.items()):
            volume_name = f"{secret_name}{SECRET_VOLUME_SUFFIX}"
            if volume_name in RESERVED_VOLUME_NAMES or volume_name in taken:
                raise ConfigurationError(
                    f"Volume {volume_name} for secret {secret_name} conflicts with "
                    f"a reserved or existing volume name",
                    key=options.KUBERNETES_SECRETS.key,
                    cluster_id=self.parameters.cluster_id,
                )
            taken.add(volume_name)
            volumes.append(
                client.V1Volume(
                    name=volume_name,
                    secret=client.V1SecretVolumeSource(secret_name=secret_name),
                )
            )
            mounts.append(client.V1VolumeMount(name=volume_name, mount_path=mount_path))

        add_volumes(
            pod, volumes,
            key=options.KUBERNETES_SECRETS.key,
            cluster_id=self.parameters.cluster_id,
        )
        add_volume_mounts(pod.main_container, mounts)
        return pod
