"""
Decorators mounting configuration files and libraries into the main container.

Includes Hadoop configuration, Kerberos keytab and krb5.conf, the rendered
flink-conf.yaml with local logging files, and the user library directory
of application clusters.
"""

import base64
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from kubernetes import client

from flink_standalone.exceptions import ConfigurationError
from flink_standalone.models import options
from flink_standalone.services.kubeclient.decorators.base import (
    StepDecorator,
    add_env,
    add_volume_mounts,
    add_volumes,
    owned_metadata,
)
from flink_standalone.services.kubeclient.pod import FlinkPod
from flink_standalone.utils import naming

logger = logging.getLogger(__name__)

HADOOP_CONF_VOLUME = "hadoop-config-volume"
HADOOP_CONF_DIR_IN_POD = "/opt/hadoop/conf"
ENV_HADOOP_CONF_DIR = "HADOOP_CONF_DIR"
HADOOP_CONF_FILES = ("core-site.xml", "hdfs-site.xml")

KERBEROS_KEYTAB_VOLUME = "kerberos-keytab-volume"
KERBEROS_KEYTAB_MOUNT_POINT = "/opt/kerberos/kerberos-keytab"
KERBEROS_KRB5CONF_VOLUME = "kerberos-krb5conf-volume"
KERBEROS_KRB5CONF_MOUNT_PATH = "/etc/krb5.conf"

FLINK_CONF_VOLUME = "flink-config-volume"
FLINK_CONF_FILENAME = "flink-conf.yaml"
LOGGING_CONF_FILES = ("log4j-console.properties", "logback-console.xml")

USER_LIB_VOLUME = "user-lib-dir"
USER_LIB_PATH = "/opt/flink/usrlib"

RESERVED_VOLUME_NAMES = frozenset({
    HADOOP_CONF_VOLUME,
    KERBEROS_KEYTAB_VOLUME,
    KERBEROS_KRB5CONF_VOLUME,
    FLINK_CONF_VOLUME,
    USER_LIB_VOLUME,
})


def _read_text(path: str, key: str, cluster_id: str) -> str:
    try:
        return Path(path).read_text()
    except OSError as e:
        raise ConfigurationError(
            f"Could not read {path}: {e}", key=key, cluster_id=cluster_id
        ) from e


def _config_map(name: str, data: Dict[str, str], params) -> client.V1ConfigMap:
    return client.V1ConfigMap(
        api_version="v1",
        kind="ConfigMap",
        metadata=owned_metadata(name, params),
        data=data,
    )


def _config_map_volume(volume_name: str, config_map_name: str, keys: List[str]) -> client.V1Volume:
    return client.V1Volume(
        name=volume_name,
        config_map=client.V1ConfigMapVolumeSource(
            name=config_map_name,
            items=[client.V1KeyToPath(key=key, path=key) for key in keys] or None,
        ),
    )


class HadoopConfMountDecorator(StepDecorator):
    """
    Mount Hadoop configuration.

    Uses the ConfigMap named by ``kubernetes.hadoop.conf.config-map.name``
    when set; otherwise ships core-site.xml and hdfs-site.xml from the local
    ``HADOOP_CONF_DIR`` in a new ConfigMap. Does nothing when neither exists.
    """

    def _local_files(self) -> Dict[str, str]:
        conf_dir = self.parameters.local_hadoop_conf_dir
        if not conf_dir:
            return {}
        files = {}
        for filename in HADOOP_CONF_FILES:
            path = os.path.join(conf_dir, filename)
            if os.path.isfile(path):
                files[filename] = _read_text(path, ENV_HADOOP_CONF_DIR, self.parameters.cluster_id)
        return files

    def _config_map_name(self) -> Optional[str]:
        if self.parameters.hadoop_config_map_name:
            return self.parameters.hadoop_config_map_name
        if self._local_files():
            return naming.get_hadoop_conf_config_map_name(self.parameters.cluster_id)
        return None

    def decorate_pod(self, pod: FlinkPod) -> FlinkPod:
        config_map_name = self._config_map_name()
        if config_map_name is None:
            return pod

        add_volumes(pod, [
            client.V1Volume(
                name=HADOOP_CONF_VOLUME,
                config_map=client.V1ConfigMapVolumeSource(name=config_map_name),
            )
        ], key=options.HADOOP_CONF_CONFIG_MAP.key, cluster_id=self.parameters.cluster_id)
        add_volume_mounts(pod.main_container, [
            client.V1VolumeMount(name=HADOOP_CONF_VOLUME, mount_path=HADOOP_CONF_DIR_IN_POD)
        ])
        add_env(pod.main_container, [
            client.V1EnvVar(name=ENV_HADOOP_CONF_DIR, value=HADOOP_CONF_DIR_IN_POD)
        ])
        return pod

    def build_accompanying_resources(self) -> List[Any]:
        if self.parameters.hadoop_config_map_name:
            return []
        files = self._local_files()
        if not files:
            return []
        name = naming.get_hadoop_conf_config_map_name(self.parameters.cluster_id)
        return [_config_map(name, files, self.parameters)]


class KerberosMountDecorator(StepDecorator):
    """Mount the Kerberos keytab (as a Secret) and krb5.conf (as a ConfigMap)."""

    def _keytab_enabled(self) -> bool:
        return bool(self.parameters.kerberos_keytab and self.parameters.kerberos_principal)

    def decorate_pod(self, pod: FlinkPod) -> FlinkPod:
        params = self.parameters
        if self._keytab_enabled():
            add_volumes(pod, [
                client.V1Volume(
                    name=KERBEROS_KEYTAB_VOLUME,
                    secret=client.V1SecretVolumeSource(
                        secret_name=naming.get_kerberos_keytab_secret_name(params.cluster_id)
                    ),
                )
            ], key=options.KERBEROS_KEYTAB.key, cluster_id=params.cluster_id)
            add_volume_mounts(pod.main_container, [
                client.V1VolumeMount(
                    name=KERBEROS_KEYTAB_VOLUME, mount_path=KERBEROS_KEYTAB_MOUNT_POINT
                )
            ])

        if params.kerberos_krb5_conf:
            filename = os.path.basename(params.kerberos_krb5_conf)
            add_volumes(pod, [
                _config_map_volume(
                    KERBEROS_KRB5CONF_VOLUME,
                    naming.get_kerberos_krb5_conf_config_map_name(params.cluster_id),
                    [filename],
                )
            ], key=options.KERBEROS_KRB5_CONF.key, cluster_id=params.cluster_id)
            add_volume_mounts(pod.main_container, [
                client.V1VolumeMount(
                    name=KERBEROS_KRB5CONF_VOLUME,
                    mount_path=KERBEROS_KRB5CONF_MOUNT_PATH,
                    sub_path=filename,
                )
            ])
        return pod

    def build_accompanying_resources(self) -> List[Any]:
        params = self.parameters
        resources: List[Any] = []
        if self._keytab_enabled():
            keytab = params.kerberos_keytab
            try:
                content = Path(keytab).read_bytes()
            except OSError as e:
                raise ConfigurationError(
                    f"Could not read keytab {keytab}: {e}",
                    key=options.KERBEROS_KEYTAB.key,
                    cluster_id=params.cluster_id,
                ) from e
            resources.append(
                client.V1Secret(
                    api_version="v1",
                    kind="Secret",
                    metadata=owned_metadata(
                        naming.get_kerberos_keytab_secret_name(params.cluster_id), params
                    ),
                    data={os.path.basename(keytab): base64.b64encode(content).decode()},
                    type="Opaque",
                )
            )

        if params.kerberos_krb5_conf:
            krb5_conf = params.kerberos_krb5_conf
            resources.append(
                _config_map(
                    naming.get_kerberos_krb5_conf_config_map_name(params.cluster_id),
                    {
                        os.path.basename(krb5_conf): _read_text(
                            krb5_conf, options.KERBEROS_KRB5_CONF.key, params.cluster_id
                        )
                    },
                    params,
                )
            )
        return resources


class FlinkConfMountDecorator(StepDecorator):
    """
    Render flink-conf.yaml into a ConfigMap and mount it at the conf dir.

    Logging files found in the local ``FLINK_CONF_DIR`` are shipped in the
    same ConfigMap.
    """

    def _flink_conf_content(self) -> str:
        params = self.parameters
        conf = params.flink_configuration
        conf.remove(options.FLINK_CONF_DIR)
        if not params.high_availability_enabled:
            conf.set(options.JOB_MANAGER_RPC_ADDRESS, params.job_manager_rpc_address)
        if params.kerberos_keytab and params.kerberos_principal:
            conf.set(
                options.KERBEROS_KEYTAB,
                f"{KERBEROS_KEYTAB_MOUNT_POINT}/{os.path.basename(params.kerberos_keytab)}",
            )
        values = conf.to_dict()
        return "".join(f"{key}: {values[key]}\n" for key in sorted(values))

    def _logging_files(self) -> Dict[str, str]:
        conf_dir = os.getenv("FLINK_CONF_DIR")
        if not conf_dir:
            return {}
        files = {}
        for filename in LOGGING_CONF_FILES:
            path = os.path.join(conf_dir, filename)
            if os.path.isfile(path):
                files[filename] = _read_text(path, "FLINK_CONF_DIR", self.parameters.cluster_id)
        return files

    def _data(self) -> Dict[str, str]:
        data = self._logging_files()
        data[FLINK_CONF_FILENAME] = self._flink_conf_content()
        return data

    def decorate_pod(self, pod: FlinkPod) -> FlinkPod:
        params = self.parameters
        add_volumes(pod, [
            _config_map_volume(
                FLINK_CONF_VOLUME,
                naming.get_flink_conf_config_map_name(params.cluster_id),
                sorted(self._data()),
            )
        ], key=options.FLINK_CONF_DIR.key, cluster_id=params.cluster_id)
        add_volume_mounts(pod.main_container, [
            client.V1VolumeMount(name=FLINK_CONF_VOLUME, mount_path=params.flink_conf_dir)
        ])
        return pod

    def build_accompanying_resources(self) -> List[Any]:
        name = naming.get_flink_conf_config_map_name(self.parameters.cluster_id)
        return [_config_map(name, self._data(), self.parameters)]


class UserLibMountDecorator(StepDecorator):
    """Provide an empty user library directory for application clusters."""

    def decorate_pod(self, pod: FlinkPod) -> FlinkPod:
        if not self.parameters.is_application_cluster:
            return pod
        mounted = {mount.mount_path for mount in pod.main_container.volume_mounts or []}
        if USER_LIB_PATH in mounted:
            logger.debug(f"{USER_LIB_PATH} already mounted by the pod template")
            return pod

        add_volumes(pod, [
            client.V1Volume(name=USER_LIB_VOLUME, empty_dir=client.V1EmptyDirVolumeSource())
        ], key=options.CLUSTER_MODE.key, cluster_id=self.parameters.cluster_id)
        add_volume_mounts(pod.main_container, [
            client.V1VolumeMount(name=USER_LIB_VOLUME, mount_path=USER_LIB_PATH)
        ])
        return pod
