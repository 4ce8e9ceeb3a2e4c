"""Flink configuration options understood by the standalone Kubernetes core."""

from flink_standalone.models.configuration import ConfigOption

# Cluster identity
CLUSTER_ID = ConfigOption("kubernetes.cluster-id")
NAMESPACE = ConfigOption("kubernetes.namespace", "default")

# Image
CONTAINER_IMAGE = ConfigOption("kubernetes.container.image", "flink:1.18")
CONTAINER_IMAGE_PULL_POLICY = ConfigOption(
    "kubernetes.container.image.pull-policy", "IfNotPresent"
)
CONTAINER_IMAGE_PULL_SECRETS = ConfigOption(
    "kubernetes.container.image.pull-secrets", [], list
)

# Service accounts
SERVICE_ACCOUNT = ConfigOption("kubernetes.service-account", "default")
JOB_MANAGER_SERVICE_ACCOUNT = ConfigOption(
    "kubernetes.jobmanager.service-account",
    "default",
    fallback_keys=("kubernetes.service-account",),
)
TASK_MANAGER_SERVICE_ACCOUNT = ConfigOption(
    "kubernetes.taskmanager.service-account",
    "default",
    fallback_keys=("kubernetes.service-account",),
)

# Per-role metadata and placement
JOB_MANAGER_LABELS = ConfigOption("kubernetes.jobmanager.labels", {}, dict)
TASK_MANAGER_LABELS = ConfigOption("kubernetes.taskmanager.labels", {}, dict)
JOB_MANAGER_ANNOTATIONS = ConfigOption("kubernetes.jobmanager.annotations", {}, dict)
TASK_MANAGER_ANNOTATIONS = ConfigOption("kubernetes.taskmanager.annotations", {}, dict)
JOB_MANAGER_NODE_SELECTOR = ConfigOption("kubernetes.jobmanager.node-selector", {}, dict)
TASK_MANAGER_NODE_SELECTOR = ConfigOption("kubernetes.taskmanager.node-selector", {}, dict)
JOB_MANAGER_OWNER_REFERENCE = ConfigOption(
    "kubernetes.jobmanager.owner.reference", [], "map_list"
)

# Replicas and resources
JOB_MANAGER_REPLICAS = ConfigOption("kubernetes.jobmanager.replicas", 1, int)
TASK_MANAGER_REPLICAS = ConfigOption("kubernetes.taskmanager.replicas", None, int)
JOB_MANAGER_CPU = ConfigOption("kubernetes.jobmanager.cpu", 1.0, float)
TASK_MANAGER_CPU = ConfigOption("kubernetes.taskmanager.cpu", 1.0, float)
JOB_MANAGER_MEMORY = ConfigOption("jobmanager.memory.process.size", "1600m")
TASK_MANAGER_MEMORY = ConfigOption("taskmanager.memory.process.size", "1728m")
NUM_TASK_SLOTS = ConfigOption("taskmanager.numberOfTaskSlots", 1, int)
DEFAULT_PARALLELISM = ConfigOption("parallelism.default", 1, int)

# Scheduling
SCHEDULER_MODE = ConfigOption("scheduler-mode")

# Ports
REST_PORT = ConfigOption("rest.port", 8081, int)
RPC_PORT = ConfigOption("jobmanager.rpc.port", 6123, int)
BLOB_SERVER_PORT = ConfigOption("blob.server.port", 6124, int)
TASK_MANAGER_RPC_PORT = ConfigOption("taskmanager.rpc.port", 6122, int)
JOB_MANAGER_RPC_ADDRESS = ConfigOption("jobmanager.rpc.address")

# Services
REST_SERVICE_EXPOSED_TYPE = ConfigOption(
    "kubernetes.rest-service.exposed.type", "ClusterIP"
)
REST_SERVICE_ANNOTATIONS = ConfigOption(
    "kubernetes.rest-service.annotations", {}, dict
)

# Secrets
KUBERNETES_SECRETS = ConfigOption("kubernetes.secrets", {}, dict)
KUBERNETES_ENV_SECRET_KEY_REF = ConfigOption(
    "kubernetes.env.secretKeyRef", [], "map_list"
)

# Mounted configuration
HADOOP_CONF_CONFIG_MAP = ConfigOption("kubernetes.hadoop.conf.config-map.name")
KERBEROS_KEYTAB = ConfigOption("security.kerberos.login.keytab")
KERBEROS_PRINCIPAL = ConfigOption("security.kerberos.login.principal")
KERBEROS_KRB5_CONF = ConfigOption("security.kerberos.krb5-conf.path")
FLINK_CONF_DIR = ConfigOption("kubernetes.flink.conf.dir", "/opt/flink/conf")
FLINK_LOG_DIR = ConfigOption("kubernetes.flink.log.dir")

# Entrypoint
KUBERNETES_ENTRY_PATH = ConfigOption("kubernetes.entry.path", "/docker-entrypoint.sh")

# High availability
HIGH_AVAILABILITY = ConfigOption("high-availability", "NONE")

# Standalone cluster mode and application settings
CLUSTER_MODE = ConfigOption("kubernetes.standalone.cluster-mode", "SESSION")
APPLICATION_MAIN_CLASS = ConfigOption("$internal.application.main")
APPLICATION_ARGS = ConfigOption("$internal.application.program-args", [], list)
PIPELINE_JARS = ConfigOption("pipeline.jars", [], list)
SAVEPOINT_PATH = ConfigOption("execution.savepoint.path")
SAVEPOINT_IGNORE_UNCLAIMED_STATE = ConfigOption(
    "execution.savepoint.ignore-unclaimed-state", False, bool
)

# Prefixes for containerized environment variables
CONTAINERIZED_JOB_MANAGER_ENV_PREFIX = "containerized.master.env."
CONTAINERIZED_TASK_MANAGER_ENV_PREFIX = "containerized.taskmanager.env."
