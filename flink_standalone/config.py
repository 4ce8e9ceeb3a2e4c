import logging
import os


class Config:
    """Base configuration class with common settings."""

    # Kubernetes client settings
    KUBECONFIG_PATH = os.getenv("KUBECONFIG_PATH", "")
    IN_CLUSTER = os.getenv("IN_CLUSTER", "False").lower() == "true"

    # Cluster teardown
    CLUSTER_SHUTDOWN_TIMEOUT = int(os.getenv("CLUSTER_SHUTDOWN_TIMEOUT", "60"))
    CLUSTER_SHUTDOWN_POLL_INTERVAL = float(
        os.getenv("CLUSTER_SHUTDOWN_POLL_INTERVAL", "2")
    )

    # Flink defaults applied underneath every deployment's own configuration
    DEFAULT_FLINK_IMAGE = os.getenv("DEFAULT_FLINK_IMAGE", "flink:1.18")
    DEFAULT_FLINK_CONFIGURATION = {
        "taskmanager.numberOfTaskSlots": os.getenv("DEFAULT_TASK_SLOTS", "2"),
        "parallelism.default": "1",
        "rest.port": "8081",
        "jobmanager.rpc.port": "6123",
        "blob.server.port": "6124",
        "taskmanager.rpc.port": "6122",
    }

    # Logging settings
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class DevelopmentConfig(Config):
    """Development configuration."""

    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    """Testing configuration."""

    KUBECONFIG_PATH = ""
    IN_CLUSTER = False
    CLUSTER_SHUTDOWN_TIMEOUT = 0
    CLUSTER_SHUTDOWN_POLL_INTERVAL = 0.0


class ProductionConfig(Config):
    """Production configuration."""

    IN_CLUSTER = os.getenv("IN_CLUSTER", "True").lower() == "true"
    CLUSTER_SHUTDOWN_TIMEOUT = int(os.getenv("CLUSTER_SHUTDOWN_TIMEOUT", "300"))


# Configuration dictionary for easy selection
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(config_name=None):
    """Get configuration class based on environment.

    Args:
        config_name: Configuration name ('development', 'testing', 'production').
                    If None, uses FLINK_OPERATOR_ENV environment variable or
                    defaults to 'development'.

    Returns:
        Configuration class.
    """
    if config_name is None:
        config_name = os.getenv("FLINK_OPERATOR_ENV", "development")

    config_class = config.get(config_name, DevelopmentConfig)
    return config_class


def configure_logging(config_class=None):
    """Configure root logging from the selected configuration class."""
    config_class = config_class or get_config()
    logging.basicConfig(
        level=getattr(logging, str(config_class.LOG_LEVEL).upper(), logging.INFO),
        format=config_class.LOG_FORMAT,
    )
