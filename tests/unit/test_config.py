import logging
from unittest.mock import patch

from flink_standalone.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    configure_logging,
    get_config,
)


class TestConfig:
    """Tests for configuration class selection and logging setup."""

    def test_get_config_by_name(self):
        assert get_config("testing") is TestingConfig
        assert get_config("production") is ProductionConfig
        assert get_config("unknown") is DevelopmentConfig

    def test_get_config_from_environment(self, monkeypatch):
        monkeypatch.setenv("FLINK_OPERATOR_ENV", "testing")
        assert get_config() is TestingConfig

        monkeypatch.delenv("FLINK_OPERATOR_ENV")
        assert get_config() is DevelopmentConfig

    def test_testing_config_never_waits(self):
        assert TestingConfig.CLUSTER_SHUTDOWN_TIMEOUT == 0
        assert TestingConfig.IN_CLUSTER is False

    @patch("flink_standalone.config.logging.basicConfig")
    def test_configure_logging(self, mock_basic_config):
        class VerboseConfig(TestingConfig):
            LOG_LEVEL = "debug"

        configure_logging(VerboseConfig)

        mock_basic_config.assert_called_once_with(
            level=logging.DEBUG, format=VerboseConfig.LOG_FORMAT
        )
