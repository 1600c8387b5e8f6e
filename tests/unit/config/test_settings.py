"""Tests for configuration settings and the risk policy loader."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from riskgate.common.config import (
    Config,
    Environment,
    LevelThresholds,
    LogLevel,
    RiskPolicy,
    StoreBackend,
    TURNSTILE_VERIFY_URL,
    get_config,
    load_policy,
    reset_config,
)
from riskgate.common.exceptions import ConfigurationError


class TestConfigDefaults:
    """Tests for defaults without RISKGATE_ environment variables."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config()

        assert config.environment == Environment.DEVELOPMENT
        assert config.log_level == LogLevel.INFO
        assert config.store_backend == StoreBackend.MEMORY
        assert config.turnstile_verify_url == TURNSTILE_VERIFY_URL
        assert config.challenge_verify_timeout_seconds == 5.0
        assert config.policy_file == config.project_root / "config" / "risk_policy.yaml"
        assert config.is_development
        assert not config.is_production

    def test_default_policy_file_ships_with_repo(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config()

        assert config.policy_file.exists()


class TestConfigFromEnvironment:
    """Tests for environment variable overrides."""

    def test_environment_overrides(self):
        env = {
            "RISKGATE_ENVIRONMENT": "staging",
            "RISKGATE_LOG_LEVEL": "DEBUG",
            "RISKGATE_API_PORT": "9001",
            "RISKGATE_TURNSTILE_SECRET": "s3cret",
            "RISKGATE_CHALLENGE_VERIFY_TIMEOUT": "2.5",
            "RISKGATE_POLICY_FILE": "/tmp/policy.yaml",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config()

        assert config.environment == Environment.STAGING
        assert config.log_level == LogLevel.DEBUG
        assert config.api_port == 9001
        assert config.turnstile_secret == "s3cret"
        assert config.challenge_verify_timeout_seconds == 2.5
        assert config.policy_file == Path("/tmp/policy.yaml")

    def test_dynamodb_requires_table(self):
        with patch.dict(os.environ, {"RISKGATE_STORE_BACKEND": "dynamodb"}, clear=True):
            with pytest.raises(ConfigurationError) as exc_info:
                Config()

        assert exc_info.value.code == "CONFIG_ERROR"

    def test_non_positive_timeout_rejected(self):
        with patch.dict(os.environ, {"RISKGATE_CHALLENGE_VERIFY_TIMEOUT": "0"}, clear=True):
            with pytest.raises(ConfigurationError):
                Config()

    def test_production_without_secret_warns(self):
        with patch.dict(os.environ, {"RISKGATE_ENVIRONMENT": "production"}, clear=True):
            with pytest.warns(RuntimeWarning):
                Config()


class TestConfigSingleton:
    def test_get_config_is_cached_until_reset(self):
        first = get_config()
        assert get_config() is first

        reset_config()
        assert get_config() is not first


class TestRiskPolicy:
    """Tests for YAML policy loading."""

    def test_load_shipped_policy(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config()

        policy = load_policy(config.policy_file)

        assert policy.version == "1.0.0"
        assert policy.weights.brute_force == 0.30
        assert policy.weights.total == pytest.approx(1.0)
        assert policy.thresholds.critical == 85

    def test_load_custom_policy(self, tmp_path):
        policy_file = tmp_path / "policy.yaml"
        policy_file.write_text(
            "weights:\n"
            "  anomaly: 0.6\n"
            "thresholds:\n"
            "  medium: 20\n"
            "  high: 50\n"
            "  critical: 90\n"
        )

        policy = load_policy(policy_file)

        assert policy.weights.anomaly == 0.6
        assert policy.weights.brute_force == 0.30
        assert policy.thresholds.medium == 20

    def test_empty_file_gives_defaults(self, tmp_path):
        policy_file = tmp_path / "policy.yaml"
        policy_file.write_text("")

        assert load_policy(policy_file) == RiskPolicy()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_policy(tmp_path / "nope.yaml")

    def test_thresholds_must_increase(self):
        with pytest.raises(PydanticValidationError):
            LevelThresholds(medium=60, high=30, critical=85)

    def test_negative_weight_rejected(self, tmp_path):
        policy_file = tmp_path / "policy.yaml"
        policy_file.write_text("weights:\n  geo_velocity: -0.1\n")

        with pytest.raises(PydanticValidationError):
            load_policy(policy_file)
