"""
Unit tests for configuration loading and logging setup.
"""

import logging

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.core.config import (
    AppConfig,
    DatabaseConfig,
    GeneratorConfig,
    LoggingConfig,
    UsageConfig,
)


class TestDefaults:
    def test_generator_defaults(self):
        config = GeneratorConfig()

        assert config.subscriber_count == 21
        assert config.max_calls_per_day == 21
        assert config.months_to_generate == 12
        assert config.min_call_seconds == 30
        assert config.max_call_seconds == 600
        assert config.msisdn_prefix == "7"

    def test_usage_defaults_to_clamp(self):
        assert UsageConfig().negative_duration_policy == "clamp"

    def test_database_default_is_sqlite(self):
        assert DatabaseConfig().url.startswith("sqlite+aiosqlite://")

    def test_app_config_sections(self):
        config = AppConfig()

        assert isinstance(config.generator, GeneratorConfig)
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.usage, UsageConfig)


class TestEnvironment:
    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("GENERATOR_SUBSCRIBER_COUNT", "5")
        monkeypatch.setenv("USAGE_NEGATIVE_DURATION_POLICY", "reject")

        config = AppConfig()

        assert config.generator.subscriber_count == 5
        assert config.usage.negative_duration_policy == "reject"

    def test_invalid_policy_rejected(self, monkeypatch):
        monkeypatch.setenv("USAGE_NEGATIVE_DURATION_POLICY", "propagate")
        with pytest.raises(Exception):  # Pydantic ValidationError
            UsageConfig()

    def test_subscriber_pool_needs_two(self):
        with pytest.raises(Exception):
            GeneratorConfig(subscriber_count=1)

    @pytest.mark.parametrize("low, high", [(600, 30), (60, 60)])
    def test_call_length_range_must_be_increasing(self, low, high):
        with pytest.raises(PydanticValidationError, match="min_call_seconds"):
            GeneratorConfig(min_call_seconds=low, max_call_seconds=high)

    def test_call_length_range_from_env(self, monkeypatch):
        monkeypatch.setenv("GENERATOR_MIN_CALL_SECONDS", "700")
        with pytest.raises(PydanticValidationError):
            GeneratorConfig()


class TestYaml:
    def test_missing_file_uses_defaults(self):
        config = AppConfig.from_yaml("does-not-exist.yaml")
        assert config.generator.subscriber_count == 21

    def test_sections_loaded(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "app_name: Test Billing\n"
            "generator:\n"
            "  subscriber_count: 4\n"
            "  seed_on_startup: false\n"
            "report:\n"
            "  output_dir: /tmp/cdr-reports\n"
            "logging:\n"
            "  level: DEBUG\n",
            encoding="utf-8",
        )

        config = AppConfig.from_yaml(str(path))

        assert config.app_name == "Test Billing"
        assert config.generator.subscriber_count == 4
        assert config.generator.seed_on_startup is False
        assert config.report.output_dir == "/tmp/cdr-reports"
        assert config.logging.get_level() == logging.DEBUG

    def test_broken_yaml_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("generator: [unclosed\n", encoding="utf-8")

        config = AppConfig.from_yaml(str(path))

        assert config.generator.subscriber_count == 21


class TestLoggingConfig:
    def test_get_level(self):
        assert LoggingConfig(level="debug").get_level() == logging.DEBUG
        assert LoggingConfig(level="nonsense").get_level() == logging.INFO

    def test_setup_logging_installs_one_handler(self):
        root = logging.getLogger()
        saved = root.handlers[:], root.level
        try:
            AppConfig(logging=LoggingConfig(level="WARNING", use_json=True)).setup_logging()
            assert len(root.handlers) == 1
            assert root.level == logging.WARNING
        finally:
            root.handlers[:] = saved[0]
            root.setLevel(saved[1])
