"""
Application configuration using Pydantic Settings.
Supports loading from environment variables, .env files and an optional YAML file.
"""

import logging
import os
from typing import Any, Literal

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database connection configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    url: str = "sqlite+aiosqlite:///./cdr.db"
    echo: bool = False


class GeneratorConfig(BaseSettings):
    """Synthetic CDR generation settings."""

    model_config = SettingsConfigDict(env_prefix="GENERATOR_")

    subscriber_count: int = Field(default=21, ge=2)
    max_calls_per_day: int = Field(default=21, ge=2)
    months_to_generate: int = Field(default=12, ge=1)
    min_call_seconds: int = Field(default=30, ge=0)
    max_call_seconds: int = Field(default=600, ge=1)
    msisdn_prefix: str = "7"
    seed: int | None = None

    # Wipe CDRs and generate a fresh period when the app starts
    seed_on_startup: bool = True

    @model_validator(mode="after")
    def check_call_length_range(self) -> "GeneratorConfig":
        if self.min_call_seconds >= self.max_call_seconds:
            raise ValueError(
                f"min_call_seconds ({self.min_call_seconds}) must be below "
                f"max_call_seconds ({self.max_call_seconds})"
            )
        return self


class ReportConfig(BaseSettings):
    """CSV report export settings."""

    model_config = SettingsConfigDict(env_prefix="REPORT_")

    output_dir: str = "reports"


class UsageConfig(BaseSettings):
    """Usage aggregation settings."""

    model_config = SettingsConfigDict(env_prefix="USAGE_")

    # clamp: count negative durations as zero; reject: fail the whole report
    negative_duration_policy: Literal["clamp", "reject"] = "clamp"


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_")

    level: str = Field(
        default="INFO",
        description="Main logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    use_json: bool = Field(default=False, description="Use JSON structured logging format")
    enable_request_logging: bool = Field(
        default=True, description="Enable request/response logging middleware"
    )
    sqlalchemy_level: str = Field(
        default="WARNING", description="Logging level for the sqlalchemy loggers"
    )

    def get_level(self) -> int:
        """Convert string level to logging constant."""
        return getattr(logging, self.level.upper(), logging.INFO)

    def get_sqlalchemy_level(self) -> int:
        return getattr(logging, self.sqlalchemy_level.upper(), logging.WARNING)


class AppConfig(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    app_name: str = "CDR Billing Service"
    app_version: str = "0.1.0"
    debug: bool = False

    # CORS settings
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = False
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Sub-configurations
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    usage: UsageConfig = Field(default_factory=UsageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, config_path: str = "config.yaml") -> "AppConfig":
        """
        Load configuration from a YAML file with environment variable overrides
        for any section the file does not mention.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            AppConfig instance with loaded configuration
        """
        if not os.path.exists(config_path):
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_data: dict[str, Any] = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logging.warning(f"Failed to load config from {config_path}: {e}")
            return cls()

        sections = {
            "database": DatabaseConfig,
            "generator": GeneratorConfig,
            "report": ReportConfig,
            "usage": UsageConfig,
            "logging": LoggingConfig,
        }
        kwargs: dict[str, Any] = {
            key: value for key, value in yaml_data.items() if key not in sections
        }
        for key, section_cls in sections.items():
            section_data = yaml_data.get(key) or {}
            kwargs[key] = section_cls(**section_data)
        return cls(**kwargs)

    def setup_logging(self) -> None:
        """
        Configure logging for the application and the sqlalchemy loggers.
        """
        from app.api.middleware import setup_structured_logging

        setup_structured_logging(
            level=self.logging.get_level(),
            use_json=self.logging.use_json,
        )

        # Engine echo is controlled by DB_ECHO; keep the rest quiet
        for module_name in ["sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite"]:
            logging.getLogger(module_name).setLevel(self.logging.get_sqlalchemy_level())

        logging.getLogger(__name__).info(
            f"Logging configured: level={self.logging.level}, "
            f"json={self.logging.use_json}, "
            f"request_logging={self.logging.enable_request_logging}"
        )


# Global configuration instance
settings = AppConfig.from_yaml(os.getenv("APP_CONFIG_FILE", "config.yaml"))
