"""
Configuration management for the Cosmos DB samples.

Handles loading, validation, and access to configuration settings.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, List
from enum import Enum

import yaml
from pydantic import BaseModel, Field, field_validator, ValidationError, ConfigDict

logger = logging.getLogger(__name__)

EMULATOR_ENDPOINT = "https://localhost:8081/"


class LogLevel(str, Enum):
    """Valid log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ConsistencyLevel(str, Enum):
    """Consistency levels accepted by the Cosmos DB client."""
    STRONG = "Strong"
    BOUNDED_STALENESS = "BoundedStaleness"
    SESSION = "Session"
    CONSISTENT_PREFIX = "ConsistentPrefix"
    EVENTUAL = "Eventual"


class AuthMode(str, Enum):
    """How the client authenticates against the account."""
    KEY = "key"
    AAD = "aad"


class AccountConfig(BaseModel):
    """Cosmos DB account connection settings."""
    endpoint: str = EMULATOR_ENDPOINT
    key: Optional[str] = None
    auth: AuthMode = AuthMode.KEY
    preferred_regions: List[str] = Field(default_factory=lambda: ["West US"])
    consistency_level: ConsistencyLevel = ConsistencyLevel.EVENTUAL
    connection_verify: bool = Field(
        default=True,
        description="Verify the TLS certificate (disable for the local emulator)"
    )

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Require an http(s) account endpoint."""
        if not v.startswith(("https://", "http://")):
            raise ValueError("Account endpoint must be an http(s) URL")
        return v


class ContainerConfig(BaseModel):
    """Database and container the samples write to."""
    database: str = "AzureSampleFamilyDB"
    container: str = "FamilyContainer"
    partition_key_path: str = "/lastName"
    throughput: int = Field(default=400, ge=400)

    @field_validator("partition_key_path")
    @classmethod
    def validate_partition_key_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"Partition key path must start with '/': {v}")
        return v


class QueryConfig(BaseModel):
    """Query execution settings."""
    text: Optional[str] = Field(
        default=None,
        description="Named query or raw SQL; each sample has its own default"
    )
    page_size: int = Field(default=10, ge=1)
    populate_query_metrics: bool = True
    max_pages: Optional[int] = Field(default=None, ge=1)

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Query text cannot be blank")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    format: str = "text"
    file: Optional[str] = None
    rotation_size: str = "10MB"
    rotation_count: int = 5
    module_levels: Optional[Dict[str, str]] = Field(
        default=None,
        description="Per-module log levels, e.g., {'azure.cosmos': 'WARNING'}"
    )

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v


class SamplesConfig(BaseModel):
    """Main configuration schema for the sample programs."""

    version: str = Field(default="0.1.0", description="Configuration version")

    account: AccountConfig = Field(default_factory=AccountConfig)

    container: ContainerConfig = Field(default_factory=ContainerConfig)

    query: QueryConfig = Field(default_factory=QueryConfig)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    family_count: int = Field(default=15, ge=1, description="Families generated by the async sample")
    seed: Optional[int] = None
    read_back: bool = True

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Validate version format."""
        parts = v.split(".")
        if len(parts) != 3:
            raise ValueError("Version must be in format x.y.z")
        for part in parts:
            if not part.isdigit():
                raise ValueError("Version components must be numeric")
        return v

    model_config = ConfigDict(use_enum_values=True)


class ConfigManager:
    """
    Manages sample configuration loading and validation.

    Configuration precedence (highest to lowest):
    1. CLI arguments
    2. Environment variables (ACCOUNT_HOST, ACCOUNT_KEY, COSMOS_SAMPLES_*)
    3. Configuration file (YAML/JSON)
    4. Defaults
    """

    def __init__(self):
        self._config: Optional[SamplesConfig] = None

    def load(
        self,
        config_file: Optional[str] = None,
        cli_overrides: Optional[Dict[str, Any]] = None
    ) -> SamplesConfig:
        """
        Load and validate configuration from multiple sources.

        Args:
            config_file: Path to configuration file (YAML or JSON)
            cli_overrides: Dictionary of CLI argument overrides

        Returns:
            Validated SamplesConfig instance

        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If specified config file doesn't exist
        """
        logger.debug("Loading sample configuration")

        config_dict: Dict[str, Any] = {}

        if config_file:
            config_dict = self._load_from_file(config_file)
            logger.info(f"Loaded configuration from file: {config_file}")

        env_config = self._load_from_env()
        config_dict = self._merge_configs(config_dict, env_config)
        if env_config:
            logger.debug(f"Applied {len(env_config)} environment variable overrides")

        if cli_overrides:
            config_dict = self._merge_configs(config_dict, cli_overrides)
            logger.debug(f"Applied {len(cli_overrides)} CLI argument overrides")

        try:
            self._config = SamplesConfig(**config_dict)
            logger.debug("Configuration validated successfully")
            self._log_configuration()
            return self._config
        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """Load configuration from YAML or JSON file."""
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with open(path, 'r') as f:
            if path.suffix in ['.yaml', '.yml']:
                return yaml.safe_load(f) or {}
            elif path.suffix == '.json':
                return json.load(f)
            else:
                raise ValueError(f"Unsupported config file format: {path.suffix}")

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        # Account settings keep the variable names of the upstream quickstarts
        if host := os.getenv("ACCOUNT_HOST"):
            config.setdefault("account", {})["endpoint"] = host
        if key := os.getenv("ACCOUNT_KEY"):
            config.setdefault("account", {})["key"] = key
        if auth := os.getenv("COSMOS_SAMPLES_AUTH"):
            config.setdefault("account", {})["auth"] = auth.lower()
        if consistency := os.getenv("COSMOS_SAMPLES_CONSISTENCY"):
            config.setdefault("account", {})["consistency_level"] = consistency
        if regions := os.getenv("COSMOS_SAMPLES_REGIONS"):
            config.setdefault("account", {})["preferred_regions"] = [
                r.strip() for r in regions.split(",") if r.strip()
            ]
        if verify := os.getenv("COSMOS_SAMPLES_VERIFY_TLS"):
            config.setdefault("account", {})["connection_verify"] = verify.lower() in ['true', '1', 'yes']

        if database := os.getenv("COSMOS_SAMPLES_DATABASE"):
            config.setdefault("container", {})["database"] = database
        if container := os.getenv("COSMOS_SAMPLES_CONTAINER"):
            config.setdefault("container", {})["container"] = container

        if page_size := os.getenv("COSMOS_SAMPLES_PAGE_SIZE"):
            config.setdefault("query", {})["page_size"] = int(page_size)

        if log_level := os.getenv("COSMOS_SAMPLES_LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level.upper()
        if log_format := os.getenv("COSMOS_SAMPLES_LOG_FORMAT"):
            config.setdefault("logging", {})["format"] = log_format.lower()
        if log_file := os.getenv("COSMOS_SAMPLES_LOG_FILE"):
            config.setdefault("logging", {})["file"] = log_file

        return config

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _log_configuration(self) -> None:
        """Log the loaded configuration (with the account key redacted)."""
        if not self._config:
            return

        config_dict = self._config.model_dump()

        if config_dict.get("account", {}).get("key"):
            config_dict["account"]["key"] = "***REDACTED***"

        logger.debug(f"Active configuration: {json.dumps(config_dict, indent=2)}")
