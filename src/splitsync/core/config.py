#!/usr/bin/env python3
"""
Configuration Management for the YNAB to Splitwise sync

Handles environment-based configuration with secure defaults and validation.
Supports multiple environments (development, test, production) with appropriate
security measures for each.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class YnabConfig:
    """YNAB API configuration."""

    api_token: str | None = None
    budget_id: str = "last-used"
    base_url: str = "https://api.youneedabudget.com/v1"
    timeout: int = 30


@dataclass
class SplitwiseConfig:
    """Splitwise API configuration."""

    api_key: str | None = None
    group_id: int | None = None
    base_url: str = "https://secure.splitwise.com/api/v3.0"
    timeout: int = 30


@dataclass
class SyncConfig:
    """Selection, materialization and persistence settings for a sync run."""

    watermark_file: Path
    cache_dir: Path
    ledger_file: Path
    category_map_file: Path
    category_group: str = "Shared"
    memo_marker: str = "splitwise"
    minor_unit_scale: int = 1000  # YNAB milliunits
    commit_policy: str = "best-effort"


@dataclass
class Config:
    """
    Main configuration class for the sync job.

    Loads configuration from environment variables with secure defaults
    and validation for each environment type.
    """

    environment: Environment
    data_dir: Path

    ynab: YnabConfig
    splitwise: SplitwiseConfig
    sync: SyncConfig

    # Application settings
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("SPLITSYNC_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_splitsync"
            data_dir = Path(os.getenv("SPLITSYNC_DATA_DIR", str(default_test_dir)))
        else:
            data_dir = Path(os.getenv("SPLITSYNC_DATA_DIR", "./data")).expanduser().resolve()

        ynab = YnabConfig(
            api_token=os.getenv("YNAB_API_TOKEN"),
            budget_id=os.getenv("YNAB_BUDGET_ID") or "last-used",
            timeout=int(os.getenv("YNAB_TIMEOUT", "30")),
        )

        group_id = os.getenv("SPLITWISE_GROUP_ID")
        splitwise = SplitwiseConfig(
            api_key=os.getenv("SPLITWISE_API_KEY"),
            group_id=int(group_id) if group_id else None,
            timeout=int(os.getenv("SPLITWISE_TIMEOUT", "30")),
        )

        category_map_file = os.getenv("SYNC_CATEGORY_MAP_FILE")
        sync = SyncConfig(
            watermark_file=data_dir / "last-sync-date.txt",
            cache_dir=data_dir / "ynab_cache",
            ledger_file=data_dir / "submitted-transactions.json",
            category_map_file=(
                Path(category_map_file).expanduser() if category_map_file else data_dir / "category_map.yaml"
            ),
            category_group=os.getenv("SYNC_CATEGORY_GROUP", "Shared"),
            memo_marker=os.getenv("SYNC_MEMO_MARKER", "splitwise"),
            minor_unit_scale=int(os.getenv("SYNC_MINOR_UNIT_SCALE", "1000")),
            commit_policy=os.getenv("SYNC_COMMIT_POLICY", "best-effort").lower(),
        )

        return cls(
            environment=env,
            data_dir=data_dir,
            ynab=ynab,
            splitwise=splitwise,
            sync=sync,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        if self.ynab.timeout <= 0:
            errors.append("YNAB timeout must be positive")
        if self.splitwise.timeout <= 0:
            errors.append("Splitwise timeout must be positive")
        if self.sync.minor_unit_scale <= 0:
            errors.append("SYNC_MINOR_UNIT_SCALE must be positive")
        if self.sync.commit_policy not in ("best-effort", "at-least-once"):
            errors.append(f"Unknown SYNC_COMMIT_POLICY: {self.sync.commit_policy}")
        if not self.sync.memo_marker:
            errors.append("SYNC_MEMO_MARKER must not be empty")

        return errors

    def missing_credentials(self) -> list[str]:
        """Names of the credentials a non-trivial sync run cannot do without."""
        missing = []
        if not self.ynab.api_token:
            missing.append("YNAB_API_TOKEN")
        if not self.splitwise.api_key:
            missing.append("SPLITWISE_API_KEY")
        if self.splitwise.group_id is None:
            missing.append("SPLITWISE_GROUP_ID")
        return missing

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        # Configure format based on environment
        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

        # Reduce noise from external libraries in production
        if self.environment == Environment.PRODUCTION:
            logging.getLogger("urllib3").setLevel(logging.WARNING)
            logging.getLogger("requests").setLevel(logging.WARNING)

    def get_sensitive_fields(self) -> list:
        """Get list of field names that contain sensitive data."""
        return [
            "ynab.api_token",
            "splitwise.api_key",
        ]

    def to_dict(self, include_sensitive: bool = False) -> dict[str, Any]:
        """Convert configuration to dictionary, optionally excluding sensitive data."""
        result: dict[str, Any] = {}

        for field_name, field_value in self.__dict__.items():
            if hasattr(field_value, "__dict__") and not isinstance(field_value, (Path, Enum)):
                nested_dict: dict[str, Any] = {}
                for nested_name, nested_value in field_value.__dict__.items():
                    full_field_name = f"{field_name}.{nested_name}"

                    if not include_sensitive and full_field_name in self.get_sensitive_fields():
                        nested_dict[nested_name] = "***REDACTED***" if nested_value else None
                    elif isinstance(nested_value, Path):
                        nested_dict[nested_name] = str(nested_value)
                    else:
                        nested_dict[nested_name] = nested_value

                result[field_name] = nested_dict
            elif isinstance(field_value, Path):
                result[field_name] = str(field_value)
            elif isinstance(field_value, Enum):
                result[field_name] = field_value.value
            else:
                result[field_name] = field_value

        return result


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_environment()

        errors = _config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        _config.setup_logging()

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()

