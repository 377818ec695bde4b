"""Configuration module for ghread.

This module provides configuration management for the application,
loading settings from .ghread/config file (KEY=value format) with
fallback to environment variables.

Credentials are read here and nowhere else; the client receives them as
plain strings.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Default paths relative to the working directory
GHREAD_DIR = ".ghread"
CONFIG_FILE = "config"

DEFAULT_LOG_SIZE = 10 * 1024 * 1024  # 10MB
DEFAULT_LOG_BACKUPS = 5


@dataclass
class Config:
    """Application configuration.

    Attributes:
        root_path: Project root; the cache directory is relative to it
        cache_dir: Response cache directory name, or None to disable caching
        github_enterprise_url: GHES base URL (e.g., https://ghe.example.com/), or None
        github_auth: Token for github.com (GITHUB_AUTH)
        github_enterprise_auth: Token for GHES (GITHUB_ENTERPRISE_AUTH)
        log_file: Optional log file path
        log_size: Max log file size in bytes before rotation
        log_backups: Number of rotated log files to keep
        log_level: Root log level name
        otel_endpoint: OTLP endpoint; empty disables telemetry
        otel_service_name: Service name reported to OTel
        ghes_logs_mask: Mask GHES hostname and tokens in logs
    """

    root_path: str = "."
    cache_dir: str | None = None
    github_enterprise_url: str | None = None
    github_auth: str | None = None
    github_enterprise_auth: str | None = None
    log_file: str | None = None
    log_size: int = DEFAULT_LOG_SIZE
    log_backups: int = DEFAULT_LOG_BACKUPS
    log_level: str = "INFO"
    otel_endpoint: str = ""
    otel_service_name: str = "ghread"
    ghes_logs_mask: bool = True


def parse_config_file(config_path: Path) -> dict[str, str]:
    """Parse a KEY=value config file.

    Args:
        config_path: Path to the config file

    Returns:
        Dictionary of key-value pairs
    """
    config = {}
    with open(config_path) as f:
        for line in f:
            line = line.strip()
            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                # Remove surrounding quotes if present
                if len(value) >= 2 and (
                    (value.startswith('"') and value.endswith('"'))
                    or (value.startswith("'") and value.endswith("'"))
                ):
                    value = value[1:-1]
                config[key] = value
    return config


def _optional(data: Mapping[str, str], key: str) -> str | None:
    """Return data[key], with missing and empty values normalized to None."""
    value = data.get(key)
    if not value:
        return None
    return value


def _int(data: Mapping[str, str], key: str, default: int) -> int:
    raw = data.get(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"Invalid integer for {key}: {raw!r}") from e


def _build_config(data: Mapping[str, str]) -> Config:
    """Build a Config from a flat key/value mapping."""
    log_level = data.get("LOG_LEVEL") or "INFO"

    return Config(
        root_path=data.get("ROOT_PATH") or ".",
        cache_dir=_optional(data, "CACHE_DIR"),
        github_enterprise_url=_optional(data, "GITHUB_ENTERPRISE_URL"),
        github_auth=_optional(data, "GITHUB_AUTH"),
        github_enterprise_auth=_optional(data, "GITHUB_ENTERPRISE_AUTH"),
        log_file=_optional(data, "LOG_FILE"),
        log_size=_int(data, "LOG_SIZE", DEFAULT_LOG_SIZE),
        log_backups=_int(data, "LOG_BACKUPS", DEFAULT_LOG_BACKUPS),
        log_level=log_level.upper(),
        otel_endpoint=data.get("OTEL_EXPORTER_OTLP_ENDPOINT", ""),
        otel_service_name=data.get("OTEL_SERVICE_NAME") or "ghread",
        ghes_logs_mask=data.get("GHES_LOGS_MASK", "true").lower() == "true",
    )


def load_config_from_file(config_path: Path) -> Config:
    """Load configuration from a KEY=value config file.

    Tokens missing from the file are taken from GITHUB_AUTH and
    GITHUB_ENTERPRISE_AUTH in the environment, so they need not be written
    to disk.

    Args:
        config_path: Path to the config file

    Returns:
        Config: A Config instance populated from the config file

    Raises:
        ValueError: If a numeric field is invalid
        FileNotFoundError: If the config file doesn't exist
    """
    data = parse_config_file(config_path)

    for key in ("GITHUB_AUTH", "GITHUB_ENTERPRISE_AUTH"):
        if not data.get(key) and os.environ.get(key):
            data[key] = os.environ[key]

    logger.debug(f"Loaded configuration from {config_path}")
    return _build_config(data)


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Returns:
        Config: A Config instance populated from environment variables

    Raises:
        ValueError: If a numeric field is invalid
    """
    return _build_config(os.environ)


def load_config() -> Config:
    """Load configuration from config file or environment variables.

    Priority:
    1. Config file at .ghread/config
    2. Environment variables

    Returns:
        Config: A Config instance

    Raises:
        ValueError: If configuration values are invalid
    """
    config_path = Path.cwd() / GHREAD_DIR / CONFIG_FILE

    if config_path.exists():
        return load_config_from_file(config_path)
    else:
        return load_config_from_env()
