"""Access configuration for memberfiles.

Handles loading and validation of the YAML access configuration:

    access:
      denied_status: 403
      default_upload_visibility: MEMBERS_ONLY
      role_titles:
        treasurer: board-member

    logging:
      level: INFO
      dir: /var/log/memberfiles
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from memberfiles.core.access.model import Role, Visibility


# Statuses a route may use for an authenticated denial. 404 hides whether
# the file exists at all; 403 matches the behavior of the previous API.
ALLOWED_DENIED_STATUSES = (403, 404)
DEFAULT_DENIED_STATUS = 403


@dataclass
class AccessConfig:
    """Access-control settings shared by every file endpoint."""

    denied_status: int = DEFAULT_DENIED_STATUS
    default_upload_visibility: Visibility = Visibility.MEMBERS_ONLY
    role_titles: Dict[str, Role] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"
    log_dir: str = "/var/log/memberfiles"
    file_logging: bool = False


@dataclass
class MemberFilesConfig:
    """Top-level configuration."""

    access: AccessConfig = field(default_factory=AccessConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def parse_access_config(access_dict: Dict[str, Any]) -> AccessConfig:
    """Parse the ``access`` section.

    Args:
        access_dict: Access configuration dictionary

    Returns:
        AccessConfig instance

    Raises:
        ValueError: denied_status is not an allowed status
        AccessConfigurationError: a visibility or role value is unknown
    """
    denied_status = int(access_dict.get("denied_status", DEFAULT_DENIED_STATUS))
    if denied_status not in ALLOWED_DENIED_STATUSES:
        raise ValueError(
            f"Invalid denied_status: {denied_status}. "
            f"Must be one of: {', '.join(str(s) for s in ALLOWED_DENIED_STATUSES)}"
        )

    role_titles = {
        str(title).lower(): Role.parse(role)
        for title, role in (access_dict.get("role_titles") or {}).items()
    }

    return AccessConfig(
        denied_status=denied_status,
        default_upload_visibility=Visibility.parse(
            access_dict.get("default_upload_visibility", Visibility.MEMBERS_ONLY.value)
        ),
        role_titles=role_titles,
    )


def parse_logging_config(logging_dict: Dict[str, Any]) -> LoggingConfig:
    return LoggingConfig(
        level=logging_dict.get("level", "INFO"),
        log_dir=logging_dict.get("dir", "/var/log/memberfiles"),
        file_logging=logging_dict.get("file_logging", False),
    )


def parse_config(config_dict: Dict[str, Any]) -> MemberFilesConfig:
    """Parse the full configuration dictionary.

    Args:
        config_dict: Full configuration dictionary

    Returns:
        MemberFilesConfig instance
    """
    access = AccessConfig()
    if config_dict.get("access"):
        access = parse_access_config(config_dict["access"])

    logging_config = LoggingConfig()
    if config_dict.get("logging"):
        logging_config = parse_logging_config(config_dict["logging"])

    return MemberFilesConfig(access=access, logging=logging_config)


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
        TypeError: If the YAML root is not a mapping
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_file.open("r") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise TypeError(
            f"Configuration root must be a mapping, got {type(config).__name__}"
        )

    return _expand_env_vars(config)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in configuration."""
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return os.path.expandvars(obj)
    else:
        return obj


def load_access_config(config_path: Optional[str] = None) -> MemberFilesConfig:
    """Load and parse configuration into typed dataclasses.

    With no path, the built-in defaults are returned.
    """
    if not config_path:
        return MemberFilesConfig()
    return parse_config(load_config(config_path))
