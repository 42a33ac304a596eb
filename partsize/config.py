"""Connection configuration loading.

Settings are merged from three sources, lowest priority first:
1. A JSON config file (for local use)
2. Environment variables (for CI/CD)
3. Command-line options

Config File Format:
    {
        "default": {
            "endpoint_url": "https://s3.us-west-000.backblazeb2.com",
            "aws_access_key_id": "xxx",
            "aws_secret_access_key": "xxx",
            "region_name": "us-west-000",
            "addressing_style": "virtual",
            "anonymous": false
        }
    }

Environment Variable Format:
    PARTSIZE_ENDPOINT=https://s3.us-west-000.backblazeb2.com
    PARTSIZE_ACCESS_KEY=xxx
    PARTSIZE_SECRET_KEY=xxx
    PARTSIZE_STS_TOKEN=xxx
    PARTSIZE_REGION=us-west-000
    PARTSIZE_ADDRESSING_STYLE=virtual
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

from partsize.models import ConnectionConfig


class ConfigError(Exception):
    """Raised when configuration loading fails."""

    pass


DEFAULT_CONFIG_PATH = "config.json"
DEFAULT_PROFILE = "default"

ADDRESSING_STYLES = ("path", "virtual", "auto")

# Config field -> environment variable
ENV_VARS = {
    "endpoint_url": "PARTSIZE_ENDPOINT",
    "aws_access_key_id": "PARTSIZE_ACCESS_KEY",
    "aws_secret_access_key": "PARTSIZE_SECRET_KEY",
    "aws_session_token": "PARTSIZE_STS_TOKEN",
    "region_name": "PARTSIZE_REGION",
    "addressing_style": "PARTSIZE_ADDRESSING_STYLE",
}

CONFIG_FIELDS = tuple(ENV_VARS) + ("anonymous",)


def load_from_json(
    config_path: str,
    profile: str = DEFAULT_PROFILE,
    file_required: bool = True,
    profile_required: bool = True,
) -> dict[str, Any]:
    """Load one profile's settings from a JSON config file.

    Args:
        config_path: Path to the config file.
        profile: Name of the top-level profile to read.
        file_required: If False, a missing file yields no settings
                       instead of an error.
        profile_required: If False, a file without the profile yields
                          no settings instead of an error.

    Returns:
        Dictionary of the profile's recognized settings.

    Raises:
        ConfigError: If the file is missing (when required), unreadable,
                    not UTF-8, contains invalid JSON, or the profile is
                    missing or malformed.
    """
    path = Path(config_path)

    if not path.exists():
        if file_required:
            raise ConfigError(f"Config file not found: {config_path}")
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"Config file is not valid UTF-8: {config_path}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a JSON object: {config_path}")

    if profile not in data:
        if profile_required:
            raise ConfigError(f"Profile '{profile}' not found in {config_path}")
        return {}

    section = data[profile]
    if not isinstance(section, dict):
        raise ConfigError(f"Profile '{profile}' must be a JSON object")

    return {k: section[k] for k in CONFIG_FIELDS if section.get(k)}


def load_from_env() -> dict[str, Any]:
    """Load settings from PARTSIZE_* environment variables.

    Returns:
        Dictionary of the settings whose variables are set and non-empty.
    """
    settings: dict[str, Any] = {}
    for name, env_var in ENV_VARS.items():
        value = os.environ.get(env_var)
        if value:
            settings[name] = value
    return settings


def validate(config: ConnectionConfig) -> ConnectionConfig:
    """Check a merged configuration for inconsistent settings.

    Raises:
        ConfigError: If credentials are incomplete, combined with
                    anonymous access, or the addressing style is unknown.
    """
    if bool(config.aws_access_key_id) != bool(config.aws_secret_access_key):
        raise ConfigError("Access key ID and access key secret must be given together")

    if config.aws_session_token and not config.aws_access_key_id:
        raise ConfigError("STS token requires an access key ID and secret")

    if not isinstance(config.anonymous, bool):
        raise ConfigError(f"'anonymous' must be true or false, got {config.anonymous!r}")

    if config.anonymous and config.aws_access_key_id:
        raise ConfigError("Anonymous access cannot be combined with an access key")

    if config.addressing_style not in ADDRESSING_STYLES:
        raise ConfigError(
            f"Invalid addressing style '{config.addressing_style}'. "
            f"Expected one of: {', '.join(ADDRESSING_STYLES)}"
        )

    return config


def load_connection(
    config_path: Optional[str] = None,
    profile: Optional[str] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> ConnectionConfig:
    """Build the connection configuration from all sources.

    Priority order (highest wins):
    1. overrides (command-line options)
    2. Environment variables
    3. Config file

    Args:
        config_path: Explicit config file path, which must exist. When
                     None, the default path is used if it exists.
        profile: Profile name, which must be present in whichever config
                 file is read. When None, the default profile is used
                 if present.
        overrides: Settings given on the command line; None values are
                   ignored.

    Returns:
        A validated ConnectionConfig.

    Raises:
        ConfigError: If any source is invalid or the result is inconsistent.
    """
    settings = load_from_json(
        config_path or DEFAULT_CONFIG_PATH,
        profile or DEFAULT_PROFILE,
        file_required=config_path is not None,
        profile_required=profile is not None or config_path is not None,
    )
    settings.update(load_from_env())

    if overrides:
        settings.update({k: v for k, v in overrides.items() if v is not None})

    unknown = set(settings) - set(CONFIG_FIELDS)
    if unknown:
        raise ConfigError(f"Unknown configuration fields: {', '.join(sorted(unknown))}")

    return validate(ConnectionConfig(**settings))
