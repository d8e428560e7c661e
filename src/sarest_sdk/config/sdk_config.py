"""
SDK configuration loading

Loads appliance settings and application credentials from a dictionary, a
JSON string or file, or SAREST_* environment variables. The JSON layout is:

    {
      "appliance": {"host": "idp.example.com", "port": 443, "ssl": true},
      "credentials": {
        "realm": "secureauth2",
        "application_id": "...",
        "application_key": "..."
      },
      "logging": {"level": "WARNING"}
    }
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..credentials import CredentialContext
from ..exceptions import ConfigurationError, SARestErrorCodes
from ..http_client import ApplianceConfig, SARestClient

ENV_PREFIX = "SAREST_"

_APPLIANCE_FIELDS = ('host', 'port', 'ssl', 'timeout', 'verify_ssl', 'retry_attempts', 'retry_backoff_factor')
_CREDENTIAL_FIELDS = ('application_id', 'application_key', 'realm')
_TRUE = {'1', 'true', 'yes', 'on'}
_FALSE = {'0', 'false', 'no', 'off'}


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "WARNING"

    def __post_init__(self):
        level = str(self.level).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigurationError(f"Unknown log level: {self.level}")
        self.level = level


@dataclass
class SDKConfig:
    """Complete SDK configuration"""
    appliance: ApplianceConfig
    credentials: CredentialContext
    logging: LoggingConfig

    def create_client(self, **kwargs):
        """Create an SARestClient from this configuration."""
        return SARestClient(self.appliance, self.credentials, **kwargs)


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigurationError(f"Invalid boolean for '{name}': {value!r}", details={"field": name})


def _parse_number(name: str, value: Any, kind):
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid value for '{name}': {value!r}", details={"field": name}) from None


def _build_appliance(data: Mapping[str, Any]) -> ApplianceConfig:
    values = {name: data[name] for name in _APPLIANCE_FIELDS if data.get(name) is not None}
    if 'host' not in values:
        raise ConfigurationError(
            "Appliance host is required",
            SARestErrorCodes.INVALID_CONFIG,
            {"field": "host"}
        )

    for name in ('ssl', 'verify_ssl'):
        if name in values:
            values[name] = _parse_bool(name, values[name])
    for name in ('port', 'retry_attempts'):
        if name in values:
            values[name] = _parse_number(name, values[name], int)
    for name in ('timeout', 'retry_backoff_factor'):
        if name in values:
            values[name] = _parse_number(name, values[name], float)

    return ApplianceConfig(**values)


def _build_credentials(data: Mapping[str, Any]) -> CredentialContext:
    return CredentialContext(**{name: data.get(name) for name in _CREDENTIAL_FIELDS})


def load_config_from_dict(data: Dict[str, Any]) -> SDKConfig:
    """
    Build configuration from a parsed dictionary.

    Raises:
        ConfigurationError: If required sections or fields are missing or invalid
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a JSON object")

    appliance = data.get('appliance')
    credentials = data.get('credentials')
    if not isinstance(appliance, dict) or not isinstance(credentials, dict):
        raise ConfigurationError(
            "Configuration requires 'appliance' and 'credentials' sections",
            SARestErrorCodes.INVALID_CONFIG,
            {"sections": sorted(data.keys())}
        )

    logging_data = data.get('logging') or {}
    return SDKConfig(
        appliance=_build_appliance(appliance),
        credentials=_build_credentials(credentials),
        logging=LoggingConfig(**({'level': logging_data['level']} if 'level' in logging_data else {}))
    )


def load_config_from_json(json_string: str) -> SDKConfig:
    """Load configuration from a JSON string."""
    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Failed to parse configuration JSON: {e}",
            SARestErrorCodes.CONFIG_SOURCE_ERROR
        ) from e
    return load_config_from_dict(data)


def load_config_from_file(file_path: Union[str, Path]) -> SDKConfig:
    """Load configuration from a JSON file."""
    path = Path(file_path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            json_string = f.read()
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            SARestErrorCodes.CONFIG_SOURCE_ERROR,
            {"path": str(path)}
        ) from e
    return load_config_from_json(json_string)


def load_config_from_env(environ: Optional[Mapping[str, str]] = None) -> SDKConfig:
    """
    Load configuration from SAREST_* environment variables.

    Args:
        environ: Mapping to read instead of os.environ

    Returns:
        SDKConfig: Loaded configuration
    """
    environ = os.environ if environ is None else environ

    def read(name: str) -> Optional[str]:
        return environ.get(ENV_PREFIX + name.upper())

    appliance = {name: read(name) for name in _APPLIANCE_FIELDS}
    credentials = {name: read(name) for name in _CREDENTIAL_FIELDS}
    log_level = read('log_level')

    return SDKConfig(
        appliance=_build_appliance(appliance),
        credentials=_build_credentials(credentials),
        logging=LoggingConfig(level=log_level) if log_level else LoggingConfig()
    )


def load_credentials_from_env(environ: Optional[Mapping[str, str]] = None) -> CredentialContext:
    """Load only the application credentials from SAREST_* environment variables."""
    environ = os.environ if environ is None else environ
    return _build_credentials({name: environ.get(ENV_PREFIX + name.upper()) for name in _CREDENTIAL_FIELDS})
