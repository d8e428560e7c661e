"""
Configuration management for SecureAuth REST Python SDK

This module loads appliance settings and application credentials from
dictionaries, JSON files and the environment.
"""

from .sdk_config import (
    SDKConfig,
    LoggingConfig,
    ENV_PREFIX,
    load_config_from_dict,
    load_config_from_json,
    load_config_from_file,
    load_config_from_env,
    load_credentials_from_env,
)

__all__ = [
    'SDKConfig',
    'LoggingConfig',
    'ENV_PREFIX',
    'load_config_from_dict',
    'load_config_from_json',
    'load_config_from_file',
    'load_config_from_env',
    'load_credentials_from_env',
]
