"""
Configuration management for S3 Auth Python SDK

This module loads signer settings from JSON, files and environment
variables and configures logging for command-line use.
"""

from .settings import (
    S3AuthSettings,
    LoggingSettings,
    SettingsError,
    load_settings_from_json,
    load_settings_from_file,
    load_settings_from_env,
    configure_logging,
    ENV_PREFIX,
)

__all__ = [
    'S3AuthSettings',
    'LoggingSettings',
    'SettingsError',
    'load_settings_from_json',
    'load_settings_from_file',
    'load_settings_from_env',
    'configure_logging',
    'ENV_PREFIX',
]
