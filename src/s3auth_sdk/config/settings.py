"""
Settings management for S3 Auth Python SDK

Loads signer settings from JSON documents, files or environment variables
and converts them to a SigningConfig. A settings document names the S3
endpoint, the access key ID and either a pre-derived signing key with its
key scope or a secret access key with region and service:

    {
        "endpoint": "mybucket.s3.amazonaws.com",
        "access_key_id": "AKIDEXAMPLE",
        "signing_key": "k4EntTNoEN22pdavRF/KyeNx+e1BjtOGsCKu2CkBvnU=",
        "key_scope": "20150830/us-east-1/s3/aws4_request",
        "logging": {"level": "INFO", "structured": false}
    }
"""

import os
import json
import logging
from typing import Dict, Optional, Any, Mapping, Union
from dataclasses import dataclass, field
from pathlib import Path

from ..crypto.derivation import DEFAULT_SERVICE
from ..signing.types import SigningConfig
from ..signing.signing_config import create_signing_config

logger = logging.getLogger(__name__)

ENV_PREFIX = "S3AUTH_"

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

PLAIN_LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'
STRUCTURED_LOG_FORMAT = 'time=%(asctime)s level=%(levelname)s logger=%(name)s msg="%(message)s"'

_SETTINGS_FIELDS = (
    'endpoint',
    'access_key_id',
    'signing_key',
    'key_scope',
    'secret_access_key',
    'region',
    'service',
)


class SettingsError(Exception):
    """Settings loading and validation error"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


@dataclass
class LoggingSettings:
    """Logging configuration"""
    level: str = "INFO"
    structured: bool = False


@dataclass
class S3AuthSettings:
    """
    Signer settings as stored on disk or in the environment

    Attributes:
        endpoint: S3 host signed as the "host" header
        access_key_id: Access key ID
        signing_key: Base64 pre-derived signing key
        key_scope: Key scope of signing_key
        secret_access_key: Secret access key, used when no signing key is set
        region: Region for key derivation
        service: Service for key derivation
        logging: Logging configuration
    """
    endpoint: Optional[str] = None
    access_key_id: Optional[str] = None
    signing_key: Optional[str] = field(default=None, repr=False)
    key_scope: Optional[str] = None
    secret_access_key: Optional[str] = field(default=None, repr=False)
    region: Optional[str] = None
    service: str = DEFAULT_SERVICE
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @property
    def uses_static_key(self) -> bool:
        return self.signing_key is not None

    def validate(self) -> None:
        """
        Check that the settings describe a usable signer.

        Raises:
            SettingsError: If a required field is missing or a value is invalid
        """
        if not self.access_key_id:
            raise SettingsError("access_key_id is required", "MISSING_FIELD")

        if self.uses_static_key:
            if not self.key_scope:
                raise SettingsError("key_scope is required with signing_key", "MISSING_FIELD")
        elif self.secret_access_key:
            if not self.region:
                raise SettingsError("region is required with secret_access_key", "MISSING_FIELD")
        else:
            raise SettingsError(
                "Either signing_key or secret_access_key is required",
                "MISSING_FIELD"
            )

        if self.logging.level.upper() not in LOG_LEVELS:
            raise SettingsError(f"Unknown log level: {self.logging.level}", "INVALID_VALUE")

    def to_signing_config(self) -> SigningConfig:
        """
        Convert to a signing configuration.

        Returns:
            SigningConfig: Signing configuration

        Raises:
            SettingsError: If settings are incomplete
            SigningError: If a key, scope or endpoint is rejected by the signer
        """
        self.validate()

        builder = create_signing_config().access_key_id(self.access_key_id)
        if self.endpoint:
            builder.endpoint(self.endpoint)

        if self.uses_static_key:
            builder.signing_key_base64(self.signing_key, self.key_scope)
        else:
            builder.secret_key(self.secret_access_key, self.region, self.service)

        return builder.build()


def _parse_settings_dict(data: Mapping[str, Any]) -> S3AuthSettings:
    if not isinstance(data, Mapping):
        raise SettingsError("Settings must be a JSON object", "INVALID_FORMAT")

    unknown = set(data) - set(_SETTINGS_FIELDS) - {'logging'}
    if unknown:
        raise SettingsError(f"Unknown settings fields: {sorted(unknown)}", "INVALID_FORMAT")

    values = {}
    for name in _SETTINGS_FIELDS:
        value = data.get(name)
        if value is None:
            continue
        if not isinstance(value, str):
            raise SettingsError(f"{name} must be a string", "INVALID_FORMAT")
        values[name] = value

    logging_data = data.get('logging') or {}
    if not isinstance(logging_data, Mapping):
        raise SettingsError("logging must be an object", "INVALID_FORMAT")
    if not isinstance(logging_data.get('level', ''), str):
        raise SettingsError("logging.level must be a string", "INVALID_FORMAT")
    if not isinstance(logging_data.get('structured', False), bool):
        raise SettingsError("logging.structured must be a boolean", "INVALID_FORMAT")

    try:
        values['logging'] = LoggingSettings(**logging_data)
    except TypeError as e:
        raise SettingsError(f"Invalid logging settings: {e}", "INVALID_FORMAT")

    return S3AuthSettings(**values)


def load_settings_from_json(json_string: str) -> S3AuthSettings:
    """
    Load settings from a JSON string.

    Args:
        json_string: JSON settings document

    Returns:
        S3AuthSettings: Parsed settings

    Raises:
        SettingsError: If the document cannot be parsed
    """
    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise SettingsError(f"Failed to parse settings JSON: {e}", "PARSE_ERROR")

    return _parse_settings_dict(data)


def load_settings_from_file(file_path: Union[str, Path]) -> S3AuthSettings:
    """
    Load settings from a JSON file.

    Args:
        file_path: Path to the settings file

    Returns:
        S3AuthSettings: Parsed settings

    Raises:
        SettingsError: If the file cannot be read or parsed
    """
    path = Path(file_path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            json_string = f.read()
    except OSError as e:
        raise SettingsError(f"Failed to read settings file: {e}", "FILE_ERROR")

    settings = load_settings_from_json(json_string)
    logger.info(f"Loaded settings from {path}")
    return settings


def load_settings_from_env(
    environ: Optional[Mapping[str, str]] = None,
    prefix: str = ENV_PREFIX
) -> S3AuthSettings:
    """
    Load settings from environment variables.

    Reads <prefix>ENDPOINT, <prefix>ACCESS_KEY_ID, <prefix>SIGNING_KEY,
    <prefix>KEY_SCOPE, <prefix>SECRET_ACCESS_KEY, <prefix>REGION,
    <prefix>SERVICE and <prefix>LOG_LEVEL.

    Args:
        environ: Mapping to read from (os.environ if None)
        prefix: Variable name prefix

    Returns:
        S3AuthSettings: Parsed settings
    """
    if environ is None:
        environ = os.environ

    data: Dict[str, Any] = {}
    for name in _SETTINGS_FIELDS:
        value = environ.get(f"{prefix}{name.upper()}")
        if value:
            data[name] = value

    log_level = environ.get(f"{prefix}LOG_LEVEL")
    if log_level:
        data['logging'] = {'level': log_level}

    settings = _parse_settings_dict(data)
    logger.info(f"Loaded settings from environment ({prefix}*)")
    return settings


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Configure root logging for command-line use.

    Args:
        settings: Logging settings (defaults if None)

    Raises:
        SettingsError: If the log level is unknown
    """
    settings = settings or LoggingSettings()
    level = settings.level.upper()
    if level not in LOG_LEVELS:
        raise SettingsError(f"Unknown log level: {settings.level}", "INVALID_VALUE")

    logging.basicConfig(
        level=getattr(logging, level),
        format=STRUCTURED_LOG_FORMAT if settings.structured else PLAIN_LOG_FORMAT,
        force=True
    )
