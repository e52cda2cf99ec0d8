"""
Signing key derivation for S3 Auth Python SDK

This module derives SigV4 signing keys from an AWS secret access key using
the HMAC-SHA256 chain secret -> date -> region -> service -> aws4_request,
and provides the key providers the signer consumes. The signing pipeline
itself only ever sees the final signing key and its key scope.
"""

import re
import time
import base64
import binascii
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from ..exceptions import KeyDerivationError, ValidationError
from .hash_engine import HashEngine, get_default_hash_engine, SHA256_DIGEST_LENGTH

logger = logging.getLogger(__name__)

# Terminator of every SigV4 key scope
KEY_SCOPE_TERMINATOR = 'aws4_request'

# Default service for S3-compatible endpoints
DEFAULT_SERVICE = 's3'

DATE_STAMP_FORMAT = '%Y%m%d'

_DATE_STAMP_PATTERN = re.compile(r'^\d{8}$')
_KEY_SCOPE_PATTERN = re.compile(r'^\d{8}/[^/\s]+/[^/\s]+/aws4_request$')


@dataclass(frozen=True)
class DerivedSigningKey:
    """
    A signing key together with the key scope it is valid for

    Attributes:
        signing_key: 32-byte HMAC key used to sign string-to-sign values
        key_scope: "<date>/<region>/<service>/aws4_request"
    """
    signing_key: bytes = field(repr=False)
    key_scope: str

    def __post_init__(self):
        """Validate key after initialization"""
        if not isinstance(self.signing_key, bytes) or not self.signing_key:
            raise ValidationError("Signing key must be non-empty bytes", "INVALID_SIGNING_KEY")

        if not isinstance(self.key_scope, str) or not self.key_scope:
            raise ValidationError("Key scope must be a non-empty string", "INVALID_KEY_SCOPE")

    @property
    def date_stamp(self) -> str:
        """Date portion (YYYYMMDD) of the key scope."""
        return self.key_scope.split('/', 1)[0]

    def to_base64(self) -> str:
        """Signing key as base64 text, the form used in configuration files."""
        return base64.b64encode(self.signing_key).decode('ascii')


def build_key_scope(date_stamp: str, region: str, service: str = DEFAULT_SERVICE) -> str:
    """
    Build a SigV4 key scope.

    Args:
        date_stamp: Date in YYYYMMDD format
        region: Region name (e.g. "us-east-1")
        service: Service name

    Returns:
        str: "<date>/<region>/<service>/aws4_request"

    Raises:
        ValidationError: If any component is malformed
    """
    if not isinstance(date_stamp, str) or not _DATE_STAMP_PATTERN.match(date_stamp):
        raise ValidationError(f"Date stamp must be YYYYMMDD, got: {date_stamp!r}", "INVALID_DATE_STAMP")

    for name, value in (('region', region), ('service', service)):
        if not isinstance(value, str) or not value or '/' in value:
            raise ValidationError(f"Invalid {name}: {value!r}", f"INVALID_{name.upper()}")

    return f"{date_stamp}/{region}/{service}/{KEY_SCOPE_TERMINATOR}"


def validate_key_scope(key_scope: str) -> bool:
    """
    Validate key scope format.

    Args:
        key_scope: Key scope to validate

    Returns:
        bool: True if key scope looks like "<date>/<region>/<service>/aws4_request"
    """
    if not isinstance(key_scope, str):
        return False

    return bool(_KEY_SCOPE_PATTERN.match(key_scope))


def derive_signing_key(
    secret_access_key: str,
    date_stamp: str,
    region: str,
    service: str = DEFAULT_SERVICE,
    engine: Optional[HashEngine] = None
) -> bytes:
    """
    Derive a SigV4 signing key from a secret access key.

    Args:
        secret_access_key: AWS secret access key
        date_stamp: Date in YYYYMMDD format
        region: Region name
        service: Service name
        engine: Hash engine to use (default engine if None)

    Returns:
        bytes: 32-byte signing key

    Raises:
        KeyDerivationError: If derivation fails
    """
    if not secret_access_key or not isinstance(secret_access_key, str):
        raise KeyDerivationError("Secret access key must be a non-empty string", "INVALID_SECRET_KEY")

    try:
        # validates date, region and service
        build_key_scope(date_stamp, region, service)
    except ValidationError as e:
        raise KeyDerivationError(str(e), e.error_code, e.details)

    engine = engine or get_default_hash_engine()

    try:
        k_date = engine.hmac_sha256(f"AWS4{secret_access_key}", date_stamp)
        k_region = engine.hmac_sha256(k_date, region)
        k_service = engine.hmac_sha256(k_region, service)
        return engine.hmac_sha256(k_service, KEY_SCOPE_TERMINATOR)
    except Exception as e:
        raise KeyDerivationError(
            f"Signing key derivation failed: {e}",
            "DERIVATION_FAILED",
            {"original_error": str(e)}
        )


def parse_signing_key(encoded_key: str) -> bytes:
    """
    Decode a base64 signing key.

    Args:
        encoded_key: Base64 encoded signing key

    Returns:
        bytes: Raw signing key

    Raises:
        KeyDerivationError: If the value is not valid base64 or has the wrong length
    """
    if not isinstance(encoded_key, str) or not encoded_key.strip():
        raise KeyDerivationError("Signing key must be a non-empty base64 string", "INVALID_SIGNING_KEY")

    try:
        key = base64.b64decode(encoded_key.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise KeyDerivationError(
            f"Signing key is not valid base64: {e}",
            "INVALID_SIGNING_KEY_ENCODING"
        )

    if len(key) != SHA256_DIGEST_LENGTH:
        raise KeyDerivationError(
            f"Signing key must be exactly {SHA256_DIGEST_LENGTH} bytes, got {len(key)}",
            "INVALID_SIGNING_KEY_LENGTH"
        )

    return key


class SigningKeyProvider(ABC):
    """
    Source of signing keys for the signer

    Implementations must never log or persist key material.
    """

    @abstractmethod
    def get_signing_key(self, start_sec: int) -> DerivedSigningKey:
        """
        Get the signing key to use for a request.

        Args:
            start_sec: Request start time in epoch seconds

        Returns:
            DerivedSigningKey: Signing key and its key scope
        """


class StaticSigningKeyProvider(SigningKeyProvider):
    """
    Provider for a signing key derived ahead of time

    The key is tied to the date in its key scope and has to be regenerated
    and redeployed before S3 stops accepting it.
    """

    def __init__(self, signing_key: bytes, key_scope: str):
        """
        Initialize provider.

        Args:
            signing_key: Pre-derived signing key
            key_scope: Key scope the signing key was derived for
        """
        self._key = DerivedSigningKey(signing_key=signing_key, key_scope=key_scope)

    @classmethod
    def from_base64(cls, encoded_key: str, key_scope: str) -> 'StaticSigningKeyProvider':
        """Create a provider from a base64 signing key."""
        return cls(parse_signing_key(encoded_key), key_scope)

    @property
    def key_scope(self) -> str:
        return self._key.key_scope

    def get_signing_key(self, start_sec: int) -> DerivedSigningKey:
        return self._key

    def __repr__(self) -> str:
        return f"StaticSigningKeyProvider(key_scope='{self._key.key_scope}')"


class SecretKeySigningKeyProvider(SigningKeyProvider):
    """
    Provider deriving the signing key from a secret access key per request date
    """

    def __init__(
        self,
        secret_access_key: str,
        region: str,
        service: str = DEFAULT_SERVICE,
        engine: Optional[HashEngine] = None
    ):
        """
        Initialize provider.

        Args:
            secret_access_key: AWS secret access key
            region: Region name
            service: Service name
            engine: Hash engine to use (default engine if None)

        Raises:
            KeyDerivationError: If any parameter is invalid
        """
        if not secret_access_key or not isinstance(secret_access_key, str):
            raise KeyDerivationError("Secret access key must be a non-empty string", "INVALID_SECRET_KEY")

        try:
            build_key_scope('19700101', region, service)
        except ValidationError as e:
            raise KeyDerivationError(str(e), e.error_code, e.details)

        self._secret_access_key = secret_access_key
        self.region = region
        self.service = service
        self._engine = engine

    def get_signing_key(self, start_sec: int) -> DerivedSigningKey:
        date_stamp = time.strftime(DATE_STAMP_FORMAT, time.gmtime(start_sec))
        signing_key = derive_signing_key(
            self._secret_access_key,
            date_stamp,
            self.region,
            self.service,
            self._engine
        )
        logger.debug(f"Derived signing key for {date_stamp}/{self.region}/{self.service}")

        return DerivedSigningKey(
            signing_key=signing_key,
            key_scope=build_key_scope(date_stamp, self.region, self.service)
        )

    def __repr__(self) -> str:
        return f"SecretKeySigningKeyProvider(region='{self.region}', service='{self.service}')"
