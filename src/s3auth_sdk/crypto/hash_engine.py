"""
SHA-256 and HMAC-SHA256 primitives for the S3 Auth Python SDK

This module wraps the cryptography package's hash and HMAC implementations
behind a small stateless engine. The SigV4 pipeline only ever needs two
operations, a SHA-256 digest and an HMAC-SHA256 over byte strings, each in
raw and lowercase hex form.
"""

import sys
import platform
from typing import Dict, Any, Union

# Import cryptography components
try:
    from cryptography.hazmat.primitives import hashes, hmac
    CRYPTOGRAPHY_AVAILABLE = True
except ImportError:
    CRYPTOGRAPHY_AVAILABLE = False
    hashes = None
    hmac = None

from ..exceptions import UnsupportedPlatformError

# Constants for SHA-256 operations
SHA256_DIGEST_LENGTH = 32
SHA256_HEX_LENGTH = 64

BytesLike = Union[str, bytes]


def _to_bytes(data: BytesLike) -> bytes:
    """Encode text as UTF-8, pass bytes through unchanged."""
    if isinstance(data, str):
        return data.encode('utf-8')
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"Expected str or bytes, got {type(data).__name__}")


class HashEngine:
    """
    Stateless SHA-256 / HMAC-SHA256 engine.

    A single instance can be shared freely between threads: every call
    builds its own hash context, nothing is cached on the instance.
    """

    def __init__(self):
        if not CRYPTOGRAPHY_AVAILABLE:
            raise UnsupportedPlatformError(
                "Cryptography package required for SHA-256 operations",
                "CRYPTOGRAPHY_UNAVAILABLE"
            )

    def sha256(self, data: BytesLike) -> bytes:
        """
        Compute the SHA-256 digest of data.

        Args:
            data: Bytes (or text, encoded as UTF-8) to hash

        Returns:
            bytes: 32-byte digest
        """
        digest = hashes.Hash(hashes.SHA256())
        digest.update(_to_bytes(data))
        return digest.finalize()

    def sha256_hex(self, data: BytesLike) -> str:
        """Compute the SHA-256 digest of data as 64 lowercase hex characters."""
        return self.sha256(data).hex()

    def hmac_sha256(self, key: BytesLike, data: BytesLike) -> bytes:
        """
        Compute HMAC-SHA256 of data under key.

        Args:
            key: HMAC key
            data: Message to authenticate

        Returns:
            bytes: 32-byte MAC
        """
        mac = hmac.HMAC(_to_bytes(key), hashes.SHA256())
        mac.update(_to_bytes(data))
        return mac.finalize()

    def hmac_sha256_hex(self, key: BytesLike, data: BytesLike) -> str:
        """Compute HMAC-SHA256 of data under key as 64 lowercase hex characters."""
        return self.hmac_sha256(key, data).hex()


def check_platform_compatibility() -> Dict[str, Any]:
    """
    Check platform compatibility for SHA-256 operations.

    Returns:
        dict: Compatibility information including cryptography availability,
              SHA-256 support and platform details
    """
    compatibility = {
        'cryptography_available': CRYPTOGRAPHY_AVAILABLE,
        'sha256_supported': False,
        'platform_info': {
            'system': platform.system(),
            'python_version': sys.version,
            'architecture': platform.architecture()[0],
        }
    }

    if CRYPTOGRAPHY_AVAILABLE:
        try:
            HashEngine().hmac_sha256(b'key', b'')
            compatibility['sha256_supported'] = True
        except Exception:
            compatibility['sha256_supported'] = False

    return compatibility


_default_engine = HashEngine() if CRYPTOGRAPHY_AVAILABLE else None


def get_default_hash_engine() -> HashEngine:
    """
    Get the process-wide hash engine.

    Raises:
        UnsupportedPlatformError: If the cryptography package is missing
    """
    if _default_engine is None:
        raise UnsupportedPlatformError(
            "Cryptography package required for SHA-256 operations",
            "CRYPTOGRAPHY_UNAVAILABLE"
        )
    return _default_engine


def hash_sha256(data: BytesLike) -> bytes:
    """SHA-256 digest using the default engine."""
    return get_default_hash_engine().sha256(data)


def hash_sha256_hex(data: BytesLike) -> str:
    """Hex SHA-256 digest using the default engine."""
    return get_default_hash_engine().sha256_hex(data)


def hmac_sha256(key: BytesLike, data: BytesLike) -> bytes:
    """HMAC-SHA256 using the default engine."""
    return get_default_hash_engine().hmac_sha256(key, data)


def hmac_sha256_hex(key: BytesLike, data: BytesLike) -> str:
    """Hex HMAC-SHA256 using the default engine."""
    return get_default_hash_engine().hmac_sha256_hex(key, data)
