"""
Cryptographic operations for S3 Auth Python SDK
"""

from .hash_engine import (
    HashEngine,
    get_default_hash_engine,
    hash_sha256,
    hash_sha256_hex,
    hmac_sha256,
    hmac_sha256_hex,
    check_platform_compatibility,
    CRYPTOGRAPHY_AVAILABLE,
)

from .derivation import (
    DerivedSigningKey,
    SigningKeyProvider,
    StaticSigningKeyProvider,
    SecretKeySigningKeyProvider,
    build_key_scope,
    validate_key_scope,
    derive_signing_key,
    parse_signing_key,
)

__all__ = [
    # Hash engine
    'HashEngine',
    'get_default_hash_engine',
    'hash_sha256',
    'hash_sha256_hex',
    'hmac_sha256',
    'hmac_sha256_hex',
    'check_platform_compatibility',
    'CRYPTOGRAPHY_AVAILABLE',

    # Signing key derivation
    'DerivedSigningKey',
    'SigningKeyProvider',
    'StaticSigningKeyProvider',
    'SecretKeySigningKeyProvider',
    'build_key_scope',
    'validate_key_scope',
    'derive_signing_key',
    'parse_signing_key',
]
