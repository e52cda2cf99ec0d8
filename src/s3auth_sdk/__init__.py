"""
S3 Auth Python SDK
AWS Signature Version 4 request signing for S3-compatible endpoints
"""

from .version import __version__
from .crypto.hash_engine import (
    HashEngine,
    get_default_hash_engine,
    hash_sha256,
    hash_sha256_hex,
    hmac_sha256,
    hmac_sha256_hex,
    check_platform_compatibility,
)
from .crypto.derivation import (
    DerivedSigningKey,
    SigningKeyProvider,
    StaticSigningKeyProvider,
    SecretKeySigningKeyProvider,
    build_key_scope,
    validate_key_scope,
    derive_signing_key,
    parse_signing_key,
)
from .exceptions import (
    S3AuthSDKError,
    ValidationError,
    UnsupportedPlatformError,
    KeyDerivationError,
    ServerCommunicationError,
)
from .signing import (
    # Core signing functionality
    SigV4Signer,
    create_signer,
    sign_request,
    sign,
    compute_signature,
    build_string_to_sign,
    make_auth_token,
    # Canonical request
    make_canonical_request,
    canonicalize_query_string,
    canonicalize_headers,
    canonical_uri,
    # Types
    RequestView,
    HeaderPair,
    CanonicalRequestDetails,
    SignedRequestDetails,
    SigningConfig,
    SigV4SignatureResult,
    SigningError,
    SigningErrorCodes,
    HttpMethod,
    # Configuration
    SigningConfigBuilder,
    create_signing_config,
    # Utilities
    generate_timestamp,
    format_amz_date,
    parse_url,
    # HTTP Integration
    S3SigV4Auth,
    HttpxSigV4Auth,
    SigningSession,
    create_signing_session,
    sign_prepared_request,
)
from .config import (
    S3AuthSettings,
    LoggingSettings,
    SettingsError,
    load_settings_from_json,
    load_settings_from_file,
    load_settings_from_env,
    configure_logging,
)


# Initialize the SDK
def initialize_sdk():
    """
    Initialize the S3 Auth SDK and check platform compatibility.

    Returns:
        dict: Compatibility information with 'compatible' (bool) and 'warnings' (list)
    """
    warnings = []
    compatible = True

    try:
        compat_info = check_platform_compatibility()
        if not compat_info['cryptography_available']:
            warnings.append('Cryptography package not available - request signing will fail')
            compatible = False

        if not compat_info['sha256_supported']:
            warnings.append('SHA-256/HMAC not supported by cryptography package - check version')
            compatible = False

    except Exception as e:
        warnings.append(f'Platform compatibility check failed: {e}')
        compatible = False

    return {
        'compatible': compatible,
        'warnings': warnings
    }


def is_compatible():
    """
    Quick synchronous compatibility check.

    Returns:
        bool: True if platform is compatible with request signing
    """
    return initialize_sdk()['compatible']


# Public API exports
__all__ = [
    '__version__',
    'initialize_sdk',
    'is_compatible',
    # Hash engine
    'HashEngine',
    'get_default_hash_engine',
    'hash_sha256',
    'hash_sha256_hex',
    'hmac_sha256',
    'hmac_sha256_hex',
    'check_platform_compatibility',
    # Signing keys
    'DerivedSigningKey',
    'SigningKeyProvider',
    'StaticSigningKeyProvider',
    'SecretKeySigningKeyProvider',
    'build_key_scope',
    'validate_key_scope',
    'derive_signing_key',
    'parse_signing_key',
    # Exceptions
    'S3AuthSDKError',
    'ValidationError',
    'UnsupportedPlatformError',
    'KeyDerivationError',
    'ServerCommunicationError',
    # Request Signing - Core
    'SigV4Signer',
    'create_signer',
    'sign_request',
    'sign',
    'compute_signature',
    'build_string_to_sign',
    'make_auth_token',
    'make_canonical_request',
    'canonicalize_query_string',
    'canonicalize_headers',
    'canonical_uri',
    # Request Signing - Types
    'RequestView',
    'HeaderPair',
    'CanonicalRequestDetails',
    'SignedRequestDetails',
    'SigningConfig',
    'SigV4SignatureResult',
    'SigningError',
    'SigningErrorCodes',
    'HttpMethod',
    # Request Signing - Configuration
    'SigningConfigBuilder',
    'create_signing_config',
    # Request Signing - Utilities
    'generate_timestamp',
    'format_amz_date',
    'parse_url',
    # Request Signing - HTTP Integration
    'S3SigV4Auth',
    'HttpxSigV4Auth',
    'SigningSession',
    'create_signing_session',
    'sign_prepared_request',
    # Settings
    'S3AuthSettings',
    'LoggingSettings',
    'SettingsError',
    'load_settings_from_json',
    'load_settings_from_file',
    'load_settings_from_env',
    'configure_logging',
]
