"""
S3 Auth Python SDK - Request Signing Module

AWS Signature Version 4 implementation for S3-compatible endpoints.
This module builds canonical requests, signs them with a pre-derived
signing key and produces the headers to attach to outbound requests.
"""

from .types import (
    RequestView,
    HeaderPair,
    CanonicalHeaderDetails,
    CanonicalRequestDetails,
    SignedRequestDetails,
    SigningConfig,
    SigV4SignatureResult,
    SigningError,
    SigningErrorCodes,
    HttpMethod,
)

from .canonical_request import (
    CanonicalRequestBuilder,
    make_canonical_request,
    canonicalize_query_string,
    canonicalize_headers,
    canonical_uri,
    EMPTY_STRING_SHA256,
)

from .sigv4_signer import (
    SigV4Signer,
    create_signer,
    sign_request,
    sign,
    compute_signature,
    build_string_to_sign,
    make_auth_token,
    compute_request_time,
)

from .signing_config import (
    SigningConfigBuilder,
    create_signing_config,
    validate_signing_config,
)

from .utils import (
    generate_timestamp,
    validate_timestamp,
    format_amz_date,
    format_date_stamp,
    compare_names,
    uri_encode,
    uri_encode_path,
    parse_url,
)

from .integration import (
    S3SigV4Auth,
    HttpxSigV4Auth,
    SigningSession,
    create_signing_session,
    sign_prepared_request,
)

# Public API exports
__all__ = [
    # Core signing functionality
    'SigV4Signer',
    'create_signer',
    'sign_request',
    'sign',
    'compute_signature',
    'build_string_to_sign',
    'make_auth_token',
    'compute_request_time',
    # Canonical request
    'CanonicalRequestBuilder',
    'make_canonical_request',
    'canonicalize_query_string',
    'canonicalize_headers',
    'canonical_uri',
    'EMPTY_STRING_SHA256',
    # Types
    'RequestView',
    'HeaderPair',
    'CanonicalHeaderDetails',
    'CanonicalRequestDetails',
    'SignedRequestDetails',
    'SigningConfig',
    'SigV4SignatureResult',
    'SigningError',
    'SigningErrorCodes',
    'HttpMethod',
    # Configuration
    'SigningConfigBuilder',
    'create_signing_config',
    'validate_signing_config',
    # Utilities
    'generate_timestamp',
    'validate_timestamp',
    'format_amz_date',
    'format_date_stamp',
    'compare_names',
    'uri_encode',
    'uri_encode_path',
    'parse_url',
    # HTTP Integration
    'S3SigV4Auth',
    'HttpxSigV4Auth',
    'SigningSession',
    'create_signing_session',
    'sign_prepared_request',
]
