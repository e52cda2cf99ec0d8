"""
AWS Signature Version 4 signer for S3-compatible endpoints

This module turns a canonical request into a SigV4 signature and the
Authorization header value, and sequences the whole pipeline for one
request: timestamp, canonical request, string-to-sign, HMAC signature and
token. Signing is stateless; identical inputs always produce identical
headers.
"""

import logging
from typing import List, Optional, Tuple, Union

from ..crypto.hash_engine import HashEngine, get_default_hash_engine
from ..exceptions import UnsupportedPlatformError, S3AuthSDKError
from .types import (
    RequestView,
    HeaderPair,
    CanonicalRequestDetails,
    SignedRequestDetails,
    SigningConfig,
    SigV4SignatureResult,
    SigningError,
    SigningErrorCodes,
)
from .utils import (
    format_amz_date,
    generate_timestamp,
    validate_timestamp,
    PerformanceTimer,
)
from .canonical_request import make_canonical_request
from .signing_config import validate_signing_config

logger = logging.getLogger(__name__)

ALGORITHM = "AWS4-HMAC-SHA256"
AUTHZ_HEADER = "Authorization"


def compute_request_time(start_sec: int) -> str:
    """
    Format the request start time for the x-amz-date header.

    Args:
        start_sec: Request start time in epoch seconds

    Returns:
        str: YYYYMMDDTHHMMSSZ date-time string

    Raises:
        SigningError: If the timestamp is not a non-negative integer
    """
    if not validate_timestamp(start_sec):
        raise SigningError(
            f"Invalid timestamp: {start_sec}",
            SigningErrorCodes.INVALID_TIMESTAMP,
            {"timestamp": start_sec}
        )
    return format_amz_date(start_sec)


def build_string_to_sign(key_scope: str, date: str, canonical_request_hash: str) -> str:
    """
    Build the SigV4 string-to-sign.

    Args:
        key_scope: "<date>/<region>/<service>/aws4_request"
        date: SigV4 date-time string
        canonical_request_hash: Hex SHA-256 of the canonical request

    Returns:
        str: String-to-sign
    """
    return f"{ALGORITHM}\n{date}\n{key_scope}\n{canonical_request_hash}"


def make_auth_token(
    signature: str,
    signed_header_names: str,
    access_key_id: str,
    key_scope: str
) -> str:
    """
    Build the Authorization header value.

    Args:
        signature: Hex signature
        signed_header_names: ";"-joined signed header names
        access_key_id: Access key ID
        key_scope: Key scope of the signing key

    Returns:
        str: Authorization header value
    """
    return (
        f"{ALGORITHM} Credential={access_key_id}/{key_scope},"
        f"SignedHeaders={signed_header_names},"
        f"Signature={signature}"
    )


def _engine_or_default(engine: Optional[HashEngine]) -> HashEngine:
    if engine is not None:
        return engine
    try:
        return get_default_hash_engine()
    except UnsupportedPlatformError as e:
        raise SigningError(
            f"Cryptography not available: {e}",
            SigningErrorCodes.CRYPTOGRAPHY_UNAVAILABLE,
            {"original_error": str(e)}
        )


def _sign_string(engine: HashEngine, signing_key: bytes, string_to_sign: str) -> str:
    try:
        return engine.hmac_sha256_hex(signing_key, string_to_sign)
    except Exception as e:
        raise SigningError(
            f"Signature computation failed: {e}",
            SigningErrorCodes.CRYPTO_ERROR,
            {"original_error": str(e)}
        )


def _signature_steps(
    request: RequestView,
    date: str,
    signing_key: bytes,
    key_scope: str,
    endpoint: str,
    engine: HashEngine
) -> Tuple[CanonicalRequestDetails, str, SignedRequestDetails]:
    canonical = make_canonical_request(request, date, endpoint)
    canonical_request_hash = engine.sha256_hex(canonical.canonical_request)
    string_to_sign = build_string_to_sign(key_scope, date, canonical_request_hash)
    signature = _sign_string(engine, signing_key, string_to_sign)

    details = SignedRequestDetails(
        signature=signature,
        signed_header_names=canonical.signed_header_names,
        header_list=canonical.header_list
    )
    return canonical, string_to_sign, details


def compute_signature(
    request: RequestView,
    signing_key: bytes,
    key_scope: str,
    endpoint: str,
    engine: Optional[HashEngine] = None
) -> SignedRequestDetails:
    """
    Compute the SigV4 signature for a request.

    Args:
        request: Request to sign; start_sec is used as the request time
        signing_key: Pre-derived signing key
        key_scope: Key scope of the signing key
        endpoint: Host the request is sent to
        engine: Hash engine to use (default engine if None)

    Returns:
        SignedRequestDetails: Signature with the signed header data

    Raises:
        SigningError: If signing fails
    """
    engine = _engine_or_default(engine)
    date = compute_request_time(request.start_sec)
    _, _, details = _signature_steps(request, date, signing_key, key_scope, endpoint, engine)
    return details


def sign(
    request: RequestView,
    access_key_id: str,
    signing_key: bytes,
    key_scope: str,
    endpoint: str,
    engine: Optional[HashEngine] = None
) -> List[HeaderPair]:
    """
    Sign a request and return the headers to attach.

    Args:
        request: Request to sign
        access_key_id: Access key ID
        signing_key: Pre-derived signing key
        key_scope: Key scope of the signing key
        endpoint: Host the request is sent to
        engine: Hash engine to use (default engine if None)

    Returns:
        list: host, x-amz-content-sha256 and x-amz-date headers followed
        by Authorization
    """
    details = compute_signature(request, signing_key, key_scope, endpoint, engine)
    token = make_auth_token(details.signature, details.signed_header_names, access_key_id, key_scope)

    headers = list(details.header_list)
    headers.append(HeaderPair(AUTHZ_HEADER, token))
    return headers


class SigV4Signer:
    """
    SigV4 request signer

    This class signs S3 requests with the access key ID and signing key
    provider from a SigningConfig. Every call is independent: nothing is
    cached or retried between requests.
    """

    def __init__(self, config: SigningConfig, engine: Optional[HashEngine] = None):
        """
        Initialize the signer with configuration.

        Args:
            config: Signing configuration
            engine: Hash engine to use (default engine if None)

        Raises:
            SigningError: If configuration is invalid
        """
        validate_signing_config(config)
        self.config = config
        self.engine = _engine_or_default(engine)

    def sign_request(
        self,
        request: RequestView,
        endpoint: Optional[str] = None
    ) -> SigV4SignatureResult:
        """
        Sign a request.

        Args:
            request: Request to sign
            endpoint: Host override (defaults to the configured endpoint)

        Returns:
            SigV4SignatureResult: Headers and intermediate signing values

        Raises:
            SigningError: If signing fails
        """
        timer = PerformanceTimer()

        try:
            host = endpoint or self.config.endpoint
            if not host:
                raise SigningError(
                    "No endpoint configured and none given for request",
                    SigningErrorCodes.MISSING_ENDPOINT
                )

            # A bad timestamp is rejected before the key provider is asked
            date = compute_request_time(request.start_sec)
            key = self.config.key_provider.get_signing_key(request.start_sec)

            canonical, string_to_sign, details = _signature_steps(
                request, date, key.signing_key, key.key_scope, host, self.engine
            )
            authorization = make_auth_token(
                details.signature,
                details.signed_header_names,
                self.config.access_key_id,
                key.key_scope
            )

            headers = list(details.header_list)
            headers.append(HeaderPair(AUTHZ_HEADER, authorization))

            logger.debug(f"Canonical request:\n{canonical.canonical_request}")
            logger.debug(f"String to sign:\n{string_to_sign}")

            elapsed_ms = timer.elapsed_ms()
            if elapsed_ms > 10:
                logger.warning(f"Signing operation took {elapsed_ms:.2f}ms (target: <10ms)")

            return SigV4SignatureResult(
                authorization=authorization,
                signature=details.signature,
                headers=headers,
                canonical_request=canonical.canonical_request,
                string_to_sign=string_to_sign
            )

        except SigningError:
            raise
        except S3AuthSDKError as e:
            raise SigningError(
                f"Signing key unavailable: {e}",
                SigningErrorCodes.INVALID_SIGNING_KEY,
                {"original_error": str(e), "error_code": e.error_code}
            )
        except Exception as e:
            raise SigningError(
                f"Request signing failed: {e}",
                SigningErrorCodes.SIGNING_FAILED,
                {"original_error": str(e)}
            )

    def sign(
        self,
        method: str,
        path: Union[str, bytes],
        query_string: Union[str, bytes] = "",
        endpoint: Optional[str] = None,
        start_sec: Optional[int] = None
    ) -> SigV4SignatureResult:
        """
        Sign a request given as its parts.

        Args:
            method: HTTP method
            path: Request path without query string
            query_string: Raw query string
            endpoint: Host override
            start_sec: Request time (config timestamp generator if None)

        Returns:
            SigV4SignatureResult: Signing result
        """
        if start_sec is None:
            start_sec = self.current_timestamp()

        try:
            request = RequestView(
                method=method,
                path=path,
                query_string=query_string,
                start_sec=start_sec
            )
        except ValueError as e:
            raise SigningError(
                f"Invalid request: {e}",
                SigningErrorCodes.INVALID_REQUEST,
                {"original_error": str(e)}
            )

        return self.sign_request(request, endpoint)

    def current_timestamp(self) -> int:
        """Request time from the configured generator, or the current time."""
        timestamp_gen = self.config.timestamp_generator or generate_timestamp
        return timestamp_gen()


def create_signer(config: SigningConfig, engine: Optional[HashEngine] = None) -> SigV4Signer:
    """
    Create a new SigV4 signer.

    Args:
        config: Signing configuration
        engine: Optional hash engine

    Returns:
        SigV4Signer: Configured signer instance
    """
    return SigV4Signer(config, engine)


def sign_request(
    request: RequestView,
    config: SigningConfig,
    endpoint: Optional[str] = None
) -> SigV4SignatureResult:
    """
    Sign a request with the given configuration.

    Args:
        request: Request to sign
        config: Signing configuration
        endpoint: Optional host override

    Returns:
        SigV4SignatureResult: Signing result
    """
    signer = create_signer(config)
    return signer.sign_request(request, endpoint)
