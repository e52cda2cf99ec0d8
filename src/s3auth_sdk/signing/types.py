"""
Type definitions for request signing functionality

This module provides type definitions and data classes for the AWS Signature
Version 4 signing pipeline used against S3-compatible endpoints.
"""

from typing import Dict, List, Optional, Tuple, Union, Callable, Any, TYPE_CHECKING
from dataclasses import dataclass
from enum import Enum

if TYPE_CHECKING:
    from ..crypto.derivation import SigningKeyProvider


class HttpMethod(str, Enum):
    """HTTP methods commonly signed for S3"""
    GET = "GET"
    HEAD = "HEAD"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True)
class RequestView:
    """
    Read-only projection of the request being signed

    Attributes:
        method: HTTP method name (e.g. "GET")
        path: Request path without the query string
        query_string: Raw query string without the leading "?"
        start_sec: Request start time in epoch seconds (UTC)
    """
    method: str
    path: Union[str, bytes]
    query_string: Union[str, bytes] = ""
    start_sec: int = 0

    def __post_init__(self):
        """Validate request view after initialization"""
        method = self.method.value if isinstance(self.method, HttpMethod) else self.method
        if not isinstance(method, str) or not method:
            raise ValueError("Request method must be a non-empty string")
        object.__setattr__(self, 'method', method)

        if not isinstance(self.path, (str, bytes)):
            raise ValueError("Request path must be str or bytes")

        if not isinstance(self.query_string, (str, bytes)):
            raise ValueError("Query string must be str or bytes")

        if not isinstance(self.start_sec, int) or isinstance(self.start_sec, bool):
            raise ValueError("Request start time must be an integer")


@dataclass(frozen=True)
class HeaderPair:
    """
    A name/value pair, used for query arguments and canonical headers

    Attributes:
        name: Header name or query key
        value: Header value or query value
    """
    name: str
    value: str


@dataclass(frozen=True)
class CanonicalHeaderDetails:
    """
    Canonicalized signed headers

    Attributes:
        canonical_header_str: "name:value\\n" for every header, in sorted order
        signed_header_names: ";"-joined header names, in sorted order
        header_list: Sorted header pairs
    """
    canonical_header_str: str
    signed_header_names: str
    header_list: Tuple[HeaderPair, ...]


@dataclass(frozen=True)
class CanonicalRequestDetails:
    """
    Canonical request and the header data reused by later stages

    Attributes:
        canonical_request: Newline-joined canonical request string
        signed_header_names: ";"-joined signed header names
        header_list: Sorted canonical header pairs
    """
    canonical_request: str
    signed_header_names: str
    header_list: Tuple[HeaderPair, ...]


@dataclass(frozen=True)
class SignedRequestDetails:
    """
    Result of the signature computation

    Attributes:
        signature: Lowercase hex HMAC-SHA256 signature (64 characters)
        signed_header_names: ";"-joined signed header names
        header_list: Sorted canonical header pairs
    """
    signature: str
    signed_header_names: str
    header_list: Tuple[HeaderPair, ...]

    def __post_init__(self):
        """Validate signature"""
        if len(self.signature) != 64:
            raise ValueError("Signature must be 64 hex characters")


@dataclass
class SigningConfig:
    """
    Configuration for request signing

    Attributes:
        access_key_id: Access key ID echoed in the Authorization header
        key_provider: Source of the signing key and its key scope
        endpoint: S3 host name signed as the "host" header (optional,
                  host adapters fall back to the request URL host)
        timestamp_generator: Optional custom epoch-seconds generator
    """
    access_key_id: str
    key_provider: 'SigningKeyProvider'
    endpoint: Optional[str] = None
    timestamp_generator: Optional[Callable[[], int]] = None

    def __post_init__(self):
        """Validate signing configuration"""
        if not self.access_key_id or not isinstance(self.access_key_id, str):
            raise ValueError("Access key ID cannot be empty")

        if self.key_provider is None:
            raise ValueError("Signing key provider is required")

        if self.endpoint is not None and not self.endpoint:
            raise ValueError("Endpoint cannot be an empty string")


@dataclass
class SigV4SignatureResult:
    """
    Generated SigV4 signature result

    Attributes:
        authorization: Authorization header value
        signature: Hex signature
        headers: Ordered headers to attach, ending with Authorization
        canonical_request: Canonical request that was hashed
        string_to_sign: String that was signed
    """
    authorization: str
    signature: str
    headers: List[HeaderPair]
    canonical_request: str
    string_to_sign: str

    def __post_init__(self):
        """Validate signature result"""
        if not self.authorization:
            raise ValueError("Authorization value cannot be empty")

        if not self.headers or self.headers[-1].name != 'Authorization':
            raise ValueError("Header list must end with Authorization")

    def headers_dict(self) -> Dict[str, str]:
        """Headers as an insertion-ordered dictionary."""
        return {pair.name: pair.value for pair in self.headers}


class SigningError(Exception):
    """
    Error class for signing operations

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Optional additional error details
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.code}, details: {self.details})"
        return f"{self.message} (code: {self.code})"

    def __repr__(self) -> str:
        return f"SigningError(message='{self.message}', code='{self.code}', details={self.details})"


# Common signing error codes
class SigningErrorCodes:
    """Standard error codes for signing operations"""

    # Configuration errors
    INVALID_CONFIG = "INVALID_CONFIG"
    INVALID_ACCESS_KEY_ID = "INVALID_ACCESS_KEY_ID"
    INVALID_SIGNING_KEY = "INVALID_SIGNING_KEY"
    INVALID_KEY_SCOPE = "INVALID_KEY_SCOPE"
    MISSING_ENDPOINT = "MISSING_ENDPOINT"

    # Request errors
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_METHOD = "INVALID_METHOD"
    INVALID_URL = "INVALID_URL"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"

    # Signing errors
    CANONICAL_REQUEST_FAILED = "CANONICAL_REQUEST_FAILED"
    SIGNING_FAILED = "SIGNING_FAILED"

    # Crypto errors
    CRYPTOGRAPHY_UNAVAILABLE = "CRYPTOGRAPHY_UNAVAILABLE"
    CRYPTO_ERROR = "CRYPTO_ERROR"


# Type aliases for convenience
TimestampGenerator = Callable[[], int]
HeaderList = List[HeaderPair]
