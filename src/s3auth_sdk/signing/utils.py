"""
Utility functions for request signing

This module provides utility functions for AWS Signature Version 4 signing,
including SigV4 timestamp formatting, RFC 3986 percent-encoding, the header
name comparator and URL splitting.
"""

import time
from typing import Dict, Union
from urllib.parse import urlsplit, quote

from .types import (
    SigningError,
    SigningErrorCodes,
)

# SigV4 date-time format, e.g. 20160221T063112Z
AMZ_DATE_FORMAT = '%Y%m%dT%H%M%SZ'
AMZ_DATE_LENGTH = 16

# Date portion used in key scopes, e.g. 20160221
DATE_STAMP_FORMAT = '%Y%m%d'

_DEFAULT_PORTS = {'http': 80, 'https': 443}


def generate_timestamp() -> int:
    """
    Generate current Unix timestamp.

    Returns:
        int: Current Unix timestamp (seconds since epoch)
    """
    return int(time.time())


def validate_timestamp(timestamp: int) -> bool:
    """
    Validate timestamp (should be a non-negative Unix timestamp).

    Args:
        timestamp: Unix timestamp to validate

    Returns:
        bool: True if timestamp is valid
    """
    if not isinstance(timestamp, int) or isinstance(timestamp, bool):
        return False

    return timestamp >= 0


def format_amz_date(timestamp: int) -> str:
    """
    Format epoch seconds as a SigV4 date-time string.

    The conversion is always done in UTC, never local time.

    Args:
        timestamp: Unix timestamp

    Returns:
        str: 16-character YYYYMMDDTHHMMSSZ string
    """
    return time.strftime(AMZ_DATE_FORMAT, time.gmtime(timestamp))


def format_date_stamp(timestamp: int) -> str:
    """
    Format epoch seconds as the YYYYMMDD date used in key scopes.

    Args:
        timestamp: Unix timestamp

    Returns:
        str: 8-character date string
    """
    return time.strftime(DATE_STAMP_FORMAT, time.gmtime(timestamp))


def _as_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return value.encode('utf-8')
    return bytes(value)


def compare_names(first: Union[str, bytes], second: Union[str, bytes]) -> int:
    """
    Compare two names byte-wise, shorter name first when one is a prefix.

    This is the ordering SigV4 uses for both query keys and header names.

    Args:
        first: First name
        second: Second name

    Returns:
        int: Negative, zero or positive like a classic cmp function
    """
    a = _as_bytes(first)
    b = _as_bytes(second)
    shared = min(len(a), len(b))

    if a[:shared] != b[:shared]:
        return -1 if a[:shared] < b[:shared] else 1

    return len(a) - len(b)


def uri_encode(value: Union[str, bytes], safe: str = '') -> str:
    """
    Percent-encode a value as an RFC 3986 URI component.

    Only unreserved characters (A-Z a-z 0-9 - . _ ~) and the characters in
    safe are left as-is. Escapes use uppercase hex digits.

    Args:
        value: Text (encoded as UTF-8) or raw bytes
        safe: Additional characters that must not be encoded

    Returns:
        str: Encoded value
    """
    return quote(value, safe=safe)


def uri_encode_path(path: Union[str, bytes]) -> str:
    """
    Percent-encode a request path, leaving every "/" untouched.

    Args:
        path: Raw request path without query string

    Returns:
        str: Encoded path
    """
    return uri_encode(path, safe='/')


def parse_url(url: str) -> Dict[str, str]:
    """
    Parse URL to extract components needed for signing.

    Args:
        url: URL string to parse

    Returns:
        dict: Dictionary with parsed URL components:
            - host: host name, with the port only when it is not the
              scheme's default
            - path: path component ("/" when empty)
            - query: raw query string without "?"

    Raises:
        SigningError: If URL format is invalid
    """
    try:
        parsed = urlsplit(url)
    except ValueError as e:
        raise SigningError(
            f"Failed to parse URL: {e}",
            SigningErrorCodes.INVALID_URL,
            {"url": url, "original_error": str(e)}
        )

    if not parsed.scheme or not parsed.netloc:
        raise SigningError(
            f"Invalid URL format: {url}",
            SigningErrorCodes.INVALID_URL,
            {"url": url}
        )

    if parsed.scheme not in _DEFAULT_PORTS:
        raise SigningError(
            f"Unsupported URL scheme: {parsed.scheme}",
            SigningErrorCodes.INVALID_URL,
            {"url": url, "scheme": parsed.scheme}
        )

    host = parsed.netloc.rpartition('@')[2]
    try:
        port = parsed.port
    except ValueError as e:
        raise SigningError(
            f"Invalid port in URL: {url}",
            SigningErrorCodes.INVALID_URL,
            {"url": url, "original_error": str(e)}
        )

    if port is not None and port == _DEFAULT_PORTS[parsed.scheme]:
        host = host.rsplit(':', 1)[0]

    return {
        "host": host,
        "path": parsed.path or "/",
        "query": parsed.query,
    }


class PerformanceTimer:
    """Simple performance timer for monitoring signing operations."""

    def __init__(self):
        self.start_time = time.perf_counter()

    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        return (time.perf_counter() - self.start_time) * 1000

