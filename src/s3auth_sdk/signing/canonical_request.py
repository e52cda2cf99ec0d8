"""
Canonical request construction for AWS Signature Version 4

This module builds the SigV4 canonical request for S3: the canonical URI,
the canonical query string, the canonical header block with its signed
header list, and the payload hash, joined in the order AWS prescribes.
"""

from functools import cmp_to_key
from typing import List, Tuple, Union
from urllib.parse import unquote_to_bytes

from .types import (
    RequestView,
    HeaderPair,
    CanonicalHeaderDetails,
    CanonicalRequestDetails,
    SigningError,
    SigningErrorCodes,
)
from .utils import (
    compare_names,
    uri_encode,
    uri_encode_path,
)

# SHA-256 of an empty payload; the only payload hash this SDK signs
EMPTY_STRING_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

HASH_HEADER = "x-amz-content-sha256"
DATE_HEADER = "x-amz-date"
HOST_HEADER = "host"


def _compare_pairs(first: HeaderPair, second: HeaderPair) -> int:
    ret = compare_names(first.name, second.name)
    if ret != 0:
        return ret
    return compare_names(first.value, second.value)


def sort_pairs(pairs: List[HeaderPair]) -> List[HeaderPair]:
    """
    Sort name/value pairs in SigV4 canonical order.

    Names are compared byte-wise with the shorter name first on a shared
    prefix; equal names fall back to the same comparison on values.

    Args:
        pairs: Pairs to sort

    Returns:
        list: New sorted list
    """
    return sorted(pairs, key=cmp_to_key(_compare_pairs))


def _split_query_arg(segment: bytes) -> Tuple[bytes, bytes]:
    key, _, value = segment.partition(b'=')
    return key, value


def _encode_query_component(component: bytes) -> str:
    # Decoding first keeps already-escaped input from being escaped twice
    return uri_encode(unquote_to_bytes(component))


def canonicalize_query_string(query_string: Union[str, bytes]) -> str:
    """
    Build the canonical query string.

    Every key and value is percent-encoded as an RFC 3986 component
    (slashes included), pairs are sorted by key and joined as
    "key=value" with "&". A key without "=" gets an empty value.

    Args:
        query_string: Raw query string without the leading "?"

    Returns:
        str: Canonical query string ("" for an empty query)
    """
    if isinstance(query_string, str):
        query_string = query_string.encode('utf-8')

    if not query_string:
        return ""

    segments = query_string.split(b'&')
    if not segments[-1]:
        # a trailing separator does not start a new argument
        segments.pop()

    args = []
    for segment in segments:
        key, value = _split_query_arg(segment)
        args.append(HeaderPair(
            name=_encode_query_component(key),
            value=_encode_query_component(value)
        ))

    return '&'.join(f"{arg.name}={arg.value}" for arg in sort_pairs(args))


def canonicalize_headers(content_hash: str, date: str, endpoint: str) -> CanonicalHeaderDetails:
    """
    Build the canonical header block and signed header names.

    The signed header set is fixed to host, x-amz-content-sha256 and
    x-amz-date.

    Args:
        content_hash: Hex SHA-256 of the payload
        date: SigV4 date-time string
        endpoint: Host the request is sent to

    Returns:
        CanonicalHeaderDetails: Sorted headers and their renderings
    """
    header_list = tuple(sort_pairs([
        HeaderPair(HASH_HEADER, content_hash),
        HeaderPair(DATE_HEADER, date),
        HeaderPair(HOST_HEADER, endpoint),
    ]))

    canonical_header_str = ''.join(f"{pair.name}:{pair.value}\n" for pair in header_list)
    signed_header_names = ';'.join(pair.name for pair in header_list)

    return CanonicalHeaderDetails(
        canonical_header_str=canonical_header_str,
        signed_header_names=signed_header_names,
        header_list=header_list
    )


def canonical_uri(path: Union[str, bytes]) -> str:
    """
    Build the canonical URI for a request path.

    Args:
        path: Request path with the query string already stripped

    Returns:
        str: RFC 3986 encoded path with "/" left unencoded
    """
    return uri_encode_path(path)


def request_body_hash(request: RequestView) -> str:
    """
    Payload hash signed for a request.

    Request bodies are not signed; this is always the hash of an empty
    payload.

    Args:
        request: Request being signed

    Returns:
        str: Hex SHA-256 of the empty string
    """
    return EMPTY_STRING_SHA256


class CanonicalRequestBuilder:
    """
    Canonical request builder for SigV4 signatures
    """

    def __init__(self, request: RequestView, date: str, endpoint: str):
        """
        Initialize canonical request builder.

        Args:
            request: Request being signed
            date: SigV4 date-time string for the request
            endpoint: Host the request is sent to
        """
        self.request = request
        self.date = date
        self.endpoint = endpoint

    def build(self) -> CanonicalRequestDetails:
        """
        Build the canonical request.

        Returns:
            CanonicalRequestDetails: Canonical request string together with
            the signed header names and header list

        Raises:
            SigningError: If request construction fails
        """
        try:
            canonical_qs = canonicalize_query_string(self.request.query_string)
            payload_hash = request_body_hash(self.request)
            headers = canonicalize_headers(payload_hash, self.date, self.endpoint)
            url = canonical_uri(self.request.path)

            # canonical_header_str already ends with a newline, hence the
            # blank line before the signed header names
            canonical_request = '\n'.join([
                self.request.method,
                url,
                canonical_qs,
                headers.canonical_header_str,
                headers.signed_header_names,
                payload_hash,
            ])

            return CanonicalRequestDetails(
                canonical_request=canonical_request,
                signed_header_names=headers.signed_header_names,
                header_list=headers.header_list
            )

        except Exception as e:
            if isinstance(e, SigningError):
                raise

            raise SigningError(
                f"Canonical request construction failed: {e}",
                SigningErrorCodes.CANONICAL_REQUEST_FAILED,
                {"original_error": str(e)}
            )


def make_canonical_request(request: RequestView, date: str, endpoint: str) -> CanonicalRequestDetails:
    """
    Build canonical request for signing.

    Args:
        request: Request being signed
        date: SigV4 date-time string
        endpoint: Host the request is sent to

    Returns:
        CanonicalRequestDetails: Canonical request details

    Raises:
        SigningError: If request construction fails
    """
    builder = CanonicalRequestBuilder(request, date, endpoint)
    return builder.build()
