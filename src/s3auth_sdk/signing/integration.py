"""
HTTP client integration for request signing

This module attaches SigV4 headers to outbound requests made with the
requests and httpx libraries. Signing failures always propagate: a request
is never sent unsigned or partially signed.
"""

import logging
from typing import Optional, Tuple
from urllib.parse import unquote_to_bytes

import httpx
import requests
from requests.auth import AuthBase
from requests.models import PreparedRequest

from .types import (
    RequestView,
    SigningConfig,
    SigV4SignatureResult,
    SigningError,
    SigningErrorCodes,
)
from .utils import parse_url
from .sigv4_signer import SigV4Signer
from ..exceptions import ServerCommunicationError

logger = logging.getLogger(__name__)


def request_view_from_url(method: str, url: str, start_sec: int) -> Tuple[RequestView, str]:
    """
    Build the view of an outbound request that the signer consumes.

    HTTP clients hand over URLs that are already percent-encoded, so the
    path is decoded back to raw bytes before it is canonicalized. Clients
    form-encode query parameters with "+" for a space; a literal plus
    arrives as %2B, so "+" is rewritten to %20 before canonicalization.

    Args:
        method: HTTP method
        url: Full request URL
        start_sec: Request time in epoch seconds

    Returns:
        tuple: (RequestView, host taken from the URL)

    Raises:
        SigningError: If the URL or method is invalid
    """
    parts = parse_url(url)

    try:
        request = RequestView(
            method=method.upper(),
            path=unquote_to_bytes(parts["path"]),
            query_string=parts["query"].replace("+", "%20"),
            start_sec=start_sec
        )
    except (AttributeError, ValueError) as e:
        raise SigningError(
            f"Invalid request: {e}",
            SigningErrorCodes.INVALID_METHOD,
            {"method": method, "original_error": str(e)}
        )

    return request, parts["host"]


class _SigV4AuthMixin:
    """Signing shared by the requests and httpx auth handlers."""

    def _init_signer(self, config: SigningConfig) -> None:
        self.config = config
        self.signer = SigV4Signer(config)

    def _sign(self, method: str, url: str, has_body: bool) -> SigV4SignatureResult:
        request, url_host = request_view_from_url(method, url, self.signer.current_timestamp())

        if has_body:
            logger.warning(
                f"{request.method} request to {url} has a body; "
                "only the empty payload hash is signed"
            )

        result = self.signer.sign_request(request, self.config.endpoint or url_host)
        logger.debug(f"Signed {request.method} request to {url}")
        return result


class S3SigV4Auth(_SigV4AuthMixin, AuthBase):
    """
    requests authentication handler adding SigV4 headers

    Usage:
        response = requests.get(url, auth=S3SigV4Auth(config))
    """

    def __init__(self, config: SigningConfig):
        """
        Initialize the auth handler.

        Args:
            config: Signing configuration

        Raises:
            SigningError: If configuration is invalid
        """
        self._init_signer(config)

    def __call__(self, r: PreparedRequest) -> PreparedRequest:
        result = self._sign(r.method, r.url, bool(r.body))

        for pair in result.headers:
            r.headers[pair.name] = pair.value

        return r


class HttpxSigV4Auth(_SigV4AuthMixin, httpx.Auth):
    """
    httpx authentication handler adding SigV4 headers

    Usage:
        client = httpx.Client(auth=HttpxSigV4Auth(config))
    """

    def __init__(self, config: SigningConfig):
        """
        Initialize the auth handler.

        Args:
            config: Signing configuration

        Raises:
            SigningError: If configuration is invalid
        """
        self._init_signer(config)

    def auth_flow(self, request: httpx.Request):
        content_length = request.headers.get('content-length')
        has_body = (
            (content_length is not None and content_length != '0')
            or 'transfer-encoding' in request.headers
        )

        result = self._sign(request.method, str(request.url), has_body)

        for pair in result.headers:
            request.headers[pair.name] = pair.value

        yield request


class SigningSession:
    """
    HTTP session wrapper with automatic request signing.

    This class wraps a requests.Session and signs every outgoing request
    with SigV4. Transport errors are raised as ServerCommunicationError;
    signing errors are raised unchanged and the request is not sent.
    """

    def __init__(
        self,
        signing_config: SigningConfig,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize signing session.

        Args:
            signing_config: Signing configuration
            session: Optional existing requests session to wrap
        """
        self.session = session or requests.Session()
        self.signing_config = signing_config
        self.auth = S3SigV4Auth(signing_config)
        self.session.auth = self.auth
        logger.info(f"Configured request signing for access key ID: {signing_config.access_key_id}")

    def request(
        self,
        method: str,
        url: str,
        **kwargs
    ) -> requests.Response:
        """
        Make a signed HTTP request.

        Args:
            method: HTTP method
            url: Request URL
            **kwargs: Additional arguments for requests

        Returns:
            requests.Response: HTTP response

        Raises:
            SigningError: If the request cannot be signed
            ServerCommunicationError: If the request fails in transport
        """
        try:
            return self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            status = e.response.status_code if e.response is not None else 0
            raise ServerCommunicationError(
                f"{method} {url} failed: {e}",
                "REQUEST_FAILED",
                status,
                {"original_error": str(e)}
            )

    def get(self, url: str, **kwargs) -> requests.Response:
        """Make GET request."""
        return self.request('GET', url, **kwargs)

    def head(self, url: str, **kwargs) -> requests.Response:
        """Make HEAD request."""
        return self.request('HEAD', url, **kwargs)

    def put(self, url: str, **kwargs) -> requests.Response:
        """Make PUT request."""
        return self.request('PUT', url, **kwargs)

    def post(self, url: str, **kwargs) -> requests.Response:
        """Make POST request."""
        return self.request('POST', url, **kwargs)

    def delete(self, url: str, **kwargs) -> requests.Response:
        """Make DELETE request."""
        return self.request('DELETE', url, **kwargs)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()


def create_signing_session(
    signing_config: SigningConfig,
    **session_kwargs
) -> SigningSession:
    """
    Create a new signing session.

    Args:
        signing_config: Signing configuration
        **session_kwargs: Attributes to set on the requests.Session

    Returns:
        SigningSession: Configured signing session
    """
    session = requests.Session()

    for key, value in session_kwargs.items():
        if hasattr(session, key):
            setattr(session, key, value)
        else:
            logger.warning(f"Ignoring unknown session option: {key}")

    return SigningSession(signing_config=signing_config, session=session)


def sign_prepared_request(
    prepared_request: PreparedRequest,
    config: SigningConfig
) -> PreparedRequest:
    """
    Sign a prepared request in place.

    Args:
        prepared_request: Prepared request to sign
        config: Signing configuration

    Returns:
        PreparedRequest: Request with SigV4 headers added

    Raises:
        SigningError: If signing fails
    """
    return S3SigV4Auth(config)(prepared_request)
