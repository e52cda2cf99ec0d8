"""
Configuration management for request signing

This module provides the fluent builder for SigV4 signing configurations
and the validation applied before a configuration is used by a signer.
"""

from typing import Optional

from ..crypto.derivation import (
    SigningKeyProvider,
    StaticSigningKeyProvider,
    SecretKeySigningKeyProvider,
    parse_signing_key,
    validate_key_scope,
    DEFAULT_SERVICE,
)
from ..exceptions import S3AuthSDKError
from .types import (
    SigningConfig,
    SigningError,
    SigningErrorCodes,
    TimestampGenerator,
)
from .utils import validate_timestamp


class SigningConfigBuilder:
    """
    Builder for creating signing configurations with fluent API
    """

    def __init__(self):
        self._access_key_id: Optional[str] = None
        self._endpoint: Optional[str] = None
        self._key_provider: Optional[SigningKeyProvider] = None
        self._timestamp_generator: Optional[TimestampGenerator] = None

    def access_key_id(self, access_key_id: str) -> 'SigningConfigBuilder':
        """
        Set access key ID.

        Args:
            access_key_id: Access key ID echoed in the Authorization header

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._access_key_id = access_key_id
        return self

    def endpoint(self, endpoint: str) -> 'SigningConfigBuilder':
        """
        Set the S3 host signed as the "host" header.

        Args:
            endpoint: Host name, e.g. "mybucket.s3.amazonaws.com"

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._endpoint = endpoint
        return self

    def signing_key(self, signing_key: bytes, key_scope: str) -> 'SigningConfigBuilder':
        """
        Use a pre-derived signing key.

        Args:
            signing_key: Raw signing key bytes
            key_scope: Key scope the key was derived for

        Returns:
            SigningConfigBuilder: Self for method chaining

        Raises:
            SigningError: If the key or scope is invalid
        """
        self._check_key_scope(key_scope)

        try:
            self._key_provider = StaticSigningKeyProvider(signing_key, key_scope)
        except S3AuthSDKError as e:
            raise SigningError(
                f"Invalid signing key: {e}",
                SigningErrorCodes.INVALID_SIGNING_KEY,
                {"error_code": e.error_code}
            )
        return self

    def signing_key_base64(self, encoded_key: str, key_scope: str) -> 'SigningConfigBuilder':
        """
        Use a pre-derived signing key given as base64 text.

        Args:
            encoded_key: Base64 encoded signing key
            key_scope: Key scope the key was derived for

        Returns:
            SigningConfigBuilder: Self for method chaining

        Raises:
            SigningError: If the key or scope is invalid
        """
        try:
            key = parse_signing_key(encoded_key)
        except S3AuthSDKError as e:
            raise SigningError(
                f"Invalid signing key: {e}",
                SigningErrorCodes.INVALID_SIGNING_KEY,
                {"error_code": e.error_code}
            )
        return self.signing_key(key, key_scope)

    def secret_key(
        self,
        secret_access_key: str,
        region: str,
        service: str = DEFAULT_SERVICE
    ) -> 'SigningConfigBuilder':
        """
        Derive signing keys from a secret access key for each request date.

        Args:
            secret_access_key: AWS secret access key
            region: Region name
            service: Service name

        Returns:
            SigningConfigBuilder: Self for method chaining

        Raises:
            SigningError: If any parameter is invalid
        """
        try:
            self._key_provider = SecretKeySigningKeyProvider(secret_access_key, region, service)
        except S3AuthSDKError as e:
            raise SigningError(
                f"Invalid key derivation parameters: {e}",
                SigningErrorCodes.INVALID_CONFIG,
                {"error_code": e.error_code}
            )
        return self

    def key_provider(self, provider: SigningKeyProvider) -> 'SigningConfigBuilder':
        """
        Set a custom signing key provider.

        Args:
            provider: Signing key provider

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._key_provider = provider
        return self

    def timestamp_generator(self, generator: TimestampGenerator) -> 'SigningConfigBuilder':
        """
        Set custom timestamp generator.

        Args:
            generator: Function that returns Unix timestamps

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._timestamp_generator = generator
        return self

    def build(self) -> SigningConfig:
        """
        Build the signing configuration.

        Returns:
            SigningConfig: Complete signing configuration

        Raises:
            SigningError: If configuration is invalid
        """
        if not self._access_key_id:
            raise SigningError(
                "Access key ID is required",
                SigningErrorCodes.INVALID_CONFIG
            )

        if self._key_provider is None:
            raise SigningError(
                "A signing key or secret access key is required",
                SigningErrorCodes.INVALID_CONFIG
            )

        try:
            config = SigningConfig(
                access_key_id=self._access_key_id,
                key_provider=self._key_provider,
                endpoint=self._endpoint,
                timestamp_generator=self._timestamp_generator
            )
        except ValueError as e:
            raise SigningError(
                f"Invalid signing configuration: {e}",
                SigningErrorCodes.INVALID_CONFIG
            )

        validate_signing_config(config)
        return config

    @staticmethod
    def _check_key_scope(key_scope: str) -> None:
        if not validate_key_scope(key_scope):
            raise SigningError(
                f"Invalid key scope: {key_scope!r}",
                SigningErrorCodes.INVALID_KEY_SCOPE,
                {"expected": "<YYYYMMDD>/<region>/<service>/aws4_request"}
            )


def create_signing_config() -> SigningConfigBuilder:
    """
    Create a new signing configuration builder.

    Returns:
        SigningConfigBuilder: New configuration builder
    """
    return SigningConfigBuilder()


def validate_signing_config(config: SigningConfig) -> None:
    """
    Validate signing configuration.

    Args:
        config: Signing configuration to validate

    Raises:
        SigningError: If configuration is invalid
    """
    if not isinstance(config, SigningConfig):
        raise SigningError(
            "Configuration must be SigningConfig instance",
            SigningErrorCodes.INVALID_CONFIG
        )

    if not config.access_key_id or not isinstance(config.access_key_id, str):
        raise SigningError(
            "Access key ID must be non-empty string",
            SigningErrorCodes.INVALID_ACCESS_KEY_ID
        )

    # Access key IDs end up verbatim in the Authorization header
    if any(c in config.access_key_id for c in '/, \t\r\n'):
        raise SigningError(
            "Access key ID contains characters not allowed in a credential",
            SigningErrorCodes.INVALID_ACCESS_KEY_ID
        )

    if not isinstance(config.key_provider, SigningKeyProvider):
        raise SigningError(
            "Key provider must be a SigningKeyProvider instance",
            SigningErrorCodes.INVALID_CONFIG
        )

    if isinstance(config.key_provider, StaticSigningKeyProvider):
        if not validate_key_scope(config.key_provider.key_scope):
            raise SigningError(
                f"Invalid key scope: {config.key_provider.key_scope!r}",
                SigningErrorCodes.INVALID_KEY_SCOPE
            )

    if config.endpoint is not None:
        if not isinstance(config.endpoint, str) or any(c.isspace() for c in config.endpoint):
            raise SigningError(
                f"Invalid endpoint: {config.endpoint!r}",
                SigningErrorCodes.INVALID_CONFIG
            )

    if config.timestamp_generator:
        try:
            test_timestamp = config.timestamp_generator()
        except Exception as e:
            raise SigningError(
                f"Timestamp generator failed: {e}",
                SigningErrorCodes.INVALID_CONFIG,
                {"original_error": str(e)}
            )

        if not validate_timestamp(test_timestamp):
            raise SigningError(
                "Timestamp generator must return valid Unix timestamp",
                SigningErrorCodes.INVALID_CONFIG
            )
