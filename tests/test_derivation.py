"""
Unit tests for signing key derivation and key providers
"""

import base64
import logging

import pytest

from s3auth_sdk.crypto.derivation import (
    DerivedSigningKey,
    SigningKeyProvider,
    StaticSigningKeyProvider,
    SecretKeySigningKeyProvider,
    build_key_scope,
    validate_key_scope,
    derive_signing_key,
    parse_signing_key,
    KEY_SCOPE_TERMINATOR,
)
from s3auth_sdk.exceptions import KeyDerivationError, ValidationError

# Example credentials from the AWS SigV4 documentation
AWS_SECRET = "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY"
AWS_SIGNING_KEY_HEX = "f4780e2d9f65fa895f9c67b32ce1baf0b0d8a43505a000a1a9e090d414db404d"

TEST_KEY_B64 = "k4EntTNoEN22pdavRF/KyeNx+e1BjtOGsCKu2CkBvnU="
TEST_SCOPE = "20150830/us-east/service/aws4_request"

# 2012-02-15T00:00:00Z
FEB_15_2012 = 1329264000


class TestKeyScope:
    """Test key scope construction and validation"""

    def test_build(self):
        assert build_key_scope("20150830", "us-east-1") == "20150830/us-east-1/s3/aws4_request"
        assert build_key_scope("20150830", "us-east", "service") == TEST_SCOPE

    def test_terminator(self):
        assert build_key_scope("20150830", "eu-west-1").endswith(KEY_SCOPE_TERMINATOR)

    @pytest.mark.parametrize("date_stamp", ["2015083", "2015-08-30", "", None])
    def test_invalid_date(self, date_stamp):
        with pytest.raises(ValidationError) as exc_info:
            build_key_scope(date_stamp, "us-east-1")
        assert exc_info.value.error_code == "INVALID_DATE_STAMP"

    def test_invalid_region(self):
        with pytest.raises(ValidationError) as exc_info:
            build_key_scope("20150830", "us/east")
        assert exc_info.value.error_code == "INVALID_REGION"

    def test_invalid_service(self):
        with pytest.raises(ValidationError) as exc_info:
            build_key_scope("20150830", "us-east-1", "")
        assert exc_info.value.error_code == "INVALID_SERVICE"

    def test_validate(self):
        assert validate_key_scope(TEST_SCOPE)
        assert validate_key_scope("20120215/us-east-1/iam/aws4_request")

        assert not validate_key_scope("20150830/us-east/service")
        assert not validate_key_scope("2015083/us-east/service/aws4_request")
        assert not validate_key_scope("20150830/us-east/service/aws4_request/")
        assert not validate_key_scope("")
        assert not validate_key_scope(None)


class TestDeriveSigningKey:
    """Test the HMAC key derivation chain"""

    def test_aws_reference_vector(self):
        key = derive_signing_key(AWS_SECRET, "20120215", "us-east-1", "iam")
        assert key.hex() == AWS_SIGNING_KEY_HEX

    def test_key_length(self):
        assert len(derive_signing_key(AWS_SECRET, "20150830", "us-east-1")) == 32

    def test_each_component_changes_key(self):
        base = derive_signing_key(AWS_SECRET, "20150830", "us-east-1", "s3")
        assert derive_signing_key(AWS_SECRET, "20150831", "us-east-1", "s3") != base
        assert derive_signing_key(AWS_SECRET, "20150830", "us-west-2", "s3") != base
        assert derive_signing_key(AWS_SECRET, "20150830", "us-east-1", "iam") != base
        assert derive_signing_key("other-secret", "20150830", "us-east-1", "s3") != base

    def test_empty_secret(self):
        with pytest.raises(KeyDerivationError) as exc_info:
            derive_signing_key("", "20150830", "us-east-1")
        assert exc_info.value.error_code == "INVALID_SECRET_KEY"

    def test_invalid_date(self):
        with pytest.raises(KeyDerivationError) as exc_info:
            derive_signing_key(AWS_SECRET, "2015-08-30", "us-east-1")
        assert exc_info.value.error_code == "INVALID_DATE_STAMP"


class TestParseSigningKey:
    """Test base64 signing key decoding"""

    def test_valid_key(self):
        key = parse_signing_key(TEST_KEY_B64)
        assert len(key) == 32
        assert key == base64.b64decode(TEST_KEY_B64)

    def test_surrounding_whitespace(self):
        assert parse_signing_key(f"  {TEST_KEY_B64}\n") == base64.b64decode(TEST_KEY_B64)

    def test_invalid_base64(self):
        with pytest.raises(KeyDerivationError) as exc_info:
            parse_signing_key("not*base64!")
        assert exc_info.value.error_code == "INVALID_SIGNING_KEY_ENCODING"

    def test_wrong_length(self):
        with pytest.raises(KeyDerivationError) as exc_info:
            parse_signing_key(base64.b64encode(b"\x01" * 16).decode())
        assert exc_info.value.error_code == "INVALID_SIGNING_KEY_LENGTH"

    def test_empty(self):
        with pytest.raises(KeyDerivationError):
            parse_signing_key("")


class TestDerivedSigningKey:
    """Test the signing key value type"""

    def test_base64_round_trip(self):
        key = DerivedSigningKey(signing_key=base64.b64decode(TEST_KEY_B64), key_scope=TEST_SCOPE)
        assert key.to_base64() == TEST_KEY_B64
        assert key.date_stamp == "20150830"

    def test_repr_hides_key(self):
        raw = base64.b64decode(TEST_KEY_B64)
        key = DerivedSigningKey(signing_key=raw, key_scope=TEST_SCOPE)
        assert TEST_KEY_B64 not in repr(key)
        assert raw.hex() not in repr(key)
        assert TEST_SCOPE in repr(key)

    def test_empty_key_rejected(self):
        with pytest.raises(ValidationError):
            DerivedSigningKey(signing_key=b"", key_scope=TEST_SCOPE)

    def test_immutable(self):
        key = DerivedSigningKey(signing_key=b"k" * 32, key_scope=TEST_SCOPE)
        with pytest.raises(AttributeError):
            key.key_scope = "other"


class TestStaticSigningKeyProvider:
    """Test provider for pre-derived keys"""

    def test_same_key_for_any_time(self):
        provider = StaticSigningKeyProvider.from_base64(TEST_KEY_B64, TEST_SCOPE)
        first = provider.get_signing_key(0)
        second = provider.get_signing_key(1440938160)

        assert first == second
        assert first.key_scope == TEST_SCOPE
        assert first.signing_key == base64.b64decode(TEST_KEY_B64)
        assert provider.key_scope == TEST_SCOPE

    def test_is_provider(self):
        provider = StaticSigningKeyProvider(b"k" * 32, TEST_SCOPE)
        assert isinstance(provider, SigningKeyProvider)

    def test_repr_hides_key(self):
        provider = StaticSigningKeyProvider.from_base64(TEST_KEY_B64, TEST_SCOPE)
        assert TEST_KEY_B64 not in repr(provider)

    def test_invalid_base64(self):
        with pytest.raises(KeyDerivationError):
            StaticSigningKeyProvider.from_base64("???", TEST_SCOPE)


class TestSecretKeySigningKeyProvider:
    """Test provider deriving keys per request date"""

    def test_derives_for_request_date(self):
        provider = SecretKeySigningKeyProvider(AWS_SECRET, "us-east-1", "iam")
        key = provider.get_signing_key(FEB_15_2012 + 3600)

        assert key.signing_key.hex() == AWS_SIGNING_KEY_HEX
        assert key.key_scope == "20120215/us-east-1/iam/aws4_request"

    def test_date_changes_at_utc_midnight(self):
        provider = SecretKeySigningKeyProvider(AWS_SECRET, "us-east-1")
        before = provider.get_signing_key(FEB_15_2012 - 1)
        after = provider.get_signing_key(FEB_15_2012)

        assert before.date_stamp == "20120214"
        assert after.date_stamp == "20120215"
        assert before.signing_key != after.signing_key

    def test_invalid_parameters(self):
        with pytest.raises(KeyDerivationError):
            SecretKeySigningKeyProvider("", "us-east-1")
        with pytest.raises(KeyDerivationError):
            SecretKeySigningKeyProvider(AWS_SECRET, "")

    def test_secret_never_logged_or_shown(self, caplog):
        provider = SecretKeySigningKeyProvider(AWS_SECRET, "us-east-1")
        with caplog.at_level(logging.DEBUG, logger="s3auth_sdk"):
            key = provider.get_signing_key(FEB_15_2012)

        assert "Derived signing key" in caplog.text
        assert AWS_SECRET not in caplog.text
        assert key.signing_key.hex() not in caplog.text
        assert AWS_SECRET not in repr(provider)
