"""
Unit tests for the SHA-256 / HMAC-SHA256 hash engine
"""

import pytest
from unittest.mock import patch

from s3auth_sdk.crypto.hash_engine import (
    HashEngine,
    get_default_hash_engine,
    hash_sha256,
    hash_sha256_hex,
    hmac_sha256,
    hmac_sha256_hex,
    check_platform_compatibility,
    SHA256_DIGEST_LENGTH,
    SHA256_HEX_LENGTH,
)
from s3auth_sdk.exceptions import UnsupportedPlatformError

EMPTY_HASH = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
ASDF_HASH = "f0e4c2f76c58916ec258f246851bea091d14d4247a2fc3e18694461b1816e13b"


class TestSha256:
    """Test SHA-256 digests"""

    def test_empty_string(self):
        assert hash_sha256_hex("") == EMPTY_HASH

    def test_known_value(self):
        assert hash_sha256_hex("asdf") == ASDF_HASH

    def test_raw_digest_length(self):
        digest = hash_sha256(b"asdf")
        assert isinstance(digest, bytes)
        assert len(digest) == SHA256_DIGEST_LENGTH
        assert digest.hex() == ASDF_HASH

    def test_text_and_bytes_agree(self):
        assert hash_sha256_hex("asdf") == hash_sha256_hex(b"asdf")
        assert hash_sha256_hex(bytearray(b"asdf")) == ASDF_HASH

    def test_hex_is_lowercase(self):
        digest = hash_sha256_hex("lorem ipsum")
        assert len(digest) == SHA256_HEX_LENGTH
        assert digest == digest.lower()

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            hash_sha256(12345)


class TestHmacSha256:
    """Test HMAC-SHA256"""

    def test_known_value(self):
        assert hmac_sha256_hex("abc", "asdf") == (
            "07e434c45d15994e620bf8e43da6f652d331989be1783cdfcc989ddb0a2358e2"
        )

    def test_binary_key(self):
        assert hmac_sha256_hex(b"\x09\x01\x2fasf", "lorem ipsum") == (
            "827ce31c45e77292af25fef980c3e7afde23abcde622ecd8e82e1be6dd94fad3"
        )

    def test_raw_and_hex_agree(self):
        raw = hmac_sha256(b"abc", b"asdf")
        assert len(raw) == SHA256_DIGEST_LENGTH
        assert raw.hex() == hmac_sha256_hex(b"abc", b"asdf")

    def test_different_keys_differ(self):
        assert hmac_sha256_hex("key1", "msg") != hmac_sha256_hex("key2", "msg")


class TestHashEngine:
    """Test engine instances and the default engine"""

    def test_instances_are_interchangeable(self):
        engine = HashEngine()
        assert engine.sha256_hex("asdf") == get_default_hash_engine().sha256_hex("asdf")
        assert engine.hmac_sha256_hex("abc", "asdf") == hmac_sha256_hex("abc", "asdf")

    def test_default_engine_is_shared(self):
        assert get_default_hash_engine() is get_default_hash_engine()

    def test_missing_backend(self):
        with patch('s3auth_sdk.crypto.hash_engine._default_engine', None):
            with pytest.raises(UnsupportedPlatformError) as exc_info:
                get_default_hash_engine()
        assert exc_info.value.error_code == "CRYPTOGRAPHY_UNAVAILABLE"

    def test_engine_requires_backend(self):
        with patch('s3auth_sdk.crypto.hash_engine.CRYPTOGRAPHY_AVAILABLE', False):
            with pytest.raises(UnsupportedPlatformError):
                HashEngine()


class TestPlatformCompatibility:
    """Test platform compatibility report"""

    def test_report_structure(self):
        info = check_platform_compatibility()
        assert info['cryptography_available'] is True
        assert info['sha256_supported'] is True
        assert 'system' in info['platform_info']
        assert 'python_version' in info['platform_info']

    def test_report_without_backend(self):
        with patch('s3auth_sdk.crypto.hash_engine.CRYPTOGRAPHY_AVAILABLE', False):
            info = check_platform_compatibility()
        assert info['cryptography_available'] is False
        assert info['sha256_supported'] is False
