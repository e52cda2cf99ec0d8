"""
Tests for the s3auth-cli command-line interface
"""

import json

import pytest
from unittest.mock import patch

from s3auth_sdk import __version__
from s3auth_sdk.cli import main, create_parser

TEST_KEY_B64 = "k4EntTNoEN22pdavRF/KyeNx+e1BjtOGsCKu2CkBvnU="
TEST_SCOPE = "20150830/us-east/service/aws4_request"
TEST_SIGNATURE = "f8f271fa23024a9d2119a2caaa91ca553293ee2ca9b69973bf22d90fd5bd4aa8"

SIGN_ARGS = [
    'sign',
    '--path', '/',
    '--endpoint', 'localhost',
    '--access-key-id', 'AKID',
    '--signing-key', TEST_KEY_B64,
    '--key-scope', TEST_SCOPE,
    '--timestamp', '1440938160',
]


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep the CLI from reconfiguring the root logger during tests."""
    with patch('s3auth_sdk.cli.configure_logging') as configure:
        yield configure


class TestParser:
    """Test argument parsing"""

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(['--version'])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_sign_defaults(self):
        args = create_parser().parse_args(['sign', '--path', '/'])
        assert args.method == 'GET'
        assert args.query == ''
        assert args.timestamp is None

    def test_method_is_uppercased(self):
        args = create_parser().parse_args(['sign', '--path', '/', '--method', 'put'])
        assert args.method == 'PUT'

    def test_unknown_method(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(['sign', '--path', '/', '--method', 'BREW'])

    def test_no_command(self, capsys):
        assert main([]) == 1
        assert 's3auth-cli' in capsys.readouterr().out

    def test_log_level_applied(self, no_logging_setup):
        main(['--log-level', 'DEBUG', '--check-compatibility'])
        settings = no_logging_setup.call_args.args[0]
        assert settings.level == 'DEBUG'


class TestCompatibility:
    """Test --check-compatibility"""

    def test_compatible(self, capsys):
        assert main(['--check-compatibility']) == 0
        assert 'compatible' in capsys.readouterr().out

    def test_incompatible(self, capsys):
        result = {'compatible': False, 'warnings': ['Cryptography package not available']}
        with patch('s3auth_sdk.cli.initialize_sdk', return_value=result):
            assert main(['--check-compatibility']) == 1
        assert 'Cryptography package not available' in capsys.readouterr().out


class TestKeygenCommand:
    """Test signing key derivation"""

    def test_hex(self, capsys):
        code = main([
            'keygen',
            '--secret-key', 'wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY',
            '--region', 'us-east-1',
            '--service', 'iam',
            '--date', '20120215',
            '--format', 'hex',
        ])
        out = capsys.readouterr().out

        assert code == 0
        assert "Signing Key: f4780e2d9f65fa895f9c67b32ce1baf0b0d8a43505a000a1a9e090d414db404d" in out
        assert "Key Scope: 20120215/us-east-1/iam/aws4_request" in out

    def test_base64_default(self, capsys):
        code = main(['keygen', '--secret-key', 'secret', '--region', 'us-east-1', '--date', '20150830'])
        lines = capsys.readouterr().out.splitlines()

        assert code == 0
        assert lines[0].startswith("Signing Key: ")
        assert len(lines[0].split(": ", 1)[1]) == 44
        assert lines[1] == "Key Scope: 20150830/us-east-1/s3/aws4_request"

    def test_date_defaults_to_today(self, capsys):
        with patch('s3auth_sdk.cli.generate_timestamp', return_value=1440938160):
            main(['keygen', '--secret-key', 'secret', '--region', 'us-east-1'])
        assert "Key Scope: 20150830/us-east-1/s3/aws4_request" in capsys.readouterr().out

    def test_invalid_date(self, capsys):
        code = main(['keygen', '--secret-key', 'secret', '--region', 'us-east-1', '--date', '2015-08-30'])
        assert code == 1
        assert "Error:" in capsys.readouterr().err


class TestSignCommand:
    """Test request signing"""

    def test_reference_signature(self, capsys):
        assert main(SIGN_ARGS) == 0
        lines = capsys.readouterr().out.splitlines()

        assert lines[0] == "host: localhost"
        assert lines[1].startswith("x-amz-content-sha256: e3b0c442")
        assert lines[2] == "x-amz-date: 20150830T123600Z"
        assert lines[3] == (
            f"Authorization: AWS4-HMAC-SHA256 Credential=AKID/{TEST_SCOPE},"
            f"SignedHeaders=host;x-amz-content-sha256;x-amz-date,Signature={TEST_SIGNATURE}"
        )

    def test_show_canonical(self, capsys):
        assert main(SIGN_ARGS + ['--show-canonical']) == 0
        out = capsys.readouterr().out

        assert "# Canonical Request\nGET\n/\n\nhost:localhost\n" in out
        assert "# String To Sign\nAWS4-HMAC-SHA256\n20150830T123600Z\n" in out

    def test_query(self, capsys):
        assert main(SIGN_ARGS + ['--query', 'acl', '--show-canonical']) == 0
        assert "GET\n/\nacl=\n" in capsys.readouterr().out

    def test_signing_key_needs_scope(self, capsys):
        args = ['sign', '--path', '/', '--endpoint', 'localhost',
                '--access-key-id', 'AKID', '--signing-key', TEST_KEY_B64]
        assert main(args) == 1
        assert "--key-scope" in capsys.readouterr().err

    def test_missing_endpoint(self, capsys):
        args = [a for a in SIGN_ARGS if a not in ('--endpoint', 'localhost')]
        assert main(args) == 1
        assert "MISSING_ENDPOINT" in capsys.readouterr().err

    def test_settings_file(self, tmp_path, capsys):
        path = tmp_path / "s3auth.json"
        path.write_text(json.dumps({
            "endpoint": "localhost",
            "access_key_id": "AKID",
            "signing_key": TEST_KEY_B64,
            "key_scope": TEST_SCOPE,
        }), encoding="utf-8")

        assert main(['sign', '--path', '/', '--config', str(path), '--timestamp', '1440938160']) == 0
        assert f"Signature={TEST_SIGNATURE}" in capsys.readouterr().out

    def test_environment(self, capsys):
        environ = {
            "S3AUTH_ENDPOINT": "localhost",
            "S3AUTH_ACCESS_KEY_ID": "AKID",
            "S3AUTH_SIGNING_KEY": TEST_KEY_B64,
            "S3AUTH_KEY_SCOPE": TEST_SCOPE,
        }
        with patch.dict('os.environ', environ):
            assert main(['sign', '--path', '/', '--timestamp', '1440938160']) == 0
        assert f"Signature={TEST_SIGNATURE}" in capsys.readouterr().out

    def test_command_line_overrides_settings(self, tmp_path, capsys):
        path = tmp_path / "s3auth.json"
        path.write_text(json.dumps({
            "endpoint": "elsewhere",
            "access_key_id": "OTHER",
            "signing_key": TEST_KEY_B64,
            "key_scope": TEST_SCOPE,
        }), encoding="utf-8")

        args = ['sign', '--path', '/', '--config', str(path), '--timestamp', '1440938160',
                '--endpoint', 'localhost', '--access-key-id', 'AKID']
        assert main(args) == 0
        out = capsys.readouterr().out
        assert "host: localhost" in out
        assert "Credential=AKID/" in out

    def test_missing_settings_file(self, tmp_path, capsys):
        assert main(['sign', '--path', '/', '--config', str(tmp_path / "none.json")]) == 1
        assert "Failed to read settings file" in capsys.readouterr().err

    def test_malformed_logging_settings(self, tmp_path, capsys):
        path = tmp_path / "s3auth.json"
        path.write_text(json.dumps({
            "endpoint": "localhost",
            "access_key_id": "AKID",
            "signing_key": TEST_KEY_B64,
            "key_scope": TEST_SCOPE,
            "logging": {"level": 10},
        }), encoding="utf-8")

        assert main(['sign', '--path', '/', '--config', str(path), '--timestamp', '1440938160']) == 1
        assert "logging.level must be a string" in capsys.readouterr().err

    def test_keyboard_interrupt(self, capsys):
        with patch('s3auth_sdk.cli.handle_sign_command', side_effect=KeyboardInterrupt):
            assert main(SIGN_ARGS) == 130
        assert "cancelled" in capsys.readouterr().err
