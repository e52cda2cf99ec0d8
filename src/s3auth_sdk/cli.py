"""
Command-line interface for S3 Auth Python SDK
Derives SigV4 signing keys and signs S3 requests from the shell
"""

import argparse
import sys
from typing import Optional

from . import initialize_sdk, __version__
from .config import (
    S3AuthSettings,
    LoggingSettings,
    SettingsError,
    load_settings_from_file,
    load_settings_from_env,
    configure_logging,
)
from .crypto.derivation import derive_signing_key, build_key_scope, DerivedSigningKey
from .exceptions import S3AuthSDKError
from .signing import SigV4Signer, SigningError, HttpMethod
from .signing.utils import format_date_stamp, generate_timestamp


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='s3auth-cli',
        description='S3 Auth SDK command-line interface for SigV4 key derivation and request signing'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'S3 Auth Python SDK {__version__}'
    )

    parser.add_argument(
        '--check-compatibility',
        action='store_true',
        help='Check platform compatibility and exit'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='WARNING',
        help='Logging level (default: WARNING)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_keygen_parser(subparsers)
    setup_sign_parser(subparsers)

    return parser


def setup_keygen_parser(subparsers):
    """Setup signing key derivation subcommand."""
    keygen_parser = subparsers.add_parser('keygen', help='Derive a SigV4 signing key from a secret access key')
    keygen_parser.add_argument('--secret-key', required=True, help='AWS secret access key')
    keygen_parser.add_argument('--region', required=True, help='Region name, e.g. us-east-1')
    keygen_parser.add_argument('--service', default='s3', help='Service name (default: s3)')
    keygen_parser.add_argument('--date', help='Key date as YYYYMMDD (default: today, UTC)')
    keygen_parser.add_argument(
        '--format',
        choices=['base64', 'hex'],
        default='base64',
        help='Output format for the signing key (default: base64)'
    )


def setup_sign_parser(subparsers):
    """Setup request signing subcommand."""
    sign_parser = subparsers.add_parser('sign', help='Sign an S3 request and print the headers')
    sign_parser.add_argument(
        '--method',
        default='GET',
        type=str.upper,
        choices=[m.value for m in HttpMethod],
        help='HTTP method (default: GET)'
    )
    sign_parser.add_argument('--path', required=True, help='Request path without query string')
    sign_parser.add_argument('--query', default='', help='Raw query string without "?"')
    sign_parser.add_argument('--endpoint', help='S3 host name (overrides settings)')
    sign_parser.add_argument('--access-key-id', help='Access key ID (overrides settings)')
    sign_parser.add_argument('--signing-key', help='Base64 pre-derived signing key')
    sign_parser.add_argument('--key-scope', help='Key scope of --signing-key')
    sign_parser.add_argument('--config', help='JSON settings file (default: S3AUTH_* environment)')
    sign_parser.add_argument('--timestamp', type=int, help='Request time in epoch seconds (default: now)')
    sign_parser.add_argument(
        '--show-canonical',
        action='store_true',
        help='Also print the canonical request and string to sign'
    )


def handle_keygen_command(args) -> int:
    """Handle signing key derivation command."""
    date_stamp = args.date or format_date_stamp(generate_timestamp())

    key = DerivedSigningKey(
        signing_key=derive_signing_key(args.secret_key, date_stamp, args.region, args.service),
        key_scope=build_key_scope(date_stamp, args.region, args.service)
    )

    if args.format == 'hex':
        print(f"Signing Key: {key.signing_key.hex()}")
    else:
        print(f"Signing Key: {key.to_base64()}")
    print(f"Key Scope: {key.key_scope}")
    return 0


def _load_sign_settings(args) -> S3AuthSettings:
    if args.signing_key:
        if not args.key_scope:
            raise SettingsError("--key-scope is required with --signing-key", "MISSING_FIELD")
        settings = S3AuthSettings(signing_key=args.signing_key, key_scope=args.key_scope)
    elif args.config:
        settings = load_settings_from_file(args.config)
    else:
        settings = load_settings_from_env()

    if args.access_key_id:
        settings.access_key_id = args.access_key_id
    if args.endpoint:
        settings.endpoint = args.endpoint

    return settings


def handle_sign_command(args) -> int:
    """Handle request signing command."""
    settings = _load_sign_settings(args)
    signer = SigV4Signer(settings.to_signing_config())

    result = signer.sign(
        args.method,
        args.path,
        args.query,
        start_sec=args.timestamp
    )

    if args.show_canonical:
        print("# Canonical Request")
        print(result.canonical_request)
        print("# String To Sign")
        print(result.string_to_sign)
        print("# Headers")

    for pair in result.headers:
        print(f"{pair.name}: {pair.value}")

    return 0


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(LoggingSettings(level=args.log_level))

        if args.check_compatibility:
            result = initialize_sdk()
            if result['compatible']:
                print("✓ Platform is compatible with S3 Auth SDK")
                for warning in result['warnings']:
                    print(f"  Warning: {warning}")
                return 0
            else:
                print("✗ Platform is not compatible with S3 Auth SDK")
                for warning in result['warnings']:
                    print(f"  Error: {warning}")
                return 1

        if args.command == 'keygen':
            return handle_keygen_command(args)
        elif args.command == 'sign':
            return handle_sign_command(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except (S3AuthSDKError, SigningError, SettingsError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
