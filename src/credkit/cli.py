"""
Command-line interface for credkit
Computes partner signatures, packs agent credentials and serves the web API
"""

import argparse
import os
import sys
import json
from typing import Optional

from . import initialize_sdk, __version__
from .config.partner_config import CredkitConfig, LoggingConfig, PartnerConfigProvider, ENV_CONFIG_FILE
from .encoding.signature import SignatureEncoder
from .encoding.packer import CredentialPacker
from .encoding.types import SignatureRequest, PackRequest
from .exceptions import CredkitError, ValidationError, ConfigurationError
from .logging_config import configure_logging


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='credkit',
        description='Partner signature and agent credential encoding tools'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'credkit {__version__}'
    )

    parser.add_argument(
        '--check-compatibility',
        action='store_true',
        help='Check platform compatibility and exit'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: configuration file, else WARNING)'
    )

    parser.add_argument(
        '--log-format',
        choices=['text', 'json'],
        help='Log output format (default: configuration file, else text)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_signature_parser(subparsers)
    setup_pack_parser(subparsers)
    setup_serve_parser(subparsers)

    return parser


def setup_signature_parser(subparsers):
    """Setup signature subcommand."""
    signature_parser = subparsers.add_parser('signature', help='Compute the MD5 partner signature')
    signature_parser.add_argument('--partner-id', help='Partner ID (resolved from configuration if omitted)')
    signature_parser.add_argument('--partner-key', help='Partner Key (resolved from configuration if omitted)')
    signature_parser.add_argument('--config', help='JSON configuration file with default partner credentials')
    signature_parser.add_argument('--config-url', help='Signature service URL to fetch default credentials from')
    signature_parser.add_argument(
        '--format',
        choices=['text', 'json'],
        default='text',
        help='Output format (default: text)'
    )
    signature_parser.add_argument(
        '--show-details',
        action='store_true',
        help='Print the partner id, key and concatenated input'
    )


def setup_pack_parser(subparsers):
    """Setup pack and unpack subcommands."""
    pack_parser = subparsers.add_parser('pack', help='Encode agent credentials as base64')
    pack_parser.add_argument('agent_id', help='Agent identifier')
    pack_parser.add_argument('username', help='Username')
    pack_parser.add_argument('password', help='Password')
    pack_parser.add_argument(
        '--format',
        choices=['text', 'json'],
        default='text',
        help='Output format (default: text)'
    )

    unpack_parser = subparsers.add_parser('unpack', help='Decode packed credentials to the record string')
    unpack_parser.add_argument('encoded', help='Base64 value produced by pack')


def setup_serve_parser(subparsers):
    """Setup web service subcommand."""
    serve_parser = subparsers.add_parser('serve', help='Run the signature web service')
    serve_parser.add_argument('--host', default='127.0.0.1', help='Bind address (default: 127.0.0.1)')
    serve_parser.add_argument('--port', type=int, default=8080, help='Port (default: 8080)')
    serve_parser.add_argument('--config', help='JSON configuration file with default partner credentials')


def build_logging_config(args) -> LoggingConfig:
    """
    Combine the configuration file's logging section with the command line.

    ``--log-level`` and ``--log-format`` override the file; without either
    source the CLI logs WARNING and above as plain text.
    """
    config_file = getattr(args, 'config', None) or os.environ.get(ENV_CONFIG_FILE)
    if config_file:
        file_logging = CredkitConfig.from_file(config_file).logging
        level, structured = file_logging.level, file_logging.structured
    else:
        level, structured = 'WARNING', False

    if args.log_level is not None:
        level = args.log_level
    if args.log_format is not None:
        structured = args.log_format == 'json'

    return LoggingConfig(level=level, structured=structured)


def resolve_partner_fields(args) -> SignatureRequest:
    """Fill missing partner fields from the configuration provider."""
    partner_id = args.partner_id
    partner_key = args.partner_key

    if partner_id is None or partner_key is None:
        provider = PartnerConfigProvider(config_file=args.config, service_url=args.config_url)
        defaults = provider.resolve()
        if partner_id is None:
            partner_id = defaults.partner_id
        if partner_key is None:
            partner_key = defaults.partner_key

    return SignatureRequest(partner_id, partner_key)


def handle_signature_command(args) -> int:
    """Handle signature computation."""
    request = resolve_partner_fields(args)
    result = SignatureEncoder().compute_result(request)

    if args.format == 'json':
        output = {'digest': result.digest}
        if args.show_details:
            output.update({
                'partnerId': request.partner_id,
                'partnerKey': request.partner_key,
                'concatenated': result.concatenated,
            })
        print(json.dumps(output))
        return 0

    print(result.digest)
    if args.show_details:
        print(f"  Partner ID: {request.partner_id}")
        print(f"  Partner Key: {request.partner_key}")
        print(f"  Concatenated: {result.concatenated}")
    return 0


def handle_pack_command(args) -> int:
    """Handle credential packing."""
    request = PackRequest(args.agent_id, args.username, args.password)
    result = CredentialPacker().pack_result(request)

    if args.format == 'json':
        print(json.dumps({'encoded': result.encoded}))
    else:
        print(result.encoded)
    return 0


def handle_unpack_command(args) -> int:
    """Handle packed credential decoding."""
    print(CredentialPacker().decode_record(args.encoded))
    return 0


def handle_serve_command(args) -> int:
    """Handle web service startup."""
    from .server import run_server

    partner_config = PartnerConfigProvider(config_file=args.config).resolve()
    run_server(host=args.host, port=args.port, partner_config=partner_config)
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
        configure_logging(build_logging_config(args))

        if args.check_compatibility:
            result = initialize_sdk()
            if result['compatible']:
                print("✓ Platform is compatible with credkit")
                for warning in result['warnings']:
                    print(f"  Warning: {warning}")
                return 0
            else:
                print("✗ Platform is not compatible with credkit")
                for warning in result['warnings']:
                    print(f"  Error: {warning}")
                return 1

        if args.command == 'signature':
            return handle_signature_command(args)
        elif args.command == 'pack':
            return handle_pack_command(args)
        elif args.command == 'unpack':
            return handle_unpack_command(args)
        elif args.command == 'serve':
            return handle_serve_command(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except CredkitError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ImportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
