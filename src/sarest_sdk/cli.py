"""
Command-line interface for SecureAuth REST Python SDK
Prepares signed calls for inspection and executes them against an appliance
"""

import argparse
import json
import logging
import sys
from typing import Optional

from . import __version__
from .config import load_config_from_env, load_config_from_file, load_credentials_from_env
from .exceptions import SARestSDKError
from .models import FactorsResponse, IPEval
from .operations import OPERATION_TYPES, create_operation
from .signing import fixed_timestamp_source, prepare

logger = logging.getLogger(__name__)

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='sarest-cli',
        description='SecureAuth REST SDK command-line interface for signed appliance calls'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'SecureAuth REST Python SDK {__version__}'
    )
    parser.add_argument(
        '--config',
        help='JSON configuration file (defaults to SAREST_* environment variables)'
    )
    parser.add_argument(
        '--log-level',
        choices=LOG_LEVELS,
        help='Logging level (default: from configuration, WARNING)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    prepare_parser = subparsers.add_parser('prepare', help='Print a signed call without sending it')
    add_operation_arguments(prepare_parser)
    prepare_parser.add_argument(
        '--timestamp',
        help='Sign with a fixed HTTP-date, e.g. "Tue, 03 Jun 2025 14:00:00 GMT"'
    )

    call_parser = subparsers.add_parser('call', help='Send a signed call to the appliance')
    add_operation_arguments(call_parser)

    return parser


def add_operation_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by the prepare and call subcommands."""
    parser.add_argument('type', choices=sorted(OPERATION_TYPES), help='Operation type')
    parser.add_argument('--user-id', required=True, help='User identifier')
    parser.add_argument('--token', help='Password, KBA answer or OTP')
    parser.add_argument('--factor-id', help='Factor identifier, e.g. Phone1 or a device id')
    parser.add_argument('--ip-address', help='IP address for risk evaluation')


def build_operation(args):
    return create_operation(
        args.type,
        user_id=args.user_id,
        token=args.token,
        factor_id=args.factor_id,
        ip_address=args.ip_address
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        stream=sys.stderr
    )


def handle_prepare_command(args) -> int:
    """Handle the prepare command."""
    if args.config:
        config = load_config_from_file(args.config)
        credentials = config.credentials
        configure_logging(args.log_level or config.logging.level)
    else:
        credentials = load_credentials_from_env()
        configure_logging(args.log_level or 'WARNING')

    source = fixed_timestamp_source(args.timestamp) if args.timestamp else None
    prepared = prepare(build_operation(args), credentials, source)

    print(json.dumps({
        'method': prepared.method.value,
        'path': prepared.path,
        'headers': prepared.headers(),
        'body': prepared.body,
    }, indent=2))
    return 0


def handle_call_command(args) -> int:
    """Handle the call command."""
    config = load_config_from_file(args.config) if args.config else load_config_from_env()
    configure_logging(args.log_level or config.logging.level)

    operation = build_operation(args)
    with config.create_client() as client:
        result = client.execute(operation)

    output = {'status': result.status, 'message': result.message}
    if isinstance(result, IPEval):
        output.update(risk_factor=result.risk_factor, risk_color=result.risk_color, risk_desc=result.risk_desc)
    elif isinstance(result, FactorsResponse):
        output['factors'] = [{'type': f.type, 'id': f.id, 'value': f.value} for f in result.factors]
    else:
        output['succeeded'] = result.succeeded

    print(json.dumps(output, indent=2))
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
        if args.command == 'prepare':
            return handle_prepare_command(args)
        elif args.command == 'call':
            return handle_call_command(args)
        else:
            parser.print_help()
            return 2

    except SARestSDKError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
