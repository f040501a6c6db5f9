# keytool gen_keys [--path FILE]
# keytool sign [--path FILE] --message TEXT [--sha256]
# keytool verify --public_key HEX --message TEXT --signature HEX [--sha256]
#
# Signatures do not record the hash mode, sign and verify must agree on --sha256.

import argparse
import logging
import os
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from digests import HashMode
from signature_algorithm import ConfigError, InvalidSignatureError, KeyToolError

from . import operations
from .config import LOG_LEVELS, KeyToolConfig, check_log_level, load_config

logger = logging.getLogger(__name__)

VERSION = '1.0.0'

# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2

KEYS_TEMPLATE = """
PrivateKey: {}
PublicKey:  {}
"""

SHA256_HELP = 'use sha256 as hash function (default is ripemd160(sha256(b)))'


@dataclass(frozen=True)
class Flag:
    name: str
    help: str = ''
    default: str = ''
    is_bool: bool = False


@dataclass(frozen=True)
class Command:
    name: str
    help: str
    flags: tuple[Flag, ...]
    handler: Callable[[argparse.Namespace], int]


def setup_logging(level: str = 'INFO', log_file: str | None = None) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file))
        except OSError as exc:
            msg = f'cannot open log file {log_file}: {exc.strerror or exc}'
            raise ConfigError(msg) from exc

    logging.basicConfig(
        level=check_log_level(level),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers,
    )


def print_keys(key_pair: operations.KeyPair) -> None:
    print(KEYS_TEMPLATE.format(key_pair.private_key_hex, key_pair.public_key_hex), end='')


def message_bytes(args: argparse.Namespace) -> bytes:
    # undoes the surrogateescape decoding of argv, so any byte string can be signed
    return os.fsencode(args.message)


def gen_keys_cmd(args: argparse.Namespace) -> int:
    key_pair = operations.generate_keys(args.path)
    print_keys(key_pair)
    return EXIT_SUCCESS


def sign_cmd(args: argparse.Namespace) -> int:
    result = operations.sign(args.path, message_bytes(args), HashMode.from_flag(args.sha256))
    print_keys(result.key_pair)
    print(f'signatureHex: {result.signature_hex}')
    return EXIT_SUCCESS


def verify_cmd(args: argparse.Namespace) -> int:
    operations.verify(args.public_key, message_bytes(args), args.signature, HashMode.from_flag(args.sha256))
    print('signature is valid')
    return EXIT_SUCCESS


def build_commands(config: KeyToolConfig) -> list[Command]:
    path = Flag('path', 'path of the private key file', default=config.keys_path)
    message = Flag('message', 'message to sign or verify')
    sha256 = Flag('sha256', SHA256_HELP, is_bool=True)

    return [
        Command('gen_keys', 'Generation private and public key', (path,), gen_keys_cmd),
        Command('sign', 'Sign given message with previously generated private key', (path, message, sha256), sign_cmd),
        Command(
            'verify',
            'Verify a signature of given message against a public key',
            (
                Flag('public_key', 'compressed or uncompressed public key, hex'),
                message,
                Flag('signature', 'DER signature, hex'),
                sha256,
            ),
            verify_cmd,
        ),
    ]


def add_global_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--config',
        '-c',
        type=Path,
        default=None,
        help='path to a JSON configuration file (default: ./keytool.json if present)',
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default=None,
        choices=LOG_LEVELS,
        help='log level (overrides config)',
    )


def create_parser(commands: Sequence[Command]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='keytool', description='Command line interface for secp256k1 keys')
    parser.add_argument('--version', action='version', version=f'%(prog)s {VERSION}')
    add_global_arguments(parser)

    subparsers = parser.add_subparsers(dest='command', metavar='command')
    for command in commands:
        subparser = subparsers.add_parser(command.name, help=command.help, description=command.help)
        for flag in command.flags:
            if flag.is_bool:
                subparser.add_argument(f'--{flag.name}', action='store_true', default=False, help=flag.help)
            else:
                subparser.add_argument(f'--{flag.name}', type=str, default=flag.default, help=flag.help)
        subparser.set_defaults(func=command.handler)

    return parser


def dispatch(commands: Sequence[Command], argv: Sequence[str]) -> int:
    parser = create_parser(commands)
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_SUCCESS

    try:
        return args.func(args)
    except InvalidSignatureError as exc:
        logger.debug('%s failed', args.command, exc_info=True)
        print(f'Error: {exc}', file=sys.stderr)
        return EXIT_VERIFICATION_FAILED
    except KeyToolError as exc:
        logger.debug('%s failed', args.command, exc_info=True)
        print(f'Error: {exc}', file=sys.stderr)
        return EXIT_RUNTIME_ERROR


def global_argv(argv: Sequence[str], command_names: set[str]) -> list[str]:
    # global options come before the command, anything after it belongs to the command
    for i, arg in enumerate(argv):
        if arg in command_names:
            return list(argv[:i])
    return list(argv)


def main(argv: Sequence[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)

    # global options decide the config, which supplies defaults for the command flags
    command_names = {command.name for command in build_commands(KeyToolConfig())}
    bootstrap = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
    add_global_arguments(bootstrap)
    known, _ = bootstrap.parse_known_args(global_argv(argv, command_names))

    try:
        config = load_config(known.config, known.log_level)
        setup_logging(config.log_level, config.log_file)
    except KeyToolError as exc:
        print(f'Error: {exc}', file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    return dispatch(build_commands(config), argv)
