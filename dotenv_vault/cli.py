"""
dotenv-vault CLI — run a program with .env.vault / .env loaded.

Usage:
    dotenv-vault run -- my_program arg1 arg2
    dotenv-vault run --cwd /srv/app --override -- printenv ALPHA
    dotenv-vault version

Exit codes: the program's own exit code, or
    78   environment could not be loaded (program not started)
    126  program could not be executed
    127  program not found
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

EXIT_USAGE = 2
EXIT_CANNOT_EXECUTE = 126
EXIT_NOT_FOUND = 127
EXIT_LOAD_FAILED = 78  # EX_CONFIG


def _program_argv(captured: list[str]) -> list[str]:
    """Drop the separator in front of PROGRAM; later ``--`` belong to it."""
    if captured and captured[0] == "--":
        return captured[1:]
    return captured


def _configure_logging(debug: bool, quiet: bool) -> None:
    from dotenv_vault import __version__

    level = logging.DEBUG if debug else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format=f"[dotenv-vault@{__version__}][%(levelname)s] %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="dotenv-vault",
        description="Load .env.vault (with DOTENV_KEY) or .env and run a program with it.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    subparsers = parser.add_subparsers(dest="command")

    # run
    run_parser = subparsers.add_parser(
        "run", help="Load the environment and run PROGRAM (after --)"
    )
    run_parser.add_argument("--cwd", type=str, help="Directory holding .env.vault / .env")
    run_parser.add_argument(
        "--override", action="store_true", help="Let file values replace existing variables"
    )
    run_parser.add_argument("--quiet", "-q", action="store_true", help="Only log warnings")
    run_parser.add_argument("program", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)

    # version
    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    if args.version or args.command == "version":
        from dotenv_vault import __version__

        print(f"dotenv-vault {__version__}")
        return 0

    if args.command == "run":
        args.program = _program_argv(args.program)
        return _cmd_run(args)
    else:
        parser.print_help()
        return 0


def _cmd_run(args: argparse.Namespace) -> int:
    from dotenv_vault.config import LoaderConfig
    from dotenv_vault.errors import DotenvVaultError
    from dotenv_vault.injector import MemoryEnvironment
    from dotenv_vault.loader import Loader
    from dotenv_vault.runner import run_command

    if not args.program:
        print("Error: no program given. Usage: dotenv-vault run -- PROGRAM [ARGS...]", file=sys.stderr)
        return EXIT_USAGE

    config = LoaderConfig.from_env(args.cwd)
    _configure_logging(config.debug, args.quiet)

    env = MemoryEnvironment(os.environ)
    try:
        Loader(config).load(override=args.override, environ=env)
    except (DotenvVaultError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_LOAD_FAILED

    try:
        return run_command(args.program, env=env.values, cwd=config.cwd)
    except FileNotFoundError:
        print(f"Error: program not found: {args.program[0]}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except OSError as e:
        print(f"Error: cannot execute {args.program[0]}: {e}", file=sys.stderr)
        return EXIT_CANNOT_EXECUTE


if __name__ == "__main__":
    sys.exit(main())
