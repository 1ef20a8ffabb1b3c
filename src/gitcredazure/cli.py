"""Command-line entry point: ``git-credential-azure-cli <operation>``."""

from __future__ import annotations

import argparse
import functools
import logging
import sys
from enum import Enum
from typing import IO

from pydantic import ValidationError

from gitcredazure.auth.config import HelperSettings, load_config
from gitcredazure.auth.factory import get_credential
from gitcredazure.commands import package_version, render_exports, run_init
from gitcredazure.credential.resolver import handle_get
from gitcredazure.exceptions import BrokerConstructionError, SetupError
from gitcredazure.gitconfig import GitConfig

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    """Operations the helper recognizes; anything else is ignored."""

    GET = "get"
    STORE = "store"
    ERASE = "erase"
    INIT = "init"
    EXPORTS = "exports"
    VERSION = "version"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-credential-azure-cli",
        description=(
            "Git credential helper that uses Azure CLI credentials to obtain "
            "OAuth bearer tokens for Azure DevOps and other Azure-authenticated "
            "git services."
        ),
    )
    parser.add_argument(
        "operation",
        nargs="?",
        default=None,
        help="get (called by git), init, exports or version",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase verbosity (use -v, -vv, or -vvv)",
    )
    return parser


def configure_logging(verbosity: int) -> None:
    """Send log records to stderr at a level derived from ``verbosity``.

    stdout is reserved for the credential response.
    """
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(
        level=level, format="[%(levelname)s] %(name)s: %(message)s", stream=sys.stderr
    )
    # azure.identity logs every failed get_token at WARNING; keep it quiet
    # unless the user asked for everything.
    logging.getLogger("azure").setLevel(logging.DEBUG if verbosity >= 3 else logging.ERROR)


def main(
    argv: list[str] | None = None,
    *,
    stdin: IO[str] | None = None,
    stdout: IO[str] | None = None,
    stderr: IO[str] | None = None,
) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    # git may pass operations or flags this helper does not know about.
    args, _unknown = build_parser().parse_known_args(argv)

    try:
        operation = Operation(args.operation)
    except ValueError:
        operation = None
    if operation in (None, Operation.STORE, Operation.ERASE):
        # Nothing is cached here, so store and erase have nothing to do. They
        # must succeed even when the environment settings are broken.
        configure_logging(args.verbose)
        logger.debug("No action for operation: %s", args.operation)
        return 0

    try:
        settings = HelperSettings()
    except ValidationError as exc:
        print(f"error: invalid environment settings: {exc}", file=stderr)
        return 2
    configure_logging(args.verbose + settings.verbosity)

    git = GitConfig(settings.git_executable, timeout=settings.process_timeout)

    match operation:
        case Operation.GET:
            factory = functools.partial(
                get_credential, process_timeout=settings.process_timeout
            )
            try:
                handle_get(stdin, stdout, load_config(git), factory)
            except BrokerConstructionError as exc:
                print(f"error: {exc}", file=stderr)
                return 1
        case Operation.INIT:
            try:
                run_init(
                    git,
                    load_config(git).allowed_domains,
                    stdout=stdout,
                    stderr=stderr,
                )
            except SetupError as exc:
                print(f"Error: {exc}", file=stderr)
                return 1
        case Operation.EXPORTS:
            try:
                stdout.write(render_exports())
            except SetupError as exc:
                print(f"Error: {exc}", file=stderr)
                return 1
        case Operation.VERSION:
            stdout.write(f"{package_version()}\n")
    return 0


__all__ = ["Operation", "build_parser", "configure_logging", "main"]
