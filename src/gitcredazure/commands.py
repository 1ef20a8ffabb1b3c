"""Operations other than ``get``: one-time setup, shell exports and version."""

from __future__ import annotations

import logging
import netrc
import os
import shutil
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import IO, Iterable

from gitcredazure.credential.domains import is_allowed
from gitcredazure.exceptions import SetupError
from gitcredazure.gitconfig import GitConfig

logger = logging.getLogger(__name__)

DISTRIBUTION = "git-credential-azure-cli"


def package_version() -> str:
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return "0.0.0"


def executable_path(argv0: str | None = None) -> Path:
    """Return the absolute, symlink-free path of the running helper.

    Raises:
        SetupError: If the executable cannot be located or is not an
            executable file (e.g. when started with ``python -m``).
    """
    argv0 = argv0 if argv0 is not None else sys.argv[0]
    if not argv0:
        raise SetupError("failed to get executable path")

    candidate = argv0
    if os.sep not in argv0:
        candidate = shutil.which(argv0) or argv0

    path = Path(os.path.realpath(candidate))
    if not path.exists():
        raise SetupError(f"failed to resolve executable path: {argv0}")
    if not path.is_file() or not os.access(path, os.X_OK):
        raise SetupError(
            f"{path} is not an executable file; run the installed "
            "git-credential-azure-cli script instead"
        )
    return path


def find_netrc_conflicts(
    domains: Iterable[str], netrc_path: Path | None = None
) -> list[str]:
    """Return ``~/.netrc`` machines that fall inside ``domains``.

    Such entries make git send basic credentials before asking this helper.
    A missing or unparsable file yields no conflicts.
    """
    path = netrc_path or Path.home() / ".netrc"
    try:
        hosts = netrc.netrc(str(path)).hosts
    except FileNotFoundError:
        logger.debug("No .netrc file found at %s", path)
        return []
    except (OSError, netrc.NetrcParseError) as exc:
        logger.info("Failed to read .netrc: %s", exc)
        return []

    logger.debug("Checking .netrc at %s", path)
    domains = list(domains)
    conflicts = []
    for host in hosts:
        if is_allowed(host, domains):
            logger.info("Found matching host in .netrc: %s", host)
            conflicts.append(host.lower())
    return conflicts


def run_init(
    git: GitConfig,
    domains: Iterable[str],
    *,
    stdout: IO[str],
    stderr: IO[str],
    netrc_path: Path | None = None,
    argv0: str | None = None,
) -> None:
    """Register the cache helper and this helper in the global git config.

    Raises:
        SetupError: If the executable cannot be located or git config fails.
    """
    exe = executable_path(argv0)

    conflicts = find_netrc_conflicts(domains, netrc_path)
    if conflicts:
        stderr.write(
            "\nWARNING: Found entries in ~/.netrc that may conflict with this "
            "credential helper:\n"
        )
        for host in conflicts:
            stderr.write(f"   - {host}\n")
        stderr.write(
            "\nPlease remove these entries from ~/.netrc to avoid "
            "authentication conflicts.\n\n"
        )

    stdout.write("Configuring git credential helpers...\n")
    stdout.flush()

    # The cache helper goes first so repeated requests skip the az round-trip.
    git.set_global("--replace-all", "credential.helper", "cache")
    stdout.write("✓ Added cache credential helper\n")

    git.set_global("--add", "credential.helper", str(exe))
    stdout.write(f"✓ Added azure-cli credential helper: {exe}\n")

    stdout.write("\nGit credential configuration complete!\n")


def render_exports(argv0: str | None = None) -> str:
    """Return the shell line configuring ``GOAUTH`` to use this helper."""
    exe_dir = executable_path(argv0).parent
    return f'export GOAUTH="git {exe_dir}"\n'
