from __future__ import annotations

import logging
import re
import subprocess

from .exceptions import SetupError

logger = logging.getLogger(__name__)

# `git config` exits with 1 when the requested key or pattern has no value.
_NOT_FOUND = 1


class GitConfig:
    """Read-mostly access to git's layered configuration.

    All reads go through ``git config --null`` so values containing spaces or
    newlines survive intact. Keys are returned in git's canonical form: the
    section and variable name lower-cased, the subsection (for example a URL)
    kept as written.
    """

    def __init__(self, executable: str = "git", *, timeout: float | None = 10) -> None:
        self._executable = executable
        self._timeout = timeout

    def _read(self, *args: str) -> list[str]:
        """Run a ``git config`` read and return the NUL-separated records."""
        cmd = [self._executable, "config", "--null", *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning("git config %s timed out after %ss", " ".join(args), self._timeout)
            return []
        except OSError as exc:
            logger.warning("Could not run %s: %s", self._executable, exc)
            return []

        if result.returncode == _NOT_FOUND:
            return []
        if result.returncode != 0:
            logger.warning(
                "git config %s failed (exit %d): %s",
                " ".join(args),
                result.returncode,
                result.stderr.strip(),
            )
            return []

        records = result.stdout.split("\0")
        # Output ends with a terminating NUL, leaving one empty trailing record.
        if records and records[-1] == "":
            records.pop()
        return records

    def get_all(self, key: str) -> list[str]:
        """Return every value of a multi-valued key, in configuration order."""
        return self._read("--get-all", key)

    def entries(self, prefix: str) -> list[tuple[str, str]]:
        """Return ``(key, value)`` pairs for all keys starting with ``prefix``.

        Args:
            prefix: Key prefix such as ``"azureclicredentialhelper."``. The
                section part is matched case-insensitively, as git does.

        Returns:
            The matching entries in configuration order. A key set without a
            value (``[section] flag``) is reported with an empty value.
        """
        pattern = "^" + re.escape(prefix.lower())
        pairs: list[tuple[str, str]] = []
        for record in self._read("--get-regexp", pattern):
            key, _, value = record.partition("\n")
            pairs.append((key, value))
        return pairs

    def set_global(self, *args: str) -> None:
        """Run ``git config --global <args>``, echoing git's own output.

        Raises:
            SetupError: If git cannot be run or exits non-zero.
        """
        cmd = [self._executable, "config", "--global", *args]
        logger.info("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, check=False, timeout=self._timeout)
        except subprocess.TimeoutExpired as exc:
            raise SetupError(f"{' '.join(cmd)} timed out after {self._timeout}s") from exc
        except OSError as exc:
            raise SetupError(f"Failed to execute {self._executable}: {exc}") from exc
        if result.returncode != 0:
            raise SetupError(
                f"{' '.join(cmd)} exited with status {result.returncode}"
            )
