from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import IO, Iterable, Mapping

logger = logging.getLogger(__name__)

# git sends each WWW-Authenticate header of the failed response as its own
# `wwwauth[]=` line.
CHALLENGE_KEY = "wwwauth[]"

_REALM_RE = re.compile(r'realm="([^"]+)"')
_REDACTED_KEYS = frozenset({"password", "oauth_refresh_token"})


@dataclass(frozen=True)
class CredentialRequest:
    """A parsed ``git credential`` request."""

    attributes: Mapping[str, str] = field(default_factory=dict)
    challenges: tuple[str, ...] = ()

    @property
    def protocol(self) -> str:
        return self.attributes.get("protocol", "")

    @property
    def host(self) -> str:
        return self.attributes.get("host", "")

    @property
    def path(self) -> str:
        return self.attributes.get("path", "")


def parse_request(stream: Iterable[str] | IO[str]) -> CredentialRequest:
    """Read ``key=value`` lines up to the first blank line or end of input.

    ``wwwauth[]`` lines are collected in order; any other key overwrites a
    previous value. Lines without ``=`` are skipped.
    """
    attributes: dict[str, str] = {}
    challenges: list[str] = []

    for raw in stream:
        line = raw.strip()
        if not line:
            break

        key, sep, value = line.partition("=")
        if not sep:
            logger.debug("Ignoring malformed input line: %r", line)
            continue

        if key == CHALLENGE_KEY:
            challenges.append(value)
        else:
            attributes[key] = value
        logger.debug(
            "Parsed input: %s=%s", key, "<redacted>" if key in _REDACTED_KEYS else value
        )

    return CredentialRequest(
        attributes=MappingProxyType(attributes), challenges=tuple(challenges)
    )


def extract_realm(challenges: Iterable[str]) -> str:
    """Return the first ``realm="..."`` value across the challenges, or ``""``."""
    for challenge in challenges:
        match = _REALM_RE.search(challenge)
        if match:
            return match.group(1)
    return ""
