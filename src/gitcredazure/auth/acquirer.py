from __future__ import annotations

import logging
from dataclasses import dataclass

from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError

from gitcredazure.exceptions import AcquisitionError

from .scopes import scope_from_resource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    """Bearer token returned by the broker."""

    token: str
    expires_on: int = 0

    @property
    def present(self) -> bool:
        return bool(self.token)


class TokenAcquirer:
    """Request ``/.default`` tokens from a broker credential.

    The acquirer never retries; choosing a different scope after a failure is
    the caller's job.
    """

    def __init__(self, credential: TokenCredential) -> None:
        self._credential = credential

    def acquire(self, resource: str) -> Credential:
        """Return a token for ``resource`` (an audience URL or realm).

        Raises:
            AcquisitionError: If the broker rejects the request or cannot be
                reached. The broker's exception is chained as ``__cause__``.
        """
        scope = scope_from_resource(resource)
        logger.debug("Requesting token for scope: %s", scope)
        try:
            tok = self._credential.get_token(scope)
        except (AzureError, ValueError) as exc:
            logger.info("Failed to get token: %s", exc)
            raise AcquisitionError(
                f"Token request for {scope} failed: {exc}", scope=scope
            ) from exc

        expires_on = int(tok.expires_on or 0)
        logger.debug("Token acquired, expires at: %s", expires_on)
        return Credential(token=tok.token, expires_on=expires_on)
