from __future__ import annotations

import logging
from typing import IO, Callable

from azure.core.credentials import TokenCredential

from gitcredazure.auth.acquirer import Credential, TokenAcquirer
from gitcredazure.auth.config import HelperConfig
from gitcredazure.auth.factory import get_credential
from gitcredazure.exceptions import AcquisitionError

from .domains import is_allowed
from .overrides import has_resource_override, resolve_resource, resolve_tenant
from .request import CredentialRequest, extract_realm, parse_request

logger = logging.getLogger(__name__)

CredentialFactory = Callable[[str], TokenCredential]


class CredentialResolver:
    """Decide which bearer token, if any, git should use for a request.

    A request is answered only for ``https`` hosts inside the allowed domains.
    The token is first requested for the configured (or default) resource.
    If that fails and the resource was not an explicit override, the request
    is retried once with the ``realm`` advertised in the server's
    ``WWW-Authenticate`` challenge.
    """

    def __init__(
        self,
        config: HelperConfig,
        credential_factory: CredentialFactory = get_credential,
    ) -> None:
        """Initialize the resolver.

        Args:
            config: Configuration snapshot for this invocation.
            credential_factory: Callable building the broker credential for a
                tenant (``""`` meaning the broker's default tenant).
        """
        self._config = config
        self._credential_factory = credential_factory

    def resolve(self, request: CredentialRequest) -> Credential | None:
        """Return a credential for ``request``, or ``None`` to stay silent.

        Raises:
            BrokerConstructionError: If the broker credential cannot be built.
        """
        protocol, host = request.protocol, request.host
        logger.info("Handling get request for %s://%s", protocol, host)

        if protocol != "https":
            logger.info("Skipping non-HTTPS protocol: %s", protocol)
            return None
        if not is_allowed(host, self._config.allowed_domains):
            logger.info("Host not in allowed domains: %s", host)
            return None

        overrides = self._config.overrides
        tenant = resolve_tenant(protocol, host, overrides)
        acquirer = TokenAcquirer(self._credential_factory(tenant))

        resource = resolve_resource(protocol, host, overrides)
        logger.info("Using resource: %s", resource)
        try:
            credential = acquirer.acquire(resource)
        except AcquisitionError:
            credential = self._retry_with_realm(acquirer, request)

        if credential is None or not credential.present:
            return None
        logger.info("Successfully obtained credential")
        return credential

    def _retry_with_realm(
        self, acquirer: TokenAcquirer, request: CredentialRequest
    ) -> Credential | None:
        if has_resource_override(request.protocol, request.host, self._config.overrides):
            return None

        realm = extract_realm(request.challenges)
        if not realm:
            return None

        # The acquirer keeps the tenant bound for the primary attempt.
        logger.info("Retrying with realm from wwwauth: %s", realm)
        try:
            return acquirer.acquire(realm)
        except AcquisitionError:
            return None


def format_credential(credential: Credential) -> str:
    """Render a credential as a ``git credential`` response."""
    lines = [
        "authtype=bearer",
        "username=null",
        f"password={credential.token}",
    ]
    if credential.expires_on > 0:
        lines.append(f"password_expiry_utc={credential.expires_on}")
    return "\n".join(lines) + "\n"


def handle_get(
    stdin: IO[str],
    stdout: IO[str],
    config: HelperConfig,
    credential_factory: CredentialFactory = get_credential,
) -> bool:
    """Answer one ``get`` request.

    Returns:
        True if a credential was written to ``stdout``.
    """
    request = parse_request(stdin)
    credential = CredentialResolver(config, credential_factory).resolve(request)
    if credential is None:
        return False
    stdout.write(format_credential(credential))
    stdout.flush()
    return True
