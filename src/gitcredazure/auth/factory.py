from __future__ import annotations

import logging

from azure.core.credentials import TokenCredential
from azure.identity import AzureCliCredential

from gitcredazure.exceptions import BrokerConstructionError

logger = logging.getLogger(__name__)


def get_credential(tenant: str = "", *, process_timeout: int = 10) -> TokenCredential:
    """Construct the Azure CLI :class:`TokenCredential` used as identity broker.

    Args:
        tenant: Tenant to bind the credential to. If empty, the tenant of the
            active ``az login`` session is used.
        process_timeout: Seconds to wait for each ``az`` invocation.

    Returns:
        An :class:`AzureCliCredential`.

    Raises:
        BrokerConstructionError: If the credential cannot be created.
    """
    kwargs: dict[str, object] = {"process_timeout": process_timeout}
    if tenant:
        logger.info("Using tenant override: %s", tenant)
        kwargs["tenant_id"] = tenant

    try:
        return AzureCliCredential(**kwargs)
    except (TypeError, ValueError) as exc:
        raise BrokerConstructionError(
            f"Failed to create Azure CLI credential: {exc}"
        ) from exc
