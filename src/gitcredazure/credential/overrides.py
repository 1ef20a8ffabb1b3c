from __future__ import annotations

from typing import Mapping

from gitcredazure.auth.config import OverrideTable
from gitcredazure.auth.scopes import default_resource


def _lookup(mapping: Mapping[str, str], protocol: str, host: str) -> str | None:
    """Look up ``protocol://host`` first, then the bare host."""
    url = f"{protocol}://{host}"
    if url in mapping:
        return mapping[url]
    return mapping.get(host)


def has_resource_override(protocol: str, host: str, table: OverrideTable) -> bool:
    return _lookup(table.resources, protocol, host) is not None


def resolve_resource(protocol: str, host: str, table: OverrideTable) -> str:
    """Return the token resource for a host.

    Args:
        protocol: URL scheme of the request.
        host: Host of the request.
        table: Configured overrides.

    Returns:
        The override for ``protocol://host``, else the override for ``host``,
        else ``protocol://host/``.
    """
    resource = _lookup(table.resources, protocol, host)
    return resource if resource is not None else default_resource(protocol, host)


def resolve_tenant(protocol: str, host: str, table: OverrideTable) -> str:
    """Return the tenant override for a host, or ``""`` for the broker default."""
    return _lookup(table.tenants, protocol, host) or ""
