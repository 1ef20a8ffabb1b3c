from typing import Final

DEFAULT_SCOPE_SUFFIX: Final[str] = ".default"


def default_resource(protocol: str, host: str) -> str:
    """Return the audience the broker expects for a host with no override.

    Args:
        protocol: URL scheme from the credential request (e.g., "https").
        host: Host from the credential request (e.g., "dev.azure.com").

    Returns:
        ``"<protocol>://<host>/"``. The trailing slash is part of the audience
        identifier.
    """
    return f"{protocol}://{host}/"


def scope_from_resource(resource: str) -> str:
    """Turn a resource or realm into a ``/.default`` token scope."""
    if not resource.endswith("/"):
        resource += "/"
    return resource + DEFAULT_SCOPE_SUFFIX
