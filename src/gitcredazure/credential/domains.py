from typing import Iterable


def is_allowed(host: str, domains: Iterable[str]) -> bool:
    """Return True if ``host`` is one of ``domains`` or a subdomain of one.

    Matching is case-insensitive: ``msazure.visualstudio.com`` matches
    ``visualstudio.com`` but ``notvisualstudio.com`` does not.
    """
    host = host.lower()
    for domain in domains:
        domain = domain.lower()
        if host == domain or host.endswith("." + domain):
            return True
    return False
