"""Credential request handling: parsing, admission, overrides and resolution."""

from .domains import is_allowed
from .overrides import has_resource_override, resolve_resource, resolve_tenant
from .request import CredentialRequest, extract_realm, parse_request
from .resolver import CredentialResolver, format_credential, handle_get

__all__ = [
    "CredentialRequest",
    "CredentialResolver",
    "extract_realm",
    "format_credential",
    "handle_get",
    "has_resource_override",
    "is_allowed",
    "parse_request",
    "resolve_resource",
    "resolve_tenant",
]
