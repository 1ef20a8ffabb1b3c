"""Azure CLI authentication for the credential helper.

Public API:
- get_credential() → TokenCredential (the identity broker handle)
- TokenAcquirer, Credential (token requests with scope normalization)
- HelperSettings, HelperConfig, OverrideTable, load_config() (settings)
- default_resource(), scope_from_resource() (scope helpers)
"""

from .acquirer import Credential, TokenAcquirer
from .config import HelperConfig, HelperSettings, OverrideTable, load_config
from .factory import get_credential
from .scopes import DEFAULT_SCOPE_SUFFIX, default_resource, scope_from_resource

__all__ = [
    "Credential",
    "TokenAcquirer",
    "HelperConfig",
    "HelperSettings",
    "OverrideTable",
    "load_config",
    "get_credential",
    "DEFAULT_SCOPE_SUFFIX",
    "default_resource",
    "scope_from_resource",
]
