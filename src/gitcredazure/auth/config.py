from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from gitcredazure.gitconfig import GitConfig

logger = logging.getLogger(__name__)

CONFIG_NAMESPACE = "azureclicredentialhelper."
ALLOWED_DOMAIN_KEY = CONFIG_NAMESPACE + "alloweddomain"
RESOURCE_SUFFIX = ".resource"
TENANT_SUFFIX = ".tenant"

DEFAULT_ALLOWED_DOMAINS: tuple[str, ...] = ("visualstudio.com", "dev.azure.com")


class HelperSettings(BaseSettings):
    """Process-level settings for the credential helper.

    This model reads environment variables automatically using the
    ``GIT_CREDENTIAL_AZURE_CLI_`` prefix (e.g.,
    ``GIT_CREDENTIAL_AZURE_CLI_VERBOSITY``).

    Environment variables:
        - GIT_CREDENTIAL_AZURE_CLI_VERBOSITY
        - GIT_CREDENTIAL_AZURE_CLI_GIT_EXECUTABLE
        - GIT_CREDENTIAL_AZURE_CLI_PROCESS_TIMEOUT
    """

    model_config = SettingsConfigDict(
        env_prefix="GIT_CREDENTIAL_AZURE_CLI_",
        case_sensitive=False,
        extra="ignore",
    )

    verbosity: int = Field(default=0, ge=0)
    git_executable: str = "git"
    process_timeout: int = Field(default=10, gt=0)

    @field_validator("git_executable")
    @classmethod
    def _non_empty_executable(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("git_executable must not be empty")
        return v.strip()


class OverrideTable(BaseModel):
    """Resource and tenant overrides keyed by ``scheme://host`` or bare host."""

    model_config = ConfigDict(frozen=True)

    resources: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    tenants: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("resources", "tenants", mode="after")
    @classmethod
    def _read_only(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(v))

    @classmethod
    def from_entries(cls, entries: Iterable[tuple[str, str]]) -> "OverrideTable":
        """Classify namespaced git config entries into the two override maps.

        Keys look like ``azureclicredentialhelper.<url-or-host>.resource`` or
        ``...tenant``. Entries with an empty URL part or an empty value are
        skipped; a later entry for the same key replaces an earlier one.
        """
        resources: dict[str, str] = {}
        tenants: dict[str, str] = {}
        for key, value in entries:
            if not key.lower().startswith(CONFIG_NAMESPACE):
                continue
            rest = key[len(CONFIG_NAMESPACE) :]
            if rest.endswith(RESOURCE_SUFFIX):
                target, label = resources, "resource"
                url_part = rest[: -len(RESOURCE_SUFFIX)]
            elif rest.endswith(TENANT_SUFFIX):
                target, label = tenants, "tenant"
                url_part = rest[: -len(TENANT_SUFFIX)]
            else:
                continue
            if url_part and value:
                target[url_part] = value
                logger.debug("Loaded %s override: %s -> %s", label, url_part, value)
        return cls(resources=resources, tenants=tenants)


class HelperConfig(BaseModel):
    """Immutable configuration snapshot, built once per invocation."""

    model_config = ConfigDict(frozen=True)

    allowed_domains: tuple[str, ...] = DEFAULT_ALLOWED_DOMAINS
    overrides: OverrideTable = Field(default_factory=OverrideTable)

    @field_validator("allowed_domains", mode="before")
    @classmethod
    def _normalize_domains(cls, v: Iterable[str] | None) -> tuple[str, ...]:
        """Strip and lower-case domains, falling back to the defaults if none remain."""
        domains = tuple(d.strip().lower() for d in (v or ()) if d and d.strip())
        return domains or DEFAULT_ALLOWED_DOMAINS


def load_config(git: "GitConfig") -> HelperConfig:
    """Build the configuration snapshot from git config.

    Args:
        git: Configuration store to read from.

    Returns:
        The validated :class:`HelperConfig`.
    """
    logger.debug("Loading git configuration")
    domains = git.get_all(ALLOWED_DOMAIN_KEY)
    config = HelperConfig(
        allowed_domains=domains,
        overrides=OverrideTable.from_entries(git.entries(CONFIG_NAMESPACE)),
    )
    if domains:
        logger.debug("Loaded allowed domains from config: %s", config.allowed_domains)
    else:
        logger.debug("Using default allowed domains: %s", config.allowed_domains)
    return config
