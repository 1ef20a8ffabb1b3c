"""Exception hierarchy for the credential helper."""

from __future__ import annotations


class CredentialHelperError(Exception):
    """Base exception for all credential helper errors."""


class BrokerConstructionError(CredentialHelperError):
    """The Azure CLI credential could not be created at all."""


class AcquisitionError(CredentialHelperError):
    """The broker rejected a token request or could not be reached."""

    def __init__(self, message: str, *, scope: str) -> None:
        super().__init__(message)
        self.scope = scope


class SetupError(CredentialHelperError):
    """A one-time setup step (git config, executable lookup) failed."""
