from __future__ import annotations

import os
from typing import Any, Iterator

import pytest
from azure.core.credentials import AccessToken


@pytest.fixture(autouse=True)
def clear_helper_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove GIT_CREDENTIAL_AZURE_CLI_* vars to prevent cross-test leakage.

    Yields:
        Iterator[None]: Context manager semantics for pytest.
    """
    to_clear = [k for k in os.environ if k.upper().startswith("GIT_CREDENTIAL_AZURE_CLI_")]
    for k in to_clear:
        monkeypatch.delenv(k, raising=False)
    yield


class FakeCliCredential:
    """Stand-in for AzureCliCredential that answers from a script.

    ``responses`` maps a scope to an :class:`AccessToken` or an exception
    instance. Unknown scopes raise the ``default_error``.
    """

    responses: dict[str, Any] = {}
    default_error: Exception | None = None
    instances: list["FakeCliCredential"] = []

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = dict(kwargs)
        self.requested: list[str] = []
        type(self).instances.append(self)

    def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
        (scope,) = scopes
        self.requested.append(scope)
        result = type(self).responses.get(scope, type(self).default_error)
        if isinstance(result, Exception):
            raise result
        if result is None:
            raise AssertionError(f"unexpected scope requested: {scope}")
        return result


@pytest.fixture()
def fake_cli_credential(monkeypatch: pytest.MonkeyPatch) -> type[FakeCliCredential]:
    """Replace AzureCliCredential in the factory with a fresh scripted fake.

    Returns:
        type[FakeCliCredential]: The fake class; set ``responses`` on it and
        inspect ``instances`` afterwards.
    """
    import gitcredazure.auth.factory as factory

    fake = type(
        "AzureCliCredential",
        (FakeCliCredential,),
        {"responses": {}, "default_error": None, "instances": []},
    )
    monkeypatch.setattr(factory, "AzureCliCredential", fake)
    return fake
