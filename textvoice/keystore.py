"""Keyring persistence for the ElevenLabs API key.

The key is kept under service `textvoice` with the account named after the
`ELEVENLABS_API_KEY` variable it stands in for. Commands read it after any
`--api-key` value and before the environment.
"""

from __future__ import annotations

from typing import Any

import keyring
from keyring.backends import fail
from keyring.errors import KeyringError, PasswordDeleteError

from .parsing import normalize_optional_string

KEYRING_SERVICE = "textvoice"
KEYRING_ACCOUNT = "ELEVENLABS_API_KEY"


class KeyringUnavailableError(RuntimeError):
    """Raised when a key is written while only the null keyring backend is active."""


def mask_api_key(api_key: str) -> str:
    """Return a display form that keeps only the last four characters."""

    if len(api_key) <= 8:
        return "****"
    return f"****{api_key[-4:]}"


class ApiKeyStore:
    """Read, write, and erase the API key in one keyring backend."""

    def __init__(self, backend: Any = None) -> None:
        """Bind to `backend`, defaulting to the process-wide keyring backend."""

        self._backend = backend if backend is not None else keyring.get_keyring()

    @property
    def backend_name(self) -> str:
        return str(getattr(self._backend, "name", type(self._backend).__name__))

    @property
    def usable(self) -> bool:
        """Whether the backend can hold secrets (the null backend cannot)."""

        return not isinstance(self._backend, fail.Keyring)

    def read(self) -> str | None:
        """Return the stored key. A locked or broken keyring reads as empty."""

        if not self.usable:
            return None
        try:
            value = self._backend.get_password(KEYRING_SERVICE, KEYRING_ACCOUNT)
        except KeyringError:
            return None
        return normalize_optional_string(value)

    def write(self, api_key: str) -> None:
        if not self.usable:
            raise KeyringUnavailableError(
                f"Keyring backend `{self.backend_name}` cannot store secrets."
            )
        self._backend.set_password(KEYRING_SERVICE, KEYRING_ACCOUNT, api_key)

    def erase(self) -> bool:
        """Delete the stored key and report whether one was present."""

        if self.read() is None:
            return False
        try:
            self._backend.delete_password(KEYRING_SERVICE, KEYRING_ACCOUNT)
        except PasswordDeleteError:
            return False
        return True


def open_key_store() -> ApiKeyStore:
    """Open the key store on the configured keyring backend."""

    return ApiKeyStore()
