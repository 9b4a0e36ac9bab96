"""Shared pytest fixtures for the full textvoice test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.keystore_stubs import InMemoryKeyStore
from tests.http_stubs import RecordingTransport

_CONFIG_ENV_KEYS = (
    "ELEVENLABS_API_KEY",
    "ELEVENLABS_BASE_URL",
    "DEFAULT_VOICE_ID",
    "DEFAULT_VOICE_NAME",
    "DEFAULT_MODEL_ID",
    "DEFAULT_STABILITY",
    "DEFAULT_SIMILARITY_BOOST",
    "DEFAULT_STYLE",
    "DEFAULT_USE_SPEAKER_BOOST",
    "DEFAULT_LANGUAGE_CODE",
    "DEFAULT_OUTPUT_FORMAT",
    "DEFAULT_TEXT_NORMALIZATION",
    "TEXTVOICE_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Clear textvoice env vars and run from an empty directory without `.env` files."""

    for key in _CONFIG_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)


@pytest.fixture
def key_store(monkeypatch: pytest.MonkeyPatch) -> InMemoryKeyStore:
    """Replace the CLI keyring store with an in-memory store."""

    store = InMemoryKeyStore()
    monkeypatch.setattr("textvoice.cli.open_key_store", lambda: store)
    return store


@pytest.fixture
def transport(monkeypatch: pytest.MonkeyPatch) -> RecordingTransport:
    """Patch ElevenLabs client HTTP calls with a recording transport."""

    recording = RecordingTransport()
    monkeypatch.setattr("textvoice.elevenlabs.client.requests.get", recording.get)
    monkeypatch.setattr("textvoice.elevenlabs.client.requests.post", recording.post)
    return recording
