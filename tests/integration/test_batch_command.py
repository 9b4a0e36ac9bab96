"""Integration tests for the directory `batch` command."""

from __future__ import annotations

from pathlib import Path

from pytest import MonkeyPatch
from typer.testing import CliRunner

from tests.keystore_stubs import InMemoryKeyStore
from tests.http_stubs import RecordingTransport, StubResponse
from textvoice.cli import app


def test_batch_converts_missing_outputs_and_skips_existing(
    monkeypatch: MonkeyPatch,
    tmp_path: Path,
    transport: RecordingTransport,
    key_store: InMemoryKeyStore,
) -> None:
    """Only sources without audio are sent to the provider."""

    _ = key_store
    monkeypatch.setenv("ELEVENLABS_API_KEY", "env-key")
    (tmp_path / "a.txt").write_text("Alpha", encoding="utf-8")
    (tmp_path / "b.txt").write_text("Beta", encoding="utf-8")
    (tmp_path / "b.mp3").write_bytes(b"keep me")
    transport.post_responses.append(StubResponse(chunks=[b"alpha-audio"]))

    result = CliRunner().invoke(app, ["batch", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "a.mp3").read_bytes() == b"alpha-audio"
    assert (tmp_path / "b.mp3").read_bytes() == b"keep me"
    assert "Found 2 text files:\n  - a.txt\n  - b.txt\n" in result.output
    assert result.output.index("Found 2 text files") < result.output.index("Created: a.mp3")
    assert [call["json"]["text"] for call in transport.post_calls] == ["Alpha"]
    assert "Created: a.mp3" in result.output
    assert "Skipping b.txt - audio already exists: b.mp3" in result.output
    assert "Batch complete: 1 converted, 1 skipped, 0 failed." in result.output


def test_batch_continues_after_provider_failure(
    monkeypatch: MonkeyPatch,
    tmp_path: Path,
    transport: RecordingTransport,
    key_store: InMemoryKeyStore,
) -> None:
    """One failing file is reported and the rest of the directory is still converted."""

    _ = key_store
    monkeypatch.setenv("ELEVENLABS_API_KEY", "env-key")
    (tmp_path / "a.txt").write_text("Alpha", encoding="utf-8")
    (tmp_path / "bad.txt").write_text("Broken", encoding="utf-8")
    (tmp_path / "c.txt").write_text("Gamma", encoding="utf-8")
    transport.post_responses.extend(
        [
            StubResponse(chunks=[b"a"]),
            StubResponse(status_code=500, reason="Internal Server Error", content=b"oops"),
            StubResponse(chunks=[b"c"]),
        ]
    )

    result = CliRunner().invoke(app, ["batch", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "a.mp3").exists()
    assert not (tmp_path / "bad.mp3").exists()
    assert (tmp_path / "c.mp3").exists()
    assert "Failed to process bad.txt" in result.output
    assert "Batch complete: 2 converted, 0 skipped, 1 failed." in result.output


def test_batch_rejects_missing_directory_before_loading_credentials(
    tmp_path: Path,
    transport: RecordingTransport,
    key_store: InMemoryKeyStore,
) -> None:
    """A missing directory exits 1 even when no API key is configured."""

    _ = key_store
    result = CliRunner().invoke(app, ["batch", str(tmp_path / "missing")])

    assert result.exit_code == 1
    assert "batch failed at stage `input`: Directory does not exist" in result.output
    assert transport.calls == []


def test_batch_reports_empty_directory(
    monkeypatch: MonkeyPatch,
    tmp_path: Path,
    transport: RecordingTransport,
    key_store: InMemoryKeyStore,
) -> None:
    """A directory without text files is not an error."""

    _ = (transport, key_store)
    monkeypatch.setenv("ELEVENLABS_API_KEY", "env-key")
    (tmp_path / "notes.md").write_text("ignored", encoding="utf-8")

    result = CliRunner().invoke(app, ["batch", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "No text files found in the directory." in result.output
