"""Unit tests for CLI output and error rendering helpers."""

from __future__ import annotations

from pathlib import Path

import pytest
import typer

from textvoice.cli_rendering import (
    echo_batch_discovery,
    echo_batch_summary,
    echo_voice_list,
    exit_with_command_error,
)
from textvoice.errors import ConversionStageError
from textvoice.models.datatypes import BatchItemResult, BatchReport, Voice


def test_exit_with_command_error_renders_stage_error_with_hint(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print stage diagnostics and hint before exiting with code 1."""

    error = ConversionStageError(
        stage="input",
        detail="Input file not found: `missing.txt`.",
        hint="Verify the path exists and points to a text file.",
    )

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("convert", error)

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "convert failed at stage `input`" in captured.err
    assert "Hint: Verify the path exists and points to a text file." in captured.err


def test_exit_with_command_error_renders_non_stage_fallback(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print fallback exception text for non-stage failures."""

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("batch", RuntimeError("unexpected failure"))

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "batch failed: unexpected failure" in captured.err


def test_echo_voice_list_prints_name_id_and_description(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Voice rows should include name, id, and description when present."""

    echo_voice_list(
        [
            Voice(voice_id="v-1", name="Rachel", description="calm"),
            Voice(voice_id="v-2", name="Adam"),
        ]
    )

    out = capsys.readouterr().out
    assert "Available voices (2):" in out
    assert "  - Rachel (v-1)\n    calm\n" in out
    assert "  - Adam (v-2)" in out


def test_echo_batch_summary_counts_outcomes(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Summary should count outcomes and name failed files."""

    report = BatchReport(directory=tmp_path)
    report.items.append(BatchItemResult(tmp_path / "a.txt", tmp_path / "a.mp3", "converted"))
    report.items.append(BatchItemResult(tmp_path / "b.txt", tmp_path / "b.mp3", "failed", "x"))

    echo_batch_summary(report)

    captured = capsys.readouterr()
    assert "Batch complete: 1 converted, 0 skipped, 1 failed." in captured.out
    assert "failed: b.txt" in captured.err


def test_echo_batch_summary_without_failures_prints_only_totals(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Summary should not print failure lines for a clean run."""

    report = BatchReport(directory=tmp_path)
    report.items.append(BatchItemResult(tmp_path / "a.txt", tmp_path / "a.mp3", "skipped"))

    echo_batch_summary(report)

    captured = capsys.readouterr()
    assert captured.out == "Batch complete: 0 converted, 1 skipped, 0 failed.\n"
    assert captured.err == ""


def test_echo_batch_discovery_lists_sources_and_stays_quiet_when_empty(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Discovery output lists file names; an empty directory prints nothing here."""

    echo_batch_discovery([tmp_path / "a.txt", tmp_path / "b.txt"])
    echo_batch_discovery([])

    assert capsys.readouterr().out == "Found 2 text files:\n  - a.txt\n  - b.txt\n"
