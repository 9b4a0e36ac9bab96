"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
voice listings, conversion results, and batch summaries.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from .cli_runtime import ResolvedApiKey
from .errors import ConversionStageError
from .keystore import mask_api_key
from .models.datatypes import BatchItemResult, BatchReport, ConversionResult, Voice


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, ConversionStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_voice_list(voices: list[Voice]) -> None:
    """Print voice rows in provider order: name, id, and description."""

    if not voices:
        typer.echo("No voices found.")
        return
    typer.echo(f"Available voices ({len(voices)}):")
    for voice in voices:
        typer.echo(f"  - {voice.name} ({voice.voice_id})")
        if voice.description:
            typer.echo(f"    {voice.description}")


def echo_conversion_result(result: ConversionResult) -> None:
    """Print the saved audio path and payload size."""

    size_kb = result.size_bytes / 1024
    typer.echo(f"Audio saved to: {result.output_path} ({size_kb:.1f} KB)")


def echo_batch_discovery(sources: list[Path]) -> None:
    """Print the text files a batch run is about to process."""

    if not sources:
        return
    typer.echo(f"Found {len(sources)} text files:")
    for source in sources:
        typer.echo(f"  - {source.name}")


def echo_batch_item(item: BatchItemResult) -> None:
    """Print one batch outcome line as soon as the file is processed."""

    if item.status == "skipped":
        typer.echo(
            f"Skipping {item.source_path.name} - audio already exists: {item.output_path.name}"
        )
    elif item.status == "converted":
        typer.echo(f"Created: {item.output_path.name}")
    else:
        typer.secho(
            f"Failed to process {item.source_path.name}: {item.error}",
            fg=typer.colors.RED,
            err=True,
        )


def echo_batch_summary(report: BatchReport) -> None:
    """Print batch totals and list failed files."""

    if not report.items:
        typer.echo("No text files found in the directory.")
        return
    typer.echo(
        f"Batch complete: {len(report.converted)} converted, "
        f"{len(report.skipped)} skipped, {len(report.failed)} failed."
    )
    if not report.has_failures:
        return
    for item in report.failed:
        typer.secho(f"  failed: {item.source_path.name}", fg=typer.colors.RED, err=True)


def echo_key_status(
    backend_name: str,
    backend_usable: bool,
    located: ResolvedApiKey | None,
) -> None:
    """Print the keyring backend and the masked key a run would use."""

    suffix = "" if backend_usable else " (cannot store keys)"
    typer.echo(f"Keyring backend: {backend_name}{suffix}")
    if located is None:
        typer.echo("API key: not configured")
        return
    typer.echo(f"API key: {mask_api_key(located.value)} (from {located.source})")
