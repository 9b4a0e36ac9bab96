"""Batch conversion of every text file in a directory.

Responsibilities:
- Discover `*.txt` sources in sorted filename order.
- Skip sources whose audio output already exists, re-checking the filesystem per file.
- Convert remaining sources one at a time and continue past per-file failures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from .errors import ConversionStageError
from .models.datatypes import (
    BatchItemResult,
    BatchReport,
    SynthesisOptions,
    default_output_path,
)
from .telemetry.logger import RunLogger
from .tts.converter import SpeechConverter


TEXT_SUFFIX = ".txt"


def discover_text_files(directory: Path) -> list[Path]:
    """Return regular `.txt` files directly inside `directory`, sorted by name."""

    return sorted(
        (
            path
            for path in directory.iterdir()
            if path.is_file() and path.suffix.lower() == TEXT_SUFFIX
        ),
        key=lambda path: path.name,
    )


def validate_batch_directory(directory: Path) -> None:
    """Raise an input-stage error unless `directory` is an existing directory."""

    if not directory.exists():
        raise ConversionStageError(
            stage="input",
            detail=f"Directory does not exist: `{directory}`.",
            hint="Pass an existing directory containing `.txt` files.",
        )
    if not directory.is_dir():
        raise ConversionStageError(
            stage="input",
            detail=f"Path is not a directory: `{directory}`.",
            hint="Use `textvoice convert <file>` for single files.",
        )


class BatchConverter:
    """Sequentially convert a directory of text files with skip-if-exists semantics."""

    def __init__(
        self,
        converter: SpeechConverter,
        run_logger: RunLogger | None = None,
        item_callback: Callable[[BatchItemResult], None] | None = None,
        discovery_callback: Callable[[list[Path]], None] | None = None,
    ) -> None:
        """Initialize the batch driver around a speech converter.

        `discovery_callback` receives the sorted source list before any file is
        converted; `item_callback` receives each outcome as soon as it is known.
        """

        self.converter = converter
        self._run_logger = run_logger
        self._item_callback = item_callback
        self._discovery_callback = discovery_callback

    def run(
        self,
        directory: Path,
        voice_id: str | None = None,
        options: SynthesisOptions | None = None,
    ) -> BatchReport:
        """Convert every eligible text file in `directory` and return outcomes."""

        validate_batch_directory(directory)
        output_format = self.converter.effective_options(options).output_format
        report = BatchReport(directory=directory)
        sources = discover_text_files(directory)
        if self._discovery_callback is not None:
            self._discovery_callback(sources)
        for source_path in sources:
            expected_output = default_output_path(source_path, output_format)
            item = self._process(source_path, expected_output, voice_id, options)
            report.items.append(item)
            if self._item_callback is not None:
                self._item_callback(item)
        return report

    def _process(
        self,
        source_path: Path,
        expected_output: Path,
        voice_id: str | None,
        options: SynthesisOptions | None,
    ) -> BatchItemResult:
        """Convert or skip one source file, capturing failures as results."""

        if expected_output.exists():
            self._log("skip", source=source_path.name, output=expected_output.name)
            return BatchItemResult(
                source_path=source_path,
                output_path=expected_output,
                status="skipped",
            )

        try:
            written = self.converter.convert_file(
                source_path,
                voice_id=voice_id,
                options=options,
                output_path=expected_output,
            )
        except Exception as exc:
            detail = exc.detail if isinstance(exc, ConversionStageError) else str(exc)
            if self._run_logger is not None:
                self._run_logger.log_stage_failure(
                    "batch", error_type=type(exc).__name__, source=source_path.name
                )
            return BatchItemResult(
                source_path=source_path,
                output_path=expected_output,
                status="failed",
                error=detail,
            )

        self._log("complete", source=source_path.name, output=written.name)
        return BatchItemResult(
            source_path=source_path,
            output_path=written,
            status="converted",
        )

    def _log(self, event: str, **context: object) -> None:
        if self._run_logger is None:
            return
        if event == "skip":
            self._run_logger.log_stage_skip("batch", **context)
        else:
            self._run_logger.log_stage_complete("batch", **context)
