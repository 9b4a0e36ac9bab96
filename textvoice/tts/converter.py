"""Text-to-speech conversion of text and text files.

Responsibilities:
- Merge instance defaults with call overrides into one synthesis request.
- Collect a streamed provider response into a single in-memory buffer.
- Read source text files and write synthesized audio beside them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Mapping, Protocol

from ..elevenlabs.client import ElevenLabsProviderError
from ..errors import ConversionStageError, EmptyInputError
from ..models.datatypes import (
    ConversionRequest,
    ConversionResult,
    SynthesisOptions,
    default_output_path,
)
from ..telemetry.logger import RunLogger
from .provider_errors import provider_stage_error


DEFAULT_VOICE_ID = "pNInz6obpgDQGcFmaJgB"
DEFAULT_MODEL_ID = "eleven_multilingual_v2"


class SpeechStreamClient(Protocol):
    """Protocol for provider clients that stream synthesized audio."""

    def stream_speech(
        self,
        *,
        voice_id: str,
        body: Mapping[str, object],
        params: Mapping[str, str] | None = None,
    ) -> Iterator[bytes]:
        """Return finite audio byte chunks for one synthesis request."""


def collect_audio_stream(chunks: Iterable[bytes]) -> bytes:
    """Read a finite chunk stream to completion and join it in order."""

    buffer = bytearray()
    for chunk in chunks:
        buffer.extend(chunk)
    return bytes(buffer)


class SpeechConverter:
    """Convert text into audio bytes and files with immutable defaults."""

    def __init__(
        self,
        client: SpeechStreamClient,
        default_voice_id: str = DEFAULT_VOICE_ID,
        default_options: SynthesisOptions | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        """Initialize the converter with a speech client and default settings."""

        self.client = client
        self.default_voice_id = default_voice_id
        self.default_options = (
            default_options
            if default_options is not None
            else SynthesisOptions(model_id=DEFAULT_MODEL_ID)
        )
        self._run_logger = run_logger

    def effective_options(self, options: SynthesisOptions | None = None) -> SynthesisOptions:
        """Return defaults merged with call overrides."""

        return self.default_options.merged_with(options)

    def build_request(
        self,
        text: str,
        voice_id: str | None = None,
        options: SynthesisOptions | None = None,
    ) -> ConversionRequest:
        """Validate text and build the effective synthesis request."""

        if not text.strip():
            raise EmptyInputError()
        return ConversionRequest(
            text=text,
            voice_id=voice_id or self.default_voice_id,
            options=self.effective_options(options),
        )

    def convert_text(
        self,
        text: str,
        voice_id: str | None = None,
        options: SynthesisOptions | None = None,
    ) -> bytes:
        """Synthesize text and return the complete audio buffer."""

        request = self.build_request(text, voice_id, options)
        return self._synthesize(request)

    def render_file(
        self,
        path: Path,
        voice_id: str | None = None,
        options: SynthesisOptions | None = None,
        output_path: Path | None = None,
    ) -> ConversionResult:
        """Convert one text file and return the written audio with its path."""

        text = self._read_source_text(path)
        if not text.strip():
            raise EmptyInputError(path)

        request = self.build_request(text, voice_id, options)
        final_output_path = (
            output_path
            if output_path is not None
            else default_output_path(path, request.options.output_format)
        )
        self._log_start(source=path.name, voice=request.voice_id, model=request.options.model_id)
        audio = self._synthesize(request)
        self._write_audio(final_output_path, audio)
        self._log_complete(output=final_output_path.name, bytes=len(audio))
        return ConversionResult(audio=audio, output_path=final_output_path)

    def convert_file(
        self,
        path: Path,
        voice_id: str | None = None,
        options: SynthesisOptions | None = None,
        output_path: Path | None = None,
    ) -> Path:
        """Convert one text file and return the audio path written."""

        return self.render_file(path, voice_id, options, output_path).output_path

    def _synthesize(self, request: ConversionRequest) -> bytes:
        """Call the provider and buffer its full streamed response."""

        try:
            chunks = self.client.stream_speech(
                voice_id=request.voice_id,
                body=request.request_body(),
                params=request.query_params(),
            )
            return collect_audio_stream(chunks)
        except ElevenLabsProviderError as exc:
            if self._run_logger is not None:
                self._run_logger.log_stage_failure(
                    "synthesis", error_type=exc.failure_kind, voice=request.voice_id
                )
            raise provider_stage_error("synthesis", exc) from exc

    @staticmethod
    def _read_source_text(path: Path) -> str:
        """Read UTF-8 source text and map failures to input-stage errors."""

        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ConversionStageError(
                stage="input",
                detail=f"Input file not found: `{path}`.",
                hint="Verify the path exists and points to a text file.",
            ) from exc
        except UnicodeDecodeError as exc:
            raise ConversionStageError(
                stage="input",
                detail=f"Input file `{path}` is not valid UTF-8 text.",
                hint="Re-save the file with UTF-8 encoding and retry.",
            ) from exc
        except OSError as exc:
            raise ConversionStageError(
                stage="input",
                detail=f"Failed to read input file `{path}`: {exc}",
                hint="Verify file permissions and that the path is not a directory.",
            ) from exc

    @staticmethod
    def _write_audio(output_path: Path, audio: bytes) -> None:
        """Write the audio buffer once, overwriting any existing file."""

        try:
            output_path.write_bytes(audio)
        except OSError as exc:
            raise ConversionStageError(
                stage="output",
                detail=f"Failed to write audio file `{output_path}`: {exc}",
                hint="Verify the output directory is writable and has free space.",
            ) from exc

    def _log_start(self, **context: object) -> None:
        if self._run_logger is not None:
            self._run_logger.log_stage_start("synthesis", **context)

    def _log_complete(self, **context: object) -> None:
        if self._run_logger is not None:
            self._run_logger.log_stage_complete("synthesis", **context)
