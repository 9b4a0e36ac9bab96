"""Core datatypes shared across textvoice modules.

Responsibilities:
- Represent immutable records exchanged between catalog, converter, and batch layers.
- Own the merge and request-serialization rules for synthesis settings.

Key types:
- `Voice`, `VoiceSettings`, `SynthesisOptions`, `ConversionRequest`,
  `ConversionResult`, `BatchItemResult`, and `BatchReport`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping


TEXT_NORMALIZATION_MODES = frozenset({"auto", "on", "off"})
DEFAULT_AUDIO_EXTENSION = "mp3"


def _optional_unit_interval(value: float | None, field_name: str) -> None:
    """Validate that an optional tuning value lies in the closed range 0.0-1.0."""

    if value is None:
        return
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"`{field_name}` must be between 0.0 and 1.0, got {value}.")


@dataclass(frozen=True, slots=True)
class VoiceSettings:
    """Optional per-request voice tuning values.

    Attributes:
        stability: Voice stability in the range 0.0-1.0.
        similarity_boost: Similarity boost in the range 0.0-1.0.
        style: Style exaggeration in the range 0.0-1.0.
        use_speaker_boost: Whether provider speaker boost is enabled.

    A `None` field means "use provider default" and is omitted from requests.
    """

    stability: float | None = None
    similarity_boost: float | None = None
    style: float | None = None
    use_speaker_boost: bool | None = None

    def __post_init__(self) -> None:
        """Validate tuning ranges."""

        _optional_unit_interval(self.stability, "stability")
        _optional_unit_interval(self.similarity_boost, "similarity_boost")
        _optional_unit_interval(self.style, "style")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> VoiceSettings | None:
        """Build settings from a provider `settings` object, when present."""

        if not isinstance(payload, Mapping):
            return None
        return cls(
            stability=_optional_number(payload.get("stability")),
            similarity_boost=_optional_number(payload.get("similarity_boost")),
            style=_optional_number(payload.get("style")),
            use_speaker_boost=(
                payload["use_speaker_boost"]
                if isinstance(payload.get("use_speaker_boost"), bool)
                else None
            ),
        )

    def is_empty(self) -> bool:
        """Return whether no tuning field is set."""

        return all(getattr(self, item.name) is None for item in fields(self))

    def merged_with(self, overrides: VoiceSettings | None) -> VoiceSettings:
        """Return the per-field union where present override values win."""

        if overrides is None:
            return self
        present = {
            item.name: getattr(overrides, item.name)
            for item in fields(overrides)
            if getattr(overrides, item.name) is not None
        }
        return replace(self, **present)

    def as_payload(self) -> dict[str, float | bool]:
        """Return only present fields, keyed by provider field names."""

        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not None
        }


def _optional_number(value: object) -> float | None:
    """Return numeric provider values as floats, ignoring anything else."""

    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return float(value)


@dataclass(frozen=True, slots=True)
class Voice:
    """A provider-hosted synthetic voice.

    Attributes:
        voice_id: Opaque provider voice identifier.
        name: Human-readable display name.
        description: Optional provider description.
        category: Optional provider category (for example `premade`).
        settings: Optional per-voice default synthesis settings.
    """

    voice_id: str
    name: str
    description: str | None = None
    category: str | None = None
    settings: VoiceSettings | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Voice:
        """Build a voice from one entry of the provider `voices` array."""

        voice_id = payload.get("voice_id")
        name = payload.get("name")
        if not isinstance(voice_id, str) or not voice_id:
            raise ValueError("Voice entry is missing `voice_id`.")
        description = payload.get("description")
        category = payload.get("category")
        return cls(
            voice_id=voice_id,
            name=name if isinstance(name, str) else "",
            description=description if isinstance(description, str) else None,
            category=category if isinstance(category, str) else None,
            settings=VoiceSettings.from_payload(payload.get("settings")),
        )


@dataclass(frozen=True, slots=True)
class SynthesisOptions:
    """Optional synthesis parameters shared by every conversion call.

    Attributes:
        model_id: Provider model identifier.
        language_code: Optional ISO language code hint.
        voice_settings: Optional voice tuning overrides.
        output_format: Optional provider output format token, e.g. `mp3_44100_128`.
        text_normalization: Optional normalization mode: `auto`, `on`, or `off`.
    """

    model_id: str | None = None
    language_code: str | None = None
    voice_settings: VoiceSettings | None = None
    output_format: str | None = None
    text_normalization: str | None = None

    def __post_init__(self) -> None:
        """Validate normalization mode."""

        if (
            self.text_normalization is not None
            and self.text_normalization not in TEXT_NORMALIZATION_MODES
        ):
            supported = ", ".join(sorted(TEXT_NORMALIZATION_MODES))
            raise ValueError(
                f"Unsupported `text_normalization` value `{self.text_normalization}`; "
                f"supported: {supported}."
            )

    def merged_with(self, overrides: SynthesisOptions | None) -> SynthesisOptions:
        """Shallow-merge call overrides onto these defaults.

        Present override fields win. Voice settings merge per field so unrelated
        default tuning values survive.
        """

        if overrides is None:
            return self
        if self.voice_settings is None:
            voice_settings = overrides.voice_settings
        else:
            voice_settings = self.voice_settings.merged_with(overrides.voice_settings)
        return SynthesisOptions(
            model_id=overrides.model_id or self.model_id,
            language_code=overrides.language_code or self.language_code,
            voice_settings=voice_settings,
            output_format=overrides.output_format or self.output_format,
            text_normalization=overrides.text_normalization or self.text_normalization,
        )


def audio_extension_for_format(output_format: str | None) -> str:
    """Map a provider output format token such as `pcm_16000` to `pcm`."""

    if output_format is None or not output_format.strip():
        return DEFAULT_AUDIO_EXTENSION
    codec = output_format.strip().split("_", 1)[0].lower()
    return codec or DEFAULT_AUDIO_EXTENSION


def default_output_path(source: Path, output_format: str | None = None) -> Path:
    """Return the sibling audio path for a source text file."""

    return source.with_suffix(f".{audio_extension_for_format(output_format)}")


@dataclass(frozen=True, slots=True)
class ConversionRequest:
    """One synthesis request for the provider speech endpoint."""

    text: str
    voice_id: str
    options: SynthesisOptions = field(default_factory=SynthesisOptions)

    def request_body(self) -> dict[str, object]:
        """Return the JSON body, omitting absent optional fields."""

        body: dict[str, object] = {"text": self.text}
        if self.options.model_id:
            body["model_id"] = self.options.model_id
        if self.options.language_code:
            body["language_code"] = self.options.language_code
        if self.options.voice_settings is not None and not self.options.voice_settings.is_empty():
            body["voice_settings"] = self.options.voice_settings.as_payload()
        if self.options.text_normalization:
            body["apply_text_normalization"] = self.options.text_normalization
        return body

    def query_params(self) -> dict[str, str]:
        """Return endpoint query parameters for this request."""

        if self.options.output_format:
            return {"output_format": self.options.output_format}
        return {}


@dataclass(frozen=True, slots=True)
class ConversionResult:
    """Synthesized audio and the file it was written to."""

    audio: bytes
    output_path: Path

    @property
    def size_bytes(self) -> int:
        """Return audio payload size in bytes."""

        return len(self.audio)


@dataclass(frozen=True, slots=True)
class BatchItemResult:
    """Outcome for one source file in a batch run.

    Attributes:
        source_path: Text file that was considered.
        output_path: Expected or written audio path.
        status: `converted`, `skipped`, or `failed`.
        error: Failure detail for `failed` items.
    """

    source_path: Path
    output_path: Path
    status: str
    error: str | None = None


@dataclass(slots=True)
class BatchReport:
    """Ordered per-file outcomes of one batch run."""

    directory: Path
    items: list[BatchItemResult] = field(default_factory=list)

    def _with_status(self, status: str) -> list[BatchItemResult]:
        """Return items with the given status in processing order."""

        return [item for item in self.items if item.status == status]

    @property
    def converted(self) -> list[BatchItemResult]:
        return self._with_status("converted")

    @property
    def skipped(self) -> list[BatchItemResult]:
        return self._with_status("skipped")

    @property
    def failed(self) -> list[BatchItemResult]:
        return self._with_status("failed")

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)
