"""Unit tests for synthesis settings merging and request serialization."""

from __future__ import annotations

from pathlib import Path

import pytest

from textvoice.models.datatypes import (
    BatchItemResult,
    BatchReport,
    ConversionRequest,
    SynthesisOptions,
    Voice,
    VoiceSettings,
    audio_extension_for_format,
    default_output_path,
)


def test_voice_settings_merge_keeps_unrelated_default_fields() -> None:
    """Merging `{stability}` defaults with `{style}` overrides should keep both fields."""

    defaults = VoiceSettings(stability=0.5)
    overrides = VoiceSettings(style=0.2)

    merged = defaults.merged_with(overrides)

    assert merged == VoiceSettings(stability=0.5, style=0.2)
    assert merged.as_payload() == {"stability": 0.5, "style": 0.2}


def test_voice_settings_override_wins_per_field() -> None:
    """Present override fields should replace default values."""

    defaults = VoiceSettings(stability=0.5, use_speaker_boost=True)
    merged = defaults.merged_with(VoiceSettings(stability=0.9, use_speaker_boost=False))

    assert merged.stability == 0.9
    assert merged.use_speaker_boost is False


def test_voice_settings_reject_out_of_range_values() -> None:
    """Tuning values must lie within 0.0-1.0."""

    with pytest.raises(ValueError, match="`similarity_boost` must be between 0.0 and 1.0"):
        VoiceSettings(similarity_boost=1.5)


def test_synthesis_options_merge_is_shallow_with_override_precedence() -> None:
    """Option merge should let call values win and keep unset defaults."""

    defaults = SynthesisOptions(
        model_id="eleven_multilingual_v2",
        language_code="en",
        voice_settings=VoiceSettings(stability=0.5),
    )
    overrides = SynthesisOptions(
        model_id="eleven_flash_v2_5",
        voice_settings=VoiceSettings(style=0.2),
        text_normalization="off",
    )

    merged = defaults.merged_with(overrides)

    assert merged.model_id == "eleven_flash_v2_5"
    assert merged.language_code == "en"
    assert merged.voice_settings == VoiceSettings(stability=0.5, style=0.2)
    assert merged.text_normalization == "off"
    assert defaults.merged_with(None) is defaults


def test_synthesis_options_reject_unknown_normalization_mode() -> None:
    """Only `auto`, `on`, and `off` are accepted normalization modes."""

    with pytest.raises(ValueError, match="Unsupported `text_normalization`"):
        SynthesisOptions(text_normalization="sometimes")


def test_conversion_request_omits_absent_optional_fields() -> None:
    """Request body should not carry nulls for absent optional fields."""

    request = ConversionRequest(
        text="Hello.",
        voice_id="voice-1",
        options=SynthesisOptions(model_id="eleven_multilingual_v2"),
    )

    assert request.request_body() == {"text": "Hello.", "model_id": "eleven_multilingual_v2"}
    assert request.query_params() == {}


def test_conversion_request_includes_present_optional_fields() -> None:
    """Present options should map onto provider field names."""

    request = ConversionRequest(
        text="Ahoj.",
        voice_id="voice-1",
        options=SynthesisOptions(
            model_id="eleven_multilingual_v2",
            language_code="cs",
            voice_settings=VoiceSettings(stability=0.4, use_speaker_boost=True),
            output_format="mp3_22050_32",
            text_normalization="auto",
        ),
    )

    assert request.request_body() == {
        "text": "Ahoj.",
        "model_id": "eleven_multilingual_v2",
        "language_code": "cs",
        "voice_settings": {"stability": 0.4, "use_speaker_boost": True},
        "apply_text_normalization": "auto",
    }
    assert request.query_params() == {"output_format": "mp3_22050_32"}


def test_default_output_path_swaps_only_the_last_extension(tmp_path: Path) -> None:
    """`notes.txt` maps to `notes.mp3` and `a.b.txt` to `a.b.mp3` in the same directory."""

    assert default_output_path(tmp_path / "notes.txt") == tmp_path / "notes.mp3"
    assert default_output_path(tmp_path / "a.b.txt") == tmp_path / "a.b.mp3"
    assert default_output_path(Path("notes.txt")) == Path("notes.mp3")


def test_audio_extension_follows_output_format_codec() -> None:
    """Output format tokens should map to their codec extension."""

    assert audio_extension_for_format(None) == "mp3"
    assert audio_extension_for_format("mp3_44100_128") == "mp3"
    assert audio_extension_for_format("pcm_16000") == "pcm"
    assert audio_extension_for_format("opus_48000_64") == "opus"


def test_voice_from_payload_reads_optional_settings() -> None:
    """Voice payload parsing should keep description and per-voice settings."""

    voice = Voice.from_payload(
        {
            "voice_id": "21m00Tcm4TlvDq8ikWAM",
            "name": "Rachel",
            "description": "calm narration",
            "category": "premade",
            "settings": {"stability": 0.5, "similarity_boost": 0.75, "use_speaker_boost": True},
        }
    )

    assert voice.voice_id == "21m00Tcm4TlvDq8ikWAM"
    assert voice.description == "calm narration"
    assert voice.settings == VoiceSettings(
        stability=0.5, similarity_boost=0.75, use_speaker_boost=True
    )


def test_voice_from_payload_requires_voice_id() -> None:
    """Entries without an identifier are malformed."""

    with pytest.raises(ValueError, match="voice_id"):
        Voice.from_payload({"name": "Nameless"})


def test_batch_report_groups_items_by_status(tmp_path: Path) -> None:
    """Report helpers should expose outcomes by status in processing order."""

    report = BatchReport(directory=tmp_path)
    report.items.extend(
        [
            BatchItemResult(tmp_path / "a.txt", tmp_path / "a.mp3", "converted"),
            BatchItemResult(tmp_path / "b.txt", tmp_path / "b.mp3", "skipped"),
            BatchItemResult(tmp_path / "c.txt", tmp_path / "c.mp3", "failed", error="boom"),
        ]
    )

    assert [item.source_path.name for item in report.converted] == ["a.txt"]
    assert [item.source_path.name for item in report.skipped] == ["b.txt"]
    assert report.has_failures is True
