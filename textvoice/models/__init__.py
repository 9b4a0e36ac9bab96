"""Typed domain models used throughout textvoice."""

from .datatypes import (
    BatchItemResult,
    BatchReport,
    ConversionRequest,
    ConversionResult,
    SynthesisOptions,
    Voice,
    VoiceSettings,
    audio_extension_for_format,
    default_output_path,
)

__all__ = [
    "BatchItemResult",
    "BatchReport",
    "ConversionRequest",
    "ConversionResult",
    "SynthesisOptions",
    "Voice",
    "VoiceSettings",
    "audio_extension_for_format",
    "default_output_path",
]
