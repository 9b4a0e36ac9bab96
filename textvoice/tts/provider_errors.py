"""Mapping from provider exceptions to stage-aware conversion errors."""

from __future__ import annotations

from ..elevenlabs.client import ElevenLabsProviderError
from ..errors import ConversionStageError


def _provider_error_hint(stage: str, exc: ElevenLabsProviderError) -> str:
    """Build actionable user hints for stage-specific provider failure kinds."""

    kind = exc.failure_kind
    if kind == "invalid_api_key":
        return (
            "Set a valid API key via `textvoice key set`, "
            "`ELEVENLABS_API_KEY`, or one-time `--api-key` / `--prompt-api-key`."
        )
    if kind == "quota_exceeded":
        return "Check ElevenLabs character quota for this account, then retry the command."
    if kind == "voice_not_found":
        return "Run `textvoice voices` and pass an available voice name or set `DEFAULT_VOICE_ID`."
    if kind == "invalid_model":
        return "Pass an available model id as the third argument or set `DEFAULT_MODEL_ID`."
    if kind == "timeout":
        return (
            "Retry the command. If timeouts persist, verify network stability or raise "
            "`TEXTVOICE_TIMEOUT_SECONDS`."
        )
    if kind == "transport":
        return "Check internet/proxy connectivity and retry the command."

    fallback = {
        "voices": "Verify API key and voice search filters, then retry.",
        "synthesis": "Verify API key plus voice/model/settings configuration, then retry.",
    }
    return fallback.get(stage, "Verify provider configuration and retry the command.")


def provider_stage_error(stage: str, exc: ElevenLabsProviderError) -> ConversionStageError:
    """Convert provider exception metadata into a stage-aware conversion error."""

    return ConversionStageError(
        stage=stage,
        detail=str(exc),
        hint=_provider_error_hint(stage, exc),
    )
