"""Provider factory helpers for the voice catalog and speech converter.

Responsibilities:
- Build ElevenLabs-backed catalog and converter instances from resolved config.
- Keep CLI command wiring independent from concrete client construction.
"""

from __future__ import annotations

from .config import TextVoiceConfig
from .elevenlabs.client import ElevenLabsSpeechClient, ElevenLabsVoicesClient
from .telemetry.logger import RunLogger
from .tts.converter import SpeechConverter
from .tts.voices import VoiceCatalog


class ProviderFactory:
    """Factory for provider-backed clients used by CLI commands."""

    @staticmethod
    def create_voice_catalog(config: TextVoiceConfig, api_key: str) -> VoiceCatalog:
        """Create a voice catalog bound to the configured ElevenLabs endpoint."""

        return VoiceCatalog(
            ElevenLabsVoicesClient(
                api_key=api_key,
                base_url=config.base_url,
                timeout_seconds=config.timeout_seconds,
            )
        )

    @staticmethod
    def create_speech_converter(
        config: TextVoiceConfig,
        api_key: str,
        run_logger: RunLogger | None = None,
    ) -> SpeechConverter:
        """Create a speech converter carrying the config's immutable defaults."""

        return SpeechConverter(
            ElevenLabsSpeechClient(
                api_key=api_key,
                base_url=config.base_url,
                timeout_seconds=config.timeout_seconds,
            ),
            default_voice_id=config.fallback_voice_id,
            default_options=config.synthesis_defaults(),
            run_logger=run_logger,
        )
