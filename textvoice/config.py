"""Configuration model and loaders for textvoice.

Responsibilities:
- Define process-wide conversion defaults as an immutable dataclass.
- Load defaults from environment variables and optional `.env` files.

Key types:
- `TextVoiceConfig`: immutable defaults read by every conversion.
- `ConfigLoader`: static construction helpers for `TextVoiceConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Mapping

from dotenv import find_dotenv, load_dotenv

from .elevenlabs.client import DEFAULT_BASE_URL
from .models.datatypes import TEXT_NORMALIZATION_MODES, SynthesisOptions, VoiceSettings
from .parsing import (
    normalize_optional_string,
    parse_literal_true,
    parse_optional_float,
    parse_optional_positive_float,
)
from .tts.converter import DEFAULT_MODEL_ID, DEFAULT_VOICE_ID


@dataclass(frozen=True, slots=True)
class TextVoiceConfig:
    """Immutable conversion defaults for one process.

    Attributes:
        api_key: Optional ElevenLabs API key from the environment.
        default_voice_id: Voice id used when no voice name is requested.
        default_voice_name: Voice name looked up when no id is configured.
        model_id: Default provider model identifier.
        voice_settings: Default voice tuning values.
        language_code: Optional default language code.
        output_format: Optional default provider output format token.
        text_normalization: Optional default normalization mode.
        base_url: ElevenLabs API base URL.
        timeout_seconds: Optional HTTP timeout; `None` keeps the transport default.
    """

    api_key: str | None = None
    default_voice_id: str | None = None
    default_voice_name: str | None = None
    model_id: str = DEFAULT_MODEL_ID
    voice_settings: VoiceSettings = field(default_factory=VoiceSettings)
    language_code: str | None = None
    output_format: str | None = None
    text_normalization: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float | None = None

    def validate(self) -> None:
        """Validate enumerated defaults before any conversion runs."""

        if (
            self.text_normalization is not None
            and self.text_normalization not in TEXT_NORMALIZATION_MODES
        ):
            supported = ", ".join(sorted(TEXT_NORMALIZATION_MODES))
            raise ValueError(
                "Unsupported `DEFAULT_TEXT_NORMALIZATION` value "
                f"`{self.text_normalization}`; supported: {supported}."
            )

    @property
    def fallback_voice_id(self) -> str:
        """Return the voice id used when no voice is resolved for a run."""

        return self.default_voice_id or DEFAULT_VOICE_ID

    def synthesis_defaults(self) -> SynthesisOptions:
        """Return the default synthesis options described by this config."""

        return SynthesisOptions(
            model_id=self.model_id,
            language_code=self.language_code,
            voice_settings=None if self.voice_settings.is_empty() else self.voice_settings,
            output_format=self.output_format,
            text_normalization=self.text_normalization,
        )


class ConfigLoader:
    """Factory methods for creating `TextVoiceConfig` from external sources."""

    @staticmethod
    def load_dotenv_file(path: Path | None = None) -> Path | None:
        """Load a `.env` file into the process environment without overriding it.

        Returns:
            The loaded file path, or `None` when no file was found.
        """

        dotenv_path = str(path) if path is not None else find_dotenv(usecwd=True)
        if not dotenv_path or not Path(dotenv_path).is_file():
            return None
        load_dotenv(dotenv_path, override=False)
        return Path(dotenv_path)

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> TextVoiceConfig:
        """Create a validated config from environment variables.

        Raises:
            ValueError: If numeric or enumerated values are invalid.
        """

        env_map: Mapping[str, str] = os.environ if env is None else env

        voice_settings = VoiceSettings(
            stability=parse_optional_float(env_map.get("DEFAULT_STABILITY"), "DEFAULT_STABILITY"),
            similarity_boost=parse_optional_float(
                env_map.get("DEFAULT_SIMILARITY_BOOST"), "DEFAULT_SIMILARITY_BOOST"
            ),
            style=parse_optional_float(env_map.get("DEFAULT_STYLE"), "DEFAULT_STYLE"),
            use_speaker_boost=parse_literal_true(env_map.get("DEFAULT_USE_SPEAKER_BOOST")),
        )
        config = TextVoiceConfig(
            api_key=normalize_optional_string(env_map.get("ELEVENLABS_API_KEY")),
            default_voice_id=normalize_optional_string(env_map.get("DEFAULT_VOICE_ID")),
            default_voice_name=normalize_optional_string(env_map.get("DEFAULT_VOICE_NAME")),
            model_id=(
                normalize_optional_string(env_map.get("DEFAULT_MODEL_ID")) or DEFAULT_MODEL_ID
            ),
            voice_settings=voice_settings,
            language_code=normalize_optional_string(env_map.get("DEFAULT_LANGUAGE_CODE")),
            output_format=normalize_optional_string(env_map.get("DEFAULT_OUTPUT_FORMAT")),
            text_normalization=normalize_optional_string(
                env_map.get("DEFAULT_TEXT_NORMALIZATION")
            ),
            base_url=(
                normalize_optional_string(env_map.get("ELEVENLABS_BASE_URL")) or DEFAULT_BASE_URL
            ),
            timeout_seconds=parse_optional_positive_float(
                env_map.get("TEXTVOICE_TIMEOUT_SECONDS"), "TEXTVOICE_TIMEOUT_SECONDS"
            ),
        )
        config.validate()
        return config
