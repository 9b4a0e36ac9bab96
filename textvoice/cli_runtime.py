"""CLI runtime resolution helpers.

This module isolates configuration loading, API-key precedence and persistence,
voice selection, and per-run synthesis overrides from the command wiring layer.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Protocol

import typer
from keyring.errors import KeyringError

from .config import ConfigLoader, TextVoiceConfig
from .errors import ConversionStageError
from .keystore import KeyringUnavailableError, open_key_store
from .models.datatypes import SynthesisOptions, VoiceSettings
from .parsing import normalize_optional_string
from .telemetry.logger import RunLogger
from .tts.voices import VoiceCatalog


class KeyStoreProtocol(Protocol):
    """Key store operations needed to resolve and remember API keys."""

    def read(self) -> str | None:
        """Return the stored API key, if any."""

    def write(self, api_key: str) -> None:
        """Persist `api_key`, replacing any stored value."""


@dataclass(frozen=True, slots=True)
class ResolvedApiKey:
    """An API key together with where it was found.

    Attributes:
        value: The key itself.
        source: `option`, `prompt`, `keyring`, or `environment`.
    """

    value: str
    source: str


def load_runtime_config(env: Mapping[str, str] | None = None) -> TextVoiceConfig:
    """Load `.env` defaults and build config, mapping invalid values to config errors."""

    if env is None:
        ConfigLoader.load_dotenv_file()
    try:
        return ConfigLoader.from_env(os.environ if env is None else env)
    except ValueError as exc:
        raise ConversionStageError(
            stage="config",
            detail=f"Invalid environment configuration: {exc}",
            hint="Fix the value in your environment or `.env` file and rerun.",
        ) from exc


def _prompt_for_api_key() -> str | None:
    """Prompt for an API key with hidden input."""

    return normalize_optional_string(
        typer.prompt(
            "ElevenLabs API key (hidden; leave blank to skip)",
            default="",
            hide_input=True,
            show_default=False,
        )
    )


def locate_api_key(
    config: TextVoiceConfig,
    key_store: KeyStoreProtocol,
    cli_key: str | None = None,
    prompted: bool = False,
) -> ResolvedApiKey | None:
    """Find the key a run would use: CLI/prompt, then keyring, then environment."""

    if cli_key is not None:
        return ResolvedApiKey(cli_key, "prompt" if prompted else "option")
    stored = key_store.read()
    if stored is not None:
        return ResolvedApiKey(stored, "keyring")
    if config.api_key is not None:
        return ResolvedApiKey(config.api_key, "environment")
    return None


def remember_api_key(key_store: KeyStoreProtocol, api_key: str) -> bool:
    """Write `api_key` to the keyring unless it is already stored there.

    Returns:
        `True` when the keyring was updated.
    """

    if key_store.read() == api_key:
        return False
    try:
        key_store.write(api_key)
    except (KeyringUnavailableError, KeyringError) as exc:
        raise ConversionStageError(
            stage="credentials",
            detail=f"Failed to store API key in the keyring: {exc}",
            hint=(
                "Install and configure a keyring backend, or rerun with "
                "`--no-store-api-key` for one-off usage."
            ),
        ) from exc
    return True


def resolve_api_key(
    config: TextVoiceConfig,
    api_key: str | None,
    prompt_api_key: bool,
    store_api_key: bool,
    key_store_factory: Callable[[], KeyStoreProtocol] = open_key_store,
) -> str:
    """Return the run's API key, storing a CLI or prompted key when asked to.

    Raises:
        ConversionStageError: If no key can be found in any source.
    """

    cli_key = normalize_optional_string(api_key)
    prompted = False
    if cli_key is None and prompt_api_key:
        cli_key = _prompt_for_api_key()
        prompted = cli_key is not None

    key_store = key_store_factory()
    located = locate_api_key(config, key_store, cli_key, prompted)
    if located is None:
        raise ConversionStageError(
            stage="config",
            detail="ElevenLabs API key not found in CLI arguments, keyring, or environment.",
            hint=(
                "Set `ELEVENLABS_API_KEY` (or add it to `.env`), run "
                "`textvoice key set`, or pass `--prompt-api-key`."
            ),
        )
    if store_api_key and located.source in {"option", "prompt"}:
        if remember_api_key(key_store, located.value):
            typer.echo("Stored API key in the keyring.")
    return located.value


def resolve_voice_id(
    catalog: VoiceCatalog,
    config: TextVoiceConfig,
    cli_voice_name: str | None,
    run_logger: RunLogger | None = None,
) -> str | None:
    """Pick the voice id for a run.

    A configured `DEFAULT_VOICE_ID` wins unless a voice name was passed on the
    command line. Otherwise the CLI name, then `DEFAULT_VOICE_NAME`, is looked
    up. Returns `None` when the converter default voice should be used.
    """

    voice_name = normalize_optional_string(cli_voice_name)
    if config.default_voice_id and voice_name is None:
        typer.echo(f"Using voice ID from env: {config.default_voice_id}")
        return config.default_voice_id

    voice_name = voice_name or config.default_voice_name
    if voice_name is None:
        return None

    typer.echo(f"Looking for voice: {voice_name}")
    voice = catalog.find_by_exact_name(voice_name)
    if voice is None:
        typer.secho(
            f'Voice "{voice_name}" not found, using default voice',
            fg=typer.colors.YELLOW,
            err=True,
        )
        if run_logger is not None:
            run_logger.log_stage_warning("voices", reason="voice_not_found")
        return None

    typer.echo(f"Found voice: {voice.name} ({voice.voice_id})")
    return voice.voice_id


def build_cli_options(
    model_id: str | None = None,
    stability: float | None = None,
    similarity_boost: float | None = None,
    style: float | None = None,
    speaker_boost: bool | None = None,
    language_code: str | None = None,
    output_format: str | None = None,
    text_normalization: str | None = None,
) -> SynthesisOptions:
    """Build per-run synthesis overrides from CLI values, mapping invalid values."""

    try:
        voice_settings = VoiceSettings(
            stability=stability,
            similarity_boost=similarity_boost,
            style=style,
            use_speaker_boost=speaker_boost,
        )
        return SynthesisOptions(
            model_id=normalize_optional_string(model_id),
            language_code=normalize_optional_string(language_code),
            voice_settings=None if voice_settings.is_empty() else voice_settings,
            output_format=normalize_optional_string(output_format),
            text_normalization=normalize_optional_string(text_normalization),
        )
    except ValueError as exc:
        raise ConversionStageError(
            stage="config",
            detail=f"Invalid synthesis option: {exc}",
            hint="Use values between 0.0 and 1.0 and normalization `auto`, `on`, or `off`.",
        ) from exc
