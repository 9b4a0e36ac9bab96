"""Command-line interface for textvoice.

Responsibilities:
- Expose user-facing commands for single-file, batch, voice listing, and credentials.
- Convert CLI arguments and environment defaults into converter calls.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .batch import BatchConverter, validate_batch_directory
from .cli_rendering import (
    echo_batch_discovery,
    echo_batch_item,
    echo_batch_summary,
    echo_conversion_result,
    echo_key_status,
    echo_voice_list,
    exit_with_command_error,
)
from .cli_runtime import (
    build_cli_options,
    load_runtime_config,
    locate_api_key,
    remember_api_key,
    resolve_api_key,
    resolve_voice_id,
)
from .errors import ConversionStageError
from .keystore import mask_api_key, open_key_store
from .models.datatypes import SynthesisOptions
from .parsing import normalize_optional_string
from .provider_factory import ProviderFactory
from .telemetry.logger import RunLogger

LIST_VOICES_FLAG = "--list-voices"
CONVERT_USAGE = "Usage: textvoice convert <path-to-text-file> [voice-name] [model-id] [options]"

app = typer.Typer(
    name="textvoice",
    no_args_is_help=True,
    help="Convert text files to speech with ElevenLabs.",
)
key_app = typer.Typer(
    no_args_is_help=True,
    help="Manage the ElevenLabs API key kept in the system keyring.",
)
app.add_typer(key_app, name="key")

VoiceNameArgument = Annotated[
    str | None,
    typer.Argument(
        help="Voice display name (case-insensitive). Defaults to `DEFAULT_VOICE_NAME`.",
    ),
]
ModelIdArgument = Annotated[
    str | None,
    typer.Argument(help="Model id override. Defaults to `DEFAULT_MODEL_ID`."),
]
StabilityOption = Annotated[
    float | None,
    typer.Option("--stability", help="Voice stability 0.0-1.0 (overrides `DEFAULT_STABILITY`)."),
]
SimilarityBoostOption = Annotated[
    float | None,
    typer.Option(
        "--similarity-boost",
        help="Similarity boost 0.0-1.0 (overrides `DEFAULT_SIMILARITY_BOOST`).",
    ),
]
StyleOption = Annotated[
    float | None,
    typer.Option("--style", help="Style exaggeration 0.0-1.0 (overrides `DEFAULT_STYLE`)."),
]
SpeakerBoostOption = Annotated[
    bool | None,
    typer.Option(
        "--speaker-boost/--no-speaker-boost",
        help="Toggle speaker boost (overrides `DEFAULT_USE_SPEAKER_BOOST`).",
    ),
]
LanguageCodeOption = Annotated[
    str | None,
    typer.Option("--language-code", help="ISO language code hint, e.g. `en` or `cs`."),
]
OutputFormatOption = Annotated[
    str | None,
    typer.Option(
        "--output-format",
        help="Provider output format, e.g. `mp3_44100_128`. Sets the file extension.",
    ),
]
TextNormalizationOption = Annotated[
    str | None,
    typer.Option("--text-normalization", help="Text normalization mode: `auto`, `on`, or `off`."),
]
ApiKeyOption = Annotated[
    str | None,
    typer.Option(
        "--api-key",
        help="ElevenLabs API key override. Prefer `--prompt-api-key` to avoid shell history.",
    ),
]
PromptApiKeyOption = Annotated[
    bool,
    typer.Option("--prompt-api-key", help="Prompt for API key with hidden input (never echoed)."),
]
StoreApiKeyOption = Annotated[
    bool,
    typer.Option(
        "--store-api-key/--no-store-api-key",
        help="Store a CLI-entered or prompted API key in the keyring.",
    ),
]


def _echo_run_overrides(model_id: str | None, overrides: SynthesisOptions) -> None:
    """Print explicit per-run model and voice settings."""

    if normalize_optional_string(model_id) is not None:
        typer.echo(f"Using model: {model_id}")
    if overrides.voice_settings is not None:
        rendered = ", ".join(
            f"{key}={value}" for key, value in overrides.voice_settings.as_payload().items()
        )
        typer.echo(f"Applied voice settings: {rendered}")


def _stray_option(voice_name: str | None, model_id: str | None) -> str | None:
    """Return an unrecognized option that landed in a positional slot, if any."""

    if voice_name is not None and voice_name.startswith("-") and voice_name != LIST_VOICES_FLAG:
        return voice_name
    if model_id is not None and model_id.startswith("-"):
        return model_id
    return None


@app.command("convert", context_settings={"ignore_unknown_options": True})
def convert_command(
    input_path: Annotated[
        Path | None,
        typer.Argument(help="Path to a UTF-8 text file."),
    ] = None,
    voice_name: VoiceNameArgument = None,
    model_id: ModelIdArgument = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Audio output path (default: beside the input)."),
    ] = None,
    stability: StabilityOption = None,
    similarity_boost: SimilarityBoostOption = None,
    style: StyleOption = None,
    speaker_boost: SpeakerBoostOption = None,
    language_code: LanguageCodeOption = None,
    output_format: OutputFormatOption = None,
    text_normalization: TextNormalizationOption = None,
    api_key: ApiKeyOption = None,
    prompt_api_key: PromptApiKeyOption = False,
    store_api_key: StoreApiKeyOption = True,
) -> None:
    """Convert one text file to speech.

    Pass `--list-voices` as the second argument to print available voices instead.
    """

    if input_path is None:
        exit_with_command_error(
            "convert",
            ConversionStageError(
                stage="input",
                detail="Input text file path is required.",
                hint=CONVERT_USAGE,
            ),
        )

    stray_option = _stray_option(voice_name, model_id)
    if stray_option is not None:
        exit_with_command_error(
            "convert",
            ConversionStageError(
                stage="input",
                detail=f"Unknown option `{stray_option}`.",
                hint=CONVERT_USAGE,
            ),
        )

    list_voices = voice_name == LIST_VOICES_FLAG
    try:
        config = load_runtime_config()
        resolved_api_key = resolve_api_key(
            config,
            api_key=api_key,
            prompt_api_key=prompt_api_key,
            store_api_key=store_api_key,
            key_store_factory=open_key_store,
        )
        catalog = ProviderFactory.create_voice_catalog(config, resolved_api_key)
        if list_voices:
            voices = catalog.list_voices()
        else:
            overrides = build_cli_options(
                model_id=model_id,
                stability=stability,
                similarity_boost=similarity_boost,
                style=style,
                speaker_boost=speaker_boost,
                language_code=language_code,
                output_format=output_format,
                text_normalization=text_normalization,
            )
            run_logger = RunLogger()
            voice_id = resolve_voice_id(catalog, config, voice_name, run_logger)
            _echo_run_overrides(model_id, overrides)
            converter = ProviderFactory.create_speech_converter(
                config, resolved_api_key, run_logger
            )
            typer.echo(f"Converting text to speech: {input_path}")
            result = converter.render_file(
                input_path,
                voice_id=voice_id,
                options=overrides,
                output_path=output,
            )
    except Exception as exc:
        exit_with_command_error("convert", exc)

    if list_voices:
        echo_voice_list(voices)
        return
    echo_conversion_result(result)


@app.command("batch")
def batch_command(
    directory: Annotated[
        Path | None,
        typer.Argument(help="Directory containing `.txt` files to convert."),
    ] = None,
    voice_name: VoiceNameArgument = None,
    model_id: ModelIdArgument = None,
    stability: StabilityOption = None,
    similarity_boost: SimilarityBoostOption = None,
    style: StyleOption = None,
    speaker_boost: SpeakerBoostOption = None,
    language_code: LanguageCodeOption = None,
    output_format: OutputFormatOption = None,
    text_normalization: TextNormalizationOption = None,
    api_key: ApiKeyOption = None,
    prompt_api_key: PromptApiKeyOption = False,
    store_api_key: StoreApiKeyOption = True,
) -> None:
    """Convert every `.txt` file in a directory, skipping files with existing audio."""

    if directory is None:
        exit_with_command_error(
            "batch",
            ConversionStageError(
                stage="input",
                detail="Directory path is required.",
                hint="Usage: textvoice batch <directory> [voice-name] [model-id]",
            ),
        )

    try:
        validate_batch_directory(directory)
        config = load_runtime_config()
        resolved_api_key = resolve_api_key(
            config,
            api_key=api_key,
            prompt_api_key=prompt_api_key,
            store_api_key=store_api_key,
            key_store_factory=open_key_store,
        )
        overrides = build_cli_options(
            model_id=model_id,
            stability=stability,
            similarity_boost=similarity_boost,
            style=style,
            speaker_boost=speaker_boost,
            language_code=language_code,
            output_format=output_format,
            text_normalization=text_normalization,
        )
        run_logger = RunLogger()
        catalog = ProviderFactory.create_voice_catalog(config, resolved_api_key)
        voice_id = resolve_voice_id(catalog, config, voice_name, run_logger)
        _echo_run_overrides(model_id, overrides)
        converter = ProviderFactory.create_speech_converter(config, resolved_api_key, run_logger)
        batch = BatchConverter(
            converter,
            run_logger=run_logger,
            item_callback=echo_batch_item,
            discovery_callback=echo_batch_discovery,
        )
        report = batch.run(directory, voice_id=voice_id, options=overrides)
    except Exception as exc:
        exit_with_command_error("batch", exc)

    echo_batch_summary(report)


@app.command("voices")
def voices_command(
    search: Annotated[
        str | None,
        typer.Option("--search", help="Search term matched by the provider against voice names."),
    ] = None,
    category: Annotated[
        str | None,
        typer.Option("--category", help="Provider voice category, e.g. `premade` or `cloned`."),
    ] = None,
    api_key: ApiKeyOption = None,
    prompt_api_key: PromptApiKeyOption = False,
    store_api_key: StoreApiKeyOption = True,
) -> None:
    """List available voices with optional search and category filters."""

    try:
        config = load_runtime_config()
        resolved_api_key = resolve_api_key(
            config,
            api_key=api_key,
            prompt_api_key=prompt_api_key,
            store_api_key=store_api_key,
            key_store_factory=open_key_store,
        )
        catalog = ProviderFactory.create_voice_catalog(config, resolved_api_key)
        voices = catalog.list_voices(
            name_contains=normalize_optional_string(search),
            category=normalize_optional_string(category),
        )
    except Exception as exc:
        exit_with_command_error("voices", exc)

    echo_voice_list(voices)


@key_app.command("status")
def key_status_command() -> None:
    """Show the keyring backend and which source the next run takes its key from."""

    try:
        config = load_runtime_config()
    except Exception as exc:
        exit_with_command_error("key status", exc)

    key_store = open_key_store()
    echo_key_status(key_store.backend_name, key_store.usable, locate_api_key(config, key_store))


@key_app.command("set")
def key_set_command(
    verify: Annotated[
        bool,
        typer.Option(
            "--verify/--no-verify",
            help="List voices with the new key before storing it.",
        ),
    ] = True,
) -> None:
    """Prompt for an API key (hidden input) and store it in the keyring."""

    entered = normalize_optional_string(
        typer.prompt(
            "ElevenLabs API key (hidden input)",
            default="",
            hide_input=True,
            show_default=False,
        )
    )
    try:
        if entered is None:
            raise ConversionStageError(
                stage="credentials",
                detail="No API key entered.",
                hint="Paste the key from your ElevenLabs profile settings.",
            )
        if verify:
            config = load_runtime_config()
            ProviderFactory.create_voice_catalog(config, entered).list_voices()
        key_store = open_key_store()
        updated = remember_api_key(key_store, entered)
    except Exception as exc:
        exit_with_command_error("key set", exc)

    if updated:
        typer.echo(f"Stored API key {mask_api_key(entered)} in {key_store.backend_name}.")
    else:
        typer.echo("The keyring already holds this API key.")


@key_app.command("clear")
def key_clear_command() -> None:
    """Remove the stored API key. Keys in the environment or `.env` are untouched."""

    if open_key_store().erase():
        typer.echo("Removed the API key from the keyring.")
    else:
        typer.echo("No API key stored in the keyring.")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
