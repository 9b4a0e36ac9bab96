"""Voice catalog lookups against the provider listing endpoint.

Responsibilities:
- List provider voices with optional search and category filters.
- Resolve a human-readable voice name to a provider voice identifier.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from ..elevenlabs.client import VOICE_PAGE_SIZE, ElevenLabsProviderError
from ..models.datatypes import Voice
from .provider_errors import provider_stage_error


class VoiceListingClient(Protocol):
    """Protocol for provider clients that list raw voice entries."""

    def list_voices(
        self,
        *,
        search: str | None = None,
        category: str | None = None,
        page_size: int = VOICE_PAGE_SIZE,
    ) -> list[Mapping[str, Any]]:
        """Return raw voice entries in provider order."""


class VoiceCatalog:
    """Fetch provider voices fresh on every lookup; nothing is cached."""

    def __init__(self, client: VoiceListingClient) -> None:
        """Initialize the catalog with a voice listing client."""

        self.client = client

    def list_voices(
        self,
        name_contains: str | None = None,
        category: str | None = None,
    ) -> list[Voice]:
        """Return voices matching optional filters, dropping entries that fail to parse."""

        try:
            entries = self.client.list_voices(
                search=name_contains,
                category=category,
                page_size=VOICE_PAGE_SIZE,
            )
        except ElevenLabsProviderError as exc:
            raise provider_stage_error("voices", exc) from exc

        voices: list[Voice] = []
        for entry in entries:
            try:
                voices.append(Voice.from_payload(entry))
            except ValueError:
                continue
        return voices

    def find_by_exact_name(self, name: str) -> Voice | None:
        """Return the first voice whose display name equals `name`, ignoring case."""

        wanted = name.lower()
        for voice in self.list_voices(name_contains=name):
            if voice.name.lower() == wanted:
                return voice
        return None
