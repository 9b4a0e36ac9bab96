"""ElevenLabs provider HTTP clients."""

from .client import ElevenLabsProviderError, ElevenLabsSpeechClient, ElevenLabsVoicesClient

__all__ = ["ElevenLabsProviderError", "ElevenLabsSpeechClient", "ElevenLabsVoicesClient"]
