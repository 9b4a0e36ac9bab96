"""Text-to-speech conversion abstractions.

This package contains the voice catalog and the speech converter used by the
single-file and batch commands.
"""

from .converter import DEFAULT_MODEL_ID, DEFAULT_VOICE_ID, SpeechConverter
from .voices import VoiceCatalog

__all__ = ["DEFAULT_MODEL_ID", "DEFAULT_VOICE_ID", "SpeechConverter", "VoiceCatalog"]
