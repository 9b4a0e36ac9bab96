"""Top-level package for textvoice.

This package converts plain-text files into speech audio through the ElevenLabs
text-to-speech API. The main entry points are `SpeechConverter` for single
conversions and `BatchConverter` for directories.
"""

from .batch import BatchConverter
from .tts.converter import SpeechConverter
from .tts.voices import VoiceCatalog

__all__ = ["BatchConverter", "SpeechConverter", "VoiceCatalog", "__version__"]

__version__ = "0.1.0"
