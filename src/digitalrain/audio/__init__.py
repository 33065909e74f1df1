"""Optional audio reactivity: sources, band energy and smoothing."""

from digitalrain.audio.analyzer import AudioAnalyzer
from digitalrain.audio.sources import (
    AudioUnavailableError,
    FileSource,
    MicrophoneSource,
    SilentSource,
    open_microphone,
)

__all__ = [
    "AudioAnalyzer",
    "AudioUnavailableError",
    "FileSource",
    "MicrophoneSource",
    "SilentSource",
    "open_microphone",
]
