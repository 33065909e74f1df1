"""Interactive digital rain with shockwaves, particles and audio-reactive color."""

from digitalrain.audio import AudioAnalyzer
from digitalrain.config import RainConfig, load_config
from digitalrain.engine import RainEngine

__version__ = "0.1.0"
__all__ = [
    "AudioAnalyzer",
    "RainConfig",
    "RainEngine",
    "load_config",
]
