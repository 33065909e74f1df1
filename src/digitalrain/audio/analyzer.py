"""
Smoothed audio level consumed by the symbol coloring.
"""

from digitalrain.config import RainConfig
from digitalrain.core.colors import clamp, lerp


class AudioAnalyzer:
    """
    Polls an energy source once per frame and exponentially smooths it.

    The level is forced to zero whenever reactivity is disabled or no
    source is attached, so toggling off has no residual color shift.
    """

    def __init__(self, cfg: RainConfig, source=None):
        self.cfg = cfg
        self.source = source
        self.level = 0.0

    def analyze(self, enabled: bool) -> float:
        if not enabled or self.source is None:
            self.level = 0.0
            return self.level

        target = clamp(self.source.read_energy() / 255.0, 0.0, 1.0)
        self.level = lerp(self.level, target, 1.0 - self.cfg.audio_smoothing)
        return self.level

    def close(self):
        if self.source is not None:
            self.source.close()
            self.source = None
