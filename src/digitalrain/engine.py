"""
Frame loop for the digital rain.

One call to step() produces one frame, in a fixed order:
audio analysis -> shockwaves (applied to every symbol) -> particles ->
flying characters -> streams -> shockwave outlines.

Input callbacks (click, key toggle, resize) only mutate state; their
effect shows up on the next step().
"""

import random

from digitalrain.audio.analyzer import AudioAnalyzer
from digitalrain.config import RainConfig
from digitalrain.core.canvas import Canvas
from digitalrain.core.particles import FlyingChar, Particle, advance_entities
from digitalrain.core.shockwave import Shockwave
from digitalrain.core.stream import Stream, build_streams


class RainEngine:
    """Owns every animated collection and advances them frame by frame."""

    def __init__(
        self,
        config: RainConfig | None = None,
        audio: AudioAnalyzer | None = None,
        seed: int | None = None,
    ):
        self.cfg = (config or RainConfig()).validate()
        self.rng = random.Random(seed)
        self.audio = audio or AudioAnalyzer(self.cfg)

        self.frame_count = 0
        self.audio_level = 0.0

        self.streams: list[Stream] = build_streams(self.cfg, self.rng)
        self.shockwaves: list[Shockwave] = []
        self.particles: list[Particle] = []
        self.flying_chars: list[FlyingChar] = []

    # Input events

    def handle_click(self, x: float, y: float) -> Shockwave:
        shockwave = Shockwave(x, y)
        self.shockwaves.append(shockwave)
        return shockwave

    def toggle_audio(self) -> bool:
        self.cfg.enable_audio_reactivity = not self.cfg.enable_audio_reactivity
        return self.cfg.enable_audio_reactivity

    def resize(self, width: int, height: int):
        """Track the new surface size; existing streams keep their columns."""
        self.cfg.width = width
        self.cfg.height = height
        for stream in self.streams:
            stream.wrap_out_of_bounds(self.rng)

    # Frame loop

    def step(self, canvas: Canvas):
        cfg = self.cfg
        self.frame_count += 1
        canvas.fade(cfg.background_alpha)

        self.audio_level = self.audio.analyze(cfg.enable_audio_reactivity)

        for stream in self.streams:
            stream.clear_effects()
        self._update_shockwaves()

        self.particles = advance_entities(
            self.particles, lambda p: p.render(canvas, cfg)
        )
        self.flying_chars = advance_entities(
            self.flying_chars, lambda c: c.render(canvas, cfg)
        )

        for stream in self.streams:
            stream.render(canvas, self.frame_count, self.audio_level, self.rng)
        for shockwave in self.shockwaves:
            shockwave.render(canvas, cfg)

    def _update_shockwaves(self):
        """Newest first, so the oldest ring has the last word on overlapping symbols."""
        cfg = self.cfg
        active = []
        for shockwave in reversed(self.shockwaves):
            shockwave.advance(cfg.shockwave_speed)
            for stream in self.streams:
                for symbol in stream.symbols:
                    shockwave.apply(symbol, cfg, self.rng, self.particles, self.flying_chars)
            if not shockwave.is_finished(cfg.shockwave_max_radius):
                active.append(shockwave)
        active.reverse()
        self.shockwaves = active

    def close(self):
        self.audio.close()
