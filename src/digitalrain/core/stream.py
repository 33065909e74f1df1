"""
Falling glyph streams.

Each stream is a fixed-length column of symbols falling at one shared
speed. Symbols that leave the bottom of the surface wrap back to the top
with a fresh glyph, so a stream is a recycled buffer rather than an
endless list.

Rendering maps a symbol's rank within its stream to:
- Opacity: linear from opacity_max (leading end) to opacity_min (tail)
- Blend factor: 0 at the leader, linear towards the trailing color
- Audio flash: optional blend towards the audio color ramp
- Shockwave boost: brightness, size and wave offset for the current frame
"""

import math
import random
from dataclasses import dataclass, field

from digitalrain.config import ALPHABET, RainConfig
from digitalrain.core.canvas import Canvas
from digitalrain.core.colors import brighten, lerp_color, map_range, to_rgba


@dataclass
class GlyphEffects:
    """Per-frame visual modifiers written by shockwaves."""
    brightness: float = 0.0
    size: float = 0.0
    wave_offset: float = 0.0

    def reset(self, base_size: float):
        self.brightness = 0.0
        self.size = base_size
        self.wave_offset = 0.0


@dataclass
class Symbol:
    """One glyph cell within a stream."""
    x: float
    y: float
    switch_interval: int
    value: str = ""
    effects: GlyphEffects = field(default_factory=GlyphEffects)
    audio_effect_index: int = 0

    def randomize(self, rng: random.Random, alphabet: str = ALPHABET):
        self.value = rng.choice(alphabet)

    def flicker(self, frame_count: int, rng: random.Random, alphabet: str = ALPHABET):
        """Re-roll the glyph every switch_interval frames."""
        if frame_count % self.switch_interval == 0:
            self.randomize(rng, alphabet)

    def fall(self, speed: float, height: float, rng: random.Random, alphabet: str = ALPHABET):
        self.y += speed
        if self.y >= height:
            self.wrap(rng, alphabet)

    def wrap(self, rng: random.Random, alphabet: str = ALPHABET):
        self.y = 0.0
        self.randomize(rng, alphabet)


def blend_factor(gradient_index: int, cfg: RainConfig) -> float:
    """Leading-to-trailing color weight for a symbol's rank."""
    second = 1.0 - cfg.second_character_brightness
    if gradient_index == 0:
        return 0.0
    if gradient_index == 1:
        return second
    return map_range(
        gradient_index, 2, cfg.leading_gradient_length, second, 1.0, clamp_output=True
    )


def audio_active(audio_level: float, cfg: RainConfig) -> bool:
    return cfg.enable_audio_reactivity and audio_level > cfg.audio_threshold


def symbol_color(
    symbol: Symbol,
    gradient_index: int,
    audio_level: float,
    cfg: RainConfig,
) -> tuple[float, float, float]:
    """Compute the RGB fill of a symbol for this frame."""
    base = lerp_color(cfg.leading_color, cfg.trailing_color, blend_factor(gradient_index, cfg))

    if audio_active(audio_level, cfg):
        audio_t = map_range(
            symbol.audio_effect_index, 0, cfg.audio_effect_length, 0.0, 1.0, clamp_output=True
        )
        audio_color = lerp_color(cfg.audio_leading_color, cfg.audio_trailing_color, audio_t)
        flash = map_range(
            audio_level, cfg.audio_threshold, 1.0,
            cfg.min_flash_brightness, cfg.max_flash_brightness,
        )
        base = lerp_color(base, audio_color, flash / 255.0)

    if cfg.enable_brightness_effect:
        base = brighten(base, symbol.effects.brightness)
    return base


class Stream:
    """A vertical column of symbols sharing one fall speed."""

    def __init__(self, x: float, cfg: RainConfig, rng: random.Random):
        self.x = x
        self.cfg = cfg
        self.total_symbols = round(rng.uniform(cfg.min_stream_length, cfg.max_stream_length))
        self.speed = rng.uniform(cfg.min_speed, cfg.max_speed)
        self.symbols: list[Symbol] = []
        self._generate_symbols(rng)

    def _generate_symbols(self, rng: random.Random):
        cfg = self.cfg
        first_y = rng.uniform(cfg.initial_y_min, cfg.initial_y_max)
        for i in range(self.total_symbols):
            symbol = Symbol(
                x=self.x,
                y=first_y + i * cfg.symbol_size,
                switch_interval=round(
                    rng.uniform(cfg.switch_interval_min, cfg.switch_interval_max)
                ),
            )
            symbol.effects.reset(cfg.symbol_size)
            symbol.randomize(rng, cfg.alphabet)
            self.symbols.append(symbol)
        # Long streams start partly below short surfaces
        self.wrap_out_of_bounds(rng)

    def opacity_for(self, index: int) -> float:
        return map_range(
            index, self.total_symbols, 0, self.cfg.opacity_max, self.cfg.opacity_min
        )

    def gradient_index(self, index: int) -> int:
        """Distance from the stream's leading (bottom-most) symbol."""
        return max(0, self.total_symbols - index - 1)

    def clear_effects(self):
        for symbol in self.symbols:
            symbol.effects.reset(self.cfg.symbol_size)

    def render(self, canvas: Canvas, frame_count: int, audio_level: float, rng: random.Random):
        """Draw every symbol, then advance the stream by one frame."""
        cfg = self.cfg
        flashing = audio_active(audio_level, cfg)

        for index, symbol in enumerate(self.symbols):
            gradient = self.gradient_index(index)
            color = symbol_color(symbol, gradient, audio_level, cfg)
            canvas.draw_glyph(
                symbol.value,
                symbol.x,
                symbol.y + symbol.effects.wave_offset,
                symbol.effects.size,
                to_rgba(color, self.opacity_for(index)),
            )
            symbol.flicker(frame_count, rng, cfg.alphabet)

            if flashing:
                symbol.audio_effect_index = (symbol.audio_effect_index + 1) % cfg.audio_effect_length
            else:
                symbol.audio_effect_index = 0

        self.rain(rng)

    def rain(self, rng: random.Random):
        for symbol in self.symbols:
            symbol.fall(self.speed, self.cfg.height, rng, self.cfg.alphabet)

    def wrap_out_of_bounds(self, rng: random.Random):
        """Wrap symbols at or below the bottom edge, e.g. after a shrink."""
        for symbol in self.symbols:
            if symbol.y >= self.cfg.height:
                symbol.wrap(rng, self.cfg.alphabet)


def build_streams(cfg: RainConfig, rng: random.Random) -> list[Stream]:
    """One stream per grid column across the surface width."""
    count = math.floor(cfg.width / cfg.symbol_size)
    return [Stream(i * cfg.symbol_size, cfg, rng) for i in range(count)]
