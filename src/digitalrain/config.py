"""
Static parameter table for the digital rain.

Every tunable lives on a single dataclass. Defaults reproduce the
classic look: green streams, white shockwave highlights and a
low-frequency audio flash.
"""

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

Color = tuple[int, int, int]

KATAKANA = (
    "アイウエオカキクケコサシスセソタチツテトナニヌネノ"
    "ハヒフヘホマミムメモヤユヨラリルレロワヲン"
)
LATIN = "ABCDEFGHIJKLMNOPQRSTUVWXYZ" + "0123456789"
ALPHABET = KATAKANA + LATIN


@dataclass
class RainConfig:
    """Configuration for the rain engine and its host window."""

    width: int = 1280
    height: int = 720
    fps: int = 60
    background_alpha: int = 150  # Trail fade per frame (0-255)
    font_name: str | None = None  # None searches CJK-capable system fonts
    alphabet: str = ALPHABET  # Glyphs drawn by the streams

    # Streams
    symbol_size: int = 18
    min_stream_length: int = 20
    max_stream_length: int = 50
    min_speed: float = 2.0
    max_speed: float = 5.0
    initial_y_min: float = -1000.0
    initial_y_max: float = 0.0
    switch_interval_min: int = 2
    switch_interval_max: int = 20
    opacity_min: float = 50.0
    opacity_max: float = 200.0
    leading_gradient_length: int = 2
    second_character_brightness: float = 1.0
    leading_color: Color = (180, 255, 100)
    trailing_color: Color = (0, 154, 30)

    # Shockwave
    shockwave_speed: float = 5.0
    shockwave_width: float = 10.0
    shockwave_max_radius: float = 1000.0
    shockwave_brightness_increase: float = 200.0
    shockwave_color: Color = (255, 255, 255)
    show_shockwave_circle: bool = False
    max_size_increase: float = 10.0  # Size factor at peak strength
    wave_amplitude: float = 200.0  # Maximum vertical displacement
    wave_frequency: float = 0.1

    # Effect toggles
    enable_brightness_effect: bool = False
    enable_size_increase_wave: bool = False
    enable_particle_effect: bool = False
    enable_character_fly_out: bool = True
    enable_audio_reactivity: bool = True

    # Particles
    particle_count: int = 2
    particle_speed: float = 8.0
    particle_size: float = 1.0
    particle_duration: int = 12
    particle_color_start: Color = (180, 255, 100)
    particle_color_end: Color = (100, 100, 100)
    max_particles: int | None = None  # None = uncapped

    # Flying characters
    fly_out_speed: float = 1.0
    fly_out_duration: int = 40
    character_color_start: Color = (180, 255, 100)
    character_color_end: Color = (0, 154, 30)

    # Audio
    audio_threshold: float = 0.1
    filter_freq: float = 55.0  # Band-pass center (Hz)
    filter_width: float = 10.0  # Band-pass width (Hz)
    audio_smoothing: float = 0.8
    min_flash_brightness: float = 0.0
    max_flash_brightness: float = 255.0
    frequency_min: float = 30.0  # Energy band read back after filtering (Hz)
    frequency_max: float = 40.0
    audio_effect_length: int = 5
    audio_leading_color: Color = (255, 255, 255)
    audio_trailing_color: Color = (180, 255, 100)
    sample_rate: int = 44100
    block_size: int = 2048

    def validate(self) -> "RainConfig":
        """Raise ValueError on inconsistent settings. Returns self."""
        if self.symbol_size <= 0:
            raise ValueError("symbol_size must be positive")
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be positive")
        if self.fps <= 0:
            raise ValueError("fps must be positive")
        if not self.alphabet:
            raise ValueError("alphabet must not be empty")
        for low, high in (
            ("min_stream_length", "max_stream_length"),
            ("min_speed", "max_speed"),
            ("initial_y_min", "initial_y_max"),
            ("switch_interval_min", "switch_interval_max"),
            ("opacity_min", "opacity_max"),
            ("frequency_min", "frequency_max"),
        ):
            if getattr(self, low) > getattr(self, high):
                raise ValueError(f"{low} must not exceed {high}")
        if self.min_stream_length < 1:
            raise ValueError("min_stream_length must be at least 1")
        if self.switch_interval_min < 1:
            raise ValueError("switch_interval_min must be at least 1")
        if self.particle_duration < 1 or self.fly_out_duration < 1:
            raise ValueError("particle and fly-out durations must be at least 1 frame")
        if self.audio_effect_length < 1:
            raise ValueError("audio_effect_length must be at least 1")
        if not 0.0 <= self.audio_smoothing <= 1.0:
            raise ValueError("audio_smoothing must be within [0, 1]")
        if self.filter_width <= 0 or self.filter_freq <= 0:
            raise ValueError("filter_freq and filter_width must be positive")
        return self

    def with_overrides(self, **overrides: Any) -> "RainConfig":
        """Return a copy with the given fields replaced (None values ignored)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RainConfig":
        """Build a config from a plain mapping, e.g. parsed JSON."""
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

        values = {}
        for key, value in data.items():
            if "color" in key:
                value = parse_color(value)
            values[key] = value
        return cls(**values).validate()


def parse_color(value: Any) -> Color:
    """Accept '#rrggbb' strings or 3-item sequences."""
    if isinstance(value, str):
        text = value.lstrip("#")
        if len(text) != 6:
            raise ValueError(f"Invalid color string: {value!r}")
        return tuple(int(text[i:i + 2], 16) for i in (0, 2, 4))
    channels = tuple(int(c) for c in value)
    if len(channels) != 3:
        raise ValueError(f"Color needs three channels: {value!r}")
    if any(c < 0 or c > 255 for c in channels):
        raise ValueError(f"Color channels must be within 0-255: {value!r}")
    return channels


def load_config(path: Path) -> RainConfig:
    """Load a JSON config file on top of the defaults."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")
    return RainConfig.from_dict(data)
