"""Pytest configuration and shared fixtures."""

import os
import random

import numpy as np
import pytest

# Headless pygame for canvas and render tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from digitalrain.config import RainConfig  # noqa: E402
from digitalrain.core.canvas import Canvas  # noqa: E402

TEST_SR = 22050


class RecordingCanvas(Canvas):
    """Canvas that records every draw call instead of drawing."""

    def __init__(self):
        self.calls = []
        self.size = None

    def fade(self, alpha):
        self.calls.append(("fade", alpha))

    def draw_glyph(self, char, x, y, size, rgba):
        self.calls.append(("glyph", char, x, y, size, rgba))

    def draw_dot(self, x, y, diameter, rgba):
        self.calls.append(("dot", x, y, diameter, rgba))

    def draw_ring(self, x, y, radius, rgba, width=1):
        self.calls.append(("ring", x, y, radius, rgba, width))

    def resize(self, width, height):
        self.size = (width, height)

    def ops(self) -> list[str]:
        return [call[0] for call in self.calls]


class FixedSource:
    """Audio source returning a constant energy reading."""

    def __init__(self, energy: float):
        self.energy = energy
        self.closed = False

    def read_energy(self) -> float:
        return self.energy

    def close(self):
        self.closed = True


@pytest.fixture
def canvas() -> RecordingCanvas:
    return RecordingCanvas()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def small_config() -> RainConfig:
    """
    Tiny deterministic layout: 5 columns of 3 symbols, stacked from y=0,
    all falling at 5 px per frame, brightness and particle effects on.
    """
    return RainConfig(
        width=90,
        height=100,
        symbol_size=18,
        min_stream_length=3,
        max_stream_length=3,
        min_speed=5.0,
        max_speed=5.0,
        initial_y_min=0.0,
        initial_y_max=0.0,
        enable_brightness_effect=True,
        enable_particle_effect=True,
        enable_audio_reactivity=False,
    )


@pytest.fixture
def sample_rate() -> int:
    return TEST_SR


def sine(frequency: float, sample_rate: int, duration: float = 2.0, amplitude: float = 0.5) -> np.ndarray:
    t = np.linspace(0, duration, int(sample_rate * duration), endpoint=False)
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


@pytest.fixture
def low_tone_file(tmp_path, sample_rate):
    """A 2 second 55 Hz tone, centered on the default band-pass."""
    import soundfile as sf

    path = tmp_path / "low_tone.wav"
    sf.write(path, sine(55.0, sample_rate), sample_rate)
    return path


@pytest.fixture
def silent_file(tmp_path, sample_rate):
    import soundfile as sf

    path = tmp_path / "silence.wav"
    sf.write(path, np.zeros(sample_rate * 2, dtype=np.float32), sample_rate)
    return path
