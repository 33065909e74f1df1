"""Deterministic simulation core: streams, shockwaves and debris."""

from digitalrain.core.canvas import Canvas
from digitalrain.core.particles import FlyingChar, Particle
from digitalrain.core.shockwave import Shockwave, effect_strength
from digitalrain.core.stream import GlyphEffects, Stream, Symbol, build_streams

__all__ = [
    "Canvas",
    "FlyingChar",
    "GlyphEffects",
    "Particle",
    "Shockwave",
    "Stream",
    "Symbol",
    "build_streams",
    "effect_strength",
]
