"""
Click-triggered shockwaves.

A shockwave is a ring growing from its origin at a fixed speed. Symbols
inside the ring's band get a per-frame boost that peaks exactly on the
ring radius and falls to zero at both edges (triangular falloff).
"""

import math
import random
from dataclasses import dataclass

from digitalrain.config import RainConfig
from digitalrain.core.canvas import Canvas
from digitalrain.core.colors import map_range
from digitalrain.core.particles import FlyingChar, Particle
from digitalrain.core.stream import Symbol


def effect_strength(distance: float, radius: float, width: float) -> float | None:
    """
    Triangular falloff around the ring radius.

    Returns None outside the band [radius - width/2, radius + width/2],
    otherwise a value in [0, 1] that is 1 exactly at the radius.
    """
    edge = width / 2
    if distance > radius + edge or distance < radius - edge:
        return None
    if edge == 0:
        return 1.0
    if distance < radius:
        return map_range(distance, radius - edge, radius, 0.0, 1.0)
    return map_range(distance, radius, radius + edge, 1.0, 0.0)


@dataclass
class Shockwave:
    x: float
    y: float
    radius: float = 0.0

    def advance(self, speed: float):
        self.radius += speed

    def is_finished(self, max_radius: float) -> bool:
        return self.radius > max_radius

    def apply(
        self,
        symbol: Symbol,
        cfg: RainConfig,
        rng: random.Random,
        particles: list[Particle],
        flying_chars: list[FlyingChar],
    ) -> float | None:
        """
        Apply this frame's effect to one symbol.

        Spawned debris is appended to particles / flying_chars.
        Returns the effect strength, or None when the symbol is outside the ring.
        """
        d = math.hypot(symbol.x - self.x, symbol.y - self.y)
        strength = effect_strength(d, self.radius, cfg.shockwave_width)
        if strength is None:
            return None

        effects = symbol.effects
        if cfg.enable_brightness_effect:
            effects.brightness = cfg.shockwave_brightness_increase * strength

        if cfg.enable_size_increase_wave:
            effects.size = cfg.symbol_size * (1 + (cfg.max_size_increase - 1) * strength)
            angle = (self.radius - d) * cfg.wave_frequency
            effects.wave_offset = math.sin(angle) * cfg.wave_amplitude * strength

        if cfg.enable_particle_effect and (
            cfg.max_particles is None or len(particles) < cfg.max_particles
        ):
            for _ in range(math.ceil(cfg.particle_count * strength)):
                particles.append(Particle.spawn(symbol.x, symbol.y, cfg, rng))

        if cfg.enable_character_fly_out:
            flying_chars.append(FlyingChar.spawn(symbol.x, symbol.y, symbol.value, cfg, rng))

        return strength

    def render(self, canvas: Canvas, cfg: RainConfig):
        if cfg.show_shockwave_circle:
            r, g, b = cfg.shockwave_color
            canvas.draw_ring(self.x, self.y, self.radius, (r, g, b, 50), 1)
