"""
Short-lived debris spawned by shockwaves.

Particles are small dots, flying characters are glyph copies of the
symbol that was hit. Both drift at a constant random velocity and fade
out linearly: alpha and color are keyed by the same remaining-life
fraction, so they reach their end values on the frame life hits zero.
"""

import random
from dataclasses import dataclass, field
from typing import Callable, List, TypeVar

from digitalrain.config import Color, RainConfig
from digitalrain.core.canvas import Canvas
from digitalrain.core.colors import lerp_color, to_rgba


def random_velocity(speed: float, rng: random.Random) -> tuple[float, float]:
    """Independent uniform components in [-speed, speed]."""
    return rng.uniform(-speed, speed), rng.uniform(-speed, speed)


@dataclass
class FadingEntity:
    """Shared motion and fade state."""
    x: float
    y: float
    vx: float
    vy: float
    duration: int
    life: int = field(init=False, default=0)
    alpha: float = field(init=False, default=255.0)

    def __post_init__(self):
        self.life = self.duration

    @property
    def life_fraction(self) -> float:
        return max(0.0, self.life / self.duration)

    def update(self):
        self.x += self.vx
        self.y += self.vy
        self.life -= 1
        self.alpha = 255.0 * self.life_fraction

    def color(self, start: Color, end: Color) -> tuple[float, float, float]:
        return lerp_color(start, end, 1.0 - self.life_fraction)

    @property
    def is_finished(self) -> bool:
        return self.life <= 0


@dataclass
class Particle(FadingEntity):
    size: float = 1.0

    @classmethod
    def spawn(cls, x: float, y: float, cfg: RainConfig, rng: random.Random) -> "Particle":
        vx, vy = random_velocity(cfg.particle_speed, rng)
        return cls(x=x, y=y, vx=vx, vy=vy, duration=cfg.particle_duration, size=cfg.particle_size)

    def render(self, canvas: Canvas, cfg: RainConfig):
        color = self.color(cfg.particle_color_start, cfg.particle_color_end)
        canvas.draw_dot(self.x, self.y, self.size, to_rgba(color, self.alpha))


@dataclass
class FlyingChar(FadingEntity):
    value: str = ""

    @classmethod
    def spawn(cls, x: float, y: float, value: str, cfg: RainConfig, rng: random.Random) -> "FlyingChar":
        vx, vy = random_velocity(cfg.fly_out_speed, rng)
        return cls(x=x, y=y, vx=vx, vy=vy, duration=cfg.fly_out_duration, value=value)

    def render(self, canvas: Canvas, cfg: RainConfig):
        color = self.color(cfg.character_color_start, cfg.character_color_end)
        canvas.draw_glyph(self.value, self.x, self.y, cfg.symbol_size, to_rgba(color, self.alpha))


E = TypeVar("E", bound=FadingEntity)


def advance_entities(entities: List[E], draw: Callable[[E], None]) -> List[E]:
    """
    Update every entity once, drop the expired ones and draw the rest.

    Returns the surviving entities in their original order.
    """
    survivors = []
    for entity in entities:
        entity.update()
        if entity.is_finished:
            continue
        draw(entity)
        survivors.append(entity)
    return survivors
