"""
Abstract drawing surface used by the rain engine.

The simulation only issues these primitive calls, so any backend
(a pygame window, an offscreen buffer, a recorder in tests) can host it.
"""

import abc

RGBA = tuple[int, int, int, int]


class Canvas(abc.ABC):
    """Minimal 2D drawing target."""

    @abc.abstractmethod
    def fade(self, alpha: int):
        """Paint translucent black over the whole surface (trail effect)."""
        pass

    @abc.abstractmethod
    def draw_glyph(self, char: str, x: float, y: float, size: float, rgba: RGBA):
        """Draw a single character with its top-left corner at (x, y)."""
        pass

    @abc.abstractmethod
    def draw_dot(self, x: float, y: float, diameter: float, rgba: RGBA):
        pass

    @abc.abstractmethod
    def draw_ring(self, x: float, y: float, radius: float, rgba: RGBA, width: int = 1):
        pass

    @abc.abstractmethod
    def resize(self, width: int, height: int):
        """Recreate the surface at a new size."""
        pass
