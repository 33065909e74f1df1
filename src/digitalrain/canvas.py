"""
pygame drawing surface for the rain engine.
"""

import numpy as np
import pygame

from digitalrain.core.canvas import RGBA, Canvas

# Searched in order when no font is named; pygame's bundled font has no katakana
GLYPH_FONTS = [
    "notosanscjkjp",
    "notosansmonocjkjp",
    "notosanscjk",
    "sourcehansans",
    "ipagothic",
    "takaogothic",
    "vlgothic",
    "droidsansfallback",
    "wenquanyizenhei",
    "msgothic",
    "meiryo",
    "hiraginosans",
    "applegothic",
]

# Private-use code point: renders as the font's missing-glyph box
_NOT_A_GLYPH = "\ue000"


class PygameCanvas(Canvas):
    """
    Draws onto a pygame Surface.

    Glyphs are rendered once in white per (char, size) and tinted with a
    multiplicative blend, which keeps per-frame text rendering cheap.
    """

    def __init__(
        self,
        width: int,
        height: int,
        font_name: str | None = None,
        surface: pygame.Surface | None = None,
        window_flags: int | None = None,
    ):
        if not pygame.font.get_init():
            pygame.font.init()
        self.font_name = font_name
        self.window_flags = window_flags
        self.surface = surface if surface is not None else pygame.Surface((width, height))
        self.surface.fill((0, 0, 0))
        self._fade = None
        self._fonts: dict[int, pygame.font.Font] = {}
        self._glyphs: dict[tuple[str, int], pygame.Surface] = {}

    @property
    def size(self) -> tuple[int, int]:
        return self.surface.get_size()

    def _font(self, size: int) -> pygame.font.Font:
        font = self._fonts.get(size)
        if font is None:
            font = pygame.font.SysFont(self.font_name or GLYPH_FONTS, size)
            self._fonts[size] = font
        return font

    def _glyph(self, char: str, size: int) -> pygame.Surface:
        key = (char, size)
        glyph = self._glyphs.get(key)
        if glyph is None:
            glyph = self._font(size).render(char, True, (255, 255, 255))
            self._glyphs[key] = glyph
        return glyph

    def missing_glyphs(self, chars: str, size: int = 18) -> str:
        """Characters the font draws as its missing-glyph placeholder."""
        font = self._font(size)

        def pixels(text: str) -> bytes:
            return pygame.image.tobytes(font.render(text, True, (255, 255, 255)), "RGBA")

        placeholder = pixels(_NOT_A_GLYPH)
        return "".join(c for c in chars if pixels(c) == placeholder)

    def fade(self, alpha: int):
        if self._fade is None or self._fade.get_size() != self.size:
            self._fade = pygame.Surface(self.size)
            self._fade.fill((0, 0, 0))
        self._fade.set_alpha(alpha)
        self.surface.blit(self._fade, (0, 0))

    def draw_glyph(self, char: str, x: float, y: float, size: float, rgba: RGBA):
        if rgba[3] <= 0 or not char:
            return
        tinted = self._glyph(char, max(1, int(round(size)))).copy()
        tinted.fill(rgba, special_flags=pygame.BLEND_RGBA_MULT)
        self.surface.blit(tinted, (int(x), int(y)))

    def draw_dot(self, x: float, y: float, diameter: float, rgba: RGBA):
        if rgba[3] <= 0:
            return
        radius = max(1, int(round(diameter / 2)))
        dot = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
        pygame.draw.circle(dot, rgba, (radius, radius), radius)
        self.surface.blit(dot, (int(x) - radius, int(y) - radius))

    def draw_ring(self, x: float, y: float, radius: float, rgba: RGBA, width: int = 1):
        if radius <= 0 or rgba[3] <= 0:
            return
        w, h = self.size
        overlay = pygame.Surface((w, h), pygame.SRCALPHA)
        pygame.draw.circle(overlay, rgba, (int(x), int(y)), int(radius), width)
        self.surface.blit(overlay, (0, 0))

    def resize(self, width: int, height: int):
        """Replace the surface; previous content is dropped as on a canvas resize."""
        if self.window_flags is not None:
            self.surface = pygame.display.set_mode((width, height), self.window_flags)
        else:
            self.surface = pygame.Surface((width, height))
        self.surface.fill((0, 0, 0))

    def to_array(self) -> np.ndarray:
        """Convert the surface to an (H, W, 3) uint8 array for encoding."""
        # pygame uses (width, height) but numpy expects (height, width)
        arr = pygame.surfarray.array3d(self.surface)
        arr = np.transpose(arr, (1, 0, 2))
        return np.ascontiguousarray(arr, dtype=np.uint8)
