import pygame
import numpy as np
import math
from typing import Optional, Tuple

# (share of stars, parallax factor, base brightness, dot radius) from far to near
STAR_LAYERS = (
    (0.5, 0.05, 0.4, 1),
    (0.3, 0.15, 0.7, 1),
    (0.2, 0.30, 1.0, 2),
)

class StarField:
    """Twinkling star background, drawn when the background image is unavailable.

    Stars live in screen space in three layers. Orbiting the camera shifts each
    layer by a fraction of the camera's azimuth/polar change, nearer layers
    more, which gives a cheap parallax cue.
    """
    def __init__(self, width: int, height: int, star_count: int = 200,
                 rng: Optional[np.random.Generator] = None):
        self.width = width
        self.height = height
        rng = rng if rng is not None else np.random.default_rng()

        self.layers = []
        for share, parallax, brightness, size in STAR_LAYERS:
            count = int(star_count * share)
            tint = np.where(rng.random(count) < 0.1, rng.uniform(0.8, 1.0, count), 1.0)
            self.layers.append({
                'parallax': parallax,
                'brightness': brightness,
                'size': size,
                # Fractions of the window, so a resize keeps the layout
                'uv': rng.random((count, 2)),
                'intensity': rng.uniform(0.5, 1.0, count),
                'phase': rng.uniform(0.0, 2 * math.pi, count),
                'rate': rng.uniform(0.002, 0.008, count),
                'blue': tint,
            })

    @property
    def star_count(self) -> int:
        return sum(len(layer['uv']) for layer in self.layers)

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height

    def draw(self, surface: pygame.Surface, view_angles: Tuple[float, float] = (0.0, 0.0),
             time_ms: Optional[int] = None):
        """Draws all layers; `view_angles` is the camera (azimuth, polar) in radians."""
        if time_ms is None:
            time_ms = pygame.time.get_ticks()
        size = np.array([self.width, self.height], dtype=np.float64)
        # One full camera turn scrolls a layer with parallax 1 by a whole window
        shift = np.asarray(view_angles, dtype=np.float64) * size / (2 * math.pi)

        for layer in self.layers:
            xy = np.mod(layer['uv'] * size - shift * layer['parallax'], size).astype(int)
            twinkle = 0.5 * (np.sin(time_ms * layer['rate'] + layer['phase']) + 1.0)
            level = 255 * layer['brightness'] * layer['intensity'] * (0.6 + 0.4 * twinkle)
            blue = np.minimum(255, level * layer['blue'] * 1.05)

            for (x, y), grey, b in zip(xy.tolist(), level, blue):
                if grey < 20:
                    continue
                color = (int(grey), int(grey), int(b))
                if layer['size'] <= 1:
                    surface.set_at((x, y), color)
                else:
                    pygame.draw.circle(surface, color, (x, y), layer['size'])
