# textures.py
import os
import logging
import numpy as np
import pygame
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple
from config import config
from physics_utils import TWO_PI, normalize_vector

DEFAULT_ASSET_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), config.Visualization.ASSET_DIR)

@dataclass
class Texture:
    """An RGB image held as a numpy array indexed [x, y, channel], like pygame.surfarray.

    The mean colour is computed once at construction; `pixels` is treated as read-only.
    """
    name: str
    pixels: np.ndarray
    _mean_color: Tuple[int, int, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        mean = self.pixels.reshape(-1, 3).mean(axis=0)
        self._mean_color = tuple(int(c) for c in mean)

    @property
    def width(self) -> int:
        return self.pixels.shape[0]

    @property
    def height(self) -> int:
        return self.pixels.shape[1]

    def average_color(self) -> Tuple[int, int, int]:
        return self._mean_color

def placeholder_texture(color: Tuple[int, int, int], name: str = "placeholder") -> Texture:
    """A 1x1 flat-colour texture used when no image is available."""
    return Texture(name=name, pixels=np.array([[color]], dtype=np.uint8))

def _log_texture_error(path: str, err: Exception):
    logging.error(f"Texture loading failed for '{path}': {err}")


class TextureLoader:
    """Loads image files into `Texture` objects with success and error callbacks.

    A failed load never raises: the error callback runs (by default it only
    logs) and `load()` returns None, so callers keep whatever placeholder they
    already have.

    Attributes:
        base_dir (str): Directory that relative paths resolve against.
        max_width (int): Wider images are downscaled on load, keeping aspect ratio.
    """
    def __init__(self, base_dir: Optional[str] = None, max_width: Optional[int] = None):
        self.base_dir = base_dir if base_dir is not None else DEFAULT_ASSET_DIR
        self.max_width = max_width if max_width is not None else config.Geometry.TEXTURE_MAX_WIDTH_PX
        self._cache = {}

    def resolve(self, path: str) -> str:
        if os.path.isabs(path):
            return path
        return os.path.join(self.base_dir, path)

    def load_surface(self, path: str) -> pygame.Surface:
        """Loads and downscales the image at `path`. Raises on failure."""
        full_path = self.resolve(path)
        if not os.path.isfile(full_path):
            raise FileNotFoundError(f"No such texture file: {full_path}")
        surface = pygame.image.load(full_path)
        width, height = surface.get_size()
        if width > self.max_width:
            scaled_height = max(1, int(height * self.max_width / width))
            surface = pygame.transform.smoothscale(surface, (self.max_width, scaled_height))
        return surface

    def load(self, path: str,
             on_load: Optional[Callable[[Texture], None]] = None,
             on_error: Optional[Callable[[str, Exception], None]] = None) -> Optional[Texture]:
        """
        Loads a texture, invoking `on_load(texture)` or `on_error(path, error)`.

        Args:
            path (str): File name relative to `base_dir`, or an absolute path.
            on_load (Callable, optional): Called with the texture on success.
            on_error (Callable, optional): Called with the path and exception on
                failure. Defaults to logging the failure.

        Returns:
            Texture | None: The texture, or None when loading failed.
        """
        if on_error is None:
            on_error = _log_texture_error

        texture = self._cache.get(path)
        if texture is None:
            try:
                surface = self.load_surface(path)
                texture = Texture(name=path, pixels=pygame.surfarray.array3d(surface))
            except (pygame.error, OSError, ValueError) as err:
                on_error(path, err)
                return None
            self._cache[path] = texture
            logging.info(f"Loaded texture '{path}' ({texture.width}x{texture.height}).")

        if on_load is not None:
            on_load(texture)
        return texture


def shade_sphere(texture: Texture, radius_px: int, spin_angle: float = 0.0,
                 light_dir: Optional[np.ndarray] = None, ambient: float = 0.0):
    """
    Renders a sphere sprite by sampling an equirectangular texture.

    Each pixel inside the disc is mapped to a point on the visible hemisphere;
    its longitude (shifted by `spin_angle`) and latitude pick the texel. With a
    `light_dir` (camera-space direction toward the light, +Z pointing at the
    viewer) the texel is scaled by Lambert shading with an `ambient` floor.

    Args:
        texture (Texture): Source image; a 1x1 placeholder gives a flat sphere.
        radius_px (int): Sprite radius; the sprite is 2 * radius_px square.
        spin_angle (float): Rotation about the sphere's vertical axis, radians.
        light_dir (np.ndarray, optional): Direction toward the light. None means unlit.
        ambient (float): Minimum brightness on the unlit side, 0..1.

    Returns:
        Tuple[np.ndarray, np.ndarray]: (2r, 2r, 3) uint8 colours and (2r, 2r)
        uint8 alpha (255 inside the disc, 0 outside), both indexed [x, y].
    """
    radius_px = max(1, int(radius_px))
    diameter = 2 * radius_px
    coords = (np.arange(diameter) + 0.5 - radius_px) / radius_px
    px, py = np.meshgrid(coords, coords, indexing='ij')
    nx = px
    ny = -py  # screen y grows downward
    rho_sq = nx ** 2 + ny ** 2
    inside = rho_sq <= 1.0
    nz = np.sqrt(np.clip(1.0 - rho_sq, 0.0, 1.0))

    longitude = np.arctan2(nx, nz) + spin_angle
    latitude = np.arcsin(np.clip(ny, -1.0, 1.0))
    u = np.mod(longitude / TWO_PI + 0.5, 1.0)
    v = 0.5 - latitude / np.pi
    tx = np.clip((u * texture.width).astype(int), 0, texture.width - 1)
    ty = np.clip((v * texture.height).astype(int), 0, texture.height - 1)
    rgb = texture.pixels[tx, ty].astype(np.float64)

    if light_dir is not None:
        light = normalize_vector(np.asarray(light_dir, dtype=np.float64))
        lambert = np.clip(nx * light[0] + ny * light[1] + nz * light[2], 0.0, 1.0)
        intensity = ambient + (1.0 - ambient) * lambert
        rgb *= intensity[..., None]

    rgb[~inside] = 0.0
    alpha = np.where(inside, 255, 0).astype(np.uint8)
    return np.clip(rgb, 0, 255).astype(np.uint8), alpha
