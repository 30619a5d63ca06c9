# orbit_geometry.py
import numpy as np
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple
from config import config
from physics_utils import OrbitalParameterError, TWO_PI, safe_divide, semi_minor_axis, validate_eccentricity

@dataclass
class AsteroidBelt:
    """A static point cloud of belt asteroids.

    The points are not simulated: they are sampled once between an inner and
    an outer ellipse and never move. Position and colour arrays are paired row
    by row; row order carries no meaning.

    Attributes:
        inner_radius (float): Semi-major axis of the inner belt edge.
        outer_radius (float): Semi-major axis of the outer belt edge.
        inner_eccentricity (float): Eccentricity of the inner edge.
        outer_eccentricity (float): Eccentricity of the outer edge.
        count (int): Number of points.
        belt_width (float): Band excluded at the edges, half on each side.
        vertical_spread (float): Total thickness along Y.
        positions (np.ndarray): (count, 3) array of [x, y, z].
        colors (np.ndarray): (count, 3) array of RGB floats in [0, 1].
    """
    inner_radius: float
    outer_radius: float
    inner_eccentricity: float
    outer_eccentricity: float
    count: int
    belt_width: float
    vertical_spread: float
    positions: np.ndarray = field(default_factory=lambda: np.zeros((0, 3)), repr=False)
    colors: np.ndarray = field(default_factory=lambda: np.zeros((0, 3)), repr=False)

    def __post_init__(self):
        # Generated once; freeze the arrays so nothing mutates the belt afterwards
        self.positions.setflags(write=False)
        self.colors.setflags(write=False)

    @property
    def radial_distances(self) -> np.ndarray:
        """Distance of each point from the origin in the XZ plane."""
        return np.hypot(self.positions[:, 0], self.positions[:, 2])


def build_orbit_curve(semi_major_axis: float, semi_minor_axis: float,
                      sample_count: int = None) -> np.ndarray:
    """
    Samples a closed ellipse centred at the origin.

    Angles run from 0 to 2*pi inclusive, so the returned array has
    `sample_count + 1` rows and the last point repeats the first.

    Args:
        semi_major_axis (float): Half-width along X.
        semi_minor_axis (float): Half-width along Z.
        sample_count (int, optional): Number of segments. Defaults to
            `config.Geometry.ORBIT_CURVE_SAMPLES` (128).

    Returns:
        np.ndarray: (sample_count + 1, 2) array of (x, z) points.

    Raises:
        OrbitalParameterError: If an axis is negative or fewer than 3 segments are requested.
    """
    if sample_count is None:
        sample_count = config.Geometry.ORBIT_CURVE_SAMPLES
    if sample_count < 3:
        raise OrbitalParameterError(f"An orbit curve needs at least 3 segments, got {sample_count}.")
    if semi_major_axis < 0 or semi_minor_axis < 0:
        raise OrbitalParameterError(
            f"Orbit curve axes must be non-negative (a={semi_major_axis}, b={semi_minor_axis})."
        )

    angles = np.linspace(0.0, TWO_PI, sample_count + 1)
    curve = np.column_stack((semi_major_axis * np.cos(angles), semi_minor_axis * np.sin(angles)))
    # cos/sin of 2*pi are not exactly 1/0 in floating point
    curve[-1] = curve[0]
    return curve

def lift_to_3d(points_xz: np.ndarray) -> np.ndarray:
    """Maps (x, z) pairs onto the y = 0 plane as (x, 0, z)."""
    points_xz = np.asarray(points_xz, dtype=np.float64)
    return np.column_stack((points_xz[:, 0], np.zeros(len(points_xz)), points_xz[:, 1]))

def build_asteroid_belt(inner_radius: float, outer_radius: float,
                        inner_eccentricity: float, outer_eccentricity: float,
                        count: int, belt_width: float, vertical_spread: float,
                        rng: Optional[np.random.Generator] = None,
                        color: Tuple[float, float, float] = (0.36, 0.23, 0.07),
                        color_jitter: float = 0.0) -> AsteroidBelt:
    """
    Scatters `count` points between two ellipses.

    For each point a radius r is drawn uniformly from
    [inner_radius + belt_width/2, outer_radius - belt_width/2] and an angle
    uniformly from [0, 2*pi). The ellipse axes are interpolated linearly
    between the inner and outer ellipses by t = (r - inner) / (outer - inner),
    which approximates a blend of the two shapes. The point lands at
    (a(t) cos(angle), y, b(t) sin(angle)) with y uniform across the vertical spread.

    Args:
        inner_radius (float): Semi-major axis of the inner edge.
        outer_radius (float): Semi-major axis of the outer edge.
        inner_eccentricity (float): Eccentricity of the inner edge, in [0, 1).
        outer_eccentricity (float): Eccentricity of the outer edge, in [0, 1).
        count (int): Number of points.
        belt_width (float): Edge band excluded from sampling.
        vertical_spread (float): Total thickness along Y.
        rng (np.random.Generator, optional): Random source. A fresh unseeded
            generator is used when omitted.
        color (Tuple[float, float, float]): RGB in [0, 1] for every point.
        color_jitter (float): Maximum brightness change per point; 0 keeps all points identical.

    Returns:
        AsteroidBelt: The generated, read-only point cloud.

    Raises:
        OrbitalParameterError: On unordered or non-positive radii, a band at
            least as wide as the belt, negative count or spread, or
            eccentricities outside [0, 1).
    """
    if not (0 < inner_radius < outer_radius):
        raise OrbitalParameterError(
            f"Asteroid belt radii (Inner: {inner_radius}, Outer: {outer_radius}) must be positive and ordered correctly."
        )
    if not (0 <= belt_width < outer_radius - inner_radius):
        raise OrbitalParameterError(
            f"Belt width {belt_width} must be non-negative and narrower than the belt ({outer_radius - inner_radius})."
        )
    if count < 0:
        raise OrbitalParameterError(f"Asteroid count cannot be negative, got {count}.")
    if vertical_spread < 0:
        raise OrbitalParameterError(f"Vertical spread cannot be negative, got {vertical_spread}.")
    validate_eccentricity(inner_eccentricity, "asteroid belt inner edge")
    validate_eccentricity(outer_eccentricity, "asteroid belt outer edge")

    if rng is None:
        rng = np.random.default_rng()

    a_inner, a_outer = float(inner_radius), float(outer_radius)
    b_inner = semi_minor_axis(a_inner, inner_eccentricity)
    b_outer = semi_minor_axis(a_outer, outer_eccentricity)

    radii = rng.uniform(inner_radius + belt_width / 2.0, outer_radius - belt_width / 2.0, size=count)
    angles = rng.uniform(0.0, TWO_PI, size=count)
    t = safe_divide(radii - inner_radius, np.full(count, outer_radius - inner_radius))

    a_t = a_inner + t * (a_outer - a_inner)
    b_t = b_inner + t * (b_outer - b_inner)

    positions = np.empty((count, 3), dtype=np.float64)
    positions[:, 0] = a_t * np.cos(angles)
    positions[:, 1] = rng.uniform(-vertical_spread / 2.0, vertical_spread / 2.0, size=count)
    positions[:, 2] = b_t * np.sin(angles)

    colors = np.tile(np.asarray(color, dtype=np.float64), (count, 1))
    if color_jitter > 0 and count > 0:
        brightness = 1.0 + rng.uniform(-color_jitter, color_jitter, size=(count, 1))
        colors = np.clip(colors * brightness, 0.0, 1.0)

    if config.Debug.ORBITAL_MECHANICS:
        logging.debug(f"Asteroid belt sampled: {count} points, r in [{inner_radius + belt_width / 2.0}, {outer_radius - belt_width / 2.0}]")

    return AsteroidBelt(
        inner_radius=a_inner,
        outer_radius=a_outer,
        inner_eccentricity=float(inner_eccentricity),
        outer_eccentricity=float(outer_eccentricity),
        count=int(count),
        belt_width=float(belt_width),
        vertical_spread=float(vertical_spread),
        positions=positions,
        colors=colors,
    )
