# solarsystem.py
import numpy as np
import math
import logging
from dataclasses import dataclass, field
from typing import Tuple, List, Optional
from config import config # Import the global config instance
from physics_utils import OrbitalParameterError, TWO_PI, semi_minor_axis, validate_eccentricity, wrap_angle
from orbit_geometry import AsteroidBelt, build_asteroid_belt, build_orbit_curve, lift_to_3d
from scene_graph import LineNode, MeshNode, PointsNode, SceneNode

@dataclass
class OrbitalBody:
    name: str
    radius: float  # Render size
    semi_major_axis: float  # Includes the central-body radius offset
    eccentricity: float
    inclination_deg: float  # Applied by the container node, not by advance()
    orbit_period: float  # Animation seconds for one revolution
    spin_rate: float  # Radians per frame
    color: Tuple[int, int, int] = (255, 255, 255)
    texture_path: Optional[str] = None

    # Phase state, mutated every frame
    orbit_angle: float = 0.0
    spin_angle: float = 0.0
    orbit_angular_speed: float = field(init=False)  # Radians per frame

    # Position within the body's own (untilted) orbital plane
    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float64))

    def __post_init__(self):
        if self.orbit_period <= 0:
            raise OrbitalParameterError(f"Orbital period of '{self.name}' must be positive, got {self.orbit_period}.")
        self.eccentricity = validate_eccentricity(self.eccentricity, f"'{self.name}'")
        if not isinstance(self.position, np.ndarray):
            self.position = np.array(self.position, dtype=np.float64)
        self.orbit_angular_speed = TWO_PI / self.orbit_period
        self.update_position()

    @property
    def semi_minor_axis(self) -> float:
        """Recomputed from a and e on every access; never stored."""
        return semi_minor_axis(self.semi_major_axis, self.eccentricity)

    def update_position(self):
        """Places the body on its ellipse at the current orbit angle (y stays 0)."""
        self.position[0] = self.semi_major_axis * math.cos(self.orbit_angle)
        self.position[1] = 0.0
        self.position[2] = self.semi_minor_axis * math.sin(self.orbit_angle)


@dataclass
class PlanetEntry:
    """Links a body to the scene nodes that display it."""
    body: OrbitalBody
    container: SceneNode  # Carries the orbital-plane tilt
    mesh: MeshNode
    orbit_line: LineNode


@dataclass
class SceneContext:
    """Everything one orrery instance needs, passed explicitly to every call.

    Several contexts can exist side by side (e.g. in tests) since nothing here
    is global. Seeding `rng` makes the initial planet phases and the belt
    layout reproducible; the default generator is unseeded.

    Attributes:
        root (SceneNode): Scene root. Carries the whole-scene tilt.
        rng (np.random.Generator): Random source for phases and the belt.
        central_body_radius (float): Offset added to every orbit distance.
        sun (MeshNode | None): The central body's mesh, if created.
        planets (List[PlanetEntry]): Bodies in creation order.
        asteroid_belt (AsteroidBelt | None): The belt, if created.
        belt_node (PointsNode | None): Scene node displaying the belt.
        frame_count (int): Number of `advance_all` calls so far.
        sun_spin_rate (float): Radians per frame for the Sun's cosmetic rotation.
    """
    root: SceneNode = field(default_factory=lambda: SceneNode("scene"))
    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    central_body_radius: float = 0.0
    sun: Optional[MeshNode] = None
    planets: List[PlanetEntry] = field(default_factory=list)
    asteroid_belt: Optional[AsteroidBelt] = None
    belt_node: Optional[PointsNode] = None
    frame_count: int = 0
    sun_spin_rate: float = 0.0

    @classmethod
    def with_seed(cls, seed: Optional[int], central_body_radius: float = 0.0) -> 'SceneContext':
        return cls(rng=np.random.default_rng(seed), central_body_radius=central_body_radius)

    @property
    def bodies(self) -> List[OrbitalBody]:
        return [entry.body for entry in self.planets]

    def get_planet(self, name: str) -> Optional[PlanetEntry]:
        for entry in self.planets:
            if entry.body.name == name:
                return entry
        return None


def create_body(ctx: SceneContext, size: float, color: Tuple[int, int, int], orbit_distance: float,
                inclination_deg: float, eccentricity: float, period_days: float,
                spin_rate: float = None, texture_path: Optional[str] = None,
                name: Optional[str] = None) -> Tuple[OrbitalBody, SceneNode]:
    """
    Creates an orbiting body, its orbit track and the tilted container holding both.

    The orbit distance is offset by `ctx.central_body_radius`, the initial
    phase is drawn uniformly from [0, 2*pi) with `ctx.rng`, and the period in
    days is converted to an angular speed per frame with
    `config.Animation.ANIMATION_SECONDS_PER_DAY` (one day lasts one minute).

    Args:
        ctx (SceneContext): Context receiving the new nodes and entry.
        size (float): Render radius of the body.
        color (Tuple[int, int, int]): Placeholder colour used until (or instead of) a texture.
        orbit_distance (float): Semi-major axis before the central-body offset.
        inclination_deg (float): Tilt of the orbital plane about X.
        eccentricity (float): In [0, 1).
        period_days (float): Orbital period in days.
        spin_rate (float, optional): Radians per frame about the body's own axis.
        texture_path (str, optional): Texture file, resolved later by the renderer.
        name (str, optional): Body name. Defaults to "body-<index>".

    Returns:
        Tuple[OrbitalBody, SceneNode]: The body and its container node.

    Raises:
        OrbitalParameterError: If size, orbit distance or period is not positive,
            or eccentricity is outside [0, 1).
    """
    if name is None:
        name = f"body-{len(ctx.planets)}"
    if spin_rate is None:
        spin_rate = config.Animation.DEFAULT_SPIN_RATE_RAD_PER_FRAME
    if size <= 0:
        raise OrbitalParameterError(f"Size of '{name}' must be positive, got {size}.")
    if orbit_distance <= 0:
        raise OrbitalParameterError(f"Orbit distance of '{name}' must be positive, got {orbit_distance}.")
    if period_days <= 0:
        raise OrbitalParameterError(f"Orbital period of '{name}' must be positive, got {period_days}.")
    validate_eccentricity(eccentricity, f"'{name}'")

    adjusted_orbit_distance = orbit_distance + ctx.central_body_radius
    period_seconds = period_days * config.Animation.ANIMATION_SECONDS_PER_DAY

    body = OrbitalBody(
        name=name,
        radius=float(size),
        semi_major_axis=float(adjusted_orbit_distance),
        eccentricity=float(eccentricity),
        inclination_deg=float(inclination_deg),
        orbit_period=float(period_seconds),
        spin_rate=float(spin_rate),
        color=tuple(color),
        texture_path=texture_path,
        orbit_angle=float(ctx.rng.uniform(0.0, TWO_PI)),
    )

    container = SceneNode(f"{name}-orbit-container")
    container.rotation[0] = math.radians(inclination_deg)

    curve = build_orbit_curve(body.semi_major_axis, body.semi_minor_axis)
    orbit_line = LineNode(f"{name}-orbit", lift_to_3d(curve), config.Visualization.ORBIT_LINE_COLOR, closed=True)
    container.add(orbit_line)

    mesh = MeshNode(name, body.radius, body.color, texture_path=texture_path, lit=True)
    mesh.position = body.position.copy()
    container.add(mesh)

    ctx.root.add(container)
    ctx.planets.append(PlanetEntry(body=body, container=container, mesh=mesh, orbit_line=orbit_line))

    if config.Debug.ORBITAL_MECHANICS:
        logging.debug(
            f"Created {name}: a={body.semi_major_axis:.3f}, b={body.semi_minor_axis:.3f}, "
            f"i={inclination_deg} deg, speed={body.orbit_angular_speed:.3e} rad/frame, "
            f"phase={body.orbit_angle:.3f} rad"
        )
    return body, container

def advance(body: OrbitalBody, dt_frames: float = 1):
    """
    Advances one body by `dt_frames` frames.

    The orbit angle and spin angle both stay in [0, 2*pi) so long sessions do
    not lose precision. Position is recomputed on the untilted ellipse.
    """
    if dt_frames < 0:
        raise ValueError(f"dt_frames must be non-negative, got {dt_frames}.")
    body.orbit_angle = wrap_angle(body.orbit_angle + body.orbit_angular_speed * dt_frames)
    body.update_position()
    body.spin_angle = wrap_angle(body.spin_angle + body.spin_rate * dt_frames)

def advance_all(ctx: SceneContext, dt_frames: float = 1):
    """Advances every planet in the context and copies the results into their meshes."""
    for entry in ctx.planets:
        advance(entry.body, dt_frames)
        entry.mesh.position[:] = entry.body.position
        entry.mesh.rotation[1] = entry.body.spin_angle

    if ctx.sun is not None:
        ctx.sun.rotation[1] = wrap_angle(ctx.sun.rotation[1] + ctx.sun_spin_rate * dt_frames)

    ctx.frame_count += 1

    if config.Debug.ORBITAL_MECHANICS and ctx.frame_count % config.Debug.LOG_ORBIT_INTERVAL_FRAMES == 0:
        for entry in ctx.planets:
            if entry.body.name in config.Debug.LOG_ORBIT_BODY_NAMES:
                logging.debug(
                    f"Frame {ctx.frame_count}: {entry.body.name} angle={entry.body.orbit_angle:.4f} rad, "
                    f"world={np.round(entry.mesh.world_position(), 3)}"
                )

def create_sun(ctx: SceneContext, radius: float, texture_path: Optional[str] = None,
               color: Tuple[int, int, int] = (255, 200, 60), spin_rate: float = 0.0) -> MeshNode:
    """Creates the unlit central sphere at the origin and records its radius as the orbit offset."""
    if radius <= 0:
        raise OrbitalParameterError(f"Sun radius must be positive, got {radius}.")
    sun = MeshNode("Sun", radius, color, texture_path=texture_path, lit=False)
    ctx.root.add(sun)
    ctx.sun = sun
    ctx.sun_spin_rate = spin_rate
    ctx.central_body_radius = float(radius)
    return sun

def add_asteroid_belt(ctx: SceneContext, belt: AsteroidBelt) -> PointsNode:
    node = PointsNode("asteroid-belt", belt.positions, belt.colors, size=config.Visualization.ASTEROID_POINT_SIZE)
    ctx.root.add(node)
    ctx.asteroid_belt = belt
    ctx.belt_node = node
    return node

def build_solar_system(ctx: Optional[SceneContext] = None, seed: Optional[int] = None,
                       solar_config=None) -> SceneContext:
    """
    Builds the full scene from configuration: scene tilt, Sun, planets and belt.

    Args:
        ctx (SceneContext, optional): Context to populate. A new one seeded
            with `seed` is created when omitted.
        seed (int, optional): Seed for a new context's random generator.
        solar_config (SimulationConfig, optional): Configuration to read.
            Defaults to the global `config`.

    Returns:
        SceneContext: The populated context.

    Raises:
        OrbitalParameterError: If a table row or the belt settings are invalid.
    """
    cfg = solar_config if solar_config is not None else config
    if ctx is None:
        ctx = SceneContext.with_seed(seed)

    ctx.root.rotation[0] = math.radians(cfg.World.SCENE_TILT_X_DEG)
    ctx.root.rotation[2] = math.radians(cfg.World.SCENE_TILT_Z_DEG)

    create_sun(ctx, cfg.World.SUN_RADIUS, texture_path=cfg.SolarSystem.SUN_TEXTURE,
               color=cfg.SolarSystem.SUN_COLOR, spin_rate=cfg.Animation.SUN_SPIN_RATE_RAD_PER_FRAME)

    for name, data in cfg.SolarSystem.PLANET_DATA.items():
        create_body(
            ctx,
            size=data['size'],
            color=data['color'],
            orbit_distance=data['orbit_distance'],
            inclination_deg=data['inclination_deg'],
            eccentricity=data['eccentricity'],
            period_days=data['period_days'],
            spin_rate=data.get('spin_rate'),
            texture_path=data.get('texture'),
            name=name,
        )

    if cfg.World.ASTEROID_BELT_ENABLED:
        belt = build_asteroid_belt(
            cfg.World.ASTEROID_BELT_INNER_RADIUS,
            cfg.World.ASTEROID_BELT_OUTER_RADIUS,
            cfg.World.ASTEROID_BELT_INNER_ECCENTRICITY,
            cfg.World.ASTEROID_BELT_OUTER_ECCENTRICITY,
            cfg.World.ASTEROID_COUNT,
            cfg.World.ASTEROID_BELT_WIDTH,
            cfg.World.ASTEROID_VERTICAL_SPREAD,
            rng=ctx.rng,
            color=cfg.World.ASTEROID_COLOR,
            color_jitter=cfg.World.ASTEROID_COLOR_JITTER,
        )
        add_asteroid_belt(ctx, belt)

    logging.info(
        f"Solar system built: {len(ctx.planets)} planets, "
        f"{ctx.asteroid_belt.count if ctx.asteroid_belt else 0} asteroid points, "
        f"central body radius {ctx.central_body_radius}."
    )
    return ctx
