# config.py
import logging

# Configure basic logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(module)s - %(message)s')

# Animation time scale: one simulated day lasts this many animation seconds
ANIMATION_SECONDS_PER_DAY = 60.0

class ConfigurationError(Exception):
    """Custom exception for orrery configuration errors.

    Raised by `SimulationConfig.validate()` and other configuration-dependent
    components when settings are invalid, inconsistent, or missing, which
    would prevent the scene from being built or rendered correctly.

    Attributes:
        message (str): A human-readable explanation of the configuration error.
                       This is the first argument passed to the exception constructor.
    """
    pass

class SimulationConfig:
    """Centralized, hierarchical configuration for the solar system orrery.

    This class consolidates all scene parameters into nested static classes
    (e.g., `SimulationConfig.World`, `SimulationConfig.SolarSystem`,
    `SimulationConfig.Visualization`) for organized access. An instance of this
    class, named `config`, is created at the end of this module, making it
    globally available via `from config import config`.

    The `__init__` method derives the per-planet animation periods and invokes
    `validate()`, which checks every section for valid ranges and consistency,
    raising a `ConfigurationError` if any issue is found. The planet table is
    fixed in code: there is no configuration file and no environment lookup.

    Example Usage:
        >>> from config import config
        >>> print(f"Sun radius: {config.World.SUN_RADIUS}")
        >>> print(f"Planets: {list(config.SolarSystem.PLANET_DATA)}")
    """

    # --- World Configuration ---
    class World:
        """Layout of the scene around the central body.

        Attributes:
            SUN_RADIUS (float): Render radius of the Sun. Also the offset added to
                every planet's orbit distance so no orbit crosses the Sun.
            SCENE_TILT_X_DEG (float): Tilt of the whole scene about the X axis.
            SCENE_TILT_Z_DEG (float): Tilt of the whole scene about the Z axis.
            ASTEROID_BELT_ENABLED (bool): Whether the belt point cloud is built.
            ASTEROID_BELT_INNER_RADIUS (float): Inner semi-major axis of the belt.
            ASTEROID_BELT_OUTER_RADIUS (float): Outer semi-major axis of the belt.
            ASTEROID_BELT_INNER_ECCENTRICITY (float): Eccentricity of the inner edge (Mars).
            ASTEROID_BELT_OUTER_ECCENTRICITY (float): Eccentricity of the outer edge (Jupiter).
            ASTEROID_COUNT (int): Number of belt points.
            ASTEROID_BELT_WIDTH (float): Band excluded at the belt edges (half on each side).
            ASTEROID_VERTICAL_SPREAD (float): Total thickness of the belt along Y.
            ASTEROID_COLOR (Tuple[float, float, float]): RGB in [0, 1] for every belt point.
            ASTEROID_COLOR_JITTER (float): Per-point brightness variation, 0 disables it.
        """
        SUN_RADIUS = 15.0
        SCENE_TILT_X_DEG = 10.0
        SCENE_TILT_Z_DEG = 10.0

        ASTEROID_BELT_ENABLED = True
        ASTEROID_BELT_INNER_RADIUS = 38.0
        ASTEROID_BELT_OUTER_RADIUS = 50.0
        ASTEROID_BELT_INNER_ECCENTRICITY = 0.0934  # Mars
        ASTEROID_BELT_OUTER_ECCENTRICITY = 0.0489  # Jupiter
        ASTEROID_COUNT = 2000
        ASTEROID_BELT_WIDTH = 2.0
        ASTEROID_VERTICAL_SPREAD = 1.5
        ASTEROID_COLOR = (0.36, 0.23, 0.07)  # Dark brown
        ASTEROID_COLOR_JITTER = 0.0

    # --- Animation Configuration ---
    class Animation:
        """Frame-based animation rates.

        Attributes:
            ANIMATION_SECONDS_PER_DAY (float): Animation seconds per simulated day.
                A planet's orbit period in animation time is `period_days * this`.
            DEFAULT_SPIN_RATE_RAD_PER_FRAME (float): Spin used when a planet row omits one.
            SUN_SPIN_RATE_RAD_PER_FRAME (float): Cosmetic rotation of the Sun.
        """
        ANIMATION_SECONDS_PER_DAY = ANIMATION_SECONDS_PER_DAY
        DEFAULT_SPIN_RATE_RAD_PER_FRAME = 0.01
        SUN_SPIN_RATE_RAD_PER_FRAME = 0.002

    # --- Geometry Configuration ---
    class Geometry:
        """Procedural geometry resolution.

        Attributes:
            ORBIT_CURVE_SAMPLES (int): Segments in each orbit polyline.
            MIN_SPHERE_SPRITE_RADIUS_PX (int): Below this, spheres are drawn as flat dots.
            MAX_SPHERE_SPRITE_RADIUS_PX (int): Sprite radius cap for very close bodies.
            TEXTURE_MAX_WIDTH_PX (int): Loaded textures wider than this are downscaled.
        """
        ORBIT_CURVE_SAMPLES = 128
        MIN_SPHERE_SPRITE_RADIUS_PX = 3
        MAX_SPHERE_SPRITE_RADIUS_PX = 400
        TEXTURE_MAX_WIDTH_PX = 1024

    # --- Solar System Data ---
    class SolarSystem:
        """The fixed table of orbiting bodies.

        Attributes:
            SUN_TEXTURE (str): Texture file for the Sun, relative to the asset directory.
            SUN_COLOR (Tuple[int, int, int]): Placeholder colour for the Sun.
            PLANET_DATA (Dict[str, Dict]): Ordered mapping of planet name to its
                parameters: `size` (render radius), `color` (RGB placeholder),
                `orbit_distance` (before the Sun-radius offset), `inclination_deg`,
                `eccentricity`, `period_days`, `spin_rate` (radians per frame) and
                `texture` (file name or None).
        """
        SUN_TEXTURE = '8k_sun.jpg'
        SUN_COLOR = (255, 200, 60)

        PLANET_DATA = {
            'Mercury': {
                'size': 0.35, 'color': (170, 170, 170), 'orbit_distance': 3.9,
                'inclination_deg': 3.38, 'eccentricity': 0.20563, 'period_days': 88.0,
                'spin_rate': 0.05, 'texture': 'mercury.jpg'
            },
            'Venus': {
                'size': 0.87, 'color': (255, 221, 68), 'orbit_distance': 7.2,
                'inclination_deg': 3.86, 'eccentricity': 0.006772, 'period_days': 272.76,
                'spin_rate': 0.05, 'texture': 'venus.jpg'
            },
            'Earth': {
                'size': 0.91, 'color': (0, 170, 255), 'orbit_distance': 10.0,
                'inclination_deg': 7.155, 'eccentricity': 0.016708, 'period_days': 365.25638,
                'spin_rate': 0.05, 'texture': '8k_earth_daymap.jpg'
            },
            'Mars': {
                'size': 0.48, 'color': (255, 69, 0), 'orbit_distance': 15.2,
                'inclination_deg': 5.65, 'eccentricity': 0.0934, 'period_days': 686.971,
                'spin_rate': 0.05, 'texture': 'mars.jpg'
            },
            'Jupiter': {
                'size': 10.0, 'color': (255, 165, 0), 'orbit_distance': 52.044,
                'inclination_deg': 6.09, 'eccentricity': 0.0489, 'period_days': 4332.59,
                'spin_rate': 0.05, 'texture': '8k_jupiter.jpg'
            },
            'Saturn': {
                'size': 8.33, 'color': (255, 215, 0), 'orbit_distance': 95.826,
                'inclination_deg': 5.51, 'eccentricity': 0.0565, 'period_days': 10759.22,
                'spin_rate': 0.05, 'texture': '8k_saturn.jpg'
            },
            'Uranus': {
                'size': 3.63, 'color': (0, 255, 221), 'orbit_distance': 192.184,
                'inclination_deg': 6.48, 'eccentricity': 0.046381, 'period_days': 30688.5,
                'spin_rate': 0.05, 'texture': '2k_uranus.jpg'
            },
            'Neptune': {
                'size': 3.52, 'color': (0, 0, 255), 'orbit_distance': 301.10388,
                'inclination_deg': 6.43, 'eccentricity': 0.009456, 'period_days': 60182.0,
                'spin_rate': 0.05, 'texture': '2k_neptune.jpg'
            },
            'Pluto': {
                'size': 0.166, 'color': (0, 0, 255), 'orbit_distance': 394.8,
                'inclination_deg': 11.88, 'eccentricity': 0.2488, 'period_days': 90560.0,
                'spin_rate': 0.05, 'texture': 'pluto.jpg'
            },
        }

    # --- Visualization Configuration ---
    class Visualization:
        """Window, camera and drawing settings.

        Attributes:
            SCREEN_WIDTH_PX (int): Initial window width; the window is resizable.
            SCREEN_HEIGHT_PX (int): Initial window height.
            FPS (int): Frame clock rate. One `advance_all` call happens per frame.
            WINDOW_TITLE (str): Window caption.
            CAMERA_FOV_DEG (float): Vertical field of view.
            CAMERA_NEAR (float): Near clipping distance.
            CAMERA_FAR (float): Far clipping distance.
            CAMERA_START_POSITION (Tuple[float, float, float]): Initial camera position.
            CONTROLS_DAMPING_FACTOR (float): Fraction of the pending rotation applied per frame.
            CONTROLS_ROTATE_SPEED (float): Radians of orbit per dragged pixel.
            CONTROLS_ZOOM_FACTOR (float): Distance multiplier per zoom step.
            MIN_CAMERA_DISTANCE (float): Closest zoom.
            MAX_CAMERA_DISTANCE (float): Farthest zoom.
            ASSET_DIR (str): Texture directory, relative to the deployment directory.
            BACKGROUND_TEXTURE (str): Background image, stretched to the window.
            BACKGROUND_COLOR (Tuple[int, int, int]): Fill colour behind the starfield.
            STAR_COUNT (int): Stars in the fallback starfield.
            ORBIT_LINE_COLOR (Tuple[int, int, int]): Orbit polyline colour.
            ASTEROID_POINT_SIZE (float): Belt point size in world units.
            AMBIENT_LIGHT (float): Brightness floor on the night side of lit bodies.
            SHOW_LABELS (bool): Draw planet names next to the bodies.
            SHOW_HUD (bool): Draw the FPS / frame counter.
            LABEL_COLOR (Tuple[int, int, int]): Label and HUD text colour.
        """
        SCREEN_WIDTH_PX = 1400
        SCREEN_HEIGHT_PX = 900
        FPS = 60
        WINDOW_TITLE = "Solar System Orrery"

        CAMERA_FOV_DEG = 75.0
        CAMERA_NEAR = 0.1
        CAMERA_FAR = 2000.0
        CAMERA_START_POSITION = (0.0, 0.0, 70.0)
        CONTROLS_DAMPING_FACTOR = 0.25
        CONTROLS_ROTATE_SPEED = 0.005
        CONTROLS_ZOOM_FACTOR = 1.1
        MIN_CAMERA_DISTANCE = 20.0
        MAX_CAMERA_DISTANCE = 1500.0

        ASSET_DIR = 'assets'
        BACKGROUND_TEXTURE = 'back.jpg'
        BACKGROUND_COLOR = (5, 5, 15)
        STAR_COUNT = 300

        ORBIT_LINE_COLOR = (136, 136, 136)
        ASTEROID_POINT_SIZE = 0.2
        AMBIENT_LIGHT = 0.08
        SHOW_LABELS = True
        SHOW_HUD = True
        LABEL_COLOR = (220, 220, 220)

    # --- Monitoring Configuration ---
    class Monitoring:
        """Configuration for system resource monitoring.

        Attributes:
            MEMORY_USAGE_WARN_MB (int): Memory usage threshold in Megabytes. If exceeded,
                                        a warning is logged.
            MEMORY_CHECK_INTERVAL_FRAMES (int): Frequency (in frames) at which
                                                memory usage is checked.
        """
        MEMORY_USAGE_WARN_MB = 1024
        MEMORY_CHECK_INTERVAL_FRAMES = 600

    # --- Debug Configuration ---
    class Debug:
        """Configuration for debugging features and logging verbosity.

        Attributes:
            DEBUG_MODE (bool): Master toggle for debug output (memory usage, timings).
            ORBITAL_MECHANICS (bool): Log body construction details and periodic positions.
            LOG_ORBIT_INTERVAL_FRAMES (int): Frequency (frames) for logging positions.
            LOG_ORBIT_BODY_NAMES (List[str]): Names of bodies whose positions to log.
        """
        DEBUG_MODE = False
        ORBITAL_MECHANICS = False
        LOG_ORBIT_INTERVAL_FRAMES = 600
        LOG_ORBIT_BODY_NAMES = ["Earth", "Mars"]

    def __init__(self):
        """Initializes the `SimulationConfig` instance and performs setup.

        1.  **Fills row defaults**: rows without a `spin_rate` get the default
            spin and rows without a `texture` get None.
        2.  **Invokes Configuration Validation** via `self.validate()`.

        Raises:
            ConfigurationError: If `self.validate()` detects any issues.
        """
        for data in self.SolarSystem.PLANET_DATA.values():
            data.setdefault('spin_rate', self.Animation.DEFAULT_SPIN_RATE_RAD_PER_FRAME)
            data.setdefault('texture', None)

        self.validate()

    def validate(self):
        """Performs a comprehensive validation of all configuration settings.

        -   **World**: Sun radius positive; belt radii positive and ordered; the
            edge band narrower than the belt; belt eccentricities in [0, 1);
            non-negative count and spread; colour channels in [0, 1].
        -   **Animation**: positive time scale.
        -   **Geometry**: at least 3 orbit samples; sprite limits ordered.
        -   **SolarSystem**: every planet has positive size, orbit distance and
            period, eccentricity in [0, 1) and inclination in [0, 180].
        -   **Visualization**: positive screen size and FPS, FOV in (0, 180),
            0 < near < far, damping in (0, 1], ordered zoom limits.
        -   **Monitoring**: positive thresholds.

        Raises:
            ConfigurationError: If any configuration setting is found to be invalid.
        """
        # World validation
        if self.World.SUN_RADIUS <= 0:
            raise ConfigurationError("World.SUN_RADIUS must be positive.")
        inner = self.World.ASTEROID_BELT_INNER_RADIUS
        outer = self.World.ASTEROID_BELT_OUTER_RADIUS
        if not (0 < inner < outer):
            raise ConfigurationError(
                f"Asteroid belt radii (Inner: {inner}, Outer: {outer}) must be positive and ordered correctly."
            )
        if not (0 <= self.World.ASTEROID_BELT_WIDTH < outer - inner):
            raise ConfigurationError(
                f"World.ASTEROID_BELT_WIDTH ({self.World.ASTEROID_BELT_WIDTH}) must be non-negative "
                f"and narrower than the belt ({outer - inner})."
            )
        for name in ("ASTEROID_BELT_INNER_ECCENTRICITY", "ASTEROID_BELT_OUTER_ECCENTRICITY"):
            value = getattr(self.World, name)
            if not (0.0 <= value < 1.0):
                raise ConfigurationError(f"World.{name} ({value}) must be >= 0 and < 1.")
        if self.World.ASTEROID_COUNT < 0:
            raise ConfigurationError("World.ASTEROID_COUNT cannot be negative.")
        if self.World.ASTEROID_VERTICAL_SPREAD < 0:
            raise ConfigurationError("World.ASTEROID_VERTICAL_SPREAD cannot be negative.")
        if not all(0.0 <= c <= 1.0 for c in self.World.ASTEROID_COLOR) or len(self.World.ASTEROID_COLOR) != 3:
            raise ConfigurationError("World.ASTEROID_COLOR must be three channels between 0.0 and 1.0.")
        if self.World.ASTEROID_COLOR_JITTER < 0:
            raise ConfigurationError("World.ASTEROID_COLOR_JITTER cannot be negative.")

        # Animation validation
        if self.Animation.ANIMATION_SECONDS_PER_DAY <= 0:
            raise ConfigurationError("Animation.ANIMATION_SECONDS_PER_DAY must be positive.")

        # Geometry validation
        if self.Geometry.ORBIT_CURVE_SAMPLES < 3:
            raise ConfigurationError("Geometry.ORBIT_CURVE_SAMPLES must be at least 3.")
        if not (0 < self.Geometry.MIN_SPHERE_SPRITE_RADIUS_PX < self.Geometry.MAX_SPHERE_SPRITE_RADIUS_PX):
            raise ConfigurationError("Geometry sphere sprite limits must be positive and ordered (MIN < MAX).")
        if self.Geometry.TEXTURE_MAX_WIDTH_PX <= 0:
            raise ConfigurationError("Geometry.TEXTURE_MAX_WIDTH_PX must be positive.")

        # Solar System Data Validation
        if not self.SolarSystem.PLANET_DATA:
            raise ConfigurationError("SolarSystem.PLANET_DATA must define at least one planet.")
        for name, data in self.SolarSystem.PLANET_DATA.items():
            if data.get('size', -1.0) <= 0:
                raise ConfigurationError(f"Size of planet '{name}' must be positive.")
            if data.get('orbit_distance', -1.0) <= 0:
                raise ConfigurationError(f"Orbit distance of planet '{name}' must be positive.")
            if data.get('period_days', -1.0) <= 0:
                raise ConfigurationError(f"Orbital period of planet '{name}' must be positive.")
            if not (0.0 <= data.get('eccentricity', 0.0) < 1.0): # Eccentricity [0, 1)
                raise ConfigurationError(f"Eccentricity of planet '{name}' ({data.get('eccentricity', 0.0)}) must be >= 0 and < 1.")
            if not (0.0 <= data.get('inclination_deg', 0.0) <= 180.0): # Inclination [0, 180]
                raise ConfigurationError(f"Inclination of '{name}' ({data.get('inclination_deg', 0.0)}) must be between 0 and 180 degrees inclusive.")
            texture = data.get('texture')
            if texture is not None and not isinstance(texture, str):
                raise ConfigurationError(f"Texture of planet '{name}' must be a file name or None.")

        # Visualization
        if self.Visualization.SCREEN_WIDTH_PX <= 0 or self.Visualization.SCREEN_HEIGHT_PX <= 0:
            raise ConfigurationError("Visualization screen dimensions (SCREEN_WIDTH_PX, SCREEN_HEIGHT_PX) must be positive.")
        if self.Visualization.FPS <= 0:
            raise ConfigurationError("Visualization.FPS must be positive.")
        if not (0.0 < self.Visualization.CAMERA_FOV_DEG < 180.0):
            raise ConfigurationError("Visualization.CAMERA_FOV_DEG must be between 0 and 180 degrees exclusive.")
        if not (0.0 < self.Visualization.CAMERA_NEAR < self.Visualization.CAMERA_FAR):
            raise ConfigurationError("Visualization clipping planes must satisfy 0 < CAMERA_NEAR < CAMERA_FAR.")
        if not (0.0 < self.Visualization.CONTROLS_DAMPING_FACTOR <= 1.0):
            raise ConfigurationError("Visualization.CONTROLS_DAMPING_FACTOR must be in (0, 1].")
        if self.Visualization.CONTROLS_ZOOM_FACTOR <= 1.0:
            raise ConfigurationError("Visualization.CONTROLS_ZOOM_FACTOR must be greater than 1.")
        if not (0.0 < self.Visualization.MIN_CAMERA_DISTANCE < self.Visualization.MAX_CAMERA_DISTANCE):
            raise ConfigurationError("Visualization camera distance limits must be positive and ordered (MIN < MAX).")
        if not (0.0 <= self.Visualization.AMBIENT_LIGHT <= 1.0):
            raise ConfigurationError("Visualization.AMBIENT_LIGHT must be between 0.0 and 1.0.")

        # Monitoring
        if self.Monitoring.MEMORY_USAGE_WARN_MB <= 0 or self.Monitoring.MEMORY_CHECK_INTERVAL_FRAMES <= 0:
            raise ConfigurationError("Monitoring thresholds (MEMORY_USAGE_WARN_MB, MEMORY_CHECK_INTERVAL_FRAMES) must be positive.")

        logging.info("Configuration validated successfully.")


# --- Instantiate the configuration ---
# This makes the config object available for import and runs validation.
# e.g., from config import config
try:
    config = SimulationConfig()
except ConfigurationError as e:
    logging.error(f"FATAL CONFIGURATION ERROR: {e}", exc_info=True)
    raise
