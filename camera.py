# camera.py
import numpy as np
import math
from typing import Tuple
from config import config
from physics_utils import normalize_vector

class PerspectiveCamera:
    """A pinhole camera projecting world points onto the window.

    Uses a right-handed look-at frame: the camera looks from `position` toward
    `target`, with `up` fixing the roll. Screen Y grows downward, as in pygame.

    Attributes:
        fov_deg (float): Vertical field of view in degrees.
        aspect (float): Width / height of the viewport, updated on resize.
        near (float): Points closer than this along the view axis are not visible.
        far (float): Points farther than this are not visible.
        position (np.ndarray): Camera location in world space.
        target (np.ndarray): Point the camera looks at.
        up (np.ndarray): World up direction.
    """
    def __init__(self, fov_deg: float = 75.0, aspect: float = 1.0, near: float = 0.1, far: float = 2000.0):
        if not (0.0 < fov_deg < 180.0):
            raise ValueError(f"Field of view must be between 0 and 180 degrees, got {fov_deg}.")
        if not (0.0 < near < far):
            raise ValueError(f"Clipping planes must satisfy 0 < near < far (near={near}, far={far}).")
        self.fov_deg = float(fov_deg)
        self.aspect = float(aspect)
        self.near = float(near)
        self.far = float(far)
        self.position = np.array([0.0, 0.0, 1.0])
        self.target = np.zeros(3)
        self.up = np.array([0.0, 1.0, 0.0])

    def set_aspect(self, width: int, height: int):
        if width > 0 and height > 0:
            self.aspect = width / height

    def focal_length_px(self, height: int) -> float:
        """Pixels per unit at distance 1 for a viewport `height` pixels tall."""
        return (height / 2.0) / math.tan(math.radians(self.fov_deg) / 2.0)

    def basis(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Returns the camera's (right, up, forward) unit vectors in world space."""
        forward = normalize_vector(self.target - self.position)
        right = normalize_vector(np.cross(forward, self.up))
        if not np.any(right):
            # Looking straight along `up`; pick any perpendicular
            right = normalize_vector(np.cross(forward, np.array([0.0, 0.0, 1.0])))
        true_up = np.cross(right, forward)
        return right, true_up, forward

    def view_matrix(self) -> np.ndarray:
        """4x4 world-to-camera matrix; the camera looks down its -Z axis."""
        right, true_up, forward = self.basis()
        view = np.identity(4)
        view[0, :3] = right
        view[1, :3] = true_up
        view[2, :3] = -forward
        view[:3, 3] = -view[:3, :3] @ self.position
        return view

    def to_camera(self, points: np.ndarray) -> np.ndarray:
        points = np.atleast_2d(np.asarray(points, dtype=np.float64))
        view = self.view_matrix()
        return points @ view[:3, :3].T + view[:3, 3]

    def depth_of(self, point: np.ndarray) -> float:
        return float(-self.to_camera(point)[0, 2])

    def project(self, points: np.ndarray, width: int, height: int):
        """
        Projects world points to pixel coordinates.

        Args:
            points (np.ndarray): (N, 3) world positions (a single point is accepted too).
            width (int): Viewport width in pixels.
            height (int): Viewport height in pixels.

        Returns:
            Tuple[np.ndarray, np.ndarray, np.ndarray]: (N, 2) screen coordinates,
            (N,) depths along the view axis and an (N,) boolean mask of points
            between the near and far planes. Coordinates of points outside the
            mask are meaningless.
        """
        cam = self.to_camera(points)
        depth = -cam[:, 2]
        visible = (depth > self.near) & (depth < self.far)
        safe_depth = np.where(visible, depth, 1.0)
        focal = self.focal_length_px(height)
        screen = np.empty((len(cam), 2))
        screen[:, 0] = width / 2.0 + focal * cam[:, 0] / safe_depth
        screen[:, 1] = height / 2.0 - focal * cam[:, 1] / safe_depth
        return screen, depth, visible


class OrbitControls:
    """Orbit and zoom a camera around its target, with optional damping.

    Rotation input accumulates as pending spherical deltas; each `update()`
    applies `damping_factor` of what is pending (all of it when damping is
    off), so the view glides to rest after the mouse stops.

    Attributes:
        camera (PerspectiveCamera): Camera being driven.
        enable_damping (bool): Glide instead of applying input immediately.
        damping_factor (float): Fraction of pending rotation applied per update.
        enable_zoom (bool): Whether `zoom()` has any effect.
        rotate_speed (float): Radians per dragged pixel.
        zoom_factor (float): Distance multiplier per zoom step.
        min_distance (float): Closest allowed distance to the target.
        max_distance (float): Farthest allowed distance.
    """
    MIN_POLAR_RAD = 1e-3

    def __init__(self, camera: PerspectiveCamera, damping_factor: float = 0.25, enable_damping: bool = True,
                 enable_zoom: bool = True, rotate_speed: float = 0.005, zoom_factor: float = 1.1,
                 min_distance: float = 1.0, max_distance: float = 2000.0):
        self.camera = camera
        self.enable_damping = enable_damping
        self.damping_factor = damping_factor
        self.enable_zoom = enable_zoom
        self.rotate_speed = rotate_speed
        self.zoom_factor = zoom_factor
        self.min_distance = min_distance
        self.max_distance = max_distance
        self._pending_azimuth = 0.0
        self._pending_polar = 0.0
        self._scale = 1.0

    @classmethod
    def from_config(cls, camera: PerspectiveCamera) -> 'OrbitControls':
        vis = config.Visualization
        return cls(camera,
                   damping_factor=vis.CONTROLS_DAMPING_FACTOR,
                   rotate_speed=vis.CONTROLS_ROTATE_SPEED,
                   zoom_factor=vis.CONTROLS_ZOOM_FACTOR,
                   min_distance=vis.MIN_CAMERA_DISTANCE,
                   max_distance=vis.MAX_CAMERA_DISTANCE)

    @property
    def distance(self) -> float:
        return float(np.linalg.norm(self.camera.position - self.camera.target))

    def spherical(self) -> Tuple[float, float, float]:
        """(radius, polar, azimuth) of the camera around the target; polar is measured from +Y."""
        offset = self.camera.position - self.camera.target
        radius = float(np.linalg.norm(offset))
        if radius == 0.0:
            return 0.0, 0.0, 0.0
        polar = math.acos(np.clip(offset[1] / radius, -1.0, 1.0))
        azimuth = math.atan2(offset[0], offset[2])
        return radius, polar, azimuth

    def rotate(self, dx_px: float, dy_px: float):
        """Queues a drag of (dx, dy) pixels: horizontal orbits around Y, vertical tilts."""
        self._pending_azimuth -= dx_px * self.rotate_speed
        self._pending_polar -= dy_px * self.rotate_speed

    def zoom(self, steps: float):
        """Positive steps move closer, negative steps move away."""
        if not self.enable_zoom or steps == 0:
            return
        self._scale *= self.zoom_factor ** (-steps)

    def update(self):
        radius, polar, azimuth = self.spherical()
        factor = self.damping_factor if self.enable_damping else 1.0

        azimuth += self._pending_azimuth * factor
        polar += self._pending_polar * factor
        polar = float(np.clip(polar, self.MIN_POLAR_RAD, math.pi - self.MIN_POLAR_RAD))
        radius = float(np.clip(radius * self._scale, self.min_distance, self.max_distance))

        sin_polar = math.sin(polar)
        offset = np.array([radius * sin_polar * math.sin(azimuth),
                           radius * math.cos(polar),
                           radius * sin_polar * math.cos(azimuth)])
        self.camera.position = self.camera.target + offset

        if self.enable_damping:
            self._pending_azimuth *= (1.0 - self.damping_factor)
            self._pending_polar *= (1.0 - self.damping_factor)
        else:
            self._pending_azimuth = 0.0
            self._pending_polar = 0.0
        self._scale = 1.0


def camera_from_config(width: int, height: int) -> PerspectiveCamera:
    vis = config.Visualization
    camera = PerspectiveCamera(vis.CAMERA_FOV_DEG, width / height if height else 1.0, vis.CAMERA_NEAR, vis.CAMERA_FAR)
    camera.position = np.array(vis.CAMERA_START_POSITION, dtype=np.float64)
    return camera
