# visualization.py
import os
import pygame
import numpy as np
from typing import Dict, List, Optional, Tuple
import logging
from config import config, ConfigurationError
from camera import OrbitControls, PerspectiveCamera, camera_from_config
from scene_graph import LineNode, MeshNode, PointsNode
from solarsystem import SceneContext
from textures import Texture, TextureLoader, placeholder_texture, shade_sphere
from visual_effects import StarField

class Visualization:
    """Draws a `SceneContext` into a resizable pygame window.

    This class is responsible for:
    - Initializing Pygame, the window, the frame clock and fonts.
    - Owning the `PerspectiveCamera` and its `OrbitControls`.
    - Resolving mesh textures through a `TextureLoader`; bodies whose texture
      fails to load keep a flat placeholder colour.
    - Drawing, each frame: background image (or a `StarField`), orbit lines,
      the asteroid belt, depth-sorted textured spheres lit from the Sun,
      labels and a small HUD.
    - Handling input: window close, resize, drag to orbit, wheel or +/- to zoom.

    Rendering errors are logged and the frame is skipped; they never stop the
    session. Display initialization errors disable visualization instead.

    Attributes:
        screen (pygame.Surface | None): The display surface. `None` if
            initialization failed.
        visualization_enabled (bool): `False` if the display could not be set up.
        clock (pygame.time.Clock | None): Frame clock ticking at `config.Visualization.FPS`.
        font (pygame.font.Font | None): HUD font.
        small_font (pygame.font.Font | None): Label font.
        camera (PerspectiveCamera): Scene camera.
        controls (OrbitControls): Orbit/zoom controller for `camera`.
        loader (TextureLoader): Texture source for meshes and background.
        width (int): Current window width in pixels.
        height (int): Current window height in pixels.
    """
    def __init__(self, loader: Optional[TextureLoader] = None, headless: bool = False):
        """Initializes pygame, the window, camera, controls and background.

        Args:
            loader (TextureLoader, optional): Texture source. A loader over the
                configured asset directory is created when omitted.
            headless (bool): Use SDL's dummy video driver, for runs without a display.

        Raises:
            ConfigurationError: If the configured screen size is unusable.
        """
        self.width = config.Visualization.SCREEN_WIDTH_PX
        self.height = config.Visualization.SCREEN_HEIGHT_PX
        if not (isinstance(self.width, int) and self.width > 0 and
                isinstance(self.height, int) and self.height > 0):
            raise ConfigurationError("SCREEN_WIDTH_PX and SCREEN_HEIGHT_PX must be positive integers.")

        self.loader = loader if loader is not None else TextureLoader()
        self.camera: PerspectiveCamera = camera_from_config(self.width, self.height)
        self.controls = OrbitControls.from_config(self.camera)
        self.clock = None
        self.font = self.small_font = None
        self.background_surface: Optional[pygame.Surface] = None
        self._background_scaled: Optional[pygame.Surface] = None
        self.starfield = StarField(self.width, self.height, config.Visualization.STAR_COUNT)
        self._placeholders: Dict[Tuple[int, int, int], Texture] = {}
        self._dragging = False

        if headless:
            os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

        try:
            pygame.init()
            self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
            self.visualization_enabled = True
        except pygame.error as e_disp:
            logging.critical(f"Error setting display mode: {e_disp}. Visualization disabled.", exc_info=True)
            self.screen = None
            self.visualization_enabled = False
            return

        pygame.display.set_caption(config.Visualization.WINDOW_TITLE)
        self.clock = pygame.time.Clock()

        try:
            self.font = pygame.font.Font(None, 22)
            self.small_font = pygame.font.Font(None, 16)
        except pygame.error as e_font:
            logging.error(f"Pygame error initializing fonts: {e_font}. Text rendering disabled.", exc_info=True)
            self.font = self.small_font = None

        self._load_background()
        logging.info(f"Visualization initialized at {self.width}x{self.height}.")

    def _load_background(self):
        def on_load(texture: Texture):
            self.background_surface = pygame.surfarray.make_surface(texture.pixels)

        def on_error(path: str, err: Exception):
            logging.warning(f"Background texture '{path}' unavailable ({err}); using starfield.")

        self.loader.load(config.Visualization.BACKGROUND_TEXTURE, on_load=on_load, on_error=on_error)

    def resolve_textures(self, ctx: SceneContext):
        """Loads the texture of every mesh in the scene that names one.

        Failures are logged by the loader's error path and leave `mesh.texture`
        as None, which renders with the mesh's placeholder colour.
        """
        loaded = 0
        for node in ctx.root.traverse():
            if not isinstance(node, MeshNode) or not node.texture_path:
                continue

            def on_load(texture, mesh=node):
                mesh.texture = texture

            def on_error(path, err, mesh=node):
                logging.error(f"{mesh.name} texture loading failed: {err}")

            if self.loader.load(node.texture_path, on_load=on_load, on_error=on_error) is not None:
                loaded += 1
        logging.info(f"Resolved {loaded} mesh textures.")

    def resize(self, width: int, height: int):
        if width <= 0 or height <= 0:
            return
        self.width, self.height = width, height
        self.camera.set_aspect(width, height)
        self.starfield.resize(width, height)
        self._background_scaled = None
        if self.visualization_enabled:
            surface = pygame.display.get_surface()
            self.screen = surface if surface is not None else pygame.display.set_mode((width, height), pygame.RESIZABLE)
        logging.debug(f"Window resized to {width}x{height}.")

    def handle_events(self) -> bool:
        """Processes the pygame event queue.

        Returns:
            bool: `False` on window close or Escape, `True` otherwise.
        """
        if not self.visualization_enabled:
            return True

        try:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    logging.info("QUIT event received via Pygame window. Signaling shutdown.")
                    return False
                elif event.type == pygame.VIDEORESIZE:
                    self.resize(event.w, event.h)
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        logging.info("Escape pressed. Signaling shutdown.")
                        return False
                    elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                        self.controls.zoom(1)
                    elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                        self.controls.zoom(-1)
                    elif event.key == pygame.K_LEFT:
                        self.controls.rotate(-40, 0)
                    elif event.key == pygame.K_RIGHT:
                        self.controls.rotate(40, 0)
                    elif event.key == pygame.K_UP:
                        self.controls.rotate(0, -40)
                    elif event.key == pygame.K_DOWN:
                        self.controls.rotate(0, 40)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self._dragging = True
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                    self._dragging = False
                elif event.type == pygame.MOUSEMOTION and self._dragging:
                    self.controls.rotate(*event.rel)
                elif event.type == pygame.MOUSEWHEEL:
                    self.controls.zoom(event.y)
            return True

        except pygame.error as e_pygame_event:
            logging.error(f"Pygame error during event handling: {e_pygame_event}. Attempting to continue.", exc_info=True)
            return True

    def render(self, ctx: SceneContext):
        """Draws one frame of `ctx`, flips the display and ticks the frame clock."""
        if not self.visualization_enabled or self.screen is None:
            return

        try:
            self.controls.update()
            self._draw_background()

            for node in ctx.root.traverse(visible_only=True):
                if isinstance(node, LineNode):
                    self._draw_line(node)
                elif isinstance(node, PointsNode):
                    self._draw_points(node)

            self._draw_spheres(ctx)
            self._draw_hud(ctx)

            pygame.display.flip()
            if self.clock:
                self.clock.tick(config.Visualization.FPS)

        except pygame.error as e_pygame_render:
            logging.error(f"Pygame error during main render loop: {e_pygame_render}. Attempting to continue.", exc_info=True)
        except Exception as e_render:
            logging.error(f"Unexpected error during render: {e_render}. Attempting to continue.", exc_info=True)

    def _draw_background(self):
        self.screen.fill(config.Visualization.BACKGROUND_COLOR)
        if self.background_surface is not None:
            if self._background_scaled is None or self._background_scaled.get_size() != (self.width, self.height):
                self._background_scaled = pygame.transform.smoothscale(self.background_surface, (self.width, self.height))
            self.screen.blit(self._background_scaled, (0, 0))
        else:
            _, polar, azimuth = self.controls.spherical()
            self.starfield.draw(self.screen, (azimuth, polar))

    def _draw_line(self, line: LineNode):
        world_points = line.to_world(line.points)
        screen, _, visible = self.camera.project(world_points, self.width, self.height)

        # Split the polyline into runs of consecutive visible points
        run: List[Tuple[float, float]] = []
        for point, is_visible in zip(screen, visible):
            if is_visible:
                run.append((float(point[0]), float(point[1])))
                continue
            if len(run) > 1:
                pygame.draw.lines(self.screen, line.color, False, run, 1)
            run = []
        if len(run) > 1:
            pygame.draw.lines(self.screen, line.color, False, run, 1)

    def _draw_points(self, node: PointsNode):
        if len(node.positions) == 0:
            return
        world_points = node.to_world(node.positions)
        screen, depth, visible = self.camera.project(world_points, self.width, self.height)
        focal = self.camera.focal_length_px(self.height)
        colors = (node.colors * 255).astype(int)

        for idx in np.flatnonzero(visible):
            x, y = int(screen[idx, 0]), int(screen[idx, 1])
            if not (0 <= x < self.width and 0 <= y < self.height):
                continue
            color = tuple(int(c) for c in colors[idx])
            radius = int(node.size * focal / depth[idx] / 2)
            if radius <= 0:
                self.screen.set_at((x, y), color)
            else:
                pygame.draw.circle(self.screen, color, (x, y), radius)

    def _texture_for(self, mesh: MeshNode) -> Texture:
        if mesh.texture is not None:
            return mesh.texture
        placeholder = self._placeholders.get(mesh.color)
        if placeholder is None:
            placeholder = placeholder_texture(mesh.color, name=f"{mesh.name}-placeholder")
            self._placeholders[mesh.color] = placeholder
        return placeholder

    def _screen_radius(self, radius: float, depth: float, focal: float) -> float:
        """Projected radius in pixels, capped at the largest sprite drawn."""
        return min(radius * focal / depth, config.Geometry.MAX_SPHERE_SPRITE_RADIUS_PX)

    def _is_offscreen(self, center: Tuple[int, int], radius_px: float) -> bool:
        return (center[0] + radius_px < 0 or center[0] - radius_px > self.width or
                center[1] + radius_px < 0 or center[1] - radius_px > self.height)

    def _draw_spheres(self, ctx: SceneContext):
        meshes = [node for node in ctx.root.traverse(visible_only=True) if isinstance(node, MeshNode)]
        if not meshes:
            return

        centers = np.array([mesh.world_position() for mesh in meshes])
        screen, depth, visible = self.camera.project(centers, self.width, self.height)
        focal = self.camera.focal_length_px(self.height)
        light_origin = ctx.sun.world_position() if ctx.sun is not None else np.zeros(3)
        view_rotation = self.camera.view_matrix()[:3, :3]

        # Painter's order: farthest first
        for idx in sorted(np.flatnonzero(visible), key=lambda i: -depth[i]):
            mesh = meshes[idx]
            center = (int(screen[idx, 0]), int(screen[idx, 1]))
            radius_px = self._screen_radius(mesh.radius, depth[idx], focal)
            if self._is_offscreen(center, radius_px):
                continue

            try:
                texture = self._texture_for(mesh)
                if radius_px < config.Geometry.MIN_SPHERE_SPRITE_RADIUS_PX:
                    pygame.draw.circle(self.screen, texture.average_color(), center, max(1, int(round(radius_px))))
                else:
                    radius_int = int(radius_px)
                    light_dir = None
                    if mesh.lit:
                        light_dir = view_rotation @ (light_origin - centers[idx])
                    rgb, alpha = shade_sphere(texture, radius_int, spin_angle=mesh.rotation[1],
                                              light_dir=light_dir, ambient=config.Visualization.AMBIENT_LIGHT)
                    sprite = pygame.Surface((2 * radius_int, 2 * radius_int), pygame.SRCALPHA)
                    pixels = pygame.surfarray.pixels3d(sprite)
                    pixels[...] = rgb
                    del pixels
                    alpha_view = pygame.surfarray.pixels_alpha(sprite)
                    alpha_view[...] = alpha
                    del alpha_view
                    self.screen.blit(sprite, (center[0] - radius_int, center[1] - radius_int))

                if config.Visualization.SHOW_LABELS and self.small_font and mesh is not ctx.sun:
                    text_surface = self.small_font.render(mesh.name, True, config.Visualization.LABEL_COLOR)
                    offset = max(radius_px, 2) + 10
                    text_rect = text_surface.get_rect(center=(center[0], int(center[1] - offset)))
                    self.screen.blit(text_surface, text_rect)
            except pygame.error as e_sphere:
                logging.error(f"Pygame error drawing {mesh.name}: {e_sphere}", exc_info=True)

    def _draw_hud(self, ctx: SceneContext):
        if not config.Visualization.SHOW_HUD or self.font is None:
            return
        fps = self.clock.get_fps() if self.clock else 0.0
        text = f"FPS: {fps:.0f}   Frame: {ctx.frame_count}   Distance: {self.controls.distance:.0f}"
        self.screen.blit(self.font.render(text, True, config.Visualization.LABEL_COLOR), (10, 10))

    def close(self):
        if pygame.get_init():
            pygame.quit()
        self.visualization_enabled = False
        self.screen = None
        logging.info("Visualization closed.")
