import os
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import shutil
import tempfile
import unittest
from unittest import mock
import numpy as np
import pygame
from config import SimulationConfig
from main import OrreryApp, main
from solarsystem import SceneContext, advance_all, build_solar_system, create_body, create_sun
from textures import TextureLoader
from visualization import Visualization

class TestVisualization(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.vis = Visualization(loader=TextureLoader(base_dir=self.tmp_dir), headless=True)

    def tearDown(self):
        self.vis.close()
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def test_initialized_without_background(self):
        self.assertTrue(self.vis.visualization_enabled)
        self.assertIsNone(self.vis.background_surface)

    def test_resolve_textures_sets_loaded_and_keeps_missing(self):
        surface = pygame.Surface((4, 2))
        surface.fill((50, 60, 70))
        pygame.image.save(surface, os.path.join(self.tmp_dir, "tiny.bmp"))

        ctx = SceneContext.with_seed(0)
        create_sun(ctx, 2.0, texture_path="missing_sun.jpg")
        create_body(ctx, 0.5, (1, 2, 3), 5.0, 0.0, 0.0, 10.0, texture_path="tiny.bmp", name="Tiny")
        with self.assertLogs(level='ERROR'):
            self.vis.resolve_textures(ctx)

        self.assertIsNone(ctx.sun.texture)
        self.assertEqual(ctx.get_planet("Tiny").mesh.texture.average_color(), (50, 60, 70))

    def test_render_full_scene(self):
        ctx = build_solar_system(seed=3)
        for _ in range(3):
            advance_all(ctx)
            self.vis.render(ctx)
        # The Sun sits at the origin, which the camera looks at
        center = self.vis.screen.get_at((self.vis.width // 2, self.vis.height // 2))
        self.assertNotEqual(tuple(center)[:3], (0, 0, 0))

    def test_screen_radius_capped_for_close_bodies(self):
        cap = SimulationConfig.Geometry.MAX_SPHERE_SPRITE_RADIUS_PX
        self.assertAlmostEqual(self.vis._screen_radius(1.0, 100.0, 1000.0), 10.0)
        self.assertEqual(self.vis._screen_radius(10.0, 1.0, 1000.0), cap)

    def test_culling_uses_capped_radius(self):
        cap = SimulationConfig.Geometry.MAX_SPHERE_SPRITE_RADIUS_PX
        radius_px = self.vis._screen_radius(10.0, 1.0, 1000.0)
        middle = self.vis.height // 2
        self.assertTrue(self.vis._is_offscreen((-cap - 1, middle), radius_px))
        self.assertFalse(self.vis._is_offscreen((-cap + 1, middle), radius_px))
        self.assertFalse(self.vis._is_offscreen((self.vis.width // 2, middle), radius_px))

    def test_render_with_camera_inside_sprite_cap(self):
        ctx = build_solar_system(seed=4)
        self.vis.controls.zoom(100)
        self.vis.render(ctx)
        center = self.vis.screen.get_at((self.vis.width // 2, self.vis.height // 2))
        self.assertNotEqual(tuple(center)[:3], (0, 0, 0))

    def test_quit_event(self):
        pygame.event.post(pygame.event.Event(pygame.QUIT))
        self.assertFalse(self.vis.handle_events())

    def test_escape_key(self):
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE, mod=0, unicode='\x1b', scancode=0))
        self.assertFalse(self.vis.handle_events())

    def test_zoom_keys_and_wheel(self):
        start = self.vis.controls.distance
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_EQUALS, mod=0, unicode='=', scancode=0))
        self.assertTrue(self.vis.handle_events())
        self.vis.controls.update()
        closer = self.vis.controls.distance
        self.assertLess(closer, start)

        pygame.event.post(pygame.event.Event(pygame.MOUSEWHEEL, x=0, y=-2, flipped=False))
        self.assertTrue(self.vis.handle_events())
        self.vis.controls.update()
        self.assertGreater(self.vis.controls.distance, closer)

    def test_resize_updates_camera_aspect(self):
        self.vis.resize(800, 400)
        self.assertAlmostEqual(self.vis.camera.aspect, 2.0)
        self.assertEqual((self.vis.width, self.vis.height), (800, 400))

    def test_drag_orbits_camera(self):
        start = self.vis.camera.position.copy()
        self.vis.controls.rotate(120, 40)
        for _ in range(30):
            self.vis.controls.update()
        self.assertFalse(np.allclose(self.vis.camera.position, start))
        self.assertAlmostEqual(self.vis.controls.distance, float(np.linalg.norm(start)))

class TestOrreryApp(unittest.TestCase):

    def test_run_limited_frames(self):
        app = OrreryApp(seed=11, headless=True)
        frames = app.run(max_frames=3)
        self.assertEqual(frames, 3)
        self.assertEqual(app.ctx.frame_count, 3)

    def test_check_memory_logs_warning_over_threshold(self):
        app = OrreryApp(seed=1, headless=True)
        try:
            with mock.patch.object(SimulationConfig.Monitoring, "MEMORY_USAGE_WARN_MB", 0):
                with self.assertLogs(level='WARNING') as captured:
                    app.check_memory()
            self.assertIn("High memory usage", captured.output[0])
        finally:
            app.visualization.close()

    def test_run_without_display_returns(self):
        with mock.patch.object(pygame.display, "set_mode", side_effect=pygame.error("no display")):
            app = OrreryApp(seed=0, headless=True)
        self.assertFalse(app.visualization.visualization_enabled)
        with self.assertLogs(level='CRITICAL') as captured:
            frames = app.run()
        self.assertEqual(frames, 0)
        self.assertFalse(app.running)
        self.assertEqual(app.ctx.frame_count, 0)
        self.assertIn("No display available", captured.output[0])

    def test_run_without_display_honours_frame_limit(self):
        with mock.patch.object(pygame.display, "set_mode", side_effect=pygame.error("no display")):
            app = OrreryApp(seed=0, headless=True)
        self.assertEqual(app.run(max_frames=4), 4)
        self.assertEqual(app.ctx.frame_count, 4)

    def test_main_headless(self):
        main(["--headless", "--max-frames", "2", "--seed", "5"])

if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
