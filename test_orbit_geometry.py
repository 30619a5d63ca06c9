import unittest
import numpy as np
from orbit_geometry import AsteroidBelt, build_asteroid_belt, build_orbit_curve, lift_to_3d
from physics_utils import OrbitalParameterError

class TestBuildOrbitCurve(unittest.TestCase):

    def test_default_sample_count_closes_the_loop(self):
        curve = build_orbit_curve(10.0, 8.0)
        self.assertEqual(curve.shape, (129, 2))
        np.testing.assert_array_equal(curve[0], curve[-1])
        np.testing.assert_array_almost_equal(curve[0], [10.0, 0.0])

    def test_points_lie_on_ellipse(self):
        a, b = 12.0, 9.0
        curve = build_orbit_curve(a, b, sample_count=64)
        values = (curve[:, 0] / a) ** 2 + (curve[:, 1] / b) ** 2
        np.testing.assert_allclose(values, 1.0)

    def test_quarter_turn_reaches_minor_axis(self):
        curve = build_orbit_curve(10.0, 6.0, sample_count=4)
        self.assertEqual(curve.shape, (5, 2))
        np.testing.assert_array_almost_equal(curve[1], [0.0, 6.0])
        np.testing.assert_array_almost_equal(curve[2], [-10.0, 0.0])

    def test_degenerate_axes_allowed(self):
        curve = build_orbit_curve(0.0, 0.0, sample_count=8)
        np.testing.assert_array_equal(curve, np.zeros((9, 2)))

    def test_invalid_arguments(self):
        with self.assertRaises(OrbitalParameterError):
            build_orbit_curve(10.0, 8.0, sample_count=2)
        with self.assertRaises(OrbitalParameterError):
            build_orbit_curve(-1.0, 8.0)

class TestLiftTo3d(unittest.TestCase):

    def test_maps_onto_xz_plane(self):
        lifted = lift_to_3d(np.array([[1.0, 2.0], [-3.0, 4.0]]))
        np.testing.assert_array_equal(lifted, [[1.0, 0.0, 2.0], [-3.0, 0.0, 4.0]])

class TestBuildAsteroidBelt(unittest.TestCase):

    def test_circular_belt_respects_width_band(self):
        belt = build_asteroid_belt(20.0, 30.0, 0.0, 0.0, 1000, 2.0, 1.0, rng=np.random.default_rng(1))
        self.assertIsInstance(belt, AsteroidBelt)
        self.assertEqual(belt.positions.shape, (1000, 3))
        radii = belt.radial_distances
        self.assertTrue(np.all(radii >= 21.0 - 1e-9))
        self.assertTrue(np.all(radii <= 29.0 + 1e-9))

    def test_vertical_spread(self):
        belt = build_asteroid_belt(20.0, 30.0, 0.0, 0.0, 500, 0.0, 3.0, rng=np.random.default_rng(2))
        self.assertTrue(np.all(np.abs(belt.positions[:, 1]) <= 1.5))

        flat = build_asteroid_belt(20.0, 30.0, 0.0, 0.0, 100, 0.0, 0.0, rng=np.random.default_rng(2))
        np.testing.assert_array_equal(flat.positions[:, 1], 0.0)

    def test_eccentric_edges_bound_points(self):
        belt = build_asteroid_belt(38.0, 50.0, 0.0934, 0.0489, 1000, 2.0, 1.5, rng=np.random.default_rng(3))
        x, z = belt.positions[:, 0], belt.positions[:, 2]
        # No point lies outside the outer ellipse
        b_outer = 50.0 * np.sqrt(1 - 0.0489 ** 2)
        self.assertTrue(np.all((x / 50.0) ** 2 + (z / b_outer) ** 2 <= 1.0 + 1e-9))
        self.assertTrue(np.all(np.abs(x) <= 49.0 + 1e-9))

    def test_uniform_color(self):
        belt = build_asteroid_belt(20.0, 30.0, 0.0, 0.0, 50, 0.0, 1.0, rng=np.random.default_rng(4))
        np.testing.assert_array_almost_equal(belt.colors, np.tile([0.36, 0.23, 0.07], (50, 1)))

    def test_color_jitter_stays_in_range(self):
        belt = build_asteroid_belt(20.0, 30.0, 0.0, 0.0, 200, 0.0, 1.0,
                                   rng=np.random.default_rng(5), color_jitter=0.3)
        self.assertTrue(np.all((belt.colors >= 0.0) & (belt.colors <= 1.0)))
        self.assertGreater(len(np.unique(belt.colors[:, 0])), 1)

    def test_same_seed_same_belt(self):
        first = build_asteroid_belt(20.0, 30.0, 0.1, 0.05, 100, 1.0, 1.0, rng=np.random.default_rng(42))
        second = build_asteroid_belt(20.0, 30.0, 0.1, 0.05, 100, 1.0, 1.0, rng=np.random.default_rng(42))
        np.testing.assert_array_equal(first.positions, second.positions)

    def test_zero_count(self):
        belt = build_asteroid_belt(20.0, 30.0, 0.0, 0.0, 0, 0.0, 1.0)
        self.assertEqual(belt.positions.shape, (0, 3))
        self.assertEqual(belt.count, 0)

    def test_arrays_are_read_only(self):
        belt = build_asteroid_belt(20.0, 30.0, 0.0, 0.0, 10, 0.0, 1.0)
        with self.assertRaises(ValueError):
            belt.positions[0, 0] = 1.0

    def test_invalid_parameters(self):
        cases = [
            dict(inner_radius=30.0, outer_radius=20.0),
            dict(inner_radius=0.0, outer_radius=20.0),
            dict(belt_width=10.0),
            dict(count=-1),
            dict(vertical_spread=-1.0),
            dict(inner_eccentricity=1.0),
            dict(outer_eccentricity=-0.2),
        ]
        base = dict(inner_radius=20.0, outer_radius=30.0, inner_eccentricity=0.0, outer_eccentricity=0.0,
                    count=10, belt_width=2.0, vertical_spread=1.0)
        for overrides in cases:
            with self.subTest(**overrides):
                with self.assertRaises(OrbitalParameterError):
                    build_asteroid_belt(**{**base, **overrides})

if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
