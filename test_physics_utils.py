import math
import unittest
import numpy as np
from physics_utils import (safe_divide, normalize_vector, wrap_angle, semi_minor_axis,
                           validate_eccentricity, OrbitalParameterError, PhysicsError, TWO_PI)

class TestSafeDivide(unittest.TestCase):

    def test_typical_division_scalar(self):
        self.assertAlmostEqual(safe_divide(10, 2), 5.0)
        self.assertAlmostEqual(safe_divide(7, 3), 7/3)
        self.assertAlmostEqual(safe_divide(-10, 2), -5.0)
        self.assertAlmostEqual(safe_divide(0, 5), 0.0)

    def test_division_by_zero_scalar(self):
        self.assertAlmostEqual(safe_divide(5, 0), 0.0)
        self.assertAlmostEqual(safe_divide(5, 1e-13), 0.0) # Below default epsilon
        self.assertAlmostEqual(safe_divide(5, 0, default_on_zero_denom=99.0), 99.0)

    def test_division_numpy_array(self):
        num = np.array([10.0, 5.0, -4.0, 1.0])
        den = np.array([2.0, 0.0, -2.0, 1e-14])
        expected = np.array([5.0, 0.0, 2.0, 0.0])
        np.testing.assert_array_almost_equal(safe_divide(num, den), expected)

    def test_division_numpy_array_custom_default(self):
        result = safe_divide(np.array([5.0, 0.0]), np.array([0.0, 1e-14]), default_on_zero_denom=99.0)
        np.testing.assert_array_almost_equal(result, [99.0, 99.0])

    def test_scalar_numerator_array_denominator(self):
        result = safe_divide(6.0, np.array([2.0, 3.0, 0.0]))
        np.testing.assert_array_almost_equal(result, [3.0, 2.0, 0.0])

class TestNormalizeVector(unittest.TestCase):

    def test_normalize_typical_vector(self):
        np.testing.assert_array_almost_equal(normalize_vector(np.array([3.0, 4.0])), [0.6, 0.8])
        norm = np.sqrt(3)
        np.testing.assert_array_almost_equal(normalize_vector([1, 1, 1]), [1/norm, 1/norm, 1/norm])

    def test_normalize_zero_vector(self):
        np.testing.assert_array_almost_equal(normalize_vector(np.zeros(3)), np.zeros(3))
        np.testing.assert_array_almost_equal(normalize_vector(np.array([1e-15, 1e-15])), [0.0, 0.0])

    def test_normalize_custom_epsilon(self):
        vector = np.array([1e-5, 1e-5])
        np.testing.assert_array_almost_equal(normalize_vector(vector), vector / np.linalg.norm(vector))
        np.testing.assert_array_almost_equal(normalize_vector(vector, epsilon=1e-4), [0.0, 0.0])

class TestWrapAngle(unittest.TestCase):

    def test_angles_inside_range_unchanged(self):
        self.assertAlmostEqual(wrap_angle(0.0), 0.0)
        self.assertAlmostEqual(wrap_angle(1.5), 1.5)

    def test_wraps_past_full_turn(self):
        self.assertAlmostEqual(wrap_angle(TWO_PI + 0.25), 0.25)
        self.assertAlmostEqual(wrap_angle(5 * TWO_PI + 1.0), 1.0)
        self.assertAlmostEqual(wrap_angle(TWO_PI), 0.0)

    def test_negative_angles(self):
        self.assertAlmostEqual(wrap_angle(-math.pi / 2), 3 * math.pi / 2)
        result = wrap_angle(-1e-20)
        self.assertGreaterEqual(result, 0.0)
        self.assertLess(result, TWO_PI)

    def test_returns_float_for_scalar(self):
        self.assertIsInstance(wrap_angle(7.0), float)

    def test_array_input(self):
        result = wrap_angle(np.array([-0.5, 0.5, TWO_PI + 0.5]))
        np.testing.assert_array_almost_equal(result, [TWO_PI - 0.5, 0.5, 0.5])
        self.assertTrue(np.all((result >= 0.0) & (result < TWO_PI)))

class TestSemiMinorAxis(unittest.TestCase):

    def test_circle(self):
        self.assertAlmostEqual(semi_minor_axis(10.0, 0.0), 10.0)

    def test_ellipse(self):
        self.assertAlmostEqual(semi_minor_axis(10.0, 0.6), 8.0)
        self.assertAlmostEqual(semi_minor_axis(13.0, 0.205), 13.0 * math.sqrt(1 - 0.205 ** 2))

    def test_vectorised(self):
        result = semi_minor_axis(np.array([10.0, 5.0]), np.array([0.6, 0.0]))
        np.testing.assert_array_almost_equal(result, [8.0, 5.0])

    def test_invalid_eccentricity_raises(self):
        for e in (1.0, 1.5, -0.1):
            with self.assertRaises(OrbitalParameterError):
                semi_minor_axis(10.0, e)

    def test_negative_axis_raises(self):
        with self.assertRaises(OrbitalParameterError):
            semi_minor_axis(-1.0, 0.1)

class TestValidateEccentricity(unittest.TestCase):

    def test_valid_values_returned_as_float(self):
        self.assertEqual(validate_eccentricity(0), 0.0)
        self.assertIsInstance(validate_eccentricity(0), float)
        self.assertAlmostEqual(validate_eccentricity(0.999), 0.999)

    def test_invalid_values_raise_physics_error(self):
        with self.assertRaises(PhysicsError):
            validate_eccentricity(1.0, "test orbit")
        with self.assertRaisesRegex(OrbitalParameterError, "test orbit"):
            validate_eccentricity(-0.01, "test orbit")

if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
