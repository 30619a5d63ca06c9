# physics_utils.py

import numpy as np

TWO_PI = 2.0 * np.pi

class PhysicsError(Exception):
    """Custom exception for physics-related errors, including numerical issues."""
    pass

class OrbitalParameterError(PhysicsError):
    """Raised when orbital or belt parameters describe no valid closed ellipse.

    Covers eccentricity outside [0, 1), non-positive axes, distances or periods,
    and sample counts too small to form a loop. Raised at construction time so
    invalid bodies never reach the per-frame update.
    """
    pass

def safe_divide(numerator, denominator, epsilon=1e-12, default_on_zero_denom=0.0):
    """
    Safely divides two numbers, handling potential division by zero.

    Args:
        numerator (float or np.ndarray): The number(s) to be divided.
        denominator (float or np.ndarray): The number(s) to divide by.
        epsilon (float): Threshold below which the denominator is considered zero.
        default_on_zero_denom (float): Value to return if denominator is effectively zero.

    Returns:
        float or np.ndarray: The result of the division, or default_on_zero_denom if denominator is near zero.
    """
    if isinstance(denominator, np.ndarray):
        is_zero = np.abs(denominator) < epsilon
        default_vals = np.full_like(denominator, default_on_zero_denom, dtype=np.float64)
        safe_den = np.where(is_zero, 1.0, denominator)
        return np.where(is_zero, default_vals, np.asarray(numerator, dtype=np.float64) / safe_den)

    if abs(denominator) < epsilon:
        return default_on_zero_denom
    return numerator / denominator

def normalize_vector(vector, epsilon=1e-12):
    """
    Normalizes a vector to unit length.

    Args:
        vector (np.ndarray): The vector to normalize.
        epsilon (float): Threshold below which the vector's magnitude is considered zero.

    Returns:
        np.ndarray: The normalized vector, or a zero vector if its magnitude is close to zero.
    """
    if not isinstance(vector, np.ndarray):
        vector = np.array(vector, dtype=float)

    norm = np.linalg.norm(vector)
    if norm < epsilon:
        # Return a zero vector of the same shape if the norm is too small
        return np.zeros_like(vector, dtype=float)
    return vector / norm

def wrap_angle(angle_rad):
    """Maps an angle (or array of angles) into [0, 2*pi)."""
    wrapped = np.mod(angle_rad, TWO_PI)
    # np.mod can return exactly 2*pi for tiny negative inputs
    if isinstance(wrapped, np.ndarray):
        wrapped[wrapped >= TWO_PI] = 0.0
        return wrapped
    wrapped = float(wrapped)
    return 0.0 if wrapped >= TWO_PI else wrapped

def validate_eccentricity(eccentricity: float, label: str = "orbit") -> float:
    if not (0.0 <= eccentricity < 1.0):
        raise OrbitalParameterError(f"Eccentricity of {label} ({eccentricity}) must be >= 0 and < 1.")
    return float(eccentricity)

def semi_minor_axis(semi_major_axis, eccentricity):
    """
    Semi-minor axis b = a * sqrt(1 - e^2) of an ellipse.

    Args:
        semi_major_axis (float or np.ndarray): a, non-negative.
        eccentricity (float or np.ndarray): e, in [0, 1).

    Raises:
        OrbitalParameterError: If any eccentricity is outside [0, 1) or any axis is negative.
    """
    e = np.asarray(eccentricity, dtype=np.float64)
    a = np.asarray(semi_major_axis, dtype=np.float64)
    if np.any(e < 0.0) or np.any(e >= 1.0):
        raise OrbitalParameterError(f"Eccentricity {eccentricity} must be >= 0 and < 1.")
    if np.any(a < 0.0):
        raise OrbitalParameterError(f"Semi-major axis {semi_major_axis} cannot be negative.")
    b = a * np.sqrt(1.0 - e ** 2)
    if b.ndim == 0:
        return float(b)
    return b
