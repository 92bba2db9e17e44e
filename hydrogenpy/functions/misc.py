"""Geometry helpers shared by the evaluator, envelope estimator and sampler."""

import numpy as np


def cartesian_to_spherical(x, y, z):
    """Convert Cartesian coordinates to spherical ``(r, theta, phi)``.

    Args:
        x (np.ndarray): x coordinates.
        y (np.ndarray): y coordinates.
        z (np.ndarray): z coordinates.

    Returns:
        r (np.ndarray): Radial distance.
        theta (np.ndarray): Polar angle in ``[0, pi]``; ``0`` where ``r == 0``.
        phi (np.ndarray): Azimuthal angle in ``(-pi, pi]``.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    z = np.asarray(z, dtype=float)
    r = np.sqrt(x**2 + y**2 + z**2)
    cosine_theta = np.divide(z, r, out=np.ones_like(r), where=r != 0)
    # correct possible rounding errors
    cosine_theta = np.clip(cosine_theta, -1.0, 1.0)
    theta = np.arccos(cosine_theta)
    phi = np.arctan2(y, x)
    return r, theta, phi


def bounding_half_width(n: int, scale: float = 2.5, offset: float = 5.0) -> float:
    """Half-width of the sampling cube, growing with the orbital size ``~ n^2``."""
    return scale * n**2 + offset


def cutoff_radius(n: int, factor: float = 5.0) -> float:
    """Radius beyond which the density is treated as zero."""
    return factor * n**2


def uniform_cube(rng: np.random.Generator, half_width: float, size: int) -> np.ndarray:
    """Draw ``size`` points uniformly from ``[-half_width, half_width]^3``."""
    return rng.uniform(-half_width, half_width, size=(size, 3))
