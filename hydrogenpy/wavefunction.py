"""Hydrogen-like stationary wavefunctions.

The wavefunction is the product of a radial part

.. math::

    R_{nl}(r) = N_{nl}\\, e^{-\\rho/2} \\rho^l L_{n-l-1}^{2l+1}(\\rho),
    \\qquad \\rho = 2r/n,

and a real spherical harmonic :math:`Y_{lm}(\\theta, \\phi)` (``cos(m phi)``
for ``m > 0``, ``sin(|m| phi)`` for ``m < 0``), in atomic units with nuclear
charge ``Z = 1``.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from hydrogenpy.exceptions import NumericOverflow
from hydrogenpy.functions.cpu_numba import angular_values, density_batch, radial_values
from hydrogenpy.functions.factorial import FactorialTable, default_table
from hydrogenpy.functions.misc import cutoff_radius
from hydrogenpy.quantum_state import (
    QuantumState,
    validate_degree_order,
    validate_quantum_numbers,
)


def _checked(value: float, what: str) -> float:
    if not math.isfinite(value) or value <= 0.0:
        raise NumericOverflow(f"{what} is not a positive finite float: {value}")
    return value


def radial_normalization(n: int, l: int, table: FactorialTable | None = None) -> float:
    """Return ``sqrt((2/n)^3 (n-l-1)! / (2n (n+l)!))``.

    Raises
    ------
    NumericOverflow
        If the factorial ratio or the constant leaves the float64 range.
    """
    table = table if table is not None else default_table()
    ratio = table.ratio(n - l - 1, n + l)
    return _checked(
        math.sqrt((2.0 / n) ** 3 * ratio / (2.0 * n)),
        f"radial normalization for n={n}, l={l}",
    )


def angular_normalization(l: int, m: int, table: FactorialTable | None = None) -> float:
    """Return the real spherical harmonic normalization, ``sqrt(2)`` included for ``m != 0``."""
    table = table if table is not None else default_table()
    abs_m = abs(m)
    norm = math.sqrt(
        (2 * l + 1) / (4 * math.pi) * table.ratio(l - abs_m, l + abs_m)
    )
    if m != 0:
        norm *= math.sqrt(2.0)
    return _checked(norm, f"angular normalization for l={l}, m={m}")


class Wavefunction:
    """Evaluator bound to one quantum state.

    Both normalization constants are computed once on construction, so the
    per-point cost is only the recurrences.

    Args:
        state (QuantumState): The orbital to evaluate.
        cutoff_factor (float, optional): Density is zero beyond
            ``cutoff_factor * n**2``. Defaults to 5.
        factorials (FactorialTable, optional): Memo table for the
            normalization factorials. Defaults to the process-wide table.
    """

    def __init__(
        self,
        state: QuantumState,
        cutoff_factor: float = 5.0,
        factorials: FactorialTable | None = None,
    ):
        self.state = state
        self.cutoff = cutoff_radius(state.n, cutoff_factor)
        self.radial_norm = radial_normalization(state.n, state.l, factorials)
        self.angular_norm = angular_normalization(state.l, state.m, factorials)

        self.log = logging.getLogger(self.__class__.__module__)
        self.log.debug(
            f"{state.label}: radial norm {self.radial_norm:.6e}, "
            f"angular norm {self.angular_norm:.6e}, cutoff r={self.cutoff}"
        )

    def radial(self, r) -> np.ndarray:
        r = np.ascontiguousarray(np.atleast_1d(r), dtype=np.float64)
        values = radial_values(r.ravel(), self.state.n, self.state.l, self.radial_norm)
        return values.reshape(r.shape)

    def angular(self, theta, phi) -> np.ndarray:
        theta, phi = np.broadcast_arrays(
            np.atleast_1d(np.asarray(theta, dtype=np.float64)),
            np.atleast_1d(np.asarray(phi, dtype=np.float64)),
        )
        values = angular_values(
            np.ascontiguousarray(theta).ravel(),
            np.ascontiguousarray(phi).ravel(),
            self.state.l,
            self.state.m,
            self.angular_norm,
        )
        return values.reshape(theta.shape)

    def density_points(self, points: np.ndarray) -> np.ndarray:
        """Evaluate :math:`|\\psi|^2` on an ``(k, 3)`` array of Cartesian points.

        Raises
        ------
        NumericOverflow
            If any density is not finite.
        """
        points = np.ascontiguousarray(points, dtype=np.float64).reshape(-1, 3)
        densities = density_batch(
            points,
            self.state.n,
            self.state.l,
            self.state.m,
            self.radial_norm,
            self.angular_norm,
            self.cutoff,
        )
        if not np.all(np.isfinite(densities)):
            raise NumericOverflow(
                f"Non-finite probability density for {self.state.label}"
            )
        return densities

    def density(self, x, y, z) -> np.ndarray:
        x, y, z = np.broadcast_arrays(
            np.asarray(x, dtype=np.float64),
            np.asarray(y, dtype=np.float64),
            np.asarray(z, dtype=np.float64),
        )
        points = np.stack([x.ravel(), y.ravel(), z.ravel()], axis=-1)
        return self.density_points(points).reshape(x.shape)


def _scalar_or_array(values: np.ndarray, *inputs):
    if all(np.ndim(i) == 0 for i in inputs):
        return float(values.reshape(-1)[0])
    return values


def radial_wavefunction(r, n: int, l: int, factorials: FactorialTable | None = None):
    """Radial wavefunction :math:`R_{nl}(r)` for scalar or array ``r``."""
    n, l, _ = validate_quantum_numbers(n, l, 0)
    norm = radial_normalization(n, l, factorials)
    r_arr = np.ascontiguousarray(np.atleast_1d(r), dtype=np.float64)
    values = radial_values(r_arr.ravel(), n, l, norm).reshape(r_arr.shape)
    return _scalar_or_array(values, r)


def real_spherical_harmonic(
    l: int, m: int, theta, phi, factorials: FactorialTable | None = None
):
    """Real spherical harmonic :math:`Y_{lm}(\\theta, \\phi)` for scalar or array angles."""
    l, m = validate_degree_order(l, m)
    norm = angular_normalization(l, m, factorials)
    theta_arr, phi_arr = np.broadcast_arrays(
        np.atleast_1d(np.asarray(theta, dtype=np.float64)),
        np.atleast_1d(np.asarray(phi, dtype=np.float64)),
    )
    values = angular_values(
        np.ascontiguousarray(theta_arr).ravel(),
        np.ascontiguousarray(phi_arr).ravel(),
        l,
        m,
        norm,
    ).reshape(theta_arr.shape)
    return _scalar_or_array(values, theta, phi)


def probability_density(
    x, y, z, n: int, l: int, m: int, cutoff_factor: float = 5.0
):
    """Probability density :math:`|\\psi_{nlm}(x, y, z)|^2`.

    Zero beyond ``r = cutoff_factor * n**2``. Accepts scalars or arrays
    (broadcast together).

    Raises
    ------
    InvalidQuantumNumbers
        If ``(n, l, m)`` is out of range.
    NumericOverflow
        If the normalization constants leave the float64 range.
    """
    wavefunction = Wavefunction(QuantumState(n, l, m), cutoff_factor=cutoff_factor)
    values = wavefunction.density(x, y, z)
    return _scalar_or_array(values, x, y, z)


__all__ = [
    "Wavefunction",
    "angular_normalization",
    "probability_density",
    "radial_normalization",
    "radial_wavefunction",
    "real_spherical_harmonic",
]
