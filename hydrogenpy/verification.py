"""Numerical reference checks for the sampler's assumptions.

The rejection sampler trusts a Monte Carlo envelope and float64
normalization constants. The helpers here compare both against
higher-resolution references:

- :func:`radial_norm_integral` integrates :math:`r^2 R_{nl}(r)^2` with
  adaptive quadrature (should be close to 1),
- :func:`reference_maximum` locates the density maximum on a dense grid over
  the whole bounding cube and refines the best candidates with Nelder-Mead,
- :func:`envelope_coverage` reports whether an envelope estimate reaches that
  reference maximum.

None of them alter sampling; they only report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from scipy.integrate import quad
from scipy.optimize import minimize

from hydrogenpy.config import SamplerConfig
from hydrogenpy.envelope import estimate_envelope
from hydrogenpy.functions.factorial import FactorialTable
from hydrogenpy.functions.misc import bounding_half_width
from hydrogenpy.quantum_state import QuantumState
from hydrogenpy.wavefunction import Wavefunction, radial_wavefunction

log = logging.getLogger(__name__)


def radial_norm_integral(
    n: int, l: int, r_max: float = 50.0, factorials: FactorialTable | None = None
) -> float:
    """Integrate :math:`r^2 R_{nl}(r)^2` over ``[0, r_max]``."""
    value, _ = quad(
        lambda r: r**2 * radial_wavefunction(r, n, l, factorials) ** 2,
        0.0,
        r_max,
        limit=200,
    )
    return value


def reference_maximum(
    wavefunction: Wavefunction,
    config: SamplerConfig | None = None,
    resolution: int = 65,
    refine: int = 8,
) -> tuple[float, np.ndarray]:
    """Locate the largest density in the full bounding cube.

    Args:
        wavefunction (Wavefunction): Orbital to inspect.
        config (SamplerConfig, optional): Supplies the bounding-cube size.
        resolution (int, optional): Grid points per axis, at least 2. Odd
            values put a grid point on the nucleus. Defaults to 65.
        refine (int, optional): Number of best grid points polished with
            Nelder-Mead. Defaults to 8.

    Returns:
        maximum (float): Largest density found.
        location (np.ndarray): Cartesian position of that maximum.
    """
    if resolution < 2:
        raise ValueError(f"resolution must be at least 2, got {resolution}")
    config = config if config is not None else SamplerConfig()
    limit = bounding_half_width(wavefunction.state.n, config.box_scale, config.box_offset)
    axis = np.linspace(-limit, limit, resolution)
    x, y, z = np.meshgrid(axis, axis, axis, indexing="ij")
    grid = np.stack([x.ravel(), y.ravel(), z.ravel()], axis=-1)
    densities = wavefunction.density_points(grid)

    best = np.argsort(densities)[-refine:]
    maximum = float(densities[best[-1]])
    location = grid[best[-1]]

    def objective(p):
        return -wavefunction.density_points(p.reshape(1, 3))[0]

    for start in grid[best]:
        res = minimize(objective, start, method="Nelder-Mead", options=dict(xatol=1e-6, fatol=1e-14))
        if -res.fun > maximum and np.all(np.abs(res.x) <= limit):
            maximum = float(-res.fun)
            location = res.x
    return maximum, location


@dataclass(frozen=True)
class EnvelopeCoverage:
    state: QuantumState
    ceiling: float
    reference_max: float
    location: np.ndarray

    @property
    def ratio(self) -> float:
        """``ceiling / reference_max``; below 1 means the envelope clips the density."""
        return self.ceiling / self.reference_max if self.reference_max > 0 else np.inf

    @property
    def covered(self) -> bool:
        """Whether the envelope reaches a positive reference maximum."""
        return self.reference_max > 0 and self.ceiling >= self.reference_max


def envelope_coverage(
    n: int,
    l: int,
    m: int,
    config: SamplerConfig | None = None,
    rng: np.random.Generator | int | None = None,
    resolution: int = 65,
) -> EnvelopeCoverage:
    """Compare a fresh envelope estimate with :func:`reference_maximum`."""
    config = config if config is not None else SamplerConfig()
    wavefunction = Wavefunction(QuantumState(n, l, m), cutoff_factor=config.cutoff_factor)
    rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)
    envelope = estimate_envelope(wavefunction, rng, config)
    maximum, location = reference_maximum(wavefunction, config, resolution=resolution)
    coverage = EnvelopeCoverage(
        state=wavefunction.state,
        ceiling=envelope.ceiling,
        reference_max=maximum,
        location=location,
    )
    if not coverage.covered:
        log.warning(
            f"Envelope {coverage.ceiling:.6e} for {wavefunction.state.label} is below "
            f"the reference maximum {maximum:.6e} at {np.round(location, 3)}; "
            "sampled points will under-represent that region"
        )
    return coverage
