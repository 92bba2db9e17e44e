"""Envelope estimation for rejection sampling.

The envelope is a Monte Carlo estimate of the maximum density inside the
central part of the bounding cube, inflated by a safety factor. It is a
heuristic ceiling rather than a proven upper bound: orbitals with thin,
off-centre peaks can exceed it locally.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from hydrogenpy.config import SamplerConfig
from hydrogenpy.functions.misc import bounding_half_width, uniform_cube
from hydrogenpy.wavefunction import Wavefunction

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnvelopeEstimate:
    """Result of the envelope pre-scan.

    Attributes
    ----------
    ceiling:
        Envelope used by the acceptance test.
    scanned_max:
        Largest density observed by the scan.
    scan_count:
        Number of points scanned.
    scan_half_width:
        Half-width of the scanned central cube.
    used_fallback:
        Whether the scan only saw zero density.
    """

    ceiling: float
    scanned_max: float
    scan_count: int
    scan_half_width: float
    used_fallback: bool


def estimate_envelope(
    wavefunction: Wavefunction,
    rng: np.random.Generator,
    config: SamplerConfig | None = None,
) -> EnvelopeEstimate:
    """Scan the central sub-cube and return a sampling envelope.

    Parameters
    ----------
    wavefunction:
        Evaluator for the requested orbital.
    rng:
        Source of the uniform scan points.
    config:
        Scan size, scan fraction, safety factor and fallback value.

    Returns
    -------
    EnvelopeEstimate
        ``ceiling = safety_factor * max(scanned densities)``, with the
        fallback constant substituted for a zero maximum.
    """
    config = config if config is not None else SamplerConfig()
    n = wavefunction.state.n
    limit = bounding_half_width(n, config.box_scale, config.box_offset)
    scan_half_width = limit * config.scan_fraction

    points = uniform_cube(rng, scan_half_width, config.scan_count)
    scanned_max = float(np.max(wavefunction.density_points(points)))

    used_fallback = scanned_max == 0.0
    if used_fallback:
        log.warning(
            f"Envelope scan for {wavefunction.state.label} saw only zero density; "
            f"using fallback {config.fallback_envelope}"
        )
        ceiling = config.fallback_envelope
    else:
        ceiling = scanned_max
    ceiling *= config.safety_factor

    log.info(
        f"Envelope for {wavefunction.state.label}: {ceiling:.6e} "
        f"(scan max {scanned_max:.6e} over {config.scan_count} points)"
    )
    return EnvelopeEstimate(
        ceiling=ceiling,
        scanned_max=scanned_max,
        scan_count=config.scan_count,
        scan_half_width=scan_half_width,
        used_fallback=used_fallback,
    )
