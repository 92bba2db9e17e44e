import numpy as np
import numpy.testing as npt

from hydrogenpy import SamplerConfig, estimate_envelope
from hydrogenpy.quantum_state import QuantumState
from hydrogenpy.wavefunction import Wavefunction


def test_envelope_is_inflated_scan_maximum():
    config = SamplerConfig(scan_count=500)
    wavefunction = Wavefunction(QuantumState(2, 1, 0))
    estimate = estimate_envelope(wavefunction, np.random.default_rng(0), config)

    assert estimate.scan_count == 500
    assert not estimate.used_fallback
    npt.assert_allclose(estimate.scan_half_width, 0.5 * (2.5 * 4 + 5))
    npt.assert_allclose(estimate.ceiling, 1.2 * estimate.scanned_max)

    # recompute the scan with the same stream
    rng = np.random.default_rng(0)
    points = rng.uniform(-7.5, 7.5, size=(500, 3))
    npt.assert_allclose(estimate.scanned_max, wavefunction.density_points(points).max())


def test_envelope_fallback_for_all_zero_scan():
    # a tiny cutoff makes the scanned density vanish
    config = SamplerConfig(cutoff_factor=1e-6)
    wavefunction = Wavefunction(QuantumState(1, 0, 0), cutoff_factor=1e-6)
    estimate = estimate_envelope(wavefunction, np.random.default_rng(1), config)

    assert estimate.used_fallback
    assert estimate.scanned_max == 0.0
    npt.assert_allclose(estimate.ceiling, 0.001 * 1.2)
