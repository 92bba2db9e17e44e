from .config import SamplerConfig
from .envelope import EnvelopeEstimate, estimate_envelope
from .exceptions import (
    HydrogenpyError,
    InvalidQuantumNumbers,
    NumericOverflow,
    SamplingExhausted,
)
from .quantum_state import QuantumState
from .sampler import RejectionSampler, SamplingResult, generate_orbital_points
from .wavefunction import (
    Wavefunction,
    probability_density,
    radial_wavefunction,
    real_spherical_harmonic,
)

__version__ = "0.1.0"
