"""Monte Carlo rejection sampling of orbital probability densities.

:class:`RejectionSampler` is the public entry point. For each request it

1. validates ``(n, l, m)`` and builds a :class:`~hydrogenpy.wavefunction.Wavefunction`,
2. estimates an envelope with :func:`~hydrogenpy.envelope.estimate_envelope`,
3. draws candidate batches uniformly in the bounding cube
   ``[-limit, limit]^3`` with ``limit = 2.5 n^2 + 5`` and accepts a candidate
   when ``uniform(0, envelope) < density``,
4. stops once ``count`` points are accepted, the attempt budget
   ``count * attempt_factor`` is spent, or the deadline/cancel signal fires.

Batches are independent. With ``workers > 1`` they run on a thread pool (the
density kernel releases the GIL) and the per-batch buffers are merged in
submission order, so a seeded run returns the same points for any worker
count.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from numbers import Integral
from time import monotonic

import numpy as np
from pydantic import BaseModel, ConfigDict

from hydrogenpy.config import SamplerConfig
from hydrogenpy.envelope import EnvelopeEstimate, estimate_envelope
from hydrogenpy.exceptions import SamplingExhausted
from hydrogenpy.functions.factorial import FactorialTable
from hydrogenpy.functions.misc import (
    bounding_half_width,
    cartesian_to_spherical,
    uniform_cube,
)
from hydrogenpy.quantum_state import QuantumState
from hydrogenpy.wavefunction import Wavefunction


class SamplingResult(BaseModel):
    """Accepted points plus the diagnostics of the run that produced them.

    ``points`` has shape ``(k, 3)`` with ``k <= requested``, in acceptance
    order. A short result is not an error; check :attr:`complete` or call
    :meth:`raise_if_incomplete`.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    state: QuantumState
    points: np.ndarray
    requested: int
    attempts: int
    max_attempts: int
    envelope: EnvelopeEstimate
    elapsed: float
    timed_out: bool = False

    def __len__(self) -> int:
        return self.points.shape[0]

    @property
    def complete(self) -> bool:
        return len(self) == self.requested

    @property
    def exhausted(self) -> bool:
        """Whether the attempt budget ran out before ``requested`` points were accepted."""
        return not self.complete and self.attempts >= self.max_attempts

    @property
    def acceptance_rate(self) -> float:
        return len(self) / self.attempts if self.attempts else 0.0

    def spherical(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return ``(r, theta, phi)`` of the accepted points."""
        return cartesian_to_spherical(
            self.points[:, 0], self.points[:, 1], self.points[:, 2]
        )

    def raise_if_incomplete(self) -> "SamplingResult":
        """Return ``self``, or raise :class:`SamplingExhausted` for a short result."""
        if not self.complete:
            raise SamplingExhausted(self)
        return self


def _as_generator(rng) -> np.random.Generator:
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def _run_batch(
    wavefunction: Wavefunction,
    rng: np.random.Generator,
    size: int,
    limit: float,
    ceiling: float,
) -> tuple[np.ndarray, np.ndarray]:
    candidates = uniform_cube(rng, limit, size)
    densities = wavefunction.density_points(candidates)
    threshold = rng.uniform(0.0, ceiling, size=size)
    idx = np.flatnonzero(threshold < densities)
    return candidates[idx], idx


class RejectionSampler:
    """Draw points distributed like :math:`|\\psi_{nlm}|^2`.

    Args:
        config (SamplerConfig, optional): Budgets and envelope parameters.
        rng (numpy.random.Generator | int, optional): Random source or seed.
            Falls back to ``config.seed``, then to fresh OS entropy.
        factorials (FactorialTable, optional): Memo table used for the
            normalization constants. Defaults to the process-wide table.
    """

    def __init__(
        self,
        config: SamplerConfig | None = None,
        rng: np.random.Generator | int | None = None,
        factorials: FactorialTable | None = None,
    ):
        self.config = config if config is not None else SamplerConfig()
        self.rng = _as_generator(rng if rng is not None else self.config.seed)
        self.factorials = factorials

        self.log = logging.getLogger(self.__class__.__module__)

    def sample(
        self,
        n: int,
        l: int,
        m: int,
        count: int,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> SamplingResult:
        """Sample ``count`` points for the orbital ``(n, l, m)``.

        Parameters
        ----------
        n, l, m:
            Quantum numbers; validated before any computation.
        count:
            Requested number of points, ``>= 1``.
        deadline:
            Wall-clock budget in seconds; overrides ``config.deadline``.
        cancel:
            Event checked between batches; setting it stops the run.

        Returns
        -------
        SamplingResult
            Between ``0`` and ``count`` accepted points with diagnostics.

        Raises
        ------
        InvalidQuantumNumbers
            For out-of-range quantum numbers.
        ValueError
            For a non-positive or non-integer ``count`` or a non-positive ``deadline``.
        NumericOverflow
            When the normalization or density leaves the float64 range.
        """
        state = QuantumState(n, l, m)
        if isinstance(count, bool) or not isinstance(count, Integral) or count < 1:
            raise ValueError(f"count must be a positive integer, got {count!r}")
        count = int(count)
        config = self.config
        deadline = deadline if deadline is not None else config.deadline
        if deadline is not None and deadline <= 0:
            raise ValueError(f"deadline must be positive, got {deadline!r}")

        start = monotonic()
        wavefunction = Wavefunction(
            state, cutoff_factor=config.cutoff_factor, factorials=self.factorials
        )
        envelope = estimate_envelope(wavefunction, self.rng, config)
        limit = bounding_half_width(state.n, config.box_scale, config.box_offset)
        max_attempts = count * config.attempt_factor

        chunks: list[np.ndarray] = []
        accepted = 0
        attempts = 0
        timed_out = False

        pool = (
            ThreadPoolExecutor(max_workers=config.workers)
            if config.workers > 1
            else contextlib.nullcontext()
        )
        with pool as executor:
            while accepted < count and attempts < max_attempts:
                if cancel is not None and cancel.is_set():
                    self.log.warning(f"Sampling {state.label} cancelled")
                    timed_out = True
                    break
                if deadline is not None and monotonic() - start > deadline:
                    self.log.warning(
                        f"Sampling {state.label} hit the {deadline}s deadline"
                    )
                    timed_out = True
                    break

                sizes = []
                planned = attempts
                for _ in range(config.workers):
                    size = min(config.batch_size, max_attempts - planned)
                    if size <= 0:
                        break
                    sizes.append(size)
                    planned += size
                streams = self.rng.spawn(len(sizes))
                args = [
                    (wavefunction, stream, size, limit, envelope.ceiling)
                    for stream, size in zip(streams, sizes)
                ]
                if executor is None:
                    batches = [_run_batch(*a) for a in args]
                else:
                    batches = list(executor.map(lambda a: _run_batch(*a), args))

                for size, (points, idx) in zip(sizes, batches):
                    needed = count - accepted
                    if points.shape[0] >= needed:
                        chunks.append(points[:needed])
                        accepted += needed
                        attempts += int(idx[needed - 1]) + 1
                        break
                    chunks.append(points)
                    accepted += points.shape[0]
                    attempts += size
                self.log.debug(
                    f"{state.label}: {accepted}/{count} accepted after {attempts} attempts"
                )

        points = np.concatenate(chunks) if chunks else np.empty((0, 3))
        result = SamplingResult(
            state=state,
            points=points,
            requested=count,
            attempts=attempts,
            max_attempts=max_attempts,
            envelope=envelope,
            elapsed=monotonic() - start,
            timed_out=timed_out,
        )
        if result.exhausted:
            self.log.warning(
                f"Attempt budget exhausted for {state.label}: "
                f"{len(result)}/{count} points after {attempts} attempts"
            )
        self.log.info(
            f"Sampled {len(result)} points for {state.label} "
            f"(acceptance rate {result.acceptance_rate:.4f}, {result.elapsed:.2f}s)"
        )
        return result


def generate_orbital_points(
    n: int,
    l: int,
    m: int,
    count: int = 8000,
    config: SamplerConfig | None = None,
    rng: np.random.Generator | int | None = None,
    **kwargs,
) -> SamplingResult:
    """Sample ``count`` points for ``(n, l, m)`` with a fresh :class:`RejectionSampler`.

    Extra keyword arguments (``deadline``, ``cancel``) are forwarded to
    :meth:`RejectionSampler.sample`.
    """
    return RejectionSampler(config=config, rng=rng).sample(n, l, m, count, **kwargs)
