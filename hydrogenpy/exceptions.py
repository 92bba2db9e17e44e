"""Exception types raised by hydrogenpy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from hydrogenpy.sampler import SamplingResult


class HydrogenpyError(Exception):
    """Base class for all hydrogenpy errors."""


class InvalidQuantumNumbers(HydrogenpyError, ValueError):
    """Quantum numbers outside ``n >= 1``, ``0 <= l < n``, ``|m| <= l``."""

    def __init__(self, n, l, m, reason: str):
        self.n = n
        self.l = l
        self.m = m
        self.reason = reason
        numbers = f"l={l}, m={m}" if n is None else f"n={n}, l={l}, m={m}"
        super().__init__(f"Invalid quantum numbers ({numbers}): {reason}")


class NumericOverflow(HydrogenpyError, ArithmeticError):
    """A normalization term or density left the safe float64 range."""


class SamplingExhausted(HydrogenpyError, RuntimeError):
    """Fewer points than requested were accepted.

    The partial result is attached as ``result`` so callers can still use the
    accepted points or retry with a larger budget.
    """

    def __init__(self, result: "SamplingResult"):
        self.result = result
        reason = "deadline reached" if result.timed_out else "attempt budget spent"
        super().__init__(
            f"Accepted {len(result)} of {result.requested} points after "
            f"{result.attempts} attempts ({reason})"
        )
