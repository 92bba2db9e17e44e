"""Quantum numbers of a hydrogen-like bound state."""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral

from hydrogenpy.exceptions import InvalidQuantumNumbers

SUBSHELL_LETTERS = "spdfghik"

# Real-orbital suffixes for the shapes that are conventionally named.
_REAL_ORBITAL_NAMES = {
    (1, -1): "y",
    (1, 0): "z",
    (1, 1): "x",
    (2, -2): "xy",
    (2, -1): "yz",
    (2, 0): "z2",
    (2, 1): "xz",
    (2, 2): "x2-y2",
}


def validate_degree_order(l, m) -> tuple[int, int]:
    """Check ``l >= 0`` and ``-l <= m <= l`` for an angular part without ``n``.

    Raises
    ------
    InvalidQuantumNumbers
        If ``l`` or ``m`` is not an integer or the pair is out of range.
    """
    for name, value in (("l", l), ("m", m)):
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise InvalidQuantumNumbers(None, l, m, f"{name} must be an integer")
    l, m = int(l), int(m)
    if l < 0:
        raise InvalidQuantumNumbers(None, l, m, "l must be non-negative")
    if abs(m) > l:
        raise InvalidQuantumNumbers(None, l, m, "m must satisfy -l <= m <= l")
    return l, m


def validate_quantum_numbers(n, l, m) -> tuple[int, int, int]:
    """Check ``n >= 1``, ``0 <= l <= n - 1`` and ``-l <= m <= l``.

    Returns
    -------
    tuple[int, int, int]
        The quantum numbers as plain ints.

    Raises
    ------
    InvalidQuantumNumbers
        If any number is not an integer or the triple is out of range.
    """
    for name, value in (("n", n), ("l", l), ("m", m)):
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise InvalidQuantumNumbers(n, l, m, f"{name} must be an integer")
    n, l, m = int(n), int(l), int(m)
    if n < 1:
        raise InvalidQuantumNumbers(n, l, m, "n must be at least 1")
    if not 0 <= l < n:
        raise InvalidQuantumNumbers(n, l, m, "l must satisfy 0 <= l <= n - 1")
    if abs(m) > l:
        raise InvalidQuantumNumbers(n, l, m, "m must satisfy -l <= m <= l")
    return n, l, m


@dataclass(frozen=True)
class QuantumState:
    """Validated, immutable ``(n, l, m)`` triple.

    Construction raises :class:`~hydrogenpy.exceptions.InvalidQuantumNumbers`
    for out-of-domain input.
    """

    n: int
    l: int
    m: int

    def __post_init__(self):
        n, l, m = validate_quantum_numbers(self.n, self.l, self.m)
        object.__setattr__(self, "n", n)
        object.__setattr__(self, "l", l)
        object.__setattr__(self, "m", m)

    @property
    def label(self) -> str:
        """Spectroscopic label such as ``1s``, ``2p_z`` or ``3d_xy``."""
        letter = (
            SUBSHELL_LETTERS[self.l] if self.l < len(SUBSHELL_LETTERS) else f"[l={self.l}]"
        )
        if self.l == 0:
            return f"{self.n}{letter}"
        suffix = _REAL_ORBITAL_NAMES.get((self.l, self.m))
        if suffix is None:
            return f"{self.n}{letter}(m={self.m})"
        return f"{self.n}{letter}_{suffix}"

    def as_tuple(self) -> tuple[int, int, int]:
        return self.n, self.l, self.m
