"""Memoized factorials.

The table is append-only and owned by a :class:`FactorialTable` instance. A
module-level default instance backs :func:`factorial` so that repeated
normalization computations across calls share one table.
"""

from __future__ import annotations

import math
import threading

from hydrogenpy.exceptions import NumericOverflow


class FactorialTable:
    """Append-only memo table of exact integer factorials.

    Parameters
    ----------
    initial:
        Number of entries to precompute.

    Notes
    -----
    Entry ``k`` holds ``k!``. Growing the table costs one multiplication per
    new entry, so a sequence of calls with increasing ``k`` is O(1) amortized.
    The table is guarded by a lock and may be shared between threads.
    """

    def __init__(self, initial: int = 2):
        self._values: list[int] = [1, 1]
        self._lock = threading.Lock()
        if initial > 2:
            self(initial - 1)

    def __len__(self) -> int:
        return len(self._values)

    def __call__(self, k: int) -> int:
        """Return ``k!``; ``1`` for negative ``k``."""
        if k < 0:
            # Not mathematically meaningful, kept as the documented fallback.
            return 1
        values = self._values
        if k < len(values):
            return values[k]
        with self._lock:
            res = values[-1]
            for i in range(len(values), k + 1):
                res *= i
                values.append(res)
            return values[k]

    def ratio(self, a: int, b: int) -> float:
        """Return ``a! / b!`` as a float.

        Raises
        ------
        NumericOverflow
            If the ratio is not representable as a positive finite float.
        """
        try:
            value = self(a) / self(b)
        except OverflowError as exc:
            raise NumericOverflow(
                f"{a}!/{b}! exceeds float64 range"
            ) from exc
        if not math.isfinite(value) or value <= 0.0:
            raise NumericOverflow(f"{a}!/{b}! is not a positive finite float: {value}")
        return value


_default_table = FactorialTable(initial=32)


def default_table() -> FactorialTable:
    return _default_table


def factorial(k: int, table: FactorialTable | None = None) -> int:
    """Return ``k!`` from ``table`` (the process-wide table by default).

    For ``k < 0`` this returns ``1``.
    """
    return (table if table is not None else _default_table)(k)


def factorial_ratio(a: int, b: int, table: FactorialTable | None = None) -> float:
    """Return ``a! / b!`` as a float, raising :class:`NumericOverflow` when unsafe."""
    return (table if table is not None else _default_table).ratio(a, b)
