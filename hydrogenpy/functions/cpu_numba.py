"""Numba kernels for the radial and angular special functions.

All kernels are compiled in ``nopython`` mode and release the GIL, so batches
of candidate points can be evaluated concurrently from a thread pool.
"""

import math

import numpy as np
from numba import njit


@njit(nogil=True, cache=True)
def generalized_laguerre(n, alpha, x):
    """Evaluate the generalized Laguerre polynomial :math:`L_n^{\\alpha}(x)`.

    Parameters
    ----------
    n : int
        Degree of the polynomial, ``n >= 0``.
    alpha : float
        Generalization parameter.
    x : float
        Evaluation point.

    Returns
    -------
    float
        The value of :math:`L_n^{\\alpha}(x)`, computed with the three-term
        recurrence ``L_{k+1} = ((2k+1+alpha-x) L_k - (k+alpha) L_{k-1}) / (k+1)``.
    """
    if n <= 0:
        return 1.0
    l_prev = 1.0
    l_curr = 1.0 + alpha - x
    for k in range(1, n):
        l_next = ((2.0 * k + 1.0 + alpha - x) * l_curr - (k + alpha) * l_prev) / (
            k + 1.0
        )
        l_prev = l_curr
        l_curr = l_next
    return l_curr


@njit(nogil=True, cache=True)
def associated_legendre(l, m, x):
    """Evaluate the associated Legendre polynomial :math:`P_l^m(x)`.

    Parameters
    ----------
    l : int
        Degree.
    m : int
        Order. Only ``|m|`` is used; ``|m| > l`` yields ``0``.
    x : float
        Evaluation point, ``cos(theta)`` in ``[-1, 1]``.

    Returns
    -------
    float
        :math:`P_l^m(x)` including the Condon-Shortley phase, computed by the
        upward recurrence ``P_m^m -> P_{m+1}^m -> ... -> P_l^m``.
    """
    m = abs(m)
    if m > l:
        return 0.0

    pmm = 1.0
    if m > 0:
        # clamp rounding noise at x = +-1
        somx2 = math.sqrt(max((1.0 - x) * (1.0 + x), 0.0))
        fact = 1.0
        for _ in range(m):
            pmm *= -fact * somx2
            fact += 2.0
    if l == m:
        return pmm

    pmmp1 = x * (2.0 * m + 1.0) * pmm
    if l == m + 1:
        return pmmp1

    pll = 0.0
    for ll in range(m + 2, l + 1):
        pll = ((2.0 * ll - 1.0) * x * pmmp1 - (ll + m - 1.0) * pmm) / (ll - m)
        pmm = pmmp1
        pmmp1 = pll
    return pll


@njit(nogil=True, cache=True)
def _radial(r, n, l, norm):
    rho = 2.0 * r / n
    return (
        norm
        * math.exp(-rho / 2.0)
        * rho**l
        * generalized_laguerre(n - l - 1, 2.0 * l + 1.0, rho)
    )


@njit(nogil=True, cache=True)
def _angular(cos_theta, phi, l, m, norm):
    p_lm = associated_legendre(l, m, cos_theta)
    if m > 0:
        return norm * p_lm * math.cos(m * phi)
    if m < 0:
        return norm * p_lm * math.sin(-m * phi)
    return norm * p_lm


@njit(nogil=True, cache=True)
def radial_values(r, n, l, norm):
    """Evaluate ``R_nl`` on a 1D array of radii with a precomputed normalization."""
    out = np.empty(r.shape[0], dtype=np.float64)
    for i in range(r.shape[0]):
        out[i] = _radial(r[i], n, l, norm)
    return out


@njit(nogil=True, cache=True)
def angular_values(theta, phi, l, m, norm):
    """Evaluate the real spherical harmonic on 1D arrays of angles.

    ``norm`` already carries the ``sqrt(2)`` factor for ``m != 0``.
    """
    out = np.empty(theta.shape[0], dtype=np.float64)
    for i in range(theta.shape[0]):
        out[i] = _angular(math.cos(theta[i]), phi[i], l, m, norm)
    return out


@njit(nogil=True, cache=True)
def density_batch(points, n, l, m, radial_norm, angular_norm, cutoff):
    """Evaluate :math:`|\\psi_{nlm}|^2` for an ``(k, 3)`` array of Cartesian points.

    Points with ``r > cutoff`` get density ``0`` without evaluating the
    polynomials.
    """
    k = points.shape[0]
    out = np.zeros(k, dtype=np.float64)
    for i in range(k):
        x = points[i, 0]
        y = points[i, 1]
        z = points[i, 2]
        r = math.sqrt(x * x + y * y + z * z)
        if r > cutoff:
            continue
        if r == 0.0:
            cos_theta = 1.0
        else:
            cos_theta = min(max(z / r, -1.0), 1.0)
        phi = math.atan2(y, x)
        psi = _radial(r, n, l, radial_norm) * _angular(
            cos_theta, phi, l, m, angular_norm
        )
        out[i] = psi * psi
    return out
