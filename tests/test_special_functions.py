import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import numpy.testing as npt
import pytest
from scipy.special import eval_genlaguerre, lpmv

from hydrogenpy.exceptions import NumericOverflow
from hydrogenpy.functions import (
    FactorialTable,
    associated_legendre,
    factorial,
    factorial_ratio,
    generalized_laguerre,
)


def test_factorial_matches_math():
    for k in range(30):
        assert factorial(k) == math.factorial(k)


def test_factorial_negative_returns_one():
    assert factorial(-1) == 1
    assert factorial(-10) == 1


def test_factorial_table_grows_append_only():
    table = FactorialTable()
    assert len(table) == 2
    assert table(10) == math.factorial(10)
    assert len(table) == 11
    # smaller lookups don't shrink the table
    assert table(3) == 6
    assert len(table) == 11


def test_factorial_table_is_thread_safe():
    table = FactorialTable()
    ks = list(range(200, 0, -1)) * 4
    with ThreadPoolExecutor(max_workers=8) as pool:
        values = list(pool.map(table, ks))
    assert values == [math.factorial(k) for k in ks]
    assert len(table) == 201


def test_factorial_ratio():
    npt.assert_allclose(factorial_ratio(5, 3), 20.0)
    npt.assert_allclose(factorial_ratio(2, 4), 1.0 / 12.0)


def test_factorial_ratio_flags_overflow():
    table = FactorialTable()
    with pytest.raises(NumericOverflow):
        table.ratio(400, 0)
    with pytest.raises(NumericOverflow):
        table.ratio(0, 400)


@pytest.mark.parametrize("alpha", [0.0, 1.0, 3.0, 7.5])
def test_laguerre_low_orders(alpha):
    for x in np.linspace(0.0, 20.0, 11):
        assert generalized_laguerre(0, alpha, x) == 1.0
        npt.assert_allclose(generalized_laguerre(1, alpha, x), 1.0 + alpha - x)


def test_laguerre_first_order_without_alpha():
    for x in np.linspace(-3.0, 3.0, 13):
        npt.assert_allclose(generalized_laguerre(1, 0.0, x), 1.0 - x)


@pytest.mark.parametrize("n", [2, 3, 5, 10, 20])
@pytest.mark.parametrize("alpha", [1, 3, 5, 9])
def test_laguerre_matches_scipy(n, alpha):
    x = np.linspace(0.0, 40.0, 17)
    ours = np.array([generalized_laguerre(n, float(alpha), xi) for xi in x])
    ref = eval_genlaguerre(n, alpha, x)
    npt.assert_allclose(ours, ref, rtol=1e-9, atol=1e-10 * np.max(np.abs(ref)))


def test_legendre_zero_zero_is_one():
    for x in np.linspace(-1.0, 1.0, 21):
        assert associated_legendre(0, 0, x) == 1.0


@pytest.mark.parametrize("l", [0, 1, 2, 3, 6])
def test_legendre_matches_scipy(l):
    x = np.linspace(-1.0, 1.0, 25)
    for m in range(l + 1):
        ours = np.array([associated_legendre(l, m, xi) for xi in x])
        ref = lpmv(m, l, x)
        npt.assert_allclose(ours, ref, rtol=1e-10, atol=1e-12 * max(1.0, np.max(np.abs(ref))))


def test_legendre_uses_absolute_order():
    npt.assert_allclose(associated_legendre(3, -2, 0.3), associated_legendre(3, 2, 0.3))


def test_legendre_order_above_degree_is_zero():
    assert associated_legendre(1, 2, 0.5) == 0.0


def test_legendre_is_finite_past_the_poles():
    # rounding can push cos(theta) a hair outside [-1, 1]
    for x in (np.nextafter(1.0, 2.0), np.nextafter(-1.0, -2.0), 1.0, -1.0):
        for l in range(1, 5):
            for m in range(1, l + 1):
                value = associated_legendre(l, m, x)
                assert np.isfinite(value)
                npt.assert_allclose(value, 0.0, atol=1e-6)
