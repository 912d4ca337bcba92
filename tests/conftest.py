"""Shared expression graphs for the test suite."""

import pytest

from dagdiff.ad import scalar, add, mult, constmult, constpow, constadd, exp


@pytest.fixture
def gaussian_bump():
    """f = x1 * exp(-0.5 * (x1^2 + x2^2))"""
    x1 = scalar("x1")
    x2 = scalar("x2")
    inner = constmult(-0.5, add(constpow(x1, 2), constpow(x2, 2)))
    return mult(x1, exp(inner))


@pytest.fixture
def bowl():
    """g = x^2 + (y+2)^2 + (z-10)^2"""
    x = scalar("x")
    y = scalar("y")
    z = scalar("z")
    xsq = constpow(x, 2)
    ysq = constpow(constadd(2, y), 2)
    zsq = constpow(constadd(-10, z), 2)
    return add(add(xsq, ysq), zsq)


def approx(expected, actual, epsilon=0.003):
    return abs(expected - actual) <= epsilon
