import math

import numpy as np
import pytest

from polybasis.basis import _poly_util
from polybasis.geometry import ReferenceCell


def test_falling_factorial():
    for n in range(8):
        for k in range(10):
            assert _poly_util.falling_factorial(n, k) == math.perm(n, k)
    n = np.arange(6)[:, np.newaxis]
    k = np.arange(4)[np.newaxis, :]
    ref = np.array([[math.perm(a, b) for b in range(4)] for a in range(6)])
    assert np.array_equal(_poly_util.falling_factorial(n, k), ref)


def test_deriv_coefficients():
    # d^k/dx^k x^n at x compared with a central difference of the (k-1)th one
    tol = 1e-5
    h = (tol * 1e-3) ** 0.5
    for n in range(6):
        for k in range(1, n + 1):
            for x in np.linspace(0.1, 2, 20):

                def dk(j, t):
                    return _poly_util.falling_factorial(n, j) * t ** (n - j)

                cdiff = (dk(k - 1, x + h) - dk(k - 1, x - h)) / (2 * h)
                assert pytest.approx(dk(k, x), rel=tol, abs=1e-9) == cdiff


def test_volumes(cell):
    zero = (0,) * cell.dimension
    assert _poly_util.monomial_integral(cell, zero) == pytest.approx(cell.volume())


def test_known_integrals():
    tri = ReferenceCell.triangle()
    for a in range(6):
        # int_0^1 x^a (1 - x) dx
        assert _poly_util.monomial_integral(tri, (a, 0)) == pytest.approx(
            1 / ((a + 1) * (a + 2))
        )
    assert _poly_util.monomial_integral(tri, (1, 1)) == pytest.approx(1 / 24)
    assert _poly_util.monomial_integral(
        ReferenceCell.quadrilateral(), (1, 1)
    ) == pytest.approx(1 / 4)
    assert _poly_util.monomial_integral(
        ReferenceCell.tetrahedron(), (1, 0, 0)
    ) == pytest.approx(1 / 24)
    assert _poly_util.monomial_integral(
        ReferenceCell.prism(), (1, 0, 1)
    ) == pytest.approx(1 / 12)
    # pyramid centroid is at height 1/4
    pyr = ReferenceCell.pyramid()
    assert _poly_util.monomial_integral(pyr, (0, 0, 1)) == pytest.approx(1 / 12)
    assert _poly_util.monomial_integral(pyr, (1, 0, 0)) == pytest.approx(1 / 8)


def test_integrals_vector_version(cell):
    exps = np.array([(k,) * cell.dimension for k in range(4)], dtype=np.int64)
    vec = _poly_util.monomial_integrals(cell, exps)
    assert vec.shape == (4,)
    for row, val in zip(exps, vec):
        assert _poly_util.monomial_integral(cell, row) == pytest.approx(val)


def test_polyeval():
    exps = np.array([[[0, 0], [1, 0]], [[2, 1], [0, 3]]])
    coefs = np.array([[1.0, 2.0], [3.0, -1.0]])
    for x, y in [(0.5, 2.0), (-1.0, 0.3), (0.0, 0.0)]:
        got = _poly_util.polyeval(exps, coefs, np.array([x, y]))
        ref = np.array([[1.0, 2 * x], [3 * x**2 * y, -(y**3)]])
        assert got == pytest.approx(ref)

    # point stacks come first
    pts = np.random.default_rng(0).random((4, 3, 2))
    assert _poly_util.polyeval(exps, coefs, pts).shape == (4, 3, 2, 2)


def test_falling_factorial_past_int64():
    # 21! > 2**63
    assert _poly_util.falling_factorial(21, 21) == pytest.approx(
        float(math.factorial(21))
    )
    assert _poly_util.falling_factorial(30, 25) == pytest.approx(
        float(math.perm(30, 25))
    )
