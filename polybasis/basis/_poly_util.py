import math

import numpy as np
from numpy.typing import ArrayLike, NDArray

from polybasis.geometry import ReferenceCell


def falling_factorial(n: ArrayLike, k: ArrayLike) -> NDArray:
    """Returns n (n-1) ... (n-k+1) elementwise. This is the coefficient of
    d^k/dx^k x^n = n!/(n-k)! x^(n-k), and vanishes whenever k > n.

    The product is accumulated in float64; int64 overflows from 21! on.
    """
    n, k = np.broadcast_arrays(np.asarray(n, dtype=np.int64), np.asarray(k))
    res = np.ones(n.shape, dtype=np.float64)
    for i in range(int(k.max(initial=0))):
        res = np.where(i < k, res * (n - i), res)
    return res


def _simplex_integ(exponents) -> float:
    """Integrates x^a over the unit simplex {x >= 0, sum(x) <= 1}:
    prod(a_i!) / (|a| + d)!
    """
    num = math.prod(math.factorial(a) for a in exponents)
    return num / math.factorial(sum(exponents) + len(exponents))


def _cube_integ(exponents) -> float:
    """Integrates x^a over [0,1]^d"""
    return 1 / math.prod(a + 1 for a in exponents)


def _pyramid_integ(exponents) -> float:
    """Integrates x^a y^b z^c over {0 <= z <= 1, 0 <= x,y <= 1-z}"""
    a, b, c = exponents
    # inner integrals give (1-z)^(a+b+2) / ((a+1)(b+1)); the rest is a beta function
    beta = (
        math.factorial(c)
        * math.factorial(a + b + 2)
        / math.factorial(a + b + c + 3)
    )
    return beta / ((a + 1) * (b + 1))


def monomial_integral(cell: ReferenceCell, exponents) -> float:
    """Returns the exact integral of the monomial x^exponents over `cell`."""
    exponents = tuple(exponents)
    if cell.type == "cube":
        return _cube_integ(exponents)
    if cell.type == "simplex":
        return _simplex_integ(exponents)
    if cell.type == "prism":
        return _simplex_integ(exponents[:2]) * _cube_integ(exponents[2:])
    return _pyramid_integ(exponents)


def monomial_integrals(cell: ReferenceCell, exponents: NDArray) -> NDArray:
    """Vector version of `monomial_integral` over the rows of an exponent array of
    shape `(n, dimension)`."""
    return np.array(
        [monomial_integral(cell, row) for row in np.asarray(exponents)],
        dtype=np.float64,
    )


def polyeval(exponents: NDArray, coefs: NDArray, x: NDArray) -> NDArray:
    """Evaluates the terms coefs[j] * x^exponents[j].

    Args:
        exponents (NDArray): integer array of shape `(*terms_shape, dimension)`.
        coefs (NDArray): array of shape `terms_shape`.
        x (NDArray): points of shape `(*stack_shape, dimension)`.

    Returns:
        NDArray: an array of shape `(*stack_shape, *terms_shape)`.
    """
    terms_ndim = coefs.ndim
    # (*stack, 1,..,1, dim) ** (*terms, dim) -> product over dim
    xb = x[..., *((np.newaxis,) * terms_ndim), :]
    return coefs * np.prod(xb**exponents, axis=-1)
