"""
Builders for the dense coefficient matrices passed to
`PolynomialBasisWithMatrix.fill()`.

Only small dense systems are solved here (one row per basis function), with
`numpy.linalg`.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from polybasis.basis import Evaluator, MonomialBasis, _poly_util
from polybasis.exceptions import BasisSizeMismatchError, SingularInterpolationError

__all__ = [
    "vandermonde",
    "nodal_coefficients",
    "mass_matrix",
    "orthonormal_coefficients",
    "l2_project_coefficients",
]


def __dir__() -> list[str]:
    return __all__


def vandermonde(evaluator: Evaluator, points: ArrayLike) -> NDArray:
    """Returns `V[k, j]`, the value of raw basis function `j` at `points[k]`.

    Args:
        evaluator (Evaluator): the raw basis evaluator.
        points (ArrayLike): an array of shape `(n_points, dimension)`.

    Returns:
        NDArray: an array of shape `(n_points, evaluator.size())`.
    """
    return evaluator.evaluate_single(points, 0)[..., 0].T


def nodal_coefficients(evaluator: Evaluator, points: ArrayLike) -> NDArray:
    """
    Coefficients of the Lagrange basis for point evaluation at `points`: basis
    function `i` is one at `points[i]` and zero at every other point.

    Raises:
        BasisSizeMismatchError: if the number of points differs from the number of
            raw basis functions.
        SingularInterpolationError: if the points do not determine a unique
            interpolant (e.g. three collinear points for a linear triangle).

    Returns:
        NDArray: the coefficient matrix `inv(V).T` for the Vandermonde matrix `V`.
    """
    V = vandermonde(evaluator, points)
    if V.shape[0] != V.shape[1]:
        raise BasisSizeMismatchError(V.shape[1], V.shape[0], "a nodal basis")
    try:
        return np.linalg.inv(V).T
    except np.linalg.LinAlgError as e:
        raise SingularInterpolationError(
            f"Interpolation matrix for {V.shape[0]} points is singular."
        ) from e


def mass_matrix(basis: MonomialBasis) -> NDArray:
    """The exact mass matrix `M[i, j] = int m_i m_j` of a monomial basis over its
    reference cell. The product of two monomials is a monomial, so no quadrature
    is needed."""
    exps = basis.exponents()
    n = exps.shape[0]
    # exps[i] + exps[j] for all pairs
    products = (exps[:, np.newaxis, :] + exps[np.newaxis, :, :]).reshape(
        n * n, basis.dimension
    )
    return _poly_util.monomial_integrals(basis.cell, products).reshape(n, n)


def orthonormal_coefficients(basis: MonomialBasis) -> NDArray:
    """
    Coefficients of the L2-orthonormal basis obtained by Gram-Schmidt on the
    monomials in basis order. The matrix is lower triangular, so the first
    `basis.size(k)` rows span exactly the polynomials of degree `<= k`, and
    `fill(C, basis.size(k))` gives the orthonormal basis of degree `k`.

    Raises:
        SingularInterpolationError: if the mass matrix is numerically not
            positive definite (very high orders).
    """
    try:
        L = np.linalg.cholesky(mass_matrix(basis))
    except np.linalg.LinAlgError as e:
        raise SingularInterpolationError(
            f"Mass matrix of {basis!r} is not numerically positive definite."
        ) from e
    return np.linalg.inv(L)


def l2_project_coefficients(basis: MonomialBasis, moments: ArrayLike) -> NDArray:
    """
    Monomial coefficients of the L2 projection of a function `f` onto the
    monomial basis, given its moments `b[j] = int f m_j` (computed by the caller,
    typically with a quadrature rule of degree `2 * basis.order`).

    Args:
        basis (MonomialBasis): the basis to project onto.
        moments (ArrayLike): the moments, shape `(basis.size(), ...)`.

    Returns:
        NDArray: the coefficients `M^-1 b`, of the same shape as `moments`.
    """
    moments = np.asarray(moments, dtype=np.float64)
    if moments.ndim == 0 or moments.shape[0] != basis.size():
        raise BasisSizeMismatchError(
            basis.size(), moments.shape[0] if moments.ndim else 0, "an L2 projection"
        )
    return np.linalg.solve(mass_matrix(basis), moments)
