"""
The `polybasis.polynomial_basis` module provides the basis evaluation interface
used by finite elements: values, derivatives of one or all orders, Jacobians and
integrals of basis functions that are linear combinations of raw polynomials.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from polybasis.basis import Basis, Evaluator
from polybasis.coefficients import CoefficientMatrix, SparseCoefficientMatrix
from polybasis.config import BasisConfig
from polybasis.exceptions import CoefficientShapeError, PreconditionError
from polybasis.fields import DerivativeField

__all__ = ["PolynomialBasis", "PolynomialBasisWithMatrix"]


def __dir__() -> list[str]:
    return __all__


class PolynomialBasis:
    """
    A finite element basis given by a raw basis evaluator and a coefficient matrix
    referenced (not owned) by this object.

    Results put the basis index first, then the point stack, then the range
    component, then derivative slots: `evaluate(x, deriv)` for points `x` of shape
    `(*stack_shape, dimension)` has shape
    `(size(), *stack_shape, dim_range, cumulative_size(dimension, deriv))`.

    Instances are not copyable.

    Args:
        evaluator (Evaluator): evaluator of the raw basis.
        coefficient_matrix (CoefficientMatrix): the coefficients of the basis
            functions in terms of the raw basis.
        size (int): number of basis functions to use; at most
            `coefficient_matrix.size()`.
        config (BasisConfig | None, optional): evaluation options. Defaults to
            None, using the evaluator's.
    """

    def __init__(
        self,
        evaluator: Evaluator,
        coefficient_matrix: CoefficientMatrix,
        size: int,
        config: BasisConfig | None = None,
    ):
        self.config = evaluator.config if config is None else config
        self._evaluator = evaluator
        self._coeff_matrix = coefficient_matrix
        self._order = evaluator.order
        if self.config.checked and size > coefficient_matrix.size():
            raise PreconditionError(
                f"Basis of size {size} requested from a coefficient matrix with"
                f" {coefficient_matrix.size()} rows."
            )
        self._size = size

    def __copy__(self):
        raise TypeError(f"{type(self).__name__} objects cannot be copied.")

    def __deepcopy__(self, memo):
        raise TypeError(f"{type(self).__name__} objects cannot be copied.")

    def order(self) -> int:
        """The highest degree of the raw polynomials."""
        return self._order

    def size(self) -> int:
        """The number of basis functions."""
        return self._size

    @property
    def dimension(self) -> int:
        return self._evaluator.dimension

    @property
    def dim_range(self) -> int:
        return self._coeff_matrix.dim_range

    @property
    def evaluator(self) -> Evaluator:
        return self._evaluator

    @property
    def coefficient_matrix(self) -> CoefficientMatrix:
        return self._coeff_matrix

    def evaluate(
        self, x: ArrayLike, deriv: int = 0, out: NDArray | None = None
    ) -> NDArray:
        """Evaluates every basis function with all partial derivatives of orders
        `0, ..., deriv`.

        Args:
            x (ArrayLike): points of shape `(*stack_shape, dimension)`; any numbers
                convertible to `config.dtype`.
            deriv (int, optional): highest derivative order. Defaults to 0.
            out (NDArray | None, optional): buffer of shape
                `(size(), *stack_shape, dim_range, cumulative_size(dimension, deriv))`.
                Defaults to None.

        Returns:
            NDArray: the derivative buffer, in cumulative `DerivativeTensor` layout.
        """
        raw = self._evaluator.evaluate(x, deriv)
        return self._coeff_matrix.mult(raw, out, size=self._size)

    def evaluate_single(
        self, x: ArrayLike, deriv: int, out: NDArray | None = None
    ) -> NDArray:
        """Like `evaluate()`, but only the derivatives of order exactly `deriv`; the
        last axis has length `derivative_tensor_size(dimension, deriv)`.
        """
        raw = self._evaluator.evaluate(x, deriv)
        return self._coeff_matrix.mult_single(
            raw, deriv, self.dimension, out, size=self._size
        )

    def evaluate_function(self, x: ArrayLike, out: NDArray | None = None) -> NDArray:
        """Plain function values, an array of shape `(size(), *stack_shape,
        dim_range)`."""
        values = self.evaluate_single(x, 0)[..., 0]
        if out is None:
            return values
        if self.config.checked and out.shape != values.shape:
            raise PreconditionError(
                f"Output buffer has shape {out.shape}, expected {values.shape}."
            )
        out[...] = values
        return out

    def jacobian(self, x: ArrayLike, out: NDArray | None = None) -> NDArray:
        """The Jacobian of each basis function, an array of shape
        `(size(), *stack_shape, dim_range, dimension)` with entry `[i, ..., r, j]`
        the derivative of component `r` along axis `j`.
        """
        # the order 1 slots are the axes in order, so no reshaping is needed
        return self.evaluate_single(x, 1, out)

    def derivatives(self, x: ArrayLike, deriv: int) -> DerivativeField:
        """`evaluate(x, deriv)` wrapped in a `DerivativeField` for structured
        access to each derivative order."""
        return DerivativeField(self.dimension, deriv, self.evaluate(x, deriv))

    def hessian(self, x: ArrayLike) -> NDArray:
        """The full symmetric Hessian of each basis function, an array of shape
        `(size(), *stack_shape, dim_range, dimension, dimension)`."""
        return self.derivatives(x, 2).hessian()

    def integrate(self, out: NDArray | None = None) -> NDArray:
        """The integral of each basis function over the reference cell, an array of
        shape `(size(), dim_range)`."""
        raw = self._evaluator.integrate()[:, np.newaxis]
        values = self._coeff_matrix.mult(raw, size=self._size)[..., 0]
        if out is None:
            return values
        if self.config.checked and out.shape != values.shape:
            raise PreconditionError(
                f"Output buffer has shape {out.shape}, expected {values.shape}."
            )
        out[...] = values
        return out


class PolynomialBasisWithMatrix(PolynomialBasis):
    """
    A `PolynomialBasis` that owns its coefficient matrix. The basis is empty
    (`size() == 0`) until `fill()` is called.

    Args:
        basis (Basis | Evaluator): the raw basis, or an evaluator wrapping it.
        coefficient_matrix (CoefficientMatrix | None, optional): the (unfilled)
            store to own. Defaults to None, creating a `SparseCoefficientMatrix`.
        dim_range (int, optional): number of components of each basis function,
            used when `coefficient_matrix` is None. Defaults to 1.
        config (BasisConfig | None, optional): evaluation options. Defaults to
            None.
    """

    def __init__(
        self,
        basis: Basis | Evaluator,
        coefficient_matrix: CoefficientMatrix | None = None,
        dim_range: int = 1,
        config: BasisConfig | None = None,
    ):
        evaluator = basis if isinstance(basis, Evaluator) else Evaluator(basis, config)
        if coefficient_matrix is None:
            coefficient_matrix = SparseCoefficientMatrix(
                dim_range, config=evaluator.config if config is None else config
            )
        super().__init__(evaluator, coefficient_matrix, 0, config)

    def fill(self, matrix: ArrayLike, size: int | None = None):
        """Fills the coefficient matrix from a dense matrix of shape
        `(rows * dim_range, evaluator.size())`.

        Args:
            matrix (ArrayLike): the coefficients; row `i * dim_range + r` is
                component `r` of basis function `i`.
            size (int | None, optional): use only the first `size` functions
                (at most `rows`). Defaults to None, using all rows.
        """
        columns = self._evaluator.size()
        shape = np.shape(matrix)
        if len(shape) != 2 or shape[1] != columns:
            raise CoefficientShapeError(shape, self.dim_range, columns)
        self._coeff_matrix.fill(matrix, size)
        self._size = self._coeff_matrix.size() if size is None else size
