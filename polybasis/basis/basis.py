import abc
import warnings

from numpy.typing import NDArray

from polybasis.tensor import slots


class Basis(abc.ABC):
    """
    A set of raw (generating) polynomials on a reference cell, typically the
    monomials. Finite element bases are linear combinations of these, built by
    `PolynomialBasis` through a coefficient matrix.

    Values are laid out as `(n_functions, *stack_shape, n_slots)`: the basis axis
    first, the point stack in the middle, and the derivative slots (in
    `DerivativeTensor` ordering) last.
    """

    def _dev_warn(self, message: str):
        """To be used by developers, only.

        Called by the base class to warn about default (most likely unoptimized)
        strategies, e.g. `evaluate_single()` computing every lower order and
        discarding it. Override to suppress.
        """
        warnings.warn(f"Basis developer message: {message}")

    @property
    @abc.abstractmethod
    def dimension(self) -> int:
        """The dimension of the reference cell."""
        pass

    @property
    @abc.abstractmethod
    def order(self) -> int:
        """The highest polynomial degree in the basis."""
        pass

    @abc.abstractmethod
    def size(self, order: int | None = None) -> int:
        """
        Args:
            order (int | None, optional): the polynomial degree. Defaults to None,
                meaning `self.order`.

        Returns:
            int: the number of basis functions of degree `<= order`.
        """
        pass

    @abc.abstractmethod
    def evaluate(self, x: NDArray, deriv: int, out: NDArray | None = None) -> NDArray:
        """
        Evaluates every basis function and all its partial derivatives of orders
        `0, ..., deriv` at the points `x`.

        Args:
            x (NDArray): points of shape `(*stack_shape, dimension)`.
            deriv (int): the highest derivative order.
            out (NDArray | None, optional): a buffer of shape
                `(size(), *stack_shape, cumulative_size(dimension, deriv))`
                to write into. Defaults to None, allocating a new array.

        Returns:
            NDArray: the filled buffer.
        """
        pass

    def evaluate_single(
        self, x: NDArray, deriv: int, out: NDArray | None = None
    ) -> NDArray:
        """
        Like `evaluate()`, but only the partial derivatives of order exactly
        `deriv`; the last axis has length `derivative_tensor_size(dimension, deriv)`.
        """
        self._dev_warn(
            "Basis.evaluate_single() called, which delegates to evaluate()"
        )
        full = self.evaluate(x, deriv)[..., slots(self.dimension, deriv)]
        if out is None:
            return full
        out[...] = full
        return out

    @abc.abstractmethod
    def integrate(self) -> NDArray:
        """
        Returns:
            NDArray: the exact integral of each basis function over the reference
                cell, an array of shape `(size(),)`.
        """
        pass
