import numpy as np
from numpy.typing import ArrayLike, NDArray

from polybasis.basis.basis import Basis
from polybasis.config import DEFAULT_CONFIG, BasisConfig
from polybasis.exceptions import InvalidArgumentError, PreconditionError
from polybasis.tensor import cumulative_size, derivative_tensor_size


class Evaluator:
    """
    Evaluates a raw `Basis` at points, producing the flat derivative buffers that
    coefficient matrices transform into finite element values.

    Points are cast to `config.dtype` component-wise, so any array-like of numbers
    is accepted. The evaluator keeps no point-dependent state: every call either
    allocates its result or writes into the caller's `out` buffer, so one instance
    can be shared between threads as long as the `out` buffers are not.

    Args:
        basis (Basis): the raw basis, usually a `MonomialBasis`.
        config (BasisConfig | None, optional): evaluation options. Defaults to
            None, which uses `DEFAULT_CONFIG`.
    """

    def __init__(self, basis: Basis, config: BasisConfig | None = None):
        self.basis = basis
        self.config = DEFAULT_CONFIG if config is None else config
        self.order = basis.order
        self.dimension = basis.dimension

    def size(self) -> int:
        return self.basis.size(self.order)

    def cast_points(self, x: ArrayLike) -> NDArray:
        """Converts `x` to an array of `config.dtype` of shape
        `(*stack_shape, dimension)`."""
        x = np.asarray(x, dtype=self.config.dtype)
        if self.config.checked and (x.ndim == 0 or x.shape[-1] != self.dimension):
            raise PreconditionError(
                f"Points of shape {x.shape} do not have {self.dimension} coordinates."
            )
        return x

    def _check_out(self, out: NDArray | None, shape: tuple[int, ...]):
        if out is not None and self.config.checked and out.shape != shape:
            raise PreconditionError(
                f"Output buffer has shape {out.shape}, expected {shape}."
            )

    def evaluate(
        self, x: ArrayLike, deriv: int = 0, out: NDArray | None = None
    ) -> NDArray:
        """
        Evaluates every raw basis function with its partial derivatives of orders
        `0, ..., deriv`.

        Returns:
            NDArray: an array of shape
                `(size(), *stack_shape, cumulative_size(dimension, deriv))`.
        """
        if deriv < 0:
            raise InvalidArgumentError(
                f"Derivative order must be non-negative, got {deriv}."
            )
        x = self.cast_points(x)
        self._check_out(
            out,
            (self.size(), *x.shape[:-1], cumulative_size(self.dimension, deriv)),
        )
        return self.basis.evaluate(x, deriv, out)

    def evaluate_single(
        self, x: ArrayLike, deriv: int, out: NDArray | None = None
    ) -> NDArray:
        """
        Evaluates only the partial derivatives of order exactly `deriv`; a `Basis`
        such as `MonomialBasis` computes these without the lower orders. Used by
        callers that need one order of the raw basis, e.g.
        `interpolation.vandermonde()`.

        Returns:
            NDArray: an array of shape
                `(size(), *stack_shape, derivative_tensor_size(dimension, deriv))`.
        """
        if deriv < 0:
            raise InvalidArgumentError(
                f"Derivative order must be non-negative, got {deriv}."
            )
        x = self.cast_points(x)
        self._check_out(
            out,
            (
                self.size(),
                *x.shape[:-1],
                derivative_tensor_size(self.dimension, deriv),
            ),
        )
        return self.basis.evaluate_single(x, deriv, out)

    def integrate(self) -> NDArray:
        """The exact integrals of the raw basis functions over the reference cell,
        an array of shape `(size(),)`."""
        return self.basis.integrate()

    def __repr__(self) -> str:
        return f"Evaluator({self.basis!r})"
