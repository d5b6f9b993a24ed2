import logging
import math
import typing
import warnings

import numpy as np
from numpy.typing import ArrayLike, NDArray

from polybasis.basis import _poly_util
from polybasis.basis.basis import Basis
from polybasis.config import DEFAULT_CONFIG, BasisConfig
from polybasis.exceptions import InvalidArgumentError, UnstableOrderWarning
from polybasis.geometry import ReferenceCell
from polybasis.tensor import (
    MultiIndex,
    cumulative_size,
    derivative_tensor,
    multi_indices_up_to,
    slots,
)

logger = logging.getLogger(__name__)


class MonomialBasis(Basis):
    """All monomials $x^\\alpha$ with $|\\alpha| \\le$ `order` in `cell.dimension`
    variables, ordered by increasing degree and, within a degree, by descending
    lexicographic exponents: `1, x, y, x^2, xy, y^2, ...` in 2D.

    Derivatives are exact: $\\partial^\\beta x^\\alpha$ is the monomial
    $x^{\\alpha-\\beta}$ times the falling factorials
    $\\prod_i \\alpha_i! / (\\alpha_i - \\beta_i)!$, or zero unless
    $\\beta \\le \\alpha$.
    """

    def __init__(
        self,
        cell: ReferenceCell,
        order: int,
        config: BasisConfig | None = None,
    ):
        super().__init__()
        if order < 0:
            raise InvalidArgumentError(
                f"Monomial order must be non-negative, got {order}."
            )
        self.cell = cell
        self._order = order
        self.config = DEFAULT_CONFIG if config is None else config
        if order > self.config.max_stable_order:
            warnings.warn(
                f"Monomial basis of order {order} exceeds max_stable_order"
                f" {self.config.max_stable_order}; interpolation matrices built on it"
                " may be ill-conditioned.",
                UnstableOrderWarning,
                stacklevel=2,
            )

        self._multi_indices = tuple(multi_indices_up_to(cell.dimension, order))
        self._exponents = np.array(
            [mi.exponents for mi in self._multi_indices], dtype=np.int64
        ).reshape(len(self._multi_indices), cell.dimension)

        # derivative tables depend only on the order, so they are built once
        self._derivative_tables: dict[int, tuple[NDArray, NDArray]] = dict()
        self._integrals: NDArray | None = None

    @property
    @typing.override
    def dimension(self) -> int:
        return self.cell.dimension

    @property
    @typing.override
    def order(self) -> int:
        return self._order

    @typing.override
    def size(self, order: int | None = None) -> int:
        if order is None:
            order = self._order
        if order < 0:
            raise InvalidArgumentError(f"order must be non-negative, got {order}.")
        return math.comb(self.dimension + order, order)

    def multi_indices(self) -> tuple[MultiIndex, ...]:
        """The exponents of each monomial, in basis order."""
        return self._multi_indices

    def exponents(self) -> NDArray:
        """The exponents as an integer array of shape `(size(), dimension)`."""
        return self._exponents

    def derivative_table(self, deriv: int) -> tuple[NDArray, NDArray]:
        """
        Returns the arrays `(E, C)` such that the order-`deriv` derivative stored in
        slot `s` of monomial `j` is `C[j, s] * x^E[j, s]`.

        Args:
            deriv (int): the derivative order.

        Returns:
            tuple[NDArray, NDArray]: exponents `E` of shape
                `(size(), derivative_tensor_size(dimension, deriv), dimension)` and
                coefficients `C` of shape
                `(size(), derivative_tensor_size(dimension, deriv))`.
        """
        if deriv in self._derivative_tables:
            return self._derivative_tables[deriv]

        tensor = derivative_tensor(self.dimension, deriv)
        betas = np.array(
            [mi.exponents for mi in tensor], dtype=np.int64
        ).reshape(tensor.size, self.dimension)
        alphas = self._exponents[:, np.newaxis, :]

        coefs = np.prod(
            _poly_util.falling_factorial(alphas, betas[np.newaxis, :, :]), axis=-1
        ).astype(np.float64)
        # where beta > alpha the coefficient is already zero, so any exponent will do
        exps = np.maximum(alphas - betas[np.newaxis, :, :], 0)
        exps.setflags(write=False)
        coefs.setflags(write=False)

        logger.debug(
            "built order %d derivative table for %d monomials in dimension %d",
            deriv,
            len(self._multi_indices),
            self.dimension,
        )
        self._derivative_tables[deriv] = (exps, coefs)
        return exps, coefs

    def _evaluate_order(self, x: NDArray, deriv: int) -> NDArray:
        exps, coefs = self.derivative_table(deriv)
        # (*stack, n, s) -> (n, *stack, s)
        return np.moveaxis(_poly_util.polyeval(exps, coefs, x), -2, 0)

    @staticmethod
    def _result_dtype(x: NDArray):
        return x.dtype if np.issubdtype(x.dtype, np.inexact) else np.float64

    @typing.override
    def evaluate(
        self, x: ArrayLike, deriv: int, out: NDArray | None = None
    ) -> NDArray:
        """Evaluates the monomials and their derivatives of orders `0, ..., deriv`.

        Args:
            x (ArrayLike): points of shape `(*stack_shape, dimension)`.
            deriv (int): the highest derivative order.
            out (NDArray | None, optional): buffer of shape
                `(size(), *stack_shape, cumulative_size(dimension, deriv))`.
                Defaults to None.

        Returns:
            NDArray: the raw buffer, with the order-`k` block at
                `slots(dimension, k)` of the last axis.
        """
        if deriv < 0:
            raise InvalidArgumentError(
                f"Derivative order must be non-negative, got {deriv}."
            )
        x = np.asarray(x)
        if out is None:
            out = np.empty(
                (self.size(), *x.shape[:-1], cumulative_size(self.dimension, deriv)),
                dtype=self._result_dtype(x),
            )
        for k in range(deriv + 1):
            out[..., slots(self.dimension, k)] = self._evaluate_order(x, k)
        return out

    @typing.override
    def evaluate_single(
        self, x: ArrayLike, deriv: int, out: NDArray | None = None
    ) -> NDArray:
        if deriv < 0:
            raise InvalidArgumentError(
                f"Derivative order must be non-negative, got {deriv}."
            )
        x = np.asarray(x)
        if out is None:
            return self._evaluate_order(x, deriv).astype(
                self._result_dtype(x), copy=False
            )
        out[...] = self._evaluate_order(x, deriv)
        return out

    @typing.override
    def integrate(self) -> NDArray:
        if self._integrals is None:
            self._integrals = _poly_util.monomial_integrals(self.cell, self._exponents)
            self._integrals.setflags(write=False)
        return self._integrals

    def __repr__(self) -> str:
        return f"MonomialBasis({self.cell!r}, order={self._order})"
