import abc
import logging
import typing

import numpy as np
import scipy.sparse
from numpy.typing import ArrayLike, NDArray

from polybasis.config import DEFAULT_CONFIG, BasisConfig
from polybasis.exceptions import (
    CoefficientShapeError,
    InvalidArgumentError,
    PreconditionError,
)
from polybasis.tensor import cumulative_size, slots

logger = logging.getLogger(__name__)


class CoefficientMatrix(abc.ABC):
    """
    Expresses finite element basis functions as linear combinations of raw basis
    functions (usually monomials).

    Each finite element function `i` owns a block of `dim_range` consecutive rows:
    row `i * dim_range + r` holds the raw-basis coefficients of its component `r`.
    A dense matrix of shape `(rows * dim_range, columns)` is read in with `fill()`;
    after that the matrix is not modified and may be shared freely.

    Raw buffers have shape `(columns, *stack_shape, n_slots)`, the result of
    `mult()` has shape `(size, *stack_shape, dim_range, n_slots)`.

    Args:
        dim_range (int, optional): number of components of each finite element
            function. Defaults to 1.
        config (BasisConfig | None, optional): evaluation options. Defaults to
            None, which uses `DEFAULT_CONFIG`.
    """

    def __init__(self, dim_range: int = 1, config: BasisConfig | None = None):
        if dim_range < 1:
            raise InvalidArgumentError(f"dim_range must be positive, got {dim_range}.")
        self.dim_range = dim_range
        self.config = DEFAULT_CONFIG if config is None else config
        self._rows = 0
        self._columns = 0
        self._filled = False

    def fill(self, matrix: ArrayLike, size: int | None = None):
        """Reads the coefficients from a dense matrix, replacing any previous fill.

        Args:
            matrix (ArrayLike): a matrix of shape `(rows * dim_range, columns)`,
                typically the inverse of an interpolation matrix.
            size (int | None, optional): if given, the number of functions the
                caller intends to use, which must not exceed `rows`.

        Raises:
            CoefficientShapeError: when the row count is not a multiple of
                `dim_range`.
            PreconditionError: when `size` exceeds the number of filled rows.
        """
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.ndim != 2 or matrix.shape[0] % self.dim_range != 0:
            raise CoefficientShapeError(matrix.shape, self.dim_range)
        rows = matrix.shape[0] // self.dim_range
        if size is not None and size > rows:
            raise PreconditionError(
                f"Requested {size} basis functions, but only {rows} rows were filled."
            )
        self._store(matrix)
        self._rows = rows
        self._columns = matrix.shape[1]
        self._filled = True

    @abc.abstractmethod
    def _store(self, matrix: NDArray):
        """Keeps the (validated) dense matrix in the implementation's format."""
        pass

    @abc.abstractmethod
    def _apply(self, raw: NDArray, rows: int) -> NDArray:
        """Multiplies the first `rows` scalar rows by `raw` of shape
        `(columns, m)`, returning an array of shape `(rows, m)`."""
        pass

    def size(self) -> int:
        """The number of finite element functions filled."""
        return self._rows

    def columns(self) -> int:
        """The number of raw basis functions the matrix combines."""
        return self._columns

    def is_filled(self) -> bool:
        return self._filled

    def _require_filled(self):
        if not self._filled:
            raise PreconditionError("Coefficient matrix used before fill().")

    @abc.abstractmethod
    def nonzeros(self) -> int:
        """Number of stored nonzero coefficients."""
        pass

    def _resolve_size(self, size: int | None) -> int:
        if size is None:
            return self._rows
        if self.config.checked and size > self._rows:
            raise PreconditionError(
                f"Requested {size} basis functions, but only {self._rows} rows"
                " were filled."
            )
        return size

    def mult(
        self,
        raw: ArrayLike,
        out: NDArray | None = None,
        size: int | None = None,
    ) -> NDArray:
        """Transforms a raw buffer of every derivative slot it holds.

        Args:
            raw (ArrayLike): raw values of shape `(columns(), *stack_shape, n_slots)`.
            out (NDArray | None, optional): buffer of shape
                `(size, *stack_shape, dim_range, n_slots)`. Defaults to None.
            size (int | None, optional): the number of finite element functions to
                compute; rows past it are never read. Defaults to None, meaning
                `size()`.

        Returns:
            NDArray: the finite element buffer.
        """
        raw = np.asarray(raw)
        if self.config.checked:
            self._require_filled()
            if raw.ndim == 0 or raw.shape[0] != self._columns:
                raise PreconditionError(
                    f"Raw buffer of shape {raw.shape} does not match the"
                    f" {self._columns} columns of the coefficient matrix."
                )
        size = self._resolve_size(size)
        trailing = raw.shape[1:]
        res = self._apply(raw.reshape(self._columns, -1), size * self.dim_range)
        # (size, dim_range, *stack, n_slots) -> (size, *stack, dim_range, n_slots)
        res = np.moveaxis(res.reshape(size, self.dim_range, *trailing), 1, -2)
        if out is None:
            return np.ascontiguousarray(res)
        if self.config.checked and out.shape != res.shape:
            raise PreconditionError(
                f"Output buffer has shape {out.shape}, expected {res.shape}."
            )
        out[...] = res
        return out

    def mult_single(
        self,
        raw: ArrayLike,
        deriv: int,
        dimension: int,
        out: NDArray | None = None,
        size: int | None = None,
    ) -> NDArray:
        """Like `mult()`, but only transforms the derivatives of order `deriv`.

        Args:
            raw (ArrayLike): a cumulative raw buffer holding at least the orders
                `0, ..., deriv` in `dimension` variables.
            deriv (int): the derivative order to transform.
            dimension (int): the dimension of the reference cell.

        Returns:
            NDArray: an array of shape
                `(size, *stack_shape, dim_range, derivative_tensor_size(dimension,
                deriv))`.
        """
        raw = np.asarray(raw)
        if self.config.checked and (
            raw.ndim == 0 or raw.shape[-1] < cumulative_size(dimension, deriv)
        ):
            raise PreconditionError(
                f"Raw buffer of shape {raw.shape} does not hold the derivatives of"
                f" order {deriv} in dimension {dimension}."
            )
        return self.mult(raw[..., slots(dimension, deriv)], out, size)


class DenseCoefficientMatrix(CoefficientMatrix):
    """Stores every coefficient; the better choice for small or full matrices."""

    @typing.override
    def _store(self, matrix: NDArray):
        self._matrix = matrix.copy()
        self._matrix.setflags(write=False)

    @typing.override
    def _apply(self, raw: NDArray, rows: int) -> NDArray:
        return self._matrix[:rows] @ raw

    @typing.override
    def nonzeros(self) -> int:
        return int(np.count_nonzero(self._matrix)) if self._filled else 0

    def dense(self) -> NDArray:
        self._require_filled()
        return self._matrix


class SparseCoefficientMatrix(CoefficientMatrix):
    """Stores only the coefficients with magnitude above `zero_tolerance`, as a
    `scipy.sparse.csr_matrix`. Nodal bases expressed in monomials are often mostly
    zero, and each row only pays for its nonzero entries.

    Args:
        dim_range (int, optional): Defaults to 1.
        zero_tolerance (float, optional): coefficients with `|c| <= zero_tolerance`
            are dropped on `fill()`. Defaults to 1e-14.
        config (BasisConfig | None, optional): Defaults to None.
    """

    def __init__(
        self,
        dim_range: int = 1,
        zero_tolerance: float = 1e-14,
        config: BasisConfig | None = None,
    ):
        super().__init__(dim_range, config)
        self.zero_tolerance = zero_tolerance

    @typing.override
    def _store(self, matrix: NDArray):
        # NaN compares false, so it is kept and stays visible in results
        kept = np.where(np.abs(matrix) <= self.zero_tolerance, 0.0, matrix)
        self._matrix = scipy.sparse.csr_matrix(kept)
        self._matrix.eliminate_zeros()
        logger.debug(
            "filled sparse coefficient matrix %s with %d of %d entries nonzero",
            matrix.shape,
            self._matrix.nnz,
            matrix.size,
        )

    @typing.override
    def _apply(self, raw: NDArray, rows: int) -> NDArray:
        return np.asarray(self._matrix[:rows] @ raw)

    @typing.override
    def nonzeros(self) -> int:
        return int(self._matrix.nnz) if self._filled else 0

    def dense(self) -> NDArray:
        self._require_filled()
        return self._matrix.toarray()
