from dataclasses import dataclass
import itertools

import numpy as np
from numpy.typing import NDArray

from polybasis.exceptions import DerivativeLayoutError, InvalidArgumentError
from polybasis.tensor import cumulative_size, derivative_tensor, slots


def _full_tensor_index(dimension: int, order: int) -> NDArray:
    """Slot indices of the full (symmetric) order-`order` tensor, an integer array
    of shape `(dimension,) * order`."""
    tensor = derivative_tensor(dimension, order)
    return np.array(
        [
            tensor.index_of_axes(axes)
            for axes in itertools.product(range(dimension), repeat=order)
        ],
        dtype=np.intp,
    ).reshape((dimension,) * order)


@dataclass(eq=False, frozen=True, init=False)
class DerivativeField:
    """
    A structured view of a flat derivative buffer. The last axis of `values` holds
    the partial derivatives of orders `0, ..., order` in the cumulative
    `DerivativeTensor` layout; all leading axes (basis index, point stack, range
    components) are carried along untouched.

    Reshaping goes through explicit index arrays, so the layout is checked on
    construction instead of being assumed.
    """

    dimension: int
    order: int
    values: NDArray

    def __init__(self, dimension: int, order: int, values: NDArray):
        if dimension < 0 or order < 0:
            raise InvalidArgumentError(
                f"Cannot build a derivative field of dimension {dimension} and"
                f" order {order}."
            )
        shape = np.shape(values)
        if len(shape) == 0 or shape[-1] != cumulative_size(dimension, order):
            raise DerivativeLayoutError(dimension, order, shape)
        object.__setattr__(self, "dimension", dimension)
        object.__setattr__(self, "order", order)
        object.__setattr__(self, "values", values)

    @property
    def shape(self) -> tuple[int, ...]:
        """The shape without the derivative axis."""
        return np.shape(self.values)[:-1]

    def _check_order(self, k: int):
        if not 0 <= k <= self.order:
            raise InvalidArgumentError(
                f"Derivatives of order {k} are not stored in a field of order"
                f" {self.order}."
            )

    def single(self, k: int) -> NDArray:
        """The compact order-`k` block, of shape
        `(*shape, derivative_tensor_size(dimension, k))`."""
        self._check_order(k)
        return self.values[..., slots(self.dimension, k)]

    def tensor(self, k: int) -> NDArray:
        """The order-`k` derivatives as a full symmetric tensor of shape
        `(*shape, *(dimension,) * k)`; entry `[..., i, j]` of the order 2 tensor is
        d^2/dx_i dx_j."""
        return self.single(k)[..., _full_tensor_index(self.dimension, k)]

    def function_values(self) -> NDArray:
        return self.tensor(0)

    def jacobian(self) -> NDArray:
        return self.tensor(1)

    def hessian(self) -> NDArray:
        return self.tensor(2)
