"""
Combinatorics of symmetric derivative tensors.

The partial derivatives of order `k` of a function of `d` variables are indexed by
the multi-indices of total degree `k`. Mixed partials commute, so only
`C(d + k - 1, k)` of them are independent. `DerivativeTensor` fixes the order in
which these components are stored (descending lexicographic order of the
multi-indices; `xx, xy, yy` in 2D), and the cumulative layout stores orders
`0, 1, ..., k` one after another.

Downstream code reshapes flat derivative buffers with this ordering, so it must
never change.
"""

import functools
import math
import collections.abc as colltypes

from polybasis.exceptions import InvalidArgumentError
from .multiindex import MultiIndex, multi_indices, _check_nonnegative

__all__ = [
    "DerivativeTensor",
    "derivative_tensor",
    "derivative_tensor_size",
    "cumulative_size",
    "offset",
    "slots",
]


def __dir__() -> list[str]:
    return __all__


def derivative_tensor_size(dimension: int, order: int) -> int:
    """Number of independent partial derivatives of order `order` in `dimension`
    variables, the multiset coefficient C(dimension + order - 1, order).
    """
    _check_nonnegative(dimension=dimension, order=order)
    if order == 0:
        return 1
    return math.comb(dimension + order - 1, order)


def cumulative_size(dimension: int, order: int) -> int:
    """Number of partial derivatives of all orders `0, ..., order`."""
    _check_nonnegative(dimension=dimension, order=order)
    return math.comb(dimension + order, order)


def offset(dimension: int, order: int) -> int:
    """Position of the first order-`order` slot in the cumulative layout."""
    _check_nonnegative(dimension=dimension, order=order)
    if order == 0:
        return 0
    return cumulative_size(dimension, order - 1)


def slots(dimension: int, order: int) -> slice:
    """The slice of the cumulative layout holding the derivatives of order `order`."""
    start = offset(dimension, order)
    return slice(start, start + derivative_tensor_size(dimension, order))


class DerivativeTensor:
    """The storage layout of the order-`order` partial derivatives in `dimension`
    variables. Use `derivative_tensor()` to get a shared, cached instance.

    Args:
        dimension (int): the number of variables.
        order (int): the derivative order.
    """

    def __init__(self, dimension: int, order: int):
        _check_nonnegative(dimension=dimension, order=order)
        self.dimension = dimension
        self.order = order
        self._multi_indices = tuple(multi_indices(dimension, order))
        self._slot_of = {mi: slot for slot, mi in enumerate(self._multi_indices)}
        self.size = len(self._multi_indices)

    def index(self, multi_index: MultiIndex | colltypes.Iterable[int]) -> int:
        """Returns the slot of `multi_index`."""
        if not isinstance(multi_index, MultiIndex):
            multi_index = MultiIndex(multi_index)
        try:
            return self._slot_of[multi_index]
        except KeyError:
            raise InvalidArgumentError(
                f"{multi_index} is not a derivative of order {self.order} in"
                f" dimension {self.dimension}."
            ) from None

    def multi_index(self, slot: int) -> MultiIndex:
        """Returns the multi-index stored at `slot`; inverse of `index()`."""
        if not 0 <= slot < self.size:
            raise InvalidArgumentError(
                f"slot {slot} out of range for a derivative tensor of size {self.size}."
            )
        return self._multi_indices[slot]

    def axes(self, slot: int) -> tuple[int, ...]:
        """The differentiation axes of `slot`, sorted (e.g. `xy` -> `(0, 1)`)."""
        return self.multi_index(slot).axes()

    def index_of_axes(self, axes: colltypes.Iterable[int]) -> int:
        """The slot holding the derivative along `axes`, in any order, so that
        `(0, 1)` and `(1, 0)` both give the `xy` slot.
        """
        axes = tuple(axes)
        if len(axes) != self.order:
            raise InvalidArgumentError(
                f"{len(axes)} axes given for a derivative of order {self.order}."
            )
        return self.index(MultiIndex.from_axes(self.dimension, axes))

    def __iter__(self) -> colltypes.Iterator[MultiIndex]:
        return iter(self._multi_indices)

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return f"DerivativeTensor(dimension={self.dimension}, order={self.order})"


@functools.lru_cache(maxsize=None)
def derivative_tensor(dimension: int, order: int) -> DerivativeTensor:
    return DerivativeTensor(dimension, order)
