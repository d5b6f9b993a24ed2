import dataclasses
import functools
import collections.abc as colltypes

from polybasis.exceptions import InvalidArgumentError


def _check_nonnegative(**kwargs):
    for name, value in kwargs.items():
        if value < 0:
            raise InvalidArgumentError(f"{name} must be non-negative, got {value}.")


@functools.total_ordering
@dataclasses.dataclass(eq=True, frozen=True, init=False)
class MultiIndex:
    """
    An exponent tuple `alpha = (a_0, ..., a_{d-1})` of non-negative integers. It
    stands both for the monomial $x^\\alpha = \\prod_i x_i^{a_i}$ and for the
    partial derivative $\\partial^\\alpha$.

    Multi-indices are totally ordered by the canonical ordering used everywhere
    in this package: increasing total degree, and within one degree descending
    lexicographic order of the exponents. In 2D this gives
    `1, x, y, x^2, xy, y^2, ...`.

    The componentwise partial order (does `alpha` divide `beta`?) is available
    through `divides()`.
    """

    exponents: tuple[int, ...]

    def __init__(self, exponents: colltypes.Iterable[int]):
        exponents = tuple(int(a) for a in exponents)
        if any(a < 0 for a in exponents):
            raise InvalidArgumentError(
                f"Multi-index exponents must be non-negative, got {exponents}."
            )
        object.__setattr__(self, "exponents", exponents)

    @classmethod
    def zero(cls, dimension: int) -> "MultiIndex":
        _check_nonnegative(dimension=dimension)
        return cls((0,) * dimension)

    @classmethod
    def unit(cls, dimension: int, axis: int) -> "MultiIndex":
        if not 0 <= axis < dimension:
            raise InvalidArgumentError(
                f"axis {axis} out of range for dimension {dimension}."
            )
        return cls(int(i == axis) for i in range(dimension))

    @classmethod
    def from_axes(cls, dimension: int, axes: colltypes.Iterable[int]) -> "MultiIndex":
        """Builds the multi-index counting how often each axis appears in `axes`,
        e.g. `(0, 1, 1)` in 2D is `(1, 2)`, the derivative d^3/dx dy^2.
        """
        exponents = [0] * dimension
        for axis in axes:
            if not 0 <= axis < dimension:
                raise InvalidArgumentError(
                    f"axis {axis} out of range for dimension {dimension}."
                )
            exponents[axis] += 1
        return cls(exponents)

    @property
    def dimension(self) -> int:
        return len(self.exponents)

    @property
    def degree(self) -> int:
        return sum(self.exponents)

    def axes(self) -> tuple[int, ...]:
        """Inverse of `from_axes`: the sorted axes, each repeated by its exponent."""
        return tuple(i for i, a in enumerate(self.exponents) for _ in range(a))

    def _check_same_dimension(self, other: "MultiIndex"):
        if self.dimension != other.dimension:
            raise InvalidArgumentError(
                f"Multi-indices of dimension {self.dimension} and {other.dimension}"
                " cannot be combined."
            )

    def __add__(self, other: "MultiIndex") -> "MultiIndex":
        if not isinstance(other, MultiIndex):
            return NotImplemented
        self._check_same_dimension(other)
        return MultiIndex(a + b for a, b in zip(self.exponents, other.exponents))

    def __sub__(self, other: "MultiIndex") -> "MultiIndex":
        if not isinstance(other, MultiIndex):
            return NotImplemented
        self._check_same_dimension(other)
        return MultiIndex(a - b for a, b in zip(self.exponents, other.exponents))

    def divides(self, other: "MultiIndex") -> bool:
        """True if `self <= other` componentwise, i.e. `x^self` divides `x^other`."""
        self._check_same_dimension(other)
        return all(a <= b for a, b in zip(self.exponents, other.exponents))

    def sort_key(self) -> tuple:
        return (self.degree, tuple(-a for a in self.exponents))

    def __lt__(self, other: "MultiIndex") -> bool:
        if not isinstance(other, MultiIndex):
            return NotImplemented
        self._check_same_dimension(other)
        return self.sort_key() < other.sort_key()

    def __getitem__(self, axis: int) -> int:
        return self.exponents[axis]

    def __iter__(self):
        return iter(self.exponents)

    def __len__(self) -> int:
        return len(self.exponents)

    def __repr__(self) -> str:
        return f"MultiIndex({self.exponents})"


def multi_indices(dimension: int, degree: int) -> colltypes.Iterator[MultiIndex]:
    """Yields every multi-index of total degree exactly `degree` in `dimension`
    variables, in descending lexicographic order.
    """
    _check_nonnegative(dimension=dimension, degree=degree)
    for exponents in _exponents(dimension, degree):
        yield MultiIndex(exponents)


def multi_indices_up_to(dimension: int, order: int) -> colltypes.Iterator[MultiIndex]:
    """Yields every multi-index of total degree `<= order`, in canonical order."""
    _check_nonnegative(dimension=dimension, order=order)
    for degree in range(order + 1):
        yield from multi_indices(dimension, degree)


def _exponents(dimension: int, degree: int) -> colltypes.Iterator[tuple[int, ...]]:
    if dimension == 0:
        if degree == 0:
            yield tuple()
        return
    if dimension == 1:
        yield (degree,)
        return
    for lead in range(degree, -1, -1):
        for rest in _exponents(dimension - 1, degree - lead):
            yield (lead, *rest)
