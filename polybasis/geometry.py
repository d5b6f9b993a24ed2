"""
The `polybasis.geometry` module describes the reference cells that monomial bases
are defined on. Only the cell type and its dimension are needed here; the
geometry itself (vertices, faces, quadrature) is left to other libraries.
"""

import dataclasses
import math
from typing import Literal

from .exceptions import InvalidArgumentError

__all__ = ["CellType", "ReferenceCell"]


def __dir__() -> list[str]:
    return __all__


# simplex: {x >= 0, sum(x) <= 1}; cube: [0,1]^d; prism: triangle x [0,1];
# pyramid: {0 <= z <= 1, 0 <= x, y <= 1 - z}
CellType = Literal["simplex", "cube", "prism", "pyramid"]


@dataclasses.dataclass(frozen=True)
class ReferenceCell:
    type: CellType
    dimension: int

    def __post_init__(self):
        if self.type not in ("simplex", "cube", "prism", "pyramid"):
            raise InvalidArgumentError(f"'{self.type}' is not a known cell type!")
        if self.dimension < 0:
            raise InvalidArgumentError(
                f"Cell dimension must be non-negative, got {self.dimension}."
            )
        if self.type in ("prism", "pyramid") and self.dimension != 3:
            raise InvalidArgumentError(
                f"A {self.type} is three dimensional, got dimension {self.dimension}."
            )

    @classmethod
    def point(cls) -> "ReferenceCell":
        return cls("cube", 0)

    @classmethod
    def segment(cls) -> "ReferenceCell":
        return cls("cube", 1)

    @classmethod
    def triangle(cls) -> "ReferenceCell":
        return cls("simplex", 2)

    @classmethod
    def quadrilateral(cls) -> "ReferenceCell":
        return cls("cube", 2)

    @classmethod
    def tetrahedron(cls) -> "ReferenceCell":
        return cls("simplex", 3)

    @classmethod
    def hexahedron(cls) -> "ReferenceCell":
        return cls("cube", 3)

    @classmethod
    def prism(cls) -> "ReferenceCell":
        return cls("prism", 3)

    @classmethod
    def pyramid(cls) -> "ReferenceCell":
        return cls("pyramid", 3)

    def volume(self) -> float:
        """The measure of the reference cell."""
        if self.type == "cube":
            return 1.0
        if self.type == "simplex":
            return 1.0 / math.factorial(self.dimension)
        if self.type == "prism":
            return 0.5
        return 1.0 / 3.0
