import dataclasses

import numpy as np
from numpy.typing import DTypeLike

__all__ = ["BasisConfig", "DEFAULT_CONFIG"]


def __dir__() -> list[str]:
    return __all__


@dataclasses.dataclass(kw_only=True, frozen=True)
class BasisConfig:
    """Evaluation options shared by evaluators and polynomial bases.

    Attributes:
        checked (bool): If `True`, preconditions (buffer shapes, point dimension,
            basis size against the filled coefficient rows) are verified on every
            call and a `PreconditionError` is raised on violation. If `False`
            these checks are skipped, and a violation gives wrong results or a
            numpy error.
        max_stable_order (int): Highest polynomial order considered numerically
            safe for interpolation. Larger orders still work, but emit an
            `UnstableOrderWarning`.
        dtype (DTypeLike): The coordinate and value type. Points are cast
            component-wise to this type before evaluation.
    """

    checked: bool = True
    max_stable_order: int = 12
    dtype: DTypeLike = np.float64

    def replace(self, **changes) -> "BasisConfig":
        return dataclasses.replace(self, **changes)


DEFAULT_CONFIG = BasisConfig()
