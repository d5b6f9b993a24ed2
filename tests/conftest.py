import numpy as np
import pytest

from polybasis.geometry import ReferenceCell


_CELLS = {
    "point": ReferenceCell.point(),
    "segment": ReferenceCell.segment(),
    "triangle": ReferenceCell.triangle(),
    "quadrilateral": ReferenceCell.quadrilateral(),
    "tetrahedron": ReferenceCell.tetrahedron(),
    "hexahedron": ReferenceCell.hexahedron(),
    "prism": ReferenceCell.prism(),
    "pyramid": ReferenceCell.pyramid(),
}

# points strictly inside every cell of the matching dimension
_INTERIOR_POINTS = {
    0: np.zeros((1, 0)),
    1: np.array([[0.13], [0.5], [0.77]]),
    2: np.array([[0.1, 0.2], [0.3, 0.4], [0.25, 0.05]]),
    3: np.array([[0.1, 0.2, 0.3], [0.2, 0.3, 0.25], [0.05, 0.15, 0.6]]),
}


@pytest.fixture(scope="module", params=_CELLS.keys())
def cell(request):
    return _CELLS[request.param]


@pytest.fixture(scope="module", params=[0, 1, 2, 4])
def order(request):
    return request.param


@pytest.fixture(scope="module")
def interior_points(cell):
    return _INTERIOR_POINTS[cell.dimension]


@pytest.fixture(params=[0, 1, 2])
def stack_ndim(request):
    return request.param


def stacked_points(points: np.ndarray, stack_ndim: int) -> np.ndarray:
    """Arranges the rows of `points` into a stack of `stack_ndim` axes (cycling
    through the rows as needed)."""
    stack_shape = tuple(2 for _ in range(stack_ndim))
    size = int(np.prod(stack_shape, dtype=int))
    rows = points[np.arange(size) % points.shape[0]]
    return rows.reshape(*stack_shape, points.shape[-1])
