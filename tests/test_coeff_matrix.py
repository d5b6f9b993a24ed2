import numpy as np
import pytest

from polybasis.coefficients import (
    CoefficientMatrix,
    DenseCoefficientMatrix,
    SparseCoefficientMatrix,
)
from polybasis.exceptions import (
    CoefficientShapeError,
    InvalidArgumentError,
    PreconditionError,
)
from polybasis.tensor import cumulative_size, slots

_MATRIX_TYPES = {
    "dense": DenseCoefficientMatrix,
    "sparse": SparseCoefficientMatrix,
}


@pytest.fixture(params=_MATRIX_TYPES.keys())
def matrix_type(request):
    return _MATRIX_TYPES[request.param]


@pytest.fixture(scope="module")
def raw():
    # 4 raw functions, a (2, 3) point stack, 2D derivatives up to order 2
    return np.random.default_rng(1).random((4, 2, 3, cumulative_size(2, 2)))


def test_identity_reproduces_raw(matrix_type, raw):
    cm: CoefficientMatrix = matrix_type()
    cm.fill(np.eye(4))
    assert cm.size() == 4
    assert cm.columns() == 4
    res = cm.mult(raw)
    assert res.shape == (4, 2, 3, 1, raw.shape[-1])
    assert res[..., 0, :] == pytest.approx(raw)


def test_linear_combination(matrix_type, raw):
    C = np.array([[1.0, -1.0, 0, 0], [0, 0.5, 0, 2.0], [0, 0, 0, 0]])
    cm = matrix_type()
    cm.fill(C)
    res = cm.mult(raw)[..., 0, :]
    assert res[0] == pytest.approx(raw[0] - raw[1])
    assert res[1] == pytest.approx(0.5 * raw[1] + 2 * raw[3])
    assert np.all(res[2] == 0)


def test_dim_range_blocks(matrix_type, raw):
    # function 0 = (m0, m1), function 1 = (0, m2 + m3)
    C = np.array(
        [
            [1.0, 0, 0, 0],
            [0, 1.0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 1.0, 1.0],
        ]
    )
    cm = matrix_type(dim_range=2)
    cm.fill(C)
    assert cm.size() == 2
    res = cm.mult(raw)
    assert res.shape == (2, 2, 3, 2, raw.shape[-1])
    assert res[0, ..., 0, :] == pytest.approx(raw[0])
    assert res[0, ..., 1, :] == pytest.approx(raw[1])
    assert np.all(res[1, ..., 0, :] == 0)
    assert res[1, ..., 1, :] == pytest.approx(raw[2] + raw[3])


def test_mult_single(matrix_type, raw):
    cm = matrix_type()
    cm.fill(np.random.default_rng(2).random((3, 4)))
    full = cm.mult(raw)
    for k in range(3):
        single = cm.mult_single(raw, k, 2)
        assert single == pytest.approx(full[..., slots(2, k)])
    with pytest.raises(PreconditionError):
        cm.mult_single(raw, 3, 2)


def test_truncation_never_reads_past_size(matrix_type, raw):
    C = np.full((4, 4), np.nan)
    C[:2] = np.eye(4)[:2]
    cm = matrix_type()
    cm.fill(C, size=2)
    res = cm.mult(raw, size=2)
    assert res.shape[0] == 2
    assert np.all(np.isfinite(res))
    # the sentinel rows are really stored
    assert np.isnan(cm.dense()[2:]).all()
    with pytest.raises(PreconditionError):
        cm.mult(raw, size=5)


def test_out_buffer(matrix_type, raw):
    cm = matrix_type()
    cm.fill(np.eye(4)[:3])
    out = np.empty((3, 2, 3, 1, raw.shape[-1]))
    assert cm.mult(raw, out) is out
    assert out[..., 0, :] == pytest.approx(raw[:3])
    with pytest.raises(PreconditionError):
        cm.mult(raw, np.empty((4, 2, 3, 1, raw.shape[-1])))


def test_fill_errors(matrix_type):
    cm = matrix_type(dim_range=2)
    with pytest.raises(CoefficientShapeError):
        cm.fill(np.eye(3))
    with pytest.raises(CoefficientShapeError):
        cm.fill(np.ones(4))
    with pytest.raises(PreconditionError):
        cm.fill(np.eye(4), size=3)
    with pytest.raises(InvalidArgumentError):
        matrix_type(dim_range=0)


def test_use_before_fill(matrix_type, raw):
    cm = matrix_type()
    assert not cm.is_filled()
    assert cm.nonzeros() == 0
    with pytest.raises(PreconditionError):
        cm.mult(raw)


def test_wrong_raw_columns(matrix_type, raw):
    cm = matrix_type()
    cm.fill(np.eye(5))
    with pytest.raises(PreconditionError):
        cm.mult(raw)


def test_refill_replaces(matrix_type, raw):
    cm = matrix_type()
    cm.fill(np.eye(4))
    cm.fill(2 * np.eye(4)[:1])
    assert cm.size() == 1
    assert cm.mult(raw)[0, ..., 0, :] == pytest.approx(2 * raw[0])


def test_sparse_drops_small_entries(raw):
    C = np.array([[1.0, 1e-16, 0, 0], [0, 0, -3.0, 1e-3]])
    sparse = SparseCoefficientMatrix()
    sparse.fill(C)
    dense = DenseCoefficientMatrix()
    dense.fill(C)
    assert sparse.nonzeros() == 3
    assert dense.nonzeros() == 4
    assert sparse.mult(raw) == pytest.approx(dense.mult(raw))
    assert sparse.dense()[0, 1] == 0

    loose = SparseCoefficientMatrix(zero_tolerance=1e-2)
    loose.fill(C)
    assert loose.nonzeros() == 2


def test_nan_coefficients_are_kept(raw):
    # a failed inversion upstream must show up in both stores
    C = np.eye(4)
    C[1, 1] = np.nan
    sparse = SparseCoefficientMatrix()
    sparse.fill(C)
    dense = DenseCoefficientMatrix()
    dense.fill(C)
    assert sparse.nonzeros() == dense.nonzeros() == 4
    res_sparse = sparse.mult(raw)
    res_dense = dense.mult(raw)
    assert np.all(np.isnan(res_sparse[1]))
    assert np.all(np.isfinite(res_sparse[[0, 2, 3]]))
    np.testing.assert_array_equal(res_sparse, res_dense)


def test_dense_before_fill(matrix_type):
    with pytest.raises(PreconditionError):
        matrix_type().dense()
