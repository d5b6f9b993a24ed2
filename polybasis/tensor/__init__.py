"""
The `polybasis.tensor` package contains multi-indices and the layout of symmetric
derivative tensors.
"""

from .derivative_tensor import (
    DerivativeTensor,
    cumulative_size,
    derivative_tensor,
    derivative_tensor_size,
    offset,
    slots,
)
from .multiindex import MultiIndex, multi_indices, multi_indices_up_to

__all__ = [
    "MultiIndex",
    "multi_indices",
    "multi_indices_up_to",
    "DerivativeTensor",
    "derivative_tensor",
    "derivative_tensor_size",
    "cumulative_size",
    "offset",
    "slots",
]
