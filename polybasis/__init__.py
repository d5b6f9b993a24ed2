"""
The `polybasis` package evaluates polynomial finite element bases on reference
cells: monomial bases, their exact derivatives of any order in any dimension, and
coefficient matrices turning them into finite element shape functions.
"""

from .basis import Basis, Evaluator, MonomialBasis
from .coefficients import (
    CoefficientMatrix,
    DenseCoefficientMatrix,
    SparseCoefficientMatrix,
)
from .config import DEFAULT_CONFIG, BasisConfig
from .fields import DerivativeField
from .geometry import ReferenceCell
from .polynomial_basis import PolynomialBasis, PolynomialBasisWithMatrix
from .tensor import DerivativeTensor, MultiIndex, derivative_tensor

__all__ = [
    "Basis",
    "Evaluator",
    "MonomialBasis",
    "CoefficientMatrix",
    "DenseCoefficientMatrix",
    "SparseCoefficientMatrix",
    "BasisConfig",
    "DEFAULT_CONFIG",
    "DerivativeField",
    "ReferenceCell",
    "PolynomialBasis",
    "PolynomialBasisWithMatrix",
    "DerivativeTensor",
    "MultiIndex",
    "derivative_tensor",
]
