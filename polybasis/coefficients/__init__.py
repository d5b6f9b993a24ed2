"""
The `polybasis.coefficients` package stores finite element bases as linear
combinations of raw basis functions.
"""

from .coeff_matrix import (
    CoefficientMatrix,
    DenseCoefficientMatrix,
    SparseCoefficientMatrix,
)

__all__ = ["CoefficientMatrix", "DenseCoefficientMatrix", "SparseCoefficientMatrix"]
