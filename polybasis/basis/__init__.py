"""
The `polybasis.basis` package contains raw polynomial bases and their evaluator.
"""

from .basis import Basis
from .evaluator import Evaluator
from .monomial_basis import MonomialBasis

__all__ = ["Basis", "Evaluator", "MonomialBasis"]
