"""Exception hierarchy for polynomial basis construction and evaluation."""


class PolynomialBasisError(Exception):
    pass


class InvalidArgumentError(PolynomialBasisError, ValueError):
    """Raised when a dimension, derivative order, slot or multi-index is not valid
    for the requested operation. These are programming errors, not recoverable
    conditions.
    """

    pass


class PreconditionError(PolynomialBasisError, AssertionError):
    """Raised by the checked evaluation path when a caller breaks a precondition:
    an output buffer of the wrong shape, a basis size beyond the filled rows of a
    coefficient matrix, or points of the wrong dimension.

    With `BasisConfig.checked == False` these checks are skipped.
    """

    pass


class BasisSizeMismatchError(PolynomialBasisError):
    """A caller-specified basis size does not match the size computed internally.

    Args:
        expected (int): the size computed from the basis.
        given (int): the size the caller asked for.
        what (str): a short description of the object being built.
    """

    def __init__(self, expected: int, given: int, what: str = "basis"):
        super().__init__(
            f"Size mismatch while building {what}: expected {expected} functions,"
            f" but {given} were given."
        )
        self.expected = expected
        self.given = given


class CoefficientShapeError(PolynomialBasisError, ValueError):
    """Called when a dense coefficient matrix cannot be read as blocks of
    `dim_range` rows."""

    def __init__(self, matrix_shape, dim_range, columns=None):
        errmsg = (
            f"Cannot fill a coefficient matrix with dim_range {dim_range}"
            f" from a dense matrix of shape {matrix_shape}."
        )
        if columns is not None:
            errmsg += f" Expected {columns} columns."
        super().__init__(errmsg)


class SingularInterpolationError(PolynomialBasisError):
    pass


class DerivativeLayoutError(PolynomialBasisError, ValueError):
    """Called when a flat derivative buffer does not match the layout expected for
    its dimension and derivative order."""

    def __init__(self, dimension, order, shape):
        super().__init__(
            f"Cannot view an array of shape {shape} as derivatives up to order"
            f" {order} in dimension {dimension}."
        )


class UnstableOrderWarning(UserWarning):
    """Polynomial orders above `BasisConfig.max_stable_order` lead to badly
    conditioned interpolation matrices."""

    pass
