from .derivative_field import DerivativeField

__all__ = ["DerivativeField"]
