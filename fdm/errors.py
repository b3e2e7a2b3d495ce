"""
Errors raised by the grid spaces and their elements. 
"""


class IncompatibleSpace(ValueError):
    """Raised when the operands live on different grid spaces."""


class InvalidAxis(ValueError):
    """Raised when an axis index is outside [0, dim)."""


class DimensionMismatch(ValueError):
    """Raised when a vector or matrix size does not match the number of dofs."""


class PatternMismatch(DimensionMismatch):
    """Raised when two sparse matrices do not share the same sparsity pattern."""


class OutOfBounds(IndexError):
    """Raised when indexing beyond the stored extent of an element."""
