"""
Core infrastructure for pymatrix.

Shared abstractions used by every matrix and vector representation.

Key components:
    exceptions: Exception hierarchy and warning category
    validation: Bounds, shape and argument validators
    tolerances: Effective-zero defaults, size limits, tolerance tiers
    kinds: Representation kind tags and overload resolution
"""

from pymatrix.core.exceptions import (
    PyMatrixError,
    ValidationError,
    DimensionError,
    OutOfRangeError,
    InvalidAssignmentError,
    MatrixOverflowError,
    NumericalError,
    SingularMatrixError,
    SparseEfficiencyWarning,
)
from pymatrix.core.tolerances import DEFAULT_EFFECTIVE_ZERO, MAX_ENTRY_COUNT
from pymatrix.core.kinds import DENSE, SPARSE, DIAGONAL

__all__ = [
    # Exceptions
    "PyMatrixError",
    "ValidationError",
    "DimensionError",
    "OutOfRangeError",
    "InvalidAssignmentError",
    "MatrixOverflowError",
    "NumericalError",
    "SingularMatrixError",
    "SparseEfficiencyWarning",
    # Configuration
    "DEFAULT_EFFECTIVE_ZERO",
    "MAX_ENTRY_COUNT",
    # Kinds
    "DENSE",
    "SPARSE",
    "DIAGONAL",
]
