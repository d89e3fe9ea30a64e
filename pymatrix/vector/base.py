"""
Base class for dense and sparse vectors.

BaseVector defines the operation vocabulary shared by every vector
representation. Binary operations are written once here as generic entry
points: they validate dimensionality, then hand off to the receiver's
overload for the argument's kind (see pymatrix.core.kinds).

Two operation families:
    - in-place (``*_equals``, ``zero``): mutate the receiver's own storage,
      return None
    - copy-producing (``plus``, ``scale``, ...): return a fresh vector of the
      receiver's representation, leaving both operands untouched
"""

from __future__ import annotations

import math
import numbers
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pymatrix.core.kinds import resolve
from pymatrix.core.tolerances import DEFAULT_EFFECTIVE_ZERO
from pymatrix.core.validation import (
    check_dimensionality,
    check_effective_zero,
    check_index,
)

if TYPE_CHECKING:
    from pymatrix.factory import VectorFactory
    from pymatrix.matrix.base import BaseMatrix
    from pymatrix.matrix.dense import DenseMatrix


class BaseVector:
    """
    Abstract base class for 1-D float64 vectors.

    Subclasses set ``kind`` and implement the storage-specific methods
    below plus one overload per argument kind for each binary operation:
    ``_scaled_plus_equals_<kind>``, ``_dot_times_equals_<kind>`` and
    ``_dot_product_<kind>``.
    """

    kind: str = ''

    # ------------------------------------------------------------------
    # Storage-specific interface
    # ------------------------------------------------------------------

    @property
    def dimensionality(self) -> int:
        """Number of (logical) elements."""
        raise NotImplementedError("Subclasses must implement dimensionality")

    @property
    def vector_factory(self) -> VectorFactory:
        """Factory producing vectors of this representation."""
        raise NotImplementedError("Subclasses must implement vector_factory")

    def _get(self, index: int) -> float:
        raise NotImplementedError("Subclasses must implement _get")

    def _set(self, index: int, value: float) -> None:
        raise NotImplementedError("Subclasses must implement _set")

    def to_array(self) -> NDArray[np.float64]:
        """Materialize as a new dense 1-D numpy array."""
        raise NotImplementedError("Subclasses must implement to_array")

    def clone(self) -> BaseVector:
        """Deep copy owning its own storage."""
        raise NotImplementedError("Subclasses must implement clone")

    def is_sparse(self) -> bool:
        raise NotImplementedError("Subclasses must implement is_sparse")

    def get_entry_count(self) -> int:
        """Number of stored entries."""
        raise NotImplementedError("Subclasses must implement get_entry_count")

    def scale_equals(self, scale: float) -> None:
        """Multiply every element by ``scale`` in place."""
        raise NotImplementedError("Subclasses must implement scale_equals")

    def zero(self) -> None:
        """Set every element to zero in place."""
        raise NotImplementedError("Subclasses must implement zero")

    def norm_2_squared(self) -> float:
        raise NotImplementedError("Subclasses must implement norm_2_squared")

    def sum(self) -> float:
        raise NotImplementedError("Subclasses must implement sum")

    def sub_vector(self, min_index: int, max_index: int) -> BaseVector:
        """Copy of elements ``min_index..max_index`` (inclusive)."""
        raise NotImplementedError("Subclasses must implement sub_vector")

    def convert_from_vector(self, parameters: BaseVector) -> None:
        """Overwrite every element from a parameter vector of equal length."""
        raise NotImplementedError("Subclasses must implement convert_from_vector")

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    def get_element(self, index: int) -> float:
        """
        Bounds-checked read.

        Raises:
            OutOfRangeError: If index is outside [0, dimensionality)
        """
        index = check_index(index, self.dimensionality, "index")
        return self._get(index)

    def set_element(self, index: int, value: float) -> None:
        """
        Bounds-checked write.

        Raises:
            OutOfRangeError: If index is outside [0, dimensionality)
        """
        index = check_index(index, self.dimensionality, "index")
        self._set(index, float(value))

    def get(self, index: int) -> float:
        return self.get_element(index)

    def set(self, index: int, value: float) -> None:
        self.set_element(index, value)

    def assert_dimensionality_equals(self, dimensionality: int) -> None:
        check_dimensionality(self, dimensionality)

    # ------------------------------------------------------------------
    # In-place family
    # ------------------------------------------------------------------

    def scaled_plus_equals(self, other: BaseVector, scale: float) -> None:
        """
        ``self += scale * other``.

        Raises:
            DimensionError: If the dimensionalities differ
        """
        handler = resolve(self, 'scaled_plus_equals', other, BaseVector)
        check_dimensionality(other, self.dimensionality, "other")
        handler(other, float(scale))

    def plus_equals(self, other: BaseVector) -> None:
        self.scaled_plus_equals(other, 1.0)

    def minus_equals(self, other: BaseVector) -> None:
        self.scaled_plus_equals(other, -1.0)

    def dot_times_equals(self, other: BaseVector) -> None:
        """Elementwise product in place."""
        handler = resolve(self, 'dot_times_equals', other, BaseVector)
        check_dimensionality(other, self.dimensionality, "other")
        handler(other)

    # ------------------------------------------------------------------
    # Copy-producing family
    # ------------------------------------------------------------------

    def scaled_plus(self, other: BaseVector, scale: float) -> BaseVector:
        result = self.clone()
        result.scaled_plus_equals(other, scale)
        return result

    def plus(self, other: BaseVector) -> BaseVector:
        result = self.clone()
        result.plus_equals(other)
        return result

    def minus(self, other: BaseVector) -> BaseVector:
        result = self.clone()
        result.minus_equals(other)
        return result

    def dot_times(self, other: BaseVector) -> BaseVector:
        result = self.clone()
        result.dot_times_equals(other)
        return result

    def scale(self, scale: float) -> BaseVector:
        result = self.clone()
        result.scale_equals(scale)
        return result

    def negative(self) -> BaseVector:
        return self.scale(-1.0)

    def convert_to_vector(self) -> BaseVector:
        """Flat parameter copy; for a vector this is a deep copy."""
        return self.clone()

    # ------------------------------------------------------------------
    # Products and norms
    # ------------------------------------------------------------------

    def dot_product(self, other: BaseVector) -> float:
        """
        Inner product with another vector.

        Raises:
            DimensionError: If the dimensionalities differ
        """
        handler = resolve(self, 'dot_product', other, BaseVector)
        check_dimensionality(other, self.dimensionality, "other")
        return handler(other)

    def times(self, matrix: BaseMatrix) -> BaseVector:
        """Row-vector product ``self^T @ matrix``."""
        return matrix.pre_times(self)

    def outer_product(self, other: BaseVector) -> DenseMatrix:
        """``self @ other^T`` as a dense matrix."""
        from pymatrix.matrix.dense import DenseMatrix

        return DenseMatrix.from_array(np.outer(self.to_array(), other.to_array()))

    def norm_2(self) -> float:
        return math.sqrt(self.norm_2_squared())

    def euclidean_distance(self, other: BaseVector) -> float:
        return self.minus(other).norm_2()

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def equals(self, other: Any, effective_zero: float = DEFAULT_EFFECTIVE_ZERO) -> bool:
        """
        Elementwise comparison with an absolute tolerance.

        Two vectors are equal when they have the same dimensionality and
        every pair of elements differs by at most ``effective_zero``.
        Representations need not match.
        """
        effective_zero = check_effective_zero(effective_zero)
        if not isinstance(other, BaseVector):
            return False
        if other.dimensionality != self.dimensionality:
            return False
        diff = np.abs(self.to_array() - other.to_array())
        return bool(np.all(diff <= effective_zero))

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self.dimensionality

    def __getitem__(self, index: int) -> float:
        return self.get_element(index)

    def __setitem__(self, index: int, value: float) -> None:
        self.set_element(index, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseVector):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # mutable

    def __add__(self, other: object) -> BaseVector:
        if not isinstance(other, BaseVector):
            return NotImplemented
        return self.plus(other)

    def __sub__(self, other: object) -> BaseVector:
        if not isinstance(other, BaseVector):
            return NotImplemented
        return self.minus(other)

    def __iadd__(self, other: object) -> BaseVector:
        if not isinstance(other, BaseVector):
            return NotImplemented
        self.plus_equals(other)
        return self

    def __isub__(self, other: object) -> BaseVector:
        if not isinstance(other, BaseVector):
            return NotImplemented
        self.minus_equals(other)
        return self

    def __neg__(self) -> BaseVector:
        return self.negative()

    def __mul__(self, scale: object) -> BaseVector:
        if not isinstance(scale, numbers.Real):
            return NotImplemented
        return self.scale(float(scale))

    __rmul__ = __mul__

    def __matmul__(self, other: object) -> Any:
        if isinstance(other, BaseVector):
            return self.dot_product(other)
        if hasattr(other, 'pre_times'):
            return self.times(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_array().tolist()})"
