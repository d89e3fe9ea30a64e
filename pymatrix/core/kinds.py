"""
Representation kind tags and overload resolution.

This module is the SINGLE SOURCE OF TRUTH for kind strings.
Import from here, never use raw strings.

Every concrete matrix and vector class carries a ``kind`` class attribute.
A binary operation is implemented by the receiver as one overload per
argument kind, named ``_{operation}_{kind}``:

    class DiagonalMatrix(BaseMatrix):
        kind = DIAGONAL

        def _times_dense(self, other): ...
        def _times_sparse(self, other): ...
        def _times_diagonal(self, other): ...

The generic entry point on the base class calls ``resolve`` once to pick the
overload matching the argument's runtime kind. Adding a representation means
adding its kind here and one overload per operation on each receiver.

Usage:
    from pymatrix.core.kinds import resolve

    resolve(self, 'times', other)(other)
"""

from __future__ import annotations

from typing import Any, Callable

# Row-addressable complete grid / contiguous 1-D array
DENSE = 'dense'

# Compressed-row matrix / sorted-index vector
SPARSE = 'sparse'

# Square matrix storing only its main diagonal
DIAGONAL = 'diagonal'

MATRIX_KINDS = frozenset({DENSE, SPARSE, DIAGONAL})
VECTOR_KINDS = frozenset({DENSE, SPARSE})


def resolve(
    receiver: Any,
    operation: str,
    argument: Any,
    family: type | None = None,
) -> Callable[..., Any]:
    """
    Select the receiver's overload for the argument's kind.

    Args:
        receiver: Object whose overload is called
        operation: Operation family name, e.g. 'times' or 'times_vector'
        argument: Operand whose ``kind`` picks the overload
        family: Base class the argument must belong to (matrices and
            vectors share kind names)

    Returns:
        The bound overload method

    Raises:
        TypeError: If the argument has no kind, or the receiver has no
            overload for it
    """
    kind = getattr(argument, "kind", None)
    if kind is None or (family is not None and not isinstance(argument, family)):
        raise TypeError(
            f"{type(receiver).__name__}.{operation}: unsupported operand type "
            f"{type(argument).__name__}"
        )
    handler = getattr(receiver, f"_{operation}_{kind}", None)
    if handler is None:
        raise TypeError(
            f"{type(receiver).__name__}.{operation} is not defined for "
            f"{kind} operands"
        )
    return handler
