"""
Tolerance and size constants for pymatrix.

Every ``effective_zero`` in the package is an ABSOLUTE magnitude: a value
``x`` is treated as zero when ``abs(x) <= effective_zero``. No relative
tolerance is ever derived from the data, since rank, pseudo-inverse and
symmetry checks all gate on the caller's absolute threshold.

Used by matrix and vector algorithms, the validation helpers and the test
suite.
"""

from dataclasses import dataclass


# Default threshold for rank, pseudo_inverse, is_symmetric and equals
DEFAULT_EFFECTIVE_ZERO: float = 0.0

# Largest rows * columns product a representation may be created with.
# Matches the signed 32-bit index range used to address cells.
MAX_ENTRY_COUNT: int = 2**31 - 1


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Exact float64 arithmetic: diagonal scaling, elementwise combinations
EXACT = ToleranceTier(
    rtol=0.0,
    atol=0.0,
    name='exact',
    description='Bitwise-identical results',
)

# Double precision through a factorization (LU, QR, SVD)
CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision through LAPACK',
)

# Double precision, ill-conditioned inputs (cond > 1e4)
CPU_FP64_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-4,
    atol=1e-6,
    name='cpu_fp64_ill_conditioned',
    description='CPU double precision, ill-conditioned (cond > 1e4)',
)


def select_tolerance(
    factorized: bool,
    is_ill_conditioned: bool = False,
) -> ToleranceTier:
    """Select the tolerance tier for comparing an operation's output."""
    if not factorized:
        return EXACT
    if is_ill_conditioned:
        return CPU_FP64_ILL_CONDITIONED
    return CPU_FP64
