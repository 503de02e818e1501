"""
Core math modules для calc engine

Численные алгоритмы калькуляторов с гарантией стабильности.
"""

# Numerical Safeguards
from src.calc_engine.math.numerical_safeguards import (
    # Epsilon constants
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    EPS_PIVOT,
    EPS_PYTHAGORAS,
    # NaN/Inf
    finite_values,
    is_valid_float,
    # Epsilon comparisons
    is_close,
    # Validation
    validate_finite,
    validate_integer,
    validate_non_negative,
    validate_positive_integer,
)

# Matrix Algebra
from src.calc_engine.math.matrix_algebra import (
    MatrixOperation,
    MatrixOperationResult,
    determinant,
    inverse,
    matrices_close,
    perform_operation,
    transpose,
)

# Number Theory
from src.calc_engine.math.number_theory import (
    MILLER_RABIN_DETERMINISTIC_BOUND,
    MILLER_RABIN_WITNESSES,
    DiophantineSolution,
    ExtendedGcdResult,
    PrimalityTest,
    PrimeFactorization,
    extended_gcd,
    factorize,
    gcd,
    gcd_many,
    integer_root,
    is_prime,
    lcm,
    lcm_many,
    nth_prime,
    primality_test,
    sieve_of_eratosthenes,
    solve_diophantine,
)

# Descriptive Statistics
from src.calc_engine.math.descriptive_statistics import (
    Z_SCORES,
    ConfidenceInterval,
    RegressionResult,
    StatisticsResult,
    confidence_interval,
    describe,
    linear_regression,
)

# Triangle Solver
from src.calc_engine.math.triangle_solver import (
    TriangleSolution,
    TriangleType,
    classify_triangle,
    solve_asa,
    solve_right,
    solve_sas,
    solve_sss,
)

# Fraction Arithmetic
from src.calc_engine.math.fraction_arithmetic import (
    FractionOperation,
    FractionResult,
    MixedNumber,
    calculate,
    decimal_to_fraction,
    simplify,
    to_mixed_number,
)

__all__ = [
    # Numerical Safeguards
    "EPS_PIVOT",
    "EPS_PYTHAGORAS",
    "EPS_FLOAT_COMPARE_REL",
    "EPS_FLOAT_COMPARE_ABS",
    "is_valid_float",
    "finite_values",
    "is_close",
    "validate_finite",
    "validate_non_negative",
    "validate_integer",
    "validate_positive_integer",
    # Matrix Algebra
    "MatrixOperation",
    "MatrixOperationResult",
    "determinant",
    "inverse",
    "transpose",
    "matrices_close",
    "perform_operation",
    # Number Theory
    "MILLER_RABIN_WITNESSES",
    "MILLER_RABIN_DETERMINISTIC_BOUND",
    "ExtendedGcdResult",
    "PrimalityTest",
    "PrimeFactorization",
    "DiophantineSolution",
    "gcd",
    "lcm",
    "gcd_many",
    "integer_root",
    "lcm_many",
    "extended_gcd",
    "is_prime",
    "primality_test",
    "factorize",
    "sieve_of_eratosthenes",
    "nth_prime",
    "solve_diophantine",
    # Descriptive Statistics
    "Z_SCORES",
    "StatisticsResult",
    "ConfidenceInterval",
    "RegressionResult",
    "describe",
    "confidence_interval",
    "linear_regression",
    # Triangle Solver
    "TriangleType",
    "TriangleSolution",
    "classify_triangle",
    "solve_sss",
    "solve_sas",
    "solve_asa",
    "solve_right",
    # Fraction Arithmetic
    "FractionOperation",
    "FractionResult",
    "MixedNumber",
    "simplify",
    "to_mixed_number",
    "calculate",
    "decimal_to_fraction",
]
