"""
Engine Limits — ограничения ресурсов вычислительного ядра

Ядро само по себе ничего не ограничивает: лимиты являются политикой
вызывающей стороны. EngineLimits делает эту политику явной, а функции
check_* применяют её в тех операциях, которые принимают аргумент limits
(perform_operation, sieve_of_eratosthenes и производные).
"""

from dataclasses import dataclass

from src.calc_engine.errors import InvalidInput


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class EngineLimits:
    """Лимиты ресурсов по умолчанию (значения калькуляторов UI)."""

    # Максимальный размер матрицы n × n
    max_matrix_dimension: int = 5

    # Максимальная граница решета Эратосфена
    max_sieve_limit: int = 10_000_000

    def __post_init__(self):
        if self.max_matrix_dimension < 1:
            raise ValueError(
                f"max_matrix_dimension must be >= 1, got {self.max_matrix_dimension}"
            )
        if self.max_sieve_limit < 2:
            raise ValueError(f"max_sieve_limit must be >= 2, got {self.max_sieve_limit}")


DEFAULT_LIMITS = EngineLimits()


# =============================================================================
# CHECKS
# =============================================================================


def check_matrix_dimension(rows: int, cols: int, limits: EngineLimits = DEFAULT_LIMITS) -> None:
    """
    Проверка размера матрицы против лимита.

    Raises:
        InvalidInput: Если rows или cols превышают max_matrix_dimension
    """
    if rows > limits.max_matrix_dimension or cols > limits.max_matrix_dimension:
        raise InvalidInput(
            f"Matrix {rows}×{cols} exceeds max dimension {limits.max_matrix_dimension}"
        )


def check_sieve_limit(limit: int, limits: EngineLimits = DEFAULT_LIMITS) -> None:
    """
    Проверка границы решета против лимита.

    Raises:
        InvalidInput: Если limit > max_sieve_limit
    """
    if limit > limits.max_sieve_limit:
        raise InvalidInput(
            f"Sieve limit {limit} exceeds max_sieve_limit {limits.max_sieve_limit}"
        )
