"""
Numerical Safeguards — общие численные примитивы ядра

Модуль обеспечивает единые правила работы с float для всех калькуляторов:
- Epsilon-параметры (порог вырожденности pivot, допуск теоремы Пифагора)
- NaN/Inf проверки и фильтрация выборок
- Epsilon-сравнения float с учётом машинной точности
- Валидация входов (finite / non-negative / integer) с InvalidInput

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. NaN/Inf никогда не попадают в вычисления молча (либо InvalidInput, либо отбрасываются)
2. Float сравнения всегда учитывают машинную точность
3. Все операции детерминированы и не имеют состояния
"""

import math
from typing import Final, Iterable

from src.calc_engine.errors import InvalidInput

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Порог вырожденности pivot при исключении Гаусса / Гаусса-Жордана
# |pivot| < EPS_PIVOT → матрица считается вырожденной
EPS_PIVOT: Final[float] = 1e-10

# Допуск проверки a² + b² = c² (классификация и проверка прямоугольного треугольника)
EPS_PYTHAGORAS: Final[float] = 1e-3

# Относительная толерантность для is_close
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9

# Абсолютная толерантность для is_close
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12


# =============================================================================
# NaN/Inf ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли значение конечным числом (не NaN, не Inf).

    bool не считается числом: True/False из UI-чекбоксов не должны
    попадать в вычисления.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def finite_values(values: Iterable[float]) -> list[float]:
    """
    Фильтрация выборки: отбрасывает NaN/Inf и нечисловые элементы.

    Args:
        values: Исходные значения

    Returns:
        Новый список только с конечными значениями (порядок сохранён)

    Examples:
        >>> finite_values([1.0, float('nan'), 2.0, float('inf')])
        [1.0, 2.0]
    """
    return [float(v) for v in values if is_valid_float(v)]


# =============================================================================
# EPSILON-СРАВНЕНИЯ FLOAT
# =============================================================================


def is_close(
    a: float,
    b: float,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Сравнение float с учётом машинной точности.

    Алгоритм:
        abs(a - b) <= max(rel_tol * max(abs(a), abs(b)), abs_tol)

    Examples:
        >>> is_close(1.0, 1.0 + 1e-10)
        True
        >>> is_close(1.0, 1.1)
        False
    """
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_finite(value: float, name: str) -> float:
    """
    Валидация, что значение — конечное число.

    Raises:
        InvalidInput: Если value NaN/Inf или не число
    """
    if not is_valid_float(value):
        raise InvalidInput(f"{name} must be a finite number (not NaN/Inf), got {value!r}")
    return float(value)


def validate_non_negative(value: float, name: str) -> float:
    """
    Валидация, что значение конечное и неотрицательное.

    Raises:
        InvalidInput: Если value < 0 или NaN/Inf
    """
    value = validate_finite(value, name)
    if value < 0:
        raise InvalidInput(f"{name} must be non-negative, got {value}")
    return value


def validate_integer(value: int, name: str) -> int:
    """
    Валидация целочисленного входа для теоретико-числовых функций.

    Принимает int и float с нулевой дробной частью (например 12.0 из UI).

    Raises:
        InvalidInput: Если значение не целое (или bool)
    """
    if isinstance(value, bool):
        raise InvalidInput(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    raise InvalidInput(f"{name} must be an integer, got {value!r}")


def validate_positive_integer(value: int, name: str) -> int:
    """
    Валидация строго положительного целого.

    Raises:
        InvalidInput: Если значение не целое или <= 0
    """
    value = validate_integer(value, name)
    if value <= 0:
        raise InvalidInput(f"{name} must be a positive integer, got {value}")
    return value
