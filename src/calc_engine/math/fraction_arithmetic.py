"""
Fraction Arithmetic — точная арифметика обыкновенных дробей

Операции над Fraction (целые числитель/знаменатель):
- simplify: сокращение на НОД, знак переносится в числитель
- add / subtract через НОК знаменателей, multiply, divide (умножение на обратную)
- смешанные числа, конверсия десятичной записи, форматирование

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Результат simplify каноничен: denominator > 0, gcd(|numerator|, denominator) = 1
2. add/subtract/multiply/divide возвращают НЕсокращённый результат
   (сокращение — отдельный шаг, см. calculate)
3. Деление на дробь с нулевым числителем → DivisionByZero
4. Сырые целочисленные входы с d = 0 (simplify_parts, mixed_number_to_fraction)
   дают сторожевое значение 0/1
"""

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from src.calc_engine.domain.fraction import Fraction
from src.calc_engine.errors import DivisionByZero, InvalidInput
from src.calc_engine.math.numerical_safeguards import validate_integer


# =============================================================================
# СОКРАЩЕНИЕ
# =============================================================================


def simplify(fraction: Fraction) -> Fraction:
    """
    Каноническая форма дроби.

    Examples:
        >>> str(simplify(Fraction.of(6, -8)))
        '-3/4'
    """
    divisor = math.gcd(fraction.numerator, fraction.denominator)
    numerator = fraction.numerator // divisor
    denominator = fraction.denominator // divisor
    if denominator < 0:
        numerator, denominator = -numerator, -denominator
    return Fraction(numerator=numerator, denominator=denominator)


def simplify_parts(numerator: int, denominator: int) -> Fraction:
    """
    Сокращение сырой пары целых.

    denominator = 0 → 0/1 (сторожевое значение, а не ошибка).
    """
    numerator = validate_integer(numerator, "numerator")
    denominator = validate_integer(denominator, "denominator")
    if denominator == 0:
        return Fraction(numerator=0, denominator=1)
    return simplify(Fraction(numerator=numerator, denominator=denominator))


# =============================================================================
# АРИФМЕТИКА
# =============================================================================


def add(f1: Fraction, f2: Fraction) -> Fraction:
    """Сумма через НОК знаменателей (без сокращения)."""
    common = math.lcm(f1.denominator, f2.denominator)
    return Fraction(
        numerator=f1.numerator * (common // f1.denominator)
        + f2.numerator * (common // f2.denominator),
        denominator=common,
    )


def subtract(f1: Fraction, f2: Fraction) -> Fraction:
    """Разность через НОК знаменателей (без сокращения)."""
    common = math.lcm(f1.denominator, f2.denominator)
    return Fraction(
        numerator=f1.numerator * (common // f1.denominator)
        - f2.numerator * (common // f2.denominator),
        denominator=common,
    )


def multiply(f1: Fraction, f2: Fraction) -> Fraction:
    return Fraction(
        numerator=f1.numerator * f2.numerator,
        denominator=f1.denominator * f2.denominator,
    )


def divide(f1: Fraction, f2: Fraction) -> Fraction:
    """
    Деление f1 / f2 = f1 × (f2.denominator / f2.numerator).

    Raises:
        DivisionByZero: Если числитель f2 равен нулю
    """
    if f2.numerator == 0:
        raise DivisionByZero(f"Cannot divide {f1} by zero fraction {f2}")
    return Fraction(
        numerator=f1.numerator * f2.denominator,
        denominator=f1.denominator * f2.numerator,
    )


def to_decimal(fraction: Fraction) -> float:
    return fraction.numerator / fraction.denominator


# =============================================================================
# СМЕШАННЫЕ ЧИСЛА
# =============================================================================


@dataclass(frozen=True)
class MixedNumber:
    """
    Смешанное число whole + fraction.

    Знак несёт whole; fraction правильная и неотрицательная.
    """

    whole: int
    fraction: Fraction

    def __str__(self) -> str:
        return format_mixed_number(self)


def to_mixed_number(fraction: Fraction) -> Optional[MixedNumber]:
    """
    Представление неправильной дроби в виде смешанного числа.

    Returns:
        MixedNumber или None для правильной дроби

    Examples:
        >>> str(to_mixed_number(Fraction.of(-7, 2)))
        '-3 1/2'
    """
    simplified = simplify(fraction)
    numerator, denominator = simplified.numerator, simplified.denominator
    if abs(numerator) < denominator:
        return None

    whole, remainder = divmod(abs(numerator), denominator)
    return MixedNumber(
        whole=-whole if numerator < 0 else whole,
        fraction=Fraction(numerator=remainder, denominator=denominator),
    )


def mixed_number_to_fraction(whole: int, numerator: int, denominator: int) -> Fraction:
    """
    Смешанное число → неправильная дробь.

    Знак whole распространяется на дробную часть: -1 1/2 = -3/2.
    denominator = 0 → 0/1 (сторожевое значение).

    Examples:
        >>> str(mixed_number_to_fraction(2, 1, 3))
        '7/3'
    """
    whole = validate_integer(whole, "whole")
    numerator = validate_integer(numerator, "numerator")
    denominator = validate_integer(denominator, "denominator")
    if denominator == 0:
        return Fraction(numerator=0, denominator=1)

    if whole < 0:
        return Fraction(numerator=whole * denominator - numerator, denominator=denominator)
    return Fraction(numerator=whole * denominator + numerator, denominator=denominator)


# =============================================================================
# КАЛЬКУЛЯТОР
# =============================================================================


class FractionOperation(str, Enum):
    """Операции калькулятора дробей."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"


_OPERATIONS = {
    FractionOperation.ADD: add,
    FractionOperation.SUBTRACT: subtract,
    FractionOperation.MULTIPLY: multiply,
    FractionOperation.DIVIDE: divide,
}


@dataclass(frozen=True)
class FractionResult:
    """Результат калькулятора: сырой, сокращённый, десятичный, смешанный."""

    result: Fraction
    simplified: Fraction
    decimal: float
    mixed_number: Optional[MixedNumber]


def _summarize(result: Fraction, decimal: Optional[float] = None) -> FractionResult:
    simplified = simplify(result)
    return FractionResult(
        result=result,
        simplified=simplified,
        decimal=to_decimal(simplified) if decimal is None else decimal,
        mixed_number=to_mixed_number(simplified),
    )


def calculate(
    f1: Fraction, f2: Fraction, operation: FractionOperation | str
) -> FractionResult:
    """
    Выполнение операции с полным отчётом.

    Raises:
        DivisionByZero: При делении на дробь с нулевым числителем
        ValueError: Если operation неизвестна

    Examples:
        >>> calculate(Fraction.of(1, 2), Fraction.of(1, 3), "add").simplified.denominator
        6
    """
    operation = FractionOperation(operation)
    return _summarize(_OPERATIONS[operation](f1, f2))


def decimal_to_fraction(text: str) -> FractionResult:
    """
    Десятичная запись → дробь.

    Число цифр после точки задаёт знаменатель 10^k: "0.75" → 75/100 → 3/4.

    Raises:
        InvalidInput: Если строка не является конечным десятичным числом

    Examples:
        >>> str(decimal_to_fraction("0.75").simplified)
        '3/4'
    """
    try:
        value = Decimal(str(text).strip())
    except InvalidOperation:
        raise InvalidInput(f"Cannot parse decimal number from {text!r}")
    if not value.is_finite():
        raise InvalidInput(f"Decimal number must be finite, got {text!r}")

    exponent = value.as_tuple().exponent
    places = -exponent if exponent < 0 else 0
    denominator = 10**places
    numerator = int(value.scaleb(places))

    return _summarize(
        Fraction(numerator=numerator, denominator=denominator), decimal=float(value)
    )


# =============================================================================
# ФОРМАТИРОВАНИЕ
# =============================================================================


def format_fraction(fraction: Fraction) -> str:
    """'n/d', или 'n' при знаменателе 1."""
    if fraction.denominator == 1:
        return str(fraction.numerator)
    return f"{fraction.numerator}/{fraction.denominator}"


def format_mixed_number(mixed: MixedNumber) -> str:
    """'w n/d', или 'w' при нулевой дробной части."""
    if mixed.fraction.numerator == 0:
        return str(mixed.whole)
    return f"{mixed.whole} {mixed.fraction.numerator}/{mixed.fraction.denominator}"
