"""
Triangle Solver — решение треугольника по SSS / SAS / ASA / прямоугольному режиму

Все режимы возвращают TriangleSolution со сторонами, углами (в градусах),
площадью, периметром, высотой к стороне a и типом треугольника.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. NaN/Inf на входе → InvalidInput (ошибка вызова)
2. Геометрическая невозможность → TriangleSolution(valid=False, reason=...),
   а не исключение
3. Сумма углов валидного решения = 180° (третий угол всегда по сумме углов)
4. Law of Sines применяется только к углу против меньшей из известных сторон
   (он всегда острый, asin однозначен)
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.calc_engine.math.numerical_safeguards import (
    EPS_PYTHAGORAS,
    is_close,
    validate_finite,
)


class TriangleType(str, Enum):
    """Тип треугольника."""

    RIGHT = "right"
    EQUILATERAL = "equilateral"
    ISOSCELES = "isosceles"
    SCALENE = "scalene"


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class TriangleSolution:
    """Результат решения треугольника (углы в градусах)."""

    valid: bool

    side_a: Optional[float] = None
    side_b: Optional[float] = None
    side_c: Optional[float] = None

    angle_a: Optional[float] = None
    angle_b: Optional[float] = None
    angle_c: Optional[float] = None

    area: Optional[float] = None
    perimeter: Optional[float] = None

    # Высота к стороне a (в прямоугольном режиме катет b)
    height: Optional[float] = None

    triangle_type: Optional[TriangleType] = None

    # Причина невалидности
    reason: str = ""

    @classmethod
    def invalid(cls, reason: str) -> "TriangleSolution":
        return cls(valid=False, reason=reason)

    @property
    def angle_sum(self) -> Optional[float]:
        if self.angle_a is None or self.angle_b is None or self.angle_c is None:
            return None
        return self.angle_a + self.angle_b + self.angle_c


# =============================================================================
# ПРОВЕРКИ
# =============================================================================


def is_valid_triangle(a: float, b: float, c: float) -> bool:
    """Строгое неравенство треугольника (из него следует a, b, c > 0)."""
    a = validate_finite(a, "a")
    b = validate_finite(b, "b")
    c = validate_finite(c, "c")
    return a + b > c and a + c > b and b + c > a


def classify_triangle(a: float, b: float, c: float) -> TriangleType:
    """
    Классификация по сторонам.

    Порядок:
    1. Прямоугольный: |short² + medium² - long²| < EPS_PYTHAGORAS
    2. Равносторонний / равнобедренный / разносторонний (сравнение через is_close)

    Examples:
        >>> classify_triangle(3, 4, 5)
        <TriangleType.RIGHT: 'right'>
    """
    short, medium, long = sorted(
        (validate_finite(a, "a"), validate_finite(b, "b"), validate_finite(c, "c"))
    )

    if abs(short * short + medium * medium - long * long) < EPS_PYTHAGORAS:
        return TriangleType.RIGHT

    short_medium = is_close(short, medium)
    medium_long = is_close(medium, long)
    if short_medium and medium_long:
        return TriangleType.EQUILATERAL
    if short_medium or medium_long or is_close(short, long):
        return TriangleType.ISOSCELES
    return TriangleType.SCALENE


def _acos_degrees(cosine: float) -> float:
    # округление может вывести аргумент за [-1, 1]
    return math.degrees(math.acos(max(-1.0, min(1.0, cosine))))


def _asin_degrees(sine: float) -> float:
    return math.degrees(math.asin(max(-1.0, min(1.0, sine))))


# =============================================================================
# РЕЖИМЫ
# =============================================================================


def solve_sss(a: float, b: float, c: float) -> TriangleSolution:
    """
    Три стороны.

    Углы A, B по теореме косинусов, C по сумме углов. Площадь по формуле Герона.

    Examples:
        >>> solve_sss(3, 4, 5).area
        6.0
    """
    if not is_valid_triangle(a, b, c):
        return TriangleSolution.invalid(
            f"Sides {a}, {b}, {c} violate the triangle inequality"
        )
    a, b, c = float(a), float(b), float(c)
    if a * c == 0 or b * c == 0:
        return TriangleSolution.invalid(
            f"Sides {a}, {b}, {c} form a degenerate triangle (products underflow)"
        )

    angle_a = _acos_degrees((b * b + c * c - a * a) / (2 * b * c))
    angle_b = _acos_degrees((a * a + c * c - b * b) / (2 * a * c))
    angle_c = 180.0 - angle_a - angle_b

    s = (a + b + c) / 2
    area = math.sqrt(max(0.0, s * (s - a) * (s - b) * (s - c)))

    return TriangleSolution(
        valid=True,
        side_a=a,
        side_b=b,
        side_c=c,
        angle_a=angle_a,
        angle_b=angle_b,
        angle_c=angle_c,
        area=area,
        perimeter=a + b + c,
        height=2 * area / a,
        triangle_type=classify_triangle(a, b, c),
    )


def solve_sas(a: float, b: float, angle_c: float) -> TriangleSolution:
    """
    Две стороны и угол между ними (C между a и b).

    Алгоритм:
    1. c² = a² + b² - 2ab·cos C, в форме (a - b)² + 4ab·sin²(C/2)
       (без вычитания близких величин при малом C)
    2. Law of Sines для угла против меньшей из a, b (острый)
    3. Оставшийся угол по сумме углов
    4. Площадь = ½·a·b·sin C
    """
    a = validate_finite(a, "a")
    b = validate_finite(b, "b")
    angle_c = validate_finite(angle_c, "angle_c")

    if a <= 0 or b <= 0:
        return TriangleSolution.invalid(f"Sides must be positive, got a={a}, b={b}")
    if not 0 < angle_c < 180:
        return TriangleSolution.invalid(f"Angle C must be in (0°, 180°), got {angle_c}")

    gamma = math.radians(angle_c)
    half_sine = math.sin(gamma / 2)
    c = math.sqrt((a - b) ** 2 + 4 * a * b * half_sine * half_sine)
    if c == 0:
        return TriangleSolution.invalid(
            f"Sides a={a}, b={b} with angle C={angle_c} form a degenerate triangle"
        )

    if a <= b:
        angle_a = _asin_degrees(a * math.sin(gamma) / c)
        angle_b = 180.0 - angle_c - angle_a
    else:
        angle_b = _asin_degrees(b * math.sin(gamma) / c)
        angle_a = 180.0 - angle_c - angle_b

    area = 0.5 * a * b * math.sin(gamma)

    return TriangleSolution(
        valid=True,
        side_a=a,
        side_b=b,
        side_c=c,
        angle_a=angle_a,
        angle_b=angle_b,
        angle_c=angle_c,
        area=area,
        perimeter=a + b + c,
        height=2 * area / a,
        triangle_type=classify_triangle(a, b, c),
    )


def solve_asa(angle_a: float, angle_b: float, c: float) -> TriangleSolution:
    """
    Два угла и сторона между ними (c между A и B).

    C = 180° - A - B; стороны a, b по теореме синусов.
    """
    angle_a = validate_finite(angle_a, "angle_a")
    angle_b = validate_finite(angle_b, "angle_b")
    c = validate_finite(c, "c")

    angle_c = 180.0 - angle_a - angle_b
    if angle_a <= 0 or angle_b <= 0 or angle_c <= 0:
        return TriangleSolution.invalid(
            f"Angles A={angle_a}, B={angle_b} leave no positive third angle"
        )
    if c <= 0:
        return TriangleSolution.invalid(f"Side c must be positive, got {c}")

    alpha, beta, gamma = math.radians(angle_a), math.radians(angle_b), math.radians(angle_c)
    a = c * math.sin(alpha) / math.sin(gamma)
    b = c * math.sin(beta) / math.sin(gamma)
    if not (math.isfinite(a) and math.isfinite(b)):
        return TriangleSolution.invalid(
            f"Sides for A={angle_a}, B={angle_b}, c={c} overflow float range"
        )
    area = 0.5 * a * b * math.sin(gamma)

    return TriangleSolution(
        valid=True,
        side_a=a,
        side_b=b,
        side_c=c,
        angle_a=angle_a,
        angle_b=angle_b,
        angle_c=angle_c,
        area=area,
        perimeter=a + b + c,
        height=2 * area / a,
        triangle_type=classify_triangle(a, b, c),
    )


def solve_right(
    leg_a: float, leg_b: float, hypotenuse: Optional[float] = None
) -> TriangleSolution:
    """
    Прямоугольный треугольник по катетам (C = 90°).

    Гипотенуза вычисляется, если не задана; если задана — проверяется
    по теореме Пифагора с допуском EPS_PYTHAGORAS.

    Examples:
        >>> solve_right(3, 4).side_c
        5.0
    """
    a = validate_finite(leg_a, "leg_a")
    b = validate_finite(leg_b, "leg_b")
    if a <= 0 or b <= 0:
        return TriangleSolution.invalid(f"Legs must be positive, got a={a}, b={b}")

    if hypotenuse is None:
        c = math.sqrt(a * a + b * b)
    else:
        c = validate_finite(hypotenuse, "hypotenuse")
        if abs(a * a + b * b - c * c) > EPS_PYTHAGORAS:
            return TriangleSolution.invalid(
                f"{a}² + {b}² ≠ {c}²: not a right triangle"
            )

    return TriangleSolution(
        valid=True,
        side_a=a,
        side_b=b,
        side_c=c,
        angle_a=math.degrees(math.atan(a / b)),
        angle_b=math.degrees(math.atan(b / a)),
        angle_c=90.0,
        area=0.5 * a * b,
        perimeter=a + b + c,
        height=b,
        triangle_type=TriangleType.RIGHT,
    )


def area_from_base_height(base: float, height: float) -> TriangleSolution:
    """Площадь = ½·base·height (стороны и углы не определяются)."""
    base = validate_finite(base, "base")
    height = validate_finite(height, "height")
    if base <= 0 or height <= 0:
        return TriangleSolution.invalid(
            f"Base and height must be positive, got base={base}, height={height}"
        )
    return TriangleSolution(valid=True, area=0.5 * base * height, height=height)
