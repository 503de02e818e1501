"""
Descriptive Statistics — описательная статистика, доверительный интервал, регрессия

Модуль реализует:
- describe: среднее, медиана, мода (мультимодальная), разброс, дисперсии,
  квартили, IQR и выбросы по правилу 1.5·IQR
- confidence_interval: z-интервал для среднего при известной σ
- linear_regression: МНК y = slope·x + intercept, корреляция Пирсона, R²

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. NaN/Inf отбрасываются до вычислений (никогда не распространяются)
2. Выборочная дисперсия (n - 1) определена только при count ≥ 2 (иначе None)
3. Квартили по индексам ⌊n/4⌋ и ⌊3n/4⌋ отсортированной выборки; при n % 4 = 0
   усредняются с нижним соседом
4. Результаты неизменяемы и пересчитываются при каждом вызове (без кэша)
"""

import math
from collections import Counter
from dataclasses import dataclass
from typing import Final, Iterable, Optional, Sequence

from src.calc_engine.math.numerical_safeguards import (
    finite_values,
    is_valid_float,
    validate_finite,
    validate_non_negative,
    validate_positive_integer,
)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Множитель IQR для границ выбросов (правило Тьюки)
OUTLIER_IQR_MULTIPLIER: Final[float] = 1.5

# Двусторонние z-критические значения по уровню доверия (%)
Z_SCORES: Final[dict[int, float]] = {
    90: 1.645,
    95: 1.96,
    99: 2.576,
}

# Z для уровней вне таблицы (ограничение: уровень не интерполируется)
Z_SCORE_FALLBACK: Final[float] = 1.96


# =============================================================================
# DESCRIBE
# =============================================================================


@dataclass(frozen=True)
class Quartiles:
    q1: float
    q2: float
    q3: float
    iqr: float


@dataclass(frozen=True)
class StatisticsResult:
    """Описательная статистика выборки."""

    count: int
    sum: float
    mean: float
    median: float
    mode: tuple[float, ...]
    min: float
    max: float
    range: float

    # Выборочные (n - 1); None при count < 2
    sample_variance: Optional[float]
    sample_stddev: Optional[float]

    # Генеральные (n)
    population_variance: float
    population_stddev: float

    quartiles: Quartiles
    outliers: tuple[float, ...]
    sorted_values: tuple[float, ...]


def _median(data: Sequence[float]) -> float:
    count = len(data)
    middle = count // 2
    if count % 2 == 0:
        return (data[middle - 1] + data[middle]) / 2
    return data[middle]


def _quartile(data: Sequence[float], index: int) -> float:
    if len(data) % 4 == 0:
        return (data[index - 1] + data[index]) / 2
    return data[index]


def describe(values: Iterable[float]) -> Optional[StatisticsResult]:
    """
    Описательная статистика.

    Args:
        values: Значения выборки (NaN/Inf и нечисловые отбрасываются)

    Returns:
        StatisticsResult или None, если не осталось ни одного конечного значения

    Examples:
        >>> describe(range(1, 11)).median
        5.5
    """
    data = sorted(finite_values(values))
    if not data:
        return None

    count = len(data)
    total = math.fsum(data)
    mean = total / count
    median = _median(data)

    frequency = Counter(data)
    max_frequency = max(frequency.values())
    mode = tuple(sorted(v for v, f in frequency.items() if f == max_frequency))

    squared_deviations = math.fsum((v - mean) ** 2 for v in data)
    population_variance = squared_deviations / count
    if count >= 2:
        sample_variance = squared_deviations / (count - 1)
        sample_stddev = math.sqrt(sample_variance)
    else:
        sample_variance = None
        sample_stddev = None

    q1 = _quartile(data, count // 4)
    q3 = _quartile(data, (3 * count) // 4)
    iqr = q3 - q1
    lower = q1 - OUTLIER_IQR_MULTIPLIER * iqr
    upper = q3 + OUTLIER_IQR_MULTIPLIER * iqr
    outliers = tuple(v for v in data if v < lower or v > upper)

    return StatisticsResult(
        count=count,
        sum=total,
        mean=mean,
        median=median,
        mode=mode,
        min=data[0],
        max=data[-1],
        range=data[-1] - data[0],
        sample_variance=sample_variance,
        sample_stddev=sample_stddev,
        population_variance=population_variance,
        population_stddev=math.sqrt(population_variance),
        quartiles=Quartiles(q1=q1, q2=median, q3=q3, iqr=iqr),
        outliers=outliers,
        sorted_values=tuple(data),
    )


# =============================================================================
# ДОВЕРИТЕЛЬНЫЙ ИНТЕРВАЛ
# =============================================================================


@dataclass(frozen=True)
class ConfidenceInterval:
    """Двусторонний z-интервал mean ± margin."""

    lower: float
    upper: float
    margin: float
    z_score: float
    confidence_level: float

    # False: уровня нет в Z_SCORES, использован Z_SCORE_FALLBACK
    exact_level: bool


def confidence_interval(
    mean: float,
    sample_size: int,
    confidence_level: float = 95,
    sigma: float = 1.0,
) -> ConfidenceInterval:
    """
    Доверительный интервал для среднего при известной σ.

    margin = z · σ / √n

    Args:
        mean: Выборочное среднее
        sample_size: Размер выборки n > 0
        confidence_level: Уровень доверия в процентах (90 / 95 / 99)
        sigma: Стандартное отклонение σ ≥ 0

    Raises:
        InvalidInput: Если sample_size ≤ 0, sigma < 0 или входы не конечны

    Examples:
        >>> round(confidence_interval(50, 100, 95, 10).margin, 3)
        1.96
    """
    mean = validate_finite(mean, "mean")
    sample_size = validate_positive_integer(sample_size, "sample_size")
    confidence_level = validate_finite(confidence_level, "confidence_level")
    sigma = validate_non_negative(sigma, "sigma")

    exact_level = confidence_level in Z_SCORES
    z_score = Z_SCORES[confidence_level] if exact_level else Z_SCORE_FALLBACK
    margin = z_score * sigma / math.sqrt(sample_size)

    return ConfidenceInterval(
        lower=mean - margin,
        upper=mean + margin,
        margin=margin,
        z_score=z_score,
        confidence_level=confidence_level,
        exact_level=exact_level,
    )


# =============================================================================
# ЛИНЕЙНАЯ РЕГРЕССИЯ
# =============================================================================


@dataclass(frozen=True)
class RegressionResult:
    """Результат МНК-регрессии y = slope·x + intercept."""

    slope: float
    intercept: float

    # None при постоянном y (корреляция не определена)
    correlation: Optional[float]
    r_squared: Optional[float]

    n: int

    def predict(self, x: float) -> float:
        x = validate_finite(x, "x")
        return self.slope * x + self.intercept

    @property
    def equation(self) -> str:
        return f"y = {self.slope:.4f}x + {self.intercept:.4f}"


def linear_regression(
    x: Sequence[float], y: Sequence[float]
) -> Optional[RegressionResult]:
    """
    Простая линейная регрессия методом наименьших квадратов.

    Формулы (n пар):
        slope = (n·Σxy - Σx·Σy) / (n·Σx² - (Σx)²)
        intercept = (Σy - slope·Σx) / n
        r = (n·Σxy - Σx·Σy) / √((n·Σx² - (Σx)²)(n·Σy² - (Σy)²))

    Суммы считаются в центрированной форме (эквивалентно, устойчивее к
    потере точности при больших |x|).

    Returns:
        RegressionResult или None, если:
        - len(x) != len(y)
        - после отбрасывания пар с NaN/Inf осталось < 2 пар
        - все x равны (знаменатель slope = 0)

    Examples:
        >>> linear_regression([1, 2, 3, 4, 5], [2, 4, 6, 8, 10]).slope
        2.0
    """
    if len(x) != len(y):
        return None

    pairs = [
        (float(xi), float(yi))
        for xi, yi in zip(x, y)
        if is_valid_float(xi) and is_valid_float(yi)
    ]
    if len(pairs) < 2:
        return None

    xs = [p[0] for p in pairs]
    ys = [p[1] for p in pairs]
    if min(xs) == max(xs):
        return None

    n = len(pairs)
    mean_x = math.fsum(xs) / n
    mean_y = math.fsum(ys) / n
    sxx = math.fsum((xi - mean_x) ** 2 for xi in xs)
    syy = math.fsum((yi - mean_y) ** 2 for yi in ys)
    sxy = math.fsum((xi - mean_x) * (yi - mean_y) for xi, yi in pairs)

    slope = sxy / sxx
    intercept = mean_y - slope * mean_x

    if min(ys) == max(ys):
        correlation = None
        r_squared = None
    else:
        correlation = sxy / math.sqrt(sxx * syy)
        # |r| ≤ 1 с точностью до округления
        correlation = max(-1.0, min(1.0, correlation))
        r_squared = correlation * correlation

    return RegressionResult(
        slope=slope,
        intercept=intercept,
        correlation=correlation,
        r_squared=r_squared,
        n=n,
    )
