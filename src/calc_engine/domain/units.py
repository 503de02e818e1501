"""
Units — декларативные единицы измерения и конверсия через базовую единицу

Единственный допустимый способ конверсии между единицами одной категории:
    value(from) → from.to_base → base → to.from_base → value(to)

Прямые правила unit-to-unit ЗАПРЕЩЕНЫ: новая единица добавляется только
парой преобразований к базовой единице категории (O(n), а не O(n²)).

Преобразования — tagged variant (поле kind):
- AffineTransform{scale, offset}: to_base(x) = scale·x + offset
  (>95% таблиц, включая температурные шкалы со смещением)
- ReciprocalTransform{numerator}: to_base(x) = k/x, само-обратное
  (проводимость ↔ сопротивление, L/100km ↔ km/L, период ↔ частота)
- CustomTransform{name}: именованная пара (forward, inverse) из CUSTOM_TRANSFORMS
  (логарифмические шкалы: dBm, dBW)

ИНВАРИАНТЫ:
1. from_base(to_base(x)) ≈ x для любого конечного x (rel_tol 1e-9)
2. id единиц уникальны внутри категории
3. Базовая единица категории — тождественное преобразование
4. Reciprocal при x = 0 возвращает ±Infinity (это результат, а не ошибка)
"""

import math
from typing import Annotated, Callable, Final, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from src.calc_engine.errors import InvalidInput, UnitNotFound

UnitFn = Callable[[float], float]

# Относительная толерантность инварианта round-trip
ROUNDTRIP_REL_TOL: Final[float] = 1e-9

# Опорные мощности логарифмических шкал (W)
DBM_REFERENCE_W: Final[float] = 1e-3
DBW_REFERENCE_W: Final[float] = 1.0


# =============================================================================
# ИМЕНОВАННЫЕ CUSTOM-ПРЕОБРАЗОВАНИЯ
# =============================================================================


def _decibel_to_linear(level_db: float, reference: float) -> float:
    """Уровень в dB → линейная величина: P = P_ref · 10^(L/10)."""
    try:
        return reference * 10.0 ** (level_db / 10.0)
    except OverflowError:
        return math.inf


def _linear_to_decibel(value: float, reference: float) -> float:
    """
    Линейная величина → уровень в dB: L = 10·log10(P / P_ref).

    P = 0 → -Infinity (устранимая особенность), P < 0 вне домена.
    """
    if value < 0:
        raise InvalidInput(f"Decibel scale is undefined for negative power: {value}")
    if value == 0:
        return -math.inf
    return 10.0 * math.log10(value / reference)


CUSTOM_TRANSFORMS: dict[str, tuple[UnitFn, UnitFn]] = {
    "dBm": (
        lambda x: _decibel_to_linear(x, DBM_REFERENCE_W),
        lambda w: _linear_to_decibel(w, DBM_REFERENCE_W),
    ),
    "dBW": (
        lambda x: _decibel_to_linear(x, DBW_REFERENCE_W),
        lambda w: _linear_to_decibel(w, DBW_REFERENCE_W),
    ),
}


# =============================================================================
# TRANSFORMS
# =============================================================================


class AffineTransform(BaseModel):
    """
    Аффинное преобразование к базовой единице: scale·x + offset.

    Сериализуемо и обратимо по построению (scale ≠ 0).
    """

    kind: Literal["affine"] = "affine"
    scale: float = Field(..., allow_inf_nan=False, description="Множитель к базовой единице")
    offset: float = Field(0.0, allow_inf_nan=False, description="Смещение (температурные шкалы)")

    model_config = {"frozen": True}

    @field_validator("scale")
    @classmethod
    def validate_scale_nonzero(cls, v: float) -> float:
        """Нулевой множитель необратим."""
        if v == 0:
            raise ValueError("Affine scale must be non-zero")
        return v

    def to_base(self, x: float) -> float:
        return self.scale * x + self.offset

    def from_base(self, y: float) -> float:
        return (y - self.offset) / self.scale


def _reciprocal(numerator: float, x: float) -> float:
    if x == 0:
        # знак нуля сохраняется: k/(+0) = +inf, k/(-0) = -inf
        return math.copysign(math.inf, numerator) * math.copysign(1.0, x)
    return numerator / x


class ReciprocalTransform(BaseModel):
    """
    Обратное преобразование: to_base(x) = k/x, from_base(y) = k/y.

    Пример: 1 mS ↔ 1000 Ω (k = 1000).
    """

    kind: Literal["reciprocal"] = "reciprocal"
    numerator: float = Field(1.0, allow_inf_nan=False, description="Числитель k")

    model_config = {"frozen": True}

    @field_validator("numerator")
    @classmethod
    def validate_numerator_nonzero(cls, v: float) -> float:
        if v == 0:
            raise ValueError("Reciprocal numerator must be non-zero")
        return v

    def to_base(self, x: float) -> float:
        return _reciprocal(self.numerator, x)

    def from_base(self, y: float) -> float:
        return _reciprocal(self.numerator, y)


class CustomTransform(BaseModel):
    """
    Именованная пара монотонных функций (forward, inverse).

    В табличных данных хранится только name; функции подставляются
    из CUSTOM_TRANSFORMS при валидации и не сериализуются.
    """

    kind: Literal["custom"] = "custom"
    name: str = Field(..., min_length=1, description="Имя преобразования")
    forward: UnitFn = Field(..., exclude=True, repr=False)
    inverse: UnitFn = Field(..., exclude=True, repr=False)

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def resolve_named_transform(cls, data):
        """Подстановка (forward, inverse) по имени, если функции не переданы явно."""
        if isinstance(data, dict) and ("forward" not in data or "inverse" not in data):
            name = data.get("name")
            if name not in CUSTOM_TRANSFORMS:
                raise ValueError(f"Unknown custom transform: {name!r}")
            forward, inverse = CUSTOM_TRANSFORMS[name]
            data = {**data, "forward": forward, "inverse": inverse}
        return data

    def to_base(self, x: float) -> float:
        return self.forward(x)

    def from_base(self, y: float) -> float:
        return self.inverse(y)


Transform = Annotated[
    Union[AffineTransform, ReciprocalTransform, CustomTransform],
    Field(discriminator="kind"),
]


# =============================================================================
# UNIT / CATEGORY
# =============================================================================


class Unit(BaseModel):
    """
    Единица измерения внутри категории.

    Immutable модель (frozen=True).
    """

    id: str = Field(..., min_length=1, description="Уникальный id внутри категории")
    label: str = Field(..., min_length=1, description="Название единицы")
    symbol: Optional[str] = Field(None, description="Обозначение (например, 'km')")
    transform: Transform = Field(..., description="Преобразование к базовой единице")

    model_config = {"frozen": True}

    @classmethod
    def scaled(
        cls, id: str, label: str, symbol: Optional[str], factor_to_base: float
    ) -> "Unit":
        """Чисто мультипликативная единица: to_base(x) = factor·x."""
        return cls(
            id=id,
            label=label,
            symbol=symbol,
            transform=AffineTransform(scale=factor_to_base),
        )

    def to_base(self, x: float) -> float:
        return self.transform.to_base(x)

    def from_base(self, y: float) -> float:
        return self.transform.from_base(y)


class ConversionCategory(BaseModel):
    """
    Категория конверсии: набор единиц с общей базовой единицей.

    Immutable модель (frozen=True).
    """

    id: str = Field(..., min_length=1, description="Идентификатор категории")
    name: str = Field(..., min_length=1, description="Название категории")
    group: Optional[str] = Field(None, description="Группа (Measurement, Science, ...)")
    description: Optional[str] = Field(None, description="Описание")
    base_unit_id: str = Field(..., min_length=1, description="id базовой единицы")
    units: tuple[Unit, ...] = Field(..., min_length=1, description="Единицы категории")
    popular_pairs: tuple[tuple[str, str], ...] = Field(
        default=(), description="Популярные пары (from_id, to_id)"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_units(self) -> "ConversionCategory":
        """
        Проверка инвариантов категории.

        - id единиц уникальны
        - базовая единица присутствует и тождественна
        - популярные пары ссылаются на существующие единицы
        """
        ids = [u.id for u in self.units]
        duplicates = sorted({unit_id for unit_id in ids if ids.count(unit_id) > 1})
        if duplicates:
            raise ValueError(f"Duplicate unit ids in category {self.id!r}: {duplicates}")

        if self.base_unit_id not in ids:
            raise ValueError(
                f"Base unit {self.base_unit_id!r} is not defined in category {self.id!r}"
            )

        base = self.units[ids.index(self.base_unit_id)]
        for sample in (1.0, 10.0):
            if not math.isclose(base.to_base(sample), sample, rel_tol=ROUNDTRIP_REL_TOL):
                raise ValueError(
                    f"Base unit {self.base_unit_id!r} of category {self.id!r} "
                    f"must be the identity transform"
                )

        for from_id, to_id in self.popular_pairs:
            if from_id not in ids or to_id not in ids:
                raise ValueError(
                    f"Popular pair ({from_id!r}, {to_id!r}) references unknown units "
                    f"in category {self.id!r}"
                )
        return self

    @property
    def unit_ids(self) -> list[str]:
        return [u.id for u in self.units]

    @property
    def base_unit(self) -> Unit:
        return get_unit(self, self.base_unit_id)


# =============================================================================
# КОНВЕРСИЯ
# =============================================================================


def get_unit(category: ConversionCategory, unit_id: str) -> Unit:
    """
    Поиск единицы по id.

    Raises:
        UnitNotFound: Если единицы нет в категории
    """
    for unit in category.units:
        if unit.id == unit_id:
            return unit
    raise UnitNotFound(f"Unit {unit_id!r} not found in {category.id!r}")


def convert(
    value: float, category: ConversionCategory, from_id: str, to_id: str
) -> float:
    """
    Конверсия value из from_id в to_id через базовую единицу категории.

    Args:
        value: Исходное значение (конечное)
        category: Категория конверсии
        from_id: id исходной единицы
        to_id: id целевой единицы

    Returns:
        Значение в целевой единице (может быть ±Infinity для reciprocal-единиц при 0)

    Raises:
        UnitNotFound: Если from_id или to_id отсутствуют в категории
        InvalidInput: Если value NaN/Inf

    Examples:
        >>> convert(100.0, temperature, "C", "F")  # doctest: +SKIP
        212.0
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidInput(f"Conversion value must be a finite number, got {value!r}")

    source = get_unit(category, from_id)
    target = get_unit(category, to_id)

    base = source.to_base(value)
    return target.from_base(base)
