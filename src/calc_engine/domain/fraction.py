"""
Fraction — рациональное число numerator/denominator

Immutable Pydantic модель. Каноническая форма (после simplify):
denominator > 0, gcd(|numerator|, denominator) = 1. До упрощения знак
может находиться в знаменателе.

ИНВАРИАНТ: denominator ≠ 0 (нарушение → DivisionByZero при создании).
"""

from pydantic import BaseModel, Field, model_validator

from src.calc_engine.errors import DivisionByZero


class Fraction(BaseModel):
    """
    Дробь с целыми числителем и знаменателем.

    Immutable модель (frozen=True).
    """

    numerator: int = Field(..., description="Числитель")
    denominator: int = Field(..., description="Знаменатель (≠ 0)")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_denominator(self) -> "Fraction":
        """Нулевой знаменатель недопустим."""
        if self.denominator == 0:
            raise DivisionByZero(
                f"Fraction {self.numerator}/{self.denominator} has a zero denominator"
            )
        return self

    @classmethod
    def of(cls, numerator: int, denominator: int = 1) -> "Fraction":
        """Краткий конструктор: Fraction.of(3, 4)."""
        return cls(numerator=numerator, denominator=denominator)

    @property
    def is_proper(self) -> bool:
        """|numerator| < |denominator|."""
        return abs(self.numerator) < abs(self.denominator)

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"
