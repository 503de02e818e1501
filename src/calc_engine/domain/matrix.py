"""
Matrix — прямоугольная матрица float

Immutable Pydantic модель. Данные хранятся как tuple of tuples, поэтому
результат любой операции — новый экземпляр, без алиасинга строк между
операциями.

ИНВАРИАНТЫ:
1. data содержит ровно rows строк, каждая длины cols
2. Все элементы конечны (NaN/Inf отклоняются при создании)
"""

import math
from typing import Sequence

from pydantic import BaseModel, Field, model_validator


class Matrix(BaseModel):
    """
    Матрица rows × cols.

    Immutable модель (frozen=True). Все изменения создают новый экземпляр.
    """

    rows: int = Field(..., ge=1, description="Количество строк")
    cols: int = Field(..., ge=1, description="Количество столбцов")
    data: tuple[tuple[float, ...], ...] = Field(..., description="Элементы по строкам")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_shape(self) -> "Matrix":
        """Проверка формы и конечности элементов."""
        if len(self.data) != self.rows:
            raise ValueError(f"Matrix declares {self.rows} rows but data has {len(self.data)}")
        for i, row in enumerate(self.data):
            if len(row) != self.cols:
                raise ValueError(
                    f"Row {i} has length {len(row)}, expected {self.cols}"
                )
            for j, value in enumerate(row):
                if not math.isfinite(value):
                    raise ValueError(f"Element ({i}, {j}) is not finite: {value}")
        return self

    # -------------------------------------------------------------------------
    # Конструкторы
    # -------------------------------------------------------------------------

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "Matrix":
        """
        Создание из списка строк.

        Examples:
            >>> Matrix.from_rows([[1, 2], [3, 4]]).cols
            2
        """
        data = tuple(tuple(float(v) for v in row) for row in rows)
        n_cols = len(data[0]) if data else 0
        return cls(rows=len(data), cols=n_cols, data=data)

    @classmethod
    def zeros(cls, rows: int, cols: int) -> "Matrix":
        return cls(rows=rows, cols=cols, data=tuple((0.0,) * cols for _ in range(rows)))

    @classmethod
    def identity(cls, n: int) -> "Matrix":
        return cls(
            rows=n,
            cols=n,
            data=tuple(tuple(1.0 if i == j else 0.0 for j in range(n)) for i in range(n)),
        )

    # -------------------------------------------------------------------------
    # Свойства
    # -------------------------------------------------------------------------

    @property
    def is_square(self) -> bool:
        return self.rows == self.cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.cols)

    def to_lists(self) -> list[list[float]]:
        """Изменяемая копия данных (рабочая сетка для алгоритмов исключения)."""
        return [list(row) for row in self.data]
