"""
Matrix Algebra — плотная линейная алгебра над малыми матрицами

Операции:
- add / subtract / multiply / transpose
- determinant: 1×1, 2×2 в замкнутой форме; n > 2 — исключение Гаусса
  с частичным выбором главного элемента
- inverse: 1×1, 2×2 в замкнутой форме; n > 2 — Гаусс-Жордан над [A | I]

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. |pivot| < EPS_PIVOT → матрица вырождена: determinant = 0.0, inverse = None
   (никогда не возвращается "почти бесконечная" матрица)
2. Каждая перестановка строк умножает текущий детерминант на -1
3. Входные матрицы не изменяются: алгоритмы работают на рабочей копии
4. Несовпадение размерностей → DimensionMismatch
5. Результат с Inf/NaN (переполнение float) → NumericOverflow
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.calc_engine.config import EngineLimits, check_matrix_dimension
from src.calc_engine.domain.matrix import Matrix
from src.calc_engine.errors import (
    DimensionMismatch,
    InvalidInput,
    NumericOverflow,
    Singular,
)
from src.calc_engine.math.numerical_safeguards import EPS_PIVOT


# =============================================================================
# ПОЭЛЕМЕНТНЫЕ ОПЕРАЦИИ
# =============================================================================


def _require_same_shape(a: Matrix, b: Matrix, operation: str) -> None:
    if a.shape != b.shape:
        raise DimensionMismatch(
            f"Cannot {operation} matrices of shapes {a.rows}×{a.cols} and {b.rows}×{b.cols}"
        )


def _require_square(a: Matrix, operation: str) -> None:
    if not a.is_square:
        raise DimensionMismatch(
            f"{operation} requires a square matrix, got {a.rows}×{a.cols}"
        )


def _checked_matrix(rows: list[list[float]], operation: str) -> Matrix:
    """Matrix из вычисленных строк; Inf/NaN → NumericOverflow."""
    for i, row in enumerate(rows):
        for j, value in enumerate(row):
            if not math.isfinite(value):
                raise NumericOverflow(
                    f"{operation} overflows float range at element ({i}, {j}): {value}"
                )
    return Matrix.from_rows(rows)


def _checked_scalar(value: float, operation: str) -> float:
    if not math.isfinite(value):
        raise NumericOverflow(f"{operation} overflows float range: {value}")
    return value


def add(a: Matrix, b: Matrix) -> Matrix:
    """
    Поэлементная сумма.

    Raises:
        DimensionMismatch: Если формы a и b различаются
        NumericOverflow: Если сумма выходит за диапазон float
    """
    _require_same_shape(a, b, "add")
    return _checked_matrix(
        [[x + y for x, y in zip(row_a, row_b)] for row_a, row_b in zip(a.data, b.data)],
        "add",
    )


def subtract(a: Matrix, b: Matrix) -> Matrix:
    """
    Поэлементная разность a - b.

    Raises:
        DimensionMismatch: Если формы a и b различаются
        NumericOverflow: Если разность выходит за диапазон float
    """
    _require_same_shape(a, b, "subtract")
    return _checked_matrix(
        [[x - y for x, y in zip(row_a, row_b)] for row_a, row_b in zip(a.data, b.data)],
        "subtract",
    )


def multiply(a: Matrix, b: Matrix) -> Matrix:
    """
    Матричное произведение a·b (rows_a × cols_b).

    Raises:
        DimensionMismatch: Если a.cols != b.rows
        NumericOverflow: Если произведение выходит за диапазон float
    """
    if a.cols != b.rows:
        raise DimensionMismatch(
            f"Cannot multiply {a.rows}×{a.cols} by {b.rows}×{b.cols}: "
            f"a.cols must equal b.rows"
        )
    columns = list(zip(*b.data))
    return _checked_matrix(
        [[sum(x * y for x, y in zip(row, col)) for col in columns] for row in a.data],
        "multiply",
    )


def transpose(a: Matrix) -> Matrix:
    """Транспонирование (всегда допустимо)."""
    return Matrix.from_rows([list(col) for col in zip(*a.data)])


# =============================================================================
# ДЕТЕРМИНАНТ
# =============================================================================


def _pivot_row(grid: list[list[float]], col: int, start: int) -> int:
    """Строка с максимальным |value| в столбце col на или ниже start."""
    best = start
    for row in range(start + 1, len(grid)):
        if abs(grid[row][col]) > abs(grid[best][col]):
            best = row
    return best


def determinant(a: Matrix) -> float:
    """
    Детерминант квадратной матрицы.

    Для n > 2: исключение Гаусса с частичным выбором главного элемента,
    детерминант = (±1) × произведение pivot-ов.

    Args:
        a: Квадратная матрица

    Returns:
        Детерминант; ровно 0.0 если встречен pivot с |pivot| < EPS_PIVOT

    Raises:
        DimensionMismatch: Если матрица не квадратная
        NumericOverflow: Если детерминант выходит за диапазон float

    Examples:
        >>> determinant(Matrix.from_rows([[1, 2], [3, 4]]))
        -2.0
    """
    _require_square(a, "determinant")
    n = a.rows

    if n == 1:
        return a.data[0][0]
    if n == 2:
        (p, q), (r, s) = a.data
        return _checked_scalar(p * s - q * r, "determinant")

    grid = a.to_lists()
    det = 1.0
    for col in range(n):
        pivot = _pivot_row(grid, col, col)
        if pivot != col:
            grid[col], grid[pivot] = grid[pivot], grid[col]
            det = -det

        if abs(grid[col][col]) < EPS_PIVOT:
            return 0.0

        det *= grid[col][col]
        for row in range(col + 1, n):
            factor = grid[row][col] / grid[col][col]
            for k in range(col, n):
                grid[row][k] -= factor * grid[col][k]

    return _checked_scalar(det, "determinant")


# =============================================================================
# ОБРАТНАЯ МАТРИЦА
# =============================================================================


def _gauss_jordan_inverse(a: Matrix) -> Matrix:
    """
    Гаусс-Жордан над расширенной матрицей [A | I].

    Raises:
        Singular: Если встречен pivot с |pivot| < EPS_PIVOT
    """
    n = a.rows
    grid = [row + [1.0 if i == j else 0.0 for j in range(n)] for i, row in enumerate(a.to_lists())]

    for col in range(n):
        pivot = _pivot_row(grid, col, col)
        if pivot != col:
            grid[col], grid[pivot] = grid[pivot], grid[col]

        pivot_value = grid[col][col]
        if abs(pivot_value) < EPS_PIVOT:
            raise Singular(f"Pivot {pivot_value!r} in column {col} is below {EPS_PIVOT}")

        grid[col] = [v / pivot_value for v in grid[col]]
        for row in range(n):
            if row == col:
                continue
            factor = grid[row][col]
            if factor != 0.0:
                grid[row] = [v - factor * p for v, p in zip(grid[row], grid[col])]

    return _checked_matrix([row[n:] for row in grid], "inverse")


def inverse(a: Matrix) -> Optional[Matrix]:
    """
    Обратная матрица.

    Args:
        a: Квадратная матрица

    Returns:
        A⁻¹ или None, если матрица вырождена (|det| или |pivot| < EPS_PIVOT)

    Raises:
        DimensionMismatch: Если матрица не квадратная
        NumericOverflow: Если элементы A⁻¹ (или det для 2×2) выходят за диапазон float

    Examples:
        >>> inverse(Matrix.from_rows([[1, 2], [3, 4]])).data
        ((-2.0, 1.0), (1.5, -0.5))
    """
    _require_square(a, "inverse")
    n = a.rows

    if n == 1:
        value = a.data[0][0]
        if abs(value) < EPS_PIVOT:
            return None
        return _checked_matrix([[1.0 / value]], "inverse")

    if n == 2:
        det = determinant(a)
        if abs(det) < EPS_PIVOT:
            return None
        (p, q), (r, s) = a.data
        return _checked_matrix([[s / det, -q / det], [-r / det, p / det]], "inverse")

    try:
        return _gauss_jordan_inverse(a)
    except Singular:
        return None


def matrices_close(a: Matrix, b: Matrix, tol: float = 1e-6) -> bool:
    """Поэлементное сравнение с абсолютным допуском tol (формы должны совпадать)."""
    if a.shape != b.shape:
        return False
    return all(
        abs(x - y) <= tol
        for row_a, row_b in zip(a.data, b.data)
        for x, y in zip(row_a, row_b)
    )


# =============================================================================
# ДИСПЕТЧЕР ОПЕРАЦИЙ
# =============================================================================


class MatrixOperation(str, Enum):
    """Операции матричного калькулятора."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DETERMINANT = "determinant"
    INVERSE = "inverse"
    TRANSPOSE = "transpose"


BINARY_OPERATIONS = frozenset(
    {MatrixOperation.ADD, MatrixOperation.SUBTRACT, MatrixOperation.MULTIPLY}
)


@dataclass(frozen=True)
class MatrixOperationResult:
    """Результат perform_operation."""

    ok: bool
    operation: MatrixOperation

    # Результат: матрица (add/subtract/multiply/inverse/transpose) или скаляр (determinant)
    matrix: Optional[Matrix] = None
    scalar: Optional[float] = None

    # Код отказа: dimension_mismatch | singular | missing_operand | limit_exceeded | overflow
    failure: Optional[str] = None

    # Детали
    details: str = ""


def perform_operation(
    operation: MatrixOperation | str,
    a: Matrix,
    b: Optional[Matrix] = None,
    limits: Optional[EngineLimits] = None,
) -> MatrixOperationResult:
    """
    Выполнение операции калькулятора с отчётом вместо исключений.

    Порядок проверок:
    1. Лимиты размера (если переданы limits)
    2. Наличие второго операнда для бинарных операций
    3. Размерности (DimensionMismatch → failure="dimension_mismatch")
    4. Вырожденность для inverse (→ failure="singular")
    5. Переполнение float в результате (NumericOverflow → failure="overflow")

    Args:
        operation: Операция (MatrixOperation или её строковое значение)
        a: Первый операнд
        b: Второй операнд (для add/subtract/multiply)
        limits: Лимиты ресурсов (None → без ограничений)

    Raises:
        ValueError: Если operation неизвестна
    """
    operation = MatrixOperation(operation)

    if limits is not None:
        try:
            for operand in (a, b):
                if operand is not None:
                    check_matrix_dimension(operand.rows, operand.cols, limits)
        except InvalidInput as e:
            return MatrixOperationResult(
                ok=False, operation=operation, failure="limit_exceeded", details=str(e)
            )

    if operation in BINARY_OPERATIONS and b is None:
        return MatrixOperationResult(
            ok=False,
            operation=operation,
            failure="missing_operand",
            details=f"{operation.value} requires two matrices",
        )

    try:
        if operation == MatrixOperation.ADD:
            return MatrixOperationResult(ok=True, operation=operation, matrix=add(a, b))
        if operation == MatrixOperation.SUBTRACT:
            return MatrixOperationResult(ok=True, operation=operation, matrix=subtract(a, b))
        if operation == MatrixOperation.MULTIPLY:
            return MatrixOperationResult(ok=True, operation=operation, matrix=multiply(a, b))
        if operation == MatrixOperation.TRANSPOSE:
            return MatrixOperationResult(ok=True, operation=operation, matrix=transpose(a))
        if operation == MatrixOperation.DETERMINANT:
            return MatrixOperationResult(ok=True, operation=operation, scalar=determinant(a))

        result = inverse(a)
    except DimensionMismatch as e:
        return MatrixOperationResult(
            ok=False, operation=operation, failure="dimension_mismatch", details=str(e)
        )
    except NumericOverflow as e:
        return MatrixOperationResult(
            ok=False, operation=operation, failure="overflow", details=str(e)
        )

    if result is None:
        return MatrixOperationResult(
            ok=False,
            operation=operation,
            failure="singular",
            details="Matrix is singular (determinant is zero), no inverse exists",
        )
    return MatrixOperationResult(ok=True, operation=operation, matrix=result)
