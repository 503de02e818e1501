"""
Тесты для модуля Matrix Algebra

Проверяет:
1. Поэлементные операции и произведение
2. Детерминант (замкнутые формы, исключение Гаусса с выбором pivot)
3. Обратную матрицу (замкнутые формы, Гаусс-Жордан, вырожденность)
4. Диспетчер perform_operation (коды отказов)
5. Переполнение float → NumericOverflow
6. Свойства: det(Aᵀ) = det(A), A⁻¹·A ≈ I
"""

import pytest

from src.calc_engine.config import EngineLimits
from src.calc_engine.domain.matrix import Matrix
from src.calc_engine.errors import DimensionMismatch, NumericOverflow
from src.calc_engine.math.matrix_algebra import (
    MatrixOperation,
    add,
    determinant,
    inverse,
    matrices_close,
    multiply,
    perform_operation,
    subtract,
    transpose,
)

# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def a2() -> Matrix:
    return Matrix.from_rows([[1, 2], [3, 4]])


@pytest.fixture
def a3() -> Matrix:
    return Matrix.from_rows([[2, -1, 0], [-1, 2, -1], [0, -1, 2]])


@pytest.fixture
def singular3() -> Matrix:
    return Matrix.from_rows([[1, 2, 3], [4, 5, 6], [7, 8, 9]])


# =============================================================================
# ПОЭЛЕМЕНТНЫЕ ОПЕРАЦИИ
# =============================================================================


class TestElementwise:
    def test_add(self, a2) -> None:
        assert add(a2, a2).data == ((2.0, 4.0), (6.0, 8.0))

    def test_subtract(self, a2) -> None:
        assert subtract(a2, a2) == Matrix.zeros(2, 2)

    def test_shape_mismatch(self, a2) -> None:
        with pytest.raises(DimensionMismatch, match="2×2 and 1×2"):
            add(a2, Matrix.from_rows([[1, 2]]))
        with pytest.raises(DimensionMismatch):
            subtract(a2, Matrix.from_rows([[1], [2]]))

    def test_inputs_not_mutated(self, a2) -> None:
        before = a2.data
        add(a2, a2)
        determinant(a2)
        inverse(a2)
        assert a2.data == before


class TestMultiply:
    def test_square(self, a2) -> None:
        assert multiply(a2, a2).data == ((7.0, 10.0), (15.0, 22.0))

    def test_rectangular(self) -> None:
        a = Matrix.from_rows([[1, 2, 3]])
        b = Matrix.from_rows([[1], [2], [3]])
        assert multiply(a, b).data == ((14.0,),)
        assert multiply(b, a).shape == (3, 3)

    def test_identity_neutral(self, a3) -> None:
        assert multiply(a3, Matrix.identity(3)) == a3

    def test_incompatible(self, a2) -> None:
        with pytest.raises(DimensionMismatch, match="a.cols must equal b.rows"):
            multiply(a2, Matrix.from_rows([[1, 2, 3]]))


class TestTranspose:
    def test_rectangular(self) -> None:
        m = Matrix.from_rows([[1, 2, 3], [4, 5, 6]])
        assert transpose(m).data == ((1.0, 4.0), (2.0, 5.0), (3.0, 6.0))

    def test_involution(self, a3) -> None:
        assert transpose(transpose(a3)) == a3


# =============================================================================
# ДЕТЕРМИНАНТ
# =============================================================================


class TestDeterminant:
    """Тесты determinant"""

    def test_1x1(self) -> None:
        assert determinant(Matrix.from_rows([[-3.5]])) == -3.5

    def test_2x2(self, a2) -> None:
        assert determinant(a2) == -2.0

    def test_3x3(self, a3) -> None:
        assert determinant(a3) == pytest.approx(4.0)

    def test_row_swap_flips_sign(self) -> None:
        """Перестановка строк при выборе pivot меняет знак"""
        m = Matrix.from_rows([[0, 1, 0], [1, 0, 0], [0, 0, 1]])
        assert determinant(m) == pytest.approx(-1.0)

    def test_singular_is_exact_zero(self, singular3) -> None:
        """Pivot ниже порога → ровно 0.0"""
        assert determinant(singular3) == 0.0

    def test_zero_column(self) -> None:
        m = Matrix.from_rows([[0, 1, 2], [0, 3, 4], [0, 5, 6]])
        assert determinant(m) == 0.0

    def test_transpose_invariant(self, a3) -> None:
        m = Matrix.from_rows([[3, 1, 4, 1], [5, 9, 2, 6], [5, 3, 5, 8], [9, 7, 9, 3]])
        assert determinant(transpose(m)) == pytest.approx(determinant(m))
        assert determinant(transpose(a3)) == pytest.approx(determinant(a3))

    def test_non_square(self) -> None:
        with pytest.raises(DimensionMismatch, match="square"):
            determinant(Matrix.from_rows([[1, 2, 3]]))


# =============================================================================
# ОБРАТНАЯ МАТРИЦА
# =============================================================================


class TestInverse:
    """Тесты inverse"""

    def test_2x2_closed_form(self, a2) -> None:
        assert inverse(a2).data == ((-2.0, 1.0), (1.5, -0.5))

    def test_1x1(self) -> None:
        assert inverse(Matrix.from_rows([[4]])).data == ((0.25,),)
        assert inverse(Matrix.from_rows([[0]])) is None

    def test_2x2_singular(self) -> None:
        assert inverse(Matrix.from_rows([[1, 2], [2, 4]])) is None

    def test_3x3_product_is_identity(self, a3) -> None:
        """A⁻¹·A ≈ I"""
        inv = inverse(a3)
        assert matrices_close(multiply(inv, a3), Matrix.identity(3), tol=1e-6)
        assert matrices_close(multiply(a3, inv), Matrix.identity(3), tol=1e-6)

    def test_needs_pivoting(self) -> None:
        """Нулевой диагональный элемент требует перестановки строк"""
        m = Matrix.from_rows([[0, 1, 0], [1, 0, 0], [0, 0, 2]])
        inv = inverse(m)
        assert matrices_close(multiply(inv, m), Matrix.identity(3))

    def test_5x5(self) -> None:
        m = Matrix.from_rows(
            [[4 if i == j else 1 for j in range(5)] for i in range(5)]
        )
        assert matrices_close(multiply(inverse(m), m), Matrix.identity(5))

    def test_singular_returns_none(self, singular3) -> None:
        """Вырожденная матрица → None, а не вырожденный результат"""
        assert inverse(singular3) is None

    def test_non_square(self) -> None:
        with pytest.raises(DimensionMismatch):
            inverse(Matrix.from_rows([[1, 2]]))


class TestOverflow:
    """Результат за пределами float не превращается в Matrix с Inf"""

    def test_add_overflow(self) -> None:
        huge = Matrix.from_rows([[1e308, 1.0]])
        with pytest.raises(NumericOverflow, match="add"):
            add(huge, huge)

    def test_subtract_overflow(self) -> None:
        with pytest.raises(NumericOverflow):
            subtract(Matrix.from_rows([[1e308]]), Matrix.from_rows([[-1e308]]))

    def test_multiply_overflow(self) -> None:
        huge = Matrix.from_rows([[1e200, 0], [0, 1e200]])
        with pytest.raises(NumericOverflow, match="multiply"):
            multiply(huge, huge)

    def test_determinant_overflow(self) -> None:
        with pytest.raises(NumericOverflow):
            determinant(Matrix.from_rows([[1e200, 0], [0, 1e200]]))

    def test_overflow_is_overflow_error(self) -> None:
        with pytest.raises(OverflowError):
            add(Matrix.from_rows([[1e308]]), Matrix.from_rows([[1e308]]))


class TestMatricesClose:
    def test_shape_mismatch_not_close(self, a2) -> None:
        assert not matrices_close(a2, Matrix.from_rows([[1, 2]]))

    def test_within_tolerance(self, a2) -> None:
        near = Matrix.from_rows([[1.0000001, 2], [3, 4]])
        assert matrices_close(a2, near)
        assert not matrices_close(a2, near, tol=1e-9)


# =============================================================================
# ДИСПЕТЧЕР
# =============================================================================


class TestPerformOperation:
    """Тесты perform_operation: отчёт вместо исключений"""

    def test_add(self, a2) -> None:
        result = perform_operation(MatrixOperation.ADD, a2, a2)
        assert result.ok
        assert result.matrix.data == ((2.0, 4.0), (6.0, 8.0))
        assert result.failure is None

    def test_string_operation(self, a2) -> None:
        result = perform_operation("determinant", a2)
        assert result.ok
        assert result.operation == MatrixOperation.DETERMINANT
        assert result.scalar == -2.0
        assert result.matrix is None

    def test_missing_operand(self, a2) -> None:
        result = perform_operation("multiply", a2)
        assert not result.ok
        assert result.failure == "missing_operand"

    def test_dimension_mismatch(self, a2) -> None:
        result = perform_operation("multiply", a2, Matrix.from_rows([[1, 2, 3]]))
        assert not result.ok
        assert result.failure == "dimension_mismatch"
        assert "a.cols must equal b.rows" in result.details

    def test_singular(self, singular3) -> None:
        result = perform_operation("inverse", singular3)
        assert not result.ok
        assert result.failure == "singular"
        assert result.matrix is None

    def test_inverse_ok(self, a2) -> None:
        result = perform_operation("inverse", a2)
        assert result.ok
        assert result.matrix.data == ((-2.0, 1.0), (1.5, -0.5))

    def test_transpose_ignores_b(self, a2) -> None:
        result = perform_operation("transpose", a2)
        assert result.matrix.data == ((1.0, 3.0), (2.0, 4.0))

    def test_limit_exceeded(self) -> None:
        big = Matrix.identity(6)
        result = perform_operation("determinant", big, limits=EngineLimits())
        assert not result.ok
        assert result.failure == "limit_exceeded"

    def test_no_limits_by_default(self) -> None:
        result = perform_operation("determinant", Matrix.identity(6))
        assert result.ok
        assert result.scalar == pytest.approx(1.0)

    def test_unknown_operation(self, a2) -> None:
        with pytest.raises(ValueError):
            perform_operation("eigen", a2)

    @pytest.mark.parametrize(
        "operation,left,right",
        [
            ("add", 1e308, 1e308),
            ("subtract", 1e308, -1e308),
            ("multiply", 1e200, 1e200),
        ],
    )
    def test_overflow_reported(self, operation, left, right) -> None:
        """Переполнение возвращается кодом отказа, а не исключением"""
        a = Matrix.from_rows([[left, left], [left, left]])
        b = Matrix.from_rows([[right, right], [right, right]])
        result = perform_operation(operation, a, b)
        assert not result.ok
        assert result.failure == "overflow"
        assert result.matrix is None

    def test_determinant_overflow_reported(self) -> None:
        result = perform_operation("determinant", Matrix.from_rows([[1e200, 0], [0, 1e200]]))
        assert not result.ok
        assert result.failure == "overflow"
