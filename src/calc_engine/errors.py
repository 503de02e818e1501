"""
Errors — таксономия ошибок вычислительного ядра

Все ошибки локальные и восстанавливаемые: вызывающая сторона (UI-слой)
решает, как их показать пользователю. Ядро никогда не оставляет частично
изменённый value object.

Иерархия:
- CalcEngineError — базовый класс
- InvalidInput — NaN/Inf или значение вне области определения
- DimensionMismatch — несовместимые размеры матриц
- Singular — нулевой (или почти нулевой) pivot при исключении Гаусса
- NumericOverflow — результат выходит за диапазон float (Inf/NaN)
- DivisionByZero — нулевой знаменатель дроби
- UnitNotFound / CategoryNotFound — неизвестные идентификаторы
- NoSolution — у диофантова уравнения нет целых решений
"""


class CalcEngineError(Exception):
    """Базовая ошибка вычислительного ядра."""

    pass


class InvalidInput(CalcEngineError, ValueError):
    """Невалидный числовой вход (NaN/Inf, нецелое число, вне домена)."""

    pass


class DimensionMismatch(CalcEngineError, ValueError):
    """
    Несовместимые размеры матриц.

    Сообщается отдельно от вырожденности (Singular).
    """

    pass


class Singular(CalcEngineError, ArithmeticError):
    """Вырожденная матрица: |pivot| < EPS_PIVOT."""

    pass


class NumericOverflow(CalcEngineError, OverflowError):
    """Результат вычисления вышел за диапазон float (Inf/NaN)."""

    pass


class DivisionByZero(CalcEngineError, ZeroDivisionError):
    """Нулевой знаменатель при построении дроби или делении дробей."""

    pass


class UnitNotFound(CalcEngineError, LookupError):
    """Единица с заданным id отсутствует в категории."""

    pass


class CategoryNotFound(CalcEngineError, LookupError):
    """Категория с заданным id отсутствует в реестре."""

    pass


class NoSolution(CalcEngineError, ValueError):
    """Задача не имеет решения (например, gcd(a, b) не делит c)."""

    pass
