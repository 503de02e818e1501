"""
Number Theory — GCD/LCM, тождество Безу, простота, факторизация, решето

Модуль реализует целочисленные алгоритмы калькуляторов НОД/НОК и простых чисел:
- Евклид (с трассировкой шагов деления) и расширенный Евклид (коэффициенты Безу)
- НОК, свёртки по спискам, делители
- Тест простоты: пробное деление для n < 1000, Miller-Rabin для остальных
- Факторизация пробным делением
- Решето Эратосфена и производные (диапазон, n-е простое, близнецы, Гольдбах)
- Линейное диофантово уравнение a·x + b·y = c

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все входы — целые (bool и дробные значения → InvalidInput)
2. extended_gcd: a·x + b·y = gcd, gcd ≥ 0
3. factorize: ∏ prime^power = number, primes строго возрастают
4. Miller-Rabin с фиксированным набором свидетелей детерминирован только
   для n < MILLER_RABIN_DETERMINISTIC_BOUND (см. PrimalityTest.deterministic)
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterable, Optional

from src.calc_engine.config import EngineLimits, check_sieve_limit
from src.calc_engine.errors import InvalidInput, NoSolution
from src.calc_engine.math.numerical_safeguards import (
    validate_integer,
    validate_positive_integer,
)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Свидетели Miller-Rabin (первые 7 простых)
MILLER_RABIN_WITNESSES: Final[tuple[int, ...]] = (2, 3, 5, 7, 11, 13, 17)

# Наименьший сильный псевдопростой по базам 2..17; ниже него тест детерминирован
MILLER_RABIN_DETERMINISTIC_BOUND: Final[int] = 341_550_071_728_321

# Ниже этого порога простота проверяется пробным делением
TRIAL_DIVISION_THRESHOLD: Final[int] = 1000

# Граница решета для nth_prime при n < 6 (p_5 = 11)
NTH_PRIME_SMALL_BOUND: Final[int] = 12


# =============================================================================
# ЕВКЛИД
# =============================================================================


@dataclass(frozen=True)
class DivisionStep:
    """Один шаг деления с остатком: dividend = quotient × divisor + remainder."""

    dividend: int
    quotient: int
    divisor: int
    remainder: int

    def __str__(self) -> str:
        return f"{self.dividend} = {self.quotient} × {self.divisor} + {self.remainder}"


@dataclass(frozen=True)
class EuclidTrace:
    """Результат gcd_with_steps."""

    a: int
    b: int
    result: int
    steps: tuple[DivisionStep, ...]


@dataclass(frozen=True)
class ExtendedGcdResult:
    """Результат extended_gcd: a·x + b·y = gcd."""

    gcd: int
    x: int
    y: int
    steps: tuple[DivisionStep, ...]


def gcd(a: int, b: int) -> int:
    """
    НОД итеративным алгоритмом Евклида.

    Examples:
        >>> gcd(48, 18)
        6
        >>> gcd(0, 0)
        0
    """
    a = validate_integer(a, "a")
    b = validate_integer(b, "b")
    while b != 0:
        a, b = b, a % b
    return abs(a)


def gcd_with_steps(a: int, b: int) -> EuclidTrace:
    """
    НОД с трассировкой шагов деления.

    Examples:
        >>> str(gcd_with_steps(48, 18).steps[0])
        '48 = 2 × 18 + 12'
    """
    a = validate_integer(a, "a")
    b = validate_integer(b, "b")
    original_a, original_b = a, b

    steps = []
    while b != 0:
        quotient, remainder = divmod(a, b)
        steps.append(DivisionStep(dividend=a, quotient=quotient, divisor=b, remainder=remainder))
        a, b = b, remainder

    return EuclidTrace(a=original_a, b=original_b, result=abs(a), steps=tuple(steps))


def extended_gcd(a: int, b: int) -> ExtendedGcdResult:
    """
    Расширенный алгоритм Евклида (коэффициенты Безу).

    Итеративно ведёт тройки (r, s, t) с инвариантом r = a·s + b·t.

    Args:
        a: Первое целое
        b: Второе целое

    Returns:
        ExtendedGcdResult с gcd ≥ 0 и a·x + b·y = gcd

    Examples:
        >>> result = extended_gcd(25, 9)
        >>> (result.gcd, result.x, result.y)
        (1, 4, -11)
    """
    a = validate_integer(a, "a")
    b = validate_integer(b, "b")

    old_r, r = a, b
    old_s, s = 1, 0
    old_t, t = 0, 1
    steps = []

    while r != 0:
        quotient = old_r // r
        remainder = old_r - quotient * r
        steps.append(
            DivisionStep(dividend=old_r, quotient=quotient, divisor=r, remainder=remainder)
        )
        old_r, r = r, remainder
        old_s, s = s, old_s - quotient * s
        old_t, t = t, old_t - quotient * t

    if old_r < 0:
        old_r, old_s, old_t = -old_r, -old_s, -old_t

    return ExtendedGcdResult(gcd=old_r, x=old_s, y=old_t, steps=tuple(steps))


# =============================================================================
# НОК / СВЁРТКИ
# =============================================================================


def lcm(a: int, b: int) -> int:
    """
    НОК = |a·b| / gcd(a, b); lcm(0, b) = 0.

    Examples:
        >>> lcm(48, 18)
        144
    """
    a = validate_integer(a, "a")
    b = validate_integer(b, "b")
    if a == 0 or b == 0:
        return 0
    return abs(a * b) // gcd(a, b)


def _validate_positive_list(numbers: Iterable[int]) -> list[int]:
    values = [validate_integer(n, "number") for n in numbers]
    if not values:
        raise InvalidInput("At least one number is required")
    non_positive = [n for n in values if n <= 0]
    if non_positive:
        raise InvalidInput(f"All numbers must be positive, got {non_positive}")
    return values


def gcd_many(numbers: Iterable[int]) -> int:
    """
    НОД списка (левая свёртка).

    Raises:
        InvalidInput: Если список пуст или содержит неположительные значения
    """
    values = _validate_positive_list(numbers)
    result = values[0]
    for n in values[1:]:
        result = gcd(result, n)
    return result


def lcm_many(numbers: Iterable[int]) -> int:
    """
    НОК списка (левая свёртка).

    Raises:
        InvalidInput: Если список пуст или содержит неположительные значения
    """
    values = _validate_positive_list(numbers)
    result = values[0]
    for n in values[1:]:
        result = lcm(result, n)
    return result


def divisors(n: int) -> list[int]:
    """
    Все положительные делители n по возрастанию.

    Raises:
        InvalidInput: Если n не положительное целое

    Examples:
        >>> divisors(12)
        [1, 2, 3, 4, 6, 12]
    """
    n = validate_positive_integer(n, "n")
    small, large = [], []
    i = 1
    while i * i <= n:
        if n % i == 0:
            small.append(i)
            if i != n // i:
                large.append(n // i)
        i += 1
    return small + large[::-1]


@dataclass(frozen=True)
class GcdLcmSummary:
    """Сводка калькулятора НОД/НОК по списку чисел."""

    numbers: tuple[int, ...]
    gcd: int
    lcm: int

    # Трассировка Евклида (только для двух чисел)
    gcd_steps: Optional[EuclidTrace]

    relatively_prime: bool
    common_factors: tuple[int, ...]

    # gcd·lcm == a·b (только для двух чисел)
    product_check: Optional[bool]


def gcd_lcm_summary(numbers: Iterable[int]) -> GcdLcmSummary:
    """
    Сводка НОД/НОК: значения, шаги, взаимная простота, общие делители.

    Общие делители всех чисел совпадают с делителями их НОД.

    Raises:
        InvalidInput: Если список пуст или содержит неположительные значения
    """
    values = _validate_positive_list(numbers)
    g = gcd_many(values)
    m = lcm_many(values)

    steps = None
    product_check = None
    if len(values) == 2:
        steps = gcd_with_steps(values[0], values[1])
        product_check = g * m == values[0] * values[1]

    return GcdLcmSummary(
        numbers=tuple(values),
        gcd=g,
        lcm=m,
        gcd_steps=steps,
        relatively_prime=g == 1,
        common_factors=tuple(divisors(g)),
        product_check=product_check,
    )


# =============================================================================
# ПРОСТОТА
# =============================================================================


class PrimalityMethod(str, Enum):
    """Метод, которым получен ответ теста простоты."""

    TRIVIAL = "trivial"
    EVEN = "even"
    TRIAL_DIVISION = "trial_division"
    MILLER_RABIN = "miller_rabin"


@dataclass(frozen=True)
class PrimalityTest:
    """Результат primality_test."""

    number: int
    is_prime: bool
    method: PrimalityMethod

    # Для составного по Miller-Rabin: единственный разоблачивший свидетель
    witnesses: tuple[int, ...] = ()

    # False: ответ "простое" вероятностный (n ≥ MILLER_RABIN_DETERMINISTIC_BOUND)
    deterministic: bool = True


def _miller_rabin_witness(a: int, d: int, r: int, n: int) -> bool:
    """True если a доказывает, что n составное (n - 1 = d·2^r, d нечётно)."""
    x = pow(a, d, n)
    if x == 1 or x == n - 1:
        return False
    for _ in range(r - 1):
        x = x * x % n
        if x == n - 1:
            return False
    return True


def primality_test(n: int) -> PrimalityTest:
    """
    Тест простоты с указанием метода.

    Алгоритм:
    1. n < 2 → не простое; n = 2 → простое; чётное → не простое
    2. n < 1000 → пробное деление нечётными до √n
    3. иначе Miller-Rabin со свидетелями MILLER_RABIN_WITNESSES

    Examples:
        >>> primality_test(97).method
        <PrimalityMethod.TRIAL_DIVISION: 'trial_division'>
    """
    n = validate_integer(n, "n")

    if n < 2:
        return PrimalityTest(number=n, is_prime=False, method=PrimalityMethod.TRIVIAL)
    if n == 2:
        return PrimalityTest(number=n, is_prime=True, method=PrimalityMethod.TRIVIAL)
    if n % 2 == 0:
        return PrimalityTest(number=n, is_prime=False, method=PrimalityMethod.EVEN)

    if n < TRIAL_DIVISION_THRESHOLD:
        i = 3
        while i * i <= n:
            if n % i == 0:
                return PrimalityTest(
                    number=n, is_prime=False, method=PrimalityMethod.TRIAL_DIVISION
                )
            i += 2
        return PrimalityTest(number=n, is_prime=True, method=PrimalityMethod.TRIAL_DIVISION)

    d, r = n - 1, 0
    while d % 2 == 0:
        d //= 2
        r += 1

    for a in MILLER_RABIN_WITNESSES:
        if a >= n:
            continue
        if _miller_rabin_witness(a, d, r, n):
            return PrimalityTest(
                number=n,
                is_prime=False,
                method=PrimalityMethod.MILLER_RABIN,
                witnesses=(a,),
            )

    return PrimalityTest(
        number=n,
        is_prime=True,
        method=PrimalityMethod.MILLER_RABIN,
        witnesses=MILLER_RABIN_WITNESSES,
        deterministic=n < MILLER_RABIN_DETERMINISTIC_BOUND,
    )


def is_prime(n: int) -> bool:
    """
    Проверка простоты.

    Examples:
        >>> is_prime(97)
        True
        >>> is_prime(561)
        False
    """
    return primality_test(n).is_prime


# =============================================================================
# ФАКТОРИЗАЦИЯ
# =============================================================================


@dataclass(frozen=True)
class PrimeFactor:
    prime: int
    power: int

    def __str__(self) -> str:
        return str(self.prime) if self.power == 1 else f"{self.prime}^{self.power}"


@dataclass(frozen=True)
class PrimeFactorization:
    """Разложение number = ∏ prime^power (пусто для number ≤ 1)."""

    number: int
    factors: tuple[PrimeFactor, ...]

    @property
    def factor_string(self) -> str:
        """Запись вида '2^3 × 3^2 × 5' ('1' для пустого разложения)."""
        if not self.factors:
            return "1"
        return " × ".join(str(f) for f in self.factors)

    def as_pairs(self) -> list[tuple[int, int]]:
        return [(f.prime, f.power) for f in self.factors]


def factorize(n: int) -> PrimeFactorization:
    """
    Разложение на простые множители пробным делением.

    Алгоритм:
    1. Выделение степени 2
    2. Нечётные делители i, пока i² ≤ остаток
    3. Остаток > 1 — простой множитель

    Examples:
        >>> factorize(360).factor_string
        '2^3 × 3^2 × 5'
    """
    n = validate_integer(n, "n")
    if n <= 1:
        return PrimeFactorization(number=n, factors=())

    factors = []
    remaining = n

    power = 0
    while remaining % 2 == 0:
        remaining //= 2
        power += 1
    if power > 0:
        factors.append(PrimeFactor(prime=2, power=power))

    i = 3
    while i * i <= remaining:
        power = 0
        while remaining % i == 0:
            remaining //= i
            power += 1
        if power > 0:
            factors.append(PrimeFactor(prime=i, power=power))
        i += 2

    if remaining > 1:
        factors.append(PrimeFactor(prime=remaining, power=1))

    return PrimeFactorization(number=n, factors=tuple(factors))


# =============================================================================
# РЕШЕТО И ПРОИЗВОДНЫЕ
# =============================================================================


def sieve_of_eratosthenes(limit: int, limits: Optional[EngineLimits] = None) -> list[int]:
    """
    Все простые ≤ limit.

    Args:
        limit: Верхняя граница (включительно)
        limits: Лимиты ресурсов (None → без ограничений)

    Returns:
        Простые по возрастанию ([] при limit < 2)

    Raises:
        InvalidInput: Если limit превышает limits.max_sieve_limit
    """
    limit = validate_integer(limit, "limit")
    if limits is not None:
        check_sieve_limit(limit, limits)
    if limit < 2:
        return []

    sieve = bytearray([1]) * (limit + 1)
    sieve[0] = sieve[1] = 0
    i = 2
    while i * i <= limit:
        if sieve[i]:
            sieve[i * i :: i] = bytes(len(range(i * i, limit + 1, i)))
        i += 1
    return [n for n in range(limit + 1) if sieve[n]]


def primes_in_range(
    start: int, end: int, limits: Optional[EngineLimits] = None
) -> list[int]:
    """Простые в [start, end]; start < 2 поднимается до 2."""
    start = max(validate_integer(start, "start"), 2)
    end = validate_integer(end, "end")
    if end < start:
        return []
    return [p for p in sieve_of_eratosthenes(end, limits) if p >= start]


def nth_prime(n: int, limits: Optional[EngineLimits] = None) -> Optional[int]:
    """
    n-е простое (1-based).

    Граница решета: 12 при n < 6, иначе ⌈n·(ln n + ln ln n)⌉ (оценка Россера).

    Returns:
        n-е простое или None при n < 1

    Examples:
        >>> nth_prime(10)
        29
    """
    n = validate_integer(n, "n")
    if n < 1:
        return None

    if n < 6:
        bound = NTH_PRIME_SMALL_BOUND
    else:
        bound = math.ceil(n * (math.log(n) + math.log(math.log(n))))

    primes = sieve_of_eratosthenes(bound, limits)
    return primes[n - 1] if n <= len(primes) else None


@dataclass(frozen=True)
class PerfectPower:
    """number = base^exponent, exponent ≥ 2."""

    number: int
    base: int
    exponent: int


def integer_root(n: int, k: int) -> int:
    """
    ⌊n^(1/k)⌋ точно в целых (метод Ньютона), для сколь угодно больших n.

    Raises:
        InvalidInput: Если n < 0 или k < 1

    Examples:
        >>> integer_root(7**400, 200)
        49
    """
    n = validate_integer(n, "n")
    k = validate_positive_integer(k, "k")
    if n < 0:
        raise InvalidInput(f"n must be non-negative, got {n}")
    if n < 2 or k == 1:
        return n
    if k == 2:
        return math.isqrt(n)

    # 2^⌈bits/k⌉ ≥ корня: итерации Ньютона убывают до ⌊корня⌋
    x = 1 << -(-n.bit_length() // k)
    while True:
        y = ((k - 1) * x + n // x ** (k - 1)) // k
        if y >= x:
            return x
        x = y


def perfect_power(n: int) -> Optional[PerfectPower]:
    """
    Представление n = base^exponent с наименьшим exponent ≥ 2.

    Перебирает exponent от 2 до ⌊log2 n⌋; base = integer_root(n, exponent)
    проверяется точно, без перехода во float.

    Returns:
        PerfectPower или None (n ≤ 1 или не является степенью)

    Examples:
        >>> perfect_power(64)
        PerfectPower(number=64, base=8, exponent=2)
    """
    n = validate_integer(n, "n")
    if n <= 1:
        return None

    for exponent in range(2, n.bit_length()):
        base = integer_root(n, exponent)
        if base >= 2 and base**exponent == n:
            return PerfectPower(number=n, base=base, exponent=exponent)
    return None


def twin_primes(limit: int, limits: Optional[EngineLimits] = None) -> list[tuple[int, int]]:
    """Пары простых (p, p + 2) с p + 2 ≤ limit."""
    primes = sieve_of_eratosthenes(limit, limits)
    return [(p, q) for p, q in zip(primes, primes[1:]) if q - p == 2]


def goldbach_decomposition(
    n: int, limits: Optional[EngineLimits] = None
) -> list[tuple[int, int]]:
    """
    Все разложения чётного n ≥ 4 в сумму двух простых p ≤ q.

    Returns:
        Пары (p, n - p) по возрастанию p; [] для нечётных и n < 4

    Examples:
        >>> goldbach_decomposition(10)
        [(3, 7), (5, 5)]
    """
    n = validate_integer(n, "n")
    if n < 4 or n % 2 != 0:
        return []

    primes = sieve_of_eratosthenes(n, limits)
    prime_set = set(primes)
    result = []
    for p in primes:
        if p > n // 2:
            break
        if n - p in prime_set:
            result.append((p, n - p))
    return result


# =============================================================================
# ДИОФАНТОВО УРАВНЕНИЕ
# =============================================================================


@dataclass(frozen=True)
class DiophantineSolution:
    """
    Решение a·x + b·y = c в целых.

    Общее решение: x = x0 + (b/g)·t, y = y0 - (a/g)·t, t ∈ ℤ.
    """

    a: int
    b: int
    c: int
    gcd: int
    solvable: bool
    x0: Optional[int] = None
    y0: Optional[int] = None

    def solution_at(self, t: int) -> tuple[int, int]:
        """
        Решение для параметра t.

        Raises:
            NoSolution: Если уравнение неразрешимо
        """
        if not self.solvable:
            raise NoSolution(
                f"{self.a}x + {self.b}y = {self.c} has no integer solutions: "
                f"gcd({self.a}, {self.b}) = {self.gcd} does not divide {self.c}"
            )
        t = validate_integer(t, "t")
        return (
            self.x0 + (self.b // self.gcd) * t,
            self.y0 - (self.a // self.gcd) * t,
        )

    @property
    def general_solution(self) -> str:
        if not self.solvable:
            return "no integer solutions"
        return (
            f"x = {self.x0} + {self.b // self.gcd}t, "
            f"y = {self.y0} - {self.a // self.gcd}t"
        )


def solve_diophantine(a: int, b: int, c: int) -> DiophantineSolution:
    """
    Линейное диофантово уравнение a·x + b·y = c.

    Разрешимо тогда и только тогда, когда gcd(a, b) | c. Частное решение —
    коэффициенты Безу, умноженные на c / gcd.

    Raises:
        InvalidInput: Если a = b = 0

    Examples:
        >>> solve_diophantine(25, 9, 2).solution_at(0)
        (8, -22)
    """
    a = validate_integer(a, "a")
    b = validate_integer(b, "b")
    c = validate_integer(c, "c")
    if a == 0 and b == 0:
        raise InvalidInput("Diophantine equation requires a and b not both zero")

    ext = extended_gcd(a, b)
    g = ext.gcd
    if c % g != 0:
        return DiophantineSolution(a=a, b=b, c=c, gcd=g, solvable=False)

    scale = c // g
    return DiophantineSolution(
        a=a, b=b, c=c, gcd=g, solvable=True, x0=ext.x * scale, y0=ext.y * scale
    )
