"""
Тесты для модуля Number Theory

Проверяет:
1. НОД/НОК (Евклид, трассировка шагов, свёртки)
2. Расширенный Евклид (коэффициенты Безу)
3. Тест простоты (пробное деление, Miller-Rabin, детерминированность)
4. Факторизацию и решето
5. Производные функции (n-е простое, степени, близнецы, Гольдбах)
6. Диофантовы уравнения
"""

import pytest

from src.calc_engine.config import EngineLimits
from src.calc_engine.errors import InvalidInput, NoSolution
from src.calc_engine.math.number_theory import (
    MILLER_RABIN_DETERMINISTIC_BOUND,
    DivisionStep,
    PrimalityMethod,
    divisors,
    extended_gcd,
    factorize,
    gcd,
    gcd_lcm_summary,
    gcd_many,
    gcd_with_steps,
    goldbach_decomposition,
    integer_root,
    is_prime,
    lcm,
    lcm_many,
    nth_prime,
    perfect_power,
    primality_test,
    primes_in_range,
    sieve_of_eratosthenes,
    solve_diophantine,
    twin_primes,
)

# =============================================================================
# НОД / НОК
# =============================================================================


class TestGcdLcm:
    """Тесты gcd / lcm"""

    def test_gcd(self) -> None:
        assert gcd(48, 18) == 6
        assert gcd(17, 5) == 1

    def test_gcd_zero(self) -> None:
        assert gcd(0, 0) == 0
        assert gcd(0, 9) == 9

    def test_gcd_negative(self) -> None:
        """Результат неотрицателен"""
        assert gcd(-48, 18) == 6
        assert gcd(48, -18) == 6

    def test_lcm(self) -> None:
        assert lcm(48, 18) == 144
        assert lcm(0, 5) == 0
        assert lcm(-4, 6) == 12

    def test_gcd_lcm_product(self) -> None:
        """gcd·lcm = a·b"""
        assert gcd(48, 18) * lcm(48, 18) == 864 == 48 * 18

    @pytest.mark.parametrize("value", [1.5, True, "4"])
    def test_non_integer_rejected(self, value) -> None:
        with pytest.raises(InvalidInput):
            gcd(value, 4)

    def test_integral_float_accepted(self) -> None:
        assert gcd(12.0, 8) == 4


class TestGcdWithSteps:
    def test_steps(self) -> None:
        trace = gcd_with_steps(48, 18)
        assert trace.result == 6
        assert [str(s) for s in trace.steps] == [
            "48 = 2 × 18 + 12",
            "18 = 1 × 12 + 6",
            "12 = 2 × 6 + 0",
        ]

    def test_step_fields(self) -> None:
        step = gcd_with_steps(48, 18).steps[0]
        assert step == DivisionStep(dividend=48, quotient=2, divisor=18, remainder=12)

    def test_zero_divisor_has_no_steps(self) -> None:
        trace = gcd_with_steps(7, 0)
        assert trace.result == 7
        assert trace.steps == ()


class TestFolds:
    def test_gcd_many(self) -> None:
        assert gcd_many([12, 18, 24]) == 6

    def test_lcm_many(self) -> None:
        assert lcm_many([4, 6, 8]) == 24

    def test_single_value(self) -> None:
        assert gcd_many([7]) == 7
        assert lcm_many([7]) == 7

    def test_empty_rejected(self) -> None:
        with pytest.raises(InvalidInput, match="At least one"):
            gcd_many([])

    def test_non_positive_rejected(self) -> None:
        with pytest.raises(InvalidInput, match="positive"):
            lcm_many([4, 0, 6])
        with pytest.raises(InvalidInput):
            gcd_many([4, -2])


class TestDivisorsAndSummary:
    def test_divisors(self) -> None:
        assert divisors(12) == [1, 2, 3, 4, 6, 12]
        assert divisors(1) == [1]
        assert divisors(36) == [1, 2, 3, 4, 6, 9, 12, 18, 36]

    def test_divisors_non_positive(self) -> None:
        with pytest.raises(InvalidInput):
            divisors(0)

    def test_summary_two_numbers(self) -> None:
        summary = gcd_lcm_summary([48, 18])
        assert summary.gcd == 6
        assert summary.lcm == 144
        assert summary.common_factors == (1, 2, 3, 6)
        assert not summary.relatively_prime
        assert summary.product_check is True
        assert summary.gcd_steps.result == 6

    def test_summary_many_numbers(self) -> None:
        summary = gcd_lcm_summary([8, 9, 25])
        assert summary.gcd == 1
        assert summary.lcm == 1800
        assert summary.relatively_prime
        assert summary.gcd_steps is None
        assert summary.product_check is None


# =============================================================================
# РАСШИРЕННЫЙ ЕВКЛИД
# =============================================================================


class TestExtendedGcd:
    """Тесты extended_gcd"""

    def test_reference_pair(self) -> None:
        result = extended_gcd(25, 9)
        assert (result.gcd, result.x, result.y) == (1, 4, -11)

    @pytest.mark.parametrize(
        "a,b", [(240, 46), (46, 240), (-25, 9), (25, -9), (0, 7), (7, 0), (12, 12)]
    )
    def test_bezout_identity(self, a, b) -> None:
        """a·x + b·y = gcd, gcd ≥ 0"""
        result = extended_gcd(a, b)
        assert result.gcd == gcd(a, b)
        assert a * result.x + b * result.y == result.gcd

    def test_steps_exposed(self) -> None:
        result = extended_gcd(25, 9)
        assert str(result.steps[0]) == "25 = 2 × 9 + 7"
        assert len(result.steps) == 4


# =============================================================================
# ПРОСТОТА
# =============================================================================


class TestPrimality:
    """Тесты is_prime / primality_test"""

    @pytest.mark.parametrize("n", [2, 3, 5, 97, 997, 1009, 7919, 104729, 2_147_483_647])
    def test_primes(self, n) -> None:
        assert is_prime(n)

    @pytest.mark.parametrize("n", [-7, 0, 1, 4, 9, 561, 1001, 1105, 999_999, 2_147_483_649])
    def test_composites(self, n) -> None:
        assert not is_prime(n)

    def test_methods(self) -> None:
        assert primality_test(1).method == PrimalityMethod.TRIVIAL
        assert primality_test(2).method == PrimalityMethod.TRIVIAL
        assert primality_test(100).method == PrimalityMethod.EVEN
        assert primality_test(97).method == PrimalityMethod.TRIAL_DIVISION
        assert primality_test(1009).method == PrimalityMethod.MILLER_RABIN

    def test_composite_reports_witness(self) -> None:
        """Составное по Miller-Rabin — единственный разоблачивший свидетель"""
        result = primality_test(1105)
        assert not result.is_prime
        assert len(result.witnesses) == 1
        assert result.deterministic

    def test_strong_pseudoprime_base_2(self) -> None:
        """2047 = 23·89 проходит базу 2, но отсеивается базой 3"""
        result = primality_test(2047)
        assert not result.is_prime
        assert result.witnesses == (3,)

    def test_deterministic_below_bound(self) -> None:
        result = primality_test(1_000_000_007)
        assert result.is_prime
        assert result.deterministic

    def test_probabilistic_above_bound(self) -> None:
        """Выше границы ответ 'простое' вероятностный"""
        # 2^61 - 1 (простое Мерсенна)
        n = 2**61 - 1
        assert n > MILLER_RABIN_DETERMINISTIC_BOUND
        result = primality_test(n)
        assert result.is_prime
        assert not result.deterministic

    def test_bool_rejected(self) -> None:
        with pytest.raises(InvalidInput):
            is_prime(True)


# =============================================================================
# ФАКТОРИЗАЦИЯ
# =============================================================================


class TestFactorize:
    def test_360(self) -> None:
        result = factorize(360)
        assert result.as_pairs() == [(2, 3), (3, 2), (5, 1)]
        assert result.factor_string == "2^3 × 3^2 × 5"

    def test_prime(self) -> None:
        assert factorize(97).as_pairs() == [(97, 1)]

    def test_large_prime_leftover(self) -> None:
        assert factorize(2 * 1_000_003).as_pairs() == [(2, 1), (1_000_003, 1)]

    @pytest.mark.parametrize("n", [1, 0, -12])
    def test_trivial(self, n) -> None:
        result = factorize(n)
        assert result.factors == ()
        assert result.factor_string == "1"

    @pytest.mark.parametrize("n", [2, 12, 1024, 999_999, 600851475143])
    def test_product_invariant(self, n) -> None:
        """∏ prime^power = number, primes строго возрастают"""
        result = factorize(n)
        product = 1
        for f in result.factors:
            product *= f.prime**f.power
            assert f.power >= 1
        assert product == n
        primes = [f.prime for f in result.factors]
        assert primes == sorted(set(primes))


# =============================================================================
# РЕШЕТО
# =============================================================================


class TestSieve:
    def test_small(self) -> None:
        assert sieve_of_eratosthenes(30) == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]

    @pytest.mark.parametrize("limit", [-5, 0, 1])
    def test_below_two(self, limit) -> None:
        assert sieve_of_eratosthenes(limit) == []

    def test_inclusive_limit(self) -> None:
        assert sieve_of_eratosthenes(2) == [2]
        assert sieve_of_eratosthenes(29)[-1] == 29

    def test_count_below_10000(self) -> None:
        assert len(sieve_of_eratosthenes(10_000)) == 1229

    def test_matches_is_prime(self) -> None:
        primes = set(sieve_of_eratosthenes(2000))
        assert primes == {n for n in range(2001) if is_prime(n)}

    def test_limit_enforced(self) -> None:
        with pytest.raises(InvalidInput, match="max_sieve_limit"):
            sieve_of_eratosthenes(1000, limits=EngineLimits(max_sieve_limit=100))


class TestDerived:
    def test_primes_in_range(self) -> None:
        assert primes_in_range(10, 30) == [11, 13, 17, 19, 23, 29]
        assert primes_in_range(-10, 5) == [2, 3, 5]
        assert primes_in_range(30, 10) == []

    @pytest.mark.parametrize(
        "n,expected", [(1, 2), (2, 3), (5, 11), (6, 13), (10, 29), (100, 541), (1000, 7919)]
    )
    def test_nth_prime(self, n, expected) -> None:
        assert nth_prime(n) == expected

    def test_nth_prime_invalid(self) -> None:
        assert nth_prime(0) is None
        assert nth_prime(-3) is None

    def test_perfect_power(self) -> None:
        result = perfect_power(64)
        assert (result.base, result.exponent) == (8, 2)
        assert perfect_power(27).base == 3
        assert perfect_power(3**20).exponent == 2

    def test_not_perfect_power(self) -> None:
        assert perfect_power(12) is None
        assert perfect_power(1) is None
        assert perfect_power(2) is None

    def test_perfect_power_beyond_float_precision(self) -> None:
        """Квадрат 20-значного числа: float-корень здесь неточен"""
        base = 10**19 + 12345
        result = perfect_power(base**2)
        assert (result.base, result.exponent) == (base, 2)
        assert perfect_power(base**2 + 1) is None

    def test_perfect_power_beyond_float_range(self) -> None:
        """7^400 > 1e308 обрабатывается без перехода во float"""
        result = perfect_power(7**400)
        assert (result.base, result.exponent) == (7**200, 2)
        assert perfect_power(7**401).base == 7

    @pytest.mark.parametrize(
        "n,k,expected",
        [
            (0, 3, 0),
            (1, 5, 1),
            (26, 3, 2),
            (27, 3, 3),
            (28, 3, 3),
            (10**40, 4, 10**10),
            (7**400, 200, 49),
        ],
    )
    def test_integer_root(self, n, k, expected) -> None:
        assert integer_root(n, k) == expected

    def test_integer_root_floor_for_huge_values(self) -> None:
        root = integer_root(2**1001, 3)
        assert root**3 <= 2**1001 < (root + 1) ** 3

    def test_integer_root_invalid(self) -> None:
        with pytest.raises(InvalidInput):
            integer_root(-8, 3)
        with pytest.raises(InvalidInput):
            integer_root(8, 0)

    def test_twin_primes(self) -> None:
        assert twin_primes(20) == [(3, 5), (5, 7), (11, 13), (17, 19)]

    def test_goldbach(self) -> None:
        assert goldbach_decomposition(10) == [(3, 7), (5, 5)]
        assert goldbach_decomposition(4) == [(2, 2)]

    @pytest.mark.parametrize("n", [3, 2, 9, -4])
    def test_goldbach_invalid(self, n) -> None:
        assert goldbach_decomposition(n) == []


# =============================================================================
# ДИОФАНТОВЫ УРАВНЕНИЯ
# =============================================================================


class TestDiophantine:
    """Тесты solve_diophantine"""

    def test_solvable(self) -> None:
        solution = solve_diophantine(25, 9, 2)
        assert solution.solvable
        assert solution.gcd == 1
        assert (solution.x0, solution.y0) == (8, -22)

    @pytest.mark.parametrize("t", [-3, 0, 1, 10])
    def test_general_solution(self, t) -> None:
        """Каждое t даёт решение"""
        solution = solve_diophantine(12, 18, 30)
        x, y = solution.solution_at(t)
        assert 12 * x + 18 * y == 30

    def test_general_solution_text(self) -> None:
        assert solve_diophantine(25, 9, 2).general_solution == "x = 8 + 9t, y = -22 - 25t"

    def test_unsolvable(self) -> None:
        solution = solve_diophantine(6, 9, 7)
        assert not solution.solvable
        assert solution.gcd == 3
        with pytest.raises(NoSolution, match="does not divide 7"):
            solution.solution_at(0)

    def test_negative_coefficients(self) -> None:
        x, y = solve_diophantine(-4, 6, 10).solution_at(2)
        assert -4 * x + 6 * y == 10

    def test_both_zero(self) -> None:
        with pytest.raises(InvalidInput):
            solve_diophantine(0, 0, 5)
