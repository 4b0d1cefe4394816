import pytest

from modtrace.errors import InvalidModulus, NoInverseForTotient, UnknownMethod, UnsupportedFactorization
from modtrace.kernel import mod_inverse, mod_pow
from modtrace.rsa import TotientMethod, compute_totient, solve_rsa
from modtrace.trace import FactorStep, InverseStep, PowerStep, TotientStep


class TestTotientMethod:
    """Test suite for the totient policy enum"""

    def test_parse_tokens(self):
        """Test both valid tokens parse"""
        assert TotientMethod.parse("phi") is TotientMethod.PHI
        assert TotientMethod.parse("lambda") is TotientMethod.LAMBDA
        assert TotientMethod.parse(TotientMethod.PHI) is TotientMethod.PHI

    def test_unknown_token(self):
        """Test anything else is rejected with the token attached"""
        with pytest.raises(UnknownMethod, match='"carmichael"') as excinfo:
            TotientMethod.parse("carmichael")
        assert excinfo.value.token == "carmichael"

    def test_str(self):
        """Test the enum prints as its token"""
        assert str(TotientMethod.LAMBDA) == "lambda"


class TestComputeTotient:
    """Test suite for φ and λ"""

    def test_phi_and_lambda(self):
        """Test N = 35 = 5 · 7"""
        assert compute_totient(35, (5, 7), TotientMethod.PHI) == 24
        assert compute_totient(35, (5, 7), TotientMethod.LAMBDA) == 12

    def test_prime_modulus(self):
        """Test a prime N uses N − 1 for both methods"""
        assert compute_totient(23, (23,), TotientMethod.PHI) == 22
        assert compute_totient(23, (23,), TotientMethod.LAMBDA) == 22


class TestSolveRsa:
    """Test suite for RSA decryption"""

    def test_carmichael_example(self):
        """Test N=35, e=5, c=33 with λ(N) = 12"""
        result = solve_rsa(35, 5, 33, "lambda")
        assert result.factors == (5, 7)
        assert result.totient == 12
        assert result.private_exponent == 5
        assert result.message == 3
        assert mod_pow(3, 5, 35) == 33

    def test_euler_example(self):
        """Test the same exercise with φ(N) = 24"""
        result = solve_rsa(35, 5, 33, TotientMethod.PHI)
        assert result.totient == 24
        assert result.private_exponent == 5
        assert result.message == 3

    def test_default_method_is_lambda(self):
        """Test the default totient policy"""
        assert solve_rsa(35, 5, 33).method is TotientMethod.LAMBDA

    def test_trace_structure(self):
        """Test the trace holds factorisation, totient, inversion and exponentiation"""
        result = solve_rsa(35, 5, 33, "lambda")
        assert [type(step) for step in result.trace] == [FactorStep, TotientStep, InverseStep, PowerStep]
        inversion = result.trace[2].derivation
        assert inversion.modulus == 12
        assert inversion.value == 5
        power = result.trace[3].derivation
        assert (power.base, power.exponent, power.modulus, power.result) == (33, 5, 35, 3)

    def test_exam_default_round_trip(self):
        """Test N = 2021 = 43 · 47 from the exercise form"""
        result = solve_rsa(2021, 5, 6, "phi")
        assert result.factors == (43, 47)
        assert result.totient == 1932
        assert result.private_exponent == 773
        assert mod_pow(result.message, 5, 2021) == 6

    def test_round_trip_all_messages(self):
        """Test every plaintext survives encrypt then decrypt"""
        n, e = 11 * 13, 7
        for method in TotientMethod:
            for m in range(n):
                assert solve_rsa(n, e, mod_pow(m, e, n), method).message == m

    def test_prime_modulus(self):
        """Test a prime N decrypts with N − 1"""
        result = solve_rsa(23, 3, mod_pow(5, 3, 23), "phi")
        assert result.factors == (23,)
        assert result.totient == 22
        assert result.private_exponent == mod_inverse(3, 22)
        assert result.message == 5

    def test_exponent_not_invertible(self):
        """Test e sharing a factor with the totient"""
        with pytest.raises(NoInverseForTotient) as excinfo:
            solve_rsa(35, 4, 33, "phi")
        assert excinfo.value.exponent == 4
        assert excinfo.value.totient == 24
        assert excinfo.value.gcd == 4

    def test_more_than_two_prime_factors(self):
        """Test N = 3 · 5 · 7 is rejected loudly"""
        with pytest.raises(UnsupportedFactorization) as excinfo:
            solve_rsa(105, 5, 2, "phi")
        assert excinfo.value.factors == (3, 35)

    def test_unknown_method(self):
        """Test the method token is validated before anything else"""
        with pytest.raises(UnknownMethod):
            solve_rsa(35, 5, 33, "euler")

    def test_invalid_modulus(self):
        """Test N < 2"""
        with pytest.raises(InvalidModulus):
            solve_rsa(1, 5, 0)

    def test_idempotent(self):
        """Test repeated calls give identical results"""
        assert solve_rsa(2021, 5, 6, "lambda") == solve_rsa(2021, 5, 6, "lambda")
