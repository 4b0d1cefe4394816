from typing import Sequence, Tuple


class SolverError(ValueError):
    """Base class for every failure raised by the solvers."""


class InvalidModulus(SolverError):

    def __init__(self, modulus: int, reason: str):
        self.modulus = modulus
        self.reason = reason
        super().__init__(f"Invalid modulus {modulus}: {reason}")


class NotInvertible(SolverError):
    """gcd(value, modulus) != 1 where an inverse was required."""

    def __init__(self, value: int, modulus: int, gcd: int, steps: Tuple = ()):
        self.value = value
        self.modulus = modulus
        self.gcd = gcd
        self.steps = steps
        super().__init__(f"No inverse exists: gcd({value}, {modulus}) = {gcd}")


class NoInverseForTotient(SolverError):

    def __init__(self, exponent: int, totient: int, gcd: int):
        self.exponent = exponent
        self.totient = totient
        self.gcd = gcd
        super().__init__(
            f"Public exponent e = {exponent} is not invertible modulo the totient {totient} "
            f"(gcd = {gcd})"
        )


class UnknownMethod(SolverError):

    def __init__(self, token: str):
        self.token = token
        super().__init__(f'Unknown method "{token}". Use "phi" or "lambda".')


class UnsupportedFactorization(SolverError):

    def __init__(self, modulus: int, factors: Sequence[int]):
        self.modulus = modulus
        self.factors = tuple(factors)
        super().__init__(
            f"N = {modulus} splits as {' · '.join(map(str, factors))}, which is not a prime "
            "or a product of two primes"
        )


class NoDiscreteLog(SolverError):

    def __init__(self, base: int, target: int, modulus: int):
        self.base = base
        self.target = target
        self.modulus = modulus
        super().__init__(f"No x in [0, {modulus - 2}] satisfies {base}^x ≡ {target} (mod {modulus})")


class ModulusTooLarge(SolverError):

    def __init__(self, modulus: int, limit: int):
        self.modulus = modulus
        self.limit = limit
        super().__init__(f"Modulus {modulus} exceeds the brute-force search limit {limit}")


class WrongShareCount(SolverError):

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Need exactly 3 share pairs for a degree-2 polynomial, got {count}")


class SingularSystem(SolverError):

    def __init__(self, determinant: int, modulus: int, gcd: int):
        self.determinant = determinant
        self.modulus = modulus
        self.gcd = gcd
        super().__init__(
            f"Determinant D = {determinant} is not invertible modulo {modulus} (gcd = {gcd})"
        )


class NotANonResidue(SolverError):

    def __init__(self, a: int, d: int, modulus: int):
        self.a = a
        self.d = d
        self.modulus = modulus
        super().__init__(f"a² − n = {d} is a square modulo {modulus}. Choose another a (got a = {a}).")


class DegenerateParameter(SolverError):

    def __init__(self, a: int, d: int, modulus: int):
        self.a = a
        self.d = d
        self.modulus = modulus
        super().__init__(f"a² − n ≡ 0 (mod {modulus}) for a = {a}; Cipolla cannot use this a.")
