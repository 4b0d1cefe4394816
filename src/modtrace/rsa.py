from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

import structlog

from modtrace.errors import InvalidModulus, NoInverseForTotient, NotInvertible, UnknownMethod, UnsupportedFactorization
from modtrace.kernel import derive_inverse, derive_power, factor_semiprime, is_probable_prime, lcm
from modtrace.trace import FactorStep, InverseStep, PowerStep, TotientStep, Trace

log = structlog.get_logger()


class TotientMethod(str, Enum):
    PHI = "phi"
    LAMBDA = "lambda"

    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, token: Union["TotientMethod", str]) -> "TotientMethod":
        """Accept an enum member or its token; anything else is an UnknownMethod."""
        if isinstance(token, cls):
            return token
        try:
            return cls(token)
        except ValueError:
            raise UnknownMethod(str(token)) from None


@dataclass(frozen=True, slots=True)
class RsaResult:
    modulus: int
    exponent: int
    ciphertext: int
    method: TotientMethod
    factors: Tuple[int, ...]
    totient: int
    private_exponent: int
    message: int
    trace: Trace


def compute_totient(modulus: int, factors: Tuple[int, ...], method: TotientMethod) -> int:
    """φ(N) or λ(N) for N prime or N = p·q."""
    if len(factors) == 1:
        return modulus - 1
    p, q = factors
    match method:
        case TotientMethod.PHI:
            return (p - 1) * (q - 1)
        case TotientMethod.LAMBDA:
            return lcm(p - 1, q - 1)


def solve_rsa(
    modulus: int,
    exponent: int,
    ciphertext: int,
    method: Union[TotientMethod, str] = TotientMethod.LAMBDA,
) -> RsaResult:
    """
    Decrypt an RSA ciphertext given the public key (N, e).
    N is factored by trial division, so it must be a prime or a product of two primes.
    """
    method = TotientMethod.parse(method)
    if modulus < 2:
        raise InvalidModulus(modulus, "RSA modulus must be at least 2")

    factors = tuple(factor_semiprime(modulus))
    if len(factors) == 2 and not all(is_probable_prime(f) for f in factors):
        raise UnsupportedFactorization(modulus, factors)

    totient = compute_totient(modulus, factors, method)
    log.debug("totient computed", modulus=modulus, factors=factors, method=str(method), totient=totient)

    try:
        inversion = derive_inverse(exponent, totient)
    except NotInvertible as e:
        raise NoInverseForTotient(exponent, totient, e.gcd) from e
    private_exponent = inversion.inverse

    decryption = derive_power(ciphertext, private_exponent, modulus)
    log.debug("rsa decrypted", modulus=modulus, d=private_exponent, message=decryption.result)

    return RsaResult(
        modulus=modulus,
        exponent=exponent,
        ciphertext=ciphertext,
        method=method,
        factors=factors,
        totient=totient,
        private_exponent=private_exponent,
        message=decryption.result,
        trace=(
            FactorStep(modulus=modulus, factors=factors),
            TotientStep(method=method.value, factors=factors, totient=totient),
            InverseStep(label="d", derivation=inversion),
            PowerStep(label="m", derivation=decryption),
        ),
    )
