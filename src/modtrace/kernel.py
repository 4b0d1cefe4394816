from typing import Callable, List, Tuple, TypeVar

import structlog

from modtrace.errors import InvalidModulus, NotInvertible
from modtrace.trace import (
    EuclidDerivation,
    EuclidStep,
    InverseDerivation,
    PowerDerivation,
    PowerOfTwoTerm,
    ProductStep,
)

log = structlog.get_logger()

E = TypeVar("E")


def residue(a: int, n: int) -> int:
    """Reduce a into [0, n)."""
    return ((a % n) + n) % n


def gcd(a: int, b: int) -> int:
    a, b = abs(a), abs(b)
    while b != 0:
        a, b = b, a % b
    return a


def lcm(a: int, b: int) -> int:
    if a == 0 or b == 0:
        return 0
    return abs(a * b) // gcd(a, b)


def extended_euclid(first: int, second: int) -> EuclidDerivation:
    """
    Extended Euclidean algorithm on (first, second), recording every row.
    Each row satisfies remainder = s·first + t·second; the returned x, y satisfy
    x·first + y·second = gcd.
    """
    r0, r1 = first, second
    s0, s1 = 1, 0
    t0, t1 = 0, 1
    steps = [
        EuclidStep(index=0, quotient=None, remainder=r0, s=s0, t=t0),
        EuclidStep(index=1, quotient=None, remainder=r1, s=s1, t=t1),
    ]

    k = 1
    while r1 != 0:
        q = r0 // r1
        r0, r1 = r1, r0 - q * r1
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
        k += 1
        steps.append(EuclidStep(index=k, quotient=q, remainder=r1, s=s1, t=t1))

    g, x, y = r0, s0, t0
    if g < 0:
        g, x, y = -g, -x, -y
    return EuclidDerivation(first=first, second=second, steps=tuple(steps), gcd=g, x=x, y=y)


def derive_inverse(a: int, n: int) -> InverseDerivation:
    """Invert a modulo n, running Euclid with the modulus first and the value second."""
    if n < 1:
        raise InvalidModulus(n, "modulus must be positive")

    value = residue(a, n)
    euclid = extended_euclid(n, value)
    if euclid.gcd != 1:
        log.debug("not invertible", value=a, modulus=n, gcd=euclid.gcd)
        raise NotInvertible(a, n, euclid.gcd, euclid.steps)

    inverse = residue(euclid.y, n)
    log.debug("inverse derived", value=a, modulus=n, inverse=inverse, rows=len(euclid.steps))
    return InverseDerivation(value=value, modulus=n, steps=euclid.steps, gcd=euclid.gcd, inverse=inverse)


def mod_inverse(a: int, n: int) -> int:
    return derive_inverse(a, n).inverse


def square_and_multiply(
    base: E,
    exponent: int,
    one: E,
    multiply: Callable[[E, E], E],
) -> Tuple[Tuple[PowerOfTwoTerm, ...], Tuple[int, ...], Tuple[ProductStep, ...], E]:
    """
    Square-and-multiply over any multiplication.

    Precomputes base^1, base^2, base^4, ... up to the largest power <= exponent,
    picks the powers greedily from the largest down, then multiplies the picked
    terms in ascending order starting from ``one``.
    """
    if exponent < 0:
        raise ValueError(f"Exponent must be non-negative, got {exponent}")

    terms: List[PowerOfTwoTerm] = [PowerOfTwoTerm(power=1, value=base)]
    power, value = 1, base
    while power * 2 <= exponent:
        value = multiply(value, value)
        power *= 2
        terms.append(PowerOfTwoTerm(power=power, value=value))

    remaining = exponent
    chosen: List[PowerOfTwoTerm] = []
    for term in reversed(terms):
        if term.power <= remaining:
            chosen.append(term)
            remaining -= term.power

    products: List[ProductStep] = []
    acc = one
    for term in reversed(chosen):
        before = acc
        acc = multiply(acc, term.value)
        products.append(ProductStep(power=term.power, before=before, factor=term.value, after=acc))

    return tuple(terms), tuple(t.power for t in reversed(chosen)), tuple(products), acc


def derive_power(base: int, exponent: int, n: int) -> PowerDerivation:
    if n < 1:
        raise InvalidModulus(n, "modulus must be positive")

    reduced = residue(base, n)
    terms, chosen, products, result = square_and_multiply(
        reduced,
        exponent,
        1 % n,
        lambda x, y: (x * y) % n,
    )
    return PowerDerivation(
        base=reduced,
        exponent=exponent,
        modulus=n,
        terms=terms,
        chosen=chosen,
        products=products,
        result=result,
    )


def mod_pow(base: int, exponent: int, n: int) -> int:
    return derive_power(base, exponent, n).result


def factor_semiprime(n: int) -> List[int]:
    """
    Trial division from 2 upward. Returns [p, n // p] for the first divisor p,
    or [n] when there is none up to √n. The cofactor is not checked for primality.
    """
    p = 2
    while p * p <= n:
        if n % p == 0:
            return [p, n // p]
        p += 1
    return [n]


def is_probable_prime(n: int) -> bool:
    """Trial-division primality, for the small numbers the solvers accept."""
    return n >= 2 and len(factor_semiprime(n)) == 1
