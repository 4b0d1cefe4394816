"""ElGamal exercises over the additive group (ℤₙ, +) and the multiplicative group (ℤₚ*, ·).

In the additive group "gᵏ" means k·g mod n and division becomes subtraction,
so the secret key falls out of a single modular inverse. The multiplicative
variant recovers keys by exhaustive discrete log and is only meant for small p.
"""
from dataclasses import dataclass
from typing import List

import structlog

from modtrace.errors import InvalidModulus, ModulusTooLarge, NoDiscreteLog, NotInvertible
from modtrace.kernel import derive_inverse, derive_power, gcd, residue
from modtrace.trace import CrossCheck, DiscreteLogStep, GcdCheck, InverseStep, PowerStep, Trace, TraceStep, ValueStep

log = structlog.get_logger()

DISCRETE_LOG_SEARCH_LIMIT = 1_000_000


@dataclass(frozen=True, slots=True)
class AdditiveDecryption:
    modulus: int
    generator_inverse: int
    secret_key: int
    ephemeral_key: int
    message: int
    message_via_ephemeral: int
    consistent: bool
    trace: Trace


@dataclass(frozen=True, slots=True)
class AdditiveEncryption:
    modulus: int
    public_key: int
    c1: int
    c2: int
    decrypted: int
    generator_inverse: int
    recovered_secret_key: int
    trace: Trace


@dataclass(frozen=True, slots=True)
class MultiplicativeDecryption:
    modulus: int
    secret_key: int
    ephemeral_key: int
    message: int
    message_via_ephemeral: int
    consistent: bool
    trace: Trace


def _invert_generator(g: int, n: int, trace: List[TraceStep]) -> int:
    """Check gcd(g, n) = 1 and derive g⁻¹, appending both to the trace."""
    g_gcd = gcd(g, n)
    trace.append(GcdCheck(label="g", value=g, modulus=n, gcd=g_gcd))
    if g_gcd != 1:
        raise NotInvertible(g, n, g_gcd)
    inversion = derive_inverse(g, n)
    trace.append(InverseStep(label="g_inv", derivation=inversion))
    return inversion.inverse


def _cross_check(label: str, first: int, second: int, trace: List[TraceStep], **context) -> bool:
    consistent = first == second
    trace.append(CrossCheck(label=label, first=first, second=second, consistent=consistent))
    if not consistent:
        log.warning("cross-check mismatch", label=label, first=first, second=second, **context)
    return consistent


def solve_additive_elgamal(n: int, g: int, h: int, c1: int, c2: int) -> AdditiveDecryption:
    """Decrypt (c₁, c₂) under public key h, both through the secret key and the ephemeral key."""
    if n < 1:
        raise InvalidModulus(n, "modulus must be positive")

    trace: List[TraceStep] = []
    g_inv = _invert_generator(g, n, trace)

    # Method A: secret key x = g⁻¹·h
    x = residue(g_inv * h, n)
    m_secret = residue(c2 - x * c1, n)
    trace.append(ValueStep(label="x", value=x))
    trace.append(ValueStep(label="m_via_secret_key", value=m_secret))

    # Method B: ephemeral key y = g⁻¹·c₁
    y = residue(g_inv * c1, n)
    m_ephemeral = residue(c2 - y * h, n)
    trace.append(ValueStep(label="y", value=y))
    trace.append(ValueStep(label="m_via_ephemeral_key", value=m_ephemeral))

    consistent = _cross_check("m", m_secret, m_ephemeral, trace, modulus=n)
    log.debug("additive elgamal decrypted", modulus=n, message=m_secret, consistent=consistent)

    return AdditiveDecryption(
        modulus=n,
        generator_inverse=g_inv,
        secret_key=x,
        ephemeral_key=y,
        message=m_secret,
        message_via_ephemeral=m_ephemeral,
        consistent=consistent,
        trace=tuple(trace),
    )


def solve_additive_elgamal_keys(n: int, g: int, x: int, y: int, m: int) -> AdditiveEncryption:
    """Encrypt m with keys x and y, decrypt it back, then recover x from the public key alone."""
    if n < 1:
        raise InvalidModulus(n, "modulus must be positive")

    trace: List[TraceStep] = []

    h = residue(x * g, n)
    c1 = residue(y * g, n)
    c2 = residue(m + y * h, n)
    decrypted = residue(c2 - x * c1, n)
    trace.extend([
        ValueStep(label="h", value=h),
        ValueStep(label="c1", value=c1),
        ValueStep(label="c2", value=c2),
        ValueStep(label="m_decrypted", value=decrypted),
    ])

    # Passive adversary: only h and g are public.
    g_inv = _invert_generator(g, n, trace)
    recovered = residue(g_inv * h, n)
    trace.append(ValueStep(label="x_recovered", value=recovered))
    log.debug("additive elgamal attacked", modulus=n, public_key=h, recovered_secret_key=recovered)

    return AdditiveEncryption(
        modulus=n,
        public_key=h,
        c1=c1,
        c2=c2,
        decrypted=decrypted,
        generator_inverse=g_inv,
        recovered_secret_key=recovered,
        trace=tuple(trace),
    )


def discrete_log(g: int, target: int, p: int, *, label: str = "") -> DiscreteLogStep:
    """Smallest x in [0, p − 2] with gˣ ≡ target (mod p), by exhaustive search."""
    g = residue(g, p)
    target = residue(target, p)
    value = 1 % p
    for x in range(p - 1):
        if value == target:
            return DiscreteLogStep(label=label, base=g, target=target, modulus=p, exponent=x, attempts=x + 1)
        value = (value * g) % p
    raise NoDiscreteLog(g, target, p)


def solve_multiplicative_elgamal(
    p: int,
    g: int,
    h: int,
    c1: int,
    c2: int,
    *,
    search_limit: int = DISCRETE_LOG_SEARCH_LIMIT,
) -> MultiplicativeDecryption:
    """Recover x and y by brute force, then decrypt with c₂·(c₁ˣ)⁻¹ and with c₂·(hʸ)⁻¹."""
    if p < 3:
        raise InvalidModulus(p, "prime modulus must be at least 3")
    if p > search_limit:
        raise ModulusTooLarge(p, search_limit)

    trace: List[TraceStep] = []

    x_step = discrete_log(g, h, p, label="x")
    y_step = discrete_log(g, c1, p, label="y")
    x, y = x_step.exponent, y_step.exponent
    trace.extend([x_step, y_step])
    log.debug("discrete logs found", modulus=p, x=x, y=y, attempts=x_step.attempts + y_step.attempts)

    # Method A: shared secret c₁ˣ
    shared_a = derive_power(c1, x, p)
    inv_a = derive_inverse(shared_a.result, p)
    m_secret = residue(c2 * inv_a.inverse, p)
    trace.extend([
        PowerStep(label="c1^x", derivation=shared_a),
        InverseStep(label="(c1^x)^-1", derivation=inv_a),
        ValueStep(label="m_via_secret_key", value=m_secret),
    ])

    # Method B: shared secret hʸ
    shared_b = derive_power(h, y, p)
    inv_b = derive_inverse(shared_b.result, p)
    m_ephemeral = residue(c2 * inv_b.inverse, p)
    trace.extend([
        PowerStep(label="h^y", derivation=shared_b),
        InverseStep(label="(h^y)^-1", derivation=inv_b),
        ValueStep(label="m_via_ephemeral_key", value=m_ephemeral),
    ])

    consistent = _cross_check("m", m_secret, m_ephemeral, trace, modulus=p)

    return MultiplicativeDecryption(
        modulus=p,
        secret_key=x,
        ephemeral_key=y,
        message=m_secret,
        message_via_ephemeral=m_ephemeral,
        consistent=consistent,
        trace=tuple(trace),
    )
