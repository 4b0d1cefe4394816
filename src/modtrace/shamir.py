from dataclasses import dataclass
from typing import Iterable, List, Tuple

import structlog

from modtrace.errors import InvalidModulus, SingularSystem, WrongShareCount
from modtrace.kernel import derive_inverse, gcd, residue
from modtrace.trace import InverseStep, LinearEquation, ShareEquation, Trace, TraceStep, ValueStep

log = structlog.get_logger()

type Share = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class ShamirResult:
    modulus: int
    secret: int
    a: int
    b: int
    trace: Trace


def solve_shamir(p: int, shares: Iterable[Share]) -> ShamirResult:
    """
    Reconstruct P(x) = s + a·x + b·x² over ℤₚ from three shares (α, P(α)).

    s is eliminated by subtracting the first equation from the other two, the
    resulting 2×2 system in (a, b) is solved by Cramer's rule, and s is read back
    from the first equation.
    """
    shares = list(shares)
    if len(shares) != 3:
        raise WrongShareCount(len(shares))
    if p < 2:
        raise InvalidModulus(p, "prime modulus must be at least 2")

    (x1, y1), (x2, y2), (x3, y3) = [(residue(alpha, p), residue(value, p)) for alpha, value in shares]
    trace: List[TraceStep] = [
        ShareEquation(alpha=x1, value=y1),
        ShareEquation(alpha=x2, value=y2),
        ShareEquation(alpha=x3, value=y3),
    ]

    a1, b1, c1 = residue(x2 - x1, p), residue(x2 * x2 - x1 * x1, p), residue(y2 - y1, p)
    a2, b2, c2 = residue(x3 - x1, p), residue(x3 * x3 - x1 * x1, p), residue(y3 - y1, p)
    trace.append(LinearEquation(label="eq2-eq1", a_coeff=a1, b_coeff=b1, constant=c1))
    trace.append(LinearEquation(label="eq3-eq1", a_coeff=a2, b_coeff=b2, constant=c2))

    det = residue(a1 * b2 - a2 * b1, p)
    trace.append(ValueStep(label="D", value=det))
    det_gcd = gcd(det, p)
    if det_gcd != 1:
        log.debug("singular share system", modulus=p, determinant=det, gcd=det_gcd)
        raise SingularSystem(det, p, det_gcd)

    inversion = derive_inverse(det, p)
    det_inv = inversion.inverse
    trace.append(InverseStep(label="D_inv", derivation=inversion))

    a = residue((c1 * b2 - c2 * b1) * det_inv, p)
    b = residue((a1 * c2 - a2 * c1) * det_inv, p)
    s = residue(y1 - a * x1 - b * x1 * x1, p)
    trace.extend([
        ValueStep(label="a", value=a),
        ValueStep(label="b", value=b),
        ValueStep(label="s", value=s),
    ])
    log.debug("shares reconstructed", modulus=p, secret=s, a=a, b=b)

    return ShamirResult(modulus=p, secret=s, a=a, b=b, trace=tuple(trace))
