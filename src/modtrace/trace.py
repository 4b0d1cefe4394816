"""Immutable records describing every intermediate value a solver produced.

Records hold numbers only. Turning them into text is the job of ``modtrace.ui``.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True, slots=True)
class ExtensionElement:
    """u + v·√d in ℤₚ[√d]."""

    u: int
    v: int


type Element = Union[int, ExtensionElement]


@dataclass(frozen=True, slots=True)
class EuclidStep:
    """One row of the extended Euclidean table: remainder = s·first + t·second."""

    index: int
    quotient: Optional[int]
    remainder: int
    s: int
    t: int


@dataclass(frozen=True, slots=True)
class EuclidDerivation:
    first: int
    second: int
    steps: Tuple[EuclidStep, ...]
    gcd: int
    x: int
    y: int


@dataclass(frozen=True, slots=True)
class InverseDerivation:
    """Inverse of ``value`` modulo ``modulus``; Euclid ran on (modulus, value)."""

    value: int
    modulus: int
    steps: Tuple[EuclidStep, ...]
    gcd: int
    inverse: int


@dataclass(frozen=True, slots=True)
class PowerOfTwoTerm:
    power: int
    value: Element


@dataclass(frozen=True, slots=True)
class ProductStep:
    power: int
    before: Element
    factor: Element
    after: Element


@dataclass(frozen=True, slots=True)
class PowerDerivation:
    base: Element
    exponent: int
    modulus: int
    terms: Tuple[PowerOfTwoTerm, ...]
    chosen: Tuple[int, ...]
    products: Tuple[ProductStep, ...]
    result: Element


@dataclass(frozen=True, slots=True)
class FactorStep:
    modulus: int
    factors: Tuple[int, ...]


@dataclass(frozen=True, slots=True)
class TotientStep:
    method: str
    factors: Tuple[int, ...]
    totient: int


@dataclass(frozen=True, slots=True)
class InverseStep:
    label: str
    derivation: InverseDerivation


@dataclass(frozen=True, slots=True)
class PowerStep:
    label: str
    derivation: PowerDerivation


@dataclass(frozen=True, slots=True)
class ValueStep:
    label: str
    value: int


@dataclass(frozen=True, slots=True)
class GcdCheck:
    label: str
    value: int
    modulus: int
    gcd: int


@dataclass(frozen=True, slots=True)
class CrossCheck:
    """Two independent derivations of the same quantity."""

    label: str
    first: int
    second: int
    consistent: bool


@dataclass(frozen=True, slots=True)
class DiscreteLogStep:
    label: str
    base: int
    target: int
    modulus: int
    exponent: int
    attempts: int


@dataclass(frozen=True, slots=True)
class ShareEquation:
    """s + a·alpha + b·alpha² = value."""

    alpha: int
    value: int


@dataclass(frozen=True, slots=True)
class LinearEquation:
    """a·a_coeff + b·b_coeff = constant."""

    label: str
    a_coeff: int
    b_coeff: int
    constant: int


@dataclass(frozen=True, slots=True)
class LegendreStep:
    label: str
    value: int
    modulus: int
    symbol: int
    derivation: PowerDerivation


@dataclass(frozen=True, slots=True)
class RootCheck:
    label: str
    root: int
    square: int
    target: int
    matches: bool


type TraceStep = Union[
    FactorStep,
    TotientStep,
    InverseStep,
    PowerStep,
    ValueStep,
    GcdCheck,
    CrossCheck,
    DiscreteLogStep,
    ShareEquation,
    LinearEquation,
    LegendreStep,
    RootCheck,
]

type Trace = Tuple[TraceStep, ...]
