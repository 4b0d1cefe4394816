from typing import Any, List, Literal

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from modtrace.cipolla import CipollaResult
from modtrace.elgamal import AdditiveDecryption, AdditiveEncryption, MultiplicativeDecryption
from modtrace.rsa import RsaResult
from modtrace.shamir import ShamirResult
from modtrace.trace import (
    CrossCheck,
    DiscreteLogStep,
    Element,
    ExtensionElement,
    FactorStep,
    GcdCheck,
    InverseDerivation,
    InverseStep,
    LegendreStep,
    LinearEquation,
    PowerDerivation,
    PowerStep,
    RootCheck,
    ShareEquation,
    TotientStep,
    ValueStep,
)

COLORS = {
    "value": "bold cyan",
    "ok": "spring_green2",
    "warn": "bold yellow",
    "dim": "dim",
}

LABELS = {
    "x": "Secret key x",
    "y": "Ephemeral key y",
    "h": "Public key h = x·g",
    "c1": "c₁ = y·g",
    "c2": "c₂ = m + y·h",
    "m_decrypted": "Decryption m = c₂ − x·c₁",
    "x_recovered": "Attacker recovers x = g⁻¹·h",
    "m_via_secret_key": "m via secret key",
    "m_via_ephemeral_key": "m via ephemeral key",
    "D": "Determinant D = A₁·B₂ − A₂·B₁",
    "a": "a = (C₁·B₂ − C₂·B₁)·D⁻¹",
    "b": "b = (A₁·C₂ − A₂·C₁)·D⁻¹",
    "s": "s = y₁ − a·α₁ − b·α₁²",
    "d": "d = a² − n",
}

type Verdict = Literal["ok", "warn"]


def fmt(value: Element) -> str:
    if isinstance(value, ExtensionElement):
        return f"{value.u} + {value.v}√d"
    return str(value)


def euclid_table(derivation: InverseDerivation) -> Table:
    """Rows r = s·n + t·a of the extended Euclidean algorithm."""
    table = Table(
        title=f"Extended Euclid on n = {derivation.modulus}, a = {derivation.value}",
        show_edge=False,
    )
    for column in ("k", "q", "r", "s", "t"):
        table.add_column(column, justify="right")
    for step in derivation.steps:
        quotient = "" if step.quotient is None else str(step.quotient)
        table.add_row(str(step.index), quotient, str(step.remainder), str(step.s), str(step.t))
    return table


def power_table(derivation: PowerDerivation) -> Group:
    """Powers by squaring, the binary decomposition, and the accumulated products."""
    base = fmt(derivation.base)
    squares = Table(title=f"Powers of {base} (mod {derivation.modulus})", show_edge=False)
    squares.add_column("power", justify="right")
    squares.add_column("value", justify="right")
    for term in derivation.terms:
        squares.add_row(str(term.power), fmt(term.value))

    decomposition = " + ".join(str(power) for power in derivation.chosen) or "0"
    products = Table(title="Products", show_edge=False)
    for column in ("power", "before", "factor", "after"):
        products.add_column(column, justify="right")
    for product in derivation.products:
        products.add_row(str(product.power), fmt(product.before), fmt(product.factor), fmt(product.after))

    return Group(
        squares,
        Text(f"{derivation.exponent} = {decomposition}", style=COLORS["dim"]),
        products,
        Text(f"({base})^{derivation.exponent} ≡ {fmt(derivation.result)} (mod {derivation.modulus})",
             style=COLORS["value"]),
    )


def verdict(ok: bool, text: str) -> Text:
    style: Verdict = "ok" if ok else "warn"
    return Text(text, style=COLORS[style])


def render_step(step: Any) -> RenderableType:
    """Render one trace record."""
    match step:
        case FactorStep(modulus=modulus, factors=(_,)):
            return Text(f"N = {modulus} appears to be prime (trial division found no factor).")
        case FactorStep(modulus=modulus, factors=factors):
            return Text(f"N = {modulus} = {' · '.join(map(str, factors))}")
        case TotientStep(method=method, totient=totient):
            symbol = "φ" if method == "phi" else "λ"
            return Text(f"{symbol}(N) = {totient}", style=COLORS["value"])
        case InverseStep(label=label, derivation=derivation):
            return Group(
                euclid_table(derivation),
                Text(f"{label} = {derivation.value}⁻¹ ≡ {derivation.inverse} (mod {derivation.modulus})",
                     style=COLORS["value"]),
            )
        case PowerStep(derivation=derivation):
            return power_table(derivation)
        case ValueStep(label=label, value=value):
            return Text(f"{LABELS.get(label, label)} = {value}", style=COLORS["value"])
        case GcdCheck(value=value, modulus=modulus, gcd=g):
            return verdict(g == 1, f"gcd({value}, {modulus}) = {g}")
        case CrossCheck(label=label, first=first, second=second, consistent=consistent):
            if consistent:
                return verdict(True, f"Both methods agree: {label} = {first}")
            return verdict(False, f"Methods disagree: {label} = {first} vs {second}; check the input parameters")
        case DiscreteLogStep(label=label, base=g, target=target, modulus=p, exponent=x, attempts=attempts):
            return Text(f"{label} = {x}: {g}^{x} ≡ {target} (mod {p}) after {attempts} tries")
        case ShareEquation(alpha=alpha, value=value):
            return Text(f"s + a·{alpha} + b·{alpha}² = {value}")
        case LinearEquation(label=label, a_coeff=a, b_coeff=b, constant=c):
            return Text(f"{label}: a·{a} + b·{b} = {c}")
        case LegendreStep(label=label, value=value, modulus=p, symbol=symbol, derivation=derivation):
            meaning = {1: "a square", -1: "not a square", 0: "≡ 0"}[symbol]
            return Group(
                power_table(derivation),
                Text(f"({label} | {p}) = {symbol}: {value} is {meaning} modulo {p}", style=COLORS["value"]),
            )
        case RootCheck(label=label, root=root, square=square, target=target, matches=matches):
            relation = "=" if matches else "≠"
            return verdict(matches, f"{label}² = {root}² ≡ {square} {relation} t = {target}")
        case _:
            raise ValueError(f"Invalid trace step: {step!r}")


def summary(result: Any) -> str:
    match result:
        case RsaResult():
            return f"d = {result.private_exponent}, m = {result.message}"
        case AdditiveDecryption() | MultiplicativeDecryption():
            return f"m = {result.message}"
        case AdditiveEncryption():
            return (f"(c₁, c₂) = ({result.c1}, {result.c2}), m = {result.decrypted}, "
                    f"recovered x = {result.recovered_secret_key}")
        case ShamirResult():
            return f"s = P(0) = {result.secret} (a = {result.a}, b = {result.b})"
        case CipollaResult():
            return f"r₁ = {result.roots[0]}, r₂ = {result.roots[1]}"
        case _:
            raise ValueError(f"Invalid result: {result!r}")


def render(result: Any) -> Panel:
    """Render a solver result and its full derivation."""
    parts: List[RenderableType] = [render_step(step) for step in result.trace]
    parts.append(Text(summary(result), style="bold"))
    return Panel(Group(*parts), title=type(result).__name__, padding=(1, 1))
