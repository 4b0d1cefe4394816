from typing import Annotated, List, Literal, Tuple, Union

from pydantic import BaseModel, Field, TypeAdapter

from modtrace.cipolla import CipollaResult, solve_cipolla
from modtrace.elgamal import (
    AdditiveDecryption,
    AdditiveEncryption,
    MultiplicativeDecryption,
    solve_additive_elgamal,
    solve_additive_elgamal_keys,
    solve_multiplicative_elgamal,
)
from modtrace.rsa import RsaResult, TotientMethod, solve_rsa
from modtrace.shamir import ShamirResult, solve_shamir


class RsaExercise(BaseModel):
    kind: Literal["rsa"] = "rsa"
    modulus: int
    exponent: int
    ciphertext: int
    method: TotientMethod = TotientMethod.LAMBDA

    def solve(self) -> RsaResult:
        return solve_rsa(self.modulus, self.exponent, self.ciphertext, self.method)


class AdditiveElgamalExercise(BaseModel):
    kind: Literal["elgamal-add"] = "elgamal-add"
    n: int
    g: int
    h: int
    c1: int
    c2: int

    def solve(self) -> AdditiveDecryption:
        return solve_additive_elgamal(self.n, self.g, self.h, self.c1, self.c2)


class AdditiveElgamalKeysExercise(BaseModel):
    kind: Literal["elgamal-add-keys"] = "elgamal-add-keys"
    n: int
    g: int
    x: int
    y: int
    m: int

    def solve(self) -> AdditiveEncryption:
        return solve_additive_elgamal_keys(self.n, self.g, self.x, self.y, self.m)


class MultiplicativeElgamalExercise(BaseModel):
    kind: Literal["elgamal-mul"] = "elgamal-mul"
    p: int
    g: int
    h: int
    c1: int
    c2: int

    def solve(self) -> MultiplicativeDecryption:
        return solve_multiplicative_elgamal(self.p, self.g, self.h, self.c1, self.c2)


class ShamirExercise(BaseModel):
    kind: Literal["shamir"] = "shamir"
    p: int
    shares: List[Tuple[int, int]]

    def solve(self) -> ShamirResult:
        return solve_shamir(self.p, self.shares)


class CipollaExercise(BaseModel):
    kind: Literal["cipolla"] = "cipolla"
    p: int
    n: int
    a: int
    t: int

    def solve(self) -> CipollaResult:
        return solve_cipolla(self.p, self.n, self.a, self.t)


Exercise = Annotated[
    Union[
        RsaExercise,
        AdditiveElgamalExercise,
        AdditiveElgamalKeysExercise,
        MultiplicativeElgamalExercise,
        ShamirExercise,
        CipollaExercise,
    ],
    Field(discriminator="kind"),
]

ExerciseAdapter = TypeAdapter(Exercise)
